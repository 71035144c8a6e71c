# tokenfactory

A self-contained token factory. Any account can create its own denoms of
the form `factory/{creator}/{subdenom}` and, as the denom's admin, mint,
burn, force-transfer, hand over the admin role, set bank metadata and
attach a before-send hook contract. It has no dependencies outside the
standard library.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

## Addresses and denoms

Addresses are bech32 strings with the `mantra` prefix
(`tokenfactory.addresses`: `bech32_encode`, `bech32_decode`,
`acc_address_from_bech32`, `address_to_bech32`, `module_address`,
`sample_acc_address`).

```python
from tokenfactory.addresses import sample_acc_address
from tokenfactory.denoms import Coin, get_token_denom, deconstruct_denom, parse_coin_normalized

creator = sample_acc_address()
denom = get_token_denom(creator, "bitcoin")      # "factory/<creator>/bitcoin"
assert deconstruct_denom(denom) == (creator, "bitcoin")

coin = parse_coin_normalized("12.7uom")          # Coin(denom="uom", amount=12)
```

Subdenoms may be at most 44 bytes and creators at most 75. Invalid input
raises an exception from `tokenfactory.errors`, all derived from
`TokenFactoryError`, each with a `codespace`, a `code` and a `description`
(for example `SubdenomTooLongError`, `InvalidDenomError`,
`InvalidAddressError`, `UnauthorizedError`).

## Parameters and genesis

`tokenfactory.params.Params` holds the denom creation fee (a list of
`Coin`), the gas consumed on creation and the fee collector address; the fee
and the collector must be both set or both unset. `default_params()` charges
nothing.

`tokenfactory.genesis.GenesisState` holds the parameters and a list of
`GenesisDenom`; `validate()` rejects duplicates and bad addresses, and
`to_dict()` / `from_dict()` convert it to and from plain data.

## Messages

`tokenfactory.msgs` defines `MsgCreateDenom`, `MsgMint`, `MsgBurn`,
`MsgForceTransfer`, `MsgChangeAdmin`, `MsgSetDenomMetadata` (with
`Metadata` and `DenomUnit`), `MsgSetBeforeSendHook` and `MsgUpdateParams`.
Each has `validate()` and `get_signers()`. `get_sign_bytes(msg)` gives
compact JSON of a message and `amino_name(msg)` its legacy type name.

## Keeper

`tokenfactory.keeper.Keeper` keeps the module state in the `KVStore` of a
`Context`, which also carries a `GasMeter` and the emitted `Event`s. The
bank, account and contract keepers are protocols (`BankKeeper`,
`AccountKeeper`, `WasmKeeper`) that you implement. A minimal in-memory
setup:

```python
from types import SimpleNamespace

from tokenfactory.addresses import module_address, sample_acc_address
from tokenfactory.app_module import provide_module
from tokenfactory.denoms import Coin
from tokenfactory.keeper import Context
from tokenfactory.msg_server import MsgServer
from tokenfactory.msgs import MsgCreateDenom, MsgMint
from tokenfactory.queries import QueryServer


class Accounts:
    def get_account(self, ctx, addr):
        return None

    def get_module_account(self, ctx, name):
        return SimpleNamespace(address=module_address(name))


class Bank:
    def __init__(self):
        self.metadata, self.minted = {}, []

    def get_denom_metadata(self, ctx, denom):
        return self.metadata.get(denom)

    def set_denom_metadata(self, ctx, metadata):
        self.metadata[metadata.base] = metadata

    def has_supply(self, ctx, denom):
        return False

    def mint_coins(self, ctx, module_name, amount):
        self.minted.extend(amount)

    def send_coins_from_module_to_account(self, ctx, module, recipient, amount): ...
    def send_coins_from_account_to_module(self, ctx, sender, module, amount): ...
    def burn_coins(self, ctx, module_name, amount): ...
    def send_coins(self, ctx, from_addr, to_addr, amount): ...
    def has_balance(self, ctx, addr, coin): return True


keeper, module = provide_module("", ["tokenfactory"], Accounts(), Bank())
server = MsgServer(keeper)
ctx = Context()

creator = sample_acc_address()
denom = server.create_denom(ctx, MsgCreateDenom(sender=creator, subdenom="bitcoin"))
server.mint(ctx, MsgMint(sender=creator, amount=Coin(denom, 10)))

queries = QueryServer(keeper)
assert queries.denoms_from_creator(ctx, creator) == [denom]
assert queries.denom_authority_metadata(ctx, creator, "bitcoin").admin == creator
```

`provide_module` builds the keeper and its `AppModule`; with an empty
authority, the `gov` module account becomes the authority that
`MsgServer.update_params` requires. Minting, burning or force-transferring
to or from one of the known module accounts raises
`ModuleAccountForbiddenError`.

`AppModule.default_genesis()`, `validate_genesis(raw)`,
`init_genesis(ctx, raw)` and `export_genesis(ctx)` read and write the whole
module state as JSON.

## Before-send hooks

`tokenfactory.hooks.BeforeSendHooks(keeper)` calls, for each coin of a send,
the contract registered for its denom through the keeper's contract keeper
(`Keeper.set_contract_keeper`). `block_before_send` raises when a contract
refuses; `track_before_send` ignores failures and runs each call under a gas
limit of 100,000, charging the gas used to the caller's meter.

## What this package does not do

It is a library only: there is no command-line tool, no node, no network
API and no transaction signing. State lives in memory for as long as the
`Context` does; nothing is written to disk. It has no bank ledger, account
store or contract runtime of its own — balances, accounts and contract
execution are whatever the keepers you pass in provide.

## Tests

```
pytest
```