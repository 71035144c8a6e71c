from types import SimpleNamespace

import pytest

from tokenfactory.addresses import address_to_bech32, module_address
from tokenfactory.denoms import Coin, DenomAuthorityMetadata
from tokenfactory.errors import (
    DenomExistsError,
    InvalidAddressError,
    InvalidDenomError,
    ModuleAccountForbiddenError,
    TokenFactoryError,
)
from tokenfactory.genesis import GenesisDenom, GenesisState
from tokenfactory.keeper import (
    Context,
    Event,
    GasMeter,
    Keeper,
    KVStore,
    OutOfGasError,
)
from tokenfactory.keys import MODULE_NAME, PARAMS_KEY
from tokenfactory.params import Params


def _addr(seed: int) -> str:
    return address_to_bech32(bytes([seed]) * 20)


CREATOR = _addr(1)
OTHER = _addr(2)
COLLECTOR = _addr(3)
CONTRACT = _addr(4)


class FakeBank:
    def __init__(self):
        self.metadata = {}
        self.supply = set()
        self.calls = []
        self.fail_send = False

    def get_denom_metadata(self, ctx, denom):
        return self.metadata.get(denom)

    def set_denom_metadata(self, ctx, metadata):
        self.metadata[metadata.base] = metadata

    def has_supply(self, ctx, denom):
        return denom in self.supply

    def send_coins_from_module_to_account(self, ctx, sender_module, recipient, amount):
        self.calls.append(("module_to_account", sender_module, recipient, amount))

    def send_coins_from_account_to_module(self, ctx, sender, recipient_module, amount):
        self.calls.append(("account_to_module", sender, recipient_module, amount))

    def mint_coins(self, ctx, module_name, amount):
        self.calls.append(("mint", module_name, amount))

    def burn_coins(self, ctx, module_name, amount):
        self.calls.append(("burn", module_name, amount))

    def send_coins(self, ctx, from_addr, to_addr, amount):
        if self.fail_send:
            raise ValueError("insufficient funds")
        self.calls.append(("send", from_addr, to_addr, amount))

    def has_balance(self, ctx, addr, coin):
        return False


class FakeAccounts:
    def __init__(self):
        self.requested = []

    def get_account(self, ctx, addr):
        return None

    def get_module_account(self, ctx, module_name):
        self.requested.append(module_name)
        return SimpleNamespace(address=module_address(module_name))


@pytest.fixture
def bank():
    return FakeBank()


@pytest.fixture
def accounts():
    return FakeAccounts()


@pytest.fixture
def keeper(bank, accounts):
    return Keeper(["mint", MODULE_NAME], accounts, bank, authority=OTHER)


@pytest.fixture
def ctx():
    return Context()


def test_kvstore_iterates_in_order_without_prefix():
    store = KVStore()
    store.set(b"a|2", b"two")
    store.set(b"a|1", b"one")
    store.set(b"b|1", b"other")
    assert list(store.iterate(b"a|")) == [(b"1", b"one"), (b"2", b"two")]
    store.delete(b"a|1")
    assert store.get(b"a|1") is None
    assert store.get(b"a|2") == b"two"


def test_gas_meter_limit():
    meter = GasMeter(limit=10)
    meter.consume_gas(6, "first")
    assert meter.consumed == 6
    with pytest.raises(OutOfGasError) as info:
        meter.consume_gas(5, "second")
    assert info.value.descriptor == "second"


def test_context_with_gas_meter_shares_store_and_events(ctx):
    child = ctx.with_gas_meter(GasMeter(limit=5))
    child.store.set(b"k", b"v")
    child.emit(Event("kind", [("key", "value")]))
    assert ctx.store.get(b"k") == b"v"
    assert ctx.events == [Event("kind", [("key", "value")])]
    assert ctx.gas_meter.limit is None


def test_create_denom(keeper, bank, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    assert denom == f"factory/{CREATOR}/bitcoin"
    assert bank.metadata[denom].base == denom
    assert bank.metadata[denom].denom_units[0].denom == denom
    assert keeper.get_authority_metadata(ctx, denom).admin == CREATOR
    assert keeper.get_denoms_from_creator(ctx, CREATOR) == [denom]
    assert list(keeper.all_denoms(ctx)) == [denom]


def test_create_denom_twice_fails(keeper, ctx):
    keeper.create_denom(ctx, CREATOR, "bitcoin")
    with pytest.raises(DenomExistsError):
        keeper.create_denom(ctx, CREATOR, "bitcoin")


def test_create_denom_native_supply_clash(keeper, bank, ctx):
    bank.supply.add("uom")
    with pytest.raises(ValueError, match="native denom"):
        keeper.create_denom(ctx, CREATOR, "uom")


def test_create_denom_charges_fee_and_gas(keeper, bank, ctx):
    fee = [Coin("uom", 5)]
    keeper.set_params(ctx, Params(fee, 1000, COLLECTOR))
    keeper.create_denom(ctx, CREATOR, "bitcoin")
    sends = [call for call in bank.calls if call[0] == "send"]
    assert sends == [("send", bytes([1]) * 20, bytes([3]) * 20, fee)]
    assert ctx.gas_meter.consumed == 1000


def test_create_denom_fee_failure(keeper, bank, ctx):
    keeper.set_params(ctx, Params([Coin("uom", 5)], 0, COLLECTOR))
    bank.fail_send = True
    with pytest.raises(TokenFactoryError, match="unable to send coins to fee collector"):
        keeper.create_denom(ctx, CREATOR, "bitcoin")


def test_params_default_and_round_trip(keeper, ctx):
    assert keeper.get_params(ctx) == Params()
    params = Params([Coin("uom", 7)], 42, COLLECTOR)
    keeper.set_params(ctx, params)
    assert ctx.store.get(PARAMS_KEY) is not None
    assert keeper.get_params(ctx) == params


def test_authority_metadata_wire_format(keeper, ctx):
    denom = f"factory/{CREATOR}/bitcoin"
    keeper.set_authority_metadata(ctx, denom, DenomAuthorityMetadata(admin=CREATOR))
    stored = ctx.store.get(f"denoms|{denom}|authoritymetadata".encode())
    assert stored == b"\x0a" + bytes([len(CREATOR)]) + CREATOR.encode()


def test_set_admin(keeper, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    keeper.set_admin(ctx, denom, OTHER)
    assert keeper.get_authority_metadata(ctx, denom).admin == OTHER
    keeper.set_admin(ctx, denom, "")
    assert keeper.get_authority_metadata(ctx, denom).admin == ""


def test_set_authority_metadata_rejects_bad_admin(keeper, ctx):
    with pytest.raises(InvalidAddressError):
        keeper.set_authority_metadata(ctx, "factory/x/y", DenomAuthorityMetadata(admin="bad"))


def test_mint_to(keeper, bank, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    coin = Coin(denom, 10)
    keeper.mint_to(ctx, coin, OTHER)
    assert bank.calls == [
        ("mint", MODULE_NAME, [coin]),
        ("module_to_account", MODULE_NAME, bytes([2]) * 20, [coin]),
    ]


def test_mint_to_module_account_forbidden(keeper, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    target = address_to_bech32(module_address("mint"))
    with pytest.raises(ModuleAccountForbiddenError, match="minting to module accounts"):
        keeper.mint_to(ctx, Coin(denom, 10), target)


def test_mint_non_factory_denom(keeper, ctx):
    with pytest.raises(InvalidDenomError):
        keeper.mint_to(ctx, Coin("uom", 10), OTHER)


def test_burn_from(keeper, bank, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    coin = Coin(denom, 3)
    keeper.burn_from(ctx, coin, OTHER)
    assert bank.calls == [
        ("account_to_module", bytes([2]) * 20, MODULE_NAME, [coin]),
        ("burn", MODULE_NAME, [coin]),
    ]


def test_force_transfer(keeper, bank, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    coin = Coin(denom, 4)
    keeper.force_transfer(ctx, coin, CREATOR, OTHER)
    assert bank.calls == [("send", bytes([1]) * 20, bytes([2]) * 20, [coin])]
    module = address_to_bech32(module_address(MODULE_NAME))
    with pytest.raises(ModuleAccountForbiddenError, match="to module accounts"):
        keeper.force_transfer(ctx, coin, CREATOR, module)


def test_is_module_account(keeper, ctx):
    assert keeper.is_module_account(ctx, module_address("mint"))
    assert not keeper.is_module_account(ctx, bytes([9]) * 20)


def test_before_send_hook(keeper, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    assert keeper.get_before_send_hook(ctx, denom) == ""
    keeper.set_before_send_hook(ctx, denom, CONTRACT)
    assert keeper.get_before_send_hook(ctx, denom) == CONTRACT
    keeper.set_before_send_hook(ctx, denom, "")
    assert keeper.get_before_send_hook(ctx, denom) == ""


def test_before_send_hook_rejects_bad_address(keeper, ctx):
    denom = keeper.create_denom(ctx, CREATOR, "bitcoin")
    with pytest.raises(InvalidAddressError):
        keeper.set_before_send_hook(ctx, denom, "nonsense")


def test_create_module_account(keeper, accounts, ctx):
    keeper.create_module_account(ctx)
    assert accounts.requested == [MODULE_NAME]
    assert keeper.is_module_account(ctx, module_address(MODULE_NAME)) is True
    assert accounts.requested == [MODULE_NAME, "mint", MODULE_NAME]


def test_set_contract_keeper(keeper):
    contract_keeper = SimpleNamespace(name="wasm")
    keeper.set_contract_keeper(contract_keeper)
    assert keeper.contract_keeper is contract_keeper


def test_genesis_round_trip(keeper, ctx):
    state = GenesisState(
        params=Params([Coin("uom", 2)], 5, COLLECTOR),
        factory_denoms=[
            GenesisDenom(f"factory/{CREATOR}/bitcoin", DenomAuthorityMetadata(OTHER), CONTRACT),
            GenesisDenom(f"factory/{OTHER}/litecoin", DenomAuthorityMetadata(""), ""),
        ],
    )
    keeper.init_genesis(ctx, state)
    exported = keeper.export_genesis(ctx)
    assert exported.params == state.params
    key = lambda d: d.denom  # noqa: E731
    assert sorted(exported.factory_denoms, key=key) == sorted(state.factory_denoms, key=key)


def test_init_genesis_bad_hook(keeper, ctx):
    state = GenesisState(
        factory_denoms=[GenesisDenom(f"factory/{CREATOR}/bitcoin", hook_contract_address="bad")]
    )
    with pytest.raises(InvalidAddressError):
        keeper.init_genesis(ctx, state)