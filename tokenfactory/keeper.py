"""State keeper of the token factory module."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from .addresses import acc_address_from_bech32
from .denoms import Coin, DenomAuthorityMetadata, deconstruct_denom, get_token_denom
from .errors import (
    DenomExistsError,
    InvalidAddressError,
    ModuleAccountForbiddenError,
    TokenFactoryError,
)
from .genesis import GenesisDenom, GenesisState
from .keys import (
    BEFORE_SEND_HOOK_ADDRESS_PREFIX_KEY,
    DENOM_AUTHORITY_METADATA_KEY,
    MODULE_NAME,
    PARAMS_KEY,
    get_creator_prefix,
    get_creators_prefix,
    get_denom_prefix_store,
)
from .msgs import DenomUnit, Metadata
from .params import Params


class _HasAddress(Protocol):
    address: bytes


class BankKeeper(Protocol):
    """The bank operations the token factory relies on."""

    def get_denom_metadata(self, ctx: Context, denom: str) -> Optional[Metadata]: ...

    def set_denom_metadata(self, ctx: Context, metadata: Metadata) -> None: ...

    def has_supply(self, ctx: Context, denom: str) -> bool: ...

    def send_coins_from_module_to_account(
        self, ctx: Context, sender_module: str, recipient: bytes, amount: list[Coin]
    ) -> None: ...

    def send_coins_from_account_to_module(
        self, ctx: Context, sender: bytes, recipient_module: str, amount: list[Coin]
    ) -> None: ...

    def mint_coins(self, ctx: Context, module_name: str, amount: list[Coin]) -> None: ...

    def burn_coins(self, ctx: Context, module_name: str, amount: list[Coin]) -> None: ...

    def send_coins(
        self, ctx: Context, from_addr: bytes, to_addr: bytes, amount: list[Coin]
    ) -> None: ...

    def has_balance(self, ctx: Context, addr: bytes, coin: Coin) -> bool: ...


class AccountKeeper(Protocol):
    """Account lookups; get_module_account creates the account when missing."""

    def get_account(self, ctx: Context, addr: bytes) -> Any: ...

    def get_module_account(self, ctx: Context, module_name: str) -> Optional[_HasAddress]: ...


class WasmKeeper(Protocol):
    """Contract execution used by before-send hooks."""

    def sudo(self, ctx: Context, contract_address: bytes, msg: bytes) -> bytes: ...

    def get_contract_info(self, ctx: Context, contract_address: bytes) -> Any: ...


class KVStore:
    """An ordered in-memory byte key-value store."""

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        return self._data.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        self._data[bytes(key)] = bytes(value)

    def delete(self, key: bytes) -> None:
        self._data.pop(bytes(key), None)

    def iterate(self, prefix: bytes = b"") -> Iterator[tuple[bytes, bytes]]:
        """Yield (key without prefix, value) pairs under prefix, in key order."""
        matches = sorted(
            (key, value) for key, value in self._data.items() if key.startswith(prefix)
        )
        for key, value in matches:
            yield key[len(prefix):], value


class OutOfGasError(Exception):
    """A gas meter went over its limit."""

    def __init__(self, descriptor: str) -> None:
        self.descriptor = descriptor
        super().__init__(f"out of gas in location: {descriptor}")


@dataclass
class GasMeter:
    """Counts gas; without a limit it never runs out."""

    limit: Optional[int] = None
    consumed: int = 0

    def consume_gas(self, amount: int, descriptor: str) -> None:
        self.consumed += amount
        if self.limit is not None and self.consumed > self.limit:
            raise OutOfGasError(descriptor)


@dataclass
class Event:
    """A typed event with ordered key/value attributes."""

    type: str
    attributes: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class Context:
    """Execution context: module store, gas meter and emitted events."""

    store: KVStore = field(default_factory=KVStore)
    gas_meter: GasMeter = field(default_factory=GasMeter)
    events: list[Event] = field(default_factory=list)

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def with_gas_meter(self, gas_meter: GasMeter) -> Context:
        """A context sharing store and events but metering gas separately."""
        return dataclasses.replace(self, gas_meter=gas_meter)


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7
        if shift >= 64:
            raise ValueError("varint overflow")


def _encode_authority_metadata(metadata: DenomAuthorityMetadata) -> bytes:
    admin = metadata.admin.encode()
    if not admin:
        return b""
    return b"\x0a" + _encode_varint(len(admin)) + admin


def _decode_authority_metadata(data: bytes) -> DenomAuthorityMetadata:
    admin = ""
    pos = 0
    while pos < len(data):
        tag, pos = _read_varint(data, pos)
        number, wire_type = tag >> 3, tag & 7
        if wire_type == 0:
            _, pos = _read_varint(data, pos)
        elif wire_type == 1:
            pos += 8
        elif wire_type == 5:
            pos += 4
        elif wire_type == 2:
            length, pos = _read_varint(data, pos)
            chunk = data[pos:pos + length]
            if len(chunk) != length:
                raise ValueError("truncated length-delimited field")
            pos += length
            if number == 1:
                admin = chunk.decode()
        else:
            raise ValueError(f"unsupported wire type {wire_type}")
        if pos > len(data):
            raise ValueError("truncated field")
    return DenomAuthorityMetadata(admin=admin)


def _coins(amount: Coin) -> list[Coin]:
    # A zero coin makes an empty coin set.
    return [amount] if amount.amount else []


class Keeper:
    """Reads and writes token factory state and drives bank operations."""

    def __init__(
        self,
        known_modules: Sequence[str],
        account_keeper: AccountKeeper,
        bank_keeper: BankKeeper,
        contract_keeper: Optional[WasmKeeper] = None,
        authority: str = "",
    ) -> None:
        self.known_modules = list(known_modules)
        self.account_keeper = account_keeper
        self.bank_keeper = bank_keeper
        self.contract_keeper = contract_keeper
        self.authority = authority

    def set_contract_keeper(self, contract_keeper: WasmKeeper) -> None:
        self.contract_keeper = contract_keeper

    def create_module_account(self, ctx: Context) -> None:
        """Make sure the module account exists; looking it up creates it."""
        self.account_keeper.get_module_account(ctx, MODULE_NAME)

    # Authority metadata

    def get_authority_metadata(self, ctx: Context, denom: str) -> DenomAuthorityMetadata:
        key = get_denom_prefix_store(denom) + DENOM_AUTHORITY_METADATA_KEY.encode()
        return _decode_authority_metadata(ctx.store.get(key) or b"")

    def set_authority_metadata(
        self, ctx: Context, denom: str, metadata: DenomAuthorityMetadata
    ) -> None:
        metadata.validate()
        key = get_denom_prefix_store(denom) + DENOM_AUTHORITY_METADATA_KEY.encode()
        ctx.store.set(key, _encode_authority_metadata(metadata))

    def set_admin(self, ctx: Context, denom: str, admin: str) -> None:
        metadata = self.get_authority_metadata(ctx, denom)
        metadata.admin = admin
        self.set_authority_metadata(ctx, denom, metadata)

    # Creators

    def add_denom_from_creator(self, ctx: Context, creator: str, denom: str) -> None:
        ctx.store.set(get_creator_prefix(creator) + denom.encode(), denom.encode())

    def get_denoms_from_creator(self, ctx: Context, creator: str) -> list[str]:
        return [key.decode() for key, _ in ctx.store.iterate(get_creator_prefix(creator))]

    def all_denoms(self, ctx: Context) -> Iterator[str]:
        """Every factory denom, ordered by creator and then denom."""
        for _, value in ctx.store.iterate(get_creators_prefix()):
            yield value.decode()

    # Params

    def get_params(self, ctx: Context) -> Params:
        raw = ctx.store.get(PARAMS_KEY)
        if raw is None:
            return Params()
        return Params.from_dict(json.loads(raw))

    def set_params(self, ctx: Context, params: Params) -> None:
        ctx.store.set(PARAMS_KEY, json.dumps(params.to_dict(), separators=(",", ":")).encode())

    # Denom creation

    def create_denom(self, ctx: Context, creator_addr: str, subdenom: str) -> str:
        """Validate, charge the fee and register factory/{creator}/{subdenom}."""
        denom = self.validate_create_denom(ctx, creator_addr, subdenom)
        self.charge_for_create_denom(ctx, creator_addr)
        self.create_denom_after_validation(ctx, creator_addr, denom)
        return denom

    def create_denom_after_validation(self, ctx: Context, creator_addr: str, denom: str) -> None:
        if self.bank_keeper.get_denom_metadata(ctx, denom) is None:
            self.bank_keeper.set_denom_metadata(
                ctx,
                Metadata(base=denom, denom_units=[DenomUnit(denom=denom, exponent=0)]),
            )
        self.set_authority_metadata(ctx, denom, DenomAuthorityMetadata(admin=creator_addr))
        self.add_denom_from_creator(ctx, creator_addr, denom)

    def validate_create_denom(self, ctx: Context, creator_addr: str, subdenom: str) -> str:
        if self.bank_keeper.has_supply(ctx, subdenom):
            raise ValueError(
                "temporary error until IBC bug is sorted out, "
                "can't create subdenoms that are the same as a native denom"
            )
        denom = get_token_denom(creator_addr, subdenom)
        if self.bank_keeper.get_denom_metadata(ctx, denom) is not None:
            raise DenomExistsError()
        return denom

    def charge_for_create_denom(self, ctx: Context, creator_addr: str) -> None:
        """Send the creation fee to the fee collector and consume creation gas."""
        params = self.get_params(ctx)
        if params.denom_creation_fee:
            creator = acc_address_from_bech32(creator_addr)
            try:
                collector = acc_address_from_bech32(params.fee_collector_address)
            except InvalidAddressError as exc:
                raise InvalidAddressError(f"wrong fee collector address: {exc}") from exc
            try:
                self.bank_keeper.send_coins(
                    ctx, creator, collector, list(params.denom_creation_fee)
                )
            except Exception as exc:
                raise TokenFactoryError(
                    f"unable to send coins to fee collector: {exc}"
                ) from exc
        if params.denom_creation_gas_consume:
            ctx.gas_meter.consume_gas(
                params.denom_creation_gas_consume, "consume denom creation gas"
            )

    # Bank actions

    def mint_to(self, ctx: Context, amount: Coin, mint_to: str) -> None:
        deconstruct_denom(amount.denom)
        recipient = acc_address_from_bech32(mint_to)
        if self.is_module_account(ctx, recipient):
            raise ModuleAccountForbiddenError("minting to module accounts is forbidden")
        self.bank_keeper.mint_coins(ctx, MODULE_NAME, _coins(amount))
        self.bank_keeper.send_coins_from_module_to_account(
            ctx, MODULE_NAME, recipient, _coins(amount)
        )

    def burn_from(self, ctx: Context, amount: Coin, burn_from: str) -> None:
        deconstruct_denom(amount.denom)
        holder = acc_address_from_bech32(burn_from)
        if self.is_module_account(ctx, holder):
            raise ModuleAccountForbiddenError("burning from module accounts is forbidden")
        self.bank_keeper.send_coins_from_account_to_module(
            ctx, holder, MODULE_NAME, _coins(amount)
        )
        self.bank_keeper.burn_coins(ctx, MODULE_NAME, _coins(amount))

    def force_transfer(self, ctx: Context, amount: Coin, from_addr: str, to_addr: str) -> None:
        deconstruct_denom(amount.denom)
        source = acc_address_from_bech32(from_addr)
        target = acc_address_from_bech32(to_addr)
        if self.is_module_account(ctx, source):
            raise ModuleAccountForbiddenError("force transfer from module accounts is forbidden")
        if self.is_module_account(ctx, target):
            raise ModuleAccountForbiddenError("force transfer to module accounts is forbidden")
        self.bank_keeper.send_coins(ctx, source, target, _coins(amount))

    def is_module_account(self, ctx: Context, addr: bytes) -> bool:
        for name in self.known_modules:
            account = self.account_keeper.get_module_account(ctx, name)
            if account is not None and bytes(account.address) == bytes(addr):
                return True
        return False

    # Before-send hooks

    def set_before_send_hook(self, ctx: Context, denom: str, contract_addr: str) -> None:
        """Store the hook contract of a denom; an empty address removes it."""
        deconstruct_denom(denom)
        key = get_denom_prefix_store(denom) + BEFORE_SEND_HOOK_ADDRESS_PREFIX_KEY.encode()
        if not contract_addr:
            ctx.store.delete(key)
            return
        acc_address_from_bech32(contract_addr)
        ctx.store.set(key, contract_addr.encode())

    def get_before_send_hook(self, ctx: Context, denom: str) -> str:
        key = get_denom_prefix_store(denom) + BEFORE_SEND_HOOK_ADDRESS_PREFIX_KEY.encode()
        raw = ctx.store.get(key)
        return raw.decode() if raw is not None else ""

    # Genesis

    def init_genesis(self, ctx: Context, gen_state: GenesisState) -> None:
        self.create_module_account(ctx)
        params = gen_state.params
        if params.denom_creation_fee is None:
            params.denom_creation_fee = []
        self.set_params(ctx, params)

        for gen_denom in gen_state.factory_denoms:
            creator, _ = deconstruct_denom(gen_denom.denom)
            self.create_denom_after_validation(ctx, creator, gen_denom.denom)
            self.set_authority_metadata(ctx, gen_denom.denom, gen_denom.authority_metadata)
            if gen_denom.hook_contract_address:
                acc_address_from_bech32(gen_denom.hook_contract_address)
                self.set_before_send_hook(
                    ctx, gen_denom.denom, gen_denom.hook_contract_address
                )

    def export_genesis(self, ctx: Context) -> GenesisState:
        factory_denoms = [
            GenesisDenom(
                denom=denom,
                authority_metadata=self.get_authority_metadata(ctx, denom),
                hook_contract_address=self.get_before_send_hook(ctx, denom),
            )
            for denom in self.all_denoms(ctx)
        ]
        return GenesisState(params=self.get_params(ctx), factory_denoms=factory_denoms)