"""Transaction messages of the token factory module and their validation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from .addresses import acc_address_from_bech32
from .denoms import Coin, deconstruct_denom, get_token_denom, validate_denom
from .errors import (
    InvalidAddressError,
    InvalidCoinsError,
    InvalidDenomError,
    TokenFactoryError,
)
from .keys import ROUTER_KEY
from .params import Params

TYPE_MSG_CREATE_DENOM = "create_denom"
TYPE_MSG_MINT = "tf_mint"
TYPE_MSG_BURN = "tf_burn"
TYPE_MSG_FORCE_TRANSFER = "force_transfer"
TYPE_MSG_CHANGE_ADMIN = "change_admin"
TYPE_MSG_SET_DENOM_METADATA = "set_denom_metadata"
TYPE_MSG_SET_BEFORE_SEND_HOOK = "set_before_send_hook"
TYPE_MSG_UPDATE_PARAMS = "update-params"


def _empty_coin() -> Coin:
    return Coin(denom="")


def _check_address(address: str, label: str) -> None:
    try:
        acc_address_from_bech32(address)
    except InvalidAddressError as exc:
        raise InvalidAddressError(f"Invalid {label} ({exc})") from exc


def _signer(address: str) -> list[bytes]:
    # An unparsable sender yields an empty address rather than an error.
    try:
        return [acc_address_from_bech32(address)]
    except InvalidAddressError:
        return [b""]


@dataclass
class DenomUnit:
    """One unit of a denom, scaled by 10**exponent relative to the base."""

    denom: str
    exponent: int = 0
    aliases: list[str] = field(default_factory=list)

    def validate(self) -> None:
        try:
            validate_denom(self.denom)
        except InvalidDenomError as exc:
            raise ValueError(f"invalid denom unit {self.denom!r}: {exc}") from exc
        seen: set[str] = set()
        for alias in self.aliases:
            if alias in seen:
                raise ValueError(f"duplicate denomination unit alias {alias}")
            if not alias.strip():
                raise ValueError(f"alias for denom unit {self.denom} cannot be blank")
            if alias == self.denom:
                raise ValueError(f"alias '{alias}' cannot be equal to denom '{self.denom}'")
            seen.add(alias)

    def to_dict(self) -> dict[str, Any]:
        return {"denom": self.denom, "exponent": self.exponent, "aliases": list(self.aliases)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DenomUnit:
        return cls(
            denom=data.get("denom", ""),
            exponent=int(data.get("exponent") or 0),
            aliases=list(data.get("aliases") or []),
        )


@dataclass
class Metadata:
    """Bank metadata describing a denom and its display units."""

    base: str = ""
    display: str = ""
    name: str = ""
    symbol: str = ""
    description: str = ""
    denom_units: list[DenomUnit] = field(default_factory=list)
    uri: str = ""
    uri_hash: str = ""

    def validate(self) -> None:
        if not self.name.strip():
            raise ValueError("name field cannot be blank")
        if not self.symbol.strip():
            raise ValueError("symbol field cannot be blank")
        for label, denom in (("base", self.base), ("display", self.display)):
            try:
                validate_denom(denom)
            except InvalidDenomError as exc:
                raise ValueError(f"invalid metadata {label} denom: {exc}") from exc

        has_display = False
        current_exponent = 0
        seen: set[str] = set()
        for position, unit in enumerate(self.denom_units):
            if position == 0:
                if unit.exponent != 0:
                    raise ValueError(
                        f"the exponent for base denomination unit {unit.denom} must be 0"
                    )
                if unit.denom != self.base:
                    raise ValueError(
                        "metadata's first denomination unit must be the one with base "
                        f"denom '{self.base}'"
                    )
            elif current_exponent >= unit.exponent:
                raise ValueError("the denomination units must be sorted in ascending order")
            current_exponent = unit.exponent
            if unit.denom in seen:
                raise ValueError(f"duplicate denomination unit {unit.denom}")
            if unit.denom == self.display:
                has_display = True
            unit.validate()
            seen.add(unit.denom)

        if not has_display:
            raise ValueError(
                f"metadata must contain a denomination unit with display denom '{self.display}'"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "denom_units": [unit.to_dict() for unit in self.denom_units],
            "base": self.base,
            "display": self.display,
            "name": self.name,
            "symbol": self.symbol,
            "uri": self.uri,
            "uri_hash": self.uri_hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Metadata:
        return cls(
            base=data.get("base", ""),
            display=data.get("display", ""),
            name=data.get("name", ""),
            symbol=data.get("symbol", ""),
            description=data.get("description", ""),
            denom_units=[DenomUnit.from_dict(u) for u in data.get("denom_units") or []],
            uri=data.get("uri", ""),
            uri_hash=data.get("uri_hash", ""),
        )

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass
class MsgCreateDenom:
    """Create factory/{sender}/{subdenom}."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_CREATE_DENOM

    sender: str
    subdenom: str

    def validate(self) -> None:
        _check_address(self.sender, "sender address")
        try:
            get_token_denom(self.sender, self.subdenom)
        except TokenFactoryError as exc:
            raise InvalidDenomError(str(exc)) from exc

    def get_signers(self) -> list[bytes]:
        return _signer(self.sender)

    def to_dict(self) -> dict[str, Any]:
        return {"sender": self.sender, "subdenom": self.subdenom}


@dataclass
class MsgMint:
    """Mint an amount of a factory denom, to the sender unless told otherwise."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_MINT

    sender: str
    amount: Coin = field(default_factory=_empty_coin)
    mint_to_address: str = ""

    def validate(self) -> None:
        _check_address(self.sender, "sender address")
        if self.mint_to_address:
            _check_address(self.mint_to_address, "mint_to_address")
        if not self.amount.is_valid() or self.amount.amount == 0:
            raise InvalidCoinsError(str(self.amount))

    def get_signers(self) -> list[bytes]:
        return _signer(self.sender)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sender": self.sender,
            "amount": self.amount.to_dict(),
            "mint_to_address": self.mint_to_address,
        }


@dataclass
class MsgBurn:
    """Burn an amount of a factory denom, from the sender unless told otherwise."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_BURN

    sender: str
    amount: Coin = field(default_factory=_empty_coin)
    burn_from_address: str = ""

    def validate(self) -> None:
        _check_address(self.sender, "sender address")
        if self.burn_from_address:
            _check_address(self.burn_from_address, "burn_from_address")
        if not self.amount.is_valid() or self.amount.amount == 0:
            raise InvalidCoinsError(str(self.amount))

    def get_signers(self) -> list[bytes]:
        return _signer(self.sender)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sender": self.sender,
            "amount": self.amount.to_dict(),
            "burn_from_address": self.burn_from_address,
        }


@dataclass
class MsgForceTransfer:
    """Move a factory denom between two accounts on the admin's authority."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_FORCE_TRANSFER

    sender: str
    amount: Coin = field(default_factory=_empty_coin)
    transfer_from_address: str = ""
    transfer_to_address: str = ""

    def validate(self) -> None:
        _check_address(self.sender, "sender address")
        _check_address(self.transfer_from_address, "address")
        _check_address(self.transfer_to_address, "address")
        if not self.amount.is_valid():
            raise InvalidCoinsError(str(self.amount))

    def get_signers(self) -> list[bytes]:
        return _signer(self.sender)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sender": self.sender,
            "amount": self.amount.to_dict(),
            "transfer_from_address": self.transfer_from_address,
            "transfer_to_address": self.transfer_to_address,
        }


@dataclass
class MsgChangeAdmin:
    """Hand the admin role of a factory denom to another account."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_CHANGE_ADMIN

    sender: str
    denom: str
    new_admin: str

    def validate(self) -> None:
        _check_address(self.sender, "sender address")
        _check_address(self.new_admin, "address")
        deconstruct_denom(self.denom)

    def get_signers(self) -> list[bytes]:
        return _signer(self.sender)

    def to_dict(self) -> dict[str, Any]:
        return {"sender": self.sender, "denom": self.denom, "new_admin": self.new_admin}


@dataclass
class MsgSetDenomMetadata:
    """Replace the bank metadata of a factory denom."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_SET_DENOM_METADATA

    sender: str
    metadata: Metadata = field(default_factory=Metadata)

    def validate(self) -> None:
        _check_address(self.sender, "sender address")
        self.metadata.validate()
        deconstruct_denom(self.metadata.base)

    def get_signers(self) -> list[bytes]:
        return _signer(self.sender)

    def to_dict(self) -> dict[str, Any]:
        return {"sender": self.sender, "metadata": self.metadata.to_dict()}


@dataclass
class MsgSetBeforeSendHook:
    """Set, or clear with an empty address, the contract called before sends."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_SET_BEFORE_SEND_HOOK

    sender: str
    denom: str
    contract_addr: str = ""

    def validate(self) -> None:
        _check_address(self.sender, "sender address")
        if self.contract_addr:
            _check_address(self.contract_addr, "cosmwasm contract address")
        try:
            deconstruct_denom(self.denom)
        except TokenFactoryError as exc:
            raise InvalidDenomError() from exc

    def get_signers(self) -> list[bytes]:
        return _signer(self.sender)

    def to_dict(self) -> dict[str, Any]:
        return {"sender": self.sender, "denom": self.denom, "contract_addr": self.contract_addr}


@dataclass
class MsgUpdateParams:
    """Replace the module parameters; only the module authority may do so."""

    route: ClassVar[str] = ROUTER_KEY
    msg_type: ClassVar[str] = TYPE_MSG_UPDATE_PARAMS

    authority: str
    params: Params = field(default_factory=Params)

    def validate(self) -> None:
        try:
            acc_address_from_bech32(self.authority)
        except InvalidAddressError as exc:
            raise InvalidAddressError(f"authority is invalid: {exc.detail}") from exc
        self.params.validate()

    def get_signers(self) -> list[bytes]:
        return [acc_address_from_bech32(self.authority)]

    def to_dict(self) -> dict[str, Any]:
        return {"authority": self.authority, "params": self.params.to_dict()}


Msg = Union[
    MsgCreateDenom,
    MsgMint,
    MsgBurn,
    MsgForceTransfer,
    MsgChangeAdmin,
    MsgSetDenomMetadata,
    MsgSetBeforeSendHook,
    MsgUpdateParams,
]

_AMINO_NAMES: dict[type, str] = {
    MsgCreateDenom: "osmosis/tokenfactory/create-denom",
    MsgMint: "osmosis/tokenfactory/mint",
    MsgBurn: "osmosis/tokenfactory/burn",
    MsgChangeAdmin: "osmosis/tokenfactory/change-admin",
    MsgSetBeforeSendHook: "osmosis/tokenfactory/set-beforesend-hook",
    MsgUpdateParams: "osmosis/tokenfactory/update-params",
}


def amino_name(msg: Any) -> str:
    """Legacy amino type name under which the message is registered."""
    try:
        return _AMINO_NAMES[type(msg)]
    except KeyError:
        raise ValueError(f"{type(msg).__name__} is not registered with the amino codec") from None


def get_sign_bytes(msg: Msg) -> bytes:
    """Compact JSON of the message, with every field present."""
    return json.dumps(msg.to_dict(), separators=(",", ":")).encode()