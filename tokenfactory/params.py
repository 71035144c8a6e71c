"""Module parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .addresses import acc_address_from_bech32
from .denoms import Coin, validate_coins
from .errors import InvalidAddressError, InvalidCoinsError

_MAX_UINT64 = 2**64 - 1


@dataclass
class Params:
    """Fee, gas and fee collector settings for creating denoms."""

    denom_creation_fee: list[Coin] = field(default_factory=list)
    denom_creation_gas_consume: int = 0
    fee_collector_address: str = ""

    def validate(self) -> None:
        has_fee = len(self.denom_creation_fee) > 0
        has_collector = self.fee_collector_address != ""
        if has_fee != has_collector:
            raise ValueError(
                "DenomCreationFee and FeeCollectorAddr must be both set or both unset"
            )
        try:
            validate_denom_creation_fee(self.denom_creation_fee)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"failed to validate DenomCreationFee: {exc}") from exc
        try:
            validate_fee_collector_address(self.fee_collector_address)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"failed to validate FeeCollectorAddress: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "denom_creation_fee": [coin.to_dict() for coin in self.denom_creation_fee],
            "denom_creation_gas_consume": str(self.denom_creation_gas_consume),
            "fee_collector_address": self.fee_collector_address,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Params:
        return cls(
            denom_creation_fee=[Coin.from_dict(c) for c in data.get("denom_creation_fee") or []],
            denom_creation_gas_consume=int(data.get("denom_creation_gas_consume") or 0),
            fee_collector_address=data.get("fee_collector_address") or "",
        )


def default_params() -> Params:
    """Parameters that charge nothing for denom creation."""
    return Params()


def validate_denom_creation_fee(value: Any) -> None:
    if not isinstance(value, (list, tuple)) or not all(isinstance(c, Coin) for c in value):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    try:
        validate_coins(list(value))
    except InvalidCoinsError as exc:
        raise ValueError(f"invalid denom creation fee: {list(value)!r}") from exc


def validate_denom_creation_gas_consume(value: Any) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    if not 0 <= value <= _MAX_UINT64:
        raise ValueError(f"denom creation gas consume out of range: {value}")


def validate_fee_collector_address(value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    if not value:
        return
    try:
        acc_address_from_bech32(value)
    except InvalidAddressError as exc:
        raise ValueError(f"invalid fee collector address: {exc}") from exc