"""Coins, denom validation and token factory denom construction."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from .addresses import acc_address_from_bech32, address_to_bech32
from .errors import (
    CreatorTooLongError,
    InvalidAddressError,
    InvalidCoinsError,
    InvalidCreatorError,
    InvalidDenomError,
    SubdenomTooLongError,
)
from .keys import MAX_CREATOR_LENGTH, MAX_SUBDENOM_LENGTH, MODULE_DENOM_PREFIX

_DENOM_PATTERN = r"[a-zA-Z][a-zA-Z0-9/:._-]{2,127}"
_DENOM_RE = re.compile(_DENOM_PATTERN)
_DEC_COIN_RE = re.compile(
    r"([0-9]+(?:\.[0-9]+)?|\.[0-9]+)[ \t\n\r\f\v]*(" + _DENOM_PATTERN + r")"
)


@dataclass(frozen=True)
class Coin:
    """An amount of a single denom."""

    denom: str
    amount: int = 0

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def is_valid(self) -> bool:
        """True if the denom is well formed and the amount is not negative."""
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            return False
        return _DENOM_RE.fullmatch(self.denom) is not None and self.amount >= 0

    def to_dict(self) -> dict[str, str]:
        return {"denom": self.denom, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coin:
        return cls(denom=data["denom"], amount=int(data["amount"]))


@dataclass
class DenomAuthorityMetadata:
    """Who administers a factory denom; an empty admin means nobody."""

    admin: str = ""

    def validate(self) -> None:
        if self.admin:
            acc_address_from_bech32(self.admin)


def validate_denom(denom: str) -> None:
    """Raise InvalidDenomError unless the denom matches the denom grammar."""
    if _DENOM_RE.fullmatch(denom) is None:
        raise InvalidDenomError(denom)


def validate_coins(coins: Sequence[Coin]) -> None:
    """Check that coins are valid, positive, sorted and free of duplicates."""
    if not coins:
        return
    for coin in coins:
        try:
            validate_denom(coin.denom)
        except InvalidDenomError as exc:
            raise InvalidCoinsError(str(exc)) from exc
    for previous, coin in zip(coins, coins[1:]):
        if coin.denom < previous.denom:
            raise InvalidCoinsError(f"denomination {coin.denom} is not sorted")
        if coin.denom == previous.denom:
            raise InvalidCoinsError(f"duplicate denomination {coin.denom}")
    for coin in coins:
        if coin.amount <= 0:
            raise InvalidCoinsError(f"coin {coin} amount is not positive")


def parse_coin_normalized(text: str) -> Coin:
    """Parse "<amount><denom>", truncating any fractional amount."""
    match = _DEC_COIN_RE.fullmatch(text.strip())
    if match is None:
        raise InvalidCoinsError(f"invalid decimal coin expression: {text}")
    amount_text, denom = match.groups()
    try:
        amount = Decimal(amount_text)
    except InvalidOperation as exc:
        raise InvalidCoinsError(f"failed to parse decimal coin amount: {amount_text}") from exc
    return Coin(denom=denom, amount=int(amount))


def get_token_denom(creator: str, subdenom: str) -> str:
    """Build the denom factory/{creator}/{subdenom}."""
    if len(subdenom.encode()) > MAX_SUBDENOM_LENGTH:
        raise SubdenomTooLongError()
    if len(creator.encode()) > MAX_CREATOR_LENGTH:
        raise CreatorTooLongError()
    if "/" in creator:
        raise InvalidCreatorError()
    denom = "/".join((MODULE_DENOM_PREFIX, creator, subdenom))
    validate_denom(denom)
    return denom


def deconstruct_denom(denom: str) -> tuple[str, str]:
    """Split a factory denom into its creator address and subdenom."""
    validate_denom(denom)
    parts = denom.split("/")
    if len(parts) < 3:
        raise InvalidDenomError(f"not enough parts of denom {denom}")
    if parts[0] != MODULE_DENOM_PREFIX:
        raise InvalidDenomError(
            f"denom prefix is incorrect. Is: {parts[0]}.  Should be: {MODULE_DENOM_PREFIX}"
        )
    try:
        raw = acc_address_from_bech32(parts[1])
    except InvalidAddressError as exc:
        raise InvalidDenomError(f"Invalid creator address ({exc})") from exc
    # A subdenom may itself contain slashes.
    return address_to_bech32(raw), "/".join(parts[2:])