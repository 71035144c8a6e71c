"""Bech32 account addresses."""

from __future__ import annotations

import hashlib
import os
from collections.abc import Iterable

from .errors import InvalidAddressError

ACCOUNT_ADDRESS_PREFIX = "mantra"
MAX_ADDRESS_LENGTH = 255

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_MAX_BECH32_LENGTH = 1023
_CHECKSUM_LENGTH = 6


def _polymod(values: Iterable[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for i, gen in enumerate(_GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out: list[int] = []
    maxv = (1 << to_bits) - 1
    for value in data:
        if value >> from_bits:
            raise ValueError(f"invalid data value {value}")
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & maxv)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        raise ValueError("invalid padding")
    return out


def bech32_encode(hrp: str, data: bytes) -> str:
    """Encode a byte payload under the given human-readable part."""
    if not hrp:
        raise ValueError("human-readable part must not be empty")
    hrp = hrp.lower()
    words = _convert_bits(data, 8, 5, True)
    polymod = _polymod(_hrp_expand(hrp) + words + [0] * _CHECKSUM_LENGTH) ^ 1
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(_CHECKSUM_LENGTH)]
    return hrp + "1" + "".join(_CHARSET[w] for w in words + checksum)


def bech32_decode(address: str) -> tuple[str, bytes]:
    """Split a bech32 string into its human-readable part and byte payload."""
    if len(address) > _MAX_BECH32_LENGTH:
        raise ValueError(f"string length {len(address)} exceeds {_MAX_BECH32_LENGTH}")
    if any(ord(c) < 33 or ord(c) > 126 for c in address):
        raise ValueError("invalid character in string")
    if address.lower() != address and address.upper() != address:
        raise ValueError("string not all lowercase or all uppercase")
    text = address.lower()
    pos = text.rfind("1")
    if pos < 1 or pos + _CHECKSUM_LENGTH + 1 > len(text):
        raise ValueError("invalid separator index")
    hrp = text[:pos]
    words = [_CHARSET.find(c) for c in text[pos + 1:]]
    if -1 in words:
        raise ValueError("invalid character in data part")
    if _polymod(_hrp_expand(hrp) + words) != 1:
        raise ValueError("invalid checksum")
    payload = _convert_bits(words[:-_CHECKSUM_LENGTH], 5, 8, False)
    return hrp, bytes(payload)


def acc_address_from_bech32(address: str) -> bytes:
    """Parse an account address, checking its prefix and length."""
    if not address.strip():
        raise InvalidAddressError("empty address string is not allowed")
    try:
        hrp, raw = bech32_decode(address)
    except ValueError as exc:
        raise InvalidAddressError(f"decoding bech32 failed: {exc}") from exc
    if hrp != ACCOUNT_ADDRESS_PREFIX:
        raise InvalidAddressError(
            f"invalid Bech32 prefix; expected {ACCOUNT_ADDRESS_PREFIX}, got {hrp}"
        )
    if not raw:
        raise InvalidAddressError("addresses cannot be empty")
    if len(raw) > MAX_ADDRESS_LENGTH:
        raise InvalidAddressError(
            f"address max length is {MAX_ADDRESS_LENGTH}, got {len(raw)}"
        )
    return raw


def address_to_bech32(raw: bytes) -> str:
    """Render raw address bytes as an account address string."""
    return bech32_encode(ACCOUNT_ADDRESS_PREFIX, raw)


def module_address(name: str) -> bytes:
    """Raw address of the module account with the given name."""
    return hashlib.sha256(name.encode()).digest()[:20]


def sample_acc_address() -> str:
    """A fresh random account address, for tests and examples."""
    public_key = os.urandom(32)
    return address_to_bech32(hashlib.sha256(public_key).digest()[:20])