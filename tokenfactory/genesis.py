"""Genesis state of the token factory module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .addresses import acc_address_from_bech32
from .denoms import DenomAuthorityMetadata, deconstruct_denom
from .errors import (
    InvalidAddressError,
    InvalidAuthorityMetadataError,
    InvalidGenesisError,
    InvalidHookContractAddressError,
)
from .params import Params, default_params

DEFAULT_INDEX = 1


@dataclass
class GenesisDenom:
    """One factory denom as recorded in genesis."""

    denom: str
    authority_metadata: DenomAuthorityMetadata = field(default_factory=DenomAuthorityMetadata)
    hook_contract_address: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "denom": self.denom,
            "authority_metadata": {"admin": self.authority_metadata.admin},
            "hook_contract_address": self.hook_contract_address,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenesisDenom:
        metadata = data.get("authority_metadata") or {}
        return cls(
            denom=data.get("denom", ""),
            authority_metadata=DenomAuthorityMetadata(admin=metadata.get("admin") or ""),
            hook_contract_address=data.get("hook_contract_address") or "",
        )


@dataclass
class GenesisState:
    """Parameters plus every factory denom."""

    params: Params = field(default_factory=default_params)
    factory_denoms: list[GenesisDenom] = field(default_factory=list)

    def validate(self) -> None:
        self.params.validate()
        seen: set[str] = set()
        for denom in self.factory_denoms:
            _validate_genesis_denom(denom, seen)

    def to_dict(self) -> dict[str, Any]:
        return {
            "params": self.params.to_dict(),
            "factory_denoms": [denom.to_dict() for denom in self.factory_denoms],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenesisState:
        params = data.get("params")
        return cls(
            params=Params.from_dict(params) if params else default_params(),
            factory_denoms=[GenesisDenom.from_dict(d) for d in data.get("factory_denoms") or []],
        )


def _validate_genesis_denom(denom: GenesisDenom, seen: set[str]) -> None:
    # Only the first applicable check runs: a hook address is checked only
    # when the denom has no admin.
    if denom.denom in seen:
        raise InvalidGenesisError(f"duplicate denom: {denom.denom}")
    if denom.authority_metadata.admin:
        try:
            acc_address_from_bech32(denom.authority_metadata.admin)
        except InvalidAddressError as exc:
            raise InvalidAuthorityMetadataError(f"invalid admin address: {exc}") from exc
    elif denom.hook_contract_address:
        try:
            acc_address_from_bech32(denom.hook_contract_address)
        except InvalidAddressError as exc:
            raise InvalidHookContractAddressError(
                f"invalid hook contract address: {exc}"
            ) from exc
    seen.add(denom.denom)
    deconstruct_denom(denom.denom)


def default_genesis() -> GenesisState:
    """Genesis with default parameters and no denoms."""
    return GenesisState()