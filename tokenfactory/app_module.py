"""Application module wiring: genesis handling and keeper construction."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from .addresses import acc_address_from_bech32, address_to_bech32, module_address
from .errors import InvalidAddressError
from .genesis import GenesisState, default_genesis
from .keeper import AccountKeeper, BankKeeper, Context, Keeper
from .keys import CONSENSUS_VERSION, MODULE_NAME, QUERIER_ROUTE
from .queries import QueryServer

GOV_MODULE_NAME = "gov"


def _to_json(state: GenesisState) -> bytes:
    return json.dumps(state.to_dict(), separators=(",", ":")).encode()


def _parse_genesis(raw: bytes | str) -> GenesisState:
    try:
        data: Any = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("genesis state must be a JSON object")
        return GenesisState.from_dict(data)
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        raise ValueError(f"failed to unmarshal {MODULE_NAME} genesis state: {exc}") from exc


class AppModule:
    """The token factory module as seen by the application."""

    name = MODULE_NAME
    consensus_version = CONSENSUS_VERSION
    querier_route = QUERIER_ROUTE

    def __init__(self, keeper: Keeper) -> None:
        self.keeper = keeper
        self.query_server = QueryServer(keeper)

    def default_genesis(self) -> bytes:
        """Default genesis state as JSON."""
        return _to_json(default_genesis())

    def validate_genesis(self, raw: bytes | str) -> None:
        _parse_genesis(raw).validate()

    def init_genesis(self, ctx: Context, raw: bytes | str) -> list[Any]:
        """Load genesis JSON into state; there are no validator updates."""
        self.keeper.init_genesis(ctx, _parse_genesis(raw))
        return []

    def export_genesis(self, ctx: Context) -> bytes:
        return _to_json(self.keeper.export_genesis(ctx))


def _resolve_authority(authority: str) -> str:
    if not authority:
        return address_to_bech32(module_address(GOV_MODULE_NAME))
    try:
        return address_to_bech32(acc_address_from_bech32(authority))
    except InvalidAddressError:
        return address_to_bech32(module_address(authority))


def provide_module(
    authority: str,
    known_modules: Sequence[str],
    account_keeper: AccountKeeper,
    bank_keeper: BankKeeper,
) -> tuple[Keeper, AppModule]:
    """Build the keeper and module; the authority defaults to the gov module.

    A non-empty authority is used as an address when it parses as one and
    otherwise names a module whose account becomes the authority.
    """
    keeper = Keeper(
        known_modules,
        account_keeper,
        bank_keeper,
        None,
        _resolve_authority(authority),
    )
    return keeper, AppModule(keeper)