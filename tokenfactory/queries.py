"""Read-only queries over token factory state."""

from __future__ import annotations

from .denoms import DenomAuthorityMetadata
from .keeper import Context, Keeper
from .keys import MODULE_DENOM_PREFIX
from .params import Params


class QueryServer:
    """Answers parameter, metadata, creator and hook queries."""

    def __init__(self, keeper: Keeper) -> None:
        self.keeper = keeper

    def params(self, ctx: Context) -> Params:
        return self.keeper.get_params(ctx)

    def denom_authority_metadata(
        self, ctx: Context, creator: str, subdenom: str
    ) -> DenomAuthorityMetadata:
        denom = f"{MODULE_DENOM_PREFIX}/{creator}/{subdenom}"
        return self.keeper.get_authority_metadata(ctx, denom)

    def denoms_from_creator(self, ctx: Context, creator: str) -> list[str]:
        return self.keeper.get_denoms_from_creator(ctx, creator)

    def before_send_hook_address(self, ctx: Context, creator: str, subdenom: str) -> str:
        denom = f"{MODULE_DENOM_PREFIX}/{creator}/{subdenom}"
        return self.keeper.get_before_send_hook(ctx, denom)