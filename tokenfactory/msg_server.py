"""Handlers for the token factory's transaction messages."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .errors import (
    BurnFromModuleAccountError,
    DenomDoesNotExistError,
    InvalidRequestError,
    TokenFactoryError,
    UnauthorizedError,
)
from .keeper import Context, Event, Keeper
from .keys import (
    ATTRIBUTE_AMOUNT,
    ATTRIBUTE_BEFORE_SEND_HOOK_ADDRESS,
    ATTRIBUTE_BURN_FROM_ADDRESS,
    ATTRIBUTE_CREATOR,
    ATTRIBUTE_DENOM,
    ATTRIBUTE_DENOM_METADATA,
    ATTRIBUTE_MINT_TO_ADDRESS,
    ATTRIBUTE_NEW_ADMIN,
    ATTRIBUTE_NEW_TOKEN_DENOM,
    ATTRIBUTE_TRANSFER_FROM_ADDRESS,
    ATTRIBUTE_TRANSFER_TO_ADDRESS,
)
from .msgs import (
    TYPE_MSG_BURN,
    TYPE_MSG_CHANGE_ADMIN,
    TYPE_MSG_CREATE_DENOM,
    TYPE_MSG_FORCE_TRANSFER,
    TYPE_MSG_MINT,
    TYPE_MSG_SET_BEFORE_SEND_HOOK,
    TYPE_MSG_SET_DENOM_METADATA,
    MsgBurn,
    MsgChangeAdmin,
    MsgCreateDenom,
    MsgForceTransfer,
    MsgMint,
    MsgSetBeforeSendHook,
    MsgSetDenomMetadata,
    MsgUpdateParams,
)


@runtime_checkable
class ModuleAccount(Protocol):
    """An account owned by a module rather than by a key holder."""

    name: str
    permissions: list[str]


def _validate(msg: Any, name: str) -> None:
    """Run the message's own checks, prefixing any failure with its name."""
    try:
        msg.validate()
    except TokenFactoryError as exc:
        detail = f"failed to validate {name}"
        if exc.detail:
            detail = f"{detail}: {exc.detail}"
        raise type(exc)(detail) from exc
    except ValueError as exc:
        raise ValueError(f"failed to validate {name}: {exc}") from exc


class MsgServer:
    """Executes token factory messages against a keeper."""

    def __init__(self, keeper: Keeper) -> None:
        self.keeper = keeper

    def _require_admin(self, ctx: Context, denom: str, sender: str) -> None:
        metadata = self.keeper.get_authority_metadata(ctx, denom)
        if sender != metadata.admin:
            raise UnauthorizedError()

    def create_denom(self, ctx: Context, msg: MsgCreateDenom) -> str:
        """Create a new factory denom and return its full name."""
        _validate(msg, "MsgCreateDenom")
        denom = self.keeper.create_denom(ctx, msg.sender, msg.subdenom)
        ctx.emit(
            Event(
                TYPE_MSG_CREATE_DENOM,
                [(ATTRIBUTE_CREATOR, msg.sender), (ATTRIBUTE_NEW_TOKEN_DENOM, denom)],
            )
        )
        return denom

    def mint(self, ctx: Context, msg: MsgMint) -> None:
        _validate(msg, "MsgMint")
        denom = msg.amount.denom
        if self.keeper.bank_keeper.get_denom_metadata(ctx, denom) is None:
            raise DenomDoesNotExistError(f"denom: {denom}")
        self._require_admin(ctx, denom, msg.sender)

        recipient = msg.mint_to_address or msg.sender
        self.keeper.mint_to(ctx, msg.amount, recipient)
        ctx.emit(
            Event(
                TYPE_MSG_MINT,
                [(ATTRIBUTE_MINT_TO_ADDRESS, msg.sender), (ATTRIBUTE_AMOUNT, str(msg.amount))],
            )
        )

    def burn(self, ctx: Context, msg: MsgBurn) -> None:
        _validate(msg, "MsgBurn")
        self._require_admin(ctx, msg.amount.denom, msg.sender)

        holder = msg.burn_from_address or msg.sender
        # The account is looked up by the address text's own bytes.
        account = self.keeper.account_keeper.get_account(ctx, holder.encode())
        if isinstance(account, ModuleAccount):
            raise BurnFromModuleAccountError()

        self.keeper.burn_from(ctx, msg.amount, holder)
        ctx.emit(
            Event(
                TYPE_MSG_BURN,
                [(ATTRIBUTE_BURN_FROM_ADDRESS, msg.sender), (ATTRIBUTE_AMOUNT, str(msg.amount))],
            )
        )

    def force_transfer(self, ctx: Context, msg: MsgForceTransfer) -> None:
        _validate(msg, "MsgForceTransfer")
        self._require_admin(ctx, msg.amount.denom, msg.sender)

        self.keeper.force_transfer(
            ctx, msg.amount, msg.transfer_from_address, msg.transfer_to_address
        )
        ctx.emit(
            Event(
                TYPE_MSG_FORCE_TRANSFER,
                [
                    (ATTRIBUTE_TRANSFER_FROM_ADDRESS, msg.transfer_from_address),
                    (ATTRIBUTE_TRANSFER_TO_ADDRESS, msg.transfer_to_address),
                    (ATTRIBUTE_AMOUNT, str(msg.amount)),
                ],
            )
        )

    def change_admin(self, ctx: Context, msg: MsgChangeAdmin) -> None:
        _validate(msg, "MsgChangeAdmin")
        metadata = self.keeper.get_authority_metadata(ctx, msg.denom)
        if msg.sender != metadata.admin:
            raise UnauthorizedError(
                f"need: {metadata.admin}, received: {msg.sender}, denom: {msg.denom}"
            )

        self.keeper.set_admin(ctx, msg.denom, msg.new_admin)
        ctx.emit(
            Event(
                TYPE_MSG_CHANGE_ADMIN,
                [(ATTRIBUTE_DENOM, msg.denom), (ATTRIBUTE_NEW_ADMIN, msg.new_admin)],
            )
        )

    def set_denom_metadata(self, ctx: Context, msg: MsgSetDenomMetadata) -> None:
        _validate(msg, "MsgSetDenomMetadata")
        msg.metadata.validate()
        self._require_admin(ctx, msg.metadata.base, msg.sender)

        self.keeper.bank_keeper.set_denom_metadata(ctx, msg.metadata)
        ctx.emit(
            Event(
                TYPE_MSG_SET_DENOM_METADATA,
                [
                    (ATTRIBUTE_DENOM, msg.metadata.base),
                    (ATTRIBUTE_DENOM_METADATA, str(msg.metadata)),
                ],
            )
        )

    def set_before_send_hook(self, ctx: Context, msg: MsgSetBeforeSendHook) -> None:
        _validate(msg, "MsgSetBeforeSendHook")
        self._require_admin(ctx, msg.denom, msg.sender)

        self.keeper.set_before_send_hook(ctx, msg.denom, msg.contract_addr)
        ctx.emit(
            Event(
                TYPE_MSG_SET_BEFORE_SEND_HOOK,
                [
                    (ATTRIBUTE_DENOM, msg.denom),
                    (ATTRIBUTE_BEFORE_SEND_HOOK_ADDRESS, msg.contract_addr),
                ],
            )
        )

    def update_params(self, ctx: Context, msg: MsgUpdateParams) -> None:
        """Replace the module parameters when sent by the module authority."""
        _validate(msg, "MsgUpdateParams")
        authority = self.keeper.authority
        if authority != msg.authority:
            raise InvalidRequestError(
                f"invalid authority; expected {authority}, got {msg.authority}"
            )
        self.keeper.set_params(ctx, msg.params)