"""Before-send hooks that call a denom's registered contract."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from .addresses import acc_address_from_bech32, address_to_bech32
from .denoms import Coin
from .errors import TokenFactoryError, TrackBeforeSendOutOfGasError
from .keeper import Context, GasMeter, Keeper, OutOfGasError
from .keys import TRACK_BEFORE_SEND_GAS_LIMIT


def cw_coin_from_sdk_coin(coin: Coin) -> dict[str, str]:
    """The coin in the shape a contract expects: denom and a string amount."""
    return {"denom": coin.denom, "amount": str(coin.amount)}


def _address_text(raw: bytes) -> str:
    return address_to_bech32(raw) if raw else ""


def _sudo_msg(kind: str, sender: bytes, recipient: bytes, coin: Coin) -> bytes:
    body: dict[str, Any] = {
        "from": _address_text(sender),
        "to": _address_text(recipient),
        "amount": cw_coin_from_sdk_coin(coin),
    }
    return json.dumps({kind: body}, separators=(",", ":")).encode()


def block_before_send_msg(sender: bytes, recipient: bytes, coin: Coin) -> bytes:
    """JSON sudo message asking the contract whether a send may go ahead."""
    return _sudo_msg("block_before_send", sender, recipient, coin)


def track_before_send_msg(sender: bytes, recipient: bytes, coin: Coin) -> bytes:
    """JSON sudo message telling the contract that a send is about to happen."""
    return _sudo_msg("track_before_send", sender, recipient, coin)


def call_before_send_listener(
    keeper: Keeper,
    ctx: Context,
    sender: bytes,
    recipient: bytes,
    amount: Sequence[Coin],
    block_before_send: bool,
) -> None:
    """Send a sudo message to the hook contract of every coin that has one.

    Tracking calls run under a separate gas meter capped at the tracking
    limit; the gas they use is then charged to the caller's meter.
    """
    try:
        for coin in amount:
            contract_addr = keeper.get_before_send_hook(ctx, coin.denom)
            if not contract_addr:
                continue
            cw_addr = acc_address_from_bech32(contract_addr)
            if keeper.contract_keeper is None:
                raise TokenFactoryError("no contract keeper is set")

            if block_before_send:
                msg = block_before_send_msg(sender, recipient, coin)
                _sudo(keeper, ctx, cw_addr, msg, coin.denom)
            else:
                msg = track_before_send_msg(sender, recipient, coin)
                child = ctx.with_gas_meter(GasMeter(limit=TRACK_BEFORE_SEND_GAS_LIMIT))
                _sudo(keeper, child, cw_addr, msg, coin.denom)
                ctx.gas_meter.consume_gas(child.gas_meter.consumed, "track before send gas")
    except OutOfGasError as exc:
        raise TrackBeforeSendOutOfGasError() from exc


def _sudo(keeper: Keeper, ctx: Context, contract: bytes, msg: bytes, denom: str) -> None:
    try:
        keeper.contract_keeper.sudo(ctx, contract, msg)
    except OutOfGasError:
        raise
    except Exception as exc:
        raise TokenFactoryError(
            f"failed to call before send hook for denom {denom}: {exc}"
        ) from exc


class BeforeSendHooks:
    """Bank hooks backed by a token factory keeper."""

    def __init__(self, keeper: Keeper) -> None:
        self.keeper = keeper

    def track_before_send(
        self, ctx: Context, sender: bytes, recipient: bytes, amount: Sequence[Coin]
    ) -> None:
        """Notify hook contracts; any failure is ignored."""
        try:
            call_before_send_listener(self.keeper, ctx, sender, recipient, amount, False)
        except TokenFactoryError:
            pass

    def block_before_send(
        self, ctx: Context, sender: bytes, recipient: bytes, amount: Sequence[Coin]
    ) -> None:
        """Ask hook contracts for permission; a refusal is raised."""
        call_before_send_listener(self.keeper, ctx, sender, recipient, amount, True)