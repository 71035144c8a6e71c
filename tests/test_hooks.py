import json

import pytest

from tokenfactory.addresses import acc_address_from_bech32, module_address, sample_acc_address
from tokenfactory.denoms import Coin
from tokenfactory.errors import TokenFactoryError, TrackBeforeSendOutOfGasError
from tokenfactory.hooks import (
    BeforeSendHooks,
    block_before_send_msg,
    call_before_send_listener,
    cw_coin_from_sdk_coin,
    track_before_send_msg,
)
from tokenfactory.keeper import Context, Keeper
from tokenfactory.keys import TRACK_BEFORE_SEND_GAS_LIMIT


class _Account:
    def __init__(self, address):
        self.address = address


class _Accounts:
    def get_account(self, ctx, addr):
        return None

    def get_module_account(self, ctx, name):
        return _Account(module_address(name))


class _Bank:
    def __init__(self):
        self.metadata = {}

    def get_denom_metadata(self, ctx, denom):
        return self.metadata.get(denom)

    def set_denom_metadata(self, ctx, metadata):
        self.metadata[metadata.base] = metadata

    def has_supply(self, ctx, denom):
        return False


class _Wasm:
    def __init__(self, behaviour=None):
        self.calls = []
        self.behaviour = behaviour

    def sudo(self, ctx, contract, msg):
        self.calls.append((ctx, contract, msg))
        if self.behaviour is not None:
            self.behaviour(ctx)
        return b""

    def get_contract_info(self, ctx, contract):
        return None


def _setup(behaviour=None):
    wasm = _Wasm(behaviour)
    keeper = Keeper(["tokenfactory"], _Accounts(), _Bank(), wasm, "")
    ctx = Context()
    creator = sample_acc_address()
    denom = keeper.create_denom(ctx, creator, "hooked")
    contract = sample_acc_address()
    keeper.set_before_send_hook(ctx, denom, contract)
    return keeper, ctx, wasm, denom, contract


def test_cw_coin_from_sdk_coin():
    assert cw_coin_from_sdk_coin(Coin("uom", 5)) == {"denom": "uom", "amount": "5"}


def test_block_msg_shape():
    sender = acc_address_from_bech32(sample_acc_address())
    recipient = acc_address_from_bech32(sample_acc_address())
    raw = block_before_send_msg(sender, recipient, Coin("uom", 7))
    assert raw.startswith(b'{"block_before_send":{"from":')
    body = json.loads(raw)["block_before_send"]
    assert body["amount"] == {"denom": "uom", "amount": "7"}
    assert acc_address_from_bech32(body["from"]) == sender
    assert acc_address_from_bech32(body["to"]) == recipient


def test_track_msg_shape():
    sender = acc_address_from_bech32(sample_acc_address())
    raw = track_before_send_msg(sender, b"", Coin("uom", 3))
    body = json.loads(raw)["track_before_send"]
    assert body["to"] == ""
    assert list(body) == ["from", "to", "amount"]


def test_no_hook_means_no_call():
    keeper, ctx, wasm, _, _ = _setup()
    call_before_send_listener(keeper, ctx, b"\x01", b"\x02", [Coin("uom", 1)], True)
    assert wasm.calls == []


def test_block_calls_contract():
    keeper, ctx, wasm, denom, contract = _setup()
    call_before_send_listener(keeper, ctx, b"\x01", b"\x02", [Coin(denom, 4)], True)
    assert len(wasm.calls) == 1
    _, addr, msg = wasm.calls[0]
    assert addr == acc_address_from_bech32(contract)
    assert "block_before_send" in json.loads(msg)


def test_block_error_is_wrapped():
    def refuse(ctx):
        raise RuntimeError("refused")

    keeper, ctx, _, denom, _ = _setup(refuse)
    with pytest.raises(TokenFactoryError, match="failed to call before send hook for denom"):
        BeforeSendHooks(keeper).block_before_send(ctx, b"\x01", b"\x02", [Coin(denom, 1)])


def test_track_charges_child_gas_to_parent():
    keeper, ctx, wasm, denom, _ = _setup(lambda c: c.gas_meter.consume_gas(500, "work"))
    before = ctx.gas_meter.consumed
    call_before_send_listener(keeper, ctx, b"\x01", b"\x02", [Coin(denom, 1)], False)
    assert ctx.gas_meter.consumed - before == 500
    child_ctx = wasm.calls[0][0]
    assert child_ctx.gas_meter.limit == TRACK_BEFORE_SEND_GAS_LIMIT


def test_track_out_of_gas():
    keeper, ctx, _, denom, _ = _setup(
        lambda c: c.gas_meter.consume_gas(TRACK_BEFORE_SEND_GAS_LIMIT + 1, "loop")
    )
    with pytest.raises(TrackBeforeSendOutOfGasError):
        call_before_send_listener(keeper, ctx, b"\x01", b"\x02", [Coin(denom, 1)], False)


def test_track_hook_swallows_errors():
    def refuse(ctx):
        raise RuntimeError("refused")

    keeper, ctx, wasm, denom, _ = _setup(refuse)
    result = BeforeSendHooks(keeper).track_before_send(ctx, b"\x01", b"\x02", [Coin(denom, 1)])
    assert result is None
    assert len(wasm.calls) == 1