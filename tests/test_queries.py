from tokenfactory.addresses import module_address, sample_acc_address
from tokenfactory.denoms import Coin
from tokenfactory.keeper import Context, Keeper
from tokenfactory.params import Params
from tokenfactory.queries import QueryServer


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


def _server():
    keeper = Keeper([], _Accounts(), _Bank())
    return keeper, QueryServer(keeper), Context()


def test_params_default_and_updated():
    keeper, server, ctx = _server()
    assert server.params(ctx) == Params()
    collector = sample_acc_address()
    params = Params([Coin("uom", 10)], 50, collector)
    keeper.set_params(ctx, params)
    assert server.params(ctx) == params


def test_authority_metadata_and_denoms():
    keeper, server, ctx = _server()
    creator = sample_acc_address()
    denom = keeper.create_denom(ctx, creator, "gold")
    assert server.denom_authority_metadata(ctx, creator, "gold").admin == creator
    assert server.denoms_from_creator(ctx, creator) == [denom]
    assert server.denoms_from_creator(ctx, sample_acc_address()) == []


def test_before_send_hook_address():
    keeper, server, ctx = _server()
    creator = sample_acc_address()
    denom = keeper.create_denom(ctx, creator, "silver")
    assert server.before_send_hook_address(ctx, creator, "silver") == ""
    contract = sample_acc_address()
    keeper.set_before_send_hook(ctx, denom, contract)
    assert server.before_send_hook_address(ctx, creator, "silver") == contract