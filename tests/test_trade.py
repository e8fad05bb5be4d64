import pytest
from unittest.mock import MagicMock, patch

from tradebot.models import BuyParams, SellParams, GasEstimationParams, Quote
from tradebot.trade import Trade, TokenHelper
from tests.conftest import PRIVATE_KEY, SIGNER, TOKEN, ROUTER, OTHER

SENT = {"tx_hash": "0x" + "aa" * 32, "status": 1, "gas_used": 120_000, "receipt": {"status": 1}}


@pytest.fixture
def chain():
    return MagicMock()


@pytest.fixture
def trade(chain):
    t = Trade(chain, PRIVATE_KEY)
    t.tx = MagicMock()
    t.tx.sender_address.return_value = SIGNER
    t.tx.send.return_value = SENT
    return t


def test_wallet_address_derives_from_key(chain):
    assert Trade(chain, PRIVATE_KEY).wallet_address() == SIGNER


def test_connect_builds_chain_from_rpc():
    with patch("tradebot.trade.Chain") as chain_cls:
        t = Trade.connect("http://rpc", PRIVATE_KEY, OTHER)
    chain_cls.connect.assert_called_once_with("http://rpc", OTHER)
    assert t.chain is chain_cls.connect.return_value


def test_get_amount_out_returns_router_and_amount(trade, chain):
    chain.lens.functions.getAmountOut.return_value.call.return_value = (ROUTER.lower(), 2 * 10**18)

    quote = trade.get_amount_out(TOKEN, 10**17, True)

    assert quote == Quote(router=ROUTER, amount_out=2 * 10**18)
    chain.lens.functions.getAmountOut.assert_called_once_with(TOKEN, 10**17, True)


def test_get_amount_out_rejects_zero_router(trade, chain):
    chain.lens.functions.getAmountOut.return_value.call.return_value = ("0x" + "00" * 20, 0)
    with pytest.raises(ValueError, match="no router"):
        trade.get_amount_out(TOKEN, 10**17)


def test_buy_sends_value_and_tuple_params(trade, chain):
    receipt = trade.buy(ROUTER, BuyParams(
        token=TOKEN, amount_in=10**17, amount_out_min=5, to=OTHER, deadline=1_600,
    ))

    chain.router.assert_called_with(ROUTER)
    chain.router.return_value.functions.buy.assert_called_once_with((5, TOKEN, OTHER, 1_600))
    fn = chain.router.return_value.functions.buy.return_value
    trade.tx.send.assert_called_once_with(fn, value=10**17)
    assert receipt.tx_hash == SENT["tx_hash"]
    assert receipt.gas_used == 120_000


def test_estimate_gas_buy_uses_amount_as_value(trade, chain):
    trade.tx.estimate.return_value = 150_000
    gas = trade.estimate_gas(ROUTER, GasEstimationParams(
        side="buy", token=TOKEN, amount_in=10**17, amount_out_min=5, to=SIGNER, deadline=1_600,
    ))
    assert gas == 150_000
    fn = chain.router.return_value.functions.buy.return_value
    trade.tx.estimate.assert_called_once_with(fn, value=10**17)


def test_estimate_gas_sell(trade, chain):
    trade.tx.estimate.return_value = 90_000
    gas = trade.estimate_gas(ROUTER, GasEstimationParams(
        side="sell", token=TOKEN, amount_in=7, amount_out_min=0, to=SIGNER, deadline=1_600,
    ))
    assert gas == 90_000
    chain.router.return_value.functions.sell.assert_called_once_with((7, 0, TOKEN, SIGNER, 1_600))


def test_sell_approves_when_allowance_is_short(trade, chain):
    erc20 = chain.erc20.return_value
    erc20.functions.allowance.return_value.call.return_value = 0

    receipt = trade.sell(ROUTER, SellParams(
        token=TOKEN, amount_in=1_980, amount_out_min=0, to=SIGNER, deadline=1_600,
    ))

    erc20.functions.allowance.assert_called_once_with(SIGNER, ROUTER)
    erc20.functions.approve.assert_called_once_with(ROUTER, 1_980)
    chain.router.return_value.functions.sell.assert_called_once_with((1_980, 0, TOKEN, SIGNER, 1_600))
    assert trade.tx.send.call_count == 2
    approve_call, sell_call = trade.tx.send.call_args_list
    assert approve_call.args[0] is erc20.functions.approve.return_value
    assert sell_call.args[0] is chain.router.return_value.functions.sell.return_value
    assert receipt.tx_hash == SENT["tx_hash"]


def test_sell_skips_approve_with_enough_allowance(trade, chain):
    erc20 = chain.erc20.return_value
    erc20.functions.allowance.return_value.call.return_value = 10**30

    trade.sell(ROUTER, SellParams(
        token=TOKEN, amount_in=1_980, amount_out_min=0, to=SIGNER, deadline=1_600,
    ))

    erc20.functions.approve.assert_not_called()
    trade.tx.send.assert_called_once()


def test_token_helper_balance_of(chain):
    chain.erc20.return_value.functions.balanceOf.return_value.call.return_value = 42

    assert TokenHelper(chain).balance_of(TOKEN, OTHER.lower()) == 42
    chain.erc20.assert_called_once_with(TOKEN)
    chain.erc20.return_value.functions.balanceOf.assert_called_once_with(OTHER)
