import pytest
from unittest.mock import MagicMock
from eth_account import Account
from web3 import Web3

from tradebot.config import Settings
from tradebot.models import Quote, TradeReceipt

PRIVATE_KEY = "0x" + "11" * 32
SIGNER = Account.from_key(PRIVATE_KEY).address
TOKEN = Web3.to_checksum_address("0x" + "ab" * 20)
ROUTER = Web3.to_checksum_address("0x" + "cd" * 20)
OTHER = Web3.to_checksum_address("0x" + "ef" * 20)
LENS = Web3.to_checksum_address("0x" + "12" * 20)

ENV_VARS = (
    "RPC_URL", "PRIVATE_KEY", "TOKEN_ADDRESS", "AMOUNT_IN_MON", "RECIPIENT_ADDRESS",
    "SLIPPAGE_BPS", "DEADLINE_SECS", "SETTLEMENT_WAIT_SECS", "NADFUN_LENS_ADDRESS", "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def base_env(clean_env):
    clean_env.setenv("RPC_URL", "http://127.0.0.1:8545")
    clean_env.setenv("PRIVATE_KEY", PRIVATE_KEY)
    clean_env.setenv("TOKEN_ADDRESS", TOKEN.lower())
    return clean_env


@pytest.fixture
def settings():
    return Settings(
        rpc_url="http://127.0.0.1:8545",
        private_key=PRIVATE_KEY,
        token=TOKEN,
        amount_in=10**17,
        slippage_bps=100,
        recipient=None,
        deadline_secs=600,
        settlement_wait_secs=30,
        lens=LENS,
    )


@pytest.fixture
def mock_trade():
    trade = MagicMock()
    trade.wallet_address.return_value = SIGNER
    trade.get_amount_out.return_value = Quote(router=ROUTER, amount_out=2 * 10**18)
    trade.estimate_gas.return_value = 210_000
    trade.buy.return_value = TradeReceipt(tx_hash="0x" + "aa" * 32, status=1)
    trade.sell.return_value = TradeReceipt(tx_hash="0x" + "bb" * 32, status=1)
    return trade


@pytest.fixture
def mock_helper():
    helper = MagicMock()
    helper.balance_of.return_value = 1_980_000_000_000_000_000
    return helper
