"""
nad.fun trading client: quote through the Lens, then buy/sell on whichever
router the Lens picked (bonding curve before graduation, DEX router after).
"""
from typing import Optional
from web3 import Web3
from web3.contract.contract import ContractFunction

from tradebot.chain import Chain
from tradebot.models import Quote, BuyParams, SellParams, GasEstimationParams, TradeReceipt
from tradebot.tx_service import TxService
from tradebot.utils.log import log_debug, log_info


def _receipt(res: dict) -> TradeReceipt:
    return TradeReceipt(
        tx_hash=res["tx_hash"],
        status=res.get("status"),
        gas_used=res.get("gas_used"),
        receipt=res.get("receipt"),
    )


class Trade:
    def __init__(self, chain: Chain, private_key: str):
        self.chain = chain
        self.w3 = chain.w3
        self.tx = TxService(self.w3, private_key)

    @classmethod
    def connect(cls, rpc_url: str, private_key: str, lens_addr: str) -> "Trade":
        return cls(Chain.connect(rpc_url, lens_addr), private_key)

    def wallet_address(self) -> str:
        return self.tx.sender_address()

    # ---------- reads ----------

    def get_amount_out(self, token: str, amount_in: int, is_buy: bool = True) -> Quote:
        router, amount_out = self.chain.lens.functions.getAmountOut(
            Web3.to_checksum_address(token), int(amount_in), bool(is_buy)
        ).call()
        if int(router, 16) == 0:
            raise ValueError(f"no router available for token {token}")
        log_debug(f"quote router={router} amount_in={amount_in} amount_out={amount_out} buy={is_buy}")
        return Quote(router=Web3.to_checksum_address(router), amount_out=int(amount_out))

    # ---------- call builders ----------

    def _fn_buy(self, router: str, token: str, amount_out_min: int, to: str, deadline: int) -> ContractFunction:
        return self.chain.router(router).functions.buy((
            int(amount_out_min),
            Web3.to_checksum_address(token),
            Web3.to_checksum_address(to),
            int(deadline),
        ))

    def _fn_sell(self, router: str, token: str, amount_in: int, amount_out_min: int, to: str, deadline: int) -> ContractFunction:
        return self.chain.router(router).functions.sell((
            int(amount_in),
            int(amount_out_min),
            Web3.to_checksum_address(token),
            Web3.to_checksum_address(to),
            int(deadline),
        ))

    # ---------- gas ----------

    def estimate_gas(self, router: str, params: GasEstimationParams) -> int:
        if params.side == "buy":
            fn = self._fn_buy(router, params.token, params.amount_out_min, params.to, params.deadline)
            return self.tx.estimate(fn, value=params.amount_in)
        fn = self._fn_sell(router, params.token, params.amount_in, params.amount_out_min, params.to, params.deadline)
        return self.tx.estimate(fn)

    # ---------- writes ----------

    def buy(self, router: str, params: BuyParams) -> TradeReceipt:
        fn = self._fn_buy(router, params.token, params.amount_out_min, params.to, params.deadline)
        return _receipt(self.tx.send(fn, value=params.amount_in))

    def ensure_allowance(self, token: str, spender: str, amount: int) -> Optional[TradeReceipt]:
        """Approve `spender` for exactly `amount` when the current allowance is short."""
        erc20 = self.chain.erc20(token)
        spender = Web3.to_checksum_address(spender)
        current = int(erc20.functions.allowance(self.wallet_address(), spender).call())
        if current >= int(amount):
            return None
        log_info(f"Approving router {spender} for token {Web3.to_checksum_address(token)}")
        res = self.tx.send(erc20.functions.approve(spender, int(amount)))
        return _receipt(res)

    def sell(self, router: str, params: SellParams) -> TradeReceipt:
        self.ensure_allowance(params.token, router, params.amount_in)
        fn = self._fn_sell(router, params.token, params.amount_in, params.amount_out_min, params.to, params.deadline)
        return _receipt(self.tx.send(fn))


class TokenHelper:
    """ERC-20 reads against the same RPC as the trading client."""

    def __init__(self, chain: Chain):
        self.chain = chain

    def balance_of(self, token: str, owner: str) -> int:
        return int(self.chain.erc20(token).functions.balanceOf(Web3.to_checksum_address(owner)).call())
