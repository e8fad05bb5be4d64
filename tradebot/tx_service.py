from web3 import Web3
from web3.contract.contract import ContractFunction
from eth_account import Account

from tradebot.exceptions import TransactionRevertedError
from tradebot.utils.log import log_debug
from tradebot.utils.serialize import to_json_safe


class TxService:
    """
    Transaction sender for router / token calls.

    Responsibilities:
    - Build, sign and broadcast contract calls from the configured key.
    - Pad the node gas estimate with a safety buffer.
    - Wait for the receipt and raise on status == 0.
    """

    def __init__(self, w3: Web3, private_key: str):
        self.w3 = w3
        self.pk = private_key
        self.account = Account.from_key(self.pk)

    def sender_address(self) -> str:
        return self.account.address

    # ---------- internal helpers ----------

    def _next_nonce(self) -> int:
        return self.w3.eth.get_transaction_count(self.account.address)

    def _buffered_gas(self, tx: dict) -> int:
        """
        Calls estimateGas(tx) and pads it (x1.25 + 10k).
        A failing estimate means the call would revert, so it propagates.
        """
        base_estimate = int(self.w3.eth.estimate_gas(tx))
        return int(base_estimate * 1.25) + 10_000

    def _finalize_fee_fields(self, tx: dict) -> dict:
        """
        If build_transaction didn't fill EIP-1559 style fields, fallback to legacy gasPrice.
        """
        if "maxFeePerGas" in tx or "maxPriorityFeePerGas" in tx:
            return tx
        if "gasPrice" not in tx:
            tx["gasPrice"] = self.w3.eth.gas_price
        return tx

    def _build_tx_dict(self, fn: ContractFunction, value_wei: int) -> dict:
        """
        Builds the bare transaction dict with from/nonce/value; gas is set afterwards.
        """
        base_tx = {
            "from":  self.account.address,
            "nonce": self._next_nonce(),
            "value": int(value_wei or 0),
        }
        return fn.build_transaction(base_tx)

    def _sign_and_send(self, tx: dict) -> str:
        signed = self.w3.eth.account.sign_transaction(tx, self.pk)
        txh = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(txh)

    def _wait_receipt(self, tx_hash: str) -> dict:
        rcpt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        return dict(rcpt)

    # ---------- public API ----------

    def estimate(self, fn: ContractFunction, *, value: int = 0) -> int:
        """Raw node estimate (no padding) for calling `fn` from the sender."""
        return int(fn.estimate_gas({"from": self.account.address, "value": int(value or 0)}))

    def send(self, fn: ContractFunction, *, value: int = 0) -> dict:
        """
        Broadcasts a state-changing transaction for a given contract function
        and blocks until it is mined.

        Args:
            fn: Already-parameterized ContractFunction from web3.py
            value: native value (wei) to send along with the call

        Returns:
            {
              "tx_hash": "0x..",
              "receipt": {...},
              "status": 1,
              "gas_used": int,
              "gas_limit_used": int,
              "gas_price_wei": int|None,   # None when EIP-1559 fields are used
            }

        Raises:
            TransactionRevertedError: mined with status == 0.
        """
        # 1) Build base tx, then pad the gas limit
        tx = self._build_tx_dict(fn, value_wei=value)
        gas_limit = self._buffered_gas(tx)
        tx["gas"] = gas_limit

        # 2) gasPrice / EIP-1559 fee fields
        tx = self._finalize_fee_fields(tx)

        # 3) Broadcast
        tx_hash = self._sign_and_send(tx)
        log_debug(f"broadcast tx={tx_hash} nonce={tx['nonce']} gas={gas_limit}")

        # 4) Wait for mining
        rcpt = to_json_safe(self._wait_receipt(tx_hash))
        status = int(rcpt.get("status", 0))

        if status == 0:
            raise TransactionRevertedError(
                tx_hash=tx_hash,
                receipt=rcpt,
                msg="Transaction reverted (status=0). Possibly out-of-gas, expired deadline or slippage guard",
            )

        return {
            "tx_hash": tx_hash,
            "receipt": rcpt,
            "status": status,
            "gas_used": int(rcpt.get("gasUsed") or 0),
            "gas_limit_used": gas_limit,
            "gas_price_wei": tx.get("gasPrice"),
        }
