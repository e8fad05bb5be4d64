class TradeBotError(Exception):
    """Base class for every failure the round-trip reports before exiting."""


class ConfigError(TradeBotError):
    """Raised at startup when an environment variable is missing or malformed."""


class StepError(TradeBotError):
    """
    A pipeline stage failed. The message is prefixed with the stage label
    and the original exception is chained as __cause__.
    """
    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"{stage}: {cause}")
        self.stage = stage
        self.cause = cause


class ZeroBalanceError(TradeBotError):
    """Raised when the recipient holds no tokens after the buy settled."""


class TransactionRevertedError(TradeBotError):
    """
    Raised when the tx was actually sent on-chain, mined, and status == 0.
    Gas was ALREADY paid, the chain executed and reverted.
    """
    def __init__(self, tx_hash: str, receipt: dict, msg: str):
        super().__init__(f"{msg} (tx={tx_hash})")
        self.tx_hash = tx_hash
        self.receipt = receipt
        self.msg = msg
