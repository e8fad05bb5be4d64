"""
Round trip on nad.fun: quote, buy, wait for settlement, sell the whole balance.

Flow:
  config -> clients -> quote -> slippage -> gas estimate -> buy
  -> settlement wait -> balance check -> sell

Every stage failure is reported with its stage label and the process exits 1.
Nothing is retried; a rerun starts a fresh buy.
"""
import argparse
import os
import time
from contextlib import contextmanager
from typing import Callable, Optional
from dotenv import load_dotenv

from tradebot.config import Settings, get_settings
from tradebot.exceptions import TradeBotError, StepError, ZeroBalanceError, ConfigError
from tradebot.models import BuyParams, SellParams, GasEstimationParams, TradeReceipt
from tradebot.trade import Trade, TokenHelper
from tradebot.utils.amounts import apply_slippage, format_units
from tradebot.utils.log import log_info, log_warn, log_error, log_debug, set_level


@contextmanager
def step(stage: str):
    """Re-raise anything from inside the block as StepError(stage)."""
    try:
        yield
    except StepError:
        raise
    except Exception as e:
        raise StepError(stage, e) from e


def run(
    s: Settings,
    trade: Trade,
    token_helper: TokenHelper,
    *,
    sleep: Callable[[float], None] = time.sleep,
    dry_run: bool = False,
) -> Optional[TradeReceipt]:
    """Execute the buy/sell pipeline. Returns the sell receipt (None on dry-run)."""
    signer = trade.wallet_address()
    recipient = s.recipient or signer
    if recipient != signer:
        # the sell spends the signer's tokens, not the recipient's
        log_warn(
            f"Recipient {recipient} differs from signer {signer}: bought tokens land in the "
            f"recipient wallet, so the sell from {signer} reverts unless the signer already holds them."
        )
    # computed once; the same deadline is reused for the sell
    deadline = s.deadline()
    log_debug(f"recipient={recipient} deadline={deadline}")

    log_info(f"Preparing buy for token {s.token} with {format_units(s.amount_in)} MON")

    with step("failed to query quote"):
        quote = trade.get_amount_out(s.token, s.amount_in, True)

    amount_out_min = apply_slippage(quote.amount_out, s.slippage_bps)
    log_debug(
        f"router={quote.router} quoted_out={quote.amount_out} "
        f"amount_out_min={amount_out_min} slippage_bps={s.slippage_bps}"
    )

    with step("failed to estimate buy gas"):
        buy_gas = trade.estimate_gas(quote.router, GasEstimationParams(
            side="buy",
            token=s.token,
            amount_in=s.amount_in,
            amount_out_min=amount_out_min,
            to=recipient,
            deadline=deadline,
        ))

    log_info(f"Estimated buy gas: {buy_gas}")

    if dry_run:
        log_warn(
            f"Dry-run only, no transaction sent. Would buy >= {format_units(amount_out_min)} tokens "
            f"via router {quote.router}."
        )
        return None

    with step("buy transaction failed"):
        buy_receipt = trade.buy(quote.router, BuyParams(
            token=s.token,
            amount_in=s.amount_in,
            amount_out_min=amount_out_min,
            to=recipient,
            deadline=deadline,
        ))

    log_info(f"Buy submitted: {buy_receipt.tx_hash}")

    sleep(s.settlement_wait_secs)

    with step("failed to fetch wallet balance"):
        balance = token_helper.balance_of(s.token, recipient)

    if balance == 0:
        raise ZeroBalanceError("no balance available to sell")

    log_info(f"Selling {format_units(balance)} tokens from {recipient}")

    # whole balance, no minimum out
    with step("sell transaction failed"):
        sell_receipt = trade.sell(quote.router, SellParams(
            token=s.token,
            amount_in=balance,
            amount_out_min=0,
            to=recipient,
            deadline=deadline,
        ))

    log_info(f"Sell submitted: {sell_receipt.tx_hash}")
    return sell_receipt


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Buy a nad.fun token with MON, then sell the whole balance.")
    parser.add_argument("--env-file", type=str, help="Load variables from this .env file (overrides the process env).")
    parser.add_argument("--dry-run", action="store_true", help="Quote and estimate gas only; send nothing.")
    args = parser.parse_args(argv)

    try:
        if args.env_file:
            if not os.path.isfile(args.env_file):
                raise ConfigError(f"env file not found: {args.env_file}")
            load_dotenv(args.env_file, override=True)

        s = get_settings()
        set_level(s.log_level)

        with step("failed to initialize Trade client"):
            trade = Trade.connect(s.rpc_url, s.private_key, s.lens)
            token_helper = TokenHelper(trade.chain)

        run(s, trade, token_helper, dry_run=args.dry_run)
    except TradeBotError as e:
        log_error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
