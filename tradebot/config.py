# tradebot/config.py
import os
import re
import time
from dataclasses import dataclass
from dotenv import load_dotenv
from web3 import Web3

from tradebot.exceptions import ConfigError
from tradebot.utils.amounts import parse_units, BPS_DENOMINATOR

load_dotenv()

# nad.fun Lens on Monad mainnet; override with NADFUN_LENS_ADDRESS for testnet
DEFAULT_LENS_ADDRESS = "0x7e78A8DE94f21804F7a17F4E8BF9EC2c872187ea"

DEFAULT_AMOUNT_IN = "0.1"
DEFAULT_SLIPPAGE_BPS = 100     # 1%
DEFAULT_DEADLINE_SECS = 600
DEFAULT_SETTLEMENT_WAIT_SECS = 30


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    private_key: str                     # normalized 0x + 64 hex, never logged
    token: str                           # checksum address

    # --- Trade sizing ---
    amount_in: int                       # MON in wei (18 decimals)
    slippage_bps: int                    # applied to the buy quote only
    recipient: str | None                # None -> signer's own address

    # --- Timing ---
    deadline_secs: int                   # added to "now" once, at startup
    settlement_wait_secs: int            # sleep between buy and balance read

    # --- Contracts / output ---
    lens: str = DEFAULT_LENS_ADDRESS
    log_level: str = "INFO"

    def deadline(self, now: float | None = None) -> int:
        base = int(time.time() if now is None else now)
        return base + int(self.deadline_secs)

    def __repr__(self) -> str:
        return (
            f"Settings(rpc_url={self.rpc_url!r}, token={self.token!r}, amount_in={self.amount_in}, "
            f"slippage_bps={self.slippage_bps}, recipient={self.recipient!r}, "
            f"deadline_secs={self.deadline_secs}, settlement_wait_secs={self.settlement_wait_secs})"
        )


def normalize_pk(raw: str | None) -> str:
    """
    Normalize a private key string:
    - strip whitespace and surrounding quotes
    - accept with or without 0x
    - validate 64 hex chars
    Return lowercase '0x' + 64 hex.
    """
    if not raw:
        raise ConfigError("PRIVATE_KEY missing")

    pk = raw.strip()

    # strip accidental quotes
    if (pk.startswith('"') and pk.endswith('"')) or (pk.startswith("'") and pk.endswith("'")):
        pk = pk[1:-1].strip()

    body = pk[2:] if pk.lower().startswith("0x") else pk
    if not re.fullmatch(r"[0-9a-fA-F]{64}", body):
        raise ConfigError("invalid PRIVATE_KEY: expected 64 hex chars (with or without 0x)")

    return "0x" + body.lower()


def _get(name: str) -> str | None:
    val = os.environ.get(name)
    if val is None or not val.strip():
        return None
    return val.strip()


def _required(name: str) -> str:
    val = _get(name)
    if val is None:
        raise ConfigError(f"{name} missing")
    return val


def _address(name: str, raw: str) -> str:
    if not Web3.is_address(raw):
        raise ConfigError(f"invalid {name}: {raw!r} is not a 20-byte hex address")
    return Web3.to_checksum_address(raw)


def _uint(name: str, default: int, upper: int | None = None) -> int:
    raw = _get(name)
    if raw is None:
        return default
    if not re.fullmatch(r"[0-9]+", raw):
        raise ConfigError(f"invalid {name}: {raw!r} is not a non-negative integer")
    val = int(raw)
    if upper is not None and val > upper:
        raise ConfigError(f"invalid {name}: {val} must be within [0, {upper}]")
    return val


def get_settings() -> Settings:
    rpc_url = _required("RPC_URL")
    private_key = normalize_pk(_get("PRIVATE_KEY"))
    token = _address("TOKEN_ADDRESS", _required("TOKEN_ADDRESS"))

    amount_raw = _get("AMOUNT_IN_MON") or DEFAULT_AMOUNT_IN
    try:
        amount_in = parse_units(amount_raw, 18)
    except ValueError as e:
        raise ConfigError(f"invalid AMOUNT_IN_MON: {e}") from e

    recipient_raw = _get("RECIPIENT_ADDRESS")
    recipient = _address("RECIPIENT_ADDRESS", recipient_raw) if recipient_raw else None

    lens_raw = _get("NADFUN_LENS_ADDRESS")
    lens = _address("NADFUN_LENS_ADDRESS", lens_raw) if lens_raw else DEFAULT_LENS_ADDRESS

    return Settings(
        rpc_url=rpc_url,
        private_key=private_key,
        token=token,
        amount_in=amount_in,
        slippage_bps=_uint("SLIPPAGE_BPS", DEFAULT_SLIPPAGE_BPS, upper=BPS_DENOMINATOR),
        recipient=recipient,
        deadline_secs=_uint("DEADLINE_SECS", DEFAULT_DEADLINE_SECS),
        settlement_wait_secs=_uint("SETTLEMENT_WAIT_SECS", DEFAULT_SETTLEMENT_WAIT_SECS),
        lens=lens,
        log_level=_get("LOG_LEVEL") or "INFO",
    )
