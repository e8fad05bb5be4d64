import re
from decimal import Decimal, getcontext

# uint256 needs 78 significant digits
getcontext().prec = 80

BPS_DENOMINATOR = 10_000
UINT256_MAX = (1 << 256) - 1

# plain ASCII numeral: no sign, exponent, underscores or bare leading/trailing dot
_NUMERAL = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def parse_units(value: str, decimals: int = 18) -> int:
    """
    Convert a human decimal string ("0.1") into a fixed-point integer
    with `decimals` places. Only plain numerals like "2" or "0.25" are
    accepted; values with more fractional digits than `decimals` and
    anything above uint256 are rejected.
    """
    text = str(value).strip()
    if not _NUMERAL.fullmatch(text):
        raise ValueError(f"not a decimal number: {value!r}")

    whole, _, frac = text.partition(".")
    if len(frac) > decimals:
        raise ValueError(f"more than {decimals} decimal places: {value!r}")
    raw = int(whole) * 10**decimals + int(frac.ljust(decimals, "0") or "0")
    if raw > UINT256_MAX:
        raise ValueError(f"amount does not fit in uint256: {value!r}")
    return raw


def format_units(raw: int, decimals: int = 18) -> str:
    """Render a fixed-point integer as a plain decimal string ("1.98", "2.0")."""
    text = format(Decimal(int(raw)).scaleb(-decimals), "f")
    if "." not in text:
        return text + ".0"
    text = text.rstrip("0")
    return text + "0" if text.endswith(".") else text


def apply_slippage(amount: int, slippage_bps: int) -> int:
    bps = int(slippage_bps)
    if not 0 <= bps <= BPS_DENOMINATOR:
        raise ValueError(f"slippage_bps must be within [0, {BPS_DENOMINATOR}], got {bps}")
    return int(amount) * (BPS_DENOMINATOR - bps) // BPS_DENOMINATOR
