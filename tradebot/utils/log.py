"""
Simple colored logger for the bot console output.
"""

from datetime import datetime, timezone

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}
_threshold = _LEVELS["INFO"]


def set_level(name: str | None):
    global _threshold
    _threshold = _LEVELS.get(str(name or "INFO").strip().upper(), _LEVELS["INFO"])


def _ts():
    return datetime.now(timezone.utc).strftime("%H:%M:%S")


def _emit(level: str, color: str, msg: str):
    if _LEVELS[level] < _threshold:
        return
    print(f"\033[{color}m[{_ts()}][{level}]\033[0m {msg}", flush=True)


def log_debug(msg: str):
    _emit("DEBUG", "90", msg)

def log_info(msg: str):
    _emit("INFO", "94", msg)

def log_warn(msg: str):
    _emit("WARN", "93", msg)

def log_error(msg: str):
    _emit("ERROR", "91", msg)
