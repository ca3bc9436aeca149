from __future__ import annotations

import time
from datetime import datetime


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return int(time.time() * 1000)


def from_epoch_ms(value: int) -> datetime:
    """Local datetime for an epoch-millisecond timestamp."""
    return datetime.fromtimestamp(int(value) / 1000)


def format_day(value: int) -> str:
    return from_epoch_ms(value).strftime("%A, %d %B %Y")


def format_time(value: int) -> str:
    return from_epoch_ms(value).strftime("%H:%M")


def format_datetime(value: int) -> str:
    return from_epoch_ms(value).strftime("%Y-%m-%d %H:%M:%S")
