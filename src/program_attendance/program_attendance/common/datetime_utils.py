from __future__ import annotations

from datetime import datetime


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return to_epoch_ms(now_local())


def to_epoch_ms(value: datetime) -> int:
    """Convert a datetime (naive = local time) into Unix milliseconds.

    Whole seconds and the millisecond part are taken separately so the
    result does not pick up float rounding from ``timestamp()``.
    """
    whole = int(value.replace(microsecond=0).timestamp())
    return whole * 1000 + value.microsecond // 1000


def format_iso(value: datetime | None) -> str | None:
    return value.isoformat(timespec="seconds") if value else None
