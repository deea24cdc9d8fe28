from __future__ import annotations


def percent(part: int, whole: int) -> int:
    """Integer percentage of ``part / whole``, rounded half-up; 0 when whole is 0.

    Exact integer arithmetic: floor(100 * part / whole + 1/2).
    """
    if whole <= 0:
        return 0
    return (200 * int(part) + int(whole)) // (2 * int(whole))


def round_half_up_div(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) with halves rounded up, for non-negative values."""
    return (2 * int(numerator) + int(denominator)) // (2 * int(denominator))
