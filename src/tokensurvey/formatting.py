"""Human-readable rendering of sizes and counts."""

from __future__ import annotations

import math

BYTE_UNITS: tuple[str, ...] = ("Bytes", "KB", "MB", "GB", "TB")


def format_bytes(n: int, decimals: int = 2) -> str:
    """Render a byte count using base-1024 units.

    Parameters
    ----------
    n
        Non-negative byte count.
    decimals
        Maximum digits after the decimal point. Trailing zeros are dropped,
        so ``1024`` renders as ``"1 KB"`` and ``1536`` as ``"1.5 KB"``.

    Returns
    -------
    str
        The scaled value followed by its unit.

    Raises
    ------
    ValueError
        If ``n`` is negative.
    """
    if n < 0:
        raise ValueError(f"Byte count must be non-negative: {n}")
    if n == 0:
        return "0 Bytes"

    dm = max(decimals, 0)
    i = min(int(math.floor(math.log(n) / math.log(1024))), len(BYTE_UNITS) - 1)
    # log() can land just under an exact power of 1024.
    if i < len(BYTE_UNITS) - 1 and n >= 1024 ** (i + 1):
        i += 1
    value = round(n / 1024**i, dm)
    return f"{_trim(value, dm)} {BYTE_UNITS[i]}"


def round_half_up(x: float) -> int:
    """Round to the nearest integer with halves going up, so 2.5 becomes 3."""
    return math.floor(x + 0.5)


def format_int(n: int | float) -> str:
    """Render a count with thousands separators, rounding halves up."""
    return f"{round_half_up(n):,}"


def percent(part: int, whole: int) -> int:
    """Integer percentage of ``part`` in ``whole`` (0 when ``whole`` is 0)."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def _trim(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
