from __future__ import annotations

"""
Size Formatting Service.

Maps a byte count to the fixed-width column printed in front of every
report line. Unit scaling uses decimal (SI) steps and truncating division,
so 1,999,999 bytes reads as "1M", never "2M".
"""

from typing import Tuple

PLAIN_WIDTH: int = 12
UNITLESS_WIDTH: int = 6
SCALED_WIDTH: int = 5

# Largest scale first; anything at or beyond 10^12 stays in terabytes.
_UNITS: Tuple[Tuple[int, str], ...] = (
    (1_000_000_000_000, "T"),
    (1_000_000_000, "G"),
    (1_000_000, "M"),
    (1_000, "K"),
)


def format_size(size: int, human_readable: bool) -> str:
    """
    Render a byte count as a right-justified, fixed-width column.

    Args:
        size: Non-negative byte count.
        human_readable: If False, print all digits padded to width 12.
                        If True, scale to K/M/G/T (width 5 plus the suffix),
                        or width 6 without suffix below 1,000.

    Returns:
        str: The formatted column.
    """
    if not human_readable:
        return f"{size:>{PLAIN_WIDTH}}"

    for scale, suffix in _UNITS:
        if size >= scale:
            return f"{size // scale:>{SCALED_WIDTH}}{suffix}"

    return f"{size:>{UNITLESS_WIDTH}}"
