"""
Utility functions for Vinoscore.

Includes logging setup, text normalization and the numeric helpers shared
by every scorer.
"""

import logging
import math
from typing import Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# =======================
# TEXT NORMALIZATION
# =======================

def normalize_text(value: Any) -> Optional[str]:
    """
    Lowercase and strip a value for comparison.

    Returns None for None and for strings that are empty after stripping,
    so callers can test presence with ``is None``.
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


def title_case(text: str) -> str:
    """
    Capitalize each space-separated word.

    Unlike ``str.title`` this only touches the first character of each word,
    so "d'arenberg" stays "D'arenberg" rather than "D'Arenberg".
    """
    return ' '.join(word[:1].upper() + word[1:] for word in text.lower().split(' '))


# =======================
# NUMERIC HELPERS
# =======================

def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    Python's ``round`` uses banker's rounding (round(82.5) == 82); scores
    are rounded the conventional way instead. The value is first rounded to
    9 decimals to absorb float noise from weighted sums such as
    0.15 * 50 + 0.25 * 70.
    """
    return int(math.floor(round(value, 9) + 0.5))


def round_half_up_to(value: float, ndigits: int) -> float:
    """``round_half_up`` to a number of decimals (70.25 -> 70.3 at one decimal)."""
    scale = 10 ** ndigits
    return round_half_up(value * scale) / scale


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def parse_year(value: Any) -> Optional[int]:
    """
    Parse a vintage-like value into an int.

    Malformed input is skipped silently (returns None).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        logger.debug(f"Ignoring unparseable year: {value!r}")
        return None
