"""
Attribute Comparators

SINGLE SOURCE OF TRUTH for turning a guessed/candidate attribute and an
actual attribute into a 0-100 sub-score. Blind tasting and recommendation
scoring both go through these functions instead of re-implementing matches.

Absence policy shared by every comparator:
    both sides absent  -> 100 (no claim, no contradiction)
    one side absent    -> 0
Presence is tested with ``is None`` on the normalized value, so a legitimate
zero is never mistaken for a missing value.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from vinoscore.config import ComparisonWeights
from vinoscore.constants import AlgorithmConstants
from vinoscore.utils import clamp, logger, normalize_text, round_half_up

MAX_SCORE = AlgorithmConstants.MAX_SCORE
MIN_SCORE = AlgorithmConstants.MIN_SCORE


class MatchPolicy(str, Enum):
    """How a dimension's values are compared."""
    EXACT = "exact"
    FUZZY = "fuzzy"
    SET_OVERLAP = "set_overlap"
    BANDED_NUMERIC = "banded_numeric"


def _absence_score(actual_present: bool, guessed_present: bool) -> Optional[int]:
    """Score decided by presence alone, or None if both are present."""
    if not actual_present and not guessed_present:
        return MAX_SCORE
    if not actual_present or not guessed_present:
        return MIN_SCORE
    return None


def contains_either_way(a: str, b: str) -> bool:
    """Case-insensitive substring test in either direction."""
    a_norm, b_norm = normalize_text(a), normalize_text(b)
    if a_norm is None or b_norm is None:
        return False
    return a_norm in b_norm or b_norm in a_norm


def exact_match(actual: Optional[str], guessed: Optional[str]) -> int:
    """100 if case-insensitive equal, else 0."""
    actual_norm, guessed_norm = normalize_text(actual), normalize_text(guessed)
    decided = _absence_score(actual_norm is not None, guessed_norm is not None)
    if decided is not None:
        return decided
    return MAX_SCORE if actual_norm == guessed_norm else MIN_SCORE


def fuzzy_match(actual: Optional[str], guessed: Optional[str]) -> int:
    """100 if equal, partial credit if one contains the other, else 0."""
    actual_norm, guessed_norm = normalize_text(actual), normalize_text(guessed)
    decided = _absence_score(actual_norm is not None, guessed_norm is not None)
    if decided is not None:
        return decided
    if actual_norm == guessed_norm:
        return MAX_SCORE
    if actual_norm in guessed_norm or guessed_norm in actual_norm:
        return AlgorithmConstants.FUZZY_PARTIAL_SCORE
    return MIN_SCORE


def _clean_set(values: Optional[Iterable[str]]) -> List[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    cleaned = []
    for value in values:
        norm = normalize_text(value)
        if norm is not None:
            cleaned.append(norm)
    return cleaned


def set_overlap(actual: Optional[Iterable[str]], guessed: Optional[Iterable[str]]) -> int:
    """
    Share of actual entries matched by some guessed entry.

    An actual entry counts as matched when any guessed entry contains it or
    is contained by it. Dividing by the larger set size penalizes padding a
    guess with extra varieties.
    """
    actual_set, guessed_set = _clean_set(actual), _clean_set(guessed)
    decided = _absence_score(bool(actual_set), bool(guessed_set))
    if decided is not None:
        return decided

    matches = sum(
        1 for a in actual_set
        if any(a in g or g in a for g in guessed_set)
    )
    return round_half_up(MAX_SCORE * matches / max(len(actual_set), len(guessed_set)))


def banded_numeric(actual: Optional[float], guessed: Optional[float]) -> int:
    """
    Score a numeric guess by distance bands.

    Bands (|actual - guessed|): 0 -> 100, <=2 -> 75, <=5 -> 50, else 0.
    """
    decided = _absence_score(actual is not None, guessed is not None)
    if decided is not None:
        return decided

    difference = abs(float(actual) - float(guessed))
    for max_difference, score in AlgorithmConstants.VINTAGE_BANDS:
        if difference <= max_difference:
            return score
    return MIN_SCORE


_COMPARATORS = {
    MatchPolicy.EXACT: exact_match,
    MatchPolicy.FUZZY: fuzzy_match,
    MatchPolicy.SET_OVERLAP: set_overlap,
    MatchPolicy.BANDED_NUMERIC: banded_numeric,
}


def compare(policy: MatchPolicy, actual: Any, guessed: Any) -> int:
    """Dispatch to the comparator selected by ``policy``."""
    return _COMPARATORS[MatchPolicy(policy)](actual, guessed)


def weighted_overall(breakdown: Dict[str, int], weights: ComparisonWeights) -> int:
    """
    Combine sub-scores into the overall 0-100 score.

    Formula:
        overall = round_half_up(sum(weight_i * subscore_i))

    Dimensions missing from the breakdown contribute 0.
    """
    dimensions = weights.dimensions()
    weight_vec = np.array([weights[d] for d in dimensions], dtype=float)
    score_vec = np.array([breakdown.get(d, MIN_SCORE) for d in dimensions], dtype=float)

    total = float(np.dot(weight_vec, score_vec))
    overall = round_half_up(clamp(total, MIN_SCORE, MAX_SCORE))

    logger.debug(f"Weighted overall {overall} from {dict(zip(dimensions, score_vec.tolist()))}")
    return overall


__all__ = [
    'MatchPolicy',
    'contains_either_way',
    'exact_match',
    'fuzzy_match',
    'set_overlap',
    'banded_numeric',
    'compare',
    'weighted_overall',
]
