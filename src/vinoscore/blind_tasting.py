"""
Blind Tasting Scorer

Scores a taster's guess against the wine actually poured:
- Wine type: exact match
- Grape variety: set overlap
- Region: fuzzy region match blended with exact country match
- Vintage: range hit, otherwise distance bands from the range midpoint

The weighted overall score is always reproducible from the breakdown and the
policy weights.
"""

from typing import Any, Dict, List, Sequence

import pandas as pd

from vinoscore.comparators import MatchPolicy, compare, weighted_overall
from vinoscore.config import STANDARD_BLIND_TASTING_POLICY, BlindTastingPolicy
from vinoscore.constants import AlgorithmConstants, FieldNames
from vinoscore.error_handling import coerce_model
from vinoscore.schema import BlindTastingGuess, BlindTastingResult, BlindTastingStats, WineRecord
from vinoscore.utils import logger, round_half_up, round_half_up_to

DIMENSION_LABELS = {
    FieldNames.WINE_TYPE: 'Wine type identification',
    FieldNames.GRAPE_VARIETY: 'Grape variety recognition',
    FieldNames.REGION: 'Regional identification',
    FieldNames.VINTAGE: 'Vintage assessment',
}

# Comparator per compared attribute; region and country feed the region dimension
MATCH_POLICIES = {
    FieldNames.WINE_TYPE: MatchPolicy.EXACT,
    FieldNames.GRAPE_VARIETY: MatchPolicy.SET_OVERLAP,
    FieldNames.REGION: MatchPolicy.FUZZY,
    FieldNames.COUNTRY: MatchPolicy.EXACT,
    FieldNames.VINTAGE: MatchPolicy.BANDED_NUMERIC,
}


class BlindTastingScorer:
    """
    Weighted blind tasting accuracy scoring.

    The default policy follows the 25/30/25/20 point allocation (wine type,
    grape variety, region, vintage), so grape variety carries the most weight
    and vintage the least.
    """

    def __init__(self, policy: BlindTastingPolicy = STANDARD_BLIND_TASTING_POLICY):
        self.policy = policy

    def _compare(self, attribute: str, actual: Any, guessed: Any) -> int:
        return compare(MATCH_POLICIES[attribute], actual, guessed)

    def score_wine_type(self, guess: BlindTastingGuess, actual: WineRecord) -> int:
        return self._compare(FieldNames.WINE_TYPE, actual.wine_type, guess.wine_type)

    def score_grape_variety(self, guess: BlindTastingGuess, actual: WineRecord) -> int:
        return self._compare(FieldNames.GRAPE_VARIETY, actual.grape_variety, guess.grape_variety)

    def score_location(self, guess: BlindTastingGuess, actual: WineRecord) -> int:
        """
        Region dimension: region and country compared separately, then blended.

        Region uses the fuzzy comparator (Burgundy vs Côte de Nuits, Burgundy
        earns partial credit); country must match exactly.
        """
        region_score = self._compare(FieldNames.REGION, actual.region, guess.region)
        country_score = self._compare(FieldNames.COUNTRY, actual.country, guess.country)
        return weighted_overall(
            {FieldNames.REGION: region_score, FieldNames.COUNTRY: country_score},
            self.policy.location_weights,
        )

    def score_vintage(self, guess: BlindTastingGuess, actual: WineRecord) -> int:
        """
        Vintage dimension.

        A vintage inside the guessed range is a full hit. Otherwise the
        actual vintage is compared with the range midpoint using the vintage
        bands. Without a guessed range the absence rules apply.
        """
        vintage_range = guess.vintage_range
        if vintage_range is None:
            return self._compare(FieldNames.VINTAGE, actual.vintage, None)
        if actual.vintage is not None and vintage_range.contains(actual.vintage):
            return AlgorithmConstants.MAX_SCORE
        return self._compare(FieldNames.VINTAGE, actual.vintage, vintage_range.midpoint)

    def score(self, guess: BlindTastingGuess, actual: WineRecord) -> BlindTastingResult:
        """
        Score one guess against the actual wine.

        Args:
            guess: The taster's guess
            actual: Ground-truth wine record

        Returns:
            BlindTastingResult with breakdown, overall, grade and raw values
        """
        breakdown = {
            FieldNames.WINE_TYPE: self.score_wine_type(guess, actual),
            FieldNames.GRAPE_VARIETY: self.score_grape_variety(guess, actual),
            FieldNames.REGION: self.score_location(guess, actual),
            FieldNames.VINTAGE: self.score_vintage(guess, actual),
        }
        overall = weighted_overall(breakdown, self.policy.weights)

        logger.debug(f"Blind tasting ({self.policy.name}) breakdown {breakdown} -> {overall}")

        return BlindTastingResult(
            breakdown=breakdown,
            overall=overall,
            weights=self.policy.weights,
            policy=self.policy.name,
            guess=guess,
            actual=actual,
        )


def score_blind_tasting(
    guess: Any,
    actual: Any,
    *,
    policy: BlindTastingPolicy = STANDARD_BLIND_TASTING_POLICY
) -> BlindTastingResult:
    """
    Score a blind tasting guess.

    Args:
        guess: BlindTastingGuess or an equivalent dict
        actual: WineRecord or an equivalent dict
        policy: Scoring policy (weights per dimension)

    Returns:
        BlindTastingResult. Never raises for missing or malformed fields;
        an unusable input degrades to an empty record.
    """
    guess_model = coerce_model(guess, BlindTastingGuess, "blind tasting guess")
    actual_model = coerce_model(actual, WineRecord, "blind tasting actual wine")
    return BlindTastingScorer(policy).score(guess_model, actual_model)


# =======================
# PERFORMANCE STATISTICS
# =======================

def _results_frame(results: Sequence[BlindTastingResult]) -> pd.DataFrame:
    rows = []
    for result in results:
        row: Dict[str, Any] = {
            'overall': result.overall,
            'actual_wine_type': result.actual.wine_type,
            'actual_region': result.actual.region,
        }
        for dimension in FieldNames.blind_tasting_dimensions():
            row[dimension] = result.breakdown.get(dimension, 0)
        rows.append(row)
    return pd.DataFrame(rows)


def _group_means(df: pd.DataFrame, column: str) -> Dict[str, float]:
    known = df[df[column].notna()]
    if len(known) == 0:
        return {}
    means = known.groupby(column, sort=True)['overall'].mean()
    return {str(key): round_half_up_to(float(value), 1) for key, value in means.items()}


def summarize_blind_tasting_results(results: Sequence[BlindTastingResult]) -> BlindTastingStats:
    """
    Aggregate a taster's blind tasting history.

    Args:
        results: Scored attempts, oldest first

    Returns:
        BlindTastingStats with averages, per-type/per-region accuracy,
        the recent trend and up to five strengths and weaknesses
    """
    if not results:
        return BlindTastingStats()

    df = _results_frame(results)
    average = float(df['overall'].mean())

    accuracy_by_type = _group_means(df, 'actual_wine_type')
    accuracy_by_region = _group_means(df, 'actual_region')

    strengths: List[str] = []
    weaknesses: List[str] = []
    margin = AlgorithmConstants.TYPE_DEVIATION_MARGIN
    for wine_type, accuracy in accuracy_by_type.items():
        if accuracy > average + margin:
            strengths.append(f"{wine_type} wines")
        elif accuracy < average - margin:
            weaknesses.append(f"{wine_type} wines")

    dimension_means = df[FieldNames.blind_tasting_dimensions()].mean()
    for dimension, mean_score in dimension_means.items():
        if mean_score > AlgorithmConstants.STRENGTH_THRESHOLD:
            strengths.append(DIMENSION_LABELS[dimension])
        elif mean_score < AlgorithmConstants.WEAKNESS_THRESHOLD:
            weaknesses.append(DIMENSION_LABELS[dimension])

    trend = df['overall'].tail(AlgorithmConstants.TREND_WINDOW).astype(int).tolist()

    logger.info(f"Summarized {len(df)} blind tasting attempts (average {average:.1f})")

    return BlindTastingStats(
        total_attempts=len(df),
        average_accuracy=round_half_up(average),
        accuracy_by_type=accuracy_by_type,
        accuracy_by_region=accuracy_by_region,
        improvement_trend=trend,
        strengths=strengths[:AlgorithmConstants.MAX_INSIGHTS],
        areas_for_improvement=weaknesses[:AlgorithmConstants.MAX_INSIGHTS],
    )


__all__ = [
    'BlindTastingScorer',
    'score_blind_tasting',
    'summarize_blind_tasting_results',
]
