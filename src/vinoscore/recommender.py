"""
Recommendation Scorer

Ranks candidate wines for one user. Each candidate starts from its
community rating and collects additive boosts:

    score = rating
          + 2.0 x preferred grape varieties matched
          + 1.5 x preferred regions matched
          + 1.0 x liked history wines sharing grape, region or type
          + 1.0 if the price fits the preferred range

Scores are only meaningful relative to other candidates in the same call.
Wines the user already tasted must be removed before ranking
(see ``exclude_tasted_wines``).
"""

from typing import Any, Iterable, List, Optional, Sequence, Union

import pandas as pd

from vinoscore.comparators import contains_either_way
from vinoscore.config import DEFAULT_RECOMMENDATION_POLICY, RecommendationPolicy
from vinoscore.constants import AlgorithmConstants, Messages
from vinoscore.error_handling import coerce_model
from vinoscore.schema import PreferenceProfile, RecommendationCandidate, RecommendationResult, WineRecord
from vinoscore.utils import logger, normalize_text

WineInput = Union[pd.DataFrame, Sequence[Any], None]


def wine_records_from_dataframe(df: pd.DataFrame) -> List[WineRecord]:
    """
    Convert a wines DataFrame (one row per wine) into WineRecords.

    Missing cells (NaN) become absent fields; unknown columns are ignored.
    """
    if df is None or len(df) == 0:
        return []
    return [
        coerce_model(row, WineRecord, "wine row")
        for row in df.to_dict(orient='records')
    ]


def _as_records(wines: WineInput, operation: str) -> List[WineRecord]:
    if wines is None:
        return []
    if isinstance(wines, pd.DataFrame):
        return wine_records_from_dataframe(wines)
    return [coerce_model(wine, WineRecord, operation) for wine in wines]


def exclude_tasted_wines(candidates: WineInput, history: WineInput) -> List[WineRecord]:
    """Drop candidates whose id appears in the user's tasting history."""
    history_ids = {wine.id for wine in _as_records(history, "history wine") if wine.id is not None}
    return [
        wine for wine in _as_records(candidates, "candidate wine")
        if wine.id is None or wine.id not in history_ids
    ]


def _same_value(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality where an absent value never matches."""
    a_norm, b_norm = normalize_text(a), normalize_text(b)
    return a_norm is not None and a_norm == b_norm


def _share_grape(a: Iterable[str], b: Iterable[str]) -> bool:
    left = {normalize_text(g) for g in a} - {None}
    right = {normalize_text(g) for g in b} - {None}
    return bool(left & right)


class RecommendationScorer:
    """
    Scores candidates against one preference profile and liked-wine history.

    The match predicates below are shared by scoring and by the explanation,
    so the explanation never mentions a reason that did not add to the score.
    """

    def __init__(
        self,
        profile: PreferenceProfile,
        history: Sequence[WineRecord],
        policy: RecommendationPolicy = DEFAULT_RECOMMENDATION_POLICY
    ):
        self.profile = profile
        self.policy = policy
        self.history = list(history)[:policy.history_limit]

    def matching_grapes(self, wine: WineRecord) -> List[str]:
        """Preferred grape varieties matched by any of the wine's grapes."""
        return [
            preferred for preferred in self.profile.grape_varieties
            if any(contains_either_way(preferred, grape) for grape in wine.grape_variety)
        ]

    def matching_regions(self, wine: WineRecord) -> List[str]:
        if wine.region is None:
            return []
        return [
            preferred for preferred in self.profile.regions
            if contains_either_way(preferred, wine.region)
        ]

    def similar_history(self, wine: WineRecord) -> List[WineRecord]:
        """Liked wines sharing a grape variety, the region or the wine type."""
        return [
            liked for liked in self.history
            if _share_grape(liked.grape_variety, wine.grape_variety)
            or _same_value(liked.region, wine.region)
            or _same_value(liked.wine_type, wine.wine_type)
        ]

    def fits_price(self, wine: WineRecord) -> bool:
        if not self.profile.has_price_range or wine.price is None:
            return False
        low = self.profile.price_min if self.profile.price_min is not None else 0.0
        high = self.profile.price_max if self.profile.price_max is not None else float('inf')
        return low <= wine.price <= high

    def is_highly_rated(self, wine: WineRecord) -> bool:
        return wine.rating is not None and wine.rating >= self.policy.high_rating_threshold

    def score(self, wine: WineRecord) -> float:
        base = max(0.0, wine.rating) if wine.rating is not None else 0.0
        return (
            base
            + self.policy.grape_weight * len(self.matching_grapes(wine))
            + self.policy.region_weight * len(self.matching_regions(wine))
            + self.policy.history_weight * len(self.similar_history(wine))
            + (self.policy.price_weight if self.fits_price(wine) else 0.0)
        )

    def explain(self, wine: WineRecord) -> str:
        """
        Human-readable reasons for recommending ``wine``.

        Returns:
            "Recommended because it ... and ...." or a generic sentence when
            no predicate holds
        """
        reasons = []

        grapes = self.matching_grapes(wine)
        if grapes:
            reasons.append(f"matches your preferred grape variety ({', '.join(grapes)})")

        if self.matching_regions(wine):
            reasons.append(f"comes from your preferred region ({wine.region})")

        if self.similar_history(wine):
            reasons.append("is similar to wines you've enjoyed before")

        if self.fits_price(wine):
            reasons.append("fits your price range")

        if self.is_highly_rated(wine):
            reasons.append(f"is highly rated ({wine.rating:g}/5 stars)")

        if not reasons:
            return Messages.GENERIC_RECOMMENDATION
        return f"{Messages.RECOMMENDATION_PREFIX}{' and '.join(reasons)}."

    def rank(self, candidates: Sequence[WineRecord], limit: int) -> RecommendationResult:
        """Score, stable-sort descending and truncate."""
        history_ids = {wine.id for wine in self.history if wine.id is not None}
        already_tasted = [wine.id for wine in candidates if wine.id is not None and wine.id in history_ids]
        if already_tasted:
            logger.warning(
                f"{len(already_tasted)} candidates are already in the tasting history; "
                f"exclude them before ranking"
            )

        scored = [
            RecommendationCandidate(**wine.model_dump(), recommendation_score=self.score(wine))
            for wine in candidates
        ]
        # sorted() is stable, so equal scores keep their input order
        ranked = sorted(scored, key=lambda c: c.recommendation_score, reverse=True)
        ranked = ranked[:max(0, limit)]

        explanation = self.explain(ranked[0]) if ranked else Messages.NO_RECOMMENDATIONS

        logger.info(f"Ranked {len(scored)} candidates, returning {len(ranked)}")

        return RecommendationResult(
            recommendations=ranked,
            explanation=explanation,
            based_on={
                'candidate_count': len(scored),
                'history_count': len(self.history),
            },
        )


def rank_recommendations(
    candidates: WineInput,
    profile: Any,
    history: WineInput = None,
    limit: int = AlgorithmConstants.DEFAULT_RECOMMENDATION_LIMIT,
    *,
    policy: RecommendationPolicy = DEFAULT_RECOMMENDATION_POLICY
) -> RecommendationResult:
    """
    Rank candidate wines for a user.

    Args:
        candidates: Wines not yet tasted by the user (records, dicts or DataFrame)
        profile: PreferenceProfile or equivalent dict
        history: Wines the user rated 4 or higher, newest first
        limit: Maximum number of recommendations returned
        policy: Boost weights

    Returns:
        RecommendationResult with ranked candidates and an explanation for
        the top one
    """
    try:
        limit = int(limit)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid limit {limit!r}, using {AlgorithmConstants.DEFAULT_RECOMMENDATION_LIMIT}")
        limit = AlgorithmConstants.DEFAULT_RECOMMENDATION_LIMIT

    profile_model = coerce_model(profile, PreferenceProfile, "preference profile")
    scorer = RecommendationScorer(profile_model, _as_records(history, "history wine"), policy)
    return scorer.rank(_as_records(candidates, "candidate wine"), limit)


__all__ = [
    'RecommendationScorer',
    'rank_recommendations',
    'exclude_tasted_wines',
    'wine_records_from_dataframe',
]
