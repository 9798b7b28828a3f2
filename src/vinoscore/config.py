"""
Vinoscore Configuration

Immutable configuration objects injected into the engine. Each scorer takes
one of these as a keyword argument and falls back to the module defaults, so
several policies (for example a stricter blind tasting mode) can coexist.
"""

import math
from collections.abc import Mapping
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vinoscore.constants import (
    AlgorithmConstants,
    COMMON_WINE_TERMS,
    FieldNames,
    GRAPE_VARIETIES,
    REGIONS,
)
from vinoscore.error_handling import ConfigurationError

WEIGHT_SUM_TOLERANCE = 1e-9


def _freeze_pairs(value: Any) -> Any:
    """Store a mapping as an immutable tuple of (name, value) pairs."""
    if isinstance(value, Mapping):
        return tuple(value.items())
    return value


class ComparisonWeights(BaseModel):
    """
    Dimension -> weight mapping whose weights sum to 1.0.

    Accepts a dict but keeps the weights as a tuple of pairs, so policies
    shared between results cannot be edited in place.
    """

    model_config = ConfigDict(frozen=True)

    weights: Tuple[Tuple[str, float], ...]

    @field_validator('weights', mode='before')
    @classmethod
    def _freeze(cls, value: Any) -> Any:
        return _freeze_pairs(value)

    @model_validator(mode='after')
    def _check_weights(self) -> 'ComparisonWeights':
        if not self.weights:
            raise ConfigurationError("ComparisonWeights needs at least one dimension")
        if len(self.as_dict()) != len(self.weights):
            raise ConfigurationError("ComparisonWeights has duplicate dimensions")
        for name, weight in self.weights:
            if not 0.0 <= weight <= 1.0:
                raise ConfigurationError(f"Weight for {name} must be in [0, 1], got {weight}")
        total = math.fsum(weight for _, weight in self.weights)
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_SUM_TOLERANCE):
            raise ConfigurationError(f"Weights must sum to 1.0, got {total}")
        return self

    @classmethod
    def from_points(cls, points: Dict[str, float]) -> 'ComparisonWeights':
        """Build weights from a point allocation (e.g. 25/30/25/20 of 100)."""
        total = math.fsum(points.values())
        if total <= 0:
            raise ConfigurationError("Point allocation must be positive")
        return cls(weights={name: value / total for name, value in points.items()})

    def dimensions(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.weights)

    def as_dict(self) -> Dict[str, float]:
        """A fresh dict copy; editing it never touches the policy."""
        return dict(self.weights)

    def __getitem__(self, dimension: str) -> float:
        return self.as_dict()[dimension]


class LexiconConfig(BaseModel):
    """Curated vocabularies, matched in the order given."""

    model_config = ConfigDict(frozen=True)

    regions: Tuple[str, ...] = REGIONS
    grape_varieties: Tuple[str, ...] = GRAPE_VARIETIES
    common_wine_terms: Tuple[str, ...] = COMMON_WINE_TERMS

    @field_validator('regions', 'grape_varieties', 'common_wine_terms')
    @classmethod
    def _lowercase_terms(cls, terms: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(term.strip().lower() for term in terms if term and term.strip())


class ExtractionConfig(BaseModel):
    """Heuristics for turning OCR tokens into label fields."""

    model_config = ConfigDict(frozen=True)

    # (field, weight) pairs; a dict is accepted and frozen
    field_weights: Tuple[Tuple[str, int], ...] = (
        (FieldNames.WINERY, AlgorithmConstants.WINERY_WEIGHT),
        (FieldNames.WINE_NAME, AlgorithmConstants.WINE_NAME_WEIGHT),
        (FieldNames.VINTAGE, AlgorithmConstants.VINTAGE_WEIGHT),
        (FieldNames.REGION, AlgorithmConstants.REGION_WEIGHT),
        (FieldNames.GRAPE_VARIETY, AlgorithmConstants.GRAPE_VARIETY_WEIGHT),
    )
    winery_min_length: int = AlgorithmConstants.WINERY_MIN_LENGTH
    winery_max_length: int = AlgorithmConstants.WINERY_MAX_LENGTH
    winery_max_words: int = AlgorithmConstants.WINERY_MAX_WORDS
    wine_name_min_length: int = AlgorithmConstants.WINE_NAME_MIN_LENGTH
    wine_name_max_length: int = AlgorithmConstants.WINE_NAME_MAX_LENGTH
    min_vintage: int = AlgorithmConstants.MIN_VINTAGE
    vintage_future_slack: int = AlgorithmConstants.VINTAGE_FUTURE_SLACK

    @field_validator('field_weights', mode='before')
    @classmethod
    def _freeze_field_weights(cls, value: Any) -> Any:
        return _freeze_pairs(value)

    @field_validator('field_weights')
    @classmethod
    def _check_field_weights(cls, weights: Tuple[Tuple[str, int], ...]) -> Tuple[Tuple[str, int], ...]:
        unknown = {name for name, _ in weights} - set(FieldNames.label_fields())
        if unknown:
            raise ConfigurationError(f"Unknown label fields in weights: {sorted(unknown)}")
        if any(weight < 0 for _, weight in weights):
            raise ConfigurationError("Field weights must be non-negative")
        return weights


class BlindTastingPolicy(BaseModel):
    """Weights for the four blind tasting dimensions."""

    model_config = ConfigDict(frozen=True)

    name: str
    weights: ComparisonWeights
    # Split of the region dimension between region and country
    location_weights: ComparisonWeights

    @model_validator(mode='after')
    def _check_dimensions(self) -> 'BlindTastingPolicy':
        expected = set(FieldNames.blind_tasting_dimensions())
        if set(self.weights.dimensions()) != expected:
            raise ConfigurationError(
                f"Blind tasting policy {self.name} must weight exactly {sorted(expected)}"
            )
        if set(self.location_weights.dimensions()) != {FieldNames.REGION, FieldNames.COUNTRY}:
            raise ConfigurationError("Location weights must cover region and country")
        return self


class RecommendationPolicy(BaseModel):
    """Boosts applied on top of a candidate's base rating."""

    model_config = ConfigDict(frozen=True)

    grape_weight: float = Field(AlgorithmConstants.GRAPE_MATCH_BOOST, ge=0)
    region_weight: float = Field(AlgorithmConstants.REGION_MATCH_BOOST, ge=0)
    history_weight: float = Field(AlgorithmConstants.HISTORY_MATCH_BOOST, ge=0)
    price_weight: float = Field(AlgorithmConstants.PRICE_FIT_BOOST, ge=0)
    history_limit: int = Field(AlgorithmConstants.HISTORY_LIMIT, ge=0)
    high_rating_threshold: float = AlgorithmConstants.HIGH_RATING_THRESHOLD


# =======================
# DEFAULT INSTANCES
# =======================

DEFAULT_LEXICON = LexiconConfig()

DEFAULT_EXTRACTION = ExtractionConfig()

_LOCATION_WEIGHTS = ComparisonWeights.from_points({
    FieldNames.REGION: AlgorithmConstants.LOCATION_REGION_SHARE,
    FieldNames.COUNTRY: AlgorithmConstants.LOCATION_COUNTRY_SHARE,
})

# Canonical: the 25/30/25/20 point allocation shown to tasters
STANDARD_BLIND_TASTING_POLICY = BlindTastingPolicy(
    name="standard",
    weights=ComparisonWeights.from_points({
        FieldNames.WINE_TYPE: AlgorithmConstants.WINE_TYPE_POINTS,
        FieldNames.GRAPE_VARIETY: AlgorithmConstants.GRAPE_VARIETY_POINTS,
        FieldNames.REGION: AlgorithmConstants.REGION_POINTS,
        FieldNames.VINTAGE: AlgorithmConstants.VINTAGE_POINTS,
    }),
    location_weights=_LOCATION_WEIGHTS,
)

# Variety-heavy accuracy formula: 0.40 grape, 0.25 + 0.20 location, 0.15 vintage
WEIGHTED_ACCURACY_POLICY = BlindTastingPolicy(
    name="weighted_accuracy",
    weights=ComparisonWeights(weights={
        FieldNames.WINE_TYPE: 0.0,
        FieldNames.GRAPE_VARIETY: 0.40,
        FieldNames.REGION: 0.45,
        FieldNames.VINTAGE: 0.15,
    }),
    location_weights=_LOCATION_WEIGHTS,
)

DEFAULT_RECOMMENDATION_POLICY = RecommendationPolicy()
