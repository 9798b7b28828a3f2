"""Pydantic schemas for Vinoscore inputs and results."""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vinoscore.comparators import weighted_overall
from vinoscore.config import ComparisonWeights
from vinoscore.constants import ConfidenceLevel, FieldNames, ScoreGrade
from vinoscore.utils import parse_year


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _as_string_list(value: Any) -> List[str]:
    """Accept a single string or an iterable of strings; drop blanks."""
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        value = [value]
    try:
        items = list(value)
    except TypeError:
        return []
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def _as_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # NaN comes through from pandas for missing cells
    if not math.isfinite(number):
        return None
    return number


class WineRecord(BaseModel):
    """A wine as stored by the record store. Every attribute is optional."""

    id: Optional[str] = None
    name: Optional[str] = None
    winery: Optional[str] = None
    wine_type: Optional[str] = Field(None, description="RED, WHITE, ROSE, SPARKLING, ...")
    grape_variety: List[str] = Field(default_factory=list, description="Grape varieties, primary first")
    region: Optional[str] = None
    country: Optional[str] = None
    vintage: Optional[int] = None
    price: Optional[float] = Field(None, description="Bottle price")
    rating: Optional[float] = Field(None, description="Average community rating (0-5)")

    @field_validator('id', mode='before')
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, float) and math.isnan(value):
            return None
        return str(value)

    @field_validator('name', 'winery', 'wine_type', 'region', 'country', mode='before')
    @classmethod
    def _blank_strings(cls, value: Any) -> Any:
        if isinstance(value, float) and math.isnan(value):
            return None
        return _blank_to_none(value)

    @field_validator('grape_variety', mode='before')
    @classmethod
    def _grape_list(cls, value: Any) -> List[str]:
        if isinstance(value, float) and math.isnan(value):
            return []
        return _as_string_list(value)

    @field_validator('vintage', mode='before')
    @classmethod
    def _vintage(cls, value: Any) -> Optional[int]:
        return parse_year(value)

    @field_validator('price', 'rating', mode='before')
    @classmethod
    def _numbers(cls, value: Any) -> Optional[float]:
        return _as_optional_float(value)


class ExtractedWineFields(BaseModel):
    """Label fields recognised from OCR output, each independently optional."""

    model_config = ConfigDict(frozen=True)

    winery: Optional[str] = None
    wine_name: Optional[str] = None
    vintage: Optional[int] = None
    region: Optional[str] = None
    grape_variety: Optional[str] = None
    confidence: int = Field(0, ge=0, le=100)

    def present_fields(self) -> List[str]:
        """Names of fields that were recognised, in extraction order."""
        return [name for name in FieldNames.label_fields() if getattr(self, name) is not None]

    def missing_fields(self) -> List[str]:
        """Names of fields the user still has to enter by hand."""
        return [name for name in FieldNames.label_fields() if getattr(self, name) is None]


class ExtractionResult(BaseModel):
    """Extraction output: fields, confidence and the raw tokens for manual fallback."""

    model_config = ConfigDict(frozen=True)

    extracted: ExtractedWineFields
    confidence: int = Field(..., ge=0, le=100)
    raw_text: List[str] = Field(default_factory=list)

    @property
    def confidence_level(self) -> ConfidenceLevel:
        return ConfidenceLevel.from_confidence(self.confidence)

    def missing_fields(self) -> List[str]:
        return self.extracted.missing_fields()


class VintageRange(BaseModel):
    """Inclusive range of guessed vintage years."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @model_validator(mode='before')
    @classmethod
    def _order_bounds(cls, data: Any) -> Any:
        # A reversed range is a typo, not a contradiction
        if isinstance(data, dict):
            low, high = data.get('min'), data.get('max')
            if low is not None and high is not None:
                try:
                    if int(low) > int(high):
                        return {**data, 'min': high, 'max': low}
                except (TypeError, ValueError):
                    return data
        return data

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def contains(self, year: int) -> bool:
        return self.min <= year <= self.max


class BlindTastingGuess(BaseModel):
    """A taster's guess about a wine tasted blind."""

    wine_type: Optional[str] = None
    grape_variety: List[str] = Field(default_factory=list)
    region: Optional[str] = None
    country: Optional[str] = None
    vintage_range: Optional[VintageRange] = None
    confidence: Optional[int] = Field(None, description="Self-assessed confidence (1-5)")
    reasoning: Optional[str] = None

    @field_validator('wine_type', 'region', 'country', 'reasoning', mode='before')
    @classmethod
    def _blank_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator('vintage_range', mode='before')
    @classmethod
    def _usable_range(cls, value: Any) -> Any:
        if value is None or isinstance(value, VintageRange):
            return value
        if isinstance(value, dict):
            low, high = parse_year(value.get('min')), parse_year(value.get('max'))
            if low is None or high is None:
                return None
            return {'min': low, 'max': high}
        return None

    @field_validator('confidence', mode='before')
    @classmethod
    def _confidence_scale(cls, value: Any) -> Optional[int]:
        number = _as_optional_float(value)
        if number is None:
            return None
        return int(min(5, max(1, round(number))))

    @field_validator('grape_variety', mode='before')
    @classmethod
    def _grape_list(cls, value: Any) -> List[str]:
        return _as_string_list(value)


class ScoreBreakdown(BaseModel):
    """Per-dimension sub-scores plus the weighted overall score."""

    model_config = ConfigDict(frozen=True)

    breakdown: Dict[str, int]
    overall: int = Field(..., ge=0, le=100)
    weights: ComparisonWeights

    def recompute_overall(self) -> int:
        """Rebuild ``overall`` from the breakdown and weights alone."""
        return weighted_overall(self.breakdown, self.weights)


class BlindTastingResult(ScoreBreakdown):
    """Blind tasting score with the raw guess and actual values for display."""

    policy: str
    guess: BlindTastingGuess
    actual: WineRecord

    @property
    def grade(self) -> ScoreGrade:
        return ScoreGrade.from_score(self.overall)


class BlindTastingStats(BaseModel):
    """Aggregate performance over many blind tasting attempts."""

    total_attempts: int = 0
    average_accuracy: int = 0
    accuracy_by_type: Dict[str, float] = Field(default_factory=dict)
    accuracy_by_region: Dict[str, float] = Field(default_factory=dict)
    improvement_trend: List[int] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)


class PreferenceProfile(BaseModel):
    """What a user says they like."""

    grape_varieties: List[str] = Field(default_factory=list)
    regions: List[str] = Field(default_factory=list)
    wine_types: List[str] = Field(default_factory=list)
    price_min: Optional[float] = None
    price_max: Optional[float] = None

    @field_validator('grape_varieties', 'regions', 'wine_types', mode='before')
    @classmethod
    def _string_lists(cls, value: Any) -> List[str]:
        return _as_string_list(value)

    @field_validator('price_min', 'price_max', mode='before')
    @classmethod
    def _prices(cls, value: Any) -> Optional[float]:
        return _as_optional_float(value)

    @property
    def has_price_range(self) -> bool:
        return self.price_min is not None or self.price_max is not None


class RecommendationCandidate(WineRecord):
    """A wine record with its additive recommendation score."""

    recommendation_score: float = Field(0.0, ge=0)


class RecommendationResult(BaseModel):
    """Ranked recommendations and the explanation for the top pick."""

    recommendations: List[RecommendationCandidate] = Field(default_factory=list)
    explanation: str
    based_on: Dict[str, int] = Field(default_factory=dict)
