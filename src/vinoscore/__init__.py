"""Vinoscore - Deterministic wine attribute matching and scoring."""

from vinoscore.blind_tasting import score_blind_tasting
from vinoscore.label_extractor import extract_fields
from vinoscore.recommender import rank_recommendations
from vinoscore.schema import (
    BlindTastingGuess,
    BlindTastingResult,
    ExtractedWineFields,
    ExtractionResult,
    PreferenceProfile,
    RecommendationCandidate,
    RecommendationResult,
    ScoreBreakdown,
    WineRecord,
)

__version__ = "0.1.0"

__all__ = [
    'extract_fields',
    'score_blind_tasting',
    'rank_recommendations',
    'BlindTastingGuess',
    'BlindTastingResult',
    'ExtractedWineFields',
    'ExtractionResult',
    'PreferenceProfile',
    'RecommendationCandidate',
    'RecommendationResult',
    'ScoreBreakdown',
    'WineRecord',
    '__version__',
]
