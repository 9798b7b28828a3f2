"""
Vinoscore Constants and Enums

Centralized constants, enums, vocabularies and magic values used by the
matching and scoring engine.
"""

from enum import Enum
from typing import Tuple


# =======================
# WINE ATTRIBUTE ENUMS
# =======================

class WineType(str, Enum):
    """Wine type categories."""
    RED = "RED"
    WHITE = "WHITE"
    ROSE = "ROSE"
    SPARKLING = "SPARKLING"
    DESSERT = "DESSERT"
    FORTIFIED = "FORTIFIED"


class ScoreGrade(Enum):
    """Letter grades for blind tasting scores with thresholds."""
    A_PLUS = ("A+", 90)
    A = ("A", 85)
    A_MINUS = ("A-", 80)
    B_PLUS = ("B+", 75)
    B = ("B", 70)
    B_MINUS = ("B-", 65)
    C_PLUS = ("C+", 60)
    C = ("C", 55)
    C_MINUS = ("C-", 50)
    D = ("D", 40)
    F = ("F", 0)

    def __init__(self, display: str, threshold: int):
        self.display = display
        self.threshold = threshold

    @classmethod
    def from_score(cls, score: float) -> 'ScoreGrade':
        """Get grade from a 0-100 score."""
        for grade in cls:
            if score >= grade.threshold:
                return grade
        return cls.F


class ConfidenceLevel(str, Enum):
    """Coarse label-recognition confidence buckets."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_confidence(cls, confidence: int) -> 'ConfidenceLevel':
        if confidence >= AlgorithmConstants.HIGH_CONFIDENCE_THRESHOLD:
            return cls.HIGH
        if confidence >= AlgorithmConstants.MEDIUM_CONFIDENCE_THRESHOLD:
            return cls.MEDIUM
        return cls.LOW


# =======================
# FIELD NAME CONSTANTS
# =======================

class FieldNames:
    """Record and dimension names to avoid string hardcoding."""

    # Label fields
    WINERY = "winery"
    WINE_NAME = "wine_name"
    VINTAGE = "vintage"
    REGION = "region"
    GRAPE_VARIETY = "grape_variety"

    # Wine record attributes
    COUNTRY = "country"
    WINE_TYPE = "wine_type"
    PRICE = "price"
    RATING = "rating"

    @classmethod
    def label_fields(cls) -> list:
        """Label fields in extraction order."""
        return [cls.WINERY, cls.WINE_NAME, cls.VINTAGE, cls.REGION, cls.GRAPE_VARIETY]

    @classmethod
    def blind_tasting_dimensions(cls) -> list:
        """The four scored blind tasting dimensions."""
        return [cls.WINE_TYPE, cls.GRAPE_VARIETY, cls.REGION, cls.VINTAGE]


# =======================
# VOCABULARIES
# =======================

REGIONS: Tuple[str, ...] = (
    'napa valley', 'sonoma', 'bordeaux', 'burgundy', 'champagne', 'chianti', 'rioja',
    'barossa valley', 'margaret river', 'marlborough', 'mendoza', 'stellenbosch',
    'douro', 'rhone valley', 'tuscany', 'piedmont', 'oregon', 'washington',
    'california', 'france', 'italy', 'spain', 'australia', 'new zealand',
    'argentina', 'south africa', 'portugal', 'germany',
)

GRAPE_VARIETIES: Tuple[str, ...] = (
    'cabernet sauvignon', 'merlot', 'pinot noir', 'chardonnay', 'sauvignon blanc',
    'riesling', 'syrah', 'shiraz', 'grenache', 'tempranillo', 'sangiovese',
    'nebbiolo', 'pinot grigio', 'pinot gris', 'gewurztraminer', 'viognier',
    'chenin blanc', 'semillon', 'malbec', 'carmenere', 'zinfandel',
)

# Words printed on most labels that never identify a winery
COMMON_WINE_TERMS: Tuple[str, ...] = (
    'wine', 'vintage', 'reserve', 'estate', 'cellars', 'winery',
    'valley', 'red', 'white', 'dry', 'sweet',
)

# Frequent speech-to-text misspellings of wine vocabulary
TRANSCRIPT_CORRECTIONS = {
    'shardonnay': 'chardonnay',
    'shablis': 'chablis',
    'pino noir': 'pinot noir',
    'pino grigio': 'pinot grigio',
    'cabarnet': 'cabernet',
    'savier blanc': 'sauvignon blanc',
    'shirah': 'shiraz',
    'temperanio': 'tempranillo',
    'bordo': 'bordeaux',
    'nappa valley': 'napa valley',
    'tuscanny': 'tuscany',
    'barossa': 'barossa valley',
}

# Terms that indicate a transcript is actually about wine
TASTING_VOCABULARY: Tuple[str, ...] = (
    'wine', 'vintage', 'tasting', 'notes', 'flavor', 'aroma', 'bouquet',
    'finish', 'grape', 'vineyard', 'winery', 'cellar',
)


# =======================
# ALGORITHM CONSTANTS
# =======================

class AlgorithmConstants:
    """
    Algorithm constants with documentation.

    These are fixed design decisions of the engine. Callers choose which
    comparator or policy to use, never the thresholds themselves.
    """

    # SCORE BOUNDS
    MIN_SCORE = 0
    MAX_SCORE = 100

    # FUZZY SUBSTRING MATCH
    # One string containing the other earns partial credit
    FUZZY_PARTIAL_SCORE = 70

    # VINTAGE BANDS (absolute year difference -> sub-score)
    # Checked in order; anything beyond the last band scores 0
    VINTAGE_BANDS: Tuple[Tuple[float, int], ...] = (
        (0, 100),
        (2, 75),
        (5, 50),
    )

    # LABEL CONFIDENCE WEIGHTS
    # Sum to 100, so a label with every field present is fully confident
    WINERY_WEIGHT = 30
    WINE_NAME_WEIGHT = 25
    VINTAGE_WEIGHT = 20
    REGION_WEIGHT = 15
    GRAPE_VARIETY_WEIGHT = 10

    HIGH_CONFIDENCE_THRESHOLD = 70
    MEDIUM_CONFIDENCE_THRESHOLD = 40

    # LABEL TOKEN HEURISTICS (exclusive bounds)
    WINERY_MIN_LENGTH = 3
    WINERY_MAX_LENGTH = 30
    WINERY_MAX_WORDS = 3
    WINE_NAME_MIN_LENGTH = 3
    WINE_NAME_MAX_LENGTH = 50

    # VINTAGE WINDOW
    # Years beyond current + slack are treated as OCR noise
    MIN_VINTAGE = 1900
    VINTAGE_FUTURE_SLACK = 5

    # BLIND TASTING POINT ALLOCATION (out of 100)
    WINE_TYPE_POINTS = 25
    GRAPE_VARIETY_POINTS = 30
    REGION_POINTS = 25
    VINTAGE_POINTS = 20

    # Region vs country share inside the location dimension (0.25 : 0.20)
    LOCATION_REGION_SHARE = 0.25
    LOCATION_COUNTRY_SHARE = 0.20

    # RECOMMENDATION BOOSTS
    GRAPE_MATCH_BOOST = 2.0
    REGION_MATCH_BOOST = 1.5
    HISTORY_MATCH_BOOST = 1.0
    PRICE_FIT_BOOST = 1.0
    HIGH_RATING_THRESHOLD = 4.0
    HISTORY_LIMIT = 50
    DEFAULT_RECOMMENDATION_LIMIT = 10

    # BLIND TASTING STATISTICS
    TREND_WINDOW = 10
    STRENGTH_THRESHOLD = 70.0
    WEAKNESS_THRESHOLD = 40.0
    TYPE_DEVIATION_MARGIN = 10.0
    MAX_INSIGHTS = 5

    # TRANSCRIPT CONFIDENCE
    TRANSCRIPT_BASE_CONFIDENCE = 50
    TRANSCRIPT_TERM_BONUS = 5
    TRANSCRIPT_SENTENCE_BONUS = 2
    TRANSCRIPT_MAX_SENTENCE_BONUS = 20
    TRANSCRIPT_MIN_LENGTH = 10
    TRANSCRIPT_SHORT_PENALTY = 20
    TRANSCRIPT_REPETITION_RATIO = 0.5
    TRANSCRIPT_REPETITION_PENALTY = 15


# =======================
# FIXED MESSAGES
# =======================

class Messages:
    """User-facing sentences produced by the engine."""

    NO_RECOMMENDATIONS = "No recommendations available based on current preferences."
    GENERIC_RECOMMENDATION = "Recommended based on general popularity and quality."
    RECOMMENDATION_PREFIX = "Recommended because it "
