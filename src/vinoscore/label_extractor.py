"""
Label Field Extractor

Turns the tokens and full text returned by a text-recognition provider into
a partial wine label record with a presence-based confidence score.

Extraction never fails. Missing fields simply lower the confidence, and the
raw tokens are always handed back so the caller can offer manual entry.

The wine name is picked last because it excludes whatever was already used
for winery, region or grape variety.
"""

import re
from datetime import datetime
from typing import List, Optional, Sequence

from vinoscore.config import DEFAULT_EXTRACTION, DEFAULT_LEXICON, ExtractionConfig, LexiconConfig
from vinoscore.constants import FieldNames
from vinoscore.lexicon import LexiconMatcher
from vinoscore.schema import ExtractedWineFields, ExtractionResult
from vinoscore.utils import clamp, logger, title_case

VINTAGE_PATTERN = re.compile(r'\b(19|20)\d{2}\b')
DIGIT_PATTERN = re.compile(r'\d')


def extract_vintage(
    text: str,
    current_year: int,
    config: ExtractionConfig = DEFAULT_EXTRACTION
) -> Optional[int]:
    """
    Find the vintage year in label text.

    Only the first 19xx/20xx token is considered; if it falls outside
    [min_vintage, current_year + slack] the vintage is left absent.
    """
    match = VINTAGE_PATTERN.search(text)
    if match is None:
        return None

    year = int(match.group(0))
    latest = current_year + config.vintage_future_slack
    if config.min_vintage <= year <= latest:
        return year

    logger.warning(f"Ignoring implausible vintage {year} (allowed {config.min_vintage}-{latest})")
    return None


def _is_winery_candidate(token: str, matcher: LexiconMatcher, config: ExtractionConfig) -> bool:
    return (
        config.winery_min_length < len(token) < config.winery_max_length
        and not matcher.mentions_common_term(token)
        and DIGIT_PATTERN.search(token) is None
        and len(token.split(' ')) <= config.winery_max_words
    )


def select_winery(
    tokens: Sequence[str],
    matcher: LexiconMatcher,
    config: ExtractionConfig = DEFAULT_EXTRACTION
) -> Optional[str]:
    """First token that looks like a producer name, Title Cased."""
    for token in tokens:
        if _is_winery_candidate(token, matcher, config):
            return title_case(token)
    return None


def select_wine_name(
    tokens: Sequence[str],
    matcher: LexiconMatcher,
    exclude: Sequence[Optional[str]],
    config: ExtractionConfig = DEFAULT_EXTRACTION
) -> Optional[str]:
    """
    First token usable as the wine name, Title Cased.

    ``exclude`` holds the winery, region and grape variety already picked.
    Exclusion is by exact (case-insensitive) equality so that a multi-word
    name that merely contains a region word survives.
    """
    taken = {value.lower() for value in exclude if value is not None}
    for token in tokens:
        if not config.wine_name_min_length < len(token) < config.wine_name_max_length:
            continue
        if matcher.is_common_term(token) or token in taken:
            continue
        return title_case(token)
    return None


def calculate_confidence(
    fields: dict,
    config: ExtractionConfig = DEFAULT_EXTRACTION
) -> int:
    """
    Presence-weighted confidence in [0, 100].

    Only presence matters (``is not None``); field values never do.
    """
    confidence = sum(
        weight for name, weight in config.field_weights
        if fields.get(name) is not None
    )
    return int(clamp(confidence, 0, 100))


def extract_fields(
    tokens: Optional[Sequence[str]],
    full_text: Optional[str],
    *,
    config: ExtractionConfig = DEFAULT_EXTRACTION,
    lexicon: LexiconConfig = DEFAULT_LEXICON,
    current_year: Optional[int] = None
) -> ExtractionResult:
    """
    Extract structured wine label fields from recognized text.

    Args:
        tokens: Recognized text fragments in reading order
        full_text: The full recognized text block
        config: Extraction heuristics
        lexicon: Region / grape / stoplist vocabularies
        current_year: Upper reference for plausible vintages. Defaults to
            the current calendar year; pass it explicitly for reproducible
            results across year boundaries.

    Returns:
        ExtractionResult with the fields, confidence and raw token list
    """
    raw_tokens: List[str] = [str(token) for token in (tokens or []) if token is not None]
    text = (full_text or '').lower()
    lowered = [token.lower() for token in raw_tokens]
    year = current_year if current_year is not None else datetime.now().year
    matcher = LexiconMatcher(lexicon)

    picked = {
        FieldNames.VINTAGE: extract_vintage(text, year, config),
        FieldNames.REGION: matcher.match_region(text),
        FieldNames.GRAPE_VARIETY: matcher.match_grape_variety(text),
    }
    picked[FieldNames.WINERY] = select_winery(lowered, matcher, config)
    picked[FieldNames.WINE_NAME] = select_wine_name(
        lowered,
        matcher,
        exclude=[
            picked[FieldNames.WINERY],
            picked[FieldNames.REGION],
            picked[FieldNames.GRAPE_VARIETY],
        ],
        config=config,
    )

    confidence = calculate_confidence(picked, config)
    fields = ExtractedWineFields(confidence=confidence, **picked)

    logger.info(
        f"Extracted {len(fields.present_fields())}/{len(FieldNames.label_fields())} "
        f"label fields from {len(raw_tokens)} tokens (confidence {confidence})"
    )
    return ExtractionResult(extracted=fields, confidence=confidence, raw_text=raw_tokens)


__all__ = [
    'extract_fields',
    'extract_vintage',
    'select_winery',
    'select_wine_name',
    'calculate_confidence',
]
