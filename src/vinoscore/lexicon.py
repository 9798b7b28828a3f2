"""
Lexicon Matcher

Matches free text against curated vocabularies with case-insensitive
substring containment. When a text contains several vocabulary terms the
earliest term in the vocabulary wins, regardless of where it appears in the
text.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from vinoscore.config import DEFAULT_LEXICON, LexiconConfig
from vinoscore.utils import normalize_text, title_case

logger = logging.getLogger(__name__)


def find_first_term(text: Optional[str], vocabulary: Sequence[str]) -> Optional[str]:
    """
    Find the first vocabulary entry contained in ``text``.

    Args:
        text: Free text (OCR output, transcript); case is ignored
        vocabulary: Ordered canonical terms

    Returns:
        The matching term in Title Case, or None if nothing matched
    """
    haystack = normalize_text(text)
    if haystack is None:
        return None

    for term in vocabulary:
        needle = normalize_text(term)
        if needle is not None and needle in haystack:
            return title_case(needle)
    return None


def find_all_terms(text: Optional[str], vocabulary: Sequence[str]) -> List[str]:
    """Every vocabulary entry contained in ``text``, in vocabulary order, Title Case."""
    haystack = normalize_text(text)
    if haystack is None:
        return []
    hits = []
    for term in vocabulary:
        needle = normalize_text(term)
        if needle is not None and needle in haystack:
            hits.append(title_case(needle))
    return hits


def contains_any_term(text: Optional[str], terms: Iterable[str]) -> bool:
    """True if any term occurs as a substring of ``text`` (case-insensitive)."""
    haystack = normalize_text(text)
    if haystack is None:
        return False
    return any(term.lower() in haystack for term in terms)


def equals_any_term(text: Optional[str], terms: Iterable[str]) -> bool:
    """True if ``text`` is exactly one of ``terms`` (case-insensitive)."""
    value = normalize_text(text)
    if value is None:
        return False
    return any(value == term.lower() for term in terms)


class LexiconMatcher:
    """Region and grape variety lookup bound to one vocabulary configuration."""

    def __init__(self, config: LexiconConfig = DEFAULT_LEXICON):
        self.config = config

    def match_region(self, text: Optional[str]) -> Optional[str]:
        region = find_first_term(text, self.config.regions)
        logger.debug(f"Region match: {region}")
        return region

    def match_grape_variety(self, text: Optional[str]) -> Optional[str]:
        grape = find_first_term(text, self.config.grape_varieties)
        logger.debug(f"Grape variety match: {grape}")
        return grape

    def is_common_term(self, text: Optional[str]) -> bool:
        """Exact stoplist hit."""
        return equals_any_term(text, self.config.common_wine_terms)

    def mentions_common_term(self, text: Optional[str]) -> bool:
        """Stoplist term anywhere inside ``text``."""
        return contains_any_term(text, self.config.common_wine_terms)
