"""
Voice note transcript clean-up.

Fixes common speech-to-text misspellings of wine vocabulary, capitalizes
known regions and grape varieties, and estimates how trustworthy a
transcript is.
"""

import re
from typing import Dict, Optional

from vinoscore.config import DEFAULT_LEXICON, LexiconConfig
from vinoscore.constants import AlgorithmConstants, TASTING_VOCABULARY, TRANSCRIPT_CORRECTIONS
from vinoscore.lexicon import find_all_terms
from vinoscore.utils import clamp, logger, title_case

SENTENCE_START = re.compile(r'(^\w|[.!?]\s*\w)')
SENTENCE_SPLIT = re.compile(r'[.!?]+')


def _correction_pattern(incorrect: str, correct: str) -> re.Pattern:
    pattern = r'\b' + re.escape(incorrect) + r'\b'
    # "barossa" -> "barossa valley" must not touch an existing "barossa valley"
    if correct.startswith(incorrect) and correct != incorrect:
        pattern += '(?!' + re.escape(correct[len(incorrect):]) + ')'
    return re.compile(pattern, re.IGNORECASE)


def correct_wine_terms(
    transcript: Optional[str],
    corrections: Optional[Dict[str, str]] = None,
    lexicon: LexiconConfig = DEFAULT_LEXICON
) -> str:
    """
    Normalize a raw voice note transcript.

    Args:
        transcript: Raw transcript text
        corrections: Misspelling -> canonical term map (defaults to the
            built-in dictionary)
        lexicon: Vocabularies whose terms are Title Cased in the output

    Returns:
        Cleaned transcript ('' for empty input)
    """
    if not transcript:
        return ''

    processed = transcript.lower()
    for incorrect, correct in (corrections or TRANSCRIPT_CORRECTIONS).items():
        processed = _correction_pattern(incorrect, correct).sub(correct, processed)

    # Longest terms first so "pinot noir" wins over a shorter overlapping term
    proper_terms = sorted(set(lexicon.regions) | set(lexicon.grape_varieties), key=len, reverse=True)
    if proper_terms:
        proper_pattern = re.compile(
            r'\b(' + '|'.join(re.escape(term) for term in proper_terms) + r')\b',
            re.IGNORECASE,
        )
        processed = proper_pattern.sub(lambda m: title_case(m.group(0)), processed)

    processed = SENTENCE_START.sub(lambda m: m.group(0).upper(), processed)
    return processed.strip()


def transcription_confidence(transcript: Optional[str]) -> int:
    """
    Heuristic 0-100 confidence for a transcript.

    Starts at 50, rewards wine vocabulary and sentence structure, penalizes
    very short or highly repetitive transcripts.
    """
    if not transcript:
        return 0

    lowered = transcript.lower()
    confidence = AlgorithmConstants.TRANSCRIPT_BASE_CONFIDENCE

    found_terms = find_all_terms(transcript, TASTING_VOCABULARY)
    confidence += len(found_terms) * AlgorithmConstants.TRANSCRIPT_TERM_BONUS

    sentences = [s for s in SENTENCE_SPLIT.split(transcript) if s.strip()]
    confidence += min(
        len(sentences) * AlgorithmConstants.TRANSCRIPT_SENTENCE_BONUS,
        AlgorithmConstants.TRANSCRIPT_MAX_SENTENCE_BONUS,
    )

    if len(transcript) < AlgorithmConstants.TRANSCRIPT_MIN_LENGTH:
        confidence -= AlgorithmConstants.TRANSCRIPT_SHORT_PENALTY

    words = lowered.split()
    if words and len(set(words)) / len(words) < AlgorithmConstants.TRANSCRIPT_REPETITION_RATIO:
        confidence -= AlgorithmConstants.TRANSCRIPT_REPETITION_PENALTY

    logger.debug(f"Transcript confidence {confidence} ({len(found_terms)} wine terms)")
    return int(clamp(confidence, 0, 100))


__all__ = ['correct_wine_terms', 'transcription_confidence']
