"""
Company name validator.

Decides whether a candidate string pulled from a title, snippet or LLM reply
is a real employer name. Returns the cleaned name, or "" to reject.

Order of checks:
1. Reject if shorter than 2 characters once bracketed content is removed.
2. Accept known companies and aliases with canonical casing.
3. Reject block-list hits (locations, generic words, industries, job titles,
   technology names).
4. Reject sentence-like phrases.
5. Reject more than 4 words, and short names that are not well-known acronyms.
6. Return the name with corporate suffixes (AB, Inc, GmbH...) removed.
"""

import logging
import re
from typing import Optional

from src.extraction.term_lists import (
    CANONICAL_ALIASES,
    CANONICAL_COMPANIES,
    COMPANY_INDICATOR_PATTERN,
    COMPILED_BLOCK_LISTS,
    COMPILED_SENTENCE_PATTERNS,
    COMPILED_SUFFIXES,
    JOB_TITLE_EXACT_PATTERN,
    JOB_TITLE_PATTERN,
    LOCATION_PATTERN,
    SHORT_NAMES,
)

logger = logging.getLogger(__name__)

MAX_COMPANY_WORDS = 4
MIN_UNKNOWN_NAME_LENGTH = 4


def clean_candidate(candidate: Optional[str]) -> str:
    """
    Remove bracketed content, collapse whitespace and trim punctuation.

    >>> clean_candidate("  Klarna (Sweden) , ")
    'Klarna'
    """
    if not candidate:
        return ""
    cleaned = re.sub(r"\([^)]*\)|\[[^\]]*\]|\{[^}]*\}", " ", candidate)
    cleaned = re.sub(r"\s+", " ", cleaned)
    cleaned = re.sub(r"\s+LinkedIn$", "", cleaned.strip(), flags=re.IGNORECASE)
    return cleaned.strip(" \t,;:!?·•|\"'").strip()


def strip_corporate_suffix(name: str) -> str:
    """
    >>> strip_corporate_suffix("Volvo Cars AB")
    'Volvo Cars'
    """
    stripped = name
    for pattern in COMPILED_SUFFIXES:
        stripped = pattern.sub("", stripped).strip()
    return stripped.rstrip(" ,.")


def canonical_company(name: str) -> Optional[str]:
    """Return the canonical spelling of a known company or alias."""
    key = name.strip().lower()
    return CANONICAL_COMPANIES.get(key) or CANONICAL_ALIASES.get(key)


def rejection_reason(candidate: str) -> Optional[str]:
    """
    Return why ``candidate`` is not a company name, or None if it passes.

    ``candidate`` is expected to be cleaned already.
    """
    if len(candidate) < 2:
        return "too_short"

    for category, pattern in COMPILED_BLOCK_LISTS.items():
        if pattern.search(candidate):
            return f"block_list:{category}"

    for reason, pattern in COMPILED_SENTENCE_PATTERNS:
        if pattern.search(candidate):
            return f"sentence:{reason}"

    if len(candidate.split()) > MAX_COMPANY_WORDS:
        return "too_many_words"

    if len(candidate) < MIN_UNKNOWN_NAME_LENGTH and candidate.upper() not in SHORT_NAMES:
        return "short_unknown"

    return None


def validate_company(candidate: Optional[str]) -> str:
    """
    Validate a company candidate.

    Returns:
        The cleaned, canonical company name, or "" if rejected

    Examples:
        >>> validate_company("microsoft")
        'Microsoft'
        >>> validate_company("Stockholm University")
        ''
        >>> validate_company("Acme Robotics AB")
        'Acme Robotics'
    """
    cleaned = clean_candidate(candidate)
    if len(cleaned) < 2:
        return ""

    stripped = strip_corporate_suffix(cleaned)

    known = canonical_company(cleaned) or (stripped and canonical_company(stripped))
    if known:
        return known

    if not stripped:
        return ""

    reason = rejection_reason(stripped)
    if reason:
        logger.debug(f"Rejected company candidate {candidate!r}: {reason}")
        return ""

    return stripped


def is_likely_job_title(text: Optional[str]) -> bool:
    """
    True when ``text`` reads like a job title.

    >>> is_likely_job_title("Senior Account Executive")
    True
    >>> is_likely_job_title("Klarna")
    False
    """
    if not text or not text.strip():
        return False
    text = text.strip()
    return bool(JOB_TITLE_PATTERN.search(text) or JOB_TITLE_EXACT_PATTERN.match(text))


def is_likely_location(text: Optional[str]) -> bool:
    """
    True when ``text`` names a place or work mode.

    >>> is_likely_location("Stockholm, Sweden")
    True
    """
    if not text or not text.strip():
        return False
    return bool(LOCATION_PATTERN.search(text))


def is_likely_company(text: Optional[str]) -> bool:
    """True for known companies and names carrying a company word (AB, Solutions...)."""
    if not text or not text.strip():
        return False
    if canonical_company(text) or canonical_company(strip_corporate_suffix(text)):
        return True
    return bool(COMPANY_INDICATOR_PATTERN.search(text)) and not is_likely_job_title(text)
