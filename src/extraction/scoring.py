"""
Candidate relevance scoring against recruiter criteria.

A criterion is a short free-text requirement ("account executive",
"Klarna"). Each criterion is matched against the profile's fields; the
profile's score is the mean over all criteria.
"""

import re
from typing import Iterable, List, Sequence

from src.extraction.types import ExtractedProfile

# Weight of a criterion hit per profile field
FIELD_WEIGHTS = (
    ("name", 0.7),
    ("title", 0.8),
    ("company", 0.8),
    ("url", 0.3),
)
MAX_SCORE = 1.0


def process_criteria_items(criteria: str) -> List[str]:
    """
    Split a comma/semicolon/newline separated criteria string.

    >>> process_criteria_items("Account Executive, Klarna;  ; SaaS")
    ['account executive', 'klarna', 'saas']
    """
    if not criteria:
        return []
    return [item.strip().lower() for item in re.split(r"[,;\n]", criteria) if item.strip()]


def calculate_match_score(criterion: str, profile: ExtractedProfile) -> float:
    """Sum of field weights where the criterion occurs, capped at 1.0."""
    needle = criterion.strip().lower()
    if not needle:
        return 0.0

    score = 0.0
    for field_name, weight in FIELD_WEIGHTS:
        value = (getattr(profile, field_name) or "").lower()
        if field_name == "url":
            # Handles use dashes for spaces
            needle_in_field = needle.replace(" ", "-") in value
        else:
            needle_in_field = needle in value
        if needle_in_field:
            score += weight
    return round(min(score, MAX_SCORE), 2)


def score_profile(criteria: Sequence[str], profile: ExtractedProfile) -> float:
    """Mean match score over ``criteria``; 0.0 when there are none."""
    if not criteria:
        return 0.0
    total = sum(calculate_match_score(criterion, profile) for criterion in criteria)
    return round(total / len(criteria), 2)


def sort_profiles_by_relevance(
    profiles: Iterable[ExtractedProfile],
    criteria: Sequence[str],
) -> List[ExtractedProfile]:
    """Order by score, then extraction confidence, highest first. Stable for ties."""
    return sorted(
        profiles,
        key=lambda profile: (score_profile(criteria, profile), profile.confidence),
        reverse=True,
    )
