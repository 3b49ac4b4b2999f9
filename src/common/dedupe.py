"""
De-duplication keys for search hits and extracted profiles.

A LinkedIn profile shows up under several URL spellings (country subdomain,
tracking query, trailing slash). The canonical profile URL is the key; a
normalized name+company pair is the fallback for items without a usable link.

Usage:
    from src.common.dedupe import generate_profile_key

    key = generate_profile_key("https://se.linkedin.com/in/anna-svensson/?trk=x")
    # Result: "url|https://www.linkedin.com/in/anna-svensson"
"""

import re
from typing import Callable, Iterable, List, Optional, TypeVar

from src.extraction.url_normalizer import normalize_profile_url

T = TypeVar("T")


def normalize_for_dedupe(text: Optional[str]) -> str:
    """
    Lowercase and drop everything that is not a letter or digit.

    Examples:
        >>> normalize_for_dedupe("Anna-Karin Öberg")
        'annakarinöberg'
        >>> normalize_for_dedupe("H&M Group")
        'hmgroup'
        >>> normalize_for_dedupe(None)
        ''
    """
    if not text:
        return ""
    return re.sub(r"[\W_]", "", text.lower())


def generate_profile_key(
    url: Optional[str] = None,
    name: Optional[str] = None,
    company: Optional[str] = None,
) -> str:
    """
    Build the de-duplication key for a profile.

    Examples:
        >>> generate_profile_key("linkedin.com/in/erik-svensson/")
        'url|https://www.linkedin.com/in/erik-svensson'
        >>> generate_profile_key(name="Erik Svensson", company="Klarna AB")
        'text|eriksvensson|klarnaab'
    """
    if url and url.strip():
        return f"url|{normalize_profile_url(url.strip())}"

    return f"text|{normalize_for_dedupe(name)}|{normalize_for_dedupe(company)}"


def dedupe_preserving_order(items: Iterable[T], key: Callable[[T], str]) -> List[T]:
    """Keep the first item for each key, in input order."""
    seen = set()
    unique: List[T] = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        unique.append(item)
    return unique
