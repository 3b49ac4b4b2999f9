"""
LinkedIn profile URL normalization.

Search engines return the same profile as ``se.linkedin.com/in/x``,
``https://www.linkedin.com/in/x/?trk=...`` or ``linkedin.com/in/x/details``.
The canonical form ``https://www.linkedin.com/<first two path segments>``
is the cache and de-duplication key for a profile.
"""

import logging
import re
from typing import Optional
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)

CANONICAL_ORIGIN = "https://www.linkedin.com"


def _split(url: str):
    candidate = url.strip()
    if candidate.startswith("//"):
        candidate = "https:" + candidate
    elif "://" not in candidate:
        candidate = "https://" + candidate
    return urlsplit(candidate)


def _is_linkedin_host(host: str) -> bool:
    host = (host or "").lower().rstrip(".")
    return host == "linkedin.com" or host.endswith(".linkedin.com")


def normalize_profile_url(url: str) -> str:
    """
    Return the canonical LinkedIn URL for ``url``.

    Non-LinkedIn and unparsable URLs are returned unchanged. Idempotent.

    Examples:
        >>> normalize_profile_url("se.linkedin.com/in/anna-svensson/?trk=public")
        'https://www.linkedin.com/in/anna-svensson'
        >>> normalize_profile_url("https://example.com/about")
        'https://example.com/about'
    """
    if not url or not url.strip():
        return url

    try:
        parts = _split(url)
        host = parts.hostname
    except ValueError as e:
        logger.debug(f"Unparsable URL left as-is: {url!r} ({e})")
        return url

    if not _is_linkedin_host(host):
        logger.debug(f"Non-LinkedIn URL left as-is: {url}")
        return url

    segments = [segment for segment in parts.path.split("/") if segment]
    if not segments:
        return CANONICAL_ORIGIN
    return f"{CANONICAL_ORIGIN}/{'/'.join(segments[:2])}"


def is_linkedin_profile_url(url: Optional[str]) -> bool:
    """True for personal profile URLs (``/in/<handle>``)."""
    if not url:
        return False
    return normalize_profile_url(url).startswith(f"{CANONICAL_ORIGIN}/in/")


def extract_linkedin_username(url: Optional[str]) -> Optional[str]:
    """
    Return the profile handle from a LinkedIn profile URL.

    >>> extract_linkedin_username("https://se.linkedin.com/in/erik-svensson-4b1a2c3/")
    'erik-svensson-4b1a2c3'
    """
    if not is_linkedin_profile_url(url):
        return None
    handle = normalize_profile_url(url).rsplit("/in/", 1)[1]
    return unquote(handle) or None


def username_to_name(handle: Optional[str]) -> str:
    """
    Turn a profile handle into a readable name guess.

    Drops parts containing digits (LinkedIn's disambiguation suffixes) and
    single letters, then keeps the first two parts.

    >>> username_to_name("erik-svensson-4b1a2c3")
    'Erik Svensson'
    >>> username_to_name("12345")
    ''
    """
    if not handle:
        return ""
    parts = [
        part for part in re.split(r"[-_.]+", handle)
        if len(part) > 1 and not re.search(r"\d", part)
    ]
    return " ".join(part.capitalize() for part in parts[:2])
