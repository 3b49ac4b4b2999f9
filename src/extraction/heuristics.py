"""
Heuristic profile extraction from search-result titles and snippets.

LinkedIn result titles mostly follow "Name - Title - Company | LinkedIn";
snippets look like "Stockholm, Sweden · Account Executive · Klarna" or
"Experience: Klarna · Location: Stockholm". These rules cover both formats,
in English and Swedish, without any network calls.
"""

import logging
import re
from typing import List, Optional

from src.extraction.base import Extractor
from src.extraction.company_validator import (
    is_likely_company,
    is_likely_job_title,
    is_likely_location,
    validate_company,
)
from src.extraction.term_lists import (
    SNIPPET_PREPOSITIONS,
    SWEDISH_MARKERS,
    TITLE_PREPOSITIONS,
    TITLE_STANDARDIZATION,
)
from src.extraction.types import (
    Extracted,
    ExtractedProfile,
    ExtractionResult,
    LowConfidence,
    ProfileFields,
    SearchResultItem,
)
from src.extraction.url_normalizer import extract_linkedin_username, username_to_name

logger = logging.getLogger(__name__)

FIELD_CONFIDENCE = 0.3

# ===== PATTERNS =====

_LINKEDIN_SUFFIX = re.compile(r"\s*(?:[|\-–—]\s*)?LinkedIn\s*$", re.IGNORECASE)
# Dashes need surrounding spaces so hyphenated names stay whole
_TITLE_SEPARATOR = re.compile(r"\s+[-–—]\s+|\s*\|\s*")
_SNIPPET_SEPARATOR = re.compile(r"\s*[·•|]\s*|\s+[-–—]\s+")
# Segments with no letter or digit ("-", "–") are separator debris
_WORD_CHAR = re.compile(r"\w")
_TITLE_PREPOSITION = re.compile(
    r"\s+(?:(?:{})\s+|@\s*)(.+)$".format(
        "|".join(re.escape(p) for p in TITLE_PREPOSITIONS if p != "@")
    ),
    re.IGNORECASE,
)
_SWEDISH_MARKER = re.compile(
    r"(?<!\w)({})(?!\w)".format("|".join(SWEDISH_MARKERS)), re.IGNORECASE
)
_LABELED_COMPANY = re.compile(
    r"(?:Experience|Erfarenhet|Erfaring|Arbetslivserfarenhet)\s*:\s*([^·•|\n]+)",
    re.IGNORECASE,
)
_LABELED_LOCATION = re.compile(r"(?:Location|Plats|Sted)\s*:\s*([^·•|\n]+)", re.IGNORECASE)
# Company text ends at the next clause
_COMPANY_TAIL = re.compile(
    r"\s+(?:with|and|in|i|och|med|for|för|since|sedan|from|från)\s+.*$", re.IGNORECASE
)
_ELLIPSIS = re.compile(r"\s*(?:\.{3,}|…)\s*$")
_DATE_RANGE = re.compile(
    r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{4}"
    r"(?:\s*[-–]\s*(?:present|current|now|nu|\d{4}))?",
    re.IGNORECASE,
)
_LOWERCASE_WORDS = {"of", "and", "for", "in", "at", "och", "på", "för", "i", "the"}


def _snippet_preposition_pattern(language: str) -> re.Pattern:
    words = "|".join(re.escape(p) for p in SNIPPET_PREPOSITIONS[language])
    return re.compile(
        rf"([^·•|.;:\n]+?)(?:\s+(?:{words})\s+|\s*@\s*)([^·•|.,;:\n]+)", re.IGNORECASE
    )


_SNIPPET_PREPOSITION = {
    language: _snippet_preposition_pattern(language) for language in SNIPPET_PREPOSITIONS
}


# ===== TEXT HELPERS =====

def strip_linkedin_suffix(title: Optional[str]) -> str:
    """
    >>> strip_linkedin_suffix("Erik Svensson - CTO - Klarna | LinkedIn")
    'Erik Svensson - CTO - Klarna'
    """
    if not title:
        return ""
    return _LINKEDIN_SUFFIX.sub("", title.strip()).strip()


def split_title_segments(title: Optional[str]) -> List[str]:
    """Split a result title on ``-``, ``–``, ``—`` and ``|`` into trimmed segments."""
    cleaned = strip_linkedin_suffix(title)
    if not cleaned:
        return []
    return [
        segment.strip()
        for segment in _TITLE_SEPARATOR.split(cleaned)
        if _WORD_CHAR.search(segment)
    ]


def detect_language(text: Optional[str]) -> str:
    """
    Return "sv" when at least two distinct Swedish function words occur, else "en".

    >>> detect_language("Säljare på Klarna och tidigare hos Spotify")
    'sv'
    >>> detect_language("Account Executive at Klarna")
    'en'
    """
    if not text:
        return "en"
    hits = {match.lower() for match in _SWEDISH_MARKER.findall(text)}
    return "sv" if len(hits) >= 2 else "en"


def _clean_company_text(text: str) -> str:
    company = _ELLIPSIS.sub("", text.strip())
    company = _COMPANY_TAIL.sub("", company)
    return company.strip(" .,;:")


def _capitalize_words(text: str) -> str:
    words = text.split()
    result = []
    for position, word in enumerate(words):
        if word.islower() and (position == 0 or word not in _LOWERCASE_WORDS):
            word = word[0].upper() + word[1:]
        result.append(word)
    return " ".join(result)


def clean_job_title(title: Optional[str]) -> str:
    """
    Normalize a job title found in free text.

    Drops trailing employer/separator text, dates and bracketed notes, then
    applies standard spellings for common titles.

    >>> clean_job_title("senior account executive at Klarna (2019 - now)")
    'Senior Account Executive'
    >>> clean_job_title("Not available")
    ''
    """
    if not title or re.match(r"^\s*not\s+(?:available|specified)\s*$", title, re.IGNORECASE):
        return ""

    cleaned = re.sub(r"\s+(?:at|@|på|hos)\s+.+$", "", title, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s+[|·•]\s+.+$|\s+[-–—]\s+.+$", "", cleaned)
    cleaned = _DATE_RANGE.sub("", cleaned)
    cleaned = re.sub(r"\([^)]*\)|\[[^\]]*\]", " ", cleaned)
    cleaned = _ELLIPSIS.sub("", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip(" .,;:!?")

    for pattern, standard in TITLE_STANDARDIZATION:
        if re.search(pattern, cleaned, re.IGNORECASE):
            cleaned = re.sub(pattern, standard, cleaned, count=1, flags=re.IGNORECASE)
            break

    cleaned = _capitalize_words(cleaned)
    return cleaned if len(cleaned) >= 2 else ""


# ===== FIELD EXTRACTION =====

def extract_from_title(title: Optional[str]) -> ProfileFields:
    """
    Pull name, title and company out of a result title.

    Three or more segments are positional (name, title, company). Two
    segments are name and title, unless one side is clearly a title and the
    other an organisation. A lone segment is the name, or "<title> at
    <company>" when it reads that way.
    """
    fields = ProfileFields()
    segments = split_title_segments(title)

    if len(segments) >= 3:
        fields.name, fields.title, fields.company = segments[0], segments[1], segments[2]
    elif len(segments) == 2:
        first, second = segments
        if is_likely_job_title(first) and not is_likely_job_title(second):
            fields.title, fields.company = first, second
        elif not is_likely_job_title(second) and is_likely_company(second):
            fields.name, fields.company = first, second
        else:
            fields.name, fields.title = first, second
    elif len(segments) == 1:
        segment = segments[0]
        match = _TITLE_PREPOSITION.search(segment)
        lead = segment[:match.start()].strip() if match else ""
        if match and is_likely_job_title(lead):
            fields.title, fields.company = lead, _clean_company_text(match.group(1))
        elif is_likely_job_title(segment):
            fields.title = segment
        else:
            fields.name = segment

    if not fields.company and fields.title:
        match = _TITLE_PREPOSITION.search(fields.title)
        if match:
            fields.company = _clean_company_text(match.group(1))
            fields.title = fields.title[:match.start()].strip()

    return fields


def extract_from_snippet(snippet: Optional[str]) -> ProfileFields:
    """
    Pull title, company and location out of a result snippet.

    Tries labeled fields ("Experience: Klarna"), then "<title> at <company>"
    phrases in the snippet's language, then ``·`` / ``-`` separated segments.
    """
    fields = ProfileFields()
    if not snippet or not snippet.strip():
        return fields

    labeled = _LABELED_COMPANY.search(snippet)
    if labeled:
        fields.company = _clean_company_text(labeled.group(1))
    labeled_location = _LABELED_LOCATION.search(snippet)
    if labeled_location:
        fields.location = _clean_company_text(labeled_location.group(1))

    language = detect_language(snippet)
    for match in _SNIPPET_PREPOSITION[language].finditer(snippet):
        candidate_title = match.group(1).strip()
        if is_likely_job_title(candidate_title):
            fields.title = fields.title or clean_job_title(candidate_title)
            fields.company = fields.company or _clean_company_text(match.group(2))
            break

    segments = [
        _ELLIPSIS.sub("", segment).strip()
        for segment in _SNIPPET_SEPARATOR.split(snippet)
    ]
    segments = [segment for segment in segments if _WORD_CHAR.search(segment)]

    title_index = None
    for index, segment in enumerate(segments):
        if title_index is None and is_likely_job_title(segment) and ":" not in segment:
            title_index = index
        elif (
            not fields.location
            and is_likely_location(segment)
            and not is_likely_job_title(segment)
            and len(segment.split()) <= 4
        ):
            fields.location = segment.strip(" .")

    if title_index is not None:
        if not fields.title:
            fields.title = clean_job_title(segments[title_index])
        if not fields.company:
            for segment in segments[title_index + 1:]:
                if (
                    ":" not in segment
                    and not is_likely_job_title(segment)
                    and not is_likely_location(segment)
                    and len(segment.split()) <= 4
                ):
                    fields.company = _clean_company_text(segment)
                    break

    return fields


def extract_profile_fields(title: Optional[str], snippet: Optional[str]) -> ProfileFields:
    """
    Extract raw name/title/company/location from a title and snippet pair.

    Pure and deterministic. Missing fields are "". The company is not
    validated here.

    Example:
        >>> fields = extract_profile_fields(
        ...     "Erik Svensson - Account Executive - Klarna | LinkedIn",
        ...     "Stockholm, Sweden · Account Executive · Klarna",
        ... )
        >>> (fields.name, fields.title, fields.company)
        ('Erik Svensson', 'Account Executive', 'Klarna')
    """
    fields = extract_from_title(title)
    from_snippet = extract_from_snippet(snippet)

    if not fields.title or not fields.company:
        fields.title = fields.title or from_snippet.title
        fields.company = fields.company or from_snippet.company
    fields.location = from_snippet.location
    return fields


def field_confidence(profile: ExtractedProfile, weight: float = FIELD_CONFIDENCE) -> float:
    """Confidence grows with each of name, title and company present."""
    present = sum(1 for value in (profile.name, profile.title, profile.company) if value)
    return round(present * weight, 2)


# ===== STRATEGY =====

class HeuristicExtractor(Extractor):
    """
    First extraction tier: rules only.

    An item is resolved when it has a name and a company that passes the
    validator. A rejected company is reported in the LowConfidence reason so
    the next tier gets a chance at it.
    """

    name = "heuristic"

    def attempt(self, item: SearchResultItem) -> ExtractionResult:
        fields = extract_profile_fields(item.title, item.snippet)
        company = validate_company(fields.company) if fields.company else ""

        name = fields.name
        if not name:
            name = username_to_name(extract_linkedin_username(item.link))

        profile = ExtractedProfile(
            name=name,
            title=fields.title,
            company=company,
            url=item.link,
            location=fields.location,
            source=self.name,
        )
        profile.confidence = field_confidence(profile)

        if name and company:
            return Extracted(profile)

        if fields.company and not company:
            reason = f"company rejected: {fields.company}"
        elif not company:
            reason = "no company found"
        else:
            reason = "no name found"
        logger.debug(f"Low confidence for {profile.url or item.title!r}: {reason}")
        return LowConfidence(partial=profile, reason=reason)
