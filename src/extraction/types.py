"""
Data types shared by the extraction tiers.

``ExtractionResult`` is a tagged variant: a tier either resolves an item
(``Extracted``) or hands a partial guess to the next tier (``LowConfidence``).
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Union

from src.extraction.url_normalizer import normalize_profile_url


@dataclass(frozen=True)
class SearchResultItem:
    """One search-engine hit: ``{title, snippet, link}``."""

    title: str = ""
    snippet: str = ""
    link: str = ""

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "SearchResultItem":
        """Build from a Google Custom Search ``items[]`` entry."""
        return cls(
            title=(item.get("title") or "").strip(),
            snippet=(item.get("snippet") or "").strip(),
            link=(item.get("link") or "").strip(),
        )

    @property
    def profile_url(self) -> str:
        return normalize_profile_url(self.link)


@dataclass
class ExtractedProfile:
    """
    Candidate profile extracted from a search item.

    ``url`` is always the canonical profile URL of the source item.
    ``is_synthetic`` marks generated placeholder names, which are never real data.
    """

    name: str = ""
    title: str = ""
    company: str = ""
    url: str = ""
    location: str = ""
    confidence: float = 0.0
    source: str = ""
    is_synthetic: bool = False

    def __post_init__(self):
        if self.url:
            self.url = normalize_profile_url(self.url)

    def merge(self, other: "ExtractedProfile") -> "ExtractedProfile":
        """Fill this profile's empty fields from ``other``."""
        return replace(
            self,
            name=self.name or other.name,
            title=self.title or other.title,
            company=self.company or other.company,
            location=self.location or other.location,
            confidence=max(self.confidence, other.confidence),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractedProfile":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass(frozen=True)
class Extracted:
    """A tier resolved the item."""

    profile: ExtractedProfile


@dataclass(frozen=True)
class LowConfidence:
    """A tier could not resolve the item; ``partial`` holds what it found."""

    partial: ExtractedProfile
    reason: str = ""


ExtractionResult = Union[Extracted, LowConfidence]


@dataclass
class ProfileFields:
    """Raw fields pulled from a title/snippet pair before validation."""

    name: str = ""
    title: str = ""
    company: str = ""
    location: str = ""
