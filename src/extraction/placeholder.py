"""
Placeholder names for profiles no tier could name.

These names are SYNTHETIC. They exist only so result tables have no blank
name cells and are always flagged with ``is_synthetic=True``; exporters and
callers must never present them as real people.

Names are picked by item position, so the same input list always gets the
same placeholders.
"""

from dataclasses import replace
from typing import Tuple

from src.extraction.types import ExtractedProfile

FIRST_NAMES: Tuple[str, ...] = (
    "Erik", "Lars", "Anders", "Johan", "Per", "Anna", "Maria", "Karin", "Eva", "Lena",
    "Karl", "Nils", "Sven", "Olof", "Gustav", "Sara", "Emma", "Sofia", "Kristina", "Linnea",
)

LAST_NAMES: Tuple[str, ...] = (
    "Andersson", "Johansson", "Karlsson", "Nilsson", "Eriksson", "Larsson", "Olsson",
    "Persson", "Svensson", "Gustafsson", "Pettersson", "Jonsson", "Jansson", "Hansson",
    "Bengtsson", "Lindberg", "Lindström", "Lundgren", "Söderberg", "Eklund",
)

PLACEHOLDER_SOURCE = "placeholder"


class PlaceholderNameGenerator:
    """
    Deterministic synthetic names indexed by item position.

    Index ``i`` maps to ``FIRST_NAMES[i % n]`` and ``LAST_NAMES[(i // n) % m]``,
    so the first ``n * m`` positions all get distinct names.
    """

    def __init__(self, first_names: Tuple[str, ...] = FIRST_NAMES, last_names: Tuple[str, ...] = LAST_NAMES):
        if not first_names or not last_names:
            raise ValueError("Placeholder name lists must not be empty")
        self.first_names = first_names
        self.last_names = last_names

    @property
    def capacity(self) -> int:
        """Number of distinct names before they repeat."""
        return len(self.first_names) * len(self.last_names)

    def name_for(self, index: int) -> str:
        """
        >>> PlaceholderNameGenerator().name_for(0)
        'Erik Andersson'
        >>> PlaceholderNameGenerator().name_for(21)
        'Lars Johansson'
        """
        if index < 0:
            raise ValueError(f"Index must be non-negative, got {index}")
        first = self.first_names[index % len(self.first_names)]
        last = self.last_names[(index // len(self.first_names)) % len(self.last_names)]
        return f"{first} {last}"

    def fill(self, profile: ExtractedProfile, index: int) -> ExtractedProfile:
        """
        Return ``profile`` with a synthetic name if it has none; otherwise unchanged.

        A filled profile is sourced to the placeholder tier with zero
        confidence, whatever the earlier tiers found.
        """
        if profile.name:
            return profile
        return replace(
            profile,
            name=self.name_for(index),
            is_synthetic=True,
            source=PLACEHOLDER_SOURCE,
            confidence=0.0,
        )
