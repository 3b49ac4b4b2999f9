"""
Extractor Interface

Each extraction tier (heuristics, LLM) implements ``Extractor``. The pipeline
runs tiers in order, passing each one only the items earlier tiers could not
resolve.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from src.common.error_handling import ErrorCollector
from src.extraction.types import ExtractionResult, SearchResultItem


@dataclass
class TierOutcome:
    """
    Results of one tier over a list of items.

    Attributes:
        results: One entry per input item, in order. None means the item
            was not attempted (run aborted) or the attempt failed.
        rate_limited: True if the provider answered 429 and the rest of
            the run was skipped
    """
    results: List[Optional[ExtractionResult]] = field(default_factory=list)
    rate_limited: bool = False


class Extractor(ABC):
    """
    Abstract interface for one extraction tier.

    Implementations:
    - HeuristicExtractor: regex and separator rules, no network
    - LLMExtractor: chat-model fallback, batched

    ``settles_unresolved`` marks the last-resort tier: its LowConfidence
    answers are final and the pipeline caches them. LowConfidence from any
    other tier is only a hint for the tiers after it.
    """

    name: str = "extractor"
    settles_unresolved: bool = False

    @abstractmethod
    def attempt(self, item: SearchResultItem) -> ExtractionResult:
        """
        Try to extract a profile from one search item.

        Returns:
            Extracted if the tier is confident, LowConfidence with the
            partial profile otherwise
        """
        pass

    def attempt_many(
        self,
        items: Sequence[SearchResultItem],
        errors: ErrorCollector,
    ) -> TierOutcome:
        """
        Attempt every item in order.

        Tiers that talk to rate-limited services override this to batch.
        """
        return TierOutcome(results=[self.attempt(item) for item in items])
