"""
Extraction Pipeline

Turns raw search items into profiles:

1. De-duplicate items by canonical profile URL (first occurrence wins)
2. Serve cached profiles from the ProfileStore unless force_refresh
3. Run the extraction tiers in order; each tier only sees items that no
   earlier tier resolved
4. Unresolved items keep the merged partial results of every tier. A
   rejected company is never restored, so such items end with company ""
5. Optionally give nameless profiles a synthetic placeholder name
6. Persist settled results to the store. An item is settled once a tier
   resolves it or the LLM tier gives its final answer. Heuristic-only
   partials stay uncached so a later run with the LLM enabled retries them

Failures inside a tier are recorded in the run's ErrorCollector and never
abort the batch.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Set, Tuple

from src.common.config import Config
from src.common.dedupe import dedupe_preserving_order, generate_profile_key
from src.common.error_handling import ErrorCollector
from src.common.logger import get_logger
from src.extraction.base import Extractor
from src.extraction.heuristics import HeuristicExtractor
from src.extraction.llm_extractor import LLMExtractor
from src.extraction.placeholder import PlaceholderNameGenerator
from src.extraction.store import InMemoryProfileStore, ProfileStore
from src.extraction.types import (
    Extracted,
    ExtractedProfile,
    LowConfidence,
    SearchResultItem,
)

CACHE_SOURCE = "cache"


@dataclass
class PipelineResult:
    """
    Output of one pipeline run.

    Attributes:
        profiles: One profile per unique input item, in input order
        errors: Errors recorded by the tiers
        rate_limited: True if a tier was cut short by a provider rate limit
    """
    profiles: List[ExtractedProfile] = field(default_factory=list)
    errors: ErrorCollector = field(default_factory=ErrorCollector)
    rate_limited: bool = False

    def count_by_source(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for profile in self.profiles:
            counts[profile.source or "none"] = counts.get(profile.source or "none", 0) + 1
        return counts

    def summary(self) -> dict:
        return {
            "profiles": len(self.profiles),
            "with_company": sum(1 for p in self.profiles if p.company),
            "synthetic_names": sum(1 for p in self.profiles if p.is_synthetic),
            "by_source": self.count_by_source(),
            "errors": self.errors.summary(),
            "rate_limited": self.rate_limited,
        }


def default_strategies(use_llm: Optional[bool] = None) -> List[Extractor]:
    """Heuristics first, then the LLM fallback when enabled."""
    enabled = Config.ENABLE_LLM_FALLBACK if use_llm is None else use_llm
    strategies: List[Extractor] = [HeuristicExtractor()]
    if enabled:
        strategies.append(LLMExtractor())
    return strategies


def item_key(item: SearchResultItem) -> str:
    return generate_profile_key(url=item.link, name=item.title, company=item.snippet)


class ExtractionPipeline:
    """
    Ordered-fallback profile extraction.

    Usage:
        pipeline = ExtractionPipeline(store=JsonFileProfileStore("profiles.json"))
        result = pipeline.extract_all(items)
        for profile in result.profiles:
            print(profile.name, profile.company)
    """

    def __init__(
        self,
        strategies: Optional[Sequence[Extractor]] = None,
        store: Optional[ProfileStore] = None,
        placeholder: Optional[PlaceholderNameGenerator] = None,
        use_placeholders: Optional[bool] = None,
    ):
        self.strategies: List[Extractor] = (
            list(strategies) if strategies is not None else default_strategies()
        )
        self.store = store if store is not None else InMemoryProfileStore()
        self.placeholder = placeholder or PlaceholderNameGenerator()
        self.use_placeholders = (
            Config.ENABLE_PLACEHOLDER_NAMES if use_placeholders is None else use_placeholders
        )

    def extract_all(
        self,
        items: Sequence[SearchResultItem],
        force_refresh: bool = False,
    ) -> PipelineResult:
        """
        Extract profiles for every unique item.

        Args:
            items: Raw search items, possibly with duplicate URLs
            force_refresh: Ignore cached profiles and re-extract everything
        """
        return self._run(items, self.strategies, force_refresh=force_refresh)

    def reextract_with_llm(self, items: Sequence[SearchResultItem]) -> PipelineResult:
        """
        Re-run only the LLM tier on ``items``, bypassing the cache.

        Each item starts from its cached profile, or from the heuristic result
        when nothing is cached. The LLM answer only adds to those fields, so a
        failed call or an empty reply never loses what was already known.
        """
        llm_tiers = [s for s in self.strategies if isinstance(s, LLMExtractor)] or [LLMExtractor()]
        return self._run(items, llm_tiers, force_refresh=True, seed=True)

    def _seed_tier(self) -> Extractor:
        return next(
            (s for s in self.strategies if not isinstance(s, LLMExtractor)),
            None,
        ) or HeuristicExtractor()

    def _seed_partials(
        self,
        indexed: List[Tuple[int, SearchResultItem]],
        pending: List[int],
        errors: ErrorCollector,
    ) -> Dict[int, ExtractedProfile]:
        """Starting fields per position: the cached profile, else the heuristic result."""
        seeds: Dict[int, ExtractedProfile] = {}
        uncached: List[int] = []
        for position in pending:
            link = indexed[position][1].link
            cached = self.store.get(link) if link else None
            if cached is not None:
                seeds[position] = cached
            else:
                uncached.append(position)

        if uncached:
            batch = [indexed[position][1] for position in uncached]
            outcome = self._seed_tier().attempt_many(batch, errors)
            for position, tier_result in zip(uncached, outcome.results):
                if isinstance(tier_result, Extracted):
                    seeds[position] = tier_result.profile
                elif isinstance(tier_result, LowConfidence):
                    seeds[position] = tier_result.partial
        return seeds

    def _run(
        self,
        items: Sequence[SearchResultItem],
        strategies: Sequence[Extractor],
        force_refresh: bool,
        seed: bool = False,
    ) -> PipelineResult:
        log = get_logger(__name__, run_id=uuid.uuid4().hex, stage="pipeline")
        result = PipelineResult()

        indexed = dedupe_preserving_order(enumerate(items), key=lambda pair: item_key(pair[1]))
        if len(indexed) < len(items):
            log.info(f"Dropped {len(items) - len(indexed)} duplicate item(s)")

        profiles: Dict[int, ExtractedProfile] = {}
        # Only settled items are cached: resolved by some tier, or answered
        # by a tier whose LowConfidence is final
        settled: Set[int] = set()
        pending: List[int] = []

        for position, (_, item) in enumerate(indexed):
            cached = None if force_refresh or not item.link else self.store.get(item.link)
            if cached is not None:
                profiles[position] = replace(cached, source=CACHE_SOURCE)
            else:
                pending.append(position)

        if profiles:
            log.info(f"{len(profiles)} profile(s) served from cache")

        partials: Dict[int, ExtractedProfile] = (
            self._seed_partials(indexed, pending, result.errors) if seed else {}
        )

        for strategy in strategies:
            if not pending:
                break
            tier_log = log.bind(strategy.name)
            batch = [indexed[position][1] for position in pending]
            outcome = strategy.attempt_many(batch, result.errors)
            result.rate_limited = result.rate_limited or outcome.rate_limited

            still_pending: List[int] = []
            results = list(outcome.results) + [None] * (len(batch) - len(outcome.results))
            for position, item, tier_result in zip(pending, batch, results):
                if isinstance(tier_result, Extracted):
                    earlier = partials.pop(position, None)
                    profile = tier_result.profile
                    profiles[position] = profile.merge(earlier) if earlier else profile
                    settled.add(position)
                    continue

                if isinstance(tier_result, LowConfidence):
                    earlier = partials.get(position)
                    partial = tier_result.partial
                    partials[position] = earlier.merge(partial) if earlier else partial
                    if strategy.settles_unresolved:
                        settled.add(position)
                    tier_log.debug(f"{item.link or item.title}: {tier_result.reason}")
                else:
                    settled.discard(position)
                still_pending.append(position)

            tier_log.info(
                f"{len(pending) - len(still_pending)}/{len(pending)} item(s) resolved"
                + (" (rate limited)" if outcome.rate_limited else "")
            )
            pending = still_pending

        for position in pending:
            item = indexed[position][1]
            profiles[position] = partials.get(position) or ExtractedProfile(url=item.link)

        for position in sorted(profiles):
            original_index, item = indexed[position]
            profile = profiles[position]

            if profile.source != CACHE_SOURCE and item.link and position in settled:
                self.store.set(item.link, profile)

            if self.use_placeholders and not profile.name:
                profile = self.placeholder.fill(profile, original_index)
            result.profiles.append(profile)

        log.info(f"Extraction finished: {result.summary()}")
        if result.errors:
            for message in result.errors.get_error_messages():
                log.warning(message)
        return result
