"""
Unit tests for src/extraction/pipeline.py

Tests the ordered-fallback pipeline with stub tiers:
- Heuristic results skip the LLM tier
- LowConfidence items fall through, partials are merged
- Rejected companies stay empty when every tier fails
- Duplicate URLs collapse to the first occurrence
- Cache hits, force_refresh, and what gets persisted
- Rate limits and errors degrade instead of aborting
- Placeholder names keyed by input position
- LLM re-extraction seeded from the cache or the heuristics
"""

from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from src.common.error_handling import ErrorCollector
from src.extraction.base import Extractor, TierOutcome
from src.extraction.heuristics import HeuristicExtractor
from src.extraction.llm_extractor import LLMExtractor
from src.extraction.pipeline import CACHE_SOURCE, ExtractionPipeline, default_strategies
from src.extraction.store import InMemoryProfileStore
from src.extraction.types import (
    Extracted,
    ExtractedProfile,
    ExtractionResult,
    LowConfidence,
    SearchResultItem,
)


class StubExtractor(Extractor):
    """Tier returning canned results by item link; records what it saw."""

    def __init__(
        self,
        name: str,
        results: Dict[str, ExtractionResult],
        rate_limit_after: Optional[int] = None,
        settles: bool = False,
    ):
        self.name = name
        self.settles_unresolved = settles
        self.results = results
        self.rate_limit_after = rate_limit_after
        self.seen: List[SearchResultItem] = []

    def attempt(self, item):
        self.seen.append(item)
        return self.results.get(item.link, LowConfidence(partial=ExtractedProfile(url=item.link), reason="stub"))

    def attempt_many(self, items, errors):
        if self.rate_limit_after is None:
            return super().attempt_many(items, errors)
        done = [self.attempt(item) for item in items[:self.rate_limit_after]]
        errors.add_error(stage=self.name, operation="rate_limit", message="429", severity="high")
        return TierOutcome(results=done, rate_limited=True)


def url(handle: str) -> str:
    return f"https://www.linkedin.com/in/{handle}"


def item(handle: str, title: str = "", snippet: str = "") -> SearchResultItem:
    return SearchResultItem(title=title, snippet=snippet, link=url(handle))


def resolved(handle: str, name: str, company: str, source: str = "stub") -> Extracted:
    return Extracted(ExtractedProfile(name=name, company=company, url=url(handle), source=source))


def partial(handle: str, reason: str = "no company found", **fields) -> LowConfidence:
    return LowConfidence(partial=ExtractedProfile(url=url(handle), **fields), reason=reason)


@pytest.fixture
def store():
    return InMemoryProfileStore()


# ===== TESTS: Tier ordering =====

class TestTierOrdering:
    """Each tier only sees what earlier tiers left unresolved."""

    def test_resolved_items_skip_later_tiers(self, store):
        first = StubExtractor("heuristic", {
            url("a"): resolved("a", "Anna Lind", "Klarna"),
            url("b"): partial("b", name="Bo Ek"),
        })
        second = StubExtractor("llm", {url("b"): resolved("b", "", "Spotify", source="llm")})

        result = ExtractionPipeline([first, second], store=store, use_placeholders=False).extract_all(
            [item("a"), item("b")]
        )

        assert [i.link for i in second.seen] == [url("b")]
        assert [p.company for p in result.profiles] == ["Klarna", "Spotify"]

    def test_partials_merge_into_later_result(self, store):
        """Should keep the earlier tier's name when the later tier finds the company."""
        first = StubExtractor("heuristic", {url("b"): partial("b", name="Bo Ek", location="Malmö")})
        second = StubExtractor("llm", {url("b"): resolved("b", "", "Spotify", source="llm")})

        profile = ExtractionPipeline([first, second], store=store, use_placeholders=False).extract_all(
            [item("b")]
        ).profiles[0]

        assert profile.name == "Bo Ek"
        assert profile.company == "Spotify"
        assert profile.location == "Malmö"
        assert profile.source == "llm"

    def test_all_tiers_fail_keeps_partial(self, store):
        """Should return the merged partial with company '' when nothing validates."""
        first = StubExtractor("heuristic", {
            url("m"): partial("m", reason="company rejected: Stockholm", name="Maria Garcia", title="Marketing Director"),
        })
        second = StubExtractor("llm", {url("m"): partial("m", reason="company rejected: Stockholm")})

        profile = ExtractionPipeline([first, second], store=store, use_placeholders=False).extract_all(
            [item("m")]
        ).profiles[0]

        assert profile.company == ""
        assert profile.name == "Maria Garcia"
        assert profile.title == "Marketing Director"
        assert profile.url == url("m")

    def test_output_follows_input_order(self, store):
        first = StubExtractor("heuristic", {url("b"): resolved("b", "Bo Ek", "Klarna")})
        second = StubExtractor("llm", {url("a"): resolved("a", "Anna Lind", "Spotify")})

        result = ExtractionPipeline([first, second], store=store, use_placeholders=False).extract_all(
            [item("a"), item("b")]
        )

        assert [p.url for p in result.profiles] == [url("a"), url("b")]

    def test_empty_input(self, store):
        result = ExtractionPipeline([HeuristicExtractor()], store=store).extract_all([])
        assert result.profiles == []
        assert len(result.errors) == 0


# ===== TESTS: De-duplication =====

class TestDeduplication:
    """Items with the same canonical URL collapse to one profile."""

    def test_duplicate_urls_collapse(self, store):
        tier = StubExtractor("heuristic", {url("a"): resolved("a", "Anna Lind", "Klarna")})
        items = [
            SearchResultItem(title="first", link="https://se.linkedin.com/in/a?trk=1"),
            SearchResultItem(title="second", link=url("a") + "/"),
        ]

        result = ExtractionPipeline([tier], store=store, use_placeholders=False).extract_all(items)

        assert len(result.profiles) == 1
        assert [i.title for i in tier.seen] == ["first"]


# ===== TESTS: Cache =====

class TestCache:
    """Profile store interaction."""

    def test_fresh_results_are_cached(self, store):
        tier = StubExtractor("heuristic", {url("a"): resolved("a", "Anna Lind", "Klarna")})
        ExtractionPipeline([tier], store=store).extract_all([item("a")])

        assert store.get(url("a")).company == "Klarna"

    def test_cache_hit_skips_tiers(self, store):
        store.set(url("a"), ExtractedProfile(name="Anna Lind", company="Klarna", url=url("a"), source="llm"))
        tier = StubExtractor("heuristic", {})

        result = ExtractionPipeline([tier], store=store).extract_all([item("a")])

        assert tier.seen == []
        assert result.profiles[0].company == "Klarna"
        assert result.profiles[0].source == CACHE_SOURCE

    def test_force_refresh_ignores_cache(self, store):
        store.set(url("a"), ExtractedProfile(name="Old Name", company="Old Co", url=url("a")))
        tier = StubExtractor("heuristic", {url("a"): resolved("a", "Anna Lind", "Klarna")})

        result = ExtractionPipeline([tier], store=store).extract_all([item("a")], force_refresh=True)

        assert len(tier.seen) == 1
        assert result.profiles[0].company == "Klarna"
        assert store.get(url("a")).company == "Klarna"

    def test_synthetic_names_not_cached(self, store):
        """Should cache the nameless profile, never the placeholder name."""
        tier = StubExtractor("heuristic", {url("a"): resolved("a", "", "Klarna")})

        result = ExtractionPipeline([tier], store=store, use_placeholders=True).extract_all([item("a")])

        assert result.profiles[0].is_synthetic is True
        assert store.get(url("a")).name == ""
        assert store.get(url("a")).is_synthetic is False

    def test_rate_limited_items_not_cached(self, store):
        first = StubExtractor("heuristic", {})
        second = StubExtractor("llm", {url("a"): resolved("a", "Anna Lind", "Klarna")}, rate_limit_after=1)

        ExtractionPipeline([first, second], store=store, use_placeholders=False).extract_all(
            [item("a"), item("b")]
        )

        assert url("a") in store
        assert url("b") not in store

    def test_heuristic_partials_not_cached(self, store):
        """Unresolved items from a run without the LLM tier should be retried later."""
        tier = StubExtractor("heuristic", {url("a"): partial("a", name="Anna Lind")})

        ExtractionPipeline([tier], store=store, use_placeholders=False).extract_all([item("a")])

        assert url("a") not in store

    def test_final_tier_answer_cached(self, store):
        """Should cache an unresolved item once the last-resort tier has answered."""
        first = StubExtractor("heuristic", {url("a"): partial("a", name="Anna Lind")})
        last = StubExtractor("llm", {url("a"): partial("a", reason="company rejected: Stockholm")}, settles=True)

        ExtractionPipeline([first, last], store=store, use_placeholders=False).extract_all([item("a")])

        assert store.get(url("a")).name == "Anna Lind"
        assert store.get(url("a")).company == ""


# ===== TESTS: Failure handling =====

class TestFailureHandling:
    """Rate limits and errors degrade to partial results."""

    def test_rate_limit_reported(self, store):
        first = StubExtractor("heuristic", {url("b"): partial("b", name="Bo Ek")})
        second = StubExtractor("llm", {url("a"): resolved("a", "Anna Lind", "Klarna")}, rate_limit_after=1)

        result = ExtractionPipeline([first, second], store=store, use_placeholders=False).extract_all(
            [item("a"), item("b"), item("c")]
        )

        assert result.rate_limited is True
        assert len(result.profiles) == 3
        assert result.profiles[0].company == "Klarna"
        assert result.profiles[1].name == "Bo Ek"
        assert result.profiles[2].name == ""
        assert result.errors.errors[0].operation == "rate_limit"
        assert result.summary()["rate_limited"] is True

    def test_llm_errors_do_not_abort(self, store):
        """A failing LLM call should leave the heuristic partial in place."""
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("boom")
        llm_tier = LLMExtractor(llm=llm, sleep=lambda _: None)
        items = [SearchResultItem(
            title="Maria Garcia - Marketing Director - Stockholm | LinkedIn",
            link=url("maria-garcia"),
        )]

        result = ExtractionPipeline([HeuristicExtractor(), llm_tier], store=store, use_placeholders=False).extract_all(items)

        assert result.profiles[0].name == "Maria Garcia"
        assert result.profiles[0].company == ""
        assert len(result.errors) == 1
        assert url("maria-garcia") not in store


# ===== TESTS: Placeholders =====

class TestPlaceholders:
    """Synthetic names for nameless profiles."""

    def test_placeholder_uses_input_position(self, store):
        tier = StubExtractor("heuristic", {url("a"): resolved("a", "Anna Lind", "Klarna")})

        result = ExtractionPipeline([tier], store=store, use_placeholders=True).extract_all(
            [item("a"), item("b"), item("c")]
        )

        assert result.profiles[0].name == "Anna Lind"
        assert result.profiles[0].is_synthetic is False
        assert result.profiles[1].name == "Lars Andersson"
        assert result.profiles[2].name == "Anders Andersson"
        assert all(p.is_synthetic for p in result.profiles[1:])
        assert result.summary()["synthetic_names"] == 2

    def test_placeholders_disabled(self, store):
        tier = StubExtractor("heuristic", {})
        result = ExtractionPipeline([tier], store=store, use_placeholders=False).extract_all([item("a")])
        assert result.profiles[0].name == ""
        assert result.profiles[0].is_synthetic is False


# ===== TESTS: End to end with the real heuristic tier =====

class TestWithHeuristics:
    """Pipeline driven by the real heuristic tier."""

    def test_reference_item(self, store, klarna_item, location_company_item):
        llm = MagicMock()
        llm.invoke.return_value = MagicMock(content='{"name": "Maria Garcia", "title": "", "company": "H&M"}')
        pipeline = ExtractionPipeline(
            [HeuristicExtractor(), LLMExtractor(llm=llm, sleep=lambda _: None)],
            store=store,
            use_placeholders=False,
        )

        result = pipeline.extract_all([klarna_item, location_company_item])

        assert llm.invoke.call_count == 1
        erik, maria = result.profiles
        assert (erik.name, erik.title, erik.company, erik.source) == (
            "Erik Svensson", "Account Executive", "Klarna", "heuristic"
        )
        assert (maria.name, maria.title, maria.company, maria.source) == (
            "Maria Garcia", "Marketing Director", "H&M", "llm"
        )
        assert result.count_by_source() == {"heuristic": 1, "llm": 1}

    def test_reextract_with_llm_bypasses_cache(self, store, klarna_item):
        llm = MagicMock()
        llm.invoke.return_value = MagicMock(content='{"name": "Erik Svensson", "title": "AE", "company": "Klarna"}')
        pipeline = ExtractionPipeline(
            [HeuristicExtractor(), LLMExtractor(llm=llm, sleep=lambda _: None)],
            store=store,
        )
        pipeline.extract_all([klarna_item])
        assert llm.invoke.call_count == 0

        result = pipeline.reextract_with_llm([klarna_item])

        assert llm.invoke.call_count == 1
        assert result.profiles[0].source == "llm"
        assert store.get(klarna_item.link).title == "AE"

    def test_run_without_llm_does_not_block_later_llm_run(self, store, location_company_item):
        """A heuristic-only partial must still reach the LLM on the next run."""
        ExtractionPipeline([HeuristicExtractor()], store=store, use_placeholders=False).extract_all(
            [location_company_item]
        )
        assert location_company_item.link not in store

        llm = MagicMock()
        llm.invoke.return_value = MagicMock(content='{"name": "Maria Garcia", "title": "", "company": "H&M"}')
        result = ExtractionPipeline(
            [HeuristicExtractor(), LLMExtractor(llm=llm, sleep=lambda _: None)],
            store=store,
            use_placeholders=False,
        ).extract_all([location_company_item])

        assert llm.invoke.call_count == 1
        assert result.profiles[0].company == "H&M"
        assert store.get(location_company_item.link).company == "H&M"


# ===== TESTS: Re-extraction =====

def llm_pipeline(store, llm) -> ExtractionPipeline:
    return ExtractionPipeline(
        [HeuristicExtractor(), LLMExtractor(llm=llm, sleep=lambda _: None)],
        store=store,
        use_placeholders=True,
    )


class TestReextractWithLlm:
    """Re-running the LLM tier never loses fields already known."""

    def test_empty_reply_keeps_cached_profile(self, store, klarna_item):
        """Should keep the cached fields when the LLM finds nothing."""
        llm = MagicMock()
        pipeline = llm_pipeline(store, llm)
        pipeline.extract_all([klarna_item])
        llm.invoke.return_value = MagicMock(content="I could not find anything.")

        result = pipeline.reextract_with_llm([klarna_item])

        assert llm.invoke.call_count == 1
        profile = result.profiles[0]
        assert (profile.name, profile.title, profile.company) == (
            "Erik Svensson", "Account Executive", "Klarna"
        )
        assert store.get(klarna_item.link).company == "Klarna"
        assert store.get(klarna_item.link).name == "Erik Svensson"

    def test_llm_error_keeps_cached_name(self, store, klarna_item):
        """Should return the cached profile, not a placeholder, when the call fails."""
        llm = MagicMock()
        pipeline = llm_pipeline(store, llm)
        pipeline.extract_all([klarna_item])
        llm.invoke.side_effect = RuntimeError("boom")

        result = pipeline.reextract_with_llm([klarna_item])

        profile = result.profiles[0]
        assert profile.name == "Erik Svensson"
        assert profile.is_synthetic is False
        assert profile.company == "Klarna"
        assert len(result.errors) == 1
        assert store.get(klarna_item.link).company == "Klarna"

    def test_uncached_item_seeded_from_heuristics(self, store, klarna_item):
        """Without a cached profile the heuristic result is the starting point."""
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("boom")

        result = llm_pipeline(store, llm).reextract_with_llm([klarna_item])

        profile = result.profiles[0]
        assert (profile.name, profile.company) == ("Erik Svensson", "Klarna")
        assert profile.is_synthetic is False
        assert klarna_item.link not in store

    def test_llm_answer_fills_missing_fields(self, store, title_only_item):
        """Should keep cached fields and add what the LLM found."""
        store.set(title_only_item.link, ExtractedProfile(
            name="Anna Lindqvist", title="CTO", url=title_only_item.link, source="heuristic",
        ))
        llm = MagicMock()
        llm.invoke.return_value = MagicMock(content='{"name": "", "title": "", "company": "Spotify"}')

        result = llm_pipeline(store, llm).reextract_with_llm([title_only_item])

        profile = result.profiles[0]
        assert (profile.name, profile.title, profile.company) == ("Anna Lindqvist", "CTO", "Spotify")
        assert store.get(title_only_item.link).company == "Spotify"


class TestDefaultStrategies:
    """Tests for default_strategies."""

    def test_llm_enabled(self):
        tiers = default_strategies(use_llm=True)
        assert [type(t) for t in tiers] == [HeuristicExtractor, LLMExtractor]

    def test_llm_disabled(self):
        tiers = default_strategies(use_llm=False)
        assert [type(t) for t in tiers] == [HeuristicExtractor]

    def test_errors_collector_type(self):
        assert isinstance(ExtractionPipeline([], store=InMemoryProfileStore()).extract_all([]).errors, ErrorCollector)
