"""
Unit tests for src/extraction/llm_extractor.py

Tests the LLM fallback tier without real API calls:
- Prompt construction and JSON / regex reply parsing
- Company validation of LLM answers
- Batching with inter-batch delay
- 429 handling: abort remaining items, report rate_limited
- Per-item errors recorded, never raised
- Tenacity retries on transient connection errors
"""

from unittest.mock import MagicMock

import openai
import pytest
from langchain_core.messages import HumanMessage, SystemMessage
from tenacity import wait_none

from src.common.error_handling import ErrorCollector
from src.extraction.llm_extractor import (
    LLMExtractor,
    LLMProfileResponse,
    is_rate_limit_error,
    parse_profile_response,
)
from src.extraction.types import Extracted, LowConfidence, SearchResultItem


class FakeRateLimitError(Exception):
    """Stands in for an HTTP 429 from the provider."""

    status_code = 429


def make_reply(content: str) -> MagicMock:
    reply = MagicMock()
    reply.content = content
    return reply


def make_items(count: int):
    return [
        SearchResultItem(
            title=f"Person {i} - Engineer",
            snippet="",
            link=f"https://www.linkedin.com/in/person-{i}",
        )
        for i in range(count)
    ]


@pytest.fixture
def mock_llm():
    llm = MagicMock()
    llm.invoke.return_value = make_reply('{"name": "Anna Lind", "title": "CTO", "company": "Spotify"}')
    return llm


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def extractor(mock_llm, sleeps):
    return LLMExtractor(llm=mock_llm, batch_size=5, batch_delay=1.0, sleep=sleeps.append)


# ===== TESTS: Response parsing =====

class TestParseProfileResponse:
    """Tests for parse_profile_response and LLMProfileResponse."""

    def test_parses_json(self):
        """Should read all three fields from JSON."""
        parsed = parse_profile_response('{"name": "Anna Lind", "title": "CTO", "company": "Spotify"}')
        assert parsed == LLMProfileResponse(name="Anna Lind", title="CTO", company="Spotify")

    def test_parses_markdown_wrapped_json(self):
        """Should strip markdown fences."""
        parsed = parse_profile_response('```json\n{"name": "Anna Lind", "company": "Spotify"}\n```')
        assert parsed.company == "Spotify"
        assert parsed.title == ""

    def test_falls_back_to_field_regex(self):
        """Should pull fields out of non-JSON text."""
        parsed = parse_profile_response('Sure! name: "Anna Lind", company: "Spotify"')
        assert parsed.name == "Anna Lind"
        assert parsed.company == "Spotify"

    def test_unusable_reply_gives_empty_fields(self):
        """Should never raise on garbage."""
        parsed = parse_profile_response("I cannot help with that.")
        assert parsed == LLMProfileResponse()

    @pytest.mark.parametrize("value", [None, "Not available", "unknown", "N/A", "  "])
    def test_empty_answers_coerced(self, value):
        """Should treat placeholder answers as empty."""
        assert LLMProfileResponse(company=value).company == ""

    @pytest.mark.parametrize("name,expected", [
        ("Anna Lind", "Anna Lind"),
        ("Anna", ""),
        ("Anna Lind 2", ""),
        ("Anna (Lind)", ""),
    ])
    def test_name_needs_two_clean_words(self, name, expected):
        """Should drop single-word or symbol-laden names."""
        assert LLMProfileResponse(name=name).name == expected


# ===== TESTS: Single attempts =====

class TestAttempt:
    """Tests for LLMExtractor.attempt."""

    def test_sends_system_and_user_messages(self, extractor, mock_llm):
        """Should send the fixed system prompt and the item's title/snippet."""
        item = SearchResultItem(title="CTO at Spotify", snippet="Stockholm", link="")
        extractor.attempt(item)

        messages = mock_llm.invoke.call_args[0][0]
        assert isinstance(messages[0], SystemMessage)
        assert "JSON" in messages[0].content
        assert isinstance(messages[1], HumanMessage)
        assert messages[1].content == "Title: CTO at Spotify\nSnippet: Stockholm"

    def test_cto_at_spotify(self, extractor, mock_llm):
        """Should give company Spotify for 'CTO at Spotify'."""
        mock_llm.invoke.return_value = make_reply('{"name": "", "title": "CTO", "company": "Spotify"}')
        result = extractor.attempt(SearchResultItem(title="CTO at Spotify", snippet="", link=""))

        assert isinstance(result, Extracted)
        assert result.profile.company == "Spotify"
        assert result.profile.title == "CTO"
        assert result.profile.source == "llm"

    def test_validates_company(self, extractor, mock_llm):
        """Should reject LLM companies that fail the validator."""
        mock_llm.invoke.return_value = make_reply('{"name": "Maria Garcia", "title": "", "company": "Stockholm"}')
        result = extractor.attempt(SearchResultItem(title="Maria Garcia - Stockholm", link=""))

        assert isinstance(result, LowConfidence)
        assert result.partial.company == ""
        assert result.partial.name == "Maria Garcia"
        assert "Stockholm" in result.reason

    def test_canonicalizes_company(self, extractor, mock_llm):
        """Should apply allow-list casing to LLM answers."""
        mock_llm.invoke.return_value = make_reply('{"name": "Anna Lind", "title": "CTO", "company": "Klarna AB"}')
        result = extractor.attempt(SearchResultItem(title="x", link=""))
        assert result.profile.company == "Klarna"

    def test_confidence_per_field(self, extractor):
        """Should score 0.25 per extracted field."""
        result = extractor.attempt(SearchResultItem(title="x", link=""))
        assert result.profile.confidence == pytest.approx(0.75)

    def test_invalid_batch_size(self, mock_llm):
        """Should reject a batch size below 1."""
        with pytest.raises(ValueError):
            LLMExtractor(llm=mock_llm, batch_size=0)


# ===== TESTS: Batching and failures =====

class TestAttemptMany:
    """Tests for LLMExtractor.attempt_many."""

    def test_batches_with_delay(self, extractor, mock_llm, sleeps):
        """Should sleep batch_delay between batches, not before the first."""
        outcome = extractor.attempt_many(make_items(12), ErrorCollector())

        assert len(outcome.results) == 12
        assert all(isinstance(r, Extracted) for r in outcome.results)
        assert mock_llm.invoke.call_count == 12
        assert sleeps == [1.0, 1.0]
        assert outcome.rate_limited is False

    def test_rate_limit_aborts_remaining(self, extractor, mock_llm):
        """Should stop at the first 429 and leave the rest unattempted."""
        ok = make_reply('{"name": "Anna Lind", "title": "CTO", "company": "Spotify"}')
        mock_llm.invoke.side_effect = [ok, ok, ok, FakeRateLimitError("429 Too Many Requests")]
        errors = ErrorCollector()

        outcome = extractor.attempt_many(make_items(8), errors)

        assert outcome.rate_limited is True
        assert all(isinstance(r, Extracted) for r in outcome.results[:3])
        assert outcome.results[3:] == [None] * 5
        assert mock_llm.invoke.call_count == 4
        assert len(errors) == 1
        assert errors.errors[0].operation == "rate_limit"
        assert "5 item(s)" in errors.errors[0].message

    def test_item_error_recorded_and_skipped(self, extractor, mock_llm):
        """Should record a failing item and continue with the next."""
        ok = make_reply('{"name": "Anna Lind", "title": "CTO", "company": "Spotify"}')
        mock_llm.invoke.side_effect = [ok, RuntimeError("boom"), ok]
        errors = ErrorCollector()

        outcome = extractor.attempt_many(make_items(3), errors)

        assert outcome.rate_limited is False
        assert isinstance(outcome.results[0], Extracted)
        assert outcome.results[1] is None
        assert isinstance(outcome.results[2], Extracted)
        assert len(errors) == 1
        assert "boom" in errors.errors[0].message

    def test_empty_input(self, extractor, mock_llm, sleeps):
        """Should not call the LLM for no items."""
        outcome = extractor.attempt_many([], ErrorCollector())
        assert outcome.results == []
        mock_llm.invoke.assert_not_called()
        assert sleeps == []

    def test_spent_daily_budget_counts_as_rate_limit(self, mock_llm):
        """Should treat an exhausted local budget like a 429."""
        limiter = MagicMock()
        limiter.acquire.return_value = False
        extractor = LLMExtractor(llm=mock_llm, rate_limiter=limiter, sleep=lambda _: None)

        outcome = extractor.attempt_many(make_items(2), ErrorCollector())

        assert outcome.rate_limited is True
        mock_llm.invoke.assert_not_called()


# ===== TESTS: Retries =====

def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=MagicMock())


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Skip tenacity's backoff between attempts."""
    monkeypatch.setattr(LLMExtractor._invoke.retry, "wait", wait_none())


@pytest.mark.usefixtures("no_retry_wait")
class TestRetries:
    """Transient provider failures are retried, 429s are not."""

    def test_connection_error_retried_then_succeeds(self, extractor, mock_llm):
        """Should retry a dropped connection and use the next reply."""
        ok = make_reply('{"name": "Anna Lind", "title": "CTO", "company": "Spotify"}')
        mock_llm.invoke.side_effect = [connection_error(), ok]
        errors = ErrorCollector()

        outcome = extractor.attempt_many(make_items(1), errors)

        assert mock_llm.invoke.call_count == 2
        assert isinstance(outcome.results[0], Extracted)
        assert outcome.results[0].profile.company == "Spotify"
        assert len(errors) == 0

    def test_gives_up_after_three_attempts(self, extractor, mock_llm):
        """Should record the failure once retries are spent and move on."""
        ok = make_reply('{"name": "Anna Lind", "title": "CTO", "company": "Spotify"}')
        mock_llm.invoke.side_effect = [connection_error()] * 3 + [ok]
        errors = ErrorCollector()

        outcome = extractor.attempt_many(make_items(2), errors)

        assert mock_llm.invoke.call_count == 4
        assert outcome.results[0] is None
        assert isinstance(outcome.results[1], Extracted)
        assert len(errors) == 1
        assert errors.errors[0].exception_type == "APIConnectionError"
        assert outcome.rate_limited is False

    def test_rate_limit_not_retried(self, extractor, mock_llm):
        """Should stop on the first 429 without another attempt."""
        mock_llm.invoke.side_effect = FakeRateLimitError("429")

        outcome = extractor.attempt_many(make_items(1), ErrorCollector())

        assert mock_llm.invoke.call_count == 1
        assert outcome.rate_limited is True

    def test_other_errors_not_retried(self, extractor, mock_llm):
        mock_llm.invoke.side_effect = ValueError("bad request")

        extractor.attempt_many(make_items(1), ErrorCollector())

        assert mock_llm.invoke.call_count == 1


class TestIsRateLimitError:
    """Tests for is_rate_limit_error."""

    def test_status_code_429(self):
        assert is_rate_limit_error(FakeRateLimitError("x"))

    def test_other_errors(self):
        assert not is_rate_limit_error(RuntimeError("x"))
