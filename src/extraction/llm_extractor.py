"""
LLM Fallback Extractor

Second extraction tier. Items the heuristics could not resolve are sent to a
chat model, one request per item, in small batches with a pause between
batches. A 429 from the provider stops the run; the remaining items keep
whatever the earlier tiers found.
"""

import logging
import re
import time
from typing import Any, Callable, List, Optional, Sequence

import openai
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, ValidationError, field_validator
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.common.config import Config
from src.common.error_handling import ErrorCollector
from src.common.json_utils import extract_json_fields, parse_llm_json
from src.common.llm_factory import create_extraction_llm
from src.common.rate_limiter import Provider, RateLimiter, get_rate_limiter
from src.extraction.base import Extractor, TierOutcome
from src.extraction.company_validator import validate_company
from src.extraction.prompts import (
    PROFILE_EXTRACTION_SYSTEM_PROMPT,
    PROFILE_EXTRACTION_USER_TEMPLATE,
)
from src.extraction.types import (
    Extracted,
    ExtractedProfile,
    ExtractionResult,
    LowConfidence,
    SearchResultItem,
)

logger = logging.getLogger(__name__)

FIELD_CONFIDENCE = 0.25
RESPONSE_FIELDS = ("name", "title", "company")

# Values models return when they mean "nothing"
_EMPTY_ANSWERS = {"", "not available", "not specified", "unknown", "n/a", "none", "null", "-"}
_INVALID_NAME_CHARS = re.compile(r"[0-9!@#$%^&*(),.?\":{}|<>]")

# Transient failures worth retrying; 429 is deliberately not one of them
TRANSIENT_ERRORS = (openai.APIConnectionError, openai.APITimeoutError, openai.InternalServerError)


class LLMRateLimitError(Exception):
    """The LLM provider answered 429 or the local daily cap is spent."""
    pass


class LLMProfileResponse(BaseModel):
    """Validated shape of the model's JSON answer."""

    name: str = ""
    title: str = ""
    company: str = ""

    @field_validator("name", "title", "company", mode="before")
    @classmethod
    def coerce_empty(cls, value: Any) -> str:
        if value is None:
            return ""
        text = str(value).strip()
        return "" if text.lower() in _EMPTY_ANSWERS else text

    @field_validator("name")
    @classmethod
    def require_full_name(cls, value: str) -> str:
        """A usable name has at least two words and no digits or symbols."""
        if not value:
            return ""
        if len(value.split()) < 2 or _INVALID_NAME_CHARS.search(value):
            return ""
        return value


def is_rate_limit_error(exc: BaseException) -> bool:
    if isinstance(exc, (openai.RateLimitError, LLMRateLimitError)):
        return True
    return getattr(exc, "status_code", None) == 429


def parse_profile_response(content: str) -> LLMProfileResponse:
    """
    Parse the model's reply into a validated response.

    Falls back to pulling ``"field": "value"`` pairs out of the raw text when
    the reply is not repairable JSON. Never raises; an unusable reply gives
    an all-empty response.
    """
    try:
        data = parse_llm_json(content)
    except ValueError as e:
        logger.debug(f"LLM reply is not JSON ({e}), trying field regex")
        data = extract_json_fields(content or "", RESPONSE_FIELDS)

    try:
        return LLMProfileResponse(**{key: data.get(key) for key in RESPONSE_FIELDS})
    except ValidationError as e:
        logger.warning(f"LLM reply failed validation: {e}")
        return LLMProfileResponse()


class LLMExtractor(Extractor):
    """
    Chat-model extraction tier.

    Usage:
        extractor = LLMExtractor()
        outcome = extractor.attempt_many(items, errors)
    """

    name = "llm"
    settles_unresolved = True

    def __init__(
        self,
        llm: Optional[Any] = None,
        batch_size: int = Config.LLM_BATCH_SIZE,
        batch_delay: float = Config.LLM_BATCH_DELAY_SECONDS,
        rate_limiter: Optional[RateLimiter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._llm = llm
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.rate_limiter = rate_limiter or get_rate_limiter(Provider.OPENAI)
        self._sleep = sleep

    @property
    def llm(self):
        if self._llm is None:
            self._llm = create_extraction_llm()
        return self._llm

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    def _invoke(self, item: SearchResultItem) -> str:
        """Call the LLM for one item and return the raw reply text."""
        if not self.rate_limiter.acquire():
            raise LLMRateLimitError("Local OpenAI request budget exhausted")

        messages = [
            SystemMessage(content=PROFILE_EXTRACTION_SYSTEM_PROMPT),
            HumanMessage(content=PROFILE_EXTRACTION_USER_TEMPLATE.format(
                title=item.title or "",
                snippet=item.snippet or "",
            )),
        ]
        response = self.llm.invoke(messages)
        return response.content if isinstance(response.content, str) else str(response.content)

    def attempt(self, item: SearchResultItem) -> ExtractionResult:
        """
        Extract one item with the LLM.

        Raises:
            Whatever the LLM client raises after retries. Callers that need
            the degrade-to-partial behaviour use ``attempt_many``.
        """
        content = self._invoke(item)
        parsed = parse_profile_response(content)
        company = validate_company(parsed.company) if parsed.company else ""

        profile = ExtractedProfile(
            name=parsed.name,
            title=parsed.title,
            company=company,
            url=item.link,
            source=self.name,
        )
        present = sum(1 for value in (profile.name, profile.title, profile.company) if value)
        profile.confidence = round(present * FIELD_CONFIDENCE, 2)

        if profile.company and (profile.name or profile.title):
            return Extracted(profile)
        if parsed.company and not company:
            return LowConfidence(partial=profile, reason=f"company rejected: {parsed.company}")
        return LowConfidence(partial=profile, reason="llm found no company")

    def attempt_many(
        self,
        items: Sequence[SearchResultItem],
        errors: ErrorCollector,
    ) -> TierOutcome:
        """
        Attempt items in batches of ``batch_size`` with ``batch_delay`` between batches.

        A failing item is recorded in ``errors`` and left as None. A rate
        limit aborts everything still pending.
        """
        results: List[Optional[ExtractionResult]] = [None] * len(items)
        total_batches = (len(items) + self.batch_size - 1) // self.batch_size

        for batch_number, start in enumerate(range(0, len(items), self.batch_size), start=1):
            if batch_number > 1 and self.batch_delay > 0:
                self._sleep(self.batch_delay)

            logger.info(f"LLM batch {batch_number}/{total_batches}")
            for index in range(start, min(start + self.batch_size, len(items))):
                item = items[index]
                try:
                    results[index] = self.attempt(item)
                except Exception as e:
                    if is_rate_limit_error(e):
                        skipped = len(items) - index
                        logger.warning(f"LLM rate limited, skipping {skipped} remaining item(s)")
                        errors.add_error(
                            stage=self.name,
                            operation="rate_limit",
                            message=f"Rate limited by LLM provider; {skipped} item(s) not attempted",
                            severity="high",
                            exception=e,
                        )
                        return TierOutcome(results=results, rate_limited=True)

                    logger.warning(f"LLM extraction failed for {item.link or item.title!r}: {e}")
                    errors.add_error(
                        stage=self.name,
                        operation="extract",
                        message=f"{item.link or item.title}: {e}",
                        exception=e,
                    )

        return TierOutcome(results=results)
