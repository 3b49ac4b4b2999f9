"""
Google Custom Search client for LinkedIn profile discovery.

Runs ``site:linkedin.com/in`` queries against the Custom Search JSON API and
collects ``{title, snippet, link}`` items for extraction.

API Reference:
- https://developers.google.com/custom-search/v1/reference/rest/v1/cse/list

The API returns at most 10 results per page and 100 per query (start <= 91).
The free tier allows 100 queries per day, tracked by the shared GOOGLE_CSE
rate limiter.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

import requests

from src.common.config import Config
from src.common.error_handling import ErrorCollector
from src.common.rate_limiter import Provider, RateLimiter, get_rate_limiter
from src.extraction.types import SearchResultItem
from src.extraction.url_normalizer import normalize_profile_url

logger = logging.getLogger(__name__)

API_URL = "https://www.googleapis.com/customsearch/v1"
BASE_QUERY = "site:linkedin.com/in"
RESULTS_PER_PAGE = 10
# The API rejects start indexes above 91
MAX_START_INDEX = 91
REQUEST_TIMEOUT = 15


class SearchAPIError(Exception):
    """Base exception for Custom Search failures."""
    pass


class SearchRateLimitError(SearchAPIError):
    """Raised on HTTP 429 or when the local daily quota is spent."""
    pass


@dataclass
class SearchRun:
    """
    Items collected over one or more queries.

    Attributes:
        items: Unique items in discovery order
        errors: Failures that cut a query short
        rate_limited_queries: Queries abandoned because of a rate limit
    """
    items: List[SearchResultItem] = field(default_factory=list)
    errors: ErrorCollector = field(default_factory=ErrorCollector)
    rate_limited_queries: List[str] = field(default_factory=list)

    @property
    def links(self) -> List[str]:
        return [item.link for item in self.items]


def build_query(requirements: Iterable[str]) -> str:
    """
    Build a LinkedIn profile query from requirement phrases.

    >>> build_query(["Account Executive", " Stockholm ", ""])
    'site:linkedin.com/in Account Executive AND Stockholm'
    """
    terms = [term.strip() for term in requirements if term and term.strip()]
    if not terms:
        return BASE_QUERY
    return f"{BASE_QUERY} {' AND '.join(terms)}"


class GoogleCustomSearchClient:
    """
    Paginating Custom Search client.

    Usage:
        client = GoogleCustomSearchClient()
        run = client.search([build_query(["Account Executive", "Stockholm"])])
        items = run.items
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        engine_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
        page_delay: float = Config.SEARCH_PAGE_DELAY_SECONDS,
        max_pages: int = Config.SEARCH_MAX_PAGES,
        max_results: int = Config.SEARCH_MAX_RESULTS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key or Config.GOOGLE_API_KEY
        self.engine_id = engine_id or Config.GOOGLE_SEARCH_ENGINE_ID
        if not self.api_key or not self.engine_id:
            raise ValueError("GOOGLE_API_KEY and GOOGLE_SEARCH_ENGINE_ID are required for search")

        self.session = session or requests.Session()
        self.rate_limiter = rate_limiter or get_rate_limiter(Provider.GOOGLE_CSE)
        self.page_delay = page_delay
        self.max_pages = max_pages
        self.max_results = max_results
        self._sleep = sleep

    def fetch_page(self, query: str, start: int = 1) -> Dict[str, Any]:
        """
        Fetch one results page.

        Args:
            query: Search query
            start: 1-based index of the first result

        Returns:
            Parsed API response

        Raises:
            SearchRateLimitError: On HTTP 429 or spent daily quota
            SearchAPIError: On timeouts, network errors or other non-2xx responses
        """
        if not self.rate_limiter.acquire():
            raise SearchRateLimitError("Daily Custom Search quota exhausted")

        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "num": RESULTS_PER_PAGE,
            "start": start,
        }
        try:
            response = self.session.get(API_URL, params=params, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.Timeout:
            raise SearchAPIError(f"Request timed out after {REQUEST_TIMEOUT}s")
        except requests.exceptions.RequestException as e:
            raise SearchAPIError(f"Network error: {str(e)}")

        if response.status_code == 429:
            raise SearchRateLimitError("Custom Search rate limit hit (HTTP 429)")
        if response.status_code != 200:
            raise SearchAPIError(
                f"Custom Search returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise SearchAPIError(f"Invalid JSON from Custom Search: {e}")

    def search(self, queries: Iterable[str]) -> SearchRun:
        """
        Run every query, paging until results run out or a limit is reached.

        Links are de-duplicated by canonical profile URL across all queries.
        Errors end the current query and are recorded on the returned run;
        they are never raised.
        """
        run = SearchRun()
        seen: Set[str] = set()

        for query in queries:
            if len(run.items) >= self.max_results:
                break
            self._search_query(query, run, seen)

        logger.info(
            f"Search finished: {len(run.items)} unique item(s), "
            f"{len(run.errors)} error(s), {len(run.rate_limited_queries)} rate-limited query(ies)"
        )
        return run

    def _search_query(self, query: str, run: SearchRun, seen: Set[str]) -> None:
        for page in range(1, self.max_pages + 1):
            start = (page - 1) * RESULTS_PER_PAGE + 1
            if start > MAX_START_INDEX:
                break
            if page > 1 and self.page_delay > 0:
                self._sleep(self.page_delay)

            try:
                data = self.fetch_page(query, start)
            except SearchRateLimitError as e:
                logger.warning(f"Rate limited on page {page} of {query!r}, abandoning query")
                run.rate_limited_queries.append(query)
                run.errors.add_error("search", "fetch_page", f"{query}: {e}", severity="high", exception=e)
                return
            except SearchAPIError as e:
                logger.warning(f"Search failed on page {page} of {query!r}: {e}")
                run.errors.add_error("search", "fetch_page", f"{query}: {e}", exception=e)
                return

            raw_items = data.get("items") or []
            if not raw_items:
                logger.debug(f"No more results for {query!r} after page {page - 1}")
                return

            for raw in raw_items:
                item = SearchResultItem.from_api(raw)
                if not item.link:
                    continue
                key = normalize_profile_url(item.link)
                if key in seen:
                    continue
                seen.add(key)
                run.items.append(item)
                if len(run.items) >= self.max_results:
                    logger.info(f"Reached maximum of {self.max_results} results, stopping search")
                    return

            if not (data.get("queries") or {}).get("nextPage"):
                return
