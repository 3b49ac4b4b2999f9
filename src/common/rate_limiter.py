"""
Request budgets for Google Custom Search and the LLM provider.

Custom Search allows 100 queries per day on the free tier; the LLM provider
enforces per-minute limits. Each provider gets one shared limiter per
process: a sliding one-minute window plus an optional daily cap.

Usage:
    limiter = get_rate_limiter(Provider.GOOGLE_CSE)
    if not limiter.acquire():
        ...  # daily quota spent, stop searching
    response = session.get(...)

Limits can be overridden per provider with ``{PROVIDER}_RATE_LIMIT_PER_MIN``
and ``{PROVIDER}_DAILY_LIMIT``, e.g. ``GOOGLE_CSE_DAILY_LIMIT=10000`` for a
paid search plan.
"""

import os
import threading
import time
from collections import deque
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Deque, Dict, Optional

WINDOW_SECONDS = 60.0


class Provider(str, Enum):
    OPENAI = "openai"
    GOOGLE_CSE = "google_cse"


DEFAULT_RATE_LIMITS = {
    Provider.OPENAI: {"requests_per_minute": 500, "daily_limit": None},
    Provider.GOOGLE_CSE: {"requests_per_minute": 100, "daily_limit": 100},
}


class RateLimitExceededError(Exception):
    """A limit was hit and the limiter was told not to wait."""

    def __init__(self, provider: str, limit_type: str, current: int, limit: int):
        self.provider = provider
        self.limit_type = limit_type
        self.current = current
        self.limit = limit
        super().__init__(f"Rate limit exceeded for {provider}: {current}/{limit} ({limit_type})")


def _provider_key(provider) -> str:
    return str(getattr(provider, "value", provider))


class RateLimiter:
    """
    Thread-safe per-minute window with an optional daily cap.

    A full minute window is waited out (up to ``max_wait_seconds``). A spent
    daily cap cannot be waited out: ``acquire`` returns False straight away,
    or raises when ``allow_wait`` is False. The day rolls over at UTC
    midnight.
    """

    def __init__(
        self,
        provider: str,
        requests_per_minute: int = 60,
        daily_limit: Optional[int] = None,
        allow_wait: bool = True,
        max_wait_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.provider = _provider_key(provider)
        self.requests_per_minute = requests_per_minute
        self.daily_limit = daily_limit
        self.allow_wait = allow_wait
        self.max_wait_seconds = max_wait_seconds
        self._clock = clock
        self._sleep = sleep

        self._lock = threading.Lock()
        self._recent: Deque[float] = deque()
        self._day: Optional[date] = None
        self._used_today = 0
        self.total_requests = 0
        self.total_wait_seconds = 0.0

    def _refresh(self) -> None:
        """Drop requests older than the window and reset the daily count at midnight UTC."""
        cutoff = self._clock() - WINDOW_SECONDS
        while self._recent and self._recent[0] < cutoff:
            self._recent.popleft()

        today = datetime.now(timezone.utc).date()
        if today != self._day:
            self._day = today
            self._used_today = 0

    def _out_of_daily_budget(self) -> bool:
        return self.daily_limit is not None and self._used_today >= self.daily_limit

    def check(self) -> bool:
        """True if ``acquire`` would succeed right now without waiting."""
        with self._lock:
            self._refresh()
            return not self._out_of_daily_budget() and len(self._recent) < self.requests_per_minute

    def acquire(self) -> bool:
        """
        Take one request from the budget.

        Returns:
            True if the request may go ahead; False if the daily cap is spent
            or the minute window did not free up within max_wait_seconds

        Raises:
            RateLimitExceededError: If allow_wait is False and a limit is hit
        """
        waited = 0.0
        while True:
            with self._lock:
                self._refresh()
                if self._out_of_daily_budget():
                    if not self.allow_wait:
                        raise RateLimitExceededError(self.provider, "daily", self._used_today, self.daily_limit)
                    return False

                if len(self._recent) < self.requests_per_minute:
                    self._recent.append(self._clock())
                    self._used_today += 1
                    self.total_requests += 1
                    return True

                in_window = len(self._recent)
                wait_time = max(0.0, self._recent[0] + WINDOW_SECONDS - self._clock())

            if not self.allow_wait:
                raise RateLimitExceededError(self.provider, "per_minute", in_window, self.requests_per_minute)
            if waited + wait_time > self.max_wait_seconds:
                return False

            # Sleep in short steps so a freed slot is picked up promptly
            step = min(wait_time, 1.0) or 0.01
            waited += step
            self.total_wait_seconds += step
            self._sleep(step)

    def remaining_today(self) -> Optional[int]:
        """Requests left today, or None without a daily cap."""
        if self.daily_limit is None:
            return None
        with self._lock:
            self._refresh()
            return max(0, self.daily_limit - self._used_today)

    def reset(self) -> None:
        with self._lock:
            self._recent.clear()
            self._day = None
            self._used_today = 0
            self.total_requests = 0
            self.total_wait_seconds = 0.0


_limiters: Dict[str, RateLimiter] = {}
_limiters_lock = threading.Lock()


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value else None


def get_rate_limiter(provider: str) -> RateLimiter:
    """
    Shared limiter for ``provider``, created on first use.

    Environment overrides are read once, when the limiter is created.
    """
    key = _provider_key(provider)
    with _limiters_lock:
        if key not in _limiters:
            defaults = DEFAULT_RATE_LIMITS.get(key, {"requests_per_minute": 60, "daily_limit": None})
            rpm = _env_int(f"{key.upper()}_RATE_LIMIT_PER_MIN")
            daily = _env_int(f"{key.upper()}_DAILY_LIMIT")
            _limiters[key] = RateLimiter(
                provider=key,
                requests_per_minute=rpm or defaults["requests_per_minute"],
                daily_limit=daily if daily is not None else defaults["daily_limit"],
            )
        return _limiters[key]


def reset_global_registry() -> None:
    """Forget all shared limiters (tests)."""
    with _limiters_lock:
        _limiters.clear()
