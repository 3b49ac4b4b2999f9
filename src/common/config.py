"""
Configuration loader for the candidate profile extraction pipeline.

Loads all settings from environment variables (.env file).
Validates required settings and provides type-safe access.
"""

import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """
    Centralized configuration for search, extraction and export.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== LLM APIs =====
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "")

    # ===== Google Custom Search =====
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    GOOGLE_SEARCH_ENGINE_ID: str = os.getenv("GOOGLE_SEARCH_ENGINE_ID", "")

    # Daily quota: GOOGLE_CSE_DAILY_LIMIT, read by the rate limiter
    # Pagination: 10 results per page, start index capped at 91 by the API
    SEARCH_MAX_PAGES: int = int(os.getenv("SEARCH_MAX_PAGES", "10"))
    SEARCH_MAX_RESULTS: int = int(os.getenv("SEARCH_MAX_RESULTS", "4000"))
    SEARCH_PAGE_DELAY_SECONDS: float = float(os.getenv("SEARCH_PAGE_DELAY_SECONDS", "0.15"))

    # ===== LLM Extraction =====
    EXTRACTION_MODEL: str = os.getenv("EXTRACTION_MODEL", "gpt-4o-mini")
    # Extraction must stay near-deterministic
    MAX_EXTRACTION_TEMPERATURE: float = 0.3
    EXTRACTION_TEMPERATURE: float = min(
        float(os.getenv("EXTRACTION_TEMPERATURE", "0.1")), MAX_EXTRACTION_TEMPERATURE
    )
    LLM_BATCH_SIZE: int = int(os.getenv("LLM_BATCH_SIZE", "5"))
    LLM_BATCH_DELAY_SECONDS: float = float(os.getenv("LLM_BATCH_DELAY_SECONDS", "1.0"))

    # ===== Profile Cache =====
    PROFILE_CACHE_PATH: str = os.getenv("PROFILE_CACHE_PATH", "./data/profile_cache.json")

    # ===== Feature Flags =====
    ENABLE_LLM_FALLBACK: bool = _env_bool("ENABLE_LLM_FALLBACK", "true")
    # Synthetic names for profiles no tier could name
    ENABLE_PLACEHOLDER_NAMES: bool = _env_bool("ENABLE_PLACEHOLDER_NAMES", "true")

    @classmethod
    def validate(cls, require_search: bool = True) -> None:
        """
        Validate that all required configuration is present.
        Raises ValueError if critical settings are missing.
        """
        required_settings = {}

        if cls.ENABLE_LLM_FALLBACK:
            required_settings["OPENAI_API_KEY"] = cls.OPENAI_API_KEY

        if require_search:
            required_settings.update({
                "GOOGLE_API_KEY": cls.GOOGLE_API_KEY,
                "GOOGLE_SEARCH_ENGINE_ID": cls.GOOGLE_SEARCH_ENGINE_ID,
            })

        missing = [name for name, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if cls.LLM_BATCH_SIZE < 1:
            raise ValueError(f"LLM_BATCH_SIZE must be at least 1, got {cls.LLM_BATCH_SIZE}")

    @classmethod
    def get_llm_api_key(cls) -> str:
        """Get the API key for extraction LLM calls."""
        return cls.OPENAI_API_KEY

    @classmethod
    def get_llm_base_url(cls) -> Optional[str]:
        """LLM base URL (None to use OpenAI directly)."""
        return cls.OPENAI_BASE_URL or None

    @classmethod
    def summary(cls) -> str:
        """Return a configuration summary (safe for logging, no secrets)."""
        return f"""
Configuration Summary:
  OpenAI: {'✓' if cls.OPENAI_API_KEY else '✗'}
  Google CSE: {'✓' if cls.GOOGLE_API_KEY and cls.GOOGLE_SEARCH_ENGINE_ID else '✗'}
  Extraction Model: {cls.EXTRACTION_MODEL} (temperature {cls.EXTRACTION_TEMPERATURE})
  LLM Batches: {cls.LLM_BATCH_SIZE} items, {cls.LLM_BATCH_DELAY_SECONDS}s apart
  Search: {cls.SEARCH_MAX_PAGES} pages/query, cap {cls.SEARCH_MAX_RESULTS} results
  Profile Cache: {cls.PROFILE_CACHE_PATH}
  LLM Fallback: {'enabled' if cls.ENABLE_LLM_FALLBACK else 'disabled'}
  Placeholder Names: {'enabled' if cls.ENABLE_PLACEHOLDER_NAMES else 'disabled'}
"""
