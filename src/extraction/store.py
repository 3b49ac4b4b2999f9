"""
Profile Store

Cache of extracted profiles keyed by canonical profile URL, so a profile is
extracted once and reused across runs until the cache is cleared.

Public API:
- ProfileStore: Abstract interface (get / set / clear / keys)
- InMemoryProfileStore: Process-local store, used in tests and one-off runs
- JsonFileProfileStore: Flat JSON file on disk
- get_profile_store(): Factory honouring Config.PROFILE_CACHE_PATH
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from src.common.config import Config
from src.common.error_handling import safe_execute
from src.extraction.types import ExtractedProfile
from src.extraction.url_normalizer import normalize_profile_url

logger = logging.getLogger(__name__)


class ProfileStore(ABC):
    """
    Abstract interface for the profile cache.

    Keys are profile URLs; implementations normalize them so any variant of
    the same LinkedIn URL hits the same entry.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[ExtractedProfile]:
        """
        Look up a cached profile.

        Args:
            key: Profile URL (any form)

        Returns:
            Cached profile or None
        """
        pass

    @abstractmethod
    def set(self, key: str, profile: ExtractedProfile) -> None:
        """Store or overwrite a profile."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every cached profile."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        pass

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    @staticmethod
    def normalize_key(key: str) -> str:
        return normalize_profile_url(key.strip()) if key else ""


class InMemoryProfileStore(ProfileStore):
    """Dictionary-backed store."""

    def __init__(self):
        self._profiles: Dict[str, ExtractedProfile] = {}

    def get(self, key: str) -> Optional[ExtractedProfile]:
        return self._profiles.get(self.normalize_key(key))

    def set(self, key: str, profile: ExtractedProfile) -> None:
        normalized = self.normalize_key(key)
        if not normalized:
            raise ValueError("Profile store key must not be empty")
        self._profiles[normalized] = profile

    def clear(self) -> None:
        self._profiles.clear()

    def keys(self) -> List[str]:
        return list(self._profiles)


class JsonFileProfileStore(InMemoryProfileStore):
    """
    JSON-file store: ``{url: profile_dict}``.

    Loaded once on construction and rewritten atomically on every change. An
    unreadable or corrupt file is logged and treated as an empty cache.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return

        raw = safe_execute(
            self._read_file,
            operation_name=f"profile cache load ({self.path})",
            logger=logger,
            fallback={},
        )
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring profile cache {self.path}: expected a JSON object")
            return

        for key, value in raw.items():
            if isinstance(value, dict):
                self._profiles[self.normalize_key(key)] = ExtractedProfile.from_dict(value)
        logger.debug(f"Loaded {len(self._profiles)} cached profile(s) from {self.path}")

    def _read_file(self) -> dict:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {key: profile.to_dict() for key, profile in self._profiles.items()}

        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".profiles-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def set(self, key: str, profile: ExtractedProfile) -> None:
        super().set(key, profile)
        self._write()

    def clear(self) -> None:
        super().clear()
        self._write()


def get_profile_store(path: Optional[str] = None) -> ProfileStore:
    """
    Build the configured profile store.

    Args:
        path: Cache file path. Defaults to Config.PROFILE_CACHE_PATH; an
            empty value gives an in-memory store.
    """
    cache_path = Config.PROFILE_CACHE_PATH if path is None else path
    if not cache_path:
        return InMemoryProfileStore()
    return JsonFileProfileStore(cache_path)
