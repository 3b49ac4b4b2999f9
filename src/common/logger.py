"""
Logging for extraction runs.

Every line of a run carries the same short run id plus the stage that wrote
it (search, heuristic, llm, pipeline), so one CLI invocation can be grepped
out of a shared log:

    2026-01-12 10:41:07 [INFO] src.extraction.pipeline: [run:3f2a9c1d] [llm] 4/7 item(s) resolved
"""

import json
import logging
import os
import sys
from typing import Optional

# DEBUG_MODE=true or the CLI --debug flag
_debug_enabled = os.getenv("DEBUG_MODE", "false").lower() == "true"

_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


def set_global_debug_mode(enabled: bool) -> None:
    global _debug_enabled
    _debug_enabled = enabled


def is_debug_mode() -> bool:
    return _debug_enabled


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; messages are escaped properly."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class RunLogger:
    """
    Wraps a stdlib logger and prefixes messages with run id and stage.

    ``bind`` gives a logger for another stage of the same run, so tiers can
    log under their own name without threading the run id through.
    """

    def __init__(
        self,
        name: str,
        run_id: Optional[str] = None,
        stage: Optional[str] = None,
        debug_mode: Optional[bool] = None,
    ):
        self.logger = logging.getLogger(name)
        self.run_id = run_id
        self.stage = stage
        self._debug_mode = is_debug_mode() if debug_mode is None else debug_mode
        if self._debug_mode:
            self.logger.setLevel(logging.DEBUG)

    @property
    def prefix(self) -> str:
        parts = []
        if self.run_id:
            parts.append(f"[run:{self.run_id[:8]}]")
        if self.stage:
            parts.append(f"[{self.stage}]")
        return " ".join(parts)

    def bind(self, stage: str) -> "RunLogger":
        return RunLogger(self.logger.name, self.run_id, stage, self._debug_mode)

    def _log(self, level: int, message: str, **kwargs) -> None:
        if self.prefix:
            message = f"{self.prefix} {message}"
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure the root logger for CLI runs.

    Args:
        level: DEBUG, INFO, WARNING or ERROR; debug mode forces DEBUG
        format: "simple" for terminals, "json" for log shippers
    """
    log_level = logging.DEBUG if is_debug_mode() else getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # Request-level chatter from HTTP clients drowns out extraction progress
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))


def get_logger(
    name: str,
    run_id: Optional[str] = None,
    stage: Optional[str] = None,
    debug_mode: Optional[bool] = None,
) -> RunLogger:
    """Logger for ``name`` tagged with an optional run id and stage."""
    return RunLogger(name, run_id, stage, debug_mode)
