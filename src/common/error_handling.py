"""
Error collection for the extraction pipeline.

External API failures (search pages, LLM calls, cache I/O) never stop a run.
They are recorded here with a stage and severity so the caller can report a
partial result alongside what went wrong.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, TypeVar

T = TypeVar("T")

SEVERITIES = ("critical", "high", "medium", "low")


@dataclass
class ExtractionError:
    """One failed operation."""

    stage: str  # "search", "heuristic", "llm", "store"
    operation: str  # "fetch_page", "extract", "rate_limit"
    message: str
    severity: str = "medium"
    exception_type: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __str__(self) -> str:
        return f"[{self.stage}] {self.operation}: {self.message}"


class ErrorCollector:
    """
    Errors recorded during one search or extraction run.

    Usage:
        errors = ErrorCollector()
        errors.add_error("llm", "extract", f"{item.link}: {e}", exception=e)
        if errors:
            print(errors.get_error_messages())
    """

    def __init__(self):
        self.errors: List[ExtractionError] = []

    def __len__(self) -> int:
        return len(self.errors)

    def add_error(
        self,
        stage: str,
        operation: str,
        message: str,
        severity: str = "medium",
        exception: Optional[BaseException] = None,
    ) -> ExtractionError:
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity '{severity}', expected one of {SEVERITIES}")
        error = ExtractionError(
            stage=stage,
            operation=operation,
            message=message,
            severity=severity,
            exception_type=type(exception).__name__ if exception else None,
        )
        self.errors.append(error)
        return error

    def get_error_messages(self) -> List[str]:
        return [str(error) for error in self.errors]

    def summary(self) -> dict:
        """Counts by severity and by stage."""
        by_severity = Counter({severity: 0 for severity in SEVERITIES})
        by_severity.update(error.severity for error in self.errors)
        return {
            "total": len(self.errors),
            "by_severity": dict(by_severity),
            "by_stage": dict(Counter(error.stage for error in self.errors)),
        }


def safe_execute(
    func: Callable[..., T],
    *args,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    fallback: Any = None,
    **kwargs,
) -> T:
    """
    Call ``func``; on any exception log a warning and return ``fallback``.

    Usage:
        data = safe_execute(
            read_cache_file,
            operation_name="profile cache load",
            logger=logger,
            fallback={},
        )
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        (logger or logging.getLogger(__name__)).warning(f"[{operation_name}] Failed: {e}")
        return fallback
