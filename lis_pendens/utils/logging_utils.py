"""Logging helpers shared by the resolver, the registry client and the CLI."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any

from loguru import logger

_TRUTHY = {"1", "true", "yes", "on"}


def env_log_level(default: str = "INFO") -> str:
    return os.getenv("LOG_LEVEL", default).upper()


def add_optional_sinks(log_dir: str | Path = "logs") -> list[int]:
    """Attach env-controlled sinks and return their ids.

    ``LOG_DEBUG_FILE`` adds a DEBUG text sink at that path.
    ``LOG_JSON`` adds a serialized sink, one JSON record per line, so the
    per-query ``log_search`` fields can be loaded for analysis.
    """
    sink_ids: list[int] = []

    debug_file = os.getenv("LOG_DEBUG_FILE")
    if debug_file:
        sink_ids.append(logger.add(debug_file, level="DEBUG", backtrace=True, diagnose=False))

    if os.getenv("LOG_JSON", "0").strip().lower() in _TRUTHY:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        sink_ids.append(
            logger.add(
                str(log_dir / "lis_pendens_{time}.jsonl"),
                level="DEBUG",
                serialize=True,
                diagnose=False,
            )
        )
    return sink_ids


def log_search(
    *,
    source: str,
    query: Any,
    results_raw: int,
    results_kept: int | None = None,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """One structured line per registry search; ``None`` context values are dropped."""
    fields: dict[str, Any] = {"source": source, "query": query, "results_raw": results_raw}
    if results_kept is not None:
        fields["results_kept"] = results_kept
    if duration_ms is not None:
        fields["duration_ms"] = round(duration_ms, 1)
    fields.update((k, v) for k, v in context.items() if v is not None)
    logger.bind(**fields).info("search")


class Timer:
    """``with Timer() as t: ...`` then read ``t.elapsed_ms``."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
