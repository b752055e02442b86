"""Observability: structured logs and an in-process counters stub."""

from __future__ import annotations

import logging
from typing import Any

_LOGGER = logging.getLogger("ruletree")

# Counters stub: builds, rules_indexed, rules_skipped, objects_classified, tool_calls[name], errors[name]
METRICS: dict[str, Any] = {
    "builds": 0,
    "rules_indexed": 0,
    "rules_skipped": 0,
    "objects_classified": 0,
    "tool_calls": {},
    "errors": {},
}


def get_logger() -> logging.Logger:
    return _LOGGER


def configure_logging(level: str = "INFO") -> None:
    """Basic stderr logging for the CLI and MCP entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def record_build(rules_indexed: int, rules_skipped: int) -> None:
    METRICS["builds"] += 1
    METRICS["rules_indexed"] += rules_indexed
    METRICS["rules_skipped"] += rules_skipped


def record_classified(count: int) -> None:
    METRICS["objects_classified"] += count


def log_tool_invocation(
    tool: str,
    trace_id: str | None,
    latency_ms: float,
    error: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """Emit structured log and update counters."""
    payload: dict[str, Any] = {
        "tool": tool,
        "trace_id": trace_id,
        "latency_ms": round(latency_ms, 2),
    }
    if error:
        payload["error"] = error
    if extra:
        payload.update(extra)
    _LOGGER.info("tool_invocation", extra=payload)
    METRICS["tool_calls"][tool] = METRICS["tool_calls"].get(tool, 0) + 1
    if error:
        METRICS["errors"][tool] = METRICS["errors"].get(tool, 0) + 1


def metrics_snapshot() -> dict[str, Any]:
    """Return a copy of the current counters."""
    return {k: dict(v) if isinstance(v, dict) else v for k, v in METRICS.items()}


def reset_metrics() -> None:
    METRICS.update(builds=0, rules_indexed=0, rules_skipped=0, objects_classified=0, tool_calls={}, errors={})
