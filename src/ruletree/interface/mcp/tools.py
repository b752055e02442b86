"""Tool registry for the ruletree MCP server.

Tools return JSON strings. The rule index is built once from
``RULETREE_RULES_PATH`` on first use and reused until ``rules_reload``.
"""

from __future__ import annotations

import json
import time
from typing import Any

from ...models.requests import ClassifyRequest
from ...models.responses import BuildReport
from ...observability import log_tool_invocation, metrics_snapshot
from ...services.classification_service import ClassificationService

ALLOWED_TOOLS = frozenset({
    "rules_classify",
    "rules_index_stats",
    "rules_dump_index",
    "rules_health",
    "rules_reload",
})

_state: dict[str, Any] = {"service": None, "report": None}


def get_service() -> ClassificationService:
    """Return the shared service, building it from settings on first call."""
    if _state["service"] is None:
        reload_service()
    return _state["service"]


def reload_service() -> BuildReport | None:
    """Rebuild the shared service (and its index) from current settings."""
    from ...wiring import build_classification_service

    service, report = build_classification_service()
    _state["service"] = service
    _state["report"] = report
    return report


def set_service(service: ClassificationService | None, report: BuildReport | None = None) -> None:
    """Install a service directly (tests, embedding hosts)."""
    _state["service"] = service
    _state["report"] = report


def classify_payload(objects: list[dict[str, Any]], include_unmatched: bool = True) -> dict[str, Any]:
    service = get_service()
    if len(objects) > service.max_batch_size:
        raise ValueError(
            f"too many objects: {len(objects)} > max_batch_size {service.max_batch_size}; "
            "split the request or raise RULETREE_MAX_BATCH_SIZE"
        )
    response = service.classify(ClassifyRequest(objects=objects, include_unmatched=include_unmatched))
    return response.model_dump(mode="json")


def health_payload() -> dict[str, Any]:
    service = _state["service"]
    report: BuildReport | None = _state["report"]
    return {
        "loaded": bool(service is not None and service.is_loaded),
        "attributes": list(service.attribute_order) if service is not None else [],
        "rules_indexed": report.rules_indexed if report else 0,
        "rules_skipped": report.rules_skipped if report else 0,
        "metrics": metrics_snapshot(),
    }


def _run(tool: str, fn, *args, **kwargs) -> str:
    """Call ``fn``, log the invocation and return JSON (errors become ``{"error": ...}``)."""
    t0 = time.monotonic()
    try:
        payload = fn(*args, **kwargs)
    except (RuntimeError, ValueError, FileNotFoundError) as e:
        log_tool_invocation(tool, None, (time.monotonic() - t0) * 1000, error=str(e))
        return json.dumps({"error": str(e)})
    trace_id = payload.get("request_id") if isinstance(payload, dict) else None
    log_tool_invocation(tool, trace_id, (time.monotonic() - t0) * 1000)
    return json.dumps(payload, indent=2)


def register_tools(mcp):
    """Register classification tools on a FastMCP server."""

    @mcp.tool()
    def rules_classify(objects: list[dict[str, Any]], include_unmatched: bool = True) -> str:
        """Classify objects against the loaded rule index.

        Args:
            objects: Records like {"id": "offer_1", "attributes": {"country": ["US"]}}
            include_unmatched: Also report objects that matched no rule

        Returns:
            JSON with request_id, results (id, codes), diagnostics, warnings
        """
        return _run("rules_classify", classify_payload, objects, include_unmatched)

    @mcp.tool()
    def rules_index_stats() -> str:
        """Return node and edge counts of the loaded index."""
        return _run("rules_index_stats", lambda: get_service().stats())

    @mcp.tool()
    def rules_dump_index() -> str:
        """Return the loaded index as nested JSON (diagnostics only)."""
        return _run("rules_dump_index", lambda: get_service().dump())

    @mcp.tool()
    def rules_health() -> str:
        """Return whether an index is loaded, its attribute order and counters."""
        return _run("rules_health", health_payload)

    @mcp.tool()
    def rules_reload() -> str:
        """Rebuild the index from the configured rules file.

        Returns:
            JSON build report (rules indexed/skipped, diagnostics, stats)
        """

        def _reload() -> dict[str, Any]:
            report = reload_service()
            if report is None:
                raise ValueError("RULETREE_RULES_PATH is not set")
            return report.model_dump(mode="json")

        return _run("rules_reload", _reload)
