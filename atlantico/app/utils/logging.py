"""Structured log lines for place lookups."""

import logging
from typing import Any

from atlantico.app.tools.executor import ToolContext

logger = logging.getLogger(__name__)

# Outcomes that mean a provider answered
_QUIET_OUTCOMES = frozenset({"success", "cache_hit"})


class LookupAttemptLogger:
    """One log record per provider or cache attempt, keyed by trace id.

    Answered lookups log at INFO; timeouts and errors log at WARNING so an
    outage of one provider shows up even though the chain falls through.
    """

    def log_attempt(
        self,
        ctx: ToolContext,
        outcome: str,
        latency_ms: float,
        cache_hit: bool = False,
        error_reason: str | None = None,
    ) -> None:
        structured: dict[str, Any] = {
            "trace_id": ctx.trace_id,
            "source": ctx.tool_name,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "cache_hit": cache_hit,
        }
        if error_reason:
            structured["error"] = error_reason

        level = logging.INFO if outcome in _QUIET_OUTCOMES else logging.WARNING
        logger.log(
            level,
            "%s lookup %s in %.0f ms",
            ctx.tool_name,
            outcome,
            latency_ms,
            extra={"structured": structured},
        )
