"""Stage timeline entries recorded while a blue-green push runs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_stage_event(
    stage: str,
    status: str,
    foundation_url: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured timeline entry for a deployment stage.

    Args:
        stage: Stage name (`precheck`, `push`, `commit`, `rollback`, `cleanup`).
        status: Stage status marker.
        foundation_url: Foundation the entry is scoped to, None for fleet-wide stages.
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline entry.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    stage_entry: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if foundation_url is not None:
        stage_entry["foundation_url"] = foundation_url
    if details is not None:
        stage_entry["details"] = details
    return stage_entry
