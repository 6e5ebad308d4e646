"""Summaries of ``npm outdated --json`` output."""

from typing import Any

from depinsight.models.reports import OutdatedEntry


def summarize_outdated(payload: dict[str, Any]) -> list[OutdatedEntry]:
    """Outdated dependencies in the order npm reported them."""
    entries = []
    for name, info in payload.items():
        # Workspaces report one entry per dependent location; the first is enough
        if isinstance(info, list):
            info = next((i for i in info if isinstance(i, dict)), None)
        if not isinstance(info, dict):
            continue
        entries.append(
            OutdatedEntry(
                name=name,
                current=str(info.get("current") or "N/A"),
                wanted=str(info.get("wanted") or "N/A"),
                latest=str(info.get("latest") or "N/A"),
            )
        )
    return entries
