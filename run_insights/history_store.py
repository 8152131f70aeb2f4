"""Persisted run history backing the trend analytics.

The history file is a JSON array of run summaries, oldest first. The analytics
only read it; appending the current run and capping the array happen here.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from run_insights.aggregator import RunAggregates
from run_insights.models.summary import RunSummary

log = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 30


def load_history(history_path: Path) -> list[Mapping[str, Any]]:
    """Read raw history entries.

    A missing or unreadable file, or one not holding a JSON array, is treated
    as empty history. Entries that are not JSON objects are dropped.
    """
    if not history_path.exists():
        return []

    try:
        parsed = json.loads(history_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Ignoring unreadable history file %s: %s", history_path, e)
        return []

    if not isinstance(parsed, list):
        log.warning("Ignoring history file %s: expected a JSON array", history_path)
        return []

    return [entry for entry in parsed if isinstance(entry, Mapping)]


def summarize_run(aggregates: RunAggregates, generated_at: datetime) -> RunSummary:
    """History entry describing the current run."""
    return RunSummary(
        generated_at=generated_at,
        total=aggregates.total,
        passed=aggregates.passed,
        failed=aggregates.failed,
        skipped=aggregates.skipped,
        flaky=aggregates.flaky,
        timed_out=aggregates.timed_out,
        duration_ms=aggregates.total_duration,
        pass_rate=aggregates.pass_rate,
    )


def append_run(
    history: Sequence[Mapping[str, Any]],
    summary: RunSummary,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> list[Mapping[str, Any]]:
    """New history with ``summary`` appended, keeping the last ``limit`` runs."""
    entries = [*history, summary.model_dump(mode="json", by_alias=True)]
    return entries[-max(1, limit) :]


def save_history(history_path: Path, entries: Sequence[Mapping[str, Any]]) -> None:
    """Write history entries as a JSON array, creating parent directories."""
    history_path.parent.mkdir(parents=True, exist_ok=True)
    history_path.write_text(json.dumps(list(entries), indent=2), encoding="utf-8")
    log.debug("Saved %d history entries to %s", len(entries), history_path)
