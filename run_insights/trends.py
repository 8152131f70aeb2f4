"""Run-over-run trends from the caller's history window."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from run_insights.aggregator import percent
from run_insights.formatting import format_duration, round_half_up
from run_insights.models.payload import Comparison, RunTrendSeries, TrendPoint
from run_insights.models.summary import RunSummary

log = logging.getLogger(__name__)

TREND_WINDOW = 20


@dataclass(frozen=True, kw_only=True)
class TrendContext:
    """History points, their chart series and the latest comparison."""

    points: Sequence[TrendPoint]
    series: RunTrendSeries
    comparison: Comparison


def parse_history(entries: Iterable[Any]) -> Sequence[RunSummary]:
    """Validate raw history entries, dropping the malformed ones."""
    summaries: list[RunSummary] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, RunSummary):
            summaries.append(entry)
            continue
        try:
            summaries.append(RunSummary.model_validate(entry))
        except ValidationError:
            log.debug("Dropping malformed history entry #%d", index)
    return summaries


def trend_label(summary: RunSummary, index: int, count: int) -> str:
    """Chart label of a history point, numbered when there are several."""
    if summary.generated_at is None:
        return f"#{index + 1}"
    stamp = summary.generated_at.strftime("%m/%d %H:%M")
    return f"#{index + 1} {stamp}" if count > 1 else stamp


def to_trend_point(summary: RunSummary, index: int, count: int) -> TrendPoint:
    return TrendPoint(
        **summary.model_dump(),
        label=trend_label(summary, index, count),
        flaky_rate=percent(summary.flaky, summary.total),
        fail_rate=percent(summary.failed, summary.total),
        duration_sec=round_half_up(summary.duration_ms / 1000),
        duration_display=format_duration(summary.duration_ms),
    )


def point_label(point: TrendPoint) -> str:
    if point.generated_at is None:
        return point.label
    return point.generated_at.isoformat()


def compare_latest(points: Sequence[TrendPoint]) -> Comparison:
    """Deltas of the newest point against the one before it."""
    if len(points) < 2:
        return Comparison(
            has_baseline=False,
            latest_label=point_label(points[-1]) if points else None,
        )

    previous, latest = points[-2], points[-1]
    return Comparison(
        has_baseline=True,
        latest_label=point_label(latest),
        previous_label=point_label(previous),
        pass_rate_delta=latest.pass_rate - previous.pass_rate,
        failed_delta=latest.failed - previous.failed,
        flaky_rate_delta=latest.flaky_rate - previous.flaky_rate,
        duration_delta_sec=round_half_up(
            (latest.duration_ms - previous.duration_ms) / 1000
        ),
    )


def build_trends(history: Iterable[Any], window: int = TREND_WINDOW) -> TrendContext:
    """Prepare trend points and the comparison block.

    ``history`` is ordered oldest to newest and is never mutated; only its
    last ``window`` well-formed entries are used.
    """
    summaries = list(parse_history(history))[-window:]
    points = [
        to_trend_point(summary, index, len(summaries))
        for index, summary in enumerate(summaries)
    ]
    series = RunTrendSeries(
        labels=[p.label for p in points],
        pass_rate=[p.pass_rate for p in points],
        fail_rate=[p.fail_rate for p in points],
        flaky_rate=[p.flaky_rate for p in points],
        duration_sec=[p.duration_sec for p in points],
    )
    return TrendContext(
        points=points, series=series, comparison=compare_latest(points)
    )
