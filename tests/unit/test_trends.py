"""Tests for the run-over-run trend comparison."""

from datetime import UTC, datetime
from typing import Any

import pytest

from run_insights.testing.factories import RunSummaryFactory
from run_insights.trends import TREND_WINDOW, build_trends, parse_history, trend_label


def entry(**fields: Any) -> dict[str, Any]:
    """A history entry as stored on disk."""
    return RunSummaryFactory.build(**fields).model_dump(mode="json", by_alias=True)


def test_single_entry_has_no_baseline() -> None:
    """One run cannot be compared; all deltas stay at 0."""
    context = build_trends([entry(pass_rate=90, failed=1)])

    comparison = context.comparison
    assert not comparison.has_baseline
    assert comparison.previous_label is None
    assert comparison.pass_rate_delta == 0
    assert comparison.failed_delta == 0
    assert comparison.flaky_rate_delta == 0
    assert comparison.duration_delta_sec == 0


def test_empty_history() -> None:
    """No history gives empty series and no baseline."""
    context = build_trends([])

    assert context.points == []
    assert context.series.labels == []
    assert not context.comparison.has_baseline
    assert context.comparison.latest_label is None


def test_deltas_between_two_latest_runs() -> None:
    """The newest run is compared with the one right before it."""
    context = build_trends(
        [
            {"passRate": 80, "failed": 2, "durationMs": 10000},
            {"passRate": 90, "failed": 0, "durationMs": 8000},
        ]
    )

    comparison = context.comparison
    assert comparison.has_baseline
    assert comparison.pass_rate_delta == 10
    assert comparison.failed_delta == -2
    assert comparison.duration_delta_sec == -2


def test_flaky_rate_delta() -> None:
    """Flaky rates are derived per run before comparing."""
    context = build_trends([entry(total=10, flaky=3), entry(total=20, flaky=2)])

    assert [p.flaky_rate for p in context.points] == [30, 10]
    assert context.comparison.flaky_rate_delta == -20


@pytest.mark.parametrize(
    ("previous_ms", "latest_ms", "expected"),
    [(10000, 8500, -1), (10000, 11500, 2), (10000, 10400, 0)],
)
def test_duration_delta_rounds_half_up(
    previous_ms: int, latest_ms: int, expected: int
) -> None:
    """Duration deltas are whole seconds, halves rounded up."""
    context = build_trends(
        [entry(duration_ms=previous_ms), entry(duration_ms=latest_ms)]
    )

    assert context.comparison.duration_delta_sec == expected


def test_malformed_entries_are_dropped() -> None:
    """Entries that are not well-formed summaries do not abort the trends."""
    history: list[Any] = [
        "not an object",
        None,
        {"total": -1},
        {"failed": "many"},
        entry(pass_rate=70),
        entry(pass_rate=75),
    ]

    context = build_trends(history)

    assert [p.pass_rate for p in context.points] == [70, 75]
    assert context.comparison.pass_rate_delta == 5


def test_history_is_not_mutated_or_reordered() -> None:
    """The caller's order is kept and the input list is left untouched."""
    history = [
        entry(generated_at=datetime(2026, 3, 2, tzinfo=UTC), pass_rate=50),
        entry(generated_at=datetime(2026, 3, 1, tzinfo=UTC), pass_rate=60),
    ]
    snapshot = [dict(item) for item in history]

    context = build_trends(history)

    assert history == snapshot
    assert [p.pass_rate for p in context.points] == [50, 60]
    assert context.comparison.pass_rate_delta == 10


def test_window_keeps_latest_entries() -> None:
    """Only the most recent entries of a long history are charted."""
    history = [entry(total=i + 1, passed=i + 1) for i in range(TREND_WINDOW + 5)]

    context = build_trends(history)

    assert len(context.points) == TREND_WINDOW
    assert context.points[0].total == 6
    assert context.points[-1].total == TREND_WINDOW + 5
    assert context.series.labels[0] == "#1"


def test_series_are_aligned_with_points() -> None:
    """Each chart series has one value per history point."""
    context = build_trends(
        [
            entry(total=10, passed=8, failed=2, pass_rate=80, duration_ms=61000),
            entry(total=10, passed=10, failed=0, pass_rate=100, duration_ms=2500),
        ]
    )

    series = context.series
    assert series.pass_rate == [80, 100]
    assert series.fail_rate == [20, 0]
    assert series.flaky_rate == [0, 0]
    assert series.duration_sec == [61, 3]
    assert [p.duration_display for p in context.points] == ["1m 1s", "2.50s"]


class TestTrendLabel:
    """Tests for chart labels of history points."""

    def test_numbered_when_several(self) -> None:
        summary = RunSummaryFactory.build(
            generated_at=datetime(2026, 3, 4, 5, 6, tzinfo=UTC)
        )

        assert trend_label(summary, 0, 2) == "#1 03/04 05:06"

    def test_stamp_only_when_single(self) -> None:
        summary = RunSummaryFactory.build(
            generated_at=datetime(2026, 3, 4, 5, 6, tzinfo=UTC)
        )

        assert trend_label(summary, 0, 1) == "03/04 05:06"

    def test_index_without_timestamp(self) -> None:
        summary = RunSummaryFactory.build()

        assert trend_label(summary, 2, 3) == "#3"


def test_comparison_labels_use_timestamps() -> None:
    """Comparison labels are ISO timestamps when runs carry one."""
    context = build_trends(
        [
            entry(generated_at=datetime(2026, 3, 1, 8, 0, tzinfo=UTC)),
            entry(),
        ]
    )

    assert context.comparison.previous_label == "2026-03-01T08:00:00+00:00"
    assert context.comparison.latest_label == "#2"


def test_parse_history_accepts_summaries() -> None:
    """Already validated summaries pass through unchanged."""
    summary = RunSummaryFactory.build()

    assert parse_history([summary]) == [summary]
