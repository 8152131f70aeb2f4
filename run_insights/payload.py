"""Assemble the analytics payload for one report run."""

import dataclasses
import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from run_insights.aggregator import RunAggregates, aggregate, rank_by_duration
from run_insights.flattener import FlattenedReport
from run_insights.formatting import format_duration, round_half_up, short_label
from run_insights.models.base import Model
from run_insights.models.insights import InsightScores
from run_insights.models.payload import (
    Charts,
    ChartSeries,
    FileInsight,
    Highlights,
    InsightsBlock,
    ReportPayload,
    RunMetadata,
    SummaryBlock,
    TestEntry,
)
from run_insights.models.record import TestRecord
from run_insights.rollup import browser_rollup, file_rollup, suite_rollup
from run_insights.scoring import compute_insights, performance_tiers
from run_insights.trends import build_trends

log = logging.getLogger(__name__)

DEFAULT_TITLE = "Playwright Test Report"

STATUS_CHART: Sequence[tuple[str, str, str]] = (
    ("passed", "Passed", "#10b981"),
    ("failed", "Failed", "#ef4444"),
    ("skipped", "Skipped", "#f59e0b"),
    ("flaky", "Flaky", "#8b5cf6"),
    ("timedOut", "Timed Out", "#06b6d4"),
)
OTHER_STATUS_COLOR = "#9ca3af"

DURATION_LABELS = ("Fast (<1s)", "Medium (1-5s)", "Slow (5-15s)", "Very Slow (>15s)")
DURATION_COLORS = ("#06b6d4", "#3b82f6", "#f59e0b", "#ef4444")
TIER_LABELS = ("Ultra Fast", "Fast", "Normal", "Slow")
TIER_COLORS = ("#06b6d4", "#10b981", "#f59e0b", "#ef4444")
QUALITY_LABELS = ("Pass Rate", "Stability", "Speed", "Retry Health")
BROWSER_COLORS = ("#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#06b6d4")
SUITE_COLORS = (
    "#22c55e",
    "#0ea5e9",
    "#f97316",
    "#a855f7",
    "#eab308",
    "#ef4444",
    "#14b8a6",
    "#6366f1",
)

HIGH_RISK_SCORE = 75
ELEVATED_RISK_SCORE = 55

RETRIES_CHART_LIMIT = 8
FILE_RISK_CHART_LIMIT = 8
DURATION_TOP_LIMIT = 12
SUITE_CHART_LIMIT = 8
SUITE_STATS_LIMIT = 20


class PayloadOptions(Model):
    """Caller-supplied presentation context for a payload."""

    title: str = DEFAULT_TITLE
    metadata: RunMetadata = Field(default_factory=RunMetadata)
    generated_at: datetime | None = None


def build_payload(
    report: FlattenedReport,
    history: Iterable[Any] = (),
    options: PayloadOptions | None = None,
) -> ReportPayload:
    """Build the full analytics payload of a flattened report.

    ``history`` is the caller's run-history window, oldest first, usually
    ending with the current run. It is read, never modified.
    """
    options = options or PayloadOptions()
    tests = report.tests
    durations = [test.duration for test in tests]

    aggregates = aggregate(tests)
    trends = build_trends(history)
    insights = compute_insights(aggregates, durations, trends.comparison)
    p95 = insights.p95

    file_insights = file_rollup(tests, p95)
    browser_stats = browser_rollup(tests)
    suite_stats = suite_rollup(tests)

    log.debug(
        "Built insights: quality=%d gate=%s files=%d browsers=%d suites=%d",
        insights.quality_score,
        insights.release_gate,
        len(file_insights),
        len(browser_stats),
        len(suite_stats),
    )

    charts = Charts(
        status=status_chart(tests, aggregates),
        duration=ChartSeries(
            labels=DURATION_LABELS,
            series=[
                aggregates.duration_buckets.fast,
                aggregates.duration_buckets.medium,
                aggregates.duration_buckets.slow,
                aggregates.duration_buckets.very_slow,
            ],
            colors=DURATION_COLORS,
        ),
        retries=retries_chart(aggregates),
        tiers=tiers_chart(durations),
        quality=ChartSeries(
            labels=QUALITY_LABELS,
            series=[
                aggregates.pass_rate,
                insights.stability_score,
                insights.speed_score,
                insights.retry_health,
            ],
        ),
        file_risk=file_risk_chart(file_insights),
        duration_top=duration_top_chart(tests),
        browser_matrix=ChartSeries(
            labels=[b.browser for b in browser_stats],
            series=[b.total for b in browser_stats],
            colors=BROWSER_COLORS[: max(1, len(browser_stats))],
        ),
        suite_share=ChartSeries(
            labels=[short_label(s.suite, 22) for s in suite_stats[:SUITE_CHART_LIMIT]],
            series=[s.total for s in suite_stats[:SUITE_CHART_LIMIT]],
            colors=SUITE_COLORS,
        ),
        run_trends=trends.series,
    )

    max_duration = aggregates.max_duration or 1
    return ReportPayload(
        title=options.title,
        generated_at=options.generated_at or datetime.now(timezone.utc),
        metadata=options.metadata,
        summary=SummaryBlock(
            total=aggregates.total,
            passed=aggregates.passed,
            failed=aggregates.failed,
            skipped=aggregates.skipped,
            flaky=aggregates.flaky,
            timed_out=aggregates.timed_out,
            duration=format_duration(aggregates.total_duration),
            pass_rate=aggregates.pass_rate,
            fail_rate=aggregates.fail_rate,
            skip_rate=aggregates.skip_rate,
            flaky_rate=aggregates.flaky_rate,
            avg_duration=format_duration(aggregates.avg_duration),
            non_passing=aggregates.non_passing,
        ),
        highlights=Highlights(
            browsers=len(browser_stats),
            suites=len(suite_stats),
            retried_tests=aggregates.retried,
            history_points=len(trends.points),
        ),
        insights=insights_block(insights),
        charts=charts,
        failed_tests=[to_entry(t) for t in aggregates.failed_tests],
        flaky_tests=[to_entry(t) for t in aggregates.flaky_tests],
        slowest_tests=[
            to_entry(t, percentage=round_half_up(t.duration / max_duration * 100))
            for t in aggregates.slowest_tests
        ],
        all_tests=[to_entry(t) for t in tests],
        file_insights=file_insights,
        browser_stats=browser_stats,
        suite_stats=suite_stats[:SUITE_STATS_LIMIT],
        history=trends.points,
        comparison=trends.comparison,
        has_failures=aggregates.failed > 0,
    )


def to_entry(test: TestRecord, percentage: int | None = None) -> TestEntry:
    """List entry of a record with its display duration."""
    return TestEntry(
        **dataclasses.asdict(test),
        duration_display=format_duration(test.duration),
        location=test.location,
        percentage=percentage,
    )


def insights_block(insights: InsightScores) -> InsightsBlock:
    return InsightsBlock(
        **insights.model_dump(),
        p50_display=format_duration(insights.p50),
        p90_display=format_duration(insights.p90),
        p95_display=format_duration(insights.p95),
    )


def status_chart(tests: Sequence[TestRecord], aggregates: RunAggregates) -> ChartSeries:
    """Known statuses in fixed order, then any other status seen."""
    counts = Counter(test.status for test in tests)
    labels: list[str] = []
    series: list[int] = []
    colors: list[str] = []
    for status, label, color in STATUS_CHART:
        labels.append(label)
        series.append(aggregates.flaky if status == "flaky" else counts[status])
        colors.append(color)

    known = {status for status, _, _ in STATUS_CHART}
    for status, count in counts.items():
        if status not in known:
            labels.append(status)
            series.append(count)
            colors.append(OTHER_STATUS_COLOR)

    return ChartSeries(labels=labels, series=series, colors=colors)


def retries_chart(aggregates: RunAggregates) -> ChartSeries:
    entries = list(aggregates.retries_histogram.items())[:RETRIES_CHART_LIMIT]
    return ChartSeries(
        labels=[f"{retries} retries" for retries, _ in entries],
        series=[count for _, count in entries],
    )


def tiers_chart(durations: Sequence[float]) -> ChartSeries:
    tiers = performance_tiers(durations)
    return ChartSeries(
        labels=TIER_LABELS,
        series=[tiers.ultra_fast, tiers.fast, tiers.normal, tiers.slow],
        colors=TIER_COLORS,
    )


def risk_color(risk_score: int) -> str:
    if risk_score >= HIGH_RISK_SCORE:
        return "#ef4444"
    if risk_score >= ELEVATED_RISK_SCORE:
        return "#f59e0b"
    return "#10b981"


def file_risk_chart(file_insights: Sequence[FileInsight]) -> ChartSeries:
    top = file_insights[:FILE_RISK_CHART_LIMIT]
    return ChartSeries(
        labels=[short_label(f.file) for f in top],
        series=[f.risk_score for f in top],
        colors=[risk_color(f.risk_score) for f in top],
    )


def duration_top_chart(tests: Sequence[TestRecord]) -> ChartSeries:
    """Slowest tests, in whole seconds."""
    top = rank_by_duration(tests, DURATION_TOP_LIMIT)
    return ChartSeries(
        labels=[short_label(t.title, 34) for t in top],
        series=[round_half_up(t.duration / 1000) for t in top],
    )
