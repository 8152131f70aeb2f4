"""Models for the analytics payload handed to report renderers."""

from collections.abc import Sequence
from datetime import datetime

from run_insights.models.base import CamelModel
from run_insights.models.insights import InsightScores
from run_insights.models.summary import RunSummary


class RunMetadata(CamelModel):
    """CI context shown alongside the report."""

    branch: str | None = None
    commit: str | None = None
    build_url: str | None = None
    environment: str | None = None
    pull_request: str | None = None


class SummaryBlock(CamelModel):
    """Headline counters and rates."""

    total: int
    passed: int
    failed: int
    skipped: int
    flaky: int
    timed_out: int
    duration: str
    pass_rate: int
    fail_rate: int
    skip_rate: int
    flaky_rate: int
    avg_duration: str
    non_passing: int


class Highlights(CamelModel):
    """Counts describing the breadth of the run."""

    browsers: int
    suites: int
    retried_tests: int
    history_points: int


class InsightsBlock(InsightScores):
    """Insight scores with display strings for the percentiles."""

    p50_display: str
    p90_display: str
    p95_display: str


class ChartSeries(CamelModel):
    """A labelled series ready for a pie, bar or radar chart."""

    labels: Sequence[str]
    series: Sequence[int | float]
    colors: Sequence[str] | None = None


class RunTrendSeries(CamelModel):
    """Aligned per-run series for trend line charts."""

    labels: Sequence[str]
    pass_rate: Sequence[int | float]
    fail_rate: Sequence[int]
    flaky_rate: Sequence[int]
    duration_sec: Sequence[int]


class Charts(CamelModel):
    """All chart-ready series of the payload."""

    status: ChartSeries
    duration: ChartSeries
    retries: ChartSeries
    tiers: ChartSeries
    quality: ChartSeries
    file_risk: ChartSeries
    duration_top: ChartSeries
    browser_matrix: ChartSeries
    suite_share: ChartSeries
    run_trends: RunTrendSeries


class TestEntry(CamelModel):
    """A test record as listed in the payload."""

    __test__ = False

    title: str
    status: str
    duration: float
    retries: int
    browser: str | None = None
    suite: str | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None
    error: str | None = None
    error_stack: str | None = None
    steps: Sequence[str] | None = None
    duration_display: str
    location: str | None = None
    percentage: int | None = None


class DimensionStats(CamelModel):
    """Outcome counts for one group of tests."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    timed_out: int = 0
    flaky: int = 0
    duration: float = 0
    pass_rate: int = 0
    duration_display: str = "0ms"


class BrowserStats(DimensionStats):
    """Rollup for one browser/project."""

    browser: str


class SuiteStats(DimensionStats):
    """Rollup for one suite."""

    suite: str


class FileInsight(DimensionStats):
    """Rollup and risk index for one source file."""

    file: str
    retried: int = 0
    fail_rate: int = 0
    avg_duration: int = 0
    avg_duration_display: str = "0ms"
    risk_score: int = 0


class TrendPoint(RunSummary):
    """A history entry annotated for charting."""

    label: str
    flaky_rate: int
    fail_rate: int
    duration_sec: int
    duration_display: str


class Comparison(CamelModel):
    """Deltas between the two most recent runs.

    Deltas are 0 when ``has_baseline`` is false; check it before reading a
    zero delta as "no regression".
    """

    has_baseline: bool = False
    latest_label: str | None = None
    previous_label: str | None = None
    pass_rate_delta: int | float = 0
    failed_delta: int = 0
    flaky_rate_delta: int = 0
    duration_delta_sec: int = 0


class ReportPayload(CamelModel):
    """Complete analytics payload for one report run."""

    title: str
    generated_at: datetime
    metadata: RunMetadata
    summary: SummaryBlock
    highlights: Highlights
    insights: InsightsBlock
    charts: Charts
    failed_tests: Sequence[TestEntry]
    flaky_tests: Sequence[TestEntry]
    slowest_tests: Sequence[TestEntry]
    all_tests: Sequence[TestEntry]
    file_insights: Sequence[FileInsight]
    browser_stats: Sequence[BrowserStats]
    suite_stats: Sequence[SuiteStats]
    history: Sequence[TrendPoint]
    comparison: Comparison
    has_failures: bool
