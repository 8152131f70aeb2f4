"""Counters, distributions and ranked lists over flat test records."""

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from run_insights.formatting import round_half_up
from run_insights.models.record import TestRecord

FAST_THRESHOLD_MS = 1000
MEDIUM_THRESHOLD_MS = 5000
SLOW_THRESHOLD_MS = 15000

RANKING_LIMIT = 10


@dataclass(frozen=True, kw_only=True)
class DurationBuckets:
    """Histogram of test durations over fixed thresholds."""

    fast: int = 0
    medium: int = 0
    slow: int = 0
    very_slow: int = 0

    @property
    def total(self) -> int:
        """Number of tests across all buckets."""
        return self.fast + self.medium + self.slow + self.very_slow


@dataclass(frozen=True, kw_only=True)
class DurationByStatus:
    """Summed duration per final status."""

    passed: float = 0
    failed: float = 0
    skipped: float = 0


@dataclass(frozen=True, kw_only=True)
class RunAggregates:
    """Reduction of a run's test records.

    Rates are rounded percentages and are all 0 for an empty run.
    """

    total: int
    passed: int
    failed: int
    skipped: int
    timed_out: int
    flaky: int
    retried: int
    retry_burden: int
    total_duration: float
    min_duration: float
    max_duration: float
    avg_duration: int
    duration_by_status: DurationByStatus
    duration_buckets: DurationBuckets
    retries_histogram: Mapping[int, int]
    pass_rate: int
    fail_rate: int
    skip_rate: int
    flaky_rate: int
    failed_tests: Sequence[TestRecord]
    flaky_tests: Sequence[TestRecord]
    slowest_tests: Sequence[TestRecord]

    @property
    def non_passing(self) -> int:
        """Tests that failed outright or timed out."""
        return self.failed + self.timed_out


def percent(part: float, whole: float) -> int:
    """Rounded percentage of ``part`` in ``whole``, 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def duration_bucket(duration: float) -> str:
    """Name of the bucket a duration falls into."""
    if duration < FAST_THRESHOLD_MS:
        return "fast"
    if duration < MEDIUM_THRESHOLD_MS:
        return "medium"
    if duration < SLOW_THRESHOLD_MS:
        return "slow"
    return "very_slow"


def bucket_durations(durations: Sequence[float]) -> DurationBuckets:
    """Count durations per bucket.

    Buckets are ``fast`` [0, 1s), ``medium`` [1s, 5s), ``slow`` [5s, 15s)
    and ``very_slow`` [15s, ...).
    """
    counts = Counter(duration_bucket(duration) for duration in durations)
    return DurationBuckets(
        fast=counts["fast"],
        medium=counts["medium"],
        slow=counts["slow"],
        very_slow=counts["very_slow"],
    )


def retries_histogram(tests: Sequence[TestRecord]) -> Mapping[int, int]:
    """Number of tests per exact retry count, ordered by retry count."""
    counts = Counter(test.retries for test in tests)
    return dict(sorted(counts.items()))


def rank_by_duration(
    tests: Sequence[TestRecord], limit: int = RANKING_LIMIT
) -> Sequence[TestRecord]:
    """Slowest tests first; ties keep their encounter order."""
    return sorted(tests, key=lambda test: test.duration, reverse=True)[:limit]


def aggregate(tests: Sequence[TestRecord]) -> RunAggregates:
    """Reduce test records to counters, distributions and top-N lists."""
    total = len(tests)
    statuses = Counter(test.status for test in tests)
    flaky_tests = [test for test in tests if test.is_flaky]
    failed_tests = [test for test in tests if test.status == "failed"]
    durations = [test.duration for test in tests]
    total_duration = sum(durations)

    return RunAggregates(
        total=total,
        passed=statuses["passed"],
        failed=statuses["failed"],
        skipped=statuses["skipped"],
        timed_out=statuses["timedOut"],
        flaky=len(flaky_tests),
        retried=sum(1 for test in tests if test.is_retried),
        retry_burden=sum(test.retries for test in tests),
        total_duration=total_duration,
        min_duration=min(durations, default=0),
        max_duration=max(durations, default=0),
        avg_duration=round_half_up(total_duration / total) if total else 0,
        duration_by_status=DurationByStatus(
            passed=sum(t.duration for t in tests if t.status == "passed"),
            failed=sum(t.duration for t in tests if t.status == "failed"),
            skipped=sum(t.duration for t in tests if t.status == "skipped"),
        ),
        duration_buckets=bucket_durations(durations),
        retries_histogram=retries_histogram(tests),
        pass_rate=percent(statuses["passed"], total),
        fail_rate=percent(statuses["failed"], total),
        skip_rate=percent(statuses["skipped"], total),
        flaky_rate=percent(len(flaky_tests), total),
        failed_tests=rank_by_duration(failed_tests),
        flaky_tests=rank_by_duration(flaky_tests),
        slowest_tests=rank_by_duration(tests),
    )
