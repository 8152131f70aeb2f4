"""Per-browser, per-suite and per-file rollups of test records."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from run_insights.aggregator import percent
from run_insights.flattener import UNKNOWN_SUITE
from run_insights.formatting import format_duration, round_half_up
from run_insights.models.payload import BrowserStats, FileInsight, SuiteStats
from run_insights.models.record import TestRecord
from run_insights.scoring import clamp

UNKNOWN_BROWSER = "unknown"
UNKNOWN_FILE = "unknown-file"

FILE_RISK_FAIL_WEIGHT = 0.55
FILE_RISK_RETRY_WEIGHT = 0.20
FILE_RISK_DURATION_WEIGHT = 0.25

FILE_INSIGHTS_LIMIT = 10


@dataclass(kw_only=True)
class _Tally:
    """Mutable counters accumulated for one group."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    timed_out: int = 0
    flaky: int = 0
    retried: int = 0
    duration: float = 0

    def add(self, test: TestRecord) -> None:
        self.total += 1
        self.duration += test.duration
        self.passed += test.status == "passed"
        self.failed += test.status == "failed"
        self.skipped += test.status == "skipped"
        self.timed_out += test.status == "timedOut"
        self.flaky += test.is_flaky
        self.retried += test.is_retried

    def counters(self) -> dict[str, int | float | str]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "timed_out": self.timed_out,
            "flaky": self.flaky,
            "duration": self.duration,
            "pass_rate": percent(self.passed, self.total),
            "duration_display": format_duration(self.duration),
        }


def group_tests(
    tests: Sequence[TestRecord], key: Callable[[TestRecord], str]
) -> Mapping[str, _Tally]:
    """Tally tests per group key, groups in first-seen order."""
    groups: dict[str, _Tally] = {}
    for test in tests:
        groups.setdefault(key(test), _Tally()).add(test)
    return groups


def browser_key(test: TestRecord) -> str:
    return test.browser or UNKNOWN_BROWSER


def suite_key(test: TestRecord) -> str:
    return test.suite or test.file or UNKNOWN_SUITE


def file_key(test: TestRecord) -> str:
    return test.file or UNKNOWN_FILE


def browser_rollup(tests: Sequence[TestRecord]) -> Sequence[BrowserStats]:
    """Stats per browser/project, largest groups first."""
    stats = [
        BrowserStats(browser=name, **tally.counters())
        for name, tally in group_tests(tests, browser_key).items()
    ]
    return sorted(stats, key=lambda s: s.total, reverse=True)


def suite_rollup(tests: Sequence[TestRecord]) -> Sequence[SuiteStats]:
    """Stats per suite, largest groups first."""
    stats = [
        SuiteStats(suite=name, **tally.counters())
        for name, tally in group_tests(tests, suite_key).items()
    ]
    return sorted(stats, key=lambda s: s.total, reverse=True)


def file_risk_score(fail_rate: int, retry_rate: int, duration_pressure: int) -> int:
    """Blend failure, retry and duration pressure into a 0-100 risk score."""
    blended = (
        fail_rate * FILE_RISK_FAIL_WEIGHT
        + retry_rate * FILE_RISK_RETRY_WEIGHT
        + duration_pressure * FILE_RISK_DURATION_WEIGHT
    )
    return int(clamp(round_half_up(blended)))


def file_rollup(
    tests: Sequence[TestRecord], p95: float, limit: int = FILE_INSIGHTS_LIMIT
) -> Sequence[FileInsight]:
    """Riskiest files first, at most ``limit`` of them.

    A file's fail rate counts both failed and timed out tests. Duration
    pressure compares the file's average duration with the run's p95 and is
    not capped before the final clamp, so a single very slow file can reach
    a high score on duration alone.
    """
    insights: list[FileInsight] = []
    for name, tally in group_tests(tests, file_key).items():
        avg_duration = round_half_up(tally.duration / tally.total)
        fail_rate = percent(tally.failed + tally.timed_out, tally.total)
        retry_rate = percent(tally.retried, tally.total)
        duration_pressure = round_half_up(avg_duration / max(1, p95) * 100)
        insights.append(
            FileInsight(
                file=name,
                retried=tally.retried,
                fail_rate=fail_rate,
                avg_duration=avg_duration,
                avg_duration_display=format_duration(avg_duration),
                risk_score=file_risk_score(fail_rate, retry_rate, duration_pressure),
                **tally.counters(),
            )
        )
    insights.sort(key=lambda insight: insight.risk_score, reverse=True)
    return insights[:limit]
