"""Percentiles, composite scores and the release gate.

The weights and thresholds below are fixed: scores are compared run over run,
so changing any of them breaks comparability with stored history.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from run_insights.aggregator import RunAggregates, percent
from run_insights.formatting import round_half_up
from run_insights.models.insights import InsightScores, ReleaseGate, RiskLevel
from run_insights.models.payload import Comparison

SPEED_BUDGET_MS = 15000

STABILITY_RETRY_WEIGHT = 0.55
STABILITY_FAIL_WEIGHT = 0.75
STABILITY_TIMEOUT_WEIGHT = 0.40

QUALITY_PASS_WEIGHT = 0.4
QUALITY_STABILITY_WEIGHT = 0.3
QUALITY_SPEED_WEIGHT = 0.2
QUALITY_RETRY_HEALTH_WEIGHT = 0.1

LOW_RISK_MIN_QUALITY = 85
MODERATE_RISK_MIN_QUALITY = 70
HIGH_RISK_MIN_QUALITY = 50

RISKY_FLAKY_RATE = 8
RISKY_DURATION_DELTA_SEC = 20


def clamp(value: float, low: int = 0, high: int = 100) -> float:
    """Bound a value to ``[low, high]``."""
    return max(low, min(high, value))


def percentile(values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile of ``values``, 0 for an empty series."""
    if not values:
        return 0
    ordered = sorted(values)
    index = math.ceil((p / 100) * len(ordered)) - 1
    return ordered[max(0, min(len(ordered) - 1, index))]


def speed_score(p95: float) -> int:
    """100 for instant tests, 0 once the p95 reaches the speed budget."""
    return int(clamp(100 - round_half_up(p95 / SPEED_BUDGET_MS * 100)))


def stability_score(retry_rate: int, fail_rate: int, timed_out: int, total: int) -> int:
    """Penalise retries, failures and timeouts."""
    timeout_rate = timed_out / max(1, total) * 100
    penalty = (
        retry_rate * STABILITY_RETRY_WEIGHT
        + fail_rate * STABILITY_FAIL_WEIGHT
        + timeout_rate * STABILITY_TIMEOUT_WEIGHT
    )
    return int(clamp(round_half_up(100 - penalty)))


def quality_score(pass_rate: int, stability: int, speed: int, retry_health: int) -> int:
    """Weighted blend of pass rate, stability, speed and retry health."""
    blended = (
        pass_rate * QUALITY_PASS_WEIGHT
        + stability * QUALITY_STABILITY_WEIGHT
        + speed * QUALITY_SPEED_WEIGHT
        + retry_health * QUALITY_RETRY_HEALTH_WEIGHT
    )
    return int(clamp(round_half_up(blended)))


def risk_level(quality: int) -> RiskLevel:
    """Classify a quality score."""
    if quality >= LOW_RISK_MIN_QUALITY:
        return "Low"
    if quality >= MODERATE_RISK_MIN_QUALITY:
        return "Moderate"
    if quality >= HIGH_RISK_MIN_QUALITY:
        return "High"
    return "Critical"


def release_gate(
    failed: int, timed_out: int, flaky_rate: int, comparison: Comparison
) -> ReleaseGate:
    """Decide whether the run is fit for release.

    Any failed or timed out test blocks the release. Otherwise a flaky rate of
    8% or more, or a run more than 20s slower than the previous one, makes it
    risky.
    """
    if failed > 0 or timed_out > 0:
        return "BLOCKED"
    slower = (
        comparison.has_baseline
        and comparison.duration_delta_sec > RISKY_DURATION_DELTA_SEC
    )
    if flaky_rate >= RISKY_FLAKY_RATE or slower:
        return "RISKY"
    return "READY"


def compute_insights(
    aggregates: RunAggregates,
    durations: Sequence[float],
    comparison: Comparison,
) -> InsightScores:
    """Derive the insight scores of a run."""
    total = aggregates.total
    p95 = percentile(durations, 95)
    retry_rate = percent(aggregates.retried, total)
    retry_health = int(clamp(100 - retry_rate))
    speed = speed_score(p95)
    stability = stability_score(
        retry_rate, aggregates.fail_rate, aggregates.timed_out, total
    )
    quality = quality_score(aggregates.pass_rate, stability, speed, retry_health)

    return InsightScores(
        quality_score=quality,
        stability_score=stability,
        speed_score=speed,
        retry_health=retry_health,
        retry_rate=retry_rate,
        retry_burden=aggregates.retry_burden,
        p50=percentile(durations, 50),
        p90=percentile(durations, 90),
        p95=p95,
        effective_pass_rate=percent(
            max(0, aggregates.passed - aggregates.flaky), total
        ),
        risk_level=risk_level(quality),
        release_gate=release_gate(
            aggregates.failed,
            aggregates.timed_out,
            aggregates.flaky_rate,
            comparison,
        ),
    )


@dataclass(frozen=True, kw_only=True)
class PerformanceTiers:
    """Split of tests into duration quartiles."""

    ultra_fast: int
    fast: int
    normal: int
    slow: int


def performance_tiers(durations: Sequence[float]) -> PerformanceTiers:
    """Count tests per quartile of the duration series.

    Ultra fast is up to q25, fast up to q50, normal up to q75 and slow above
    it; every test lands in exactly one tier.
    """
    q25 = percentile(durations, 25)
    q50 = percentile(durations, 50)
    q75 = percentile(durations, 75)
    return PerformanceTiers(
        ultra_fast=sum(1 for d in durations if d <= q25),
        fast=sum(1 for d in durations if q25 < d <= q50),
        normal=sum(1 for d in durations if q50 < d <= q75),
        slow=sum(1 for d in durations if d > q75),
    )
