"""Composite scores derived for one report run."""

from typing import Literal

from run_insights.models.base import CamelModel

type RiskLevel = Literal["Low", "Moderate", "High", "Critical"]
type ReleaseGate = Literal["READY", "RISKY", "BLOCKED"]


class InsightScores(CamelModel):
    """Scores and gate decision for a run.

    Percentage-like fields are integers in [0, 100]. Percentiles are in
    milliseconds.
    """

    quality_score: int
    stability_score: int
    speed_score: int
    retry_health: int
    retry_rate: int
    retry_burden: int
    p50: float
    p90: float
    p95: float
    effective_pass_rate: int
    risk_level: RiskLevel
    release_gate: ReleaseGate
