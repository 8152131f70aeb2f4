"""Models for run history entries."""

from datetime import datetime

from pydantic import NonNegativeFloat, NonNegativeInt

from run_insights.models.base import CamelModel


class RunSummary(CamelModel):
    """Rolled-up counters of one past report run."""

    generated_at: datetime | None = None
    total: NonNegativeInt = 0
    passed: NonNegativeInt = 0
    failed: NonNegativeInt = 0
    skipped: NonNegativeInt = 0
    flaky: NonNegativeInt = 0
    timed_out: NonNegativeInt = 0
    duration_ms: NonNegativeInt | NonNegativeFloat = 0
    pass_rate: NonNegativeInt | NonNegativeFloat = 0
