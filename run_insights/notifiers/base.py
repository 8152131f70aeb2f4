"""Abstract base class for chat notifiers."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass

from run_insights.formatting import format_duration
from run_insights.models.insights import InsightScores, ReleaseGate

GATE_SYMBOLS: Mapping[ReleaseGate, str] = {
    "READY": "✅",
    "RISKY": "⚠️",
    "BLOCKED": "❌",
}


@dataclass(frozen=True, kw_only=True)
class Notifier(ABC):
    """Abstract base for notifiers delivering a run's insight scores."""

    @abstractmethod
    async def send(self, title: str, insights: InsightScores) -> None:
        """Deliver the insight scores of a run.

        Args:
            title: Report title identifying the run
            insights: Scores and release gate of the run

        Raises:
            RuntimeError: If the receiving service rejects the message

        """


def headline(title: str, insights: InsightScores) -> str:
    """One-line summary of the gate decision."""
    gate = insights.release_gate
    return f"{GATE_SYMBOLS[gate]} {title}: {gate} (quality {insights.quality_score})"


def score_facts(insights: InsightScores) -> Mapping[str, str]:
    """Label/value pairs shown in rich notification layouts."""
    return {
        "Risk": insights.risk_level,
        "Quality": str(insights.quality_score),
        "Stability": str(insights.stability_score),
        "Speed": str(insights.speed_score),
        "Retry rate": f"{insights.retry_rate}%",
        "Effective pass rate": f"{insights.effective_pass_rate}%",
        "P50 / P90 / P95": " / ".join(
            format_duration(value)
            for value in (insights.p50, insights.p90, insights.p95)
        ),
    }
