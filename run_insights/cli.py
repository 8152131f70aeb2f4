"""CLI entry point for run-insights."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

import aiohttp
from pydantic import BaseModel

from run_insights.aggregator import RunAggregates, aggregate
from run_insights.flattener import FlattenedReport, flatten_report
from run_insights.history_store import (
    DEFAULT_HISTORY_LIMIT,
    append_run,
    load_history,
    save_history,
    summarize_run,
)
from run_insights.models.insights import ReleaseGate
from run_insights.models.payload import ReportPayload, RunMetadata
from run_insights.notifiers.base import GATE_SYMBOLS
from run_insights.notifiers.loading import load_notifier_manifest
from run_insights.notifiers.manifest import NotifierManifest
from run_insights.payload import DEFAULT_TITLE, PayloadOptions, build_payload
from run_insights.report_loader import load_report

type FailOn = Literal["none", "blocked", "risky"]

FAILING_GATES: Mapping[FailOn, frozenset[ReleaseGate]] = {
    "none": frozenset(),
    "blocked": frozenset(["BLOCKED"]),
    "risky": frozenset(["BLOCKED", "RISKY"]),
}


def log_run_summary(
    log: logging.Logger, report: FlattenedReport, aggregates: RunAggregates
) -> None:
    """Log the headline counters of the parsed report."""
    log.info("Total tests: %d", aggregates.total)
    log.info("Passed: %d", aggregates.passed)
    log.info("Failed: %d", aggregates.failed)
    log.info("Skipped: %d", aggregates.skipped)
    log.info("Flaky: %d", aggregates.flaky)
    log.info("Total duration: %.2fs", aggregates.total_duration / 1000)
    if report.browsers:
        log.info("Browsers: %s", ", ".join(report.browsers))
    if report.suites:
        log.info("Suites: %d", len(report.suites))


def log_insights(log: logging.Logger, payload: ReportPayload) -> None:
    """Log a formatted summary of the insight scores and gate decision."""
    insights = payload.insights
    log.info("=" * 80)
    log.info("Run Insights:")
    log.info("=" * 80)
    log.info(
        "%s Release gate: %s (risk %s)",
        GATE_SYMBOLS[insights.release_gate],
        insights.release_gate,
        insights.risk_level,
    )
    log.info(
        "Quality %d | Stability %d | Speed %d | Retry health %d",
        insights.quality_score,
        insights.stability_score,
        insights.speed_score,
        insights.retry_health,
    )
    log.info(
        "P50 %s | P90 %s | P95 %s",
        insights.p50_display,
        insights.p90_display,
        insights.p95_display,
    )
    if payload.comparison.has_baseline:
        log.info(
            "Since previous run: pass rate %+d, failed %+d, duration %+ds",
            payload.comparison.pass_rate_delta,
            payload.comparison.failed_delta,
            payload.comparison.duration_delta_sec,
        )


def gate_exit_code(gate: ReleaseGate, fail_on: FailOn) -> int:
    """Exit code for a gate decision under the ``--fail-on`` policy."""
    return 1 if gate in FAILING_GATES[fail_on] else 0


async def run(
    input_path: Path,
    output_path: Path | None = None,
    title: str = DEFAULT_TITLE,
    metadata: RunMetadata | None = None,
    history_path: Path | None = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
    notifier_key: str | None = None,
    notifier_config_json: str = "{}",
    fail_on: FailOn = "none",
) -> int:
    """Analyse a report, update history, emit the payload and return exit code."""
    log = logging.getLogger("run_insights")

    manifest: NotifierManifest[Any] | None = None
    notifier_config: BaseModel | None = None
    if notifier_key:
        log.info("Loading notifier: %s", notifier_key)
        manifest = load_notifier_manifest(notifier_key)
        notifier_config = manifest.config_cls(**json.loads(notifier_config_json))

    log.info("Reading report from: %s", input_path)
    try:
        document = load_report(input_path)
    except (FileNotFoundError, ValueError) as e:
        log.error("Cannot load report: %s", e)
        return 1

    report = flatten_report(document)
    aggregates = aggregate(report.tests)
    if aggregates.total == 0:
        log.warning("No tests were parsed from: %s", input_path)
        log.warning("This usually means the input is not Playwright JSON output.")
        log.warning("Use reporter: [['json', { outputFile: 'test-results.json' }]]")
    log_run_summary(log, report, aggregates)

    generated_at = datetime.now(timezone.utc)
    previous = load_history(history_path) if history_path is not None else []
    history = append_run(
        previous, summarize_run(aggregates, generated_at), history_limit
    )
    if history_path is not None:
        save_history(history_path, history)

    payload = build_payload(
        report,
        history,
        PayloadOptions(
            title=title,
            metadata=metadata or RunMetadata(),
            generated_at=generated_at,
        ),
    )

    output = payload.model_dump_json(by_alias=True, exclude_none=True, indent=2)
    if output_path is None:
        print(output)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output, encoding="utf-8")
        log.info("Payload written to: %s", output_path)

    log_insights(log, payload)

    if manifest is not None and notifier_config is not None:
        try:
            async with manifest.notifier_factory(notifier_config) as notifier:
                await notifier.send(title, payload.insights)
        except (RuntimeError, aiohttp.ClientError) as e:
            log.error("Notification failed: %s", e)
            return 1

    return gate_exit_code(payload.insights.release_gate, fail_on)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compute analytics from a Playwright JSON report"
    )
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        default=Path("test-results.json"),
        help="Path to Playwright JSON report file",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Where to write the JSON payload (stdout when omitted)",
    )
    parser.add_argument("--title", "-t", default=DEFAULT_TITLE, help="Report title")
    parser.add_argument("--branch", help="Git branch name")
    parser.add_argument("--commit", help="Commit SHA")
    parser.add_argument("--build-url", help="CI build URL")
    parser.add_argument("--environment", help="Environment name like qa/stage/prod")
    parser.add_argument("--pr", help="Pull request number/id")
    parser.add_argument(
        "--history-file",
        type=Path,
        default=Path("reports/.run-insights-history.json"),
        help="JSON file storing run history for trend analytics",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Neither read nor update the history file",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=DEFAULT_HISTORY_LIMIT,
        help="Maximum number of historical runs to keep",
    )
    parser.add_argument(
        "--notifier",
        default=None,
        help="Notifier key (slack, teams) to send insight scores to",
    )
    parser.add_argument(
        "--notifier-config",
        default="{}",
        help="JSON configuration for the notifier",
    )
    parser.add_argument(
        "--fail-on",
        choices=sorted(FAILING_GATES),
        default="none",
        help="Exit non-zero when the release gate is at least this severe",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            input_path=args.input,
            output_path=args.output,
            title=args.title,
            metadata=RunMetadata(
                branch=args.branch,
                commit=args.commit,
                build_url=args.build_url,
                environment=args.environment,
                pull_request=args.pr,
            ),
            history_path=None if args.no_history else args.history_file,
            history_limit=args.history_limit,
            notifier_key=args.notifier,
            notifier_config_json=args.notifier_config,
            fail_on=args.fail_on,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
