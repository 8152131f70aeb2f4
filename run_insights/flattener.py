"""Flatten a report tree into test records."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from run_insights.models.record import TestRecord
from run_insights.models.report import (
    AttemptResult,
    ReportDocument,
    SpecNode,
    SuiteNode,
    TestNode,
)

log = logging.getLogger(__name__)

UNNAMED_TEST = "Unnamed test"
UNKNOWN_SUITE = "Unknown Suite"
UNKNOWN_STATUS = "unknown"


@dataclass(frozen=True, kw_only=True)
class FlattenedReport:
    """Test records of a report with the suite and browser names seen."""

    tests: Sequence[TestRecord]
    suites: Sequence[str]
    browsers: Sequence[str]


def flatten_report(document: ReportDocument) -> FlattenedReport:
    """Walk the suite tree depth-first and build one record per scorable test.

    Suite names collect the titles and files of top-level suites plus every
    spec file; browser names collect the project of every record. Both keep
    first-seen order.
    """
    records: list[TestRecord] = []
    suite_names: dict[str, None] = {}
    browser_names: dict[str, None] = {}
    skipped = 0

    for top_suite in document.suites:
        for name in (top_suite.title, top_suite.file):
            if name:
                suite_names.setdefault(name)

        for spec, ambient_suite in iter_specs([top_suite]):
            if spec.file:
                suite_names.setdefault(spec.file)
            for test in spec.tests:
                record = build_record(spec, test, ambient_suite)
                if record is None:
                    skipped += 1
                    continue
                if record.browser:
                    browser_names.setdefault(record.browser)
                records.append(record)

    if skipped:
        log.debug("Skipped %d test(s) without any attempt result", skipped)

    return FlattenedReport(
        tests=records,
        suites=list(suite_names),
        browsers=list(browser_names),
    )


def iter_specs(
    suites: Sequence[SuiteNode], parent_title: str | None = None
) -> Iterator[tuple[SpecNode, str | None]]:
    """Yield every spec with the title of its closest titled ancestor suite.

    Uses an explicit stack so arbitrarily deep nesting cannot hit the
    interpreter recursion limit. Specs come out in pre-order: a suite's own
    specs first, then those of its nested suites in document order.
    """
    stack = [(suite, parent_title) for suite in reversed(suites)]
    while stack:
        suite, inherited = stack.pop()
        ambient = suite.title or inherited
        for spec in suite.specs or ():
            yield spec, ambient
        for child in reversed(suite.suites or ()):
            stack.append((child, ambient))


def build_record(
    spec: SpecNode, test: TestNode, ambient_suite: str | None
) -> TestRecord | None:
    """Resolve the attempts of a test into a record.

    Returns None for a test without attempts, which has no outcome to score.
    """
    if not test.results:
        return None

    last = test.results[-1]
    return TestRecord(
        title=spec.title or test.title or UNNAMED_TEST,
        status=last.status or UNKNOWN_STATUS,
        duration=max(0.0, last.duration or 0.0),
        retries=len(test.results) - 1,
        browser=test.project_name or None,
        suite=ambient_suite or spec.file or UNKNOWN_SUITE,
        file=spec.file or test.file or None,
        line=spec.line if spec.line is not None else test.line,
        column=spec.column if spec.column is not None else test.column,
        error=error_message(last),
        error_stack=error_stack(last),
        steps=extract_steps(last),
    )


def error_message(result: AttemptResult) -> str | None:
    """Message of the attempt's error, else of its first listed error."""
    if result.error and result.error.message:
        return result.error.message
    if result.errors and result.errors[0].message:
        return result.errors[0].message
    return None


def error_stack(result: AttemptResult) -> str | None:
    """Stack trace of the attempt's error, else of its first listed error."""
    if result.error and result.error.stack:
        return result.error.stack
    if result.errors and result.errors[0].stack:
        return result.errors[0].stack
    return None


def extract_steps(result: AttemptResult) -> Sequence[str] | None:
    """Non-empty, trimmed stdout chunks of the attempt."""
    steps: list[str] = []
    for chunk in result.stdout or ():
        text = chunk if isinstance(chunk, str) else chunk.text
        if text and (stripped := text.strip()):
            steps.append(stripped)
    return steps or None
