"""Tests for structural report validation."""

from typing import Any

import pytest

from run_insights.models.report import ReportDocument
from run_insights.testing.reports import attempt, passing_spec, report, spec, suite
from run_insights.validation import (
    InvalidReportStructureError,
    is_valid_report,
    validate_report,
)


def test_accepts_playwright_report() -> None:
    """Returns the parsed document for a well-formed report."""
    raw = report(suite("s", specs=[passing_spec("t")]))

    document = validate_report(raw)

    assert isinstance(document, ReportDocument)
    assert document.suites[0].title == "s"
    assert document.suites[0].specs is not None
    assert document.suites[0].specs[0].tests[0].project_name == "chromium"


def test_accepts_empty_suites() -> None:
    """Suites with neither specs nor nested suites are valid."""
    assert is_valid_report(report(suite(), suite("titled only")))
    assert is_valid_report({"suites": []})


def test_accepts_null_children() -> None:
    """Null ``specs`` and ``suites`` are treated as absent."""
    assert is_valid_report({"suites": [{"title": "s", "specs": None, "suites": None}]})


@pytest.mark.parametrize(
    "raw",
    [
        pytest.param([], id="root-is-list"),
        pytest.param("report", id="root-is-string"),
        pytest.param(None, id="root-is-null"),
        pytest.param({}, id="missing-suites"),
        pytest.param({"suites": {"title": "s"}}, id="suites-not-list"),
        pytest.param({"suites": [42]}, id="suite-not-object"),
        pytest.param({"suites": [{"specs": 42}]}, id="specs-not-list"),
        pytest.param(
            {"suites": [{"specs": [{"title": "t"}]}]}, id="spec-without-tests"
        ),
        pytest.param(
            {"suites": [{"specs": [{"title": "t", "tests": [{"results": 1}]}]}]},
            id="results-not-list",
        ),
    ],
)
def test_rejects_malformed_documents(raw: Any) -> None:
    """Raises InvalidReportStructureError for malformed shapes."""
    with pytest.raises(InvalidReportStructureError, match="Invalid report structure"):
        validate_report(raw)

    assert not is_valid_report(raw)


def test_reports_location_of_nested_malformed_node() -> None:
    """The error message names the offending nested node."""
    raw = report(suite("outer", suites=[suite("ok"), {"title": "bad", "specs": 42}]))

    with pytest.raises(
        InvalidReportStructureError, match=r"suites\.0\.suites\.1\.specs"
    ):
        validate_report(raw)


def test_invalid_structure_is_a_value_error() -> None:
    """Callers handling ValueError also catch structural errors."""
    with pytest.raises(ValueError):
        validate_report({"suites": "nope"})


def test_ignores_unknown_fields() -> None:
    """Fields the analytics do not read are accepted and ignored."""
    raw = report(
        suite("s", specs=[spec("t", [{"results": [attempt()], "extra": {"a": 1}}])])
    )

    assert is_valid_report(raw)
