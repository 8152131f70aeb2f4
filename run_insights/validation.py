"""Structural validation of raw report documents."""

from typing import Any

from pydantic import ValidationError

from run_insights.models.report import ReportDocument


class InvalidReportStructureError(ValueError):
    """Raised when a document is not a Playwright JSON report."""


def validate_report(raw: Any) -> ReportDocument:
    """Validate the shape of a parsed report document.

    The root must be an object holding a ``suites`` array. Every suite is an
    object whose optional ``specs`` and ``suites`` are arrays, every spec
    carries a ``tests`` array and every test holds an array of attempt
    objects. A suite with neither specs nor nested suites is valid.

    Raises:
        InvalidReportStructureError: If any node does not match that shape

    """
    try:
        return ReportDocument.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise InvalidReportStructureError(
            f"Invalid report structure at {location}: {first['msg']}"
        ) from e


def is_valid_report(raw: Any) -> bool:
    """Check whether a parsed document passes ``validate_report``."""
    try:
        validate_report(raw)
    except InvalidReportStructureError:
        return False
    return True
