"""Load Playwright JSON reports from disk."""

import json
import logging
from pathlib import Path

from run_insights.models.report import ReportDocument
from run_insights.validation import validate_report

log = logging.getLogger(__name__)


def load_report(report_path: Path) -> ReportDocument:
    """Read, parse and structurally validate a report file.

    Raises:
        FileNotFoundError: If the report file does not exist
        ValueError: If the file is not valid JSON
        InvalidReportStructureError: If the JSON is not a Playwright report

    """
    if not report_path.is_file():
        raise FileNotFoundError(f"Report file not found: {report_path}")

    content = report_path.read_text(encoding="utf-8")
    try:
        raw = json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {report_path}: {e}") from e

    document = validate_report(raw)
    log.debug(
        "Loaded report %s with %d top-level suite(s)",
        report_path,
        len(document.suites),
    )
    return document
