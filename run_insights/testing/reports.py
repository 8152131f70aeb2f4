"""Payload helpers for Playwright JSON reports in tests."""

from collections.abc import Sequence
from typing import Any


def attempt(
    *,
    status: str = "passed",
    duration: float = 100,
    error: str | None = None,
    stack: str | None = None,
    stdout: Sequence[str] = (),
) -> dict[str, Any]:
    """Create one attempt result as emitted by the JSON reporter."""
    result: dict[str, Any] = {
        "workerIndex": 0,
        "status": status,
        "duration": duration,
        "retry": 0,
        "startTime": "2099-01-01T12:00:00.000Z",
        "attachments": [],
        "stdout": [{"text": text} for text in stdout],
        "stderr": [],
        "errors": [],
    }
    if error is not None:
        result["error"] = {"message": error, "stack": stack}
        result["errors"] = [{"message": error, "stack": stack}]
    return result


def spec_test(
    results: Sequence[dict[str, Any]],
    *,
    project: str | None = "chromium",
    title: str | None = None,
) -> dict[str, Any]:
    """Create a test node holding its attempts in order."""
    node: dict[str, Any] = {
        "timeout": 30000,
        "annotations": [],
        "expectedStatus": "passed",
        "projectId": project or "",
        "results": list(results),
        "status": "expected",
    }
    if project is not None:
        node["projectName"] = project
    if title is not None:
        node["title"] = title
    return node


def spec(
    title: str,
    tests: Sequence[dict[str, Any]],
    *,
    file: str | None = "tests/example.spec.ts",
    line: int = 3,
    column: int = 5,
) -> dict[str, Any]:
    """Create a spec node."""
    node: dict[str, Any] = {
        "title": title,
        "ok": True,
        "tags": [],
        "tests": list(tests),
        "id": f"id-{title}",
        "line": line,
        "column": column,
    }
    if file is not None:
        node["file"] = file
    return node


def suite(
    title: str | None = None,
    *,
    file: str | None = None,
    specs: Sequence[dict[str, Any]] | None = None,
    suites: Sequence[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Create a suite node; omitted children are left out of the node."""
    node: dict[str, Any] = {}
    if title is not None:
        node["title"] = title
    if file is not None:
        node["file"] = file
    if specs is not None:
        node["specs"] = list(specs)
    if suites is not None:
        node["suites"] = list(suites)
    return node


def report(*suites: dict[str, Any]) -> dict[str, Any]:
    """Create a report document with the given top-level suites."""
    return {
        "config": {"version": "1.44.0"},
        "suites": list(suites),
        "errors": [],
        "stats": {"expected": 0, "unexpected": 0, "flaky": 0, "skipped": 0},
    }


def passing_spec(
    title: str,
    *,
    duration: float = 100,
    file: str = "tests/example.spec.ts",
    project: str = "chromium",
) -> dict[str, Any]:
    """Spec with a single test passing on its first attempt."""
    return spec(
        title,
        [spec_test([attempt(duration=duration)], project=project)],
        file=file,
    )
