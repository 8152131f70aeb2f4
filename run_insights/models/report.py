"""Models for Playwright JSON reporter documents.

Only the fields the analytics read are declared; everything else in the
document is ignored. Validating a raw document against ``ReportDocument`` is
the structural pre-check that runs before any flattening.
"""

from collections.abc import Sequence

from pydantic import Field

from run_insights.models.base import CamelModel


class AttemptError(CamelModel):
    """Error captured for a failed attempt."""

    message: str | None = None
    stack: str | None = None


class OutputChunk(CamelModel):
    """One chunk of captured stdout (binary chunks carry no text)."""

    text: str | None = None


class AttemptResult(CamelModel):
    """A single execution attempt of a test."""

    status: str | None = None
    duration: float | None = None
    error: AttemptError | None = None
    errors: Sequence[AttemptError] | None = None
    stdout: Sequence[OutputChunk | str] | None = None


class TestNode(CamelModel):
    """A test of a spec, executed once per attempt in one project."""

    __test__ = False

    title: str | None = None
    project_name: str | None = Field(
        default=None, description="Playwright project, usually the browser"
    )
    file: str | None = None
    line: int | None = None
    column: int | None = None
    results: Sequence[AttemptResult] | None = None


class SpecNode(CamelModel):
    """A spec declared in a test file."""

    title: str | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None
    tests: Sequence[TestNode]


class SuiteNode(CamelModel):
    """A suite, optionally holding specs and nested suites."""

    title: str | None = None
    file: str | None = None
    specs: Sequence[SpecNode] | None = None
    suites: Sequence["SuiteNode"] | None = None


class ReportDocument(CamelModel):
    """Root of a Playwright JSON report."""

    suites: Sequence[SuiteNode]
