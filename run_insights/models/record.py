"""Flat test records produced from a report tree."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

type TestStatus = Literal["passed", "failed", "skipped", "timedOut"]

KNOWN_STATUSES: Sequence[TestStatus] = ("passed", "failed", "skipped", "timedOut")


@dataclass(frozen=True, kw_only=True)
class TestRecord:
    """Outcome of one test after retries are resolved.

    Status, duration and error describe the last attempt only; ``retries``
    counts the attempts that came before it. Statuses outside
    ``KNOWN_STATUSES`` are carried through as reported.
    """

    __test__ = False

    title: str
    status: str
    duration: float
    retries: int = 0
    browser: str | None = None
    suite: str | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None
    error: str | None = None
    error_stack: str | None = None
    steps: Sequence[str] | None = None

    @property
    def is_retried(self) -> bool:
        """Whether the test needed more than one attempt."""
        return self.retries > 0

    @property
    def is_flaky(self) -> bool:
        """Passed on the last attempt after at least one retry."""
        return self.retries > 0 and self.status == "passed"

    @property
    def location(self) -> str | None:
        """Source location as ``file:line:column``, if any part is known."""
        parts = [
            str(part)
            for part in (self.file, self.line, self.column)
            if part is not None and part != ""
        ]
        return ":".join(parts) if parts else None
