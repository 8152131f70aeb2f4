"""Tests for TestRecord model."""

import pytest

from run_insights.testing.factories import TestRecordFactory


@pytest.mark.parametrize(
    ("status", "retries", "retried", "flaky"),
    [
        ("passed", 0, False, False),
        ("passed", 2, True, True),
        ("failed", 1, True, False),
        ("timedOut", 1, True, False),
        ("skipped", 0, False, False),
    ],
)
def test_retry_flags(status: str, retries: int, retried: bool, flaky: bool) -> None:
    """Only a pass after at least one retry is flaky."""
    record = TestRecordFactory.build(status=status, retries=retries)

    assert record.is_retried is retried
    assert record.is_flaky is flaky


class TestLocation:
    """Tests for the location property."""

    def test_full_location(self) -> None:
        record = TestRecordFactory.build(file="tests/a.spec.ts", line=10, column=3)

        assert record.location == "tests/a.spec.ts:10:3"

    def test_partial_location(self) -> None:
        record = TestRecordFactory.build(file="tests/a.spec.ts", line=10)

        assert record.location == "tests/a.spec.ts:10"

    def test_zero_line_is_kept(self) -> None:
        record = TestRecordFactory.build(file="a.ts", line=0, column=0)

        assert record.location == "a.ts:0:0"

    def test_no_location(self) -> None:
        assert TestRecordFactory.build().location is None


def test_records_are_immutable() -> None:
    record = TestRecordFactory.build()

    with pytest.raises(AttributeError):
        record.status = "failed"  # type: ignore[misc]
