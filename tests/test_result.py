import pytest
from pydantic import ValidationError

from recordkit.errors import ResultError
from recordkit.result import ServiceResult


def test_ok_result_carries_payload_and_count() -> None:
    result = ServiceResult[list[int]].ok([1, 2], total_count=2)

    assert result.success is True
    assert result.payload == [1, 2]
    assert result.errors == []
    assert result.total_count == 2
    assert bool(result) is True
    assert result.unwrap() == [1, 2]


def test_ok_without_payload() -> None:
    result = ServiceResult.ok()

    assert result.success is True
    assert result.payload is None


def test_fail_result_carries_errors_only() -> None:
    result = ServiceResult[str].fail("not found", "timed out")

    assert result.success is False
    assert result.payload is None
    assert result.errors == ["not found", "timed out"]
    assert bool(result) is False
    with pytest.raises(ResultError, match="not found; timed out"):
        result.unwrap()


def test_fail_requires_an_error() -> None:
    with pytest.raises(ValidationError):
        ServiceResult.fail()


def test_inconsistent_outcomes_are_rejected() -> None:
    with pytest.raises(ValidationError):
        ServiceResult(success=True, errors=["boom"])
    with pytest.raises(ValidationError):
        ServiceResult(success=False, payload=1, errors=["boom"])


def test_result_is_immutable() -> None:
    result = ServiceResult.ok(1)

    with pytest.raises(ValidationError):
        result.success = False


def test_map_transforms_payload_and_keeps_failures() -> None:
    assert ServiceResult.ok(2, total_count=1).map(lambda value: value * 10) == ServiceResult.ok(20, total_count=1)

    failed = ServiceResult.fail("boom").map(lambda value: value * 10)
    assert failed.success is False
    assert failed.errors == ["boom"]
