"""
Test assertions for Result values.

    from railway import ErrorCode, ResultAssertions

    match = ResultAssertions.assert_success(verify(certs))
    ResultAssertions.assert_failure(verify(foreign), ErrorCode.PROFILE_MISMATCH)
"""

from __future__ import annotations

from typing import Any, TypeVar

from railway.failure import ErrorCode, FailureDescription
from railway.result import Result

T = TypeVar("T")


def _describe(result: Result[Any]) -> str:
    return result.either(
        lambda value: f"Success({value!r})",
        lambda error: f"Failure({error.code.value}: {error.message!r})",
    )


def _suffix(message: str) -> str:
    return f" — {message}" if message else ""


class ResultAssertions:
    """Assertions that print the offending track when they fail."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Return the success value, failing the test on a Failure."""
        assert result.is_success(), f"Expected Success but got {_describe(result)}{_suffix(message)}"
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_code: ErrorCode | None = None,
        message: str = "",
    ) -> FailureDescription:
        """Return the failure description, optionally checking its code."""
        assert result.is_failure(), f"Expected Failure but got {_describe(result)}{_suffix(message)}"
        error = result.error()
        if expected_code is not None and error.code != expected_code:
            raise AssertionError(
                f"Expected error code {expected_code.value} but got {_describe(result)}{_suffix(message)}"
            )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[T], substring: str) -> None:
        """Case-insensitive substring check on the failure message."""
        error = ResultAssertions.assert_failure(result)
        assert substring.lower() in error.message.lower(), (
            f"Expected failure message to contain {substring!r}: {error.message!r}"
        )

    @staticmethod
    def assert_success_value(result: Result[T], expected_value: Any) -> None:
        value = ResultAssertions.assert_success(result)
        assert value == expected_value, f"Expected success value {expected_value!r}, got {value!r}"
