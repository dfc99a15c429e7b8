"""
Result monad — the core of Railway-Oriented Programming.

A Result[T] is either Success(value: T) or Failure(error: FailureDescription).
Verification stages return Result instead of raising; the first failing stage
switches the whole chain onto the failure track and later stages are skipped.

    ┌──────────┐  flat_map  ┌──────────┐  flat_map  ┌─────────┐   map   ┌───────────┐
    │  decode  │──Success───│ profile  │──Success───│ extract │─────────│ authorize │──→ Result[T]
    └────┬─────┘            └────┬─────┘            └─────────┘         └─────┬─────┘
         │ Failure               │ Failure                                    │ Failure
         └───────────────────────┴────────────────────────────────────────────┴──→ Result[T]

Every combinator is written in terms of `either`, which each track
implements once. Success and Failure support structural pattern matching:

    match verify(certs):
        case Success(match):  ...
        case Failure(error):  ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, NoReturn, Optional, TypeVar

from railway.failure import ErrorCode, FailureDescription

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class Result(Generic[T]):
    """
    Railway-Oriented Programming Result monad.

        >>> Result.success("123456789").map(len).value()
        9

        >>> Result.failure(ErrorCode.UNAUTHORIZED, "nope").map(len).is_failure()
        True
    """

    __slots__ = ()

    # ──────────────────────── Track-specific ────────────────────────

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        """
        Fold both tracks into a single value.

            result.either(
                on_success=lambda match: (200, match.value),
                on_failure=lambda err: (403, err.message),
            )
        """
        raise NotImplementedError

    def value(self) -> T:
        """Success value. Raises ValueError on a Failure; prefer either() or match/case."""
        raise NotImplementedError

    def error(self) -> FailureDescription:
        """Failure description. Raises ValueError on a Success."""
        raise NotImplementedError

    # ──────────────────────── Introspection ────────────────────────

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def __bool__(self) -> bool:
        return self.is_success()

    def get_or_else(self, default: T) -> T:
        return self.either(lambda v: v, lambda _: default)

    # ──────────────────────── Combinators ────────────────────────

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        """Transform the success value. Short-circuits on failure."""
        return self.either(lambda v: Success(mapper(v)), lambda _: self._as_failure())

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        """
        Chain a Result-returning stage. Short-circuits on failure.

            decoder.decode(raw).flat_map(validate_profile)
        """
        return self.either(mapper, lambda _: self._as_failure())

    def map_failure(
        self, mapper: Callable[[FailureDescription], FailureDescription]
    ) -> Result[T]:
        """Rewrite the failure description; a success passes through unchanged."""
        return self.either(lambda _: self, lambda err: Failure(mapper(err)))

    def ensure(
        self,
        predicate: Callable[[T], bool],
        error: FailureDescription | ErrorCode,
        message: str = "",
    ) -> Result[T]:
        """
        Keep the success value only if it satisfies the predicate.

        `error` is either a ready FailureDescription or an ErrorCode that is
        combined with `message`.
        """
        failure = error if isinstance(error, FailureDescription) else FailureDescription(error, message)
        return self.flat_map(lambda v: self if predicate(v) else Failure(failure))

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        """Run a side effect on the success value."""
        self.either(action, lambda _: None)
        return self

    def peek_failure(self, action: Callable[[FailureDescription], Any]) -> Result[T]:
        """Run a side effect (e.g. logging a rejection) on the failure description."""
        self.either(lambda _: None, action)
        return self

    def _as_failure(self) -> Result[Any]:
        # Only reached from the failure branch of either(); the value type is irrelevant there.
        return self

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure_from(error: FailureDescription) -> Result[T]:
        return Failure(error)

    @staticmethod
    def failure(
        code: ErrorCode,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> Result[T]:
        """
        Create a failed Result.

            Result.failure(ErrorCode.NO_CERTIFICATE, "no client certificate provided")
            Result.failure(ErrorCode.MALFORMED_CERTIFICATE, "bad DER", exc)
        """
        return Failure(FailureDescription(code=code, message=message, exception=exception))

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        error_code: ErrorCode,
        error_message: str,
    ) -> Result[T]:
        """
        Run a computation that may raise and move any exception onto the failure track.

        Adapter-boundary helper: third-party code (decoders, validators) raises,
        business logic only ever sees Results.

            Result.from_computation(
                lambda: x509.load_der_x509_certificate(raw),
                ErrorCode.MALFORMED_CERTIFICATE,
                "error parsing the given certificate",
            )
        """
        try:
            value = computation()
        except Exception as e:
            return Failure(FailureDescription(error_code, error_message, e))
        return Success(value)


@dataclass(frozen=True, slots=True)
class Success(Result[T]):
    """The success track — wraps a non-None value of type T."""

    _value: T

    def __post_init__(self) -> None:
        if self._value is None:
            raise TypeError("Success value must not be None")

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        return on_success(self._value)

    def value(self) -> T:
        return self._value

    def error(self) -> NoReturn:
        raise ValueError(f"Cannot get error from a Success: {self._value!r}")

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


@dataclass(frozen=True, slots=True, eq=False)
class Failure(Result[T]):
    """
    The failure track — wraps a FailureDescription.

    Two failures are equal when code and message match; timestamp and
    exception are ignored.
    """

    _error: FailureDescription

    def __post_init__(self) -> None:
        if self._error is None:
            raise TypeError("Failure error must not be None")

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        return on_failure(self._error)

    def value(self) -> NoReturn:
        raise ValueError(f"Cannot get value from a Failure: {self._error.message}")

    def error(self) -> FailureDescription:
        return self._error

    def _key(self) -> tuple[ErrorCode, str]:
        return self._error.code, self._error.message

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Failure):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Failure({self._error.code.value}: {self._error.message!r})"
