"""
Failure description — structured error information for the failure track.

Every rejected verification carries an ErrorCode plus a human-readable
message, the exception that caused it (if any) and the moment it happened.

Enum + frozen dataclass: __eq__, __hash__ and __repr__ come for free, and
Enum members are singleton-comparable with `is`.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Error codes for client-certificate verification.

    Request-scoped codes describe why a single handshake/request is refused.
    CONFIGURATION_ERROR only occurs while loading settings.
    """

    NO_CERTIFICATE = "NO_CERTIFICATE"
    """The client presented zero certificates (→ 401)."""

    MALFORMED_CERTIFICATE = "MALFORMED_CERTIFICATE"
    """The leaf certificate bytes could not be decoded (→ 400)."""

    PROFILE_MISMATCH = "PROFILE_MISMATCH"
    """Wrong issuing country or malformed serial number (→ 403)."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """Well-formed certificate whose identity is on no allow-list (→ 403)."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Empty or unknown configuration sub-key (load time only, → 500)."""

    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Host-side problem, e.g. verifier not wired yet (→ 503)."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor: code, message, optional exception, timestamp.

    >>> desc = FailureDescription(ErrorCode.UNAUTHORIZED, "not allowed")
    >>> desc.code
    <ErrorCode.UNAUTHORIZED: 'UNAUTHORIZED'>
    >>> desc.message
    'not allowed'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @staticmethod
    def create(
        code: ErrorCode,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> FailureDescription:
        return FailureDescription(code=code, message=message, exception=exception)

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain, if there is one."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__)
        )
        return f"{self.message}\n{tb}"
