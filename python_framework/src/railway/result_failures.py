"""
Convenience factory methods for verification failures.

Usage:
    from railway.result_failures import ResultFailures

    # Instead of:
    Result.failure(ErrorCode.PROFILE_MISMATCH, "client fnmt certificate country failed validation")

    # Write:
    ResultFailures.profile_mismatch("client fnmt certificate country failed validation")
"""

from __future__ import annotations

from railway.failure import ErrorCode
from railway.result import Result


class ResultFailures:
    """One factory per ErrorCode."""

    @staticmethod
    def no_certificate(message: str = "no client certificate provided") -> Result:
        return Result.failure(ErrorCode.NO_CERTIFICATE, message)

    @staticmethod
    def malformed_certificate(message: str, exception: BaseException | None = None) -> Result:
        """Decoder could not parse the supplied bytes; keep its exception for diagnostics."""
        return Result.failure(ErrorCode.MALFORMED_CERTIFICATE, message, exception)

    @staticmethod
    def profile_mismatch(message: str) -> Result:
        return Result.failure(ErrorCode.PROFILE_MISMATCH, message)

    @staticmethod
    def unauthorized(message: str = "client fnmt certificate failed validation") -> Result:
        return Result.failure(ErrorCode.UNAUTHORIZED, message)

    @staticmethod
    def configuration_error(message: str, exception: BaseException | None = None) -> Result:
        return Result.failure(ErrorCode.CONFIGURATION_ERROR, message, exception)

    @staticmethod
    def technical_error(message: str, exception: BaseException | None = None) -> Result:
        return Result.failure(ErrorCode.TECHNICAL_ERROR, message, exception)
