"""
Railway-Oriented Programming (ROP) primitives for certificate verification.

Explicit, composable error handling — verification stages return Results,
they never raise.

    from railway import Result, ErrorCode

    def require_leaf(raw_certs: list[bytes]) -> Result[bytes]:
        if not raw_certs:
            return Result.failure(ErrorCode.NO_CERTIFICATE, "no client certificate provided")
        return Result.success(raw_certs[0])
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.result_failures import ResultFailures
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultFailures",
    "ResultAssertions",
]

__version__ = "1.0.0"
