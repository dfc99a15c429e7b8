"""
HTTP integration — ErrorCode to status mapping and response builders.

    status = HttpStatusMapper.map_error_code(ErrorCode.UNAUTHORIZED)  # 403

    @app.get("/verify")
    def verify(request: Request):
        return build_fastapi_response(verify_fn(certs))
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, TypeVar

from railway.failure import ErrorCode, FailureDescription
from railway.result import Result

T = TypeVar("T")

_DEFAULT_STATUS = 500


class HttpStatusMapper:
    """
    ErrorCode → HTTP status.

    Missing or undecodable certificates are client errors (401/400); a
    certificate that decodes but is refused is 403. Host-side problems
    are 5xx.
    """

    _STATUS: dict[ErrorCode, int] = {
        ErrorCode.NO_CERTIFICATE: 401,
        ErrorCode.MALFORMED_CERTIFICATE: 400,
        ErrorCode.PROFILE_MISMATCH: 403,
        ErrorCode.UNAUTHORIZED: 403,
        ErrorCode.CONFIGURATION_ERROR: 500,
        ErrorCode.TECHNICAL_ERROR: 503,
    }

    @classmethod
    def map_error_code(cls, code: ErrorCode) -> int:
        return cls._STATUS.get(code, _DEFAULT_STATUS)

    @classmethod
    def map_failure(cls, failure: FailureDescription) -> int:
        return cls.map_error_code(failure.code)


@dataclass(frozen=True, slots=True)
class ErrorResponse:
    """
    JSON body for a rejected request.

        {
            "error_code": "PROFILE_MISMATCH",
            "message": "client fnmt certificate country failed validation",
            "timestamp": "2026-02-17T10:30:00+00:00"
        }

    The failure's exception is never exposed.
    """

    error_code: str
    message: str
    timestamp: str

    @classmethod
    def from_failure(cls, failure: FailureDescription) -> ErrorResponse:
        return cls(failure.code.value, failure.message, failure.timestamp.isoformat())

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def build_response(
    result: Result[T],
    success_status: int = 200,
    success_body: Any = None,
) -> tuple[Any, int]:
    """(body, status) for either track; `success_body` replaces the value when given."""
    return result.either(
        lambda value: (value if success_body is None else success_body, success_status),
        lambda error: (ErrorResponse.from_failure(error).to_dict(), HttpStatusMapper.map_failure(error)),
    )


def build_fastapi_response(
    result: Result[T],
    success_status: int = 200,
    headers: dict[str, str] | None = None,
) -> Any:
    """
    FastAPI JSONResponse for a Result.

    `headers` are attached to a successful response only.
    """
    from fastapi.responses import JSONResponse

    body, status = build_response(result, success_status)
    return JSONResponse(
        content=body,
        status_code=status,
        headers=headers if result.is_success() else None,
    )
