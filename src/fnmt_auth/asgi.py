"""
FastAPI + Uvicorn ASGI application.

Runs the FNMT verifier behind a TLS-terminating reverse proxy (nginx,
Traefik, ...). The proxy validates the certificate chain and forwards the
client certificate; this service decides whether that identity is allowed.

Endpoints:
  - GET /verify  forward-auth target (nginx auth_request, Traefik forwardAuth)
  - GET /whoami  example route protected by the require_fnmt_client dependency
  - GET /health  liveness probe
  - GET /info    application metadata

Entry point for production: uvicorn fnmt_auth.asgi:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any
from urllib.parse import quote

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from railway import FailureDescription, ResultFailures
from railway.http_support import ErrorResponse, HttpStatusMapper, build_fastapi_response
from railway.result import Result

from fnmt_auth import __version__
from fnmt_auth.adapters.client_certs import certificates_from_scope
from fnmt_auth.config import AppSettings
from fnmt_auth.domain.models import AuthorizationMatch, VerifierConfig
from fnmt_auth.domain.ports import ClientCertificateVerifier
from fnmt_auth.main import configure_structlog, create_verifier

# ─────────────────────── Global State ───────────────────────
# Set once during app startup, read-only afterwards.

_verify_fn: ClientCertificateVerifier | None = None
_config: VerifierConfig | None = None
_client_cert_header = "x-ssl-client-cert"
_error_message: str | None = None
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    FastAPI lifespan context manager — runs on startup and shutdown.

    Startup: load settings and wire the verifier. A configuration error
    is recorded for /health and re-raised so the service does not start.
    """
    global _verify_fn, _config, _client_cert_header, _error_message

    log.info("asgi.startup")

    try:
        settings = AppSettings()
    except Exception as e:
        error_msg = f"Configuration error: {e}"
        _error_message = error_msg
        log.error("asgi.startup_error", error=error_msg)
        raise

    configure_structlog(settings.log_level)

    _config = settings.fnmt.to_config()
    _client_cert_header = settings.server.client_cert_header
    _verify_fn = create_verifier(_config)

    if not (_config.full_names or _config.national_ids or _config.combined_tokens):
        log.warning("asgi.empty_allow_lists", message="Every client certificate will be rejected")

    log.info(
        "asgi.startup_complete",
        version=__version__,
        client_cert_header=_client_cert_header,
        allowed_full_names=len(_config.full_names),
        allowed_national_ids=len(_config.national_ids),
        allowed_combined_tokens=len(_config.combined_tokens),
    )

    yield  # ← App is running here; Uvicorn handles requests

    log.info("asgi.shutdown_complete")


# ─────────────────────── FastAPI Application ───────────────────────

app = FastAPI(
    title="fnmt-client-auth",
    description="FNMT client-certificate authorization — forward-auth service",
    version=__version__,
    lifespan=lifespan,
)


def _log_rejection(request: Request, failure: FailureDescription) -> None:
    log.info(
        "verify.rejected",
        error_code=failure.code.value,
        reason=failure.message,
        client=request.client.host if request.client else None,
    )


def _verify_request(request: Request) -> Result[AuthorizationMatch]:
    """Collect the request's client certificates and run them through the verifier."""
    verify_fn = _verify_fn
    if verify_fn is None:
        return ResultFailures.technical_error("Verifier not initialized")

    return (
        certificates_from_scope(request.scope, request.headers, _client_cert_header)
        .flat_map(verify_fn)
        .peek_failure(lambda failure: _log_rejection(request, failure))
    )


def _match_headers(match: AuthorizationMatch) -> dict[str, str]:
    # Header values must be latin-1; percent-encode names with other characters.
    return {
        "X-Fnmt-Match-Kind": match.kind.value,
        "X-Fnmt-Match-Value": quote(match.value),
    }


def require_fnmt_client(request: Request) -> AuthorizationMatch:
    """
    FastAPI dependency: reject the request unless its client certificate is allowed.

        @app.get("/private")
        def private(match: Annotated[AuthorizationMatch, Depends(require_fnmt_client)]): ...
    """
    result = _verify_request(request)
    if result.is_failure():
        failure = result.error()
        raise HTTPException(
            status_code=HttpStatusMapper.map_failure(failure),
            detail=ErrorResponse.from_failure(failure).to_dict(),
        )
    return result.value()


@app.get("/verify")
async def verify(request: Request) -> JSONResponse:
    """
    Forward-auth endpoint.

    Returns 200 with the match (and X-Fnmt-Match-* headers the proxy can
    copy upstream) when the certificate is allowed. Otherwise returns the
    error body with 401 (no certificate), 400 (undecodable), 403 (profile
    mismatch or not on any list) or 503 (not started).
    """
    result = _verify_request(request)
    headers = result.map(_match_headers).get_or_else({})
    return build_fastapi_response(
        result.map(lambda match: {"status": "authorized", **match.to_dict()}),
        headers=headers,
    )


@app.get("/whoami")
async def whoami(
    match: Annotated[AuthorizationMatch, Depends(require_fnmt_client)],
) -> dict[str, str]:
    """Echo which allow-list accepted the caller."""
    return match.to_dict()


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe.

    Returns 200 once the verifier is wired, 503 on a startup error or
    before startup completed.
    """
    if _error_message:
        log.warning("health.check_failed", error=_error_message)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "error": _error_message},
        )

    if _verify_fn is None:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "reason": "verifier not initialized"},
        )

    return JSONResponse(status_code=200, content={"status": "healthy"})


@app.get("/info")
async def info() -> dict[str, Any]:
    """Application metadata and allow-list sizes (never the entries themselves)."""
    return {
        "name": "fnmt-client-auth",
        "version": __version__,
        "client_cert_header": _client_cert_header,
        "allowed_full_names": len(_config.full_names) if _config else 0,
        "allowed_national_ids": len(_config.national_ids) if _config else 0,
        "allowed_combined_tokens": len(_config.combined_tokens) if _config else 0,
    }


if __name__ == "__main__":
    # For local testing: python -m uvicorn fnmt_auth.asgi:app --reload
    import uvicorn

    uvicorn.run(
        "fnmt_auth.asgi:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info",
    )
