"""
Application entry point — wires dependencies and starts the HTTP service.

Composition root: creates the concrete decoder and logger and binds them,
together with the allow-lists, into the verification pipeline.

This is the ONLY place where concrete adapters are instantiated.
Everything else depends on Protocol interfaces.

Responsibilities:
  1. Configure structlog for structured logging
  2. Load and validate configuration from environment
  3. Bind config + decoder + logger into the pipeline (partial application)
  4. Start uvicorn serving fnmt_auth.asgi:app
"""

from __future__ import annotations

import logging
import sys
from functools import partial

import structlog
import uvicorn

from fnmt_auth import __version__
from fnmt_auth.adapters.x509_decoder import DerCertificateDecoder
from fnmt_auth.config import AppSettings
from fnmt_auth.domain.models import VerifierConfig
from fnmt_auth.domain.ports import ClientCertificateVerifier
from fnmt_auth.pipeline import verify_client_certificate


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for structured logging.

    Unknown level names fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_verifier(config: VerifierConfig) -> ClientCertificateVerifier:
    """
    Bind the allow-lists, DER decoder and match logger into the pipeline.

    The returned callable takes only the presented certificates.
    """
    return partial(
        verify_client_certificate,
        config=config,
        decoder=DerCertificateDecoder(),
        logger=structlog.get_logger("fnmt_auth.matcher"),
    )


def main() -> None:
    """Validate configuration and launch the HTTP service."""
    try:
        settings = AppSettings()
    except Exception as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    config = settings.fnmt.to_config()
    log.info(
        "app.starting",
        version=__version__,
        log_level=settings.log_level,
        host=settings.server.host,
        port=settings.server.port,
        client_cert_header=settings.server.client_cert_header,
        allowed_full_names=len(config.full_names),
        allowed_national_ids=len(config.national_ids),
        allowed_combined_tokens=len(config.combined_tokens),
    )

    uvicorn.run(
        "fnmt_auth.asgi:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
