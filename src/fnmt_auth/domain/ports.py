"""
Ports — Protocol-based interfaces for the verifier's collaborators.

These define WHAT the verification core needs without specifying HOW:

  Domain ← Ports (protocols) ← Adapters (implementations)

Each port is a Protocol (structural typing) so adapters satisfy
the contract simply by implementing the methods — no inheritance.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from cryptography import x509
from railway.result import Result

from fnmt_auth.domain.models import AuthorizationMatch


@runtime_checkable
class CertificateDecoder(Protocol):
    """
    Port: turn the raw leaf certificate bytes into a parsed X.509 certificate.

    Returns Result.failure(MALFORMED_CERTIFICATE, ...) when the bytes cannot
    be decoded, with the decoder's own diagnostic in the message.
    """

    def decode(self, raw_certificate: bytes) -> Result[x509.Certificate]: ...


@runtime_checkable
class MatchLogger(Protocol):
    """
    Port: the structured logger a successful match is reported to.

    Satisfied by any structlog bound logger. Injected per call so the core
    never reaches for a process-wide logger of its own.
    """

    def info(self, event: str, **kw: Any) -> Any: ...


class ClientCertificateVerifier(Protocol):
    """
    Port: the fully wired verification function a host calls per connection.

    Takes the presented certificates (leaf first) and returns the match.
    """

    def __call__(self, raw_certs: Sequence[bytes]) -> Result[AuthorizationMatch]: ...
