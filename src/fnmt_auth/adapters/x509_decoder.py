"""
X.509 decoder adapter — DER bytes → cryptography Certificate.

Adapter layer — implements the CertificateDecoder port using
cryptography (PyCA). All decoder exceptions are caught at this boundary
and turned into MALFORMED_CERTIFICATE failures carrying the decoder's
diagnostic.
"""

from __future__ import annotations

from dataclasses import replace

from cryptography import x509
from railway import ErrorCode, FailureDescription
from railway.result import Result


def _load_der(raw_certificate: bytes) -> x509.Certificate:
    """
    Load a DER certificate and decode its subject eagerly.

    cryptography parses some fields lazily; touching the subject here makes
    a broken Name fail now instead of inside profile validation.
    """
    certificate = x509.load_der_x509_certificate(raw_certificate)
    certificate.subject  # noqa: B018
    return certificate


def with_diagnostic(failure: FailureDescription) -> FailureDescription:
    """Append the captured exception's text to the failure message."""
    if failure.exception is None:
        return failure
    return replace(failure, message=f"{failure.message}: {failure.exception}")


class DerCertificateDecoder:
    """
    Decode the DER-encoded leaf certificate a TLS client presented.

    Implements the CertificateDecoder port.
    """

    def decode(self, raw_certificate: bytes) -> Result[x509.Certificate]:
        return Result.from_computation(
            lambda: _load_der(raw_certificate),
            ErrorCode.MALFORMED_CERTIFICATE,
            "error parsing the given certificate",
        ).map_failure(with_diagnostic)
