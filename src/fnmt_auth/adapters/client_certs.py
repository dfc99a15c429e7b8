"""
Client certificate sources — where the host finds the presented certificates.

Adapter layer — turns what a server or proxy hands us into the
`raw_certs: list[bytes]` (DER, leaf first) the verification pipeline expects.

Sources, in order of trust:
  1. ASGI TLS extension: scope["extensions"]["tls"]["client_cert_chain"],
     a list of PEM strings, set by servers that terminate TLS themselves.
     When present it is the ONLY source consulted; a client talking TLS
     directly to us must not be able to inject a header instead.
  2. Reverse-proxy header (default x-ssl-client-cert):
       - URL-escaped PEM, e.g. nginx `$ssl_client_escaped_cert`
       - comma-separated base64 DER bodies, e.g. Traefik passTLSClientCert
  3. Nothing → empty list (the pipeline reports NO_CERTIFICATE).

Decoding problems become MALFORMED_CERTIFICATE failures.
"""

from __future__ import annotations

import base64
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol
from urllib.parse import unquote

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding
from railway import ErrorCode
from railway.result import Result

from fnmt_auth.adapters.x509_decoder import with_diagnostic

_PEM_MARKER = "-----BEGIN"


class PeerCertificateSource(Protocol):
    """Anything exposing the peer certificate like ssl.SSLSocket / ssl.SSLObject."""

    def getpeercert(self, binary_form: bool = ...) -> Any: ...


def _pem_to_der(pem: str) -> list[bytes]:
    certificates = x509.load_pem_x509_certificates(pem.encode("ascii"))
    return [certificate.public_bytes(Encoding.DER) for certificate in certificates]


def _base64_to_der(value: str) -> list[bytes]:
    parts = ("".join(part.split()) for part in value.split(","))
    return [base64.b64decode(part, validate=True) for part in parts if part]


def _header_to_der(value: str) -> list[bytes]:
    unescaped = unquote(value)
    if _PEM_MARKER in unescaped:
        return _pem_to_der(unescaped)
    return _base64_to_der(unescaped)


def _tls_chain_to_der(chain: Iterable[str]) -> list[bytes]:
    return [der for pem in chain for der in _pem_to_der(pem)]


def _decode(computation: Callable[[], list[bytes]], source: str) -> Result[list[bytes]]:
    return Result.from_computation(
        computation,
        ErrorCode.MALFORMED_CERTIFICATE,
        f"error decoding client certificate from {source}",
    ).map_failure(with_diagnostic)


def certificates_from_scope(
    scope: Mapping[str, Any],
    headers: Mapping[str, str],
    header_name: str,
) -> Result[list[bytes]]:
    """
    Collect the client certificates of an ASGI request, leaf first.

    `headers` must support case-insensitive lookup (Starlette Headers does).
    """
    tls = scope.get("extensions", {}).get("tls")
    if tls is not None:
        chain = tls.get("client_cert_chain") or []
        return _decode(lambda: _tls_chain_to_der(chain), "tls extension")

    header_value = headers.get(header_name)
    if not header_value:
        return Result.success([])
    return _decode(lambda: _header_to_der(header_value), f"header {header_name}")


def certificates_from_ssl_object(ssl_object: PeerCertificateSource) -> list[bytes]:
    """
    The peer certificate of a raw TLS connection.

    Works with ssl.SSLSocket and with the ssl.SSLObject asyncio exposes via
    `writer.get_extra_info("ssl_object")`. Python's ssl module only hands out
    the leaf, so the list has at most one element.
    """
    der = ssl_object.getpeercert(binary_form=True)
    if not der:
        return []
    return [der]
