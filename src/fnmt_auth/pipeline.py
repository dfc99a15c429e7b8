"""
Pipeline — end-to-end client-certificate verification.

Domain layer — the decoder and logger are injected; no module state is read.

The stages are connected via flat_map, forming a railway:

  leaf certificate (raw_certs[0])
    → decode(raw)              MALFORMED_CERTIFICATE
      → validate_profile(cert) PROFILE_MISMATCH
        → extract_identity     (never fails)
          → authorize          UNAUTHORIZED

Each stage returns Result[T]. The first failure short-circuits the rest;
no try/except needed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from railway import ResultFailures
from railway.result import Result

from fnmt_auth.domain.models import AuthorizationMatch, VerifierConfig
from fnmt_auth.domain.ports import CertificateDecoder, MatchLogger
from fnmt_auth.extractor import extract_identity
from fnmt_auth.matcher import authorize
from fnmt_auth.profile import validate_profile


def _leaf_certificate(raw_certs: Sequence[bytes]) -> Result[bytes]:
    """The leaf is the first presented certificate; the rest of the chain is ignored."""
    if len(raw_certs) == 0:
        return ResultFailures.no_certificate()
    return Result.success(raw_certs[0])


def verify_client_certificate(
    raw_certs: Sequence[bytes],
    *,
    config: VerifierConfig,
    decoder: CertificateDecoder,
    logger: MatchLogger,
    verified_chains: Sequence[Sequence[Any]] | None = None,
) -> Result[AuthorizationMatch]:
    """
    Decide whether the presented client certificate is authorized.

    `verified_chains` is accepted for parity with TLS verification hooks and
    ignored; chain trust is established by the TLS stack.

    Flow:
      1. No certificates → NO_CERTIFICATE
      2. Decode leaf → MALFORMED_CERTIFICATE on error
      3. Validate FNMT profile → PROFILE_MISMATCH on error
      4. Extract identity
      5. Match allow-lists → UNAUTHORIZED when nothing matches

    Idempotent and stateless; the only side effect is the success log record.
    """
    return (
        _leaf_certificate(raw_certs)
        .flat_map(decoder.decode)
        .flat_map(validate_profile)
        .map(extract_identity)
        .flat_map(lambda identity: authorize(identity, config, logger))
    )
