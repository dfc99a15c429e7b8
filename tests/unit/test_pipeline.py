"""
Unit tests for the verification pipeline.

The real DER decoder is used with generated certificates; a MagicMock
decoder checks short-circuiting (no decode attempt without certificates).

Test categories:
  - Success track: each allow-list kind, precedence
  - Failure at each stage: no certificate, malformed, profile, unauthorized
  - Input boundary: only the leaf is used, verified_chains is ignored
  - Idempotency
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from railway import ErrorCode, Result, ResultAssertions

from fnmt_auth.adapters.x509_decoder import DerCertificateDecoder
from fnmt_auth.domain.models import MatchKind, VerifierConfig
from fnmt_auth.pipeline import verify_client_certificate
from tests.conftest import COMMON_NAME, DNI, FULL_NAME, CertificateFactory, config_with


def _verify(raw_certs: list[bytes], config: VerifierConfig, logger: MagicMock | None = None) -> Result:
    return verify_client_certificate(
        raw_certs,
        config=config,
        decoder=DerCertificateDecoder(),
        logger=logger or MagicMock(),
    )


# ─────────────────────── Success Track ───────────────────────


class TestVerificationSuccess:
    """
    GIVEN the reference certificate (ES, IDCES-123456789, Juan Pérez García)
    WHEN verified against various allow-lists
    THEN the first matching list determines the reported kind.
    """

    def test_full_name(self, fnmt_certificate: bytes) -> None:
        result = _verify([fnmt_certificate], config_with(full_names=[FULL_NAME]))
        match = ResultAssertions.assert_success(result)
        assert match.kind is MatchKind.FULL_NAME
        assert match.value == FULL_NAME

    def test_national_id(self, fnmt_certificate: bytes) -> None:
        result = _verify([fnmt_certificate], config_with(national_ids=[DNI]))
        assert ResultAssertions.assert_success(result).kind is MatchKind.NATIONAL_ID

    def test_combined_token(self, fnmt_certificate: bytes) -> None:
        result = _verify([fnmt_certificate], config_with(combined_tokens=[COMMON_NAME]))
        assert ResultAssertions.assert_success(result).kind is MatchKind.COMBINED_TOKEN

    def test_full_name_takes_precedence(self, fnmt_certificate: bytes) -> None:
        config = config_with(full_names=[FULL_NAME], national_ids=[DNI])
        result = _verify([fnmt_certificate], config)
        assert ResultAssertions.assert_success(result).kind is MatchKind.FULL_NAME

    def test_success_logs_one_record(self, fnmt_certificate: bytes) -> None:
        logger = MagicMock()
        _verify([fnmt_certificate], config_with(full_names=[FULL_NAME]), logger)
        logger.info.assert_called_once_with("matcher.matched", kind="full-name", value=FULL_NAME)


# ─────────────────────── Failure Track ───────────────────────


class TestVerificationFailures:
    def test_no_certificates(self) -> None:
        """
        GIVEN zero presented certificates
        WHEN verified
        THEN NO_CERTIFICATE is returned and the decoder is never called.
        """
        decoder = MagicMock()
        result = verify_client_certificate(
            [], config=config_with(full_names=[FULL_NAME]), decoder=decoder, logger=MagicMock(),
        )

        ResultAssertions.assert_failure(result, ErrorCode.NO_CERTIFICATE)
        decoder.decode.assert_not_called()

    @pytest.mark.parametrize("raw", [b"", b"\x30\x03\x02\x01\x00", b"not a certificate"])
    def test_malformed_certificate(self, raw: bytes) -> None:
        result = _verify([raw], config_with(full_names=[FULL_NAME]))
        error = ResultAssertions.assert_failure(result, ErrorCode.MALFORMED_CERTIFICATE)
        assert error.message.startswith("error parsing the given certificate: ")

    def test_foreign_country_regardless_of_lists(self, make_certificate: CertificateFactory) -> None:
        """
        GIVEN a certificate with country FR whose identity is on every list
        WHEN verified
        THEN PROFILE_MISMATCH is returned.
        """
        config = config_with(full_names=[FULL_NAME], national_ids=[DNI], combined_tokens=[COMMON_NAME])
        result = _verify([make_certificate(countries=("FR",))], config)
        ResultAssertions.assert_failure(result, ErrorCode.PROFILE_MISMATCH)

    def test_bad_serial_number(self, make_certificate: CertificateFactory) -> None:
        config = config_with(national_ids=["12345678"])
        result = _verify([make_certificate(serial_numbers=("IDCES-12345678",))], config)
        ResultAssertions.assert_failure(result, ErrorCode.PROFILE_MISMATCH)

    def test_unauthorized(self, fnmt_certificate: bytes) -> None:
        logger = MagicMock()
        result = _verify([fnmt_certificate], config_with(full_names=["Otra Persona"]), logger)

        ResultAssertions.assert_failure(result, ErrorCode.UNAUTHORIZED)
        logger.info.assert_not_called()

    def test_lowercase_name_is_unauthorized(self, fnmt_certificate: bytes) -> None:
        result = _verify([fnmt_certificate], config_with(full_names=["juan pérez garcía"]))
        ResultAssertions.assert_failure(result, ErrorCode.UNAUTHORIZED)

    def test_profile_mismatch_skips_matching(self, make_certificate: CertificateFactory) -> None:
        logger = MagicMock()
        _verify([make_certificate(countries=("FR",))], config_with(full_names=[FULL_NAME]), logger)
        logger.info.assert_not_called()


# ─────────────────────── Input Boundary ───────────────────────


class TestInputBoundary:
    def test_only_leaf_is_used(self, fnmt_certificate: bytes) -> None:
        """
        GIVEN the leaf followed by garbage "intermediates"
        WHEN verified
        THEN the extra entries are ignored.
        """
        result = _verify([fnmt_certificate, b"garbage"], config_with(national_ids=[DNI]))
        ResultAssertions.assert_success(result)

    def test_leaf_decides_even_if_chain_entry_would_match(
        self, make_certificate: CertificateFactory, fnmt_certificate: bytes,
    ) -> None:
        foreign = make_certificate(countries=("FR",))
        result = _verify([foreign, fnmt_certificate], config_with(national_ids=[DNI]))
        ResultAssertions.assert_failure(result, ErrorCode.PROFILE_MISMATCH)

    def test_verified_chains_are_ignored(self, fnmt_certificate: bytes) -> None:
        chains = MagicMock()
        result = verify_client_certificate(
            [fnmt_certificate],
            config=config_with(national_ids=[DNI]),
            decoder=DerCertificateDecoder(),
            logger=MagicMock(),
            verified_chains=chains,
        )
        ResultAssertions.assert_success(result)
        assert chains.method_calls == []


class TestIdempotency:
    def test_same_input_same_result(self, fnmt_certificate: bytes, make_certificate: CertificateFactory) -> None:
        config = config_with(national_ids=[DNI])
        foreign = make_certificate(countries=("FR",))

        assert _verify([fnmt_certificate], config) == _verify([fnmt_certificate], config)
        first = _verify([foreign], config)
        second = _verify([foreign], config)
        assert first.error().code == second.error().code == ErrorCode.PROFILE_MISMATCH
