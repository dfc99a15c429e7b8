"""
Profile validator — does the certificate look like an FNMT natural-person one?

The DNI lives in the subject serialNumber, a field not reserved for it.
Checking the issuance shape before trusting it narrows (but does not close)
the window for a certificate from another authority with a similar subject.

Checks, failing fast on the first violation:
  1. exactly one countryName, equal to "ES"
  2. exactly one serialNumber, 15 characters, starting with "IDCES-"
"""

from __future__ import annotations

from cryptography import x509
from cryptography.x509.oid import NameOID
from railway import ErrorCode
from railway.result import Result

from fnmt_auth.domain.models import EXPECTED_COUNTRY, SERIAL_NUMBER_LENGTH, SERIAL_NUMBER_PREFIX
from fnmt_auth.extractor import text_value


def _attribute_values(certificate: x509.Certificate, oid: x509.ObjectIdentifier) -> list[str | None]:
    return [text_value(attribute) for attribute in certificate.subject if attribute.oid == oid]


def _has_expected_country(certificate: x509.Certificate) -> bool:
    return _attribute_values(certificate, NameOID.COUNTRY_NAME) == [EXPECTED_COUNTRY]


def _has_expected_serial_number(certificate: x509.Certificate) -> bool:
    values = _attribute_values(certificate, NameOID.SERIAL_NUMBER)
    if len(values) != 1 or values[0] is None:
        return False
    serial_number = values[0]
    return (
        len(serial_number) == SERIAL_NUMBER_LENGTH
        and serial_number[: len(SERIAL_NUMBER_PREFIX)] == SERIAL_NUMBER_PREFIX
    )


def validate_profile(certificate: x509.Certificate) -> Result[x509.Certificate]:
    """
    Return the certificate unchanged if it matches the FNMT profile.

    Returns Result.failure(PROFILE_MISMATCH, ...) naming the first field
    that failed.
    """
    return (
        Result.success(certificate)
        .ensure(
            _has_expected_country,
            ErrorCode.PROFILE_MISMATCH,
            "client fnmt certificate country failed validation",
        )
        .ensure(
            _has_expected_serial_number,
            ErrorCode.PROFILE_MISMATCH,
            "client fnmt certificate serial number failed validation",
        )
    )
