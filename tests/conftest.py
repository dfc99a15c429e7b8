"""
Shared test fixtures and helpers for the fnmt-client-auth test suite.

Certificates are built per test with cryptography's CertificateBuilder, so
every subject variation (foreign country, bad serial number, missing names)
is spelled out where it is used instead of living in binary fixture files.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from urllib.parse import quote

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

from fnmt_auth.domain.models import VerifierConfig

GIVEN_NAME = "Juan"
SURNAME = "Pérez García"
DNI = "123456789"
FULL_NAME = "Juan Pérez García"
COMMON_NAME = "Juan Pérez García - 123456789"
SERIAL_NUMBER = "IDCES-123456789"

CertificateFactory = Callable[..., bytes]


def build_subject(
    countries: Sequence[str] = ("ES",),
    serial_numbers: Sequence[str] = (SERIAL_NUMBER,),
    given_name: str | None = GIVEN_NAME,
    surname: str | None = SURNAME,
    common_name: str | None = COMMON_NAME,
) -> x509.Name:
    """Subject in FNMT attribute order; pass None (or empty sequences) to omit attributes."""
    attributes = [x509.NameAttribute(NameOID.COUNTRY_NAME, country) for country in countries]
    attributes.extend(
        x509.NameAttribute(NameOID.SERIAL_NUMBER, serial) for serial in serial_numbers
    )
    if surname is not None:
        attributes.append(x509.NameAttribute(NameOID.SURNAME, surname))
    if given_name is not None:
        attributes.append(x509.NameAttribute(NameOID.GIVEN_NAME, given_name))
    if common_name is not None:
        attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    return x509.Name(attributes)


@pytest.fixture(scope="session")
def signing_key() -> ec.EllipticCurvePrivateKey:
    """One EC key for the whole session; key generation is the slow part."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture()
def make_certificate(signing_key: ec.EllipticCurvePrivateKey) -> CertificateFactory:
    """
    Return a factory producing DER-encoded client certificates.

        der = make_certificate()                       # the Juan Pérez García certificate
        der = make_certificate(countries=("FR",))      # foreign certificate
    """

    def _factory(**subject_overrides: object) -> bytes:
        subject = build_subject(**subject_overrides)  # type: ignore[arg-type]
        issuer = x509.Name(
            [
                x509.NameAttribute(NameOID.COUNTRY_NAME, "ES"),
                x509.NameAttribute(NameOID.ORGANIZATION_NAME, "FNMT-RCM"),
                x509.NameAttribute(NameOID.COMMON_NAME, "AC FNMT Usuarios"),
            ]
        )
        now = datetime.now(UTC)
        certificate = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(issuer)
            .public_key(signing_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - timedelta(days=1))
            .not_valid_after(now + timedelta(days=365))
            .sign(signing_key, hashes.SHA256())
        )
        return certificate.public_bytes(Encoding.DER)

    return _factory


@pytest.fixture()
def fnmt_certificate(make_certificate: CertificateFactory) -> bytes:
    """The reference certificate: ES / IDCES-123456789 / Juan / Pérez García."""
    return make_certificate()


def to_pem(der: bytes) -> str:
    return x509.load_der_x509_certificate(der).public_bytes(Encoding.PEM).decode("ascii")


def to_escaped_pem(der: bytes) -> str:
    """What nginx puts in $ssl_client_escaped_cert."""
    return quote(to_pem(der))


def config_with(
    full_names: Sequence[str] = (),
    national_ids: Sequence[str] = (),
    combined_tokens: Sequence[str] = (),
) -> VerifierConfig:
    return VerifierConfig(
        full_names=tuple(full_names),
        national_ids=tuple(national_ids),
        combined_tokens=tuple(combined_tokens),
    )
