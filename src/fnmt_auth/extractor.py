"""
Attribute extractor — certificate subject → ParsedIdentity.

Pure function of the parsed certificate: one pass over the subject's
attribute sequence, no I/O, never fails. Attributes missing from the
subject, or whose value is not text, are left as empty strings.

OIDs (cryptography NameOID):
  2.5.4.6   countryName
  2.5.4.5   serialNumber
  2.5.4.42  givenName
  2.5.4.4   surname
  2.5.4.3   commonName
"""

from __future__ import annotations

from cryptography import x509
from cryptography.x509.oid import NameOID

from fnmt_auth.domain.models import ParsedIdentity

_SINGLE_VALUED = frozenset(
    {
        NameOID.SERIAL_NUMBER,
        NameOID.GIVEN_NAME,
        NameOID.SURNAME,
        NameOID.COMMON_NAME,
    }
)


def text_value(attribute: x509.NameAttribute) -> str | None:
    """
    Return the attribute value if it is text, None otherwise.

    cryptography decodes every string type to str, but BitString-typed
    attributes come back as bytes.
    """
    value = attribute.value
    if isinstance(value, str):
        return value
    return None


def extract_identity(certificate: x509.Certificate) -> ParsedIdentity:
    """
    Read country, serial number, given name, surname and common name.

    Country codes are collected in subject order. For the single-valued
    fields a repeated attribute overwrites the earlier one.
    """
    countries: list[str] = []
    fields: dict[x509.ObjectIdentifier, str] = {}

    for attribute in certificate.subject:
        value = text_value(attribute)
        if value is None:
            continue
        if attribute.oid == NameOID.COUNTRY_NAME:
            countries.append(value)
        elif attribute.oid in _SINGLE_VALUED:
            fields[attribute.oid] = value

    return ParsedIdentity(
        country=tuple(countries),
        serial_number=fields.get(NameOID.SERIAL_NUMBER, ""),
        given_name=fields.get(NameOID.GIVEN_NAME, ""),
        surname=fields.get(NameOID.SURNAME, ""),
        common_name=fields.get(NameOID.COMMON_NAME, ""),
    )
