"""
Domain models — immutable value objects for FNMT client authorization.

VerifierConfig lives for the whole process; ParsedIdentity and
AuthorizationMatch are created per verification call and never persisted.

All models are frozen dataclasses (immutable) following functional principles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

# IDCES = Identity Document, Country ES. The DNI follows the prefix.
SERIAL_NUMBER_PREFIX = "IDCES-"
SERIAL_NUMBER_LENGTH = 15
EXPECTED_COUNTRY = "ES"


@dataclass(frozen=True, slots=True)
class VerifierConfig:
    """
    The three allow-lists, checked in field order.

    Entries are exact-match strings; an empty tuple never matches.
    """

    full_names: tuple[str, ...] = ()
    national_ids: tuple[str, ...] = ()
    combined_tokens: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ParsedIdentity:
    """
    Identity attributes read from a certificate subject.

    FNMT issuance convention for natural persons:
      - country:       ES
      - serial_number: IDCES-<DNI>
      - given_name:    <FIRST NAME>
      - surname:       <LAST NAMES>
      - common_name:   <FIRST NAME> <LAST NAMES> - <DNI>

    Absent (or non-text) attributes are empty strings.
    """

    country: tuple[str, ...] = ()
    serial_number: str = ""
    given_name: str = ""
    surname: str = ""
    common_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.surname}"

    @property
    def national_id(self) -> str:
        """The DNI: serial number without the IDCES- prefix."""
        return self.serial_number[len(SERIAL_NUMBER_PREFIX):]


@unique
class MatchKind(Enum):
    """Which allow-list accepted the certificate."""

    FULL_NAME = "full-name"
    NATIONAL_ID = "national-id"
    COMBINED_TOKEN = "combined-token"


@dataclass(frozen=True, slots=True)
class AuthorizationMatch:
    """Successful verification outcome: the list that matched and the matched entry."""

    kind: MatchKind
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "value": self.value}
