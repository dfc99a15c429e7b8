"""
Authorization matcher — ParsedIdentity × VerifierConfig → AuthorizationMatch.

Lists are checked in a fixed order and the first hit wins:
  1. full name     ("<given name> <surname>")  against full_names
  2. national ID   (the DNI)                   against national_ids
  3. common name   ("<full name> - <DNI>")     against combined_tokens

Comparison is exact and case-sensitive: no trimming, no Unicode
normalization. Administrators configure the literal expected values.
"""

from __future__ import annotations

from railway import ResultFailures
from railway.result import Result

from fnmt_auth.domain.models import AuthorizationMatch, MatchKind, ParsedIdentity, VerifierConfig
from fnmt_auth.domain.ports import MatchLogger


def _candidates(
    identity: ParsedIdentity,
    config: VerifierConfig,
) -> tuple[tuple[MatchKind, str, tuple[str, ...]], ...]:
    return (
        (MatchKind.FULL_NAME, identity.full_name, config.full_names),
        (MatchKind.NATIONAL_ID, identity.national_id, config.national_ids),
        (MatchKind.COMBINED_TOKEN, identity.common_name, config.combined_tokens),
    )


def authorize(
    identity: ParsedIdentity,
    config: VerifierConfig,
    logger: MatchLogger,
) -> Result[AuthorizationMatch]:
    """
    Find the first allow-list containing the identity.

    On success logs exactly one `matcher.matched` record with the kind and
    matched value. On failure logs nothing; the host decides whether to
    record the rejection.
    """
    for kind, value, allowed in _candidates(identity, config):
        if any(entry == value for entry in allowed):
            logger.info("matcher.matched", kind=kind.value, value=value)
            return Result.success(AuthorizationMatch(kind=kind, value=value))

    return ResultFailures.unauthorized()
