"""Token validation: signature and claim checks combined with ledger state.

A signed token cannot be withdrawn before its embedded expiry, so every
decision has two layers:

1. Cryptographic: structure and signature, then issuer, audience and expiry.
2. Ledger: not revoked, still active, and still the current token for the
   claimed username.

Steps are evaluated in that order and short-circuit on the first failure.
An invalid token is an ordinary outcome and is returned, never raised.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWSError, JWTError

from tokengate.config import TokenConfig
from tokengate.errors import LedgerUnavailableError
from tokengate.ledger.base import SessionLedger
from tokengate.utils.metrics import record_validation
from tokengate.utils.jwt_utils import ROLE_CLAIM, decode_claims, verify_signature
from tokengate.utils.logger import logger


class ValidationReason(str, Enum):
    VALID = "valid"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    BAD_CLAIMS = "bad_claims"
    REVOKED = "revoked"
    INACTIVE = "inactive"
    SUPERSEDED = "superseded"
    UNAVAILABLE = "unavailable"


REASON_MESSAGES: Dict[ValidationReason, str] = {
    ValidationReason.VALID: "Token is valid",
    ValidationReason.BAD_SIGNATURE: "Token is malformed or its signature is invalid",
    ValidationReason.EXPIRED: "Token has expired",
    ValidationReason.BAD_CLAIMS: "Token issuer, audience or claims are invalid",
    ValidationReason.REVOKED: "Token has been revoked",
    ValidationReason.INACTIVE: "Token is no longer active",
    ValidationReason.SUPERSEDED: "Token was superseded by a newer login",
    ValidationReason.UNAVAILABLE: "Session ledger unavailable",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation. Identity fields are set once the signature checks out."""

    reason: ValidationReason
    username: Optional[str] = None
    role: Optional[str] = None
    jti: Optional[str] = None
    expires_at: Optional[datetime] = None

    @property
    def is_valid(self) -> bool:
        return self.reason is ValidationReason.VALID

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self.reason]

    def with_reason(self, reason: ValidationReason) -> "ValidationResult":
        return ValidationResult(
            reason=reason,
            username=self.username,
            role=self.role,
            jti=self.jti,
            expires_at=self.expires_at,
        )


def _result_from_claims(reason: ValidationReason, claims: Dict[str, Any]) -> ValidationResult:
    exp = claims.get("exp")
    role = claims.get(ROLE_CLAIM)
    return ValidationResult(
        reason=reason,
        username=claims.get("sub") if isinstance(claims.get("sub"), str) else None,
        role=role if isinstance(role, str) else None,
        jti=claims.get("jti") if isinstance(claims.get("jti"), str) else None,
        expires_at=(
            datetime.fromtimestamp(exp, tz=timezone.utc)
            if isinstance(exp, (int, float)) and not isinstance(exp, bool)
            else None
        ),
    )


class TokenValidator:
    """Produces a single accept/reject decision for a bearer token."""

    def __init__(self, config: TokenConfig, ledger: SessionLedger):
        self.config = config
        self.ledger = ledger

    def verify_claims(self, token: str) -> ValidationResult:
        """Run the cryptographic layer only (structure, signature, iss/aud/exp).

        A ``VALID`` result here means the token is authentic and unexpired;
        it says nothing about revocation. Used by the request gate as a fast
        reject before any ledger access.
        """
        try:
            raw_claims = verify_signature(token, self.config)
        except (JWSError, ValueError):
            return ValidationResult(reason=ValidationReason.BAD_SIGNATURE)

        try:
            claims = decode_claims(token, self.config)
        except ExpiredSignatureError:
            return _result_from_claims(ValidationReason.EXPIRED, raw_claims)
        except JWTError:
            return _result_from_claims(ValidationReason.BAD_CLAIMS, raw_claims)

        if not isinstance(claims.get(ROLE_CLAIM), str):
            return _result_from_claims(ValidationReason.BAD_CLAIMS, claims)

        return _result_from_claims(ValidationReason.VALID, claims)

    def check_ledger(
        self, verified: ValidationResult, claimed_username: Optional[str] = None
    ) -> ValidationResult:
        """Apply the ledger layer to a result that already passed :meth:`verify_claims`.

        Fails closed with ``UNAVAILABLE`` when the ledger cannot be read.
        """
        username = claimed_username if claimed_username is not None else verified.username

        try:
            snapshot = self.ledger.snapshot(verified.jti, username)
        except LedgerUnavailableError as exc:
            logger.error(
                f"Ledger lookup failed, rejecting token: {exc}",
                extra={"jti": verified.jti, "reason": ValidationReason.UNAVAILABLE.value},
            )
            return verified.with_reason(ValidationReason.UNAVAILABLE)

        if snapshot.revoked:
            return verified.with_reason(ValidationReason.REVOKED)
        if not snapshot.active:
            return verified.with_reason(ValidationReason.INACTIVE)
        if not snapshot.is_current(verified.jti):
            return verified.with_reason(ValidationReason.SUPERSEDED)
        return verified

    def validate(self, token: str, claimed_username: Optional[str] = None) -> ValidationResult:
        """Full decision: cryptographic checks, then revocation, activity and currency.

        Args:
            token: The compact JWT as presented by the client.
            claimed_username: Identity to check the current-token pointer
                against; defaults to the token's own ``sub`` claim.
        """
        result = self.verify_claims(token)
        if result.is_valid:
            result = self.check_ledger(result, claimed_username)

        record_validation(result.reason.value)
        if result.is_valid:
            logger.debug(
                "Token accepted",
                extra={"username": result.username, "jti": result.jti},
            )
        else:
            logger.info(
                f"Token rejected: {result.reason.value}",
                extra={"username": result.username, "jti": result.jti, "reason": result.reason.value},
            )
        return result
