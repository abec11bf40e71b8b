"""JWT utilities: token signing and signature/claim verification"""
import json
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from jose import JWSError, jws, jwt
from jose.utils import base64url_decode, base64url_encode

from tokengate.config import TokenConfig
from tokengate.models.principal import IssuedToken, Principal
from tokengate.utils.logger import logger

ROLE_CLAIM = "role"

# Claims every accepted token must carry, besides the custom role claim
_REQUIRED_CLAIMS = ("sub", "jti", "iss", "aud", "exp")

DECODE_OPTIONS: Dict[str, Any] = {
    "verify_signature": True,
    "verify_aud": True,
    "verify_iss": True,
    "verify_exp": True,
    "verify_iat": True,
    "verify_sub": True,
    "verify_jti": True,
    "leeway": 0,
    **{f"require_{claim}": True for claim in _REQUIRED_CLAIMS},
}


# ---------------------------------------------------------------------------
# Token creation
# ---------------------------------------------------------------------------

class TokenIssuer:
    """Mints signed, time-bounded access tokens.

    Issuing has no side effects: the caller is responsible for activating the
    returned token in the session ledger.
    """

    def __init__(self, config: TokenConfig, clock: Callable[[], float] = time.time):
        self.config = config
        self._clock = clock

    def issue(self, principal: Principal) -> IssuedToken:
        """Sign and return an access token for an authenticated principal.

        Args:
            principal: Identity returned by a successful directory lookup.

        Returns:
            The signed token together with the claims it embeds.
        """
        now = int(self._clock())
        expires = now + self.config.lifetime_seconds
        jti = str(uuid.uuid4())

        payload: Dict[str, Any] = {
            "sub": principal.username,
            ROLE_CLAIM: principal.role,
            "jti": jti,
            "iss": self.config.issuer,
            "aud": self.config.audience,
            "iat": now,
            "exp": expires,
        }

        token = jwt.encode(payload, self.config.secret_key, algorithm=self.config.algorithm)

        logger.debug(
            f"Signed token for {principal.username}",
            extra={"username": principal.username, "jti": jti, "action": "issue_token"},
        )

        return IssuedToken(
            token=token,
            jti=jti,
            username=principal.username,
            role=principal.role,
            issued_at=datetime.fromtimestamp(now, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires, tz=timezone.utc),
        )


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------

def _require_canonical_segments(token: str) -> None:
    """Reject compact tokens whose segments are not canonical base64url.

    Base64 decoding ignores the unused low bits of a segment's final
    character, so several spellings decode to the same signature. Only the
    one produced by encoding is accepted.
    """
    segments = token.split(".")
    if len(segments) != 3:
        raise JWSError("Token must have exactly three segments")
    for segment in segments:
        raw = segment.encode("ascii")
        if base64url_encode(base64url_decode(raw)) != raw:
            raise JWSError("Token segment is not canonical base64url")


def verify_signature(token: str, config: TokenConfig) -> Dict[str, Any]:
    """Check structure and signature only, returning the raw claims.

    Raises:
        jose.JWSError: malformed token or signature mismatch.
        ValueError: the signed payload is not a JSON object.
    """
    _require_canonical_segments(token)
    payload = jws.verify(token, config.secret_key, algorithms=[config.algorithm])
    claims = json.loads(payload)
    if not isinstance(claims, dict):
        raise ValueError("Token payload must be a JSON object")
    return claims


def decode_claims(token: str, config: TokenConfig) -> Dict[str, Any]:
    """Verify issuer, audience, expiry and required claims; return the payload.

    Raises:
        jose.ExpiredSignatureError: the embedded expiry has passed.
        jose.JWTError: any other claim failure.
    """
    return jwt.decode(
        token,
        config.secret_key,
        algorithms=[config.algorithm],
        audience=config.audience,
        issuer=config.issuer,
        options=DECODE_OPTIONS,
    )
