from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from .config import Settings
from .errors import ConfigurationError

log = logging.getLogger(__name__)

# Only ever used outside production, and always announced with a warning.
DEV_FALLBACK_SECRET = "fallback-secret-key-for-development-only-000"

BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        # not a bcrypt hash
        return False


@dataclass(frozen=True)
class TokenClaims:
    admin_id: int
    email: str
    is_admin: bool
    session_id: str | None = None


class TokenStatus(enum.Enum):
    VALID = "valid"
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TokenCheck:
    status: TokenStatus
    claims: TokenClaims | None = None

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.VALID


class TokenCodec:
    """Signs and verifies the admin JWT.

    Expiry is checked against an explicit ``now`` (unix seconds) so callers
    and tests control the clock; a token is valid while ``now < exp``.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 8 * 60 * 60):
        if not secret:
            raise ConfigurationError("token signing secret is empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        secret = settings.jwt_secret
        if not secret:
            if settings.is_production:
                raise ConfigurationError("JWT_SECRET must be set in production")
            log.warning(
                "JWT_SECRET is not set; signing tokens with the development fallback secret. "
                "Never run like this in production."
            )
            secret = DEV_FALLBACK_SECRET
        return cls(secret, algorithm=settings.jwt_algorithm, ttl_seconds=settings.token_ttl_seconds)

    def issue(self, claims: TokenClaims, now: float | None = None) -> str:
        iat = int(time.time() if now is None else now)
        payload: dict[str, Any] = {
            "userId": claims.admin_id,
            "email": claims.email,
            "isAdmin": claims.is_admin,
            "iat": iat,
            "exp": iat + self.ttl_seconds,
        }
        if claims.session_id is not None:
            payload["sid"] = claims.session_id
        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"token signing failed: {exc}") from exc

    def verify(self, token: str, now: float | None = None) -> TokenCheck:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["exp", "iat"]},
            )
        except jwt.InvalidSignatureError:
            log.debug("token rejected: bad signature")
            return TokenCheck(TokenStatus.BAD_SIGNATURE)
        except jwt.InvalidTokenError as exc:
            log.debug("token rejected: malformed (%s)", exc)
            return TokenCheck(TokenStatus.MALFORMED)

        current = int(time.time() if now is None else now)
        try:
            exp = int(payload["exp"])
            claims = TokenClaims(
                admin_id=int(payload["userId"]),
                email=str(payload["email"]),
                is_admin=bool(payload["isAdmin"]),
                session_id=payload.get("sid"),
            )
        except (KeyError, TypeError, ValueError):
            log.debug("token rejected: missing or invalid claims")
            return TokenCheck(TokenStatus.MALFORMED)

        if current >= exp:
            log.debug("token rejected: expired at %s (now %s)", exp, current)
            return TokenCheck(TokenStatus.EXPIRED, claims)
        return TokenCheck(TokenStatus.VALID, claims)
