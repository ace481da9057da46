from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .auth import TokenClaims, TokenCodec, hash_password, verify_password
from .auth_sessions import SessionRow, new_session_id
from .config import Settings
from .errors import SessionCreationError
from .models import Admin
from .transport import CookieSink, RequestLike

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthCookie:
    name: str
    value: str
    max_age: int
    secure: bool
    httponly: bool = True
    samesite: str = "lax"
    path: str = "/"

    def apply(self, response: CookieSink) -> None:
        response.set_cookie(
            key=self.name,
            value=self.value,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )


@dataclass(frozen=True)
class IssuedSession:
    token: str
    session: SessionRow


class AuthService:
    """Login, logout and admin authorization on top of the admin/session tables.

    Lookups never raise database errors to callers: they are logged and the
    caller gets ``None``. Only session creation fails loudly
    (``SessionCreationError``) since the login cannot complete without it.
    """

    def __init__(
        self,
        engine,
        codec: TokenCodec,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ):
        self.engine = engine
        self.codec = codec
        self.settings = settings
        self._clock = clock
        # compared against when the email is unknown so both paths cost a bcrypt check
        self._dummy_hash = hash_password("not-a-real-password", rounds=settings.bcrypt_rounds)

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def _now(self) -> int:
        return int(self._clock())

    def authenticate(self, email: str, password: str) -> Admin | None:
        try:
            with self._session() as s:
                admin = s.execute(select(Admin).where(Admin.email == email)).scalars().first()
                if admin is None:
                    verify_password(password, self._dummy_hash)
                    log.info("login rejected")
                    return None
                if not bool(admin.is_active):
                    log.info("login rejected")
                    return None
                if not verify_password(password, admin.password_hash):
                    log.info("login rejected")
                    return None

                admin.last_login_at = self._now()
                s.add(admin)
                s.commit()
                return admin
        except SQLAlchemyError:
            log.exception("authentication failed")
            return None

    def create_session(self, admin: Admin) -> IssuedSession:
        issued_at = self._clock()
        for attempt in range(2):
            sid = new_session_id(int(admin.id), issued_at)
            token = self.codec.issue(
                TokenClaims(admin_id=int(admin.id), email=admin.email, is_admin=True, session_id=sid),
                now=issued_at,
            )
            row = SessionRow(
                admin_id=int(admin.id),
                token_id=sid,
                expires_at=int(issued_at) + self.settings.session_ttl_seconds,
                created_at=int(issued_at),
            )
            try:
                with self._session() as s:
                    s.add(row)
                    s.commit()
                return IssuedSession(token=token, session=row)
            except IntegrityError as exc:
                if attempt:
                    log.exception("session creation failed for admin %s", admin.id)
                    raise SessionCreationError("Failed to create session") from exc
                log.warning("session id collision for admin %s, retrying", admin.id)
            except SQLAlchemyError as exc:
                log.exception("session creation failed for admin %s", admin.id)
                raise SessionCreationError("Failed to create session") from exc
        raise SessionCreationError("Failed to create session")

    def invalidate_all_sessions(self, admin_id: int) -> bool:
        try:
            with self._session() as s:
                res = s.execute(delete(SessionRow).where(SessionRow.admin_id == int(admin_id)))
                s.commit()
            log.info("invalidated %s session(s) for admin %s", res.rowcount, admin_id)
            return True
        except SQLAlchemyError:
            log.exception("session invalidation failed for admin %s", admin_id)
            return False

    def clean_expired_sessions(self) -> int:
        try:
            with self._session() as s:
                res = s.execute(delete(SessionRow).where(SessionRow.expires_at <= self._now()))
                s.commit()
            return int(res.rowcount or 0)
        except SQLAlchemyError:
            log.exception("expired session cleanup failed")
            return 0

    def session_count(self, admin_id: int) -> int:
        with self._session() as s:
            return int(
                s.execute(select(func.count()).select_from(SessionRow).where(SessionRow.admin_id == int(admin_id))).scalar_one()
            )

    def authorize(self, token: str | None) -> Admin | None:
        if not token:
            return None
        now = self._now()
        check = self.codec.verify(token, now=now)
        if not check.ok or check.claims is None or not check.claims.is_admin:
            return None
        claims = check.claims

        try:
            with self._session() as s:
                # re-fetch: deactivation must win over an unexpired token
                admin = s.get(Admin, claims.admin_id)
                if admin is None or not bool(admin.is_active):
                    log.info("token for missing or inactive admin %s rejected", claims.admin_id)
                    return None

                if self.settings.require_live_session:
                    if not claims.session_id:
                        return None
                    row = s.execute(select(SessionRow).where(SessionRow.token_id == claims.session_id)).scalars().first()
                    if row is None or int(row.admin_id) != int(admin.id) or not row.is_live(now):
                        log.info("token for admin %s has no live session", admin.id)
                        return None
                return admin
        except SQLAlchemyError:
            log.exception("authorization lookup failed")
            return None

    def token_from_request(self, request: RequestLike) -> str | None:
        authorization = request.get_header("authorization")
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization.split(" ", 1)[1].strip()
            if token:
                return token
        return request.get_cookie(self.settings.cookie_name) or None

    def admin_from_request(self, request: RequestLike) -> Admin | None:
        return self.authorize(self.token_from_request(request))

    def logout(self, token: str | None) -> bool:
        """Drop every session of the token's admin. Unverifiable tokens are a no-op."""
        if not token:
            return False
        check = self.codec.verify(token, now=self._now())
        if not check.ok or check.claims is None:
            return False
        return self.invalidate_all_sessions(check.claims.admin_id)

    def auth_cookie(self, token: str) -> AuthCookie:
        return AuthCookie(
            name=self.settings.cookie_name,
            value=token,
            max_age=self.settings.token_ttl_seconds,
            secure=self.settings.is_production,
        )

    def cleared_auth_cookie(self) -> AuthCookie:
        return AuthCookie(name=self.settings.cookie_name, value="", max_age=0, secure=self.settings.is_production)
