from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from .config import Settings
from .transport import RequestLike, StarletteRequestAdapter

# never gated, mirrors the static-asset exclusions of the frontend matcher
SKIPPED_PREFIXES = ("/static", "/_next/static", "/_next/image", "/favicon.ico", "/public")


class GateOutcome(enum.Enum):
    ALLOWED_PUBLIC = "allowed_public"
    ALLOWED_DEFERRED = "allowed_deferred"
    REDIRECTED = "redirected"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    location: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is not GateOutcome.REDIRECTED


class RouteGate:
    """Cookie-presence filter in front of protected paths.

    It does not verify the token; handlers behind it call
    ``AuthService.authorize`` for the authoritative check.
    """

    def __init__(
        self,
        protected_prefixes: Iterable[str],
        allow_list: Iterable[str],
        login_path: str,
        cookie_name: str,
    ):
        self.protected_prefixes = tuple(protected_prefixes)
        self.allow_list = frozenset(allow_list)
        self.login_path = login_path
        self.cookie_name = cookie_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "RouteGate":
        return cls(
            protected_prefixes=settings.protected_prefixes,
            allow_list=(settings.login_path, settings.login_api_path),
            login_path=settings.login_path,
            cookie_name=settings.cookie_name,
        )

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_prefixes)

    def decide(self, path: str, request: RequestLike) -> GateDecision:
        if path in self.allow_list:
            return GateDecision(GateOutcome.ALLOWED_PUBLIC)
        if not self.is_protected(path):
            return GateDecision(GateOutcome.ALLOWED_PUBLIC)
        if request.get_cookie(self.cookie_name):
            return GateDecision(GateOutcome.ALLOWED_DEFERRED)
        return GateDecision(GateOutcome.REDIRECTED, location=self.login_path)


class RouteGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, gate: RouteGate):
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(SKIPPED_PREFIXES):
            return await call_next(request)

        decision = self.gate.decide(path, StarletteRequestAdapter(request))
        if decision.allowed:
            return await call_next(request)
        return RedirectResponse(url=str(request.url.replace(path=decision.location, query="")), status_code=307)
