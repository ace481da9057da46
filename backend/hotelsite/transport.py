from __future__ import annotations

from typing import Protocol

from starlette.requests import HTTPConnection


class RequestLike(Protocol):
    def get_header(self, name: str) -> str | None: ...

    def get_cookie(self, name: str) -> str | None: ...


class CookieSink(Protocol):
    def set_cookie(
        self,
        key: str,
        value: str = "",
        max_age: int | None = None,
        path: str | None = "/",
        secure: bool = False,
        httponly: bool = False,
        samesite: str | None = "lax",
    ) -> None: ...


class StarletteRequestAdapter:
    """Exposes only headers and cookies of a Starlette request."""

    def __init__(self, conn: HTTPConnection):
        self._conn = conn

    def get_header(self, name: str) -> str | None:
        return self._conn.headers.get(name)

    def get_cookie(self, name: str) -> str | None:
        return self._conn.cookies.get(name)
