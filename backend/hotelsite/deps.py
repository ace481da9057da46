from __future__ import annotations

import logging
from contextlib import contextmanager

from fastapi import Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError

from .auth_service import AuthService
from .models import Admin
from .transport import StarletteRequestAdapter

log = logging.getLogger(__name__)


def get_engine(request: Request):
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="db not ready")
    return engine


def get_auth_service(request: Request) -> AuthService:
    auth = getattr(request.app.state, "auth", None)
    if auth is None:
        raise HTTPException(status_code=503, detail="auth not ready")
    return auth


def require_admin(request: Request, auth: AuthService = Depends(get_auth_service)) -> Admin:
    admin = auth.admin_from_request(StarletteRequestAdapter(request))
    if admin is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return admin


@contextmanager
def db_failure(message: str):
    """Turn database errors into a generic 500 carrying ``message``."""
    try:
        yield
    except SQLAlchemyError as exc:
        log.exception(message)
        raise HTTPException(status_code=500, detail=message) from exc
