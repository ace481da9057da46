from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import admin_routes, catalog, catalog_routes
from .auth import TokenCodec, hash_password
from .auth_service import AuthService
from .auth_sessions import now_s
from .config import Settings, configure_logging, get_settings
from .db import get_engine, ping
from .deps import get_auth_service
from .errors import NotFoundError
from .models import Admin, Base
from .route_gate import RouteGate, RouteGateMiddleware
from .schemas import AdminOut, LoginIn, LoginOut, SessionOut
from .transport import StarletteRequestAdapter

log = logging.getLogger(__name__)


def init_database(settings: Settings, engine=None):
    """Create tables, seed lookup rows and the bootstrap admin.

    The database may still be starting when the API boots, so connecting is
    retried up to ``settings.db_init_attempts`` times.
    """
    last_exc: Exception | None = None
    for _ in range(max(1, settings.db_init_attempts)):
        try:
            engine = engine or get_engine(settings.database_url)
            Base.metadata.create_all(bind=engine)
            with Session(engine) as s:
                added = catalog.seed_room_features(s)
                if added:
                    log.info("seeded %s room feature(s)", added)
                _bootstrap_admin(s, settings)
                if settings.seed_demo_catalog and not settings.is_production:
                    added = catalog.seed_demo_catalog(s, now=now_s())
                    if added:
                        log.info("seeded %s demo catalog row(s)", added)
            return engine
        except SQLAlchemyError as exc:
            last_exc = exc
            log.warning("database not ready: %s", exc)
            time.sleep(1.0)
    raise RuntimeError(f"DB init failed after retries: {last_exc}")


def _bootstrap_admin(s: Session, settings: Settings) -> None:
    email, password = settings.bootstrap_credentials()
    if not email or not password:
        return
    existing = s.execute(select(Admin).where(Admin.email == email)).scalars().first()
    if existing is not None:
        return
    s.add(
        Admin(
            email=email,
            password_hash=hash_password(password, rounds=settings.bcrypt_rounds),
            is_active=True,
            created_at=now_s(),
        )
    )
    s.commit()
    log.info("bootstrap admin created: %s", email)


def create_app(settings: Settings | None = None, engine=None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        # a missing secret in production fails here, before serving anything
        codec = TokenCodec.from_settings(settings)
        owns_engine = app.state.engine is None
        app.state.engine = init_database(settings, app.state.engine)
        app.state.auth = AuthService(app.state.engine, codec, settings)
        log.info("hotel site API started (%s)", settings.environment)
        try:
            yield
        finally:
            if owns_engine:
                app.state.engine.dispose()
                app.state.engine = None
            app.state.auth = None

    app = FastAPI(title="Hotel Site API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.auth = None

    app.add_middleware(RouteGateMiddleware, gate=RouteGate.from_settings(settings))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Invalid request", "details": jsonable_encoder(exc.errors())}, status_code=400)

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.get("/health")
    def health(request: Request):
        engine = request.app.state.engine
        try:
            db_ok = engine is not None and ping(engine)
        except SQLAlchemyError:
            db_ok = False
        return {"ok": True, "db": db_ok}

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.post(settings.login_api_path)
    async def login(request: Request, background_tasks: BackgroundTasks, auth: AuthService = Depends(get_auth_service)):
        try:
            body = LoginIn.model_validate(await request.json())
            admin = await run_in_threadpool(auth.authenticate, body.email, body.password)
            if admin is None:
                return JSONResponse({"error": "Invalid credentials"}, status_code=401)
            issued = await run_in_threadpool(auth.create_session, admin)
        except Exception:  # noqa: BLE001
            log.exception("login error")
            return JSONResponse({"error": "Internal server error"}, status_code=500)

        response = JSONResponse(LoginOut(success=True, admin=AdminOut.model_validate(admin)).model_dump())
        auth.auth_cookie(issued.token).apply(response)
        # best effort, runs after the response is sent
        background_tasks.add_task(auth.clean_expired_sessions)
        return response

    @app.delete(settings.login_api_path)
    def logout(request: Request, auth: AuthService = Depends(get_auth_service)):
        token = auth.token_from_request(StarletteRequestAdapter(request))
        auth.logout(token)
        response = JSONResponse({"success": True, "message": "Logged out successfully"})
        auth.cleared_auth_cookie().apply(response)
        return response

    @app.get(settings.login_api_path)
    def session_status(request: Request, auth: AuthService = Depends(get_auth_service)):
        admin = auth.admin_from_request(StarletteRequestAdapter(request))
        if admin is None:
            return JSONResponse({"error": "Unauthorized"}, status_code=401)
        return SessionOut(authenticated=True, admin=AdminOut.model_validate(admin)).model_dump()

    app.include_router(catalog_routes.router)
    app.include_router(admin_routes.router)
    return app


app = create_app()
