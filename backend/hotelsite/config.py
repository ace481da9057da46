from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    database_url: str = ""
    environment: str = "development"

    # Token signing; unset falls back to a dev constant outside production.
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 8 * 60 * 60
    session_ttl_seconds: int = 8 * 60 * 60

    bcrypt_rounds: int = 12

    cookie_name: str = "auth-token"
    login_path: str = "/admin/login"
    login_api_path: str = "/api/auth"
    protected_prefixes: list[str] = ["/admin/dashboard", "/api/admin"]

    # authorize() also requires the token's session row to still exist
    require_live_session: bool = True

    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    db_init_attempts: int = 30

    admin_bootstrap_email: str = ""
    admin_bootstrap_password: str = ""

    # demo categories, prices and gallery images; ignored in production
    seed_demo_catalog: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def bootstrap_credentials(self) -> tuple[str, str]:
        email = self.admin_bootstrap_email.strip()
        password = self.admin_bootstrap_password.strip()
        if not self.is_production:
            email = email or "admin@dollyhotel.com"
            password = password or "admin123"
        return email, password


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    # no-op for handlers when the server (or pytest) already configured logging
    logging.basicConfig(format=LOG_FORMAT, level=level.upper())
    logging.getLogger().setLevel(level.upper())
