"""Service configuration from environment variables, .env files and K8s secrets."""
import os
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import quote_plus

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from igaming_calendar.core.enums import Environment, StoreBackend


# =============================================================================
# LOCAL DEBUG OVERRIDE - Change this to test other environments locally
# =============================================================================
LOCAL_ENV_OVERRIDE: Environment | None = None  # e.g., Environment.UAT


# =============================================================================
# K8s Secrets Config
# =============================================================================
# Secret path: /etc/{SECRETS_FOLDER_NAME}/{PROJECT_KEY}_{secret_name}
# e.g., /etc/secrets/igaming_calendar_notion-secret
SECRETS_FOLDER_NAME: str = os.getenv("SECRETS_FOLDER_NAME", "secrets")
PROJECT_KEY: str = os.getenv("PROJECT_KEY", "igaming_calendar")
SECRETS_BASE_PATH: str = f"/etc/{SECRETS_FOLDER_NAME}" if SECRETS_FOLDER_NAME else ""


def read_secret_from_file(secret_name: str, base_path: str | None) -> str | None:
    """Read secret from K8s mounted file."""
    if not base_path:
        return None
    secret_path = Path(base_path) / secret_name
    if not secret_path.exists():
        return None
    try:
        return secret_path.read_text().strip()
    except OSError:
        return None


def get_k8s_secret_name(secret_name: str) -> str:
    """Get K8s secret filename: {PROJECT_KEY}_{secret_name}"""
    return f"{PROJECT_KEY}_{secret_name}"


def get_secret(env_var: str, secret_file_name: str | None = None, default: str | None = None) -> str | None:
    """Get secret: K8s file > env var > {env_var}_FILE > default."""
    if secret_file_name and SECRETS_BASE_PATH:
        k8s_name = get_k8s_secret_name(secret_file_name)
        if value := read_secret_from_file(k8s_name, SECRETS_BASE_PATH):
            return value
    if value := os.getenv(env_var):
        return value
    if file_path := os.getenv(f"{env_var}_FILE"):
        if value := read_secret_from_file(Path(file_path).name, str(Path(file_path).parent)):
            return value
    return default


def get_env_file(override: Environment | None = None) -> str:
    """Get .env file path. Override only works when ENV=local."""
    env = os.getenv("ENV", Environment.LOCAL.value)
    if env == Environment.LOCAL.value and override:
        env = override.value
    return f".env_{env}"


ENV_FILE = get_env_file(LOCAL_ENV_OVERRIDE)


# =============================================================================
# Config Classes
# =============================================================================

class StoreConfig(BaseSettings):
    """Which document store to talk to and the limits applied to it."""
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="STORE_", extra="ignore")

    backend: StoreBackend = StoreBackend.NOTION
    max_pages: int = Field(default=100, ge=1, description="Ceiling for fetch-all pagination loops")
    max_field_length: int = Field(default=2000, ge=4, description="Per-property text limit")
    page_size: int = Field(default=100, ge=1, le=100)


class NotionConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="NOTION_", extra="ignore")

    secret: SecretStr | None = Field(default=None)
    events_database_id: str | None = None
    registrations_database_id: str | None = None
    base_url: str = "https://api.notion.com/v1"
    version: str = "2022-06-28"

    @model_validator(mode="before")
    @classmethod
    def _load_secrets(cls, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("secret"):
            data["secret"] = get_secret("NOTION_SECRET", "notion-secret")
        return data


class DatabaseCredentials(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="DATABASE_", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str | None = Field(default=None)
    password: SecretStr | None = Field(default=None)
    db_name: str = "igaming_calendar"

    @model_validator(mode="before")
    @classmethod
    def _load_secrets(cls, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("user"):
            data["user"] = get_secret("DATABASE_USER", "database-user")
        if not data.get("password"):
            data["password"] = get_secret("DATABASE_PASSWORD", "database-password")
        return data


class DatabaseConfig(BaseSettings):
    """SQL document store connection settings (STORE_BACKEND=sql only)."""
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="DATABASE_", extra="ignore")

    driver: str = "postgresql+asyncpg"
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 15
    pool_recycle: int = 900
    pool_pre_ping: bool = True
    echo: bool = False
    create_schema: bool = Field(default=True, description="Create tables on startup")
    sqlite_path: str = "igaming_calendar.db"

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")

    @property
    def credentials(self) -> DatabaseCredentials:
        return DatabaseCredentials()

    @property
    def url(self) -> str:
        """Build database URL from credentials."""
        if self.is_sqlite:
            return f"{self.driver}:///{self.sqlite_path}"
        creds = self.credentials
        password = creds.password.get_secret_value() if creds.password else ""
        return f"{self.driver}://{creds.user}:{quote_plus(password)}@{creds.host}:{creds.port}/{creds.db_name}"


class MailConfig(BaseSettings):
    """Outbound SMTP settings for calendar invites."""
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="SMTP_", extra="ignore")

    host: str = "smtp.gmail.com"
    port: int = 587
    user: str | None = None
    password: SecretStr | None = Field(default=None)
    sender_name: str = "PayRam Gaming Events"
    use_tls: bool = True
    timeout: float = 30.0

    @model_validator(mode="before")
    @classmethod
    def _load_secrets(cls, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("password"):
            data["password"] = get_secret("SMTP_PASSWORD", "smtp-password")
        return data


class InviteConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="INVITE_", extra="ignore")

    uid_domain: str = "payram.com"
    prodid: str = "-//PayRam//Gaming Event Calendar//EN"
    organizer_name: str = "PayRam"


class CalendarConfig(BaseSettings):
    """Month grid and card grid presentation settings (heights in px)."""
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="CALENDAR_", extra="ignore")

    visible_rows: int = Field(default=2, ge=1)
    base_height: int = 120
    header_height: int = 36
    row_height: int = 32
    more_height: int = 20
    card_page_size: int = Field(default=9, ge=1)
    card_description_length: int = 200


class CORSConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="CORS_", extra="ignore")

    allow_origins: str = "http://localhost:5173,http://localhost:3000"
    allow_credentials: bool = True
    allow_methods: str = "*"
    allow_headers: str = "*"

    @property
    def origins_list(self) -> list[str]:
        return [o.strip() for o in self.allow_origins.split(",")]

    @property
    def methods_list(self) -> list[str]:
        return ["*"] if self.allow_methods == "*" else [m.strip() for m in self.allow_methods.split(",")]

    @property
    def headers_list(self) -> list[str]:
        return ["*"] if self.allow_headers == "*" else [h.strip() for h in self.allow_headers.split(",")]


class LoggingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="LOG_", extra="ignore")

    level: str = "INFO"
    format: str = Field(default="console", description="console | json")
    level_sqlalchemy: str = "WARNING"
    level_httpx: str = "WARNING"
    level_uvicorn_access: str = "INFO"


class FastAPIConfig(BaseSettings):
    """FastAPI application configuration."""
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_prefix="FASTAPI_", extra="ignore")

    title: str = "iGaming Events Calendar API"
    description: str = "Browse, submit and subscribe to iGaming conferences"
    version: str = "0.1.0"
    docs_url: str | None = "/docs"
    redoc_url: str | None = "/redoc"
    openapi_url: str | None = "/openapi.json"
    debug: bool = False

    @field_validator("docs_url", "redoc_url", "openapi_url")
    @classmethod
    def _disable_docs_in_prod(cls, v: str | None) -> str | None:
        # Docs URLs can be disabled by setting to empty string in env
        return v if v else None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    env: Environment = Field(default=Environment.LOCAL)
    app_name: str = Field(default="iGaming Events Calendar")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    @field_validator("debug", "reload")
    @classmethod
    def _no_debug_in_prod(cls, v: bool, info) -> bool:
        if info.data.get("env") == Environment.PROD and v:
            raise ValueError(f"{info.field_name} cannot be True in production")
        return v


# =============================================================================
# Lazy Loaders (cached)
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    return Settings()

@lru_cache
def get_store_config() -> StoreConfig:
    return StoreConfig()

@lru_cache
def get_notion_config() -> NotionConfig:
    return NotionConfig()

@lru_cache
def get_database_config() -> DatabaseConfig:
    return DatabaseConfig()

@lru_cache
def get_mail_config() -> MailConfig:
    return MailConfig()

@lru_cache
def get_invite_config() -> InviteConfig:
    return InviteConfig()

@lru_cache
def get_calendar_config() -> CalendarConfig:
    return CalendarConfig()

@lru_cache
def get_cors_config() -> CORSConfig:
    return CORSConfig()

@lru_cache
def get_logging_config() -> LoggingConfig:
    return LoggingConfig()

@lru_cache
def get_fastapi_config() -> FastAPIConfig:
    return FastAPIConfig()


# =============================================================================
# Global Instances (core configs only)
# =============================================================================

settings = get_settings()
cors_config = get_cors_config()
logging_config = get_logging_config()
fastapi_config = get_fastapi_config()
