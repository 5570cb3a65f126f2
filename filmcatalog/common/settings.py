# filmcatalog/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from filmcatalog.common.strings.splitters import csv_to_list


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)


class DBConfig(BaseModel):
    driver: str = "postgresql+psycopg"
    host: str = "localhost"
    port: int = 5432
    name: str = "film"
    user: str = "film"
    password: str = "p"
    schema_name: str = "public"
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    pool_pre_ping: bool = True
    pool_recycle: int = 1800

    @computed_field  # type: ignore[misc]
    @property
    def composed_url(self) -> str:
        return f"{self.driver}://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class MailConfig(BaseModel):
    enabled: bool = True
    sender: str = "filmcatalog@localhost"
    recipients: List[str] = Field(default_factory=lambda: ["admin@localhost"])
    workers: int = 2
    max_queue: int = 64

    @field_validator("enabled", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)

    @field_validator("recipients", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)


class GraphQLConfig(BaseModel):
    path: str = "/graphql"
    ide: bool = True


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "filmcatalog"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"
    tz: str = "UTC"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    db: DBConfig = DBConfig()
    mail: MailConfig = MailConfig()
    graphql: GraphQLConfig = GraphQLConfig()

    # Optional single URL (if set, it takes precedence over the DB_* parts)
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # -------- Testcontainers / CI toggles --------
    use_testcontainers: bool = False
    test_db_image: str = "postgres:15-alpine"
    test_db_wait_timeout_sec: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # ===== Convenience: DB URL & schema =====
    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        return self.database_url_override or self.db.composed_url

    @computed_field  # type: ignore[misc]
    @property
    def db_schema(self) -> Optional[str]:
        # "public" is the PostgreSQL default; SQLite has no schemas at all
        if not self.db.schema_name or self.db.schema_name.lower() == "public":
            return None
        if self.database_url.startswith("sqlite"):
            return None
        return self.db.schema_name


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from filmcatalog.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
