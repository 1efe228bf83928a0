from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_APP_NAME = "GoGetaJob"
DEFAULT_APP_SHORT = "GGJ"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

ENVIRONMENTS = ("development", "production", "test")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(DEFAULT_APP_NAME, alias="GGJ_APP_NAME")
    app_short: str = Field(DEFAULT_APP_SHORT, alias="GGJ_APP_SHORT")
    environment: str = Field("development", alias="GGJ_NODE_ENV")

    database_url: str = Field(..., alias="GGJ_DATABASE_URL")

    # Public references look like /uploads/<relative-path>; this is where they live on disk.
    uploads_dir: Path = Field(Path("uploads"), alias="GGJ_UPLOADS_DIR")
    max_upload_bytes: int = Field(DEFAULT_MAX_UPLOAD_BYTES, alias="GGJ_MAX_UPLOAD_BYTES")

    basic_auth_username: str = Field(..., alias="GGJ_BASIC_AUTH_USERNAME")
    basic_auth_password: str = Field(..., alias="GGJ_BASIC_AUTH_PASSWORD")

    cors_origins: str | None = Field("http://localhost:3000", alias="GGJ_CORS_ORIGINS")

    log_level: str | None = Field(None, alias="GGJ_LOG_LEVEL")

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, v: object) -> object:
        if v is None:
            return "development"
        if isinstance(v, str):
            env = v.strip().lower() or "development"
            if env not in ENVIRONMENTS:
                raise ValueError(f"GGJ_NODE_ENV must be one of {', '.join(ENVIRONMENTS)}")
            return env
        return v

    @field_validator("uploads_dir", mode="before")
    @classmethod
    def _normalize_uploads_dir(cls, v: object) -> object:
        if isinstance(v, str):
            path = v.strip()
            return path or "uploads"
        return v

    @field_validator("cors_origins", "log_level", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("max_upload_bytes")
    @classmethod
    def _positive_upload_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("GGJ_MAX_UPLOAD_BYTES must be positive")
        return v

    @model_validator(mode="after")
    def _finalize(self) -> "Settings":
        # Resolved once; relative values are anchored at the working directory of the process.
        self.uploads_dir = self.uploads_dir.expanduser().absolute()
        if self.log_level is None:
            self.log_level = "INFO" if self.is_development else "WARNING"
        else:
            self.log_level = self.log_level.upper()
            if not isinstance(logging.getLevelName(self.log_level), int):
                raise ValueError(f"Unknown GGJ_LOG_LEVEL: {self.log_level}")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def cors_origin_list(self) -> list[str]:
        if not self.cors_origins:
            return []
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
