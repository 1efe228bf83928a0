from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from gogetajob.api.v1.endpoints import files
from gogetajob.api.v1.router import api_router
from gogetajob.core.config import get_settings
from gogetajob.core.db import engine
from gogetajob.core.errors import register_exception_handlers
from gogetajob.core.log import configure_logging


logger = logging.getLogger(__name__)


@lru_cache
def _repo_head_revision() -> str | None:
    default_alembic_path = Path(__file__).resolve().parents[1] / "alembic.ini"
    alembic_path = Path(os.getenv("ALEMBIC_CONFIG_PATH", str(default_alembic_path)))
    if not alembic_path.exists():
        return None

    cfg = Config(str(alembic_path))
    cfg.set_main_option("script_location", str(alembic_path.parent / "alembic"))
    script = ScriptDirectory.from_config(cfg)
    return script.get_current_head()


def _iso_utc_now() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(title=f"{settings.app_name} ({settings.app_short}) API", version="1.0")

    origins = settings.cors_origin_list
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app, settings)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "ok": True,
            "app": settings.app_name,
            "short": settings.app_short,
            "timestamp": _iso_utc_now(),
        }

    @app.get("/healthz/deep")
    async def deep_health() -> JSONResponse:
        payload: dict[str, Any] = {
            "status": "ok",
            "checks": {
                "database": "ok",
                "uploads_dir": "ok" if settings.uploads_dir.is_dir() else "missing",
            },
        }
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                has_alembic_version = bool(
                    await conn.scalar(text("SELECT to_regclass('public.alembic_version') IS NOT NULL"))
                )
                current_revision: str | None = None
                if has_alembic_version:
                    current_revision = await conn.scalar(text("SELECT version_num FROM alembic_version LIMIT 1"))
        except Exception as exc:
            logger.warning("Deep health check failed", exc_info=exc)
            payload["status"] = "error"
            payload["checks"]["database"] = "error"
            payload["error"] = f"{exc.__class__.__name__}: {exc}"
            return JSONResponse(status_code=503, content=payload)

        repo_head = _repo_head_revision()
        if not has_alembic_version:
            migration_state = "missing_alembic_version"
        elif repo_head is None:
            migration_state = "unknown_repo_head"
        elif current_revision == repo_head:
            migration_state = "up_to_date"
        else:
            migration_state = "behind_head"

        payload["checks"]["migration"] = {
            "state": migration_state,
            "current_revision": current_revision,
            "repo_head_revision": repo_head,
        }

        healthy = migration_state == "up_to_date" and payload["checks"]["uploads_dir"] == "ok"
        payload["status"] = "ok" if healthy else "degraded"
        return JSONResponse(status_code=200 if healthy else 503, content=payload)

    @app.on_event("startup")
    async def startup() -> None:
        settings.uploads_dir.mkdir(parents=True, exist_ok=True)
        logger.info(
            "%s (%s) started in %s mode; uploads at %s",
            settings.app_name,
            settings.app_short,
            settings.environment,
            settings.uploads_dir,
        )

    app.include_router(files.router, prefix="/uploads", tags=["uploads"])
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
