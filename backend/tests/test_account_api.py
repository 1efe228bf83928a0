from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image
from sqlalchemy import select

from gogetajob.models.audit_log import AuditLog
from gogetajob.models.user_profile import UserProfile


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), "purple").save(buf, format="PNG")
    return buf.getvalue()


@pytest.mark.asyncio
async def test_delete_account_removes_profile_and_picture(client, session_factory, app_env: Path) -> None:
    uploaded = await client.post("/api/v1/profile/picture", files={"file": ("me.png", _png_bytes(), "image/png")})
    reference = uploaded.json()["data"]["profile_picture_url"]
    picture_path = app_env / reference[len("/uploads/"):]
    assert picture_path.exists()

    response = await client.delete("/api/v1/account")

    assert response.status_code == 204
    assert response.content == b""
    assert not picture_path.exists()

    async with session_factory() as session:
        profiles = (await session.execute(select(UserProfile))).scalars().all()
        deletions = (
            await session.execute(select(AuditLog).where(AuditLog.action == "account.delete"))
        ).scalars().all()
    assert profiles == []
    assert len(deletions) == 1
    assert deletions[0].before["profile_picture_url"] == reference


@pytest.mark.asyncio
async def test_delete_account_without_profile_is_treated_as_already_deleted(client) -> None:
    response = await client.delete("/api/v1/account")

    assert response.status_code == 204


@pytest.mark.asyncio
async def test_delete_account_succeeds_when_picture_file_is_already_gone(client, app_env: Path) -> None:
    uploaded = await client.post("/api/v1/profile/picture", files={"file": ("me.png", _png_bytes(), "image/png")})
    picture_path = app_env / uploaded.json()["data"]["profile_picture_url"][len("/uploads/"):]
    picture_path.unlink()

    response = await client.delete("/api/v1/account")

    assert response.status_code == 204


@pytest.mark.asyncio
async def test_delete_account_succeeds_when_file_cleanup_fails(client, app_env: Path, monkeypatch) -> None:
    uploaded = await client.post("/api/v1/profile/picture", files={"file": ("me.png", _png_bytes(), "image/png")})
    picture_path = app_env / uploaded.json()["data"]["profile_picture_url"][len("/uploads/"):]

    def _denied(self: Path, *args, **kwargs) -> None:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "unlink", _denied)

    response = await client.delete("/api/v1/account")

    assert response.status_code == 204
    assert picture_path.exists()
    profile = (await client.get("/api/v1/profile")).json()["data"]
    assert profile["profile_picture_url"] is None
