from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import HTTPException

from gogetajob.api.v1.endpoints.files import serve_upload
from gogetajob.services.uploads import UploadStore


@pytest.mark.asyncio
async def test_serve_upload_returns_inline_file_with_cross_origin_headers(app_env: Path) -> None:
    file_path = app_env / "profile-pictures" / "abc.png"
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(b"png")

    response = await serve_upload("profile-pictures/abc.png", store=UploadStore(app_env))

    assert Path(response.path) == file_path
    assert response.headers.get("Cross-Origin-Resource-Policy") == "cross-origin"
    assert response.headers.get("Access-Control-Allow-Origin") == "*"
    assert response.headers.get("Content-Disposition", "").startswith("inline")


@pytest.mark.asyncio
async def test_serve_upload_hides_path_traversal(app_env: Path) -> None:
    (app_env.parent / "secret.txt").write_text("nope")

    with pytest.raises(HTTPException) as exc:
        await serve_upload("../secret.txt", store=UploadStore(app_env))
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_serve_upload_returns_404_for_missing_file(app_env: Path) -> None:
    with pytest.raises(HTTPException) as exc:
        await serve_upload("profile-pictures/missing.png", store=UploadStore(app_env))
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_serve_upload_returns_404_for_directories(app_env: Path) -> None:
    (app_env / "profile-pictures").mkdir(parents=True, exist_ok=True)

    for path in ("", "profile-pictures"):
        with pytest.raises(HTTPException) as exc:
            await serve_upload(path, store=UploadStore(app_env))
        assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_uploads_route_is_public(client, app_env: Path) -> None:
    file_path = app_env / "profile-pictures" / "abc.png"
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(b"png")

    response = await client.get("/uploads/profile-pictures/abc.png", auth=None)

    assert response.status_code == 200
    assert response.content == b"png"
