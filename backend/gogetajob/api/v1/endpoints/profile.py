from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Response, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from gogetajob.api.deps import upload_store
from gogetajob.core.config import get_settings
from gogetajob.core.db import get_session
from gogetajob.core.enums import UploadCategory
from gogetajob.core.responses import created, no_content, ok
from gogetajob.core.security import require_basic_auth
from gogetajob.schemas.profile import ProfileOut, ProfileUpdate
from gogetajob.services.images import UnsupportedImageError, detect_image_suffix
from gogetajob.services.profiles import (
    clear_profile_picture,
    get_or_create_profile,
    set_profile_picture,
    update_profile,
)
from gogetajob.services.uploads import UploadStore


router = APIRouter()


@router.get("")
async def get_profile_endpoint(
    session: AsyncSession = Depends(get_session),
    actor: str = Depends(require_basic_auth),
) -> JSONResponse:
    async with session.begin():
        profile = await get_or_create_profile(session, username=actor)
    return ok(ProfileOut.model_validate(profile))


@router.patch("")
async def update_profile_endpoint(
    data: ProfileUpdate,
    session: AsyncSession = Depends(get_session),
    actor: str = Depends(require_basic_auth),
) -> JSONResponse:
    async with session.begin():
        profile = await update_profile(session, actor=actor, data=data)
    return ok(ProfileOut.model_validate(profile), "Profile updated")


@router.post("/picture", status_code=201)
async def upload_profile_picture_endpoint(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_session),
    actor: str = Depends(require_basic_auth),
    store: UploadStore = Depends(upload_store),
) -> JSONResponse:
    settings = get_settings()

    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.max_upload_bytes} byte upload limit",
        )
    try:
        suffix = detect_image_suffix(content)
    except UnsupportedImageError as e:
        raise HTTPException(status_code=415, detail=str(e)) from e

    picture_url = await store.save(UploadCategory.PROFILE_PICTURES.value, content, suffix=suffix)
    try:
        async with session.begin():
            profile, previous = await set_profile_picture(session, actor=actor, picture_url=picture_url)
    except Exception:
        # The new file has no owner if the row was not updated.
        await store.delete_by_reference(picture_url)
        raise

    background_tasks.add_task(store.delete_by_reference, previous)
    return created(ProfileOut.model_validate(profile), "Profile picture updated")


@router.delete("/picture", status_code=204)
async def delete_profile_picture_endpoint(
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    actor: str = Depends(require_basic_auth),
    store: UploadStore = Depends(upload_store),
) -> Response:
    async with session.begin():
        previous = await clear_profile_picture(session, actor=actor)

    background_tasks.add_task(store.delete_by_reference, previous)
    return no_content()
