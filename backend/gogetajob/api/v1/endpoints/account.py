from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from gogetajob.api.deps import upload_store
from gogetajob.core.db import get_session
from gogetajob.core.responses import no_content
from gogetajob.core.security import require_basic_auth
from gogetajob.services.profiles import delete_account
from gogetajob.services.uploads import UploadStore


router = APIRouter()


@router.delete("", status_code=204)
async def delete_account_endpoint(
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    actor: str = Depends(require_basic_auth),
    store: UploadStore = Depends(upload_store),
) -> Response:
    async with session.begin():
        picture_url = await delete_account(session, actor=actor)

    # File cleanup runs after the response and never affects its status.
    background_tasks.add_task(store.delete_by_reference, picture_url)
    return no_content()
