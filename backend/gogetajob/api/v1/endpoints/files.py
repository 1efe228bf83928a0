from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from gogetajob.api.deps import upload_store
from gogetajob.services.uploads import UPLOADS_URL_PREFIX, UploadStore


router = APIRouter()

PUBLIC_UPLOAD_HEADERS = {
    # Pictures are embedded by the frontend from another origin.
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Access-Control-Allow-Origin": "*",
}


@router.get("/{file_path:path}", include_in_schema=False)
async def serve_upload(file_path: str, store: UploadStore = Depends(upload_store)) -> FileResponse:
    """
    Public read access to stored uploads by their `/uploads/<relative-path>` reference.
    Anything resolving outside the uploads root, or to a directory, is reported as missing.
    """
    abs_path = store.resolve_reference(f"{UPLOADS_URL_PREFIX}{file_path}")
    if abs_path is None or not abs_path.is_file():
        raise HTTPException(status_code=404, detail="Not found")

    return FileResponse(
        path=str(abs_path),
        filename=abs_path.name,
        headers=PUBLIC_UPLOAD_HEADERS,
        content_disposition_type="inline",
    )
