from __future__ import annotations

from gogetajob.services.uploads import UploadStore, get_upload_store


def upload_store() -> UploadStore:
    return get_upload_store()
