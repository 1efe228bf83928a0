from __future__ import annotations

import asyncio
import errno
import logging
import os
import uuid
from pathlib import Path

from gogetajob.core.config import Settings, get_settings


logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"

# ENOENT: already gone. ENOTDIR: a parent component is a file, so the target cannot exist.
_ALREADY_GONE = (errno.ENOENT, errno.ENOTDIR)


class UploadStore:
    """
    Files stored under one uploads root and referenced publicly as `/uploads/<relative-path>`.

    Every path derived from a reference is normalised and confined to the root before it is
    touched. Deletion is best-effort: it never raises, whatever the reference contains.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(os.path.abspath(os.fspath(root)))

    def resolve_reference(self, reference: object) -> Path | None:
        """
        Map a `/uploads/...` reference to an absolute path inside the root.

        Returns None for anything that is not an upload reference or that escapes the root.
        The root itself is returned for `/uploads/`; callers decide what a directory means.
        """
        if not reference or not isinstance(reference, str):
            return None
        if not reference.startswith(UPLOADS_URL_PREFIX):
            return None

        relative = reference[len(UPLOADS_URL_PREFIX):]
        root = os.fspath(self.root)
        target = os.path.normpath(os.path.join(root, relative))

        root_with_sep = root if root.endswith(os.sep) else root + os.sep
        if target != root and not target.startswith(root_with_sep):
            logger.warning(
                "Rejected upload reference outside uploads root",
                extra={"reference": reference, "resolved_path": target},
            )
            return None
        return Path(target)

    def reference_for(self, path: Path) -> str:
        rel = Path(os.path.abspath(path)).relative_to(self.root)
        return f"{UPLOADS_URL_PREFIX}{rel.as_posix()}"

    async def save(self, category: str, content: bytes, *, suffix: str = "") -> str:
        abs_dir = self.root / category
        await asyncio.to_thread(abs_dir.mkdir, parents=True, exist_ok=True)

        abs_path = abs_dir / f"{uuid.uuid4().hex}{suffix.lower()}"
        await asyncio.to_thread(abs_path.write_bytes, content)
        reference = self.reference_for(abs_path)
        logger.info("Stored upload", extra={"reference": reference, "size_bytes": len(content)})
        return reference

    async def delete_by_reference(self, reference: str | None) -> None:
        target = self.resolve_reference(reference)
        if target is None:
            return
        if target == self.root:
            logger.debug("Upload reference points at the uploads root; nothing to delete")
            return

        try:
            await asyncio.to_thread(target.unlink)
        except OSError as e:
            if e.errno in _ALREADY_GONE:
                logger.debug("Upload already absent", extra={"reference": reference})
                return
            logger.warning("Failed to delete upload", extra={"reference": reference}, exc_info=e)
            return
        except ValueError as e:
            # e.g. embedded NUL bytes in the reference
            logger.warning("Failed to delete upload", extra={"reference": reference}, exc_info=e)
            return

        logger.info("Deleted upload", extra={"reference": reference})


def get_upload_store(settings: Settings | None = None) -> UploadStore:
    return UploadStore((settings or get_settings()).uploads_dir)


async def safe_delete_upload_by_url(reference: str | None, *, settings: Settings | None = None) -> None:
    """Best-effort delete of the file behind a `/uploads/*` reference. Never raises."""
    await get_upload_store(settings).delete_by_reference(reference)
