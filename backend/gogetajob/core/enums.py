from __future__ import annotations

from enum import StrEnum


class UploadCategory(StrEnum):
    PROFILE_PICTURES = "profile-pictures"


class AuditAction(StrEnum):
    PROFILE_CREATE = "profile.create"
    PROFILE_UPDATE = "profile.update"
    PROFILE_PICTURE_SET = "profile.picture.set"
    PROFILE_PICTURE_REMOVE = "profile.picture.remove"
    ACCOUNT_DELETE = "account.delete"
