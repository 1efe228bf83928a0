from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gogetajob.core.enums import AuditAction
from gogetajob.models.user_profile import UserProfile
from gogetajob.schemas.profile import ProfileUpdate
from gogetajob.services.audit import audit_log


ENTITY_TYPE = "user_profile"


def _snapshot(profile: UserProfile, fields: set[str] | None = None) -> dict[str, Any]:
    names = fields if fields is not None else {c.key for c in UserProfile.__table__.columns}
    return {name: getattr(profile, name) for name in sorted(names)}


async def get_profile(session: AsyncSession, *, username: str) -> UserProfile | None:
    return (
        await session.execute(select(UserProfile).where(UserProfile.username == username))
    ).scalar_one_or_none()


async def get_or_create_profile(session: AsyncSession, *, username: str) -> UserProfile:
    profile = await get_profile(session, username=username)
    if profile is not None:
        return profile

    profile = UserProfile(username=username)
    session.add(profile)
    await session.flush()
    await audit_log(
        session,
        actor=username,
        entity_type=ENTITY_TYPE,
        entity_id=profile.id,
        action=AuditAction.PROFILE_CREATE,
        after={"username": username},
    )
    return profile


async def update_profile(session: AsyncSession, *, actor: str, data: ProfileUpdate) -> UserProfile:
    profile = await get_or_create_profile(session, username=actor)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        return profile

    before = _snapshot(profile, set(changes))
    for name, value in changes.items():
        setattr(profile, name, value)
    await session.flush()

    await audit_log(
        session,
        actor=actor,
        entity_type=ENTITY_TYPE,
        entity_id=profile.id,
        action=AuditAction.PROFILE_UPDATE,
        before=before,
        after=_snapshot(profile, set(changes)),
    )
    return profile


async def set_profile_picture(
    session: AsyncSession, *, actor: str, picture_url: str
) -> tuple[UserProfile, str | None]:
    """Point the profile at a new picture; returns the profile and the reference it replaced."""
    profile = await get_or_create_profile(session, username=actor)
    previous = profile.profile_picture_url
    profile.profile_picture_url = picture_url
    await session.flush()

    await audit_log(
        session,
        actor=actor,
        entity_type=ENTITY_TYPE,
        entity_id=profile.id,
        action=AuditAction.PROFILE_PICTURE_SET,
        before={"profile_picture_url": previous},
        after={"profile_picture_url": picture_url},
    )
    return profile, (previous if previous != picture_url else None)


async def clear_profile_picture(session: AsyncSession, *, actor: str) -> str | None:
    profile = await get_profile(session, username=actor)
    if profile is None or profile.profile_picture_url is None:
        return None

    previous = profile.profile_picture_url
    profile.profile_picture_url = None
    await session.flush()

    await audit_log(
        session,
        actor=actor,
        entity_type=ENTITY_TYPE,
        entity_id=profile.id,
        action=AuditAction.PROFILE_PICTURE_REMOVE,
        before={"profile_picture_url": previous},
        after={"profile_picture_url": None},
    )
    return previous


async def delete_account(session: AsyncSession, *, actor: str) -> str | None:
    """
    Delete the caller's profile row.

    Returns the picture reference the row owned so the caller can clean it up after commit.
    A missing profile is treated as already deleted.
    """
    profile = await get_profile(session, username=actor)
    if profile is None:
        return None

    picture_url = profile.profile_picture_url
    before = _snapshot(profile)
    await session.delete(profile)
    await session.flush()

    await audit_log(
        session,
        actor=actor,
        entity_type=ENTITY_TYPE,
        entity_id=before["id"],
        action=AuditAction.ACCOUNT_DELETE,
        before=before,
    )
    return picture_url
