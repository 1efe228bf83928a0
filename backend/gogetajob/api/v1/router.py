from __future__ import annotations

from fastapi import APIRouter, Depends

from gogetajob.api.v1.endpoints import account, profile
from gogetajob.core.security import require_basic_auth


api_router = APIRouter(dependencies=[Depends(require_basic_auth)])

api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(account.router, prefix="/account", tags=["account"])
