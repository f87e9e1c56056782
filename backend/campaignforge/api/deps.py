"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from campaignforge.database import get_db
from campaignforge.services.picklist_cache import PicklistCache

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_picklist_cache(request: Request) -> PicklistCache:
    """The picklist cache created during app startup."""
    cache = getattr(request.app.state, "picklist_cache", None)
    if cache is None:
        raise HTTPException(status_code=503, detail="Picklist cache not initialised")
    return cache


PicklistCacheDep = Annotated[PicklistCache, Depends(get_picklist_cache)]
