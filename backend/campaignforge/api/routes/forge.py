"""Forge API endpoints: picklists, item preview and descriptors."""

from fastapi import APIRouter

from campaignforge.api.deps import DbSession, PicklistCacheDep
from campaignforge.processors.descriptor_engine import build_descriptor_result
from campaignforge.processors.forge_renderer import render_forge_result
from campaignforge.schemas.common import MessageResponse
from campaignforge.schemas.descriptor import DescriptorInput, ForgeRenderOptions
from campaignforge.schemas.forge import (
    DescriptorPreviewResponse,
    ForgePicklists,
    ForgePreviewRequest,
    ForgePreviewResponse,
    PicklistImport,
    PicklistImportResponse,
)
from campaignforge.services.forge_preview import preview_forge_item
from campaignforge.services.picklists import import_picklists

router = APIRouter()


@router.get("/picklists", response_model=ForgePicklists)
async def get_picklists(cache: PicklistCacheDep) -> ForgePicklists:
    """Damage types, effects, attributes, options and pricing tables."""
    return await cache.get()


@router.post("/picklists/refresh", response_model=MessageResponse)
async def refresh_picklists(cache: PicklistCacheDep) -> MessageResponse:
    """Drop the cached picklists so the next read reloads them."""
    cache.invalidate()
    return MessageResponse(message="Picklist cache cleared")


@router.post("/picklists/import", response_model=PicklistImportResponse)
async def import_picklist_data(
    db: DbSession, cache: PicklistCacheDep, data: PicklistImport
) -> PicklistImportResponse:
    """Upsert picklist entries and replace pricing tables, then drop the cache."""
    result = await import_picklists(db, data)
    cache.invalidate()
    return result


@router.post("/preview", response_model=ForgePreviewResponse)
async def preview_item(cache: PicklistCacheDep, data: ForgePreviewRequest) -> ForgePreviewResponse:
    """Price and describe an item from live form values."""
    picklists = await cache.get()
    return preview_forge_item(data.values, picklists, data.vrp_entries, data.options)


@router.post("/descriptor", response_model=DescriptorPreviewResponse)
async def describe_item(
    data: DescriptorInput,
    weapon_skill_dice: int | None = None,
    range_header: bool = False,
) -> DescriptorPreviewResponse:
    """Run the descriptor engine and renderer on an already-resolved input."""
    options = ForgeRenderOptions(weapon_skill_dice_override=weapon_skill_dice, range_header=range_header)
    descriptor = build_descriptor_result(data)
    return DescriptorPreviewResponse(
        descriptor=descriptor,
        rendered=render_forge_result(descriptor, options),
    )
