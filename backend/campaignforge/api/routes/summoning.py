"""Summoning circle API endpoints: monster traits and natural attacks."""

from fastapi import APIRouter, Query

from campaignforge.api.deps import DbSession
from campaignforge.models import TraitSource
from campaignforge.processors.descriptor_engine import build_descriptor_result
from campaignforge.processors.forge_renderer import render_forge_result
from campaignforge.processors.monster_stats import natural_attack_to_descriptor, weapon_skill_dice
from campaignforge.schemas.descriptor import ForgeRenderOptions
from campaignforge.schemas.monster import (
    AttackPreviewRequest,
    AttackPreviewResponse,
    MonsterTraitResponse,
    TraitRenderRequest,
    TraitRenderResponse,
)
from campaignforge.services.traits import list_traits, render_traits

router = APIRouter()


@router.get("/traits", response_model=list[MonsterTraitResponse])
async def get_traits(
    db: DbSession,
    source: TraitSource | None = Query(TraitSource.CORE, description="Filter by source"),
) -> list[MonsterTraitResponse]:
    """List enabled trait definitions."""
    traits = await list_traits(db, source=source)
    return [MonsterTraitResponse.model_validate(trait) for trait in traits]


@router.post("/traits/render", response_model=TraitRenderResponse)
async def render_monster_traits(db: DbSession, data: TraitRenderRequest) -> TraitRenderResponse:
    """Render trait texts for a monster."""
    return await render_traits(db, data.monster, data.trait_ids)


@router.post("/attack-preview", response_model=AttackPreviewResponse)
async def attack_preview(data: AttackPreviewRequest) -> AttackPreviewResponse:
    """Render a natural attack with the monster's weapon skill dice."""
    skill = weapon_skill_dice(data.monster.attack_die, data.monster.bravery_die)
    descriptor = build_descriptor_result(natural_attack_to_descriptor(data.attack_config))
    rendered = render_forge_result(
        descriptor,
        ForgeRenderOptions(weapon_skill_dice_override=skill, range_header=True),
    )

    lines = [line for section in rendered if section.title == "Attack Actions" for line in section.lines]
    return AttackPreviewResponse(
        label=f"Natural Weapon: {data.attack_name or 'Natural Weapon'}",
        weapon_skill=skill,
        lines=lines,
        descriptor=descriptor,
        rendered=rendered,
    )
