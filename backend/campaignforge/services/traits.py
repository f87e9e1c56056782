"""Monster trait definitions: seeding, listing and rendering."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campaignforge.models import CORE_TRAITS, MonsterTraitDefinition, TraitSource
from campaignforge.processors.monster_stats import derive_stats, trait_context
from campaignforge.processors.trait_templates import render_template
from campaignforge.schemas.monster import MonsterProfile, RenderedTrait, TraitRenderResponse

logger = logging.getLogger(__name__)


async def seed_core_traits(db: AsyncSession) -> int:
    """
    Seed the read-only CORE traits that don't exist yet.
    Returns count of traits created.
    """
    result = await db.execute(select(MonsterTraitDefinition.name))
    existing = set(result.scalars().all())

    created = 0
    for trait_data in CORE_TRAITS:
        if trait_data["name"] in existing:
            continue
        db.add(MonsterTraitDefinition(
            name=trait_data["name"],
            effect_text=trait_data["effect_text"],
            source=TraitSource.CORE.value,
            is_read_only=True,
            is_enabled=True,
        ))
        created += 1

    if not created:
        logger.debug("Core monster traits already seeded")
        return 0

    await db.commit()
    logger.info(f"Seeded {created} core monster traits")
    return created


async def list_traits(
    db: AsyncSession,
    source: TraitSource | None = None,
    include_disabled: bool = False,
) -> list[MonsterTraitDefinition]:
    query = select(MonsterTraitDefinition)
    if source is not None:
        query = query.where(MonsterTraitDefinition.source == source.value)
    if not include_disabled:
        query = query.where(MonsterTraitDefinition.is_enabled == True)  # noqa: E712
    query = query.order_by(MonsterTraitDefinition.name)

    result = await db.execute(query)
    return list(result.scalars().all())


async def render_traits(
    db: AsyncSession,
    monster: MonsterProfile,
    trait_ids: list[int] | None = None,
) -> TraitRenderResponse:
    """Render trait effect text against a monster. Unknown ids are skipped."""
    traits = await list_traits(db)
    if trait_ids is not None:
        by_id = {trait.id: trait for trait in traits}
        traits = [by_id[trait_id] for trait_id in trait_ids if trait_id in by_id]

    context = trait_context(monster)
    rendered = [
        RenderedTrait(
            id=trait.id,
            name=trait.name,
            text=render_template(trait.effect_text or "", context),
        )
        for trait in traits
    ]
    return TraitRenderResponse(stats=derive_stats(monster), traits=rendered)
