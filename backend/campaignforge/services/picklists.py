"""Forge picklists and pricing tables: loading for the cache, and bulk import."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from campaignforge.database import get_db_session
from campaignforge.models import (
    ArmorAttribute,
    AttackEffect,
    DamageType,
    DefEffect,
    ForgeConfigEntry,
    ForgeCostEntry,
    SanctifiedOption,
    ShieldAttribute,
    WardingOption,
    WeaponAttribute,
)
from campaignforge.schemas.forge import (
    DamageTypeOption,
    DefenceAttributeOption,
    ForgeConfigRow,
    ForgeCostRow,
    ForgePicklists,
    NamedOption,
    PicklistImport,
    PicklistImportResponse,
    WeaponAttributeOption,
)

logger = logging.getLogger(__name__)


async def _named(db: AsyncSession, model, schema) -> list:
    result = await db.execute(select(model).order_by(model.name))
    return [schema.model_validate(row) for row in result.scalars().all()]


async def load_picklists(db: AsyncSession) -> ForgePicklists:
    """Read every picklist table, ordered by name."""
    config_result = await db.execute(
        select(ForgeConfigEntry).order_by(ForgeConfigEntry.category, ForgeConfigEntry.id)
    )
    cost_result = await db.execute(
        select(ForgeCostEntry).order_by(ForgeCostEntry.category, ForgeCostEntry.id)
    )

    picklists = ForgePicklists(
        damage_types=await _named(db, DamageType, DamageTypeOption),
        attack_effects=await _named(db, AttackEffect, NamedOption),
        def_effects=await _named(db, DefEffect, NamedOption),
        weapon_attributes=await _named(db, WeaponAttribute, WeaponAttributeOption),
        armor_attributes=await _named(db, ArmorAttribute, DefenceAttributeOption),
        shield_attributes=await _named(db, ShieldAttribute, DefenceAttributeOption),
        warding_options=await _named(db, WardingOption, NamedOption),
        sanctified_options=await _named(db, SanctifiedOption, NamedOption),
        config=[ForgeConfigRow.model_validate(row) for row in config_result.scalars().all()],
        costs=[ForgeCostRow.model_validate(row) for row in cost_result.scalars().all()],
    )

    logger.debug(
        f"Loaded picklists: {len(picklists.weapon_attributes)} weapon attributes, "
        f"{len(picklists.config)} config rows, {len(picklists.costs)} cost rows"
    )
    return picklists


async def fetch_picklists() -> ForgePicklists:
    """Picklist fetcher for the cache; opens its own session."""
    async with get_db_session() as session:
        return await load_picklists(session)


NAMED_TABLES = {
    "damage_types": DamageType,
    "attack_effects": AttackEffect,
    "def_effects": DefEffect,
    "weapon_attributes": WeaponAttribute,
    "armor_attributes": ArmorAttribute,
    "shield_attributes": ShieldAttribute,
    "warding_options": WardingOption,
    "sanctified_options": SanctifiedOption,
}


async def _upsert_named(db: AsyncSession, model, entries: list) -> tuple[int, int]:
    result = await db.execute(select(model))
    existing = {row.name: row for row in result.scalars().all()}

    created = updated = 0
    for entry in entries:
        fields = entry.model_dump(mode="json")
        row = existing.get(entry.name)
        if row is None:
            row = model(**fields)
            db.add(row)
            existing[entry.name] = row
            created += 1
        else:
            for key, value in fields.items():
                setattr(row, key, value)
            updated += 1
    return created, updated


async def import_picklists(db: AsyncSession, data: PicklistImport) -> PicklistImportResponse:
    """
    Load picklist data into the database.

    Named entries are matched by name and updated in place, or created.
    Config and cost tables are replaced when present in the import. Rows
    missing a category, selector or value are skipped.
    """
    created: dict[str, int] = {}
    updated: dict[str, int] = {}
    replaced: dict[str, int] = {}

    for key, model in NAMED_TABLES.items():
        entries = getattr(data, key)
        if not entries:
            continue
        created[key], updated[key] = await _upsert_named(db, model, entries)

    if data.config is not None:
        await db.execute(delete(ForgeConfigEntry))
        rows = [row for row in data.config if row.category and row.selector1 and row.value is not None]
        if len(rows) != len(data.config):
            logger.warning(f"Skipped {len(data.config) - len(rows)} incomplete config rows")
        db.add_all([ForgeConfigEntry(**row.model_dump()) for row in rows])
        replaced["config"] = len(rows)

    if data.costs is not None:
        await db.execute(delete(ForgeCostEntry))
        rows = [row for row in data.costs if row.category and row.value is not None]
        if len(rows) != len(data.costs):
            logger.warning(f"Skipped {len(data.costs) - len(rows)} incomplete cost rows")
        db.add_all([ForgeCostEntry(**row.model_dump()) for row in rows])
        replaced["costs"] = len(rows)

    await db.commit()
    logger.info(
        f"Imported picklists: {sum(created.values())} created, {sum(updated.values())} updated, "
        f"{sum(replaced.values())} pricing rows"
    )
    return PicklistImportResponse(created=created, updated=updated, replaced=replaced)
