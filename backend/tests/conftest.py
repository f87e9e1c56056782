"""Shared fixtures: an in-memory database, sample picklists and an API client."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import campaignforge.models  # noqa: F401
from campaignforge.database import Base, get_db
from campaignforge.main import app
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
from campaignforge.schemas.forge import ForgePicklists
from campaignforge.services.picklist_cache import PicklistCache
from campaignforge.services.picklists import load_picklists
from campaignforge.services.traits import seed_core_traits

TEST_DATABASE_URL = "sqlite+aiosqlite://"

DAMAGE_TYPES = [
    {"id": 1, "name": "Slashing", "attack_mode": "PHYSICAL"},
    {"id": 2, "name": "Fire", "attack_mode": "PHYSICAL"},
    {"id": 3, "name": "Fear", "attack_mode": "MENTAL"},
]

ATTACK_EFFECTS = [{"id": 1, "name": "Bleed"}, {"id": 2, "name": "Burning"}]
DEF_EFFECTS = [{"id": 1, "name": "Stagger"}]

WEAPON_ATTRIBUTES = [
    {"id": 1, "name": "Reload 5", "descriptor_template": "Spend [AttributeValue] actions to reload."},
    {"id": 2, "name": "Cleaving", "descriptor_template": "Your [DamageTypes] attacks also hit a second target."},
    {"id": 3, "name": "Bulky", "descriptor_template": None},
]

ARMOR_ATTRIBUTES = [
    {"id": 1, "name": "Warding", "descriptor_template": "Ignore the first hit from [AttributeValue] each round."},
    {"id": 2, "name": "Heavy", "descriptor_template": None},
]

SHIELD_ATTRIBUTES = [
    {"id": 1, "name": "Bash", "descriptor_template": "Add [AttributeValue] to shove attempts."},
]

WARDING_OPTIONS = [{"id": 1, "name": "Spirits"}, {"id": 2, "name": "Undead"}]
SANCTIFIED_OPTIONS = [{"id": 1, "name": "Radiant"}]

CONFIG_ROWS = [
    {"category": "RARITY", "selector1": "Common", "selector2": None, "value": 10},
    {"category": "RARITY", "selector1": "Rare", "selector2": None, "value": 20},
    {"category": "SIZE", "selector1": "Weapon", "selector2": "One Handed", "value": 1},
    {"category": "SIZE", "selector1": "Weapon", "selector2": "Two Handed", "value": 1.5},
    {"category": "SIZE", "selector1": "Shield", "selector2": "One Handed", "value": 1},
    {"category": "ARMOR_LOCATION", "selector1": "Torso", "selector2": None, "value": 2},
]

COST_ROWS = [
    # Weapon attack lines
    {"category": "RangeCategory", "selector1": "Weapon", "selector2": "Melee", "selector3": None, "value": 1},
    {"category": "RangeCategory", "selector1": "Weapon", "selector2": "Ranged", "selector3": None, "value": 2},
    {"category": "MeleeTargets", "selector1": "Weapon", "selector2": "2", "selector3": None, "value": 1},
    {"category": "RangedTargets", "selector1": "Weapon", "selector2": "1", "selector3": None, "value": 1},
    {"category": "RangedDistanceFt", "selector1": "Weapon", "selector2": "30", "selector3": None, "value": 1},
    {"category": "Stat", "selector1": "Weapon", "selector2": "PhysicalStrength", "selector3": "3", "value": 6},
    {"category": "Stat", "selector1": "Weapon", "selector2": "PhysicalStrength", "selector3": "2", "value": 4},
    {"category": "DmgType_Count", "selector1": "Weapon", "selector2": "Melee", "selector3": "1", "value": 1},
    {"category": "DmgType_Count", "selector1": "Weapon", "selector2": "Ranged", "selector3": "1", "value": 1},
    {"category": "GS_AttackEffects", "selector1": "Weapon", "selector2": "Melee", "selector3": "Bleed", "value": 2},
    # Global attribute modifiers
    {"category": "Attribute", "selector1": "Weapon", "selector2": "Attack", "selector3": "1", "value": 5},
    {"category": "Attribute", "selector1": "Weapon", "selector2": "Defence", "selector3": None, "value": 3},
    {"category": "Attribute", "selector1": "Support", "selector2": "Weapon", "selector3": "2", "value": 7},
    # Weapon attributes
    {"category": "WeaponAttributes", "selector1": "Weapon", "selector2": "Reload", "selector3": "5", "value": 2},
    {"category": "WeaponAttributes", "selector1": "Weapon", "selector2": "Cleaving", "selector3": None, "value": 3},
    # Armor
    {"category": "Stat", "selector1": "PPV", "selector2": "Armor", "selector3": "3", "value": 9},
    {"category": "ArmorAttributes", "selector1": "Armor", "selector2": "Warding", "selector3": None, "value": 4},
    {"category": "WardingOptions", "selector1": "Armor", "selector2": "Spirits", "selector3": None, "value": 1},
    {"category": "GS_DefEffects", "selector1": "Armor", "selector2": "Stagger", "selector3": None, "value": 2},
    {"category": "VRPOptions", "selector1": "Armor", "selector2": "Resistance 2 Fire", "selector3": None, "value": 3},
    {"category": "Aura_Physical", "selector1": "Armor", "selector2": "1", "selector3": None, "value": 2},
    # Shield
    {"category": "RangeCategory", "selector1": "Shield", "selector2": "Melee", "selector3": None, "value": 1},
    {"category": "Stat", "selector1": "Shield", "selector2": "PhysicalStrength", "selector3": "2", "value": 3},
    {"category": "DmgType_Count", "selector1": "Shield", "selector2": "Melee", "selector3": "1", "value": 1},
    {"category": "Stat", "selector1": "PPV", "selector2": "Shield", "selector3": "2", "value": 5},
    {"category": "ShieldAttributes", "selector1": "TBC", "selector2": "Bash", "selector3": None, "value": 2},
]


@pytest.fixture
def forge_picklists():
    """Picklists as the forge sees them after loading."""
    return ForgePicklists(
        damage_types=DAMAGE_TYPES,
        attack_effects=ATTACK_EFFECTS,
        def_effects=DEF_EFFECTS,
        weapon_attributes=WEAPON_ATTRIBUTES,
        armor_attributes=ARMOR_ATTRIBUTES,
        shield_attributes=SHIELD_ATTRIBUTES,
        warding_options=WARDING_OPTIONS,
        sanctified_options=SANCTIFIED_OPTIONS,
        config=CONFIG_ROWS,
        costs=COST_ROWS,
    )


@pytest.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def seeded(session_maker):
    """Write the sample picklists and the core traits to the database."""
    async with session_maker() as session:
        session.add_all([DamageType(**row) for row in DAMAGE_TYPES])
        session.add_all([AttackEffect(**row) for row in ATTACK_EFFECTS])
        session.add_all([DefEffect(**row) for row in DEF_EFFECTS])
        session.add_all([WeaponAttribute(**row) for row in WEAPON_ATTRIBUTES])
        session.add_all([ArmorAttribute(**row) for row in ARMOR_ATTRIBUTES])
        session.add_all([ShieldAttribute(**row) for row in SHIELD_ATTRIBUTES])
        session.add_all([WardingOption(**row) for row in WARDING_OPTIONS])
        session.add_all([SanctifiedOption(**row) for row in SANCTIFIED_OPTIONS])
        session.add_all([ForgeConfigEntry(**row) for row in CONFIG_ROWS])
        session.add_all([ForgeCostEntry(**row) for row in COST_ROWS])
        await session.commit()

    async with session_maker() as session:
        await seed_core_traits(session)


@pytest.fixture
async def client(session_maker, seeded):
    async def override_get_db():
        async with session_maker() as session:
            yield session
            await session.commit()

    async def fetch():
        async with session_maker() as session:
            return await load_picklists(session)

    app.dependency_overrides[get_db] = override_get_db
    app.state.picklist_cache = PicklistCache(fetch, ttl_seconds=0)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
