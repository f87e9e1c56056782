"""SQLAlchemy models."""

from campaignforge.models.picklist import (
    DamageType,
    AttackEffect,
    DefEffect,
    WeaponAttribute,
    ArmorAttribute,
    ShieldAttribute,
    WardingOption,
    SanctifiedOption,
)
from campaignforge.models.forge_config import ForgeConfigEntry, ForgeCostEntry
from campaignforge.models.monster_trait import MonsterTraitDefinition, TraitSource, CORE_TRAITS

__all__ = [
    "DamageType",
    "AttackEffect",
    "DefEffect",
    "WeaponAttribute",
    "ArmorAttribute",
    "ShieldAttribute",
    "WardingOption",
    "SanctifiedOption",
    "ForgeConfigEntry",
    "ForgeCostEntry",
    "MonsterTraitDefinition",
    "TraitSource",
    "CORE_TRAITS",
]
