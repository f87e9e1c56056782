"""Pydantic schemas for engine data and API requests/responses."""

from campaignforge.schemas.common import MessageResponse, Number
from campaignforge.schemas.descriptor import (
    AoEShape,
    AttackActionLine,
    AttackMode,
    DescriptorInput,
    DescriptorResult,
    DescriptorSection,
    ForgeRenderOptions,
    ItemType,
    ModifiersLine,
    RangeKind,
    RenderedSection,
    TextLine,
    VRPEffectKind,
    WeaponAttributeLine,
)
from campaignforge.schemas.forge import (
    ForgeCalculatorContext,
    ForgeCalculatorTotals,
    ForgeConfigRow,
    ForgeCostBreakdown,
    ForgeCostRow,
    ForgeFormValues,
    ForgePicklists,
    ForgePreviewRequest,
    ForgePreviewResponse,
)
from campaignforge.schemas.monster import DiceSize, MonsterProfile, NaturalAttackConfig

__all__ = [
    "MessageResponse",
    "Number",
    "AoEShape",
    "AttackActionLine",
    "AttackMode",
    "DescriptorInput",
    "DescriptorResult",
    "DescriptorSection",
    "ForgeRenderOptions",
    "ItemType",
    "ModifiersLine",
    "RangeKind",
    "RenderedSection",
    "TextLine",
    "VRPEffectKind",
    "WeaponAttributeLine",
    "ForgeCalculatorContext",
    "ForgeCalculatorTotals",
    "ForgeConfigRow",
    "ForgeCostBreakdown",
    "ForgeCostRow",
    "ForgeFormValues",
    "ForgePicklists",
    "ForgePreviewRequest",
    "ForgePreviewResponse",
    "DiceSize",
    "MonsterProfile",
    "NaturalAttackConfig",
]
