"""Summoning circle schemas: monster profiles, trait rendering and natural attacks."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from campaignforge.schemas.common import Number
from campaignforge.schemas.descriptor import (
    AoEShape,
    DamageTypeRef,
    DescriptorResult,
    RenderedSection,
)


class DiceSize(str, Enum):
    """Attribute die sizes."""
    D4 = "D4"
    D6 = "D6"
    D8 = "D8"
    D10 = "D10"
    D12 = "D12"


class MonsterProfile(BaseModel):
    """The monster fields that feed derived stats and trait templates."""
    name: str = ""
    level: int = 1
    attack_die: DiceSize = DiceSize.D6
    defence_die: DiceSize = DiceSize.D6
    fortitude_die: DiceSize = DiceSize.D6
    intellect_die: DiceSize = DiceSize.D6
    support_die: DiceSize = DiceSize.D6
    bravery_die: DiceSize = DiceSize.D6
    physical_weight: Number = 0


class MonsterDerivedStats(BaseModel):
    weapon_skill: int
    armor_skill: int
    willpower: int
    dodge: Number


# ---------------------------------------------------------------------------
# Traits
# ---------------------------------------------------------------------------

class MonsterTraitResponse(BaseModel):
    """Schema for trait definition response."""

    id: int
    name: str
    effect_text: str | None = None
    source: str
    is_read_only: bool
    is_enabled: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TraitRenderRequest(BaseModel):
    monster: MonsterProfile
    trait_ids: list[int] | None = Field(
        default=None, description="Traits to render; all enabled traits when omitted"
    )


class RenderedTrait(BaseModel):
    id: int
    name: str
    text: str


class TraitRenderResponse(BaseModel):
    stats: MonsterDerivedStats
    traits: list[RenderedTrait]


# ---------------------------------------------------------------------------
# Natural attacks
# ---------------------------------------------------------------------------

class NaturalRangeConfig(BaseModel):
    enabled: bool = False
    physical_strength: Number = 0
    mental_strength: Number = 0
    damage_types: list[DamageTypeRef] = Field(default_factory=list)
    attack_effects: list[str] = Field(default_factory=list)


class NaturalMeleeConfig(NaturalRangeConfig):
    targets: Number = 1


class NaturalRangedConfig(NaturalRangeConfig):
    targets: Number = 1
    distance: Number = 0


class NaturalAoEConfig(NaturalRangeConfig):
    count: Number = 1
    center_range: Number = 0
    shape: AoEShape = AoEShape.SPHERE
    sphere_radius_feet: Number | None = None
    cone_length_feet: Number | None = None
    line_width_feet: Number | None = None
    line_length_feet: Number | None = None


class NaturalAttackConfig(BaseModel):
    melee: NaturalMeleeConfig | None = None
    ranged: NaturalRangedConfig | None = None
    aoe: NaturalAoEConfig | None = None


class AttackPreviewRequest(BaseModel):
    monster: MonsterProfile
    attack_name: str = "Natural Weapon"
    attack_config: NaturalAttackConfig = Field(default_factory=NaturalAttackConfig)


class AttackPreviewResponse(BaseModel):
    label: str
    weapon_skill: int
    lines: list[str]
    descriptor: DescriptorResult
    rendered: list[RenderedSection]
