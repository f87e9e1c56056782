"""
Descriptor engine data model.

A DescriptorInput is the full configuration of one item (or one monster attack
profile). The engine turns it into ordered DescriptorSections holding structured
lines; the forge renderer turns lines into display text.
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from campaignforge.schemas.common import Number


class ItemType(str, Enum):
    """Forge item types."""
    WEAPON = "WEAPON"
    ARMOR = "ARMOR"
    SHIELD = "SHIELD"
    ITEM = "ITEM"
    CONSUMABLE = "CONSUMABLE"


class AttackMode(str, Enum):
    """Whether damage is dealt to the body or the mind."""
    PHYSICAL = "PHYSICAL"
    MENTAL = "MENTAL"


class RangeKind(str, Enum):
    """Attack range categories."""
    MELEE = "MELEE"
    RANGED = "RANGED"
    AOE = "AOE"


class AoEShape(str, Enum):
    """Area of effect shapes."""
    SPHERE = "SPHERE"
    CONE = "CONE"
    LINE = "LINE"


class VRPEffectKind(str, Enum):
    """Vulnerability / Resistance / Protection."""
    VULNERABILITY = "VULNERABILITY"
    RESISTANCE = "RESISTANCE"
    PROTECTION = "PROTECTION"


class DescriptorSectionId(str, Enum):
    """Fixed section identifiers."""
    MODIFIERS = "MODIFIERS"
    VRP = "VRP"
    DEFENCE = "DEFENCE"
    GREATER_DEFENCE_EFFECTS = "GREATER_DEFENCE_EFFECTS"
    WEAPON_ATTRIBUTES = "WEAPON_ATTRIBUTES"
    ARMOR_ATTRIBUTES = "ARMOR_ATTRIBUTES"
    SHIELD_ATTRIBUTES = "SHIELD_ATTRIBUTES"
    ATTACK_ACTIONS = "ATTACK_ACTIONS"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class AttributeModifierInput(BaseModel):
    """A global attribute modifier, e.g. +1 to Attack."""
    attribute: str = ""
    amount: Number = 0


class DamageTypeRef(BaseModel):
    """A damage type selected on a range, with its attack mode."""
    name: str
    mode: AttackMode = AttackMode.PHYSICAL

    @model_validator(mode="before")
    @classmethod
    def coerce_plain_name(cls, data: Any) -> Any:
        """Bare strings are physical damage types."""
        if isinstance(data, str):
            return {"name": data}
        return data


class RangeAttackInput(BaseModel):
    """Fields shared by every attack range block."""
    enabled: bool = False
    damage_types: list[DamageTypeRef] = Field(default_factory=list)
    physical_strength: Number = 0
    mental_strength: Number = 0
    gs_attack_effects: list[str] = Field(default_factory=list)


class MeleeAttackInput(RangeAttackInput):
    """Melee attack block."""
    targets: Number | None = None


class RangedAttackInput(RangeAttackInput):
    """Ranged attack block."""
    targets: Number | None = None
    distance: Number | None = None


class AoEAttackInput(RangeAttackInput):
    """Area of effect attack block."""
    count: Number | None = None
    center_range: Number | None = None
    shape: AoEShape | None = None
    geometry: dict[str, Number] = Field(default_factory=dict)

    @field_validator("shape", mode="before")
    @classmethod
    def blank_shape_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class WeaponAttributeInput(BaseModel):
    """A selected weapon attribute and its descriptor template."""
    name: str
    descriptor_template: str | None = None
    attribute_value: Number | str | None = None
    strength_source: RangeKind | None = None
    range_source: RangeKind | None = None


class DefenceAttributeInput(BaseModel):
    """A selected armor or shield attribute and its descriptor template."""
    name: str
    descriptor_template: str | None = None
    attribute_value: Number | str | None = None


class VrpEntryInput(BaseModel):
    """A vulnerability/resistance/protection entry against a damage type."""
    effect_kind: str
    magnitude: Number = 0
    damage_type: str = ""


class DescriptorInput(BaseModel):
    """Complete configuration of one item or monster attack profile."""

    item_type: ItemType
    global_attribute_modifiers: list[AttributeModifierInput] = Field(default_factory=list)

    weapon_attributes: list[WeaponAttributeInput] = Field(default_factory=list)

    # Armor / shield core
    ppv: Number = 0
    mpv: Number = 0
    aura_physical: Number | None = None
    aura_mental: Number | None = None
    def_effects: list[str] = Field(default_factory=list)
    armor_attributes: list[DefenceAttributeInput] = Field(default_factory=list)
    shield_attributes: list[DefenceAttributeInput] = Field(default_factory=list)
    warding_options: list[str] = Field(default_factory=list)
    sanctified_options: list[str] = Field(default_factory=list)
    vrp_entries: list[VrpEntryInput] = Field(default_factory=list)

    # Attack ranges
    melee: MeleeAttackInput | None = None
    ranged: RangedAttackInput | None = None
    aoe: AoEAttackInput | None = None


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class MeleeRangeSpec(BaseModel):
    kind: Literal["MELEE"] = "MELEE"
    targets: Number = 1


class RangedRangeSpec(BaseModel):
    kind: Literal["RANGED"] = "RANGED"
    targets: Number = 1
    distance: Number = 0


class AoERangeSpec(BaseModel):
    kind: Literal["AOE"] = "AOE"
    count: Number = 1
    center_range: Number = 0
    shape: AoEShape
    geometry: dict[str, Number] = Field(default_factory=dict)


AttackRangeSpec = Annotated[
    MeleeRangeSpec | RangedRangeSpec | AoERangeSpec,
    Field(discriminator="kind"),
]


class DamageEntry(BaseModel):
    """Wounds dealt per success for one damage type."""
    amount: Number
    mode: AttackMode
    damage_type: str


class AttributeModToken(BaseModel):
    attribute_name: str
    magnitude: Number


class ModifiersLine(BaseModel):
    kind: Literal["GLOBAL_ATTRIBUTE_MODIFIERS"] = "GLOBAL_ATTRIBUTE_MODIFIERS"
    item_type: ItemType
    mods: list[AttributeModToken]


class WeaponAttributeLine(BaseModel):
    kind: Literal["WEAPON_ATTRIBUTE"] = "WEAPON_ATTRIBUTE"
    item_type: ItemType
    text: str


class TextLine(BaseModel):
    kind: Literal["TEXT"] = "TEXT"
    text: str


class AttackActionLine(BaseModel):
    kind: Literal["ATTACK_ACTION"] = "ATTACK_ACTION"
    item_type: ItemType
    ranges: list[AttackRangeSpec]
    damage_entries: list[DamageEntry]
    gs_attack_effects: list[str] = Field(default_factory=list)


DescriptorLine = Annotated[
    ModifiersLine | WeaponAttributeLine | TextLine | AttackActionLine,
    Field(discriminator="kind"),
]


class DescriptorSection(BaseModel):
    """An ordered group of lines under a fixed (id, title, order)."""
    id: DescriptorSectionId
    title: str
    order: int
    lines: list[DescriptorLine]


class DescriptorResult(BaseModel):
    """Engine output. Warnings are diagnostics for template authors only."""
    sections: list[DescriptorSection] = Field(default_factory=list)
    warnings: list[str] | None = None


class ForgeRenderOptions(BaseModel):
    """Options for turning descriptor lines into text."""
    weapon_skill_dice_override: Number | None = None
    range_header: bool = False


class RenderedSection(BaseModel):
    title: str
    lines: list[str]
