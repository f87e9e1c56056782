"""Forge schemas: form values, picklists, pricing tables and calculator output."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campaignforge.schemas.common import Number
from campaignforge.schemas.descriptor import (
    AoEShape,
    AttackMode,
    DescriptorResult,
    ForgeRenderOptions,
    ItemType,
    RangeKind,
    RenderedSection,
    VRPEffectKind,
)


class ItemRarity(str, Enum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    LEGENDARY = "LEGENDARY"
    MYTHIC = "MYTHIC"


class WeaponSize(str, Enum):
    SMALL = "SMALL"
    ONE_HANDED = "ONE_HANDED"
    TWO_HANDED = "TWO_HANDED"


class ArmorLocation(str, Enum):
    HEAD = "HEAD"
    SHOULDERS = "SHOULDERS"
    TORSO = "TORSO"
    LEGS = "LEGS"
    FEET = "FEET"


class ItemLocation(str, Enum):
    HEAD = "HEAD"
    NECK = "NECK"
    ARMS = "ARMS"
    BELT = "BELT"
    HANDS = "HANDS"
    FINGER = "FINGER"
    CHEST = "CHEST"
    BACK = "BACK"
    FEET = "FEET"
    OTHER = "OTHER"


# ---------------------------------------------------------------------------
# Picklists
# ---------------------------------------------------------------------------

class NamedOption(BaseModel):
    """A plain (id, name) picklist entry."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class DamageTypeOption(NamedOption):
    attack_mode: AttackMode = AttackMode.PHYSICAL


class WeaponAttributeOption(NamedOption):
    descriptor_template: str | None = None
    descriptor_notes: str | None = None
    requires_range: RangeKind | None = None
    requires_aoe_shape: AoEShape | None = None
    requires_strength_source: bool = False
    requires_range_selection: bool = False


class DefenceAttributeOption(NamedOption):
    """Armor or shield attribute."""
    descriptor_template: str | None = None
    descriptor_notes: str | None = None


class ForgeConfigRow(BaseModel):
    """Multiplier lookup row."""
    model_config = ConfigDict(from_attributes=True)

    category: str | None = None
    selector1: str | None = None
    selector2: str | None = None
    value: float | None = None


class ForgeCostRow(BaseModel):
    """Sparse cost lookup row."""
    model_config = ConfigDict(from_attributes=True)

    category: str | None = None
    selector1: str | None = None
    selector2: str | None = None
    selector3: str | None = None
    value: float | None = None


class ForgePicklists(BaseModel):
    """Everything the forge needs from the admin-curated tables."""
    damage_types: list[DamageTypeOption] = Field(default_factory=list)
    attack_effects: list[NamedOption] = Field(default_factory=list)
    def_effects: list[NamedOption] = Field(default_factory=list)
    weapon_attributes: list[WeaponAttributeOption] = Field(default_factory=list)
    armor_attributes: list[DefenceAttributeOption] = Field(default_factory=list)
    shield_attributes: list[DefenceAttributeOption] = Field(default_factory=list)
    warding_options: list[NamedOption] = Field(default_factory=list)
    sanctified_options: list[NamedOption] = Field(default_factory=list)
    config: list[ForgeConfigRow] = Field(default_factory=list)
    costs: list[ForgeCostRow] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Form values
# ---------------------------------------------------------------------------

class GlobalAttributeModifierForm(BaseModel):
    attribute: str
    amount: Number = 0


class VrpEntryForm(BaseModel):
    effect_kind: VRPEffectKind
    magnitude: Number
    damage_type_id: int


class ForgeFormValues(BaseModel):
    """Live item configuration as collected by the forge form."""

    # Core
    name: str = ""
    rarity: ItemRarity | None = None
    level: Number = 0
    type: ItemType
    global_attribute_modifiers: list[GlobalAttributeModifierForm] = Field(default_factory=list)

    # Weapon core
    size: WeaponSize | None = None
    shield_has_attack: bool = False

    # Per-range strength
    melee_physical_strength: Number | None = None
    melee_mental_strength: Number | None = None
    ranged_physical_strength: Number | None = None
    ranged_mental_strength: Number | None = None
    aoe_physical_strength: Number | None = None
    aoe_mental_strength: Number | None = None

    melee_targets: Number | None = None
    ranged_targets: Number | None = None

    # Ranged / AoE geometry
    ranged_distance_feet: Number | None = None
    aoe_center_range_feet: Number | None = None
    aoe_count: Number | None = None
    aoe_shape: AoEShape | None = None
    aoe_sphere_radius_feet: Number | None = None
    aoe_cone_length_feet: Number | None = None
    aoe_line_width_feet: Number | None = None
    aoe_line_length_feet: Number | None = None

    # Armor core
    armor_location: ArmorLocation | None = None
    ppv: Number | None = None
    mpv: Number | None = None
    aura_physical: Number | None = None
    aura_mental: Number | None = None

    # Item core
    item_location: ItemLocation | None = None

    range_categories: list[RangeKind] = Field(default_factory=list)

    melee_damage_type_ids: list[int] = Field(default_factory=list)
    ranged_damage_type_ids: list[int] = Field(default_factory=list)
    aoe_damage_type_ids: list[int] = Field(default_factory=list)

    attack_effect_melee_ids: list[int] = Field(default_factory=list)
    attack_effect_ranged_ids: list[int] = Field(default_factory=list)
    attack_effect_aoe_ids: list[int] = Field(default_factory=list)

    weapon_attribute_ids: list[int] = Field(default_factory=list)
    # Keyed by weapon attribute id as a string
    weapon_attribute_strength_sources: dict[str, RangeKind | None] = Field(default_factory=dict)
    weapon_attribute_range_selections: dict[str, RangeKind | None] = Field(default_factory=dict)

    armor_attribute_ids: list[int] = Field(default_factory=list)
    shield_attribute_ids: list[int] = Field(default_factory=list)
    def_effect_ids: list[int] = Field(default_factory=list)
    warding_option_ids: list[int] = Field(default_factory=list)
    sanctified_option_ids: list[int] = Field(default_factory=list)


class ForgeCalculatorContext(BaseModel):
    """Resolved picklists plus the live VRP builder state."""
    damage_types: list[DamageTypeOption] = Field(default_factory=list)
    attack_effects: list[NamedOption] = Field(default_factory=list)
    def_effects: list[NamedOption] = Field(default_factory=list)
    weapon_attributes: list[WeaponAttributeOption] = Field(default_factory=list)
    armor_attributes: list[DefenceAttributeOption] = Field(default_factory=list)
    shield_attributes: list[DefenceAttributeOption] = Field(default_factory=list)
    warding_options: list[NamedOption] = Field(default_factory=list)
    sanctified_options: list[NamedOption] = Field(default_factory=list)
    vrp_entries: list[VrpEntryForm] = Field(default_factory=list)

    @classmethod
    def from_picklists(
        cls, picklists: ForgePicklists, vrp_entries: list[VrpEntryForm] | None = None
    ) -> "ForgeCalculatorContext":
        return cls(
            damage_types=picklists.damage_types,
            attack_effects=picklists.attack_effects,
            def_effects=picklists.def_effects,
            weapon_attributes=picklists.weapon_attributes,
            armor_attributes=picklists.armor_attributes,
            shield_attributes=picklists.shield_attributes,
            warding_options=picklists.warding_options,
            sanctified_options=picklists.sanctified_options,
            vrp_entries=vrp_entries or [],
        )


# ---------------------------------------------------------------------------
# Calculator output
# ---------------------------------------------------------------------------

class ForgeCalculatorTotals(BaseModel):
    total_fp: float
    spent_fp: float
    remaining_fp: float
    percent_spent: float
    multiplier: float


class AttackLineCost(BaseModel):
    """Cost of one attack range: max(1, target + choice) x (potency + type + gs)."""
    range_category: RangeKind
    target_cost: float = 0
    choice_cost: float = 0
    potency_cost: float = 0
    type_cost: float = 0
    gs_cost: float = 0
    total: float = 0


class ForgeCostBreakdown(BaseModel):
    """Per-contribution view of the raw spend, before the item multiplier."""
    attack_lines: list[AttackLineCost] = Field(default_factory=list)
    attack_cost: float = 0
    modifier_cost: float = 0
    protection_cost: float = 0
    aura_cost: float = 0
    attribute_cost: float = 0
    defence_effect_cost: float = 0
    option_cost: float = 0
    vrp_cost: float = 0
    raw_spent: float = 0


# ---------------------------------------------------------------------------
# Preview API
# ---------------------------------------------------------------------------

class ForgePreviewRequest(BaseModel):
    values: ForgeFormValues
    vrp_entries: list[VrpEntryForm] = Field(default_factory=list)
    options: ForgeRenderOptions = Field(default_factory=ForgeRenderOptions)


class ForgePreviewResponse(BaseModel):
    totals: ForgeCalculatorTotals
    breakdown: ForgeCostBreakdown
    descriptor: DescriptorResult
    rendered: list[RenderedSection]


class DescriptorPreviewResponse(BaseModel):
    descriptor: DescriptorResult
    rendered: list[RenderedSection]


# ---------------------------------------------------------------------------
# Picklist import
# ---------------------------------------------------------------------------

class NamedImport(BaseModel):
    """A picklist entry keyed by name."""
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class DamageTypeImport(NamedImport):
    attack_mode: AttackMode = AttackMode.PHYSICAL


class WeaponAttributeImport(NamedImport):
    descriptor_template: str | None = None
    descriptor_notes: str | None = None
    requires_range: RangeKind | None = None
    requires_aoe_shape: AoEShape | None = None
    requires_strength_source: bool = False
    requires_range_selection: bool = False


class DefenceAttributeImport(NamedImport):
    descriptor_template: str | None = None
    descriptor_notes: str | None = None


class PicklistImport(BaseModel):
    """
    Picklist data to load into the database.

    Named entries are upserted by name. When config or costs is given, that
    table is replaced as a whole; omitted sections are left untouched.
    """
    damage_types: list[DamageTypeImport] = Field(default_factory=list)
    attack_effects: list[NamedImport] = Field(default_factory=list)
    def_effects: list[NamedImport] = Field(default_factory=list)
    weapon_attributes: list[WeaponAttributeImport] = Field(default_factory=list)
    armor_attributes: list[DefenceAttributeImport] = Field(default_factory=list)
    shield_attributes: list[DefenceAttributeImport] = Field(default_factory=list)
    warding_options: list[NamedImport] = Field(default_factory=list)
    sanctified_options: list[NamedImport] = Field(default_factory=list)
    config: list[ForgeConfigRow] | None = None
    costs: list[ForgeCostRow] | None = None


class PicklistImportResponse(BaseModel):
    """Rows created or updated per table."""
    created: dict[str, int]
    updated: dict[str, int]
    replaced: dict[str, int]
