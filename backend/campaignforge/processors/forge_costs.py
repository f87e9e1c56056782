"""
Forge cost calculator.

Prices an item configuration in forge points (FP). Every cost is a lookup in
a sparse table keyed by (category, selector1, selector2, selector3); a selector
left as None is not filtered on and the first matching row wins. Lookups that
find nothing cost 0 (or multiply by 1), they never raise.

Attack pricing is per range: each enabled range is one attack line costing
max(1, target + choice) x (potency + type + gs). Everything else is additive.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from campaignforge.processors.arithmetic import format_number, is_finite
from campaignforge.schemas.descriptor import AoEShape, ItemType, RangeKind, VRPEffectKind
from campaignforge.schemas.forge import (
    AttackLineCost,
    ForgeCalculatorContext,
    ForgeCalculatorTotals,
    ForgeConfigRow,
    ForgeCostBreakdown,
    ForgeCostRow,
    ForgeFormValues,
)

WEAPON_ATTRIBUTE_MAGNITUDE = re.compile(r'^(.*\D)\s+(\d+)$')

TYPE_LABELS = {
    ItemType.WEAPON: "Weapon",
    ItemType.ARMOR: "Armor",
    ItemType.SHIELD: "Shield",
    ItemType.ITEM: "Item",
    ItemType.CONSUMABLE: "Item",
}

SIZE_LABELS = {
    "SMALL": "Small",
    "ONE_HANDED": "One Handed",
    "TWO_HANDED": "Two Handed",
}

ARMOR_LOCATION_LABELS = {
    "HEAD": "Head",
    "SHOULDERS": "Shoulders",
    "TORSO": "Torso",
    "LEGS": "Legs",
    "FEET": "Feet",
}

ITEM_LOCATION_LABELS = {
    "HEAD": "Head",
    "NECK": "Neck",
    "ARMS": "Arms",
    "BELT": "Belt",
    "HANDS": "Hands",
    "FINGER": "Finger",
    "CHEST": "Chest",
    "BACK": "Back",
    "FEET": "Feet",
    "OTHER": "Other",
}

RANGE_LABELS = {
    RangeKind.MELEE: "Melee",
    RangeKind.RANGED: "Ranged",
    RangeKind.AOE: "AoE",
}

VRP_LABELS = {
    VRPEffectKind.VULNERABILITY: "Vulnerability",
    VRPEffectKind.RESISTANCE: "Resistance",
    VRPEffectKind.PROTECTION: "Protection",
}


# ---------------------------------------------------------------------------
# Table lookups
# ---------------------------------------------------------------------------

def normalize_key(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value).strip().lower()
    return str(value).strip().lower()


def _row_value(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value if is_finite(value) else default


@dataclass(frozen=True)
class CostQuery:
    """A cost table query. None selectors match any row."""
    category: str
    selector1: str | None = None
    selector2: str | None = None
    selector3: str | int | float | None = None

    def matches(self, row: ForgeCostRow) -> bool:
        if normalize_key(row.category) != normalize_key(self.category):
            return False
        for wanted, actual in (
            (self.selector1, row.selector1),
            (self.selector2, row.selector2),
            (self.selector3, row.selector3),
        ):
            if wanted is not None and normalize_key(actual) != normalize_key(wanted):
                return False
        return True

    def swapped(self) -> "CostQuery":
        return replace(self, selector1=self.selector2, selector2=self.selector1)

    def per_point(self) -> "CostQuery":
        return replace(self, selector3=None)


def find_cost_value(rows: list[ForgeCostRow], query: CostQuery, default: float = 0) -> float:
    for row in rows:
        if query.matches(row):
            return _row_value(row.value, default)
    return default


def find_config_value(
    rows: list[ForgeConfigRow],
    category: str,
    selector1: str | None = None,
    selector2: str | None = None,
    default: float = 0,
) -> float:
    for row in rows:
        if normalize_key(row.category) != normalize_key(category):
            continue
        if selector1 is not None and normalize_key(row.selector1) != normalize_key(selector1):
            continue
        if selector2 is not None and normalize_key(row.selector2) != normalize_key(selector2):
            continue
        return _row_value(row.value, default)
    return default


@dataclass(frozen=True)
class FallbackStrategy:
    """One step of the attribute cost fallback chain."""
    name: str
    build: Callable[[CostQuery], CostQuery]
    per_point: bool = False


ATTRIBUTE_COST_FALLBACKS: tuple[FallbackStrategy, ...] = (
    FallbackStrategy("exact", lambda query: query),
    FallbackStrategy("swapped_exact", CostQuery.swapped),
    FallbackStrategy("per_point", CostQuery.per_point, per_point=True),
    FallbackStrategy("swapped_per_point", lambda query: query.swapped().per_point(), per_point=True),
)


def find_attribute_cost(
    rows: list[ForgeCostRow],
    item_type_label: str,
    attribute_name: str,
    magnitude: int | float,
    strategies: tuple[FallbackStrategy, ...] = ATTRIBUTE_COST_FALLBACKS,
) -> float:
    """Price a global attribute modifier, trying each strategy in order."""
    query = CostQuery("Attribute", item_type_label, attribute_name, magnitude)
    for strategy in strategies:
        value = find_cost_value(rows, strategy.build(query))
        if value:
            return value * magnitude if strategy.per_point else value
    return 0


# ---------------------------------------------------------------------------
# Budget and multiplier
# ---------------------------------------------------------------------------

def _enum_value(value: Any) -> str | None:
    if value is None:
        return None
    return getattr(value, "value", value)


def calculate_total_fp(values: ForgeFormValues, config_rows: list[ForgeConfigRow]) -> float:
    """level x rarity scalar; 0 when either is missing."""
    level = values.level or 0
    rarity = _enum_value(values.rarity)
    if not level or not rarity or not is_finite(level):
        return 0

    scalar = find_config_value(config_rows, "RARITY", rarity.lower(), None, 0)
    total = level * scalar
    return total if is_finite(total) else 0


def calculate_item_multiplier(values: ForgeFormValues, config_rows: list[ForgeConfigRow]) -> float:
    item_type = values.type

    if item_type in (ItemType.WEAPON, ItemType.SHIELD):
        size_label = SIZE_LABELS.get(_enum_value(values.size))
        if not size_label:
            return 1
        return find_config_value(config_rows, "SIZE", TYPE_LABELS[item_type], size_label, 1) or 1

    if item_type == ItemType.ARMOR:
        location_label = ARMOR_LOCATION_LABELS.get(_enum_value(values.armor_location))
        if not location_label:
            return 1
        return find_config_value(config_rows, "ARMOR_LOCATION", location_label, None, 1) or 1

    if item_type == ItemType.ITEM:
        location_label = ITEM_LOCATION_LABELS.get(_enum_value(values.item_location))
        if not location_label:
            return 1
        return find_config_value(config_rows, "ITEM_LOCATION", location_label, None, 1) or 1

    return 1


# ---------------------------------------------------------------------------
# Attack lines
# ---------------------------------------------------------------------------

def is_weapon_like(values: ForgeFormValues) -> bool:
    if values.type == ItemType.WEAPON:
        return True
    return values.type == ItemType.SHIELD and bool(values.size) and values.shield_has_attack


def _positive(value: Any) -> bool:
    return value is not None and value > 0


class _Pricer:
    """Binds the cost rows and picklist context for one calculation."""

    def __init__(
        self,
        values: ForgeFormValues,
        cost_rows: list[ForgeCostRow],
        context: ForgeCalculatorContext,
    ):
        self.values = values
        self.rows = cost_rows
        self.context = context
        self.type_label = TYPE_LABELS.get(values.type, "")
        self.attack_effect_names = {fx.id: fx.name for fx in context.attack_effects}

    def cost(self, category: str, selector1=None, selector2=None, selector3=None) -> float:
        return find_cost_value(self.rows, CostQuery(category, selector1, selector2, selector3))

    def potency(self, physical, mental) -> float:
        total = 0
        if _positive(physical):
            total += self.cost("Stat", self.type_label, "PhysicalStrength", physical)
        if _positive(mental):
            total += self.cost("Stat", self.type_label, "MentalStrength", mental)
        return total

    def damage_type_count(self, range_label: str, ids: list[int]) -> float:
        if not ids:
            return 0
        return self.cost("DmgType_Count", self.type_label, range_label, len(ids))

    def gs_attack_effects(self, range_label: str, ids: list[int]) -> float:
        total = 0
        for effect_id in ids:
            name = self.attack_effect_names.get(effect_id)
            if not name:
                continue
            total += self.cost("GS_AttackEffects", "Weapon", range_label, name)
        return total

    def attack_line(self, range_kind: RangeKind) -> AttackLineCost:
        values = self.values
        type_label = self.type_label
        range_label = RANGE_LABELS[range_kind]
        is_weapon = values.type == ItemType.WEAPON

        line = AttackLineCost(range_category=range_kind)
        line.target_cost += self.cost("RangeCategory", type_label, range_label)

        if range_kind == RangeKind.MELEE:
            targets = values.melee_targets if values.melee_targets is not None else 1
            line.potency_cost += self.potency(values.melee_physical_strength, values.melee_mental_strength)
            line.choice_cost += self.cost("MeleeTargets", type_label, format_number(targets))
            line.type_cost += self.damage_type_count(range_label, values.melee_damage_type_ids)
            if is_weapon:
                line.gs_cost += (
                    self.gs_attack_effects(range_label, values.attack_effect_melee_ids) * max(1, targets)
                )

        elif range_kind == RangeKind.RANGED:
            line.potency_cost += self.potency(values.ranged_physical_strength, values.ranged_mental_strength)
            if values.ranged_targets:
                line.choice_cost += self.cost("RangedTargets", type_label, format_number(values.ranged_targets))
            if values.ranged_distance_feet:
                line.target_cost += self.cost(
                    "RangedDistanceFt", type_label, format_number(values.ranged_distance_feet)
                )
            line.type_cost += self.damage_type_count(range_label, values.ranged_damage_type_ids)
            if is_weapon:
                targets = values.ranged_targets if values.ranged_targets is not None else 1
                line.gs_cost += (
                    self.gs_attack_effects(range_label, values.attack_effect_ranged_ids) * max(1, targets)
                )

        else:
            line.potency_cost += self.potency(values.aoe_physical_strength, values.aoe_mental_strength)
            if values.aoe_count:
                line.choice_cost += self.cost("AoECount", type_label, format_number(values.aoe_count))
            if values.aoe_center_range_feet:
                line.target_cost += self.cost(
                    "AoECenterRangeFt", type_label, format_number(values.aoe_center_range_feet)
                )
            line.target_cost += self.aoe_shape_cost()
            line.type_cost += self.damage_type_count(range_label, values.aoe_damage_type_ids)
            if is_weapon:
                # AoE has no target count, so effects are priced once
                line.gs_cost += self.gs_attack_effects(range_label, values.attack_effect_aoe_ids)

        base = line.target_cost + line.choice_cost
        effect = line.potency_cost + line.type_cost + line.gs_cost
        line.total = max(1, base) * effect
        return line

    def aoe_shape_cost(self) -> float:
        values = self.values
        shape = values.aoe_shape
        if shape == AoEShape.SPHERE and values.aoe_sphere_radius_feet:
            return self.cost("SphereSizeFt", self.type_label, format_number(values.aoe_sphere_radius_feet))
        if shape == AoEShape.CONE and values.aoe_cone_length_feet:
            return self.cost("ConeLengthFt", self.type_label, format_number(values.aoe_cone_length_feet))
        if shape == AoEShape.LINE:
            total = 0
            if values.aoe_line_width_feet:
                total += self.cost("LineWidthFt", self.type_label, format_number(values.aoe_line_width_feet))
            if values.aoe_line_length_feet:
                total += self.cost("LineLengthFt", self.type_label, format_number(values.aoe_line_length_feet))
            return total
        return 0

    # -- additive contributions ---------------------------------------------

    def modifiers(self) -> float:
        if not self.type_label:
            return 0
        total = 0
        for mod in self.values.global_attribute_modifiers:
            name = (mod.attribute or "").strip()
            magnitude = mod.amount
            if not name or magnitude is None or not is_finite(magnitude) or magnitude <= 0:
                continue
            total += find_attribute_cost(self.rows, self.type_label, name, magnitude)
        return total

    def protection(self, label: str) -> float:
        total = 0
        if _positive(self.values.ppv):
            total += self.cost("Stat", "PPV", label, self.values.ppv)
        if _positive(self.values.mpv):
            total += self.cost("Stat", "MPV", label, self.values.mpv)
        return total

    def auras(self, label: str) -> float:
        total = 0
        if _positive(self.values.aura_physical):
            total += self.cost("Aura_Physical", label, format_number(self.values.aura_physical))
        if _positive(self.values.aura_mental):
            total += self.cost("Aura_Mental", label, format_number(self.values.aura_mental))
        return total

    def attributes(self) -> float:
        values = self.values
        context = self.context
        total = 0

        if values.type == ItemType.WEAPON:
            names = {a.id: a.name for a in context.weapon_attributes}
            for attribute_id in values.weapon_attribute_ids:
                name = (names.get(attribute_id) or "").strip()
                if not name:
                    continue
                match = WEAPON_ATTRIBUTE_MAGNITUDE.match(name)
                if match:
                    total += self.cost("WeaponAttributes", "Weapon", match.group(1).strip(), int(match.group(2)))
                else:
                    total += self.cost("WeaponAttributes", "Weapon", name)

        elif values.type == ItemType.ARMOR:
            names = {a.id: a.name for a in context.armor_attributes}
            for attribute_id in values.armor_attribute_ids:
                if attribute_id in names:
                    total += self.cost("ArmorAttributes", "Armor", names[attribute_id])

        elif values.type == ItemType.SHIELD:
            names = {a.id: a.name for a in context.shield_attributes}
            for attribute_id in values.shield_attribute_ids:
                if attribute_id in names:
                    total += self.cost("ShieldAttributes", "Shield", names[attribute_id])

        return total

    def defence_effects(self, label: str) -> float:
        names = {fx.id: fx.name for fx in self.context.def_effects}
        return sum(
            self.cost("GS_DefEffects", label, names[effect_id])
            for effect_id in self.values.def_effect_ids
            if effect_id in names
        )

    def options(self, label: str) -> float:
        warding = {o.id: o.name for o in self.context.warding_options}
        sanctified = {o.id: o.name for o in self.context.sanctified_options}
        total = 0
        for option_id in self.values.warding_option_ids:
            if option_id in warding:
                total += self.cost("WardingOptions", label, warding[option_id])
        for option_id in self.values.sanctified_option_ids:
            if option_id in sanctified:
                total += self.cost("SanctifiedOptions", label, sanctified[option_id])
        return total

    def vrp(self, label: str) -> float:
        damage_names = {dt.id: dt.name for dt in self.context.damage_types}
        total = 0
        for entry in self.context.vrp_entries:
            damage_name = damage_names.get(entry.damage_type_id)
            effect_label = VRP_LABELS.get(entry.effect_kind)
            if not damage_name or not effect_label:
                continue
            selector = f"{effect_label} {format_number(entry.magnitude)} {damage_name}"
            total += self.cost("VRPOptions", label, selector)
        return total


def calculate_raw_spent(
    values: ForgeFormValues,
    cost_rows: list[ForgeCostRow],
    context: ForgeCalculatorContext,
) -> ForgeCostBreakdown:
    """Raw FP spend (before the item multiplier), broken down by contribution."""
    pricer = _Pricer(values, cost_rows, context)
    breakdown = ForgeCostBreakdown()

    breakdown.modifier_cost = pricer.modifiers()

    if is_weapon_like(values):
        for range_kind in dict.fromkeys(values.range_categories):
            breakdown.attack_lines.append(pricer.attack_line(range_kind))
        breakdown.attack_cost = sum(line.total for line in breakdown.attack_lines)

    if values.type in (ItemType.ARMOR, ItemType.SHIELD):
        label = TYPE_LABELS[values.type]
        breakdown.protection_cost = pricer.protection(label)
        breakdown.aura_cost = pricer.auras(label)
        breakdown.defence_effect_cost = pricer.defence_effects(label)
        breakdown.option_cost = pricer.options(label)
        breakdown.vrp_cost = pricer.vrp(label)

    breakdown.attribute_cost = pricer.attributes()

    breakdown.raw_spent = (
        breakdown.attack_cost
        + breakdown.modifier_cost
        + breakdown.protection_cost
        + breakdown.aura_cost
        + breakdown.attribute_cost
        + breakdown.defence_effect_cost
        + breakdown.option_cost
        + breakdown.vrp_cost
    )
    return breakdown


def calculate_forge_totals(
    values: ForgeFormValues,
    config_rows: list[ForgeConfigRow],
    cost_rows: list[ForgeCostRow],
    context: ForgeCalculatorContext,
) -> ForgeCalculatorTotals:
    """Budget, spend and remaining FP for an item configuration."""
    total_fp = calculate_total_fp(values, config_rows)
    multiplier = calculate_item_multiplier(values, config_rows)
    raw_spent = calculate_raw_spent(values, cost_rows, context).raw_spent

    spent_fp = raw_spent * multiplier
    remaining_fp = total_fp - spent_fp
    percent_spent = max(0, min(100, spent_fp / total_fp * 100)) if total_fp > 0 else 0

    return ForgeCalculatorTotals(
        total_fp=total_fp,
        spent_fp=spent_fp,
        remaining_fp=remaining_fp,
        percent_spent=percent_spent,
        multiplier=multiplier,
    )
