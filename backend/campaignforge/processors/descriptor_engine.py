"""
Descriptor engine.

Turns a DescriptorInput (one item, or one monster attack profile) into ordered
sections of structured lines. Lines are facts, not prose: the forge renderer
turns them into text. The engine is pure and deterministic; the same input
always gives the same sections, in the same order, with the same warnings.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

from campaignforge.processors.arithmetic import format_number, is_finite
from campaignforge.schemas.descriptor import (
    AoERangeSpec,
    AttackActionLine,
    AttackMode,
    AttributeModToken,
    DamageEntry,
    DefenceAttributeInput,
    DescriptorInput,
    DescriptorResult,
    DescriptorSection,
    DescriptorSectionId,
    ItemType,
    MeleeRangeSpec,
    ModifiersLine,
    RangeAttackInput,
    RangedRangeSpec,
    RangeKind,
    TextLine,
    VRPEffectKind,
    WeaponAttributeInput,
    WeaponAttributeLine,
)

logger = logging.getLogger(__name__)

ATTRIBUTE_NAME_VALUE = re.compile(r'^(.*?)(?:\s+(\d+))$')
LEFTOVER_TOKEN = re.compile(r'\[[^\]]+\]')

UNKNOWN = "?"

# (id, title, order)
SECTIONS: dict[DescriptorSectionId, tuple[str, int]] = {
    DescriptorSectionId.MODIFIERS: ("Modifiers", 10),
    DescriptorSectionId.VRP: ("VRP", 15),
    DescriptorSectionId.DEFENCE: ("Defence", 20),
    DescriptorSectionId.GREATER_DEFENCE_EFFECTS: ("Greater Defence Effects", 30),
    DescriptorSectionId.WEAPON_ATTRIBUTES: ("Weapon Attributes", 40),
    DescriptorSectionId.ARMOR_ATTRIBUTES: ("Armor Attributes", 40),
    DescriptorSectionId.SHIELD_ATTRIBUTES: ("Shield Attributes", 40),
    DescriptorSectionId.ATTACK_ACTIONS: ("Attack Actions", 50),
}

RANGE_LABELS = {
    RangeKind.MELEE: "Melee",
    RangeKind.RANGED: "Ranged",
    RangeKind.AOE: "AoE",
}

ATTACKING_TYPES = (ItemType.WEAPON, ItemType.SHIELD)
DEFENDING_TYPES = (ItemType.ARMOR, ItemType.SHIELD)


def _section(section_id: DescriptorSectionId, lines: list) -> DescriptorSection:
    title, order = SECTIONS[section_id]
    return DescriptorSection(id=section_id, title=title, order=order, lines=lines)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return is_finite(value)


def safe_num(value: Any) -> str:
    return format_number(value) if _is_number(value) else UNKNOWN


def display_value(value: Any) -> str | None:
    if value is None:
        return None
    if _is_number(value):
        return format_number(value)
    return str(value)


def sort_key(text: str) -> tuple[str, str]:
    """Case-insensitive alphabetical order with a stable tie-break."""
    return (text.casefold(), text)


def parse_attribute_name(name: str) -> tuple[str, int | None]:
    """Split a trailing integer off an attribute name: "Reload 5" -> ("Reload", 5)."""
    raw = (name or "").strip()
    if not raw:
        return "", None
    match = ATTRIBUTE_NAME_VALUE.match(raw)
    if not match:
        return raw, None
    base_name = match.group(1).strip()
    value = int(match.group(2))
    if not base_name:
        return raw, value
    return base_name, value


def apply_tokens(template: str, replacements: dict[str, str]) -> str:
    """Plain token substitution, in dictionary order. No arithmetic."""
    text = template
    for token, value in replacements.items():
        text = text.replace(token, value)
    return text


def leftover_tokens(text: str) -> list[str]:
    return list(dict.fromkeys(LEFTOVER_TOKEN.findall(text)))


def with_name_prefix(text: str, base_name: str, full_name: str) -> str:
    """Prefix "BaseName: " unless the rendered text already carries it."""
    lowered = text.lower()
    if lowered.startswith(f"{base_name.lower()}:") or lowered.startswith(f"{full_name.lower()}:"):
        return text
    return f"{base_name}: {text}"


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------

def normalize_modifiers(descriptor: DescriptorInput) -> list[AttributeModToken]:
    """Dedupe by name (last wins) and sort alphabetically."""
    by_name: dict[str, int | float] = {}
    for mod in descriptor.global_attribute_modifiers:
        name = (mod.attribute or "").strip()
        if not name or not _is_number(mod.amount):
            continue
        by_name[name] = mod.amount

    return [
        AttributeModToken(attribute_name=name, magnitude=by_name[name])
        for name in sorted(by_name, key=sort_key)
    ]


def build_modifiers_section(descriptor: DescriptorInput) -> DescriptorSection | None:
    mods = normalize_modifiers(descriptor)
    if not mods:
        return None
    line = ModifiersLine(item_type=descriptor.item_type, mods=mods)
    return _section(DescriptorSectionId.MODIFIERS, [line])


# ---------------------------------------------------------------------------
# Weapon attributes
# ---------------------------------------------------------------------------

def _enabled_ranges(descriptor: DescriptorInput) -> list[RangeAttackInput]:
    blocks = (descriptor.melee, descriptor.ranged, descriptor.aoe)
    return [block for block in blocks if block is not None and block.enabled]


def _aggregate_names(names: list[str]) -> str:
    unique = {name.strip() for name in names if name and name.strip()}
    return ", ".join(sorted(unique)) or UNKNOWN


def weapon_token_values(descriptor: DescriptorInput) -> dict[str, str]:
    """Item-level token values shared by every weapon attribute on the item."""
    melee, ranged, aoe = descriptor.melee, descriptor.ranged, descriptor.aoe
    enabled = _enabled_ranges(descriptor)

    geometry = aoe.geometry if aoe else {}
    shape = aoe.shape.value if aoe and aoe.shape else None

    def strength(block: RangeAttackInput | None, field: str) -> str:
        return safe_num(getattr(block, field)) if block else UNKNOWN

    # substitution follows this order: effects before damage types
    return {
        "[GS_AttackEffects]": _aggregate_names(
            [effect for block in enabled for effect in block.gs_attack_effects]
        ),
        "[DamageTypes]": _aggregate_names([dt.name for block in enabled for dt in block.damage_types]),
        "[MeleeTargets]": safe_num(melee.targets) if melee else UNKNOWN,
        "[RangedTargets]": safe_num(ranged.targets) if ranged else UNKNOWN,
        "[RangedDistanceFeet]": safe_num(ranged.distance) if ranged else UNKNOWN,
        "[AoeCount]": safe_num(aoe.count) if aoe else UNKNOWN,
        "[AoeCenterRangeFeet]": safe_num(aoe.center_range) if aoe else UNKNOWN,
        "[AoeShape]": shape or UNKNOWN,
        "[AoeSphereRadiusFeet]": safe_num(geometry.get("radius")) if shape == "SPHERE" else UNKNOWN,
        "[AoeConeLengthFeet]": safe_num(geometry.get("length")) if shape == "CONE" else UNKNOWN,
        "[AoeLineWidthFeet]": safe_num(geometry.get("width")) if shape == "LINE" else UNKNOWN,
        "[AoeLineLengthFeet]": safe_num(geometry.get("length")) if shape == "LINE" else UNKNOWN,
        "[MeleePhysicalStrength]": strength(melee, "physical_strength"),
        "[MeleeMentalStrength]": strength(melee, "mental_strength"),
        "[RangedPhysicalStrength]": strength(ranged, "physical_strength"),
        "[RangedMentalStrength]": strength(ranged, "mental_strength"),
        "[AoePhysicalStrength]": strength(aoe, "physical_strength"),
        "[AoeMentalStrength]": strength(aoe, "mental_strength"),
    }


def _chosen_strength(shared: dict[str, str], source: RangeKind | None, mode: str) -> str:
    if source is None:
        return UNKNOWN
    prefix = {RangeKind.MELEE: "Melee", RangeKind.RANGED: "Ranged", RangeKind.AOE: "Aoe"}[source]
    return shared[f"[{prefix}{mode}Strength]"]


def render_weapon_attribute(
    attribute: WeaponAttributeInput,
    template: str,
    value: str | None,
    shared: dict[str, str],
) -> tuple[str, list[str]]:
    warnings: list[str] = []

    replacements = {"[AttributeValue]": value if value is not None else UNKNOWN}
    replacements.update(shared)
    replacements["[ChosenPhysicalStrength]"] = _chosen_strength(shared, attribute.strength_source, "Physical")
    replacements["[ChosenMentalStrength]"] = _chosen_strength(shared, attribute.strength_source, "Mental")
    replacements["[ChosenRange]"] = RANGE_LABELS.get(attribute.range_source, UNKNOWN)

    if "[AttributeValue]" in template and value is None:
        warnings.append(
            "Weapon Attribute template uses [AttributeValue] but no value was found in the attribute name."
        )

    text = apply_tokens(template, replacements)

    leftover = leftover_tokens(text)
    if leftover:
        warnings.append(f"Weapon Attribute template contains unknown token(s): {', '.join(leftover)}")

    return text, warnings


def build_weapon_attributes_section(
    descriptor: DescriptorInput, warnings: list[str]
) -> DescriptorSection | None:
    if descriptor.item_type not in ATTACKING_TYPES or not descriptor.weapon_attributes:
        return None

    parsed = []
    for attribute in descriptor.weapon_attributes:
        name = (attribute.name or "").strip()
        if not name:
            continue
        base_name, value = parse_attribute_name(name)
        parsed.append((name, base_name, value, attribute))
    parsed.sort(key=lambda entry: sort_key(f"{entry[1]}::{entry[0]}"))

    shared = weapon_token_values(descriptor)
    lines = []
    for name, base_name, parsed_value, attribute in parsed:
        template = (attribute.descriptor_template or "").strip()
        if not template:
            warnings.append(f'Weapon Attribute "{name}" has no descriptorTemplate.')
            continue

        value = display_value(attribute.attribute_value)
        if value is None:
            value = display_value(parsed_value)

        text, attribute_warnings = render_weapon_attribute(attribute, template, value, shared)
        warnings.extend(attribute_warnings)

        lines.append(WeaponAttributeLine(
            item_type=descriptor.item_type,
            text=with_name_prefix(text, base_name or name, name),
        ))

    if not lines:
        return None
    return _section(DescriptorSectionId.WEAPON_ATTRIBUTES, lines)


# ---------------------------------------------------------------------------
# Armor / shield
# ---------------------------------------------------------------------------

def _defence_wording(item_type: ItemType) -> tuple[str, str]:
    if item_type == ItemType.SHIELD:
        return "wielding", "shield"
    return "wearing", "armor"


def build_defence_section(descriptor: DescriptorInput) -> DescriptorSection | None:
    verb, noun = _defence_wording(descriptor.item_type)
    ppv, mpv = descriptor.ppv, descriptor.mpv
    has_ppv = _is_number(ppv) and ppv > 0
    has_mpv = _is_number(mpv) and mpv > 0

    lead = f"Whilst {verb} this {noun}, increase your"
    if has_ppv and has_mpv:
        text = (
            f"{lead} Physical Protection by {format_number(ppv)}, "
            f"and Mental Protection by {format_number(mpv)}."
        )
    elif has_ppv:
        text = f"{lead} Physical Protection by {format_number(ppv)}."
    elif has_mpv:
        text = f"{lead} Mental Protection by {format_number(mpv)}."
    else:
        return None

    return _section(DescriptorSectionId.DEFENCE, [TextLine(text=text)])


def build_greater_defence_section(descriptor: DescriptorInput) -> DescriptorSection | None:
    names = {name.strip() for name in descriptor.def_effects if name and name.strip()}
    if not names:
        return None
    lines = [
        TextLine(text=f"Greater successes on Defence rolls grant you 1 stack of {name}.")
        for name in sorted(names, key=sort_key)
    ]
    return _section(DescriptorSectionId.GREATER_DEFENCE_EFFECTS, lines)


def _finite_or_none(value: Any) -> int | float | None:
    return value if _is_number(value) else None


def defence_token_values(descriptor: DescriptorInput) -> dict[str, str]:
    ppv, mpv = descriptor.ppv, descriptor.mpv
    aura_physical = _finite_or_none(descriptor.aura_physical)
    aura_mental = _finite_or_none(descriptor.aura_mental)

    if _is_number(ppv) and ppv > 0:
        chosen_pv = ppv
    elif _is_number(mpv) and mpv > 0:
        chosen_pv = mpv
    else:
        chosen_pv = 0

    if aura_physical is not None:
        aura = aura_physical
    elif aura_mental is not None:
        aura = aura_mental
    else:
        aura = 0

    return {
        "[ChosenPV]": safe_num(chosen_pv),
        "[PPV]": safe_num(ppv),
        "[MPV]": safe_num(mpv),
        "[AuraPhysical]": safe_num(aura_physical),
        "[AuraMental]": safe_num(aura_mental),
        "[Aura]": safe_num(aura),
    }


def _joined_options(options: list[str]) -> str | None:
    joined = ", ".join(option.strip() for option in options if option and option.strip())
    return joined or None


def defence_attribute_value(
    descriptor: DescriptorInput,
    attribute: DefenceAttributeInput,
    base_name: str,
    parsed_value: int | None,
) -> str | None:
    value = display_value(attribute.attribute_value)
    if value is not None:
        return value
    if parsed_value is not None:
        return format_number(parsed_value)
    if base_name == "Warding":
        return _joined_options(descriptor.warding_options)
    if base_name == "Sanctified":
        return _joined_options(descriptor.sanctified_options)
    return None


def build_defence_attributes_section(
    descriptor: DescriptorInput, warnings: list[str]
) -> DescriptorSection | None:
    if descriptor.item_type == ItemType.ARMOR:
        attributes = descriptor.armor_attributes
        section_id = DescriptorSectionId.ARMOR_ATTRIBUTES
        label = "Armor Attribute"
    else:
        attributes = descriptor.shield_attributes
        section_id = DescriptorSectionId.SHIELD_ATTRIBUTES
        label = "Shield Attribute"

    parsed = []
    for attribute in attributes:
        name = (attribute.name or "").strip()
        if not name:
            continue
        base_name, value = parse_attribute_name(name)
        parsed.append((name, base_name, value, attribute))
    parsed.sort(key=lambda entry: sort_key(f"{entry[1]}::{entry[0]}"))

    shared = defence_token_values(descriptor)
    lines = []
    for name, base_name, parsed_value, attribute in parsed:
        template = (attribute.descriptor_template or "").strip()
        if not template:
            warnings.append(f'{label} "{name}" has no descriptorTemplate.')
            continue

        value = defence_attribute_value(descriptor, attribute, base_name, parsed_value)
        if "[AttributeValue]" in template and value is None:
            warnings.append(
                f"{name}: {label} template uses [AttributeValue] but no value was found in the attribute name."
            )

        replacements = {"[AttributeValue]": value if value is not None else UNKNOWN}
        replacements.update(shared)
        text = apply_tokens(template, replacements)

        leftover = leftover_tokens(text)
        if leftover:
            warnings.append(f"{name}: {label} template contains unknown token(s): {', '.join(leftover)}")

        lines.append(TextLine(text=with_name_prefix(text, base_name or name, name)))

    if not lines:
        return None
    return _section(section_id, lines)


# ---------------------------------------------------------------------------
# VRP
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VrpRule:
    """A normalised vulnerability/resistance/protection entry."""
    effect_kind: VRPEffectKind
    magnitude: int | float
    damage_type: str


def normalize_vrp_entries(descriptor: DescriptorInput) -> list[VrpRule]:
    rules = []
    for entry in descriptor.vrp_entries:
        kind = (entry.effect_kind or "").strip().upper()
        if kind not in VRPEffectKind.__members__:
            continue
        damage_type = (entry.damage_type or "").strip()
        if not damage_type or not _is_number(entry.magnitude) or entry.magnitude <= 0:
            continue
        rules.append(VrpRule(VRPEffectKind(kind), entry.magnitude, damage_type))
    return rules


def resolve_vrp_conflicts(rules: list[VrpRule]) -> list[VrpRule]:
    """
    Apply entries in order against each damage type.

    Vulnerability is mutually exclusive with resistance and protection: applying
    one removes the opposite polarity already present. Entries of the same kind
    keep the largest magnitude. Output is sorted by (kind, damage type, magnitude).
    """
    resolved: dict[tuple[VRPEffectKind, str], int | float] = {}
    for rule in rules:
        if rule.effect_kind == VRPEffectKind.VULNERABILITY:
            opposites = (VRPEffectKind.RESISTANCE, VRPEffectKind.PROTECTION)
        else:
            opposites = (VRPEffectKind.VULNERABILITY,)
        for opposite in opposites:
            resolved.pop((opposite, rule.damage_type), None)

        key = (rule.effect_kind, rule.damage_type)
        resolved[key] = max(resolved.get(key, rule.magnitude), rule.magnitude)

    merged = [VrpRule(kind, magnitude, damage_type) for (kind, damage_type), magnitude in resolved.items()]
    merged.sort(key=lambda rule: (rule.effect_kind.value, sort_key(rule.damage_type), rule.magnitude))
    return merged


def vrp_text(rule: VrpRule, prefix: str) -> str:
    magnitude = format_number(rule.magnitude)
    if rule.effect_kind == VRPEffectKind.VULNERABILITY:
        return f"{prefix}, you suffer −{magnitude} to Defence rolls against {rule.damage_type} attacks."
    if rule.effect_kind == VRPEffectKind.RESISTANCE:
        return f"{prefix}, you gain +{magnitude} to Defence rolls against {rule.damage_type} attacks."
    return f"{prefix}, you gain +{magnitude} dice to Defence rolls against {rule.damage_type} attacks."


def build_vrp_section(descriptor: DescriptorInput) -> DescriptorSection | None:
    rules = resolve_vrp_conflicts(normalize_vrp_entries(descriptor))
    if not rules:
        return None
    verb, noun = _defence_wording(descriptor.item_type)
    prefix = f"Whilst {verb} this {noun}"
    return _section(DescriptorSectionId.VRP, [TextLine(text=vrp_text(rule, prefix)) for rule in rules])


# ---------------------------------------------------------------------------
# Attack actions
# ---------------------------------------------------------------------------

def _positive(value: Any) -> bool:
    return _is_number(value) and value > 0


def _range_spec(block: RangeAttackInput, kind: RangeKind):
    if kind == RangeKind.MELEE:
        return MeleeRangeSpec(targets=block.targets if block.targets is not None else 1)
    if kind == RangeKind.RANGED:
        return RangedRangeSpec(
            targets=block.targets if block.targets is not None else 1,
            distance=block.distance if block.distance is not None else 0,
        )
    if not block.shape:
        return None
    return AoERangeSpec(
        count=block.count if block.count is not None else 1,
        center_range=block.center_range if block.center_range is not None else 0,
        shape=block.shape,
        geometry=dict(block.geometry),
    )


def build_attack_line(
    block: RangeAttackInput | None, kind: RangeKind, item_type: ItemType
) -> AttackActionLine | None:
    """One ATTACK_ACTION line for a single range, or None when the range is inert."""
    if block is None or not block.enabled:
        return None

    physical = block.physical_strength
    mental = block.mental_strength
    if not _positive(physical) and not _positive(mental):
        return None

    by_name = {}
    for damage_type in block.damage_types:
        name = (damage_type.name or "").strip()
        if name:
            by_name[name.lower()] = damage_type.model_copy(update={"name": name})
    damage_types = sorted(by_name.values(), key=lambda dt: sort_key(dt.name))
    if not damage_types:
        return None

    effects = {effect.strip() for effect in block.gs_attack_effects if effect and effect.strip()}

    spec = _range_spec(block, kind)
    if spec is None:
        return None

    entries = []
    for damage_type in damage_types:
        if damage_type.mode == AttackMode.MENTAL:
            if _positive(mental):
                entries.append(DamageEntry(amount=mental, mode=damage_type.mode, damage_type=damage_type.name))
        elif _positive(physical):
            entries.append(DamageEntry(amount=physical, mode=damage_type.mode, damage_type=damage_type.name))

    if not entries:
        return None

    return AttackActionLine(
        item_type=item_type,
        ranges=[spec],
        damage_entries=entries,
        gs_attack_effects=sorted(effects, key=sort_key),
    )


def build_attack_section(descriptor: DescriptorInput) -> DescriptorSection | None:
    if descriptor.item_type not in ATTACKING_TYPES:
        return None
    blocks = (
        (descriptor.melee, RangeKind.MELEE),
        (descriptor.ranged, RangeKind.RANGED),
        (descriptor.aoe, RangeKind.AOE),
    )
    lines = []
    for block, kind in blocks:
        line = build_attack_line(block, kind, descriptor.item_type)
        if line is not None:
            lines.append(line)
    if not lines:
        return None
    return _section(DescriptorSectionId.ATTACK_ACTIONS, lines)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_descriptor_result(descriptor: DescriptorInput) -> DescriptorResult:
    """Build the ordered descriptor sections for one item or attack profile."""
    weapon_warnings: list[str] = []
    defence_warnings: list[str] = []

    candidates = [
        build_modifiers_section(descriptor),
        build_weapon_attributes_section(descriptor, weapon_warnings),
    ]
    if descriptor.item_type in DEFENDING_TYPES:
        candidates.extend([
            build_defence_section(descriptor),
            build_greater_defence_section(descriptor),
            build_defence_attributes_section(descriptor, defence_warnings),
            build_vrp_section(descriptor),
        ])
    candidates.append(build_attack_section(descriptor))

    sections = sorted(
        (section for section in candidates if section is not None),
        key=lambda section: section.order,
    )

    warnings = weapon_warnings + defence_warnings
    for warning in warnings:
        logger.debug(f"Descriptor warning: {warning}")

    return DescriptorResult(sections=sections, warnings=warnings or None)
