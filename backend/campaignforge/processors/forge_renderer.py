"""Forge text renderer: descriptor lines to display text."""

import math

from campaignforge.processors.arithmetic import format_number, is_finite
from campaignforge.schemas.descriptor import (
    AoERangeSpec,
    AttackActionLine,
    AttackMode,
    AttributeModToken,
    DescriptorResult,
    DescriptorSection,
    ForgeRenderOptions,
    ItemType,
    MeleeRangeSpec,
    ModifiersLine,
    RangedRangeSpec,
    RenderedSection,
    TextLine,
    WeaponAttributeLine,
)

SHAPE_NOUNS = {
    "SPHERE": ("Sphere", "Spheres"),
    "CONE": ("Cone", "Cones"),
    "LINE": ("Line", "Lines"),
}

RANGE_HEADERS = (
    (MeleeRangeSpec, "Melee:"),
    (RangedRangeSpec, "Ranged:"),
    (AoERangeSpec, "AoE:"),
)


def format_signed(value: int | float) -> str:
    return f"+{format_number(value)}" if value >= 0 else format_number(value)


def plural(count: int | float, singular: str, plural_word: str | None = None) -> str:
    if count == 1:
        return singular
    return plural_word or f"{singular}s"


def join_mods(mods: list[AttributeModToken]) -> str:
    """Join as "+1 to Attack, +2 to Defence and +1 to Support"."""
    parts = [f"{format_signed(mod.magnitude)} to {mod.attribute_name}" for mod in mods]
    if len(parts) <= 1:
        return "".join(parts)
    return f"{', '.join(parts[:-1])} and {parts[-1]}"


def join_with_comma_or(parts: list[str]) -> str:
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return f"{', '.join(parts[:-1])}, or {parts[-1]}"


def item_wording(item_type: ItemType) -> tuple[str, str]:
    """(verb, noun) for "Whilst <verb> this <noun>"."""
    if item_type == ItemType.WEAPON:
        return "wielding", "weapon"
    if item_type == ItemType.SHIELD:
        return "wielding", "shield"
    if item_type == ItemType.ARMOR:
        return "wearing", "armor"
    return "wearing", "item"


def _positive_number(value) -> int | float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if value > 0 else None


def aoe_geometry_text(spec: AoERangeSpec) -> str:
    geometry = spec.geometry
    radius = _positive_number(geometry.get("radius"))
    length = _positive_number(geometry.get("length"))
    width = _positive_number(geometry.get("width"))

    if radius:
        return f"{format_number(radius)}ft"
    if spec.shape.value == "LINE" and length and width:
        return f"{format_number(length)}ft × {format_number(width)}ft"
    if length:
        return f"{format_number(length)}ft"
    return ""


def range_text(spec) -> str:
    if isinstance(spec, MeleeRangeSpec):
        return f"{format_number(spec.targets)} adjacent {plural(spec.targets, 'target')}"

    if isinstance(spec, RangedRangeSpec):
        return (
            f"{format_number(spec.targets)} {plural(spec.targets, 'target')} "
            f"within {format_number(spec.distance)}ft"
        )

    count = spec.count
    count_text = f"up to {format_number(count)} ×" if count > 1 else f"{format_number(count)} ×"
    singular, plural_word = SHAPE_NOUNS[spec.shape.value]
    shape_text = plural(count, singular, plural_word)

    geometry = aoe_geometry_text(spec)
    geometry_part = f"{geometry} " if geometry else ""

    if spec.center_range == 0:
        origin = "centered on yourself" if spec.shape.value == "SPHERE" else "emanating from yourself"
        return f"{count_text} {geometry_part}{shape_text} {origin}"
    return f"{count_text} {geometry_part}{shape_text} within {format_number(spec.center_range)}ft"


def skill_text(options: ForgeRenderOptions) -> str:
    override = options.weapon_skill_dice_override
    if (
        override is not None
        and not isinstance(override, bool)
        and is_finite(override)
        and override > 0
    ):
        return f"{math.trunc(override)} dice"
    return "weapon skill dice"


def damage_text(line: AttackActionLine) -> str:
    clauses = []
    for entry in line.damage_entries:
        wound = "wound" if entry.amount == 1 else "wounds"
        mode = "mental" if entry.mode == AttackMode.MENTAL else "physical"
        clauses.append(f"{format_number(entry.amount)} {mode} {entry.damage_type} {wound}")
    if not clauses:
        return "0 damage wounds"
    return " and ".join(clauses)


def range_header(line: AttackActionLine) -> str:
    for spec_type, header in RANGE_HEADERS:
        if any(isinstance(spec, spec_type) for spec in line.ranges):
            return header
    return ""


def render_attack_action(line: AttackActionLine, options: ForgeRenderOptions) -> str:
    joined = join_with_comma_or([range_text(spec) for spec in line.ranges])
    choose = f"Choose {joined}" if joined else "Choose a target"
    noun = "shield" if line.item_type == ItemType.SHIELD else "weapon"

    text = (
        f"{choose} and roll {skill_text(options)}. "
        f"This {noun} inflicts {damage_text(line)} per success."
    )

    effects = list(dict.fromkeys(e.strip() for e in line.gs_attack_effects if e and e.strip()))
    if effects:
        stacks = join_with_comma_or([f"1 stack of {name}" for name in effects])
        text = f"{text} Each greater success inflicts {stacks}."

    if options.range_header:
        return f"{range_header(line)}||{text}"
    return text


def render_forge_line(line, options: ForgeRenderOptions | None = None) -> str:
    """Render one descriptor line. Unknown line kinds render as an empty string."""
    options = options or ForgeRenderOptions()

    if isinstance(line, TextLine):
        return line.text or ""

    if isinstance(line, ModifiersLine):
        verb, noun = item_wording(line.item_type)
        return f"Whilst {verb} this {noun}, the wielder gains {join_mods(line.mods)}."

    if isinstance(line, WeaponAttributeLine):
        return line.text if line.text.strip() else ""

    if isinstance(line, AttackActionLine):
        return render_attack_action(line, options)

    return ""


def render_forge_section(
    section: DescriptorSection, options: ForgeRenderOptions | None = None
) -> RenderedSection:
    lines = [render_forge_line(line, options) for line in section.lines]
    return RenderedSection(title=section.title, lines=[line for line in lines if line])


def render_forge_result(
    result: DescriptorResult, options: ForgeRenderOptions | None = None
) -> list[RenderedSection]:
    """Render every section, dropping those left with no text."""
    rendered = [render_forge_section(section, options) for section in result.sections]
    return [section for section in rendered if section.lines]
