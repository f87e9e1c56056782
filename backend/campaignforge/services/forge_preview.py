"""
Forge preview - runs the pricing and descriptor pipelines on live form values.

Form values refer to picklist entries by id. This module resolves those ids
against a picklist snapshot and hands plain, already-resolved data to the
processors.
"""

import logging

from campaignforge.processors.descriptor_engine import build_descriptor_result
from campaignforge.processors.forge_costs import calculate_forge_totals, calculate_raw_spent
from campaignforge.processors.forge_renderer import render_forge_result
from campaignforge.schemas.descriptor import (
    AoEAttackInput,
    AoEShape,
    AttributeModifierInput,
    DamageTypeRef,
    DefenceAttributeInput,
    DescriptorInput,
    ForgeRenderOptions,
    MeleeAttackInput,
    RangedAttackInput,
    RangeKind,
    VrpEntryInput,
    WeaponAttributeInput,
)
from campaignforge.schemas.forge import (
    ForgeCalculatorContext,
    ForgeFormValues,
    ForgePicklists,
    ForgePreviewResponse,
    VrpEntryForm,
)

logger = logging.getLogger(__name__)


def _names_by_ids(options: list, ids: list[int]) -> list[str]:
    by_id = {option.id: option.name for option in options}
    return [by_id[i] for i in ids if by_id.get(i)]


def damage_type_refs(picklists: ForgePicklists, ids: list[int]) -> list[DamageTypeRef]:
    """Resolve damage type ids, first occurrence of a name wins."""
    by_id = {dt.id: dt for dt in picklists.damage_types}
    refs: dict[str, DamageTypeRef] = {}
    for damage_type_id in ids:
        damage_type = by_id.get(damage_type_id)
        if damage_type is None or not damage_type.name:
            continue
        refs.setdefault(
            damage_type.name.lower(),
            DamageTypeRef(name=damage_type.name, mode=damage_type.attack_mode),
        )
    return sorted(refs.values(), key=lambda ref: ref.name.casefold())


def aoe_geometry(values: ForgeFormValues) -> dict[str, int | float]:
    """Keep only the geometry that applies to the selected shape."""
    geometry: dict[str, int | float] = {}
    if values.aoe_shape == AoEShape.SPHERE and values.aoe_sphere_radius_feet:
        geometry["radius"] = values.aoe_sphere_radius_feet
    elif values.aoe_shape == AoEShape.CONE and values.aoe_cone_length_feet:
        geometry["length"] = values.aoe_cone_length_feet
    elif values.aoe_shape == AoEShape.LINE:
        if values.aoe_line_length_feet:
            geometry["length"] = values.aoe_line_length_feet
        if values.aoe_line_width_feet:
            geometry["width"] = values.aoe_line_width_feet
    return geometry


def shield_attribute_value(picklists: ForgePicklists, name: str) -> float | None:
    """
    Shield attribute values live on the ShieldAttributes cost rows.

    Rows are keyed either by selector1=<name>, or by selector1="TBC" with
    selector2=<name>.
    """
    for row in picklists.costs:
        if row.category != "ShieldAttributes":
            continue
        selector1 = row.selector1 or ""
        selector2 = row.selector2 or ""
        matched = selector2 == name if selector1 == "TBC" else selector1 == name
        if matched:
            return row.value
    return None


def _selected_weapon_attributes(values: ForgeFormValues, picklists: ForgePicklists) -> list[WeaponAttributeInput]:
    by_id = {attribute.id: attribute for attribute in picklists.weapon_attributes}
    selected = []
    for attribute_id in values.weapon_attribute_ids:
        attribute = by_id.get(attribute_id)
        if attribute is None or not attribute.name.strip():
            continue
        key = str(attribute_id)
        selected.append(WeaponAttributeInput(
            name=attribute.name.strip(),
            descriptor_template=attribute.descriptor_template,
            strength_source=values.weapon_attribute_strength_sources.get(key),
            range_source=values.weapon_attribute_range_selections.get(key),
        ))
    return selected


def _selected_defence_attributes(
    options: list, ids: list[int], picklists: ForgePicklists | None = None
) -> list[DefenceAttributeInput]:
    by_id = {option.id: option for option in options}
    selected = []
    for attribute_id in ids:
        attribute = by_id.get(attribute_id)
        if attribute is None or not attribute.name.strip():
            continue
        name = attribute.name.strip()
        selected.append(DefenceAttributeInput(
            name=name,
            descriptor_template=attribute.descriptor_template,
            attribute_value=shield_attribute_value(picklists, name) if picklists else None,
        ))
    return selected


def _vrp_inputs(picklists: ForgePicklists, entries: list[VrpEntryForm]) -> list[VrpEntryInput]:
    names = {dt.id: dt.name for dt in picklists.damage_types}
    return [
        VrpEntryInput(
            effect_kind=entry.effect_kind.value,
            magnitude=entry.magnitude,
            damage_type=names[entry.damage_type_id],
        )
        for entry in entries
        if names.get(entry.damage_type_id)
    ]


def build_descriptor_input(
    values: ForgeFormValues,
    picklists: ForgePicklists,
    vrp_entries: list[VrpEntryForm] | None = None,
) -> DescriptorInput:
    """Resolve form ids against the picklists into a descriptor input."""
    ranges = set(values.range_categories)

    return DescriptorInput(
        item_type=values.type,
        global_attribute_modifiers=[
            AttributeModifierInput(attribute=mod.attribute, amount=mod.amount)
            for mod in values.global_attribute_modifiers
        ],
        weapon_attributes=_selected_weapon_attributes(values, picklists),
        ppv=values.ppv or 0,
        mpv=values.mpv or 0,
        aura_physical=values.aura_physical,
        aura_mental=values.aura_mental,
        def_effects=_names_by_ids(picklists.def_effects, values.def_effect_ids),
        armor_attributes=_selected_defence_attributes(picklists.armor_attributes, values.armor_attribute_ids),
        shield_attributes=_selected_defence_attributes(
            picklists.shield_attributes, values.shield_attribute_ids, picklists
        ),
        warding_options=_names_by_ids(picklists.warding_options, values.warding_option_ids),
        sanctified_options=_names_by_ids(picklists.sanctified_options, values.sanctified_option_ids),
        vrp_entries=_vrp_inputs(picklists, vrp_entries or []),
        melee=MeleeAttackInput(
            enabled=RangeKind.MELEE in ranges,
            damage_types=damage_type_refs(picklists, values.melee_damage_type_ids),
            targets=values.melee_targets if values.melee_targets is not None else 1,
            physical_strength=values.melee_physical_strength or 0,
            mental_strength=values.melee_mental_strength or 0,
            gs_attack_effects=_names_by_ids(picklists.attack_effects, values.attack_effect_melee_ids),
        ),
        ranged=RangedAttackInput(
            enabled=RangeKind.RANGED in ranges,
            damage_types=damage_type_refs(picklists, values.ranged_damage_type_ids),
            targets=values.ranged_targets if values.ranged_targets is not None else 1,
            distance=values.ranged_distance_feet or 0,
            physical_strength=values.ranged_physical_strength or 0,
            mental_strength=values.ranged_mental_strength or 0,
            gs_attack_effects=_names_by_ids(picklists.attack_effects, values.attack_effect_ranged_ids),
        ),
        aoe=AoEAttackInput(
            enabled=RangeKind.AOE in ranges,
            damage_types=damage_type_refs(picklists, values.aoe_damage_type_ids),
            count=values.aoe_count if values.aoe_count is not None else 1,
            center_range=values.aoe_center_range_feet or 0,
            shape=values.aoe_shape,
            geometry=aoe_geometry(values),
            physical_strength=values.aoe_physical_strength or 0,
            mental_strength=values.aoe_mental_strength or 0,
            gs_attack_effects=_names_by_ids(picklists.attack_effects, values.attack_effect_aoe_ids),
        ),
    )


def preview_forge_item(
    values: ForgeFormValues,
    picklists: ForgePicklists,
    vrp_entries: list[VrpEntryForm] | None = None,
    options: ForgeRenderOptions | None = None,
) -> ForgePreviewResponse:
    """Totals, cost breakdown, descriptor and rendered text for one item."""
    context = ForgeCalculatorContext.from_picklists(picklists, vrp_entries)

    totals = calculate_forge_totals(values, picklists.config, picklists.costs, context)
    breakdown = calculate_raw_spent(values, picklists.costs, context)

    descriptor = build_descriptor_result(build_descriptor_input(values, picklists, vrp_entries))
    rendered = render_forge_result(descriptor, options)

    logger.debug(
        f"Forge preview for {values.type.value} '{values.name}': "
        f"{totals.spent_fp}/{totals.total_fp} FP, {len(descriptor.sections)} sections"
    )
    return ForgePreviewResponse(
        totals=totals,
        breakdown=breakdown,
        descriptor=descriptor,
        rendered=rendered,
    )
