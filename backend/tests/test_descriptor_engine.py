from campaignforge.processors.descriptor_engine import (
    build_descriptor_result,
    parse_attribute_name,
    resolve_vrp_conflicts,
    VrpRule,
)
from campaignforge.processors.forge_renderer import render_forge_result
from campaignforge.schemas.descriptor import (
    AttackActionLine,
    AttackMode,
    DescriptorInput,
    DescriptorSectionId,
    ItemType,
    VRPEffectKind,
)


def section(result, section_id):
    return next((s for s in result.sections if s.id == section_id), None)


def line_texts(result, section_id):
    return [line.text for line in section(result, section_id).lines]


def test_armor_with_only_ppv_has_a_single_defence_line():
    result = build_descriptor_result(DescriptorInput(item_type=ItemType.ARMOR, ppv=3, mpv=0))

    assert [s.id for s in result.sections] == [DescriptorSectionId.DEFENCE]
    assert line_texts(result, DescriptorSectionId.DEFENCE) == [
        "Whilst wearing this armor, increase your Physical Protection by 3."
    ]
    assert result.warnings is None

    rendered = render_forge_result(result)
    assert len(rendered) == 1
    assert rendered[0].title == "Defence"
    assert rendered[0].lines == ["Whilst wearing this armor, increase your Physical Protection by 3."]


def test_defence_line_variants():
    both = build_descriptor_result(DescriptorInput(item_type=ItemType.ARMOR, ppv=3, mpv=2))
    assert line_texts(both, DescriptorSectionId.DEFENCE) == [
        "Whilst wearing this armor, increase your Physical Protection by 3, and Mental Protection by 2."
    ]

    mental = build_descriptor_result(DescriptorInput(item_type=ItemType.SHIELD, mpv=1))
    assert line_texts(mental, DescriptorSectionId.DEFENCE) == [
        "Whilst wielding this shield, increase your Mental Protection by 1."
    ]

    neither = build_descriptor_result(DescriptorInput(item_type=ItemType.ARMOR))
    assert neither.sections == []


def test_defence_sections_only_for_armor_and_shields():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        ppv=3,
        def_effects=["Stagger"],
        vrp_entries=[{"effect_kind": "RESISTANCE", "magnitude": 2, "damage_type": "Fire"}],
    ))
    assert result.sections == []


def test_modifiers_dedupe_last_wins_and_sort():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        global_attribute_modifiers=[
            {"attribute": "Defence", "amount": 1},
            {"attribute": "attack", "amount": 2},
            {"attribute": "Defence", "amount": 3},
            {"attribute": "", "amount": 5},
        ],
    ))

    line = section(result, DescriptorSectionId.MODIFIERS).lines[0]
    assert [(m.attribute_name, m.magnitude) for m in line.mods] == [("attack", 2), ("Defence", 3)]


def test_vrp_later_entry_replaces_opposite_polarity():
    vulnerability = {"effect_kind": "VULNERABILITY", "magnitude": 2, "damage_type": "Fire"}
    resistance = {"effect_kind": "RESISTANCE", "magnitude": 3, "damage_type": "Fire"}

    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.ARMOR, vrp_entries=[vulnerability, resistance]
    ))
    assert line_texts(result, DescriptorSectionId.VRP) == [
        "Whilst wearing this armor, you gain +3 to Defence rolls against Fire attacks."
    ]

    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.ARMOR, vrp_entries=[resistance, vulnerability]
    ))
    assert line_texts(result, DescriptorSectionId.VRP) == [
        "Whilst wearing this armor, you suffer −2 to Defence rolls against Fire attacks."
    ]


def test_vrp_same_kind_keeps_max_and_sorts():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.SHIELD,
        vrp_entries=[
            {"effect_kind": "resistance", "magnitude": 1, "damage_type": "Fire"},
            {"effect_kind": "RESISTANCE", "magnitude": 3, "damage_type": "Fire"},
            {"effect_kind": "RESISTANCE", "magnitude": 2, "damage_type": "Fire"},
            {"effect_kind": "PROTECTION", "magnitude": 2, "damage_type": "Cold"},
            {"effect_kind": "PROTECTION", "magnitude": 0, "damage_type": "Acid"},
            {"effect_kind": "RESISTANCE", "magnitude": 1, "damage_type": "  "},
            {"effect_kind": "IMMUNITY", "magnitude": 1, "damage_type": "Acid"},
        ],
    ))
    assert line_texts(result, DescriptorSectionId.VRP) == [
        "Whilst wielding this shield, you gain +2 dice to Defence rolls against Cold attacks.",
        "Whilst wielding this shield, you gain +3 to Defence rolls against Fire attacks.",
    ]


def test_vrp_vulnerability_clears_resistance_and_protection():
    rules = [
        VrpRule(VRPEffectKind.RESISTANCE, 1, "Fire"),
        VrpRule(VRPEffectKind.PROTECTION, 1, "Fire"),
        VrpRule(VRPEffectKind.RESISTANCE, 2, "Cold"),
        VrpRule(VRPEffectKind.VULNERABILITY, 1, "Fire"),
    ]
    assert resolve_vrp_conflicts(rules) == [
        VrpRule(VRPEffectKind.RESISTANCE, 2, "Cold"),
        VrpRule(VRPEffectKind.VULNERABILITY, 1, "Fire"),
    ]


def test_greater_defence_effects_deduped_and_sorted():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.ARMOR, def_effects=["Stagger", "blind", "Stagger", " "]
    ))
    assert line_texts(result, DescriptorSectionId.GREATER_DEFENCE_EFFECTS) == [
        "Greater successes on Defence rolls grant you 1 stack of blind.",
        "Greater successes on Defence rolls grant you 1 stack of Stagger.",
    ]


def test_parse_attribute_name():
    assert parse_attribute_name("Reload 5") == ("Reload", 5)
    assert parse_attribute_name("Keen") == ("Keen", None)
    assert parse_attribute_name("  ") == ("", None)


def test_weapon_attributes_sorted_prefixed_and_warned():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        weapon_attributes=[
            {"name": "Reload 5", "descriptor_template": "Spend [AttributeValue] actions to reload."},
            {"name": "Bulky"},
            {"name": "Keen", "descriptor_template": "Keen: Critical on [Mystery]."},
            {"name": "Sharp", "descriptor_template": "+[AttributeValue] damage."},
        ],
    ))

    assert line_texts(result, DescriptorSectionId.WEAPON_ATTRIBUTES) == [
        "Keen: Critical on [Mystery].",
        "Reload: Spend 5 actions to reload.",
        "Sharp: +? damage.",
    ]
    assert result.warnings == [
        'Weapon Attribute "Bulky" has no descriptorTemplate.',
        "Weapon Attribute template contains unknown token(s): [Mystery]",
        "Weapon Attribute template uses [AttributeValue] but no value was found in the attribute name.",
    ]


def test_weapon_attribute_tokens_use_enabled_ranges():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        weapon_attributes=[{
            "name": "Cleaving",
            "descriptor_template": (
                "[DamageTypes] hits deal [ChosenPhysicalStrength] to [MeleeTargets] more; "
                "effects: [GS_AttackEffects]; range: [ChosenRange]."
            ),
            "strength_source": "MELEE",
            "range_source": "RANGED",
        }],
        melee={
            "enabled": True,
            "targets": 2,
            "physical_strength": 3,
            "damage_types": ["Slashing", "Fire"],
            "gs_attack_effects": ["Bleed"],
        },
        ranged={"enabled": False, "damage_types": ["Cold"], "gs_attack_effects": ["Chill"]},
    ))

    assert line_texts(result, DescriptorSectionId.WEAPON_ATTRIBUTES) == [
        "Cleaving: Fire, Slashing hits deal 3 to 2 more; effects: Bleed; range: Ranged."
    ]
    assert result.warnings is None


def test_attack_effects_substitute_before_damage_types():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        weapon_attributes=[{
            "name": "Surging",
            "descriptor_template": "Greater successes cause [GS_AttackEffects].",
        }],
        melee={
            "enabled": True,
            "damage_types": ["Fire"],
            "gs_attack_effects": ["[DamageTypes] Surge"],
        },
    ))

    assert line_texts(result, DescriptorSectionId.WEAPON_ATTRIBUTES) == [
        "Surging: Greater successes cause Fire Surge."
    ]


def test_weapon_attributes_ignored_on_armor():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.ARMOR,
        weapon_attributes=[{"name": "Keen", "descriptor_template": "Sharp."}],
    ))
    assert result.sections == []


def test_attribute_order_independent_of_input_order():
    attributes = [
        {"name": "Reload 5", "descriptor_template": "Slow."},
        {"name": "Reload 2", "descriptor_template": "Quick."},
        {"name": "Keen", "descriptor_template": "Sharp."},
    ]
    forward = build_descriptor_result(DescriptorInput(item_type=ItemType.SHIELD, weapon_attributes=attributes))
    backward = build_descriptor_result(
        DescriptorInput(item_type=ItemType.SHIELD, weapon_attributes=list(reversed(attributes)))
    )

    assert forward == backward
    assert line_texts(forward, DescriptorSectionId.WEAPON_ATTRIBUTES) == [
        "Keen: Sharp.",
        "Reload: Quick.",
        "Reload: Slow.",
    ]


def test_armor_attribute_tokens_and_warding_fallback():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.ARMOR,
        mpv=2,
        aura_mental=1,
        warding_options=["Spirits", "Undead"],
        armor_attributes=[
            {"name": "Warding", "descriptor_template": "Ignore the first hit from [AttributeValue] each round."},
            {"name": "Heavy"},
            {"name": "Glowing", "descriptor_template": "Aura [Aura], protection [ChosenPV], [AuraPhysical]."},
            {"name": "Odd", "descriptor_template": "[AttributeValue] and [Nope]"},
        ],
    ))

    assert line_texts(result, DescriptorSectionId.ARMOR_ATTRIBUTES) == [
        "Glowing: Aura 1, protection 2, ?.",
        "Odd: ? and [Nope]",
        "Warding: Ignore the first hit from Spirits, Undead each round.",
    ]
    assert result.warnings == [
        'Armor Attribute "Heavy" has no descriptorTemplate.',
        "Odd: Armor Attribute template uses [AttributeValue] but no value was found in the attribute name.",
        "Odd: Armor Attribute template contains unknown token(s): [Nope]",
    ]


def test_shield_attribute_uses_explicit_value():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.SHIELD,
        shield_attributes=[{
            "name": "Bash",
            "descriptor_template": "Bash: add [AttributeValue] to shove attempts.",
            "attribute_value": 2,
        }],
    ))
    assert line_texts(result, DescriptorSectionId.SHIELD_ATTRIBUTES) == ["Bash: add 2 to shove attempts."]


def test_attack_action_gating():
    melee = {"enabled": True, "physical_strength": 0, "mental_strength": 0, "damage_types": ["Slashing"]}
    silent = build_descriptor_result(DescriptorInput(item_type=ItemType.WEAPON, melee=melee))
    assert silent.sections == []

    melee["physical_strength"] = 3
    result = build_descriptor_result(DescriptorInput(item_type=ItemType.WEAPON, melee=melee))
    lines = section(result, DescriptorSectionId.ATTACK_ACTIONS).lines
    assert len(lines) == 1
    assert isinstance(lines[0], AttackActionLine)
    assert [(e.amount, e.damage_type) for e in lines[0].damage_entries] == [(3, "Slashing")]


def test_attack_ranges_without_damage_types_or_shape_are_skipped():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        melee={"enabled": True, "physical_strength": 2},
        aoe={"enabled": True, "physical_strength": 2, "damage_types": ["Fire"], "shape": ""},
        ranged={"enabled": False, "physical_strength": 2, "damage_types": ["Fire"]},
    ))
    assert result.sections == []


def test_attack_damage_entries_per_mode():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        melee={
            "enabled": True,
            "physical_strength": 2,
            "mental_strength": 0,
            "damage_types": [
                {"name": "fear", "mode": "MENTAL"},
                "Slashing",
                "fire",
                "Fire",
            ],
        },
    ))
    line = section(result, DescriptorSectionId.ATTACK_ACTIONS).lines[0]
    assert [(e.damage_type, e.mode) for e in line.damage_entries] == [
        ("Fire", AttackMode.PHYSICAL),
        ("Slashing", AttackMode.PHYSICAL),
    ]


def test_each_enabled_range_is_its_own_attack_line():
    result = build_descriptor_result(DescriptorInput(
        item_type=ItemType.WEAPON,
        melee={"enabled": True, "physical_strength": 3, "damage_types": ["Slashing"]},
        ranged={"enabled": True, "targets": 2, "distance": 30, "physical_strength": 1, "damage_types": ["Piercing"]},
    ))
    lines = section(result, DescriptorSectionId.ATTACK_ACTIONS).lines
    assert [line.ranges[0].kind for line in lines] == ["MELEE", "RANGED"]


def test_sections_sorted_by_order_and_deterministic():
    descriptor = DescriptorInput(
        item_type=ItemType.SHIELD,
        global_attribute_modifiers=[{"attribute": "Defence", "amount": 1}],
        ppv=2,
        def_effects=["Stagger"],
        vrp_entries=[{"effect_kind": "PROTECTION", "magnitude": 1, "damage_type": "Fire"}],
        melee={"enabled": True, "physical_strength": 2, "damage_types": ["Bludgeoning"]},
    )
    first = build_descriptor_result(descriptor)
    second = build_descriptor_result(descriptor)

    assert first.model_dump_json() == second.model_dump_json()
    assert [s.order for s in first.sections] == [10, 15, 20, 30, 50]
    assert [s.title for s in first.sections] == [
        "Modifiers",
        "VRP",
        "Defence",
        "Greater Defence Effects",
        "Attack Actions",
    ]


def test_input_is_not_mutated():
    descriptor = DescriptorInput(
        item_type=ItemType.WEAPON,
        melee={"enabled": True, "physical_strength": 2, "damage_types": ["b", "A", "a"]},
    )
    before = descriptor.model_dump()
    build_descriptor_result(descriptor)
    assert descriptor.model_dump() == before
