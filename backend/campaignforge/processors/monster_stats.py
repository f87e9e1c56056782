"""
Monster derived stats.

Attribute dice drive skill dice counts and the trait template context. Natural
attack configurations are mapped onto a DescriptorInput so monster attacks
render through the same descriptor engine as forged weapons.
"""

import math
from typing import Any

from campaignforge.processors.trait_templates import js_round
from campaignforge.schemas.descriptor import (
    AoEAttackInput,
    DescriptorInput,
    ItemType,
    MeleeAttackInput,
    RangedAttackInput,
)
from campaignforge.schemas.monster import (
    DiceSize,
    MonsterDerivedStats,
    MonsterProfile,
    NaturalAttackConfig,
)

DICE_SIZE_VALUES = {
    DiceSize.D4: 4,
    DiceSize.D6: 6,
    DiceSize.D8: 8,
    DiceSize.D10: 10,
    DiceSize.D12: 12,
}


def dice_size_to_number(die: DiceSize | None) -> int:
    if not die:
        return 0
    return DICE_SIZE_VALUES[DiceSize(die)]


def skill_dice_contribution(die: DiceSize | None) -> int:
    """Half the die face, rounded half-up."""
    numeric = dice_size_to_number(die)
    if not numeric:
        return 0
    return js_round(numeric / 2)


def _paired_dice_count(first: DiceSize | None, second: DiceSize | None) -> int:
    total = skill_dice_contribution(first) + skill_dice_contribution(second)
    return max(1, math.ceil(total / 2))


def weapon_skill_dice(attack_die: DiceSize | None, bravery_die: DiceSize | None) -> int:
    return _paired_dice_count(attack_die, bravery_die)


def armor_skill_dice(defence_die: DiceSize | None, fortitude_die: DiceSize | None) -> int:
    return _paired_dice_count(defence_die, fortitude_die)


def willpower_dice(support_die: DiceSize | None, bravery_die: DiceSize | None) -> int:
    return _paired_dice_count(support_die, bravery_die)


def dodge_value(
    defence_die: DiceSize | None,
    intellect_die: DiceSize | None,
    level: int | float,
    physical_weight: int | float,
) -> int | float:
    return dice_size_to_number(defence_die) + dice_size_to_number(intellect_die) + level - physical_weight


def derive_stats(monster: MonsterProfile) -> MonsterDerivedStats:
    return MonsterDerivedStats(
        weapon_skill=weapon_skill_dice(monster.attack_die, monster.bravery_die),
        armor_skill=armor_skill_dice(monster.defence_die, monster.fortitude_die),
        willpower=willpower_dice(monster.support_die, monster.bravery_die),
        dodge=dodge_value(monster.defence_die, monster.intellect_die, monster.level, monster.physical_weight),
    )


def trait_context(monster: MonsterProfile) -> dict[str, Any]:
    """Token values available to monster trait templates."""
    stats = derive_stats(monster)
    return {
        "MonsterName": monster.name or None,
        "MonsterLevel": monster.level,
        "MonsterAttack": monster.attack_die.value,
        "MonsterDefence": monster.defence_die.value,
        "MonsterFortitude": monster.fortitude_die.value,
        "MonsterIntellect": monster.intellect_die.value,
        "MonsterSupport": monster.support_die.value,
        "MonsterBravery": monster.bravery_die.value,
        "MonsterArmorSkill": stats.armor_skill,
        "MonsterWeaponSkill": stats.weapon_skill,
        "MonsterWillpower": stats.willpower,
        "MonsterDodge": stats.dodge,
    }


def natural_attack_to_descriptor(config: NaturalAttackConfig) -> DescriptorInput:
    """Map a natural attack onto a weapon descriptor input."""
    melee = ranged = aoe = None

    if config.melee:
        melee = MeleeAttackInput(
            enabled=config.melee.enabled,
            targets=config.melee.targets,
            physical_strength=config.melee.physical_strength,
            mental_strength=config.melee.mental_strength,
            damage_types=config.melee.damage_types,
            gs_attack_effects=config.melee.attack_effects,
        )

    if config.ranged:
        ranged = RangedAttackInput(
            enabled=config.ranged.enabled,
            targets=config.ranged.targets,
            distance=config.ranged.distance,
            physical_strength=config.ranged.physical_strength,
            mental_strength=config.ranged.mental_strength,
            damage_types=config.ranged.damage_types,
            gs_attack_effects=config.ranged.attack_effects,
        )

    if config.aoe:
        source = config.aoe
        geometry: dict[str, int | float] = {}
        if source.shape.value == "SPHERE" and source.sphere_radius_feet:
            geometry["radius"] = source.sphere_radius_feet
        elif source.shape.value == "CONE" and source.cone_length_feet:
            geometry["length"] = source.cone_length_feet
        elif source.shape.value == "LINE":
            if source.line_length_feet:
                geometry["length"] = source.line_length_feet
            if source.line_width_feet:
                geometry["width"] = source.line_width_feet

        aoe = AoEAttackInput(
            enabled=source.enabled,
            count=source.count,
            center_range=source.center_range,
            shape=source.shape,
            geometry=geometry,
            physical_strength=source.physical_strength,
            mental_strength=source.mental_strength,
            damage_types=source.damage_types,
            gs_attack_effects=source.attack_effects,
        )

    return DescriptorInput(item_type=ItemType.WEAPON, melee=melee, ranged=ranged, aoe=aoe)
