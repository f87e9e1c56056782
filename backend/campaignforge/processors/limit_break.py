"""Limit break maths: intensity, power ceiling and tier thresholds."""

import math

from campaignforge.schemas.rules import LimitBreakProfile, LimitBreakThresholds

THRESHOLD_PERCENTS = (60, 85, 125)

TIER_PERCENTS = {
    "PUSH": 60,
    "BREAK": 85,
    "TRANSCEND": 125,
}


class LimitBreakProfileError(ValueError):
    """A limit break profile breaks the threshold or fail-forward rules."""


def compute_intensity(success_count: int, potency: int | float) -> int | float:
    return success_count * potency


def compute_power_ceiling(dice_count: int, potency: int | float, personal_dice_max: int) -> int | float:
    return (dice_count + personal_dice_max) * potency


def compute_threshold(power_ceiling: int | float, threshold_percent: int) -> int:
    if threshold_percent not in THRESHOLD_PERCENTS:
        raise LimitBreakProfileError("thresholdPercent must be one of 60, 85, or 125")
    return math.ceil(power_ceiling * threshold_percent / 100)


def tier_thresholds(power_ceiling: int | float) -> LimitBreakThresholds:
    return LimitBreakThresholds(
        power_ceiling=power_ceiling,
        push=compute_threshold(power_ceiling, TIER_PERCENTS["PUSH"]),
        break_=compute_threshold(power_ceiling, TIER_PERCENTS["BREAK"]),
        transcend=compute_threshold(power_ceiling, TIER_PERCENTS["TRANSCEND"]),
    )


def _has_id(value: str | None) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_profile(profile: LimitBreakProfile) -> None:
    """Raise LimitBreakProfileError if the profile is inconsistent."""
    if profile.threshold_percent not in THRESHOLD_PERCENTS:
        raise LimitBreakProfileError("thresholdPercent must be one of 60, 85, or 125")

    has_effect = _has_id(profile.fail_forward_effect_id)
    has_cost = _has_id(profile.fail_forward_cost_a_id) or _has_id(profile.fail_forward_cost_b_id)

    if has_effect and not has_cost:
        raise LimitBreakProfileError(
            "failForwardEffectId requires at least one fail-forward cost (A or B)"
        )
    if has_cost and not has_effect:
        raise LimitBreakProfileError("fail-forward costs require failForwardEffectId to be set")
