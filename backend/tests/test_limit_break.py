import pytest

from campaignforge.processors.limit_break import (
    LimitBreakProfileError,
    compute_intensity,
    compute_power_ceiling,
    compute_threshold,
    tier_thresholds,
    validate_profile,
)
from campaignforge.schemas.rules import LimitBreakProfile


def test_intensity_and_ceiling():
    assert compute_intensity(4, 3) == 12
    assert compute_power_ceiling(5, 2, 1) == 12


def test_thresholds_round_up():
    assert compute_threshold(12, 60) == 8
    assert compute_threshold(12, 85) == 11
    assert compute_threshold(12, 125) == 15


def test_tier_thresholds():
    thresholds = tier_thresholds(12)
    assert (thresholds.push, thresholds.break_, thresholds.transcend) == (8, 11, 15)
    assert thresholds.model_dump(by_alias=True)["break"] == 11


def test_unknown_threshold_percent():
    with pytest.raises(LimitBreakProfileError):
        compute_threshold(12, 70)


@pytest.mark.parametrize(
    "profile,message",
    [
        ({"threshold_percent": 70}, "thresholdPercent must be one of 60, 85, or 125"),
        (
            {"threshold_percent": 60, "fail_forward_effect_id": "fx-1"},
            "failForwardEffectId requires at least one fail-forward cost (A or B)",
        ),
        (
            {"threshold_percent": 85, "fail_forward_cost_b_id": "cost-2"},
            "fail-forward costs require failForwardEffectId to be set",
        ),
        (
            {"threshold_percent": 85, "fail_forward_effect_id": "  ", "fail_forward_cost_a_id": "cost-1"},
            "fail-forward costs require failForwardEffectId to be set",
        ),
    ],
)
def test_invalid_profiles(profile, message):
    with pytest.raises(LimitBreakProfileError) as exc_info:
        validate_profile(LimitBreakProfile(**profile))
    assert str(exc_info.value) == message


def test_valid_profiles():
    validate_profile(LimitBreakProfile(threshold_percent=125))
    validate_profile(LimitBreakProfile(
        threshold_percent=60, fail_forward_effect_id="fx-1", fail_forward_cost_a_id="cost-1"
    ))
