import math

import pytest

from oh_risk import RiskLevel, compute_carrying, compute_lifting, create_carrying_task, summarize_lifting_result
from oh_risk.lifting import (
    asymmetry_multiplier,
    classify_lifting_index,
    distance_multiplier,
    horizontal_multiplier,
    vertical_multiplier,
)


EXPECTED_RWL = 23 * (25 / 40) * (1 - 0.003 * 25) * (0.82 + 4.5 / 50) * 1.0 * 0.75 * 0.95


# =============================================================================
# Multipliers
# =============================================================================

@pytest.mark.parametrize("h, hm", [(10, 1.0), (25, 1.0), (50, 0.5), (63, 25 / 63), (64, 0.0)])
def test_horizontal_multiplier(h, hm):
    assert horizontal_multiplier(h) == pytest.approx(hm)


@pytest.mark.parametrize("v, vm", [(75, 1.0), (0, 0.775), (175, 0.7), (176, 0.0)])
def test_vertical_multiplier(v, vm):
    assert vertical_multiplier(v) == pytest.approx(vm)


@pytest.mark.parametrize("v_start, v_end, dm", [(50, 60, 1.0), (0, 25, 1.0), (50, 100, 0.91), (0, 175, 0.82 + 4.5 / 175)])
def test_distance_multiplier(v_start, v_end, dm):
    assert distance_multiplier(v_start, v_end) == pytest.approx(dm)


@pytest.mark.parametrize("a, am", [(0, 1.0), (90, 0.712), (135, 0.568), (136, 0.0)])
def test_asymmetry_multiplier(a, am):
    assert asymmetry_multiplier(a) == pytest.approx(am)


@pytest.mark.parametrize("li, level", [
    (0.5, RiskLevel.ACCEPTABLE),
    (1.0, RiskLevel.ACCEPTABLE),
    (1.5, RiskLevel.MODERATE),
    (2.0, RiskLevel.MODERATE),
    (2.01, RiskLevel.HIGH),
    (math.inf, RiskLevel.HIGH),
])
def test_lifting_index_bands(li, level):
    assert classify_lifting_index(li) == level


# =============================================================================
# Lifting
# =============================================================================

def test_hand_computed_example(box_lift):
    result = compute_lifting(box_lift)
    assert result["rwl"] == pytest.approx(EXPECTED_RWL)
    assert result["li"] == pytest.approx(15 / EXPECTED_RWL)
    assert result["verdict"] == RiskLevel.MODERATE
    assert result["rwl_destination"] is None
    assert result["multipliers"]["fm"] == 0.75
    assert result["multipliers"]["cm"] == 0.95
    assert not result["direct_action"]


def test_doubling_weight_doubles_index(box_lift):
    heavier = dict(box_lift, weight=30)
    assert compute_lifting(heavier)["li"] == pytest.approx(2 * compute_lifting(box_lift)["li"])


def test_destination_rwl_governs_when_lower(box_lift):
    result = compute_lifting(dict(box_lift, h_end=60))
    assert result["rwl_destination"] < result["rwl_origin"]
    assert result["rwl"] == result["rwl_destination"]
    assert result["multipliers"]["destination"]["hm"] == pytest.approx(25 / 60)


def test_risk_flags_never_change_the_index(box_lift):
    plain = compute_lifting(box_lift)
    flagged = compute_lifting(dict(box_lift, risk_flags=["one_handed", "slippery_floor"]))
    assert flagged["li"] == plain["li"]
    assert flagged["verdict"] == plain["verdict"]
    assert flagged["attention_required"]
    assert "One-handed lifting" in flagged["risk_flags"]
    assert not plain["attention_required"]


def test_unknown_risk_flag_is_rejected(box_lift):
    with pytest.raises(ValueError, match="risk flag"):
        compute_lifting(dict(box_lift, risk_flags=["too_heavy"]))


def test_out_of_range_geometry_triggers_direct_action(box_lift):
    result = compute_lifting(dict(box_lift, weight=30, h_start=70))
    assert result["rwl"] == 0.0
    assert result["li"] == math.inf
    assert result["verdict"] == RiskLevel.HIGH
    assert result["direct_action"]
    assert "Weight > 25 kg" in result["direct_action_reasons"]
    assert "Horizontal distance > 63 cm" in result["direct_action_reasons"]


def test_below_floor_height_is_reported(box_lift):
    result = compute_lifting(dict(box_lift, v_start=-10))
    assert any("below floor" in reason for reason in result["direct_action_reasons"])


@pytest.mark.parametrize("field, value", [("weight", 0), ("h_start", -5), ("grip", "slippery"), ("duration", "all-day")])
def test_invalid_lifting_input_is_rejected(box_lift, field, value):
    with pytest.raises(ValueError):
        compute_lifting(dict(box_lift, **{field: value}))


def test_missing_weight_gives_no_verdict(box_lift):
    result = compute_lifting(dict(box_lift, weight=None))
    assert result["verdict"] == RiskLevel.INSUFFICIENT
    assert result["li"] is None
    assert result["rwl"] == pytest.approx(8.6212, rel=1e-3)
    assert not result["direct_action"]
    assert result["reason"] == "missing weight"
    assert "LI: -" in summarize_lifting_result(result)


def test_lifting_summary(box_lift):
    text = summarize_lifting_result(compute_lifting(box_lift))
    assert "RWL" in text
    assert "moderate" in text


# =============================================================================
# Carrying
# =============================================================================

@pytest.mark.parametrize("weight, level", [
    (10, RiskLevel.ACCEPTABLE),
    (13, RiskLevel.ACCEPTABLE),
    (15, RiskLevel.MODERATE),
    (20, RiskLevel.HIGH),
])
def test_two_handed_carrying_limits(weight, level):
    result = compute_carrying(create_carrying_task(weight=weight, work_hours=8))
    assert result["correction"] == 1.0
    assert result["acceptable_limit"] == 13.0
    assert result["high_risk_limit"] == 20.0
    assert result["verdict"] == level


def test_one_handed_carrying_limits():
    result = compute_carrying(create_carrying_task(weight=6, work_hours=8, bimanual=False))
    assert result["acceptable_limit"] == 5.5
    assert result["verdict"] == RiskLevel.MODERATE


def test_carrying_corrections_multiply():
    result = compute_carrying(
        create_carrying_task(weight=13, work_hours=10, asymmetry="30-60", grip="poor", climate="warm")
    )
    assert result["correction"] == pytest.approx(0.92 * 0.92 * 0.85 * 0.88)
    assert result["acceptable_limit"] == pytest.approx(13 * result["correction"])
    assert result["verdict"] == RiskLevel.HIGH


def test_carrying_without_weight_gives_no_verdict():
    result = compute_carrying({"work_hours": 8})
    assert result["verdict"] == RiskLevel.INSUFFICIENT
    assert result["acceptable_limit"] == 13.0
    assert result["reason"] == "missing weight"


def test_carrying_rejects_unknown_climate():
    with pytest.raises(ValueError):
        create_carrying_task(weight=10, work_hours=8, climate="arctic")
