import pytest

from oh_risk import (
    PostureVerdict,
    RiskLevel,
    compute_posture,
    create_posture_observation,
    suggest_posture_verdict,
    summarize_posture_result,
)


# =============================================================================
# Suggested verdict
# =============================================================================

@pytest.mark.parametrize("body_part, verdict", [
    ("trunk", PostureVerdict.NOT_ACCEPTABLE),
    ("neck-head", PostureVerdict.NOT_ACCEPTABLE),
    ("upper-arm", PostureVerdict.NOT_ACCEPTABLE),
    ("knee", PostureVerdict.NOT_ACCEPTABLE),
    ("lower-arm", PostureVerdict.CONDITIONALLY),
    ("wrist-hand", PostureVerdict.CONDITIONALLY),
    ("whole-leg", PostureVerdict.CONDITIONALLY),
])
def test_static_frequency_is_high_exposure(body_part, verdict):
    suggested, rule = suggest_posture_verdict(body_part, False, "static")
    assert suggested == verdict
    assert rule.startswith("high exposure")


def test_static_posture_at_frequent_rate_is_high_exposure():
    assert suggest_posture_verdict("knee", True, "frequent")[0] == PostureVerdict.NOT_ACCEPTABLE


@pytest.mark.parametrize("body_part, verdict", [
    ("trunk", PostureVerdict.CONDITIONALLY),
    ("neck-head", PostureVerdict.CONDITIONALLY),
    ("upper-arm", PostureVerdict.ACCEPTABLE),
    ("wrist-hand", PostureVerdict.ACCEPTABLE),
])
def test_frequent_dynamic_postures(body_part, verdict):
    assert suggest_posture_verdict(body_part, False, "frequent")[0] == verdict


@pytest.mark.parametrize("body_part, angle, is_static, verdict", [
    ("trunk", 20, False, PostureVerdict.ACCEPTABLE),
    ("trunk", 30, False, PostureVerdict.CONDITIONALLY),
    ("trunk", 30, True, PostureVerdict.NOT_ACCEPTABLE),
    ("upper-arm", 60, True, PostureVerdict.ACCEPTABLE),
    ("upper-arm", 90, False, PostureVerdict.CONDITIONALLY),
    ("upper-arm", 90, True, PostureVerdict.NOT_ACCEPTABLE),
    ("neck-head", 30, True, PostureVerdict.CONDITIONALLY),
    ("wrist-hand", 80, True, PostureVerdict.ACCEPTABLE),
])
def test_angle_limits_for_occasional_postures(body_part, angle, is_static, verdict):
    assert suggest_posture_verdict(body_part, is_static, "occasional", angle)[0] == verdict


def test_frequent_rule_fires_before_angle_rule():
    verdict, rule = suggest_posture_verdict("trunk", False, "frequent", 45)
    assert verdict == PostureVerdict.CONDITIONALLY
    assert rule == "frequent posture"


def test_unknown_body_part_is_rejected():
    with pytest.raises(ValueError, match="body part"):
        suggest_posture_verdict("elbow", False, "occasional")


# =============================================================================
# Posture result
# =============================================================================

def test_result_maps_verdict_to_risk_level():
    result = compute_posture(create_posture_observation(
        "upper-arm", frequency="occasional", angle=95, id="shelving", group_id="stock",
    ))
    assert result["posture_verdict"] == PostureVerdict.CONDITIONALLY
    assert result["verdict"] == RiskLevel.MODERATE
    assert result["label"] == "Conditionally acceptable"
    assert not result["overridden"]
    assert result["group_id"] == "stock"


def test_assessor_verdict_overrides_suggestion():
    result = compute_posture({"body_part": "trunk", "frequency": "static", "verdict": "acceptable"})
    assert result["suggested_verdict"] == PostureVerdict.NOT_ACCEPTABLE
    assert result["posture_verdict"] == PostureVerdict.ACCEPTABLE
    assert result["verdict"] == RiskLevel.ACCEPTABLE
    assert result["overridden"]


@pytest.mark.parametrize("field, value", [
    ("frequency", "hourly"),
    ("verdict", "fine"),
    ("is_static", "yes"),
    ("angle", "steep"),
])
def test_invalid_observation_is_rejected(field, value):
    with pytest.raises(ValueError):
        create_posture_observation("trunk", **{field: value})


def test_posture_summary():
    result = compute_posture(create_posture_observation(
        "trunk", frequency="occasional", is_static=True, angle=35, verdict="conditionally",
    ))
    text = summarize_posture_result(result)
    assert "Trunk / back" in text
    assert "angle 35 > 20 degrees" in text
    assert "Assessor verdict: conditionally" in text
    assert "moderate" in text
