import pytest

from oh_risk import OcraCategory, RiskLevel, compute_ocra, create_repetitive_task, summarize_ocra_result
from oh_risk.ocra import ocra_score


def test_worked_example_is_red():
    task = create_repetitive_task(recovery=4, force=2, posture=8, repetitiveness=3, additional=2)
    result = compute_ocra(task)
    assert result["score"] == 30
    assert result["category"] == OcraCategory.RED
    assert result["verdict"] == RiskLevel.HIGH
    assert result["follow_up_required"]


@pytest.mark.parametrize("scores, expected_score, category, follow_up", [
    ((0, 0, 0, 0, 0), 0, OcraCategory.GREEN, False),
    ((3, 2, 2, 0, 0), 7, OcraCategory.GREEN, False),
    ((2, 2, 4, 0, 0), 10, OcraCategory.YELLOW, False),
    ((3, 2, 4, 0, 0), 11, OcraCategory.LIGHT_ORANGE, True),
    ((6, 2, 4, 0, 0), 14, OcraCategory.ORANGE, True),
    ((10, 2, 4, 1, 0), 20, OcraCategory.ORANGE, True),
    ((0, 24, 24, 10, 12), 1104, OcraCategory.RED, True),
])
def test_score_categories(scores, expected_score, category, follow_up):
    recovery, force, posture, repetitiveness, additional = scores
    result = compute_ocra({
        "recovery": recovery,
        "force": force,
        "posture": posture,
        "repetitiveness": repetitiveness,
        "additional": additional,
    })
    assert result["score"] == expected_score
    assert result["category"] == category
    assert result["follow_up_required"] == follow_up


def test_zero_force_factor_leaves_recovery_only():
    result = compute_ocra(create_repetitive_task(recovery=6, force=0, posture=24, repetitiveness=10))
    assert result["score"] == 6


def test_off_scale_score_is_rejected():
    with pytest.raises(ValueError, match="Invalid OCRA posture"):
        create_repetitive_task(recovery=0, force=2, posture=5, repetitiveness=0)


def test_missing_factor_gives_no_verdict():
    result = compute_ocra({"recovery": 0, "force": 2, "posture": 4, "repetitiveness": 1})
    assert result["verdict"] == RiskLevel.INSUFFICIENT
    assert result["score"] is None
    assert result["category"] is None
    assert not result["follow_up_required"]
    assert result["reason"] == "missing OCRA factor(s): additional"
    assert result["factors"]["additional"] == {"score": None, "label": "Not scored"}
    assert result["factors"]["posture"]["score"] == 4


def test_factor_set_to_none_gives_no_verdict():
    task = create_repetitive_task(recovery=None, force=2, posture=4, repetitiveness=None)
    result = compute_ocra(task)
    assert result["verdict"] == RiskLevel.INSUFFICIENT
    assert "recovery" in result["reason"]
    assert "repetitiveness" in result["reason"]
    assert ocra_score(task) is None


def test_off_scale_score_is_rejected_even_with_missing_factors():
    with pytest.raises(ValueError, match="Invalid OCRA force"):
        compute_ocra({"force": 5})


def test_no_verdict_summary():
    text = summarize_ocra_result(compute_ocra({"recovery": 2}))
    assert "No verdict" in text
    assert "Not scored" in text


def test_factor_labels_are_reported():
    result = compute_ocra(create_repetitive_task(recovery=0, force=2, posture=4, repetitiveness=1))
    assert result["factors"]["recovery"]["label"].startswith("Sufficient recovery")
    text = summarize_ocra_result(result)
    assert "yellow" in text
