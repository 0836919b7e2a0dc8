import math

import pytest

from oh_risk.tables import (
    EN1005_SPEED_MULTIPLIERS,
    OCRA_FACTORS,
    OCRA_SCALES,
    POSTURE_ANGLE_LIMITS,
    POSTURE_BODY_PARTS,
    POSTURE_HIGH_EXPOSURE,
    POSTURE_VERDICTS,
    TABLE_VERSIONS,
    UT_TABLE,
    first_band,
    get_carrying_duration_factor,
    get_coupling_multiplier,
    get_frequency_multiplier,
    get_preliminary_threshold,
    get_reassessment_months,
    get_reference_force,
    get_ut,
    lookup_factor,
    resolve_multiplier,
    TIER1_LEV_FACTORS,
    validate_ocra_score,
)


@pytest.mark.parametrize("n, expected", [
    (6, 2.187),
    (7, 2.120),
    (10, 2.005),
    (15, 1.917),
    (20, 1.870),
    (25, 1.841),
    (30, 1.820),
])
def test_ut_published_values(n, expected):
    assert get_ut(n) == expected


def test_ut_table_is_decreasing():
    values = [UT_TABLE[n] for n in sorted(UT_TABLE)]
    assert values == sorted(values, reverse=True)


def test_ut_below_six_raises():
    with pytest.raises(ValueError):
        get_ut(5)


def test_ut_beyond_table_is_capped_with_warning():
    with pytest.warns(UserWarning, match="U_T table ends"):
        assert get_ut(45) == 1.820


@pytest.mark.parametrize("n, fraction", [(3, 0.10), (4, 0.15), (5, 0.20)])
def test_preliminary_thresholds(n, fraction):
    assert get_preliminary_threshold(n) == fraction


@pytest.mark.parametrize("n", [2, 6])
def test_preliminary_threshold_outside_range_raises(n):
    with pytest.raises(ValueError):
        get_preliminary_threshold(n)


@pytest.mark.parametrize("ratio, months", [
    (0.05, 36),
    (0.1, 24),
    (0.2, 24),
    (0.3, 18),
    (0.5, 12),
    (0.9, 12),
])
def test_reassessment_months(ratio, months):
    assert get_reassessment_months(ratio) == months


@pytest.mark.parametrize("frequency, duration, fm", [
    (0.1, "short", 1.00),
    (1, "long", 0.75),
    (1.5, "long", 0.65),
    (4, "medium", 0.72),
    (15, "short", 0.28),
    (16, "short", 0.0),
    (9, "long", 0.0),
])
def test_frequency_multiplier(frequency, duration, fm):
    assert get_frequency_multiplier(frequency, duration) == fm


def test_frequency_multiplier_unknown_duration():
    with pytest.raises(ValueError, match="Unknown lifting duration"):
        get_frequency_multiplier(1, "forever")


def test_coupling_multiplier():
    assert get_coupling_multiplier("good") == 1.0
    assert get_coupling_multiplier("fair") == 0.95
    assert get_coupling_multiplier("poor") == 0.90
    with pytest.raises(ValueError):
        get_coupling_multiplier("excellent")


@pytest.mark.parametrize("hours, factor", [(0.5, 1.14), (1, 1.14), (3, 1.08), (8, 1.0), (10, 0.92)])
def test_carrying_duration_factor(hours, factor):
    assert get_carrying_duration_factor(hours) == factor


def test_lookup_factor_lists_available_keys():
    assert lookup_factor(TIER1_LEV_FACTORS, "full", "LEV level")[0] == 100.0
    with pytest.raises(ValueError, match="Available"):
        lookup_factor(TIER1_LEV_FACTORS, "maximum", "LEV level")


@pytest.mark.parametrize("factor, allowed", [
    ("recovery", [0, 2, 3, 4, 6, 8, 10]),
    ("force", [0, 2, 4, 6, 8, 12, 16, 24]),
    ("posture", [0, 2, 4, 8, 12, 16, 24]),
    ("repetitiveness", [0, 1, 3, 6, 10]),
    ("additional", [0, 2, 4, 8, 12]),
])
def test_ocra_scales(factor, allowed):
    assert sorted(OCRA_SCALES[factor]) == allowed


@pytest.mark.parametrize("factor, value", [
    ("force", 5),
    ("posture", 1),
    ("recovery", -2),
    ("recovery", "2"),
    ("recovery", True),
])
def test_ocra_score_off_scale_rejected(factor, value):
    with pytest.raises(ValueError):
        validate_ocra_score(factor, value)


def test_ocra_unknown_factor_rejected():
    with pytest.raises(ValueError, match="Unknown OCRA factor"):
        validate_ocra_score("vibration", 0)


def test_resolve_multiplier_accepts_key_or_value():
    assert resolve_multiplier(EN1005_SPEED_MULTIPLIERS, "fast", "speed") == 0.75
    assert resolve_multiplier(EN1005_SPEED_MULTIPLIERS, 0.85, "speed") == 0.85
    assert resolve_multiplier(EN1005_SPEED_MULTIPLIERS, 1, "speed") == 1.0


@pytest.mark.parametrize("value", [0.8, "very-fast", None, True])
def test_resolve_multiplier_rejects_non_table_values(value):
    with pytest.raises(ValueError):
        resolve_multiplier(EN1005_SPEED_MULTIPLIERS, value, "speed")


def test_reference_force_lookup():
    assert get_reference_force("push-two-hands") == 220.0
    with pytest.raises(ValueError):
        get_reference_force("kick")


def test_first_band_exclusive_and_inclusive():
    bands = [(1.0, "low"), (math.inf, "high")]
    assert first_band(bands, 1.0)[1] == "high"
    assert first_band(bands, 1.0, inclusive=True)[1] == "low"


def test_table_versions_name_sources():
    assert "Annex F" in TABLE_VERSIONS["UT_TABLE"]


def test_ocra_factor_order():
    assert OCRA_FACTORS == ["recovery", "force", "posture", "repetitiveness", "additional"]


def test_posture_tables_cover_every_body_part():
    assert set(POSTURE_HIGH_EXPOSURE) == set(POSTURE_BODY_PARTS)
    assert set(POSTURE_ANGLE_LIMITS) <= set(POSTURE_BODY_PARTS)
    for _, dynamic, static in POSTURE_ANGLE_LIMITS.values():
        assert dynamic in POSTURE_VERDICTS
        assert static in POSTURE_VERDICTS
