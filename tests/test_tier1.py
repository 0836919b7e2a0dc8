import pytest

from oh_risk import ExposureBand, compute_all_tier1, compute_tier1, create_substance, create_work_task
from oh_risk.tier1 import basis_factor, classify_index, compute_tier1_breakdown, summarize_tier1_result


QUANTITIES = ["<100g", "100g-1kg", "1-10kg", ">10kg"]
DURATIONS = ["<15min", "15-60min", "1-2h", "2-4h", "4-8h", ">8h"]
LEV_LEVELS = ["none", "point", "partial", "full"]
VENTILATION_LEVELS = ["none", "<1ACH", "1-3ACH", "3-6ACH", ">6ACH"]
ROOM_SIZES = ["<50m3", "50-500m3", ">500m3"]


def _task(**overrides):
    fields = dict(
        id="t1",
        process_type="open",
        quantity="1-10kg",
        duration="4-8h",
        lev="point",
        ventilation="1-3ACH",
        room_size="50-500m3",
    )
    fields.update(overrides)
    return create_work_task(**fields)


def test_sanding_example_is_band_b(sanding_task, quartz_dust):
    result = compute_tier1(sanding_task, quartz_dust)
    assert result["index"] == pytest.approx(1.0)
    assert result["band"] == ExposureBand.B
    assert result["emission_score"] == pytest.approx(20.0)
    assert result["control_score"] == pytest.approx(20.0)
    assert [row["name"] for row in result["emission_factors"]] == ["state", "process", "quantity", "duration"]
    assert [row["name"] for row in result["control_factors"]] == ["lev", "ventilation", "room"]


@pytest.mark.parametrize("index, band", [
    (0.1, ExposureBand.A),
    (0.5, ExposureBand.B),
    (4.99, ExposureBand.B),
    (5.0, ExposureBand.C),
    (25.0, ExposureBand.D),
    (1000.0, ExposureBand.D),
])
def test_classify_index(index, band):
    assert classify_index(index)[0] == band


@pytest.mark.parametrize("field, levels", [("quantity", QUANTITIES), ("duration", DURATIONS)])
def test_index_non_decreasing_in_emission_factors(quartz_dust, field, levels):
    indices = [compute_tier1(_task(**{field: level}), quartz_dust)["index"] for level in levels]
    assert indices == sorted(indices)


@pytest.mark.parametrize("field, levels", [
    ("lev", LEV_LEVELS),
    ("ventilation", VENTILATION_LEVELS),
    ("room_size", ROOM_SIZES),
])
def test_index_non_increasing_in_control_factors(quartz_dust, field, levels):
    indices = [compute_tier1(_task(**{field: level}), quartz_dust)["index"] for level in levels]
    assert indices == sorted(indices, reverse=True)


def test_vapour_pressure_is_converted_to_kpa():
    in_kpa = create_substance(id="s", aggregate_state="liquid", vapour_pressure=2.0)
    in_pa = create_substance(id="s", aggregate_state="liquid", vapour_pressure=2000, vapour_pressure_unit="Pa")
    assert basis_factor(in_kpa)["factor"] == 5.0
    assert basis_factor(in_pa)["factor"] == 5.0


def test_missing_vapour_pressure_defaults_to_one_kpa():
    row = basis_factor(create_substance(id="s", aggregate_state="vapor-liquid"))
    assert row["factor"] == 10.0
    assert "default" in row["label"]


def test_missing_dustiness_defaults_to_medium():
    row = basis_factor(create_substance(id="s", aggregate_state="solid-powder"))
    assert row["factor"] == 5.0


def test_gas_and_aerosol_basis():
    assert basis_factor(create_substance(id="g", aggregate_state="gas"))["factor"] == 50.0
    assert basis_factor(create_substance(id="a", aggregate_state="aerosol"))["factor"] == 80.0


def test_unknown_enum_key_is_rejected(quartz_dust):
    task = {"id": "t", "process_type": "open", "quantity": "1-10kg", "duration": "all-day"}
    with pytest.raises(ValueError, match="duration"):
        compute_tier1_breakdown(task, quartz_dust)


def test_result_is_recomputed_identically(sanding_task, quartz_dust):
    assert compute_tier1(sanding_task, quartz_dust) == compute_tier1(sanding_task, quartz_dust)


def test_compute_all_tier1(sanding_task, quartz_dust, toluene):
    results = compute_all_tier1([sanding_task], [quartz_dust, toluene])
    assert len(results) == 1
    assert results[0]["substance_id"] == "quartz"

    bad = dict(sanding_task, substance_ids=["benzene"])
    with pytest.raises(ValueError, match="unknown substance"):
        compute_all_tier1([bad], [quartz_dust])


def test_substance_without_id_is_rejected(sanding_task):
    anonymous = {"aggregate_state": "solid-powder", "dustiness": "high"}
    with pytest.raises(ValueError, match="has no id"):
        compute_all_tier1([sanding_task], [anonymous])


def test_duplicate_substance_id_is_rejected(sanding_task, quartz_dust):
    with pytest.raises(ValueError, match="Duplicate substance id"):
        compute_all_tier1([sanding_task], [quartz_dust, dict(quartz_dust)])


def test_summary_lists_factors(sanding_task, quartz_dust):
    text = summarize_tier1_result(compute_tier1(sanding_task, quartz_dust))
    assert "Band: B" in text
    assert "Point extraction" in text
