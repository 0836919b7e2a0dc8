import json
import os
import sys

import pytest

import run_assessment


INVESTIGATION = {
    "substances": [
        {
            "id": "toluene",
            "aggregate_state": "vapor-liquid",
            "vapour_pressure": 29,
            "vapour_pressure_unit": "mbar",
            "oels": [{"value": 150, "unit": "mg/m3", "period": "8h-twa"}],
        },
        {
            "id": "xylene",
            "aggregate_state": "liquid",
            "vapour_pressure": 0.9,
            "oels": [{"value": 210, "unit": "mg/m3"}],
        },
    ],
    "tasks": [
        {
            "id": "spraying",
            "substance_ids": ["toluene", "xylene"],
            "process_type": "open",
            "quantity": "1-10kg",
            "duration": "2-4h",
            "lev": "partial",
            "ventilation": "3-6ACH",
            "room_size": ">500m3",
            "ppe": ["respirator"],
        }
    ],
    "series": [
        {"id": "s1", "substance_id": "toluene", "group_id": "painters",
         "measurements": [12, 18, 25, 9, 15, 21]},
        {"id": "s2", "substance_id": "xylene", "group_id": "painters",
         "measurements": [{"value": 30}, {"value": 22}, {"value": 41}, {"value": 35}]},
    ],
    "lifting": [
        {"id": "boxes", "group_id": "warehouse", "weight": 15, "h_start": 40, "v_start": 50,
         "v_end": 100, "frequency": 1, "duration": "long", "grip": "fair"}
    ],
    "carrying": [{"id": "crates", "weight": 12, "work_hours": 6}],
    "push_pull": [{"id": "trolley", "handle_height": "mid", "initial_force": 180}],
    "repetitive": [{"id": "assembly", "group_id": "assembly-line", "recovery": 4, "force": 2,
                    "posture": 8, "repetitiveness": 3, "additional": 2}],
    "forces": [
        {"id": "clamp", "group_id": "assembly-line", "reference_force": "power-grip",
         "measured_force": 40},
        {"id": "press", "group_id": "assembly-line", "reference_force": "push-one-hand"},
    ],
    "postures": [{"id": "screen", "group_id": "office", "body_part": "neck-head",
                  "frequency": "occasional", "angle": 30}],
}


def _with_investigation(base_path, monkeypatch, *argv):
    path = os.path.join(str(base_path), "investigation.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(INVESTIGATION, f)
    monkeypatch.setattr(sys, "argv", ["run_assessment.py", path, *argv])
    return path


def test_full_run_prints_both_domains(tmp_path, monkeypatch, capsys):
    _with_investigation(tmp_path, monkeypatch)
    assert run_assessment.main() == 0
    out = capsys.readouterr().out
    assert "TIER-1 EXPOSURE ESTIMATE" in out
    assert "NEN-EN 689 COMPLIANCE" in out
    assert "MIXTURE INDEX" in out
    assert "NIOSH LIFTING" in out
    assert "OCRA CHECKLIST" in out
    assert "respiratory protection" in out
    assert "POSTURES (EN 1005-4)" in out
    assert "Group warehouse: overall level moderate (1 tasks)" in out
    assert "Group assembly-line: overall level high (3 tasks)" in out
    assert "Group office: overall level moderate (1 tasks)" in out
    assert "missing measured_force" in out
    assert "COMPLETE" in out


def test_section_filter(tmp_path, monkeypatch, capsys):
    _with_investigation(tmp_path, monkeypatch, "--section", "physical")
    run_assessment.main()
    out = capsys.readouterr().out
    assert "NIOSH LIFTING" in out
    assert "NEN-EN 689" not in out


def test_csv_export(tmp_path, monkeypatch, capsys):
    out_dir = tmp_path / "tables"
    _with_investigation(tmp_path, monkeypatch, "--csv", str(out_dir))
    run_assessment.main()
    assert sorted(os.listdir(out_dir)) == ["physical.csv", "statistics.csv", "tier1.csv"]


def test_input_from_environment(tmp_path, monkeypatch, capsys):
    path = _with_investigation(tmp_path, monkeypatch)
    monkeypatch.setenv("OH_RISK_INPUT", path)
    monkeypatch.setattr(sys, "argv", ["run_assessment.py", "--section", "exposure"])
    assert run_assessment.main() == 0
    assert "MIXTURE INDEX" in capsys.readouterr().out


def test_missing_input_exits(monkeypatch):
    monkeypatch.delenv("OH_RISK_INPUT", raising=False)
    monkeypatch.setattr(sys, "argv", ["run_assessment.py"])
    with pytest.raises(SystemExit):
        run_assessment.main()


def test_table_versions(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["run_assessment.py", "--tables"])
    assert run_assessment.main() == 0
    assert "UT_TABLE" in capsys.readouterr().out
