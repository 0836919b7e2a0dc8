"""
Tier-1 Exposure Estimator
=========================

Qualitative screening estimate of inhalation exposure for one
(task, substance) combination.

Model:
    emission = basis x process x quantity x duration
    control  = lev x ventilation x room
    index    = emission / control

The index maps to an exposure band A-D with measurement advice. Every factor
is reported with its value and a label so the motivation can be reproduced
in a dossier. The result is always recomputed from its inputs.
"""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .records import index_substances, validate_substance, validate_work_task
from .registry import ExposureBand
from .tables import (
    DEFAULT_DUSTINESS,
    DEFAULT_VAPOUR_PRESSURE_KPA,
    TIER1_BANDS,
    TIER1_DURATION_FACTORS,
    TIER1_DUSTINESS_FACTORS,
    TIER1_LEV_FACTORS,
    TIER1_PROCESS_FACTORS,
    TIER1_QUANTITY_FACTORS,
    TIER1_ROOM_FACTORS,
    TIER1_STATE_FACTORS,
    TIER1_VAPOUR_CLASSES,
    TIER1_VENTILATION_FACTORS,
    VAPOUR_PRESSURE_TO_KPA,
    first_band,
    lookup_factor,
)


Tier1Result = Dict[str, Any]
FactorRow = Dict[str, Any]


def _row(name: str, factor: float, label: str) -> FactorRow:
    return {"name": name, "factor": factor, "label": label}


def _vapour_pressure_kpa(substance: Dict[str, Any]) -> Tuple[float, bool]:
    """Vapour pressure in kPa and whether the default was applied."""
    vp = substance.get("vapour_pressure")
    if vp is None:
        return DEFAULT_VAPOUR_PRESSURE_KPA, True
    return vp * VAPOUR_PRESSURE_TO_KPA[substance.get("vapour_pressure_unit") or "kPa"], False


def basis_factor(substance: Dict[str, Any]) -> FactorRow:
    """
    Emission basis from aggregate state and volatility or dustiness.

    :param substance: Validated Substance
    :returns: Factor row
    """
    state = substance["aggregate_state"]

    if state in TIER1_STATE_FACTORS:
        label = "Gas" if state == "gas" else "Aerosol / mist"
        return _row("state", TIER1_STATE_FACTORS[state], label)

    if state in TIER1_VAPOUR_CLASSES:
        vp, defaulted = _vapour_pressure_kpa(substance)
        factor = next(f for lower, f in TIER1_VAPOUR_CLASSES[state] if vp > lower)
        kind = "Vapour/liquid" if state == "vapor-liquid" else "Liquid"
        note = " (default)" if defaulted else ""
        return _row("state", factor, f"{kind} - vapour pressure {vp:g} kPa{note}")

    dustiness = substance.get("dustiness") or DEFAULT_DUSTINESS
    return _row(
        "state",
        TIER1_DUSTINESS_FACTORS[dustiness],
        f"Solid/powder - dustiness {dustiness}",
    )


def compute_tier1_breakdown(task: Dict[str, Any], substance: Dict[str, Any]) -> Dict[str, Any]:
    """
    Individual emission and control factors.

    :param task: WorkTask record
    :param substance: Substance record
    :returns: Dict with emission_factors, control_factors (lists of factor rows),
              emission_score, control_score
    """
    task = validate_work_task(task)
    substance = validate_substance(substance)

    emission: List[FactorRow] = [basis_factor(substance)]
    for name, table, key in [
        ("process", TIER1_PROCESS_FACTORS, task["process_type"]),
        ("quantity", TIER1_QUANTITY_FACTORS, task["quantity"]),
        ("duration", TIER1_DURATION_FACTORS, task["duration"]),
    ]:
        factor, label = lookup_factor(table, key, name)
        emission.append(_row(name, factor, label))

    control: List[FactorRow] = []
    for name, table, key in [
        ("lev", TIER1_LEV_FACTORS, task["lev"]),
        ("ventilation", TIER1_VENTILATION_FACTORS, task["ventilation"]),
        ("room", TIER1_ROOM_FACTORS, task["room_size"]),
    ]:
        factor, label = lookup_factor(table, key, name)
        control.append(_row(name, factor, label))

    emission_score = 1.0
    for row in emission:
        emission_score *= row["factor"]
    control_score = 1.0
    for row in control:
        control_score *= row["factor"]

    return {
        "emission_factors": emission,
        "control_factors": control,
        "emission_score": emission_score,
        "control_score": control_score,
    }


def classify_index(index: float) -> Tuple[ExposureBand, str, str]:
    """Map a tier-1 index to (band, label, measurement advice)."""
    _, band, label, advice = first_band(TIER1_BANDS, index)
    return ExposureBand(band), label, advice


def create_tier1_result(
    task_id: str,
    substance_id: str,
    index: float,
    breakdown: Dict[str, Any],
) -> Tier1Result:
    band, label, advice = classify_index(index)
    return {
        "task_id": task_id,
        "substance_id": substance_id,
        "band": band,
        "index": index,
        "label": label,
        "measurement_advice": advice,
        "emission_score": breakdown["emission_score"],
        "control_score": breakdown["control_score"],
        "emission_factors": breakdown["emission_factors"],
        "control_factors": breakdown["control_factors"],
    }


def compute_tier1(task: Dict[str, Any], substance: Dict[str, Any]) -> Tier1Result:
    """
    Tier-1 exposure band for a task handling a substance.

    :param task: WorkTask record
    :param substance: Substance record
    :returns: Tier1Result dictionary
    :raises ValueError: On unknown enum keys in either record
    """
    breakdown = compute_tier1_breakdown(task, substance)
    index = breakdown["emission_score"] / breakdown["control_score"]
    return create_tier1_result(
        str(task.get("id", "")), str(substance.get("id", "")), index, breakdown
    )


def compute_all_tier1(
    tasks: List[Dict[str, Any]],
    substances: List[Dict[str, Any]],
) -> List[Tier1Result]:
    """
    Tier-1 results for every substance referenced by every task.

    :raises ValueError: If a substance has no id or a task references an
                        unknown substance id
    """
    by_id = index_substances(substances)
    results = []
    for task in tasks:
        for substance_id in task.get("substance_ids") or []:
            if substance_id not in by_id:
                raise ValueError(
                    f"Task {task.get('id')!r} references unknown substance {substance_id!r}"
                )
            results.append(compute_tier1(task, by_id[substance_id]))
    return results


def summarize_tier1_result(result: Tier1Result) -> str:
    """
    Generate a summary string for a tier-1 result.

    :param result: Tier1Result dictionary
    :returns: Human-readable summary string
    """
    lines = [
        f"Tier-1: task {result['task_id']} x substance {result['substance_id']}",
        f"  Band: {result['band'].value} (index {result['index']:.3g})",
        f"  {result['label']}",
        f"  Advice: {result['measurement_advice']}",
        "  Emission factors:",
    ]
    for row in result["emission_factors"]:
        lines.append(f"    {row['name']:<12} {row['factor']:>8g}  {row['label']}")
    lines.append(f"    = {result['emission_score']:g}")
    lines.append("  Control factors:")
    for row in result["control_factors"]:
        lines.append(f"    {row['name']:<12} {row['factor']:>8g}  {row['label']}")
    lines.append(f"    = {result['control_score']:g}")
    return "\n".join(lines)
