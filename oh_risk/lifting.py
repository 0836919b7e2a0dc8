"""
Lifting and Carrying Module
===========================

NIOSH lifting equation (ISO 11228-1) and a Mital-type carrying check.

Lifting:
    RWL = 23 x HM x VM x DM x AM x FM x CM
    LI  = weight / RWL

Multipliers (H, V in cm; A in degrees):
- HM = 25 / H, with H < 25 clipped to 25; H > 63 gives 0
- VM = 1 - 0.003 x |V - 75|, floored at 0; V > 175 gives 0
- DM = 0.82 + 4.5 / D with D = |V_end - V_start|, capped at 1; D < 25 gives 1
- AM = 1 - 0.0032 x A; A > 135 gives 0
- FM from the frequency breakpoint table per duration class
- CM from the coupling (grip) table

The origin RWL is always computed. A destination RWL is computed when a
destination horizontal distance or angle is given; the lower RWL governs.

LI bands: LI <= 1 acceptable, 1 < LI <= 2 moderate, LI > 2 high.
Risk flags (one-handed lifting, slippery floor, ...) are reported and set
``attention_required``; they never change the LI or its band.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from .records import validate_carrying_task, validate_lifting_task
from .registry import RiskLevel
from .tables import (
    CARRYING_ASYMMETRY_FACTORS,
    CARRYING_BASE_LIMITS,
    CARRYING_CLIMATE_FACTORS,
    CARRYING_GRIP_FACTORS,
    NIOSH_A_MAX,
    NIOSH_D_MIN,
    NIOSH_FREQUENCY_MAX,
    NIOSH_H_MAX,
    NIOSH_H_MIN,
    NIOSH_LOAD_CONSTANT,
    NIOSH_RISK_FLAGS,
    NIOSH_V_MAX,
    NIOSH_V_OPTIMUM,
    NIOSH_WEIGHT_MAX,
    get_carrying_duration_factor,
    get_coupling_multiplier,
    get_frequency_multiplier,
)


LiftingResult = Dict[str, Any]
CarryingResult = Dict[str, Any]


# =============================================================================
# NIOSH Multipliers
# =============================================================================

def horizontal_multiplier(h_cm: float) -> float:
    if h_cm > NIOSH_H_MAX:
        return 0.0
    return NIOSH_H_MIN / max(h_cm, NIOSH_H_MIN)


def vertical_multiplier(v_cm: float) -> float:
    if v_cm > NIOSH_V_MAX:
        return 0.0
    return max(0.0, 1 - 0.003 * abs(v_cm - NIOSH_V_OPTIMUM))


def distance_multiplier(v_start: float, v_end: float) -> float:
    d = abs(v_end - v_start)
    if d < NIOSH_D_MIN:
        return 1.0
    return min(1.0, 0.82 + 4.5 / d)


def asymmetry_multiplier(angle: float) -> float:
    if angle > NIOSH_A_MAX:
        return 0.0
    return max(0.0, 1 - 0.0032 * angle)


def recommended_weight_limit(
    hm: float, vm: float, dm: float, am: float, fm: float, cm: float
) -> float:
    return NIOSH_LOAD_CONSTANT * hm * vm * dm * am * fm * cm


def lifting_index(weight: float, rwl: float) -> float:
    """LI = weight / RWL; an RWL of zero gives an infinite index."""
    if rwl <= 0:
        return math.inf
    return weight / rwl


def classify_lifting_index(li: float) -> RiskLevel:
    if li <= 1:
        return RiskLevel.ACCEPTABLE
    if li <= 2:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


_LIFTING_LABELS = {
    RiskLevel.ACCEPTABLE: "Acceptable (LI <= 1)",
    RiskLevel.MODERATE: "Risk - measures needed (1 < LI <= 2)",
    RiskLevel.HIGH: "High risk - immediate action required (LI > 2)",
    RiskLevel.INSUFFICIENT: "No verdict - load weight not recorded",
}


def _direct_action_reasons(task: Dict[str, Any]) -> List[str]:
    reasons = []
    if task["weight"] is not None and task["weight"] > NIOSH_WEIGHT_MAX:
        reasons.append(f"Weight > {NIOSH_WEIGHT_MAX:g} kg")
    if task["v_start"] > NIOSH_V_MAX or task["v_end"] > NIOSH_V_MAX:
        reasons.append(f"Vertical height > {NIOSH_V_MAX:g} cm")
    if task["v_start"] < 0 or task["v_end"] < 0:
        reasons.append("Vertical height < 0 cm (below floor level)")
    if task["frequency"] > NIOSH_FREQUENCY_MAX:
        reasons.append(f"Frequency > {NIOSH_FREQUENCY_MAX:g} lifts/min")
    if task["h_start"] > NIOSH_H_MAX or (task["h_end"] is not None and task["h_end"] > NIOSH_H_MAX):
        reasons.append(f"Horizontal distance > {NIOSH_H_MAX:g} cm")
    if task["a_start"] > NIOSH_A_MAX or (task["a_end"] is not None and task["a_end"] > NIOSH_A_MAX):
        reasons.append(f"Asymmetry angle > {NIOSH_A_MAX:g} degrees")
    return reasons


# =============================================================================
# Lifting
# =============================================================================

def compute_lifting(task: Dict[str, Any]) -> LiftingResult:
    """
    NIOSH evaluation of a lifting task.

    :param task: LiftingTask record
    :returns: LiftingResult dictionary with multipliers, RWL (origin,
              destination, governing), LI, verdict and advisory flags.
              Without a load weight the RWL is still reported, LI is None
              and the verdict is RiskLevel.INSUFFICIENT.
    :raises ValueError: On invalid geometry, enum keys or risk flags
    """
    task = validate_lifting_task(task)

    has_destination = task["h_end"] is not None or task["a_end"] is not None
    h_end = task["h_end"] if task["h_end"] is not None else task["h_start"]
    a_end = task["a_end"] if task["a_end"] is not None else task["a_start"]

    dm = distance_multiplier(task["v_start"], task["v_end"])
    fm = get_frequency_multiplier(task["frequency"], task["duration"])
    cm = get_coupling_multiplier(task["grip"])

    origin = {
        "hm": horizontal_multiplier(task["h_start"]),
        "vm": vertical_multiplier(task["v_start"]),
        "am": asymmetry_multiplier(task["a_start"]),
    }
    rwl_origin = recommended_weight_limit(origin["hm"], origin["vm"], dm, origin["am"], fm, cm)

    destination: Optional[Dict[str, float]] = None
    rwl_destination: Optional[float] = None
    if has_destination:
        destination = {
            "hm": horizontal_multiplier(h_end),
            "vm": vertical_multiplier(task["v_end"]),
            "am": asymmetry_multiplier(a_end),
        }
        rwl_destination = recommended_weight_limit(
            destination["hm"], destination["vm"], dm, destination["am"], fm, cm
        )

    rwl = rwl_origin if rwl_destination is None else min(rwl_origin, rwl_destination)
    if task["weight"] is None:
        li, verdict = None, RiskLevel.INSUFFICIENT
    else:
        li = lifting_index(task["weight"], rwl)
        verdict = classify_lifting_index(li)

    reasons = _direct_action_reasons(task)
    flags = [NIOSH_RISK_FLAGS[f] for f in task["risk_flags"]]

    return {
        "task_id": task["id"],
        "group_id": task["group_id"],
        "weight": task["weight"],
        "multipliers": {
            "origin": origin,
            "destination": destination,
            "dm": dm,
            "fm": fm,
            "cm": cm,
        },
        "rwl_origin": rwl_origin,
        "rwl_destination": rwl_destination,
        "rwl": rwl,
        "li": li,
        "verdict": verdict,
        "label": _LIFTING_LABELS[verdict],
        "risk_flags": flags,
        "attention_required": bool(flags),
        "direct_action": bool(reasons) or (li is not None and li > 2),
        "direct_action_reasons": reasons,
        "reason": "missing weight" if li is None else None,
    }


# =============================================================================
# Carrying
# =============================================================================

def compute_carrying(task: Dict[str, Any]) -> CarryingResult:
    """
    Carrying check against corrected absolute load limits.

    C = duration x asymmetry x grip x climate; the acceptable and high-risk
    limits are the base limits (two-handed 13 / 20 kg, one-handed 5.5 / 10.5 kg)
    multiplied by C.

    :param task: CarryingTask record
    :returns: CarryingResult dictionary; without a load weight the limits are
              still reported and the verdict is RiskLevel.INSUFFICIENT
    """
    task = validate_carrying_task(task)

    correction = (
        get_carrying_duration_factor(task["work_hours"])
        * CARRYING_ASYMMETRY_FACTORS[task["asymmetry"]]
        * CARRYING_GRIP_FACTORS[task["grip"]]
        * CARRYING_CLIMATE_FACTORS[task["climate"]]
    )
    base_acceptable, base_high = CARRYING_BASE_LIMITS[task["bimanual"]]
    acceptable_limit = base_acceptable * correction
    high_risk_limit = base_high * correction

    if task["weight"] is None:
        verdict, label = RiskLevel.INSUFFICIENT, "No verdict - load weight not recorded"
    elif task["weight"] <= acceptable_limit:
        verdict, label = RiskLevel.ACCEPTABLE, "Acceptable"
    elif task["weight"] < high_risk_limit:
        verdict, label = RiskLevel.MODERATE, "Risk - consider measures"
    else:
        verdict, label = RiskLevel.HIGH, "High risk - measures required"

    return {
        "task_id": task["id"],
        "group_id": task["group_id"],
        "weight": task["weight"],
        "correction": correction,
        "acceptable_limit": acceptable_limit,
        "high_risk_limit": high_risk_limit,
        "verdict": verdict,
        "label": label,
        "reason": "missing weight" if task["weight"] is None else None,
    }


def summarize_lifting_result(result: LiftingResult) -> str:
    """
    Generate a summary string for a lifting result.

    :param result: LiftingResult dictionary
    :returns: Human-readable summary string
    """
    m = result["multipliers"]
    o = m["origin"]
    li = "-" if result["li"] is None else f"{result['li']:.2f}"
    lines = [
        f"NIOSH lifting: task {result['task_id'] or '-'}",
        f"  Origin: HM {o['hm']:.3f}  VM {o['vm']:.3f}  AM {o['am']:.3f}",
    ]
    if m["destination"] is not None:
        d = m["destination"]
        lines.append(f"  Destination: HM {d['hm']:.3f}  VM {d['vm']:.3f}  AM {d['am']:.3f}")
    lines += [
        f"  DM {m['dm']:.3f}  FM {m['fm']:.2f}  CM {m['cm']:.2f}",
        f"  RWL: {result['rwl']:.2f} kg  LI: {li}",
        f"  Verdict: {result['verdict'].value} - {result['label']}",
    ]
    if result["direct_action_reasons"]:
        lines.append(f"  Direct action: {', '.join(result['direct_action_reasons'])}")
    if result["risk_flags"]:
        lines.append(f"  Risk flags: {', '.join(result['risk_flags'])}")
    return "\n".join(lines)
