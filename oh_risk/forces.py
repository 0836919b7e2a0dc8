"""
Force Evaluation Module
=======================

EN 1005-3 force risk and ISO 11228-2 push/pull comparison.

EN 1005-3:
    F_Br = F_B x m_v x m_f x m_d
    m_r  = F_measured / F_Br

    m_r <= 0.5 acceptable, 0.5 < m_r <= 0.7 moderate, m_r > 0.7 not acceptable.

Push/pull:
    Each measured force (initial, sustained) is compared with the absolute
    ceiling for the handle height, reduced by the floor/wheel factor. There
    is no ratio; a force up to 1.3 x the ceiling is moderate, above is high.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .records import validate_force_task, validate_push_pull_task
from .registry import RiskLevel
from .tables import (
    EN1005_REFERENCE_FORCES,
    EN1005_RISK_BANDS,
    PUSH_PULL_FLOOR_FACTORS,
    PUSH_PULL_LIMITS,
    PUSH_PULL_MODERATE_MARGIN,
    first_band,
)


ForceResult = Dict[str, Any]
PushPullResult = Dict[str, Any]


# =============================================================================
# EN 1005-3
# =============================================================================

def reduced_reference_force(task: Dict[str, Any]) -> Optional[float]:
    """F_Br = F_B x m_v x m_f x m_d, or None without a reference force."""
    t = validate_force_task(task)
    if t["reference_force"] is None:
        return None
    return (
        t["reference_force"]
        * t["speed_multiplier"]
        * t["frequency_multiplier"]
        * t["duration_multiplier"]
    )


def compute_force_risk(task: Dict[str, Any]) -> ForceResult:
    """
    EN 1005-3 risk multiplier for a measured force.

    A task without a reference force or without a measured force gets
    RiskLevel.INSUFFICIENT; m_r is then None and ``reason`` names the
    missing input.

    :param task: ForceTask record (reference force may be an operation key
                 such as "push-two-hands")
    :returns: ForceResult dictionary with f_br, m_r, verdict and label
    :raises ValueError: On an unknown operation, a non-table multiplier or a
                        non-positive force
    """
    t = validate_force_task(task)
    f_br = reduced_reference_force(t)
    missing = [k for k in ("reference_force", "measured_force") if t[k] is None]

    if missing:
        m_r, level = None, RiskLevel.INSUFFICIENT
        label = "No verdict - force input missing"
        reason = f"missing {', '.join(missing)}"
    else:
        m_r = t["measured_force"] / f_br
        _, band, label = first_band(EN1005_RISK_BANDS, m_r, inclusive=True)
        level, reason = RiskLevel(band), None

    return {
        "task_id": t["id"],
        "group_id": t["group_id"],
        "reference_force": t["reference_force"],
        "multipliers": {
            "m_v": t["speed_multiplier"],
            "m_f": t["frequency_multiplier"],
            "m_d": t["duration_multiplier"],
        },
        "measured_force": t["measured_force"],
        "f_br": f_br,
        "m_r": m_r,
        "verdict": level,
        "label": label,
        "reason": reason,
    }


def list_reference_forces() -> List[Dict[str, Any]]:
    """Named EN 1005-3 operations with their reference forces."""
    return [
        {"operation": key, "force": force, "label": label}
        for key, (force, label) in EN1005_REFERENCE_FORCES.items()
    ]


# =============================================================================
# Push / Pull
# =============================================================================

def push_pull_limits(handle_height: str, floor_condition: str = "good") -> Dict[str, float]:
    """
    Adjusted force ceilings in Newtons.

    :returns: Dict with initial and sustained limits
    """
    if handle_height not in PUSH_PULL_LIMITS:
        raise ValueError(
            f"Unknown handle height: {handle_height!r}. Available: {list(PUSH_PULL_LIMITS)}"
        )
    if floor_condition not in PUSH_PULL_FLOOR_FACTORS:
        raise ValueError(
            f"Unknown floor condition: {floor_condition!r}. "
            f"Available: {list(PUSH_PULL_FLOOR_FACTORS)}"
        )
    initial, sustained = PUSH_PULL_LIMITS[handle_height]
    factor = PUSH_PULL_FLOOR_FACTORS[floor_condition]
    return {"initial": initial * factor, "sustained": sustained * factor}


def _force_level(force: float, limit: float) -> RiskLevel:
    if force <= limit:
        return RiskLevel.ACCEPTABLE
    if force <= limit * PUSH_PULL_MODERATE_MARGIN:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


_PUSH_PULL_LABELS = {
    RiskLevel.ACCEPTABLE: "Acceptable - forces within the limits",
    RiskLevel.MODERATE: "Risk - forces exceed the limits, measures recommended",
    RiskLevel.HIGH: "High risk - forces far above the limits",
    RiskLevel.INSUFFICIENT: "No verdict - no measured force",
}


def compute_push_pull(task: Dict[str, Any]) -> PushPullResult:
    """
    Compare measured push/pull forces against the adjusted ceilings.

    The verdict is the worst of the initial and sustained comparisons; a
    task without any measured force gets RiskLevel.INSUFFICIENT.

    :param task: PushPullTask record
    :returns: PushPullResult dictionary
    """
    t = validate_push_pull_task(task)
    limits = push_pull_limits(t["handle_height"], t["floor_condition"])

    checks = {}
    for phase in ("initial", "sustained"):
        force = t[f"{phase}_force"]
        if force is None:
            continue
        checks[phase] = {
            "force": force,
            "limit": limits[phase],
            "verdict": _force_level(force, limits[phase]),
        }

    if checks:
        verdict = max((c["verdict"] for c in checks.values()), key=lambda v: v.severity)
    else:
        verdict = RiskLevel.INSUFFICIENT

    return {
        "task_id": t["id"],
        "group_id": t["group_id"],
        "kind": t["kind"],
        "limits": limits,
        "checks": checks,
        "verdict": verdict,
        "label": _PUSH_PULL_LABELS[verdict],
        "reason": None if checks else "no measured force",
    }


def summarize_force_result(result: ForceResult) -> str:
    m = result["multipliers"]
    lines = [f"EN 1005-3 force: task {result['task_id'] or '-'}"]
    if result["f_br"] is not None:
        lines.append(
            f"  F_B {result['reference_force']:g} N x m_v {m['m_v']:.2f} x m_f {m['m_f']:.2f} "
            f"x m_d {m['m_d']:.2f} = F_Br {result['f_br']:.1f} N"
        )
    if result["m_r"] is not None:
        lines.append(f"  Measured {result['measured_force']:g} N -> m_r {result['m_r']:.2f}")
    else:
        lines.append(f"  {result['reason']}")
    lines.append(f"  Verdict: {result['verdict'].value} - {result['label']}")
    return "\n".join(lines)


def summarize_push_pull_result(result: PushPullResult) -> str:
    lines = [f"Push/pull ({result['kind']}): task {result['task_id'] or '-'}"]
    for phase, check in result["checks"].items():
        lines.append(
            f"  {phase:<10} {check['force']:g} N vs limit {check['limit']:g} N "
            f"({check['verdict'].value})"
        )
    lines.append(f"  Verdict: {result['verdict'].value} - {result['label']}")
    return "\n".join(lines)
