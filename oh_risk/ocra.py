"""
OCRA Checklist
==============

Repetitive-strain score for upper-limb work (ISO 11228-3):

    Score = CF + FaF x (PF + RF + AddF)

CF recovery, FaF force, PF posture, RF repetitiveness, AddF additional
factors. Every factor is taken from its ordinal scale in OCRA_SCALES; values
off the scale are rejected rather than interpolated. A task with a factor
that was not scored gets RiskLevel.INSUFFICIENT instead of a score.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .records import missing_ocra_factors, validate_repetitive_task
from .registry import OcraCategory, RiskLevel
from .tables import (
    OCRA_CATEGORIES,
    OCRA_FACTORS,
    OCRA_FOLLOW_UP_SCORE,
    OCRA_SCALES,
    first_band,
)


OcraResult = Dict[str, Any]


def ocra_score(task: Dict[str, Any]) -> Optional[int]:
    """Checklist score, or None when a factor has not been scored."""
    t = validate_repetitive_task(task)
    if missing_ocra_factors(t):
        return None
    return t["recovery"] + t["force"] * (t["posture"] + t["repetitiveness"] + t["additional"])


def classify_ocra_score(score: float):
    """Map a score to (OcraCategory, RiskLevel, label)."""
    _, category, level, label = first_band(OCRA_CATEGORIES, score)
    return OcraCategory(category), RiskLevel(level), label


def compute_ocra(task: Dict[str, Any]) -> OcraResult:
    """
    OCRA checklist evaluation.

    :param task: RepetitiveTask record
    :returns: OcraResult dictionary with score, category, level, label,
              follow_up_required, reason and the factor scores with their
              labels. Without all five factors, score and category are None
              and the verdict is RiskLevel.INSUFFICIENT.
    :raises ValueError: On a factor score that is not on its scale
    """
    t = validate_repetitive_task(task)
    factors = {
        f: {
            "score": t[f],
            "label": OCRA_SCALES[f][t[f]] if t[f] is not None else "Not scored",
        }
        for f in OCRA_FACTORS
    }

    missing = missing_ocra_factors(t)
    if missing:
        return {
            "task_id": t["id"],
            "group_id": t["group_id"],
            "score": None,
            "category": None,
            "verdict": RiskLevel.INSUFFICIENT,
            "label": "No verdict - OCRA factors not scored",
            "follow_up_required": False,
            "factors": factors,
            "reason": f"missing OCRA factor(s): {', '.join(missing)}",
        }

    score = ocra_score(t)
    category, level, label = classify_ocra_score(score)
    return {
        "task_id": t["id"],
        "group_id": t["group_id"],
        "score": score,
        "category": category,
        "verdict": level,
        "label": label,
        "follow_up_required": score >= OCRA_FOLLOW_UP_SCORE,
        "factors": factors,
        "reason": None,
    }


def summarize_ocra_result(result: OcraResult) -> str:
    lines = [f"OCRA checklist: task {result['task_id'] or '-'}"]
    if result["score"] is None:
        lines.append(f"  {result['label']} ({result['reason']})")
    else:
        lines.append(
            f"  Score: {result['score']} ({result['category'].value}) - {result['label']}"
        )
    for name, factor in result["factors"].items():
        score = "-" if factor["score"] is None else factor["score"]
        lines.append(f"    {name:<15} {score:>3}  {factor['label']}")
    if result["follow_up_required"]:
        lines.append("  Biomechanical follow-up required")
    return "\n".join(lines)
