"""
Posture Observation Module
==========================

Verdict heuristic for observed working postures (EN 1005-4 / ISO 11226).

Rules, first match wins:
1. High exposure (frequency "static", or a static posture at a "frequent"
   rate): the verdict per body part from POSTURE_HIGH_EXPOSURE
2. Frequent postures of the parts listed in POSTURE_FREQUENT
3. An angle above the body part's limit in POSTURE_ANGLE_LIMITS
4. Otherwise acceptable

The suggestion can be overridden by the assessor's own verdict on the
observation; the result keeps both. Each verdict maps to a RiskLevel
(conditionally acceptable counts as moderate) so postures join the physical
group summary.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .records import validate_posture_observation
from .registry import PostureVerdict, RiskLevel
from .tables import (
    POSTURE_ANGLE_LIMITS,
    POSTURE_BODY_PARTS,
    POSTURE_FREQUENCIES,
    POSTURE_FREQUENT,
    POSTURE_HIGH_EXPOSURE,
    POSTURE_VERDICTS,
)


PostureResult = Dict[str, Any]


def suggest_posture_verdict(
    body_part: str,
    is_static: bool,
    frequency: str,
    angle: Optional[float] = None,
) -> Tuple[PostureVerdict, str]:
    """
    Suggested verdict for one posture observation.

    :param body_part: Key of POSTURE_BODY_PARTS
    :param is_static: Posture held for more than 4 s
    :param frequency: "occasional" | "frequent" | "static"
    :param angle: Observed angle in degrees, if measured
    :returns: (PostureVerdict, the rule that produced it)
    :raises ValueError: On an unknown body part or frequency
    """
    observation = validate_posture_observation({
        "body_part": body_part,
        "is_static": is_static,
        "frequency": frequency,
        "angle": angle,
    })
    body_part = observation["body_part"]
    frequency = observation["frequency"]
    angle = observation["angle"]

    if frequency == "static" or (is_static and frequency == "frequent"):
        return PostureVerdict(POSTURE_HIGH_EXPOSURE[body_part]), "high exposure (static)"
    if frequency == "frequent" and body_part in POSTURE_FREQUENT:
        return PostureVerdict(POSTURE_FREQUENT[body_part]), "frequent posture"
    if angle is not None and body_part in POSTURE_ANGLE_LIMITS:
        limit, dynamic_verdict, static_verdict = POSTURE_ANGLE_LIMITS[body_part]
        if angle > limit:
            verdict = static_verdict if is_static else dynamic_verdict
            return PostureVerdict(verdict), f"angle {angle:g} > {limit:g} degrees"
    return PostureVerdict.ACCEPTABLE, "within limits"


def compute_posture(observation: Dict[str, Any]) -> PostureResult:
    """
    Evaluate a posture observation.

    :param observation: PostureObservation record
    :returns: PostureResult dictionary with the suggested and final posture
              verdicts, the rule that fired, ``overridden`` and a RiskLevel
              verdict with its label
    """
    o = validate_posture_observation(observation)
    suggested, rule = suggest_posture_verdict(
        o["body_part"], o["is_static"], o["frequency"], o["angle"]
    )
    final = PostureVerdict(o["verdict"]) if o["verdict"] is not None else suggested
    level, label = POSTURE_VERDICTS[final.value]
    return {
        "task_id": o["id"],
        "group_id": o["group_id"],
        "body_part": o["body_part"],
        "frequency": o["frequency"],
        "is_static": o["is_static"],
        "angle": o["angle"],
        "suggested_verdict": suggested,
        "posture_verdict": final,
        "rule": rule,
        "overridden": final != suggested,
        "verdict": RiskLevel(level),
        "label": label,
    }


def summarize_posture_result(result: PostureResult) -> str:
    angle = "" if result["angle"] is None else f", angle {result['angle']:g} degrees"
    lines = [
        f"Posture: task {result['task_id'] or '-'}",
        f"  {POSTURE_BODY_PARTS[result['body_part']]}, "
        f"{POSTURE_FREQUENCIES[result['frequency']].split(' (')[0].lower()}"
        f"{' (static)' if result['is_static'] else ''}{angle}",
        f"  Suggested: {result['suggested_verdict'].value} ({result['rule']})",
    ]
    if result["overridden"]:
        lines.append(f"  Assessor verdict: {result['posture_verdict'].value}")
    lines.append(f"  Verdict: {result['verdict'].value} - {result['label']}")
    return "\n".join(lines)
