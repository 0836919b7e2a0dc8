"""
Mixture Index
=============

Additive exposure index for substances acting on the same target organ:

    I_E = sum(GM_i / OELV_i)

I_E < 1 is acceptable. Additivity is a modelling input supplied by the
assessor; it is not checked here.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from .registry import Verdict


MixtureResult = Dict[str, Any]

MIN_MIXTURE_SUBSTANCES = 2


def _eligible(stats: Mapping[str, Any]) -> bool:
    return (
        stats.get("gm") is not None
        and stats.get("oelv") is not None
        and stats["oelv"] > 0
    )


def create_mixture_result(
    contributions: List[Dict[str, Any]],
    group_id: str = "",
) -> MixtureResult:
    """
    Create a MixtureResult from per-substance contributions.

    :param contributions: Dicts with substance_id, gm, oelv, unit
    :param group_id: Similar exposure group identifier
    :returns: MixtureResult dictionary
    """
    rows = []
    index = 0.0
    for c in contributions:
        ratio = c["gm"] / c["oelv"]
        index += ratio
        rows.append({
            "substance_id": c.get("substance_id", ""),
            "gm": c["gm"],
            "oelv": c["oelv"],
            "unit": c.get("unit", ""),
            "ratio": ratio,
        })

    if len(rows) < MIN_MIXTURE_SUBSTANCES:
        verdict = Verdict.INSUFFICIENT
        label = (
            f"No mixture verdict - at least {MIN_MIXTURE_SUBSTANCES} substances with "
            f"statistics and an OELV required ({len(rows)} available)"
        )
    elif index < 1:
        verdict = Verdict.ACCEPTABLE
        label = f"Acceptable (I_E = {index:.3f} < 1)"
    else:
        verdict = Verdict.UNACCEPTABLE
        label = f"Unacceptable (I_E = {index:.3f} >= 1)"

    return {
        "group_id": group_id,
        "index": index,
        "verdict": verdict,
        "label": label,
        "n_substances": len(rows),
        "contributions": rows,
    }


def compute_mixture_index(
    statistics: List[Mapping[str, Any]],
    group_id: str = "",
) -> MixtureResult:
    """
    Mixture index over the compliance results of one exposure group.

    Results without a geometric mean or without an OELV are skipped.

    :param statistics: MeasurementStatistics dictionaries (substance_id optional)
    :param group_id: Similar exposure group identifier
    :returns: MixtureResult dictionary
    """
    contributions = [
        {
            "substance_id": s.get("substance_id", ""),
            "gm": s["gm"],
            "oelv": s["oelv"],
            "unit": s.get("unit", ""),
        }
        for s in statistics
        if _eligible(s)
    ]
    return create_mixture_result(contributions, group_id=group_id)


def compute_mixture_by_group(statistics: List[Mapping[str, Any]]) -> Dict[str, MixtureResult]:
    """
    Mixture index per similar exposure group.

    :param statistics: MeasurementStatistics dictionaries carrying group_id
                       (as returned by evaluate_series)
    :returns: Dictionary mapping group ids to MixtureResult dictionaries
    """
    groups: Dict[str, List[Mapping[str, Any]]] = {}
    for s in statistics:
        groups.setdefault(s.get("group_id", ""), []).append(s)
    return {
        group_id: compute_mixture_index(members, group_id=group_id)
        for group_id, members in groups.items()
    }


def summarize_mixture_result(result: MixtureResult) -> str:
    lines = [
        f"Mixture index: group {result['group_id'] or '-'}",
        f"  I_E = {result['index']:.3f} ({result['verdict'].value})",
    ]
    for c in result["contributions"]:
        lines.append(
            f"    {c['substance_id'] or '?':<20} GM {c['gm']:.4g} / OELV {c['oelv']:g} "
            f"{c['unit']} = {c['ratio']:.3f}"
        )
    return "\n".join(lines)
