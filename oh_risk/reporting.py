"""
Reporting Module
================

Group aggregation of physical-workload results and tabular summaries for
the export layer. Tables are built row by row from result dictionaries and
returned as pandas DataFrames; values are not rounded.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

import numpy as np
import pandas as pd

from .registry import RiskLevel


# =============================================================================
# Physical group summary
# =============================================================================

def summarize_physical_group(results: List[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Overall physical-workload verdict for a group of task results.

    The overall level is the worst level among the results (high > moderate
    > acceptable). Results without a verdict are ignored unless every result
    lacks one, in which case the level is INSUFFICIENT.

    :param results: Result dictionaries from lifting, carrying, OCRA, force,
                    push/pull or posture evaluations (each carrying a
                    RiskLevel verdict)
    :returns: Dict with level, n_tasks, counts per level, max_li, max_li_task_id
    """
    levels = [RiskLevel(r["verdict"]) for r in results]
    if levels:
        level = max(levels, key=lambda lv: lv.severity)
    else:
        level = RiskLevel.INSUFFICIENT

    max_li, max_li_task = None, None
    for r in results:
        li = r.get("li")
        if li is not None and (max_li is None or li > max_li):
            max_li, max_li_task = li, r.get("task_id", "")

    return {
        "level": level,
        "n_tasks": len(results),
        "counts": {lv.value: levels.count(lv) for lv in RiskLevel},
        "max_li": max_li,
        "max_li_task_id": max_li_task,
        "direct_action": any(r.get("direct_action", False) for r in results),
        "follow_up_required": any(r.get("follow_up_required", False) for r in results),
    }


def summarize_physical_by_group(results: List[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Physical group summary per workload group.

    :param results: Result dictionaries carrying group_id
    :returns: Dictionary mapping group ids to summarize_physical_group
              dictionaries, each with its group_id added
    """
    groups: Dict[str, List[Mapping[str, Any]]] = {}
    for r in results:
        groups.setdefault(r.get("group_id", ""), []).append(r)
    summaries = {}
    for group_id, members in groups.items():
        summary = summarize_physical_group(members)
        summary["group_id"] = group_id
        summaries[group_id] = summary
    return summaries


# =============================================================================
# Summary tables
# =============================================================================

def statistics_table(results: List[Mapping[str, Any]]) -> pd.DataFrame:
    """
    One row per compliance result.

    :param results: MeasurementStatistics dictionaries
    :returns: DataFrame with identifiers, statistics and verdict columns
    """
    rows = []
    for r in results:
        rows.append({
            "series_id": r.get("series_id", ""),
            "substance_id": r.get("substance_id", ""),
            "group_id": r.get("group_id", ""),
            "n": r["n"],
            "distribution": r["distribution"].value,
            "gm": r["gm"] if r["gm"] is not None else np.nan,
            "gsd": r["gsd"] if r["gsd"] is not None else np.nan,
            "am": r["am"] if r["am"] is not None else np.nan,
            "sd": r["sd"] if r["sd"] is not None else np.nan,
            "p95": r["p95"] if r["p95"] is not None else np.nan,
            "oelv": r["oelv"] if r["oelv"] is not None else np.nan,
            "unit": r["unit"],
            "percent_of_oelv": (
                r["percent_of_oelv"] if r["percent_of_oelv"] is not None else np.nan
            ),
            "ur": r["ur"] if r["ur"] is not None else np.nan,
            "ut": r["ut"] if r["ut"] is not None else np.nan,
            "method": r["method"].value,
            "verdict": r["verdict"].value,
            "reassessment_months": r["reassessment_months"],
            "reason": r["reason"],
        })
    return pd.DataFrame(rows)


def tier1_table(results: List[Mapping[str, Any]]) -> pd.DataFrame:
    """
    One row per tier-1 result, with every factor as its own column.

    :param results: Tier1Result dictionaries
    """
    rows = []
    for r in results:
        row = {
            "task_id": r["task_id"],
            "substance_id": r["substance_id"],
            "band": r["band"].value,
            "index": r["index"],
            "emission_score": r["emission_score"],
            "control_score": r["control_score"],
        }
        for factor in r["emission_factors"] + r["control_factors"]:
            row[factor["name"]] = factor["factor"]
        row["measurement_advice"] = r["measurement_advice"]
        rows.append(row)
    return pd.DataFrame(rows)


def _method_of(result: Mapping[str, Any]) -> str:
    if "li" in result:
        return "niosh"
    if "score" in result:
        return "ocra"
    if "m_r" in result:
        return "en1005-3"
    if "checks" in result:
        return "push-pull"
    if "body_part" in result:
        return "posture"
    return "carrying"


def physical_table(results: List[Mapping[str, Any]]) -> pd.DataFrame:
    """
    One row per physical-workload result.

    The ``value`` column holds the method's own index: LI (NIOSH), score
    (OCRA), m_r (EN 1005-3), the carried weight (carrying), the observed
    angle (posture) or the largest force-to-limit ratio (push/pull). Results
    without a value (no verdict, no angle) get NaN.

    :param results: Result dictionaries from any physical evaluator
    """
    rows = []
    for r in results:
        method = _method_of(r)
        if method == "niosh":
            value = r["li"]
        elif method == "ocra":
            value = r["score"]
        elif method == "en1005-3":
            value = r["m_r"]
        elif method == "push-pull":
            ratios = [c["force"] / c["limit"] for c in r["checks"].values()]
            value = max(ratios) if ratios else None
        elif method == "posture":
            value = r["angle"]
        else:
            value = r["weight"]
        if value is None:
            value = np.nan
        rows.append({
            "task_id": r.get("task_id", ""),
            "group_id": r.get("group_id", ""),
            "method": method,
            "value": value,
            "verdict": RiskLevel(r["verdict"]).value,
            "label": r["label"],
        })
    return pd.DataFrame(rows)
