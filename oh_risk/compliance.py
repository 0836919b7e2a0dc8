"""
NEN-EN 689 Compliance Module
============================

Statistical compliance test of a measurement series against an occupational
exposure limit value (OELV), per NEN-EN 689:2018+C1:2019.

Test selection by number of valid measurements n:

- n < 3: no statistics, verdict INSUFFICIENT
- 3 <= n < 6: preliminary test (5.5.2), distribution-free
    max(values) < f(n) x OELV       -> ACCEPTABLE   (f = 10% / 15% / 20%)
    any value > OELV                -> UNACCEPTABLE
    otherwise                       -> UNCERTAIN
- n >= 6: statistical test (5.5.3 + Annex F)
    log-normal (F.3): U_R = [ln(OELV) - ln(GM)] / ln(GSD)
    normal (F.4):     U_R = (OELV - AM) / SD
    U_R >= U_T(n)   -> ACCEPTABLE, otherwise UNACCEPTABLE

P95, P95 as a percentage of the OELV and the exceedance fraction are always
reported when n >= 3, independent of the verdict.

The engine does not correct for respiratory protection or for shifts longer
than 8 hours. ``exposure_correction_flags`` only signals that such a
correction must be applied to the values before they are passed in.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from .descriptive import MIN_STATISTICS_N, describe_values, exceedance_fraction
from .records import (
    validate_measurement_series,
    validate_substance,
    validate_work_task,
    valid_values,
)
from .registry import ComplianceMethod, Distribution, Verdict
from .tables import (
    UT_MAX_N,
    UT_MIN_N,
    get_preliminary_threshold,
    get_reassessment_months,
    get_ut,
)


# =============================================================================
# MeasurementStatistics (dict)
# =============================================================================

MeasurementStatistics = Dict[str, Any]


def create_measurement_statistics(
    n: int,
    distribution: Distribution,
    verdict: Verdict,
    label: str,
    method: ComplianceMethod = ComplianceMethod.NONE,
    oelv: Optional[float] = None,
    unit: str = "mg/m3",
    description: Optional[Dict[str, Any]] = None,
    percent_of_oelv: Optional[float] = None,
    overshoot_fraction: Optional[float] = None,
    ur: Optional[float] = None,
    ut: Optional[float] = None,
    ut_capped: bool = False,
    threshold_fraction: Optional[float] = None,
    max_value: Optional[float] = None,
    reassessment_months: Optional[int] = None,
    reason: str = "",
) -> MeasurementStatistics:
    """
    Create a MeasurementStatistics dictionary.

    :param n: Number of valid measurements
    :param distribution: Distribution family used
    :param verdict: Test outcome
    :param label: Human-readable verdict label
    :param method: Test that produced the verdict
    :param oelv: Limit value, or None when unknown
    :param unit: Unit of values and OELV
    :param description: Output of describe_values (None when n < 3)
    :param percent_of_oelv: P95 as percentage of the OELV
    :param overshoot_fraction: Estimated fraction of exposures above the OELV
    :param ur: Test statistic U_R (Annex F only)
    :param ut: Critical value U_T (Annex F only)
    :param ut_capped: True when n exceeded the U_T table and U_T(30) was used
    :param threshold_fraction: Preliminary-test fraction of the OELV
    :param max_value: Highest valid reading
    :param reassessment_months: Annex I reassessment interval, if applicable
    :param reason: Why no verdict could be reached, if applicable
    :returns: MeasurementStatistics dictionary
    """
    description = description or {}
    return {
        "n": n,
        "distribution": distribution,
        "gm": description.get("gm"),
        "gsd": description.get("gsd"),
        "am": description.get("am"),
        "sd": description.get("sd"),
        "mean_ln": description.get("mean_ln"),
        "sd_ln": description.get("sd_ln"),
        "p95": description.get("p95"),
        "max_value": max_value,
        "oelv": oelv,
        "unit": unit,
        "percent_of_oelv": percent_of_oelv,
        "overshoot_fraction": overshoot_fraction,
        "method": method,
        "verdict": verdict,
        "label": label,
        "ur": ur,
        "ut": ut,
        "ut_capped": ut_capped,
        "threshold_fraction": threshold_fraction,
        "threshold_value": (
            threshold_fraction * oelv
            if threshold_fraction is not None and oelv is not None
            else None
        ),
        "reassessment_months": reassessment_months,
        "reason": reason,
    }


# =============================================================================
# Tests
# =============================================================================

def _preliminary_test(values: Sequence[float], oelv: float) -> Dict[str, Any]:
    """NEN-EN 689 5.5.2 threshold test for 3 <= n < 6."""
    n = len(values)
    fraction = get_preliminary_threshold(n)
    max_value = max(values)

    if max_value > oelv:
        verdict = Verdict.UNACCEPTABLE
        label = f"Unacceptable - value {max_value:g} > OELV {oelv:g} (5.5.2)"
    elif max_value < fraction * oelv:
        verdict = Verdict.ACCEPTABLE
        label = (
            f"Acceptable - all values < {fraction * 100:g}% of OELV "
            f"(5.5.2 preliminary test, n={n})"
        )
    else:
        verdict = Verdict.UNCERTAIN
        label = (
            f"No decision - highest value between {fraction * 100:g}% and 100% of OELV. "
            f"Extend to >= {UT_MIN_N} measurements for the statistical test (5.5.3)"
        )
    return {
        "verdict": verdict,
        "label": label,
        "threshold_fraction": fraction,
        "max_value": max_value,
    }


def _annex_f_test(description: Dict[str, Any], oelv: float) -> Dict[str, Any]:
    """NEN-EN 689 Annex F U_R vs U_T test for n >= 6."""
    n = description["n"]
    distribution = description["distribution"]
    ut = get_ut(n)

    if distribution == Distribution.NORMAL:
        center, spread, limit, clause = description["am"], description["sd"], oelv, "F.4 normal"
    else:
        center, spread, clause = description["mean_ln"], description["sd_ln"], "F.3 log-normal"
        limit = math.log(oelv)

    if spread == 0:
        # Identical readings: U_R is undefined; compare the common value directly
        mean_value = description["am"] if distribution == Distribution.NORMAL else description["gm"]
        if mean_value < oelv:
            return {
                "verdict": Verdict.ACCEPTABLE,
                "label": "Acceptable - all measurements identical and < OELV",
                "ur": None,
                "ut": ut,
            }
        return {
            "verdict": Verdict.UNACCEPTABLE,
            "label": "Unacceptable - all measurements identical and >= OELV",
            "ur": None,
            "ut": ut,
        }

    ur = (limit - center) / spread
    if ur >= ut:
        verdict = Verdict.ACCEPTABLE
        label = (
            f"Acceptable - U_R ({ur:.3f}) >= U_T ({ut:.3f}), "
            f"NEN-EN 689 Annex F ({clause})"
        )
    else:
        verdict = Verdict.UNACCEPTABLE
        label = (
            f"Unacceptable - U_R ({ur:.3f}) < U_T ({ut:.3f}), "
            f"NEN-EN 689 Annex F ({clause})"
        )
    return {"verdict": verdict, "label": label, "ur": ur, "ut": ut}


def compute_measurement_statistics(
    values: Sequence[float],
    oelv: Optional[float],
    unit: str = "mg/m3",
    distribution: Distribution = Distribution.LOG_NORMAL,
) -> MeasurementStatistics:
    """
    Compliance test of valid measurement values against an OELV.

    :param values: Non-excluded, positive readings, already corrected for
                   respiratory protection and shift length where required
    :param oelv: Limit value (same unit as values), or None when unknown
    :param unit: Unit string carried into the result
    :param distribution: Distribution family for P95 and the Annex F test
    :returns: MeasurementStatistics dictionary
    :raises ValueError: If any value is not finite and positive, the OELV is
                        given but not positive, or the distribution is unknown
    """
    distribution = Distribution.from_value(distribution)
    values = [float(v) for v in values]
    invalid = [v for v in values if not math.isfinite(v) or v <= 0]
    if invalid:
        raise ValueError(f"Measurement values must be finite and positive, got {invalid!r}")
    if oelv is not None:
        oelv = float(oelv)
        if not math.isfinite(oelv) or oelv <= 0:
            raise ValueError(f"OELV must be positive, got {oelv!r}")
    n = len(values)

    if n < MIN_STATISTICS_N:
        return create_measurement_statistics(
            n=n,
            distribution=distribution,
            verdict=Verdict.INSUFFICIENT,
            label=f"No verdict - at least {MIN_STATISTICS_N} valid measurements required (n={n})",
            oelv=oelv,
            unit=unit,
            max_value=max(values) if values else None,
            reason="insufficient measurements",
        )

    description = describe_values(values, distribution)

    if oelv is None:
        return create_measurement_statistics(
            n=n,
            distribution=distribution,
            verdict=Verdict.INSUFFICIENT,
            label="No verdict - OELV unknown; descriptive statistics only",
            oelv=None,
            unit=unit,
            description=description,
            max_value=max(values),
            reason="no OELV",
        )

    if distribution == Distribution.NORMAL:
        overshoot = exceedance_fraction(oelv, description["am"], description["sd"], distribution)
    else:
        overshoot = exceedance_fraction(
            oelv, description["mean_ln"], description["sd_ln"], distribution
        )
    percent = description["p95"] / oelv * 100

    if n < UT_MIN_N:
        test = _preliminary_test(values, oelv)
        return create_measurement_statistics(
            n=n,
            distribution=distribution,
            verdict=test["verdict"],
            label=test["label"],
            method=ComplianceMethod.PRELIMINARY,
            oelv=oelv,
            unit=unit,
            description=description,
            percent_of_oelv=percent,
            overshoot_fraction=overshoot,
            threshold_fraction=test["threshold_fraction"],
            max_value=test["max_value"],
        )

    test = _annex_f_test(description, oelv)
    reassessment = None
    if test["verdict"] == Verdict.ACCEPTABLE:
        reassessment = get_reassessment_months(description["gm"] / oelv)
    return create_measurement_statistics(
        n=n,
        distribution=distribution,
        verdict=test["verdict"],
        label=test["label"],
        method=ComplianceMethod.ANNEX_F,
        oelv=oelv,
        unit=unit,
        description=description,
        percent_of_oelv=percent,
        overshoot_fraction=overshoot,
        ur=test["ur"],
        ut=test["ut"],
        ut_capped=n > UT_MAX_N,
        max_value=max(values),
        reassessment_months=reassessment,
    )


# =============================================================================
# Series-level helpers
# =============================================================================

def select_primary_oel(substance: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    The OEL entry a series is tested against.

    Prefers the first 8-hour TWA entry with a positive value (an entry without
    period counts as 8-hour TWA), then the first entry with a positive value.

    :param substance: Substance record
    :returns: OELEntry or None
    """
    oels = [o for o in substance.get("oels") or [] if o.get("value") is not None and o["value"] > 0]
    for oel in oels:
        if (oel.get("period") or "8h-twa") == "8h-twa":
            return oel
    return oels[0] if oels else None


def evaluate_series(
    series: Dict[str, Any],
    substance: Dict[str, Any],
) -> MeasurementStatistics:
    """
    Compliance test of a stored measurement series.

    Excluded and non-positive readings are dropped, and the substance's
    primary OEL is used as the limit.

    :param series: MeasurementSeries record
    :param substance: Substance record for the measured agent
    :returns: MeasurementStatistics with series_id, substance_id, group_id added
    """
    series = validate_measurement_series(series)
    substance = validate_substance(substance)
    oel = select_primary_oel(substance)

    result = compute_measurement_statistics(
        valid_values(series),
        oel["value"] if oel else None,
        oel["unit"] if oel else "mg/m3",
        series["distribution"],
    )
    result["series_id"] = series["id"]
    result["substance_id"] = substance["id"]
    result["group_id"] = series["group_id"]
    return result


def exposure_correction_flags(tasks: List[Dict[str, Any]]) -> Dict[str, bool]:
    """
    Corrections the caller must apply before testing.

    :param tasks: WorkTask records linked to the measured group
    :returns: Dict with respirator_correction_required (measured values must be
              corrected with the assigned protection factor) and
              shift_normalization_required (E_d = C x t / 8, Annex G)
    """
    tasks = [validate_work_task(t) for t in tasks]
    return {
        "respirator_correction_required": any("respirator" in t["ppe"] for t in tasks),
        "shift_normalization_required": any(t["duration"] == ">8h" for t in tasks),
    }


def summarize_measurement_statistics(result: MeasurementStatistics) -> str:
    """
    Generate a summary string for a compliance result.

    :param result: MeasurementStatistics dictionary
    :returns: Human-readable summary string
    """
    lines = [
        f"NEN-EN 689: n={result['n']} ({result['distribution'].value})",
        f"  Verdict: {result['verdict'].value} [{result['method'].value}]",
        f"  {result['label']}",
    ]
    if result["gm"] is not None:
        unit = result["unit"]
        lines.append(f"  GM: {result['gm']:.4g} {unit}  GSD: {result['gsd']:.3f}")
        lines.append(f"  AM: {result['am']:.4g} {unit}  SD: {result['sd']:.4g}")
        lines.append(f"  P95: {result['p95']:.4g} {unit}")
    if result["oelv"] is not None and result["percent_of_oelv"] is not None:
        lines.append(f"  OELV: {result['oelv']:g} {result['unit']}")
        lines.append(f"  P95 / OELV: {result['percent_of_oelv']:.1f}%")
        lines.append(f"  Overshoot fraction: {result['overshoot_fraction']:.2%}")
    if result["ur"] is not None:
        lines.append(f"  U_R: {result['ur']:.3f}  U_T: {result['ut']:.3f}")
    if result["reassessment_months"] is not None:
        lines.append(f"  Reassessment: {result['reassessment_months']} months")
    return "\n".join(lines)
