"""
Descriptive Statistics Module
=============================

Moment and percentile primitives used by every exposure verdict.

- Log-normal moments: mean/SD of ln(x), geometric mean GM and GSD
- Normal moments: arithmetic mean AM and sample SD
- Closed-form 95th percentile and exceedance fraction
- Distribution-fit diagnostics (Shapiro-Wilk, Lilliefors)

All SDs are sample standard deviations (ddof=1). A single value has no
spread: its SD is reported as 0 with ``spread_defined=False`` and must never
be used as a divisor.
"""
from __future__ import annotations

from typing import Any, Dict, Sequence
import warnings

import numpy as np
from scipy import stats
from statsmodels.stats.diagnostic import lilliefors

from .registry import Distribution
from .tables import Z_95


MIN_STATISTICS_N = 3
MIN_LILLIEFORS_N = 5

SeriesDescription = Dict[str, Any]


# =============================================================================
# Moments
# =============================================================================

def _as_positive_array(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1 or arr.size == 0:
        raise ValueError("Statistics require a non-empty sequence of values")
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0):
        raise ValueError("Statistics require finite, positive values")
    return arr


def _sample_sd(arr: np.ndarray) -> float:
    if arr.size < 2:
        warnings.warn("Spread is undefined for a single value; SD reported as 0")
        return 0.0
    if np.all(arr == arr[0]):
        return 0.0
    return float(np.std(arr, ddof=1))


def log_moments(values: Sequence[float]) -> Dict[str, Any]:
    """
    Log-transformed moments of a series.

    :param values: Positive readings (n >= 1)
    :returns: Dict with n, mean_ln, sd_ln, gm, gsd, spread_defined
    """
    arr = _as_positive_array(values)
    ln = np.log(arr)
    mean_ln = float(np.mean(ln))
    sd_ln = _sample_sd(ln)
    return {
        "n": int(arr.size),
        "mean_ln": mean_ln,
        "sd_ln": sd_ln,
        "gm": float(np.exp(mean_ln)),
        "gsd": float(np.exp(sd_ln)),
        "spread_defined": arr.size > 1,
    }


def arithmetic_moments(values: Sequence[float]) -> Dict[str, Any]:
    """
    Raw moments of a series.

    :param values: Positive readings (n >= 1)
    :returns: Dict with n, am, sd, spread_defined
    """
    arr = _as_positive_array(values)
    return {
        "n": int(arr.size),
        "am": float(np.mean(arr)),
        "sd": _sample_sd(arr),
        "spread_defined": arr.size > 1,
    }


# =============================================================================
# Percentiles
# =============================================================================

def percentile_95(center: float, spread: float, distribution: Distribution) -> float:
    """
    Closed-form 95th percentile.

    Log-normal: exp(mean_ln + 1.645 * sd_ln), with center/spread on the log scale.
    Normal: am + 1.645 * sd.
    """
    if Distribution.from_value(distribution) == Distribution.NORMAL:
        return center + Z_95 * spread
    return float(np.exp(center + Z_95 * spread))


def exceedance_fraction(
    limit: float,
    center: float,
    spread: float,
    distribution: Distribution,
) -> float:
    """
    Fraction of the fitted distribution above ``limit``.

    With zero spread the distribution is degenerate: the fraction is 1 when the
    (geometric) mean reaches the limit and 0 otherwise.

    :param limit: Limit value on the raw scale
    :param center: mean_ln (log-normal) or am (normal)
    :param spread: sd_ln (log-normal) or sd (normal)
    :param distribution: Distribution family
    """
    if Distribution.from_value(distribution) == Distribution.NORMAL:
        location, threshold = center, limit
    else:
        location, threshold = center, float(np.log(limit))
    if spread <= 0:
        return 1.0 if location >= threshold else 0.0
    return float(stats.norm.sf((threshold - location) / spread))


# =============================================================================
# Series Description
# =============================================================================

def describe_values(
    values: Sequence[float],
    distribution: Distribution = Distribution.LOG_NORMAL,
) -> SeriesDescription:
    """
    Descriptive statistics for a measurement series.

    Both parameter sets (GM/GSD and AM/SD) are always reported; P95 follows
    the chosen distribution.

    :param values: Positive readings
    :param distribution: Distribution family for the P95
    :returns: Dict with n, gm, gsd, am, sd, mean_ln, sd_ln, p95, distribution
    :raises ValueError: "no statistics" when fewer than 3 values are given
    """
    distribution = Distribution.from_value(distribution)
    if len(values) < MIN_STATISTICS_N:
        raise ValueError(
            f"no statistics: at least {MIN_STATISTICS_N} values required, got {len(values)}"
        )
    log_stats = log_moments(values)
    raw_stats = arithmetic_moments(values)
    if distribution == Distribution.NORMAL:
        p95 = percentile_95(raw_stats["am"], raw_stats["sd"], distribution)
    else:
        p95 = percentile_95(log_stats["mean_ln"], log_stats["sd_ln"], distribution)
    return {
        "n": log_stats["n"],
        "distribution": distribution,
        "mean_ln": log_stats["mean_ln"],
        "sd_ln": log_stats["sd_ln"],
        "gm": log_stats["gm"],
        "gsd": log_stats["gsd"],
        "am": raw_stats["am"],
        "sd": raw_stats["sd"],
        "p95": p95,
    }


# =============================================================================
# Distribution Fit
# =============================================================================

def check_distribution_fit(
    values: Sequence[float],
    distribution: Distribution = Distribution.LOG_NORMAL,
    alpha: float = 0.05,
) -> Dict[str, Any]:
    """
    Goodness-of-fit checks for the assumed distribution.

    Tests are run on ln(values) for log-normal and on the raw values for
    normal. The result is advisory and never changes a compliance verdict.

    :param values: Positive readings (n >= 3)
    :param distribution: Assumed distribution family
    :param alpha: Significance level
    :returns: Dict with shapiro_stat, shapiro_p, lilliefors_stat, lilliefors_p,
              consistent (False if any test rejects), notes
    """
    distribution = Distribution.from_value(distribution)
    arr = _as_positive_array(values)
    if arr.size < MIN_STATISTICS_N:
        raise ValueError(
            f"no statistics: at least {MIN_STATISTICS_N} values required, got {arr.size}"
        )
    sample = np.log(arr) if distribution == Distribution.LOG_NORMAL else arr
    notes = []

    if np.ptp(sample) == 0:
        return {
            "distribution": distribution,
            "n": int(arr.size),
            "shapiro_stat": np.nan,
            "shapiro_p": np.nan,
            "lilliefors_stat": np.nan,
            "lilliefors_p": np.nan,
            "consistent": True,
            "notes": ["All values identical; fit tests skipped"],
        }

    shapiro_stat, shapiro_p = stats.shapiro(sample)

    lf_stat, lf_p = np.nan, np.nan
    if arr.size >= MIN_LILLIEFORS_N:
        lf_stat, lf_p = lilliefors(sample, dist="norm")
    else:
        notes.append(f"Lilliefors test skipped (n < {MIN_LILLIEFORS_N})")

    rejected = shapiro_p < alpha or (not np.isnan(lf_p) and lf_p < alpha)
    if rejected:
        notes.append(f"Data are not consistent with a {distribution.value} distribution")

    return {
        "distribution": distribution,
        "n": int(arr.size),
        "shapiro_stat": float(shapiro_stat),
        "shapiro_p": float(shapiro_p),
        "lilliefors_stat": float(lf_stat),
        "lilliefors_p": float(lf_p),
        "consistent": not rejected,
        "notes": notes,
    }
