"""
Regulatory Lookup Tables
========================

Declarative definitions for every tabulated constant the calculators use.

This module centralizes the tables to:
1. Keep scoring logic free of inline conditional chains
2. Make each table versionable against the edition of its source standard
3. Allow the tables to be tested independently of the calculators

Tables
------
- UT_TABLE: NEN-EN 689 Annex F, Table F.1 critical values U_T(n)
- PRELIMINARY_THRESHOLDS: NEN-EN 689 5.5.2 fractions of the OELV (n = 3, 4, 5)
- TIER1_*: emission and control factors of the tier-1 screening model
- NIOSH_FREQUENCY_BREAKPOINTS / NIOSH_COUPLING: ISO 11228-1 / NIOSH 1994
- CARRYING_*: Mital-type correction factors and base limits
- PUSH_PULL_*: ISO 11228-2 force ceilings and floor-condition factors
- OCRA_*: ISO 11228-3 checklist ordinal scales
- EN1005_*: EN 1005-3 reference forces and multipliers
- POSTURE_*: EN 1005-4 / ISO 11226 posture observation heuristic
"""
from __future__ import annotations

import math
import warnings
from typing import Any, Dict, List, Optional, Tuple


TABLE_VERSIONS: Dict[str, str] = {
    "UT_TABLE": "NEN-EN 689:2018+C1:2019, Annex F, Table F.1",
    "PRELIMINARY_THRESHOLDS": "NEN-EN 689:2018+C1:2019, 5.5.2",
    "REASSESSMENT_INTERVALS": "NEN-EN 689:2018+C1:2019, Annex I",
    "NIOSH_FREQUENCY_BREAKPOINTS": "ISO 11228-1:2021 Annex B / NIOSH 1994",
    "NIOSH_COUPLING": "ISO 11228-1:2021 Annex B / NIOSH 1994",
    "OCRA_SCALES": "ISO 11228-3:2007 / OCRA checklist",
    "EN1005_MULTIPLIERS": "EN 1005-3:2002+A1:2008",
    "PUSH_PULL_LIMITS": "ISO 11228-2:2007 (simplified)",
    "POSTURE_RULES": "EN 1005-4:2005+A1:2008 / ISO 11226:2000 (simplified)",
}


# =============================================================================
# NEN-EN 689
# =============================================================================

# 70% upper confidence factor for the 95th percentile of a log-normal
# distribution. The published table stops at n = 30.
UT_TABLE: Dict[int, float] = {
    6: 2.187, 7: 2.120, 8: 2.072, 9: 2.035, 10: 2.005,
    11: 1.981, 12: 1.961, 13: 1.944, 14: 1.929, 15: 1.917,
    16: 1.905, 17: 1.895, 18: 1.886, 19: 1.878, 20: 1.870,
    21: 1.863, 22: 1.857, 23: 1.851, 24: 1.846, 25: 1.841,
    26: 1.836, 27: 1.832, 28: 1.828, 29: 1.824, 30: 1.820,
}

UT_MIN_N = min(UT_TABLE)
UT_MAX_N = max(UT_TABLE)

PRELIMINARY_THRESHOLDS: Dict[int, float] = {
    3: 0.10,
    4: 0.15,
    5: 0.20,
}

# (upper bound of GM/OELV, months until reassessment)
REASSESSMENT_INTERVALS: List[Tuple[float, int]] = [
    (0.10, 36),
    (0.25, 24),
    (0.50, 18),
    (math.inf, 12),
]

# One-sided 95% standard normal quantile used in the closed-form P95
Z_95 = 1.645


def get_ut(n: int) -> float:
    """
    Critical value U_T for a series of ``n`` measurements.

    For n > 30 the n = 30 value is returned (the table is not extended; the
    smaller n gives a larger, more protective critical value).

    :param n: Number of valid measurements (>= 6)
    :returns: U_T(n)
    :raises ValueError: If n is below the Annex F minimum
    """
    if n < UT_MIN_N:
        raise ValueError(f"U_T is defined for n >= {UT_MIN_N}, got n={n}")
    if n > UT_MAX_N:
        warnings.warn(
            f"U_T table ends at n={UT_MAX_N}; using U_T({UT_MAX_N}) for n={n}"
        )
        return UT_TABLE[UT_MAX_N]
    return UT_TABLE[n]


def get_preliminary_threshold(n: int) -> float:
    """Fraction of the OELV that all values must stay below in the preliminary test."""
    if n not in PRELIMINARY_THRESHOLDS:
        raise ValueError(
            f"Preliminary test requires n in {sorted(PRELIMINARY_THRESHOLDS)}, got n={n}"
        )
    return PRELIMINARY_THRESHOLDS[n]


def get_reassessment_months(ratio: float) -> int:
    """Reassessment interval in months for a GM/OELV ratio."""
    for upper, months in REASSESSMENT_INTERVALS:
        if ratio < upper:
            return months
    return REASSESSMENT_INTERVALS[-1][1]


# =============================================================================
# Tier-1 Exposure Model
# =============================================================================

# Volatility/dustiness basis per aggregate state.
# Vapour-pressure classes: list of (lower bound exclusive, factor), kPa.
TIER1_VAPOUR_CLASSES: Dict[str, List[Tuple[float, float]]] = {
    "vapor-liquid": [(50.0, 100.0), (10.0, 40.0), (0.5, 10.0), (-math.inf, 2.0)],
    "liquid": [(10.0, 15.0), (1.0, 5.0), (-math.inf, 1.0)],
}

TIER1_STATE_FACTORS: Dict[str, float] = {
    "gas": 50.0,
    "aerosol": 80.0,
}

TIER1_DUSTINESS_FACTORS: Dict[str, float] = {
    "low": 1.0,
    "medium": 5.0,
    "high": 20.0,
}

TIER1_AGGREGATE_STATES = ["gas", "vapor-liquid", "liquid", "solid-powder", "aerosol"]

TIER1_PROCESS_FACTORS: Dict[str, Tuple[float, str]] = {
    "closed": (0.05, "Closed system"),
    "partly-closed": (0.2, "Partly closed"),
    "open": (1.0, "Open handling"),
    "high-emission": (5.0, "Open, high emission"),
}

TIER1_QUANTITY_FACTORS: Dict[str, Tuple[float, str]] = {
    "<100g": (0.5, "< 100 g/ml"),
    "100g-1kg": (2.0, "100 g - 1 kg"),
    "1-10kg": (5.0, "1 - 10 kg"),
    ">10kg": (10.0, "> 10 kg"),
}

# Normalized to an 8-hour time-weighted average
TIER1_DURATION_FACTORS: Dict[str, Tuple[float, str]] = {
    "<15min": (0.03, "< 15 min/day"),
    "15-60min": (0.1, "15 - 60 min/day"),
    "1-2h": (0.2, "1 - 2 h/day"),
    "2-4h": (0.4, "2 - 4 h/day"),
    "4-8h": (0.8, "4 - 8 h/day"),
    ">8h": (1.2, "> 8 h/day"),
}

TIER1_LEV_FACTORS: Dict[str, Tuple[float, str]] = {
    "none": (1.0, "No local exhaust ventilation"),
    "point": (20.0, "Point extraction"),
    "partial": (50.0, "Partial LEV"),
    "full": (100.0, "Full LEV"),
}

TIER1_VENTILATION_FACTORS: Dict[str, Tuple[float, str]] = {
    "none": (0.3, "No general ventilation"),
    "<1ACH": (0.7, "< 1 ACH"),
    "1-3ACH": (1.0, "1 - 3 ACH"),
    "3-6ACH": (2.0, "3 - 6 ACH"),
    ">6ACH": (5.0, "> 6 ACH"),
}

TIER1_ROOM_FACTORS: Dict[str, Tuple[float, str]] = {
    "<50m3": (0.5, "< 50 m3"),
    "50-500m3": (1.0, "50 - 500 m3"),
    ">500m3": (2.5, "> 500 m3"),
}

# (upper bound of index exclusive, band, label, measurement advice)
TIER1_BANDS: List[Tuple[float, str, str, str]] = [
    (0.5, "A", "Band A - < 10% of the OELV",
     "No measurement required. Document the qualitative assessment."),
    (5.0, "B", "Band B - 10-50% of the OELV",
     "Orienting measurement recommended (at least 3 measurements)."),
    (25.0, "C", "Band C - 50-100% of the OELV",
     "Full NEN-EN 689 measurement campaign required (n >= 6, worst-case strategy)."),
    (math.inf, "D", "Band D - > 100% of the OELV",
     "Immediate action and urgent measurement required. Consider stopping the work."),
]

# Conversion to kPa
VAPOUR_PRESSURE_TO_KPA: Dict[str, float] = {
    "Pa": 0.001,
    "kPa": 1.0,
    "mbar": 0.1,
    "bar": 100.0,
    "mmHg": 0.133322,
}

DEFAULT_VAPOUR_PRESSURE_KPA = 1.0
DEFAULT_DUSTINESS = "medium"


def lookup_factor(table: Dict[str, Tuple[float, str]], key: str, name: str) -> Tuple[float, str]:
    """
    Fetch a (factor, label) pair from an enum-keyed table.

    :param table: One of the TIER1_* tables
    :param key: Enum key supplied by the caller
    :param name: Field name used in the error message
    :returns: (factor, label)
    :raises ValueError: If the key is unknown
    """
    if key not in table:
        raise ValueError(f"Unknown {name}: {key!r}. Available: {list(table.keys())}")
    return table[key]


# =============================================================================
# NIOSH Lifting (ISO 11228-1)
# =============================================================================

NIOSH_LOAD_CONSTANT = 23.0  # kg

# Per duration class: (max lifts/min inclusive, frequency multiplier).
# The final open-ended row covers frequencies outside the method's range.
NIOSH_FREQUENCY_BREAKPOINTS: Dict[str, List[Tuple[float, float]]] = {
    # <= 1 h, followed by recovery >= 120% of work time
    "short": [
        (0.2, 1.00), (1, 0.94), (2, 0.91), (3, 0.88), (4, 0.84),
        (5, 0.80), (6, 0.75), (7, 0.70), (8, 0.60), (9, 0.52),
        (10, 0.45), (11, 0.41), (12, 0.37), (13, 0.34), (14, 0.31),
        (15, 0.28), (math.inf, 0.0),
    ],
    # 1-2 h, followed by recovery >= 30% of work time
    "medium": [
        (0.2, 0.95), (1, 0.88), (2, 0.84), (3, 0.79), (4, 0.72),
        (5, 0.60), (6, 0.50), (7, 0.42), (8, 0.35), (9, 0.30),
        (10, 0.26), (11, 0.23), (math.inf, 0.0),
    ],
    # 2-8 h
    "long": [
        (0.2, 0.85), (1, 0.75), (2, 0.65), (3, 0.55), (4, 0.45),
        (5, 0.35), (6, 0.27), (7, 0.22), (8, 0.18), (math.inf, 0.0),
    ],
}

NIOSH_COUPLING: Dict[str, float] = {
    "good": 1.00,
    "fair": 0.95,
    "poor": 0.90,
}

# Geometry domain bounds (cm, degrees, lifts/min)
NIOSH_H_MIN = 25.0
NIOSH_H_MAX = 63.0
NIOSH_V_OPTIMUM = 75.0
NIOSH_V_MAX = 175.0
NIOSH_D_MIN = 25.0
NIOSH_A_MAX = 135.0
NIOSH_FREQUENCY_MAX = 15.0
NIOSH_WEIGHT_MAX = 25.0  # kg

NIOSH_RISK_FLAGS: Dict[str, str] = {
    "one_handed": "One-handed lifting",
    "slippery_floor": "Slippery floor",
    "extreme_climate": "Extreme climate (> 32 C or < 0 C)",
    "uneven_floor": "Uneven or soft floor",
    "exceed_eight_hours": "Working time > 8 hours",
    "unstable_object": "Unstable object or shifting load",
    "high_acceleration": "High acceleration or jerky movement",
    "restricted_space": "Restricted freedom of movement",
}


def get_frequency_multiplier(frequency: float, duration: str) -> float:
    """
    NIOSH frequency multiplier FM for a lift rate and duration class.

    Uses the first breakpoint whose upper bound is >= the frequency.
    """
    if duration not in NIOSH_FREQUENCY_BREAKPOINTS:
        raise ValueError(
            f"Unknown lifting duration: {duration!r}. "
            f"Available: {list(NIOSH_FREQUENCY_BREAKPOINTS.keys())}"
        )
    for max_freq, fm in NIOSH_FREQUENCY_BREAKPOINTS[duration]:
        if frequency <= max_freq:
            return fm
    return 0.0


def get_coupling_multiplier(grip: str) -> float:
    if grip not in NIOSH_COUPLING:
        raise ValueError(f"Unknown grip quality: {grip!r}. Available: {list(NIOSH_COUPLING.keys())}")
    return NIOSH_COUPLING[grip]


# =============================================================================
# Carrying
# =============================================================================

# (max work hours inclusive, factor)
CARRYING_DURATION_FACTORS: List[Tuple[float, float]] = [
    (1.0, 1.14),
    (4.0, 1.08),
    (8.0, 1.00),
    (math.inf, 0.92),
]

CARRYING_ASYMMETRY_FACTORS: Dict[str, float] = {"0-30": 1.00, "30-60": 0.92}
CARRYING_GRIP_FACTORS: Dict[str, float] = {"good": 1.00, "fair": 0.93, "poor": 0.85}
CARRYING_CLIMATE_FACTORS: Dict[str, float] = {"normal": 1.00, "warm": 0.88}

# (acceptable limit, high-risk limit) in kg, before correction
CARRYING_BASE_LIMITS: Dict[bool, Tuple[float, float]] = {
    True: (13.0, 20.0),   # two-handed
    False: (5.5, 10.5),   # one-handed
}


def get_carrying_duration_factor(hours: float) -> float:
    for max_hours, factor in CARRYING_DURATION_FACTORS:
        if hours <= max_hours:
            return factor
    return CARRYING_DURATION_FACTORS[-1][1]


# =============================================================================
# Push / Pull (ISO 11228-2)
# =============================================================================

# Handle height -> (initial force limit, sustained force limit) in N
PUSH_PULL_LIMITS: Dict[str, Tuple[float, float]] = {
    "low": (200.0, 100.0),    # < 100 cm
    "mid": (220.0, 110.0),    # 100-150 cm
    "high": (190.0, 95.0),    # > 150 cm
}

PUSH_PULL_FLOOR_FACTORS: Dict[str, float] = {
    "good": 1.0,
    "average": 0.8,
    "poor": 0.6,
}

# Forces up to this multiple of the ceiling are "moderate" rather than "high"
PUSH_PULL_MODERATE_MARGIN = 1.3


# =============================================================================
# OCRA Checklist (ISO 11228-3)
# =============================================================================

OCRA_SCALES: Dict[str, Dict[int, str]] = {
    "recovery": {
        0: "Sufficient recovery (>= 1 min per hour)",
        2: "Limited recovery",
        3: "2 of 8 hours without recovery",
        4: "3 of 8 hours without recovery",
        6: "4 of 8 hours without recovery",
        8: "Almost no recovery",
        10: "No recovery at all",
    },
    "force": {
        0: "No significant force",
        2: "Light force (< 10% MVC), occasional",
        4: "Light force, frequent",
        6: "Moderate force (10-50% MVC), occasional",
        8: "Moderate force, frequent",
        12: "High force (> 50% MVC), occasional",
        16: "High force, frequent",
        24: "Impact or peak loading",
    },
    "posture": {
        0: "Neutral posture",
        2: "Slight deviation, occasional",
        4: "Slight deviation, frequent",
        8: "Moderate deviation (e.g. flexed wrist)",
        12: "High postural load (e.g. shoulder > 90 degrees)",
        16: "Extreme posture, frequent",
        24: "Extreme posture with movement, continuous",
    },
    "repetitiveness": {
        0: "Varied movements, cycle time > 15 s",
        1: "Moderately varied, cycle time 10-15 s",
        3: "Little variation, cycle time 5-10 s",
        6: "Nearly identical cycles, cycle time 3-5 s",
        10: "Almost continuous repetition, cycle time < 3 s",
    },
    "additional": {
        0: "No additional factors",
        2: "1 additional factor (vibration, gloves, precision work)",
        4: "2-3 additional factors",
        8: "4-5 additional factors",
        12: ">= 6 additional factors or extreme conditions",
    },
}

OCRA_FACTORS: List[str] = list(OCRA_SCALES)

# (upper bound exclusive, category, level, label)
OCRA_CATEGORIES: List[Tuple[float, str, str, str]] = [
    (7.5, "green", "acceptable", "Acceptable (OCRA: green)"),
    (11.0, "yellow", "moderate", "Slight risk (OCRA: yellow)"),
    (14.0, "light-orange", "moderate", "Moderate risk (OCRA: light orange)"),
    (22.5, "orange", "high", "High risk (OCRA: orange)"),
    (math.inf, "red", "high", "Very high risk (OCRA: red)"),
]

OCRA_FOLLOW_UP_SCORE = 11.0


def validate_ocra_score(factor: str, value: Any) -> int:
    """
    Check an OCRA factor score against its ordinal scale.

    :param factor: One of the OCRA_SCALES keys
    :param value: Score supplied by the caller
    :returns: The score as int
    :raises ValueError: If the factor is unknown or the score is not on the scale
    """
    if factor not in OCRA_SCALES:
        raise ValueError(f"Unknown OCRA factor: {factor!r}. Available: {list(OCRA_SCALES.keys())}")
    scale = OCRA_SCALES[factor]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value not in scale:
        raise ValueError(
            f"Invalid OCRA {factor} score: {value!r}. Allowed: {sorted(scale)}"
        )
    return int(value)


# =============================================================================
# EN 1005-3 Forces
# =============================================================================

EN1005_REFERENCE_FORCES: Dict[str, Tuple[float, str]] = {
    "push-one-hand": (110.0, "Push, one hand, standing"),
    "push-two-hands": (220.0, "Push, two hands, standing"),
    "pull-one-hand": (110.0, "Pull, one hand, standing"),
    "pull-two-hands": (220.0, "Pull, two hands, standing"),
    "lateral-one-hand": (80.0, "Lateral force, one hand"),
    "lateral-two-hands": (160.0, "Lateral force, two hands"),
    "rotation-one-hand": (15.0, "Rotation, one hand"),
    "power-grip": (130.0, "Power grip, one hand"),
    "pinch-grip": (25.0, "Pinch grip, fingertip"),
    "pedal-seated": (500.0, "Pedal, seated"),
}

EN1005_SPEED_MULTIPLIERS: Dict[str, float] = {
    "slow": 1.00,       # < 0.2 m/s
    "moderate": 0.85,   # 0.2-0.5 m/s
    "fast": 0.75,       # > 0.5 m/s
}

EN1005_FREQUENCY_MULTIPLIERS: Dict[str, float] = {
    "rare": 1.00,            # once or rarely
    "<1/day": 0.90,
    "1-10/day": 0.80,
    "10-100/day": 0.70,
    ">100/day": 0.60,
}

EN1005_DURATION_MULTIPLIERS: Dict[str, float] = {
    "<1s": 1.00,
    "1-5s": 0.90,
    "5-30s": 0.80,
    ">30s": 0.70,
}

# (upper bound inclusive of m_r, level, label)
EN1005_RISK_BANDS: List[Tuple[float, str, str]] = [
    (0.5, "acceptable", "Acceptable (m_r <= 0.5)"),
    (0.7, "moderate", "Borderline (0.5 < m_r <= 0.7)"),
    (math.inf, "high", "Not acceptable (m_r > 0.7)"),
]


def resolve_multiplier(table: Dict[str, float], value: Any, name: str) -> float:
    """
    Accept either a class key or one of the tabulated multiplier values.

    :param table: One of the EN1005_*_MULTIPLIERS tables
    :param value: Class key (e.g. "fast") or numeric multiplier (e.g. 0.75)
    :param name: Multiplier name used in the error message
    :returns: Multiplier value
    :raises ValueError: If the value is neither a key nor a tabulated value
    """
    if isinstance(value, str):
        if value in table:
            return table[value]
        raise ValueError(f"Unknown {name} class: {value!r}. Available: {list(table.keys())}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a class key or number, got {value!r}")
    if float(value) not in table.values():
        raise ValueError(
            f"Invalid {name}: {value!r}. Allowed: {sorted(set(table.values()), reverse=True)}"
        )
    return float(value)


def get_reference_force(operation: str) -> float:
    """Reference force F_B (N) for a named operation."""
    if operation not in EN1005_REFERENCE_FORCES:
        raise ValueError(
            f"Unknown operation: {operation!r}. Available: {list(EN1005_REFERENCE_FORCES.keys())}"
        )
    return EN1005_REFERENCE_FORCES[operation][0]


def first_band(bands: List[Tuple], value: float, inclusive: bool = False) -> Optional[Tuple]:
    """
    Return the first row of a breakpoint table whose bound admits ``value``.

    :param bands: Rows whose first element is the upper bound
    :param value: Value to classify
    :param inclusive: Compare with <= instead of <
    """
    for row in bands:
        upper = row[0]
        if (value <= upper) if inclusive else (value < upper):
            return row
    return None


# =============================================================================
# Postures (EN 1005-4 / ISO 11226)
# =============================================================================

POSTURE_BODY_PARTS: Dict[str, str] = {
    "trunk": "Trunk / back",
    "neck-head": "Neck / head",
    "upper-arm": "Upper arm / shoulder",
    "lower-arm": "Forearm / elbow",
    "wrist-hand": "Wrist / hand",
    "whole-leg": "Leg / hip",
    "knee": "Kneeling / squatting",
}

POSTURE_FREQUENCIES: Dict[str, str] = {
    "occasional": "Occasional (< 1/3 of task time or < 4 per hour)",
    "frequent": "Frequent (1/3-3/4 of task time or 4-15 per hour)",
    "static": "Static / sustained (> 3/4 of task time or > 15 per hour)",
}

# verdict -> (risk level, label)
POSTURE_VERDICTS: Dict[str, Tuple[str, str]] = {
    "acceptable": ("acceptable", "Acceptable"),
    "conditionally": ("moderate", "Conditionally acceptable"),
    "not-acceptable": ("high", "Not acceptable"),
}

# Verdict under high exposure: a static frequency, or a posture held static
# at a frequent rate
POSTURE_HIGH_EXPOSURE: Dict[str, str] = {
    "trunk": "not-acceptable",
    "neck-head": "not-acceptable",
    "upper-arm": "not-acceptable",
    "knee": "not-acceptable",
    "lower-arm": "conditionally",
    "wrist-hand": "conditionally",
    "whole-leg": "conditionally",
}

# Verdict for frequent, non-static postures; parts not listed fall through
# to the angle rules
POSTURE_FREQUENT: Dict[str, str] = {
    "trunk": "conditionally",
    "neck-head": "conditionally",
}

# Body part -> (max angle in degrees, verdict above it, verdict above it when static)
POSTURE_ANGLE_LIMITS: Dict[str, Tuple[float, str, str]] = {
    "trunk": (20.0, "conditionally", "not-acceptable"),
    "upper-arm": (60.0, "conditionally", "not-acceptable"),
    "neck-head": (25.0, "conditionally", "conditionally"),
}
