"""
Input Records
=============

Typed dictionaries for the observations the engine evaluates, each with a
``create_*`` factory and a ``validate_*`` function.

Architecture Note:
    Records are plain dictionaries (TypedDict) rather than classes, so that
    the form and persistence layers can hand over JSON-decoded data as-is.
    Every calculator passes its input through the matching ``validate_*``
    function, which returns a normalized copy (defaults filled in) and never
    mutates the caller's dictionary.

Validation fails fast with ``ValueError`` on structurally invalid input:
unknown enum keys, non-positive magnitudes, wrong types. Missing *optional*
attributes are not errors; documented defaults apply.

Physical-workload records keep a required factor that was not assessed as
None instead of rejecting it; the calculators turn such a record into an
explicit "no verdict" result.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, TypedDict

from .registry import Distribution
from .tables import (
    CARRYING_ASYMMETRY_FACTORS,
    CARRYING_CLIMATE_FACTORS,
    CARRYING_GRIP_FACTORS,
    EN1005_DURATION_MULTIPLIERS,
    EN1005_FREQUENCY_MULTIPLIERS,
    EN1005_SPEED_MULTIPLIERS,
    NIOSH_COUPLING,
    NIOSH_FREQUENCY_BREAKPOINTS,
    NIOSH_RISK_FLAGS,
    OCRA_FACTORS,
    POSTURE_BODY_PARTS,
    POSTURE_FREQUENCIES,
    POSTURE_VERDICTS,
    PUSH_PULL_FLOOR_FACTORS,
    PUSH_PULL_LIMITS,
    TIER1_AGGREGATE_STATES,
    TIER1_DURATION_FACTORS,
    TIER1_DUSTINESS_FACTORS,
    TIER1_LEV_FACTORS,
    TIER1_PROCESS_FACTORS,
    TIER1_QUANTITY_FACTORS,
    TIER1_ROOM_FACTORS,
    TIER1_VENTILATION_FACTORS,
    VAPOUR_PRESSURE_TO_KPA,
    get_reference_force,
    resolve_multiplier,
    validate_ocra_score,
)


OEL_PERIODS = ["8h-twa", "15min", "ceiling"]
OEL_ROUTES = ["inhalation", "dermal"]
PPE_TYPES = ["respirator", "gloves", "eye-clothing", "none"]


# =============================================================================
# Field checks
# =============================================================================

def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return value


def _positive(value: Any, name: str) -> float:
    value = _number(value, name)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return value


def _non_negative(value: Any, name: str) -> float:
    value = _number(value, name)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value!r}")
    return value


def _choice(value: Any, allowed, name: str) -> Any:
    if value not in allowed:
        raise ValueError(f"Invalid {name}: {value!r}. Available: {list(allowed)}")
    return value


def _optional(value: Any, check, name: str):
    return None if value is None else check(value, name)


# =============================================================================
# Hazardous substances
# =============================================================================

class OELEntry(TypedDict):
    """
    One occupational exposure limit for a substance.

    Keys:
        type: Limit source ("szw", "eu-oel", "dnel", "acgih", "dfg", "internal")
        value: Limit value, or None when the source lists no number
        unit: Unit string (e.g. "mg/m3", "ppm", "f/cm3")
        period: Averaging period ("8h-twa", "15min", "ceiling"); None means 8h-twa
        routes: Exposure routes ("inhalation", "dermal")
    """
    type: str
    value: Optional[float]
    unit: str
    period: Optional[str]
    routes: List[str]


class Substance(TypedDict):
    """
    Keys:
        id: Identifier referenced by tasks and series
        name: Product or substance name
        aggregate_state: One of TIER1_AGGREGATE_STATES
        vapour_pressure: Vapour pressure, or None (defaults to 1 kPa)
        vapour_pressure_unit: Unit of vapour_pressure (defaults to "kPa")
        dustiness: "low" | "medium" | "high", or None (defaults to "medium")
        oels: List of OELEntry
    """
    id: str
    name: str
    aggregate_state: str
    vapour_pressure: Optional[float]
    vapour_pressure_unit: str
    dustiness: Optional[str]
    oels: List[OELEntry]


def create_oel_entry(
    value: Optional[float],
    unit: str = "mg/m3",
    type: str = "szw",
    period: Optional[str] = "8h-twa",
    routes: Optional[List[str]] = None,
) -> OELEntry:
    """Create a validated OELEntry."""
    return validate_oel_entry({
        "type": type,
        "value": value,
        "unit": unit,
        "period": period,
        "routes": routes if routes is not None else ["inhalation"],
    })


def validate_oel_entry(entry: Dict[str, Any]) -> OELEntry:
    value = entry.get("value")
    if value is not None:
        value = _non_negative(value, "OEL value")
    period = entry.get("period")
    if period is not None:
        _choice(period, OEL_PERIODS, "OEL period")
    routes = list(entry.get("routes") or ["inhalation"])
    for route in routes:
        _choice(route, OEL_ROUTES, "OEL route")
    unit = entry.get("unit", "mg/m3")
    if not isinstance(unit, str) or not unit.strip():
        raise ValueError("OEL unit must be a nonempty string")
    return {
        "type": str(entry.get("type", "szw")),
        "value": value,
        "unit": unit,
        "period": period,
        "routes": routes,
    }


def create_substance(
    id: str,
    aggregate_state: str,
    name: str = "",
    vapour_pressure: Optional[float] = None,
    vapour_pressure_unit: str = "kPa",
    dustiness: Optional[str] = None,
    oels: Optional[List[Dict[str, Any]]] = None,
) -> Substance:
    """Create a validated Substance record."""
    return validate_substance({
        "id": id,
        "name": name,
        "aggregate_state": aggregate_state,
        "vapour_pressure": vapour_pressure,
        "vapour_pressure_unit": vapour_pressure_unit,
        "dustiness": dustiness,
        "oels": oels or [],
    })


def validate_substance(substance: Dict[str, Any]) -> Substance:
    unit = substance.get("vapour_pressure_unit") or "kPa"
    dustiness = substance.get("dustiness")
    return {
        "id": str(substance.get("id", "")),
        "name": str(substance.get("name") or substance.get("id", "")),
        "aggregate_state": _choice(
            substance.get("aggregate_state"), TIER1_AGGREGATE_STATES, "aggregate state"
        ),
        "vapour_pressure": _optional(
            substance.get("vapour_pressure"), _non_negative, "vapour pressure"
        ),
        "vapour_pressure_unit": _choice(unit, VAPOUR_PRESSURE_TO_KPA, "vapour pressure unit"),
        "dustiness": None if dustiness is None else _choice(
            dustiness, TIER1_DUSTINESS_FACTORS, "dustiness"
        ),
        "oels": [validate_oel_entry(o) for o in substance.get("oels") or []],
    }


def index_substances(substances: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Map substance ids to substance dictionaries.

    :raises ValueError: If a substance has no id or an id occurs twice
    """
    by_id: Dict[str, Dict[str, Any]] = {}
    for position, substance in enumerate(substances):
        substance_id = substance.get("id")
        if substance_id is None or not str(substance_id).strip():
            raise ValueError(f"Substance at position {position} has no id")
        substance_id = str(substance_id)
        if substance_id in by_id:
            raise ValueError(f"Duplicate substance id: {substance_id!r}")
        by_id[substance_id] = substance
    return by_id


class WorkTask(TypedDict):
    """
    A task in which workers handle hazardous substances.

    Keys:
        id: Task identifier
        description: Free text
        substance_ids: Substances handled in the task
        process_type: Containment ("closed", "partly-closed", "open", "high-emission")
        quantity: Quantity class per task ("<100g", "100g-1kg", "1-10kg", ">10kg")
        duration: Daily duration class ("<15min" ... ">8h")
        lev: Local exhaust ventilation ("none", "point", "partial", "full")
        ventilation: General ventilation ("none", "<1ACH", ..., ">6ACH")
        room_size: Room volume ("<50m3", "50-500m3", ">500m3")
        ppe: Personal protective equipment in use
    """
    id: str
    description: str
    substance_ids: List[str]
    process_type: str
    quantity: str
    duration: str
    lev: str
    ventilation: str
    room_size: str
    ppe: List[str]


def create_work_task(
    id: str,
    process_type: str,
    quantity: str,
    duration: str,
    lev: str = "none",
    ventilation: str = "none",
    room_size: str = "50-500m3",
    substance_ids: Optional[List[str]] = None,
    ppe: Optional[List[str]] = None,
    description: str = "",
) -> WorkTask:
    """Create a validated WorkTask record."""
    return validate_work_task({
        "id": id,
        "description": description,
        "substance_ids": substance_ids or [],
        "process_type": process_type,
        "quantity": quantity,
        "duration": duration,
        "lev": lev,
        "ventilation": ventilation,
        "room_size": room_size,
        "ppe": ppe or [],
    })


def validate_work_task(task: Dict[str, Any]) -> WorkTask:
    ppe = list(task.get("ppe") or [])
    for item in ppe:
        _choice(item, PPE_TYPES, "PPE type")
    return {
        "id": str(task.get("id", "")),
        "description": str(task.get("description", "")),
        "substance_ids": [str(s) for s in task.get("substance_ids") or []],
        "process_type": _choice(task.get("process_type"), TIER1_PROCESS_FACTORS, "process type"),
        "quantity": _choice(task.get("quantity"), TIER1_QUANTITY_FACTORS, "quantity"),
        "duration": _choice(task.get("duration"), TIER1_DURATION_FACTORS, "duration"),
        "lev": _choice(task.get("lev", "none"), TIER1_LEV_FACTORS, "LEV level"),
        "ventilation": _choice(
            task.get("ventilation", "none"), TIER1_VENTILATION_FACTORS, "ventilation"
        ),
        "room_size": _choice(task.get("room_size", "50-500m3"), TIER1_ROOM_FACTORS, "room size"),
        "ppe": ppe,
    }


# =============================================================================
# Measurements
# =============================================================================

class Measurement(TypedDict):
    value: float
    excluded: bool
    conditions: str


class MeasurementSeries(TypedDict):
    """
    Ordered readings for one substance in one similar exposure group.

    Keys:
        id: Series identifier
        substance_id: Measured substance
        group_id: Similar exposure group (SEG) the series belongs to
        distribution: Distribution family assumed for the test
        measurements: List of Measurement
    """
    id: str
    substance_id: str
    group_id: str
    distribution: Distribution
    measurements: List[Measurement]


def create_measurement(value: float, excluded: bool = False, conditions: str = "") -> Measurement:
    return validate_measurement({"value": value, "excluded": excluded, "conditions": conditions})


def validate_measurement(measurement: Dict[str, Any]) -> Measurement:
    excluded = measurement.get("excluded", False)
    if not isinstance(excluded, bool):
        raise ValueError(f"excluded must be a boolean, got {type(excluded).__name__}")
    return {
        "value": _non_negative(measurement.get("value"), "measurement value"),
        "excluded": excluded,
        "conditions": str(measurement.get("conditions") or ""),
    }


def create_measurement_series(
    values: List[Any],
    substance_id: str = "",
    group_id: str = "",
    distribution: Optional[str] = None,
    id: str = "",
) -> MeasurementSeries:
    """
    Create a validated MeasurementSeries.

    :param values: Plain numbers or Measurement dictionaries, in sampling order
    :param substance_id: Measured substance
    :param group_id: Similar exposure group
    :param distribution: "log-normal" (default) or "normal"
    :param id: Series identifier
    """
    return validate_measurement_series({
        "id": id,
        "substance_id": substance_id,
        "group_id": group_id,
        "distribution": distribution,
        "measurements": list(values),
    })


def validate_measurement_series(series: Dict[str, Any]) -> MeasurementSeries:
    return {
        "id": str(series.get("id", "")),
        "substance_id": str(series.get("substance_id", "")),
        "group_id": str(series.get("group_id", "")),
        "distribution": Distribution.from_value(series.get("distribution")),
        "measurements": [
            validate_measurement(m if isinstance(m, dict) else {"value": m})
            for m in series.get("measurements") or []
        ],
    }


def valid_values(series: MeasurementSeries) -> List[float]:
    """Non-excluded, positive readings of a series, in order."""
    return [
        m["value"] for m in series["measurements"]
        if not m["excluded"] and m["value"] > 0
    ]


# =============================================================================
# Physical workload
# =============================================================================

class LiftingTask(TypedDict):
    """
    Keys:
        id, group_id: Task and workload-group identifiers
        weight: Load G (kg), or None when not recorded (no verdict)
        h_start, h_end: Horizontal hand distance at origin/destination (cm);
                        h_end None means same as origin
        v_start, v_end: Vertical hand height at origin/destination (cm)
        a_start, a_end: Asymmetry angle at origin/destination (degrees)
        frequency: Lifts per minute
        duration: "short" (<= 1 h), "medium" (1-2 h), "long" (2-8 h)
        grip: "good" | "fair" | "poor"
        risk_flags: Keys of NIOSH_RISK_FLAGS that apply
    """
    id: str
    group_id: str
    weight: Optional[float]
    h_start: float
    h_end: Optional[float]
    v_start: float
    v_end: float
    a_start: float
    a_end: Optional[float]
    frequency: float
    duration: str
    grip: str
    risk_flags: List[str]


def create_lifting_task(
    weight: Optional[float],
    h_start: float,
    v_start: float,
    v_end: float,
    frequency: float,
    duration: str,
    grip: str,
    a_start: float = 0.0,
    h_end: Optional[float] = None,
    a_end: Optional[float] = None,
    risk_flags: Optional[List[str]] = None,
    id: str = "",
    group_id: str = "",
) -> LiftingTask:
    """Create a validated LiftingTask record."""
    return validate_lifting_task({
        "id": id,
        "group_id": group_id,
        "weight": weight,
        "h_start": h_start,
        "h_end": h_end,
        "v_start": v_start,
        "v_end": v_end,
        "a_start": a_start,
        "a_end": a_end,
        "frequency": frequency,
        "duration": duration,
        "grip": grip,
        "risk_flags": risk_flags or [],
    })


def validate_lifting_task(task: Dict[str, Any]) -> LiftingTask:
    flags = list(task.get("risk_flags") or [])
    for flag in flags:
        _choice(flag, NIOSH_RISK_FLAGS, "lifting risk flag")
    return {
        "id": str(task.get("id", "")),
        "group_id": str(task.get("group_id", "")),
        "weight": _optional(task.get("weight"), _positive, "weight"),
        "h_start": _positive(task.get("h_start"), "h_start"),
        "h_end": _optional(task.get("h_end"), _positive, "h_end"),
        # Heights below floor level are legal input; they trigger direct action
        "v_start": _number(task.get("v_start"), "v_start"),
        "v_end": _number(task.get("v_end"), "v_end"),
        "a_start": _non_negative(task.get("a_start", 0.0), "a_start"),
        "a_end": _optional(task.get("a_end"), _non_negative, "a_end"),
        "frequency": _non_negative(task.get("frequency"), "frequency"),
        "duration": _choice(task.get("duration"), NIOSH_FREQUENCY_BREAKPOINTS, "lifting duration"),
        "grip": _choice(task.get("grip"), NIOSH_COUPLING, "grip quality"),
        "risk_flags": flags,
    }


class CarryingTask(TypedDict):
    id: str
    group_id: str
    weight: Optional[float]
    bimanual: bool
    work_hours: float
    asymmetry: str
    grip: str
    climate: str
    carry_distance: Optional[float]


def create_carrying_task(
    weight: Optional[float],
    work_hours: float,
    bimanual: bool = True,
    asymmetry: str = "0-30",
    grip: str = "good",
    climate: str = "normal",
    carry_distance: Optional[float] = None,
    id: str = "",
    group_id: str = "",
) -> CarryingTask:
    """Create a validated CarryingTask record."""
    return validate_carrying_task({
        "id": id,
        "group_id": group_id,
        "weight": weight,
        "bimanual": bimanual,
        "work_hours": work_hours,
        "asymmetry": asymmetry,
        "grip": grip,
        "climate": climate,
        "carry_distance": carry_distance,
    })


def validate_carrying_task(task: Dict[str, Any]) -> CarryingTask:
    bimanual = task.get("bimanual", True)
    if not isinstance(bimanual, bool):
        raise ValueError(f"bimanual must be a boolean, got {type(bimanual).__name__}")
    return {
        "id": str(task.get("id", "")),
        "group_id": str(task.get("group_id", "")),
        "weight": _optional(task.get("weight"), _positive, "weight"),
        "bimanual": bimanual,
        "work_hours": _positive(task.get("work_hours"), "work_hours"),
        "asymmetry": _choice(
            task.get("asymmetry") or "0-30", CARRYING_ASYMMETRY_FACTORS, "carrying asymmetry"
        ),
        "grip": _choice(task.get("grip") or "good", CARRYING_GRIP_FACTORS, "grip quality"),
        "climate": _choice(task.get("climate") or "normal", CARRYING_CLIMATE_FACTORS, "climate"),
        "carry_distance": _optional(task.get("carry_distance"), _positive, "carry_distance"),
    }


class PushPullTask(TypedDict):
    """
    Keys:
        handle_height: "low" (< 100 cm), "mid" (100-150 cm), "high" (> 150 cm)
        floor_condition: Wheel/floor condition "good" | "average" | "poor"
        initial_force: Measured starting force (N), or None
        sustained_force: Measured sustained force (N), or None
        kind: "push" | "pull" | "both"
    """
    id: str
    group_id: str
    kind: str
    handle_height: str
    floor_condition: str
    initial_force: Optional[float]
    sustained_force: Optional[float]


def create_push_pull_task(
    handle_height: str,
    floor_condition: str = "good",
    initial_force: Optional[float] = None,
    sustained_force: Optional[float] = None,
    kind: str = "push",
    id: str = "",
    group_id: str = "",
) -> PushPullTask:
    """Create a validated PushPullTask record."""
    return validate_push_pull_task({
        "id": id,
        "group_id": group_id,
        "kind": kind,
        "handle_height": handle_height,
        "floor_condition": floor_condition,
        "initial_force": initial_force,
        "sustained_force": sustained_force,
    })


def validate_push_pull_task(task: Dict[str, Any]) -> PushPullTask:
    return {
        "id": str(task.get("id", "")),
        "group_id": str(task.get("group_id", "")),
        "kind": _choice(task.get("kind", "push"), ["push", "pull", "both"], "push/pull kind"),
        "handle_height": _choice(task.get("handle_height"), PUSH_PULL_LIMITS, "handle height"),
        "floor_condition": _choice(
            task.get("floor_condition", "good"), PUSH_PULL_FLOOR_FACTORS, "floor condition"
        ),
        "initial_force": _optional(task.get("initial_force"), _non_negative, "initial_force"),
        "sustained_force": _optional(task.get("sustained_force"), _non_negative, "sustained_force"),
    }


class RepetitiveTask(TypedDict):
    """
    OCRA checklist factor scores; each must be on its ordinal scale.

    A factor that was not assessed is None and leaves the task without a
    verdict.
    """
    id: str
    group_id: str
    recovery: Optional[int]
    force: Optional[int]
    posture: Optional[int]
    repetitiveness: Optional[int]
    additional: Optional[int]


def create_repetitive_task(
    recovery: Optional[int],
    force: Optional[int],
    posture: Optional[int],
    repetitiveness: Optional[int],
    additional: Optional[int] = 0,
    id: str = "",
    group_id: str = "",
) -> RepetitiveTask:
    """Create a validated RepetitiveTask record."""
    return validate_repetitive_task({
        "id": id,
        "group_id": group_id,
        "recovery": recovery,
        "force": force,
        "posture": posture,
        "repetitiveness": repetitiveness,
        "additional": additional,
    })


def validate_repetitive_task(task: Dict[str, Any]) -> RepetitiveTask:
    """
    :raises ValueError: If a factor score is off its scale
    """
    record: Dict[str, Any] = {
        "id": str(task.get("id", "")),
        "group_id": str(task.get("group_id", "")),
    }
    for factor in OCRA_FACTORS:
        value = task.get(factor)
        record[factor] = None if value is None else validate_ocra_score(factor, value)
    return record  # type: ignore[return-value]


def missing_ocra_factors(task: RepetitiveTask) -> List[str]:
    return [f for f in OCRA_FACTORS if task.get(f) is None]


class ForceTask(TypedDict):
    """
    Keys:
        reference_force: F_B (N), or a key of EN1005_REFERENCE_FORCES
        speed_multiplier, frequency_multiplier, duration_multiplier:
            Tabulated multiplier values or their class keys
        measured_force: Measured force F (N)

    After validation the reference force and the multipliers are numbers.
    A reference or measured force that is None leaves the task without a
    verdict.
    """
    id: str
    group_id: str
    reference_force: Optional[float]
    speed_multiplier: float
    frequency_multiplier: float
    duration_multiplier: float
    measured_force: Optional[float]


def create_force_task(
    reference_force: Any,
    measured_force: Optional[float],
    speed_multiplier: Any = "slow",
    frequency_multiplier: Any = "rare",
    duration_multiplier: Any = "<1s",
    id: str = "",
    group_id: str = "",
) -> ForceTask:
    """Create a validated ForceTask record."""
    return validate_force_task({
        "id": id,
        "group_id": group_id,
        "reference_force": reference_force,
        "speed_multiplier": speed_multiplier,
        "frequency_multiplier": frequency_multiplier,
        "duration_multiplier": duration_multiplier,
        "measured_force": measured_force,
    })


def validate_force_task(task: Dict[str, Any]) -> ForceTask:
    """
    Normalize a ForceTask: named operations and multiplier classes are
    resolved to their numeric values.

    :raises ValueError: On an unknown operation, a non-table multiplier or a
                        non-positive force
    """
    reference = task.get("reference_force")
    if isinstance(reference, str):
        reference = get_reference_force(reference)
    return {
        "id": str(task.get("id", "")),
        "group_id": str(task.get("group_id", "")),
        "reference_force": _optional(reference, _positive, "reference_force"),
        "speed_multiplier": resolve_multiplier(
            EN1005_SPEED_MULTIPLIERS, task.get("speed_multiplier", "slow"), "speed multiplier"
        ),
        "frequency_multiplier": resolve_multiplier(
            EN1005_FREQUENCY_MULTIPLIERS, task.get("frequency_multiplier", "rare"),
            "frequency multiplier",
        ),
        "duration_multiplier": resolve_multiplier(
            EN1005_DURATION_MULTIPLIERS, task.get("duration_multiplier", "<1s"),
            "duration multiplier",
        ),
        "measured_force": _optional(task.get("measured_force"), _positive, "measured_force"),
    }


class PostureObservation(TypedDict):
    """
    Keys:
        body_part: Key of POSTURE_BODY_PARTS
        frequency: "occasional" | "frequent" | "static"
        is_static: Posture held for more than 4 s
        angle: Observed angle in degrees, or None
        verdict: Assessor's verdict overriding the suggestion, or None
        description: Free-text description of the posture
    """
    id: str
    group_id: str
    body_part: str
    frequency: str
    is_static: bool
    angle: Optional[float]
    verdict: Optional[str]
    description: str


def create_posture_observation(
    body_part: str,
    frequency: str = "occasional",
    is_static: bool = False,
    angle: Optional[float] = None,
    verdict: Optional[str] = None,
    description: str = "",
    id: str = "",
    group_id: str = "",
) -> PostureObservation:
    """Create a validated PostureObservation record."""
    return validate_posture_observation({
        "id": id,
        "group_id": group_id,
        "body_part": body_part,
        "frequency": frequency,
        "is_static": is_static,
        "angle": angle,
        "verdict": verdict,
        "description": description,
    })


def validate_posture_observation(observation: Dict[str, Any]) -> PostureObservation:
    is_static = observation.get("is_static", False)
    if not isinstance(is_static, bool):
        raise ValueError(f"is_static must be a boolean, got {is_static!r}")
    verdict = observation.get("verdict")
    return {
        "id": str(observation.get("id", "")),
        "group_id": str(observation.get("group_id", "")),
        "body_part": _choice(observation.get("body_part"), POSTURE_BODY_PARTS, "body part"),
        "frequency": _choice(
            observation.get("frequency", "occasional"), POSTURE_FREQUENCIES, "posture frequency"
        ),
        "is_static": is_static,
        "angle": _optional(observation.get("angle"), _number, "angle"),
        "verdict": None if verdict is None else _choice(verdict, POSTURE_VERDICTS, "posture verdict"),
        "description": str(observation.get("description") or ""),
    }
