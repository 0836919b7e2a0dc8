"""
OH Risk Calculation Engine
==========================

Standardized risk verdicts for occupational-health investigations.

Two domains share one architecture of pure functions over plain records:

- Hazardous substances: tier-1 screening (bands A-D), NEN-EN 689 compliance
  testing of measurement series, mixture index
- Physical workload: NIOSH lifting index, carrying, OCRA checklist,
  EN 1005-3 force risk, push/pull, posture observations

Usage:
    from oh_risk import compute_measurement_statistics, summarize_measurement_statistics

    stats = compute_measurement_statistics([0.12, 0.34, 0.28, 0.45, 0.19, 0.31], oelv=0.5)
    print(summarize_measurement_statistics(stats))
"""

from .registry import (
    Verdict,
    Distribution,
    ComplianceMethod,
    ExposureBand,
    RiskLevel,
    OcraCategory,
    PostureVerdict,
)
from .tables import TABLE_VERSIONS, get_ut
from .records import (
    create_oel_entry,
    create_substance,
    create_work_task,
    create_measurement,
    create_measurement_series,
    create_lifting_task,
    create_carrying_task,
    create_push_pull_task,
    create_repetitive_task,
    create_force_task,
    create_posture_observation,
    index_substances,
    valid_values,
)
from .descriptive import (
    log_moments,
    arithmetic_moments,
    percentile_95,
    exceedance_fraction,
    describe_values,
    check_distribution_fit,
)
from .tier1 import (
    compute_tier1,
    compute_tier1_breakdown,
    compute_all_tier1,
    summarize_tier1_result,
)
from .compliance import (
    compute_measurement_statistics,
    select_primary_oel,
    evaluate_series,
    exposure_correction_flags,
    summarize_measurement_statistics,
)
from .mixture import (
    compute_mixture_index,
    compute_mixture_by_group,
    summarize_mixture_result,
)
from .lifting import (
    compute_lifting,
    compute_carrying,
    summarize_lifting_result,
)
from .ocra import (
    compute_ocra,
    summarize_ocra_result,
)
from .forces import (
    compute_force_risk,
    compute_push_pull,
    summarize_force_result,
    summarize_push_pull_result,
)
from .postures import (
    suggest_posture_verdict,
    compute_posture,
    summarize_posture_result,
)
from .reporting import (
    summarize_physical_group,
    summarize_physical_by_group,
    statistics_table,
    tier1_table,
    physical_table,
)

__version__ = "0.1.0"

__all__ = [
    # Registry
    "Verdict",
    "Distribution",
    "ComplianceMethod",
    "ExposureBand",
    "RiskLevel",
    "OcraCategory",
    "PostureVerdict",
    # Tables
    "TABLE_VERSIONS",
    "get_ut",
    # Records
    "create_oel_entry",
    "create_substance",
    "create_work_task",
    "create_measurement",
    "create_measurement_series",
    "create_lifting_task",
    "create_carrying_task",
    "create_push_pull_task",
    "create_repetitive_task",
    "create_force_task",
    "create_posture_observation",
    "index_substances",
    "valid_values",
    # Statistics primitives
    "log_moments",
    "arithmetic_moments",
    "percentile_95",
    "exceedance_fraction",
    "describe_values",
    "check_distribution_fit",
    # Hazardous substances
    "compute_tier1",
    "compute_tier1_breakdown",
    "compute_all_tier1",
    "summarize_tier1_result",
    "compute_measurement_statistics",
    "select_primary_oel",
    "evaluate_series",
    "exposure_correction_flags",
    "summarize_measurement_statistics",
    "compute_mixture_index",
    "compute_mixture_by_group",
    "summarize_mixture_result",
    # Physical workload
    "compute_lifting",
    "compute_carrying",
    "summarize_lifting_result",
    "compute_ocra",
    "summarize_ocra_result",
    "compute_force_risk",
    "compute_push_pull",
    "summarize_force_result",
    "summarize_push_pull_result",
    "suggest_posture_verdict",
    "compute_posture",
    "summarize_posture_result",
    # Reporting
    "summarize_physical_group",
    "summarize_physical_by_group",
    "statistics_table",
    "tier1_table",
    "physical_table",
]
