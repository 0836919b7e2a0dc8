#!/usr/bin/env python3
"""
Run Risk Assessment
===================

Simple entry point for evaluating an investigation file with the OH risk
engine.

The input is a JSON document with any of the following lists:

    substances, tasks, series            (hazardous substances)
    lifting, carrying, push_pull,
    repetitive, forces, postures         (physical workload)

Usage:
    python run_assessment.py investigation.json
    python run_assessment.py investigation.json --section exposure
    python run_assessment.py investigation.json --csv out/

Environment:
    OH_RISK_INPUT: Path to the investigation file (used when no path is given)
"""
import os
import sys
import json
import argparse

from oh_risk import (
    TABLE_VERSIONS,
    compute_all_tier1,
    compute_carrying,
    compute_force_risk,
    compute_lifting,
    compute_mixture_by_group,
    compute_ocra,
    compute_posture,
    compute_push_pull,
    evaluate_series,
    exposure_correction_flags,
    index_substances,
    physical_table,
    statistics_table,
    summarize_force_result,
    summarize_lifting_result,
    summarize_measurement_statistics,
    summarize_mixture_result,
    summarize_ocra_result,
    summarize_physical_by_group,
    summarize_posture_result,
    summarize_push_pull_result,
    summarize_tier1_result,
    tier1_table,
)


def _header(title):
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


def run_exposure(data, csv_dir=None):
    substances = data.get("substances", [])
    tasks = data.get("tasks", [])
    by_id = index_substances(substances)

    _header("TIER-1 EXPOSURE ESTIMATE")
    tier1 = compute_all_tier1(tasks, substances)
    for result in tier1:
        print(summarize_tier1_result(result))
        print()

    if tasks:
        flags = exposure_correction_flags(tasks)
        if flags["respirator_correction_required"]:
            print("NOTE: respiratory protection in use; correct measured values before testing")
        if flags["shift_normalization_required"]:
            print("NOTE: shifts > 8 h; normalize measured values to an 8-hour TWA")

    _header("NEN-EN 689 COMPLIANCE")
    statistics = []
    for series in data.get("series", []):
        substance_id = str(series.get("substance_id", ""))
        if substance_id not in by_id:
            raise ValueError(
                f"Series {series.get('id')!r} references unknown substance {substance_id!r}"
            )
        result = evaluate_series(series, by_id[substance_id])
        statistics.append(result)
        print(f"Series {result['series_id'] or '-'} ({substance_id})")
        print(summarize_measurement_statistics(result))
        print()

    _header("MIXTURE INDEX")
    for mixture in compute_mixture_by_group(statistics).values():
        print(summarize_mixture_result(mixture))
        print(f"  {mixture['label']}")
        print()

    if csv_dir:
        tier1_table(tier1).to_csv(os.path.join(csv_dir, "tier1.csv"), index=False)
        statistics_table(statistics).to_csv(os.path.join(csv_dir, "statistics.csv"), index=False)


def run_physical(data, csv_dir=None):
    results = []

    evaluators = [
        ("lifting", "NIOSH LIFTING", compute_lifting, summarize_lifting_result),
        ("carrying", "CARRYING", compute_carrying, None),
        ("push_pull", "PUSH / PULL", compute_push_pull, summarize_push_pull_result),
        ("repetitive", "OCRA CHECKLIST", compute_ocra, summarize_ocra_result),
        ("forces", "EN 1005-3 FORCES", compute_force_risk, summarize_force_result),
        ("postures", "POSTURES (EN 1005-4)", compute_posture, summarize_posture_result),
    ]
    for key, title, evaluate, summarize in evaluators:
        records = data.get(key, [])
        if not records:
            continue
        _header(title)
        for record in records:
            result = evaluate(record)
            results.append(result)
            if summarize is not None:
                print(summarize(result))
            else:
                weight = "-" if result["weight"] is None else f"{result['weight']:g}"
                print(
                    f"Carrying: task {result['task_id'] or '-'}  {weight} kg "
                    f"(limits {result['acceptable_limit']:.1f} / {result['high_risk_limit']:.1f} kg)"
                )
                print(f"  Verdict: {result['verdict'].value} - {result['label']}")
            print()

    _header("PHYSICAL WORKLOAD SUMMARY")
    table = physical_table(results)
    if not table.empty:
        print(table.to_string(index=False))
    for group_id, group in summarize_physical_by_group(results).items():
        print(
            f"\nGroup {group_id or '-'}: overall level {group['level'].value} "
            f"({group['n_tasks']} tasks)"
        )
        if group["max_li"] is not None:
            print(f"  Highest LI: {group['max_li']:.2f} (task {group['max_li_task_id'] or '-'})")

    if csv_dir:
        table.to_csv(os.path.join(csv_dir, "physical.csv"), index=False)


def main():
    parser = argparse.ArgumentParser(
        description="Run the OH risk engine on an investigation file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python run_assessment.py investigation.json
    python run_assessment.py investigation.json --section physical
    OH_RISK_INPUT=investigation.json python run_assessment.py --csv out/
        """,
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=os.getenv("OH_RISK_INPUT"),
        help="Path to the investigation JSON file (default: $OH_RISK_INPUT)",
    )
    parser.add_argument(
        "--section",
        choices=["exposure", "physical"],
        help="Evaluate only one domain (default: both)",
    )
    parser.add_argument(
        "--csv",
        metavar="DIR",
        help="Write summary tables as CSV files into this directory",
    )
    parser.add_argument(
        "--tables",
        action="store_true",
        help="Print the regulatory table versions and exit",
    )

    args = parser.parse_args()

    if args.tables:
        for name, source in TABLE_VERSIONS.items():
            print(f"{name:<30} {source}")
        return 0

    if not args.input:
        parser.error("no input file given and OH_RISK_INPUT is not set")

    with open(args.input, encoding="utf-8") as f:
        data = json.load(f)

    if args.csv:
        os.makedirs(args.csv, exist_ok=True)

    print("=" * 70)
    print("OH RISK ASSESSMENT")
    print("=" * 70)
    print(f"Input: {args.input}")

    if args.section in (None, "exposure"):
        run_exposure(data, args.csv)
    if args.section in (None, "physical"):
        run_physical(data, args.csv)

    print("\n" + "=" * 70)
    print("COMPLETE")
    print("=" * 70)

    return 0


if __name__ == "__main__":
    sys.exit(main())
