#!/usr/bin/env python3
"""
Inspect an assessment snapshot JSON file (objects + relationships) and print
the report roll-ups as pandas DataFrames.

Usage:
    python inspect_snapshot.py snapshot.json [--csv-dir out/]
"""
import argparse
import json
import sys
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

# Load environment variables from .env file
project_dir = Path(__file__).parent
env_file = project_dir / ".env"
if env_file.exists():
    load_dotenv(env_file)

from app.config import settings
from app.schemas.report import AssessmentSnapshot
from app.services.report_service import ReportService


def load_snapshot(path: str) -> AssessmentSnapshot:
    with open(path, "r", encoding="utf-8") as f:
        return AssessmentSnapshot.model_validate(json.load(f))


def snapshot_frames(snapshot: AssessmentSnapshot) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Objects and relationships as DataFrames, relationships joined with
    source / target names and types for readability.
    """
    objects_df = pd.DataFrame(
        [{"id": o.id, "object_type": o.object_type, "name": o.name, "path": o.path} for o in snapshot.objects],
        columns=["id", "object_type", "name", "path"],
    )
    relationships_df = pd.DataFrame(
        [r.model_dump(exclude={"details"}) for r in snapshot.relationships],
        columns=["source_object_id", "target_object_id", "relationship_type"],
    )
    if not objects_df.empty and not relationships_df.empty:
        obj_id_to_name = dict(zip(objects_df['id'], objects_df['name']))
        obj_id_to_type = dict(zip(objects_df['id'], objects_df['object_type']))
        relationships_df['source_name'] = relationships_df['source_object_id'].map(obj_id_to_name)
        relationships_df['target_name'] = relationships_df['target_object_id'].map(obj_id_to_name)
        relationships_df['source_type'] = relationships_df['source_object_id'].map(obj_id_to_type)
        relationships_df['target_type'] = relationships_df['target_object_id'].map(obj_id_to_type)
    return objects_df, relationships_df


def report_frames(snapshot: AssessmentSnapshot) -> dict[str, pd.DataFrame]:
    """One DataFrame per report table."""
    report = ReportService.from_settings(settings).generate_report(snapshot)
    drop = {"visualizations_by_complexity"}
    return {
        "dashboards": pd.DataFrame([d.model_dump(exclude=drop) for d in report.dashboards.dashboards]),
        "reports": pd.DataFrame([r.model_dump(exclude=drop) for r in report.reports.reports]),
        "packages": pd.DataFrame([p.model_dump() for p in report.data_assets.packages]),
        "data_modules": pd.DataFrame([m.model_dump() for m in report.data_assets.data_modules]),
        "data_sources": pd.DataFrame([s.model_dump() for s in report.data_assets.data_sources]),
        "visualization_types": pd.DataFrame([g.model_dump() for g in report.visualization_types]),
        "detailed_inventory": pd.DataFrame([r.model_dump() for r in report.detailed_inventory]),
    }


def print_distribution(title: str, series: pd.Series) -> None:
    print(f"\n{title}:")
    counts = series.value_counts()
    for key, count in counts.items():
        percentage = (count / len(series)) * 100
        print(f"  {str(key):30s}: {count:5d} ({percentage:5.1f}%)")


def main() -> int:
    parser = argparse.ArgumentParser(description="Print assessment report roll-ups for a snapshot file")
    parser.add_argument("snapshot", help="Path to snapshot JSON ({objects: [...], relationships: [...]})")
    parser.add_argument("--csv-dir", help="Also write each table as CSV into this directory")
    args = parser.parse_args()

    try:
        snapshot = load_snapshot(args.snapshot)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        print(f"Could not load snapshot {args.snapshot}: {e}")
        return 1

    objects_df, relationships_df = snapshot_frames(snapshot)
    print("=" * 80)
    print(f"Objects: {len(objects_df)}    Relationships: {len(relationships_df)}")
    print("=" * 80)
    if not objects_df.empty:
        print_distribution("Object Types Distribution", objects_df['object_type'])
    if not relationships_df.empty:
        print_distribution("Relationship Types Distribution", relationships_df['relationship_type'])

    frames = report_frames(snapshot)
    with pd.option_context("display.max_columns", None, "display.width", 200):
        for name, df in frames.items():
            print("\n" + "-" * 80)
            print(f"{name.upper()} ({len(df)} rows)")
            print("-" * 80)
            print(df.head(20).to_string() if not df.empty else "  (none)")

    if args.csv_dir:
        out_dir = Path(args.csv_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        for name, df in frames.items():
            df.to_csv(out_dir / f"{name}.csv", index=False)
        print(f"\nWrote {len(frames)} tables to {out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
