#!/usr/bin/env python3
"""
Project progress report and planning-file import from the command line.

Reads the record store through the same services the application uses,
so the figures match what site staff see.

Usage:
    python3 scripts/progress_report.py preview schedule.csv
    python3 scripts/progress_report.py --db-url sqlite:///sitelog.db summary
    python3 scripts/progress_report.py summary <project-id>
    python3 scripts/progress_report.py s-curve <project-id>
    python3 scripts/progress_report.py import-schedule <project-id> schedule.xlsx
"""

import argparse
import json
import sys
from pathlib import Path
from uuid import UUID

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///sitelog.db"
CLI_ACTOR_ID = UUID("5a17e10c-0000-4000-8000-000000000001")


def _print_summary(project, summary) -> None:
    def pct(value):
        return "not updated" if value is None else f"{value}%"

    print(f"{project.name}  ({project.id})")
    print(f"  as of:              {summary.as_of_date.isoformat()}")
    completion = summary.planned_completion_date
    print(f"  planned completion: {completion.isoformat() if completion else 'unknown'}")
    print(f"  extension days:     {summary.total_extension_days}")
    print(f"  planned progress:   {summary.planned_progress}%")
    print(f"  actual progress:    {pct(summary.actual_progress)}")
    print(f"  today's report:     {pct(summary.today_actual_progress)}")
    remaining = summary.remaining_days
    if remaining is None:
        print("  remaining days:     unknown")
    elif summary.is_overrun:
        print(f"  remaining days:     overrun by {-remaining}")
    else:
        print(f"  remaining days:     {remaining}")


def cmd_preview(args) -> int:
    from sitelog_ingestion.schedule_import import import_schedule_file

    result = import_schedule_file(args.file)
    print(f"date column:     {result.date_column}")
    print(f"progress column: {result.progress_column}")
    print(f"points:          {len(result.points)}  (skipped {result.skipped_rows})")
    for point in result.points:
        print(f"  {point.point_date.isoformat()}  {point.progress}%")
    return 0


def cmd_summary(args, service) -> int:
    if args.project_id:
        project_ids = [UUID(args.project_id)]
    else:
        project_ids = [p.id for p in service.list_projects()]
    for project_id in project_ids:
        _print_summary(service.get_project(project_id), service.progress_summary(project_id))
    if not args.project_id:
        counts = service.portfolio_summary()
        print(
            f"\nprojects: {counts.normal_count} normal, {counts.behind_count} behind; "
            f"issue logs: {counts.issue_count}"
        )
    return 0


def cmd_s_curve(args, service) -> int:
    series = service.s_curve(UUID(args.project_id))
    print(json.dumps(series.to_chart_data(), ensure_ascii=False, indent=2))
    return 0


def cmd_import_schedule(args, service) -> int:
    result = service.import_schedule(UUID(args.project_id), args.file, actor_id=CLI_ACTOR_ID)
    print(
        f"imported {len(result.points)} points "
        f"(skipped {result.skipped_rows}) from {args.file}"
    )
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Site progress report")
    parser.add_argument("--db-url", default=DB_URL, help="Database URL")
    parser.add_argument("--config", default=None, help="Progress config YAML")
    sub = parser.add_subparsers(dest="command", required=True)

    p_preview = sub.add_parser("preview", help="Preview a planning file")
    p_preview.add_argument("file")

    p_summary = sub.add_parser("summary", help="Progress summary")
    p_summary.add_argument("project_id", nargs="?")

    p_curve = sub.add_parser("s-curve", help="S-curve chart data as JSON")
    p_curve.add_argument("project_id")

    p_import = sub.add_parser("import-schedule", help="Replace a project's schedule")
    p_import.add_argument("project_id")
    p_import.add_argument("file")

    args = parser.parse_args(argv)

    from sitelog_kernel.exceptions import SiteLogError
    from sitelog_kernel.logging_config import configure_logging

    configure_logging()

    try:
        if args.command == "preview":
            return cmd_preview(args)

        from sitelog_config import get_active_config
        from sitelog_kernel.db.engine import init_engine_from_url, reset_engine, session_scope
        from sitelog_modules._orm_registry import create_all_tables
        from sitelog_modules.project.service import ProjectService

        handlers = {
            "summary": cmd_summary,
            "s-curve": cmd_s_curve,
            "import-schedule": cmd_import_schedule,
        }
        init_engine_from_url(args.db_url)
        try:
            create_all_tables()
            with session_scope() as session:
                service = ProjectService(session, config=get_active_config(args.config))
                return handlers[args.command](args, service)
        finally:
            reset_engine()
    except SiteLogError as exc:
        print(f"error [{exc.code}]: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
