"""staffwatch command line.

Loads a CSV snapshot directory, runs the commitment analyzer and writes or
prints the resulting exception report.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from commitment_core.date_utils import parse_optional_date
from commitment_core.io import load_input, render_xlsx, write_output
from commitment_core.models import Snapshot
from commitment_core.validation import validate_snapshot

from .config import load_env, runtime_config
from .service import ExceptionService
from .storage import ReportStore

logger = logging.getLogger("staffwatch")


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False, default=str) + "\n")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load(args: argparse.Namespace, cfg) -> tuple[ExceptionService, Snapshot, dict[str, Any]]:
    snapshot, meta = load_input(Path(args.input))
    service = ExceptionService(snapshot, tz=cfg.timezone, window_months=cfg.window_months)
    return service, snapshot, meta


def _window_args(args: argparse.Namespace, meta: dict[str, Any]):
    # meta.json supplies the range only when neither bound is given.
    if args.from_date is None and args.to_date is None:
        return parse_optional_date(meta.get("range_from")), parse_optional_date(meta.get("range_to"))
    return parse_optional_date(args.from_date), parse_optional_date(args.to_date)


# -- Commands --

def cmd_analyze(args: argparse.Namespace, cfg) -> None:
    service, snapshot, meta = _load(args, cfg)
    report = service.build_report(*_window_args(args, meta))

    if args.out:
        out_dir = Path(args.out)
        paths = write_output(report, out_dir)
        if args.xlsx:
            paths["exceptions.xlsx"] = render_xlsx(report, out_dir / "exceptions.xlsx", snapshot=snapshot)
        for name, path in paths.items():
            logger.info("Wrote %s -> %s", name, path)

    if args.save:
        target = ReportStore(cfg.artifact_root).save(report)
        logger.info("Saved report %s to %s", report["report_id"], target)

    if not args.out:
        _print_json(report)
    else:
        _print_json({"report_id": report["report_id"], "range": report["range"], "summary": report["summary"]})


def cmd_timeline(args: argparse.Namespace, cfg) -> None:
    service, _, meta = _load(args, cfg)
    exceptions = service.employee_timeline(args.employee, *_window_args(args, meta))
    _print_json([ex.as_dict() for ex in exceptions])


def cmd_validate(args: argparse.Namespace, cfg) -> None:
    snapshot, _ = load_input(Path(args.input))
    violations = validate_snapshot(snapshot.employees, snapshot.commitments, snapshot.clients, snapshot.projects)
    _print_json({"valid": not violations, "violations": violations})
    if violations:
        raise SystemExit(1)


def cmd_reports(args: argparse.Namespace, cfg) -> None:
    store = ReportStore(cfg.artifact_root)
    if args.show is not None:
        _print_json(store.load(args.show or None))
    else:
        _print_json(store.recent(limit=args.limit))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="staffwatch", description="Report staff commitment exceptions")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_window(p: argparse.ArgumentParser) -> None:
        p.add_argument("--input", required=True, help="CSV input directory")
        p.add_argument("--from", dest="from_date", default=None, help="Window start YYYY-MM-DD (default: today)")
        p.add_argument("--to", dest="to_date", default=None, help="Window end YYYY-MM-DD (default: start + months)")

    analyze = sub.add_parser("analyze", help="Analyze all employees and report exceptions")
    add_window(analyze)
    analyze.add_argument("--out", default=None, help="Write exceptions.csv and summary.json here")
    analyze.add_argument("--xlsx", action="store_true", help="Also write exceptions.xlsx (needs --out)")
    analyze.add_argument("--save", action="store_true", help="Persist the report under the artifact dir")
    analyze.set_defaults(handler=cmd_analyze)

    timeline = sub.add_parser("timeline", help="Every exception period of one employee")
    add_window(timeline)
    timeline.add_argument("--employee", type=int, required=True, help="Employee id")
    timeline.set_defaults(handler=cmd_timeline)

    validate = sub.add_parser("validate", help="Check an input directory for invalid entities")
    validate.add_argument("--input", required=True, help="CSV input directory")
    validate.set_defaults(handler=cmd_validate)

    reports = sub.add_parser("reports", help="List saved reports, newest first")
    reports.add_argument("--limit", type=int, default=20)
    reports.add_argument(
        "--show", nargs="?", const="", default=None, metavar="REPORT_ID",
        help="Print one saved report (default: the latest)",
    )
    reports.set_defaults(handler=cmd_reports)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_env(args.env_file)
    cfg = runtime_config()
    _configure_logging(args.log_level.upper() if args.log_level else cfg.log_level)

    if getattr(args, "xlsx", False) and not args.out:
        parser.error("--xlsx requires --out")

    try:
        args.handler(args, cfg)
    except (ValueError, FileNotFoundError, KeyError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
