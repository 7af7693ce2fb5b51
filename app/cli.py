"""
Command-line entry point.

    bizforecast scenarios
    bizforecast run --scenario base --overrides overrides.json --export out.xlsx
    bizforecast run --scenario aggressive --save "Board deck v2"
    bizforecast compare --overrides overrides.json
    bizforecast versions list
    bizforecast versions delete <version_id>

Versions are kept as JSON files under FORECAST_STORE_ROOT (or --store-root).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from core.config import ForecastConfig, StoreSettings
from core.errors import DriverValidationError, ForecastError
from core.logging import configure_logging, get_logger
from drivers.benchmarks import StaticBenchmarkSource
from scenarios.table import StaticScenarioSource
from versioning.file_store import JsonFileVersionStore
from versioning.retry import RetryingVersionStore

from .exports import export_projection
from .service import ForecastService

logger = get_logger(__name__)


def _load_overrides(path: Optional[str]) -> Optional[Dict[str, Any]]:
    if not path:
        return None
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as exc:
        raise DriverValidationError([f"{path}: cannot read overrides file ({exc.strerror or exc})"]) from exc
    except json.JSONDecodeError as exc:
        raise DriverValidationError([f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})"]) from exc
    if not isinstance(data, dict):
        raise DriverValidationError([f"{path}: overrides must be a JSON object of driver names to values"])
    return data


def _build_service(args: argparse.Namespace) -> ForecastService:
    settings = StoreSettings(root=Path(args.store_root)) if args.store_root else StoreSettings()
    store = RetryingVersionStore(JsonFileVersionStore(settings), settings)
    return ForecastService(
        StaticScenarioSource(),
        store,
        benchmark_source=StaticBenchmarkSource() if getattr(args, "with_benchmarks", False) else None,
        config=ForecastConfig(start_year=args.start_year),
    )


def _print_frame(df) -> None:
    print(df.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))


async def _cmd_scenarios(args) -> int:
    service = _build_service(args)
    for s in await service.list_scenarios():
        print(f"{s.scenario_key:<14} {s.label}")
    return 0


async def _cmd_run(args) -> int:
    service = _build_service(args)
    run = await service.compute_projection(args.scenario, _load_overrides(args.overrides))
    _print_frame(run.result.yearly_frame(args.start_year))
    print()
    for k, v in {**run.result.metrics(), **run.trace.counts()}.items():
        print(f"{k:<24} {v}")

    if args.export:
        export_projection(run.result, args.export, start_year=args.start_year, metadata=run.metadata())
    if args.save:
        snap = await service.save_run(run, args.save, summary=args.summary, created_by=args.created_by)
        print(f"\nSaved version {snap.id}")
    return 0


async def _cmd_compare(args) -> int:
    service = _build_service(args)
    df = await service.compare_scenarios(_load_overrides(args.overrides))
    _print_frame(df)
    return 0


async def _cmd_versions(args) -> int:
    service = _build_service(args)
    if args.action == "list":
        for v in await service.list_versions():
            print(f"{v.id}  {v.created_at:%Y-%m-%d %H:%M}  {v.scenario_key:<14} {v.label}")
    elif args.action == "delete":
        if not args.version_id:
            print("versions delete needs a version id", file=sys.stderr)
            return 2
        await service.delete_version(args.version_id)
        print(f"Deleted {args.version_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bizforecast", description="Business forecast projection engine")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--start-year", type=int, default=2025)
    parser.add_argument("--store-root", help="Directory for saved versions")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("scenarios", help="List active scenarios")

    run = sub.add_parser("run", help="Project one scenario")
    run.add_argument("--scenario", default="base")
    run.add_argument("--overrides", help="JSON file of driver overrides")
    run.add_argument("--with-benchmarks", action="store_true", help="Fill unset drivers from reference benchmarks")
    run.add_argument("--export", help="Write results to .xlsx or CSV files")
    run.add_argument("--save", metavar="LABEL", help="Save the result as a named version")
    run.add_argument("--summary")
    run.add_argument("--created-by")

    cmp_ = sub.add_parser("compare", help="Compare all active scenarios")
    cmp_.add_argument("--overrides", help="JSON file of driver overrides")
    cmp_.add_argument("--with-benchmarks", action="store_true", help="Fill unset drivers from reference benchmarks")

    ver = sub.add_parser("versions", help="List or delete saved versions")
    ver.add_argument("action", choices=["list", "delete"])
    ver.add_argument("version_id", nargs="?")
    return parser


_COMMANDS = {
    "scenarios": _cmd_scenarios,
    "run": _cmd_run,
    "compare": _cmd_compare,
    "versions": _cmd_versions,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return asyncio.run(_COMMANDS[args.command](args))
    except ForecastError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
