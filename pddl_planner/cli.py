"""
Command line front end.

    pddl-planner [-p NAME | -l NAME[,NAME...]] [-t SECONDS] [-s] DOMAIN PROBLEM
    pddl-planner --list

Listed planners run in parallel unless ``-s`` is given.  The exit code is
0 whenever a report was produced, even if some planners failed.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import settings
from .core.logging import configure_logging
from .orchestrator import PlanningOrchestrator
from .planners.errors import UnknownPlannerError
from .planners.models import ExecutionMode, ExecutionRequest
from .planners.registry import PlannerRegistry

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pddl-planner",
        description="Run a PDDL planning problem on one or more installed planners.",
    )
    parser.add_argument("domain", nargs="?", help="Domain description file")
    parser.add_argument("problem", nargs="?", help="Problem description file")

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "-p", "--planner", metavar="NAME",
        help=f"Planner to use (default: {settings.DEFAULT_PLANNER})",
    )
    selection.add_argument(
        "-l", "--planners", metavar="NAMES", action="append", default=[],
        help="Comma separated planners to run; may be repeated",
    )
    parser.add_argument(
        "-t", "--timeout", type=float, default=settings.DEFAULT_TIMEOUT,
        help=f"Timeout per planner in seconds (default: {settings.DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "-s", "--sequential", action="store_true",
        help="Run listed planners sequentially instead of in parallel",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--list", action="store_true", help="List registered planners and exit")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    return parser


def _requested_planners(args: argparse.Namespace) -> List[str]:
    if args.planner:
        return [args.planner]
    names: List[str] = []
    for chunk in args.planners:
        names.extend(name.strip() for name in chunk.split(",") if name.strip())
    return names


def _read(path: str) -> Optional[str]:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error opening file: '{path}' -- {exc.strerror or exc}", file=sys.stderr)
        return None


def print_planners(registry: PlannerRegistry) -> None:
    available = set(registry.available_names())
    print("REGISTERED PLANNERS")
    for info in registry.list_planners():
        marker = "*" if info.key in available else " "
        print(f"  {marker} {info.key:<12} {info.name:<12} {info.command}")
    print("(* = available on this host)")


def main(argv: Optional[List[str]] = None, registry: Optional[PlannerRegistry] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    orchestrator = PlanningOrchestrator(registry)

    if args.list:
        print_planners(orchestrator.registry)
        return 0

    if not args.domain or not args.problem:
        parser.error("a domain file and a problem file are required")

    domain = _read(args.domain)
    if domain is None:
        return 1
    problem = _read(args.problem)
    if problem is None:
        return 1

    try:
        request = ExecutionRequest(
            problem=problem,
            domain=domain,
            planners=tuple(_requested_planners(args)),
            timeout=args.timeout,
            mode=ExecutionMode.SEQUENTIAL if args.sequential else ExecutionMode.PARALLEL,
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        report = orchestrator.run_sync(request)
    except UnknownPlannerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print("    Registered planners:", file=sys.stderr)
        print("    " + " ".join(exc.known), file=sys.stderr)
        print("For the planners available on this host use '--list'", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.render())
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
