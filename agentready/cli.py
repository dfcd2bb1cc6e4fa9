"""Command line entry point.

Usage:
    agentready readiness [PATH] [--policy LIST] [--output FILE] [--force]
                         [--fail-level N] [--no-extras] [--json] [--quiet]
    python -m agentready readiness ...

Exit codes: 0 success; 1 invalid input (bad path, policy, config or output
file), no report produced; 2 report produced but achievedLevel is below
--fail-level.

With --json, stdout carries {"ok", "status", "data", "errors"}; status is
"error" for input errors and for a --fail-level miss.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from agentready import __version__
from agentready.config import get_settings
from agentready.context import build_context
from agentready.policies import parse_policy_sources
from agentready.schemas.readiness import ReadinessReport
from agentready.services.readiness import (
    format_readiness_markdown,
    load_run_policies,
    run_readiness_report,
)

logger = logging.getLogger(__name__)

OUTPUT_EXTENSIONS: frozenset[str] = frozenset({".json", ".md"})
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_BELOW_FAIL_LEVEL = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentready",
        description="Score a repository's readiness for AI coding agents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    readiness = sub.add_parser("readiness", help="Evaluate a repository and report its level")
    readiness.add_argument("path", nargs="?", default=".", help="Repository root (default: cwd)")
    readiness.add_argument(
        "--policy",
        default=None,
        help="Comma-separated policy references (JSON/YAML/.py files or module names)",
    )
    readiness.add_argument("--output", default=None, help="Write the report to a .json or .md file")
    readiness.add_argument("--force", action="store_true", help="Overwrite an existing output file")
    readiness.add_argument(
        "--fail-level",
        type=int,
        choices=range(1, 6),
        default=None,
        metavar="N",
        help="Exit 2 when the achieved level is below N (1-5)",
    )
    readiness.add_argument("--no-extras", action="store_true", help="Skip extra checks")
    readiness.add_argument("--json", action="store_true", help="Print the report as JSON")
    readiness.add_argument("--quiet", action="store_true", help="Print nothing on success")
    return parser


def _check_output_path(output: Path, force: bool) -> None:
    """Reject unsupported extensions, symlinks and unforced overwrites."""
    if output.suffix.lower() not in OUTPUT_EXTENSIONS:
        raise ValueError(
            f"unsupported output extension {output.suffix or '(none)'!r}; "
            f"use one of {sorted(OUTPUT_EXTENSIONS)}"
        )
    if output.is_symlink():
        raise ValueError(f"refusing to write through symlink: {output}")
    if output.exists() and not force:
        raise ValueError(f"{output} already exists; use --force to overwrite")


def _write_output(output: Path, report: ReadinessReport, repo_name: str) -> None:
    if output.suffix.lower() == ".json":
        content = json.dumps(report.to_json_dict(), indent=2) + "\n"
    else:
        content = format_readiness_markdown(report, repo_name)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")


def _json_envelope(report: ReadinessReport | None, errors: list[str]) -> dict:
    """Wrap a report (or an error) as {ok, status, data, errors}."""
    envelope: dict = {"ok": not errors, "status": "error" if errors else "success"}
    if report is not None:
        envelope["data"] = report.to_json_dict()
    if errors:
        envelope["errors"] = errors
    return envelope


def _print_summary(report: ReadinessReport) -> None:
    level_names = {lv.level: lv.name for lv in report.levels}
    name = level_names.get(report.achieved_level, "None")
    print(f"Readiness level: {report.achieved_level} ({name})")
    if report.policies:
        print(f"Policies: {', '.join(report.policies)}")
    for p in report.pillars:
        if p.total:
            print(f"  {p.name}: {p.passed}/{p.total}")
    failing = [c for c in report.criteria if c.status == "fail"]
    if failing:
        print(f"{len(failing)} failing criteria:")
        for c in failing:
            print(f"  - [{c.id}] {c.title}" + (f": {c.reason}" if c.reason else ""))


def run_readiness(args: argparse.Namespace) -> int:
    repo = Path(args.path)
    if not repo.is_dir():
        raise FileNotFoundError(f"repository path not found: {repo}")

    output = Path(args.output) if args.output else None
    if output is not None:
        _check_output_path(output, args.force)

    context = build_context(args.path)
    policies = load_run_policies(context, parse_policy_sources(args.policy))
    report = run_readiness_report(
        args.path,
        policies=policies,
        include_extras=not args.no_extras,
        context=context,
    )

    if output is not None:
        _write_output(output, report, repo.resolve().name)
        logger.info("Wrote readiness report to %s", output)

    errors: list[str] = []
    if args.fail_level is not None and report.achieved_level < args.fail_level:
        errors.append(f"Readiness level {report.achieved_level} is below threshold {args.fail_level}")

    if args.json:
        print(json.dumps(_json_envelope(report, errors), indent=2))
    elif not args.quiet:
        _print_summary(report)

    if errors:
        print(errors[0], file=sys.stderr)
        return EXIT_BELOW_FAIL_LEVEL
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        if args.command == "readiness":
            return run_readiness(args)
    except (ValueError, FileNotFoundError) as e:
        if getattr(args, "json", False):
            print(json.dumps(_json_envelope(None, [str(e)]), indent=2))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
