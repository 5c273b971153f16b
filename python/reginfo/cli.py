"""reginfo CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .commands import CommandRegistry, build_registry
from .context import AnalysisContext
from .output import emit_error, emit_result
from .parser import parse_mapping
from .repl import AnalysisREPL, dispatch

LOG = logging.getLogger("reginfo.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="68k register usage analyzer")
    parser.add_argument("source", nargs="?", help="Assembly source file")
    parser.add_argument("--json", action="store_true", help="Emit JSON output")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("REGINFO_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single command non-interactively (quote the command string)",
    )
    parser.add_argument("--script", type=Path, help="Run commands from a file, one per line")
    parser.add_argument(
        "-m",
        "--map",
        action="append",
        default=[],
        metavar="REG=TARGET",
        help="Rename a register and print the rewritten source (repeatable)",
    )
    parser.add_argument("-o", "--output", type=Path, help="Write the rewritten source here instead of stdout")
    parser.add_argument(
        "--history",
        type=Path,
        default=Path(os.environ.get("REGINFO_HISTORY", Path.home() / ".reginfo-history")),
        help="Path to command history file",
    )
    return parser


def _run_script(ctx: AnalysisContext, registry: CommandRegistry, path: str) -> int:
    try:
        lines = Path(path).expanduser().read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        emit_error(ctx, message=f"cannot read script {path}: {exc}")
        return 1
    for number, line in enumerate(lines, start=1):
        try:
            rc = dispatch(ctx, registry, line)
        except SystemExit as exc:
            return int(exc.code or 0)
        if rc != 0:
            LOG.error("script %s stopped at line %d", path, number)
            return rc
    return 0


def _run_remap(ctx: AnalysisContext, specs: List[str], output: Optional[Path]) -> int:
    try:
        for spec in specs:
            register, target = parse_mapping(spec)
            ctx.plan.set(register, target)
    except ValueError as exc:
        emit_error(ctx, message=str(exc))
        return 1
    count = ctx.apply_plan()
    if output is not None:
        try:
            ctx.save(output)
        except OSError as exc:
            emit_error(ctx, message=f"cannot write {output}: {exc}")
            return 1
        emit_result(ctx, message=f"Wrote {output} ({count} replacements)", data={"path": str(output), "replacements": count})
    else:
        sys.stdout.write(ctx.source)
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    ctx = AnalysisContext(json_output=args.json)
    registry = build_registry()
    if args.source:
        try:
            ctx.load_file(args.source)
        except (OSError, UnicodeDecodeError) as exc:
            emit_error(ctx, message=f"cannot read {args.source}: {exc}")
            return 1
    if args.map:
        if ctx.tree is None:
            parser.error("--map needs a source file")
        return _run_remap(ctx, args.map, args.output)
    if args.script:
        return _run_script(ctx, registry, str(args.script))
    if args.command:
        try:
            return dispatch(ctx, registry, args.command)
        except SystemExit as exc:
            return int(exc.code or 0)
    if not sys.stdin.isatty():
        if ctx.tree is None:
            ctx.set_source(sys.stdin.read())
        return dispatch(ctx, registry, "regs")
    repl = AnalysisREPL(ctx, registry, history_path=str(args.history))
    try:
        return repl.run()
    except SystemExit as exc:
        return int(exc.code or 0)
    except KeyboardInterrupt:
        print()
        return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
