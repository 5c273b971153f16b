"""Apply the rename plan to the source."""

from __future__ import annotations

import argparse
from typing import List

from .base import Command, require_source
from ..context import AnalysisContext
from ..output import emit_result, render_source


class ApplyCommand(Command):
    def __init__(self) -> None:
        super().__init__("apply", "Rewrite the source using the rename plan")
        parser = argparse.ArgumentParser(prog="apply", add_help=False)
        parser.add_argument("--dry-run", action="store_true", help="Print the result without changing anything")
        self._parser = parser

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        args = self.parse_args(self._parser, argv)
        if args is None:
            return 1
        if not require_source(ctx):
            return 1
        if args.dry_run:
            preview = ctx.preview_plan()
            if ctx.json_output:
                emit_result(ctx, message="preview", data={"source": preview})
            else:
                render_source(preview)
            return 0
        mappings = ctx.plan.mappings()
        count = ctx.apply_plan()
        if not count:
            emit_result(ctx, message="Nothing to apply", data={"replacements": 0})
            return 0
        emit_result(
            ctx,
            message=f"Replaced {count} occurrence(s)",
            data={"replacements": count, "applied": mappings},
        )
        return 0
