"""List the references of one register."""

from __future__ import annotations

from typing import List

from .base import Command, require_source
from ..context import AnalysisContext
from ..output import emit_error, emit_result, render_references


class RefsCommand(Command):
    def __init__(self) -> None:
        super().__init__("refs", "Show every reference to REG", aliases=("xref",))

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        if len(argv) != 1:
            emit_error(ctx, message="usage: refs REG")
            return 1
        if not require_source(ctx):
            return 1
        try:
            summary = ctx.summary_for(argv[0])
        except ValueError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        if summary is None:
            emit_error(ctx, message=f"no data for {argv[0]}")
            return 1
        if ctx.json_output:
            emit_result(ctx, message=summary.name, data=summary.to_dict())
        else:
            render_references(summary, ctx.source)
        return 0
