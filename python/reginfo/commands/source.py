"""Print the current source."""

from __future__ import annotations

from typing import List

from .base import Command, require_source
from ..context import AnalysisContext
from ..output import emit_result, render_source


class SourceCommand(Command):
    def __init__(self) -> None:
        super().__init__("source", "Show the current source with line numbers", aliases=("list",))

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        if not require_source(ctx):
            return 1
        if ctx.json_output:
            emit_result(ctx, message="source", data={"path": str(ctx.path) if ctx.path else None, "source": ctx.source})
        else:
            render_source(ctx.source)
        return 0
