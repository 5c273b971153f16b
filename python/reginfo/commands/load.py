"""Load a source file for analysis."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import AnalysisContext
from ..output import emit_error, emit_result


class LoadCommand(Command):
    def __init__(self) -> None:
        super().__init__("load", "Load an assembly source file", aliases=("open",))

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        if len(argv) != 1:
            emit_error(ctx, message="usage: load PATH")
            return 1
        try:
            path = ctx.load_file(argv[0])
        except (OSError, UnicodeDecodeError) as exc:
            emit_error(ctx, message=f"cannot read {argv[0]}: {exc}")
            return 1
        used = [summary.name for summary in ctx.summaries if summary.used]
        emit_result(
            ctx,
            message=f"Loaded {path} ({len(used)} registers in use)",
            data={"path": str(path), "used": used},
        )
        return 0
