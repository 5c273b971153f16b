"""Write the current source back to disk."""

from __future__ import annotations

from typing import List

from .base import Command, require_source
from ..context import AnalysisContext
from ..output import emit_error, emit_result


class SaveCommand(Command):
    def __init__(self) -> None:
        super().__init__("save", "Write the source to PATH (default: the loaded file)", aliases=("write",))

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        if not require_source(ctx):
            return 1
        try:
            path = ctx.save(argv[0] if argv else None)
        except (OSError, ValueError) as exc:
            emit_error(ctx, message=str(exc))
            return 1
        emit_result(ctx, message=f"Wrote {path}", data={"path": str(path)})
        return 0
