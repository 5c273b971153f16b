"""Show the rename plan and target conflicts."""

from __future__ import annotations

from typing import List

from .base import Command, require_source
from ..context import AnalysisContext
from ..output import emit_result, render_plan
from ..remap import conflict_table


class PlanCommand(Command):
    def __init__(self) -> None:
        super().__init__("plan", "Show planned renames and busy targets")

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        if not require_source(ctx):
            return 1
        conflicts = conflict_table(ctx.summaries, ctx.plan)
        if ctx.json_output:
            busy = {
                reg: sorted(target for target, flag in row.items() if flag)
                for reg, row in conflicts.items()
            }
            emit_result(ctx, message="plan", data={"plan": ctx.plan.mappings(), "in_use": busy})
        else:
            render_plan(ctx, conflicts)
        return 0
