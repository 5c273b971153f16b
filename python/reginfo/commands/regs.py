"""Register usage table."""

from __future__ import annotations

import argparse
from typing import List

from .base import Command, require_source
from ..context import AnalysisContext
from ..output import emit_result, render_register_table
from ..summary import RegisterSummary

ORDERS = ("name", "first-use")


def order_summaries(summaries: List[RegisterSummary], order: str) -> List[RegisterSummary]:
    if order == "first-use":
        # Unused registers go last, keeping register order among themselves.
        return sorted(
            summaries,
            key=lambda s: (s.first_use is None, s.first_use if s.first_use is not None else 0),
        )
    return list(summaries)


class RegsCommand(Command):
    def __init__(self) -> None:
        super().__init__("regs", "Show register usage", aliases=("info", "table"))
        parser = argparse.ArgumentParser(prog="regs", add_help=False)
        parser.add_argument("--used", action="store_true", help="Hide unused registers")
        parser.add_argument("--inputs", action="store_true", help="Only registers read before written")
        parser.add_argument("--order", choices=ORDERS, default="name", help="Row order")
        self._parser = parser

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        args = self.parse_args(self._parser, argv)
        if args is None:
            return 1
        if not require_source(ctx):
            return 1
        rows = order_summaries(ctx.summaries, args.order)
        if args.used:
            rows = [summary for summary in rows if summary.used]
        if args.inputs:
            rows = [summary for summary in rows if summary.is_input]
        if ctx.json_output:
            data = {"registers": [{k: v for k, v in s.to_dict().items() if k != "references"} for s in rows]}
            emit_result(ctx, message="registers", data=data)
        else:
            render_register_table(rows)
        return 0
