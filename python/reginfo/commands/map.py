"""Edit the register rename plan."""

from __future__ import annotations

import argparse
import logging
from typing import List

from .base import Command, require_source
from ..context import AnalysisContext
from ..output import emit_error, emit_result
from ..parser import parse_target
from ..remap import is_in_use

LOGGER = logging.getLogger("reginfo.commands.map")


class MapCommand(Command):
    def __init__(self) -> None:
        super().__init__("map", "Plan renaming REG to TARGET ('-' for no change)", aliases=("rename",))
        parser = argparse.ArgumentParser(prog="map", add_help=False)
        parser.add_argument("register", nargs="?", help="Register to rename")
        parser.add_argument("target", nargs="?", help="New register name, or '-'")
        parser.add_argument("--clear", action="store_true", help="Drop every planned rename")
        self._parser = parser

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        args = self.parse_args(self._parser, argv)
        if args is None:
            return 1
        if not require_source(ctx):
            return 1
        if args.clear:
            ctx.plan.reset()
            emit_result(ctx, message="Plan cleared", data={"plan": {}})
            return 0
        if not args.register:
            emit_error(ctx, message="usage: map REG TARGET | map --clear")
            return 1
        try:
            summary = ctx.summary_for(args.register)
            target = parse_target(args.target)
            ctx.plan.set(args.register, target)
        except ValueError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        register = summary.name if summary else args.register
        planned = ctx.plan.get(register)
        conflict = bool(planned) and is_in_use(ctx.summaries, ctx.plan, register, planned)
        if conflict:
            LOGGER.debug("%s -> %s collides with a live register", register, planned)
        message = f"{register} -> {planned}" if planned else f"{register}: no change"
        if conflict:
            message += f" (warning: {planned} is already in use)"
        emit_result(
            ctx,
            message=message,
            data={"register": register, "target": planned, "in_use": conflict, "plan": ctx.plan.mappings()},
        )
        return 0
