"""Exit command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import AnalysisContext


class ExitCommand(Command):
    def __init__(self) -> None:
        super().__init__("exit", "Leave reginfo", aliases=("quit", "q"))

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        if ctx.dirty and "-f" not in argv:
            print("Unsaved changes; 'save' first or 'exit -f' to discard them")
            return 1
        raise SystemExit(0)
