"""Command base classes for reginfo."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..context import AnalysisContext
from ..output import emit_error


@dataclass
class Command:
    """Abstract command description."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        return f"{self.name:<12} {self.description}"

    @staticmethod
    def parse_args(parser: argparse.ArgumentParser, argv: List[str]) -> Optional[argparse.Namespace]:
        """Run an argparse parser without letting it exit the REPL."""
        try:
            return parser.parse_args(argv)
        except SystemExit:
            return None


def require_source(ctx: AnalysisContext) -> bool:
    if ctx.tree is None:
        emit_error(ctx, message="no source loaded (use 'load PATH')")
        return False
    return True
