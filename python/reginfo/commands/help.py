"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import Command
from ..context import AnalysisContext
from ..output import emit_result

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Show available commands", aliases=("?",))
        self._registry: CommandRegistry | None = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: AnalysisContext, argv: List[str]) -> int:
        registry = self._registry
        if not registry:
            return 1
        commands = list(registry.list_commands())
        if argv:
            commands = [cmd for cmd in commands if cmd.name in argv or set(cmd.aliases) & set(argv)]
        lines = [cmd.format_help() for cmd in commands]
        emit_result(
            ctx,
            message="\n".join(lines),
            data={"commands": {cmd.name: cmd.description for cmd in commands}},
        )
        return 0
