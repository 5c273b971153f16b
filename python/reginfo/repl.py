"""Interactive REPL for reginfo."""

from __future__ import annotations

import logging
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandRegistry
from .completion import RegisterCompleter
from .context import AnalysisContext
from .parser import split_command

LOGGER = logging.getLogger("reginfo.repl")


def dispatch(ctx: AnalysisContext, registry: CommandRegistry, line: str) -> int:
    """Run one command line, returning its exit code."""
    argv = split_command(line.strip())
    if not argv:
        return 0
    cmd_name, *cmd_args = argv
    if cmd_args and cmd_args[-1].startswith("#parse-error"):
        print(f"Parse error: {cmd_args[-1].split(':', 1)[-1]}")
        return 1
    command = registry.get(cmd_name)
    if not command:
        print(f"Unknown command: {cmd_name}")
        return 1
    try:
        return command.run(ctx, cmd_args)
    except SystemExit:
        raise
    except Exception as exc:
        LOGGER.exception("command failed")
        print(f"Command '{cmd_name}' failed: {exc}")
        return 1


class AnalysisREPL:
    """prompt_toolkit REPL over an analysis session."""

    def __init__(
        self,
        ctx: AnalysisContext,
        registry: CommandRegistry,
        *,
        history_path: Optional[str] = None,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.history_path = history_path

    def _prompt(self) -> str:
        name = self.ctx.path.name if self.ctx.path else "reginfo"
        return f"{name}{'*' if self.ctx.dirty else ''}> "

    def run(self) -> int:
        history = FileHistory(self.history_path) if self.history_path else InMemoryHistory()
        session = PromptSession(
            history=history,
            completer=RegisterCompleter(self.ctx, self.registry),
            complete_while_typing=True,
        )
        buffer: list[str] = []
        while True:
            try:
                with patch_stdout():
                    line = session.prompt(self._prompt())
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            if self._handle_multiline(buffer, line):
                continue
            payload = " ".join(buffer) if buffer else line
            buffer.clear()
            dispatch(self.ctx, self.registry, payload)

    @staticmethod
    def _handle_multiline(buffer: list[str], line: str) -> bool:
        stripped = line.rstrip()
        if stripped.endswith("\\"):
            buffer.append(stripped[:-1])
            return True
        if buffer:
            buffer.append(stripped)
        return False
