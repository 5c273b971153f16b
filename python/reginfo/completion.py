"""prompt_toolkit completer for reginfo."""

from __future__ import annotations

import shlex
from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from .commands import CommandRegistry
from .context import AnalysisContext
from .extract import REGISTERS

REGISTER_COMMANDS = {"refs", "map"}
PATH_COMMANDS = {"load", "save"}


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    try:
        tokens = shlex.split(text, posix=True)
        trailing = text[-1].isspace()
    except ValueError:
        tokens = text.strip().split()
        trailing = text.endswith((" ", "\t"))
    if trailing:
        tokens.append("")
    return tokens


class RegisterCompleter(Completer):
    """Completes command names, register names and file paths."""

    def __init__(self, ctx: AnalysisContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry
        self._path = PathCompleter(expanduser=True)

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        prefix = tokens[-1] if tokens else ""
        if len(tokens) <= 1:
            for entry in self._matching(self._command_names(), prefix):
                yield Completion(entry, start_position=-len(prefix))
            return
        command = self.registry.get(tokens[0])
        name = command.name if command else tokens[0]
        if name in PATH_COMMANDS:
            yield from self._path.get_completions(Document(prefix, len(prefix)), complete_event)
            return
        if name in REGISTER_COMMANDS and len(tokens) <= 3 and not prefix.startswith("-"):
            for entry in self._matching(self._register_candidates(len(tokens) == 2), prefix):
                yield Completion(entry, start_position=-len(prefix))

    def _command_names(self) -> List[str]:
        names: List[str] = []
        for command in self.registry.list_commands():
            names.append(command.name)
            names.extend(command.aliases)
        return names

    def _register_candidates(self, first: bool) -> List[str]:
        if first and self.ctx.summaries:
            return [summary.name for summary in self.ctx.summaries if summary.used]
        return list(REGISTERS)

    @staticmethod
    def _matching(candidates: Iterable[str], prefix: str) -> List[str]:
        needle = prefix.lower()
        return sorted(dict.fromkeys(c for c in candidates if c.lower().startswith(needle)))
