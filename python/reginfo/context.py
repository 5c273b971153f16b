"""Analysis session state shared by the CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .asm_parser import get_parser
from .remap import RemapPlan, apply_remap, normalise_register, plan_replacements
from .summary import RegisterSummary, analyze
from .syntax import Tree

LOGGER = logging.getLogger("reginfo.context")


@dataclass
class AnalysisContext:
    """Holds the source being analysed, its summaries and the rename plan."""

    json_output: bool = False
    source: str = ""
    path: Optional[Path] = None
    dirty: bool = False
    tree: Optional[Tree] = field(default=None, init=False, repr=False)
    summaries: List[RegisterSummary] = field(default_factory=list, init=False, repr=False)
    plan: RemapPlan = field(default_factory=RemapPlan, init=False, repr=False)

    def set_source(self, text: str) -> None:
        """Replace the source; summaries are rebuilt and the plan starts over."""
        self.source = text
        self.tree = get_parser().parse(text)
        self.summaries = analyze(self.tree)
        self.plan = RemapPlan()
        used = sum(1 for summary in self.summaries if summary.used)
        LOGGER.debug("analysed %d lines, %d registers in use", text.count("\n") + 1, used)

    def load_file(self, path: str | Path) -> Path:
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        text = candidate.read_text(encoding="utf-8")
        self.path = candidate
        self.dirty = False
        self.set_source(text)
        LOGGER.info("loaded %s", candidate)
        return candidate

    def save(self, path: Optional[str | Path] = None) -> Path:
        target = Path(path).expanduser() if path else self.path
        if target is None:
            raise ValueError("No file name; pass a path to save")
        target.write_text(self.source, encoding="utf-8")
        self.path = target
        self.dirty = False
        LOGGER.info("saved %s", target)
        return target

    def summary_for(self, name: str) -> Optional[RegisterSummary]:
        reg = normalise_register(name)
        for summary in self.summaries:
            if summary.name == reg:
                return summary
        return None

    def preview_plan(self) -> str:
        return apply_remap(self.source, self.summaries, self.plan)

    def apply_plan(self) -> int:
        """Rewrite the source with the current plan and return the edit count."""
        count = len(plan_replacements(self.summaries, self.plan))
        if not count:
            self.plan = RemapPlan()
            return 0
        self.set_source(apply_remap(self.source, self.summaries, self.plan))
        self.dirty = True
        return count
