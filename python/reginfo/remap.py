"""Register renaming: conflict checks and source splicing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .extract import REGISTERS, STACK_POINTER
from .summary import RegisterSummary

LOGGER = logging.getLogger("reginfo.remap")


def normalise_register(name: str) -> str:
    """Lower-case a register name, folding ``sp`` into ``a7``.

    Raises ``ValueError`` for anything outside the tracked register set.
    """
    reg = (name or "").strip().lower()
    if reg == "sp":
        reg = STACK_POINTER
    if reg not in REGISTERS:
        raise ValueError(f"Unknown register '{name}'")
    return reg


class RemapPlan:
    """Requested renames, keyed by original register name.

    A target of ``None`` means "no change".
    """

    def __init__(self, mappings: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._targets: Dict[str, Optional[str]] = {}
        for register, target in (mappings or {}).items():
            self.set(register, target)

    def set(self, register: str, target: Optional[str]) -> None:
        reg = normalise_register(register)
        new = normalise_register(target) if target else None
        self._targets[reg] = new if new != reg else None
        LOGGER.debug("plan %s -> %s", reg, self._targets[reg])

    def clear(self, register: str) -> None:
        self._targets.pop(normalise_register(register), None)

    def reset(self) -> None:
        self._targets = {}

    def get(self, register: str) -> Optional[str]:
        return self._targets.get(register)

    def mappings(self) -> Dict[str, str]:
        """Only the entries that change something."""
        return {reg: target for reg, target in self._targets.items() if target}

    def snapshot(self) -> Dict[str, Optional[str]]:
        return dict(self._targets)

    def __len__(self) -> int:
        return len(self.mappings())

    def __bool__(self) -> bool:
        return bool(self.mappings())

    def __repr__(self) -> str:
        return f"RemapPlan({self.mappings()!r})"


@dataclass(frozen=True)
class Replacement:
    start_index: int
    end_index: int
    text: str


def _by_name(summaries: Iterable[RegisterSummary]) -> Dict[str, RegisterSummary]:
    return {summary.name: summary for summary in summaries}


def is_in_use(
    summaries: Sequence[RegisterSummary],
    plan: RemapPlan,
    register: str,
    target: str,
) -> bool:
    """Whether renaming ``register`` to ``target`` would merge two registers.

    True when another register is already planned to become ``target``, or
    when ``target`` keeps its own references because it is not being renamed.
    """
    if target == register:
        return False
    for other, planned in plan.mappings().items():
        if other != register and planned == target:
            return True
    if plan.get(target):
        return False
    summary = _by_name(summaries).get(target)
    return summary is not None and summary.used


def conflict_table(summaries: Sequence[RegisterSummary], plan: RemapPlan) -> Dict[str, Dict[str, bool]]:
    """In-use flag for every (register, candidate target) pair."""
    names = [summary.name for summary in summaries]
    return {
        register: {target: is_in_use(summaries, plan, register, target) for target in names}
        for register in names
    }


def plan_replacements(summaries: Sequence[RegisterSummary], plan: RemapPlan) -> List[Replacement]:
    """Text replacements for every reference of every renamed register."""
    lookup = _by_name(summaries)
    replacements: List[Replacement] = []
    for register, target in plan.mappings().items():
        summary = lookup.get(register)
        if summary is None:
            LOGGER.debug("no summary for %s; skipping", register)
            continue
        for ref in summary.references:
            replacements.append(Replacement(ref.start_index, ref.end_index, target))
    return replacements


def splice(source: str, replacements: Iterable[Replacement]) -> str:
    """Apply non-overlapping replacements, working from the end of the text."""
    result = source
    for rep in sorted(replacements, key=lambda item: item.end_index, reverse=True):
        result = result[: rep.start_index] + rep.text + result[rep.end_index :]
    return result


def apply_remap(source: str, summaries: Sequence[RegisterSummary], plan: RemapPlan) -> str:
    """Return ``source`` with the plan applied; inputs are left untouched."""
    replacements = plan_replacements(summaries, plan)
    if not replacements:
        return source
    LOGGER.debug("applying %d replacements", len(replacements))
    return splice(source, replacements)


__all__ = [
    "RemapPlan",
    "Replacement",
    "normalise_register",
    "is_in_use",
    "conflict_table",
    "plan_replacements",
    "splice",
    "apply_remap",
]
