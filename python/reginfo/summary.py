"""Per-register usage summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .extract import RegisterReference, collect_references
from .syntax import Tree


@dataclass
class RegisterSummary:
    """Aggregated usage of one canonical register.

    ``first_use`` and the size fields are ``None`` when there is nothing to
    report; a register with no references is still summarised.
    """

    name: str
    is_read: bool = False
    is_write: bool = False
    is_input: bool = False
    max_read_size: Optional[int] = None
    max_write_size: Optional[int] = None
    input_size: Optional[int] = None
    first_use: Optional[int] = None
    references: List[RegisterReference] = field(default_factory=list)

    @property
    def used(self) -> bool:
        return bool(self.references)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "read": self.is_read,
            "write": self.is_write,
            "input": self.is_input,
            "max_read_size": self.max_read_size,
            "max_write_size": self.max_write_size,
            "input_size": self.input_size,
            "first_use": self.first_use,
            "references": [ref.to_dict() for ref in self.references],
        }


def summarize(name: str, refs: Sequence[RegisterReference]) -> RegisterSummary:
    reads = [ref.size for ref in refs if ref.is_read]
    writes = [ref.size for ref in refs if ref.is_write]
    first_use = min((ref.line for ref in refs), default=None)
    # Only the earliest line is considered; a read later on that line still counts.
    first_read = next((ref for ref in refs if ref.line == first_use and ref.is_read), None)
    return RegisterSummary(
        name=name,
        is_read=bool(reads),
        is_write=bool(writes),
        is_input=first_read is not None,
        max_read_size=max(reads, default=None),
        max_write_size=max(writes, default=None),
        input_size=first_read.size if first_read is not None else None,
        first_use=first_use,
        references=list(refs),
    )


def analyze(tree: Tree) -> List[RegisterSummary]:
    """Summarise every canonical register, in register order."""
    return [summarize(name, refs) for name, refs in collect_references(tree).items()]


__all__ = ["RegisterSummary", "summarize", "analyze"]
