"""
reginfo: register usage analysis for 68k assembly source.

Parses Motorola syntax source into a syntax tree, summarises how each data
and address register is read and written, and rewrites the source to rename
registers.  Run ``reginfo FILE`` for the interactive shell.
"""

from __future__ import annotations

from .asm_parser import get_parser, parse_source
from .extract import REGISTERS, RegisterReference, extract_references
from .remap import RemapPlan, apply_remap, conflict_table, is_in_use
from .summary import RegisterSummary, analyze

__all__ = [
    "REGISTERS",
    "RegisterReference",
    "RegisterSummary",
    "RemapPlan",
    "analyze",
    "apply_remap",
    "conflict_table",
    "extract_references",
    "get_parser",
    "is_in_use",
    "parse_source",
]
__version__ = "0.1.0"
