"""Output helpers for reginfo."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Sequence

from .context import AnalysisContext
from .extract import RegisterReference
from .summary import RegisterSummary
from .syntax import get_size_label


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)


def emit_result(ctx: AnalysisContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: AnalysisContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(f"error: {message}")


def format_size(size: Optional[int]) -> str:
    """``B``/``W``/``L`` for a byte count, blank when absent."""
    label = get_size_label(size)
    return label.upper() if label else ""


def format_access(ref: RegisterReference) -> str:
    return ("R" if ref.is_read else "-") + ("W" if ref.is_write else "-")


def render_register_table(summaries: Sequence[RegisterSummary]) -> None:
    """Print the register usage table."""
    if not summaries:
        print("  registers: (none)")
        return
    header = "  Reg  Read  Write  First use  Input"
    print(header)
    print("  " + "-" * (len(header) - 2))
    for summary in summaries:
        first = str(summary.first_use) if summary.first_use is not None else ""
        flag = f"yes ({format_size(summary.input_size)})" if summary.is_input else ""
        print(
            f"  {summary.name:<3}  {format_size(summary.max_read_size):^4}  "
            f"{format_size(summary.max_write_size):^5}  {first:>9}  {flag}"
        )


def render_references(summary: RegisterSummary, source: str) -> None:
    """Print each reference of a register with the line it sits on."""
    lines = source.split("\n")
    if not summary.references:
        print(f"  {summary.name}: unused")
        return
    print(f"  {summary.name}:")
    for ref in summary.references:
        text = lines[ref.line].strip() if ref.line < len(lines) else ""
        print(f"    {ref.line:>5}  {format_access(ref)}  {format_size(ref.size)}  {text}")


def render_plan(ctx: AnalysisContext, conflicts: Mapping[str, Mapping[str, bool]]) -> None:
    """Print planned renames and the busy targets for each register."""
    mappings = ctx.plan.mappings()
    if not mappings:
        print("  plan: (empty)")
    else:
        print("  plan:")
        for register, target in sorted(mappings.items()):
            print(f"    {register} -> {target}")
    print("  targets in use:")
    for summary in ctx.summaries:
        if not summary.used:
            continue
        busy = [target for target, flag in conflicts.get(summary.name, {}).items() if flag]
        print(f"    {summary.name}: {', '.join(busy) if busy else '(none)'}")


def render_source(source: str) -> None:
    for idx, line in enumerate(source.split("\n")):
        print(f"{idx:>5}  {line}")


__all__ = [
    "emit_result",
    "emit_error",
    "format_size",
    "format_access",
    "render_register_table",
    "render_references",
    "render_plan",
    "render_source",
]
