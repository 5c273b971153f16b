"""Tests for register renaming."""

from __future__ import annotations

import pytest

from reginfo import analyze, parse_source
from reginfo.remap import (
    RemapPlan,
    Replacement,
    apply_remap,
    conflict_table,
    is_in_use,
    normalise_register,
    plan_replacements,
    splice,
)

BLOCK = """\
start:
    move.l (a0)+,d0
    add.w d0,d2
    move.l d2,(a0)
"""


def test_plan_normalises_names():
    plan = RemapPlan({"D0": "d1", "SP": "a6"})
    assert plan.mappings() == {"d0": "d1", "a7": "a6"}
    plan.set("d2", None)
    assert plan.get("d2") is None
    assert plan.snapshot()["d2"] is None
    assert len(plan) == 2


def test_plan_rejects_unknown_registers():
    plan = RemapPlan()
    with pytest.raises(ValueError):
        plan.set("pc", "d0")
    with pytest.raises(ValueError):
        plan.set("d0", "d8")
    with pytest.raises(ValueError):
        normalise_register("fp0")


def test_plan_treats_self_target_as_no_change():
    plan = RemapPlan({"d0": "d0", "sp": "a7"})
    assert not plan
    assert plan.snapshot() == {"d0": None, "a7": None}


def test_plan_clear_and_reset():
    plan = RemapPlan({"d0": "d1", "a0": "a1"})
    plan.clear("d0")
    assert plan.mappings() == {"a0": "a1"}
    plan.reset()
    assert not plan


def test_in_use_checks():
    summaries = analyze(parse_source("    move.w d0,d1"))
    plan = RemapPlan()
    assert is_in_use(summaries, plan, "d0", "d1")
    assert not is_in_use(summaries, plan, "d0", "d2")
    assert not is_in_use(summaries, plan, "d0", "d0")

    plan.set("d1", "d3")
    assert not is_in_use(summaries, plan, "d0", "d1")
    assert is_in_use(summaries, plan, "d0", "d3")
    assert not is_in_use(summaries, plan, "d1", "d3")


def test_conflict_table_covers_all_pairs():
    summaries = analyze(parse_source("    move.w d0,d1"))
    table = conflict_table(summaries, RemapPlan())
    assert len(table) == 16
    assert all(len(row) == 16 for row in table.values())
    assert table["d0"]["d1"] is True
    assert table["d1"]["d0"] is True
    assert table["d0"]["a3"] is False


def test_simultaneous_remaps():
    summaries = analyze(parse_source(BLOCK))
    plan = RemapPlan({"d0": "d1", "a0": "a1"})
    result = apply_remap(BLOCK, summaries, plan)
    assert result == """\
start:
    move.l (a1)+,d1
    add.w d1,d2
    move.l d2,(a1)
"""
    assert len(result) == len(BLOCK)
    assert plan.mappings() == {"d0": "d1", "a0": "a1"}


def test_remap_round_trip():
    summaries = analyze(parse_source(BLOCK))
    old = {s.name: s for s in summaries}
    result = apply_remap(BLOCK, summaries, RemapPlan({"d0": "d5"}))
    new = {s.name: s for s in analyze(parse_source(result))}
    assert not new["d0"].used
    assert [r.start_index for r in new["d5"].references] == [r.start_index for r in old["d0"].references]
    assert new["d5"].is_input == old["d0"].is_input


def test_stack_pointer_occurrences_are_renamed():
    source = "    move.l d0,-(sp)\n    move.l (a7)+,d0"
    summaries = analyze(parse_source(source))
    result = apply_remap(source, summaries, RemapPlan({"a7": "a6"}))
    assert result == "    move.l d0,-(a6)\n    move.l (a6)+,d0"


def test_empty_plan_is_noop():
    summaries = analyze(parse_source(BLOCK))
    assert apply_remap(BLOCK, summaries, RemapPlan()) == BLOCK
    assert apply_remap(BLOCK, summaries, RemapPlan({"d0": None})) == BLOCK


def test_missing_summary_is_skipped():
    summaries = [s for s in analyze(parse_source(BLOCK)) if s.name != "d0"]
    plan = RemapPlan({"d0": "d5", "a0": "a2"})
    assert [r.text for r in plan_replacements(summaries, plan)] == ["a2", "a2"]


def test_splice_handles_length_changes_in_any_order():
    source = "abc def ghi"
    replacements = [
        Replacement(0, 3, "x"),
        Replacement(8, 11, "longer"),
        Replacement(4, 7, ""),
    ]
    result = splice(source, replacements)
    assert result == "x  longer"
    delta = sum(len(r.text) - (r.end_index - r.start_index) for r in replacements)
    assert len(result) == len(source) + delta
