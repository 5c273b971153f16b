"""Tests for register usage summaries."""

from __future__ import annotations

from conftest import summaries_by_name

from reginfo import analyze, parse_source
from reginfo.extract import REGISTERS, RegisterReference
from reginfo.summary import summarize


def test_sample_summaries(sample_source):
    regs = summaries_by_name(sample_source)
    a0 = regs["a0"]
    assert (a0.is_read, a0.is_write, a0.is_input) == (True, True, False)
    assert (a0.max_read_size, a0.max_write_size, a0.first_use) == (4, 4, 2)

    d0 = regs["d0"]
    assert d0.is_input and d0.input_size == 2
    assert d0.max_write_size is None

    d1 = regs["d1"]
    assert not d1.is_read and d1.is_write and not d1.is_input
    assert d1.max_read_size is None and d1.input_size is None

    d2 = regs["d2"]
    assert not d2.is_input
    assert len(d2.references) == 2

    assert regs["d3"].is_input and regs["d3"].input_size == 4
    assert regs["a7"].is_input and regs["a7"].first_use == 6
    assert regs["a2"].references == []


def test_unused_registers_are_reported():
    summaries = analyze(parse_source("    nop"))
    assert [summary.name for summary in summaries] == list(REGISTERS)
    for summary in summaries:
        assert not summary.used
        assert summary.first_use is None
        assert summary.max_read_size is None
        assert summary.max_write_size is None
        assert not summary.is_input


def test_first_use_read_marks_input():
    regs = summaries_by_name("    moveq #0,d0\n    add.w d1,d0")
    assert not regs["d0"].is_input
    assert regs["d1"].is_input and regs["d1"].first_use == 1


def test_read_and_write_on_same_first_line():
    regs = summaries_by_name("    add.w d0,d0")
    assert regs["d0"].is_input
    assert regs["d0"].max_write_size == 2


def test_max_sizes_pick_largest():
    refs = [
        RegisterReference(0, 2, 3, True, False, 1),
        RegisterReference(5, 7, 4, True, True, 4),
        RegisterReference(9, 11, 5, False, True, 2),
    ]
    summary = summarize("d4", refs)
    assert summary.max_read_size == 4
    assert summary.max_write_size == 4
    assert summary.first_use == 3
    assert summary.input_size == 1


def test_sizes_are_valid_and_lines_ordered(sample_source):
    for summary in analyze(parse_source(sample_source)):
        for size in (summary.max_read_size, summary.max_write_size):
            assert size in (None, 1, 2, 4)
        lines = [ref.line for ref in summary.references]
        assert lines == sorted(lines)


def test_analysis_is_repeatable(sample_source):
    tree = parse_source(sample_source)
    assert analyze(tree) == analyze(tree)
    assert analyze(tree) == analyze(parse_source(sample_source))


def test_to_dict_round_trips_fields(sample_source):
    data = summaries_by_name(sample_source)["d0"].to_dict()
    assert data["name"] == "d0"
    assert data["input"] is True
    assert data["references"][0]["size"] == 2
