"""Tests for register reference extraction."""

from __future__ import annotations

from reginfo import parse_source
from reginfo.extract import REGISTERS, collect_references, extract_references


def _refs(source):
    return collect_references(parse_source(source))


def _flags(ref):
    return ref.is_read, ref.is_write, ref.size


def test_move_source_is_read_and_destination_written():
    source = "    move.w d0,d1"
    refs = _refs(source)
    (d0,) = refs["d0"]
    (d1,) = refs["d1"]
    assert _flags(d0) == (True, False, 2)
    assert _flags(d1) == (False, True, 2)
    assert source[d0.start_index:d0.end_index] == "d0"
    assert source[d1.start_index:d1.end_index] == "d1"
    assert d0.line == 0


def test_lea_destination_is_long_write():
    refs = _refs("    lea Foo(pc),a0")
    (a0,) = refs["a0"]
    assert _flags(a0) == (False, True, 4)
    assert sum(len(items) for items in refs.values()) == 1


def test_register_lists_are_skipped():
    refs = _refs("    movem.w d0-a7,(a0)")
    assert refs["d0"] == []
    assert refs["a7"] == []
    (a0,) = refs["a0"]
    assert _flags(a0) == (True, False, 4)


def test_stack_pointer_alias_maps_to_a7():
    refs = _refs("    MOVE.L D0,(SP)+\n    move.l -(sp),d1")
    assert [_flags(ref) for ref in refs["a7"]] == [(True, False, 4), (True, False, 4)]
    assert _flags(refs["d0"][0]) == (True, False, 4)


def test_other_named_registers_are_ignored():
    pairs = extract_references(parse_source("    move.w sr,d0\n    move.l usp,a0\n    move.w d1,ccr"))
    assert [name for name, _ in pairs] == ["d0", "a0", "d1"]


def test_index_register_size():
    refs = _refs("    move.b 0(a0,d1.l),d2\n    move.b 0(a1,d3),d4")
    assert _flags(refs["a0"][0]) == (True, False, 4)
    assert _flags(refs["d1"][0]) == (True, False, 4)
    assert _flags(refs["d3"][0]) == (True, False, 2)
    assert _flags(refs["d2"][0]) == (False, True, 1)


def test_divide_destination_is_long_read_write():
    refs = _refs("    divu.w d1,d0")
    assert _flags(refs["d0"][0]) == (True, True, 4)
    assert _flags(refs["d1"][0]) == (True, False, 2)


def test_bit_operations():
    refs = _refs("    btst #3,d0\n    bset d1,d2\n    bclr #1,(a0)")
    assert _flags(refs["d0"][0]) == (True, False, 4)
    assert _flags(refs["d1"][0]) == (True, False, 1)
    assert _flags(refs["d2"][0]) == (True, True, 4)
    assert _flags(refs["a0"][0]) == (True, False, 4)


def test_byte_and_long_defaults():
    refs = _refs("    seq d0\n    exg d1,a1\n    moveq #0,d3\n    abcd d4,d5")
    assert _flags(refs["d0"][0]) == (True, True, 1)
    assert _flags(refs["d1"][0]) == (True, False, 4)
    assert _flags(refs["a1"][0]) == (True, True, 4)
    assert _flags(refs["d3"][0]) == (False, True, 4)
    assert _flags(refs["d5"][0]) == (True, True, 1)


def test_compare_and_test_destinations_are_read_only():
    refs = _refs("    cmp.l d0,d1\n    tst.b d2\n    cmpa.w d3,a0")
    assert _flags(refs["d1"][0]) == (True, False, 4)
    assert _flags(refs["d2"][0]) == (True, False, 1)
    assert _flags(refs["a0"][0]) == (True, False, 2)


def test_default_word_read_modify_write():
    refs = _refs("    add d0,d1")
    assert _flags(refs["d1"][0]) == (True, True, 2)


def test_explicit_size_overrides_bit_op_default():
    refs = _refs("    btst.b #1,d0")
    assert _flags(refs["d0"][0]) == (True, False, 1)


def test_register_outside_instruction_uses_fallbacks():
    refs = _refs("Temp equr d0")
    assert _flags(refs["d0"][0]) == (True, False, 2)


def test_every_register_has_an_entry():
    refs = _refs("")
    assert list(refs) == list(REGISTERS)
    assert all(items == [] for items in refs.values())


def test_references_do_not_overlap(sample_source):
    pairs = extract_references(parse_source(sample_source))
    spans = sorted((ref.start_index, ref.end_index) for _, ref in pairs)
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end <= start
    for _, ref in pairs:
        assert ref.start_index < ref.end_index
        assert ref.is_read or ref.is_write
