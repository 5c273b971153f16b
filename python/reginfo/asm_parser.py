"""Best-effort Motorola 68000 source parser.

Produces a concrete syntax tree of :class:`reginfo.syntax.Node` objects whose
type tags follow the tree-sitter m68k grammar naming.  The parser works line
by line and never raises on malformed input: anything it cannot classify is
kept as plain expression leaves so offsets stay intact.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .syntax import (
    ADDRESS_REGISTER,
    DATA_REGISTER,
    DIRECTIVE,
    FLOAT_REGISTER,
    INDEX,
    INSTRUCTION,
    NAMED_REGISTER,
    OPERAND_LIST,
    REGISTER_LIST,
    REGISTER_RANGE,
    Node,
    Point,
    Tree,
)

LOGGER = logging.getLogger("reginfo.asm_parser")

DATA_REGISTER_RE = re.compile(r"d[0-7]", re.IGNORECASE)
ADDRESS_REGISTER_RE = re.compile(r"a[0-7]", re.IGNORECASE)
FLOAT_REGISTER_RE = re.compile(r"fp[0-7]", re.IGNORECASE)
NAMED_REGISTERS = frozenset(
    {
        "sp", "pc", "zpc", "sr", "ccr", "usp", "ssp", "msp", "isp", "vbr",
        "sfc", "dfc", "cacr", "caar", "fpcr", "fpsr", "fpiar",
    }
)

_LIST_REG = r"(?:[ad][0-7]|sp|fp[0-7])"
REGISTER_LIST_RE = re.compile(
    rf"{_LIST_REG}(?:-{_LIST_REG})?(?:/{_LIST_REG}(?:-{_LIST_REG})?)*", re.IGNORECASE
)
INDEX_RE = re.compile(
    r"(?P<reg>[ad][0-7]|sp)(?:\.(?P<size>[wl]))?(?:\*(?P<scale>[1248]))?", re.IGNORECASE
)
MEMORY_INDIRECT_REG_RE = re.compile(
    r"(?<![\w.])(?P<reg>[ad][0-7]|sp|zpc|pc)(?:\.(?P<size>[wl]))?(?:\*(?P<scale>[1248]))?(?![\w])",
    re.IGNORECASE,
)
MNEMONIC_RE = re.compile(r"(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:\.(?P<size>[bwls]))?", re.IGNORECASE)
EXPR_TOKEN_RE = re.compile(
    r"""
    (?P<string_literal>"[^"]*"|'[^']*')
  | (?P<hexadecimal_literal>\$[0-9A-Fa-f]+|0[xX][0-9A-Fa-f]+)
  | (?P<binary_literal>%[01]+)
  | (?P<octal_literal>@[0-7]+)
  | (?P<decimal_literal>\d+)
  | (?P<symbol>[A-Za-z_.][A-Za-z0-9_.$@\\]*)
  | (?P<operator>[-+*/&|^!~<>=%]+)
    """,
    re.VERBOSE,
)

DIRECTIVES = frozenset(
    {
        "=", "dc", "ds", "dcb", "blk", "equ", "set", "equr", "reg", "rs", "rsreset",
        "rsset", "so", "fo", "section", "code", "data", "bss", "text", "xdef", "xref",
        "public", "global", "include", "incbin", "incdir", "org", "even", "odd",
        "cnop", "align", "macro", "endm", "mexit", "rept", "endr", "if", "ifd",
        "ifnd", "ifeq", "ifne", "ifgt", "ifge", "iflt", "ifle", "ifc", "ifnc",
        "else", "elseif", "endc", "endif", "end", "opt", "output", "printt",
        "printv", "fail", "list", "nolist", "ttl", "idnt", "machine",
    }
)

# Mnemonics without operands; anything after them on the line is a comment.
NO_OPERANDS = frozenset({"rts", "rte", "rtr", "nop", "reset", "illegal", "trapv"})


@dataclass
class _Line:
    text: str
    offset: int
    row: int

    def node(self, node_type: str, start: int, end: int) -> Node:
        return Node(
            node_type,
            self.offset + start,
            self.offset + end,
            Point(self.row, start),
            self.text[start:end],
        )


def _register_type(token: str) -> Optional[str]:
    if DATA_REGISTER_RE.fullmatch(token):
        return DATA_REGISTER
    if ADDRESS_REGISTER_RE.fullmatch(token):
        return ADDRESS_REGISTER
    if FLOAT_REGISTER_RE.fullmatch(token):
        return FLOAT_REGISTER
    if token.lower() in NAMED_REGISTERS:
        return NAMED_REGISTER
    return None


def _trim(text: str, start: int, end: int) -> Tuple[int, int]:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def split_operands(text: str, start: int, end: int) -> List[Tuple[int, int]]:
    """Split ``text[start:end]`` on top-level commas, returning trimmed spans."""
    spans: List[Tuple[int, int]] = []
    depth = 0
    quote = None
    seg_start = start
    for idx in range(start, end):
        ch = text[idx]
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in ('"', "'"):
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == "," and depth == 0:
            spans.append(_trim(text, seg_start, idx))
            seg_start = idx + 1
    spans.append(_trim(text, seg_start, end))
    return [span for span in spans if span[0] < span[1]]


def _operand_field_end(text: str, start: int) -> int:
    depth = 0
    quote = None
    idx = start
    length = len(text)
    while idx < length:
        ch = text[idx]
        if quote:
            if ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == ";":
            break
        elif ch.isspace() and depth == 0:
            nxt = idx
            while nxt < length and text[nxt].isspace():
                nxt += 1
            previous = text[start:idx].rstrip()[-1:]
            if nxt < length and (text[nxt] == "," or previous == ","):
                idx = nxt
                continue
            break
        idx += 1
    return idx


def _matching_open(text: str, start: int, end: int) -> Optional[int]:
    """Index of the ``(`` that closes at ``text[end - 1]``."""
    depth = 0
    for idx in range(end - 1, start - 1, -1):
        ch = text[idx]
        if ch == ")":
            depth += 1
        elif ch == "(":
            depth -= 1
            if depth == 0:
                return idx
    return None


class SourceParser:
    """Line-oriented parser for Motorola syntax 68k assembly."""

    def parse(self, text: str) -> Tree:
        root = Node("source_file", 0, len(text), Point(0, 0), text)
        offset = 0
        for row, raw in enumerate(text.split("\n")):
            line_text = raw[:-1] if raw.endswith("\r") else raw
            self._parse_line(root, _Line(line_text, offset, row))
            offset += len(raw) + 1
        return Tree(text, root)

    def _parse_line(self, root: Node, line: _Line) -> None:
        text = line.text
        length = len(text)
        pos, _ = _trim(text, 0, length)
        if pos >= length:
            return
        if text[pos] in "*;":
            root.append(line.node("comment", pos, length))
            return

        token_end = self._token_end(text, pos)
        if pos == 0 or text[pos:token_end].endswith(":"):
            label_end = token_end
            while label_end > pos and text[label_end - 1] == ":":
                label_end -= 1
            root.append(line.node("label", pos, label_end))
            pos, _ = _trim(text, token_end, length)
            if pos >= length:
                return
            if text[pos] == ";":
                root.append(line.node("comment", pos, length))
                return
            token_end = self._token_end(text, pos)

        pos = self._parse_statement(root, line, pos, token_end)
        pos, _ = _trim(text, pos, length)
        if pos < length:
            root.append(line.node("comment", pos, length))

    @staticmethod
    def _token_end(text: str, start: int) -> int:
        idx = start
        while idx < len(text) and not text[idx].isspace() and text[idx] != ";":
            idx += 1
        return idx

    def _parse_statement(self, root: Node, line: _Line, start: int, token_end: int) -> int:
        text = line.text
        token = text[start:token_end]
        match = MNEMONIC_RE.fullmatch(token)
        name_end = start + len(match.group("name")) if match else token_end
        name = text[start:name_end].lower()
        is_directive = token.startswith(".") or name in DIRECTIVES
        statement = line.node(DIRECTIVE if is_directive else INSTRUCTION, start, token_end)
        statement.append(
            line.node("directive_mnemonic" if is_directive else "instruction_mnemonic", start, name_end),
            "mnemonic",
        )
        if match and match.group("size"):
            statement.append(line.node("size", name_end + 1, token_end), "size")
        root.append(statement)

        if name in NO_OPERANDS:
            return token_end
        field_start, _ = _trim(text, token_end, len(text))
        if field_start >= len(text) or text[field_start] == ";":
            return token_end
        field_end = _operand_field_end(text, field_start)
        spans = split_operands(text, field_start, field_end)
        if not spans:
            return field_end
        operands = line.node(OPERAND_LIST, spans[0][0], spans[-1][1])
        for op_start, op_end in spans:
            operands.append(self._parse_operand(line, op_start, op_end))
        statement.append(operands, "operands")
        statement.end_index = operands.end_index
        statement.text = text[start:spans[-1][1]]
        return field_end

    def _parse_operand(self, line: _Line, start: int, end: int) -> Node:
        text = line.text
        token = text[start:end]
        reg_type = _register_type(token)
        if reg_type:
            return line.node(reg_type, start, end)
        if ("-" in token or "/" in token) and REGISTER_LIST_RE.fullmatch(token):
            return self._register_list(line, start, end)
        if token.startswith("#"):
            node = line.node("immediate", start, end)
            self._expression(node, line, start + 1, end)
            return node
        if token.startswith("-(") and token.endswith(")"):
            return self._simple_indirect(line, "address_register_indirect_predecrement", start, end, start + 2, end - 1)
        if token.startswith("(") and token.endswith(")+"):
            return self._simple_indirect(line, "address_register_indirect_postincrement", start, end, start + 1, end - 2)
        if "[" in token:
            return self._memory_indirect(line, start, end)
        if token.endswith(")"):
            open_idx = _matching_open(text, start, end)
            if open_idx is not None:
                node = self._indirect(line, start, end, open_idx)
                if node is not None:
                    return node
        node = line.node("expression", start, end)
        self._expression(node, line, start, end)
        return node

    def _register_list(self, line: _Line, start: int, end: int) -> Node:
        node = line.node(REGISTER_LIST, start, end)
        text = line.text
        piece_start = start
        for idx in range(start, end + 1):
            if idx < end and text[idx] != "/":
                continue
            dash = text.find("-", piece_start, idx)
            if dash == -1:
                node.append(self._register(line, piece_start, idx))
            else:
                span = node.append(line.node(REGISTER_RANGE, piece_start, idx))
                span.append(self._register(line, piece_start, dash))
                span.append(self._register(line, dash + 1, idx))
            piece_start = idx + 1
        return node

    def _register(self, line: _Line, start: int, end: int) -> Node:
        reg_type = _register_type(line.text[start:end]) or "symbol"
        return line.node(reg_type, start, end)

    def _simple_indirect(
        self, line: _Line, node_type: str, start: int, end: int, inner_start: int, inner_end: int
    ) -> Node:
        node = line.node(node_type, start, end)
        inner_start, inner_end = _trim(line.text, inner_start, inner_end)
        if _register_type(line.text[inner_start:inner_end]):
            node.append(self._register(line, inner_start, inner_end))
        else:
            self._expression(node, line, inner_start, inner_end)
        return node

    def _indirect(self, line: _Line, start: int, end: int, open_idx: int) -> Optional[Node]:
        text = line.text
        parts = split_operands(text, open_idx + 1, end - 1)
        displacement: List[Tuple[int, int]] = []
        if open_idx > start:
            displacement.append(_trim(text, start, open_idx))
        if parts and not self._is_register_part(text[parts[0][0]:parts[0][1]]):
            displacement.append(parts.pop(0))
        if not parts or not all(self._is_register_part(text[s:e]) for s, e in parts):
            return None

        base: Optional[Tuple[int, int]] = None
        base_type = _register_type(text[parts[0][0]:parts[0][1]])
        if base_type in (ADDRESS_REGISTER, NAMED_REGISTER):
            base = parts.pop(0)
        is_pc = base is not None and text[base[0]:base[1]].lower() in ("pc", "zpc")
        prefix = "program_counter" if is_pc else "address_register"
        if parts:
            node_type = f"{prefix}_indirect_index"
        elif displacement or is_pc:
            node_type = f"{prefix}_indirect_offset"
        else:
            node_type = "address_register_indirect"

        node = line.node(node_type, start, end)
        for disp_start, disp_end in displacement:
            self._expression(node, line, disp_start, disp_end)
        if base is not None:
            node.append(self._register(line, *base))
        for idx_start, idx_end in parts:
            node.append(self._index(line, idx_start, idx_end))
        return node

    @staticmethod
    def _is_register_part(token: str) -> bool:
        return bool(INDEX_RE.fullmatch(token)) or _register_type(token) in (ADDRESS_REGISTER, NAMED_REGISTER)

    def _index(self, line: _Line, start: int, end: int) -> Node:
        node = line.node(INDEX, start, end)
        match = INDEX_RE.fullmatch(line.text[start:end])
        if match is None:
            node.append(self._register(line, start, end))
            return node
        node.append(self._register(line, start + match.start("reg"), start + match.end("reg")))
        if match.group("size"):
            node.append(line.node("size", start + match.start("size"), start + match.end("size")), "size")
        if match.group("scale"):
            node.append(line.node("scale", start + match.start("scale"), start + match.end("scale")), "scale")
        return node

    def _memory_indirect(self, line: _Line, start: int, end: int) -> Node:
        node = line.node("memory_indirect", start, end)
        for match in MEMORY_INDIRECT_REG_RE.finditer(line.text, start, end):
            reg_type = _register_type(match.group("reg"))
            if match.group("size") or match.group("scale") or reg_type == DATA_REGISTER:
                node.append(self._index(line, match.start(), match.end()))
            else:
                node.append(line.node(reg_type or "symbol", match.start("reg"), match.end("reg")))
        return node

    @staticmethod
    def _expression(parent: Node, line: _Line, start: int, end: int) -> None:
        for match in EXPR_TOKEN_RE.finditer(line.text, start, end):
            kind = match.lastgroup or "symbol"
            parent.append(line.node(kind, match.start(), match.end()))


_PARSER: Optional[SourceParser] = None


def get_parser() -> SourceParser:
    """Return the shared parser, creating it on first use."""
    global _PARSER
    if _PARSER is None:
        _PARSER = SourceParser()
        LOGGER.debug("m68k source parser initialised")
    return _PARSER


def parse_source(text: str) -> Tree:
    return get_parser().parse(text)


__all__ = ["SourceParser", "get_parser", "parse_source", "split_operands"]
