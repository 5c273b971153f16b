"""
Pytest configuration and fixtures for reginfo tests.
"""
import sys
from pathlib import Path
from typing import Dict

import pytest

PYTHON_SRC = Path(__file__).resolve().parents[1]
if str(PYTHON_SRC) not in sys.path:
    sys.path.insert(0, str(PYTHON_SRC))

from reginfo import analyze, parse_source  # noqa: E402
from reginfo.context import AnalysisContext  # noqa: E402

SAMPLE = """\
; copy a block
copy:
    lea Table(pc),a0
    move.w d0,d1
    move.l (a0)+,d2
    add.l d2,d3
    movem.l d2-d3/a2,-(sp)
    rts
"""


def summaries_by_name(source: str) -> Dict[str, object]:
    return {summary.name: summary for summary in analyze(parse_source(source))}


@pytest.fixture
def sample_source() -> str:
    return SAMPLE


@pytest.fixture
def sample_ctx() -> AnalysisContext:
    ctx = AnalysisContext()
    ctx.set_source(SAMPLE)
    return ctx
