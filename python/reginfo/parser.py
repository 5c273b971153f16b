"""Command line splitting and rename mapping parsing for reginfo."""

from __future__ import annotations

import re
import shlex
from typing import List, Optional, Tuple

MAPPING_RE = re.compile(r"\s*(?P<reg>[^\s=:>-]+)\s*(?:=|:|->)\s*(?P<target>\S*)\s*")
NO_CHANGE = ("", "-", "none")


def split_command(line: str) -> List[str]:
    """Split a command line into argv tokens using shlex rules."""
    if not line:
        return []
    try:
        return shlex.split(line, comments=True, posix=True)
    except ValueError as exc:
        # Return the raw line as a single token so callers can raise a friendlier error.
        return [line.strip(), f"#parse-error:{exc}"]


def parse_target(token: Optional[str]) -> Optional[str]:
    """Rename target from user input; ``-``/``none`` mean no change."""
    if token is None or token.strip().lower() in NO_CHANGE:
        return None
    return token.strip()


def parse_mapping(spec: str) -> Tuple[str, Optional[str]]:
    """Parse ``d0=d1`` (also ``d0:d1`` or ``d0->d1``) into a pair."""
    match = MAPPING_RE.fullmatch(spec or "")
    if not match:
        raise ValueError(f"Bad mapping '{spec}', expected REG=TARGET")
    return match.group("reg"), parse_target(match.group("target"))
