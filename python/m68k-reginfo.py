#!/usr/bin/env python3
"""Entry point for the reginfo register analyzer."""

from __future__ import annotations

from reginfo.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
