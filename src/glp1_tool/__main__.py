"""Punto de entrada: python -m glp1_tool."""

from __future__ import annotations

from glp1_tool.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
