#!/usr/bin/env python3
"""Convenience entry point for the session command line tool.

The implementation lives in `deskcalc.cli`.
"""

from deskcalc.cli import main as _main


if __name__ == "__main__":
    raise SystemExit(_main())
