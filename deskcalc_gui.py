#!/usr/bin/env python3
"""Convenience GUI entry point.

The GUI implementation lives in `deskcalc.gui.app`.
"""

from deskcalc.gui.app import main


if __name__ == "__main__":
    main()
