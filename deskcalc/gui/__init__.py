"""Tk GUI package for the desk calculator.

The headless modules (``applier``, ``dock_restore``, ``events``, ``state``)
hold the settings synchronization logic and never import tkinter. The Tk
application is imported lazily so those modules stay usable without a
display.
"""

from __future__ import annotations

from typing import Any

__all__ = ["CalculatorApp", "main"]


def __getattr__(name: str) -> Any:
    if name in {"CalculatorApp", "main"}:
        from .app import CalculatorApp, main

        return {"CalculatorApp": CalculatorApp, "main": main}[name]
    raise AttributeError(name)
