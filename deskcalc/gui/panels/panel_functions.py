"""Functions panel: names of the functions the evaluator understands."""

from __future__ import annotations

import tkinter as tk

from ..widgets.dock_panel import DockPanel


def build_panel(dock_area, app) -> DockPanel:
    panel = DockPanel(dock_area, "Functions")

    box = tk.Listbox(panel.body, activestyle="none", height=8)
    box.pack(fill="both", expand=True)

    def _refresh() -> None:
        box.delete(0, tk.END)
        for name in app.evaluator.function_names():
            box.insert(tk.END, name)

    def _on_activate(_event=None) -> None:
        sel = box.curselection()
        if sel:
            app.insert_text(box.get(sel[0]) + "(")

    box.bind("<Double-Button-1>", _on_activate)

    panel.set_refresh(_refresh)
    return panel
