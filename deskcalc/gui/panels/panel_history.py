"""History panel: past expressions, double-click to reuse."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from ..widgets.dock_panel import DockPanel


def build_panel(dock_area, app) -> DockPanel:
    panel = DockPanel(dock_area, "History")

    box = tk.Listbox(panel.body, activestyle="none", height=8)
    scroll = ttk.Scrollbar(panel.body, orient="vertical", command=box.yview)
    box.configure(yscrollcommand=scroll.set)
    box.pack(side=tk.LEFT, fill="both", expand=True)
    scroll.pack(side=tk.RIGHT, fill="y")

    def _refresh() -> None:
        box.delete(0, tk.END)
        for calc in app.log.entries():
            box.insert(tk.END, calc.expression)
        box.see(tk.END)

    def _on_activate(_event=None) -> None:
        sel = box.curselection()
        if sel:
            app.insert_text(box.get(sel[0]))

    box.bind("<Double-Button-1>", _on_activate)
    box.bind("<Return>", _on_activate)

    panel.set_refresh(_refresh)
    panel.track(app.notifier.on_log_changed(panel.refresh))
    return panel
