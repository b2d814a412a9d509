"""Constants panel (pi, phi)."""

from __future__ import annotations

from tkinter import ttk

from ...numeric import format_display
from ..widgets.dock_panel import DockPanel


def build_panel(dock_area, app) -> DockPanel:
    panel = DockPanel(dock_area, "Constants")

    tree = ttk.Treeview(panel.body, columns=("name", "value"), show="headings", height=4)
    tree.heading("name", text="Name")
    tree.heading("value", text="Value")
    tree.column("name", width=60, stretch=False)
    tree.pack(fill="both", expand=True)

    def _refresh() -> None:
        tree.delete(*tree.get_children(""))
        radix = app.options.radix_char
        for name, value in app.evaluator.constants():
            tree.insert("", "end", values=(name, format_display(value, "g", 15, radix)))

    def _on_activate(_event=None) -> None:
        sel = tree.selection()
        if sel:
            app.insert_text(str(tree.item(sel[0], "values")[0]))

    tree.bind("<Double-Button-1>", _on_activate)

    panel.set_refresh(_refresh)
    panel.track(app.notifier.on_radix_char_changed(lambda _c: panel.refresh()))
    return panel
