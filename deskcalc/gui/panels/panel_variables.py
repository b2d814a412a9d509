"""Variables panel: user variables rendered with the current display options."""

from __future__ import annotations

from tkinter import ttk

from ...numeric import format_display
from ..widgets.dock_panel import DockPanel


def build_panel(dock_area, app) -> DockPanel:
    panel = DockPanel(dock_area, "Variables")

    tree = ttk.Treeview(panel.body, columns=("name", "value"), show="headings", height=8)
    tree.heading("name", text="Name")
    tree.heading("value", text="Value")
    tree.column("name", width=80, stretch=False)
    tree.pack(fill="both", expand=True)

    def _refresh() -> None:
        tree.delete(*tree.get_children(""))
        opts = app.options
        for binding in app.evaluator.current_bindings():
            text = format_display(binding.value, opts.format, opts.precision, opts.radix_char)
            tree.insert("", "end", values=(binding.name, text))

    def _on_activate(_event=None) -> None:
        sel = tree.selection()
        if sel:
            app.insert_text(str(tree.item(sel[0], "values")[0]))

    tree.bind("<Double-Button-1>", _on_activate)

    panel.set_refresh(_refresh)
    panel.track(app.notifier.on_variables_changed(panel.refresh))
    panel.track(app.notifier.on_radix_char_changed(lambda _c: panel.refresh()))
    panel.track(app.notifier.on_format_changed(lambda _c: panel.refresh()))
    panel.track(app.notifier.on_precision_changed(lambda _p: panel.refresh()))
    return panel
