"""Side panel that can be docked into the main window or float on its own."""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class DockPanel(tk.Frame):
    """A frame packed into a dock area that can be turned into a toplevel.

    Floating uses Tk's ``wm manage``/``wm forget``; the frame keeps its
    children either way. The methods match what
    :class:`deskcalc.gui.dock_restore.DockGeometryRestorer` expects.
    """

    def __init__(self, dock_area: tk.Misc, title: str):
        super().__init__(dock_area, borderwidth=1, relief="groove")
        self.title = title
        self._floating = False
        self._visible = False
        self._refresh: Optional[Callable[[], None]] = None
        self._subscriptions: List[Callable[[], None]] = []

        header = ttk.Frame(self)
        header.pack(fill="x")
        ttk.Label(header, text=title).pack(side=tk.LEFT, padx=4)
        self.float_button = ttk.Button(header, text="⇱", width=2, command=self.toggle_floating)
        self.float_button.pack(side=tk.RIGHT)

        self.body = ttk.Frame(self)
        self.body.pack(fill="both", expand=True)

    # Content -------------------------------------------------------------

    def set_refresh(self, callback: Callable[[], None]) -> None:
        self._refresh = callback

    def refresh(self) -> None:
        if self._refresh is not None:
            self._refresh()

    def track(self, unsubscribe: Callable[[], None]) -> None:
        """Remember a notifier subscription to drop when the panel is destroyed."""
        self._subscriptions.append(unsubscribe)

    def destroy(self) -> None:
        while self._subscriptions:
            self._subscriptions.pop()()
        super().destroy()

    # Visibility ----------------------------------------------------------

    def is_visible(self) -> bool:
        return self._visible

    def show(self) -> None:
        self._visible = True
        if self._floating:
            self.tk.call("wm", "deiconify", self._w)
            self.tk.call("wm", "title", self._w, self.title)
        else:
            self.pack(fill="both", expand=True, pady=(0, 4))
        self.refresh()

    def hide(self) -> None:
        self._visible = False
        if self._floating:
            self.tk.call("wm", "withdraw", self._w)
        else:
            self.pack_forget()

    # Floating ------------------------------------------------------------

    def is_floating(self) -> bool:
        return self._floating

    def set_floating(self, flag: bool) -> None:
        flag = bool(flag)
        if flag == self._floating:
            return
        visible = self._visible
        if flag:
            self.pack_forget()
            self.tk.call("wm", "manage", self._w)
            self.tk.call("wm", "protocol", self._w, "WM_DELETE_WINDOW", self.register(self.hide))
            if not visible:
                self.tk.call("wm", "withdraw", self._w)
        else:
            self.tk.call("wm", "forget", self._w)
        self._floating = flag
        if visible:
            self.show()

    def toggle_floating(self) -> None:
        self.set_floating(not self._floating)

    # Geometry ------------------------------------------------------------

    def move(self, x: int, y: int) -> None:
        if self._floating:
            self.tk.call("wm", "geometry", self._w, f"+{int(x)}+{int(y)}")

    def resize(self, width: int, height: int) -> None:
        if self._floating and width > 0 and height > 0:
            self.tk.call("wm", "geometry", self._w, f"{int(width)}x{int(height)}")

    def geometry(self) -> Tuple[int, int, int, int]:
        try:
            return self.winfo_rootx(), self.winfo_rooty(), self.winfo_width(), self.winfo_height()
        except tk.TclError:
            return 0, 0, 0, 0


__all__ = ["DockPanel"]
