"""Two-phase restore of floating panel geometry (no Tk widget code).

Forcing position, size and visibility of a floating window while the main
window is still being laid out is unreliable on several window managers. The
restore is therefore split:

1. :meth:`DockGeometryRestorer.restore` hides each panel that has to float,
   marks it floating and moves/resizes it to the stored geometry.
2. :meth:`DockGeometryRestorer.finish` shows those panels again. The GUI
   runs it from the Tk idle queue once the primary layout pass is done.

Panels are duck-typed: ``is_floating()``, ``set_floating(bool)``, ``hide()``,
``show()``, ``move(x, y)``, ``resize(w, h)`` and ``geometry()`` returning
``(x, y, width, height)``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..settings.store import DOCK_PANELS
from .state import DockGeometry

logger = logging.getLogger(__name__)


class DockGeometryRestorer:
    def __init__(self, panels: Dict[str, Any], schedule: Optional[Callable[[Callable[[], None]], Any]] = None):
        self.panels = panels
        self._schedule = schedule
        self._pending: List[str] = []

    @property
    def pending(self) -> List[str]:
        return list(self._pending)

    def restore(self, settings: Dict[str, Any]) -> List[str]:
        """First phase; returns the names of the panels queued for showing."""
        docks = settings.get("docks") or {}
        restored = []
        for name in DOCK_PANELS:
            panel = self.panels.get(name)
            if panel is None:
                continue
            geom = DockGeometry.from_settings(docks.get(name))
            visible = bool(settings.get(f"show_{name}", False))
            if not (visible and geom.floating and not panel.is_floating()):
                continue

            panel.hide()
            panel.set_floating(True)
            panel.move(geom.x, geom.y)
            panel.resize(geom.width, geom.height)
            restored.append(name)
            logger.debug("Restoring floating panel %s at %s", name, geom)

        new = [n for n in restored if n not in self._pending]
        self._pending.extend(new)
        if self._pending and self._schedule is not None:
            self._schedule(self.finish)
        return restored

    def finish(self) -> List[str]:
        """Second phase: show every panel queued by :meth:`restore`."""
        shown = []
        while self._pending:
            name = self._pending.pop(0)
            panel = self.panels.get(name)
            if panel is None:
                continue
            panel.show()
            shown.append(name)
        return shown

    def capture(self, settings: Dict[str, Any]) -> None:
        """Write each panel's current floating state and geometry to *settings*."""
        docks = dict(settings.get("docks") or {})
        for name in DOCK_PANELS:
            panel = self.panels.get(name)
            if panel is None:
                continue
            x, y, width, height = panel.geometry()
            docks[name] = DockGeometry(
                floating=bool(panel.is_floating()), x=x, y=y, width=width, height=height
            ).to_settings()
        settings["docks"] = docks


__all__ = ["DockGeometryRestorer"]
