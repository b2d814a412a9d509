"""Push persisted settings into live calculator state and read them back.

This module holds no Tk widget code so it can be unit-tested headlessly. The
main window is reached through a small duck-typed host object:

* ``set_size(width, height)`` / ``size() -> (width, height)``
* ``restore_state(blob)`` / ``save_state() -> str``
* ``set_full_screen(flag)`` / ``set_always_on_top(flag)``
* ``set_panel_visible(name, flag)``

Any of the collaborators may be omitted (``None``) in tests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from .. import numeric
from ..session.model import Calculation, CalculationLog
from ..settings.store import ANGLE_MODES, DOCK_PANELS, FORMAT_CODES, PRECISIONS, RADIX_CHARS
from .dock_restore import DockGeometryRestorer
from .events import ChangeNotifier
from .state import RuntimeState

logger = logging.getLogger(__name__)


def _size_pair(value: Any) -> Tuple[int, int]:
    try:
        w, h = value
        return int(w), int(h)
    except (TypeError, ValueError):
        return 0, 0


class SettingsApplier:
    """Converts a settings dict into runtime state and back.

    The four option setters are the only way format, precision, radix
    character and angle mode change at runtime. Setting the current value
    again, or a value outside the allowed set, does nothing and emits no
    notification.
    """

    def __init__(
        self,
        notifier: ChangeNotifier,
        log: CalculationLog,
        evaluator,
        *,
        state: Optional[RuntimeState] = None,
        window=None,
        docks: Optional[DockGeometryRestorer] = None,
    ):
        self.notifier = notifier
        self.log = log
        self.evaluator = evaluator
        self.state = state or RuntimeState()
        self.window = window
        self.docks = docks

    # ------------------------------------------------------------------
    # Option setters
    # ------------------------------------------------------------------

    def _set_option(self, option: str, value: Any, allowed: Sequence[Any]) -> bool:
        if value not in allowed:
            logger.debug("Ignoring invalid %s value %r", option, value)
            return False
        if getattr(self.state.options, option) == value:
            return False
        setattr(self.state.options, option, value)
        self.notifier.emit_option_changed(option, value)
        return True

    def set_format(self, code: str) -> bool:
        return self._set_option("format", code, FORMAT_CODES)

    def set_precision(self, precision: Any) -> bool:
        if isinstance(precision, bool):
            return False
        try:
            precision = int(precision)
        except (TypeError, ValueError, OverflowError):
            logger.debug("Ignoring invalid precision value %r", precision)
            return False
        if precision < 0:
            precision = -1
        return self._set_option("precision", precision, PRECISIONS)

    def set_radix_char(self, radix_char: str) -> bool:
        return self._set_option("radix_char", radix_char, RADIX_CHARS)

    def set_angle_mode(self, mode: str) -> bool:
        return self._set_option("angle_mode", mode, ANGLE_MODES)

    # ------------------------------------------------------------------
    # Window and panels
    # ------------------------------------------------------------------

    def set_full_screen(self, flag: bool) -> None:
        self.state.full_screen = bool(flag)
        if self.window is not None:
            self.window.set_full_screen(self.state.full_screen)

    def set_always_on_top(self, flag: bool) -> None:
        self.state.always_on_top = bool(flag)
        if self.window is not None:
            self.window.set_always_on_top(self.state.always_on_top)

    def set_panel_visible(self, name: str, flag: bool) -> None:
        self.state.panels_visible[name] = bool(flag)
        if self.window is not None:
            self.window.set_panel_visible(name, bool(flag))

    # ------------------------------------------------------------------
    # Settings -> runtime
    # ------------------------------------------------------------------

    def apply(self, settings: Dict[str, Any]) -> None:
        if self.window is not None:
            w, h = _size_pair(settings.get("main_window_size"))
            if w > 0 and h > 0:
                self.window.set_size(w, h)
            self.window.restore_state(settings.get("main_window_state") or "")

        self.set_full_screen(bool(settings.get("show_full_screen", False)))
        self.set_always_on_top(bool(settings.get("stay_always_on_top", False)))

        self.set_angle_mode(settings.get("angle_mode"))

        if settings.get("save_session", True):
            self.restore_history(settings)
        else:
            self.log.clear()
            self.notifier.emit_log_changed()

        if settings.get("save_variables", True):
            self.restore_variables(settings)

        self.set_format(settings.get("format"))
        self.set_precision(settings.get("precision"))
        self.set_radix_char(settings.get("radix_char"))

        for name in DOCK_PANELS:
            self.set_panel_visible(name, bool(settings.get(f"show_{name}", False)))

        if self.docks is not None:
            self.docks.restore(settings)

    def restore_history(self, settings: Dict[str, Any]) -> None:
        expressions = settings.get("history") or []
        results = settings.get("history_results") or []
        if not isinstance(expressions, list) or not isinstance(results, list) or len(expressions) != len(results):
            logger.warning("Discarding saved history: expression/result counts differ")
            self.log.clear()
            self.notifier.emit_log_changed()
            return

        self.log.clear()
        for expression, result in zip(expressions, results):
            value = numeric.parse(result)
            if numeric.is_nan(value):
                self.log.append(Calculation(str(expression), str(result)))
            else:
                self.log.append(Calculation(str(expression), value))
        self.notifier.emit_log_changed()

    def restore_variables(self, settings: Dict[str, Any]) -> None:
        entries = settings.get("variables") or []
        restored = 0
        for entry in entries if isinstance(entries, list) else []:
            name, sep, text = str(entry).partition("=")
            name = name.strip()
            value = numeric.parse(text)
            if not sep or numeric.is_nan(value) or not self.evaluator.is_assignable(name):
                logger.debug("Skipping saved variable %r", entry)
                continue
            self.evaluator.assign(name, value)
            restored += 1
        if restored:
            self.notifier.emit_variables_changed()

    # ------------------------------------------------------------------
    # Runtime -> settings
    # ------------------------------------------------------------------

    def capture(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        if self.window is not None:
            settings["main_window_size"] = list(self.window.size())
            settings["main_window_state"] = self.window.save_state()

        settings["show_full_screen"] = self.state.full_screen
        settings["stay_always_on_top"] = self.state.always_on_top

        opts = self.state.options
        settings["format"] = opts.format
        settings["precision"] = opts.precision
        settings["radix_char"] = opts.radix_char
        settings["angle_mode"] = opts.angle_mode

        for name in DOCK_PANELS:
            if name in self.state.panels_visible:
                settings[f"show_{name}"] = self.state.panels_visible[name]

        entries = self.log.entries()
        settings["history"] = [c.expression for c in entries]
        settings["history_results"] = [c.outcome if c.is_error else numeric.format_full(c.outcome) for c in entries]

        if settings.get("save_variables", True):
            settings["variables"] = [
                f"{b.name}={numeric.format_full(b.value)}" for b in self.evaluator.current_bindings()
            ]

        if self.docks is not None:
            self.docks.capture(settings)
        return settings


__all__ = ["SettingsApplier"]
