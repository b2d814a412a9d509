"""Change notification hub for display options and live calculator state."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

# Options whose change is fanned out to dependents (display, editor, panels,
# evaluator). Each logical change produces exactly one event.
OPTION_EVENTS = ("format", "precision", "radix_char", "angle_mode")
STATE_EVENTS = ("log_changed", "variables_changed")


class ChangeNotifier:
    """Small callback-based observer list, one list per event name.

    Dependents subscribe once at construction and call the returned function
    to unsubscribe at teardown. Delivery order between dependents is not part
    of the contract.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Callable[..., None]]] = {
            name: [] for name in OPTION_EVENTS + STATE_EVENTS
        }

    def subscribe(self, event: str, callback: Callable[..., None]) -> Callable[[], None]:
        if event not in self._listeners:
            raise KeyError(f"unknown event {event!r}")
        self._listeners[event].append(callback)

        def _unsubscribe() -> None:
            try:
                self._listeners[event].remove(callback)
            except ValueError:
                pass

        return _unsubscribe

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> None:
        # Iterate over a copy so a callback may unsubscribe itself
        for callback in list(self._listeners[event]):
            callback(*args)

    # Typed helpers ------------------------------------------------------

    def on_format_changed(self, callback: Callable[[str], None]) -> Callable[[], None]:
        return self.subscribe("format", callback)

    def on_precision_changed(self, callback: Callable[[int], None]) -> Callable[[], None]:
        return self.subscribe("precision", callback)

    def on_radix_char_changed(self, callback: Callable[[str], None]) -> Callable[[], None]:
        return self.subscribe("radix_char", callback)

    def on_angle_mode_changed(self, callback: Callable[[str], None]) -> Callable[[], None]:
        return self.subscribe("angle_mode", callback)

    def on_log_changed(self, callback: Callable[[], None]) -> Callable[[], None]:
        return self.subscribe("log_changed", callback)

    def on_variables_changed(self, callback: Callable[[], None]) -> Callable[[], None]:
        return self.subscribe("variables_changed", callback)

    def emit_option_changed(self, option: str, value: Any) -> None:
        if option not in OPTION_EVENTS:
            raise KeyError(f"unknown option {option!r}")
        logger.debug("%s changed to %r", option, value)
        self.emit(option, value)

    def emit_log_changed(self) -> None:
        self.emit("log_changed")

    def emit_variables_changed(self) -> None:
        self.emit("variables_changed")


__all__ = ["ChangeNotifier", "OPTION_EVENTS", "STATE_EVENTS"]
