from __future__ import annotations

from decimal import Decimal

from deskcalc.evaluator import Evaluator
from deskcalc.gui.applier import SettingsApplier
from deskcalc.gui.dock_restore import DockGeometryRestorer
from deskcalc.gui.events import OPTION_EVENTS, ChangeNotifier
from deskcalc.session import Calculation, CalculationLog
from deskcalc.settings import SettingsStore, default_settings


class _FakeWindow:
    def __init__(self) -> None:
        self.calls = []
        self.visible = {}
        self._size = (640, 480)

    def set_size(self, width, height):
        self.calls.append(("set_size", width, height))
        self._size = (width, height)

    def size(self):
        return self._size

    def restore_state(self, blob):
        self.calls.append(("restore_state", blob))

    def save_state(self):
        return "zoomed"

    def set_full_screen(self, flag):
        self.calls.append(("full_screen", flag))

    def set_always_on_top(self, flag):
        self.calls.append(("always_on_top", flag))

    def set_panel_visible(self, name, flag):
        self.visible[name] = flag


class _FakePanel:
    def __init__(self, floating=False, geometry=(0, 0, 100, 100)):
        self.floating = floating
        self._geometry = geometry

    def is_floating(self):
        return self.floating

    def set_floating(self, flag):
        self.floating = flag

    def hide(self):
        pass

    def show(self):
        pass

    def move(self, x, y):
        self._geometry = (x, y) + self._geometry[2:]

    def resize(self, w, h):
        self._geometry = self._geometry[:2] + (w, h)

    def geometry(self):
        return self._geometry


def _make(window=None, docks=None):
    notifier = ChangeNotifier()
    events = []
    for option in OPTION_EVENTS:
        notifier.subscribe(option, lambda value, o=option: events.append((o, value)))
    applier = SettingsApplier(notifier, CalculationLog(), Evaluator(), window=window, docks=docks)
    return applier, events


def test_set_format_twice_notifies_once() -> None:
    applier, events = _make()

    assert applier.set_format("f") is True
    assert applier.set_format("f") is False

    assert events == [("format", "f")]
    assert applier.state.options.format == "f"


def test_invalid_values_are_ignored_without_notification() -> None:
    applier, events = _make()

    assert applier.set_format("x") is False
    assert applier.set_precision(7) is False
    assert applier.set_precision("abc") is False
    assert applier.set_precision(True) is False
    assert applier.set_radix_char(";") is False
    assert applier.set_angle_mode("g") is False

    assert events == []
    assert applier.state.options.format == "g"
    assert applier.state.options.precision == -1


def test_non_finite_precision_from_settings_file_is_ignored(tmp_path) -> None:
    (tmp_path / "settings.json").write_text('{"precision": Infinity}', encoding="utf-8")
    settings = SettingsStore(home=tmp_path).load()
    applier, events = _make()

    assert applier.set_precision(settings["precision"]) is False
    assert applier.set_precision(float("-inf")) is False
    assert applier.set_precision(float("nan")) is False

    applier.apply(settings)
    assert applier.state.options.precision == -1
    assert events == []


def test_set_precision_normalizes_input() -> None:
    applier, events = _make()

    assert applier.set_precision("8") is True
    assert applier.set_precision(-5) is True
    assert applier.state.options.precision == -1
    assert events == [("precision", 8), ("precision", -1)]


def test_reentrant_set_of_same_value_does_not_loop() -> None:
    applier, events = _make()
    seen = []

    def _dependent(value):
        seen.append(value)
        # a dependent pushing the value back must be a no-op
        applier.set_radix_char(value)

    applier.notifier.on_radix_char_changed(_dependent)

    applier.set_radix_char(",")

    assert seen == [","]
    assert events == [("radix_char", ",")]


def test_apply_sets_angle_mode_before_format_precision_and_radix() -> None:
    applier, events = _make()
    settings = default_settings()
    settings.update({"angle_mode": "d", "format": "e", "precision": 15, "radix_char": ","})

    applier.apply(settings)

    assert events == [("angle_mode", "d"), ("format", "e"), ("precision", 15), ("radix_char", ",")]


def test_apply_with_defaults_emits_no_option_change() -> None:
    applier, events = _make()
    applier.apply(default_settings())
    assert events == []


def test_apply_restores_window_and_panels() -> None:
    window = _FakeWindow()
    applier, _events = _make(window=window)
    settings = default_settings()
    settings.update(
        {
            "main_window_size": [800, 600],
            "main_window_state": "zoomed",
            "show_full_screen": True,
            "stay_always_on_top": True,
            "show_history": True,
            "show_constants": True,
        }
    )

    applier.apply(settings)

    assert window.calls[:4] == [
        ("set_size", 800, 600),
        ("restore_state", "zoomed"),
        ("full_screen", True),
        ("always_on_top", True),
    ]
    assert window.visible == {"history": True, "functions": False, "variables": False, "constants": True}


def test_apply_skips_unset_window_size() -> None:
    window = _FakeWindow()
    applier, _events = _make(window=window)
    applier.apply(default_settings())
    assert not [c for c in window.calls if c[0] == "set_size"]


def test_apply_restores_history_when_session_saving_is_enabled() -> None:
    applier, _events = _make()
    settings = default_settings()
    settings.update({"history": ["1+1", "1/0"], "history_results": ["2", "division by zero"]})

    applier.apply(settings)

    assert applier.log.entries() == [Calculation("1+1", Decimal(2)), Calculation("1/0", "division by zero")]


def test_apply_twice_does_not_duplicate_history() -> None:
    applier, _events = _make()
    applier.log.append(Calculation("stale", Decimal(1)))
    settings = default_settings()
    settings.update({"history": ["1+1"], "history_results": ["2"]})

    applier.apply(settings)
    applier.apply(settings)

    assert applier.log.entries() == [Calculation("1+1", Decimal(2))]


def test_out_of_range_saved_numbers_do_not_break_apply() -> None:
    applier, _events = _make()
    settings = default_settings()
    settings.update(
        {
            "history": ["x", "1+1"],
            "history_results": ["9e99999999", "2"],
            "variables": ["k=1e999999999", "j=3"],
        }
    )

    applier.apply(settings)

    assert applier.log.entries() == [Calculation("x", "9e99999999"), Calculation("1+1", Decimal(2))]
    assert {b.name: b.value for b in applier.evaluator.current_bindings()} == {"j": Decimal(3)}


def test_apply_starts_with_empty_log_when_session_saving_is_disabled() -> None:
    applier, _events = _make()
    applier.log.append(Calculation("stale", Decimal(1)))
    settings = default_settings()
    settings.update({"save_session": False, "history": ["1+1"], "history_results": ["2"]})

    applier.apply(settings)

    assert len(applier.log) == 0


def test_apply_discards_history_with_mismatched_results() -> None:
    applier, _events = _make()
    settings = default_settings()
    settings.update({"history": ["1+1", "2+2"], "history_results": ["2"]})

    applier.apply(settings)

    assert len(applier.log) == 0


def test_apply_restores_variables_only_when_enabled() -> None:
    entries = ["k=5", "pi=3", "bad=oops", "noequals", "r=0.125"]

    applier, _events = _make()
    settings = default_settings()
    settings["variables"] = entries
    applier.apply(settings)
    assert {b.name: b.value for b in applier.evaluator.current_bindings()} == {
        "k": Decimal(5),
        "r": Decimal("0.125"),
    }

    applier, _events = _make()
    settings = default_settings()
    settings.update({"variables": entries, "save_variables": False})
    applier.apply(settings)
    assert applier.evaluator.current_bindings() == []


def test_capture_writes_runtime_state_back() -> None:
    window = _FakeWindow()
    panels = {"history": _FakePanel(floating=True, geometry=(5, 6, 300, 400))}
    applier, _events = _make(window=window, docks=DockGeometryRestorer(panels))
    applier.set_format("h")
    applier.set_panel_visible("history", True)
    applier.log.append(Calculation("1/3", Decimal(1) / Decimal(3)))
    applier.log.append(Calculation("1/0", "division by zero"))
    applier.evaluator.assign("k", Decimal("5.50"))

    settings = applier.capture(default_settings())

    assert settings["format"] == "h"
    assert settings["show_history"] is True
    assert settings["main_window_size"] == [640, 480]
    assert settings["main_window_state"] == "zoomed"
    assert settings["history"] == ["1/3", "1/0"]
    assert settings["history_results"] == ["0.3333333333333333333333333333", "division by zero"]
    assert settings["variables"] == ["k=5.5"]
    assert settings["docks"]["history"] == {"floating": True, "x": 5, "y": 6, "width": 300, "height": 400}


def test_capture_leaves_variables_alone_when_disabled() -> None:
    applier, _events = _make()
    applier.evaluator.assign("k", Decimal(5))
    settings = default_settings()
    settings.update({"save_variables": False, "variables": ["old=1"]})

    applier.capture(settings)

    assert settings["variables"] == ["old=1"]


def test_capture_then_apply_restores_state() -> None:
    source, _events = _make()
    source.set_precision(8)
    source.set_angle_mode("d")
    source.log.append(Calculation("2^10", Decimal(1024)))
    source.evaluator.assign("x", Decimal("-2.5"))
    settings = source.capture(default_settings())

    target, events = _make()
    target.apply(settings)

    assert target.state.options == source.state.options
    assert target.log.entries() == source.log.entries()
    assert target.evaluator.current_bindings() == source.evaluator.current_bindings()
    assert ("angle_mode", "d") in events
