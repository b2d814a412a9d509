"""GUI application entrypoint: main window, menus and session actions."""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Dict, Optional, Tuple

from .. import __version__
from ..evaluator import EvaluationError, Evaluator
from ..log_utils import setup_logging
from ..numeric import format_display
from ..session import (
    FILE_SUFFIX,
    Calculation,
    CalculationLog,
    FormatError,
    ReconcilePolicy,
    SessionError,
    load_session_file,
    reconcile,
    save_session_file,
    snapshot_session,
)
from ..settings import DOCK_PANELS, SettingsStore
from .applier import SettingsApplier
from .dock_restore import DockGeometryRestorer
from .events import ChangeNotifier
from .panels import panel_constants, panel_functions, panel_history, panel_variables
from .state import RuntimeState

logger = logging.getLogger(__name__)

SESSION_FILETYPES = [("Sessions", f"*{FILE_SUFFIX}"), ("All Files", "*")]

FORMAT_MENU = (
    ("General", "g"),
    ("Fixed Decimal", "f"),
    ("Engineering", "n"),
    ("Scientific", "e"),
    ("Binary", "b"),
    ("Octal", "o"),
    ("Hexadecimal", "h"),
)
PRECISION_MENU = (
    ("Automatic Precision", -1),
    ("2 Decimal Digits", 2),
    ("3 Decimal Digits", 3),
    ("8 Decimal Digits", 8),
    ("15 Decimal Digits", 15),
    ("50 Decimal Digits", 50),
)
RADIX_MENU = (("System Default", "C"), ("Dot", "."), ("Comma", ","))
ANGLE_MENU = (("Radian", "r"), ("Degree", "d"))

PANEL_BUILDERS = {
    "history": panel_history.build_panel,
    "functions": panel_functions.build_panel,
    "variables": panel_variables.build_panel,
    "constants": panel_constants.build_panel,
}

MERGE_QUESTION = (
    "Merge session being loaded with current session?\n"
    "If no, current variables and display will be cleared."
)


class MainWindowHost:
    """Adapter exposing the main window to :class:`SettingsApplier`."""

    def __init__(self, app: "CalculatorApp"):
        self.app = app

    def set_size(self, width: int, height: int) -> None:
        self.app.geometry(f"{width}x{height}")

    def size(self) -> Tuple[int, int]:
        return self.app.winfo_width(), self.app.winfo_height()

    def restore_state(self, blob: str) -> None:
        if blob != "zoomed":
            return
        try:
            self.app.wm_state("zoomed")
        except tk.TclError:
            # X11 window managers only know the -zoomed attribute
            try:
                self.app.attributes("-zoomed", True)
            except tk.TclError:
                logger.debug("Window manager does not support maximized state")

    def save_state(self) -> str:
        try:
            if self.app.wm_state() == "zoomed" or str(self.app.attributes("-zoomed")) in ("1", "true"):
                return "zoomed"
        except tk.TclError:
            pass
        return "normal"

    def set_full_screen(self, flag: bool) -> None:
        self.app.full_screen_var.set(flag)
        try:
            self.app.attributes("-fullscreen", flag)
        except tk.TclError:
            logger.debug("Full screen not supported")

    def set_always_on_top(self, flag: bool) -> None:
        self.app.always_on_top_var.set(flag)
        try:
            self.app.attributes("-topmost", flag)
        except tk.TclError:
            logger.debug("Always-on-top not supported")

    def set_panel_visible(self, name: str, flag: bool) -> None:
        var = self.app.panel_vars.get(name)
        if var is not None:
            var.set(flag)
        panel = self.app.panels.get(name)
        if panel is None or panel.is_visible() == flag:
            return
        if flag:
            panel.show()
        else:
            panel.hide()


class CalculatorApp(tk.Tk):
    def __init__(self, settings_store: Optional[SettingsStore] = None):
        super().__init__()
        self.title(f"deskcalc {__version__}")

        self._settings_store = settings_store or SettingsStore()
        self.settings = self._settings_store.load()

        self.notifier = ChangeNotifier()
        self.log = CalculationLog()
        self.evaluator = Evaluator()
        self.runtime = RuntimeState()
        self.options = self.runtime.options

        self._build_vars()
        self._build_menus()
        self._build_main_area()

        self.docks = DockGeometryRestorer(self.panels, schedule=self.after_idle)
        self.applier = SettingsApplier(
            self.notifier,
            self.log,
            self.evaluator,
            state=self.runtime,
            window=MainWindowHost(self),
            docks=self.docks,
        )
        self._wire_dependents()

        self.applier.apply(self.settings)
        self._refresh_display()

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.after_idle(self.editor.focus_set)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_vars(self) -> None:
        self.format_var = tk.StringVar(master=self, value=self.options.format)
        self.precision_var = tk.IntVar(master=self, value=self.options.precision)
        self.radix_var = tk.StringVar(master=self, value=self.options.radix_char)
        self.angle_var = tk.StringVar(master=self, value=self.options.angle_mode)
        self.full_screen_var = tk.BooleanVar(master=self, value=False)
        self.always_on_top_var = tk.BooleanVar(master=self, value=False)
        self.save_session_var = tk.BooleanVar(master=self, value=bool(self.settings.get("save_session", True)))
        self.save_variables_var = tk.BooleanVar(master=self, value=bool(self.settings.get("save_variables", True)))
        self.panel_vars: Dict[str, tk.BooleanVar] = {
            name: tk.BooleanVar(master=self, value=False) for name in DOCK_PANELS
        }

    def _build_menus(self) -> None:
        menubar = tk.Menu(self)

        session = tk.Menu(menubar, tearoff=False)
        session.add_command(label="Load...", accelerator="Ctrl+L", command=self.load_session)
        session.add_command(label="Save...", accelerator="Ctrl+S", command=self.save_session)
        session.add_separator()
        session.add_command(label="Quit", accelerator="Ctrl+Q", command=self._on_close)
        menubar.add_cascade(label="Session", menu=session)

        edit = tk.Menu(menubar, tearoff=False)
        edit.add_command(label="Clear History", command=self.clear_history)
        edit.add_command(label="Delete All Variables", command=self.delete_all_variables)
        menubar.add_cascade(label="Edit", menu=edit)

        view = tk.Menu(menubar, tearoff=False)
        for name in DOCK_PANELS:
            view.add_checkbutton(
                label=name.capitalize(),
                variable=self.panel_vars[name],
                command=lambda n=name: self.applier.set_panel_visible(n, self.panel_vars[n].get()),
            )
        view.add_separator()
        view.add_checkbutton(
            label="Full Screen Mode",
            variable=self.full_screen_var,
            command=lambda: self.applier.set_full_screen(self.full_screen_var.get()),
        )
        menubar.add_cascade(label="View", menu=view)

        settings = tk.Menu(menubar, tearoff=False)
        fmt = tk.Menu(settings, tearoff=False)
        for label, code in FORMAT_MENU:
            fmt.add_radiobutton(
                label=label, value=code, variable=self.format_var,
                command=lambda: self.applier.set_format(self.format_var.get()),
            )
        settings.add_cascade(label="Format", menu=fmt)

        prec = tk.Menu(settings, tearoff=False)
        for label, digits in PRECISION_MENU:
            prec.add_radiobutton(
                label=label, value=digits, variable=self.precision_var,
                command=lambda: self.applier.set_precision(self.precision_var.get()),
            )
        settings.add_cascade(label="Precision", menu=prec)

        radix = tk.Menu(settings, tearoff=False)
        for label, char in RADIX_MENU:
            radix.add_radiobutton(
                label=label, value=char, variable=self.radix_var,
                command=lambda: self.applier.set_radix_char(self.radix_var.get()),
            )
        settings.add_cascade(label="Radix Character", menu=radix)

        angle = tk.Menu(settings, tearoff=False)
        for label, mode in ANGLE_MENU:
            angle.add_radiobutton(
                label=label, value=mode, variable=self.angle_var,
                command=lambda: self.applier.set_angle_mode(self.angle_var.get()),
            )
        settings.add_cascade(label="Angle Unit", menu=angle)

        settings.add_separator()
        settings.add_checkbutton(
            label="Save History on Exit", variable=self.save_session_var,
            command=lambda: self.set_save_flag("save_session", self.save_session_var.get()),
        )
        settings.add_checkbutton(
            label="Save Variables on Exit", variable=self.save_variables_var,
            command=lambda: self.set_save_flag("save_variables", self.save_variables_var.get()),
        )
        settings.add_checkbutton(
            label="Always on Top", variable=self.always_on_top_var,
            command=lambda: self.applier.set_always_on_top(self.always_on_top_var.get()),
        )
        menubar.add_cascade(label="Settings", menu=settings)

        self.configure(menu=menubar)
        self.bind_all("<Control-l>", lambda _e: self.load_session())
        self.bind_all("<Control-s>", lambda _e: self.save_session())
        self.bind_all("<Control-q>", lambda _e: self._on_close())

    def _build_main_area(self) -> None:
        main = ttk.Frame(self)
        main.pack(fill="both", expand=True)
        main.columnconfigure(0, weight=1)
        main.rowconfigure(0, weight=1)

        self.display = tk.Text(main, wrap="word", state="disabled", height=16, width=48)
        self.display.grid(row=0, column=0, sticky="nsew", padx=8, pady=(8, 4))
        self.display.tag_configure("error", foreground="#c62828")
        self.display.tag_configure("result", foreground="#2e7d32")

        self.editor = ttk.Entry(main)
        self.editor.grid(row=1, column=0, sticky="ew", padx=8, pady=(0, 8))
        self.editor.bind("<Return>", self._on_return)
        self.editor.bind("<KP_Enter>", self._on_return)

        self.dock_area = ttk.Frame(main)
        self.dock_area.grid(row=0, column=1, rowspan=2, sticky="ns", padx=(0, 8), pady=8)

        self.panels = {name: PANEL_BUILDERS[name](self.dock_area, self) for name in DOCK_PANELS}

    def _wire_dependents(self) -> None:
        n = self.notifier
        n.on_format_changed(self.format_var.set)
        n.on_precision_changed(self.precision_var.set)
        n.on_radix_char_changed(self.radix_var.set)
        n.on_angle_mode_changed(self.angle_var.set)

        n.on_format_changed(lambda _v: self._refresh_display())
        n.on_precision_changed(lambda _v: self._refresh_display())
        n.on_radix_char_changed(lambda _v: self._refresh_display())
        n.on_log_changed(self._refresh_display)

        n.on_angle_mode_changed(self.evaluator.set_angle_mode)
        n.on_radix_char_changed(self.evaluator.set_radix_char)

    # ------------------------------------------------------------------
    # Display / editor
    # ------------------------------------------------------------------

    def insert_text(self, text: str) -> None:
        self.editor.insert(tk.INSERT, text)
        self.after_idle(self.editor.focus_set)

    def _refresh_display(self) -> None:
        opts = self.options
        self.display.configure(state="normal")
        self.display.delete("1.0", tk.END)
        for calc in self.log.entries():
            self.display.insert(tk.END, calc.expression + "\n")
            if calc.is_error:
                self.display.insert(tk.END, f"    {calc.outcome}\n", "error")
            else:
                text = format_display(calc.outcome, opts.format, opts.precision, opts.radix_char)
                self.display.insert(tk.END, f"    = {text}\n", "result")
        self.display.configure(state="disabled")
        self.display.see(tk.END)

    def _on_return(self, _event=None):
        expression = self.editor.get().strip()
        if not expression:
            return "break"
        try:
            calc = Calculation(expression, self.evaluator.evaluate(expression))
        except EvaluationError as e:
            calc = Calculation(expression, str(e))
        self.log.append(calc)
        self.editor.delete(0, tk.END)
        self.notifier.emit_log_changed()
        if not calc.is_error:
            self.notifier.emit_variables_changed()
        return "break"

    # ------------------------------------------------------------------
    # Session actions
    # ------------------------------------------------------------------

    def load_session(self) -> None:
        fname = filedialog.askopenfilename(parent=self, title="Load Session", filetypes=SESSION_FILETYPES)
        if not fname:
            return

        try:
            session = load_session_file(fname)
        except FormatError as e:
            logger.error("Invalid session file %s: %s", fname, e)
            messagebox.showerror("Error", f"File {fname} is not a valid session", parent=self)
            return
        except SessionError as e:
            logger.error("Failed to read session file %s: %s", fname, e)
            messagebox.showerror("Error", f"Can't read from file {fname}", parent=self)
            return

        answer = messagebox.askyesnocancel("Question", MERGE_QUESTION, parent=self)
        if answer is None:
            policy = ReconcilePolicy.CANCEL
        elif answer:
            policy = ReconcilePolicy.MERGE
        else:
            policy = ReconcilePolicy.REPLACE

        if reconcile(session, policy, self.log, self.evaluator):
            self.notifier.emit_log_changed()
            self.notifier.emit_variables_changed()

    def save_session(self) -> None:
        fname = filedialog.asksaveasfilename(
            parent=self, title="Save Session", filetypes=SESSION_FILETYPES, defaultextension=FILE_SUFFIX
        )
        if not fname:
            return
        try:
            save_session_file(fname, snapshot_session(self.log, self.evaluator))
        except SessionError as e:
            logger.error("Failed to save session %s: %s", fname, e)
            messagebox.showerror("Error", f"Can't write to file {fname}", parent=self)

    def clear_history(self) -> None:
        self.log.clear()
        self.notifier.emit_log_changed()

    def delete_all_variables(self) -> None:
        self.evaluator.clear_all_variables()
        self.notifier.emit_variables_changed()

    # ------------------------------------------------------------------
    # Persistent settings
    # ------------------------------------------------------------------

    def set_save_flag(self, key: str, flag: bool) -> None:
        """Toggle ``save_session``/``save_variables`` and write it through at once."""
        self.settings[key] = bool(flag)
        try:
            self._settings_store.update({key: bool(flag)})
        except OSError:
            logger.exception("Failed to save setting %s", key)

    def _persist_settings(self) -> None:
        try:
            self.applier.capture(self.settings)
            self._settings_store.save(self.settings)
        except Exception:
            logger.exception("Failed to save settings")

    def _on_close(self) -> None:
        self._persist_settings()
        for panel in self.panels.values():
            panel.hide()
        self.destroy()


def main() -> None:
    log_path = setup_logging()
    logger.info("Starting deskcalc %s (log: %s)", __version__, log_path)
    app = CalculatorApp()
    app.mainloop()


if __name__ == "__main__":
    main()
