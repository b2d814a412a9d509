from pathlib import Path


def test_settings_sync_modules_do_not_import_tkinter():
    """Settings application must stay testable without a display.

    This is a lightweight, grep-based regression test over the modules that
    hold the settings/notification logic.
    """

    repo_root = Path(__file__).resolve().parents[1]
    gui_dir = repo_root / "deskcalc" / "gui"
    assert gui_dir.is_dir(), "GUI directory not found"

    for name in ("applier.py", "dock_restore.py", "events.py", "state.py"):
        txt = (gui_dir / name).read_text(encoding="utf-8")
        assert "tkinter" not in txt, f"{name} must not depend on tkinter"


def test_session_package_has_no_gui_dependency():
    repo_root = Path(__file__).resolve().parents[1]
    for py in (repo_root / "deskcalc" / "session").rglob("*.py"):
        txt = py.read_text(encoding="utf-8")
        assert "tkinter" not in txt, f"Found tkinter import in session module: {py}"
        assert ".gui" not in txt, f"Found GUI import in session module: {py}"
