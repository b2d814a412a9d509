from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Allowed values per option. Anything else is ignored when applied.
ANGLE_MODES = ("r", "d")
FORMAT_CODES = ("g", "f", "n", "e", "b", "o", "h")
PRECISIONS = (-1, 2, 3, 8, 15, 50)
RADIX_CHARS = ("C", ".", ",")

DOCK_PANELS = ("history", "functions", "variables", "constants")


def deskcalc_home() -> Path:
    # Shared with the log file (deskcalc.log)
    return Path.home() / ".deskcalc"


def default_dock_geometry() -> Dict[str, Any]:
    return {"floating": False, "x": 0, "y": 0, "width": 0, "height": 0}


def default_settings() -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "last_saved_at": None,
        # Number display
        "angle_mode": "r",
        "format": "g",
        "precision": -1,
        "radix_char": "C",
        # Main window
        "main_window_size": [0, 0],
        "main_window_state": "",
        "show_full_screen": False,
        "stay_always_on_top": False,
        # Panels
        "show_history": False,
        "show_functions": False,
        "show_variables": False,
        "show_constants": False,
        "docks": {name: default_dock_geometry() for name in DOCK_PANELS},
        # Session kept between runs
        "save_session": True,
        "save_variables": True,
        "history": [],
        "history_results": [],
        # "name=value" strings, full precision
        "variables": [],
    }


def _merge_docks(base: Dict[str, Any], loaded: Any) -> Dict[str, Any]:
    docks = {name: dict(geom) for name, geom in base.items()}
    if not isinstance(loaded, dict):
        return docks
    for name, geom in loaded.items():
        if isinstance(geom, dict):
            merged = docks.get(name, default_dock_geometry())
            merged.update(geom)
            docks[name] = merged
    return docks


@dataclass
class SettingsStore:
    """Load/save the calculator settings as a single JSON file.

    Settings stay a plain dict so unknown keys written by newer versions
    survive a load/save cycle.
    """

    filename: str = "settings.json"
    home: Path = field(default_factory=deskcalc_home)

    def path(self) -> Path:
        return Path(self.home) / self.filename

    def load(self) -> Dict[str, Any]:
        path = self.path()
        base = default_settings()

        if not path.exists():
            return base

        try:
            raw = path.read_text(encoding="utf-8")
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("settings.json root is not an object")
            # merge defaults (do not delete unknown keys)
            merged = dict(base)
            merged.update(data)
            merged["docks"] = _merge_docks(base["docks"], data.get("docks"))
            return merged
        except Exception as e:
            logger.warning("Ignoring unreadable settings file %s: %s", path, e)
            self._backup(path)
            return base

    def _backup(self, path: Path) -> None:
        try:
            ts = time.strftime("%Y%m%d_%H%M%S")
            bak = path.with_name(f"{path.name}.bak.{ts}")
            bak.write_bytes(path.read_bytes())
            logger.info("Backed up settings to %s", bak)
        except OSError as e:
            logger.warning("Could not back up settings file %s: %s", path, e)

    def save(self, data: Dict[str, Any]) -> None:
        home = Path(self.home)
        home.mkdir(parents=True, exist_ok=True)
        path = self.path()
        tmp = path.with_suffix(path.suffix + ".tmp")

        # Shallow copy so we can stamp timestamp without mutating caller
        payload = dict(data or {})
        payload.setdefault("schema_version", SCHEMA_VERSION)
        payload["last_saved_at"] = time.strftime("%Y-%m-%dT%H:%M:%S")

        # Atomic write
        txt = json.dumps(payload, indent=2, sort_keys=True)
        tmp.write_text(txt, encoding="utf-8")
        os.replace(tmp, path)
        logger.debug("Saved settings to %s", path)

    # Convenience helpers -------------------------------------------------
    def update(self, patch: Dict[str, Any]) -> None:
        data = self.load()
        data.update(patch)
        self.save(data)
