"""Persistent settings for the desk calculator.

The calculator keeps its number display options, window and panel layout and
(optionally) the last session in a single versioned JSON file under the
user's home folder.

Design goals:
  * Atomic writes (no corrupted settings on crash)
  * Resilient loads (backup and fall back to defaults)
"""

from .store import DOCK_PANELS, SettingsStore, default_settings

__all__ = ["DOCK_PANELS", "SettingsStore", "default_settings"]
