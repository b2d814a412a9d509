"""Shared runtime state models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class DisplayOptions:
    """Number display options shared by the display, editor and panels."""

    format: str = "g"
    precision: int = -1
    radix_char: str = "C"
    angle_mode: str = "r"


@dataclass
class RuntimeState:
    """Live window/panel state mirrored into the settings on close."""

    options: DisplayOptions = field(default_factory=DisplayOptions)
    full_screen: bool = False
    always_on_top: bool = False
    panels_visible: Dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class DockGeometry:
    floating: bool = False
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_settings(cls, data) -> "DockGeometry":
        data = data if isinstance(data, dict) else {}

        def _int(key: str) -> int:
            try:
                return int(data.get(key) or 0)
            except (TypeError, ValueError):
                return 0

        return cls(
            floating=bool(data.get("floating", False)),
            x=_int("x"),
            y=_int("y"),
            width=_int("width"),
            height=_int("height"),
        )

    def to_settings(self) -> Dict[str, object]:
        return {"floating": self.floating, "x": self.x, "y": self.y, "width": self.width, "height": self.height}


__all__ = ["DisplayOptions", "DockGeometry", "RuntimeState"]
