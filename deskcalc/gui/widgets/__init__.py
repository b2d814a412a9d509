from .dock_panel import DockPanel

__all__ = ["DockPanel"]
