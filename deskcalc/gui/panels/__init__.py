"""Side panels of the main window (history, functions, variables, constants)."""
