"""Interactive runtime: config, terminal lifecycle, layout, loop, wiring."""

from .app import CommanderApp, run_commander

__all__ = [
    "CommanderApp",
    "run_commander",
]
