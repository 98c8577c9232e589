"""Public package surface for nodecommander.

Exports ``main`` for programmatic CLI invocation.
The tree widget lives in ``nodecommander.tree_model`` and
``nodecommander.tree_pane``; everything else is host wiring.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
