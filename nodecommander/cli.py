"""Command-line front door for nodecommander.

Loads an address space (a JSON document or the built-in demo), then either
prints the tree non-interactively (``--dump``) or starts the terminal UI.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .address_space import AddressSpace, demo_address_space, load_address_space, root_descriptor
from .errors import AddressSpaceError
from .panels.log_pane import LOG_DATE_FORMAT, LOG_FORMAT
from .tree_model import MAX_TREE_DEPTH, format_visible_row
from .tree_pane import ChildFetchScheduler, TreeWidget
from .ui_theme import resolve_theme

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _non_negative_float(value: str) -> float:
    """argparse type for non-negative float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _dump_depth(value: str) -> int:
    """argparse type for ``--dump-depth``: an integer in ``[1, 99]``.

    The root is always expanded, so 1 is the shallowest dump.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if not 1 <= parsed < MAX_TREE_DEPTH:
        raise argparse.ArgumentTypeError(f"value must be between 1 and {MAX_TREE_DEPTH - 1}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodecommander",
        description="Browse an address space in a lazily expanding terminal tree.",
    )
    parser.add_argument(
        "address_space",
        nargs="?",
        default=None,
        help="JSON address-space document. Defaults to the built-in demo space.",
    )
    parser.add_argument("--node", default=None, help="Node id to monitor at startup.")
    parser.add_argument(
        "--latency",
        type=_non_negative_float,
        default=0.0,
        help="Seconds each browse call takes, to mimic a remote server.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--dump", action="store_true", help="Print the tree and exit.")
    parser.add_argument(
        "--dump-depth",
        type=_dump_depth,
        default=2,
        help="Levels expanded by --dump, counting the root (1-99, default: 2).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Minimum level shown in the info pane.",
    )
    return parser


def load_space(path: str | None, latency: float) -> AddressSpace:
    if path is None:
        return demo_address_space(latency=latency)
    return load_address_space(Path(path), latency=latency)


def render_tree_dump(space: AddressSpace, depth: int, *, no_color: bool = False) -> str:
    """Expand the tree ``depth`` levels below the root and return its rows.

    Fetches run inline on the calling thread; a failing node is logged and
    printed collapsed.
    """
    widget = TreeWidget(
        root_descriptor(space),
        scheduler=ChildFetchScheduler(spawn=lambda work: work()),
    )
    widget.pump()
    attempted: set[int] = set()
    while True:
        pending = [
            row.node
            for row in widget.rows
            if row.depth < depth and not row.node.expanded and id(row.node) not in attempted
        ]
        if not pending:
            break
        for node in pending:
            attempted.add(id(node))
            widget.expand(node)
            widget.pump()

    theme = resolve_theme(no_color=no_color)
    out: list[str] = []
    for row in widget.rows:
        out.append(format_visible_row(row, theme))
        out.append("\n")
    return "".join(out)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the dump or the interactive browser."""
    args = build_parser().parse_args(argv)

    try:
        space = load_space(args.address_space, args.latency)
        if args.node is not None:
            space.node(args.node)
    except AddressSpaceError as exc:
        raise SystemExit(f"nodecommander: {exc}") from exc

    if args.dump:
        logging.basicConfig(level=args.log_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        no_color = args.no_color or not sys.stdout.isatty()
        sys.stdout.write(render_tree_dump(space, args.dump_depth, no_color=no_color))
        return

    from .runtime import run_commander

    run_commander(
        space,
        no_color=args.no_color,
        monitor_node_id=args.node,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
