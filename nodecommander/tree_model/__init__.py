"""Lazy tree model: node datatypes, expansion, flattening, and row formatting.

Nodes are built from caller descriptors; children arrive either concretely
or through a producer invoked once on first expansion.
"""

from __future__ import annotations

from .expansion import ExpandOutcome, TreeModel, validate_fetched_children
from .flatten import RowMarker, VisibleRow, flatten_visible_rows, marker_for
from .rendering import format_visible_row
from .types import (
    MAX_TREE_DEPTH,
    ChildProducer,
    Concrete,
    Node,
    NodeDescriptor,
    Pending,
    concrete_children,
)

__all__ = [
    "MAX_TREE_DEPTH",
    "ChildProducer",
    "Concrete",
    "Pending",
    "Node",
    "NodeDescriptor",
    "concrete_children",
    "ExpandOutcome",
    "TreeModel",
    "validate_fetched_children",
    "RowMarker",
    "VisibleRow",
    "flatten_visible_rows",
    "marker_for",
    "format_visible_row",
]
