"""Address-space collaborator: node table, document loading, tree bridge."""

from __future__ import annotations

from .browse import (
    BrowseItem,
    browse_label,
    browse_producer,
    decorate_label,
    format_live_value,
    root_descriptor,
)
from .loader import DEMO_DOCUMENT, demo_address_space, load_address_space, parse_document
from .model import AddressNode, AddressSpace, NodeClass, Reference, ReferenceKind

__all__ = [
    "AddressNode",
    "AddressSpace",
    "NodeClass",
    "Reference",
    "ReferenceKind",
    "BrowseItem",
    "browse_label",
    "browse_producer",
    "decorate_label",
    "format_live_value",
    "root_descriptor",
    "DEMO_DOCUMENT",
    "demo_address_space",
    "load_address_space",
    "parse_document",
]
