"""Bridge between the address space and the lazy tree.

Each browse result becomes a ``NodeDescriptor`` whose children are the same
lazy producer, so the tree can descend indefinitely without prefetching.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ..tree_model import ChildProducer, Node, NodeDescriptor
from .model import AddressSpace, NodeClass, ReferenceKind

VALUE_COLUMNS = 16


@dataclass(frozen=True)
class BrowseItem:
    """Payload carried by tree nodes created from browse results."""

    node_id: str
    browse_name: str
    node_class: NodeClass
    reference_kind: ReferenceKind | None = None


def browse_label(item: BrowseItem) -> str:
    if item.reference_kind is None:
        return item.browse_name
    return f"{item.reference_kind.arrow} {item.browse_name}"


def browse_producer(space: AddressSpace) -> ChildProducer:
    """Return a producer listing Organizes then Aggregates children."""

    def expand_address_node(node: Node) -> list[NodeDescriptor]:
        item = node.payload
        if not isinstance(item, BrowseItem):
            raise TypeError(f"tree node {node.label!r} carries no browse payload")
        children: list[NodeDescriptor] = []
        for reference in space.browse(item.node_id):
            child_item = BrowseItem(
                node_id=reference.target.node_id,
                browse_name=reference.target.browse_name,
                node_class=reference.target.node_class,
                reference_kind=reference.kind,
            )
            children.append(
                NodeDescriptor(
                    identity=child_item.node_id,
                    label=browse_label(child_item),
                    children=expand_address_node,
                    payload=child_item,
                )
            )
        return children

    return expand_address_node


def root_descriptor(space: AddressSpace, node_id: str | None = None) -> NodeDescriptor:
    """Describe the tree root for ``node_id`` (default: the space's root)."""
    target = space.node(node_id or space.root_id)
    item = BrowseItem(
        node_id=target.node_id,
        browse_name=target.browse_name,
        node_class=target.node_class,
    )
    return NodeDescriptor(
        identity=item.node_id,
        label=browse_label(item),
        children=browse_producer(space),
        payload=item,
    )


def format_live_value(value: object, columns: int = VALUE_COLUMNS) -> str:
    """Format a sampled value the way the monitored-items table shows it."""
    if isinstance(value, float):
        text = f"{value:.3f}"
    elif value is None:
        text = "<null>"
    else:
        text = str(value)
    return text[:columns]


def decorate_label(node: Node, values: Mapping[str, str]) -> str:
    """Append `` = value`` to variable labels with a sampled value."""
    item = node.payload
    if not isinstance(item, BrowseItem) or item.node_class is not NodeClass.VARIABLE:
        return node.label
    value = values.get(item.node_id)
    if value is None:
        return node.label
    return f"{node.label} = {value}"
