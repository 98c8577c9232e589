"""Tree node datatypes shared by the model, flattening, and widget modules."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Union

from ..errors import InvariantViolation

MAX_TREE_DEPTH = 100

ChildProducer = Callable[
    ["Node"],
    Union[Sequence["NodeDescriptor"], Awaitable[Sequence["NodeDescriptor"]]],
]

_DESCRIPTOR_KEYS = frozenset({"identity", "label", "children", "payload"})


@dataclass(frozen=True)
class NodeDescriptor:
    """Caller-supplied description of one tree entry.

    ``children`` is either a concrete sequence of descriptors or a lazy
    producer called with the owning ``Node`` on first expansion. ``payload``
    is collaborator metadata carried along untouched.
    """

    identity: Hashable
    label: str
    children: Sequence[NodeDescriptor] | ChildProducer = ()
    payload: object | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> NodeDescriptor:
        """Build a descriptor from a plain mapping, rejecting unknown keys."""
        unknown = sorted(set(mapping) - _DESCRIPTOR_KEYS)
        if unknown:
            raise InvariantViolation(f"unknown node descriptor keys: {', '.join(unknown)}")
        for required in ("identity", "label"):
            if required not in mapping:
                raise InvariantViolation(f"node descriptor is missing {required!r}")
        raw_children = mapping.get("children", ())
        if callable(raw_children):
            children: Sequence[NodeDescriptor] | ChildProducer = raw_children
        elif isinstance(raw_children, (list, tuple)):
            children = tuple(
                child if isinstance(child, NodeDescriptor) else cls.from_mapping(child)
                for child in raw_children
            )
        else:
            raise InvariantViolation(
                f"descriptor children must be a sequence or a producer, got {type(raw_children).__name__}"
            )
        return cls(
            identity=mapping["identity"],
            label=str(mapping["label"]),
            children=children,
            payload=mapping.get("payload"),
        )


@dataclass(frozen=True)
class Concrete:
    """Children already fetched and cached for the node's lifetime."""

    nodes: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Pending:
    """Children not fetched yet; ``producer`` resolves them on first expansion."""

    producer: ChildProducer


Children = Union[Concrete, Pending]


def check_depth(depth: int) -> int:
    """Return ``depth`` or raise when it leaves the sane ``[0, 100)`` range."""
    if not (0 <= depth < MAX_TREE_DEPTH):
        raise InvariantViolation(
            f"node depth {depth} outside [0, {MAX_TREE_DEPTH}); cyclic or malformed tree data"
        )
    return depth


@dataclass(eq=False)
class Node:
    """One tree entry, compared by object identity.

    ``depth`` is stamped when the node is built from its descriptor. A node's
    ``children`` moves from ``Pending`` to ``Concrete`` at most once.
    """

    identity: Hashable
    label: str
    depth: int
    children: Children = field(default_factory=Concrete)
    payload: object | None = None
    expanded: bool = False

    @classmethod
    def from_descriptor(cls, descriptor: NodeDescriptor, depth: int) -> Node:
        """Build a node (and any concrete descendants) at ``depth``."""
        if not isinstance(descriptor, NodeDescriptor):
            raise InvariantViolation(
                f"expected NodeDescriptor, got {type(descriptor).__name__}"
            )
        check_depth(depth)
        raw_children = descriptor.children
        if isinstance(raw_children, (list, tuple)):
            children: Children = Concrete(
                tuple(cls.from_descriptor(child, depth + 1) for child in raw_children)
            )
        elif callable(raw_children):
            children = Pending(raw_children)
        else:
            raise InvariantViolation(
                f"descriptor children must be a sequence or a producer, got {type(raw_children).__name__}"
            )
        return cls(
            identity=descriptor.identity,
            label=descriptor.label,
            depth=depth,
            children=children,
            payload=descriptor.payload,
        )

    @property
    def is_fetched(self) -> bool:
        return concrete_children(self) is not None

    @property
    def child_nodes(self) -> tuple[Node, ...]:
        """Fetched children, or an empty tuple while still pending."""
        nodes = concrete_children(self)
        return nodes if nodes is not None else ()

    @property
    def is_expanded_leaf(self) -> bool:
        return self.expanded and self.is_fetched and not self.child_nodes


def concrete_children(node: Node) -> tuple[Node, ...] | None:
    """Return fetched children, ``None`` for pending, raising on anything else."""
    children = node.children
    if isinstance(children, Concrete):
        return children.nodes
    if isinstance(children, Pending):
        return None
    raise InvariantViolation(f"unexpected children variant {type(children).__name__} on {node.label!r}")
