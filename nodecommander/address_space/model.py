"""In-process address space: nodes, references, attributes, and live values.

This stands in for a remote server. ``latency`` delays browse calls to mimic
network round trips, and ``connected`` lets callers simulate a dropped link.
"""

from __future__ import annotations

import enum
import math
import time
from dataclasses import dataclass, field

from ..errors import AddressSpaceError


class NodeClass(enum.Enum):
    OBJECT = "Object"
    VARIABLE = "Variable"
    METHOD = "Method"
    OBJECT_TYPE = "ObjectType"
    VARIABLE_TYPE = "VariableType"
    REFERENCE_TYPE = "ReferenceType"
    DATA_TYPE = "DataType"
    VIEW = "View"

    @classmethod
    def parse(cls, value: str) -> NodeClass:
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        raise AddressSpaceError(f"unknown node class {value!r}")


class ReferenceKind(enum.Enum):
    """Structural relationship that yielded a child; ``arrow`` prefixes labels."""

    ORGANIZES = "Organizes"
    AGGREGATES = "Aggregates"

    @property
    def arrow(self) -> str:
        return "o->" if self is ReferenceKind.ORGANIZES else "+->"


SIMULATION_KINDS = ("sine", "counter", "square")


@dataclass
class AddressNode:
    """One node of the address space with its forward references."""

    node_id: str
    browse_name: str
    node_class: NodeClass = NodeClass.OBJECT
    display_name: str | None = None
    description: str = ""
    data_type: str | None = None
    value: object = None
    simulation: str | None = None
    access_level: str = "CurrentRead"
    organizes: list[str] = field(default_factory=list)
    aggregates: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Reference:
    """Forward reference returned by ``browse``."""

    kind: ReferenceKind
    target: AddressNode


class AddressSpace:
    """Node table keyed by node id."""

    def __init__(
        self,
        nodes: dict[str, AddressNode],
        root_id: str,
        *,
        latency: float = 0.0,
        clock=time.monotonic,
    ) -> None:
        if root_id not in nodes:
            raise AddressSpaceError(f"root node {root_id!r} is not defined")
        self.nodes = nodes
        self.root_id = root_id
        self.latency = max(0.0, float(latency))
        self.connected = True
        self._clock = clock
        self._epoch = clock()

    def node(self, node_id: str) -> AddressNode:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise AddressSpaceError(f"unknown node id {node_id!r}") from None

    @property
    def root(self) -> AddressNode:
        return self.nodes[self.root_id]

    def _require_connection(self) -> None:
        if not self.connected:
            raise AddressSpaceError("No Connection")

    def browse(self, node_id: str) -> list[Reference]:
        """Return Organizes references followed by Aggregates references."""
        self._require_connection()
        if self.latency:
            time.sleep(self.latency)
        source = self.node(node_id)
        references = [Reference(ReferenceKind.ORGANIZES, self.node(target)) for target in source.organizes]
        references.extend(
            Reference(ReferenceKind.AGGREGATES, self.node(target)) for target in source.aggregates
        )
        return references

    def read_value(self, node_id: str, now: float | None = None) -> object:
        """Return the current value of a variable, evaluating simulations."""
        self._require_connection()
        node = self.node(node_id)
        if node.node_class is not NodeClass.VARIABLE:
            raise AddressSpaceError(f"{node.browse_name} is not a variable")
        if node.simulation is None:
            return node.value
        elapsed = (self._clock() if now is None else now) - self._epoch
        amplitude = float(node.value) if isinstance(node.value, (int, float)) else 1.0
        if node.simulation == "sine":
            return amplitude * math.sin(elapsed * 2.0 * math.pi / 10.0)
        if node.simulation == "square":
            return amplitude if int(elapsed) % 2 == 0 else -amplitude
        return int(elapsed)

    def read_attributes(self, node_id: str) -> list[tuple[str, object]]:
        """Return readable attributes as ``(name, value)`` pairs in display order."""
        self._require_connection()
        node = self.node(node_id)
        pairs: list[tuple[str, object]] = [
            ("NodeId", node.node_id),
            ("NodeClass", node.node_class),
            ("BrowseName", node.browse_name),
            ("DisplayName", node.display_name or node.browse_name),
            ("Description", node.description),
        ]
        if node.node_class is NodeClass.VARIABLE:
            pairs.append(("DataType", node.data_type or "BaseDataType"))
            pairs.append(("Value", self.read_value(node_id)))
            pairs.append(("AccessLevel", node.access_level))
        return pairs
