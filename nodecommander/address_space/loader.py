"""Address-space documents: JSON loading and the built-in demo space.

A document is one nested node mapping (the root). ``organizes`` and
``aggregates`` list child mappings, or node-id strings referring to nodes
defined elsewhere in the document (shared nodes and cycles are allowed).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from ..errors import AddressSpaceError
from .model import SIMULATION_KINDS, AddressNode, AddressSpace, NodeClass

NODE_KEYS = frozenset(
    {
        "node_id",
        "browse_name",
        "node_class",
        "display_name",
        "description",
        "data_type",
        "value",
        "simulation",
        "access_level",
        "organizes",
        "aggregates",
    }
)

DEMO_DOCUMENT: dict[str, object] = {
    "node_id": "i=84",
    "browse_name": "Root",
    "organizes": [
        {
            "node_id": "i=85",
            "browse_name": "Objects",
            "organizes": [
                {
                    "node_id": "i=2253",
                    "browse_name": "Server",
                    "aggregates": [
                        {
                            "node_id": "i=2256",
                            "browse_name": "ServerStatus",
                            "aggregates": [
                                {
                                    "node_id": "i=2257",
                                    "browse_name": "StartTime",
                                    "node_class": "Variable",
                                    "data_type": "DateTime",
                                    "value": "2026-01-01T00:00:00Z",
                                },
                                {
                                    "node_id": "i=2259",
                                    "browse_name": "State",
                                    "node_class": "Variable",
                                    "data_type": "ServerState",
                                    "value": "Running",
                                },
                                {
                                    "node_id": "i=2260",
                                    "browse_name": "BuildInfo",
                                    "node_class": "Variable",
                                    "data_type": "BuildInfo",
                                    "value": "nodecommander demo\nbuild 1",
                                },
                            ],
                        },
                        {
                            "node_id": "i=11492",
                            "browse_name": "GetMonitoredItems",
                            "node_class": "Method",
                        },
                    ],
                },
                {
                    "node_id": "ns=1;s=Simulation",
                    "browse_name": "Simulation",
                    "description": "Simulated signals",
                    "organizes": [
                        {
                            "node_id": "ns=1;s=Sine",
                            "browse_name": "Sine",
                            "node_class": "Variable",
                            "data_type": "Double",
                            "value": 10.0,
                            "simulation": "sine",
                        },
                        {
                            "node_id": "ns=1;s=Counter",
                            "browse_name": "Counter",
                            "node_class": "Variable",
                            "data_type": "UInt32",
                            "simulation": "counter",
                        },
                        {
                            "node_id": "ns=1;s=Square",
                            "browse_name": "Square",
                            "node_class": "Variable",
                            "data_type": "Double",
                            "value": 1.0,
                            "simulation": "square",
                        },
                        {
                            "node_id": "ns=1;s=Setpoint",
                            "browse_name": "Setpoint",
                            "node_class": "Variable",
                            "data_type": "Double",
                            "value": 21.5,
                            "access_level": "CurrentRead | CurrentWrite",
                        },
                    ],
                    "aggregates": ["i=2256"],
                },
            ],
        },
        {
            "node_id": "i=86",
            "browse_name": "Types",
            "organizes": [
                {"node_id": "i=88", "browse_name": "ObjectTypes", "node_class": "ObjectType"},
                {"node_id": "i=89", "browse_name": "VariableTypes", "node_class": "VariableType"},
                {"node_id": "i=90", "browse_name": "DataTypes", "node_class": "DataType"},
                {"node_id": "i=91", "browse_name": "ReferenceTypes", "node_class": "ReferenceType"},
            ],
        },
        {"node_id": "i=87", "browse_name": "Views", "node_class": "View"},
    ],
}


def _require_str(mapping: Mapping[str, object], key: str) -> str:
    value = mapping.get(key)
    if not isinstance(value, str) or not value.strip():
        raise AddressSpaceError(f"node field {key!r} must be a non-empty string")
    return value.strip()


def _optional_str(mapping: Mapping[str, object], key: str) -> str | None:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise AddressSpaceError(f"node field {key!r} must be a string")
    return value


def parse_document(document: Mapping[str, object], *, latency: float = 0.0) -> AddressSpace:
    """Build an ``AddressSpace`` from a nested root mapping."""
    nodes: dict[str, AddressNode] = {}
    references: list[str] = []

    def visit(raw: object) -> str:
        """Register ``raw`` (mapping or id reference) and return its node id."""
        if isinstance(raw, str):
            references.append(raw)
            return raw
        if not isinstance(raw, Mapping):
            raise AddressSpaceError(f"expected node mapping or node id, got {type(raw).__name__}")
        unknown = sorted(set(raw) - NODE_KEYS)
        if unknown:
            raise AddressSpaceError(f"unknown node keys: {', '.join(unknown)}")
        node_id = _require_str(raw, "node_id")
        if node_id in nodes:
            raise AddressSpaceError(f"duplicate node id {node_id!r}")
        simulation = _optional_str(raw, "simulation")
        if simulation is not None and simulation not in SIMULATION_KINDS:
            raise AddressSpaceError(f"unknown simulation {simulation!r} on {node_id}")
        node = AddressNode(
            node_id=node_id,
            browse_name=_require_str(raw, "browse_name"),
            node_class=NodeClass.parse(raw.get("node_class", "Object")),
            display_name=_optional_str(raw, "display_name"),
            description=_optional_str(raw, "description") or "",
            data_type=_optional_str(raw, "data_type"),
            value=raw.get("value"),
            simulation=simulation,
            access_level=_optional_str(raw, "access_level") or "CurrentRead",
        )
        if simulation is not None and node.node_class is not NodeClass.VARIABLE:
            raise AddressSpaceError(f"simulation on non-variable node {node_id}")
        nodes[node_id] = node
        for key, targets in (("organizes", node.organizes), ("aggregates", node.aggregates)):
            children = raw.get(key, [])
            if not isinstance(children, list):
                raise AddressSpaceError(f"node field {key!r} must be a list")
            for child in children:
                targets.append(visit(child))
        return node_id

    root_id = visit(document)
    for target in references:
        if target not in nodes:
            raise AddressSpaceError(f"reference to undefined node id {target!r}")
    return AddressSpace(nodes, root_id, latency=latency)


def load_address_space(path: Path, *, latency: float = 0.0) -> AddressSpace:
    """Load and validate a JSON address-space document."""
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise AddressSpaceError(f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise AddressSpaceError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise AddressSpaceError(f"{path} must contain a JSON object")
    return parse_document(document, latency=latency)


def demo_address_space(*, latency: float = 0.0) -> AddressSpace:
    """Return the built-in demo address space."""
    return parse_document(DEMO_DOCUMENT, latency=latency)
