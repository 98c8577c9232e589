"""Tests for node descriptors, node construction, and depth stamping."""

from __future__ import annotations

import unittest

from nodecommander.errors import InvariantViolation
from nodecommander.tree_model import (
    MAX_TREE_DEPTH,
    Concrete,
    Node,
    NodeDescriptor,
    Pending,
    concrete_children,
)


def _producer(_node: Node) -> list[NodeDescriptor]:
    return []


class NodeDescriptorTests(unittest.TestCase):
    def test_from_mapping_builds_nested_concrete_descriptors(self) -> None:
        descriptor = NodeDescriptor.from_mapping(
            {
                "identity": "r",
                "label": "R",
                "children": [{"identity": "a", "label": "A"}],
                "payload": {"kind": "folder"},
            }
        )

        self.assertEqual(descriptor.identity, "r")
        self.assertEqual(descriptor.payload, {"kind": "folder"})
        self.assertEqual(len(descriptor.children), 1)
        self.assertIsInstance(descriptor.children[0], NodeDescriptor)
        self.assertEqual(descriptor.children[0].label, "A")

    def test_from_mapping_keeps_producer_children(self) -> None:
        descriptor = NodeDescriptor.from_mapping({"identity": 1, "label": "lazy", "children": _producer})
        self.assertIs(descriptor.children, _producer)

    def test_from_mapping_rejects_unknown_keys(self) -> None:
        with self.assertRaises(InvariantViolation) as ctx:
            NodeDescriptor.from_mapping({"identity": 1, "label": "x", "monitoredItem": object()})
        self.assertIn("monitoredItem", str(ctx.exception))

    def test_from_mapping_requires_identity_and_label(self) -> None:
        with self.assertRaises(InvariantViolation):
            NodeDescriptor.from_mapping({"label": "x"})
        with self.assertRaises(InvariantViolation):
            NodeDescriptor.from_mapping({"identity": "x"})

    def test_from_mapping_rejects_non_sequence_children(self) -> None:
        with self.assertRaises(InvariantViolation):
            NodeDescriptor.from_mapping({"identity": 1, "label": "x", "children": 5})


class NodeConstructionTests(unittest.TestCase):
    def test_concrete_children_get_parent_depth_plus_one(self) -> None:
        descriptor = NodeDescriptor(
            "r",
            "R",
            children=(NodeDescriptor("a", "A", children=(NodeDescriptor("a1", "A1"),)),),
        )

        root = Node.from_descriptor(descriptor, 0)

        self.assertEqual(root.depth, 0)
        child = root.child_nodes[0]
        self.assertEqual(child.depth, 1)
        self.assertEqual(child.child_nodes[0].depth, 2)
        self.assertFalse(root.expanded)

    def test_producer_children_become_pending(self) -> None:
        node = Node.from_descriptor(NodeDescriptor("r", "R", children=_producer), 0)

        self.assertIsInstance(node.children, Pending)
        self.assertFalse(node.is_fetched)
        self.assertEqual(node.child_nodes, ())
        self.assertIsNone(concrete_children(node))

    def test_default_children_are_empty_concrete(self) -> None:
        node = Node.from_descriptor(NodeDescriptor("leaf", "Leaf"), 3)

        self.assertIsInstance(node.children, Concrete)
        self.assertTrue(node.is_fetched)
        self.assertEqual(node.child_nodes, ())

    def test_depth_limit_is_enforced(self) -> None:
        Node.from_descriptor(NodeDescriptor("ok", "ok"), MAX_TREE_DEPTH - 1)
        with self.assertRaises(InvariantViolation):
            Node.from_descriptor(NodeDescriptor("deep", "deep"), MAX_TREE_DEPTH)
        with self.assertRaises(InvariantViolation):
            Node.from_descriptor(NodeDescriptor("neg", "neg"), -1)

    def test_deep_concrete_chain_hits_depth_limit(self) -> None:
        descriptor = NodeDescriptor("leaf", "leaf")
        for level in range(MAX_TREE_DEPTH):
            descriptor = NodeDescriptor(f"n{level}", f"n{level}", children=(descriptor,))

        with self.assertRaises(InvariantViolation):
            Node.from_descriptor(descriptor, 0)

    def test_non_descriptor_is_rejected(self) -> None:
        with self.assertRaises(InvariantViolation):
            Node.from_descriptor({"identity": 1, "label": "x"}, 0)  # type: ignore[arg-type]

    def test_nodes_compare_by_object_identity(self) -> None:
        first = Node.from_descriptor(NodeDescriptor("same", "Same"), 1)
        second = Node.from_descriptor(NodeDescriptor("same", "Same"), 1)

        self.assertNotEqual(first, second)
        self.assertEqual(first, first)

    def test_unknown_children_variant_raises(self) -> None:
        node = Node.from_descriptor(NodeDescriptor("x", "X"), 0)
        node.children = ["not", "a", "variant"]  # type: ignore[assignment]

        with self.assertRaises(InvariantViolation):
            concrete_children(node)

    def test_expanded_leaf_property(self) -> None:
        node = Node.from_descriptor(NodeDescriptor("x", "X"), 0)
        self.assertFalse(node.is_expanded_leaf)
        node.expanded = True
        self.assertTrue(node.is_expanded_leaf)


if __name__ == "__main__":
    unittest.main()
