"""
Exceptions raised by tree operations that reject their input.

Lookups and navigation report failure through None/False return values;
these are reserved for input that would corrupt the tree.
"""


class JourneyTreeError(ValueError):
    """Base class for rejected tree operations."""


class DuplicateNodeIdError(JourneyTreeError):
    """A node with the same ID already exists in the tree."""

    def __init__(self, node_id: str):
        super().__init__(f"Node ID '{node_id}' already exists in the tree")
        self.node_id = node_id


class TreeStructureError(JourneyTreeError):
    """A serialized tree record is missing fields or has the wrong shape."""
