"""
Decision Journey Tree

A branching decision structure that a user walks one choice at a time.
"""

from data_models import (
    NodeData,
    DecisionNode,
    TreeStats
)

from errors import JourneyTreeError, DuplicateNodeIdError, TreeStructureError
from tree_manager import TreeManager
from tree_codec import NodeDataRecord, NodeRecord, node_to_record, record_to_node
from sample_journey import build_sample_journey

__all__ = [
    # Data models
    "NodeData",
    "DecisionNode",
    "TreeStats",
    # Errors
    "JourneyTreeError",
    "DuplicateNodeIdError",
    "TreeStructureError",
    # Core components
    "TreeManager",
    "NodeDataRecord",
    "NodeRecord",
    "node_to_record",
    "record_to_node",
    "build_sample_journey",
]
