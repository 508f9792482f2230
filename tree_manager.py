"""
Tree management operations: lookup, mutation, journey navigation, traversal,
statistics and serialization.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from data_models import DecisionNode, NodeData, TreeStats
from errors import DuplicateNodeIdError
from tree_codec import node_to_record, record_to_node

logger = logging.getLogger(__name__)

Visitor = Callable[[DecisionNode, int], None]


class TreeManager:
    """Owns the decision tree root and the current journey path."""
    
    def __init__(self):
        self.root: Optional[DecisionNode] = None
        self._current_path: List[DecisionNode] = []
    
    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------
    
    def set_root(self, data: NodeData) -> DecisionNode:
        """
        Replace the whole tree with a new root.
        
        The old subtree is discarded. Navigation is not restarted: the path
        is emptied so it never points into the discarded graph, and callers
        must call start_journey() to navigate the new tree.
        """
        self.root = DecisionNode.create(data)
        self._current_path = []
        logger.info(f"Root set to '{data.id}'")
        return self.root
    
    def get_root(self) -> Optional[DecisionNode]:
        return self.root
    
    def find_node_by_id(self, node_id: str) -> Optional[DecisionNode]:
        """
        Find a node by ID using BFS.
        
        Shallower matches win; at equal depth the earlier-inserted subtree wins.
        
        Args:
            node_id: ID of the node to find
        
        Returns:
            The node object if found, else None
        """
        if self.root is None:
            return None
        
        queue = [self.root]
        while queue:
            curr = queue.pop(0)
            if curr.data.id == node_id:
                return curr
            queue.extend(curr.children)
        return None
    
    def add_node(self, parent_id: str, data: NodeData) -> Optional[DecisionNode]:
        """
        Add a child under the node with the given ID.
        
        Returns:
            The new node, or None if the parent does not exist
        
        Raises:
            DuplicateNodeIdError: if data.id is already used in the tree
        """
        parent = self.find_node_by_id(parent_id)
        if parent is None:
            logger.warning(f"Cannot add '{data.id}': parent '{parent_id}' not found")
            return None
        
        if self.find_node_by_id(data.id) is not None:
            raise DuplicateNodeIdError(data.id)
        
        child = parent.add_child(data)
        logger.info(f"Added node '{data.id}' under '{parent_id}'")
        return child
    
    def remove_node(self, node_id: str) -> bool:
        """
        Remove a node and its entire subtree.
        
        The root cannot be removed this way (use set_root or from_json).
        If the node lies on the current path, the path is cut back to the
        node's parent.
        """
        node = self.find_node_by_id(node_id)
        if node is None or node.parent is None:
            logger.warning(f"Cannot remove '{node_id}': not found or is the root")
            return False
        
        parent = node.parent
        if not parent.remove_child(node_id):
            return False
        
        for index, path_node in enumerate(self._current_path):
            if path_node is node:
                del self._current_path[index:]
                logger.info(f"Journey path pruned back to '{parent.id}'")
                break
        
        logger.info(f"Removed node '{node_id}' and its subtree")
        return True
    
    # ------------------------------------------------------------------
    # Journey navigation
    # ------------------------------------------------------------------
    
    def start_journey(self) -> Optional[DecisionNode]:
        """(Re)start navigation at the root, discarding any previous path."""
        if self.root is None:
            return None
        
        self._current_path = [self.root]
        logger.debug("Journey started")
        return self.root
    
    def navigate_to_child(self, child_id: str) -> Optional[DecisionNode]:
        """
        Step from the current node to one of its direct children.
        
        The path is left unchanged when no journey is active or the current
        node has no child with that ID.
        """
        current = self.get_current_node()
        if current is None:
            return None
        
        for child in current.children:
            if child.data.id == child_id:
                self._current_path.append(child)
                logger.debug(f"Navigated to '{child_id}'")
                return child
        return None
    
    def go_back(self) -> Optional[DecisionNode]:
        """Step back one node; never past the root."""
        if len(self._current_path) <= 1:
            return None
        
        self._current_path.pop()
        return self._current_path[-1]
    
    def reset_journey(self):
        """End the active journey without starting a new one."""
        self._current_path = []
    
    def get_current_path(self) -> List[DecisionNode]:
        """Copy of the path from the root to the current node."""
        return list(self._current_path)
    
    def get_current_node(self) -> Optional[DecisionNode]:
        return self._current_path[-1] if self._current_path else None
    
    def is_journey_complete(self) -> bool:
        """True when the current node is an end node or has no options left."""
        current = self.get_current_node()
        if current is None:
            return False
        return current.is_end_node() or current.is_leaf()
    
    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    
    def depth_first_traversal(self, visit: Visitor):
        """Pre-order walk; visit(node, depth) is called before the children."""
        if self.root is None:
            return
        
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            visit(node, depth)
            # Reversed so the first child is popped first
            for child in reversed(node.children):
                stack.append((child, depth + 1))
    
    def breadth_first_traversal(self, visit: Visitor):
        """Level-order walk; visit(node, depth) is called as each node is dequeued."""
        if self.root is None:
            return
        
        queue = [(self.root, 0)]
        while queue:
            node, depth = queue.pop(0)
            visit(node, depth)
            for child in node.children:
                queue.append((child, depth + 1))
    
    def get_all_nodes(self) -> List[DecisionNode]:
        """
        Get ALL nodes in the tree, depth-first pre-order.
        """
        all_nodes = []
        self.depth_first_traversal(lambda node, depth: all_nodes.append(node))
        return all_nodes
    
    def get_leaf_nodes(self) -> List[DecisionNode]:
        """Nodes without children, depth-first pre-order."""
        leaves = []
        
        def collect(node: DecisionNode, depth: int):
            if node.is_leaf():
                leaves.append(node)
        
        self.depth_first_traversal(collect)
        return leaves
    
    def get_end_nodes(self) -> List[DecisionNode]:
        """Nodes flagged as journey endings, depth-first pre-order."""
        return [node for node in self.get_all_nodes() if node.is_end_node()]
    
    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    
    def get_tree_height(self) -> int:
        """
        Number of nodes on the longest root-to-leaf path (0 for an empty tree).
        """
        if self.root is None:
            return 0
        
        height = 0
        
        def measure(node: DecisionNode, depth: int):
            nonlocal height
            height = max(height, depth + 1)
        
        self.breadth_first_traversal(measure)
        return height
    
    def get_stats(self) -> TreeStats:
        """Recalculate tree statistics in a single walk."""
        stats = TreeStats()
        
        def count(node: DecisionNode, depth: int):
            stats.total_nodes += 1
            stats.height = max(stats.height, depth + 1)
            if node.is_leaf():
                stats.leaf_count += 1
            if node.is_end_node():
                stats.end_node_count += 1
        
        self.depth_first_traversal(count)
        return stats
    
    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    
    def to_json(self) -> Optional[Dict[str, Any]]:
        """Nested record of the whole tree, or None when empty."""
        if self.root is None:
            return None
        return node_to_record(self.root)
    
    def from_json(self, record: Optional[Dict[str, Any]]):
        """
        Replace the tree with one rebuilt from a nested record.
        
        A None record is ignored. The journey path is cleared because the
        nodes it referenced no longer belong to the tree.
        
        Raises:
            TreeStructureError: if the record is malformed
            DuplicateNodeIdError: if the record repeats a node ID
        """
        if record is None:
            return
        
        # Build fully before swapping so a bad record leaves the tree intact
        root = record_to_node(record)
        self.root = root
        self._current_path = []
        logger.info(f"Loaded tree rooted at '{root.id}' ({len(self.get_all_nodes())} nodes)")
