"""
Core data models for the decision journey tree.
"""
import weakref
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class NodeData:
    """Payload of a single decision point."""
    id: str
    question: str = ""  # Display text, empty for pure end prompts
    description: Optional[str] = None
    is_end_node: bool = False
    end_message: Optional[str] = None  # Only meaningful when is_end_node


@dataclass(eq=False)
class DecisionNode:
    """
    Represents a node in the decision tree.
    
    Children are owned by the node. The parent is held through a weak
    reference so that parent and child never own each other.
    """
    data: NodeData
    children: List['DecisionNode'] = field(default_factory=list)
    _parent_ref: Optional[weakref.ref] = field(default=None, repr=False)
    
    @classmethod
    def create(cls, data: NodeData, parent: Optional['DecisionNode'] = None) -> 'DecisionNode':
        node = cls(data=data)
        node.parent = parent
        return node
    
    @property
    def id(self) -> str:
        return self.data.id
    
    @property
    def parent(self) -> Optional['DecisionNode']:
        if self._parent_ref is None:
            return None
        return self._parent_ref()
    
    @parent.setter
    def parent(self, node: Optional['DecisionNode']):
        self._parent_ref = weakref.ref(node) if node is not None else None
    
    @property
    def depth(self) -> int:
        """Number of edges between this node and the root."""
        depth = 0
        curr = self.parent
        while curr is not None:
            depth += 1
            curr = curr.parent
        return depth
    
    def add_child(self, data: NodeData) -> 'DecisionNode':
        """Append a new child after any existing children."""
        child = DecisionNode.create(data, parent=self)
        self.children.append(child)
        return child
    
    def remove_child(self, child_id: str) -> bool:
        """
        Remove the first child with the given ID.
        
        The detached child keeps its own subtree but no longer points back
        at this node.
        """
        for index, child in enumerate(self.children):
            if child.data.id == child_id:
                del self.children[index]
                child.parent = None
                return True
        return False
    
    def is_leaf(self) -> bool:
        """Check if node is a leaf (no children)."""
        return len(self.children) == 0
    
    def is_end_node(self) -> bool:
        """Check if node is flagged as a journey terminus."""
        return self.data.is_end_node is True
    
    def get_display_label(self) -> str:
        """Question text, falling back to description, then ID."""
        return self.data.question or self.data.description or self.data.id
    
    def get_path_from_root(self) -> List['DecisionNode']:
        """
        Build the chain of nodes from the root down to this node.
        """
        parts = []
        curr = self
        while curr is not None:
            parts.append(curr)
            curr = curr.parent
        
        # Reverse to get top-to-bottom order
        return list(reversed(parts))


@dataclass
class TreeStats:
    """Aggregate statistics for a whole tree."""
    total_nodes: int = 0
    leaf_count: int = 0
    end_node_count: int = 0
    height: int = 0
