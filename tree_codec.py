"""
Conversion between the in-memory node graph and the nested record format.

Record shape:
    {"data": {"id", "question", "description"?, "isEndNode"?, "endMessage"?},
     "children": [<record>, ...]}

Both directions walk the tree with an explicit queue/stack, so deep chains do
not hit the interpreter recursion limit.
"""
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, Field, StrictBool, ValidationError

from data_models import DecisionNode, NodeData
from errors import DuplicateNodeIdError, TreeStructureError

logger = logging.getLogger(__name__)


class NodeDataRecord(BaseModel):
    id: str
    question: str
    description: Optional[str] = None
    is_end_node: StrictBool = Field(default=False, alias="isEndNode")
    end_message: Optional[str] = Field(default=None, alias="endMessage")
    
    @classmethod
    def from_node_data(cls, data: NodeData) -> 'NodeDataRecord':
        return cls(
            id=data.id,
            question=data.question,
            description=data.description,
            isEndNode=data.is_end_node,
            endMessage=data.end_message
        )
    
    def to_node_data(self) -> NodeData:
        return NodeData(
            id=self.id,
            question=self.question,
            description=self.description,
            is_end_node=self.is_end_node,
            end_message=self.end_message
        )


class NodeRecord(BaseModel):
    """
    One level of a tree record.
    
    Children stay raw here and are validated one node at a time by
    parse_record().
    """
    data: NodeDataRecord
    children: List[Any] = Field(default_factory=list)


def node_data_to_dict(data: NodeData) -> Dict[str, Any]:
    """Wire representation of a node payload, unset optionals omitted."""
    return NodeDataRecord.from_node_data(data).model_dump(by_alias=True, exclude_none=True)


def node_to_record(node: DecisionNode) -> Dict[str, Any]:
    """Serialize a node and its subtree, children kept in stored order."""
    record = {"data": node_data_to_dict(node.data), "children": []}
    
    stack = [(node, record)]
    while stack:
        curr, curr_record = stack.pop()
        for child in curr.children:
            child_record = {"data": node_data_to_dict(child.data), "children": []}
            curr_record["children"].append(child_record)
            stack.append((child, child_record))
    
    return record


def parse_record(record: Any) -> List[Tuple[NodeData, Optional[int]]]:
    """
    Validate a raw record against the wire schema.
    
    Returns:
        (payload, parent index) pairs in level order; the first entry is the root
    
    Raises:
        TreeStructureError: if a node lacks `data`, a field has the wrong type,
            or `children` is not a list.
        DuplicateNodeIdError: if an ID appears twice
    """
    entries: List[Tuple[NodeData, Optional[int]]] = []
    seen: Set[str] = set()
    
    queue = [(record, None)]
    while queue:
        raw, parent_index = queue.pop(0)
        try:
            parsed = NodeRecord.model_validate(raw)
        except ValidationError as e:
            raise TreeStructureError(f"Invalid tree record: {e}") from e
        
        if parsed.data.id in seen:
            raise DuplicateNodeIdError(parsed.data.id)
        seen.add(parsed.data.id)
        
        entries.append((parsed.data.to_node_data(), parent_index))
        index = len(entries) - 1
        queue.extend((child, index) for child in parsed.children)
    
    return entries


def record_to_node(record: Any) -> DecisionNode:
    """
    Rebuild a detached node graph from a record.
    
    The record is validated in full before any node is created, so a bad
    record never yields a partial graph.
    """
    nodes: List[DecisionNode] = []
    for data, parent_index in parse_record(record):
        parent = nodes[parent_index] if parent_index is not None else None
        node = DecisionNode.create(data, parent=parent)
        if parent is not None:
            parent.children.append(node)
        nodes.append(node)
    
    root = nodes[0]
    logger.debug(f"Rebuilt tree rooted at '{root.id}' ({len(nodes)} nodes)")
    return root
