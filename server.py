import os
import uvicorn
from fastapi import FastAPI, HTTPException, Body
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional, Dict, Any
from dotenv import load_dotenv

from contextlib import asynccontextmanager
from data_models import DecisionNode
from errors import DuplicateNodeIdError, JourneyTreeError
from tree_codec import NodeDataRecord
from tree_manager import TreeManager
from sample_journey import build_sample_journey
import logging

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger("server")

# Silence uvicorn access logs (every HTTP request)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

# Global state
tree: Optional[TreeManager] = None

# ----------------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------------

def env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_tree() -> TreeManager:
    if tree is None:
        raise HTTPException(status_code=500, detail="Tree not initialized")
    return tree


def raise_for_tree_error(e: JourneyTreeError):
    if isinstance(e, DuplicateNodeIdError):
        raise HTTPException(status_code=409, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))

# ----------------------------------------------------------------------------
# Pydantic Models
# ----------------------------------------------------------------------------

class NodeResponse(BaseModel):
    id: str
    question: str
    description: Optional[str]
    is_end_node: bool
    end_message: Optional[str]
    label: str
    depth: int
    is_leaf: bool
    parent_id: Optional[str]
    child_ids: List[str] = []

class JourneyResponse(BaseModel):
    active: bool
    complete: bool
    current: Optional[NodeResponse]
    path: List[NodeResponse]
    options: List[NodeResponse]

class StatsResponse(BaseModel):
    total_nodes: int
    leaf_count: int
    end_node_count: int
    height: int

class TraversalItem(BaseModel):
    id: str
    depth: int


def to_node_response(node: DecisionNode) -> NodeResponse:
    return NodeResponse(
        id=node.data.id,
        question=node.data.question,
        description=node.data.description,
        is_end_node=node.is_end_node(),
        end_message=node.data.end_message,
        label=node.get_display_label(),
        depth=node.depth,
        is_leaf=node.is_leaf(),
        parent_id=node.parent.id if node.parent else None,
        child_ids=[child.id for child in node.children]
    )


def to_journey_response(manager: TreeManager) -> JourneyResponse:
    current = manager.get_current_node()
    return JourneyResponse(
        active=current is not None,
        complete=manager.is_journey_complete(),
        current=to_node_response(current) if current else None,
        path=[to_node_response(n) for n in manager.get_current_path()],
        options=[to_node_response(c) for c in current.children] if current else []
    )

# ----------------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    global tree
    tree = TreeManager()

    if env_flag("JOURNEY_SEED_SAMPLE", True):
        build_sample_journey(tree)
        logger.info("Seeded sample purchase journey")
    else:
        logger.info("Starting with an empty tree")

    yield

    # Shutdown
    tree = None

app = FastAPI(title="Decision Journey API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------------------------------------------------------------
# Tree endpoints
# ----------------------------------------------------------------------------

@app.get("/tree")
async def get_tree_record() -> Optional[Dict[str, Any]]:
    """Serialized tree, null when empty."""
    return get_tree().to_json()

@app.put("/tree")
async def load_tree_record(record: Optional[Dict[str, Any]] = Body(default=None)):
    """Replace the tree with an imported record. Clears the journey."""
    manager = get_tree()
    try:
        manager.from_json(record)
    except JourneyTreeError as e:
        logger.warning(f"Rejected tree import: {e}")
        raise_for_tree_error(e)
    return {"status": "ok", "nodes": manager.get_stats().total_nodes}

@app.post("/tree/root", response_model=NodeResponse)
async def set_root(data: NodeDataRecord):
    manager = get_tree()
    root = manager.set_root(data.to_node_data())
    return to_node_response(root)

@app.get("/tree/stats", response_model=StatsResponse)
async def get_stats():
    stats = get_tree().get_stats()
    return StatsResponse(
        total_nodes=stats.total_nodes,
        leaf_count=stats.leaf_count,
        end_node_count=stats.end_node_count,
        height=stats.height
    )

@app.get("/tree/leaves", response_model=List[NodeResponse])
async def get_leaves():
    return [to_node_response(n) for n in get_tree().get_leaf_nodes()]

@app.get("/tree/traversal", response_model=List[TraversalItem])
async def traverse(order: str = "dfs"):
    manager = get_tree()
    items: List[TraversalItem] = []

    def visit(node: DecisionNode, depth: int):
        items.append(TraversalItem(id=node.id, depth=depth))

    if order == "dfs":
        manager.depth_first_traversal(visit)
    elif order == "bfs":
        manager.breadth_first_traversal(visit)
    else:
        raise HTTPException(status_code=400, detail="order must be 'dfs' or 'bfs'")
    return items

# ----------------------------------------------------------------------------
# Node endpoints
# ----------------------------------------------------------------------------

@app.get("/nodes/{node_id}", response_model=NodeResponse)
async def get_node(node_id: str):
    node = get_tree().find_node_by_id(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node {node_id} not found")
    return to_node_response(node)

@app.post("/nodes/{parent_id}/children", response_model=NodeResponse)
async def add_child(parent_id: str, data: NodeDataRecord):
    manager = get_tree()
    try:
        node = manager.add_node(parent_id, data.to_node_data())
    except JourneyTreeError as e:
        raise_for_tree_error(e)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Parent node {parent_id} not found")
    return to_node_response(node)

@app.delete("/nodes/{node_id}")
async def delete_node(node_id: str):
    """Remove a node and its subtree. Confirmation is the caller's job."""
    if not get_tree().remove_node(node_id):
        raise HTTPException(status_code=400, detail=f"Node {node_id} cannot be removed (missing or root)")
    return {"status": "ok", "message": f"Node {node_id} removed"}

# ----------------------------------------------------------------------------
# Journey endpoints
# ----------------------------------------------------------------------------

@app.get("/journey", response_model=JourneyResponse)
async def get_journey():
    return to_journey_response(get_tree())

@app.post("/journey/start", response_model=JourneyResponse)
async def start_journey():
    manager = get_tree()
    if manager.start_journey() is None:
        raise HTTPException(status_code=404, detail="Tree is empty")
    return to_journey_response(manager)

@app.post("/journey/navigate/{child_id}", response_model=JourneyResponse)
async def navigate(child_id: str):
    manager = get_tree()
    if manager.navigate_to_child(child_id) is None:
        raise HTTPException(status_code=404, detail=f"No option {child_id} from the current step")
    return to_journey_response(manager)

@app.post("/journey/back", response_model=JourneyResponse)
async def go_back():
    manager = get_tree()
    if manager.go_back() is None:
        raise HTTPException(status_code=400, detail="Cannot go back from here")
    return to_journey_response(manager)

@app.post("/journey/reset", response_model=JourneyResponse)
async def reset_journey():
    manager = get_tree()
    manager.reset_journey()
    return to_journey_response(manager)


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.getenv("JOURNEY_HOST", "0.0.0.0"),
        port=int(os.getenv("JOURNEY_PORT", "8000"))
    )
