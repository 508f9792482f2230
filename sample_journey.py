"""
Demo purchase journey used to seed a fresh tree.
"""
import logging

from data_models import DecisionNode, NodeData
from tree_manager import TreeManager

logger = logging.getLogger(__name__)


def build_sample_journey(tree: TreeManager) -> DecisionNode:
    """
    Populate the tree with a small customer purchase journey.
    
    Any existing tree content is replaced.
    
    Returns:
        The new root node
    """
    root = tree.set_root(NodeData(
        id="root",
        question="Are you interested in buying a product?",
        description="Start of the purchase journey"
    ))
    
    # First level
    tree.add_node("root", NodeData(
        id="yes-interested",
        question="What kind of product are you looking for?",
        description="Customer showed interest"
    ))
    tree.add_node("root", NodeData(
        id="no-interested",
        question="Would you like to know more about our products?",
        description="Customer showed no initial interest"
    ))
    
    # Second level - "yes" branch
    tree.add_node("yes-interested", NodeData(
        id="electronics",
        question="What is your budget for electronics?",
        description="Interested in electronics"
    ))
    tree.add_node("yes-interested", NodeData(
        id="clothing",
        question="Which clothing style do you prefer?",
        description="Interested in clothing"
    ))
    tree.add_node("yes-interested", NodeData(
        id="books",
        question="Which book genre do you enjoy?",
        description="Interested in books"
    ))
    
    # Second level - "no" branch
    tree.add_node("no-interested", NodeData(
        id="newsletter",
        question="Would you like to receive our newsletter?",
        description="Newsletter offer",
        is_end_node=True,
        end_message="Thank you! You will receive our news by email."
    ))
    tree.add_node("no-interested", NodeData(
        id="no-thanks",
        question="",
        description="Customer is not interested",
        is_end_node=True,
        end_message="No problem! Come back any time."
    ))
    
    # Third level - electronics budgets
    budgets = [
        ("budget-low", "Products up to $100", "Low budget",
         "Check out our budget-friendly selection!"),
        ("budget-medium", "Products from $100 to $400", "Medium budget",
         "We have great mid-range options for you!"),
        ("budget-high", "Products above $400", "High budget",
         "Discover our premium line!"),
    ]
    for node_id, question, description, end_message in budgets:
        tree.add_node("electronics", NodeData(
            id=node_id,
            question=question,
            description=description,
            is_end_node=True,
            end_message=end_message
        ))
    
    logger.info(f"Sample journey built with {tree.get_stats().total_nodes} nodes")
    return root
