import pytest

from data_models import NodeData
from errors import DuplicateNodeIdError, TreeStructureError
from sample_journey import build_sample_journey
from tree_codec import node_to_record, record_to_node
from tree_manager import TreeManager


def test_empty_tree_serializes_to_none():
    assert TreeManager().to_json() is None


def test_record_shape_omits_unset_optionals():
    tree = TreeManager()
    tree.set_root(NodeData(id="R", question="Interested?"))
    tree.add_node("R", NodeData(id="N", question="No", is_end_node=True, end_message="Bye"))

    assert tree.to_json() == {
        "data": {"id": "R", "question": "Interested?", "isEndNode": False},
        "children": [
            {
                "data": {"id": "N", "question": "No", "isEndNode": True, "endMessage": "Bye"},
                "children": []
            }
        ]
    }


def test_round_trip_preserves_structure_and_clears_path():
    tree = TreeManager()
    build_sample_journey(tree)
    tree.start_journey()
    tree.navigate_to_child("yes-interested")
    original = tree.to_json()

    tree.from_json(original)

    assert tree.to_json() == original
    assert tree.get_current_path() == []
    assert [n.id for n in tree.get_all_nodes()][:4] == ["root", "yes-interested", "electronics", "budget-low"]


def test_from_json_wires_parents():
    tree = TreeManager()
    tree.from_json({
        "data": {"id": "r", "question": "r"},
        "children": [
            {"data": {"id": "a", "question": "a"}, "children": [
                {"data": {"id": "c", "question": "c"}}
            ]},
            {"data": {"id": "b", "question": "b"}, "children": []},
        ]
    })

    root = tree.get_root()
    c = tree.find_node_by_id("c")
    assert root.parent is None
    assert c.parent is tree.find_node_by_id("a")
    assert c.parent.parent is root
    assert [n.id for n in tree.get_leaf_nodes()] == ["c", "b"]


def test_from_json_reads_camel_case_field_names_only():
    node = record_to_node({"data": {"id": "x", "question": "", "is_end_node": True, "end_message": "done"}})
    assert not node.is_end_node()
    assert node.data.end_message is None

    node = record_to_node({"data": {"id": "x", "question": "", "isEndNode": True, "endMessage": "done"}})
    assert node.is_end_node()
    assert node.data.end_message == "done"


def test_from_json_none_is_noop():
    tree = TreeManager()
    tree.set_root(NodeData(id="keep", question="keep"))
    tree.from_json(None)
    assert tree.get_root().id == "keep"


@pytest.mark.parametrize("record", [
    {},
    {"children": []},
    {"data": {"id": "r", "question": "r"}, "children": "not-a-list"},
    {"data": {"id": "r", "question": "r"}, "children": [{"children": []}]},
    {"data": {"question": "missing id"}},
    {"data": {"id": "r", "question": "r", "isEndNode": "yes"}},
    {"data": {"id": "r", "question": "r", "isEndNode": 0}},
])
def test_malformed_record_leaves_tree_untouched(record):
    tree = TreeManager()
    root = tree.set_root(NodeData(id="keep", question="keep"))
    tree.start_journey()

    with pytest.raises(TreeStructureError):
        tree.from_json(record)

    assert tree.get_root() is root
    assert tree.get_current_node() is root


def test_duplicate_ids_in_record_rejected():
    tree = TreeManager()
    with pytest.raises(DuplicateNodeIdError):
        tree.from_json({
            "data": {"id": "r", "question": "r"},
            "children": [
                {"data": {"id": "x", "question": "1"}},
                {"data": {"id": "x", "question": "2"}},
            ]
        })
    assert tree.get_root() is None


def test_node_to_record_on_subtree():
    tree = TreeManager()
    build_sample_journey(tree)
    record = node_to_record(tree.find_node_by_id("electronics"))
    assert [c["data"]["id"] for c in record["children"]] == ["budget-low", "budget-medium", "budget-high"]


def test_deep_chain_round_trip():
    tree = TreeManager()
    tree.set_root(NodeData(id="n0", question="start"))
    for i in range(1, 2000):
        tree.add_node(f"n{i - 1}", NodeData(id=f"n{i}", question=f"step {i}"))

    record = tree.to_json()
    depth = 0
    curr = record
    while curr["children"]:
        depth += 1
        curr = curr["children"][0]
    assert depth == 1999
    assert curr["data"]["id"] == "n1999"

    tree.start_journey()
    tree.from_json(record)
    ids = [n.id for n in tree.get_all_nodes()]
    assert ids == [f"n{i}" for i in range(2000)]
    assert tree.find_node_by_id("n1999").parent is tree.find_node_by_id("n1998")
    assert tree.get_tree_height() == 2000
    assert tree.get_current_path() == []
