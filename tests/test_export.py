import json
from pathlib import Path

import pytest

from treeftp.core.errors import ExportWriteError
from treeftp.export import export_tree, tree_to_json, write_tree_json
from treeftp.tree_node import TreeNode


@pytest.fixture
def root() -> TreeNode:
    node = TreeNode("Root")
    node.add_child(TreeNode("Child 1"))
    node.add_child(TreeNode("Child 2"))
    return node


def test_tree_to_json_structure(root):
    assert json.loads(tree_to_json(root)) == {
        "name": "Root",
        "children": [
            {"name": "Child 1", "children": []},
            {"name": "Child 2", "children": []},
        ],
    }


def test_tree_round_trips_through_dict(root):
    assert TreeNode.from_dict(root.to_dict()) == root


def test_write_tree_json_with_valid_input(root, tmp_path: Path):
    target = tmp_path / "test.json"

    write_tree_json(root, str(target))

    content = target.read_text(encoding="utf-8")
    assert content
    assert json.loads(content)["children"][1]["name"] == "Child 2"


def test_write_tree_json_with_null_tree(tmp_path: Path):
    target = tmp_path / "test.json"

    assert export_tree(None, str(target)) is True
    assert target.read_text(encoding="utf-8") == "null"


def test_write_tree_json_with_invalid_filename_raises(root):
    with pytest.raises(ExportWriteError):
        write_tree_json(root, "\0invalid.json")


def test_export_tree_with_invalid_filename_does_not_raise(root, capsys):
    print("|-- already printed")

    assert export_tree(root, "\0invalid.json") is False
    assert "|-- already printed" in capsys.readouterr().out


def test_export_tree_to_directory_does_not_raise(root, tmp_path: Path):
    assert export_tree(root, str(tmp_path)) is False


def test_export_tree_to_missing_directory_does_not_raise(root, tmp_path: Path):
    target = tmp_path / "missing" / "tree.json"

    assert export_tree(root, str(target)) is False
    assert not target.exists()
