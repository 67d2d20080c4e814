from dataclasses import dataclass, field
from typing import List


@dataclass
class TreeNode:
    name: str
    children: List["TreeNode"] = field(default_factory=list)

    def add_child(self, child: "TreeNode"):
        self.children.append(child)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "children": [child.to_dict() for child in self.children],
        }

    @staticmethod
    def from_dict(data: dict) -> "TreeNode":
        return TreeNode(
            name=data["name"],
            children=[TreeNode.from_dict(child) for child in data.get("children", [])],
        )

    def __str__(self) -> str:
        return f"TreeNode(name={self.name}, children={len(self.children)})"
