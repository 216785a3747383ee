from typing import Iterable

from .graph import Forest
from .graph import TreeNode


_BRANCH = "├── "
_LAST_BRANCH = "└── "
_PIPE = "│   "
_SPACE = "    "


def format_names(names: Iterable[str]) -> str:
    return "\n".join(names)


def _format_children(node: TreeNode, prefix: str, output: list[str]):
    for i, child in enumerate(node.children):
        last = i == len(node.children) - 1
        output.append(prefix + (_LAST_BRANCH if last else _BRANCH) + child.name)
        _format_children(child, prefix + (_SPACE if last else _PIPE), output)


def format_forest(forest: Forest) -> str:
    """Render the forest as indented trees, one root per external image.

        ubuntu:22.04
        └── base
            ├── desktop
            └── server
    """
    output = []
    for root in forest:
        output.append(root.name)
        _format_children(root, "", output)
    return "\n".join(output)


def _dot_id(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def forest_to_dot(forest: Forest):
    # Edges point from an image to the image it inherits
    output = ["digraph image_tree {"]

    def add_node(node: TreeNode):
        output.append(f"  {_dot_id(node.name)};")
        for child in node.children:
            add_node(child)

    def add_edges(node: TreeNode):
        for child in node.children:
            output.append(f"  {_dot_id(child.name)} -> {_dot_id(node.name)};")
            add_edges(child)

    for root in forest:
        add_node(root)
    for root in forest:
        add_edges(root)
    output.append("}")
    return "\n".join(output)
