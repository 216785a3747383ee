from dataclasses import dataclass
from typing import TypeAlias

from .definitions import DefinitionSet
from .definitions import ImageDefinition
from .errors import CycleError
from .errors import NotFoundError


@dataclass(frozen=True)
class TreeNode:

    name: str
    children: tuple["TreeNode", ...] = ()


# Forest is a list of trees, one per distinct external image
Forest: TypeAlias = list[TreeNode]


def parents(
    definitions: DefinitionSet,
    name: str,
    *,
    exclude_external: bool = False,
    reverse: bool = False,
) -> list[str]:
    """Return the names an image inherits from, nearest first.

    The chain ends at the external image the oldest ancestor inherits,
    unless exclude_external is given. With reverse the chain is returned
    oldest first.
    """
    current = definitions.get_definition(name)
    visited = [current.name]
    results = []

    while not current.inherits_external:
        if current.inherits in visited:
            raise CycleError(visited + [current.inherits])
        if current.inherits not in definitions:
            raise NotFoundError(
                f"Image {current.name} inherits {current.inherits} which doesn't exist"
            )
        current = definitions[current.inherits]
        visited.append(current.name)
        results.append(current.name)

    if not exclude_external:
        results.append(current.inherits)

    if reverse:
        results.reverse()
    return results


def children(
    definitions: DefinitionSet, name: str, *, reverse: bool = False
) -> list[str]:
    """Return the names of images that directly inherit the given image."""
    definitions.get_definition(name)
    results = [d.name for d in definitions.values() if d.inherits == name]
    if reverse:
        results.sort(reverse=True)
    return results


def _children_index(definitions: DefinitionSet) -> dict[str, list[ImageDefinition]]:
    index: dict[str, list[ImageDefinition]] = {}
    for definition in definitions.values():
        index.setdefault(definition.inherits, []).append(definition)
    for siblings in index.values():
        siblings.sort(key=lambda d: d.name)
    return index


def _build_tree_recursively(definition: ImageDefinition, index, path) -> TreeNode:
    if definition.name in path:
        raise CycleError(path + [definition.name])
    path = path + [definition.name]
    subtrees = []
    for child in index.get(definition.name, []):
        subtrees.append(_build_tree_recursively(child, index, path))
    return TreeNode(definition.name, tuple(subtrees))


def external_images(definitions: DefinitionSet) -> list[str]:
    """Return the distinct external images inherited anywhere, sorted."""
    external = set()
    for definition in definitions.values():
        if definition.inherits_external:
            external.add(definition.inherits)
    return sorted(external)


def build_forest(definitions: DefinitionSet) -> Forest:
    """Build one inheritance tree per external image.

    The root of each tree is labeled with the external image; below it are
    the images inheriting it directly, and below those their own children.
    """
    index = _children_index(definitions)
    forest: Forest = []
    for external_image in external_images(definitions):
        roots = []
        for definition in index.get(external_image, []):
            if definition.inherits_external:
                roots.append(_build_tree_recursively(definition, index, []))
        forest.append(TreeNode(external_image, tuple(roots)))
    return forest
