"""
Tree navigation and copy-on-write editing for the survey forest.

The survey is a list of root-level SurveyNode objects whose containers own
ordered `children` lists. Navigation returns references into the tree it was
given; editing never mutates its inputs and returns a structurally independent
forest (deep copies on every edit).

A parent id of None is the root marker: the top-level sequence itself.
"""

import copy
from dataclasses import dataclass
from typing import List, Optional

from formgrid.model import SurveyNode


class NodeNotFoundError(Exception):
    """Raised when an edit targets a node id that does not exist."""
    pass


@dataclass
class ParentLocation:
    """
    Where a node sits in the forest.

    Properties:
        parent: Owning container, or None when the node is at the root
        children: The sibling list holding the node (a live reference)
        index: 0-based position of the node within `children`
    """

    parent: Optional[SurveyNode]
    children: List[SurveyNode]
    index: int


def find_node(tree: List[SurveyNode], node_id: str) -> Optional[SurveyNode]:
    """
    Depth-first pre-order search across the forest.

    Returns:
        The first node whose id matches, or None if not found
    """
    for node in tree:
        if node.id == node_id:
            return node
        if node.children:
            found = find_node(node.children, node_id)
            if found is not None:
                return found
    return None


def find_parent(tree: List[SurveyNode], node_id: str) -> Optional[ParentLocation]:
    """
    Locate the sibling list and position of a node.

    All siblings at the current level are checked before descending, then
    each node's direct children, then deeper levels.

    Returns:
        ParentLocation (parent None at the root), or None if not found
    """
    for i, node in enumerate(tree):
        if node.id == node_id:
            return ParentLocation(parent=None, children=tree, index=i)

    for node in tree:
        if not node.children:
            continue
        for i, child in enumerate(node.children):
            if child.id == node_id:
                return ParentLocation(parent=node, children=node.children, index=i)
        found = find_parent(node.children, node_id)
        if found is not None:
            return found
    return None


def remove_node(tree: List[SurveyNode], node_id: str) -> List[SurveyNode]:
    """
    Return a new forest without the node `node_id` (and its subtree).

    If the id does not exist the result is still an independent deep copy.
    """
    result = []
    for node in tree:
        if node.id == node_id:
            continue
        clone = copy.copy(node)
        clone.children = None
        clone = copy.deepcopy(clone)
        if node.children is not None:
            clone.children = remove_node(node.children, node_id)
        result.append(clone)
    return result


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length))


def _insert_into(tree: List[SurveyNode], parent_id: str, index: int,
                 node: SurveyNode) -> bool:
    """Insert `node` under `parent_id` in a tree the caller already owns."""
    for candidate in tree:
        if candidate.id == parent_id:
            if candidate.children is None:
                candidate.children = []
            position = _clamp(index, len(candidate.children))
            candidate.children.insert(position, node)
            return True
        if candidate.children and _insert_into(candidate.children, parent_id, index, node):
            return True
    return False


def insert_node(
    tree: List[SurveyNode],
    parent_id: Optional[str],
    index: int,
    node: SurveyNode,
) -> List[SurveyNode]:
    """
    Return a new forest with a copy of `node` inserted.

    Args:
        tree: Forest to insert into (not modified)
        parent_id: Container id, or None to insert at the root
        index: Position among the siblings, clamped to [0, len]
        node: Node to insert (deep-copied, never aliased)

    Raises:
        NodeNotFoundError: If `parent_id` does not exist in the tree
    """
    result = copy.deepcopy(tree)
    new_node = copy.deepcopy(node)

    if parent_id is None:
        result.insert(_clamp(index, len(result)), new_node)
        return result

    if not _insert_into(result, parent_id, index, new_node):
        raise NodeNotFoundError(f"No node with id '{parent_id}' to insert into")
    return result


__all__ = [
    "NodeNotFoundError",
    "ParentLocation",
    "find_node",
    "find_parent",
    "remove_node",
    "insert_node",
]
