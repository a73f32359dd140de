"""
Sibling ordering.

Weeks within a program and days within a week carry a 1-based ``order``
that must stay dense (1..N) and unique across structural edits. These
helpers rewrite the order of a sibling list and report which nodes
actually changed so callers only persist those.
"""

from datetime import datetime
from typing import List, Optional, Protocol, Sequence, TypeVar


class OrderedNode(Protocol):
    """Anything with a mutable order and a creation timestamp."""

    order: int
    created_at: Optional[datetime]


NodeT = TypeVar("NodeT", bound=OrderedNode)


def _created_key(node: OrderedNode) -> float:
    return node.created_at.timestamp() if node.created_at else 0.0


def sort_siblings(siblings: Sequence[NodeT]) -> List[NodeT]:
    """Stable sort by existing order, ties broken by creation time."""
    return sorted(siblings, key=lambda n: (n.order, _created_key(n)))


def next_order(siblings: Sequence[OrderedNode]) -> int:
    """Order value for a node appended after every sibling."""
    return max((s.order for s in siblings), default=0) + 1


def _assign(ordered: List[NodeT]) -> List[NodeT]:
    changed = []
    for position, node in enumerate(ordered, start=1):
        if node.order != position:
            node.order = position
            changed.append(node)
    return changed


def resequence(siblings: Sequence[NodeT]) -> List[NodeT]:
    """
    Reassign order = 1..N following the current relative sequence.

    Calling it again on the result changes nothing.

    Args:
        siblings: Nodes sharing one parent

    Returns:
        The nodes whose order was changed
    """
    return _assign(sort_siblings(siblings))


def place(siblings: Sequence[NodeT], node: NodeT, position: int) -> List[NodeT]:
    """
    Move ``node`` to a 1-based position among its siblings and resequence.

    ``node`` may or may not already be in ``siblings``. Positions beyond
    the end append.

    Returns:
        The nodes whose order was changed (``node`` included if it moved)
    """
    ordered = [s for s in sort_siblings(siblings) if s is not node]
    index = max(0, min(position - 1, len(ordered)))
    ordered.insert(index, node)
    return _assign(ordered)


def rank(siblings: Sequence[NodeT], node: NodeT) -> int:
    """1-based position of ``node`` among its siblings, whatever its stored order."""
    return next(i for i, s in enumerate(sort_siblings(siblings), start=1) if s is node)
