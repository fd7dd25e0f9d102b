"""
Hierarchy Navigator — ancestors, descendants, children, parent, siblings.

Walks the parent/child pointers of one ``EntityUniverse``.  Every
function is a plain generator over the snapshot, so calling it again
restarts the walk from scratch and yields the same order.
"""

from collections.abc import Iterator

from src.agents.model_query.model import EntityUniverse, ModelEntity


def parent(universe: EntityUniverse, entity_id: str) -> ModelEntity | None:
    """Immediate parent, or ``None`` for a root."""
    entity = universe.require(entity_id)
    if entity.parent_id is None:
        return None
    return universe.require(entity.parent_id)


def ancestors(universe: EntityUniverse, entity_id: str) -> Iterator[ModelEntity]:
    """Yield the parent chain, closest first, ending at the root."""
    current = parent(universe, entity_id)
    while current is not None:
        yield current
        current = parent(universe, current.id)


def children(universe: EntityUniverse, entity_id: str) -> Iterator[ModelEntity]:
    """Yield immediate children in declaration order."""
    for child_id in universe.require(entity_id).children_ids:
        yield universe.require(child_id)


def descendants(universe: EntityUniverse, entity_id: str) -> Iterator[ModelEntity]:
    """Yield all transitive children, pre-order."""
    # Reversed pushes keep declaration order when popping.
    stack = list(reversed(universe.require(entity_id).children_ids))
    while stack:
        current = universe.require(stack.pop())
        yield current
        stack.extend(reversed(current.children_ids))


def siblings(universe: EntityUniverse, entity_id: str) -> Iterator[ModelEntity]:
    """Yield entities sharing the same parent, excluding the entity itself.

    Roots have no siblings.
    """
    entity = universe.require(entity_id)
    if entity.parent_id is None:
        return
    for sibling in children(universe, entity.parent_id):
        if sibling.id != entity.id:
            yield sibling


def is_ancestor_of(universe: EntityUniverse, ancestor_id: str, entity_id: str) -> bool:
    """True iff ``ancestor_id`` appears in ``ancestors(entity_id)``."""
    return any(a.id == ancestor_id for a in ancestors(universe, entity_id))


def subtree_ids(universe: EntityUniverse, entity_id: str) -> set[str]:
    """The entity itself plus every descendant id."""
    ids = {entity_id}
    ids.update(d.id for d in descendants(universe, entity_id))
    return ids
