"""
Unified relative query — query_graph tool implementation.

One dispatch over the hierarchy relatives and the direct neighbours of
an entity, every result projected through the assembler.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from src.agents.model_query import hierarchy, relationships
from src.agents.model_query.assembler import project_entity
from src.agents.model_query.model import EntityUniverse, ModelEntity
from src.agents.model_query.relationships import RelationshipFilter
from src.shared.exceptions import InvalidArgumentError


class RelativeKind(str, Enum):
    ANCESTORS = "ancestors"
    DESCENDANTS = "descendants"
    SIBLINGS = "siblings"
    CHILDREN = "children"
    PARENT = "parent"
    INCOMERS = "incomers"
    OUTGOERS = "outgoers"


def _parent(universe: EntityUniverse, entity_id: str) -> Iterable[ModelEntity]:
    found = hierarchy.parent(universe, entity_id)
    return [found] if found is not None else []


_HIERARCHICAL: dict[RelativeKind, Callable[[EntityUniverse, str], Iterable[ModelEntity]]] = {
    RelativeKind.ANCESTORS: hierarchy.ancestors,
    RelativeKind.DESCENDANTS: hierarchy.descendants,
    RelativeKind.SIBLINGS: hierarchy.siblings,
    RelativeKind.CHILDREN: hierarchy.children,
    RelativeKind.PARENT: _parent,
}


def query_relatives(
    universe: EntityUniverse,
    entity_id: str,
    kind: str | RelativeKind,
    include_indirect: bool = True,
) -> list[dict[str, Any]]:
    """Relatives of ``entity_id`` of the given kind, projected.

    ``include_indirect`` only affects incomers and outgoers; the
    hierarchical kinds accept and ignore it.
    """
    try:
        kind = RelativeKind(kind)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Invalid query type: {kind!r}. Valid: {[k.value for k in RelativeKind]}"
        ) from exc

    universe.require(entity_id)

    if kind is RelativeKind.INCOMERS:
        related = relationships.incomers(
            universe, entity_id, RelationshipFilter.from_flag(include_indirect),
        )
    elif kind is RelativeKind.OUTGOERS:
        related = relationships.outgoers(
            universe, entity_id, RelationshipFilter.from_flag(include_indirect),
        )
    else:
        related = _HIERARCHICAL[kind](universe, entity_id)

    return [project_entity(universe, entity) for entity in related]
