"""
Relationship Navigator — outgoing/incoming relationships with a
direct/indirect filter.

``DIRECT`` only returns relationships whose literal endpoint is the
queried entity.  ``INDIRECT`` also attributes the relationships of every
descendant to the queried entity, but drops relationships that never
leave its subtree (both endpoints inside it), so a container inherits
the external wiring of its children without its internal wiring.
"""

from collections.abc import Iterator
from enum import Enum

from src.agents.model_query.hierarchy import subtree_ids
from src.agents.model_query.model import EntityUniverse, ModelEntity, Relationship


class RelationshipFilter(str, Enum):
    DIRECT = "direct"
    INDIRECT = "indirect"

    @classmethod
    def from_flag(cls, include_indirect: bool) -> "RelationshipFilter":
        return cls.INDIRECT if include_indirect else cls.DIRECT


def _collect(
    universe: EntityUniverse,
    entity_id: str,
    rel_filter: RelationshipFilter,
    outgoing_side: bool,
) -> Iterator[Relationship]:
    universe.require(entity_id)
    lookup = universe.outgoing_indexes if outgoing_side else universe.incoming_indexes

    if rel_filter is RelationshipFilter.DIRECT:
        for index in lookup(entity_id):
            yield universe.relationship_at(index)
        return

    subtree = subtree_ids(universe, entity_id)
    indexes: set[int] = set()
    for member in subtree:
        indexes.update(lookup(member))

    # Sorting the positions restores declaration order across members.
    for index in sorted(indexes):
        rel = universe.relationship_at(index)
        other_end = rel.target if outgoing_side else rel.source
        if other_end in subtree:
            continue
        yield rel


def outgoing(
    universe: EntityUniverse,
    entity_id: str,
    rel_filter: RelationshipFilter = RelationshipFilter.INDIRECT,
) -> Iterator[Relationship]:
    """Yield relationships leaving ``entity_id`` (and, if indirect, its subtree)."""
    return _collect(universe, entity_id, rel_filter, outgoing_side=True)


def incoming(
    universe: EntityUniverse,
    entity_id: str,
    rel_filter: RelationshipFilter = RelationshipFilter.INDIRECT,
) -> Iterator[Relationship]:
    """Yield relationships arriving at ``entity_id`` (and, if indirect, its subtree)."""
    return _collect(universe, entity_id, rel_filter, outgoing_side=False)


def incomers(
    universe: EntityUniverse,
    entity_id: str,
    rel_filter: RelationshipFilter = RelationshipFilter.INDIRECT,
) -> Iterator[ModelEntity]:
    """Distinct sources of ``incoming`` relationships, first-seen order."""
    seen: set[str] = set()
    for rel in incoming(universe, entity_id, rel_filter):
        if rel.source not in seen:
            seen.add(rel.source)
            yield universe.require(rel.source)


def outgoers(
    universe: EntityUniverse,
    entity_id: str,
    rel_filter: RelationshipFilter = RelationshipFilter.INDIRECT,
) -> Iterator[ModelEntity]:
    """Distinct targets of ``outgoing`` relationships, first-seen order."""
    seen: set[str] = set()
    for rel in outgoing(universe, entity_id, rel_filter):
        if rel.target not in seen:
            seen.add(rel.target)
            yield universe.require(rel.target)
