"""
Subgraph Extractor — query_incomers_graph / query_outgoers_graph tool
implementation.

Breadth-first closure from one entity along incoming (upstream) or
outgoing (downstream) relationships.  A single global visited set
records every entity once, at the shallowest depth it is reached; the
depth and node quotas guarantee termination on cyclic models.
"""

import logging
from collections import deque
from enum import Enum
from typing import Any

from src.agents.model_query.assembler import project_entity
from src.agents.model_query.model import EntityUniverse
from src.agents.model_query.options import SubgraphQueryOptions
from src.agents.model_query.relationships import RelationshipFilter, incoming, outgoing

logger = logging.getLogger("model_query.subgraph")


class Direction(str, Enum):
    INCOMERS = "incomers"
    OUTGOERS = "outgoers"


def _neighbour_edges(
    universe: EntityUniverse,
    entity_id: str,
    direction: Direction,
    rel_filter: RelationshipFilter,
) -> list[dict[str, str]]:
    """Edges of one node in the requested direction, label/technology when set."""
    edges: list[dict[str, str]] = []
    if direction is Direction.INCOMERS:
        relations = incoming(universe, entity_id, rel_filter)
    else:
        relations = outgoing(universe, entity_id, rel_filter)

    for rel in relations:
        edge = {
            "elementId": rel.source if direction is Direction.INCOMERS else rel.target,
        }
        if rel.title:
            edge["relationshipLabel"] = rel.title
        if rel.technology:
            edge["technology"] = rel.technology
        edges.append(edge)
    return edges


def extract_subgraph(
    universe: EntityUniverse,
    start_id: str,
    direction: Direction = Direction.INCOMERS,
    options: SubgraphQueryOptions | None = None,
) -> dict[str, Any]:
    """Compute the bounded closure of ``start_id`` in one direction.

    Args:
        universe: Element or deployment universe of one snapshot.
        start_id: Entity FQN the traversal starts from (depth 0).
        direction: Follow incoming or outgoing relationships.
        options: Depth and node quotas plus the relationship filter.

    Returns:
        Dict with ``target``, ``totalNodes``, ``maxDepth`` (deepest
        emitted node), ``truncated`` and ``nodes`` keyed by entity id in
        breadth-first discovery order.
    """
    options = options or SubgraphQueryOptions()
    universe.require(start_id)
    direction = Direction(direction)
    rel_filter = RelationshipFilter.from_flag(options.include_indirect)
    edge_key = direction.value

    visited: set[str] = set()
    nodes: dict[str, dict[str, Any]] = {}
    actual_max_depth = 0
    truncated = False

    queue: deque[tuple[str, int]] = deque([(start_id, 0)])

    while queue:
        entity_id, depth = queue.popleft()

        if depth > options.max_depth:
            continue

        if entity_id in visited:
            continue

        if len(visited) >= options.max_nodes:
            truncated = True
            break

        entity = universe.get(entity_id)
        if entity is None:
            continue

        visited.add(entity_id)
        actual_max_depth = max(actual_max_depth, depth)

        edges = _neighbour_edges(universe, entity_id, direction, rel_filter)
        node = project_entity(universe, entity)
        node[edge_key] = edges
        node["depth"] = depth
        nodes[entity_id] = node

        for edge in edges:
            if edge["elementId"] not in visited:
                queue.append((edge["elementId"], depth + 1))

    if truncated:
        logger.info(
            "%s graph of %s truncated at %d nodes", edge_key, start_id, options.max_nodes,
        )

    return {
        "target": start_id,
        "totalNodes": len(visited),
        "maxDepth": actual_max_depth,
        "truncated": truncated,
        "nodes": nodes,
    }
