"""
Path Finder — find_relationship_paths tool implementation.

Breadth-first discovery of every simple chain of outgoing relationships
between two entities, bounded by a hop limit and a global path cap.
"""

import copy
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any

from src.agents.model_query.assembler import project_relationship
from src.agents.model_query.hierarchy import is_ancestor_of
from src.agents.model_query.model import EntityUniverse, Relationship
from src.agents.model_query.options import PathQueryOptions
from src.agents.model_query.relationships import RelationshipFilter, outgoing
from src.shared.exceptions import InvalidArgumentError

logger = logging.getLogger("model_query.path_finder")


@dataclass(frozen=True)
class _Branch:
    """One frontier item: where the path stands and what it already visited."""

    element_id: str
    steps: tuple[dict[str, Any], ...]
    visited: frozenset[str]


def _step(rel: Relationship) -> dict[str, Any]:
    return {
        "source": rel.source,
        "target": rel.target,
        "relationship": project_relationship(rel),
    }


def validate_endpoints(universe: EntityUniverse, source_id: str, target_id: str) -> None:
    """Reject endpoint pairs for which a relationship path is meaningless.

    Raises:
        EntityNotFoundError: Either id is unknown.
        InvalidArgumentError: Same entity, or one contains the other.
    """
    universe.require(source_id, label=f"Source {universe.entity_label.lower()}")
    universe.require(target_id, label=f"Target {universe.entity_label.lower()}")

    if source_id == target_id:
        raise InvalidArgumentError("Source and target must be different elements")

    if is_ancestor_of(universe, source_id, target_id) or is_ancestor_of(
        universe, target_id, source_id,
    ):
        raise InvalidArgumentError(
            "Source and target cannot be in parent-child relationship "
            "(no relationship paths possible)"
        )


def find_relationship_paths(
    universe: EntityUniverse,
    source_id: str,
    target_id: str,
    options: PathQueryOptions | None = None,
) -> list[dict[str, Any]]:
    """Find all simple directed paths from ``source_id`` to ``target_id``.

    Each frontier item carries its own visited set, so an entity may
    appear in many different paths but never twice in the same one.
    Reaching the target completes a path and ends that branch.  The
    search stops outright once ``options.max_paths`` paths exist.

    Args:
        universe: Element or deployment universe of one snapshot.
        source_id: Start entity FQN.
        target_id: Destination entity FQN.
        options: Hop limit, relationship filter and path cap.

    Returns:
        Paths as ``{"length", "steps"}`` dicts, shortest first; equal
        lengths keep discovery order.  Empty when nothing connects them.
    """
    options = options or PathQueryOptions()
    validate_endpoints(universe, source_id, target_id)

    rel_filter = RelationshipFilter.from_flag(options.include_indirect)
    max_depth = options.max_depth
    found: list[dict[str, Any]] = []
    queue: deque[_Branch] = deque(
        [_Branch(element_id=source_id, steps=(), visited=frozenset({source_id}))]
    )

    while queue and len(found) < options.max_paths:
        branch = queue.popleft()
        if len(branch.steps) >= max_depth:
            continue

        for rel in outgoing(universe, branch.element_id, rel_filter):
            next_id = rel.target

            if next_id == target_id:
                found.append({
                    "length": len(branch.steps) + 1,
                    "steps": [copy.deepcopy(s) for s in branch.steps] + [_step(rel)],
                })
                if len(found) >= options.max_paths:
                    break
                continue

            if next_id in branch.visited:
                continue

            if len(branch.steps) + 1 < max_depth:
                queue.append(_Branch(
                    element_id=next_id,
                    steps=(*branch.steps, _step(rel)),
                    visited=branch.visited | {next_id},
                ))

    if len(found) >= options.max_paths:
        logger.debug(
            "Path cap reached for %s -> %s, %d branches dropped",
            source_id, target_id, len(queue),
        )

    # list.sort is stable: equal lengths stay in discovery order
    found.sort(key=lambda p: p["length"])
    logger.debug("Found %d path(s) %s -> %s (max_depth=%d)", len(found), source_id, target_id, max_depth)
    return found
