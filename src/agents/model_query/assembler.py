"""
Result Assembler — projects entities and relationships into the plain
dicts returned by every tool (ready for ``json.dumps``).
"""

from collections.abc import Iterable
from typing import Any

from src.agents.model_query.model import EntityUniverse, ModelEntity, Relationship, ViewRef


def included_in_views(views: Iterable[ViewRef]) -> list[dict[str, str]]:
    return [{"id": v.id, "title": v.title, "type": v.type} for v in views]


def metadata_dict(entity: ModelEntity) -> dict[str, str | list[str]]:
    """Copy of the entity metadata with list values as lists."""
    return {
        key: value if isinstance(value, str) else list(value)
        for key, value in entity.metadata.items()
    }


def project_entity(universe: EntityUniverse, entity: ModelEntity) -> dict[str, Any]:
    """Stable output record: identity, tags, metadata and view memberships."""
    return {
        "id": entity.id,
        "name": entity.name,
        "kind": entity.kind,
        "title": entity.title,
        "tags": list(entity.tags),
        "metadata": metadata_dict(entity),
        "includedInViews": included_in_views(universe.views_of(entity.id)),
    }


def project_relationship(rel: Relationship) -> dict[str, Any]:
    """Literal relationship attributes, ``None`` where unset."""
    return {
        "kind": rel.kind,
        "title": rel.title,
        "description": rel.description,
        "technology": rel.technology,
        "tags": list(rel.tags),
    }
