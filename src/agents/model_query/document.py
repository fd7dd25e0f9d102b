"""
Model Document Loader

Pydantic schema for a computed architecture model exported as JSON,
and the conversion of that document into an immutable ``ModelSnapshot``.

Document shape::

    {
      "project": {"id": "default", "title": "Shop"},
      "elements": [{"id": "shop", "kind": "system", "tags": ["public"]}],
      "relationships": [{"source": "shop.web", "target": "shop.api"}],
      "deployment": {"nodes": [...], "relationships": [...]},
      "views": [{"id": "index", "type": "element", "include": ["shop"]}]
    }

Parents are derived from FQNs: the parent of ``shop.web.auth`` is the
nearest declared prefix (``shop.web``, else ``shop``).
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.agents.model_query.model import (
    DeploymentNode,
    Element,
    EntityUniverse,
    MetadataValue,
    ModelEntity,
    ModelSnapshot,
    Relationship,
    ViewRef,
)
from src.shared.exceptions import ModelLoadError

logger = logging.getLogger("model_query.document")


class RelationshipSpec(BaseModel):
    """A relationship as declared in the document."""

    source: str
    target: str
    kind: str | None = None
    title: str | None = None
    description: str | None = None
    technology: str | None = None
    tags: list[str] = Field(default_factory=list)


class EntitySpec(BaseModel):
    """An element or deployment node as declared in the document."""

    id: str = Field(min_length=1)
    kind: str
    name: str | None = None
    title: str | None = None
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, str | list[str]] = Field(default_factory=dict)

    @field_validator("metadata")
    @classmethod
    def _non_empty_lists(cls, value: dict[str, str | list[str]]) -> dict[str, str | list[str]]:
        for key, item in value.items():
            if isinstance(item, list) and not item:
                raise ValueError(f"metadata list for {key!r} must not be empty")
        return value


class DeploymentSpec(BaseModel):
    nodes: list[EntitySpec] = Field(default_factory=list)
    relationships: list[RelationshipSpec] = Field(default_factory=list)


class ViewSpec(BaseModel):
    """A view and the entity ids it renders."""

    id: str
    title: str | None = None
    type: Literal["element", "deployment", "dynamic"] = "element"
    include: list[str] = Field(default_factory=list)


class ProjectSpec(BaseModel):
    id: str = "default"
    title: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class ModelDocument(BaseModel):
    """Top-level JSON document for one project."""

    project: ProjectSpec = Field(default_factory=ProjectSpec)
    elements: list[EntitySpec] = Field(default_factory=list)
    relationships: list[RelationshipSpec] = Field(default_factory=list)
    deployment: DeploymentSpec = Field(default_factory=DeploymentSpec)
    views: list[ViewSpec] = Field(default_factory=list)


# ─── Snapshot building ────────────────────────────────────


def _ordered_unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def _nearest_parent(entity_id: str, known: set[str]) -> str | None:
    parts = entity_id.split(".")
    for cut in range(len(parts) - 1, 0, -1):
        candidate = ".".join(parts[:cut])
        if candidate in known:
            return candidate
    return None


def _build_universe(
    project_id: str,
    specs: list[EntitySpec],
    relationship_specs: list[RelationshipSpec],
    views: dict[str, list[ViewRef]],
    entity_cls: type[ModelEntity],
) -> EntityUniverse:
    label = entity_cls.label
    known: set[str] = set()
    for spec in specs:
        if spec.id in known:
            raise ModelLoadError(f'Duplicate {label.lower()} id "{spec.id}" in project "{project_id}"')
        known.add(spec.id)

    parents = {spec.id: _nearest_parent(spec.id, known) for spec in specs}
    children: dict[str, list[str]] = {spec.id: [] for spec in specs}
    for spec in specs:
        parent_id = parents[spec.id]
        if parent_id is not None:
            children[parent_id].append(spec.id)

    entities = []
    for spec in specs:
        name = spec.name or spec.id.rsplit(".", 1)[-1]
        metadata: dict[str, MetadataValue] = {
            key: value if isinstance(value, str) else tuple(value)
            for key, value in spec.metadata.items()
        }
        entities.append(entity_cls(
            id=spec.id,
            name=name,
            kind=spec.kind,
            title=spec.title or name,
            tags=_ordered_unique(spec.tags),
            metadata=MappingProxyType(metadata),
            parent_id=parents[spec.id],
            children_ids=tuple(children[spec.id]),
        ))

    relationships = []
    for rel in relationship_specs:
        for endpoint in (rel.source, rel.target):
            if endpoint not in known:
                raise ModelLoadError(
                    f'Relationship {rel.source} -> {rel.target} references unknown '
                    f'{label.lower()} "{endpoint}" in project "{project_id}"'
                )
        relationships.append(Relationship(
            source=rel.source,
            target=rel.target,
            kind=rel.kind,
            title=rel.title,
            description=rel.description,
            technology=rel.technology,
            tags=_ordered_unique(rel.tags),
        ))

    return EntityUniverse(
        project_id,
        entities,
        relationships,
        views={k: v for k, v in views.items() if k in known},
        entity_label=label,
    )


def _view_memberships(
    document: ModelDocument,
) -> tuple[dict[str, list[ViewRef]], dict[str, list[ViewRef]]]:
    """Split view includes into element and deployment memberships."""
    element_ids = {e.id for e in document.elements}
    node_ids = {n.id for n in document.deployment.nodes}
    element_views: dict[str, list[ViewRef]] = {}
    deployment_views: dict[str, list[ViewRef]] = {}

    for view in document.views:
        ref = ViewRef(id=view.id, title=view.title or view.id, type=view.type)
        if view.type == "deployment":
            known, target = node_ids, deployment_views
        else:
            known, target = element_ids, element_views
        for entity_id in view.include:
            if entity_id not in known:
                logger.warning("View %s includes unknown entity %s, skipped", view.id, entity_id)
                continue
            refs = target.setdefault(entity_id, [])
            if ref not in refs:
                refs.append(ref)

    return element_views, deployment_views


def build_snapshot(document: ModelDocument) -> ModelSnapshot:
    """Turn a validated document into an immutable snapshot.

    Raises:
        ModelLoadError: Duplicate ids or dangling relationship endpoints.
    """
    project_id = document.project.id
    element_views, deployment_views = _view_memberships(document)

    elements = _build_universe(
        project_id, document.elements, document.relationships, element_views, Element,
    )
    deployment = _build_universe(
        project_id,
        document.deployment.nodes,
        document.deployment.relationships,
        deployment_views,
        DeploymentNode,
    )

    logger.debug(
        "Built snapshot %s: %d elements, %d deployment nodes, %d relationships",
        project_id, len(elements), len(deployment),
        len(elements.relationships) + len(deployment.relationships),
    )
    return ModelSnapshot(
        project_id=project_id,
        title=document.project.title or project_id,
        elements=elements,
        deployment=deployment,
        metadata=MappingProxyType(dict(document.project.metadata)),
    )


def load_snapshot(path: str | Path) -> ModelSnapshot:
    """Read a JSON model document from disk and build its snapshot."""
    path = Path(path)
    try:
        document = ModelDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise ModelLoadError(f"Invalid model document {path}: {exc}") from exc
    except OSError as exc:
        raise ModelLoadError(f"Cannot read model document {path}: {exc}") from exc
    return build_snapshot(document)
