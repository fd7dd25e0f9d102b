"""
Architecture Model Snapshot

Immutable in-memory store for one project's architecture model: the
element hierarchy, the deployment-node hierarchy and the relationships
of each.  Query modules only ever read from these objects.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar, Literal

from src.shared.exceptions import EntityNotFoundError, InvalidArgumentError

ViewType = Literal["element", "deployment", "dynamic"]
Namespace = Literal["element", "deployment"]
MetadataValue = str | tuple[str, ...]

NAMESPACES: tuple[str, ...] = ("element", "deployment")


@dataclass(frozen=True)
class ViewRef:
    """A view (diagram) that renders an entity."""

    id: str
    title: str
    type: ViewType


@dataclass(frozen=True)
class ModelEntity:
    """Shared shape of elements and deployment nodes."""

    namespace: ClassVar[str] = "element"
    label: ClassVar[str] = "Element"

    id: str
    name: str
    kind: str
    title: str
    tags: tuple[str, ...] = ()
    metadata: Mapping[str, MetadataValue] = field(default_factory=dict)
    parent_id: str | None = None
    children_ids: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True)
class Element(ModelEntity):
    """A logical architecture element (system, container, component...)."""

    namespace: ClassVar[str] = "element"
    label: ClassVar[str] = "Element"


@dataclass(frozen=True)
class DeploymentNode(ModelEntity):
    """A node of the deployment topology (environment, zone, vm...)."""

    namespace: ClassVar[str] = "deployment"
    label: ClassVar[str] = "Deployment node"


@dataclass(frozen=True)
class Relationship:
    """A directed, typed relationship between two entities of one universe."""

    source: str
    target: str
    kind: str | None = None
    title: str | None = None
    description: str | None = None
    technology: str | None = None
    tags: tuple[str, ...] = ()


class EntityUniverse:
    """Id-keyed lookup over one namespace of a snapshot.

    Entities keep their declaration order; relationships are indexed by
    literal source and target so direct lookups are O(1).  Both indexes
    store positions into the relationship tuple, which lets callers merge
    several endpoint lists back into declaration order.
    """

    def __init__(
        self,
        project_id: str,
        entities: Iterable[ModelEntity],
        relationships: Iterable[Relationship] = (),
        views: Mapping[str, Iterable[ViewRef]] | None = None,
        entity_label: str = "Element",
    ) -> None:
        self.project_id = project_id
        self.entity_label = entity_label
        self._entities: dict[str, ModelEntity] = {e.id: e for e in entities}
        self._relationships: tuple[Relationship, ...] = tuple(relationships)
        outgoing: dict[str, list[int]] = {}
        incoming: dict[str, list[int]] = {}
        for index, rel in enumerate(self._relationships):
            outgoing.setdefault(rel.source, []).append(index)
            incoming.setdefault(rel.target, []).append(index)
        self._outgoing: dict[str, tuple[int, ...]] = {k: tuple(v) for k, v in outgoing.items()}
        self._incoming: dict[str, tuple[int, ...]] = {k: tuple(v) for k, v in incoming.items()}
        self._views: dict[str, tuple[ViewRef, ...]] = {
            entity_id: tuple(refs) for entity_id, refs in (views or {}).items()
        }

    # ─── Entities ─────────────────────────────────────────

    def __iter__(self) -> Iterator[ModelEntity]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def get(self, entity_id: str) -> ModelEntity | None:
        return self._entities.get(entity_id)

    def require(self, entity_id: str, label: str | None = None) -> ModelEntity:
        """Resolve an id or raise ``EntityNotFoundError``."""
        entity = self._entities.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_id, self.project_id, label or self.entity_label)
        return entity

    # ─── Relationships ────────────────────────────────────

    @property
    def relationships(self) -> tuple[Relationship, ...]:
        return self._relationships

    def relationship_at(self, index: int) -> Relationship:
        return self._relationships[index]

    def outgoing_indexes(self, entity_id: str) -> tuple[int, ...]:
        """Positions of relationships whose literal source is ``entity_id``."""
        return self._outgoing.get(entity_id, ())

    def incoming_indexes(self, entity_id: str) -> tuple[int, ...]:
        """Positions of relationships whose literal target is ``entity_id``."""
        return self._incoming.get(entity_id, ())

    # ─── Views ────────────────────────────────────────────

    def views_of(self, entity_id: str) -> tuple[ViewRef, ...]:
        return self._views.get(entity_id, ())


@dataclass(frozen=True)
class ModelSnapshot:
    """One project's model, frozen for the lifetime of any query."""

    project_id: str
    title: str
    elements: EntityUniverse
    deployment: EntityUniverse
    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def universe(self, namespace: str = "element") -> EntityUniverse:
        """Return the element or deployment universe."""
        if namespace == "element":
            return self.elements
        if namespace == "deployment":
            return self.deployment
        raise InvalidArgumentError(
            f"Unknown namespace: {namespace!r}. Valid: {list(NAMESPACES)}"
        )

    def universes(self) -> tuple[EntityUniverse, EntityUniverse]:
        """Elements first, then deployment nodes."""
        return (self.elements, self.deployment)
