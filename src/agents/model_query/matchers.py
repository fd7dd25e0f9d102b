"""
Predicate Matchers — query_by_tags and query_by_metadata tool
implementations.

Both scan elements first and deployment nodes second, through the
shared ``ModelEntity`` shape, and stop as soon as the result cap is hit.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.agents.model_query.assembler import project_entity
from src.agents.model_query.model import EntityUniverse, MetadataValue, ModelEntity, ModelSnapshot
from src.agents.model_query.options import MAX_MATCHES
from src.shared.exceptions import InvalidArgumentError

logger = logging.getLogger("model_query.matchers")


# ─── Tag filter ───────────────────────────────────────────


@dataclass(frozen=True)
class TagFilter:
    """Boolean tag predicate: all of AND any of AND none of.

    A tag listed in both ``all_of`` and ``none_of`` matches nothing.
    """

    all_of: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    none_of: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        all_of: Iterable[str] | None = None,
        any_of: Iterable[str] | None = None,
        none_of: Iterable[str] | None = None,
    ) -> "TagFilter":
        tag_filter = cls(
            all_of=tuple(all_of or ()),
            any_of=tuple(any_of or ()),
            none_of=tuple(none_of or ()),
        )
        if not (tag_filter.all_of or tag_filter.any_of or tag_filter.none_of):
            raise InvalidArgumentError(
                "At least one condition (allOf, anyOf, or noneOf) "
                "must be specified with at least one tag"
            )
        return tag_filter

    def matches(self, tags: Iterable[str]) -> bool:
        tag_set = set(tags)
        if self.all_of and not all(tag in tag_set for tag in self.all_of):
            return False
        if self.any_of and not any(tag in tag_set for tag in self.any_of):
            return False
        if self.none_of and any(tag in tag_set for tag in self.none_of):
            return False
        return True


# ─── Metadata filter ──────────────────────────────────────


class MatchMode(str, Enum):
    EXACT = "exact"
    CONTAINS = "contains"
    EXISTS = "exists"


@dataclass(frozen=True)
class MetadataFilter:
    """Key/value predicate over entity metadata.

    Scalar metadata values are treated as one-element lists; list values
    match when any element does.
    """

    key: str
    value: str | None = None
    mode: MatchMode = MatchMode.EXACT

    @classmethod
    def create(
        cls, key: str, value: str | None = None, mode: str | MatchMode = MatchMode.EXACT,
    ) -> "MetadataFilter":
        try:
            match_mode = MatchMode(mode)
        except ValueError as exc:
            raise InvalidArgumentError(
                f"Invalid match mode: {mode!r}. Valid: {[m.value for m in MatchMode]}"
            ) from exc
        return cls(key=key, value=value, mode=match_mode)

    def _satisfies(self, candidate: str) -> bool:
        if self.mode is MatchMode.EXISTS:
            return True
        if self.value is None:
            return False
        if self.mode is MatchMode.EXACT:
            return candidate == self.value
        return self.value.lower() in candidate.lower()

    def matched_value(self, metadata: Mapping[str, MetadataValue]) -> str | None:
        """First metadata value satisfying the filter, or ``None``."""
        if self.key not in metadata:
            return None
        raw = metadata[self.key]
        values: Sequence[str] = [raw] if isinstance(raw, str) else list(raw)
        if not values:
            return None
        if self.mode is MatchMode.EXISTS:
            return values[0]
        return next((v for v in values if self._satisfies(v)), None)


# ─── Scanning ─────────────────────────────────────────────


def _scan(
    snapshot: ModelSnapshot,
    project: Callable[[EntityUniverse, ModelEntity], dict[str, Any] | None],
    limit: int,
) -> list[dict[str, Any]]:
    """Collect projections over elements then deployment nodes, up to ``limit``."""
    results: list[dict[str, Any]] = []
    for universe in snapshot.universes():
        if len(results) >= limit:
            break
        for entity in universe:
            if len(results) >= limit:
                break
            record = project(universe, entity)
            if record is not None:
                results.append(record)
    return results


def query_by_tags(
    snapshot: ModelSnapshot,
    tag_filter: TagFilter,
    limit: int = MAX_MATCHES,
) -> list[dict[str, Any]]:
    """Entities whose tags satisfy ``tag_filter``."""

    def _project(universe: EntityUniverse, entity: ModelEntity) -> dict[str, Any] | None:
        if not tag_filter.matches(entity.tags):
            return None
        return project_entity(universe, entity)

    results = _scan(snapshot, _project, limit)
    logger.debug("Tag query %s matched %d entities", tag_filter, len(results))
    return results


def query_by_metadata(
    snapshot: ModelSnapshot,
    metadata_filter: MetadataFilter,
    limit: int = MAX_MATCHES,
) -> list[dict[str, Any]]:
    """Entities whose metadata satisfies ``metadata_filter``, with ``matchedValue``."""

    def _project(universe: EntityUniverse, entity: ModelEntity) -> dict[str, Any] | None:
        matched = metadata_filter.matched_value(entity.metadata)
        if matched is None:
            return None
        record = project_entity(universe, entity)
        # Keep matchedValue ahead of includedInViews in the output record
        views = record.pop("includedInViews")
        record["matchedValue"] = matched
        record["includedInViews"] = views
        return record

    results = _scan(snapshot, _project, limit)
    logger.debug("Metadata query %s matched %d entities", metadata_filter, len(results))
    return results
