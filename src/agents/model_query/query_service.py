"""
Model Query Service — read-only query layer for the Model Query agent.

Each public method corresponds to one MCP tool: it resolves the project
snapshot, validates and clamps the arguments, runs the query and returns
a plain dict ready for JSON serialisation.  All validation happens
before any traversal starts.
"""

from typing import Any

from src.agents.model_query.matchers import (
    MetadataFilter,
    TagFilter,
    query_by_metadata,
    query_by_tags,
)
from src.agents.model_query.model import Namespace
from src.agents.model_query.options import PathQueryOptions, SubgraphQueryOptions
from src.agents.model_query.path_finder import find_relationship_paths
from src.agents.model_query.projects import ProjectRegistry
from src.agents.model_query.relatives import query_relatives
from src.agents.model_query.subgraph import Direction, extract_subgraph


class ModelQueryService:
    """Read-only query interface over the registered architecture models."""

    def __init__(self, registry: ProjectRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ProjectRegistry:
        return self._registry

    # ─── Tool 1: find_relationship_paths ──────────────────

    def find_relationship_paths(
        self,
        source_id: str,
        target_id: str,
        max_depth: int | None = None,
        include_indirect: bool = True,
        namespace: Namespace = "element",
        project: str | None = None,
    ) -> dict[str, Any]:
        """Multi-hop relationship paths between two entities."""
        universe = self._registry.get(project).universe(namespace)
        options = PathQueryOptions.create(max_depth=max_depth, include_indirect=include_indirect)
        paths = find_relationship_paths(universe, source_id, target_id, options)
        return {"paths": paths}

    # ─── Tool 2: query_graph ──────────────────────────────

    def query_graph(
        self,
        element_id: str,
        query_type: str,
        include_indirect: bool = True,
        namespace: Namespace = "element",
        project: str | None = None,
    ) -> dict[str, Any]:
        """Hierarchy relatives or direct neighbours of one entity."""
        universe = self._registry.get(project).universe(namespace)
        return {"results": query_relatives(universe, element_id, query_type, include_indirect)}

    # ─── Tools 3 & 4: query_incomers_graph / query_outgoers_graph ──

    def query_subgraph(
        self,
        element_id: str,
        direction: str | Direction,
        include_indirect: bool = True,
        max_depth: int | None = None,
        max_nodes: int | None = None,
        namespace: Namespace = "element",
        project: str | None = None,
    ) -> dict[str, Any]:
        """Bounded upstream or downstream closure of one entity."""
        universe = self._registry.get(project).universe(namespace)
        options = SubgraphQueryOptions.create(
            max_depth=max_depth, max_nodes=max_nodes, include_indirect=include_indirect,
        )
        return extract_subgraph(universe, element_id, Direction(direction), options)

    # ─── Tool 5: query_by_tags ────────────────────────────

    def query_by_tags(
        self,
        all_of: list[str] | None = None,
        any_of: list[str] | None = None,
        none_of: list[str] | None = None,
        project: str | None = None,
    ) -> dict[str, Any]:
        """Elements and deployment nodes matching tag boolean logic."""
        tag_filter = TagFilter.create(all_of=all_of, any_of=any_of, none_of=none_of)
        snapshot = self._registry.get(project)
        return {"results": query_by_tags(snapshot, tag_filter)}

    # ─── Tool 6: query_by_metadata ────────────────────────

    def query_by_metadata(
        self,
        key: str,
        value: str | None = None,
        match_mode: str = "exact",
        project: str | None = None,
    ) -> dict[str, Any]:
        """Elements and deployment nodes matching a metadata predicate."""
        metadata_filter = MetadataFilter.create(key, value, match_mode)
        snapshot = self._registry.get(project)
        return {"results": query_by_metadata(snapshot, metadata_filter)}

    # ─── Tool 7: list_projects ────────────────────────────

    def list_projects(self) -> dict[str, Any]:
        """Registered projects and their sizes."""
        return {
            "defaultProject": self._registry.default_project,
            "projects": self._registry.list_projects(),
        }
