"""
Model Query Agent — MCP Server

Exposes read-only tools over the architecture model snapshots loaded
from ``MODEL_QUERY_MODELS_DIR``.  Each tool's docstring is written for
the calling LLM so it knows *when* and *how* to call it.

Run as:  python -m src.agents.model_query.server        (SSE transport)
"""

import json

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from src.agents.model_query.config import ModelQuerySettings
from src.agents.model_query.projects import ProjectRegistry
from src.agents.model_query.query_service import ModelQueryService
from src.shared.logging import setup_logging

logger = setup_logging("model_query", level="INFO")

# ─── Shared resources (lazy init) ─────────────────────────

# Configure transport security to allow Docker service names
transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=False,
    allowed_hosts=["model_query", "model_query:8005", "localhost", "127.0.0.1", "0.0.0.0"],
    allowed_origins=["*"],
)

mcp = FastMCP("ModelQuery", transport_security=transport_security)

_settings: ModelQuerySettings | None = None
_service: ModelQueryService | None = None


def _get_settings() -> ModelQuerySettings:
    """Lazy-initialise settings from environment variables."""
    global _settings
    if _settings is None:
        _settings = ModelQuerySettings()
    return _settings


def _get_service() -> ModelQueryService:
    """Lazy-initialise the project registry and query service on first tool call."""
    global _service
    if _service is None:
        settings = _get_settings()
        registry = ProjectRegistry(default_project=settings.default_project)
        loaded = registry.load_directory(settings.models_dir)
        logger.info("Loaded %d project(s) from %s", loaded, settings.models_dir)
        _service = ModelQueryService(registry)
    return _service


# ─── Tool 1 ──────────────────────────────────────────────


@mcp.tool()
def find_relationship_paths(
    source_id: str,
    target_id: str,
    max_depth: int = 3,
    include_indirect: bool = True,
    namespace: str = "element",
    project: str | None = None,
) -> str:
    """Discover all chains of relationships between two elements (multi-hop).

    Use when asked "how does X reach Y?", "what connects X to Y?" or
    "is there a dependency path from X to Y?".

    Paths are found breadth-first, never visit an element twice, are
    sorted shortest first and are limited to 100.  Returns an empty list
    when no path exists.  Rejects source == target and source/target in a
    parent-child relationship.

    Args:
        source_id: Source element FQN (e.g. "shop.frontend").
        target_id: Target element FQN (e.g. "shop.backend").
        max_depth: Maximum hops per path (default 3, capped at 5).
        include_indirect: Also follow relationships of nested elements.
        namespace: "element" (default) or "deployment".
        project: Project id.  Defaults to "default" if omitted.
    """
    logger.info("find_relationship_paths %s -> %s (max_depth=%s)", source_id, target_id, max_depth)
    result = _get_service().find_relationship_paths(
        source_id, target_id, max_depth, include_indirect, namespace, project,
    )
    return json.dumps(result, default=str)


# ─── Tool 2 ──────────────────────────────────────────────


@mcp.tool()
def query_graph(
    element_id: str,
    query_type: str,
    include_indirect: bool = True,
    namespace: str = "element",
    project: str | None = None,
) -> str:
    """Query element hierarchy and relationships in the architecture graph.

    Query types:
      "ancestors"   — parents up to the root, closest first
      "descendants" — all nested elements, recursively
      "siblings"    — elements sharing the same parent
      "children"    — direct children only
      "parent"      — the direct parent (empty list for a root)
      "incomers"    — elements with relationships INTO this element
      "outgoers"    — elements receiving relationships FROM this element

    Args:
        element_id: Element id (FQN) to query.
        query_type: One of the query types above.
        include_indirect: For incomers/outgoers, include relationships of
              nested elements (default True).  Ignored otherwise.
        namespace: "element" (default) or "deployment".
        project: Project id.  Defaults to "default" if omitted.
    """
    logger.info("query_graph %s %s", query_type, element_id)
    result = _get_service().query_graph(
        element_id, query_type, include_indirect, namespace, project,
    )
    return json.dumps(result, default=str)


# ─── Tool 3 ──────────────────────────────────────────────


@mcp.tool()
def query_incomers_graph(
    element_id: str,
    include_indirect: bool = True,
    max_depth: int = 50,
    max_nodes: int = 1000,
    namespace: str = "element",
    project: str | None = None,
) -> str:
    """Complete upstream graph: everything that feeds into an element.

    Breadth-first over incoming relationships, recursively.  Use for
    "what feeds into X?", "trace the lineage of X" or "what are all the
    producers of X?".  One call returns the whole subgraph, each node with
    its incomers and its distance from the element (0 = the element).

    If the response has truncated=true, increase max_nodes or reduce
    max_depth.

    Args:
        element_id: Element id (FQN) to start from.
        include_indirect: Include relationships of nested elements.
        max_depth: Maximum traversal depth (default 50, max 100).
        max_nodes: Maximum number of nodes (default 1000, max 5000).
        namespace: "element" (default) or "deployment".
        project: Project id.  Defaults to "default" if omitted.
    """
    logger.info("query_incomers_graph %s", element_id)
    result = _get_service().query_subgraph(
        element_id, "incomers", include_indirect, max_depth, max_nodes, namespace, project,
    )
    return json.dumps(result, default=str)


# ─── Tool 4 ──────────────────────────────────────────────


@mcp.tool()
def query_outgoers_graph(
    element_id: str,
    include_indirect: bool = True,
    max_depth: int = 50,
    max_nodes: int = 1000,
    namespace: str = "element",
    project: str | None = None,
) -> str:
    """Complete downstream graph: everything an element depends on.

    Same as query_incomers_graph but follows outgoing relationships; each
    node lists its outgoers.  Use for "what does X depend on, all the way
    down?" or "what is impacted downstream of X?".

    Args:
        element_id: Element id (FQN) to start from.
        include_indirect: Include relationships of nested elements.
        max_depth: Maximum traversal depth (default 50, max 100).
        max_nodes: Maximum number of nodes (default 1000, max 5000).
        namespace: "element" (default) or "deployment".
        project: Project id.  Defaults to "default" if omitted.
    """
    logger.info("query_outgoers_graph %s", element_id)
    result = _get_service().query_subgraph(
        element_id, "outgoers", include_indirect, max_depth, max_nodes, namespace, project,
    )
    return json.dumps(result, default=str)


# ─── Tool 5 ──────────────────────────────────────────────


@mcp.tool()
def query_by_tags(
    all_of: list[str] | None = None,
    any_of: list[str] | None = None,
    none_of: list[str] | None = None,
    project: str | None = None,
) -> str:
    """Find elements and deployment nodes by tags with AND / OR / NOT logic.

    The three conditions are combined with AND; at least one must hold a
    tag.  Tags are case-sensitive.  Limited to 50 results.

    Examples:
      Public APIs:                 all_of=["public", "api"]
      Deprecated or legacy:        any_of=["deprecated", "legacy"]
      Public but not deprecated:   all_of=["public"], none_of=["deprecated"]

    Args:
        all_of: Must have ALL these tags.
        any_of: Must have ANY of these tags.
        none_of: Must have NONE of these tags.
        project: Project id.  Defaults to "default" if omitted.
    """
    logger.info("query_by_tags all_of=%s any_of=%s none_of=%s", all_of, any_of, none_of)
    result = _get_service().query_by_tags(all_of, any_of, none_of, project)
    return json.dumps(result, default=str)


# ─── Tool 6 ──────────────────────────────────────────────


@mcp.tool()
def query_by_metadata(
    key: str,
    value: str | None = None,
    match_mode: str = "exact",
    project: str | None = None,
) -> str:
    """Find elements and deployment nodes by metadata key/value.

    Match modes:
      "exact"    — value equals the metadata value (case-sensitive)
      "contains" — metadata value contains value (case-insensitive)
      "exists"   — element has the key; value is ignored

    List-valued metadata matches when any item matches; matchedValue
    reports which one.  Limited to 50 results.

    Args:
        key: Metadata key to filter by (e.g. "owner").
        value: Value to match (ignored for "exists").
        match_mode: "exact" (default), "contains" or "exists".
        project: Project id.  Defaults to "default" if omitted.
    """
    logger.info("query_by_metadata %s %s %r", key, match_mode, value)
    result = _get_service().query_by_metadata(key, value, match_mode, project)
    return json.dumps(result, default=str)


# ─── Tool 7 ──────────────────────────────────────────────


@mcp.tool()
def list_projects() -> str:
    """List the loaded architecture projects with element and relationship counts.

    Use first when unsure which project id to pass to the other tools.
    """
    return json.dumps(_get_service().list_projects(), default=str)


# ─── Entry point ──────────────────────────────────────────

# Create the ASGI app for uvicorn
app = mcp.sse_app

if __name__ == "__main__":
    import uvicorn

    settings = _get_settings()
    logger.info(f"Starting Model Query MCP server (SSE transport on {settings.host}:{settings.port})")

    uvicorn.run(
        "src.agents.model_query.server:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
        factory=True,
    )
