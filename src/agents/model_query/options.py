"""
Query options with documented defaults and inclusive bounds.

Values outside a bound are clamped to the nearest bound rather than
rejected.  Kept free of pydantic and of the MCP tool schema so the
clamping rules can be exercised directly.
"""

from dataclasses import dataclass

# Path search
PATH_DEPTH_DEFAULT = 3
PATH_DEPTH_MIN = 1
PATH_DEPTH_MAX = 5
MAX_PATHS = 100

# Subgraph closure
SUBGRAPH_DEPTH_DEFAULT = 50
SUBGRAPH_DEPTH_MIN = 1
SUBGRAPH_DEPTH_MAX = 100
SUBGRAPH_NODES_DEFAULT = 1000
SUBGRAPH_NODES_MIN = 1
SUBGRAPH_NODES_MAX = 5000

# Tag / metadata search
MAX_MATCHES = 50


def clamp(value: int | None, default: int, lower: int, upper: int) -> int:
    """Return ``value`` capped to ``[lower, upper]``; ``None`` means default."""
    if value is None:
        return default
    return max(lower, min(int(value), upper))


@dataclass(frozen=True)
class PathQueryOptions:
    """Bounds for ``find_relationship_paths``.

    Attributes:
        max_depth: Maximum hops per path, in [1, 5], default 3.
        include_indirect: Follow relationships of descendants too.
        max_paths: Global cap on completed paths.
    """

    max_depth: int = PATH_DEPTH_DEFAULT
    include_indirect: bool = True
    max_paths: int = MAX_PATHS

    @classmethod
    def create(
        cls,
        max_depth: int | None = None,
        include_indirect: bool = True,
    ) -> "PathQueryOptions":
        return cls(
            max_depth=clamp(max_depth, PATH_DEPTH_DEFAULT, PATH_DEPTH_MIN, PATH_DEPTH_MAX),
            include_indirect=include_indirect,
        )


@dataclass(frozen=True)
class SubgraphQueryOptions:
    """Bounds for ``extract_subgraph``.

    Attributes:
        max_depth: Deepest level explored, in [1, 100], default 50.
        max_nodes: Node quota, in [1, 5000], default 1000.
        include_indirect: Follow relationships of descendants too.
    """

    max_depth: int = SUBGRAPH_DEPTH_DEFAULT
    max_nodes: int = SUBGRAPH_NODES_DEFAULT
    include_indirect: bool = True

    @classmethod
    def create(
        cls,
        max_depth: int | None = None,
        max_nodes: int | None = None,
        include_indirect: bool = True,
    ) -> "SubgraphQueryOptions":
        return cls(
            max_depth=clamp(
                max_depth, SUBGRAPH_DEPTH_DEFAULT, SUBGRAPH_DEPTH_MIN, SUBGRAPH_DEPTH_MAX,
            ),
            max_nodes=clamp(
                max_nodes, SUBGRAPH_NODES_DEFAULT, SUBGRAPH_NODES_MIN, SUBGRAPH_NODES_MAX,
            ),
            include_indirect=include_indirect,
        )
