"""
Unit tests for the Path Finder (find_relationship_paths).
"""

import pytest

from src.agents.model_query import path_finder
from src.agents.model_query.options import PathQueryOptions
from src.agents.model_query.path_finder import find_relationship_paths
from src.shared.exceptions import EntityNotFoundError, InvalidArgumentError


def _hops(path):
    return [(step["source"], step["target"]) for step in path["steps"]]


def _assert_well_formed(paths, source_id, max_depth):
    for path in paths:
        assert len(path["steps"]) == path["length"]
        assert path["length"] <= max_depth
        visited = [source_id] + [step["target"] for step in path["steps"]]
        assert len(visited) == len(set(visited))
    lengths = [p["length"] for p in paths]
    assert lengths == sorted(lengths)


class TestSimpleChains:
    """A → B → C with no hierarchy between the three."""

    @pytest.fixture
    def chain(self, snapshot_factory):
        return snapshot_factory([("A", "B"), ("B", "C")]).elements

    def test_two_hop_path(self, chain):
        paths = find_relationship_paths(chain, "A", "C", PathQueryOptions.create(max_depth=3))
        assert len(paths) == 1
        assert paths[0]["length"] == 2
        assert _hops(paths[0]) == [("A", "B"), ("B", "C")]

    def test_depth_one_finds_nothing(self, chain):
        paths = find_relationship_paths(chain, "A", "C", PathQueryOptions.create(max_depth=1))
        assert paths == []

    def test_reverse_direction_is_empty(self, chain):
        assert find_relationship_paths(chain, "C", "A") == []

    def test_step_carries_relationship_record(self, chain):
        step = find_relationship_paths(chain, "A", "B")[0]["steps"][0]
        assert step == {
            "source": "A",
            "target": "B",
            "relationship": {
                "kind": None,
                "title": None,
                "description": None,
                "technology": None,
                "tags": [],
            },
        }


class TestShopPaths:
    """Paths through the shop model, including nested relationships and cycles."""

    def test_direct_and_two_hop(self, shop):
        paths = find_relationship_paths(shop, "shop.frontend", "shop.backend")
        assert [p["length"] for p in paths] == [1, 2]
        assert _hops(paths[0]) == [("shop.frontend", "shop.backend")]
        assert _hops(paths[1]) == [
            ("shop.frontend", "shop.cache"),
            ("shop.cache", "shop.backend"),
        ]
        assert paths[0]["steps"][0]["relationship"]["title"] == "Calls API"
        assert paths[1]["steps"][1]["relationship"]["kind"] == "syncs-with"

    def test_depth_limit(self, shop):
        paths = find_relationship_paths(
            shop, "customer", "shop.backend", PathQueryOptions.create(max_depth=2),
        )
        assert [p["length"] for p in paths] == [2]

        paths = find_relationship_paths(shop, "customer", "shop.backend")
        assert [p["length"] for p in paths] == [2, 3]
        _assert_well_formed(paths, "customer", 3)

    def test_nested_relationship_is_followed(self, shop):
        """frontend inherits auth.service -> payments when indirect."""
        paths = find_relationship_paths(shop, "shop.frontend", "payments")
        assert len(paths) == 1
        assert _hops(paths[0]) == [("shop.frontend.auth.service", "payments")]

    def test_direct_only_ignores_nested_relationship(self, shop):
        options = PathQueryOptions.create(include_indirect=False)
        assert find_relationship_paths(shop, "shop.frontend", "payments", options) == []

    def test_paths_do_not_share_steps(self, shop):
        """customer -> frontend starts both paths; editing one leaves the other intact."""
        paths = find_relationship_paths(shop, "customer", "shop.backend")
        first, second = paths[0]["steps"][0], paths[1]["steps"][0]
        assert first == second

        first["target"] = "edited"
        first["relationship"]["tags"].append("edited")

        assert second["target"] == "shop.frontend"
        assert second["relationship"]["tags"] == []
        assert find_relationship_paths(shop, "customer", "shop.backend")[0]["steps"][0] == second

    def test_cycle_is_not_revisited(self, shop):
        """backend -> frontend -> backend is discarded, frontend -> cache completes."""
        paths = find_relationship_paths(shop, "shop.backend", "shop.cache")
        assert len(paths) == 1
        assert _hops(paths[0]) == [
            ("shop.backend", "shop.frontend"),
            ("shop.frontend", "shop.cache"),
        ]
        _assert_well_formed(paths, "shop.backend", 3)

    def test_deployment_namespace(self, shop_snapshot):
        paths = find_relationship_paths(shop_snapshot.deployment, "prod.eu", "prod.us")
        assert _hops(paths[0]) == [("prod.eu.vm1", "prod.us")]


class TestValidation:
    """Contract violations are rejected before any traversal."""

    @pytest.fixture
    def no_traversal(self, monkeypatch):
        def _fail(*args, **kwargs):
            raise AssertionError("traversal must not start")

        monkeypatch.setattr(path_finder, "outgoing", _fail)

    def test_same_source_and_target(self, shop, no_traversal):
        with pytest.raises(InvalidArgumentError, match="must be different"):
            find_relationship_paths(shop, "shop.backend", "shop.backend")

    def test_source_is_ancestor(self, shop, no_traversal):
        with pytest.raises(InvalidArgumentError, match="parent-child"):
            find_relationship_paths(shop, "shop", "shop.frontend.auth")

    def test_target_is_ancestor(self, shop, no_traversal):
        with pytest.raises(InvalidArgumentError, match="parent-child"):
            find_relationship_paths(shop, "shop.frontend.auth.service", "shop.frontend")

    def test_unknown_source(self, shop, no_traversal):
        with pytest.raises(EntityNotFoundError, match="Source element"):
            find_relationship_paths(shop, "ghost", "shop.backend")

    def test_unknown_target(self, shop, no_traversal):
        with pytest.raises(EntityNotFoundError, match="Target element"):
            find_relationship_paths(shop, "shop.backend", "ghost")


class TestOrderingAndCap:
    """Stable ordering and the 100-path cap."""

    def test_equal_lengths_keep_discovery_order(self, snapshot_factory):
        universe = snapshot_factory(
            [("A", "X1"), ("A", "X2"), ("A", "C"), ("X1", "C"), ("X2", "C")]
        ).elements
        paths = find_relationship_paths(universe, "A", "C")
        assert [_hops(p) for p in paths] == [
            [("A", "C")],
            [("A", "X1"), ("X1", "C")],
            [("A", "X2"), ("X2", "C")],
        ]

    def test_paths_sorted_by_length(self, snapshot_factory):
        universe = snapshot_factory(
            [("A", "B"), ("B", "C"), ("C", "D"), ("A", "E"), ("E", "D")]
        ).elements
        paths = find_relationship_paths(universe, "A", "D")
        assert [p["length"] for p in paths] == [2, 3]
        assert _hops(paths[0]) == [("A", "E"), ("E", "D")]

    def test_cap_at_100_by_discovery_order(self, snapshot_factory):
        """12 x 12 three-hop paths exist; the first 100 discovered are kept."""
        middles = [f"m{i:02d}" for i in range(1, 13)]
        lowers = [f"n{j:02d}" for j in range(1, 13)]
        edges = [("s", m) for m in middles]
        edges += [(m, n) for m in middles for n in lowers]
        edges += [(n, "t") for n in lowers]
        universe = snapshot_factory(edges).elements

        paths = find_relationship_paths(universe, "s", "t")

        assert len(paths) == 100
        expected = [(m, n) for m in middles for n in lowers][:100]
        assert [(p["steps"][0]["target"], p["steps"][1]["target"]) for p in paths] == expected
        _assert_well_formed(paths, "s", 3)

    def test_dense_cyclic_graph_terminates(self, snapshot_factory):
        ids = [f"v{i}" for i in range(6)]
        edges = [(a, b) for a in ids for b in ids if a != b]
        universe = snapshot_factory(edges).elements

        options = PathQueryOptions.create(max_depth=5)
        paths = find_relationship_paths(universe, "v0", "v5", options)

        assert 0 < len(paths) <= 100
        _assert_well_formed(paths, "v0", 5)
