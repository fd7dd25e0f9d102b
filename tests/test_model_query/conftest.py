"""
Shared fixtures for the Model Query agent tests.

``SHOP_DOCUMENT`` is a small but complete model:

    customer ──Uses──▶ shop.frontend ──Calls API──▶ shop.backend ──▶ shop.database
                           │    ▲                        ▲
                           │    └──Pushes events─────────┤
                           └──Reads from──▶ shop.cache ──┘ (Updates)

    shop.frontend.auth.service ──Verifies──▶ payments
    shop.frontend.auth ──Delegates──▶ shop.frontend.auth.service   (internal)
"""

import copy

import pytest

from src.agents.model_query.document import ModelDocument, build_snapshot
from src.agents.model_query.model import ModelSnapshot
from src.agents.model_query.projects import ProjectRegistry
from src.agents.model_query.query_service import ModelQueryService

SHOP_DOCUMENT = {
    "project": {"id": "default", "title": "Shop"},
    "elements": [
        {"id": "customer", "kind": "actor", "title": "Customer", "tags": ["external"]},
        {
            "id": "shop", "kind": "system", "title": "Shop", "tags": ["public"],
            "metadata": {"owner": ["platform-team", "web-team"]},
        },
        {
            "id": "shop.frontend", "kind": "container", "title": "Frontend",
            "tags": ["public", "api"],
            "metadata": {"owner": "web-team", "tier": "critical"},
        },
        {"id": "shop.frontend.auth", "kind": "component", "title": "Auth"},
        {"id": "shop.frontend.auth.service", "kind": "component", "title": "Auth Service"},
        {
            "id": "shop.backend", "kind": "container", "title": "Backend",
            "tags": ["api", "critical"],
            "metadata": {"technology": "AWS Lambda"},
        },
        {"id": "shop.cache", "kind": "container", "title": "Cache", "tags": ["legacy"]},
        {"id": "shop.database", "kind": "database", "tags": ["deprecated"]},
        {"id": "payments", "kind": "system", "title": "Payments", "tags": ["external"]},
    ],
    "relationships": [
        {"source": "customer", "target": "shop.frontend", "title": "Uses", "technology": "HTTPS"},
        {
            "source": "shop.frontend", "target": "shop.backend", "kind": "uses",
            "title": "Calls API", "technology": "HTTPS",
        },
        {
            "source": "shop.frontend", "target": "shop.cache", "kind": "uses",
            "title": "Reads from", "technology": "Redis",
        },
        {"source": "shop.cache", "target": "shop.backend", "kind": "syncs-with", "title": "Updates"},
        {
            "source": "shop.backend", "target": "shop.database",
            "title": "Reads/writes", "technology": "SQL", "tags": ["sync"],
        },
        {
            "source": "shop.frontend.auth.service", "target": "payments",
            "title": "Verifies", "technology": "gRPC",
        },
        {"source": "shop.frontend.auth", "target": "shop.frontend.auth.service", "title": "Delegates"},
        {"source": "shop.backend", "target": "shop.frontend", "title": "Pushes events"},
    ],
    "deployment": {
        "nodes": [
            {"id": "prod", "kind": "environment"},
            {
                "id": "prod.eu", "kind": "zone", "title": "EU", "tags": ["critical"],
                "metadata": {"owner": "sre-team"},
            },
            {"id": "prod.eu.vm1", "kind": "vm"},
            {"id": "prod.us", "kind": "zone", "title": "US"},
        ],
        "relationships": [
            {"source": "prod.eu.vm1", "target": "prod.us", "title": "Replicates"},
        ],
    },
    "views": [
        {"id": "index", "title": "Landscape", "type": "element",
         "include": ["customer", "shop", "payments"]},
        {"id": "containers", "title": "Shop containers", "type": "element",
         "include": ["shop.frontend", "shop.backend", "shop.cache", "shop.database"]},
        {"id": "login-flow", "type": "dynamic", "include": ["customer", "shop.frontend"]},
        {"id": "deploy", "title": "Production", "type": "deployment", "include": ["prod", "prod.eu"]},
    ],
}


def make_snapshot(
    edges: list[tuple[str, str]],
    ids: list[str] | None = None,
    project_id: str = "default",
) -> ModelSnapshot:
    """Build a snapshot of flat elements connected by untitled relationships."""
    if ids is None:
        ids = list(dict.fromkeys(e for edge in edges for e in edge))
    document = ModelDocument.model_validate({
        "project": {"id": project_id},
        "elements": [{"id": entity_id, "kind": "component"} for entity_id in ids],
        "relationships": [{"source": s, "target": t} for s, t in edges],
    })
    return build_snapshot(document)


@pytest.fixture
def shop_document() -> dict:
    return copy.deepcopy(SHOP_DOCUMENT)


@pytest.fixture
def shop_snapshot(shop_document) -> ModelSnapshot:
    return build_snapshot(ModelDocument.model_validate(shop_document))


@pytest.fixture
def shop(shop_snapshot):
    """Element universe of the shop model."""
    return shop_snapshot.elements


@pytest.fixture
def registry(shop_snapshot) -> ProjectRegistry:
    registry = ProjectRegistry()
    registry.register(shop_snapshot)
    return registry


@pytest.fixture
def service(registry) -> ModelQueryService:
    return ModelQueryService(registry)


@pytest.fixture
def snapshot_factory():
    """``make_snapshot`` for tests that need a purpose-built graph."""
    return make_snapshot
