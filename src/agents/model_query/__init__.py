"""Model Query Agent — MCP Server. Architecture model traversal and relationship queries."""

from src.agents.model_query.projects import ProjectRegistry
from src.agents.model_query.query_service import ModelQueryService

__all__ = [
    "ProjectRegistry",
    "ModelQueryService",
]
