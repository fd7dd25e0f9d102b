"""
Project Registry — maps project ids to immutable model snapshots.

Snapshots are replaced wholesale on (re)load.  A query that already
holds a snapshot keeps reading that object, so it never observes a
half-updated model.
"""

import logging
from pathlib import Path
from typing import Any

from src.agents.model_query.document import load_snapshot
from src.agents.model_query.model import ModelSnapshot
from src.shared.exceptions import ProjectNotFoundError

logger = logging.getLogger("model_query.projects")

DEFAULT_PROJECT_ID = "default"


class ProjectRegistry:
    """In-memory project resolver."""

    def __init__(self, default_project: str = DEFAULT_PROJECT_ID) -> None:
        self._snapshots: dict[str, ModelSnapshot] = {}
        self.default_project = default_project

    def register(self, snapshot: ModelSnapshot) -> None:
        """Add or replace the snapshot of ``snapshot.project_id``."""
        replaced = snapshot.project_id in self._snapshots
        self._snapshots[snapshot.project_id] = snapshot
        logger.info(
            "%s project %s (%d elements, %d deployment nodes)",
            "Replaced" if replaced else "Registered",
            snapshot.project_id, len(snapshot.elements), len(snapshot.deployment),
        )

    def ensure_project_id(self, project: str | None) -> str:
        """Fall back to the default project when none is given."""
        return project or self.default_project

    def get(self, project: str | None = None) -> ModelSnapshot:
        """Resolve a project id (or the default) to its snapshot."""
        project_id = self.ensure_project_id(project)
        snapshot = self._snapshots.get(project_id)
        if snapshot is None:
            raise ProjectNotFoundError(project_id)
        return snapshot

    def load_directory(self, directory: str | Path) -> int:
        """Load every ``*.json`` model document in ``directory``.

        Returns:
            Number of projects loaded.
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.warning("Models directory %s does not exist, no projects loaded", directory)
            return 0

        count = 0
        for path in sorted(directory.glob("*.json")):
            self.register(load_snapshot(path))
            count += 1
        return count

    def list_projects(self) -> list[dict[str, Any]]:
        """Summary of every registered project, sorted by id."""
        summaries = []
        for project_id in sorted(self._snapshots):
            snapshot = self._snapshots[project_id]
            summaries.append({
                "id": project_id,
                "title": snapshot.title,
                "metadata": dict(snapshot.metadata),
                "elements": len(snapshot.elements),
                "deploymentNodes": len(snapshot.deployment),
                "relationships": (
                    len(snapshot.elements.relationships)
                    + len(snapshot.deployment.relationships)
                ),
            })
        return summaries
