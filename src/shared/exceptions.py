"""
Custom exception hierarchy for the model query system.

All agent errors inherit from AgentError so they can be caught
uniformly at the server level.
"""


class AgentError(Exception):
    """Base exception for all agent errors."""

    def __init__(self, message: str, agent_name: str = "unknown"):
        self.agent_name = agent_name
        super().__init__(f"[{agent_name}] {message}")


class ModelQueryError(AgentError):
    """Errors raised by the Model Query Agent."""

    def __init__(self, message: str):
        super().__init__(message, agent_name="model_query")


class EntityNotFoundError(ModelQueryError):
    """An element or deployment node id does not resolve in the snapshot."""

    def __init__(self, entity_id: str, project_id: str, label: str = "Element"):
        self.entity_id = entity_id
        self.project_id = project_id
        super().__init__(f'{label} "{entity_id}" not found in project "{project_id}"')


class ProjectNotFoundError(ModelQueryError):
    """No model snapshot is registered for the requested project."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f'Project "{project_id}" not found')


class InvalidArgumentError(ModelQueryError):
    """The caller violated an operation's contract."""
    pass


class ModelLoadError(AgentError):
    """A model document could not be turned into a snapshot."""

    def __init__(self, message: str):
        super().__init__(message, agent_name="model_loader")
