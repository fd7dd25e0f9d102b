"""Model Query Agent configuration."""

from src.shared.config import BaseAgentSettings


class ModelQuerySettings(BaseAgentSettings):
    """Settings specific to the Model Query Agent."""

    agent_name: str = "model_query"
    host: str = "0.0.0.0"
    port: int = 8005
    models_dir: str = "models"
    default_project: str = "default"

    class Config(BaseAgentSettings.Config):
        env_prefix = "MODEL_QUERY_"
