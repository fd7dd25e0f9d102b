"""
Logging setup shared by the MCP servers.

Provides a consistent log format so that tool calls can be followed
across the server and the query modules.
"""

import logging


def setup_logging(agent_name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure logging for an agent.

    Args:
        agent_name: Name of the agent (used as logger prefix).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger(agent_name)
