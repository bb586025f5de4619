"""
Structured logging for starname-genesis.

JSON logs with timestamp, level, event_type and stage-specific keys.
Use get_logger() in every module.
"""

from starname_genesis.genesis_logging.logger import bind_stage, configure_structlog, get_logger

__all__ = ["bind_stage", "configure_structlog", "get_logger"]
