"""
Configuration management for starname-genesis.

Environment-driven settings (paths, chain binary, endpoints, timeouts) plus
the static registries the migration consumes. Exposes get_settings() as the
single entry point; stages receive the tables explicitly.
"""

from starname_genesis.config.settings import MigrationSettings, get_settings  # noqa: F401

__all__ = ["MigrationSettings", "get_settings"]
