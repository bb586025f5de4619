"""
starname-genesis: migrate the legacy IOV weave ledger into a starname genesis.

Sub-packages:
- migration: the deterministic transformation engine (normalize, resolve,
  consolidate, convert, compose, patch, incorporate gentxs).
- ingestion: loaders for the dump, legacy genesis, indicative sends and datasets.
- config: environment and static registries.
- tools: command-line entry points.
"""

__version__ = "0.1.0"
