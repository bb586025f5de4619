"""Command-line entry points (python -m starname_genesis.tools.<name>)."""
