"""
Migration engine: deterministic transformation of the legacy dump into a
starname genesis.

Stages (in pipeline order): normalizer, identity, escrow, converter, audit,
composer, patches, gentx. pipeline.migrate() runs them all.
"""
