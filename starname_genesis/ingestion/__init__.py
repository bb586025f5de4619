"""
Input loaders: legacy dump, legacy genesis, indicative sends (legacy_sources)
and the premium / reserved CSV datasets (datasets).
"""
