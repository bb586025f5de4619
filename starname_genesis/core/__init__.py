"""
Core cross-cutting pieces: the exception taxonomy shared by every stage.
"""
