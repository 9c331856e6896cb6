"""
py_mercator: sparse tile-based terrain with incremental region indexing.
"""

__version__ = "0.1.0"
