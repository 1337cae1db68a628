"""
codegraph-rca

Code intelligence for root cause analysis:
chunking → embedding cache → pgvector search → change correlation.
"""

__version__ = "0.1.0"
