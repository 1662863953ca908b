"""
Resource Search Backend

Hybrid multi-strategy search over a resource directory: vector, keyword,
intent-driven taxonomy and geospatial browse retrieval fused into one ranking.
"""

__version__ = "1.0.0"
