"""Infrastructure layer for the harmonic explorer API.

Modules:
    metrics        Prometheus metrics registry.
    session_store  In-memory TreeModel sessions with TTL and LRU eviction.
"""
