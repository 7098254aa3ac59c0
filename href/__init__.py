"""
HREF - High-Resolution Edit Format

Deterministic replay of captured text-editing sessions.
"""

__version__ = "0.1.0"
