"""Dependency manifest reading.

Public Interface:
    - ManifestReader: Builds a dependency graph from a working directory
"""

from .reader import ManifestReader

__all__ = ["ManifestReader"]
