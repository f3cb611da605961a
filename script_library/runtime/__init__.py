"""Host runtime inspection.

Public Interface:
    - RuntimeIdentifier: Platform tag enumeration
    - get_runtime_identifier: Detect the current host's tag
"""

from .platform import RuntimeIdentifier
from .platform import get_runtime_identifier

__all__ = [
    "RuntimeIdentifier",
    "get_runtime_identifier",
]
