"""Runtime identifier detection.

Contract:
- Inputs: Platform string (default: sys.platform)
- Outputs: RuntimeIdentifier tag used to select platform-specific assets
- Side Effects: None
"""

import sys
from enum import Enum


class RuntimeIdentifier(str, Enum):
    """Platform tag matched against manifest runtime asset groups."""

    WINDOWS = "win"
    MACOS = "osx"
    LINUX = "linux"

    def __str__(self: "RuntimeIdentifier") -> str:
        return self.value


def get_runtime_identifier(platform: str | None = None) -> RuntimeIdentifier:
    """Classify a platform string into one of three runtime identifiers.

    Args:
        platform: Value in the form of ``sys.platform`` (default: current host)

    Returns:
        MACOS for darwin, WINDOWS for win32/cygwin/msys, LINUX otherwise

    Example:
        >>> get_runtime_identifier("darwin")
        <RuntimeIdentifier.MACOS: 'osx'>
        >>> get_runtime_identifier("linux")
        <RuntimeIdentifier.LINUX: 'linux'>
    """
    platform = sys.platform if platform is None else platform

    if platform.startswith("darwin"):
        return RuntimeIdentifier.MACOS
    if platform.startswith(("win32", "cygwin", "msys")):
        return RuntimeIdentifier.WINDOWS
    return RuntimeIdentifier.LINUX
