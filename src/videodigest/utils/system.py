"""
System utilities for finding executables.
"""

import shutil
import sys
from pathlib import Path


def find_tool(name: str, override: str | None = None) -> str:
    """Find executable, checking an explicit override and the venv first.

    Args:
        name: Tool name (e.g., "ffmpeg", "ffprobe")
        override: Explicit path from configuration, used as-is when set

    Returns:
        Path to executable (bare name if it could not be located)
    """
    if override:
        return override

    # Check venv bin directory first
    venv = Path(sys.prefix) / "bin" / name
    if venv.exists():
        return str(venv)

    # Fall back to system PATH
    return shutil.which(name) or name
