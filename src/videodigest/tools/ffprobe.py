"""
FFprobe tool wrapper for reading media duration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from videodigest.tools.base import ToolResult, VideoTool
from videodigest.utils.system import find_tool

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class FFprobeTool(VideoTool):
    """Wrapper for FFprobe media inspection tool."""

    @property
    def name(self) -> str:
        return "ffprobe"

    def get_path(self) -> str:
        """Get path to ffprobe executable."""
        return find_tool("ffprobe", self._path)

    def probe_duration(
        self,
        file_path: Path | str,
        timeout: float | None = 30,
    ) -> ToolResult:
        """Run the duration probe and return the raw result.

        Output is a single line holding the container duration in seconds.
        """
        args = [
            "-v", "quiet",
            "-show_entries", "format=duration",
            "-of", "csv=p=0",
            str(file_path),
        ]
        return self._run(args, timeout=timeout)

    def get_duration(
        self,
        file_path: Path | str,
        timeout: float | None = 30,
    ) -> float | None:
        """Get the duration of a file.

        Args:
            file_path: Path to video/audio file
            timeout: Seconds to wait for ffprobe

        Returns:
            Duration in seconds, or None if failed or unparseable
        """
        result = self.probe_duration(file_path, timeout=timeout)
        if not result.success:
            logger.warning(f"ffprobe failed: {result.failure_reason}")
            return None

        return parse_duration(result.stdout)


def parse_duration(output: str) -> float | None:
    """Parse ffprobe's duration output into positive seconds.

    Returns None for empty, non-numeric ("N/A"), ambiguous (several values)
    or non-positive output.
    """
    values = output.split()
    if len(values) != 1:
        return None

    try:
        duration = float(values[0])
    except ValueError:
        return None

    # Rejects nan/inf and zero-length containers
    if not 0 < duration < float("inf"):
        return None
    return duration
