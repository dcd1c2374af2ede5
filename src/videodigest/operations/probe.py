"""
Media duration probing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from videodigest.config.defaults import FALLBACK_DURATION, PROBE_TIMEOUT

if TYPE_CHECKING:
    from pathlib import Path

    from videodigest.tools.ffprobe import FFprobeTool

logger = logging.getLogger(__name__)


def probe_duration(
    ffprobe: FFprobeTool,
    input_path: Path,
    fallback: float = FALLBACK_DURATION,
    timeout: float | None = PROBE_TIMEOUT,
) -> float:
    """Determine the duration of a media file.

    Duration only steers frame spacing, so any failure (spawn error,
    non-zero exit, timeout, unparseable output) yields ``fallback``
    instead of an error.

    Args:
        ffprobe: Probe tool
        input_path: File to inspect
        fallback: Duration returned when probing fails
        timeout: Seconds to wait for the probe

    Returns:
        Duration in seconds
    """
    duration = ffprobe.get_duration(input_path, timeout=timeout)
    if duration is None:
        logger.warning(
            f"Could not determine duration of {input_path.name}, using default {fallback}s"
        )
        return fallback

    logger.info(f"Probed duration: {duration:.1f}s")
    return duration
