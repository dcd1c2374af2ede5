"""
Frame extraction operations.

How many frames to take is estimated from the upload's byte size, while
where to take them is derived from the probed duration. A badly probed
duration changes frame spacing, never the number of frames.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from videodigest.config.loader import PipelineConfig
from videodigest.models.analysis import ExtractedFrames
from videodigest.models.progress import ProcessingStage, ProgressTracker
from videodigest.utils.logging import log_timed

if TYPE_CHECKING:
    from pathlib import Path

    from videodigest.tools.ffmpeg import FFmpegTool

logger = logging.getLogger(__name__)

BYTES_PER_MEGABYTE = 1024 * 1024

# Share of overall progress covered by frame extraction
EXTRACTION_PROGRESS_SPAN = 50


def estimate_duration(byte_length: int, config: PipelineConfig | None = None) -> float:
    """Rough duration estimate (seconds) from file size alone."""
    config = config or PipelineConfig()
    estimate = byte_length / BYTES_PER_MEGABYTE * config.seconds_per_megabyte
    return max(config.min_estimated_duration, estimate)


def calculate_frame_count(byte_length: int, config: PipelineConfig | None = None) -> int:
    """Number of frames to extract for an input of ``byte_length`` bytes.

    Always within [config.min_frames, config.max_frames].
    """
    config = config or PipelineConfig()
    estimated = estimate_duration(byte_length, config)
    count = min(
        config.max_frames,
        max(config.min_frames, math.ceil(estimated / config.frame_interval)),
    )
    logger.info(f"Estimated duration: {estimated:.0f}s, extracting {count} frames")
    return count


def frame_timestamps(duration: float, frame_count: int) -> list[int]:
    """Evenly spaced whole-second timestamps starting at 0.

    Spacing is floor(duration / frame_count), but at least one second so
    very short clips do not sample the same instant repeatedly.
    """
    if frame_count <= 0:
        return []
    interval = max(1, math.floor(duration / frame_count))
    return [i * interval for i in range(frame_count)]


def is_readable_image(path: Path) -> bool:
    """True if ``path`` is a non-empty file Pillow recognises as an image."""
    try:
        if not path.is_file() or path.stat().st_size == 0:
            return False
        with Image.open(path) as img:
            img.verify()
        return True
    except (OSError, UnidentifiedImageError, SyntaxError) as e:
        logger.debug(f"Unreadable frame {path.name}: {e}")
        return False


async def extract_key_frames(
    ffmpeg: FFmpegTool,
    input_path: Path,
    workspace: Path,
    frame_count: int,
    duration: float,
    tracker: ProgressTracker | None = None,
    config: PipelineConfig | None = None,
) -> ExtractedFrames:
    """Extract ``frame_count`` stills spread over ``duration`` seconds.

    Timestamps whose extraction fails or yields an unreadable file are
    skipped, so fewer frames than requested may come back. Frame files are
    deleted as soon as they are read, except the first one, which is kept
    as the thumbnail.

    Args:
        ffmpeg: FFmpeg tool
        input_path: Video in the workspace
        workspace: Run workspace that receives the frame files
        frame_count: Target number of frames
        duration: Probed duration in seconds
        tracker: Progress tracker for the run
        config: Pipeline configuration

    Returns:
        ExtractedFrames with frame bytes in timestamp order
    """
    config = config or PipelineConfig()
    tracker = tracker or ProgressTracker()
    t0 = time.time()
    log_timed(f"Extracting {frame_count} key frames...", t0)

    result = ExtractedFrames()
    for i, timestamp in enumerate(frame_timestamps(duration, frame_count)):
        frame_path = workspace / f"frame_{i}.png"

        extracted = await asyncio.to_thread(
            ffmpeg.extract_frame,
            input_path,
            frame_path,
            timestamp,
            timeout=config.frame_timeout,
        )
        if extracted is None or not is_readable_image(frame_path):
            logger.warning(f"Frame {i} at {timestamp}s was not created, skipping...")
            continue

        data = frame_path.read_bytes()
        result.frames.append(data)
        result.timestamps.append(timestamp)

        if result.thumbnail is None:
            result.thumbnail = data
        else:
            try:
                frame_path.unlink()
            except OSError as e:
                logger.warning(f"Failed to delete frame file {frame_path}: {e}")

        tracker.report(
            ProcessingStage.EXTRACTING,
            i / frame_count * EXTRACTION_PROGRESS_SPAN,
            f"Extracted frame {i + 1}/{frame_count}",
        )

    log_timed(f"Extracted {len(result)}/{frame_count} frames", t0)
    return result
