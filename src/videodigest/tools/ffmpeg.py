"""
FFmpeg tool wrapper for frame and audio extraction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from videodigest.tools.base import VideoTool
from videodigest.utils.system import find_tool

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class FFmpegTool(VideoTool):
    """Wrapper for FFmpeg video processing tool."""

    @property
    def name(self) -> str:
        return "ffmpeg"

    def get_path(self) -> str:
        """Get path to ffmpeg executable."""
        return find_tool("ffmpeg", self._path)

    def extract_frame(
        self,
        video_path: Path,
        output_path: Path,
        timestamp: float,
        quality: int = 2,
        timeout: float | None = None,
    ) -> Path | None:
        """Extract a single frame from video.

        Args:
            video_path: Path to video file
            output_path: Output image path (format follows the extension)
            timestamp: Time in seconds
            quality: Encoder quality (2=best, 31=worst)
            timeout: Seconds to wait for ffmpeg

        Returns:
            Path to extracted frame, or None if failed
        """
        args = [
            "-ss",
            str(timestamp),
            "-i",
            str(video_path),
            "-vframes",
            "1",
            "-q:v",
            str(quality),
            "-y",
            str(output_path),
        ]

        result = self._run(args, timeout=timeout)
        if not result.success:
            logger.warning(
                f"Frame extraction at {timestamp}s failed: {result.failure_reason}"
            )
            return None

        return output_path if output_path.exists() else None

    def extract_audio(
        self,
        input_path: Path,
        output_path: Path,
        sample_rate: int = 16000,
        channels: int = 1,
        timeout: float | None = None,
    ) -> Path | None:
        """Extract audio from video to 16-bit PCM WAV.

        Optimized for speech recognition with:
        - 16kHz sample rate (whisper native)
        - Mono channel (speech doesn't need stereo)
        - Uncompressed s16le samples

        Args:
            input_path: Path to input video/audio file
            output_path: Output WAV path
            sample_rate: Audio sample rate (default 16000 for whisper)
            channels: Number of audio channels (default 1 for mono)
            timeout: Seconds to wait for ffmpeg

        Returns:
            Path to extracted audio, or None if failed
        """
        args = [
            "-i",
            str(input_path),
            "-vn",  # No video
            "-acodec",
            "pcm_s16le",
            "-ar",
            str(sample_rate),
            "-ac",
            str(channels),
            "-y",  # Overwrite output
            str(output_path),
        ]

        result = self._run(args, timeout=timeout)
        if not result.success:
            logger.error(f"Audio extraction failed: {result.failure_reason}")
            return None

        return output_path if output_path.exists() else None
