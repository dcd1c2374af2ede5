"""
Custom exceptions for videodigest.

All videodigest exceptions inherit from VideodigestError for easy catching.
"""

from __future__ import annotations

from typing import Any


class VideodigestError(Exception):
    """Base exception for all videodigest errors."""

    pass


class ConfigError(VideodigestError):
    """Invalid configuration value or file."""

    pass


class WorkspaceError(VideodigestError):
    """Scratch directory for a run could not be created."""

    pass


class VisualAnalysisError(VideodigestError):
    """Error analyzing extracted frames with the vision model."""

    pass


class FrameExtractionError(VisualAnalysisError):
    """No usable frame could be extracted from the video."""

    pass


class AudioExtractionError(VideodigestError):
    """Error demuxing/transcoding the audio track."""

    pass


class TranscriptionError(VideodigestError):
    """Error during audio transcription."""

    pass


class VideoProcessingError(VideodigestError):
    """Unrecoverable failure of a video processing run.

    Raised to the caller after the run's workspace has been cleaned up.
    The underlying exception is available as ``__cause__``.

    Attributes:
        message: Human-readable error message
        filename: Original filename of the input being processed
    """

    def __init__(self, message: str, *, filename: str | None = None):
        super().__init__(message)
        self.message = message
        self.filename = filename

    @classmethod
    def wrap(cls, error: BaseException, filename: str | None = None) -> VideoProcessingError:
        """Build the caller-facing error for an underlying cause."""
        cause = str(error) or error.__class__.__name__
        return cls(f"Failed to process video: {cause}", filename=filename)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a structured dict for error responses."""
        result: dict[str, Any] = {
            "type": self.__class__.__name__,
            "message": self.message,
        }
        if self.filename:
            result["filename"] = self.filename
        return result
