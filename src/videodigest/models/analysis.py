"""
Result types for video and audio analysis.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field


@dataclass
class BatchAnalysis:
    """Parsed vision response for one batch of frames."""

    key_moments: list[str] = field(default_factory=list)
    descriptions: list[str] = field(default_factory=list)


@dataclass
class VisualAnalysis:
    """Output of the visual path: summary prose plus key moments."""

    summary: str
    key_moments: list[str] = field(default_factory=list)


@dataclass
class AudioAnalysis:
    """Output of the audio path.

    Attributes:
        transcript: Speech transcript, or a placeholder if transcription failed
        duration: Audio duration in seconds (0 when unknown)
        language: Language reported by the transcription service
        confidence: Heuristic confidence of the transcript
    """

    transcript: str
    duration: float = 0
    language: str | None = None
    confidence: float | None = None


@dataclass
class ExtractedFrames:
    """Frames read into memory from a video.

    Attributes:
        frames: Image bytes in timestamp order
        timestamps: Timestamp (seconds) of each extracted frame
        thumbnail: Bytes of the first successfully extracted frame
    """

    frames: list[bytes] = field(default_factory=list)
    timestamps: list[float] = field(default_factory=list)
    thumbnail: bytes | None = None

    def __len__(self) -> int:
        return len(self.frames)


@dataclass(frozen=True)
class VideoAnalysisResult:
    """The single artifact produced by processing a video.

    ``combined_content`` is the document indexed downstream and is never
    empty, even when both the visual and audio paths degraded.
    """

    visual_summary: str
    audio_transcript: str
    key_moments: tuple[str, ...]
    duration_seconds: float
    frame_count: int
    combined_content: str
    confidence: float
    thumbnail: bytes | None = None

    @property
    def thumbnail_base64(self) -> str | None:
        """Thumbnail encoded as base64 text, or None."""
        if self.thumbnail is None:
            return None
        return base64.b64encode(self.thumbnail).decode("ascii")

    def to_dict(self) -> dict:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "visualSummary": self.visual_summary,
            "audioTranscript": self.audio_transcript,
            "keyMoments": list(self.key_moments),
            "duration": self.duration_seconds,
            "frameCount": self.frame_count,
            "combinedContent": self.combined_content,
            "confidence": self.confidence,
            "thumbnail": self.thumbnail_base64,
        }


@dataclass(frozen=True)
class ExtractedText:
    """Indexed text plus display thumbnail handed to document ingestion."""

    content: str
    thumbnail: str | None = None
