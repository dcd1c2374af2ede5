"""
videodigest.providers.types - Result types returned by providers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass
class TranscriptionSegment:
    """A single time-bounded segment of transcribed audio."""

    start: float  # seconds
    end: float  # seconds
    text: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TranscriptionResult:
    """Complete transcription result.

    Attributes:
        text: Full transcript as plain text.
        segments: Timed transcript segments, when the service returns them.
        language: Detected or specified language code.
        duration: Audio duration in seconds as reported by the service
            (None if not reported).
        provider: Name of the provider that generated this result.
    """

    text: str
    segments: list[TranscriptionSegment] = field(default_factory=list)
    language: str | None = None
    duration: float | None = None
    provider: str = ""

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "segments": [s.to_dict() for s in self.segments],
            "language": self.language,
            "duration": self.duration,
            "provider": self.provider,
        }
