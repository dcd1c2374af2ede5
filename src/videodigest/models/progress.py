"""
Progress events emitted while a video is being processed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ProcessingStage(str, Enum):
    """Coarse stage reported to progress sinks."""

    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    SYNTHESIZING = "synthesizing"


@dataclass(frozen=True)
class ProcessingProgress:
    """A single progress update.

    Attributes:
        stage: Pipeline stage the update belongs to
        progress: Percentage complete, 0-100
        message: Human-readable status line
    """

    stage: ProcessingStage
    progress: float
    message: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "stage": self.stage.value,
            "progress": self.progress,
            "message": self.message,
        }


ProgressCallback = Callable[[ProcessingProgress], None]


class ProgressTracker:
    """Delivers progress events for one run to an optional sink.

    Progress is clamped to [0, 100] and never decreases within a run.
    Exceptions raised by the sink are logged and swallowed so a faulty
    reporter cannot break processing.
    """

    def __init__(self, callback: ProgressCallback | None = None):
        self._callback = callback
        self._last = 0.0

    @property
    def last(self) -> float:
        return self._last

    def report(self, stage: ProcessingStage, progress: float, message: str) -> None:
        value = max(self._last, min(100.0, max(0.0, float(progress))))
        self._last = value
        if self._callback is None:
            return

        try:
            self._callback(ProcessingProgress(stage=stage, progress=value, message=message))
        except Exception as e:
            logger.warning(f"Progress callback raised, ignoring: {e}")
