"""
State machine for a single video processing run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PipelineState(str, Enum):
    """States a processing run moves through."""

    IDLE = "idle"
    PROBING = "probing"
    EXTRACTING_FRAMES = "extracting_frames"
    ANALYZING_FRAMES = "analyzing_frames"
    DEGRADED_VISUAL = "degraded_visual"
    EXTRACTING_AUDIO = "extracting_audio"
    TRANSCRIBING = "transcribing"
    DEGRADED_AUDIO = "degraded_audio"
    SYNTHESIZING = "synthesizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.FAILED)


# Allowed forward moves; FAILED is reachable from any non-terminal state.
TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.PROBING}),
    PipelineState.PROBING: frozenset({PipelineState.EXTRACTING_FRAMES}),
    PipelineState.EXTRACTING_FRAMES: frozenset({PipelineState.ANALYZING_FRAMES}),
    PipelineState.ANALYZING_FRAMES: frozenset(
        {PipelineState.EXTRACTING_AUDIO, PipelineState.DEGRADED_VISUAL}
    ),
    PipelineState.DEGRADED_VISUAL: frozenset({PipelineState.EXTRACTING_AUDIO}),
    PipelineState.EXTRACTING_AUDIO: frozenset(
        {PipelineState.TRANSCRIBING, PipelineState.DEGRADED_AUDIO}
    ),
    PipelineState.TRANSCRIBING: frozenset(
        {PipelineState.SYNTHESIZING, PipelineState.DEGRADED_AUDIO}
    ),
    PipelineState.DEGRADED_AUDIO: frozenset({PipelineState.SYNTHESIZING}),
    PipelineState.SYNTHESIZING: frozenset({PipelineState.DONE}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}


@dataclass
class PipelineRun:
    """Tracks the state of one run and which stages degraded.

    Example:
        >>> run = PipelineRun("clip.mp4")
        >>> run.advance(PipelineState.PROBING)
        >>> run.state
        <PipelineState.PROBING: 'probing'>
    """

    filename: str
    state: PipelineState = PipelineState.IDLE
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])

    def can_advance(self, target: PipelineState) -> bool:
        if target is PipelineState.FAILED:
            return not self.state.is_terminal
        return target in TRANSITIONS[self.state]

    def advance(self, target: PipelineState) -> None:
        """Move to ``target``.

        Raises:
            ValueError: If the transition is not allowed from the current state.
        """
        if not self.can_advance(target):
            raise ValueError(
                f"Illegal pipeline transition {self.state.value} -> {target.value}"
            )
        self.state = target
        self.history.append(target)

    def fail(self) -> None:
        """Move to FAILED unless the run already finished."""
        if not self.state.is_terminal:
            self.advance(PipelineState.FAILED)

    @property
    def degraded_stages(self) -> list[str]:
        degraded = (PipelineState.DEGRADED_VISUAL, PipelineState.DEGRADED_AUDIO)
        return [s.value for s in self.history if s in degraded]
