"""
Progress reporters for video processing.

Provides ready-to-use ProgressCallback implementations for CLI and
service usage.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from videodigest.models.progress import ProcessingProgress

logger = logging.getLogger(__name__)


class ConsoleProgressReporter:
    """Simple console progress reporter with optional bar display.

    Example usage:
        from videodigest.tools.progress import ConsoleProgressReporter

        reporter = ConsoleProgressReporter()
        await processor.process_video(data, "clip.mp4", on_progress=reporter)
    """

    def __init__(
        self,
        output: TextIO | None = None,
        show_bar: bool = True,
        bar_width: int = 30,
        prefix: str = "",
    ) -> None:
        """Initialize console progress reporter.

        Args:
            output: Output stream (default: sys.stderr)
            show_bar: Show progress bar visualization
            bar_width: Width of progress bar in characters
            prefix: Optional prefix before progress line
        """
        self.output = output or sys.stderr
        self.show_bar = show_bar
        self.bar_width = bar_width
        self.prefix = prefix
        self._last_line_len = 0

    def __call__(self, progress: ProcessingProgress) -> None:
        """Handle progress update from video processing."""
        parts = [self.prefix] if self.prefix else []

        if self.show_bar:
            filled = int(self.bar_width * progress.progress / 100)
            bar = "█" * filled + "░" * (self.bar_width - filled)
            parts.append(f"[{bar}]")
        parts.append(f"{progress.progress:5.1f}%")
        parts.append(f"{progress.stage.value}: {progress.message}")

        line = " ".join(parts)
        self._write_line(line, end="\n" if progress.progress >= 100 else "\r")

    def _write_line(self, text: str, end: str = "\n") -> None:
        """Write a line, tracking length for clearing."""
        self._clear_line()
        self.output.write(text + end)
        self.output.flush()
        self._last_line_len = len(text) if end == "\r" else 0

    def _clear_line(self) -> None:
        """Clear the current line."""
        if self._last_line_len > 0:
            self.output.write("\r" + " " * self._last_line_len + "\r")
            self.output.flush()
            self._last_line_len = 0


class LoggingProgressReporter:
    """Progress reporter that writes each update to a logger."""

    def __init__(self, level: int = logging.INFO, log: logging.Logger | None = None):
        self.level = level
        self.log = log or logger

    def __call__(self, progress: ProcessingProgress) -> None:
        self.log.log(
            self.level,
            f"[{progress.stage.value} {progress.progress:.0f}%] {progress.message}",
        )


class SilentProgressReporter:
    """Progress reporter that does nothing.

    Useful as a placeholder or for suppressing output.
    """

    def __call__(self, progress: ProcessingProgress) -> None:
        """Ignore progress updates."""
        pass


def create_console_reporter(
    verbose: bool = True,
    prefix: str = "",
) -> ConsoleProgressReporter | SilentProgressReporter:
    """Create a progress reporter based on verbosity setting.

    Args:
        verbose: If True, return a ConsoleProgressReporter; if False, return SilentProgressReporter
        prefix: Optional prefix for progress lines

    Returns:
        Appropriate progress reporter
    """
    if verbose:
        return ConsoleProgressReporter(prefix=prefix)
    return SilentProgressReporter()
