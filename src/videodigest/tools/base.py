"""
Base classes for external tool wrappers.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Result from running an external tool."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    error: str | None = None

    @classmethod
    def from_error(cls, error: str) -> ToolResult:
        """Create a failed result from an error message."""
        return cls(success=False, error=error, returncode=-1)

    @classmethod
    def ok(cls, stdout: str = "", stderr: str = "") -> ToolResult:
        """Create a successful result."""
        return cls(success=True, stdout=stdout, stderr=stderr, returncode=0)

    @property
    def failure_reason(self) -> str:
        """Best available description of why the command failed."""
        return self.error or self.stderr.strip() or f"exit code {self.returncode}"


@runtime_checkable
class CommandRunner(Protocol):
    """Runs an external command and reports exit code and output.

    Implementations must not raise for command failures; spawn errors,
    timeouts and non-zero exits are all reported through ToolResult.
    """

    def run(self, cmd: list[str], timeout: float | None = None) -> ToolResult:
        ...


class SubprocessRunner:
    """CommandRunner backed by subprocess.run."""

    def run(self, cmd: list[str], timeout: float | None = None) -> ToolResult:
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
            return ToolResult(
                success=result.returncode == 0,
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
            )
        except subprocess.TimeoutExpired:
            return ToolResult.from_error(f"Timeout after {timeout}s")
        except FileNotFoundError:
            return ToolResult.from_error(
                f"{cmd[0]} not found. Install ffmpeg: brew install ffmpeg"
            )
        except OSError as e:
            return ToolResult.from_error(str(e))


class VideoTool(ABC):
    """Abstract base class for external video processing tools."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        path: str | None = None,
    ):
        self._runner = runner or SubprocessRunner()
        self._path = path

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name for logging and error messages."""
        pass

    @abstractmethod
    def get_path(self) -> str:
        """Get the path to the tool executable."""
        pass

    def is_available(self) -> bool:
        """Check if the tool is installed and available."""
        return self._runner.run([self.get_path(), "-version"], timeout=5).success

    def _run(self, args: list[str], timeout: float | None = None) -> ToolResult:
        """Run the tool with given arguments."""
        return self._runner.run([self.get_path()] + args, timeout=timeout)
