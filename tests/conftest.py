"""Pytest configuration and shared fixtures for videodigest tests."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from videodigest.config.loader import PipelineConfig
from videodigest.providers.types import TranscriptionResult
from videodigest.tools.base import ToolResult
from videodigest.tools.ffmpeg import FFmpegTool
from videodigest.tools.ffprobe import FFprobeTool


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against real ffmpeg and provider APIs (requires API keys)",
    )


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--run-integration"):
        skip = pytest.mark.skip(reason="needs --run-integration flag")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip)


def make_png(color: tuple[int, int, int] = (255, 0, 0), size: int = 8) -> bytes:
    """Encode a small solid-color PNG."""
    buf = io.BytesIO()
    Image.new("RGB", (size, size), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeRunner:
    """CommandRunner that imitates ffprobe/ffmpeg without spawning anything.

    ffprobe prints ``duration_output``; ffmpeg frame extraction writes a PNG
    to the output path unless its timestamp is in ``failing_timestamps``;
    ffmpeg audio extraction writes ``audio`` unless ``audio_fails``.
    """

    def __init__(
        self,
        duration_output: str | None = "60.0\n",
        failing_timestamps: set[str] | None = None,
        corrupt_timestamps: set[str] | None = None,
        audio: bytes = b"\x00\x01" * 16000,
        audio_fails: bool = False,
    ):
        self.duration_output = duration_output
        self.failing_timestamps = failing_timestamps or set()
        self.corrupt_timestamps = corrupt_timestamps or set()
        self.audio = audio
        self.audio_fails = audio_fails
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []

    def run(self, cmd: list[str], timeout: float | None = None) -> ToolResult:
        self.calls.append(list(cmd))
        self.timeouts.append(timeout)

        if cmd[0].endswith("ffprobe"):
            if self.duration_output is None:
                return ToolResult(success=False, stderr="Invalid data", returncode=1)
            return ToolResult.ok(stdout=self.duration_output)

        output = Path(cmd[-1])
        if "-vframes" in cmd:
            timestamp = cmd[cmd.index("-ss") + 1]
            if timestamp in self.failing_timestamps:
                return ToolResult(success=False, stderr="seek failed", returncode=1)
            if timestamp in self.corrupt_timestamps:
                output.write_bytes(b"not an image")
            else:
                output.write_bytes(make_png())
            return ToolResult.ok()

        if "-vn" in cmd:
            if self.audio_fails:
                return ToolResult(
                    success=False,
                    stderr="Output file does not contain any stream",
                    returncode=1,
                )
            output.write_bytes(self.audio)
            return ToolResult.ok()

        return ToolResult.from_error(f"unexpected command {cmd}")

    @property
    def frame_calls(self) -> list[list[str]]:
        return [c for c in self.calls if "-vframes" in c]

    @property
    def frame_timestamps(self) -> list[str]:
        return [c[c.index("-ss") + 1] for c in self.frame_calls]


@pytest.fixture
def config():
    return PipelineConfig()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def ffmpeg(runner):
    return FFmpegTool(runner=runner, path="ffmpeg")


@pytest.fixture
def ffprobe(runner):
    return FFprobeTool(runner=runner, path="ffprobe")


@pytest.fixture
def vision():
    analyzer = AsyncMock()
    analyzer.analyze_images.return_value = (
        "Frame 1 shows a presenter at a whiteboard.\n"
        "Key moment: the presenter draws a diagram"
    )
    return analyzer


@pytest.fixture
def reasoner():
    mock = AsyncMock()
    mock.reason.return_value = "A presenter explains a diagram on a whiteboard."
    return mock


@pytest.fixture
def transcriber():
    mock = AsyncMock()
    mock.transcribe.return_value = TranscriptionResult(
        text="Hello and welcome to the talk.",
        language="en",
        duration=75.0,
        provider="fake",
    )
    return mock
