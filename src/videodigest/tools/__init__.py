"""
External tool wrappers for videodigest.

Provides clean interfaces to ffmpeg and ffprobe, plus progress reporters.
"""

from videodigest.tools.base import CommandRunner, SubprocessRunner, ToolResult, VideoTool
from videodigest.tools.ffmpeg import FFmpegTool
from videodigest.tools.ffprobe import FFprobeTool
from videodigest.tools.progress import (
    ConsoleProgressReporter,
    LoggingProgressReporter,
    SilentProgressReporter,
    create_console_reporter,
)

__all__ = [
    "VideoTool",
    "ToolResult",
    "CommandRunner",
    "SubprocessRunner",
    "FFmpegTool",
    "FFprobeTool",
    "ConsoleProgressReporter",
    "LoggingProgressReporter",
    "SilentProgressReporter",
    "create_console_reporter",
]
