"""
Utility functions for videodigest.
"""

from videodigest.utils.formatting import format_duration
from videodigest.utils.logging import log_timed
from videodigest.utils.system import find_tool

__all__ = [
    "format_duration",
    "log_timed",
    "find_tool",
]
