"""
Model response parsing utilities.
"""

from videodigest.parsing.frame_analysis import chunk, parse_frame_analysis

__all__ = [
    "chunk",
    "parse_frame_analysis",
]
