"""
Parsing of free-text vision model responses.

The vision prompt asks for per-frame descriptions and key moments but the
model answers in prose, so responses are split heuristically by line:

- a line mentioning "key moment" or "important" starts the key-moments
  section and contributes its text after the first colon;
- a line mentioning "frame" or "scene" starts the descriptions section
  and is kept whole;
- any other line longer than 10 characters joins the current section;
- a response with no markers at all becomes a single description.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TypeVar

from videodigest.models.analysis import BatchAnalysis

T = TypeVar("T")

KEY_MOMENT_MARKERS = ("key moment", "important")
DESCRIPTION_MARKERS = ("frame", "scene")

# Unmarked lines this short (bullets, headings like "3.") are dropped
MIN_CONTINUATION_LENGTH = 10

_LABEL_PREFIX = re.compile(r"^[^:]*:\s*")

_KEY_MOMENTS = "key_moments"
_DESCRIPTIONS = "descriptions"


def parse_frame_analysis(analysis: str) -> BatchAnalysis:
    """Split one vision response into key moments and descriptions.

    Args:
        analysis: Raw response text for one batch of frames

    Returns:
        BatchAnalysis with both lists in response order
    """
    key_moments: list[str] = []
    descriptions: list[str] = []
    section = None

    for line in analysis.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue

        lowered = trimmed.lower()
        if any(marker in lowered for marker in KEY_MOMENT_MARKERS):
            section = _KEY_MOMENTS
            moment = _LABEL_PREFIX.sub("", trimmed, count=1).strip()
            if moment:
                key_moments.append(moment)
        elif any(marker in lowered for marker in DESCRIPTION_MARKERS):
            section = _DESCRIPTIONS
            descriptions.append(trimmed)
        elif len(trimmed) > MIN_CONTINUATION_LENGTH:
            if section == _KEY_MOMENTS:
                key_moments.append(trimmed)
            elif section == _DESCRIPTIONS:
                descriptions.append(trimmed)

    if not key_moments and not descriptions and analysis.strip():
        descriptions.append(analysis.strip())

    return BatchAnalysis(key_moments=key_moments, descriptions=descriptions)


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into consecutive lists of at most ``size`` elements.

    Raises:
        ValueError: If size is less than 1.
    """
    if size < 1:
        raise ValueError(f"Chunk size must be >= 1, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
