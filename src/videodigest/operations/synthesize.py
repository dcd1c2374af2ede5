"""
Synthesis of the final indexed document.
"""

from __future__ import annotations

from videodigest.models.analysis import AudioAnalysis, VisualAnalysis
from videodigest.utils.formatting import format_duration

CONTENT_HEADER = "VIDEO CONTENT ANALYSIS"
SUMMARY_HEADING = "Visual Summary:"
KEY_MOMENTS_HEADING = "Key Visual Moments:"
TRANSCRIPT_HEADING = "Audio Transcript:"
METADATA_HEADING = "Video Metadata:"

NO_KEY_MOMENTS = "No key moments identified."
UNKNOWN_DURATION = "Unknown"

CONTENT_FOOTER = (
    "This content has been processed using AI-powered video analysis combining "
    "real frame extraction with visual analysis and audio transcription for "
    "comprehensive searchability."
)

# Placeholders used when a stage degrades
VISUAL_FAILURE_SUMMARY = "Frame analysis failed - continuing with audio transcript only"
VISUAL_FAILURE_KEY_MOMENTS = ("Visual analysis unavailable due to processing error",)
AUDIO_FAILURE_TRANSCRIPT = (
    "Audio transcript extraction failed - continuing with visual analysis only"
)


def degraded_visual_analysis() -> VisualAnalysis:
    """Stand-in for a failed visual path."""
    return VisualAnalysis(
        summary=VISUAL_FAILURE_SUMMARY,
        key_moments=list(VISUAL_FAILURE_KEY_MOMENTS),
    )


def degraded_audio_analysis() -> AudioAnalysis:
    """Stand-in for a failed audio path."""
    return AudioAnalysis(transcript=AUDIO_FAILURE_TRANSCRIPT, duration=0)


def synthesize_content(
    visual: VisualAnalysis,
    audio: AudioAnalysis,
    frame_count: int,
) -> str:
    """Render the combined document for indexing.

    Sections always appear in the same order (summary, key moments,
    transcript, metadata) whether or not either input is a placeholder.
    """
    if visual.key_moments:
        moments = "\n".join(
            f"{i}. {moment}" for i, moment in enumerate(visual.key_moments, 1)
        )
    else:
        moments = NO_KEY_MOMENTS

    duration = (
        format_duration(audio.duration) if audio.duration and audio.duration > 0
        else UNKNOWN_DURATION
    )

    return f"""{CONTENT_HEADER}

{SUMMARY_HEADING}
{visual.summary}

{KEY_MOMENTS_HEADING}
{moments}

{TRANSCRIPT_HEADING}
{audio.transcript}

{METADATA_HEADING}
Duration: {duration} | Frames Analyzed: {frame_count}

{CONTENT_FOOTER}"""
