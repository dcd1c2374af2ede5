"""
High-level video processing operations.
"""

from videodigest.operations.audio import (
    AUDIO_EXTENSIONS,
    AudioTranscriber,
    estimate_audio_duration,
    extract_audio,
    is_audio_file,
    transcribe_audio_track,
)
from videodigest.operations.extract_frames import (
    calculate_frame_count,
    estimate_duration,
    extract_key_frames,
    frame_timestamps,
    is_readable_image,
)
from videodigest.operations.probe import probe_duration
from videodigest.operations.processor import (
    VIDEO_EXTENSIONS,
    VideoProcessor,
    create_video_processor,
    is_video_file,
)
from videodigest.operations.synthesize import (
    degraded_audio_analysis,
    degraded_visual_analysis,
    synthesize_content,
)
from videodigest.operations.visual_analysis import (
    analyze_frame_batch,
    analyze_frames,
    analyze_visual_content,
    generate_summary,
)
from videodigest.operations.workspace import scoped_workspace, write_input

__all__ = [
    # Orchestration
    "VideoProcessor",
    "create_video_processor",
    "is_video_file",
    "VIDEO_EXTENSIONS",
    # Workspace
    "scoped_workspace",
    "write_input",
    # Probe
    "probe_duration",
    # Frames
    "calculate_frame_count",
    "estimate_duration",
    "extract_key_frames",
    "frame_timestamps",
    "is_readable_image",
    # Vision
    "analyze_frame_batch",
    "analyze_frames",
    "analyze_visual_content",
    "generate_summary",
    # Audio
    "AudioTranscriber",
    "AUDIO_EXTENSIONS",
    "estimate_audio_duration",
    "extract_audio",
    "is_audio_file",
    "transcribe_audio_track",
    # Synthesis
    "degraded_audio_analysis",
    "degraded_visual_analysis",
    "synthesize_content",
]
