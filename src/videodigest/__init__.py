"""
videodigest - Turn uploaded videos into searchable text.

Processes a video in one pass:
1. Extract a handful of key frames and describe them with a vision model
2. Summarize the frame descriptions
3. Transcribe the audio track
4. Combine everything into one annotated document for indexing
"""

# Config
from videodigest.config.loader import PipelineConfig, get_config

# Exceptions
from videodigest.exceptions import (
    AudioExtractionError,
    ConfigError,
    FrameExtractionError,
    TranscriptionError,
    VideodigestError,
    VideoProcessingError,
    VisualAnalysisError,
    WorkspaceError,
)

# Models
from videodigest.models.analysis import (
    AudioAnalysis,
    ExtractedText,
    VideoAnalysisResult,
    VisualAnalysis,
)
from videodigest.models.progress import ProcessingProgress, ProcessingStage

# Core processing
from videodigest.operations.audio import AudioTranscriber, is_audio_file
from videodigest.operations.processor import (
    VideoProcessor,
    create_video_processor,
    is_video_file,
)

__version__ = "1.0.0"

__all__ = [
    # Core
    "VideoProcessor",
    "create_video_processor",
    "AudioTranscriber",
    "is_video_file",
    "is_audio_file",
    # Models
    "VideoAnalysisResult",
    "VisualAnalysis",
    "AudioAnalysis",
    "ExtractedText",
    "ProcessingProgress",
    "ProcessingStage",
    # Config
    "PipelineConfig",
    "get_config",
    # Exceptions
    "VideodigestError",
    "ConfigError",
    "WorkspaceError",
    "FrameExtractionError",
    "VisualAnalysisError",
    "AudioExtractionError",
    "TranscriptionError",
    "VideoProcessingError",
]
