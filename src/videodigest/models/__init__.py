"""
Data models for videodigest.
"""

from videodigest.models.analysis import (
    AudioAnalysis,
    BatchAnalysis,
    ExtractedFrames,
    ExtractedText,
    VideoAnalysisResult,
    VisualAnalysis,
)
from videodigest.models.progress import (
    ProcessingProgress,
    ProcessingStage,
    ProgressCallback,
    ProgressTracker,
)
from videodigest.models.state import PipelineRun, PipelineState

__all__ = [
    "AudioAnalysis",
    "BatchAnalysis",
    "ExtractedFrames",
    "ExtractedText",
    "VideoAnalysisResult",
    "VisualAnalysis",
    "ProcessingProgress",
    "ProcessingStage",
    "ProgressCallback",
    "ProgressTracker",
    "PipelineRun",
    "PipelineState",
]
