"""
Video processing orchestration.

Turns an uploaded video into one annotated text document:

1. Check the result cache (filename + byte length)
2. Write the upload into a private workspace
3. Probe duration, extract key frames, analyze them in batches, summarize
4. Extract and transcribe the audio track
5. Synthesize the combined document and cache the result

The visual path and the audio path degrade independently: a failure in
either is replaced by a placeholder and the run still completes.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from videodigest.cache.results import ResultCache, ResultStore, make_cache_key
from videodigest.config.loader import PipelineConfig, get_config
from videodigest.exceptions import (
    AudioExtractionError,
    TranscriptionError,
    VideoProcessingError,
    VisualAnalysisError,
)
from videodigest.models.analysis import (
    AudioAnalysis,
    ExtractedText,
    VideoAnalysisResult,
    VisualAnalysis,
)
from videodigest.models.progress import (
    ProcessingStage,
    ProgressCallback,
    ProgressTracker,
)
from videodigest.models.state import PipelineRun, PipelineState
from videodigest.operations.audio import (
    TRANSCRIBING_PROGRESS,
    extract_audio,
    transcribe_audio_track,
)
from videodigest.operations.extract_frames import (
    EXTRACTION_PROGRESS_SPAN,
    calculate_frame_count,
    extract_key_frames,
)
from videodigest.operations.probe import probe_duration
from videodigest.operations.synthesize import (
    degraded_audio_analysis,
    degraded_visual_analysis,
    synthesize_content,
)
from videodigest.operations.visual_analysis import (
    ANALYSIS_PROGRESS_START,
    analyze_visual_content,
)
from videodigest.operations.workspace import scoped_workspace, write_input
from videodigest.tools.ffmpeg import FFmpegTool
from videodigest.tools.ffprobe import FFprobeTool
from videodigest.utils.logging import log_timed

if TYPE_CHECKING:
    from videodigest.models.analysis import ExtractedFrames
    from videodigest.providers.base import Reasoner, Transcriber, VisionAnalyzer

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = frozenset(
    {"mp4", "mov", "avi", "webm", "mkv", "flv", "wmv", "m4v", "3gp", "ogv"}
)

AUDIO_PROGRESS = 80
SYNTHESIS_PROGRESS = 90


def is_video_file(filename: str, mimetype: str | None = None) -> bool:
    """True for video/* MIME types or a known video extension."""
    if mimetype and mimetype.lower().startswith("video/"):
        return True
    return Path(filename).suffix.lower().lstrip(".") in VIDEO_EXTENSIONS


class VideoProcessor:
    """Runs the video-to-text pipeline.

    A single instance may serve many concurrent ``process_video`` calls;
    the only state shared between them is the result cache.

    Args:
        vision: Provider implementing VisionAnalyzer (frame batches).
        reasoner: Provider implementing Reasoner (visual summary).
        transcriber: Provider implementing Transcriber (speech-to-text).
        cache: Result store; defaults to a new in-memory ResultCache.
        ffmpeg: FFmpeg wrapper; defaults to one using ``config.ffmpeg_path``.
        ffprobe: FFprobe wrapper; defaults to one using ``config.ffprobe_path``.
        config: Pipeline configuration; defaults to get_config().
        workspace_dir: Parent directory for per-run workspaces.

    Example:
        >>> provider = get_provider("openai")
        >>> processor = VideoProcessor(provider, provider, provider)
        >>> result = await processor.process_video(data, "demo.mp4")
        >>> print(result.combined_content)
    """

    def __init__(
        self,
        vision: VisionAnalyzer,
        reasoner: Reasoner,
        transcriber: Transcriber,
        cache: ResultStore | None = None,
        ffmpeg: FFmpegTool | None = None,
        ffprobe: FFprobeTool | None = None,
        config: PipelineConfig | None = None,
        workspace_dir: Path | None = None,
    ):
        self.config = config or get_config()
        self.vision = vision
        self.reasoner = reasoner
        self.transcriber = transcriber
        self.cache = cache if cache is not None else ResultCache()
        self.ffmpeg = ffmpeg or FFmpegTool(path=self.config.ffmpeg_path)
        self.ffprobe = ffprobe or FFprobeTool(path=self.config.ffprobe_path)
        self.workspace_dir = workspace_dir

    async def process_video(
        self,
        data: bytes,
        filename: str,
        on_progress: ProgressCallback | None = None,
    ) -> VideoAnalysisResult:
        """Analyze a video and return its combined text document.

        Args:
            data: Raw bytes of the uploaded file
            filename: Original filename (part of the cache key)
            on_progress: Optional sink for progress events

        Returns:
            VideoAnalysisResult; always usable even if both the visual and
            audio analysis degraded to placeholders

        Raises:
            VideoProcessingError: On unrecoverable failure (e.g. the
                workspace cannot be created). The workspace is cleaned up
                before this propagates.
        """
        tracker = ProgressTracker(on_progress)
        key = make_cache_key(filename, data)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f'Using cached video analysis for "{filename}"')
            tracker.report(ProcessingStage.SYNTHESIZING, 100, "Using cached results")
            return cached

        run = PipelineRun(filename)
        t0 = time.time()
        log_timed(f'Processing video "{filename}" ({len(data)} bytes)...', t0)

        try:
            result = await self._run(data, filename, tracker, run)
        except Exception as e:
            run.fail()
            logger.error(f'Error processing video "{filename}": {e}')
            raise VideoProcessingError.wrap(e, filename) from e

        self.cache.put(key, result)
        degraded = ", ".join(run.degraded_stages) or "none"
        log_timed(
            f'Video processing completed for "{filename}" (degraded: {degraded})', t0
        )
        return result

    async def extract_text_from_video(self, data: bytes, filename: str) -> ExtractedText:
        """Indexed text and base64 thumbnail for document ingestion.

        Raises:
            VideoProcessingError: On unrecoverable failure.
        """
        analysis = await self.process_video(data, filename)
        return ExtractedText(
            content=analysis.combined_content,
            thumbnail=analysis.thumbnail_base64,
        )

    async def _run(
        self,
        data: bytes,
        filename: str,
        tracker: ProgressTracker,
        run: PipelineRun,
    ) -> VideoAnalysisResult:
        config = self.config
        tracker.report(ProcessingStage.EXTRACTING, 0, "Extracting key frames...")

        with scoped_workspace(base_dir=self.workspace_dir) as workspace:
            input_path = write_input(workspace, data, filename)

            run.advance(PipelineState.PROBING)
            duration = await asyncio.to_thread(
                probe_duration,
                self.ffprobe,
                input_path,
                fallback=config.fallback_duration,
                timeout=config.probe_timeout,
            )

            run.advance(PipelineState.EXTRACTING_FRAMES)
            frames = await extract_key_frames(
                self.ffmpeg,
                input_path,
                workspace,
                calculate_frame_count(len(data), config),
                duration,
                tracker,
                config,
            )
            tracker.report(
                ProcessingStage.EXTRACTING,
                EXTRACTION_PROGRESS_SPAN,
                f"Extracted {len(frames)} frames",
            )

            run.advance(PipelineState.ANALYZING_FRAMES)
            visual = await self._analyze_visual(frames, tracker, run)

            tracker.report(
                ProcessingStage.ANALYZING, AUDIO_PROGRESS, "Extracting audio transcript..."
            )
            run.advance(PipelineState.EXTRACTING_AUDIO)
            audio = await self._analyze_audio(input_path, workspace, tracker, run)

        run.advance(PipelineState.SYNTHESIZING)
        tracker.report(ProcessingStage.SYNTHESIZING, SYNTHESIS_PROGRESS, "Synthesizing content...")
        combined = synthesize_content(visual, audio, len(frames))

        result = VideoAnalysisResult(
            visual_summary=visual.summary,
            audio_transcript=audio.transcript,
            key_moments=tuple(visual.key_moments),
            duration_seconds=audio.duration or 0,
            frame_count=len(frames),
            combined_content=combined,
            confidence=config.confidence,
            thumbnail=frames.thumbnail,
        )
        run.advance(PipelineState.DONE)
        tracker.report(ProcessingStage.SYNTHESIZING, 100, "Video processing completed!")
        return result

    async def _analyze_visual(
        self,
        frames: ExtractedFrames,
        tracker: ProgressTracker,
        run: PipelineRun,
    ) -> VisualAnalysis:
        tracker.report(
            ProcessingStage.ANALYZING, ANALYSIS_PROGRESS_START, "Analyzing frames with AI..."
        )
        try:
            return await analyze_visual_content(
                self.vision, self.reasoner, frames.frames, tracker, self.config
            )
        except VisualAnalysisError as e:
            logger.error(f"Frame analysis failed, continuing with audio only: {e}")
            run.advance(PipelineState.DEGRADED_VISUAL)
            return degraded_visual_analysis()

    async def _analyze_audio(
        self,
        input_path: Path,
        workspace: Path,
        tracker: ProgressTracker,
        run: PipelineRun,
    ) -> AudioAnalysis:
        try:
            audio = await extract_audio(self.ffmpeg, input_path, workspace, self.config)
            run.advance(PipelineState.TRANSCRIBING)
            tracker.report(
                ProcessingStage.ANALYZING, TRANSCRIBING_PROGRESS, "Transcribing audio..."
            )
            return await transcribe_audio_track(self.transcriber, audio, config=self.config)
        except (AudioExtractionError, TranscriptionError, OSError) as e:
            logger.error(f"Audio extraction failed, continuing with visual only: {e}")
            run.advance(PipelineState.DEGRADED_AUDIO)
            return degraded_audio_analysis()


def create_video_processor(
    provider_name: str = "openai",
    config: PipelineConfig | None = None,
    cache: ResultStore | None = None,
    **provider_kwargs,
) -> VideoProcessor:
    """Build a VideoProcessor backed by one provider for all three roles.

    Model names from the configuration are passed to the provider unless
    overridden in ``provider_kwargs``.
    """
    from videodigest.providers import get_provider

    config = config or get_config()
    provider_kwargs.setdefault("model", config.vision_model)
    provider_kwargs.setdefault("whisper_model", config.transcription_model)
    provider = get_provider(provider_name, **provider_kwargs)
    return VideoProcessor(provider, provider, provider, cache=cache, config=config)
