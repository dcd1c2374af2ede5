"""
Vision analysis of extracted frames and summary generation.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from videodigest.config.loader import PipelineConfig
from videodigest.exceptions import FrameExtractionError, VisualAnalysisError
from videodigest.models.analysis import BatchAnalysis, VisualAnalysis
from videodigest.models.progress import ProcessingStage, ProgressTracker
from videodigest.parsing.frame_analysis import chunk, parse_frame_analysis
from videodigest.providers.capabilities import provider_info
from videodigest.utils.logging import log_timed

if TYPE_CHECKING:
    from videodigest.providers.base import Reasoner, VisionAnalyzer

logger = logging.getLogger(__name__)

BATCH_PROMPT = """Analyze these video frames (batch {batch_number}) and provide:
1. A brief description of what you see in each frame
2. Any key moments, actions, or important visual elements
3. Text, charts, or data visible in the frames
4. Overall scene context and progression

Be concise but thorough. Focus on content that would be useful for search and retrieval."""

SUMMARY_PROMPT = """Based on these video frame descriptions, provide a comprehensive summary of the video content:

{descriptions}

Please create a coherent summary that:
1. Describes the main content and flow of the video
2. Highlights key visual elements and moments
3. Identifies any recurring themes or important information
4. Is optimized for search and retrieval

Keep it under 300 words but be thorough."""

# Used when the summary call returns nothing
EMPTY_SUMMARY = "Video content analysis completed."
# Used when the summary call fails
FALLBACK_SUMMARY = "Video content analysis completed with limited summary."

# Progress window covered by the batch calls
ANALYSIS_PROGRESS_START = 60
ANALYSIS_PROGRESS_SPAN = 20


async def analyze_frame_batch(
    analyzer: VisionAnalyzer,
    frames: list[bytes],
    batch_index: int,
    config: PipelineConfig | None = None,
) -> BatchAnalysis:
    """Send one batch of frames to the vision model and parse the reply."""
    config = config or PipelineConfig()
    prompt = BATCH_PROMPT.format(batch_number=batch_index + 1)
    analysis = await analyzer.analyze_images(
        frames,
        prompt,
        model=config.vision_model,
        max_tokens=config.vision_max_tokens,
    )
    return parse_frame_analysis(analysis or "")


def effective_batch_size(analyzer: VisionAnalyzer, config: PipelineConfig) -> int:
    """Configured batch size, bounded by the analyzer's image limit."""
    info = provider_info(analyzer)
    limit = info.max_images_per_request if info else None
    if limit is not None and config.batch_size > limit:
        logger.warning(
            f"batch_size {config.batch_size} exceeds {info.name} limit of {limit} "
            f"images per request, using {limit}"
        )
        return limit
    return config.batch_size


async def analyze_frames(
    analyzer: VisionAnalyzer,
    frames: list[bytes],
    tracker: ProgressTracker | None = None,
    config: PipelineConfig | None = None,
) -> BatchAnalysis:
    """Analyze all frames in batches of at most ``config.batch_size``.

    The batch size is further capped by the analyzer's per-request image
    limit when it advertises one.

    Batches run one after another; key moments and descriptions are
    concatenated in batch order.

    Raises:
        FrameExtractionError: If there are no frames.
        VisualAnalysisError: If any batch call fails.
    """
    config = config or PipelineConfig()
    tracker = tracker or ProgressTracker()

    if not frames:
        raise FrameExtractionError("No frames were extracted from the video")

    batches = chunk(frames, effective_batch_size(analyzer, config))
    combined = BatchAnalysis()
    t0 = time.time()
    log_timed(f"Analyzing {len(frames)} frames in {len(batches)} batch(es)...", t0)

    for i, batch in enumerate(batches):
        logger.info(f"Processing batch {i + 1}/{len(batches)} ({len(batch)} frames)")
        try:
            parsed = await analyze_frame_batch(analyzer, batch, i, config)
        except Exception as e:
            raise VisualAnalysisError(
                f"Vision analysis failed on batch {i + 1}/{len(batches)}: {e}"
            ) from e

        combined.key_moments.extend(parsed.key_moments)
        combined.descriptions.extend(parsed.descriptions)
        tracker.report(
            ProcessingStage.ANALYZING,
            ANALYSIS_PROGRESS_START + (i + 1) / len(batches) * ANALYSIS_PROGRESS_SPAN,
            f"Analyzed batch {i + 1}/{len(batches)}",
        )

    log_timed(
        f"Vision analysis found {len(combined.key_moments)} key moments, "
        f"{len(combined.descriptions)} descriptions",
        t0,
    )
    return combined


async def generate_summary(
    reasoner: Reasoner,
    descriptions: list[str],
    config: PipelineConfig | None = None,
) -> str:
    """Condense frame descriptions into one search-oriented summary.

    Best effort: a failed call yields FALLBACK_SUMMARY instead of an error.
    """
    config = config or PipelineConfig()
    prompt = SUMMARY_PROMPT.format(descriptions="\n\n".join(descriptions))
    try:
        summary = await reasoner.reason(
            [{"role": "user", "content": prompt}],
            model=config.summary_model,
            max_tokens=config.summary_max_tokens,
        )
    except Exception as e:
        logger.error(f"Error generating video summary: {e}")
        return FALLBACK_SUMMARY

    return summary.strip() if summary and summary.strip() else EMPTY_SUMMARY


async def analyze_visual_content(
    analyzer: VisionAnalyzer,
    reasoner: Reasoner,
    frames: list[bytes],
    tracker: ProgressTracker | None = None,
    config: PipelineConfig | None = None,
) -> VisualAnalysis:
    """Run batch analysis then summarization for a set of frames.

    Raises:
        VisualAnalysisError: If batch analysis fails (summary failures degrade
            to a placeholder instead).
    """
    batch_analysis = await analyze_frames(analyzer, frames, tracker, config)
    summary = await generate_summary(reasoner, batch_analysis.descriptions, config)
    return VisualAnalysis(summary=summary, key_moments=batch_analysis.key_moments)
