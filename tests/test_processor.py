"""Tests for the video processing pipeline end to end (fake tools and providers)."""

import asyncio
import base64
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from conftest import FakeRunner, make_png

from videodigest.cache.results import ResultCache, make_cache_key
from videodigest.config.loader import PipelineConfig
from videodigest.exceptions import VideoProcessingError, WorkspaceError
from videodigest.models.progress import ProcessingStage
from videodigest.operations.processor import (
    VideoProcessor,
    create_video_processor,
    is_video_file,
)
from videodigest.operations.synthesize import (
    AUDIO_FAILURE_TRANSCRIPT,
    VISUAL_FAILURE_KEY_MOMENTS,
    VISUAL_FAILURE_SUMMARY,
)
from videodigest.providers.capabilities import Capability, ProviderInfo
from videodigest.providers.openai.client import OpenaiProvider
from videodigest.tools.ffmpeg import FFmpegTool
from videodigest.tools.ffprobe import FFprobeTool

VIDEO = b"\x00" * 2048


def _processor(tmp_path, runner=None, vision=None, reasoner=None, transcriber=None, **kwargs):
    runner = runner or FakeRunner()
    return VideoProcessor(
        vision=vision,
        reasoner=reasoner,
        transcriber=transcriber,
        ffmpeg=FFmpegTool(runner=runner, path="ffmpeg"),
        ffprobe=FFprobeTool(runner=runner, path="ffprobe"),
        config=kwargs.pop("config", PipelineConfig()),
        workspace_dir=kwargs.pop("workspace_dir", tmp_path),
        **kwargs,
    )


class TestIsVideoFile:
    """Tests for is_video_file."""

    @pytest.mark.parametrize(
        "name", ["a.mp4", "b.MOV", "c.avi", "d.webm", "e.mkv", "f.flv", "g.wmv", "h.m4v", "i.3gp", "j.ogv"]
    )
    def test_extensions(self, name):
        assert is_video_file(name)

    def test_mimetype(self):
        assert is_video_file("upload", "video/quicktime")

    def test_not_video(self):
        assert not is_video_file("notes.txt", "text/plain")
        assert not is_video_file("song.mp3")


class TestProcessVideo:
    """Tests for VideoProcessor.process_video."""

    @pytest.mark.asyncio
    async def test_happy_path(self, tmp_path, vision, reasoner, transcriber):
        runner = FakeRunner(duration_output="60.0\n")
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "talk.mp4")

        assert result.frame_count == 3
        assert runner.frame_timestamps == ["0", "20", "40"]
        assert result.visual_summary == "A presenter explains a diagram on a whiteboard."
        assert result.key_moments == ("the presenter draws a diagram",)
        assert result.audio_transcript == "Hello and welcome to the talk."
        assert result.duration_seconds == 75.0
        assert result.confidence == 0.9
        assert result.thumbnail == make_png()
        assert "Duration: 1:15 | Frames Analyzed: 3" in result.combined_content
        assert "1. the presenter draws a diagram" in result.combined_content

        vision.analyze_images.assert_awaited_once()
        reasoner.reason.assert_awaited_once()
        transcriber.transcribe.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_workspace_removed_on_success(self, tmp_path, vision, reasoner, transcriber):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)
        await processor.process_video(VIDEO, "talk.mp4")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_input_keeps_extension(self, tmp_path, vision, reasoner, transcriber):
        runner = FakeRunner()
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        await processor.process_video(VIDEO, "clip.webm")

        probe_cmd = runner.calls[0]
        assert probe_cmd[0] == "ffprobe"
        assert probe_cmd[-1].endswith(".webm")

    @pytest.mark.asyncio
    async def test_progress_schedule(self, tmp_path, vision, reasoner, transcriber):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)
        events = []

        await processor.process_video(VIDEO, "talk.mp4", on_progress=events.append)

        values = [e.progress for e in events]
        assert values == sorted(values)
        assert (events[0].stage, events[0].progress) == (ProcessingStage.EXTRACTING, 0.0)
        assert (events[-1].stage, events[-1].progress) == (ProcessingStage.SYNTHESIZING, 100.0)
        for expected in (50.0, 60.0, 80.0, 85.0, 90.0):
            assert expected in values
        assert {e.stage for e in events if e.progress < 50} == {ProcessingStage.EXTRACTING}

    @pytest.mark.asyncio
    async def test_frame_count_from_size_not_duration(
        self, tmp_path, vision, reasoner, transcriber
    ):
        runner = FakeRunner(duration_output="3600.0\n")
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        result = await processor.process_video(b"\x00" * (5 * 1024 * 1024), "long.mp4")

        assert result.frame_count == 10
        assert runner.frame_timestamps[:3] == ["0", "360", "720"]

    @pytest.mark.asyncio
    async def test_probe_failure_uses_fallback_duration(
        self, tmp_path, vision, reasoner, transcriber
    ):
        runner = FakeRunner(duration_output=None)
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "talk.mp4")

        assert runner.frame_timestamps == ["0", "40", "80"]
        assert result.frame_count == 3

    @pytest.mark.asyncio
    async def test_batches_twelve_frames(self, tmp_path, vision, reasoner, transcriber):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        result = await processor.process_video(b"\x00" * (50 * 1024 * 1024), "big.mp4")

        assert result.frame_count == 12
        sizes = [len(c.args[0]) for c in vision.analyze_images.call_args_list]
        assert sizes == [10, 2]

    @pytest.mark.asyncio
    async def test_oversized_batch_setting_capped_for_provider(
        self, tmp_path, reasoner, transcriber
    ):
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = "Key moment: a slide appears"
        vision = OpenaiProvider(api_key="test-key")
        vision._client = AsyncMock()
        vision._client.chat.completions.create = AsyncMock(return_value=response)
        processor = _processor(
            tmp_path, None, vision, reasoner, transcriber,
            config=PipelineConfig(batch_size=12),
        )

        result = await processor.process_video(b"\x00" * (20 * 1024 * 1024), "big.mp4")

        assert result.frame_count == 12
        assert result.visual_summary != VISUAL_FAILURE_SUMMARY
        calls = vision._client.chat.completions.create.call_args_list
        images = [len(c.kwargs["messages"][0]["content"]) - 1 for c in calls]
        assert images == [10, 2]


class TestCaching:
    """Tests for result caching."""

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, tmp_path, vision, reasoner, transcriber):
        runner = FakeRunner()
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        first = await processor.process_video(VIDEO, "talk.mp4")
        calls_after_first = len(runner.calls)

        events = []
        second = await processor.process_video(VIDEO, "talk.mp4", on_progress=events.append)

        assert second == first
        assert len(runner.calls) == calls_after_first
        vision.analyze_images.assert_awaited_once()
        transcriber.transcribe.assert_awaited_once()
        assert [(e.stage, e.progress, e.message) for e in events] == [
            (ProcessingStage.SYNTHESIZING, 100.0, "Using cached results")
        ]

    @pytest.mark.asyncio
    async def test_same_name_and_size_collide(self, tmp_path, vision, reasoner, transcriber):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        first = await processor.process_video(b"a" * 100, "clip.mp4")
        second = await processor.process_video(b"b" * 100, "clip.mp4")

        assert second is first

    @pytest.mark.asyncio
    async def test_injected_cache(self, tmp_path, vision, reasoner, transcriber):
        cache = ResultCache()
        processor = _processor(tmp_path, None, vision, reasoner, transcriber, cache=cache)

        result = await processor.process_video(VIDEO, "talk.mp4")

        assert cache.get(make_cache_key("talk.mp4", VIDEO)) is result

    @pytest.mark.asyncio
    async def test_degraded_results_are_cached(self, tmp_path, reasoner, transcriber):
        vision = AsyncMock()
        vision.analyze_images.side_effect = RuntimeError("vision down")
        cache = ResultCache()
        processor = _processor(tmp_path, None, vision, reasoner, transcriber, cache=cache)

        await processor.process_video(VIDEO, "talk.mp4")

        assert len(cache) == 1


class TestDegradation:
    """Tests for independent degradation of the visual and audio paths."""

    @pytest.mark.asyncio
    async def test_vision_failure_keeps_audio(self, tmp_path, reasoner, transcriber):
        vision = AsyncMock()
        vision.analyze_images.side_effect = RuntimeError("vision down")
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "talk.mp4")

        assert result.visual_summary == VISUAL_FAILURE_SUMMARY
        assert result.key_moments == VISUAL_FAILURE_KEY_MOMENTS
        assert result.audio_transcript == "Hello and welcome to the talk."
        assert result.frame_count == 3
        reasoner.reason.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_no_frames_degrades_visual(self, tmp_path, vision, reasoner, transcriber):
        runner = FakeRunner(failing_timestamps={"0", "20", "40"})
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "talk.mp4")

        assert result.frame_count == 0
        assert result.thumbnail is None
        assert result.visual_summary == VISUAL_FAILURE_SUMMARY
        assert "Frames Analyzed: 0" in result.combined_content
        vision.analyze_images.assert_not_called()

    @pytest.mark.asyncio
    async def test_summary_failure_is_not_degradation(
        self, tmp_path, vision, transcriber
    ):
        reasoner = AsyncMock()
        reasoner.reason.side_effect = RuntimeError("down")
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "talk.mp4")

        assert result.visual_summary == "Video content analysis completed with limited summary."
        assert result.key_moments == ("the presenter draws a diagram",)

    @pytest.mark.asyncio
    async def test_audio_extraction_failure_keeps_visual(
        self, tmp_path, vision, reasoner, transcriber
    ):
        runner = FakeRunner(audio_fails=True)
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "silent.mp4")

        assert result.audio_transcript == AUDIO_FAILURE_TRANSCRIPT
        assert result.duration_seconds == 0
        assert result.visual_summary == "A presenter explains a diagram on a whiteboard."
        assert "Duration: Unknown" in result.combined_content
        transcriber.transcribe.assert_not_called()

    @pytest.mark.asyncio
    async def test_audio_too_large_for_transcriber_keeps_visual(
        self, tmp_path, vision, reasoner, transcriber
    ):
        transcriber.info = ProviderInfo(
            name="tiny",
            capabilities=frozenset({Capability.TRANSCRIBE}),
            max_audio_size_mb=1,
        )
        runner = FakeRunner(audio=b"\x00" * (2 * 1024 * 1024))
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "long.mp4")

        assert result.audio_transcript == AUDIO_FAILURE_TRANSCRIPT
        assert result.key_moments == ("the presenter draws a diagram",)
        transcriber.transcribe.assert_not_called()

    @pytest.mark.asyncio
    async def test_transcription_failure_keeps_visual(self, tmp_path, vision, reasoner):
        transcriber = AsyncMock()
        transcriber.transcribe.side_effect = RuntimeError("whisper down")
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "talk.mp4")

        assert result.audio_transcript == AUDIO_FAILURE_TRANSCRIPT
        assert result.key_moments == ("the presenter draws a diagram",)

    @pytest.mark.asyncio
    async def test_everything_fails_still_returns_content(self, tmp_path):
        runner = FakeRunner(
            duration_output=None,
            failing_timestamps={"0", "40", "80"},
            audio_fails=True,
        )
        vision = AsyncMock()
        reasoner = AsyncMock()
        transcriber = AsyncMock()
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        result = await processor.process_video(VIDEO, "broken.mp4")

        assert result.combined_content.strip()
        assert VISUAL_FAILURE_SUMMARY in result.combined_content
        assert AUDIO_FAILURE_TRANSCRIPT in result.combined_content
        assert list(tmp_path.iterdir()) == []


class TestFatalErrors:
    """Tests for unrecoverable failures."""

    @pytest.mark.asyncio
    async def test_workspace_creation_failure(self, tmp_path, vision, reasoner, transcriber):
        cache = ResultCache()
        processor = _processor(
            tmp_path,
            None,
            vision,
            reasoner,
            transcriber,
            cache=cache,
            workspace_dir=tmp_path / "does" / "not" / "exist",
        )

        with pytest.raises(VideoProcessingError) as exc_info:
            await processor.process_video(VIDEO, "talk.mp4")

        error = exc_info.value
        assert str(error).startswith("Failed to process video:")
        assert isinstance(error.__cause__, WorkspaceError)
        assert error.filename == "talk.mp4"
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_unexpected_error_cleans_workspace(
        self, tmp_path, vision, reasoner, transcriber
    ):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        with patch(
            "videodigest.operations.processor.extract_key_frames",
            side_effect=RuntimeError("disk full"),
        ):
            with pytest.raises(VideoProcessingError, match="disk full"):
                await processor.process_video(VIDEO, "talk.mp4")

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_synthesis_error_is_fatal(self, tmp_path, vision, reasoner, transcriber):
        cache = ResultCache()
        processor = _processor(tmp_path, None, vision, reasoner, transcriber, cache=cache)

        with patch(
            "videodigest.operations.processor.synthesize_content",
            side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(VideoProcessingError):
                await processor.process_video(VIDEO, "talk.mp4")

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_progress_sink_errors_do_not_fail_run(
        self, tmp_path, vision, reasoner, transcriber
    ):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)
        sink = MagicMock(side_effect=RuntimeError("socket closed"))

        result = await processor.process_video(VIDEO, "talk.mp4", on_progress=sink)

        assert result.combined_content
        assert sink.call_count > 1


class TestConcurrency:
    """Tests for concurrent runs on one processor."""

    @pytest.mark.asyncio
    async def test_parallel_runs(self, tmp_path, vision, reasoner, transcriber):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        results = await asyncio.gather(
            processor.process_video(b"\x00" * 100, "a.mp4"),
            processor.process_video(b"\x00" * 200, "b.mp4"),
            processor.process_video(b"\x00" * 300, "c.mov"),
        )

        assert all(r.frame_count == 3 for r in results)
        assert len(processor.cache) == 3
        assert list(tmp_path.iterdir()) == []


class TestExtractTextFromVideo:
    """Tests for extract_text_from_video."""

    @pytest.mark.asyncio
    async def test_content_and_thumbnail(self, tmp_path, vision, reasoner, transcriber):
        processor = _processor(tmp_path, None, vision, reasoner, transcriber)

        extracted = await processor.extract_text_from_video(VIDEO, "talk.mp4")

        assert extracted.content.startswith("VIDEO CONTENT ANALYSIS")
        assert base64.b64decode(extracted.thumbnail) == make_png()

    @pytest.mark.asyncio
    async def test_no_thumbnail(self, tmp_path, vision, reasoner, transcriber):
        runner = FakeRunner(failing_timestamps={"0", "20", "40"})
        processor = _processor(tmp_path, runner, vision, reasoner, transcriber)

        extracted = await processor.extract_text_from_video(VIDEO, "talk.mp4")

        assert extracted.thumbnail is None


class TestCreateVideoProcessor:
    """Tests for create_video_processor."""

    def test_uses_one_provider_for_all_roles(self):
        provider = MagicMock()
        config = PipelineConfig(vision_model="gpt-4o-mini", transcription_model="whisper-1")

        with patch("videodigest.providers.get_provider", return_value=provider) as mock_get:
            processor = create_video_processor(config=config)

        mock_get.assert_called_once_with(
            "openai", model="gpt-4o-mini", whisper_model="whisper-1"
        )
        assert processor.vision is provider
        assert processor.reasoner is provider
        assert processor.transcriber is provider
        assert processor.config is config
