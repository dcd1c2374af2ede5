"""
Audio extraction and transcription operations.

Provides the audio path of video processing (transcode the soundtrack to
mono 16kHz PCM, then transcribe it) and AudioTranscriber for uploads that
are audio documents in their own right.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from videodigest.config.defaults import AUDIO_CONFIDENCE
from videodigest.config.loader import PipelineConfig
from videodigest.exceptions import AudioExtractionError, TranscriptionError
from videodigest.models.analysis import AudioAnalysis
from videodigest.providers.capabilities import provider_info
from videodigest.utils.formatting import format_duration

if TYPE_CHECKING:
    from videodigest.providers.base import Transcriber
    from videodigest.tools.ffmpeg import FFmpegTool

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "m4a", "ogg", "flac", "aac", "wma", "opus"})

TRANSCRIBING_PROGRESS = 85


def estimate_audio_duration(byte_length: int, config: PipelineConfig | None = None) -> int:
    """Seconds of audio in ``byte_length`` bytes of the transcode format."""
    config = config or PipelineConfig()
    return round(byte_length / config.bytes_per_second)


def is_audio_file(filename: str, mimetype: str | None = None) -> bool:
    """True for audio/* MIME types or a known audio extension."""
    if mimetype and mimetype.lower().startswith("audio/"):
        return True
    return Path(filename).suffix.lower().lstrip(".") in AUDIO_EXTENSIONS


async def extract_audio(
    ffmpeg: FFmpegTool,
    input_path: Path,
    workspace: Path,
    config: PipelineConfig | None = None,
) -> bytes:
    """Transcode the input's audio track and return the WAV bytes.

    The transcoded file is removed from the workspace once read.

    Raises:
        AudioExtractionError: If ffmpeg fails or produces no audio.
    """
    config = config or PipelineConfig()
    audio_path = workspace / f"audio_{int(time.time() * 1000)}.wav"

    extracted = await asyncio.to_thread(
        ffmpeg.extract_audio,
        input_path,
        audio_path,
        sample_rate=config.sample_rate,
        channels=config.channels,
        timeout=config.audio_timeout,
    )
    if extracted is None:
        raise AudioExtractionError("ffmpeg could not extract an audio track")

    audio = audio_path.read_bytes()
    try:
        audio_path.unlink()
    except OSError as e:
        logger.warning(f"Failed to delete audio file {audio_path}: {e}")

    if not audio:
        raise AudioExtractionError("Extracted audio track is empty")
    return audio


def check_audio_size(transcriber: Transcriber, audio: bytes) -> None:
    """Raise TranscriptionError if audio exceeds the transcriber's upload limit."""
    info = provider_info(transcriber)
    if info is None or info.max_audio_size_mb is None:
        return
    size_mb = len(audio) / (1024 * 1024)
    if size_mb > info.max_audio_size_mb:
        raise TranscriptionError(
            f"Audio is {size_mb:.1f} MB, {info.name} accepts at most "
            f"{info.max_audio_size_mb} MB"
        )


async def transcribe_audio_track(
    transcriber: Transcriber,
    audio: bytes,
    filename: str = "audio.wav",
    config: PipelineConfig | None = None,
) -> AudioAnalysis:
    """Transcribe extracted PCM audio.

    Duration comes from the service when reported, otherwise it is
    estimated from the byte length of the PCM data.

    Raises:
        TranscriptionError: If the audio exceeds the transcriber's upload
            limit or the transcription call fails.
    """
    config = config or PipelineConfig()
    check_audio_size(transcriber, audio)
    try:
        result = await transcriber.transcribe(
            audio,
            filename,
            language=config.language,
            whisper_model=config.transcription_model,
        )
    except Exception as e:
        raise TranscriptionError(f"Transcription failed: {e}") from e

    duration = result.duration
    if duration is None:
        duration = estimate_audio_duration(len(audio), config)
        logger.debug(f"Service reported no duration, estimated {duration}s")

    return AudioAnalysis(
        transcript=result.text,
        duration=duration,
        language=result.language,
    )


class AudioTranscriber:
    """Turns uploaded audio documents into searchable text.

    Args:
        transcriber: Provider implementing the Transcriber protocol.
        config: Pipeline configuration (language and model).

    Example:
        >>> audio = AudioTranscriber(get_provider("openai"))
        >>> text = await audio.extract_text_from_audio(data, "talk.mp3")
    """

    def __init__(self, transcriber: Transcriber, config: PipelineConfig | None = None):
        self.transcriber = transcriber
        self.config = config or PipelineConfig()

    async def transcribe_audio(self, data: bytes, filename: str) -> AudioAnalysis:
        """Transcribe an audio file as uploaded.

        Raises:
            TranscriptionError: If the file is too large for the transcriber
                or transcription fails.
        """
        logger.info(f'Transcribing audio "{filename}"...')
        check_audio_size(self.transcriber, data)
        try:
            result = await self.transcriber.transcribe(
                data,
                filename,
                language=self.config.language,
                whisper_model=self.config.transcription_model,
            )
        except Exception as e:
            raise TranscriptionError(f"Failed to transcribe audio: {e}") from e

        logger.info(f'Audio transcription completed for "{filename}"')
        return AudioAnalysis(
            transcript=result.text,
            duration=result.duration or 0,
            language=result.language,
            confidence=AUDIO_CONFIDENCE,
        )

    async def extract_text_from_audio(self, data: bytes, filename: str) -> str:
        """Transcript formatted with language and duration for indexing."""
        analysis = await self.transcribe_audio(data, filename)

        text = f"Audio Transcript:\n{analysis.transcript}"
        if analysis.language:
            text += f"\n\nLanguage: {analysis.language}"
        if analysis.duration:
            text += f"\n\nDuration: {format_duration(analysis.duration)}"
        return text
