"""
videodigest.providers.openai.client - OpenAI provider implementation.

Implements VisionAnalyzer (GPT-4o), Reasoner (chat completions) and
Transcriber (Whisper API) protocols on top of the async OpenAI SDK.

Example:
    >>> provider = OpenaiProvider()
    >>> text = await provider.analyze_images([png_bytes], prompt="Describe this scene")
    >>> result = await provider.transcribe(wav_bytes, "audio.wav")
    >>> print(result.text)
"""

from __future__ import annotations

import base64
import logging
import os
from typing import Any

from videodigest.providers.base import Provider, Reasoner, Transcriber, VisionAnalyzer
from videodigest.providers.capabilities import PROVIDER_INFO, ProviderInfo
from videodigest.providers.types import TranscriptionResult, TranscriptionSegment

logger = logging.getLogger(__name__)

# Default models
DEFAULT_CHAT_MODEL = "gpt-4o"
DEFAULT_WHISPER_MODEL = "whisper-1"

# Maximum images per request (OpenAI limit)
MAX_IMAGES_PER_REQUEST = 10

# Audio extension -> MIME type for uploads
_AUDIO_MEDIA_TYPES: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
    ".aac": "audio/aac",
}


def _detect_image_type(data: bytes) -> str:
    """Detect image MIME type from magic bytes.

    Defaults to "image/png", the format frames are extracted in.
    """
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/png"


def audio_media_type(filename: str) -> str:
    """MIME type for an audio upload, from its extension (default audio/mpeg)."""
    suffix = os.path.splitext(filename)[1].lower()
    return _AUDIO_MEDIA_TYPES.get(suffix, "audio/mpeg")


def _encode_image(data: bytes) -> str:
    """Encode image bytes as a data URL."""
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{_detect_image_type(data)};base64,{b64}"


def _segment_field(segment: Any, key: str) -> Any:
    """Read a segment field from either an SDK object or a plain dict."""
    if isinstance(segment, dict):
        return segment.get(key)
    return getattr(segment, key, None)


class OpenaiProvider(Provider, VisionAnalyzer, Reasoner, Transcriber):
    """OpenAI provider for vision analysis, reasoning and transcription.

    Args:
        model: Chat/vision model identifier. Defaults to "gpt-4o".
        whisper_model: Whisper model for transcription. Defaults to "whisper-1".
        api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
        max_tokens: Default max tokens for chat responses.
        timeout: Request timeout in seconds passed to the SDK client.
    """

    def __init__(
        self,
        model: str = DEFAULT_CHAT_MODEL,
        whisper_model: str = DEFAULT_WHISPER_MODEL,
        api_key: str | None = None,
        max_tokens: int = 1024,
        timeout: float | None = None,
    ):
        self._model = model
        self._whisper_model = whisper_model
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._client = None

    @property
    def info(self) -> ProviderInfo:
        return PROVIDER_INFO["openai"]

    def _resolve_api_key(self) -> str | None:
        """Resolve API key from init arg or environment."""
        return self._api_key or os.environ.get("OPENAI_API_KEY")

    def is_available(self) -> bool:
        """Check if the OpenAI SDK is installed and API key is set."""
        try:
            import openai  # noqa: F401
        except ImportError:
            return False
        return self._resolve_api_key() is not None

    def _get_client(self) -> Any:
        """Lazy-load the async OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            api_key = self._resolve_api_key()
            if not api_key:
                raise ValueError(
                    "OPENAI_API_KEY not set. "
                    "Set the environment variable or pass api_key to the provider."
                )
            kwargs: dict[str, Any] = {"api_key": api_key}
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def analyze_images(
        self,
        images: list[bytes],
        prompt: str,
        **kwargs,
    ) -> str:
        """Analyze images using GPT-4o vision.

        The prompt comes first, followed by one image part per frame.

        Args:
            images: Encoded image bytes (max 10).
            prompt: Question or instruction about the images.
            **kwargs: Additional options:
                model (str): Override the default model.
                max_tokens (int): Override default max tokens.

        Returns:
            Response text ("" if the model returned no content).

        Raises:
            ValueError: If more than MAX_IMAGES_PER_REQUEST images are given.
        """
        if len(images) > MAX_IMAGES_PER_REQUEST:
            raise ValueError(
                f"OpenAI accepts at most {MAX_IMAGES_PER_REQUEST} images per "
                f"request, got {len(images)}"
            )

        model = kwargs.pop("model", self._model)
        max_tokens = kwargs.pop("max_tokens", self._max_tokens)
        client = self._get_client()

        content: list[dict] = [{"type": "text", "text": prompt}]
        for img in images:
            content.append(
                {
                    "type": "image_url",
                    "image_url": {"url": _encode_image(img)},
                }
            )

        response = await client.chat.completions.create(
            model=model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": content}],
        )
        return response.choices[0].message.content or ""

    async def reason(
        self,
        messages: list[dict],
        **kwargs,
    ) -> str:
        """Generate text response using chat completions.

        Args:
            messages: List of message dicts with "role" and "content" keys.
            **kwargs: Additional options:
                model (str): Override the default model.
                max_tokens (int): Override default max tokens.

        Returns:
            Response text ("" if the model returned no content).
        """
        model = kwargs.pop("model", self._model)
        max_tokens = kwargs.pop("max_tokens", self._max_tokens)
        client = self._get_client()

        response = await client.chat.completions.create(
            model=model,
            max_tokens=max_tokens,
            messages=messages,
        )
        return response.choices[0].message.content or ""

    async def transcribe(
        self,
        audio: bytes,
        filename: str,
        language: str | None = None,
        **kwargs,
    ) -> TranscriptionResult:
        """Transcribe audio using the Whisper API.

        Requests ``verbose_json`` so the response carries the detected
        language and the audio duration alongside the text.

        Args:
            audio: Encoded audio bytes.
            filename: Upload filename (extension selects the MIME type).
            language: Optional language code (e.g., "en", "es").
            **kwargs: Additional options:
                whisper_model (str): Override the default Whisper model.

        Returns:
            TranscriptionResult with text, segments, language and duration.
        """
        whisper_model = kwargs.pop("whisper_model", self._whisper_model)
        client = self._get_client()

        api_kwargs: dict[str, Any] = {
            "file": (filename, audio, audio_media_type(filename)),
            "model": whisper_model,
            "response_format": "verbose_json",
        }
        if language:
            api_kwargs["language"] = language

        response = await client.audio.transcriptions.create(**api_kwargs)

        segments = [
            TranscriptionSegment(
                start=_segment_field(seg, "start"),
                end=_segment_field(seg, "end"),
                text=(_segment_field(seg, "text") or "").strip(),
            )
            for seg in getattr(response, "segments", None) or []
        ]
        duration = getattr(response, "duration", None)

        return TranscriptionResult(
            text=response.text,
            segments=segments,
            language=getattr(response, "language", None) or language,
            duration=float(duration) if duration is not None else None,
            provider="openai",
        )
