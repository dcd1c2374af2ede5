"""
videodigest.providers.base - Abstract base classes and protocols for providers.

This module defines the contracts the processing pipeline requires from
remote AI services. The pipeline only ever talks to these protocols, so
tests can substitute fakes and other vendors can be plugged in.

Classes:
    Provider: Abstract base class for all AI providers.

Protocols:
    VisionAnalyzer: Prompt + a bounded list of images -> free text.
    Reasoner: Chat messages -> free text (summary generation).
    Transcriber: Mono PCM audio -> transcript with optional duration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from videodigest.providers.capabilities import ProviderInfo
    from videodigest.providers.types import TranscriptionResult


class Provider(ABC):
    """Abstract base class for all AI providers.

    Providers implement this base class to describe their capabilities and
    availability, plus one or more of the protocols below.
    """

    @property
    @abstractmethod
    def info(self) -> ProviderInfo:
        """Return provider capabilities and limits."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is configured and ready (SDK installed, key set)."""
        ...


@runtime_checkable
class VisionAnalyzer(Protocol):
    """Protocol for image analysis providers.

    Example:
        >>> analyzer: VisionAnalyzer = get_provider("openai")
        >>> text = await analyzer.analyze_images(
        ...     [frame_bytes_1, frame_bytes_2],
        ...     prompt="What is happening in these frames?",
        ... )
    """

    async def analyze_images(
        self,
        images: list[bytes],
        prompt: str,
        **kwargs,
    ) -> str:
        """Analyze one or more images with a prompt.

        Args:
            images: Encoded image bytes (PNG, JPEG). Callers must respect the
                provider's ``max_images_per_request``.
            prompt: Question or instruction about the images.
            **kwargs: Provider-specific options (e.g., model, max_tokens).

        Returns:
            Free-form text response.

        Raises:
            ValueError: If more images are passed than one request allows.
        """
        ...


@runtime_checkable
class Reasoner(Protocol):
    """Protocol for text generation / chat completion.

    Example:
        >>> reasoner: Reasoner = get_provider("openai")
        >>> summary = await reasoner.reason(
        ...     [{"role": "user", "content": "Summarize these notes..."}]
        ... )
    """

    async def reason(
        self,
        messages: list[dict],
        **kwargs,
    ) -> str:
        """Generate a text response.

        Args:
            messages: List of message dicts with "role" and "content" keys.
            **kwargs: Provider-specific options (e.g., model, max_tokens).

        Returns:
            Free-form text response (may be empty).
        """
        ...


@runtime_checkable
class Transcriber(Protocol):
    """Protocol for speech-to-text providers.

    Example:
        >>> transcriber: Transcriber = get_provider("openai")
        >>> result = await transcriber.transcribe(wav_bytes, "audio.wav")
        >>> print(result.text, result.duration)
    """

    async def transcribe(
        self,
        audio: bytes,
        filename: str,
        language: str | None = None,
        **kwargs,
    ) -> TranscriptionResult:
        """Transcribe audio to text.

        Args:
            audio: Encoded audio (e.g. 16kHz mono s16le WAV).
            filename: Name sent with the upload; its extension tells the
                service the container format.
            language: Optional language code (e.g., "en"). None auto-detects.
            **kwargs: Provider-specific options (e.g., model).

        Returns:
            TranscriptionResult with text and, if reported, duration.
        """
        ...


__all__ = [
    "Provider",
    "VisionAnalyzer",
    "Reasoner",
    "Transcriber",
]
