"""
videodigest.providers.openai - OpenAI provider.

Provides vision analysis (GPT-4o), reasoning and transcription (Whisper API)
via the OpenAI API.

Example:
    >>> from videodigest.providers import get_provider
    >>> provider = get_provider("openai")
    >>> result = await provider.transcribe(wav_bytes, "audio.wav")
    >>> print(result.text)
"""

from videodigest.providers.openai.client import OpenaiProvider

__all__ = ["OpenaiProvider"]
