"""
videodigest.providers - AI provider abstraction layer.

The processing pipeline depends only on the protocols defined here;
``get_provider`` builds a concrete implementation by name.

Example:
    >>> from videodigest.providers import get_provider, VisionAnalyzer
    >>> provider = get_provider("openai")
    >>> isinstance(provider, VisionAnalyzer)
    True
"""

from videodigest.providers.base import (
    Provider,
    Reasoner,
    Transcriber,
    VisionAnalyzer,
)
from videodigest.providers.capabilities import (
    PROVIDER_INFO,
    Capability,
    ProviderInfo,
    provider_info,
)
from videodigest.providers.registry import get_provider, list_all, list_available
from videodigest.providers.types import TranscriptionResult, TranscriptionSegment

__all__ = [
    # Provider access
    "get_provider",
    "list_all",
    "list_available",
    # Base classes and protocols
    "Provider",
    "VisionAnalyzer",
    "Reasoner",
    "Transcriber",
    # Capability types
    "Capability",
    "ProviderInfo",
    "PROVIDER_INFO",
    "provider_info",
    # Result types
    "TranscriptionSegment",
    "TranscriptionResult",
]
