"""
videodigest.providers.capabilities - Capability definitions and limits.

Example:
    >>> from videodigest.providers.capabilities import Capability, ProviderInfo
    >>> info = ProviderInfo(
    ...     name="openai",
    ...     capabilities=frozenset({Capability.TRANSCRIBE, Capability.VISION}),
    ... )
    >>> info.can(Capability.TRANSCRIBE)
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Capability(Enum):
    """AI capabilities that providers can offer."""

    TRANSCRIBE = auto()  # Audio -> text
    VISION = auto()  # Image -> text
    REASON = auto()  # Text -> text (chat/completion)


@dataclass(frozen=True)
class ProviderInfo:
    """Immutable provider metadata and capabilities.

    Attributes:
        name: Provider identifier (e.g., "openai").
        capabilities: Frozenset of Capability enums this provider supports.
        max_audio_size_mb: Maximum audio upload size in MB (None = unlimited).
        max_images_per_request: Maximum images in one request (None = unlimited).
    """

    name: str
    capabilities: frozenset[Capability]
    max_audio_size_mb: float | None = None
    max_images_per_request: int | None = None

    def can(self, capability: Capability) -> bool:
        """Check if provider has a specific capability."""
        return capability in self.capabilities


def provider_info(obj: object) -> ProviderInfo | None:
    """Return the ProviderInfo an analyzer/transcriber exposes, if any.

    Collaborators are duck-typed protocols, so plain callables without an
    ``info`` property (or with something else under that name) yield None.
    """
    info = getattr(obj, "info", None)
    return info if isinstance(info, ProviderInfo) else None


PROVIDER_INFO: dict[str, ProviderInfo] = {
    "openai": ProviderInfo(
        name="openai",
        capabilities=frozenset({Capability.TRANSCRIBE, Capability.VISION, Capability.REASON}),
        max_audio_size_mb=25,
        max_images_per_request=10,
    ),
}


__all__ = [
    "Capability",
    "ProviderInfo",
    "PROVIDER_INFO",
    "provider_info",
]
