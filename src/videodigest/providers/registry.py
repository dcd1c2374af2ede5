"""
videodigest.providers.registry - Provider discovery and instance management.

Example:
    >>> from videodigest.providers.registry import get_provider
    >>> provider = get_provider("gpt-4o")
    >>> provider.info.name
    'openai'
"""

from __future__ import annotations

import logging
from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from videodigest.providers.base import Provider

logger = logging.getLogger(__name__)


# Maps canonical names to module paths. Provider classes follow the
# naming convention {Name}Provider, e.g. "openai" -> OpenaiProvider.
PROVIDER_MODULES: dict[str, str] = {
    "openai": "videodigest.providers.openai",
}

# Maps alias -> canonical name
PROVIDER_ALIASES: dict[str, str] = {
    "gpt-4o": "openai",
    "gpt": "openai",
    "whisper-api": "openai",
}


def _resolve_name(name: str) -> str:
    """Resolve provider aliases to canonical names (case-insensitive)."""
    normalized = name.lower().strip()
    return PROVIDER_ALIASES.get(normalized, normalized)


def _canonical_to_class_name(canonical: str) -> str:
    """Convert canonical provider name to class name ("openai" -> "OpenaiProvider")."""
    return "".join(part.title() for part in canonical.split("-")) + "Provider"


def get_provider(name: str, **kwargs) -> Provider:
    """Create a provider instance by name.

    Args:
        name: Provider name or alias (e.g., "openai", "gpt-4o").
        **kwargs: Provider-specific constructor options.

    Returns:
        New provider instance.

    Raises:
        ValueError: If provider name is unknown.
    """
    canonical = _resolve_name(name)
    module_path = PROVIDER_MODULES.get(canonical)
    if module_path is None:
        raise ValueError(
            f"Unknown provider '{name}'. Known providers: {', '.join(list_all())}"
        )

    module = import_module(module_path)
    provider_cls = getattr(module, _canonical_to_class_name(canonical))
    logger.debug(f"Creating provider {canonical} ({provider_cls.__name__})")
    return provider_cls(**kwargs)


def list_all() -> list[str]:
    """List all known provider names."""
    return sorted(PROVIDER_MODULES)


def list_available() -> list[str]:
    """List provider names that are configured and ready to use."""
    return [name for name in list_all() if get_provider(name).is_available()]
