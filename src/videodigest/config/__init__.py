"""
Configuration for videodigest.

Contains pipeline defaults and the layered config loader.
"""

from videodigest.config.loader import (
    ConfigSource,
    PipelineConfig,
    clear_config_cache,
    get_config,
)

__all__ = [
    "ConfigSource",
    "PipelineConfig",
    "get_config",
    "clear_config_cache",
]
