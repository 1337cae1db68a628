from codegraph_rca.config.groups import (
    CacheConfig,
    ChunkingConfig,
    CorrelationConfig,
    DatabaseConfig,
    ObservabilityConfig,
)
from codegraph_rca.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "ChunkingConfig",
    "CacheConfig",
    "DatabaseConfig",
    "CorrelationConfig",
    "ObservabilityConfig",
]
