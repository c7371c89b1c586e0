"""Domain layer: pure descriptor and configuration types."""

from conman.domain.types import (
    AppDescriptor,
    GlobalConfig,
    IconDescriptor,
    Platform,
    TargetRecord,
)

__all__ = [
    "AppDescriptor",
    "GlobalConfig",
    "IconDescriptor",
    "Platform",
    "TargetRecord",
]
