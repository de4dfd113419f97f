"""Inlay hint synchronization engine."""

from .config import DispatchConfig, EngineConfig, HintsConfig
from .hints.updater import HintsUpdater, UpdaterState, activate

__all__ = [
    "DispatchConfig",
    "EngineConfig",
    "HintsConfig",
    "HintsUpdater",
    "UpdaterState",
    "activate",
]
