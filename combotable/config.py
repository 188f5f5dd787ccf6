"""Configuration helpers for the combotable client."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .logging_utils import LOG_LEVEL
from .rules import MIN_COMBINATION_SIZE


@dataclass(frozen=True)
class DisplayConfig:
    """Visual settings for the pygame display."""

    width: int = 1280
    height: int = 720
    caption: str = "Combotable"
    frame_rate: int = 60
    fullscreen: bool = False


@dataclass(frozen=True)
class AssetConfig:
    """Configuration for locating local state documents."""

    root: Path = Path("assets")
    states: Path = Path("states")

    def state_path(self, name: str) -> Path:
        """Return the full path for a saved table state."""

        return self.root / self.states / name


@dataclass(frozen=True)
class InteractionConfig:
    """How drags start and how strictly table takes are pre-checked."""

    drag_threshold: float = 5.0
    touch_enabled: bool = True
    strict_shrink: bool = False
    min_combination_size: int = MIN_COMBINATION_SIZE


@dataclass(frozen=True)
class ClientConfig:
    """High-level configuration structure for the client."""

    display: DisplayConfig = field(default_factory=DisplayConfig)
    assets: AssetConfig = field(default_factory=AssetConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    log_level: str = LOG_LEVEL
