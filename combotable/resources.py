"""Locate and load table state documents from disk."""

from __future__ import annotations

from pathlib import Path

from .config import AssetConfig
from .snapshot import TableSnapshot


class ResourceManager:
    """Utility to locate optional state files."""

    def __init__(self, config: AssetConfig | None = None) -> None:
        self.config = config or AssetConfig()

    def resolve(self, path: Path | str) -> Path:
        """Resolve a path relative to the states directory."""

        candidate = Path(path)
        if not candidate.is_absolute() and not candidate.exists():
            candidate = self.config.root / self.config.states / candidate
        return candidate

    def require(self, path: Path | str) -> Path:
        """Ensure that the given state file exists on disk."""

        resolved = self.resolve(path)
        if not resolved.exists():
            raise FileNotFoundError(f"State file not found: {resolved}")
        return resolved

    def load_state(self, path: Path | str) -> TableSnapshot:
        """Read a JSON state document and decode it into a snapshot."""

        resolved = self.require(path)
        return TableSnapshot.from_state(resolved.read_text(encoding="utf-8"))

    def ensure_directories(self) -> None:
        """Create the state directory if it is missing."""

        (self.config.root / self.config.states).mkdir(parents=True, exist_ok=True)
