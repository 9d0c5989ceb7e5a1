"""Configuration for Later search."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    data_dir: Path = field(default_factory=lambda: Path.home() / ".local" / "share" / "later")
    user_id: str | None = None
    debounce_ms: int = 300
    max_query_length: int = 500
    default_limit: int = 50

    @property
    def db_path(self) -> Path:
        return self.data_dir / "later.db"

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000
