"""
Flowsearch Configuration

Loads configuration from environment variables with sensible defaults.
Only the runner and the parallel dispatcher read this; the search core takes
everything as arguments.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Application configuration loaded from environment variables."""

    # Puzzle defaults
    START_VALVE: str = os.getenv("FLOWSEARCH_START", "AA")
    SOLO_MINUTES: int = int(os.getenv("FLOWSEARCH_SOLO_MINUTES", "30"))
    DUO_MINUTES: int = int(os.getenv("FLOWSEARCH_DUO_MINUTES", "26"))

    # Search tuning
    # Worker processes for parallel dispatch; defaults to one per CPU
    WORKERS: int = int(os.getenv("FLOWSEARCH_WORKERS", str(os.cpu_count() or 1)))
    MEMOIZE: bool = _env_flag("FLOWSEARCH_MEMOIZE", "true")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    SCENARIOS_DIR: Path = PROJECT_ROOT / "examples" / "volcano" / "scenarios"

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are out of range."""
        if cls.WORKERS < 1:
            raise ValueError(
                f"FLOWSEARCH_WORKERS must be at least 1 (got {cls.WORKERS})"
            )

        if cls.SOLO_MINUTES < 0 or cls.DUO_MINUTES < 0:
            raise ValueError(
                "FLOWSEARCH_SOLO_MINUTES and FLOWSEARCH_DUO_MINUTES must be non-negative"
            )

        if not cls.START_VALVE:
            raise ValueError("FLOWSEARCH_START must name a valve")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Flowsearch Configuration:",
            f"  Start Valve: {cls.START_VALVE}",
            f"  Solo Minutes: {cls.SOLO_MINUTES}",
            f"  Duo Minutes: {cls.DUO_MINUTES}",
            f"  Workers: {cls.WORKERS}",
            f"  Memoize: {cls.MEMOIZE}",
        ]
        return "\n".join(lines)
