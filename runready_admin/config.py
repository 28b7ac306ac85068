"""Configuration for RunReady."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


# Paths
DEFAULT_DATA_DIR = Path("data")


@dataclass
class RunReadyConfig:
    """Where schedules are stored and how they are presented."""

    data_dir: Path = DEFAULT_DATA_DIR
    notifications_enabled: bool = True  # Default for newly created events
    twenty_four_hour: bool = False  # Clock style for displayed times

    @classmethod
    def from_env(cls) -> "RunReadyConfig":
        """Load configuration from environment variables."""
        return cls(
            data_dir=Path(os.getenv("RUNREADY_DATA_DIR", str(DEFAULT_DATA_DIR))),
            notifications_enabled=os.getenv("RUNREADY_NOTIFICATIONS", "true").lower() == "true",
            twenty_four_hour=os.getenv("RUNREADY_CLOCK", "12h").lower() == "24h",
        )

    @property
    def schedules_path(self) -> Path:
        return self.data_dir / "schedules.json"

    @property
    def templates_path(self) -> Path:
        return self.data_dir / "templates.json"

    @property
    def alerts_path(self) -> Path:
        return self.data_dir / "alerts.json"
