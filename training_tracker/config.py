"""Configuration management for the Training Tracker tool."""

import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./training_tracker.db")

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Experiment defaults
    DEFAULT_WEEKS: int = int(os.getenv("DEFAULT_WEEKS", "12"))
    DEFAULT_SESSIONS: int = int(os.getenv("DEFAULT_SESSIONS", "4"))
    DEFAULT_RUNS: int = int(os.getenv("DEFAULT_RUNS", "500"))

    # Accepted experiment input ranges (inclusive)
    MIN_WEEKS: int = 2
    MAX_WEEKS: int = 52
    MIN_SESSIONS: int = 1
    MAX_SESSIONS: int = 14
    MIN_RUNS: int = 50
    MAX_RUNS: int = 5000

    # Parallel plan simulation (0 = one worker per plan)
    SIMULATION_WORKERS: int = int(os.getenv("SIMULATION_WORKERS", "0"))

    # Export
    EXPORT_DELIMITER: str = os.getenv("EXPORT_DELIMITER", ";")

    # Workout log
    MAX_INTENSITY: int = int(os.getenv("MAX_INTENSITY", "10"))

    @classmethod
    def get_simulation_workers(cls, plan_count: int) -> Optional[int]:
        """Get thread count for a batch of plans, None to run sequentially."""
        if plan_count <= 1:
            return None
        if cls.SIMULATION_WORKERS <= 0:
            return plan_count
        return min(cls.SIMULATION_WORKERS, plan_count)

    @classmethod
    def validate(cls) -> bool:
        """Validate experiment defaults against the accepted ranges."""
        checks = [
            ("DEFAULT_WEEKS", cls.DEFAULT_WEEKS, cls.MIN_WEEKS, cls.MAX_WEEKS),
            ("DEFAULT_SESSIONS", cls.DEFAULT_SESSIONS, cls.MIN_SESSIONS, cls.MAX_SESSIONS),
            ("DEFAULT_RUNS", cls.DEFAULT_RUNS, cls.MIN_RUNS, cls.MAX_RUNS),
        ]
        for name, value, low, high in checks:
            if not low <= value <= high:
                raise ValueError(f"{name}={value} is outside the accepted range {low}-{high}")

        if len(cls.EXPORT_DELIMITER) != 1:
            raise ValueError("EXPORT_DELIMITER must be a single character")
        return True


config = Config()
