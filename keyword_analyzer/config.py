"""
Runtime configuration for the HTTP service.

Analysis constants live in rules.py and are not environment-tunable.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class AppConfig:
    """Service configuration read from the environment."""

    def __init__(self):
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))
        self.require_csv_extension = _env_flag("REQUIRE_CSV_EXTENSION", True)


config = AppConfig()
