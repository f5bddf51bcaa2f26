from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
from pathlib import Path
import json

class Settings(BaseSettings):
    # Core Settings
    APP_NAME: str = "MeshSniff"
    DEBUG: bool = False

    # Toggles (exposed in the setup wizard)
    MONITORING_ENABLED: bool = True
    DEEP_SCAN_ENABLED: bool = False
    NOTIFICATIONS_ENABLED: bool = False

    # Deep Scan
    MAX_DEEP_SCAN_BYTES: int = 100 * 1024 * 1024
    PREFIX_FETCH_BYTES: int = 512
    FETCH_TIMEOUT: float = 5.0

    # Only these request types are inspected
    WATCHED_RESOURCE_TYPES: List[str] = Field(
        default_factory=lambda: ["xmlhttprequest", "main_frame", "sub_frame", "other"]
    )
    MAX_WORKERS: int = 4

    # Paths
    FEED_DIRECTORY: Path = Path.home() / ".meshsniff" / "feed"
    DOWNLOAD_DIRECTORY: Path = Path.home() / "Downloads"
    CATALOG_FILE: Path = Path.home() / ".meshsniff" / "catalog.json"
    LOG_FILE: Path = Path.home() / ".meshsniff" / "meshsniff.log"

    CONFIG_FILE: Path = Path.home() / ".meshsniff" / "config.json"

    class Config:
        env_prefix = "MESHSNIFF_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_json(cls, config_path: Path = None):
        """Load settings from JSON config file if exists."""
        start_defaults = {}
        config_path = config_path or Path.home() / ".meshsniff" / "config.json"

        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    data = json.load(f)
                    for key in ("FEED_DIRECTORY", "DOWNLOAD_DIRECTORY", "CATALOG_FILE", "LOG_FILE"):
                        if key in data:
                            data[key] = Path(data[key])
                    start_defaults.update(data)
            except Exception as e:
                print(f"Warning: Failed to load config.json: {e}")

        return cls(**start_defaults)

# Global settings instance
try:
    settings = Settings.load_from_json()
except Exception:
    settings = Settings()

def save_settings(new_settings: dict, config_path: Path = None):
    """
    Save updated settings to user's JSON config file.
    Keys already in the file that are not being updated are kept.
    """
    config_path = config_path or settings.CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)

    def default_serializer(obj):
        return str(obj)

    try:
        current_data = {}
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    current_data = json.load(f)
            except (OSError, ValueError):
                current_data = {}

        current_data.update(new_settings)

        with open(config_path, "w") as f:
            json.dump(current_data, f, indent=4, default=default_serializer)

    except OSError as e:
        print(f"Failed to save settings: {e}")
