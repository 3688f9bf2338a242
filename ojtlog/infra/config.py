"""
Configuration management using Pydantic Settings.

Architecture Decision: Why pydantic-settings?
- Type-safe configuration with validation
- Supports multiple sources (YAML, env vars, defaults)
- Easy to test with different configurations
"""

import os
from pathlib import Path
from typing import Optional
import yaml

from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with multiple sources:
    1. Default values (hardcoded)
    2. YAML config file (only for keys not set in the environment)
    3. Environment variables (highest priority)
    """
    model_config = SettingsConfigDict(
        env_prefix='OJTLOG_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        validate_assignment=True,
    )

    # Application paths
    app_name: str = "OJTLog"
    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None

    # Database
    database_url: Optional[str] = None

    # Training defaults
    default_required_hours: float = Field(default=500.0, gt=0, description="Target for users without settings")
    page_size: int = Field(default=10, gt=0, description="Tasks per page in the log table")
    export_basename: str = Field(default="OJT_Time_Logs", description="Prefix of exported file names")

    # HTTP
    identity_header: str = Field(default="X-User-Id", description="Header carrying the authenticated user id")
    host: str = "127.0.0.1"
    port: int = 8000

    log_level: str = "INFO"

    _explicit: set = PrivateAttr(default_factory=set)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Fields set by kwargs or environment win over the YAML file
        self._explicit = set(self.model_fields_set)
        self._init_paths()
        self._load_yaml_config()

    def _init_paths(self):
        """Initialize default paths based on OS"""
        if self.config_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.config'
            self.config_dir = base / self.app_name.lower()

        if self.data_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA'))
            else:  # Linux/Mac
                base = Path.home() / '.local' / 'share'
            self.data_dir = base / self.app_name.lower()

    def _load_yaml_config(self):
        """Load configuration from YAML file"""
        # First check in workspace config folder
        config_file = Path("config/settings.yaml")
        if not config_file.exists():
            # Then check in user's config directory
            config_file = self.config_dir / "settings.yaml"

        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
            if config_data:
                self.apply_overrides(config_data)

    def apply_overrides(self, data: dict):
        """
        Apply YAML values for fields the environment did not set.

        Each value goes through assignment validation, so field constraints
        (e.g. page_size > 0) apply without building a second Settings.
        """
        for key, value in data.items():
            if key in type(self).model_fields and key not in self._explicit:
                setattr(self, key, value)

    def get_db_url(self) -> str:
        """Get database URL, creating default if not set"""
        if self.database_url:
            return self.database_url

        self.data_dir.mkdir(parents=True, exist_ok=True)
        db_path = self.data_dir / 'ojtlog.db'
        return f"sqlite+aiosqlite:///{db_path}"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from file"""
    global _settings
    _settings = Settings()
    return _settings
