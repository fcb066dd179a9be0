"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DOCSETTINGS_ prefix (e.g., DOCSETTINGS_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DOCSETTINGS_ prefix.

    Examples:
        DOCSETTINGS_DATA_DIR=~/.local/share/docsettings
        DOCSETTINGS_STRICT_MODE=true
        DOCSETTINGS_FETCH_TIMEOUT=5
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCSETTINGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Data files
    data_dir: Optional[str] = Field(
        default=None,
        description="User data directory searched for templates and assets before the built-in data",
    )

    # Resolution behaviour
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat warnings (e.g. undeducible output format) as errors",
    )

    debug_mode: bool = Field(
        default=False,
        description="Force maximum logging verbosity during resolution",
    )

    # Remote reads
    fetch_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for include files, templates or metadata fetched by URL",
    )

    def dataDir_get(self, override: Optional[str] = None) -> Optional[Path]:
        """
        Return the effective user data directory.

        Args:
            override: Directory given explicitly for one resolution (wins
                      over the environment setting)

        Returns:
            Expanded Path, or None when no user data directory is configured

        Example:
            >>> settings = AppSettings(data_dir="~/pandata")
            >>> settings.dataDir_get().name
            'pandata'
        """
        candidate = override or self.data_dir
        if not candidate:
            return None
        return Path(candidate).expanduser()


# Singleton instance - import this in your code
appsettings = AppSettings()
