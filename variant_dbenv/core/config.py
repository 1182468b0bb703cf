# Standard library imports
import os
from typing import Final, Optional
from dotenv import load_dotenv


class Settings:
    """
    Process-level settings loaded from environment variables.

    These are ambient defaults shared by every environment in the process
    (timezone, driver timeouts, mapper placeholder). Connection details of an
    individual environment never live here; they come from its properties file.
    """

    def __init__(self) -> None:
        # Load environment variables from .env file
        load_dotenv()

        # Timezone Configuration
        # Used to resolve "local midnight" when reading date-only values
        # (e.g., "UTC", "Europe/London", "America/New_York")
        self.timezone: Final[str] = os.getenv("TIMEZONE", "UTC")

        # MongoDB driver configuration
        self.server_selection_timeout_ms: Final[int] = int(
            os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "30000")
        )

        # Document mapper configuration
        # Mapping keys may not contain "." in MongoDB, so dots are swapped for this character
        self.map_key_dot_replacement: Final[str] = os.getenv("MAP_KEY_DOT_REPLACEMENT", "#")


# Default settings instance, built on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the default settings instance.

    Construction paths accept an explicit Settings object; this is only the
    fallback when none is passed.

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
