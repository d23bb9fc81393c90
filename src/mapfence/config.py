"""mapfence configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """Raised when a configuration value is missing or invalid.

    Example:
        >>> Settings(_env_file=None, CLOSE_THRESHOLD=0).require_close_threshold()
        Traceback (most recent call last):
        ...
        ConfigError: Close threshold must be positive (got 0.0). Set the
        CLOSE_THRESHOLD environment variable.
    """

    def __init__(self, key_name: str, env_var: str, detail: str) -> None:
        """Initialize configuration error.

        Args:
            key_name: Human-readable name of the offending key.
            env_var: Environment variable name to set.
            detail: What is wrong with the current value.
        """
        self.key_name = key_name
        self.env_var = env_var
        message = f"{key_name} {detail}. Set the {env_var} environment variable."
        super().__init__(message)


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Drawing
    CLOSE_THRESHOLD: float = 2.0  # percentage units from the first vertex

    # Regions
    FLOOR_OPTIONS: tuple[int, ...] = (1, 2, 3)
    DEFAULT_FLOOR: int = 1
    REGION_COLORS: tuple[str, ...] = (
        "#4a90d9",
        "#e74c3c",
        "#27ae60",
        "#9b59b6",
        "#f39c12",
        "#1abc9c",
        "#e67e22",
        "#34495e",
    )

    # Interaction timing
    REJECT_PULSE_SECONDS: float = 0.5
    CONFIRM_TIMEOUT_SECONDS: float = 0.0  # 0 = disarm only on blur

    # Storage
    STORE_PATH: Path = Path("regions.json")

    @field_validator("FLOOR_OPTIONS")
    @classmethod
    def _sort_floor_options(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        return tuple(sorted(set(value)))

    def require_close_threshold(self) -> float:
        """Get the close-gesture threshold, raising ConfigError if unusable.

        Returns:
            The threshold in percentage-space units.

        Raises:
            ConfigError: If CLOSE_THRESHOLD is not strictly positive.
        """
        if self.CLOSE_THRESHOLD <= 0:
            raise ConfigError(
                "Close threshold",
                "CLOSE_THRESHOLD",
                f"must be positive (got {float(self.CLOSE_THRESHOLD)})",
            )
        return float(self.CLOSE_THRESHOLD)

    def require_region_colors(self) -> tuple[str, ...]:
        """Get the region colour palette, raising ConfigError if empty."""
        if not self.REGION_COLORS:
            raise ConfigError("Region colour palette", "REGION_COLORS", "is empty")
        return self.REGION_COLORS


# Singleton instance for import convenience
settings = Settings()
