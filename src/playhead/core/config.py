"""
Configuration management for Playhead
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class PlayerConfig:
    """Configuration for playback behaviour."""

    volume: float = 0.8  # Initial volume (0.0 - 1.0) for a fresh profile
    history_limit: int = 100
    restart_threshold_seconds: float = 3.0  # "Previous" restarts the track past this point
    stop_at_end_of_queue: bool = False  # Pause instead of replaying the last track
    resume_max_percentage: int = 95  # Tracks at or above this are considered finished
    resume_limit: int = 10

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be between 0 and 1, got {self.volume}")
        if self.history_limit < 1:
            raise ValueError(f"history_limit must be positive, got {self.history_limit}")
        if not 0 < self.resume_max_percentage <= 100:
            raise ValueError(
                f"resume_max_percentage must be in (0, 100], got {self.resume_max_percentage}"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/playhead/playhead.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of backup files to keep
    console_output: bool = False  # Also output to console (for debugging)


@dataclass
class WebConfig:
    """Configuration for the web backend."""

    host: str = "127.0.0.1"
    port: int = 8642
    allowed_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173"]
    )


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    web: WebConfig = field(default_factory=WebConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "playhead"
    return Path.home() / ".config" / "playhead"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/playhead (or ~/.config/playhead)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path.

    PLAYHEAD_DATA_DIR wins over XDG_DATA_HOME.
    """
    override = os.environ.get("PLAYHEAD_DATA_DIR")
    if override:
        return Path(override).expanduser()
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "playhead"
    return Path.home() / ".local" / "share" / "playhead"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Playhead Configuration

[player]
# Volume for a fresh profile (0.0 - 1.0); later changes are remembered
volume = 0.8

# Number of played tracks kept in history
history_limit = 100

# "Previous" restarts the current track when past this many seconds
restart_threshold_seconds = 3.0

# Pause at the end of a non-repeating queue instead of replaying the last track
stop_at_end_of_queue = false

# Tracks at or above this percentage no longer show under "Continue Watching"
resume_max_percentage = 95

# Maximum number of "Continue Watching" items
resume_limit = 10

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/playhead/playhead.log)
# log_file = "/path/to/custom/playhead.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to console (useful for debugging)
console_output = false

[web]
host = "127.0.0.1"
port = 8642
allowed_origins = ["http://localhost:5173"]
""".strip()


def _parse_player(player_data: dict) -> PlayerConfig:
    defaults = PlayerConfig()
    return PlayerConfig(
        volume=float(player_data.get("volume", defaults.volume)),
        history_limit=int(player_data.get("history_limit", defaults.history_limit)),
        restart_threshold_seconds=float(
            player_data.get("restart_threshold_seconds", defaults.restart_threshold_seconds)
        ),
        stop_at_end_of_queue=player_data.get(
            "stop_at_end_of_queue", defaults.stop_at_end_of_queue
        ),
        resume_max_percentage=int(
            player_data.get("resume_max_percentage", defaults.resume_max_percentage)
        ),
        resume_limit=int(player_data.get("resume_limit", defaults.resume_limit)),
    )


def _parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML, falling back to defaults per key."""
    config = Config()

    if "player" in toml_data:
        player_data = toml_data["player"]
        try:
            config.player = _parse_player(player_data)
            config.player.validate()
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Invalid player configuration: {e}")
            logger.warning("Using default player configuration.")
            config.player = PlayerConfig()

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get("backup_count", config.logging.backup_count),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    if "web" in toml_data:
        web_data = toml_data["web"]
        config.web = WebConfig(
            host=web_data.get("host", config.web.host),
            port=web_data.get("port", config.web.port),
            allowed_origins=web_data.get(
                "allowed_origins", config.web.allowed_origins
            ),
        )

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - PLAYHEAD_LOG_LEVEL
    - PLAYHEAD_ALLOWED_ORIGINS (comma-separated)
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(create_default_config())
            logger.info(f"Created default configuration at: {config_path}")
        except OSError as e:
            logger.warning(f"Could not write default configuration to {config_path}: {e}")
        config = Config()
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            config = _parse_config(toml_data)
        except (
            OSError,
            tomllib.TOMLDecodeError,
            AttributeError,
            TypeError,
            ValueError,
        ) as e:
            logger.error(f"Error loading configuration from {config_path}: {e}")
            logger.warning("Using default configuration.")
            config = Config()

    log_level = os.environ.get("PLAYHEAD_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    allowed_origins = os.environ.get("PLAYHEAD_ALLOWED_ORIGINS")
    if allowed_origins:
        config.web.allowed_origins = [
            origin.strip() for origin in allowed_origins.split(",") if origin.strip()
        ]

    return config


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
