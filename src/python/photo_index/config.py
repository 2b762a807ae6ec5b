"""
Configuration management for photo-index.

Loads configuration from YAML files and environment variables. The indexing
thresholds end up in an IndexSettings instance that is handed to the
reconciler at construction time.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from photo_index.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Default locations to search for config.yaml
CONFIG_SEARCH_PATHS = [
    Path("config.yaml"),
    Path.home() / ".config" / "photo-index" / "config.yaml",
]


@dataclass(frozen=True)
class IndexSettings:
    """Thresholds used by the photo reconciler.

    Attributes:
        confidence_threshold: Classifier results at or below this score are dropped.
        staleness_window: Photos updated more recently than this are not refreshed.
        title_name_max_length: Location names longer than this are used alone in titles.
    """
    confidence_threshold: float = 0.15
    staleness_window: timedelta = timedelta(minutes=10)
    title_name_max_length: int = 40


@dataclass
class IndexConfig:
    """Configuration for the indexing run."""
    originals_path: Optional[str] = None
    confidence_threshold: float = 0.15
    staleness_minutes: float = 10
    title_name_max_length: int = 40

    def to_settings(self) -> IndexSettings:
        """Build the reconciler settings from this section."""
        return IndexSettings(
            confidence_threshold=self.confidence_threshold,
            staleness_window=timedelta(minutes=self.staleness_minutes),
            title_name_max_length=self.title_name_max_length,
        )


@dataclass
class DatabaseConfig:
    """Configuration for database connection."""
    uri: Optional[str] = None
    echo: bool = False


@dataclass
class GeocodingConfig:
    """Configuration for reverse geocoding."""
    enabled: bool = True
    url: str = "https://nominatim.openstreetmap.org/reverse"
    user_agent: str = "photo-index"
    timeout: float = 10.0
    language: str = "en"


@dataclass
class ClassifierConfig:
    """Configuration for the image classifier."""
    enabled: bool = True
    model: str = "google/vit-base-patch16-224"
    top_k: int = 10


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""
    index: IndexConfig = field(default_factory=IndexConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    geocoding: GeocodingConfig = field(default_factory=GeocodingConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary."""
        try:
            return cls(
                index=IndexConfig(**(data.get('index') or {})),
                database=DatabaseConfig(**(data.get('database') or {})),
                geocoding=GeocodingConfig(**(data.get('geocoding') or {})),
                classifier=ClassifierConfig(**(data.get('classifier') or {})),
                logging=LoggingConfig(**(data.get('logging') or {})),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from file.

        Args:
            config_path: Path to config file. If None, searches the default
                         locations and falls back to defaults when none exists.

        Returns:
            Config instance with environment overrides applied

        Raises:
            ConfigError: If an explicit config_path does not exist or is malformed.
        """
        if config_path is not None:
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
            config_file = config_path
        else:
            config_file = next((path for path in CONFIG_SEARCH_PATHS if path.exists()), None)

        if config_file is None:
            logger.debug("No config file found, using defaults")
            config = cls()
        else:
            logger.info("Loading config from %s", config_file)
            with open(config_file, "r", encoding="utf-8") as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"Could not parse {config_file}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config file {config_file} must contain a mapping")
            config = cls.from_dict(data)

        config._apply_env_overrides()
        return config

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if env_uri := os.getenv('PHOTO_INDEX_DB_URI'):
            self.database.uri = env_uri

        if env_originals := os.getenv('PHOTO_INDEX_ORIGINALS'):
            self.index.originals_path = env_originals


def get_originals_path(config: Config) -> Path:
    """
    Get the originals root directory from config.

    Raises:
        ConfigError: If no originals path is configured or it is not a directory.
    """
    if not config.index.originals_path:
        raise ConfigError("Config missing 'index.originals_path' setting.")

    path = Path(config.index.originals_path).expanduser()
    if not path.is_dir():
        raise ConfigError(f"Originals path is not a directory: {path}")
    return path
