"""Configuration management for queuecast."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from ..core.logging import get_logger
from ..io.catalog_store import CATALOG_FILE_NAME, resolve_config_dir

logger = get_logger(__name__)

CONFIG_FILE_NAME = "config.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("standard", "json")


@dataclass(frozen=True)
class Config:
    """Immutable configuration object for the application."""

    config_dir: str
    catalog_file: str = CATALOG_FILE_NAME

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "standard"
    log_file: Optional[str] = None
    log_max_file_size_mb: int = 10
    log_backup_count: int = 5

    # Internal tracking
    _loaded_config_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.config_dir:
            raise ValueError("QUEUECAST_CONFIG_DIR is required")
        if not self.catalog_file or Path(self.catalog_file).name != self.catalog_file:
            raise ValueError("QUEUECAST_CATALOG_FILE must be a plain file name")

        object.__setattr__(self, 'log_level', str(self.log_level).upper())
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}")
        if self.log_max_file_size_mb <= 0:
            raise ValueError("LOG_MAX_FILE_SIZE_MB must be positive")
        if self.log_backup_count < 0:
            raise ValueError("LOG_BACKUP_COUNT must not be negative")

    @property
    def catalog_path(self) -> Path:
        return Path(self.config_dir) / self.catalog_file

    def log_config(self) -> None:
        """Log the current configuration."""
        if self._loaded_config_file:
            logger.debug(f"Configuration loaded from: {self._loaded_config_file}")
        else:
            logger.debug("Configuration loaded from: defaults and environment")
        logger.debug(f"  CONFIG_DIR: {self.config_dir}")
        logger.debug(f"  CATALOG_FILE: {self.catalog_file}")
        logger.debug(f"  LOG_LEVEL: {self.log_level}")
        logger.debug(f"  LOG_FORMAT: {self.log_format}")
        logger.debug(f"  LOG_FILE: {self.log_file}")


class ConfigLoader:
    """Loads configuration from multiple sources with precedence."""

    ENV_MAPPING = {
        'QUEUECAST_CONFIG_DIR': 'config_dir',
        'QUEUECAST_CATALOG_FILE': 'catalog_file',
        'QUEUECAST_LOG_LEVEL': 'log_level',
        'QUEUECAST_LOG_FORMAT': 'log_format',
        'QUEUECAST_LOG_FILE': 'log_file',
        'QUEUECAST_LOG_MAX_FILE_SIZE_MB': 'log_max_file_size_mb',
        'QUEUECAST_LOG_BACKUP_COUNT': 'log_backup_count',
    }
    INT_KEYS = ('log_max_file_size_mb', 'log_backup_count')

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize the loader.

        Args:
            environ: Environment to read instead of os.environ (no .env loading then)
        """
        self.environ = environ
        self.logger = get_logger(__name__)

    def load_config(self,
                    config_file: Optional[str] = None,
                    cli_args: Optional[Dict[str, Any]] = None) -> Config:
        """Load configuration from all sources with precedence.

        Precedence order (highest to lowest):
        1. CLI arguments
        2. Environment variables
        3. YAML config file
        4. Defaults

        Args:
            config_file: Path to YAML config file; defaults to config.yaml in the config directory
            cli_args: Dictionary of CLI arguments

        Returns:
            Immutable Config object
        """
        if self.environ is None:
            load_dotenv()
            environ = os.environ
        else:
            environ = self.environ

        env_config = self._load_env_config(environ)
        config_data = self._get_defaults(environ)

        loaded_config_file = None
        if config_file:
            if not Path(config_file).exists():
                raise ValueError(f"Config file not found: {config_file}")
            yaml_path = Path(config_file)
        else:
            # The env override decides where the default config.yaml lives
            config_dir = env_config.get('config_dir', config_data['config_dir'])
            yaml_path = Path(config_dir) / CONFIG_FILE_NAME

        if yaml_path.exists():
            config_data.update(self._load_yaml_config(yaml_path))
            loaded_config_file = str(yaml_path)

        config_data.update(env_config)

        if cli_args:
            config_data.update(self._process_cli_args(cli_args))

        config_data['config_dir'] = str(Path(config_data['config_dir']).expanduser())
        config_data['_loaded_config_file'] = loaded_config_file
        return Config(**config_data)

    def _get_defaults(self, environ: Mapping[str, str]) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            'config_dir': str(resolve_config_dir(environ)),
            'catalog_file': CATALOG_FILE_NAME,
            'log_level': 'INFO',
            'log_format': 'standard',
            'log_file': None,
            'log_max_file_size_mb': 10,
            'log_backup_count': 5,
        }

    def _load_yaml_config(self, config_path: Path) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Raises:
            ValueError: if the file is not valid YAML or not a mapping
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                yaml_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Error loading config file {config_path}: {e}") from e

        if not isinstance(yaml_data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")
        return self._normalize_keys(yaml_data)

    def _load_env_config(self, environ: Mapping[str, str]) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}
        for env_var, config_key in self.ENV_MAPPING.items():
            value = environ.get(env_var)
            if value is None:
                continue
            if config_key in self.INT_KEYS:
                try:
                    config[config_key] = int(value)
                except ValueError:
                    self.logger.warning(f"Invalid integer value for {env_var}: {value}")
            else:
                config[config_key] = value
        return config

    def _process_cli_args(self, cli_args: Dict[str, Any]) -> Dict[str, Any]:
        """Process CLI arguments into config format."""
        cli_mapping = {
            'config_dir': 'config_dir',
            'log_level': 'log_level',
            'log_format': 'log_format',
            'log_file': 'log_file',
        }

        config = {}
        for cli_key, config_key in cli_mapping.items():
            if cli_key in cli_args and cli_args[cli_key] is not None:
                config[config_key] = cli_args[cli_key]
        return config

    def _normalize_keys(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize nested YAML structure to flat config field names."""
        normalized = {}

        app_config = data.get('application') or {}
        if 'config-dir' in app_config:
            normalized['config_dir'] = app_config['config-dir']
        if 'catalog-file' in app_config:
            normalized['catalog_file'] = app_config['catalog-file']

        log_config = data.get('logging') or {}
        for key in ('level', 'format', 'file', 'max_file_size_mb', 'backup_count'):
            if key in log_config:
                normalized[f'log_{key}'] = log_config[key]

        # Flat keys such as "log-level" at the top level
        known = set(self.ENV_MAPPING.values())
        for key, value in data.items():
            if key in ('application', 'logging'):
                continue
            normalized_key = key.replace('-', '_').lower()
            if normalized_key in known and normalized_key not in normalized:
                normalized[normalized_key] = value
            elif normalized_key not in known:
                self.logger.warning(f"Ignoring unknown config key: {key}")

        return normalized
