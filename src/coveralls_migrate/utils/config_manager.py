import os
import json
import copy
from typing import Dict, Any, Optional
from coveralls_migrate.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = "config/config.json"
COVERALLS_API_BASE = "https://coveralls.io/api"

DEFAULTS: Dict[str, Any] = {
    "coveralls": {
        "api_base": COVERALLS_API_BASE,
        "token": None,
    },
    "github": {
        "token": None,
        "org_name": None,
    },
    "logging": {
        "log_file": "logs/migration.log",
        "log_level_console": "INFO",
        "log_level_file": "DEBUG",
        "max_bytes": 5_000_000,
        "backup_count": 5,
    },
}


class ConfigManager:
    """Manages configuration loading from environment variables and config files.

    Precedence, lowest first: built-in defaults, the JSON config file,
    environment variables, then explicit overrides (command line options).
    """

    def __init__(self, config_file_path: str = DEFAULT_CONFIG_PATH, overrides: Optional[Dict[str, Any]] = None):
        self.config_file_path = config_file_path
        self.config = self._load_config(overrides or {})

    def _load_config(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        config = copy.deepcopy(DEFAULTS)
        self._merge(config, self._load_from_file())
        config = self._override_with_env_vars(config)
        self._merge(config, overrides)
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        if not os.path.exists(self.config_file_path):
            logger.debug(f"Configuration file not found: {self.config_file_path}, using defaults")
            return {}

        try:
            with open(self.config_file_path, 'r') as f:
                config = json.load(f)
                logger.info(f"Configuration loaded from {self.config_file_path}")
                return config
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in configuration file: {e}")
            raise

    def _override_with_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Override configuration values with environment variables."""
        env_mappings = {
            # Coveralls
            'COVERALLS_TOKEN': ('coveralls', 'token'),
            'COVERALLS_API_BASE': ('coveralls', 'api_base'),

            # GitHub
            'GITHUB_TOKEN': ('github', 'token'),
            'COVERALLS_ORG_NAME': ('github', 'org_name'),

            # Logging
            'COVERALLS_MIGRATE_LOG_FILE': ('logging', 'log_file'),
            'COVERALLS_MIGRATE_LOG_LEVEL_CONSOLE': ('logging', 'log_level_console'),
            'COVERALLS_MIGRATE_LOG_LEVEL_FILE': ('logging', 'log_level_file'),
            'COVERALLS_MIGRATE_LOG_MAX_BYTES': ('logging', 'max_bytes'),
            'COVERALLS_MIGRATE_LOG_BACKUP_COUNT': ('logging', 'backup_count')
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Handle numeric types for logging config
                if config_path[0] == 'logging' and config_path[1] in ('max_bytes', 'backup_count'):
                    try:
                        env_value = int(env_value)
                    except ValueError:
                        logger.warning(f"Invalid numeric value for {env_var}: {env_value}, skipping override.")
                        continue
                self._set_nested_value(config, config_path, env_value)
                logger.debug(f"Overriding config with environment variable {env_var}")

        return config

    def _merge(self, config: Dict[str, Any], updates: Dict[str, Any]):
        for key, value in updates.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                self._merge(config[key], value)
            elif value is not None:
                config[key] = value

    def _set_nested_value(self, config: Dict[str, Any], path: tuple, value: Any):
        current = config
        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        keys = key.split('.')
        value = self.config
        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def get_logging_config(self) -> Dict[str, Any]:
        return self.config.get('logging', {})

    def missing_fields(self) -> list:
        required_fields = [
            ('coveralls', 'token'),
            ('github', 'token'),
            ('github', 'org_name'),
        ]
        return [f"{section}.{field}" for section, field in required_fields if not self.get(f"{section}.{field}")]
