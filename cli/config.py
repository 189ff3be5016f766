"""
Configuration Management Module for the Issuance CLI

Handles hierarchical configuration loading, environment variable mapping,
validation, and management of settings across different environments.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


# Configuration file locations in order of precedence (highest to lowest)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / '.issuance.yml',
    Path.cwd() / '.issuance.json',
    Path.home() / '.issuance' / 'config.yml',
    Path.home() / '.issuance' / 'config.json',
    Path('/etc/issuance/config.yml'),
]

# Environment variable prefix; '__' separates nesting levels
ENV_PREFIX = 'ISSUANCE_'
ENV_NESTING = '__'

DEFAULT_CONFIG = {
    'ledger': {
        'data_dir': '~/.issuance/ledger',
        'default_max_supply': 10000,
        'default_price': 50_000_000_000_000_000,
        'default_base_uri': '',
    },

    'storage': {
        'backup_count': 5,
        'lock_timeout': 10.0,
        'max_events': 10000,  # oldest events are dropped beyond this
    },

    'cli': {
        'output_format': 'table',  # table, json, yaml
        'color_output': True,
    },

    'logging': {
        'level': 'WARNING',
    },
}

PROFILES = {
    'production': {
        'storage': {'backup_count': 20},
        'logging': {'level': 'INFO'},
    },
    'development': {
        'ledger': {'data_dir': './.issuance-dev', 'default_price': 0},
        'storage': {'backup_count': 1},
        'logging': {'level': 'DEBUG'},
    },
}

VALID_OUTPUT_FORMATS = ['table', 'json', 'yaml']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ConfigurationManager:
    """Manages hierarchical configuration with environment variable support."""

    def __init__(self, config_file: Optional[str] = None, profile: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit configuration file path
            profile: Configuration profile to load (production, development)
        """
        self.logger = logging.getLogger('issuance-cli.config')
        self.config_file = config_file
        self.profile = profile
        self._config_cache: Optional[Dict[str, Any]] = None
        self._config_sources: List[str] = []

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from all sources in hierarchical order.

        Returns:
            Merged configuration dictionary
        """
        if self._config_cache is not None:
            return self._config_cache

        self._config_sources = []
        configs = [copy.deepcopy(DEFAULT_CONFIG)]
        self._config_sources.append("defaults")

        if self.profile:
            if self.profile not in PROFILES:
                raise ValueError(f"Unknown configuration profile: {self.profile}")
            configs.append(PROFILES[self.profile])
            self._config_sources.append(f"profile:{self.profile}")
            self.logger.debug(f"Applied profile: {self.profile}")

        if self.config_file:
            config_data = self._load_config_file(Path(self.config_file))
            configs.append(config_data)
            self._config_sources.append(f"file:{self.config_file}")
        else:
            for config_path in CONFIG_SEARCH_PATHS:
                if config_path.exists():
                    configs.append(self._load_config_file(config_path))
                    self._config_sources.append(f"file:{config_path}")
                    self.logger.debug(f"Loaded config from {config_path}")
                    break  # Use first found config file

        env_config = self._load_environment_variables()
        if env_config:
            configs.append(env_config)
            self._config_sources.append("environment")

        self._config_cache = self._deep_merge(*configs)
        self._expand_paths(self._config_cache)

        return self._config_cache

    def _load_config_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML or JSON file."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yml', '.yaml']:
                data = yaml.safe_load(f)
            elif path.suffix == '.json':
                data = json.load(f)
            else:
                raise ValueError(f"Unknown config file format: {path}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        ISSUANCE_LEDGER__DATA_DIR -> {'ledger': {'data_dir': value}}
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split(ENV_NESTING)
            if not all(parts):
                continue

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._parse_env_value(value)

        return env_config

    def _parse_env_value(self, value: str) -> Union[str, int, float, bool, list, dict]:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ['true', 'yes']:
            return True
        elif value.lower() in ['false', 'no']:
            return False

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    def _deep_merge(self, *dicts: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple dictionaries."""
        result: Dict[str, Any] = {}

        for dictionary in dicts:
            for key, value in dictionary.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = copy.deepcopy(value)

        return result

    def _expand_paths(self, config: Dict[str, Any]):
        """Expand ~ and environment variables in path values."""
        for key, value in config.items():
            if isinstance(value, dict):
                self._expand_paths(value)
            elif isinstance(value, str) and ('~' in value or '$' in value):
                config[key] = os.path.expanduser(os.path.expandvars(value))

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'ledger.data_dir')
            default: Default value if key not found
        """
        current: Any = self.load()

        for key in key_path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def set(self, key_path: str, value: Any):
        """Set configuration value by dot-notation path."""
        config = self.load()

        keys = key_path.split('.')
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})

        current[keys[-1]] = value

    def save(self, path: Optional[str] = None, format: str = 'yaml') -> Path:
        """
        Save current configuration to file.

        Args:
            path: File path to save to (default: project config file)
            format: Output format ('yaml' or 'json')
        """
        config = self.load()

        if not path:
            path = Path.cwd() / ('.issuance.yml' if format == 'yaml' else '.issuance.json')

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            if format == 'yaml':
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(config, f, indent=2)

        self.logger.info(f"Configuration saved to {path}")
        return path

    def validate(self) -> List[str]:
        """
        Validate current configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        config = self.load()
        errors = []

        ledger = config.get('ledger', {})
        if not ledger.get('data_dir'):
            errors.append("ledger.data_dir is required")

        max_supply = ledger.get('default_max_supply')
        if not isinstance(max_supply, int) or isinstance(max_supply, bool) or max_supply < 1:
            errors.append(f"ledger.default_max_supply must be a positive integer, got {max_supply!r}")

        price = ledger.get('default_price')
        if not isinstance(price, int) or isinstance(price, bool) or price < 0:
            errors.append(f"ledger.default_price must be a non-negative integer, got {price!r}")

        backup_count = config.get('storage', {}).get('backup_count')
        if not isinstance(backup_count, int) or backup_count < 0:
            errors.append(f"storage.backup_count must be a non-negative integer, got {backup_count!r}")

        lock_timeout = config.get('storage', {}).get('lock_timeout')
        if not isinstance(lock_timeout, (int, float)) or lock_timeout <= 0:
            errors.append(f"storage.lock_timeout must be positive, got {lock_timeout!r}")

        max_events = config.get('storage', {}).get('max_events')
        if not isinstance(max_events, int) or max_events < 1:
            errors.append(f"storage.max_events must be a positive integer, got {max_events!r}")

        output_format = config.get('cli', {}).get('output_format')
        if output_format not in VALID_OUTPUT_FORMATS:
            errors.append(f"Invalid output format: {output_format}")

        level = str(config.get('logging', {}).get('level', '')).upper()
        if level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {level}")

        return errors

    def get_sources(self) -> List[str]:
        """Get list of configuration sources that were loaded."""
        self.load()
        return list(self._config_sources)

    def reset(self):
        """Reset configuration cache."""
        self._config_cache = None
        self._config_sources = []
