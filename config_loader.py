"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import yaml

SOURCE_TOKEN_KEY = '#sourceKbcToken'
SOURCE_URL_KEY = 'sourceKbcUrl'

DESTINATION_TOKEN_ENV = 'KBC_TOKEN'
DESTINATION_URL_ENV = 'KBC_URL'
DATA_DIR_ENV = 'KBC_DATADIR'

DEFAULT_CONFIG_PATH = 'config.yaml'


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def default_config_path(cls, environ: Optional[Mapping[str, str]] = None) -> str:
        """
        Resolve the config path used when none is given on the command line.

        A component data directory (KBC_DATADIR) holds config.json; otherwise
        config.yaml in the working directory is used.
        """
        environ = os.environ if environ is None else environ
        data_dir = environ.get(DATA_DIR_ENV)
        if data_dir:
            return os.path.join(data_dir, 'config.json')
        return DEFAULT_CONFIG_PATH

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a YAML (or JSON) file with environment variable substitution.

        Args:
            config_path: Path to configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the file is not a mapping or cannot be parsed
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                config_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Could not parse configuration file {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        return cls._substitute_env_vars_recursive(config_data)

    @classmethod
    def apply_environment(
        cls,
        config: Dict[str, Any],
        environ: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Fill the destination project credentials from the process environment.

        Args:
            config: Loaded configuration dictionary
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Copy of config with a 'destination' section
        """
        environ = os.environ if environ is None else environ
        merged = copy.deepcopy(config)
        destination = merged.setdefault('destination', {})
        if environ.get(DESTINATION_TOKEN_ENV):
            destination['token'] = environ[DESTINATION_TOKEN_ENV]
        if environ.get(DESTINATION_URL_ENV):
            destination['url'] = environ[DESTINATION_URL_ENV]
        return merged

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        parameters = config.get('parameters')
        if not isinstance(parameters, dict):
            raise ValueError("Missing required configuration: parameters")

        cls._validate_required_field(parameters, SOURCE_TOKEN_KEY, f'parameters.{SOURCE_TOKEN_KEY}')
        cls._validate_required_field(parameters, SOURCE_URL_KEY, f'parameters.{SOURCE_URL_KEY}')
        cls._validate_url(parameters[SOURCE_URL_KEY], f'parameters.{SOURCE_URL_KEY}')

        destination = config.get('destination') or {}
        if not destination.get('token'):
            raise ValueError(
                f"Missing destination project token: set the {DESTINATION_TOKEN_ENV} environment variable"
            )
        if not destination.get('url'):
            raise ValueError(
                f"Missing destination project URL: set the {DESTINATION_URL_ENV} environment variable"
            )
        cls._validate_url(destination['url'], DESTINATION_URL_ENV)

        # Validate timeout settings
        timeout = get_nested(config, 'advanced.request_timeout')
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
        ):
            raise ValueError("advanced.request_timeout must be a positive number")

        max_retries = get_nested(config, 'advanced.max_retries', 0)
        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError("advanced.max_retries must be a non-negative integer")

        backoff = get_nested(config, 'advanced.retry_backoff_factor', 0.5)
        if isinstance(backoff, bool) or not isinstance(backoff, (int, float)) or backoff < 0:
            raise ValueError("advanced.retry_backoff_factor must be a non-negative number")

        verify_ssl = get_nested(config, 'advanced.verify_ssl', True)
        if not isinstance(verify_ssl, bool):
            raise ValueError("advanced.verify_ssl must be a boolean")

        progress_bars = get_nested(config, 'advanced.progress_bars', True)
        if not isinstance(progress_bars, bool):
            raise ValueError("advanced.progress_bars must be a boolean")

        dry_run = get_nested(config, 'migration.dry_run', False)
        if not isinstance(dry_run, bool):
            raise ValueError("migration.dry_run must be a boolean")

        level = get_nested(config, 'logging.level')
        if level is not None and str(level).upper() not in {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}:
            raise ValueError("logging.level must be one of: CRITICAL, DEBUG, ERROR, INFO, WARNING")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        # Ensure nested dictionaries exist
        for section in ('migration', 'logging'):
            if not isinstance(merged.get(section), dict):
                merged[section] = {}

        if getattr(args, 'dry_run', None) is not None:
            merged['migration']['dry_run'] = args.dry_run

        if getattr(args, 'report_path', None):
            merged['migration']['report_path'] = args.report_path

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        verbose = getattr(args, 'verbose', 0) or 0
        if verbose >= 2:
            merged['logging']['level'] = 'DEBUG'
        elif verbose == 1:
            merged['logging']['level'] = 'INFO'

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @classmethod
    def _validate_required_field(cls, section: Dict[str, Any], key: str, label: str) -> None:
        """Validate that a required field exists and has a value."""
        value = section.get(key)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {label}")

        # Check for unsubstituted environment variables
        if isinstance(value, str) and '${' in value:
            match = cls.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{label}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_url(url: Any, field_name: str) -> None:
        """Validate URL format."""
        parsed = urlparse(str(url))
        if parsed.scheme not in ('http', 'https'):
            raise ValueError(f"{field_name} must use http or https scheme: {url}")
        if not parsed.netloc:
            raise ValueError(f"{field_name} missing hostname: {url}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "advanced.request_timeout")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config

    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


__all__ = ['ConfigLoader', 'get_nested']
