"""Logging infrastructure with verbosity levels and sanitized config output."""

import copy
import logging
import logging.handlers
from typing import Any, Dict, Optional

import colorlog

LOGGER_NAME = 'orchestration_migrator'

_ALLOWED_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging for the migrator logger hierarchy.

    Args:
        level: Log level name
        log_file: Optional path to a rotating log file
        log_format: Optional custom log format string
        date_format: Optional custom date format string

    Returns:
        Configured logger instance
    """
    level_upper = level.upper()
    if level_upper not in _ALLOWED_LEVELS:
        raise ValueError(
            f"Invalid log level '{level}'. Must be one of: {sorted(_ALLOWED_LEVELS)}"
        )
    log_level = getattr(logging, level_upper)

    if log_format is None:
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    if date_format is None:
        date_format = '%Y-%m-%d %H:%M:%S'

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    ))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")

    # urllib3 connection chatter only at DEBUG
    logging.getLogger('urllib3').setLevel(logging.DEBUG if log_level == logging.DEBUG else logging.WARNING)

    return logger


def log_section(title: str) -> None:
    """
    Log a decorative section header.

    Args:
        title: Section title to display
    """
    logger = logging.getLogger(LOGGER_NAME)

    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {title.upper()}")
    logger.info(separator)


def log_config(config: Dict[str, Any]) -> None:
    """
    Log sanitized configuration for debugging.

    Args:
        config: Configuration dictionary to log
    """
    logger = logging.getLogger(LOGGER_NAME)

    sanitized = _sanitize_config(config)

    log_section("Configuration")

    parameters = sanitized.get('parameters', {})
    logger.info(f"Source URL: {parameters.get('sourceKbcUrl', 'Not Set')}")
    logger.info(f"Source Token: {parameters.get('#sourceKbcToken', 'Not Set')}")

    destination = sanitized.get('destination', {})
    logger.info(f"Destination URL: {destination.get('url', 'Not Set')}")
    logger.info(f"Destination Token: {destination.get('token', 'Not Set')}")

    migration = sanitized.get('migration', {})
    logger.info(f"Dry Run: {migration.get('dry_run', False)}")
    logger.info(f"Report Path: {migration.get('report_path', 'Not Set')}")

    advanced = sanitized.get('advanced', {})
    logger.debug(f"Request Timeout: {advanced.get('request_timeout', 'None')}")
    logger.debug(f"Max Retries: {advanced.get('max_retries', 0)}")
    logger.debug(f"Verify SSL: {advanced.get('verify_ssl', True)}")


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a sanitized copy of configuration with sensitive fields masked.

    Keys starting with '#' are encrypted values and always masked.
    """
    sensitive_fields = {'password', 'secret', 'token'}

    def mask_sensitive(data: Any) -> Any:
        if isinstance(data, dict):
            masked = {}
            for key, value in data.items():
                key_str = str(key)
                is_sensitive = key_str.startswith('#') or any(
                    sensitive in key_str.lower() for sensitive in sensitive_fields
                )
                if is_sensitive and isinstance(value, str):
                    masked[key] = "***REDACTED***"
                else:
                    masked[key] = mask_sensitive(value)
            return masked
        elif isinstance(data, list):
            return [mask_sensitive(item) for item in data]
        return data

    return mask_sensitive(copy.deepcopy(config))


__all__ = [
    'LOGGER_NAME',
    'setup_logging',
    'log_section',
    'log_config'
]
