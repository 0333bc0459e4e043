"""Configuration validation utilities for the dashboard."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigValidationError(ValueError):
    """Raised when configuration validation fails."""


def validate_address(config: dict[str, Any], field: str = "address") -> None:
    """Validate the wallet address is present and 0x-prefixed hex."""
    if field not in config:
        raise ConfigValidationError(f"Missing required field: {field}")

    address = config[field]
    if not isinstance(address, str) or not address.strip():
        raise ConfigValidationError(f"{field} must be a non-empty string")

    if not ADDRESS_PATTERN.match(address):
        raise ConfigValidationError(
            f"{field} '{address}' is not a 0x-prefixed 40 character hex address"
        )


def validate_positive_decimal(
    config: dict[str, Any], field: str, *, required: bool = True
) -> None:
    """Validate that a field is a positive decimal value."""
    if field not in config:
        if required:
            raise ConfigValidationError(f"Missing required field: {field}")
        return

    value = config[field]
    if isinstance(value, bool):
        raise ConfigValidationError(f"{field} must be a valid number, got: {value}")
    try:
        decimal_value = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ConfigValidationError(
            f"{field} must be a valid number, got: {value}"
        ) from exc

    if not decimal_value.is_finite() or decimal_value <= 0:
        raise ConfigValidationError(f"{field} must be positive, got: {value}")


def validate_positive_integer(
    config: dict[str, Any], field: str, *, required: bool = True, minimum: int = 1
) -> None:
    """Validate that a field is a positive integer."""
    if field not in config:
        if required:
            raise ConfigValidationError(f"Missing required field: {field}")
        return

    value = config[field]
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigValidationError(
            f"{field} must be an integer, got: {type(value).__name__}"
        )

    if value < minimum:
        raise ConfigValidationError(f"{field} must be >= {minimum}, got: {value}")


def validate_url(config: dict[str, Any], field: str = "base_url") -> None:
    """Validate that a URL field is properly formatted."""
    if field not in config:
        return  # URL is optional with a sensible default

    url = config[field]
    if not isinstance(url, str) or not url.strip():
        raise ConfigValidationError(f"{field} must be a non-empty string")

    if not re.match(r"^https?://", url, re.IGNORECASE):
        raise ConfigValidationError(
            f"{field} must start with http:// or https://, got: {url}"
        )


def validate_log_level(config: dict[str, Any], field: str = "log_level") -> None:
    if field not in config:
        return
    level = config[field]
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        choices = ", ".join(sorted(LOG_LEVELS))
        raise ConfigValidationError(f"{field} must be one of [{choices}], got: {level}")


def validate_config(config: dict[str, Any]) -> None:
    """
    Validate a dashboard configuration mapping.

    Args:
        config: Configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration must be a dictionary")

    if not config:
        raise ConfigValidationError("Configuration cannot be empty")

    validate_address(config)
    validate_url(config)
    validate_positive_decimal(config, "poll_interval_sec", required=False)
    validate_positive_decimal(config, "label_interval_sec", required=False)
    if config.get("request_timeout_sec") is not None:
        validate_positive_decimal(config, "request_timeout_sec", required=False)
    validate_positive_integer(config, "page", required=False, minimum=1)
    validate_positive_integer(config, "offset", required=False, minimum=1)
    validate_log_level(config)
