"""Configuration service for managing application settings."""

import json
from dataclasses import asdict
from pathlib import Path
from urllib.parse import urlparse

import structlog

from ..models import AppConfig

log = structlog.stdlib.get_logger()

ConfigValue = str | int | float


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for managing application configuration."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "hltb-scraper" / "config.json"
        log.debug("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> AppConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return self._get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data: dict[str, ConfigValue] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self._get_default_config()

            log.info("Configuration loaded successfully")
            return config

        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self._get_default_config()

    def save_config(self, config: AppConfig) -> None:
        """Save configuration to file."""
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(validation_result.errors)}")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(config), f, indent=2, ensure_ascii=False)

            log.info("Configuration saved successfully")

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: AppConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        parsed = urlparse(config.base_url) if isinstance(config.base_url, str) else None
        if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append("base_url must be an absolute http(s) URL")

        if not isinstance(config.detail_path, str) or not config.detail_path:
            errors.append("detail_path cannot be empty")

        if not isinstance(config.search_path, str) or not config.search_path:
            errors.append("search_path cannot be empty")

        if not isinstance(config.request_delay, (int, float)) or config.request_delay < 0:
            errors.append("request_delay must be a non-negative number")
        elif config.request_delay > 60:
            errors.append("request_delay should not exceed 60 seconds")

        if not isinstance(config.timeout, (int, float)) or config.timeout <= 0:
            errors.append("timeout must be a positive number")

        if not isinstance(config.max_retries, int) or config.max_retries < 0:
            errors.append("max_retries must be a non-negative integer")
        elif config.max_retries > 10:
            errors.append("max_retries should not exceed 10")

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if config.log_level not in valid_log_levels:
            errors.append(f"log_level must be one of: {', '.join(sorted(valid_log_levels))}")

        return ValidationResult(len(errors) == 0, errors)

    def _get_default_config(self) -> AppConfig:
        """Get default configuration."""
        return AppConfig()

    def _dict_to_config(self, data: dict[str, ConfigValue]) -> AppConfig:
        """Convert dictionary to AppConfig, keeping defaults for missing keys."""
        defaults = self._get_default_config()

        max_retries_raw = data.get("max_retries", defaults.max_retries)
        max_retries = int(max_retries_raw) if isinstance(max_retries_raw, (int, float)) else defaults.max_retries

        return AppConfig(
            base_url=str(data.get("base_url", defaults.base_url)),
            detail_path=str(data.get("detail_path", defaults.detail_path)),
            search_path=str(data.get("search_path", defaults.search_path)),
            request_delay=float(data.get("request_delay", defaults.request_delay)),
            timeout=float(data.get("timeout", defaults.timeout)),
            max_retries=max_retries,
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
        )
