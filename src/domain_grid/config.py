"""
Configuration for the domain grid system.

This module defines the configuration dataclasses (resolver providers,
dispatch and batching limits, logging), the built-in defaults, JSON
load/save helpers, environment overrides and a consistency check.
"""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .domain_validator import MAX_COMBINATIONS
from .enums import LogLevel, RecordType
from .exceptions import ConfigError
from .i18n import SUPPORTED_LANGUAGES


# Reject submissions above this many combinations before any network call
DEFAULT_MAX_COMBINATIONS = MAX_COMBINATIONS
DEFAULT_FLUSH_INTERVAL_SECONDS = 0.3
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_CONCURRENT_CHECKS = 100

DEFAULT_CONFIG_PATH = Path.home() / ".domain_grid" / "config.json"


@dataclass
class ResolverProviderConfig:
    """A DNS-over-HTTPS provider speaking the JSON API convention."""

    name: str
    url: str


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    providers: list[ResolverProviderConfig]
    record_types: list[str] = field(default_factory=lambda: ["A", "NS"])
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    flush_interval_seconds: float = DEFAULT_FLUSH_INTERVAL_SECONDS
    max_combinations: int = DEFAULT_MAX_COMBINATIONS
    max_concurrent_checks: int = DEFAULT_MAX_CONCURRENT_CHECKS  # 0 = unbounded
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    language: str = "en"
    simulation_mode: bool = False
    startup_self_test: bool = False

    @property
    def parsed_record_types(self) -> list[RecordType]:
        return [RecordType(rt.upper()) for rt in self.record_types]


DEFAULT_PROVIDERS = [
    ResolverProviderConfig(name="Cloudflare", url="https://cloudflare-dns.com/dns-query"),
    ResolverProviderConfig(name="Google", url="https://dns.google/resolve"),
]


def create_default_config(
    simulation_mode: bool = False,
    language: str = "en",
) -> SystemConfig:
    """
    Create a default system configuration.

    Args:
        simulation_mode: Enable simulation mode (no real network requests)
        language: Output language ('en' or 'de')

    Returns:
        SystemConfig with default settings
    """
    return SystemConfig(
        providers=[replace(p) for p in DEFAULT_PROVIDERS],
        language=language,
        simulation_mode=simulation_mode,
    )


def config_to_dict(config: SystemConfig) -> dict:
    """Serialize a configuration into a JSON-compatible dictionary."""
    return {
        "providers": [{"name": p.name, "url": p.url} for p in config.providers],
        "record_types": list(config.record_types),
        "request_timeout_seconds": config.request_timeout_seconds,
        "flush_interval_seconds": config.flush_interval_seconds,
        "max_combinations": config.max_combinations,
        "max_concurrent_checks": config.max_concurrent_checks,
        "logging": {
            "level": config.logging.level,
            "output_format": config.logging.output_format,
        },
        "language": config.language,
        "simulation_mode": config.simulation_mode,
        "startup_self_test": config.startup_self_test,
    }


def config_from_dict(data: dict) -> SystemConfig:
    """
    Build a configuration from a dictionary, filling gaps with defaults.

    Raises:
        ConfigError: If a field has the wrong shape
    """
    try:
        providers = [
            ResolverProviderConfig(name=p["name"], url=p["url"])
            for p in data.get("providers", [])
        ]
        if not providers:
            providers = [replace(p) for p in DEFAULT_PROVIDERS]

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        )

        return SystemConfig(
            providers=providers,
            record_types=list(data.get("record_types", ["A", "NS"])),
            request_timeout_seconds=float(
                data.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS)
            ),
            flush_interval_seconds=float(
                data.get("flush_interval_seconds", DEFAULT_FLUSH_INTERVAL_SECONDS)
            ),
            max_combinations=int(data.get("max_combinations", DEFAULT_MAX_COMBINATIONS)),
            max_concurrent_checks=int(
                data.get("max_concurrent_checks", DEFAULT_MAX_CONCURRENT_CHECKS)
            ),
            logging=logging_config,
            language=data.get("language", "en"),
            simulation_mode=bool(data.get("simulation_mode", False)),
            startup_self_test=bool(data.get("startup_self_test", False)),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigError(
            code="invalid_config",
            message=f"Invalid configuration: {e}",
            details={"error": str(e)},
        ) from e


def load_config_from_file(config_path: Path) -> Optional[SystemConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        SystemConfig if the file exists, None otherwise

    Raises:
        ConfigError: If the file exists but cannot be parsed
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(
            code="unreadable_config",
            message=f"Could not read config {config_path}: {e}",
            details={"path": str(config_path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            code="invalid_config",
            message="Configuration root must be a JSON object",
            details={"path": str(config_path)},
        )
    return config_from_dict(data)


def save_config_to_file(config: SystemConfig, config_path: Path) -> None:
    """
    Save configuration to a JSON file, creating parent directories.

    Raises:
        ConfigError: If the file cannot be written
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config_to_dict(config), f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise ConfigError(
            code="unwritable_config",
            message=f"Could not write config {config_path}: {e}",
            details={"path": str(config_path)},
        ) from e


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def apply_env_overrides(
    config: SystemConfig,
    env_file: Optional[Path] = None,
) -> SystemConfig:
    """
    Return a copy of config with DOMAIN_GRID_* environment variables applied.

    Variables are read after loading a .env file (python-dotenv); values that
    cannot be parsed raise ConfigError rather than being silently ignored.
    """
    load_dotenv(dotenv_path=env_file)

    overrides: dict = {}
    try:
        if "DOMAIN_GRID_LANGUAGE" in os.environ:
            overrides["language"] = os.environ["DOMAIN_GRID_LANGUAGE"].strip().lower()
        if "DOMAIN_GRID_SIMULATION" in os.environ:
            overrides["simulation_mode"] = _env_bool(os.environ["DOMAIN_GRID_SIMULATION"])
        if "DOMAIN_GRID_FLUSH_INTERVAL" in os.environ:
            overrides["flush_interval_seconds"] = float(os.environ["DOMAIN_GRID_FLUSH_INTERVAL"])
        if "DOMAIN_GRID_REQUEST_TIMEOUT" in os.environ:
            overrides["request_timeout_seconds"] = float(os.environ["DOMAIN_GRID_REQUEST_TIMEOUT"])
        if "DOMAIN_GRID_MAX_CONCURRENCY" in os.environ:
            overrides["max_concurrent_checks"] = int(os.environ["DOMAIN_GRID_MAX_CONCURRENCY"])
    except ValueError as e:
        raise ConfigError(
            code="invalid_env",
            message=f"Invalid environment override: {e}",
        ) from e

    if "DOMAIN_GRID_LOG_LEVEL" in os.environ:
        overrides["logging"] = replace(
            config.logging, level=os.environ["DOMAIN_GRID_LOG_LEVEL"].strip().lower()
        )

    return replace(config, **overrides)


def validate_config(config: SystemConfig) -> list[str]:
    """
    Check a configuration for problems.

    Returns:
        List of human-readable problems; empty when the configuration is usable
    """
    errors: list[str] = []

    if not config.providers:
        errors.append("At least one resolver provider must be configured")

    names = [p.name for p in config.providers]
    if len(set(names)) != len(names):
        errors.append("Resolver provider names must be unique")

    for provider in config.providers:
        if urlparse(provider.url).scheme.lower() != "https":
            errors.append(f"Provider {provider.name} must use HTTPS: {provider.url}")

    if not config.record_types:
        errors.append("At least one record type must be configured")
    for record_type in config.record_types:
        try:
            RecordType(record_type.upper())
        except ValueError:
            errors.append(f"Unsupported record type: {record_type}")

    if config.request_timeout_seconds <= 0:
        errors.append("request_timeout_seconds must be positive")
    if config.flush_interval_seconds <= 0:
        errors.append("flush_interval_seconds must be positive")
    if config.max_combinations <= 0:
        errors.append("max_combinations must be positive")
    elif config.max_combinations > MAX_COMBINATIONS:
        errors.append(f"max_combinations must not exceed {MAX_COMBINATIONS}")
    if config.max_concurrent_checks < 0:
        errors.append("max_concurrent_checks must not be negative")

    if config.language not in SUPPORTED_LANGUAGES:
        errors.append(f"Unsupported language: {config.language}")

    if config.logging.output_format not in ("json", "text", "both"):
        errors.append(f"Invalid logging output format: {config.logging.output_format}")
    try:
        LogLevel(config.logging.level)
    except ValueError:
        errors.append(f"Invalid log level: {config.logging.level}")

    return errors
