"""
Configuration management for npm-dupes.

Settings are resolved from defaults, then an optional config file, then
environment variables. Command-line flags are applied on top by the CLI.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console

from .error_handling import DEFAULT_LOG_FORMAT

console = Console(stderr=True)

OUTPUT_FORMATS = ("default", "short", "full", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ScanConfig:
    """Core scanning configuration."""

    output_format: str = "default"
    silent: bool = False
    color: bool = False
    manifest_name: str = "package.json"
    ignore_file_name: str = ".ndignore"
    excluded_dirs: List[str] = field(
        default_factory=lambda: ["node_modules", ".git", ".venv"]
    )
    follow_symlinks: bool = False
    max_file_size_mb: int = 10

    @property
    def max_file_size_bytes(self) -> int:
        """Convert MB to bytes for internal use."""
        return self.max_file_size_mb * 1024 * 1024


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "WARNING"
    enable_json: bool = False
    log_format: str = DEFAULT_LOG_FORMAT


@dataclass
class AppConfig:
    """Main configuration containing all subsections."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def validate_config_values(config: AppConfig) -> List[str]:
    """
    Validate configuration values and return any errors.

    Args:
        config: Configuration to validate

    Returns:
        List[str]: List of validation errors (empty if valid)
    """
    errors = []

    if config.scan.output_format not in OUTPUT_FORMATS:
        errors.append(
            f"scan.output_format must be one of {', '.join(OUTPUT_FORMATS)}"
        )
    if not config.scan.manifest_name:
        errors.append("scan.manifest_name must not be empty")
    if not config.scan.ignore_file_name:
        errors.append("scan.ignore_file_name must not be empty")
    max_size = config.scan.max_file_size_mb
    if not isinstance(max_size, int) or isinstance(max_size, bool) or max_size <= 0:
        errors.append("scan.max_file_size_mb must be positive")
    if not isinstance(config.scan.excluded_dirs, list):
        errors.append("scan.excluded_dirs must be a list of directory names")

    if (
        not isinstance(config.logging.log_level, str)
        or config.logging.log_level.upper() not in LOG_LEVELS
    ):
        errors.append(f"logging.log_level must be one of {', '.join(LOG_LEVELS)}")

    return errors


def load_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    """Load config from a JSON or YAML file; None if missing or unreadable."""
    if not config_path.exists():
        return None

    try:
        with open(config_path, encoding="utf-8") as f:
            if config_path.suffix.lower() in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(
            f"⚠️  Error loading config from {config_path}: {e}", style="yellow"
        )
        return None

    if data is not None and not isinstance(data, dict):
        console.print(
            f"⚠️  Config file {config_path} must contain a mapping", style="yellow"
        )
        return None

    return data


def find_config_file(cwd: Optional[Path] = None) -> Optional[Path]:
    """Find config file in standard locations."""
    base = cwd or Path.cwd()
    locations = [
        base / ".npm-dupes.json",
        base / ".npm-dupes.yaml",
        base / ".npm-dupes.yml",
        Path.home() / ".config" / "npm-dupes" / "config.json",
        Path.home() / ".config" / "npm-dupes" / "config.yaml",
    ]

    for location in locations:
        if location.exists():
            return location

    return None


def load_environment_overrides(config: AppConfig) -> None:
    """Apply NPM_DUPES_* environment variables on top of the config."""

    def get_env_bool(key: str, default: bool = False) -> bool:
        value = os.environ.get(key, "").lower()
        return value in ["true", "1", "yes", "on"] if value else default

    def get_env_int(key: str, default: Optional[int] = None) -> Optional[int]:
        try:
            return int(os.environ[key]) if key in os.environ else default
        except ValueError:
            console.print(
                f"⚠️  Invalid integer value for {key}, using default", style="yellow"
            )
            return default

    if output_format := os.environ.get("NPM_DUPES_OUTPUT"):
        config.scan.output_format = output_format.lower()
    config.scan.silent = get_env_bool("NPM_DUPES_SILENT", config.scan.silent)
    config.scan.color = get_env_bool("NPM_DUPES_COLOR", config.scan.color)
    config.scan.follow_symlinks = get_env_bool(
        "NPM_DUPES_FOLLOW_SYMLINKS", config.scan.follow_symlinks
    )
    if excluded := os.environ.get("NPM_DUPES_EXCLUDED_DIRS"):
        config.scan.excluded_dirs = [d.strip() for d in excluded.split(",") if d.strip()]
    if max_file_size := get_env_int("NPM_DUPES_MAX_FILE_SIZE_MB"):
        config.scan.max_file_size_mb = max_file_size

    if log_level := os.environ.get("NPM_DUPES_LOG_LEVEL"):
        config.logging.log_level = log_level.upper()
    config.logging.enable_json = get_env_bool(
        "NPM_DUPES_LOG_JSON", config.logging.enable_json
    )


def _matches_field_type(default: Any, value: Any) -> bool:
    # bool is an int subclass, so booleans only match boolean fields
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(default, bool) and isinstance(value, bool)
    if isinstance(default, list):
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return isinstance(value, type(default))


def apply_config_section(
    config: Any, section_data: Dict[str, Any], section_name: str
) -> None:
    """Apply configuration from dictionary to config section."""
    defaults = type(config)()
    for key, value in section_data.items():
        if not hasattr(config, key) or isinstance(
            getattr(type(config), key, None), property
        ):
            console.print(
                f"⚠️  Unknown config key in {section_name}: {key}", style="yellow"
            )
            continue

        default = getattr(defaults, key)
        if not _matches_field_type(default, value):
            console.print(
                f"⚠️  Invalid type for {section_name}.{key}: expected "
                f"{type(default).__name__}, got {type(value).__name__}; using default",
                style="yellow",
            )
            continue

        setattr(config, key, value)


def _restore_invalid_defaults(config: AppConfig, errors: List[str]) -> None:
    defaults = AppConfig()
    for error in errors:
        section_name, key = error.split(" ", 1)[0].split(".", 1)
        setattr(
            getattr(config, section_name),
            key,
            getattr(getattr(defaults, section_name), key),
        )


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Build a configuration from file and environment.

    A fresh object is returned on every call.

    Args:
        config_path: Explicit config file; discovered when omitted
    """
    config = AppConfig()

    config_file = config_path or find_config_file()
    if config_file:
        file_config = load_config_file(config_file)
        if file_config:
            for section_name in ("scan", "logging"):
                section_data = file_config.get(section_name) or {}
                if not isinstance(section_data, dict):
                    console.print(
                        f"⚠️  Config section {section_name} must contain a mapping "
                        f"({config_file})",
                        style="yellow",
                    )
                    continue
                apply_config_section(
                    getattr(config, section_name), section_data, section_name
                )

    load_environment_overrides(config)

    validation_errors = validate_config_values(config)
    if validation_errors:
        console.print("⚠️  Configuration validation errors:", style="red")
        for error in validation_errors:
            console.print(f"  • {error}", style="red")
        console.print("Using default values for invalid settings.", style="yellow")
        _restore_invalid_defaults(config, validation_errors)

    return config
