#!/usr/bin/env python3
"""
Configuration model for the host integration layer.

The editor owns the configuration file; this module gives it a validated
shape and JSON persistence. Tool paths left empty mean "use the OS default
handler" and may be filled in by :class:`host_utils.locator.ToolLocator`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .platforms import get_platform_profile
from .utils import PathLike


class GitConfiguration(BaseModel):
    """Settings for the git workflow and git companion tools."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    git_executable: str = "git"
    git_client_executable: Optional[str] = None
    diff_tool: Optional[str] = None
    remote: str = "origin"
    timeout_ms: int = Field(default=10000, gt=0)


class HostConfiguration(BaseModel):
    """Resolved paths and commands of the editor's external companions."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    image_editor: Optional[str] = None
    image_viewer: Optional[str] = None
    terminal_command: str = Field(
        default_factory=lambda: get_platform_profile().terminal_command
    )
    terminal_command_args: str = Field(
        default_factory=lambda: get_platform_profile().terminal_command_args
    )
    web_browser_preview_executable: Optional[str] = None
    initial_start_directory: Optional[str] = None
    editor_extension_mappings: Dict[str, str] = Field(default_factory=dict)
    git: GitConfiguration = Field(default_factory=GitConfiguration)

    @field_validator("editor_extension_mappings")
    @classmethod
    def normalize_extensions(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {ext.lower().lstrip("."): syntax for ext, syntax in value.items()}


def load_configuration(file_path: PathLike) -> HostConfiguration:
    """
    Load and validate the host configuration from a JSON file.

    A missing file yields the defaults.

    Args:
        file_path: Path to the JSON configuration file.

    Returns:
        HostConfiguration: The validated configuration.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated.
    """
    path = Path(file_path)
    if not path.exists():
        logger.debug(f"No configuration at {path}, using defaults")
        return HostConfiguration()

    try:
        with path.open("r", encoding="utf-8") as f:
            data: Any = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in configuration {path}: {e}",
            config_path=path,
            error_code="INVALID_JSON",
            original_error=e,
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration {path}: {e}",
            config_path=path,
            error_code="FILE_READ_ERROR",
            original_error=e,
        ) from e

    try:
        config = HostConfiguration.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {path}: {e}",
            config_path=path,
            error_code="INVALID_CONFIGURATION",
            original_error=e,
            validation_errors=e.errors(),
        ) from e

    logger.debug(f"Loaded configuration from {path}")
    return config


def save_configuration(config: HostConfiguration, file_path: PathLike) -> None:
    """
    Save the host configuration as JSON.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(config.model_dump_json(indent=2))
    except OSError as e:
        raise ConfigurationError(
            f"Failed to save configuration to {path}: {e}",
            config_path=path,
            error_code="FILE_WRITE_ERROR",
            original_error=e,
        ) from e

    logger.debug(f"Configuration saved to {path}")
