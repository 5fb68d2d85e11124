"""Configuration file loader with error reporting.

Loads JSON estimate configurations and turns file system errors, JSON
syntax errors and pydantic validation errors into a single ConfigError with
an actionable message.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from woodquote.application.config.schemas import EstimateConfiguration

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration cannot be loaded or validated.

    Attributes:
        message: The primary error message.
        error_type: One of file_not_found, permission_denied,
            file_read_error, json_parse or validation.
        path: Path to the configuration file, if any.
        details: Extra information such as line and column for JSON errors
            or one entry per failed field for validation errors.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a JSON path.

    Examples:
        >>> _format_json_path(("sheet", "kerf"))
        'sheet.kerf'
        >>> _format_json_path(("panels", 0, "width"))
        'panels[0].width'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    return [
        {
            "path": _format_json_path(err["loc"]) or "(root)",
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def _format_validation_error_message(details: list[dict[str, Any]]) -> str:
    lines = ["Configuration validation failed:"]
    for detail in details:
        value = detail.get("value")
        # Whole-object inputs are too noisy to echo back
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {detail['path']}: {detail['message']} (got: {value!r})")
        else:
            lines.append(f"  - {detail['path']}: {detail['message']}")
    return "\n".join(lines)


def _validate(data: Any, path: Path | None = None) -> EstimateConfiguration:
    try:
        return EstimateConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e)
        raise ConfigError(
            message=_format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        ) from e


def load_config(path: Path) -> EstimateConfiguration:
    """Load and validate an estimate configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file.

    Returns:
        A validated EstimateConfiguration.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or does
            not match the schema. ``error_type`` names the failure.

    Example:
        >>> try:
        ...     config = load_config(Path("wardrobe.json"))
        ... except ConfigError as e:
        ...     for detail in e.details:
        ...         print(f"{detail['path']}: {detail['message']}")
    """
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        ) from e
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in config file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    config = _validate(data, path)
    logger.debug("Loaded configuration %s (schema %s)", path, config.schema_version)
    return config


def load_config_from_dict(data: dict[str, Any]) -> EstimateConfiguration:
    """Validate an estimate configuration held in a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(data)
