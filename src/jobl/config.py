"""Command-line configuration model and loader."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from jobl.errors import ValidationError, format_errors
from jobl.parser import DocumentFormat, format_location


class CliConfig(BaseModel):
    """Settings shared by every ``jobl`` subcommand.

    Command-line flags take precedence over values loaded from a file.
    """

    model_config = ConfigDict(extra="forbid")

    log_level: str = "WARNING"
    log_file: Path | None = None
    error_format: Literal["text", "json"] = "text"
    default_format: DocumentFormat | None = None

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not normalized:
            raise ValueError("log_level cannot be blank.")
        return normalized


def load_config(path: str | Path) -> CliConfig:
    """Load a YAML CLI configuration file from disk."""

    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Unable to read config file '{config_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file '{config_path}': {exc}") from exc

    data: Any = raw if raw is not None else {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Configuration file '{config_path}' must contain a top-level mapping/object."
        )

    try:
        return CliConfig.model_validate(data)
    except PydanticValidationError as exc:
        issues = [
            ValidationError(format_location(tuple(issue["loc"])), issue["msg"])
            for issue in exc.errors()
        ]
        raise ValueError(
            format_errors(issues, header="Configuration validation failed:")
        ) from exc
