"""
Configuration for annotation commands.

Settings come from a YAML file:

    ```yaml
    kind: note
    author: Ann Example
    max_text_width: 40
    no_text_label: "[no text]"
    formatters:
      latex: footnote
      markdown: mypackage.export:markdown_note
    ```

Formatter values are builtin names or "module:function" import paths. A
value that does not resolve to a callable is kept, and the backend then
falls back to the displayed text on export.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .constants import CONFIG_ENV_VAR, MAX_TEXT_WIDTH, NO_TEXT_LABEL
from .errors import ConfigError
from .export import ExportDispatcher
from .models.marker import MarkerKind

logger = logging.getLogger(__name__)


@dataclass
class AnnotateConfig:
    """Settings shared by the annotation commands.

    Attributes:
        kind: Annotation flavor the commands operate on
        author: Author recorded in document comments on export
        max_text_width: Upper bound for the list view's text column
        no_text_label: Shown in the list view for markers without text
        formatters: Backend -> formatter overrides (builtin name or import path)
    """

    kind: MarkerKind = MarkerKind.NOTE
    author: str = ""
    max_text_width: int = MAX_TEXT_WIDTH
    no_text_label: str = NO_TEXT_LABEL
    formatters: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnnotateConfig:
        """Build a config from parsed YAML, validating every key.

        Raises:
            ConfigError: If keys are unknown or values have the wrong type
        """
        known = {f.name for f in fields(cls)}
        errors = [f"Unknown setting '{key}'" for key in data if key not in known]

        values: dict[str, Any] = {}
        if "kind" in data:
            try:
                values["kind"] = MarkerKind.from_name(str(data["kind"]))
            except ValueError as e:
                errors.append(str(e))
        if "author" in data:
            values["author"] = str(data["author"] or "")
        if "max_text_width" in data:
            width = data["max_text_width"]
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                errors.append(f"max_text_width must be a positive integer, got {width!r}")
            else:
                values["max_text_width"] = width
        if "no_text_label" in data:
            values["no_text_label"] = str(data["no_text_label"])
        if "formatters" in data:
            formatters = data["formatters"] or {}
            if not isinstance(formatters, dict):
                errors.append("formatters must be a mapping of backend to formatter")
            else:
                values["formatters"] = {str(k): str(v) for k, v in formatters.items()}

        if errors:
            raise ConfigError(
                f"Invalid annotation configuration: {'; '.join(errors)}", errors=errors
            )
        return cls(**values)

    def dispatcher(self) -> ExportDispatcher:
        """Create an export dispatcher with this config's formatter overrides.

        Raises:
            ConfigError: If a formatter name cannot be resolved
        """
        try:
            return ExportDispatcher.for_kind(self.kind, self.author, self.formatters)
        except (ValueError, ImportError) as e:
            raise ConfigError(f"Cannot resolve formatter: {e}") from e


def load_config(path: str | Path | None = None) -> AnnotateConfig:
    """Load configuration from a YAML file.

    Args:
        path: Config file. Defaults to the file named by the
            ORG_ANNOTATE_CONFIG environment variable; without either, the
            default configuration is returned.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return AnnotateConfig()
        logger.debug("Using config from %s=%s", CONFIG_ENV_VAR, env_path)
        path = env_path

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {e}") from e

    if data is None:
        return AnnotateConfig()
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping at the top level")

    logger.debug("Loaded config from %s", config_path)
    return AnnotateConfig.from_dict(data)
