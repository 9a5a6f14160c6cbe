"""Project configuration (``litdoc.json``)."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError

log = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "litdoc.json"
CONFIG_ENV_VAR = "LITDOC_CONFIG"


class ExampleHandler(BaseModel):
    """Marks examples whose expected value matches ``pattern``.

    ``test`` is JavaScript source for a function that verifies the example at
    runtime; ``template`` names a partial that renders the example instead.
    """

    pattern: str
    test: str | None = None
    template: str | None = None

    @field_validator("pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return value

    @model_validator(mode="after")
    def _test_or_template(self) -> ExampleHandler:
        if (self.test is None) == (self.template is None):
            raise ValueError('example handlers must provide either a "test" or a "template"')
        return self


class ProjectConfig(BaseModel):
    namespaces: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    grep: str | None = None
    javascripts: list[str] = Field(default_factory=list)
    template: Path | None = None
    partials: dict[str, Path] = Field(default_factory=dict)
    example_handlers: list[ExampleHandler] = Field(default_factory=list)
    extra_options: dict[str, Any] = Field(default_factory=dict)
    require_description: bool = False
    highlight: bool = True

    def relative_to(self, base_dir: Path) -> ProjectConfig:
        """Resolve template and partial paths against ``base_dir``."""
        template = base_dir / self.template if self.template is not None else None
        partials = {name: base_dir / path for name, path in self.partials.items()}
        return self.model_copy(update={"template": template, "partials": partials})

    def read_template(self) -> str | None:
        if self.template is None:
            return None
        return _read(self.template)

    def read_partials(self) -> dict[str, str]:
        return {name: _read(path) for name, path in self.partials.items()}


def _read(path: Path) -> str:
    try:
        return path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


def find_config(explicit: str | Path | None = None) -> Path | None:
    """Locate the config file: explicit path, then $LITDOC_CONFIG, then ./litdoc.json."""
    if explicit is not None:
        return Path(explicit)

    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)

    default = Path.cwd() / DEFAULT_CONFIG_NAME
    return default if default.exists() else None


def load_config(path: str | Path | None = None) -> ProjectConfig:
    """Load and validate a project config; defaults when there is none."""
    config_path = find_config(path)
    if config_path is None:
        return ProjectConfig()

    try:
        raw = json.loads(config_path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    try:
        config = ProjectConfig.model_validate(raw)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors(include_context=False)
        )
        raise ConfigError(f"Invalid config {config_path}: {details}") from e

    log.debug("Loaded config from %s", config_path)
    return config.relative_to(config_path.resolve().parent)
