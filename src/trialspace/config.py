"""Experiment configuration schema and YAML loading."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from .errors import ConfigError


class MetadataConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""

    @model_validator(mode="after")
    def validate_strings(self) -> "MetadataConfig":
        if not self.name.strip():
            raise ValueError("metadata.name must be a non-empty string")
        self.name = self.name.strip()
        self.description = self.description.strip()
        return self


class ExperimentConfig(BaseModel):
    """Validated experiment description.

    ``search_space`` is an expression tree as understood by
    :class:`trialspace.space.SampleSpace`; it is kept verbatim.
    """

    model_config = ConfigDict(extra="forbid")

    metadata: MetadataConfig
    exp_key: str | None = None
    seed: int | None = None
    samples: int = 1
    search_space: Any

    @model_validator(mode="after")
    def validate_all(self) -> "ExperimentConfig":
        if self.search_space is None:
            raise ValueError("search_space must be provided")
        if self.samples <= 0:
            raise ValueError("samples must be a positive integer")
        if self.exp_key is not None:
            key = self.exp_key.strip()
            if not key:
                raise ValueError("exp_key must be a non-empty string when provided")
            self.exp_key = key
        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be non-negative")
        return self


def load_config(path: Path | str) -> ExperimentConfig:
    """Read and validate an experiment configuration file."""

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Configuration file is not valid YAML: {path}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping (YAML dictionary).")

    try:
        return ExperimentConfig.model_validate(data)
    except ValidationError as exc:
        details = []
        for error in exc.errors(include_url=False):
            location = ".".join(str(loc) for loc in error["loc"])
            details.append(f"- {location or '<root>'}: {error['msg']}")
        message = "Configuration validation failed:\n" + "\n".join(details)
        raise ConfigError(message) from exc


__all__ = ["ExperimentConfig", "MetadataConfig", "load_config"]
