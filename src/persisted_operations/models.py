"""
Data models for persisted operations config files.

These Pydantic models validate the YAML config file consumed by the CLI and
by load_options(), before its values are merged with CLI flags.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OptionsSection(BaseModel):
    """The `options:` section of a config file."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    persisted_operations_directory: Optional[str] = Field(
        default=None,
        alias="persistedOperationsDirectory",
        description="Directory holding <hash>.graphql files",
    )
    allow_unpersisted_operations: Optional[bool] = Field(
        default=None,
        alias="allowUnpersistedOperations",
        description="Allow clients to send literal queries",
    )
    persisted_operations: Optional[Dict[str, str]] = Field(
        default=None,
        alias="persistedOperations",
        description="Static hash to document mapping",
    )

    @field_validator("persisted_operations_directory")
    @classmethod
    def validate_directory(cls, v):
        """Reject empty directory strings."""
        if v is not None and not v.strip():
            raise ValueError("persistedOperationsDirectory must not be empty")
        return v


class OptionsFile(BaseModel):
    """
    Config file for persisted operations.
    
    Only the `options` section is read; other top-level keys belong to the
    hosting server and are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    options: OptionsSection = Field(default_factory=OptionsSection, description="Persisted operations options")

    @classmethod
    def from_yaml_file(cls, path: Path) -> OptionsFile:
        """Load OptionsFile from a YAML file."""
        import yaml

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level")
        if data.get("options") is None:
            data = {**data, "options": {}}
        return cls.model_validate(data)


__all__ = ["OptionsSection", "OptionsFile"]
