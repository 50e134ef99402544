"""
Tests for options module.

Tests options validation, environment variable loading, and config file
merging with CLI flags.
"""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from persisted_operations.models import OptionsFile
from persisted_operations.options import (
    DEFAULT_REFRESH_INTERVAL,
    PersistedOperationsOptions,
    create_options_from_env,
    load_options,
    refresh_interval_from_env,
)


class TestPersistedOperationsOptions:
    """Test PersistedOperationsOptions validation."""
    
    def test_defaults(self):
        """Test empty options are valid and configure nothing."""
        options = PersistedOperationsOptions()
        assert options.persisted_operations is None
        assert options.persisted_operations_getter is None
        assert options.persisted_operations_directory is None
        assert options.hash_from_payload is None
        assert options.allow_unpersisted_operation is None
        assert options.lookup_options_specified() == []
    
    def test_lookup_options_specified(self):
        """Test which lookup strategies are reported as set."""
        options = PersistedOperationsOptions(
            persisted_operations={"a": "{ a }"},
            persisted_operations_directory="/tmp/ops",
        )
        assert options.lookup_options_specified() == [
            "persisted_operations_directory",
            "persisted_operations",
        ]
    
    def test_conflicting_lookups_allowed_at_construction(self):
        """Test conflicts are left for the registry to report."""
        options = PersistedOperationsOptions(
            persisted_operations={"a": "{ a }"},
            persisted_operations_getter=lambda h: None,
        )
        assert len(options.lookup_options_specified()) == 2
    
    def test_equal_options_are_distinct(self):
        """Test options compare by identity."""
        a = PersistedOperationsOptions(persisted_operations={"a": "{ a }"})
        b = PersistedOperationsOptions(persisted_operations={"a": "{ a }"})
        assert a != b
        assert a == a
    
    def test_path_directory_accepted(self, tmp_path):
        """Test directory may be a Path."""
        options = PersistedOperationsOptions(persisted_operations_directory=tmp_path)
        assert options.persisted_operations_directory == tmp_path
    
    def test_empty_directory_raises(self):
        """Test empty directory string raises ValueError."""
        with pytest.raises(ValueError, match="must not be empty"):
            PersistedOperationsOptions(persisted_operations_directory="")
    
    def test_non_mapping_operations_raises(self):
        """Test persisted_operations must be a mapping."""
        with pytest.raises(ValueError, match="must be a mapping"):
            PersistedOperationsOptions(persisted_operations=[("a", "{ a }")])  # type: ignore[arg-type]
    
    def test_non_string_document_raises(self):
        """Test mapping values must be strings."""
        with pytest.raises(ValueError, match="str -> str"):
            PersistedOperationsOptions(persisted_operations={"a": 1})  # type: ignore[dict-item]
    
    def test_non_callable_getter_raises(self):
        """Test persisted_operations_getter must be callable."""
        with pytest.raises(ValueError, match="must be callable"):
            PersistedOperationsOptions(persisted_operations_getter="not callable")  # type: ignore[arg-type]
    
    def test_invalid_bypass_policy_raises(self):
        """Test allow_unpersisted_operation must be bool or callable."""
        with pytest.raises(ValueError, match="bool or a callable"):
            PersistedOperationsOptions(allow_unpersisted_operation="yes")  # type: ignore[arg-type]
    
    def test_options_are_frozen(self):
        """Test options cannot be mutated after construction."""
        options = PersistedOperationsOptions()
        with pytest.raises(AttributeError):
            options.allow_unpersisted_operation = True  # type: ignore[misc]


class TestCreateOptionsFromEnv:
    """Test environment variable loading."""
    
    def test_empty_environment(self):
        """Test defaults with no environment variables set."""
        options = create_options_from_env()
        assert options.persisted_operations_directory is None
        assert options.allow_unpersisted_operation is False
    
    def test_environment_values(self, monkeypatch):
        """Test values are read from the environment."""
        monkeypatch.setenv("PERSISTED_OPERATIONS_DIRECTORY", "/srv/operations")
        monkeypatch.setenv("ALLOW_UNPERSISTED_OPERATIONS", "yes")
        options = create_options_from_env()
        assert options.persisted_operations_directory == "/srv/operations"
        assert options.allow_unpersisted_operation is True
    
    def test_fresh_instance_each_call(self):
        """Test no caching between calls."""
        assert create_options_from_env() is not create_options_from_env()


class TestRefreshIntervalFromEnv:
    """Test the rescan interval setting."""
    
    def test_default(self):
        """Test the default interval."""
        assert refresh_interval_from_env() == DEFAULT_REFRESH_INTERVAL == 5.0
    
    def test_override(self, monkeypatch):
        """Test the interval can be overridden."""
        monkeypatch.setenv("PERSISTED_OPERATIONS_REFRESH_INTERVAL", "0.5")
        assert refresh_interval_from_env() == 0.5
    
    def test_non_positive_raises(self, monkeypatch):
        """Test zero or negative intervals raise ValueError."""
        monkeypatch.setenv("PERSISTED_OPERATIONS_REFRESH_INTERVAL", "0")
        with pytest.raises(ValueError, match="must be positive"):
            refresh_interval_from_env()


class TestLoadOptions:
    """Test config file loading and CLI flag overlay."""
    
    def _write_config(self, tmp_path: Path, text: str) -> Path:
        path = tmp_path / "persisted-operations.yaml"
        path.write_text(text, encoding="utf-8")
        return path
    
    def test_no_config_no_flags(self):
        """Test options are empty without config or flags."""
        options = load_options()
        assert options.lookup_options_specified() == []
        assert options.allow_unpersisted_operation is None
    
    def test_config_file_values(self, tmp_path):
        """Test values come from the options section."""
        path = self._write_config(tmp_path, (
            "options:\n"
            "  persistedOperationsDirectory: /srv/operations\n"
            "  allowUnpersistedOperations: true\n"
        ))
        options = load_options(path)
        assert options.persisted_operations_directory == "/srv/operations"
        assert options.allow_unpersisted_operation is True
    
    def test_static_map_from_config(self, tmp_path):
        """Test a static mapping can be given in the config file."""
        path = self._write_config(tmp_path, (
            "options:\n"
            "  persistedOperations:\n"
            "    abc123: 'query { ping }'\n"
        ))
        options = load_options(path)
        assert options.persisted_operations == {"abc123": "query { ping }"}
    
    def test_flags_override_config(self, tmp_path):
        """Test CLI flags win over config file values."""
        path = self._write_config(tmp_path, (
            "options:\n"
            "  persistedOperationsDirectory: /from/config\n"
            "  allowUnpersistedOperations: false\n"
        ))
        options = load_options(
            path,
            persisted_operations_directory="/from/flag",
            allow_unpersisted_operations=True,
        )
        assert options.persisted_operations_directory == "/from/flag"
        assert options.allow_unpersisted_operation is True
    
    def test_unset_flags_keep_config(self, tmp_path):
        """Test None flags leave config values alone."""
        path = self._write_config(tmp_path, "options:\n  allowUnpersistedOperations: true\n")
        options = load_options(path, allow_unpersisted_operations=None)
        assert options.allow_unpersisted_operation is True
    
    def test_missing_config_raises(self, tmp_path):
        """Test a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_options(tmp_path / "missing.yaml")
    
    def test_other_sections_ignored(self, tmp_path):
        """Test keys outside options are ignored."""
        path = self._write_config(tmp_path, (
            "server:\n"
            "  port: 5000\n"
            "options:\n"
            "  persistedOperationsDirectory: /srv/operations\n"
            "  watch: true\n"
        ))
        options = load_options(path)
        assert options.persisted_operations_directory == "/srv/operations"


class TestOptionsFile:
    """Test OptionsFile model validation."""
    
    def test_empty_file(self, tmp_path):
        """Test an empty YAML file yields default options."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert OptionsFile.from_yaml_file(path).options.persisted_operations_directory is None
    
    def test_empty_options_section(self, tmp_path):
        """Test `options:` with no values is accepted."""
        path = tmp_path / "config.yaml"
        path.write_text("options:\n", encoding="utf-8")
        assert OptionsFile.from_yaml_file(path).options.allow_unpersisted_operations is None
    
    def test_top_level_list_raises(self, tmp_path):
        """Test a non-mapping document raises ValueError."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping at the top level"):
            OptionsFile.from_yaml_file(path)
    
    def test_invalid_static_map_raises(self):
        """Test persistedOperations must map strings to strings."""
        with pytest.raises(ValidationError):
            OptionsFile.model_validate({"options": {"persistedOperations": ["abc123"]}})
    
    def test_blank_directory_raises(self):
        """Test a blank directory is rejected."""
        with pytest.raises(ValidationError, match="must not be empty"):
            OptionsFile.model_validate({"options": {"persistedOperationsDirectory": "  "}})
    
    def test_python_names_accepted(self):
        """Test snake_case names work as well as the camelCase aliases."""
        model = OptionsFile.model_validate({"options": {"persisted_operations_directory": "/srv/ops"}})
        assert model.options.persisted_operations_directory == "/srv/ops"
