"""Unit tests for engine settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from geoply.application.settings import (
    EngineSettings,
    SettingsError,
    SourceKind,
    load_settings,
)


def _write_settings(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestEngineSettings:
    """Tests for the EngineSettings model."""

    def test_defaults(self) -> None:
        settings = EngineSettings()
        assert settings.catalog_sources == []
        assert settings.project_types == ["turnkey", "self-build", "structureOnly"]
        assert settings.turnkey_project_type == "turnkey"
        assert settings.storage_path is None
        assert settings.log_level == "WARNING"

    def test_log_level_case_insensitive(self) -> None:
        assert EngineSettings(log_level="debug").log_level == "DEBUG"  # type: ignore[arg-type]

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            EngineSettings(log_level="loud")  # type: ignore[arg-type]

    def test_unsupported_schema_version(self) -> None:
        with pytest.raises(ValidationError, match="Unsupported schema version"):
            EngineSettings(schema_version="2.0")

    def test_turnkey_must_be_a_project_type(self) -> None:
        with pytest.raises(ValidationError, match="turnkey_project_type"):
            EngineSettings(project_types=["kit"], turnkey_project_type="turnkey")

    def test_source_timeout_bounds(self) -> None:
        with pytest.raises(ValidationError):
            EngineSettings.model_validate({"catalog_sources": [{"kind": "http", "location": "x", "timeout": 0}]})

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EngineSettings.model_validate({"catalog_url": "https://example.com"})


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_relative_paths_resolved_against_settings_dir(self, tmp_path: Path) -> None:
        path = _write_settings(
            tmp_path / "settings.json",
            {
                "catalog_sources": [
                    {"kind": "http", "location": "https://cdn.example.com/catalog/"},
                    {"kind": "file", "location": "catalog"},
                    {"kind": "file", "location": "/srv/catalog.json"},
                ],
                "storage_path": "data/selections.json",
            },
        )

        settings = load_settings(path)

        locations = [source.location for source in settings.catalog_sources]
        assert locations == [
            "https://cdn.example.com/catalog/",
            str(tmp_path / "catalog"),
            "/srv/catalog.json",
        ]
        assert settings.catalog_sources[0].kind is SourceKind.HTTP
        assert settings.storage_path == tmp_path / "data" / "selections.json"

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(SettingsError) as exc_info:
            load_settings(tmp_path / "missing.json")
        assert exc_info.value.error_type == "file_not_found"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(SettingsError) as exc_info:
            load_settings(path)
        assert exc_info.value.error_type == "json_parse"

    def test_validation_error(self, tmp_path: Path) -> None:
        path = _write_settings(tmp_path / "settings.json", {"catalog_sources": [{"kind": "ftp", "location": "x"}]})

        with pytest.raises(SettingsError) as exc_info:
            load_settings(path)

        error = exc_info.value
        assert error.error_type == "validation"
        assert error.details[0]["path"] == "catalog_sources[0].kind"
        assert error.message.startswith("Settings validation failed:")
