"""Tests for project settings resolution."""

from __future__ import annotations

import copy
import math

import pytest

from php_integrator.config.models import DEFAULT_PROJECT_SETTINGS, ProjectSettings
from php_integrator.core.errors import (
    AlreadyInitializedError,
    ConfigError,
    ErrorCode,
    InvalidPathIndexError,
    InvalidSettingsError,
    InvalidVersionError,
    MissingSettingsError,
)
from php_integrator.host.project import Project
from php_integrator.project import settings as project_settings


def _project(settings: dict) -> Project:
    return Project(title="demo", root_paths=["/proj"], settings=settings)


class TestSetUp:
    """Tests for set_up."""

    def test_given_empty_payload_when_set_up_then_enabled_with_defaults(self) -> None:
        # Given
        project = _project({})

        # When
        payload = project_settings.set_up(project)

        # Then
        assert payload["php"]["enabled"] is True
        assert payload["php"]["php_integrator"] == {
            "enabled": True,
            "phpVersion": DEFAULT_PROJECT_SETTINGS.php_version,
            "excludedPaths": [],
            "fileExtensions": ["php"],
        }

    def test_given_other_namespaces_when_set_up_then_kept(self) -> None:
        project = _project({"js": {"enabled": True}, "php": {"enabled": False, "other": 1}})

        payload = project_settings.set_up(project)

        assert payload["js"] == {"enabled": True}
        assert payload["php"]["other"] == 1
        assert payload["php"]["enabled"] is True

    def test_given_payload_when_set_up_then_project_not_mutated(self) -> None:
        original = {"php": {"enabled": False}}
        project = _project(copy.deepcopy(original))

        project_settings.set_up(project)

        assert project.settings == original

    def test_given_existing_subtree_when_set_up_then_already_initialized(self) -> None:
        # Given
        original = {"php": {"enabled": True, "php_integrator": {"phpVersion": 8.1}}}
        project = _project(copy.deepcopy(original))

        # When / Then
        with pytest.raises(AlreadyInitializedError) as exc_info:
            project_settings.set_up(project)
        assert exc_info.value.code == ErrorCode.PROJECT_ALREADY_INITIALIZED
        assert project.settings == original

    def test_given_two_projects_when_set_up_then_defaults_not_shared(self) -> None:
        """Resolved defaults are copies; mutating one leaves the other intact."""
        first = project_settings.set_up(_project({}))
        second = project_settings.set_up(_project({}))

        first["php"]["php_integrator"]["excludedPaths"].append("{0}/vendor")

        assert second["php"]["php_integrator"]["excludedPaths"] == []
        assert project_settings.default_settings()["excludedPaths"] == []
        assert DEFAULT_PROJECT_SETTINGS.excluded_paths == ()


class TestResolve:
    """Tests for resolve."""

    def test_given_no_namespace_when_resolve_then_none(self) -> None:
        assert project_settings.resolve(_project({})) is None

    def test_given_no_subtree_when_resolve_then_none(self) -> None:
        assert project_settings.resolve(_project({"php": {"enabled": True}})) is None

    def test_given_subtree_when_resolve_then_parsed(self) -> None:
        project = _project(
            {
                "php": {
                    "enabled": True,
                    "php_integrator": {
                        "phpVersion": "8.2",
                        "excludedPaths": ["{0}/vendor"],
                        "fileExtensions": ["php", "phtml"],
                    },
                }
            }
        )

        settings = project_settings.resolve(project)

        assert settings == ProjectSettings(
            php_version=8.2,
            excluded_paths=("{0}/vendor",),
            file_extensions=("php", "phtml"),
        )

    def test_given_null_sequences_when_resolve_then_empty(self) -> None:
        project = _project(
            {"php": {"php_integrator": {"phpVersion": 7.4, "excludedPaths": None}}}
        )

        settings = project_settings.resolve(project)

        assert settings is not None
        assert settings.excluded_paths == ()
        assert settings.file_extensions == ()

    def test_given_omitted_extensions_when_resolve_then_empty_not_default(self) -> None:
        """The set_up defaults are not used to fill gaps in an existing subtree."""
        project = _project({"php": {"php_integrator": {"phpVersion": 7.4}}})

        settings = project_settings.resolve(project)

        assert settings is not None
        assert settings.file_extensions == ()
        assert DEFAULT_PROJECT_SETTINGS.file_extensions == ("php",)

    def test_given_non_mapping_subtree_when_resolve_then_invalid_settings(self) -> None:
        with pytest.raises(InvalidSettingsError):
            project_settings.resolve(_project({"php": {"php_integrator": "yes"}}))

    def test_given_wrong_shape_when_resolve_then_invalid_settings(self) -> None:
        project = _project({"php": {"php_integrator": {"phpVersion": 7.4, "excludedPaths": 5}}})

        with pytest.raises(InvalidSettingsError) as exc_info:
            project_settings.resolve(project)

        assert "excludedPaths" in exc_info.value.details["field"]

    def test_given_resolved_settings_when_mutated_then_rejected(self) -> None:
        project = _project({"php": {"php_integrator": {"phpVersion": 8}}})

        settings = project_settings.resolve(project)

        assert settings is not None
        with pytest.raises(Exception):  # noqa: B017 - pydantic frozen instance error
            settings.php_version = 5.6  # type: ignore[misc]


class TestValidate:
    """Tests for validate and check."""

    def test_given_numeric_version_when_validate_then_ok(self) -> None:
        project = _project({"php": {"enabled": True, "php_integrator": {"phpVersion": 7.4}}})

        settings = project_settings.validate(project)

        assert settings.php_version == 7.4
        assert math.isfinite(settings.php_version)

    @pytest.mark.parametrize("version", ["abc", "inf", "nan", None, True, [7]])
    def test_given_bad_version_when_validate_then_invalid_version(self, version: object) -> None:
        project = _project({"php": {"php_integrator": {"phpVersion": version}}})

        with pytest.raises(InvalidVersionError) as exc_info:
            project_settings.validate(project)

        assert exc_info.value.code == ErrorCode.PROJECT_INVALID_VERSION

    def test_given_no_version_when_validate_then_invalid_version(self) -> None:
        # Given
        project = _project({"php": {"enabled": True, "php_integrator": {"excludedPaths": []}}})

        # When / Then
        with pytest.raises(InvalidVersionError) as exc_info:
            project_settings.validate(project)
        assert exc_info.value.details == {"value": "None"}

    def test_given_no_subtree_when_validate_then_missing_settings(self) -> None:
        with pytest.raises(MissingSettingsError):
            project_settings.validate(_project({"php": {"enabled": True}}))

    def test_given_invalid_project_when_check_then_returns_error(self) -> None:
        error = project_settings.check(_project({"php": {"php_integrator": {"phpVersion": "x"}}}))

        assert isinstance(error, InvalidVersionError)
        assert isinstance(error, ConfigError)

    def test_given_bad_placeholder_when_check_then_invalid_path_index(self) -> None:
        project = _project(
            {"php": {"php_integrator": {"phpVersion": 8.1, "excludedPaths": ["{1}/vendor"]}}}
        )

        error = project_settings.check(project)

        assert isinstance(error, InvalidPathIndexError)
        assert error.details["root_count"] == 1

    def test_given_valid_project_when_check_then_none(self) -> None:
        project = _project({"php": {"php_integrator": {"phpVersion": 8.1}}})

        assert project_settings.check(project) is None


class TestIsEnabled:
    """Tests for is_enabled."""

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({}, False),
            ({"php": {}}, False),
            ({"php": {"enabled": False}}, False),
            ({"php": {"enabled": True}}, True),
            ({"php": "garbage"}, False),
        ],
    )
    def test_enabled_flag(self, payload: dict, expected: bool) -> None:
        assert project_settings.is_enabled(_project(payload)) is expected
