"""Tests for excluded path resolution."""

import os

import pytest

from php_integrator.core.errors import ErrorCode, InvalidPathIndexError
from php_integrator.project.excludes import (
    is_excluded,
    resolve_excluded_path,
    resolve_excluded_paths,
)

ROOTS = ["/proj", "/shared/lib"]


class TestResolveExcludedPaths:
    """Tests for resolve_excluded_paths."""

    def test_absolute_path_passes_through(self) -> None:
        assert resolve_excluded_paths(ROOTS, ["/a/b"]) == ["/a/b"]

    def test_absolute_path_is_not_normalized(self) -> None:
        """Absolute rules are kept exactly as written."""
        assert resolve_excluded_paths(ROOTS, ["/a/./b/"]) == ["/a/./b/"]

    def test_placeholder_resolves_against_first_root(self) -> None:
        assert resolve_excluded_paths(["/proj"], ["{0}/vendor"]) == ["/proj/vendor"]

    def test_placeholder_resolves_against_later_root(self) -> None:
        resolved = resolve_excluded_paths(ROOTS, ["{1}/tests/fixtures"])

        assert resolved == ["/shared/lib/tests/fixtures"]

    def test_placeholder_out_of_range_raises(self) -> None:
        with pytest.raises(InvalidPathIndexError) as exc_info:
            resolve_excluded_paths(["/proj"], ["{5}/x"])

        assert exc_info.value.code == ErrorCode.PROJECT_INVALID_PATH_INDEX
        assert exc_info.value.details["index"] == 5
        assert exc_info.value.details["root_count"] == 1

    def test_placeholder_equal_to_root_count_raises(self) -> None:
        """Indexes are zero-based, so N == len(roots) is out of range."""
        with pytest.raises(InvalidPathIndexError):
            resolve_excluded_paths(ROOTS, ["{2}/x"])

    def test_placeholder_without_roots_raises(self) -> None:
        with pytest.raises(InvalidPathIndexError):
            resolve_excluded_paths([], ["{0}/vendor"])

    def test_relative_path_is_normalized(self) -> None:
        assert resolve_excluded_paths(ROOTS, ["vendor/../cache/./tmp"]) == [
            os.path.normpath("cache/tmp")
        ]

    def test_placeholder_without_suffix_is_relative(self) -> None:
        """'{0}' alone does not match the placeholder form."""
        assert resolve_excluded_paths(ROOTS, ["{0}"]) == ["{0}"]

    def test_order_and_duplicates_preserved(self) -> None:
        rules = ["{0}/vendor", "/tmp/x", "{0}/vendor"]

        result = resolve_excluded_paths(ROOTS, rules)

        assert result == ["/proj/vendor", "/tmp/x", "/proj/vendor"]

    def test_empty_rules(self) -> None:
        assert resolve_excluded_paths(ROOTS, []) == []

    def test_single_rule_helper_matches_list_form(self) -> None:
        assert resolve_excluded_path(ROOTS, "{0}/vendor") == "/proj/vendor"


class TestIsExcluded:
    """Tests for is_excluded."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/proj/vendor", True),
            ("/proj/vendor/autoload.php", True),
            ("/proj/vendorized/a.php", False),
            ("/proj/src/a.php", False),
        ],
    )
    def test_prefix_matching(self, path: str, expected: bool) -> None:
        assert is_excluded(path, ["/proj/vendor"]) is expected

    def test_trailing_separator_on_excluded_path(self) -> None:
        assert is_excluded("/proj/vendor/a.php", ["/proj/vendor/"])

    def test_no_excluded_paths(self) -> None:
        assert not is_excluded("/proj/a.php", [])
