"""Excluded path resolution.

Exclusion rules come in three shapes:

- Absolute paths, kept as-is.
- Placeholder paths ``{N}/suffix``, where N is a zero-based index into the
  project's root paths. ``{0}/vendor`` on a project rooted at ``/proj``
  becomes ``/proj/vendor``.
- Anything else, textually normalized (``.``/``..`` collapsed, platform
  separators) without being anchored to any root.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Sequence

from php_integrator.core.errors import InvalidPathIndexError

PLACEHOLDER_PATTERN = re.compile(r"^\{(\d+)\}(/.*)$")


def resolve_excluded_path(root_paths: Sequence[str], rule: str) -> str:
    """Resolve a single exclusion rule to a path."""
    if os.path.isabs(rule):
        return rule

    match = PLACEHOLDER_PATTERN.match(rule)
    if match is not None:
        index = int(match.group(1))
        if index >= len(root_paths):
            raise InvalidPathIndexError.for_rule(rule, index, len(root_paths))
        return root_paths[index] + match.group(2)

    return os.path.normpath(rule)


def resolve_excluded_paths(root_paths: Sequence[str], rules: Iterable[str]) -> list[str]:
    """Resolve exclusion rules in order. Duplicates are kept.

    Raises:
        InvalidPathIndexError: If a placeholder references a missing root.
    """
    return [resolve_excluded_path(root_paths, rule) for rule in rules]


def is_excluded(path: str, excluded_paths: Iterable[str]) -> bool:
    """True if path equals or lies under any resolved excluded path."""
    normalized = os.path.normpath(path)
    for excluded in excluded_paths:
        prefix = os.path.normpath(excluded)
        if normalized == prefix or normalized.startswith(prefix.rstrip(os.sep) + os.sep):
            return True
    return False
