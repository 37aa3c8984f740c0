"""Ignore rule loading for the walker.

Only the ``.gitignore`` directly under the root is consulted. Patterns use
git's wildmatch semantics via ``pathspec``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pathspec import GitIgnoreSpec

logger = logging.getLogger(__name__)

GITIGNORE_FILE = ".gitignore"

PathExcluder = Callable[[str, bool], bool]
"""Predicate ``(relative_posix, is_dir) -> excluded``."""


class IgnoreMatcher:
    """Decides whether a root-relative path is excluded by ignore rules.

    Parameters
    ----------
    patterns
        Lines in gitignore syntax. Blank lines and comments are allowed.
    source
        Where the patterns came from, for diagnostics.
    """

    def __init__(self, patterns: list[str], *, source: str = "<patterns>") -> None:
        self.source = source
        self._spec = GitIgnoreSpec.from_lines(patterns)

    def __call__(self, relative_posix: str, is_dir: bool = False) -> bool:
        return self.ignores(relative_posix, is_dir=is_dir)

    def ignores(self, relative_posix: str, *, is_dir: bool = False) -> bool:
        """Return True if the path is excluded.

        Directories are matched with a trailing slash so directory-only
        patterns such as ``build/`` apply to them.
        """
        path = relative_posix.rstrip("/")
        if is_dir:
            path += "/"
        return self._spec.match_file(path)

    def __repr__(self) -> str:
        return f"IgnoreMatcher(source={self.source!r}, patterns={len(self._spec.patterns)})"


def load_ignore_matcher(root: Path, *, respect_gitignore: bool) -> IgnoreMatcher | None:
    """Load the root ``.gitignore`` into a matcher.

    Parameters
    ----------
    root
        Directory being surveyed.
    respect_gitignore
        When False no file is read and None is returned.

    Returns
    -------
    IgnoreMatcher | None
        The matcher, or None when disabled, absent, or unusable. An
        unreadable or malformed file is logged and treated as absent.
    """
    if not respect_gitignore:
        return None

    path = root / GITIGNORE_FILE
    if not path.is_file():
        return None

    try:
        lines = _read_patterns_file(path)
        matcher = IgnoreMatcher(lines, source=GITIGNORE_FILE)
    except ValueError as e:
        logger.warning("Error loading %s: %s; ignore rules disabled", GITIGNORE_FILE, e)
        return None

    logger.debug("Loaded %s rules from %s", GITIGNORE_FILE, path)
    return matcher


def _read_patterns_file(path: Path) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Failed to read ignore file: {path}") from e
    return [line.rstrip("\n") for line in text.splitlines()]
