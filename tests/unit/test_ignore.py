"""Unit tests for .gitignore loading and matching."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tokensurvey.scan.ignore import IgnoreMatcher, load_ignore_matcher

pytestmark = pytest.mark.unit


class TestIgnoreMatcher:
    """Tests for IgnoreMatcher."""

    def test_glob_pattern(self) -> None:
        m = IgnoreMatcher(["*.min.js"])
        assert m.ignores("dist/app.min.js")
        assert not m.ignores("src/app.js")

    def test_negation(self) -> None:
        m = IgnoreMatcher(["*.json", "!package.json"])
        assert m.ignores("data.json")
        assert not m.ignores("package.json")

    def test_directory_only_pattern(self) -> None:
        """Test that 'build/' applies to the directory but not a same-named file."""
        m = IgnoreMatcher(["build/"])
        assert m.ignores("build", is_dir=True)
        assert m("build", True)
        assert not m.ignores("build", is_dir=False)

    def test_anchored_pattern(self) -> None:
        m = IgnoreMatcher(["/config.yml"])
        assert m.ignores("config.yml")
        assert not m.ignores("app/config.yml")

    def test_comments_and_blanks(self) -> None:
        m = IgnoreMatcher(["# comment", "", "secret.rb"])
        assert m.ignores("lib/secret.rb")
        assert not m.ignores("lib/public.rb")


class TestLoadIgnoreMatcher:
    """Tests for load_ignore_matcher."""

    def test_disabled(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("*.js\n", encoding="utf-8")
        assert load_ignore_matcher(tmp_path, respect_gitignore=False) is None

    def test_absent_file(self, tmp_path: Path) -> None:
        assert load_ignore_matcher(tmp_path, respect_gitignore=True) is None

    def test_loads_rules(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("generated/\n*.log\n", encoding="utf-8")
        m = load_ignore_matcher(tmp_path, respect_gitignore=True)
        assert m is not None
        assert m.ignores("generated", is_dir=True)
        assert m.ignores("x.log")

    def test_unreadable_file_disables_rules(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that an undecodable .gitignore is logged and treated as absent."""
        (tmp_path / ".gitignore").write_bytes(b"\xff\xfe\x00bad")
        with caplog.at_level(logging.WARNING):
            assert load_ignore_matcher(tmp_path, respect_gitignore=True) is None
        assert "Error loading .gitignore" in caplog.text

    def test_directory_named_gitignore(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").mkdir()
        assert load_ignore_matcher(tmp_path, respect_gitignore=True) is None
