"""Shared test fixtures for tokensurvey tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tokensurvey.config import TraversalConfig
from tokensurvey.scan.stats import AggregateStats, FileRecord, StatsAggregator


def word_count(text: str) -> int:
    """Stand-in tokenizer: one token per whitespace-separated word."""
    return len(text.split())


@pytest.fixture
def counter() -> Callable[[str], int]:
    """Return the whitespace tokenizer."""
    return word_count


@pytest.fixture
def quiet_config() -> TraversalConfig:
    """Default config with per-file reporting off."""
    return TraversalConfig(verbose=False)


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a helper that materializes ``{relative_path: content}`` under tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def make_stats() -> Callable[..., AggregateStats]:
    """Return a helper building finalized stats from ``(path, tokens)`` pairs."""

    def _make(*records: tuple[str, int]) -> AggregateStats:
        agg = StatsAggregator()
        for path, tokens in records:
            agg.record(FileRecord(path=path, size=tokens * 4, tokens=tokens))
        return agg.finalize()

    return _make
