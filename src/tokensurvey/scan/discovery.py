"""Deterministic directory traversal and token accounting."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from tokensurvey.config import TraversalConfig
from tokensurvey.formatting import format_bytes
from tokensurvey.scan.ignore import PathExcluder
from tokensurvey.scan.stats import AggregateStats, FileRecord, StatsAggregator, extension_of
from tokensurvey.scan.tokens import TokenCounter

logger = logging.getLogger(__name__)

FileCallback = Callable[[FileRecord], None]


def walk(
    root: Path,
    config: TraversalConfig,
    excluder: PathExcluder | None,
    count_tokens: TokenCounter,
    *,
    on_file: FileCallback | None = None,
) -> AggregateStats:
    """Walk ``root`` and aggregate token statistics for every admitted file.

    Entries are visited depth-first in name order. For each entry the first
    failing rule rejects it:

    1. hidden name (when ``config.skip_hidden``)
    2. matched by ``excluder``
    3. directory listed in ``config.skip_dirs`` (otherwise descend)
    4. extension not in ``config.extensions``
    5. larger than ``config.max_file_size`` (logged)
    6. unreadable or untokenizable (logged)

    Symbolic links are skipped unless ``config.follow_symlinks`` is set. When
    they are followed, a file reached through several paths is counted once,
    under the first path in traversal order.
    Per-file failures never propagate; they are logged and the file is
    skipped.

    Parameters
    ----------
    root
        Directory to survey.
    config
        Traversal settings.
    excluder
        Optional ``(relative_posix, is_dir) -> excluded`` predicate.
    count_tokens
        Maps file text to its token count.
    on_file
        Called with each admitted record, in admission order, when
        ``config.verbose`` is set.

    Returns
    -------
    AggregateStats
        Finalized statistics.

    Raises
    ------
    ValueError
        If root doesn't exist or isn't a directory.
    """
    root = root.resolve()
    if not root.exists() or not root.is_dir():
        raise ValueError(f"Root must be an existing directory: {root}")

    aggregator = StatsAggregator()
    extensions = frozenset(config.extensions)
    # Resolved targets of recorded files, so a file reached through links counts once.
    recorded: set[Path] = set()

    # Manual recursion gives us deterministic traversal + symlink loop control.
    def walk_dir(abs_dir: Path, rel_dir_posix: str, ancestors: frozenset[Path]) -> None:
        try:
            entries = sorted(abs_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning("Error reading directory %s: %s", rel_dir_posix or ".", e)
            return

        for entry in entries:
            name = entry.name
            rel_posix = f"{rel_dir_posix}/{name}" if rel_dir_posix else name

            if config.skip_hidden and name.startswith("."):
                continue

            is_symlink = entry.is_symlink()
            try:
                is_dir = entry.is_dir()
            except OSError as e:
                logger.warning("Error processing %s: %s", rel_posix, e)
                continue

            if excluder is not None and excluder(rel_posix, is_dir):
                continue

            if is_symlink and not config.follow_symlinks:
                if not entry.exists():
                    logger.warning("Error processing %s: broken symbolic link", rel_posix)
                else:
                    logger.debug("Not following symlink %s", rel_posix)
                continue

            if is_dir:
                if _is_skipped_dir(rel_posix, config.skip_dirs):
                    continue
                try:
                    target = entry.resolve(strict=True)
                except (OSError, RuntimeError) as e:
                    logger.warning("Error processing %s: cannot resolve link (%s)", rel_posix, e)
                    continue
                if target in ancestors:
                    logger.warning("Skipping %s - symlink loop back to %s", rel_posix, target)
                    continue
                walk_dir(entry, rel_posix, ancestors | {target})
                continue

            # Broken links fail to resolve below.
            if not is_symlink and not entry.is_file():
                continue

            if extension_of(name) not in extensions:
                continue

            if is_symlink:
                try:
                    target = entry.resolve(strict=True)
                except (OSError, RuntimeError) as e:
                    logger.warning("Error processing %s: cannot resolve link (%s)", rel_posix, e)
                    continue
            else:
                target = entry.resolve()
            if target in recorded:
                logger.debug("Skipping %s - already counted via another path", rel_posix)
                continue

            rec = _read_record(entry, rel_posix, config.max_file_size, count_tokens)
            if rec is None:
                continue

            recorded.add(target)
            aggregator.record(rec)
            if config.verbose and on_file is not None:
                on_file(rec)

    walk_dir(root, "", frozenset({root}))
    return aggregator.finalize()


def _read_record(path: Path, rel_posix: str, max_file_size: int, count_tokens: TokenCounter) -> FileRecord | None:
    try:
        size = path.stat().st_size
    except (OSError, RuntimeError) as e:
        logger.warning("Error processing %s: %s", rel_posix, e)
        return None

    if size > max_file_size:
        logger.warning("Skipping %s (%s) - exceeds max file size", rel_posix, format_bytes(size))
        return None

    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            content = f.read()
    except (OSError, ValueError) as e:
        logger.warning("Error processing %s: %s", rel_posix, e)
        return None

    # Any tokenizer error skips only this file.
    try:
        tokens = count_tokens(content)
    except Exception as e:
        logger.warning("Error processing %s: %s", rel_posix, e)
        return None

    return FileRecord(path=rel_posix, size=size, tokens=tokens)


def _is_skipped_dir(rel_posix: str, skip_dirs: tuple[str, ...]) -> bool:
    name = rel_posix.rsplit("/", 1)[-1]
    for d in skip_dirs:
        if name == d or rel_posix == d or rel_posix.endswith("/" + d):
            return True
    return False
