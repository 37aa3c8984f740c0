"""Running totals for a survey and the finalized statistics snapshot."""

from __future__ import annotations

from bisect import insort
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

LARGEST_FILES_LIMIT = 20


def extension_of(path: str) -> str:
    """Lower-case extension of the last path segment, including the dot.

    Returns an empty string when there is none. A leading dot is a hidden-file
    marker, not an extension: ``.eslintrc`` has no extension.
    """
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot:].lower()


@dataclass(frozen=True)
class FileRecord:
    """One admitted, tokenized file.

    Attributes
    ----------
    path
        Path relative to the survey root in POSIX format.
    size
        File size in bytes.
    tokens
        Token count of the file content.
    """

    path: str
    size: int
    tokens: int

    def __post_init__(self) -> None:
        if self.size < 0 or self.tokens < 0:
            raise ValueError(f"size and tokens must be non-negative: {self}")

    @property
    def extension(self) -> str:
        return extension_of(self.path)


@dataclass
class ExtensionStat:
    """Per-extension totals."""

    files: int = 0
    tokens: int = 0


@dataclass(frozen=True)
class AggregateStats:
    """Finalized statistics for a survey.

    Attributes
    ----------
    total_files
        Number of admitted files.
    total_tokens
        Sum of token counts over admitted files.
    total_bytes
        Sum of sizes over admitted files.
    by_extension
        Extension to totals, in order of first encounter.
    largest_files
        Up to 20 records, tokens descending, ties in encounter order.
    avg_tokens_per_file
        ``total_tokens / total_files``, or 0 when no files were admitted.
    """

    total_files: int
    total_tokens: int
    total_bytes: int
    by_extension: Mapping[str, ExtensionStat]
    largest_files: tuple[FileRecord, ...]
    avg_tokens_per_file: float

    def extensions_present(self) -> set[str]:
        """Extensions with at least one admitted file."""
        return {ext for ext, stat in self.by_extension.items() if stat.files > 0}


@dataclass
class StatsAggregator:
    """Accumulates ``FileRecord`` values during a traversal.

    Only the ``limit`` largest records are retained; everything else is
    folded into the running sums.
    """

    limit: int = LARGEST_FILES_LIMIT
    total_files: int = 0
    total_tokens: int = 0
    total_bytes: int = 0
    by_extension: dict[str, ExtensionStat] = field(default_factory=dict)
    _largest: list[tuple[int, int, FileRecord]] = field(default_factory=list, repr=False)
    _seen: int = field(default=0, repr=False)
    _final: AggregateStats | None = field(default=None, repr=False)

    def record(self, rec: FileRecord) -> None:
        """Fold one file into the totals.

        Raises
        ------
        RuntimeError
            If called after ``finalize``.
        """
        if self._final is not None:
            raise RuntimeError("Cannot record after finalize()")

        self.total_files += 1
        self.total_tokens += rec.tokens
        self.total_bytes += rec.size

        stat = self.by_extension.get(rec.extension)
        if stat is None:
            stat = self.by_extension[rec.extension] = ExtensionStat()
        stat.files += 1
        stat.tokens += rec.tokens

        # Sort key (-tokens, sequence) keeps ties in encounter order.
        insort(self._largest, (-rec.tokens, self._seen, rec), key=lambda item: item[:2])
        self._seen += 1
        if len(self._largest) > self.limit:
            self._largest.pop()

    def finalize(self) -> AggregateStats:
        """Compute derived metrics and freeze the totals.

        Calling this more than once returns the same snapshot.
        """
        if self._final is None:
            avg = self.total_tokens / self.total_files if self.total_files > 0 else 0
            self._final = AggregateStats(
                total_files=self.total_files,
                total_tokens=self.total_tokens,
                total_bytes=self.total_bytes,
                by_extension=MappingProxyType(
                    {ext: ExtensionStat(s.files, s.tokens) for ext, s in self.by_extension.items()}
                ),
                largest_files=tuple(item[2] for item in self._largest[: self.limit]),
                avg_tokens_per_file=avg,
            )
        return self._final

    @property
    def finalized(self) -> bool:
        return self._final is not None
