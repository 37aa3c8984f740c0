"""Configuration for a survey run.

Settings are merged in priority order:
    1. Defaults (defined on ``TraversalConfig`` / ``AdvisorSettings``)
    2. An optional TOML file (``[tokensurvey]`` or ``[tool.tokensurvey]``)
    3. Explicit overrides (CLI flags)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import tomli
from pydantic import BaseModel, Field, field_validator

DEFAULT_ENCODING = "cl100k_base"

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    # JavaScript/TypeScript
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".json",
    # Web
    ".css",
    ".scss",
    ".html",
    ".erb",
    # Ruby/Rails
    ".rb",
    ".rake",
    ".yml",
    ".yaml",
)

DEFAULT_SKIP_DIRS: tuple[str, ...] = (
    "node_modules",
    ".git",
    "tmp",
    "log",
    "public/assets",
    "public/packs",
    "coverage",
    "vendor/bundle",
)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class FrameworkMode(str, Enum):
    """Requested framework classification.

    Attributes
    ----------
    AUTO
        Detect from the extensions found during traversal.
    JAVASCRIPT
        Treat the codebase as JavaScript/TypeScript.
    RAILS
        Treat the codebase as Ruby on Rails.
    """

    AUTO = "auto"
    JAVASCRIPT = "javascript"
    RAILS = "rails"


class AdvisorSettings(BaseModel):
    """Thresholds and prices used by the CAG vs RAG advisor.

    Attributes
    ----------
    context_window_tokens
        Token count below which the whole codebase fits a typical context window.
    hybrid_multiplier
        Multiple of ``context_window_tokens`` at which retrieval becomes the
        recommendation.
    embedding_cost_per_1k
        Price in dollars for embedding 1000 tokens.
    chunk_tokens
        Token size of one retrieval chunk, used to estimate the chunk count.
    """

    context_window_tokens: int = Field(default=100_000, ge=1)
    hybrid_multiplier: int = Field(default=3, ge=1)
    embedding_cost_per_1k: float = Field(default=0.0001, ge=0)
    chunk_tokens: int = Field(default=1000, ge=1)

    model_config = {"frozen": True, "extra": "forbid"}


class TraversalConfig(BaseModel):
    """Immutable settings for one traversal.

    Attributes
    ----------
    encoding_name
        tiktoken encoding used to count tokens.
    extensions
        Allowed file extensions, lower case with a leading dot.
    max_file_size
        Files larger than this many bytes are skipped with a warning.
    verbose
        Report each admitted file as it is counted.
    respect_gitignore
        Load ``.gitignore`` from the root and skip what it matches.
    skip_hidden
        Skip files and directories whose name starts with a dot.
    skip_dirs
        Directories never descended into. Matched against the bare name or
        the root-relative path.
    follow_symlinks
        Follow symbolic links to files and directories. Off by default, so
        every file is counted under its real path only.
    framework
        Framework classification mode for the advisor.
    advisor
        Advisor thresholds.
    """

    encoding_name: str = DEFAULT_ENCODING
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0)
    verbose: bool = True
    respect_gitignore: bool = True
    skip_hidden: bool = True
    skip_dirs: tuple[str, ...] = DEFAULT_SKIP_DIRS
    follow_symlinks: bool = False
    framework: FrameworkMode = FrameworkMode.AUTO
    advisor: AdvisorSettings = Field(default_factory=AdvisorSettings)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        out: list[str] = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("Extensions must not be empty")
            if not ext.startswith("."):
                ext = "." + ext
            if ext not in out:
                out.append(ext)
        return tuple(out)

    @field_validator("skip_dirs")
    @classmethod
    def _normalize_skip_dirs(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(d.strip().strip("/") for d in value if d.strip().strip("/"))


def load_config(config_file: Path | None = None, **overrides: Any) -> TraversalConfig:
    """Build a ``TraversalConfig`` from defaults, a TOML file and overrides.

    Parameters
    ----------
    config_file
        Optional TOML file. A ``pyproject.toml`` is read from
        ``[tool.tokensurvey]``, anything else from ``[tokensurvey]``.
    **overrides
        Field values that take precedence over the file. ``None`` values are
        ignored so unset CLI flags don't mask file settings.

    Returns
    -------
    TraversalConfig
        Validated configuration.

    Raises
    ------
    ValueError
        If the file cannot be read or parsed, or a value is invalid.
    """
    data: dict[str, Any] = {}
    if config_file is not None:
        data.update(_read_config_table(config_file))

    for key, value in overrides.items():
        if value is not None:
            data[key] = value

    return TraversalConfig.model_validate(data)


def _read_config_table(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            doc = tomli.load(f)
    except OSError as e:
        raise ValueError(f"Failed to read config file: {path}") from e
    except tomli.TOMLDecodeError as e:
        raise ValueError(f"Failed to parse config file {path}: {e}") from e

    if path.name == "pyproject.toml":
        table = doc.get("tool", {}).get("tokensurvey", {})
    else:
        table = doc.get("tokensurvey", {})
    if not isinstance(table, dict):
        raise ValueError(f"[tokensurvey] in {path} must be a table")
    return dict(table)
