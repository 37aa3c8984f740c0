"""Token and size survey of a codebase, with a CAG vs RAG recommendation."""

from __future__ import annotations

__version__ = "0.1.0"
