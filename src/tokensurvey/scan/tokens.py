"""Token counting backed by tiktoken."""

from __future__ import annotations

from collections.abc import Callable
from functools import cache

import tiktoken

TokenCounter = Callable[[str], int]


def count_tokens(text: str, *, encoding_name: str) -> int:
    """Count tokens in text using the specified encoding.

    Special-token markers such as ``<|endoftext|>`` are counted as ordinary
    text rather than rejected.
    """
    return len(_encoding(encoding_name).encode(text, disallowed_special=()))


def make_token_counter(encoding_name: str) -> TokenCounter:
    """Return a one-argument counter bound to ``encoding_name``.

    The encoding is loaded eagerly so an unknown name fails here, before
    any file is read.

    Raises
    ------
    ValueError
        If tiktoken doesn't know the encoding.
    """
    encoding = _encoding(encoding_name)

    def counter(text: str) -> int:
        return len(encoding.encode(text, disallowed_special=()))

    return counter


@cache
def _encoding(name: str) -> tiktoken.Encoding:
    return tiktoken.get_encoding(name)
