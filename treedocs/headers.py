"""Strip comment syntax from extracted file headers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class CommentPattern:
    """Comment delimiters that may wrap a header. An empty closer means a line comment."""

    opener: str
    closer: str = ""

    def strip(self, text: str) -> Optional[str]:
        """Return ``text`` without the delimiters, or None when they do not match."""
        if not text.startswith(self.opener):
            return None
        inner = text[len(self.opener):]
        if self.closer:
            if not inner.endswith(self.closer):
                return None
            inner = inner[: -len(self.closer)]
        return inner.strip()


# Evaluated in order; the first match wins.
DEFAULT_PATTERNS: Tuple[CommentPattern, ...] = (
    CommentPattern("--"),
    CommentPattern("{-", "-}"),
)


def normalize_header(
    raw: str, patterns: Tuple[CommentPattern, ...] = DEFAULT_PATTERNS
) -> str:
    """Return the header as plain text ready for markdown rendering.

    Comment delimiters are removed repeatedly until none apply, so
    ``normalize_header(normalize_header(x)) == normalize_header(x)``.
    """
    text = raw.strip()
    while True:
        for pattern in patterns:
            stripped = pattern.strip(text)
            if stripped is not None:
                text = stripped
                break
        else:
            return text


__all__ = [
    "CommentPattern",
    "DEFAULT_PATTERNS",
    "normalize_header",
]
