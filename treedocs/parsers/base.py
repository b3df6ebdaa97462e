"""Base classes for source parser plugins."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..models import ParsedSource


class ParseError(ValueError):
    """Raised when a file is not valid input for a parser."""

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{line}:{column}: {message}"
        super().__init__(message)


class SourceParser(ABC):
    """Contract for parsers that decide what counts as a documentable source file."""

    name: str = ""

    @abstractmethod
    def parse(self, path: Path, contents: bytes) -> ParsedSource:
        """Split ``contents`` into header and document, raising ParseError on invalid input."""
