"""
Document loader with file reading and error wrapping.
"""

import time
from pathlib import Path

from .const import DEFAULT_ENCODING, DEFAULT_FILENAME
from .errors import ParseError
from .logging import get_logger
from .parser import parse
from .values import Table


logger = get_logger("loader")


class LoadError(Exception):
    """Exception raised when a document cannot be read or parsed."""

    pass


class DocumentLoader:
    """
    Loads documents from files or strings.

    Usage:
        loader = DocumentLoader()
        root = loader.load_file("config.toml")
        # or
        root = loader.load_string(text)
    """

    def __init__(self, allow_mixed_arrays: bool = False, encoding: str = DEFAULT_ENCODING):
        self.allow_mixed_arrays = allow_mixed_arrays
        self.encoding = encoding
        self.last_document: Table | None = None

    def load_file(self, path: str | Path) -> Table:
        """
        Load a document from a file.

        Args:
            path: Path to the document

        Returns:
            Root Table of the parsed document

        Raises:
            LoadError: If the file cannot be read or parsed
        """
        path = Path(path)

        if not path.exists():
            raise LoadError(f"Document not found: {path}")

        if not path.is_file():
            raise LoadError(f"Not a file: {path}")

        try:
            source = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Failed to read {path}: {e}") from e

        return self.load_string(source, str(path))

    def load(self, path: str | Path) -> Table:
        """Alias for load_file."""
        return self.load_file(path)

    def load_string(self, source: str, filename: str = DEFAULT_FILENAME) -> Table:
        """
        Load a document from a string.

        Args:
            source: Document text
            filename: Filename for error messages

        Returns:
            Root Table of the parsed document

        Raises:
            LoadError: If the document cannot be parsed
        """
        started = time.perf_counter()

        try:
            document = parse(source, filename, allow_mixed_arrays=self.allow_mixed_arrays)
        except ParseError as e:
            logger.debug("Parse of %s failed (%s): %s", filename, e.kind.value, e)
            raise LoadError(f"Failed to parse document: {e}") from e

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "Parsed %s: %d top-level keys in %.2f ms", filename, len(document), elapsed_ms
        )

        self.last_document = document
        return document


def load_file(path: str | Path, allow_mixed_arrays: bool = False) -> Table:
    """
    Convenience function to load a document from a file.

    Args:
        path: Path to the document
        allow_mixed_arrays: Accept arrays whose elements differ in kind

    Returns:
        Root Table of the parsed document
    """
    loader = DocumentLoader(allow_mixed_arrays=allow_mixed_arrays)
    return loader.load_file(path)


def load_string(source: str, allow_mixed_arrays: bool = False) -> Table:
    """Convenience function to load a document from a string."""
    loader = DocumentLoader(allow_mixed_arrays=allow_mixed_arrays)
    return loader.load_string(source)
