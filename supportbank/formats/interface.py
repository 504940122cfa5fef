"""
Abstract Format Adapter Interface

DESIGN DECISION: Every on-disk encoding sits behind one interface.
This allows us to:
1. Keep format-specific field names inside the adapter
2. Add a new file format without touching the ledger
3. Test parsing and writing without the filesystem

An adapter converts text into untrusted RawRecords and applied
Transactions back into text. It never sees the Ledger itself.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from supportbank.config import ExportSettings, ImportSettings, get_settings
from supportbank.models.transaction import ISO_8601, RawRecord, Transaction, TransactionFormat


PathLike = Union[str, Path]


class FormatAdapter(ABC):
    """
    Abstract interface for a transaction file format.

    Any format implementation (CSV, JSON, XML, ...)
    must implement these methods.
    """

    #: Which format this adapter handles.
    format: TransactionFormat

    #: strptime patterns accepted for dates read from this format.
    date_formats: tuple[str, ...] = (ISO_8601,)

    def __init__(
        self,
        import_settings: Optional[ImportSettings] = None,
        export_settings: Optional[ExportSettings] = None,
    ):
        """
        Initialize adapter.

        Args:
            import_settings: Encoding used when reading files.
            export_settings: Layout and encoding used when writing files.
                             Both default to the application settings.
        """
        settings = get_settings()
        self._import_settings = import_settings or settings.imports
        self._export_settings = export_settings or settings.exports

    @abstractmethod
    def parse(self, text: str) -> list[RawRecord]:
        """
        Parse file contents into raw records.

        Args:
            text: Complete file contents

        Returns:
            Records in file order, each tagged with its line number

        Raises:
            MalformedFileError: If the document structure is unusable
        """
        pass

    @abstractmethod
    def write(self, transactions: Sequence[Transaction]) -> str:
        """
        Serialize applied transactions.

        Args:
            transactions: Transactions in ledger order

        Returns:
            Complete file contents
        """
        pass

    def load(self, path: PathLike) -> list[RawRecord]:
        """Read and parse a file. Nothing is returned unless both succeed."""
        return self.parse(self.read_file(path))

    def dump(self, path: PathLike, transactions: Sequence[Transaction]) -> int:
        """Serialize and write transactions, returning how many were written."""
        self.write_file(path, self.write(transactions))
        return len(transactions)

    def read_file(self, path: PathLike) -> str:
        """
        Read a whole file as text.

        Raises:
            IOFailureError: If the file is missing, unreadable or undecodable
        """
        try:
            return _read_text(Path(path), self._import_settings.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailureError(str(path), "read", str(e)) from e

    def write_file(self, path: PathLike, text: str) -> None:
        """
        Overwrite a file with text.

        Raises:
            IOFailureError: If the file cannot be written
        """
        try:
            _write_text(Path(path), text, self._export_settings.encoding)
        except (OSError, UnicodeEncodeError) as e:
            raise IOFailureError(str(path), "write", str(e)) from e


# A locked file usually frees up quickly; anything else fails at once.
@retry(
    retry=retry_if_exception_type(PermissionError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
    reraise=True,
)
def _read_text(path: Path, encoding: str) -> str:
    return path.read_text(encoding=encoding)


@retry(
    retry=retry_if_exception_type(PermissionError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
    reraise=True,
)
def _write_text(path: Path, text: str, encoding: str) -> None:
    with path.open("w", encoding=encoding, newline="") as handle:
        handle.write(text)


class FormatError(Exception):
    """Base exception for format adapter operations."""
    pass


class IOFailureError(FormatError):
    """File could not be read or written."""

    def __init__(self, path: str, operation: str, reason: str):
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(f"Could not {operation} {path}: {reason}")


class UnknownFormatError(FormatError):
    """File suffix is not one of the supported formats."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unknown file type for file: {path}")


class MalformedFileError(FormatError):
    """File was read but its structure cannot be parsed."""

    def __init__(self, file_format: TransactionFormat, reason: str):
        self.file_format = file_format
        self.reason = reason
        super().__init__(f"Malformed {file_format.label} file: {reason}")
