"""
Format Adapter Registry

Chooses an adapter from a file name. The suffix match is exact and
case-sensitive: "ledger.CSV" is not a CSV file.
"""

from pathlib import Path
from typing import Iterable, Optional, Union

from supportbank.formats.csv_format import CsvFormatAdapter
from supportbank.formats.interface import FormatAdapter, UnknownFormatError
from supportbank.formats.json_format import JsonFormatAdapter
from supportbank.formats.xml_format import XmlFormatAdapter
from supportbank.models.transaction import TransactionFormat


class AdapterRegistry:
    """Maps transaction formats (and file suffixes) to adapters."""

    def __init__(self, adapters: Optional[Iterable[FormatAdapter]] = None):
        if adapters is None:
            adapters = (CsvFormatAdapter(), JsonFormatAdapter(), XmlFormatAdapter())
        self._adapters = {adapter.format: adapter for adapter in adapters}

    @property
    def formats(self) -> list[TransactionFormat]:
        return list(self._adapters)

    def for_path(self, path: Union[str, Path]) -> FormatAdapter:
        """
        Pick the adapter for a file name.

        Raises:
            UnknownFormatError: If the suffix is not a registered format
        """
        name = str(path)
        for file_format, adapter in self._adapters.items():
            if name.endswith(file_format.suffix):
                return adapter
        raise UnknownFormatError(name)

    def date_formats(self) -> dict[TransactionFormat, tuple[str, ...]]:
        """Accepted date patterns per source format, for the repairer."""
        return {
            file_format: adapter.date_formats
            for file_format, adapter in self._adapters.items()
        }
