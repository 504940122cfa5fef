"""
Format Adapters Package

Provides the abstract adapter interface and the CSV, JSON and XML
implementations. New formats plug in through the registry.
"""

from supportbank.formats.interface import (
    FormatAdapter,
    FormatError,
    IOFailureError,
    MalformedFileError,
    UnknownFormatError,
)
from supportbank.formats.csv_format import CSV_COLUMNS, CsvFormatAdapter
from supportbank.formats.json_format import JsonFormatAdapter
from supportbank.formats.xml_format import XmlFormatAdapter
from supportbank.formats.registry import AdapterRegistry

__all__ = [
    # Interface
    "FormatAdapter",
    # Exceptions
    "FormatError",
    "IOFailureError",
    "MalformedFileError",
    "UnknownFormatError",
    # Implementations
    "CSV_COLUMNS",
    "CsvFormatAdapter",
    "JsonFormatAdapter",
    "XmlFormatAdapter",
    "AdapterRegistry",
]
