"""Record validation and repair package."""

from supportbank.validation.repairer import (
    DEFAULT_DATE_FORMATS,
    RecordRepairer,
)

__all__ = ["DEFAULT_DATE_FORMATS", "RecordRepairer"]
