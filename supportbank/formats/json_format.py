"""
JSON Format Adapter

Layout:
    [
      {
        "Date": "2013-01-05T00:00:00",
        "FromAccount": "Jon A",
        "ToAccount": "Sarah T",
        "Narrative": "Pokemon Training",
        "Amount": 7.8
      }
    ]

The file names the parties FromAccount/ToAccount where the other
formats say From/To. The keys are renamed while decoding so nothing
past this module ever sees the JSON spelling.
"""

import json
from typing import Sequence

from supportbank.formats.interface import FormatAdapter, MalformedFileError
from supportbank.models.transaction import (
    ISO_8601,
    NO_DATE,
    RawRecord,
    Transaction,
    TransactionFormat,
)


MIDNIGHT_SUFFIX = "T00:00:00"

_KEYS_ON_READ = {"FromAccount": "From", "ToAccount": "To"}
_KEYS_ON_WRITE = {"From": "FromAccount", "To": "ToAccount"}


def _rename_keys(pairs: list[tuple[str, object]]) -> dict:
    return {_KEYS_ON_READ.get(key, key): value for key, value in pairs}


class JsonFormatAdapter(FormatAdapter):
    """JSON arrays of transaction objects."""

    format = TransactionFormat.JSON
    date_formats = (ISO_8601, "%d/%m/%Y")

    def parse(self, text: str) -> list[RawRecord]:
        try:
            # Numbers stay as their literal text; the repairer parses amounts.
            data = json.loads(
                text,
                object_pairs_hook=_rename_keys,
                parse_float=str,
                parse_int=str,
            )
        except json.JSONDecodeError as e:
            raise MalformedFileError(self.format, str(e)) from e

        if not isinstance(data, list):
            raise MalformedFileError(self.format, "top level must be an array of transactions")

        records = []
        for position, item in enumerate(data, start=1):
            if not isinstance(item, dict):
                raise MalformedFileError(
                    self.format,
                    f"entry {position} is not an object",
                )
            records.append(RawRecord(
                source=self.format,
                line_number=position,
                date=self._strip_midnight(item.get("Date")),
                from_name=item.get("From"),
                to_name=item.get("To"),
                narrative=item.get("Narrative"),
                amount=item.get("Amount"),
            ))

        return records

    @staticmethod
    def _strip_midnight(value: object) -> object:
        if isinstance(value, str) and value.endswith(MIDNIGHT_SUFFIX):
            return value[: -len(MIDNIGHT_SUFFIX)]
        return value

    def write(self, transactions: Sequence[Transaction]) -> str:
        payload = []
        for transaction in transactions:
            entry = {
                "Date": (
                    transaction.date + MIDNIGHT_SUFFIX
                    if transaction.date != NO_DATE
                    else transaction.date
                ),
                "From": transaction.from_account.name,
                "To": transaction.to_account.name,
                "Narrative": transaction.narrative,
                "Amount": transaction.amount,
            }
            payload.append({_KEYS_ON_WRITE.get(key, key): value for key, value in entry.items()})

        indent = self._export_settings.json_indent or None
        return json.dumps(payload, indent=indent, ensure_ascii=False) + "\n"
