"""
CSV Format Adapter

Layout:
    Date,From,To,Narrative,Amount
    2014-01-01,Jon A,Sarah T,Pokemon Training,7.8

The header must name exactly these five columns; their order in the
header decides which position each value is read from.

KNOWN LIMITATION: lines are split on every comma. There is no quoting
or escaping, so a narrative containing a comma shifts the columns that
follow it. The amount then usually fails to parse and gets repaired
to zero. Supporting quotes would change which files are accepted, so
it is deliberately not done here.
"""

from typing import Sequence

from supportbank.formats.interface import FormatAdapter, MalformedFileError
from supportbank.models.transaction import ISO_8601, RawRecord, Transaction, TransactionFormat


CSV_COLUMNS = ("Date", "From", "To", "Narrative", "Amount")

_FIELD_BY_COLUMN = {
    "Date": "date",
    "From": "from_name",
    "To": "to_name",
    "Narrative": "narrative",
    "Amount": "amount",
}


class CsvFormatAdapter(FormatAdapter):
    """Comma-separated transaction files with a single header row."""

    format = TransactionFormat.CSV
    date_formats = (ISO_8601, "%d/%m/%Y", "%d-%m-%Y")

    def _read_header(self, line: str) -> list[str]:
        header = [name.strip() for name in line.lstrip("\ufeff").split(",")]
        if sorted(header) != sorted(CSV_COLUMNS):
            raise MalformedFileError(
                self.format,
                f"header must name exactly {', '.join(CSV_COLUMNS)}; got {line!r}",
            )
        return header

    def parse(self, text: str) -> list[RawRecord]:
        lines = text.splitlines()
        if not lines or not lines[0].strip():
            raise MalformedFileError(self.format, "missing header row")

        header = self._read_header(lines[0])

        records = []
        # Line numbers are 1-based and count the header.
        for line_number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue
            values = line.split(",")
            fields = {
                _FIELD_BY_COLUMN[column]: values[position] if position < len(values) else ""
                for position, column in enumerate(header)
            }
            records.append(RawRecord(
                source=self.format,
                line_number=line_number,
                **fields,
            ))

        return records

    def write(self, transactions: Sequence[Transaction]) -> str:
        lines = [",".join(CSV_COLUMNS)]
        for transaction in transactions:
            lines.append(",".join([
                transaction.date,
                transaction.from_account.name,
                transaction.to_account.name,
                transaction.narrative,
                transaction.amount_text,
            ]))
        return "\n".join(lines) + "\n"
