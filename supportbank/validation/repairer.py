"""
Record Repair Pipeline

DESIGN DECISION: Malformed fields are repaired, not rejected.

DATE REPAIR:
- ISO-8601 (datetime.fromisoformat) where the source format accepts it,
  then strict strptime against its day/month/year patterns
- Anything that does not parse becomes NO_DATE

AMOUNT REPAIR:
- Must be a plain decimal number, finite and not negative
- Anything else becomes 0

WHY REPAIR INSTEAD OF REJECT:
1. One bad row should not throw away the rest of a statement
2. Both sides of a repaired transaction still show up in the history
3. A zero amount leaves every balance exactly as it would be without the row

IMPORTANT: Repairs are NEVER silent.
Every substitution produces a RepairIssue naming the value and line.
"""

import math
import re
from datetime import datetime
from typing import Iterable, Mapping, Optional, Sequence

from supportbank.formats import CsvFormatAdapter, JsonFormatAdapter, XmlFormatAdapter
from supportbank.models.transaction import (
    ISO_8601,
    NO_DATE,
    CanonicalRecord,
    RawRecord,
    RepairIssue,
    RepairResult,
    TransactionFormat,
)


DEFAULT_DATE_FORMATS: dict[TransactionFormat, tuple[str, ...]] = {
    TransactionFormat.CSV: CsvFormatAdapter.date_formats,
    TransactionFormat.JSON: JsonFormatAdapter.date_formats,
    TransactionFormat.XML: XmlFormatAdapter.date_formats,
}

REPAIRED_AMOUNT = 0.0
REPAIRED_AMOUNT_TEXT = "0"

_DECIMAL_NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def _line_suffix(line_number: Optional[int]) -> str:
    return f" (line {line_number})" if line_number is not None else ""


class RecordRepairer:
    """
    Turns raw records into canonical records.

    Date and amount are checked independently, so one record can
    carry both repairs.
    """

    def __init__(
        self,
        date_formats: Optional[Mapping[TransactionFormat, Sequence[str]]] = None,
    ):
        """
        Initialize repairer.

        Args:
            date_formats: strptime patterns accepted per source format;
                          ISO_8601 in the list accepts any ISO-8601 date.
                          Defaults to the patterns declared by each adapter.
        """
        self._date_formats = dict(date_formats or DEFAULT_DATE_FORMATS)

    def _parse_date(self, value: str, source: TransactionFormat) -> Optional[str]:
        text = value.strip()
        if not text:
            return None
        for pattern in self._date_formats.get(source, (ISO_8601,)):
            try:
                if pattern == ISO_8601:
                    # The calendar date as written; any offset is ignored.
                    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
                else:
                    parsed = datetime.strptime(text, pattern)
            except ValueError:
                continue
            return parsed.date().isoformat()
        return None

    def _repair_date(self, raw: RawRecord) -> tuple[str, Optional[RepairIssue]]:
        parsed = self._parse_date(raw.date, raw.source)
        if parsed is not None:
            return parsed, None

        return NO_DATE, RepairIssue(
            field="date",
            issue_type="malformed_date",
            value=raw.date,
            replacement=NO_DATE,
            line_number=raw.line_number,
            source=raw.source,
            message=(
                f"Invalid date: {raw.date}{_line_suffix(raw.line_number)}. "
                "Removing the date."
            ),
        )

    def _repair_amount(self, raw: RawRecord) -> tuple[float, str, Optional[RepairIssue]]:
        text = raw.amount.strip()

        amount = None
        if _DECIMAL_NUMBER.fullmatch(text):
            amount = float(text)

        if amount is not None and math.isfinite(amount) and amount >= 0:
            # "-0" parses to -0.0; store it as plain zero.
            return amount + 0.0, text, None

        return REPAIRED_AMOUNT, REPAIRED_AMOUNT_TEXT, RepairIssue(
            field="amount",
            issue_type="malformed_amount",
            value=raw.amount,
            replacement=REPAIRED_AMOUNT_TEXT,
            line_number=raw.line_number,
            source=raw.source,
            message=(
                f"Invalid amount: {raw.amount}{_line_suffix(raw.line_number)}. "
                "Setting to 0."
            ),
        )

    def repair(self, raw: RawRecord) -> RepairResult:
        """
        Repair one raw record.

        Never raises for a malformed date or amount.

        Returns:
            RepairResult with the canonical record and any repairs made
        """
        issues = []

        record_date, date_issue = self._repair_date(raw)
        if date_issue:
            issues.append(date_issue)

        amount, amount_text, amount_issue = self._repair_amount(raw)
        if amount_issue:
            issues.append(amount_issue)

        record = CanonicalRecord(
            date=record_date,
            from_account=raw.from_name,
            to_account=raw.to_name,
            amount=amount,
            amount_text=amount_text,
            narrative=raw.narrative,
        )

        return RepairResult(record=record, issues=issues)

    def repair_all(self, raws: Iterable[RawRecord]) -> list[RepairResult]:
        """Repair records in input order."""
        return [self.repair(raw) for raw in raws]

    def get_user_friendly_summary(
        self,
        results: Sequence[RepairResult],
    ) -> str:
        """
        Generate a short summary of what was repaired.

        This is what we show after an import.
        """
        repaired = [result for result in results if result.was_repaired]
        if not repaired:
            return f"All {len(results)} records imported without repairs."

        date_repairs = sum(
            1 for result in repaired for issue in result.issues if issue.field == "date"
        )
        amount_repairs = sum(
            1 for result in repaired for issue in result.issues if issue.field == "amount"
        )

        lines = [f"{len(repaired)} of {len(results)} records needed repairs:"]
        if date_repairs:
            lines.append(f"   • {date_repairs} dates removed")
        if amount_repairs:
            lines.append(f"   • {amount_repairs} amounts set to 0")

        return "\n".join(lines)
