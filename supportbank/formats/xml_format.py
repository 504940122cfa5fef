"""
XML Format Adapter

Layout:
    <?xml version="1.0" encoding="utf-8"?>
    <TransactionList>
      <SupportTransaction Date="41222">
        <Description>Pokemon Training</Description>
        <Value>7.8</Value>
        <Parties>
          <From>Jon A</From>
          <To>Sarah T</To>
        </Parties>
      </SupportTransaction>
    </TransactionList>

An integer Date attribute counts days from 1900-01-01. Any other Date
is taken as a literal date and left for the repairer to judge.

Characters that XML 1.0 does not allow (most control characters) are
dropped from names and narratives on export.
"""

import re
import xml.etree.ElementTree as ET
from datetime import date, datetime, timedelta
from typing import Sequence

from supportbank.formats.interface import FormatAdapter, MalformedFileError
from supportbank.models.transaction import (
    ISO_8601,
    ISO_DATE_FORMAT,
    NO_DATE,
    RawRecord,
    Transaction,
    TransactionFormat,
)


DATE_EPOCH = date(1900, 1, 1)
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

_DAY_OFFSET = re.compile(r"-?\d+")

# Characters XML 1.0 cannot carry, even escaped.
_NOT_XML_CHAR = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def xml_text(value: str) -> str:
    """Drop characters that would make the document unreadable."""
    return _NOT_XML_CHAR.sub("", value)


def decode_day_offset(value: str) -> str:
    """Turn a numeric Date attribute into an ISO date; pass anything else through."""
    if not _DAY_OFFSET.fullmatch(value.strip()):
        return value
    try:
        return (DATE_EPOCH + timedelta(days=int(value))).isoformat()
    except OverflowError:
        return value


def encode_day_offset(value: str) -> str:
    """Inverse of decode_day_offset for canonical dates; the sentinel is kept as text."""
    if value == NO_DATE:
        return value
    day = datetime.strptime(value, ISO_DATE_FORMAT).date()
    return str((day - DATE_EPOCH).days)


class XmlFormatAdapter(FormatAdapter):
    """TransactionList documents of SupportTransaction elements."""

    format = TransactionFormat.XML
    date_formats = (ISO_8601, "%d/%m/%Y")

    def parse(self, text: str) -> list[RawRecord]:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MalformedFileError(self.format, str(e)) from e

        if root.tag != "TransactionList":
            raise MalformedFileError(
                self.format,
                f"root element must be TransactionList, got {root.tag}",
            )

        records = []
        for position, element in enumerate(root.findall("SupportTransaction"), start=1):
            records.append(RawRecord(
                source=self.format,
                line_number=position,
                date=decode_day_offset(element.get("Date", "")),
                from_name=element.findtext("Parties/From", default=""),
                to_name=element.findtext("Parties/To", default=""),
                narrative=element.findtext("Description", default=""),
                amount=element.findtext("Value", default=""),
            ))

        return records

    def write(self, transactions: Sequence[Transaction]) -> str:
        root = ET.Element("TransactionList")
        for transaction in transactions:
            element = ET.SubElement(
                root,
                "SupportTransaction",
                {"Date": encode_day_offset(transaction.date)},
            )
            ET.SubElement(element, "Description").text = xml_text(transaction.narrative)
            ET.SubElement(element, "Value").text = transaction.amount_text
            parties = ET.SubElement(element, "Parties")
            ET.SubElement(parties, "From").text = xml_text(transaction.from_account.name)
            ET.SubElement(parties, "To").text = xml_text(transaction.to_account.name)

        ET.indent(root, space=" " * self._export_settings.xml_indent)
        return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"
