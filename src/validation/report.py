"""Validation reports: digest projection and text/CSV/JSON rendering."""
from __future__ import annotations

import csv
import io
import json
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Sequence

from .reconcile import Disallowed, Invalid, Missing, Outcome
from .schema import validate_digest

HEADERS = ["Package", "Dependency", "Explain", "Sites"]


class DigestRecord(NamedTuple):
    """Flat, serializable view of one validation record."""

    package: Optional[str]
    dependency: Optional[str]
    explain: str
    sites: Optional[List[str]]


def to_digest_record(record: Outcome) -> DigestRecord:
    if isinstance(record, Invalid):
        return DigestRecord(str(record.package), str(record.specifier), record.explain, list(record.sites))
    if isinstance(record, Missing):
        return DigestRecord(None, str(record.specifier), record.explain, None)
    if isinstance(record, Disallowed):
        return DigestRecord(str(record.package), None, record.explain, list(record.sites))
    raise TypeError(f"Unsupported validation record: {record!r}")


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render rows as left-aligned, space-padded columns."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    lines = []
    for row in [list(headers)] + [list(r) for r in rows]:
        lines.append(" ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    return "\n".join(lines) + "\n"


class ValidationReport:
    """Ordered validation records produced by one reconciliation."""

    def __init__(self, records: Sequence[Outcome]):
        self.records = list(records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Outcome]:
        return iter(self.records)

    def get_package_strings(self) -> List[str]:
        return [
            str(r.package) for r in self.records
            if isinstance(r, (Invalid, Disallowed))
        ]

    def to_digest(self) -> List[DigestRecord]:
        return [to_digest_record(r) for r in self.records]

    def to_json_data(self) -> List[Dict[str, Any]]:
        data = [d._asdict() for d in self.to_digest()]
        validate_digest(data)
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_json_data(), ensure_ascii=False, indent=indent)

    def to_rows(self) -> List[List[str]]:
        rows = []
        for d in self.to_digest():
            rows.append([
                d.package or "",
                d.dependency or "",
                d.explain,
                ",".join(d.sites) if d.sites else "",
            ])
        return rows

    def to_csv(self, delimiter: str = ",") -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, delimiter=delimiter, lineterminator="\n")
        writer.writerow(HEADERS)
        writer.writerows(self.to_rows())
        return buf.getvalue()

    def to_table(self) -> str:
        return format_table(HEADERS, self.to_rows())
