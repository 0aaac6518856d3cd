"""Reads the company/feed-source table."""
from __future__ import annotations

import codecs
import csv
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, List

from activitymonitor.errors import MalformedInputError
from activitymonitor.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class CompanySource:
    company: str
    feed_source: str
    line_number: int

    @property
    def company_key(self) -> str:
        return self.company.lower()


class _TrackedLines:
    """Decodes the table one physical line at a time for the csv reader.

    Keeps the lines of the record being parsed so errors can quote it whole.
    """

    def __init__(self, path: Path, handle: BinaryIO) -> None:
        self._path = path
        self._handle = handle
        self._record: List[str] = []
        self.line_number = 0

    def __iter__(self) -> "_TrackedLines":
        return self

    def __next__(self) -> str:
        raw = next(self._handle)
        self.line_number += 1
        if self.line_number == 1 and raw.startswith(codecs.BOM_UTF8):
            raw = raw[len(codecs.BOM_UTF8):]
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            self._record.append(raw.decode("utf-8", errors="replace"))
            raise MalformedInputError(self._path, self.line_number, self.take_record(), "not valid UTF-8") from exc
        self._record.append(line)
        return line

    def take_record(self) -> str:
        text = "".join(self._record).rstrip("\r\n")
        self._record = []
        return text


def read_company_sources(path: Path | str) -> Iterator[CompanySource]:
    """Yield one CompanySource per table row, in file order.

    The table has no header. Column one is the company name, column two the
    feed locator; further columns are ignored. Blank lines are skipped. Any
    row that cannot be parsed or decoded as UTF-8 raises MalformedInputError
    when it is reached, never earlier.
    """
    path = Path(path)
    count = 0
    with path.open("rb") as handle:
        lines = _TrackedLines(path, handle)
        reader = csv.reader(lines, strict=True, skipinitialspace=True)
        while True:
            try:
                fields = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                raise MalformedInputError(path, lines.line_number, lines.take_record(), str(exc)) from exc

            record = lines.take_record()
            if not any(field.strip() for field in fields):
                continue
            company = fields[0].strip()
            feed_source = fields[1].strip() if len(fields) > 1 else ""
            if not company or not feed_source:
                raise MalformedInputError(
                    path,
                    lines.line_number,
                    record,
                    "expected a company name and a feed source",
                )
            count += 1
            yield CompanySource(company=company, feed_source=feed_source, line_number=lines.line_number)
    LOGGER.info("Read %d company/feed rows from %s", count, path)


__all__ = ["CompanySource", "read_company_sources"]
