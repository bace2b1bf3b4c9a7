"""
Fixed-column field extraction for SINEX record lines.

A ColumnDecoder wraps one line and slices named fields out of it by
character offset. Conversion failures are raised as FormatError carrying
the line number, field name and raw text.
"""

from __future__ import annotations

import re
from datetime import datetime

from gnss_sitemeta.core.exceptions import FormatError
from gnss_sitemeta.utils.dates import datetime_from_year_doy_sod, expand_two_digit_year


# Literal epoch meaning "open-ended"
OPEN_EPOCH = "00:000:00000"

EPOCH_PATTERN = re.compile(r'^(\d{2}):(\d{3}):(\d{5})$')


def clean_field(value: str) -> str:
    """Strip blanks and the '-' placeholder characters."""
    return value.strip().strip("-")


def parse_time(value: str) -> datetime | None:
    """Parse a SINEX epoch YY:DDD:SSSSS.

    YY above 50 is 19YY, otherwise 20YY. The all-zero epoch is open-ended
    and returns None.

    Args:
        value: Epoch string, e.g. "20:225:43202"

    Returns:
        UTC datetime or None

    Raises:
        ValueError: If the string is not a valid epoch
    """
    value = value.strip()
    if value == OPEN_EPOCH:
        return None

    match = EPOCH_PATTERN.match(value)
    if not match:
        raise ValueError(f"invalid epoch {value!r}, expected YY:DDD:SSSSS")

    yy, doy, sod = (int(g) for g in match.groups())
    return datetime_from_year_doy_sod(expand_two_digit_year(yy), doy, sod)


class ColumnDecoder:
    """Slice typed fields out of one fixed-format line.

    Usage:
        cols = ColumnDecoder(line, line_number=12)
        code = cols.clean("CODE", 1, 5)
        start = cols.epoch("DATA_START", 16, 28)
    """

    def __init__(self, line: str, line_number: int | None = None):
        self.line = line
        self.line_number = line_number

    def __len__(self) -> int:
        return len(self.line)

    def raw(self, start: int, end: int | None = None) -> str:
        """Unmodified slice, empty where the line is too short."""
        return self.line[start:end]

    def text(self, name: str, start: int, end: int | None = None) -> str:
        """Slice with surrounding blanks removed."""
        return self.raw(start, end).strip()

    def clean(self, name: str, start: int, end: int | None = None) -> str:
        """Slice with blanks and '-' placeholders removed."""
        return clean_field(self.raw(start, end))

    def integer(self, name: str, start: int, end: int | None = None) -> int:
        raw = self.raw(start, end)
        try:
            return int(raw.strip())
        except ValueError as e:
            raise self.error(name, raw, e) from e

    def number(self, name: str, start: int, end: int | None = None) -> float:
        raw = self.raw(start, end)
        try:
            return float(raw.strip())
        except ValueError as e:
            raise self.error(name, raw, e) from e

    def epoch(self, name: str, start: int, end: int | None = None) -> datetime | None:
        """Parse a YY:DDD:SSSSS epoch; the all-zero epoch yields None."""
        raw = self.raw(start, end)
        try:
            return parse_time(raw)
        except ValueError as e:
            raise self.error(name, raw, e) from e

    def choice(self, name: str, start: int, end: int | None, choices: dict):
        """Look up a coded field in a mapping."""
        raw = self.raw(start, end)
        try:
            return choices[raw]
        except KeyError:
            raise self.error(name, raw, "unknown code") from None

    def error(self, name: str, raw: str, cause: str | Exception) -> FormatError:
        return FormatError(name, raw, cause, line=self.line_number)
