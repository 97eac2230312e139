"""Quote-aware CSV reader for NCCS efile tables."""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Headers containing any of these are coerced to float
NUMERIC_MARKERS = ("REVENUE", "ASSETS", "EXPENSES", "INCOME", "GRANTS")
NUMERIC_EXACT = ("TAX_YEAR",)


@dataclass
class ParseResult:
    """Rows parsed from one CSV file plus the number of malformed lines dropped."""
    rows: list[dict] = field(default_factory=list)
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.rows)


def is_numeric_header(header: str) -> bool:
    return header in NUMERIC_EXACT or any(marker in header for marker in NUMERIC_MARKERS)


def parse_csv_line(line: str) -> list[str]:
    """Split a CSV line on commas, honoring double-quoted fields.

    A quote opens a field only at the start of the line or right after a
    comma, and closes it only right before a comma or at the end of the line.
    Any other quote character is kept as part of the value.

    Args:
        line: One line of CSV text, without the trailing newline

    Returns:
        List of trimmed field values
    """
    result = []
    current = []
    in_quotes = False
    last = len(line) - 1

    for i, char in enumerate(line):
        if char == '"' and (i == 0 or line[i - 1] == ","):
            in_quotes = True
        elif char == '"' and in_quotes and (i == last or line[i + 1] == ","):
            in_quotes = False
        elif char == "," and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    result.append("".join(current).strip())
    return result


def coerce_value(header: str, value: str) -> Union[float, str]:
    """Convert a raw field according to its column header."""
    if is_numeric_header(header):
        if not value:
            return 0.0
        try:
            number = float(value)
        except ValueError:
            return 0.0
        # float() accepts "nan" and "inf", which are not usable amounts
        return number if math.isfinite(number) else 0.0
    return value or ""


def parse_csv(text: str, max_records: Optional[int] = None) -> ParseResult:
    """Parse CSV text into dicts keyed by the header row.

    Args:
        text: Full CSV content
        max_records: Maximum number of data lines to examine. The header line
            never counts against the cap.

    Returns:
        ParseResult with the parsed rows and the count of malformed lines
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return ParseResult()

    headers = [h.replace('"', "").strip() for h in lines[0].split(",")]
    data_lines = lines[1:]
    if max_records is not None:
        data_lines = data_lines[:max(0, max_records)]

    result = ParseResult()
    for line in data_lines:
        values = parse_csv_line(line.rstrip("\r"))
        if len(values) != len(headers):
            result.skipped += 1
            continue
        result.rows.append({
            header: coerce_value(header, value)
            for header, value in zip(headers, values)
        })

    if result.skipped:
        logger.debug(f"Skipped {result.skipped} malformed line(s)")
    return result


def parse_csv_file(path: Path, max_records: Optional[int] = None) -> ParseResult:
    """Read and parse a UTF-8 CSV file."""
    text = path.read_text(encoding="utf-8")
    return parse_csv(text, max_records=max_records)
