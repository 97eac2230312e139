"""Merge per-table NCCS rows into one record per (EIN, tax year)."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .csv_parser import parse_csv_file
from .models import OrganizationRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NCCSTable:
    """One efile table published per tax year."""
    table_id: str
    name: str
    description: str
    fields: tuple

    def file_name(self, year: int) -> str:
        return f"{self.table_id}-{year}.csv"


# Processing order matters: a later table only overwrites a field when its
# value is truthy, so this order decides which source wins.
NCCS_TABLES = (
    NCCSTable(
        "F9-P00-T00-HEADER", "HEADER", "Organization header information",
        ("EIN", "ORGANIZATION_NAME", "TAX_YEAR", "ADDRESS_LINE_1", "CITY", "STATE", "ZIP_CODE"),
    ),
    NCCSTable(
        "F9-P01-T00-SUMMARY", "SUMMARY", "Financial summary data",
        ("EIN", "TAX_YEAR", "TOTAL_REVENUE", "TOTAL_EXPENSES", "TOTAL_ASSETS", "NET_ASSETS"),
    ),
    NCCSTable(
        "F9-P08-T00-REVENUE", "REVENUE", "Revenue breakdown",
        ("EIN", "TAX_YEAR", "CONTRIBUTIONS_GRANTS", "PROGRAM_SERVICE_REVENUE",
         "INVESTMENT_INCOME", "OTHER_REVENUE"),
    ),
    NCCSTable(
        "F9-P03-T00-MISSION", "MISSION", "Mission and program descriptions",
        ("EIN", "TAX_YEAR", "MISSION_DESCRIPTION", "PROGRAM_SERVICE_DESCRIPTION"),
    ),
)

TABLES_BY_ID = {table.table_id: table for table in NCCS_TABLES}

# (record attribute, CSV column) pairs filled only when the incoming value is truthy
_FILL_IF_PRESENT = {
    "HEADER": (("name", "ORGANIZATION_NAME"),),
    "SUMMARY": (
        ("total_revenue", "TOTAL_REVENUE"),
        ("total_expenses", "TOTAL_EXPENSES"),
        ("total_assets", "TOTAL_ASSETS"),
    ),
    "REVENUE": (
        ("program_service_revenue", "PROGRAM_SERVICE_REVENUE"),
        ("contributions_grants", "CONTRIBUTIONS_GRANTS"),
        ("investment_income", "INVESTMENT_INCOME"),
    ),
    "MISSION": (("mission_description", "MISSION_DESCRIPTION"),),
}

# Address columns from the header table are always copied, even when blank
_ALWAYS_ASSIGN = {
    "HEADER": (
        ("address_line_1", "ADDRESS_LINE_1"),
        ("city", "CITY"),
        ("state", "STATE"),
        ("zip_code", "ZIP_CODE"),
    ),
}


class OrganizationMerger:
    """Accumulate organization records across tables and years.

    Tables must be fed in NCCS_TABLES order within each year; merge_directory()
    does this for files on disk.
    """

    def __init__(self, years: Optional[list[int]] = None, max_records: Optional[int] = None):
        self.years = list(years or [])
        self.max_records = max_records
        self._records: dict[str, OrganizationRecord] = {}
        self.rows_without_ein = 0
        self.malformed_rows = 0

    def __len__(self) -> int:
        return len(self._records)

    def add_table(self, table_id: str, year: int, rows: list[dict]) -> int:
        """Merge the parsed rows of one table for one year.

        Args:
            table_id: NCCS table identifier, e.g. "F9-P00-T00-HEADER"
            year: Tax year the file was published for
            rows: Rows from parse_csv()

        Returns:
            Number of rows merged

        Raises:
            KeyError: If table_id is not a known NCCS table
        """
        table = TABLES_BY_ID[table_id]
        merged = 0

        for row in rows:
            ein = row.get("EIN")
            if not ein:
                self.rows_without_ein += 1
                continue

            key = f"{ein}-{year}"
            record = self._records.get(key)
            if record is None:
                record = OrganizationRecord(ein=str(ein), tax_year=year)
                self._records[key] = record

            for attr, column in _FILL_IF_PRESENT.get(table.name, ()):
                value = row.get(column)
                if value:
                    setattr(record, attr, value)

            for attr, column in _ALWAYS_ASSIGN.get(table.name, ()):
                setattr(record, attr, row.get(column))

            merged += 1

        return merged

    def merge_directory(self, data_dir: Path) -> None:
        """Merge every {TABLE_ID}-{YEAR}.csv found in data_dir.

        Years are walked in the configured order and tables in NCCS_TABLES
        order. Missing files are logged and skipped.
        """
        for year in self.years:
            logger.info(f"Processing year {year}...")
            for table in NCCS_TABLES:
                path = data_dir / table.file_name(year)
                if not path.exists():
                    logger.warning(f"Skipping {path.name} (not found)")
                    continue

                try:
                    result = parse_csv_file(path, max_records=self.max_records)
                except (OSError, UnicodeDecodeError) as e:
                    logger.error(f"Error processing {path.name}: {e}")
                    continue

                self.malformed_rows += result.skipped
                logger.info(f"Parsed {len(result.rows)} records from {path.name}")
                self.add_table(table.table_id, year, result.rows)

    def organizations(self) -> list[OrganizationRecord]:
        """Named organizations with positive revenue, highest revenue first."""
        kept = [
            org for org in self._records.values()
            if org.name and org.total_revenue > 0
        ]
        kept.sort(key=lambda org: org.total_revenue, reverse=True)
        return kept
