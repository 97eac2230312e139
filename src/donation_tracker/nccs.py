"""NCCS efile downloader and combined-data writer."""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from statistics import median
from typing import Callable, Optional

import requests

from .config import Settings
from .merger import NCCS_TABLES, OrganizationMerger
from .models import OrganizationRecord

logger = logging.getLogger(__name__)

SOURCE_NAME = "National Center for Charitable Statistics (NCCS)"
DATASET_URL = "https://nccs.urban.org/nccs/catalogs/catalog-efile-v2.html"

REVENUE_RANGES = (
    ("Under $100K", 100_000),
    ("$100K - $1M", 1_000_000),
    ("$1M - $10M", 10_000_000),
    ("$10M - $100M", 100_000_000),
    ("Over $100M", None),
)


@dataclass
class DownloadReport:
    downloaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class NCCSFetcher:
    """Download NCCS efile CSVs and combine them into organization records.

    Downloads run one at a time with a fixed pause between them. Files that
    already exist are not fetched again, so re-runs only pick up what failed.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.settings = settings or Settings()
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "donation-tracker/1.0"
        })
        self._sleep = sleep

        self.settings.data_dir.mkdir(parents=True, exist_ok=True)

    def download_tables(self) -> DownloadReport:
        """Download every configured table for every target year."""
        report = DownloadReport()
        logger.info("Starting NCCS data download...")
        logger.info(f"Target years: {', '.join(str(y) for y in self.settings.years)}")

        for year in self.settings.years:
            logger.info(f"--- Processing year {year} ---")
            for table in NCCS_TABLES:
                file_name = table.file_name(year)
                target = self.settings.data_dir / file_name

                if target.exists():
                    logger.debug(f"Skipping {file_name} (already exists)")
                    report.skipped.append(file_name)
                    continue

                url = f"{self.settings.base_url}/{file_name}"
                if self._download_file(url, target):
                    report.downloaded.append(file_name)
                    self._sleep(self.settings.download_delay)
                else:
                    logger.error(f"Failed to download {table.table_id} for {year}")
                    report.failed.append(file_name)

        logger.info("Download phase completed.")
        return report

    def _download_file(self, url: str, target_file: Path) -> bool:
        """Stream a file from URL to disk.

        Args:
            url: URL to download from
            target_file: Path to save the file

        Returns:
            True if download succeeded, False otherwise
        """
        logger.info(f"Downloading: {url}")

        try:
            resp = self.session.get(url, timeout=self.settings.timeout, stream=True)
            if resp.status_code != 200:
                logger.error(f"HTTP {resp.status_code} for {url}")
                return False

            with open(target_file, "wb") as f:
                for chunk in resp.iter_content(chunk_size=1024 * 1024):
                    if chunk:
                        f.write(chunk)

            logger.info(f"Downloaded: {target_file.name}")
            return True

        except (requests.RequestException, OSError) as e:
            logger.error(f"Error downloading {url}: {e}")
            if target_file.exists():
                target_file.unlink()
            return False

    def combine_data(self) -> list[OrganizationRecord]:
        """Merge all downloaded tables into ranked organization records."""
        logger.info("Combining data from all tables...")
        merger = OrganizationMerger(years=self.settings.years, max_records=self.settings.max_records)
        merger.merge_directory(self.settings.data_dir)
        organizations = merger.organizations()
        logger.info(f"Combined data for {len(organizations)} organizations")
        return organizations

    def save_data(self, organizations: list[OrganizationRecord]) -> Path:
        """Write the combined dataset and its summary statistics."""
        output_path = self.settings.combined_data_file
        metadata = {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "source": SOURCE_NAME,
            "datasetUrl": DATASET_URL,
            "years": list(self.settings.years),
            "recordCount": len(organizations),
            "tables": [t.table_id for t in NCCS_TABLES],
            "maxRecordsPerTable": self.settings.max_records,
        }
        payload = {
            "metadata": metadata,
            "organizations": [org.to_dict() for org in organizations],
        }

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.info(f"Saved combined data to: {output_path}")
        logger.info(f"Total organizations: {len(organizations)}")

        with open(self.settings.summary_file, "w", encoding="utf-8") as f:
            json.dump(summarize_organizations(organizations), f, indent=2)
        logger.info(f"Saved summary statistics to: {self.settings.summary_file}")

        return output_path

    def run(self, download: bool = True) -> list[OrganizationRecord]:
        """Download, combine and save."""
        if download:
            self.download_tables()
        organizations = self.combine_data()
        self.save_data(organizations)
        return organizations


def revenue_range(revenue: float) -> str:
    for label, ceiling in REVENUE_RANGES:
        if ceiling is None or revenue < ceiling:
            return label
    return REVENUE_RANGES[-1][0]


def summarize_organizations(organizations: list[OrganizationRecord]) -> dict:
    """Summary statistics over the combined organizations."""
    total_revenue = sum(org.total_revenue for org in organizations)
    total_assets = sum(org.total_assets for org in organizations)

    ranges = {label: 0 for label, _ in REVENUE_RANGES}
    states: dict[str, int] = {}
    for org in organizations:
        ranges[revenue_range(org.total_revenue)] += 1
        if org.state:
            states[org.state] = states.get(org.state, 0) + 1

    top_states = sorted(states.items(), key=lambda item: item[1], reverse=True)[:10]

    return {
        "totalOrganizations": len(organizations),
        "totalRevenue": total_revenue,
        "totalAssets": total_assets,
        "averageRevenue": total_revenue / len(organizations) if organizations else 0,
        "medianRevenue": median(org.total_revenue for org in organizations) if organizations else 0,
        "revenueRanges": ranges,
        "stateDistribution": dict(top_states),
        "topOrganizations": [
            {
                "name": org.name,
                "ein": org.ein,
                "revenue": org.total_revenue,
                "state": org.state,
            }
            for org in organizations[:20]
        ],
    }
