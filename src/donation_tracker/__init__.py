"""
donation_tracker - Donation Impact Tracker data built from IRS 990 filings.

This package downloads NCCS efile tables, merges them into organization
records, synthesizes campaigns, donations and impact locations from the
filings, and serves the results over a small HTTP API.
"""

from .models import (
    Campaign,
    Donation,
    ImpactLocation,
    ImpactMetrics,
    Location,
    OrganizationRecord,
)
from .config import Settings
from .csv_parser import ParseResult, parse_csv, parse_csv_line
from .merger import NCCS_TABLES, OrganizationMerger
from .geo import Geocoder, categorize
from .synthesize import Synthesizer, generate_id
from .export import TransformedData, load_combined_data, save_transformed_data
from .nccs import NCCSFetcher
from .transformer import NCCSTransformer

__version__ = "0.1.0"
__all__ = [
    "Campaign",
    "Donation",
    "ImpactLocation",
    "ImpactMetrics",
    "Location",
    "OrganizationRecord",
    "Settings",
    "ParseResult",
    "parse_csv",
    "parse_csv_line",
    "NCCS_TABLES",
    "OrganizationMerger",
    "Geocoder",
    "categorize",
    "Synthesizer",
    "generate_id",
    "TransformedData",
    "load_combined_data",
    "save_transformed_data",
    "NCCSFetcher",
    "NCCSTransformer",
]
