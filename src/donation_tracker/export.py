"""Read combined NCCS data and write the tracker's JSON artifacts."""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .models import Campaign, Donation, ImpactLocation, OrganizationRecord

logger = logging.getLogger(__name__)

DONATIONS_FILE = "donations.json"
CAMPAIGNS_FILE = "campaigns.json"
IMPACT_LOCATIONS_FILE = "impact-locations.json"
STATS_FILE = "transformation-stats.json"
BUNDLE_FILE = "donation-tracker-data.json"


@dataclass
class TransformedData:
    """Everything one transformation run produces."""
    donations: list[Donation] = field(default_factory=list)
    campaigns: list[Campaign] = field(default_factory=list)
    impact_locations: list[ImpactLocation] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)
    discards: dict = field(default_factory=dict)

    @property
    def total_donations(self) -> int:
        return sum(d.amount for d in self.donations)

    def to_dict(self) -> dict:
        return {
            "donations": [d.to_dict() for d in self.donations],
            "campaigns": [c.to_dict() for c in self.campaigns],
            "impactLocations": [loc.to_dict() for loc in self.impact_locations],
            "metadata": self.metadata,
        }


def load_combined_data(path: Path) -> tuple[list[OrganizationRecord], dict]:
    """Load nccs-combined-data.json.

    Args:
        path: Path to the combined data file written by the fetcher

    Returns:
        (organizations, metadata)

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If the payload has no organizations list
    """
    if not path.exists():
        raise FileNotFoundError(f"NCCS data file not found: {path}")

    logger.info(f"Loading NCCS data from: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))

    organizations = data.get("organizations") if isinstance(data, dict) else None
    if not isinstance(organizations, list):
        raise ValueError(f"{path} must contain an 'organizations' list")

    records = [OrganizationRecord.from_dict(org) for org in organizations]
    logger.info(f"Loaded {len(records)} organizations")
    return records, data.get("metadata") or {}


def top_categories(campaigns: list[Campaign], limit: int = 10) -> dict:
    counts = Counter(c.category for c in campaigns)
    return dict(counts.most_common(limit))


def top_states(locations: list[ImpactLocation], limit: int = 10) -> dict:
    ranked = sorted(locations, key=lambda loc: loc.total_donations, reverse=True)
    return {loc.name: loc.total_donations for loc in ranked[:limit]}


def donor_type_distribution(donations: list[Donation]) -> dict:
    return dict(Counter(d.type for d in donations))


def build_stats(data: TransformedData) -> dict:
    """Run metadata plus summary statistics over the generated collections."""
    donations = data.donations
    campaigns = data.campaigns

    completed = sum(1 for c in campaigns if c.status == "completed")
    stats = dict(data.metadata)
    stats["statistics"] = {
        "averageDonation": data.total_donations / len(donations) if donations else 0,
        "averageCampaignGoal": sum(c.goal for c in campaigns) / len(campaigns) if campaigns else 0,
        "completionRate": completed / len(campaigns) if campaigns else 0,
        "topCategories": top_categories(campaigns),
        "topStates": top_states(data.impact_locations),
        "donorTypeDistribution": donor_type_distribution(donations),
    }
    stats["discards"] = dict(data.discards)
    return stats


def write_json(payload, output_path: Path):
    """Write payload as pretty-printed UTF-8 JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def save_transformed_data(data: TransformedData, output_dir: Path) -> list[Path]:
    """Write the bundle, the per-collection files and the stats file.

    Returns:
        Paths written, bundle first
    """
    logger.info("Saving transformed data...")
    outputs = [
        (BUNDLE_FILE, data.to_dict()),
        (DONATIONS_FILE, [d.to_dict() for d in data.donations]),
        (CAMPAIGNS_FILE, [c.to_dict() for c in data.campaigns]),
        (IMPACT_LOCATIONS_FILE, [loc.to_dict() for loc in data.impact_locations]),
        (STATS_FILE, build_stats(data)),
    ]

    written = []
    for file_name, payload in outputs:
        path = output_dir / file_name
        write_json(payload, path)
        logger.info(f"Saved {file_name}")
        written.append(path)

    logger.info(f"All files saved to: {output_dir}")
    return written
