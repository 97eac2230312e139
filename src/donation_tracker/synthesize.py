"""Derive campaigns, donations and impact locations from organization filings."""

import hashlib
import logging
import math
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from .geo import Geocoder, categorize
from .models import Campaign, Donation, ImpactLocation, ImpactMetrics, Location, OrganizationRecord

logger = logging.getLogger(__name__)

# =============================================================================
# CONFIGURATION
# =============================================================================

COUNTRY = "United States"
UNKNOWN_REGION = "Unknown"

CAMPAIGN_MIN_REVENUE = 50_000
DONATION_MIN_CONTRIBUTIONS = 1_000
DONATION_FLOOR = 100
MIN_DONATIONS_PER_ORG = 3
DONATION_COUNT_SPREAD = 12  # 3 + floor(r * 12) gives 3..14 inclusive, not 3..15
COMPLETION_RATIO = 0.9
RECURRING_PROBABILITY = 0.3
ANONYMOUS_PROBABILITY = 0.15

DONOR_NAMES = (
    "Anonymous Donor", "Community Foundation", "Local Business Alliance", "Individual Supporter",
    "Corporate Partnership", "Family Foundation", "Charitable Trust", "Grant Foundation",
    "Major Donor", "Monthly Supporter", "Event Fundraiser", "Online Campaign",
)

# (amount strictly above, [(cumulative probability, donor type), ...])
DONOR_TYPE_TIERS = (
    (100_000, ((0.4, "foundation"), (0.7, "corporate"), (0.9, "government"), (1.0, "individual"))),
    (10_000, ((0.3, "corporate"), (0.5, "foundation"), (1.0, "individual"))),
    (None, ((0.8, "individual"), (1.0, "corporate"))),
)

# (base, spread) per metric: peopleHelped, projectsCompleted, resourcesDistributed
IMPACT_RANGES = {
    "Education": ((50, 200), (2, 8), (100, 500)),
    "Healthcare": ((100, 400), (5, 15), (200, 800)),
    "Social Services": ((80, 320), (3, 12), (150, 600)),
}
DEFAULT_IMPACT_RANGE = ((30, 120), (1, 5), (50, 200))


def generate_id(key: str, year: Optional[int] = None) -> str:
    """Stable 12-character id from an md5 of key (and year)."""
    base = f"{key}-{year}" if year else key
    return hashlib.md5(base.encode("utf-8")).hexdigest()[:12]


def campaign_id(org: OrganizationRecord) -> str:
    return generate_id(org.ein, org.tax_year)


@dataclass
class DonationBatch:
    """Synthesized donations and how many candidates fell at or below the floor."""
    donations: list[Donation] = field(default_factory=list)
    dropped: int = 0


@dataclass
class LocationBatch:
    """Impact locations and how many donations had no campaign in their region."""
    locations: list[ImpactLocation] = field(default_factory=list)
    orphaned: int = 0


class Synthesizer:
    """Turn organization filings into tracker entities.

    All randomness comes from one random.Random, so the same seed and input
    produce the same output.
    """

    def __init__(self, rng: Optional[random.Random] = None, geocoder: Optional[Geocoder] = None):
        self.rng = rng or random.Random()
        self.geocoder = geocoder or Geocoder(self.rng)

    # -------------------------------------------------------------------------
    # Campaigns
    # -------------------------------------------------------------------------

    def impact_metrics(self, revenue: float, category: str) -> ImpactMetrics:
        """Revenue-scaled impact estimates, one multiplier range per category."""
        multiplier = max(1, math.floor(revenue / 100_000))
        ranges = IMPACT_RANGES.get(category, DEFAULT_IMPACT_RANGE)
        people, projects, resources = (
            math.floor(multiplier * (base + self.rng.random() * spread))
            for base, spread in ranges
        )
        return ImpactMetrics(
            people_helped=people,
            projects_completed=projects,
            resources_distributed=resources,
        )

    def campaign(self, org: OrganizationRecord) -> Campaign:
        coordinates = self.geocoder.coordinates(org.state, org.city)
        category = categorize(org.name, org.mission_description)
        metrics = self.impact_metrics(org.total_revenue, category)

        # Goal is revenue plus a 20-50% growth target
        goal = math.floor(org.total_revenue * (1.2 + self.rng.random() * 0.3))
        status = "completed" if org.total_revenue >= goal * COMPLETION_RATIO else "active"

        return Campaign(
            id=campaign_id(org),
            name=org.name,
            description=(
                org.mission_description
                or f"Supporting {category.lower()} initiatives in the community."
            ),
            goal=goal,
            raised=org.total_revenue,
            category=category,
            location=Location(
                country=COUNTRY,
                region=org.state or UNKNOWN_REGION,
                coordinates=coordinates,
            ),
            start_date=f"{org.tax_year}-01-01",
            end_date=f"{org.tax_year}-12-31",
            status=status,
            beneficiaries=metrics.people_helped,
            impact_metrics=metrics,
        )

    def campaigns(self, organizations: list[OrganizationRecord]) -> list[Campaign]:
        """One campaign per organization with revenue above $50,000."""
        logger.info("Transforming organizations to campaigns...")
        return [
            self.campaign(org)
            for org in organizations
            if org.total_revenue > CAMPAIGN_MIN_REVENUE
        ]

    # -------------------------------------------------------------------------
    # Donations
    # -------------------------------------------------------------------------

    def donor_type(self, amount: float) -> str:
        """Draw a donor type; larger gifts lean toward institutions."""
        for threshold, breakpoints in DONOR_TYPE_TIERS:
            if threshold is None or amount > threshold:
                roll = self.rng.random()
                for cutoff, donor_type in breakpoints:
                    if roll < cutoff:
                        return donor_type
                return breakpoints[-1][1]
        raise AssertionError("DONOR_TYPE_TIERS must end with a catch-all tier")

    def donation_date(self, year: int) -> str:
        """Uniform-random ISO date between Jan 1 and Dec 31 of year."""
        start = datetime(year, 1, 1)
        span = datetime(year, 12, 31) - start
        return (start + timedelta(seconds=span.total_seconds() * self.rng.random())).date().isoformat()

    def donations_for(self, org: OrganizationRecord) -> DonationBatch:
        """Split an organization's contributions into individual gifts.

        Amounts follow a squared-uniform skew so most gifts are small and a few
        are large. Gifts at or below $100 are discarded rather than
        redistributed, so the batch total only approximates the
        contributions figure and is never reconciled against it.
        """
        batch = DonationBatch()
        total = org.contributions_grants or 0
        if total <= DONATION_MIN_CONTRIBUTIONS:
            return batch

        count = MIN_DONATIONS_PER_ORG + math.floor(self.rng.random() * DONATION_COUNT_SPREAD)
        share = total / count
        cid = campaign_id(org)

        for i in range(count):
            ratio = self.rng.random() ** 2
            amount = math.floor(share * (0.1 + ratio * 3))
            if amount <= DONATION_FLOOR:
                batch.dropped += 1
                continue

            batch.donations.append(Donation(
                id=generate_id(f"{org.ein}-donation-{i}", org.tax_year),
                donor_name=self.rng.choice(DONOR_NAMES),
                amount=amount,
                date=self.donation_date(org.tax_year),
                campaign=cid,
                location=Location(
                    country=COUNTRY,
                    region=org.state or UNKNOWN_REGION,
                    coordinates=self.geocoder.coordinates(org.state, org.city),
                ),
                type=self.donor_type(amount),
                recurring=self.rng.random() < RECURRING_PROBABILITY,
                anonymous=self.rng.random() < ANONYMOUS_PROBABILITY,
            ))

        return batch

    def donations(self, organizations: list[OrganizationRecord]) -> DonationBatch:
        """Donations for every organization with more than $1,000 in contributions."""
        logger.info("Generating donation transactions from revenue data...")
        result = DonationBatch()

        for org in organizations:
            if not org.tax_year:
                logger.warning(f"Skipping donations for EIN {org.ein}: no tax year")
                continue
            batch = self.donations_for(org)
            result.donations.extend(batch.donations)
            result.dropped += batch.dropped

        result.donations.sort(key=lambda d: d.date)
        logger.info(f"Generated {len(result.donations)} donation transactions "
                    f"({result.dropped} below ${DONATION_FLOOR} dropped)")
        return result

    # -------------------------------------------------------------------------
    # Impact locations
    # -------------------------------------------------------------------------

    def impact_locations(self, campaigns: list[Campaign], donations: list[Donation]) -> LocationBatch:
        return aggregate_locations(campaigns, donations)


def impact_score(beneficiaries: int, total_donations: float) -> int:
    """Beneficiaries per dollar, scaled by 100,000 and capped at 100."""
    if beneficiaries <= 0 or total_donations <= 0:
        return 0
    return min(100, math.floor(beneficiaries / total_donations * 100_000))


def aggregate_locations(campaigns: list[Campaign], donations: list[Donation]) -> LocationBatch:
    """Roll campaigns and donations up by region.

    Only regions that have at least one campaign get a location. Donations
    in any other region are counted as orphaned and left out.
    """
    logger.info("Generating impact locations...")

    regions: dict[str, dict] = {}
    for campaign in campaigns:
        region = campaign.location.region
        entry = regions.setdefault(region, {
            "coordinates": list(campaign.location.coordinates),
            "campaigns": [],
            "total": 0,
        })
        entry["campaigns"].append(campaign)

    batch = LocationBatch()
    for donation in donations:
        entry = regions.get(donation.location.region)
        if entry is None:
            batch.orphaned += 1
            continue
        entry["total"] += donation.amount

    for region, entry in regions.items():
        beneficiaries = sum(c.beneficiaries for c in entry["campaigns"])
        batch.locations.append(ImpactLocation(
            id=generate_id(f"location-{region}"),
            name=region,
            coordinates=entry["coordinates"],
            total_donations=entry["total"],
            active_campaigns=sum(1 for c in entry["campaigns"] if c.status == "active"),
            beneficiaries=beneficiaries,
            impact_score=impact_score(beneficiaries, entry["total"]),
        ))

    batch.locations.sort(key=lambda loc: loc.total_donations, reverse=True)
    if batch.orphaned:
        logger.warning(f"{batch.orphaned} donation(s) in regions without campaigns were not aggregated")
    return batch
