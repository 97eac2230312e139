"""Data models for donation_tracker package."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class OrganizationRecord:
    """One nonprofit filing, merged from the NCCS tables for a single tax year."""
    ein: str
    name: str = ""
    tax_year: int = 0
    total_revenue: float = 0
    total_expenses: float = 0
    total_assets: float = 0
    address_line_1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    mission_description: Optional[str] = None
    program_service_revenue: Optional[float] = None
    contributions_grants: Optional[float] = None
    investment_income: Optional[float] = None

    # Exported key for each attribute, in NCCS column naming
    FIELD_NAMES = {
        "ein": "EIN",
        "name": "ORGANIZATION_NAME",
        "tax_year": "TAX_YEAR",
        "total_revenue": "TOTAL_REVENUE",
        "total_expenses": "TOTAL_EXPENSES",
        "total_assets": "TOTAL_ASSETS",
        "address_line_1": "ADDRESS_LINE_1",
        "city": "CITY",
        "state": "STATE",
        "zip_code": "ZIP_CODE",
        "mission_description": "MISSION_DESCRIPTION",
        "program_service_revenue": "PROGRAM_SERVICE_REVENUE",
        "contributions_grants": "CONTRIBUTIONS_GRANTS",
        "investment_income": "INVESTMENT_INCOME",
    }

    def to_dict(self) -> dict:
        """Convert to dictionary keyed by NCCS column names, dropping unset optionals."""
        data = {}
        for attr, key in self.FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is None:
                continue
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "OrganizationRecord":
        """Build a record from a combined-data JSON entry."""
        kwargs = {}
        for attr, key in cls.FIELD_NAMES.items():
            if key in data and data[key] is not None:
                kwargs[attr] = data[key]
        kwargs.setdefault("ein", "")
        kwargs["ein"] = str(kwargs["ein"])
        kwargs["tax_year"] = int(kwargs.get("tax_year") or 0)
        return cls(**kwargs)


@dataclass
class Location:
    """Where a campaign or donation is placed on the map."""
    country: str
    region: str
    coordinates: list[float]  # [longitude, latitude]

    def to_dict(self) -> dict:
        return {
            "country": self.country,
            "region": self.region,
            "coordinates": list(self.coordinates),
        }


@dataclass
class ImpactMetrics:
    people_helped: int = 0
    projects_completed: int = 0
    resources_distributed: int = 0

    def to_dict(self) -> dict:
        return {
            "peopleHelped": self.people_helped,
            "projectsCompleted": self.projects_completed,
            "resourcesDistributed": self.resources_distributed,
        }


@dataclass
class Campaign:
    """A fundraising campaign synthesized from one organization filing."""
    id: str
    name: str
    description: str
    goal: int
    raised: float
    category: str
    location: Location
    start_date: str
    end_date: str
    status: str
    beneficiaries: int
    impact_metrics: ImpactMetrics = field(default_factory=ImpactMetrics)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "goal": self.goal,
            "raised": self.raised,
            "category": self.category,
            "location": self.location.to_dict(),
            "startDate": self.start_date,
            "endDate": self.end_date,
            "status": self.status,
            "beneficiaries": self.beneficiaries,
            "impactMetrics": self.impact_metrics.to_dict(),
        }


@dataclass
class Donation:
    """A single synthesized donation transaction."""
    id: str
    donor_name: str
    amount: int
    date: str
    campaign: str
    location: Location
    type: str
    recurring: bool = False
    anonymous: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "donorName": self.donor_name,
            "amount": self.amount,
            "date": self.date,
            "campaign": self.campaign,
            "location": self.location.to_dict(),
            "type": self.type,
            "recurring": self.recurring,
            "anonymous": self.anonymous,
        }


@dataclass
class ImpactLocation:
    """Per-region aggregate of campaigns and donations."""
    id: str
    name: str
    coordinates: list[float]
    total_donations: int = 0
    active_campaigns: int = 0
    beneficiaries: int = 0
    impact_score: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "coordinates": list(self.coordinates),
            "totalDonations": self.total_donations,
            "activeCampaigns": self.active_campaigns,
            "beneficiaries": self.beneficiaries,
            "impactScore": self.impact_score,
        }
