"""In-memory stores backing the HTTP handlers.

Each store is created by Repositories.load() and handed to the Flask app, so
its lifetime is the app's lifetime. Stores start from the exported JSON
files when they exist and from the demo records in mock_data otherwise.
"""

import copy
import json
import logging
import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from . import mock_data
from .export import CAMPAIGNS_FILE, DONATIONS_FILE, IMPACT_LOCATIONS_FILE

logger = logging.getLogger(__name__)


class DuplicateDonorError(ValueError):
    """Raised when a donor profile is created with an email already on file."""


def _new_id(prefix: str, existing: set) -> str:
    millis = int(time.time() * 1000)
    candidate = f"{prefix}-{millis}"
    while candidate in existing:
        millis += 1
        candidate = f"{prefix}-{millis}"
    return candidate


def _parse_date(value: str) -> date:
    return date.fromisoformat(value[:10])


def _record_date(record: dict) -> Optional[date]:
    try:
        return _parse_date(str(record.get("date", "")))
    except ValueError:
        return None


def record_region(record: dict) -> Optional[str]:
    """Region of a mock record (top level) or an exported one (under location)."""
    if record.get("region"):
        return record["region"]
    location = record.get("location")
    if isinstance(location, dict):
        return location.get("region")
    return None


class DonationRepository:
    def __init__(self, donations: Optional[list] = None):
        self._donations = list(donations or [])

    def __len__(self) -> int:
        return len(self._donations)

    def all(self) -> list[dict]:
        return list(self._donations)

    def filter(self, donor: Optional[str] = None, campaign: Optional[str] = None,
               region: Optional[str] = None, start_date: Optional[str] = None,
               end_date: Optional[str] = None) -> list[dict]:
        """Donations matching every given filter.

        Args:
            donor: Exact donorId, or a case-insensitive substring of donorName
            campaign: Case-insensitive substring of the campaign field
            region: Exact region name
            start_date: Inclusive ISO date lower bound
            end_date: Inclusive ISO date upper bound

        Raises:
            ValueError: If a date bound is not an ISO date
        """
        results = self._donations

        if donor:
            needle = donor.lower()
            results = [
                d for d in results
                if d.get("donorId") == donor or needle in str(d.get("donorName", "")).lower()
            ]
        if campaign:
            needle = campaign.lower()
            results = [d for d in results if needle in str(d.get("campaign", "")).lower()]
        if region:
            results = [d for d in results if record_region(d) == region]
        if start_date:
            lower = _parse_date(start_date)
            results = [d for d in results if (_record_date(d) or date.min) >= lower]
        if end_date:
            upper = _parse_date(end_date)
            results = [d for d in results if (_record_date(d) or date.max) <= upper]

        return list(results)

    def add(self, donation: dict) -> dict:
        record = dict(donation)
        record["id"] = _new_id("don", {d.get("id") for d in self._donations})
        self._donations.append(record)
        return record


class DonorRepository:
    def __init__(self, donors: Optional[list] = None):
        self._donors = list(donors or [])

    def all(self) -> list[dict]:
        return list(self._donors)

    def get(self, donor_id: str) -> Optional[dict]:
        for donor in self._donors:
            if donor.get("id") == donor_id:
                return donor
        return None

    def create(self, name: str, email: str, preferred_campaigns: Optional[list] = None) -> dict:
        """Add a donor profile.

        Raises:
            DuplicateDonorError: If another donor already uses this email
        """
        if any(d.get("email") == email for d in self._donors):
            raise DuplicateDonorError(f"A donor with email {email} already exists")

        donor = {
            "id": _new_id("donor", {d.get("id") for d in self._donors}),
            "name": name,
            "email": email,
            "totalDonated": 0,
            "donationCount": 0,
            "preferredCampaigns": list(preferred_campaigns or []),
            "joinDate": date.today().isoformat(),
        }
        self._donors.append(donor)
        return donor

    def update(self, donor_id: str, changes: dict) -> Optional[dict]:
        """Merge changes into a donor; the id never changes."""
        for index, donor in enumerate(self._donors):
            if donor.get("id") == donor_id:
                updated = {**donor, **changes, "id": donor_id}
                self._donors[index] = updated
                return updated
        return None

    def delete(self, donor_id: str) -> bool:
        for index, donor in enumerate(self._donors):
            if donor.get("id") == donor_id:
                del self._donors[index]
                return True
        return False


class FeedbackRepository:
    def __init__(self, feedback: Optional[list] = None):
        self._feedback = list(feedback or [])

    def filter(self, campaign: Optional[str] = None, region: Optional[str] = None,
               status: Optional[str] = None) -> list[dict]:
        results = self._feedback
        if campaign:
            results = [f for f in results if f.get("campaign") == campaign]
        if region:
            results = [f for f in results if f.get("region") == region]
        if status:
            results = [f for f in results if f.get("status") == status]
        return list(results)

    def add(self, feedback: dict) -> dict:
        record = {
            **feedback,
            "id": _new_id("fb", {f.get("id") for f in self._feedback}),
            "date": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "status": "pending",
        }
        self._feedback.append(record)
        return record


class TestimonialRepository:
    __test__ = False  # keep pytest from collecting this class

    def __init__(self, testimonials: Optional[list] = None):
        self._testimonials = list(testimonials or [])

    def filter(self, campaign: Optional[str] = None, region: Optional[str] = None,
               verified: Optional[bool] = None) -> list[dict]:
        results = self._testimonials
        if campaign:
            results = [t for t in results if t.get("campaign") == campaign]
        if region:
            results = [t for t in results if t.get("region") == region]
        if verified is not None:
            results = [t for t in results if bool(t.get("verified")) == verified]
        return list(results)


class NotificationRepository:
    def __init__(self, notifications: Optional[list] = None):
        self._notifications = list(notifications or [])

    def for_donor(self, donor_id: str, unread_only: bool = False,
                  notification_type: Optional[str] = None) -> list[dict]:
        """A donor's notifications, newest first."""
        results = [n for n in self._notifications if n.get("donorId") == donor_id]
        if unread_only:
            results = [n for n in results if not n.get("read")]
        if notification_type:
            results = [n for n in results if n.get("type") == notification_type]
        return sorted(results, key=lambda n: str(n.get("date", "")), reverse=True)

    def unread_count(self, donor_id: str) -> int:
        return len(self.for_donor(donor_id, unread_only=True))

    def add(self, notification: dict) -> dict:
        record = {
            "id": _new_id("notif", {n.get("id") for n in self._notifications}),
            "donorId": notification["donorId"],
            "type": notification["type"],
            "title": notification["title"],
            "message": notification["message"],
            "donationId": notification.get("donationId"),
            "impactMetricId": notification.get("impactMetricId"),
            "date": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "read": False,
            "priority": notification.get("priority") or "medium",
        }
        self._notifications.append(record)
        return record

    def mark_read(self, notification_id: str) -> bool:
        for notification in self._notifications:
            if notification.get("id") == notification_id:
                notification["read"] = True
                return True
        return False

    def mark_all_read(self, donor_id: str) -> int:
        marked = 0
        for notification in self._notifications:
            if notification.get("donorId") == donor_id and not notification.get("read"):
                notification["read"] = True
                marked += 1
        return marked


class CampaignRepository:
    def __init__(self, campaigns: Optional[list] = None):
        self._campaigns = list(campaigns or [])

    def all(self) -> list[dict]:
        return list(self._campaigns)

    def get(self, campaign_id: str) -> Optional[dict]:
        for campaign in self._campaigns:
            if campaign.get("id") == campaign_id:
                return campaign
        return None

    def filter(self, category: Optional[str] = None, region: Optional[str] = None,
               status: Optional[str] = None) -> list[dict]:
        results = self._campaigns
        if category:
            results = [c for c in results if c.get("category") == category]
        if region:
            results = [c for c in results if record_region(c) == region]
        if status:
            results = [c for c in results if c.get("status") == status]
        return list(results)


class ImpactLocationRepository:
    def __init__(self, locations: Optional[list] = None):
        self._locations = list(locations or [])

    def all(self) -> list[dict]:
        return list(self._locations)


def _read_collection(path: Path) -> Optional[list]:
    """Load a JSON array from path, or None if it is missing or unreadable."""
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return None
    if not isinstance(data, list):
        logger.warning(f"Ignoring {path}: expected a JSON array")
        return None
    return data


@dataclass
class Repositories:
    donations: DonationRepository
    donors: DonorRepository
    feedback: FeedbackRepository
    testimonials: TestimonialRepository
    notifications: NotificationRepository
    campaigns: CampaignRepository
    locations: ImpactLocationRepository
    from_export: bool = False

    @classmethod
    def load(cls, output_dir: Optional[Path] = None, use_mock: bool = True) -> "Repositories":
        """Build stores from transformed JSON files, falling back to demo data.

        Args:
            output_dir: Directory holding donations.json, campaigns.json, ...
            use_mock: Seed empty collections with mock_data when files are absent
        """
        donations = campaigns = locations = None
        if output_dir is not None:
            donations = _read_collection(output_dir / DONATIONS_FILE)
            campaigns = _read_collection(output_dir / CAMPAIGNS_FILE)
            locations = _read_collection(output_dir / IMPACT_LOCATIONS_FILE)

        from_export = donations is not None
        if from_export:
            logger.info(f"Serving {len(donations)} donations from {output_dir}")
        elif use_mock:
            logger.warning("Transformed data not found, serving mock data")

        def fallback(loaded, mock):
            if loaded is not None:
                return loaded
            return copy.deepcopy(mock) if use_mock else []

        return cls(
            donations=DonationRepository(fallback(donations, mock_data.MOCK_DONATIONS)),
            donors=DonorRepository(copy.deepcopy(mock_data.MOCK_DONORS) if use_mock else []),
            feedback=FeedbackRepository(),
            testimonials=TestimonialRepository(
                copy.deepcopy(mock_data.MOCK_TESTIMONIALS) if use_mock else []
            ),
            notifications=NotificationRepository(
                copy.deepcopy(mock_data.MOCK_NOTIFICATIONS) if use_mock else []
            ),
            campaigns=CampaignRepository(fallback(campaigns, mock_data.MOCK_CAMPAIGNS)),
            locations=ImpactLocationRepository(fallback(locations, [])),
            from_export=from_export,
        )
