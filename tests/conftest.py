"""Shared fixtures for donation_tracker tests."""

import json
import random

import pytest

from donation_tracker.models import OrganizationRecord


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def acme():
    """Mid-sized education nonprofit in California."""
    return OrganizationRecord(
        ein="123456789",
        name="Acme Charitable Trust",
        tax_year=2023,
        total_revenue=60000,
        total_expenses=55000,
        total_assets=120000,
        city="Oakland",
        state="CA",
        mission_description="Expanding access to education for rural students",
        contributions_grants=5000,
    )


@pytest.fixture
def small_org():
    """Below the campaign revenue threshold."""
    return OrganizationRecord(
        ein="987654321",
        name="Neighborhood Garden Club",
        tax_year=2022,
        total_revenue=40000,
        state="OR",
        contributions_grants=2500,
    )


@pytest.fixture
def combined_data_file(tmp_path, acme, small_org):
    """nccs-combined-data.json holding the acme and small_org records."""
    path = tmp_path / "nccs" / "nccs-combined-data.json"
    path.parent.mkdir(parents=True)
    payload = {
        "metadata": {"source": "test"},
        "organizations": [acme.to_dict(), small_org.to_dict()],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
