"""Tests for the NCCS downloader and combined-data writer."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from donation_tracker.config import Settings
from donation_tracker.merger import NCCS_TABLES
from donation_tracker.models import OrganizationRecord
from donation_tracker.nccs import NCCSFetcher, revenue_range, summarize_organizations


def response(status=200, chunks=(b"EIN,ORGANIZATION_NAME\n", b"1,Org\n")):
    resp = MagicMock()
    resp.status_code = status
    resp.iter_content.return_value = list(chunks)
    return resp


@pytest.fixture
def settings(tmp_path):
    return Settings(base_url="https://example.test/efile", data_dir=tmp_path / "nccs", years=[2023])


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    s.get.return_value = response()
    return s


class TestDownload:
    def test_downloads_every_table(self, settings, session):
        sleep = MagicMock()
        report = NCCSFetcher(settings, session=session, sleep=sleep).download_tables()

        assert report.downloaded == [t.file_name(2023) for t in NCCS_TABLES]
        assert report.failed == []
        urls = [call.args[0] for call in session.get.call_args_list]
        assert urls[0] == "https://example.test/efile/F9-P00-T00-HEADER-2023.csv"
        assert (settings.data_dir / "F9-P00-T00-HEADER-2023.csv").read_bytes() == b"EIN,ORGANIZATION_NAME\n1,Org\n"
        assert sleep.call_count == len(NCCS_TABLES)
        sleep.assert_called_with(1.0)

    def test_sets_user_agent(self, settings, session):
        NCCSFetcher(settings, session=session, sleep=MagicMock())
        assert session.headers["User-Agent"] == "donation-tracker/1.0"

    def test_existing_files_skipped(self, settings, session):
        settings.data_dir.mkdir(parents=True)
        existing = settings.data_dir / NCCS_TABLES[0].file_name(2023)
        existing.write_text("EIN\n", encoding="utf-8")

        report = NCCSFetcher(settings, session=session, sleep=MagicMock()).download_tables()

        assert report.skipped == [existing.name]
        assert session.get.call_count == len(NCCS_TABLES) - 1
        assert existing.read_text(encoding="utf-8") == "EIN\n"

    def test_http_error_is_not_fatal(self, settings, session):
        session.get.side_effect = [response(404), response(), response(), response()]
        sleep = MagicMock()
        report = NCCSFetcher(settings, session=session, sleep=sleep).download_tables()

        assert report.failed == [NCCS_TABLES[0].file_name(2023)]
        assert len(report.downloaded) == 3
        # no pause after a failed download
        assert sleep.call_count == 3
        assert not (settings.data_dir / NCCS_TABLES[0].file_name(2023)).exists()

    def test_connection_error_removes_partial_file(self, settings, session):
        resp = response()
        resp.iter_content.side_effect = requests.ConnectionError("reset")
        session.get.return_value = resp

        report = NCCSFetcher(settings, session=session, sleep=MagicMock()).download_tables()

        assert len(report.failed) == len(NCCS_TABLES)
        assert list(settings.data_dir.glob("*.csv")) == []


class TestCombineAndSave:
    def write_tables(self, data_dir):
        data_dir.mkdir(parents=True, exist_ok=True)
        (data_dir / "F9-P00-T00-HEADER-2023.csv").write_text(
            "EIN,ORGANIZATION_NAME,STATE\n1,Alpha,CA\n2,Beta,NY\n", encoding="utf-8")
        (data_dir / "F9-P01-T00-SUMMARY-2023.csv").write_text(
            "EIN,TOTAL_REVENUE,TOTAL_ASSETS\n1,250000,1000\n2,2000000,5000\n", encoding="utf-8")

    def test_run_without_download(self, settings, session):
        self.write_tables(settings.data_dir)
        fetcher = NCCSFetcher(settings, session=session, sleep=MagicMock())

        organizations = fetcher.run(download=False)

        session.get.assert_not_called()
        assert [o.name for o in organizations] == ["Beta", "Alpha"]

        combined = json.loads(settings.combined_data_file.read_text(encoding="utf-8"))
        assert combined["metadata"]["recordCount"] == 2
        assert combined["metadata"]["years"] == [2023]
        assert combined["organizations"][0]["ORGANIZATION_NAME"] == "Beta"
        assert combined["organizations"][0]["TOTAL_REVENUE"] == 2000000

        summary = json.loads(settings.summary_file.read_text(encoding="utf-8"))
        assert summary["totalOrganizations"] == 2
        assert summary["stateDistribution"] == {"NY": 1, "CA": 1}

    def test_save_empty(self, settings, session):
        fetcher = NCCSFetcher(settings, session=session, sleep=MagicMock())
        fetcher.save_data([])
        combined = json.loads(settings.combined_data_file.read_text(encoding="utf-8"))
        assert combined["organizations"] == []


class TestSummary:
    @pytest.mark.parametrize("revenue,label", [
        (0, "Under $100K"),
        (99_999, "Under $100K"),
        (100_000, "$100K - $1M"),
        (5_000_000, "$1M - $10M"),
        (10_000_000, "$10M - $100M"),
        (100_000_000, "Over $100M"),
    ])
    def test_revenue_range(self, revenue, label):
        assert revenue_range(revenue) == label

    def test_summary_stats(self):
        orgs = [
            OrganizationRecord(ein="1", name="A", total_revenue=300, total_assets=10, state="CA"),
            OrganizationRecord(ein="2", name="B", total_revenue=200, total_assets=20, state="CA"),
            OrganizationRecord(ein="3", name="C", total_revenue=100, total_assets=30),
        ]
        summary = summarize_organizations(orgs)
        assert summary["totalRevenue"] == 600
        assert summary["totalAssets"] == 60
        assert summary["averageRevenue"] == 200
        assert summary["medianRevenue"] == 200
        assert summary["revenueRanges"]["Under $100K"] == 3
        assert summary["stateDistribution"] == {"CA": 2}
        assert [o["ein"] for o in summary["topOrganizations"]] == ["1", "2", "3"]

    def test_empty(self):
        summary = summarize_organizations([])
        assert summary["averageRevenue"] == 0
        assert summary["medianRevenue"] == 0
        assert summary["topOrganizations"] == []
