"""Runtime settings, read from the environment (and a .env file if present)."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_BASE_URL = "https://nccs-efile.s3.us-east-1.amazonaws.com/public/v2025"
DEFAULT_DATA_DIR = Path("data/nccs")
DEFAULT_OUTPUT_DIR = Path("data/transformed")
DEFAULT_YEARS = (2023, 2022, 2021)
DEFAULT_MAX_RECORDS = 10000
DEFAULT_ORG_LIMIT = 1000
DEFAULT_DOWNLOAD_DELAY = 1.0
DEFAULT_TIMEOUT = 120

ENV_PREFIX = "DONATION_TRACKER_"


@dataclass
class Settings:
    """Paths and tuning knobs shared by the fetcher, transformer and API."""
    base_url: str = DEFAULT_BASE_URL
    data_dir: Path = DEFAULT_DATA_DIR
    output_dir: Path = DEFAULT_OUTPUT_DIR
    years: list[int] = field(default_factory=lambda: list(DEFAULT_YEARS))
    max_records: Optional[int] = DEFAULT_MAX_RECORDS
    org_limit: Optional[int] = DEFAULT_ORG_LIMIT
    download_delay: float = DEFAULT_DOWNLOAD_DELAY
    timeout: int = DEFAULT_TIMEOUT
    seed: Optional[int] = None
    use_mock_data: bool = True

    @property
    def combined_data_file(self) -> Path:
        return self.data_dir / "nccs-combined-data.json"

    @property
    def summary_file(self) -> Path:
        return self.data_dir / "nccs-data-summary.json"

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """Build settings from DONATION_TRACKER_* environment variables.

        Args:
            env_file: Optional .env path. Defaults to python-dotenv's lookup.

        Returns:
            Settings with environment values applied over the defaults

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        load_dotenv(env_file)

        settings = cls()
        base_url = _env("BASE_URL")
        if base_url:
            settings.base_url = base_url.rstrip("/")
        data_dir = _env("DATA_DIR")
        if data_dir:
            settings.data_dir = Path(data_dir)
        output_dir = _env("OUTPUT_DIR")
        if output_dir:
            settings.output_dir = Path(output_dir)
        years = _env("YEARS")
        if years:
            settings.years = parse_years(years)
        max_records = _env("MAX_RECORDS")
        if max_records:
            settings.max_records = _parse_int("MAX_RECORDS", max_records)
        org_limit = _env("ORG_LIMIT")
        if org_limit:
            settings.org_limit = _parse_int("ORG_LIMIT", org_limit)
        delay = _env("DOWNLOAD_DELAY")
        if delay:
            try:
                settings.download_delay = float(delay)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}DOWNLOAD_DELAY must be a number, got {delay!r}")
        seed = _env("SEED")
        if seed:
            settings.seed = _parse_int("SEED", seed)
        use_mock = _env("USE_MOCK_DATA")
        if use_mock:
            settings.use_mock_data = use_mock.strip().lower() not in ("0", "false", "no", "off")
        return settings


def parse_years(value: str) -> list[int]:
    """Parse a comma-separated year list such as "2023,2022"."""
    years = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            years.append(int(part))
        except ValueError:
            raise ValueError(f"Invalid year: {part!r}")
    if not years:
        raise ValueError("At least one year is required")
    return years


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}")
