"""Convert combined NCCS data into Donation Impact Tracker collections."""

import logging
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import Settings
from .export import TransformedData, load_combined_data, save_transformed_data
from .synthesize import Synthesizer

logger = logging.getLogger(__name__)

SOURCE_DATASET = "NCCS IRS 990 Efilers"


class NCCSTransformer:
    """Load nccs-combined-data.json and synthesize campaigns, donations and locations."""

    def __init__(self, settings: Optional[Settings] = None,
                 input_file: Optional[Path] = None,
                 rng: Optional[random.Random] = None):
        self.settings = settings or Settings()
        self.input_file = input_file or self.settings.combined_data_file
        self.rng = rng or random.Random(self.settings.seed)
        self.synthesizer = Synthesizer(self.rng)

    def transform(self) -> TransformedData:
        """Run the synthesis stages over the loaded organizations.

        Raises:
            FileNotFoundError: If the combined data file is missing
        """
        organizations, _ = load_combined_data(self.input_file)
        if self.settings.org_limit is not None:
            organizations = organizations[:self.settings.org_limit]
        logger.info(f"Processing {len(organizations)} organizations")

        campaigns = self.synthesizer.campaigns(organizations)
        donation_batch = self.synthesizer.donations(organizations)
        location_batch = self.synthesizer.impact_locations(campaigns, donation_batch.donations)

        donations = donation_batch.donations
        dates = sorted(d.date for d in donations)
        total = sum(d.amount for d in donations)

        data = TransformedData(
            donations=donations,
            campaigns=campaigns,
            impact_locations=location_batch.locations,
            metadata={
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "sourceDataset": SOURCE_DATASET,
                "recordCount": len(organizations),
                "totalDonations": total,
                "totalCampaigns": len(campaigns),
                "dateRange": {
                    "start": dates[0] if dates else "",
                    "end": dates[-1] if dates else "",
                },
            },
            discards={
                "donationsBelowFloor": donation_batch.dropped,
                "orphanedDonations": location_batch.orphaned,
            },
        )

        logger.info("Transformation Summary:")
        logger.info(f"   Organizations processed: {len(organizations)}")
        logger.info(f"   Campaigns created: {len(campaigns)}")
        logger.info(f"   Donations generated: {len(donations)}")
        logger.info(f"   Impact locations: {len(location_batch.locations)}")
        logger.info(f"   Total donation value: ${total:,}")
        return data

    def run(self) -> TransformedData:
        """Transform and write every output file."""
        data = self.transform()
        save_transformed_data(data, self.settings.output_dir)
        return data
