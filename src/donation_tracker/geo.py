"""Category assignment and approximate coordinates for organizations."""

import random
from typing import Optional

DEFAULT_CATEGORY = "General Support"

# First match wins, so an organization mentioning both a school and a
# hospital is Education.
CATEGORY_KEYWORDS = (
    ("Education", ("SCHOOL", "EDUCATION", "UNIVERSITY", "COLLEGE")),
    ("Healthcare", ("HEALTH", "MEDICAL", "HOSPITAL", "CLINIC")),
    ("Social Services", ("COMMUNITY", "HOUSING", "FOOD", "SHELTER")),
    ("Arts & Culture", ("ART", "MUSIC", "THEATER", "MUSEUM")),
    ("Environment", ("ENVIRONMENT", "CONSERVATION", "WILDLIFE")),
    ("Religion", ("CHURCH", "RELIGIOUS", "FAITH", "MINISTRY")),
    ("International Aid", ("INTERNATIONAL", "GLOBAL", "WORLD")),
    ("Human Rights", ("CIVIL RIGHTS", "HUMAN RIGHTS", "JUSTICE")),
    ("Research", ("RESEARCH", "SCIENCE", "TECHNOLOGY")),
)

# [longitude, latitude]
STATE_CENTROIDS = {
    "AL": (-86.79113, 32.377716), "AK": (-152.404419, 61.270716), "AZ": (-111.431221, 33.729759),
    "AR": (-92.373123, 34.969704), "CA": (-119.681564, 36.116203), "CO": (-105.311104, 39.059811),
    "CT": (-72.755371, 41.767), "DE": (-75.507141, 39.161921), "FL": (-81.686783, 27.670959),
    "GA": (-83.441162, 32.157435), "HI": (-157.826182, 21.30895), "ID": (-114.478828, 44.240459),
    "IL": (-89.094704, 40.19088), "IN": (-86.148003, 39.790942), "IA": (-93.620866, 42.032974),
    "KS": (-98.484246, 38.572954), "KY": (-84.86311, 37.669789), "LA": (-91.968041, 31.244823),
    "ME": (-69.765261, 44.323535), "MD": (-76.501157, 39.045755), "MA": (-71.530106, 42.230171),
    "MI": (-84.536095, 43.326618), "MN": (-93.094635, 45.739102), "MS": (-89.734383, 32.741646),
    "MO": (-92.189283, 38.572954), "MT": (-110.454353, 47.052166), "NE": (-99.901813, 41.492537),
    "NV": (-117.055374, 38.313515), "NH": (-71.563896, 43.452492), "NJ": (-74.521011, 40.298904),
    "NM": (-106.248482, 34.840515), "NY": (-74.948051, 42.165726), "NC": (-79.806419, 35.630066),
    "ND": (-99.784012, 47.528912), "OH": (-82.764915, 40.269789), "OK": (-96.928917, 35.482309),
    "OR": (-120.767273, 44.572021), "PA": (-77.209755, 40.269789), "RI": (-71.51178, 41.82355),
    "SC": (-80.945007, 33.856892), "SD": (-99.901813, 44.299782), "TN": (-86.692345, 35.771),
    "TX": (-97.563461, 31.106), "UT": (-111.892622, 39.419220), "VT": (-72.710686, 44.0582),
    "VA": (-78.169968, 37.677592), "WA": (-121.1858, 47.042418), "WV": (-80.954570, 38.349497),
    "WI": (-89.616508, 44.268543), "WY": (-107.30249, 42.755966), "DC": (-77.026817, 38.907192),
}

# Geographic center of the contiguous United States
US_CENTER = (-98.5795, 39.8282)

JITTER_DEGREES = 1.0


def categorize(name: str, mission: Optional[str] = None) -> str:
    """Pick a category from keywords in the organization name and mission."""
    text = f"{name} {mission or ''}".upper()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


class Geocoder:
    """State-level geocoder with per-call jitter.

    Every lookup for a known state lands somewhere within a degree of the
    state centroid, so two calls for the same organization return different
    points. Pass a seeded random.Random to make runs reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def coordinates(self, state: Optional[str] = None, city: Optional[str] = None) -> list[float]:
        """Return [longitude, latitude] for a state; city is accepted but unused."""
        centroid = STATE_CENTROIDS.get(state.strip().upper()) if state else None
        if centroid is None:
            return list(US_CENTER)

        lng, lat = centroid
        lng_offset = (self.rng.random() - 0.5) * 2 * JITTER_DEGREES
        lat_offset = (self.rng.random() - 0.5) * 2 * JITTER_DEGREES
        return [lng + lng_offset, lat + lat_offset]
