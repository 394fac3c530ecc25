"""
Location name -> Serper ``gl`` country code lookup.
"""

from typing import Dict, Optional

LOCATION_CODES: Dict[str, str] = {
    "singapore": "sg",
    "united states": "us",
    "usa": "us",
    "united kingdom": "gb",
    "uk": "gb",
    "australia": "au",
    "canada": "ca",
    "india": "in",
    "malaysia": "my",
    "indonesia": "id",
    "philippines": "ph",
    "thailand": "th",
    "vietnam": "vn",
    "hong kong": "hk",
    "japan": "jp",
    "south korea": "kr",
    "china": "cn",
}


def normalize_location(location: Optional[str]) -> Optional[str]:
    """
    Convert a location name to a country code.

    Known names map through LOCATION_CODES, 2-letter input is treated as a
    code already, anything else is passed through unchanged.
    """
    if not location:
        return None
    key = location.strip().lower()
    if key in LOCATION_CODES:
        return LOCATION_CODES[key]
    if len(location) == 2:
        return location.lower()
    return location
