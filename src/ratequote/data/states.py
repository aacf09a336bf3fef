"""Static US state geography used by the offline geocoder and state locator."""

from __future__ import annotations

# (lat_min, lat_max, lon_min, lon_max), approximate bounding boxes.
STATE_BOUNDS: dict[str, tuple[float, float, float, float]] = {
    "AL": (30.20, 35.01, -88.47, -84.89),
    "AK": (51.20, 71.40, -179.15, -129.98),
    "AZ": (31.33, 37.00, -114.82, -109.05),
    "AR": (33.00, 36.50, -94.62, -89.64),
    "CA": (32.53, 42.01, -124.41, -114.13),
    "CO": (36.99, 41.00, -109.06, -102.04),
    "CT": (40.98, 42.05, -73.73, -71.79),
    "DE": (38.45, 39.84, -75.79, -75.05),
    "FL": (24.52, 31.00, -87.63, -80.03),
    "GA": (30.36, 35.00, -85.61, -80.84),
    "HI": (18.91, 22.24, -160.24, -154.81),
    "ID": (41.99, 49.00, -117.24, -111.04),
    "IL": (36.97, 42.51, -91.51, -87.50),
    "IN": (37.77, 41.76, -88.10, -84.78),
    "IA": (40.38, 43.50, -96.64, -90.14),
    "KS": (36.99, 40.00, -102.05, -94.59),
    "KY": (36.50, 39.15, -89.57, -81.96),
    "LA": (28.93, 33.02, -94.04, -88.82),
    "ME": (43.06, 47.46, -71.08, -66.95),
    "MD": (37.91, 39.72, -79.49, -75.05),
    "MA": (41.24, 42.89, -73.51, -69.93),
    "MI": (41.70, 48.31, -90.42, -82.41),
    "MN": (43.50, 49.38, -97.24, -89.49),
    "MS": (30.17, 35.01, -91.66, -88.10),
    "MO": (35.99, 40.61, -95.77, -89.10),
    "MT": (44.36, 49.00, -116.05, -104.04),
    "NE": (40.00, 43.00, -104.05, -95.31),
    "NV": (35.00, 42.00, -120.01, -114.04),
    "NH": (42.70, 45.31, -72.56, -70.61),
    "NJ": (38.93, 41.36, -75.56, -73.89),
    "NM": (31.33, 37.00, -109.05, -103.00),
    "NY": (40.50, 45.02, -79.76, -71.86),
    "NC": (33.84, 36.59, -84.32, -75.46),
    "ND": (45.94, 49.00, -104.05, -96.55),
    "OH": (38.40, 41.98, -84.82, -80.52),
    "OK": (33.62, 37.00, -103.00, -94.43),
    "OR": (41.99, 46.29, -124.57, -116.46),
    "PA": (39.72, 42.27, -80.52, -74.69),
    "RI": (41.15, 42.02, -71.86, -71.12),
    "SC": (32.03, 35.22, -83.35, -78.54),
    "SD": (42.48, 45.94, -104.06, -96.44),
    "TN": (34.98, 36.68, -90.31, -81.65),
    "TX": (25.84, 36.50, -106.65, -93.51),
    "UT": (36.99, 42.00, -114.05, -109.04),
    "VT": (42.73, 45.02, -73.44, -71.46),
    "VA": (36.54, 39.47, -83.68, -75.24),
    "WA": (45.54, 49.00, -124.85, -116.92),
    "WV": (37.20, 40.64, -82.64, -77.72),
    "WI": (42.49, 47.08, -92.89, -86.25),
    "WY": (40.99, 45.01, -111.06, -104.05),
}

STATE_NAMES: dict[str, str] = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
}

STATE_CODES_BY_NAME: dict[str, str] = {name.lower(): code for code, name in STATE_NAMES.items()}

# Freight markets the offline geocoder can place without a provider.
# Keyed by (lowercase city, state code) -> (lat, lng).
MAJOR_CITIES: dict[tuple[str, str], tuple[float, float]] = {
    ("albuquerque", "NM"): (35.0844, -106.6504),
    ("atlanta", "GA"): (33.7490, -84.3880),
    ("austin", "TX"): (30.2672, -97.7431),
    ("baltimore", "MD"): (39.2904, -76.6122),
    ("birmingham", "AL"): (33.5186, -86.8104),
    ("boise", "ID"): (43.6150, -116.2023),
    ("boston", "MA"): (42.3601, -71.0589),
    ("buffalo", "NY"): (42.8864, -78.8784),
    ("charlotte", "NC"): (35.2271, -80.8431),
    ("chicago", "IL"): (41.8781, -87.6298),
    ("cincinnati", "OH"): (39.1031, -84.5120),
    ("cleveland", "OH"): (41.4993, -81.6944),
    ("columbus", "OH"): (39.9612, -82.9988),
    ("dallas", "TX"): (32.7767, -96.7970),
    ("denver", "CO"): (39.7392, -104.9903),
    ("des moines", "IA"): (41.5868, -93.6250),
    ("detroit", "MI"): (42.3314, -83.0458),
    ("el paso", "TX"): (31.7619, -106.4850),
    ("fresno", "CA"): (36.7378, -119.7871),
    ("harrisburg", "PA"): (40.2732, -76.8867),
    ("houston", "TX"): (29.7604, -95.3698),
    ("indianapolis", "IN"): (39.7684, -86.1581),
    ("jacksonville", "FL"): (30.3322, -81.6557),
    ("kansas city", "MO"): (39.0997, -94.5786),
    ("las vegas", "NV"): (36.1699, -115.1398),
    ("little rock", "AR"): (34.7465, -92.2896),
    ("los angeles", "CA"): (34.0522, -118.2437),
    ("louisville", "KY"): (38.2527, -85.7585),
    ("memphis", "TN"): (35.1495, -90.0490),
    ("miami", "FL"): (25.7617, -80.1918),
    ("milwaukee", "WI"): (43.0389, -87.9065),
    ("minneapolis", "MN"): (44.9778, -93.2650),
    ("nashville", "TN"): (36.1627, -86.7816),
    ("new orleans", "LA"): (29.9511, -90.0715),
    ("new york", "NY"): (40.7128, -74.0060),
    ("newark", "NJ"): (40.7357, -74.1724),
    ("oklahoma city", "OK"): (35.4676, -97.5164),
    ("omaha", "NE"): (41.2565, -95.9345),
    ("orlando", "FL"): (28.5383, -81.3792),
    ("philadelphia", "PA"): (39.9526, -75.1652),
    ("phoenix", "AZ"): (33.4484, -112.0740),
    ("pittsburgh", "PA"): (40.4406, -79.9959),
    ("portland", "OR"): (45.5152, -122.6784),
    ("portland", "ME"): (43.6591, -70.2568),
    ("raleigh", "NC"): (35.7796, -78.6382),
    ("reno", "NV"): (39.5296, -119.8138),
    ("richmond", "VA"): (37.5407, -77.4360),
    ("sacramento", "CA"): (38.5816, -121.4944),
    ("salt lake city", "UT"): (40.7608, -111.8910),
    ("san antonio", "TX"): (29.4241, -98.4936),
    ("san diego", "CA"): (32.7157, -117.1611),
    ("san francisco", "CA"): (37.7749, -122.4194),
    ("savannah", "GA"): (32.0809, -81.0912),
    ("seattle", "WA"): (47.6062, -122.3321),
    ("spokane", "WA"): (47.6588, -117.4260),
    ("st. louis", "MO"): (38.6270, -90.1994),
    ("tacoma", "WA"): (47.2529, -122.4443),
    ("tampa", "FL"): (27.9506, -82.4572),
    ("tucson", "AZ"): (32.2226, -110.9747),
    ("tulsa", "OK"): (36.1540, -95.9928),
}

CITY_ALIASES: dict[str, str] = {
    "la": "los angeles",
    "nyc": "new york",
    "new york city": "new york",
    "saint louis": "st. louis",
    "st louis": "st. louis",
    "slc": "salt lake city",
}


def state_center(code: str) -> tuple[float, float]:
    """Center of the state's bounding box as (lat, lng)."""
    lat_min, lat_max, lon_min, lon_max = STATE_BOUNDS[code]
    return (lat_min + lat_max) / 2, (lon_min + lon_max) / 2


def normalize_state(value: str | None) -> str | None:
    """Return the two-letter code for a code or full state name, else None."""
    if not value:
        return None
    text = value.strip()
    if len(text) == 2 and text.upper() in STATE_NAMES:
        return text.upper()
    return STATE_CODES_BY_NAME.get(text.lower())
