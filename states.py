"""Static reference data for the 50 U.S. states plus the District of Columbia.

Used by ingest (flagging region codes that are not a known state) and by
output (state names and FIPS codes for the map and table files).
"""

# ---------------------------------------------------------------------------
# State reference data
# ---------------------------------------------------------------------------
# (usps_code, fips_code, name)
#   usps_code – 2-letter USPS postal code, the region key used by the pipeline
#   fips_code – 2-digit zero-padded FIPS state code, the key map shapes carry
# ---------------------------------------------------------------------------

_STATE_ROWS: list[tuple[str, str, str]] = [
    ("AL", "01", "Alabama"),
    ("AK", "02", "Alaska"),
    ("AZ", "04", "Arizona"),
    ("AR", "05", "Arkansas"),
    ("CA", "06", "California"),
    ("CO", "08", "Colorado"),
    ("CT", "09", "Connecticut"),
    ("DE", "10", "Delaware"),
    ("DC", "11", "District of Columbia"),
    ("FL", "12", "Florida"),
    ("GA", "13", "Georgia"),
    ("HI", "15", "Hawaii"),
    ("ID", "16", "Idaho"),
    ("IL", "17", "Illinois"),
    ("IN", "18", "Indiana"),
    ("IA", "19", "Iowa"),
    ("KS", "20", "Kansas"),
    ("KY", "21", "Kentucky"),
    ("LA", "22", "Louisiana"),
    ("ME", "23", "Maine"),
    ("MD", "24", "Maryland"),
    ("MA", "25", "Massachusetts"),
    ("MI", "26", "Michigan"),
    ("MN", "27", "Minnesota"),
    ("MS", "28", "Mississippi"),
    ("MO", "29", "Missouri"),
    ("MT", "30", "Montana"),
    ("NE", "31", "Nebraska"),
    ("NV", "32", "Nevada"),
    ("NH", "33", "New Hampshire"),
    ("NJ", "34", "New Jersey"),
    ("NM", "35", "New Mexico"),
    ("NY", "36", "New York"),
    ("NC", "37", "North Carolina"),
    ("ND", "38", "North Dakota"),
    ("OH", "39", "Ohio"),
    ("OK", "40", "Oklahoma"),
    ("OR", "41", "Oregon"),
    ("PA", "42", "Pennsylvania"),
    ("RI", "44", "Rhode Island"),
    ("SC", "45", "South Carolina"),
    ("SD", "46", "South Dakota"),
    ("TN", "47", "Tennessee"),
    ("TX", "48", "Texas"),
    ("UT", "49", "Utah"),
    ("VT", "50", "Vermont"),
    ("VA", "51", "Virginia"),
    ("WA", "53", "Washington"),
    ("WV", "54", "West Virginia"),
    ("WI", "55", "Wisconsin"),
    ("WY", "56", "Wyoming"),
]

# ---------------------------------------------------------------------------
# Lookup tables, computed once at import time
# ---------------------------------------------------------------------------

STATE_NAMES: dict[str, str] = {code: name for code, _, name in _STATE_ROWS}
STATE_FIPS: dict[str, str] = {code: fips for code, fips, _ in _STATE_ROWS}
FIPS_TO_STATE: dict[str, str] = {fips: code for code, fips, _ in _STATE_ROWS}


def is_known_state(code: str) -> bool:
    """True if ``code`` is a USPS code in the reference table (case-insensitive)."""
    return code.strip().upper() in STATE_NAMES


def state_name(code: str) -> str:
    """Full state name for a USPS code; falls back to the code itself."""
    return STATE_NAMES.get(code.upper(), code)


def state_for_fips(fips: str | int) -> str | None:
    """USPS code for a FIPS code.  Accepts ints and unpadded strings ('6' → 'CA')."""
    return FIPS_TO_STATE.get(str(fips).strip().zfill(2))
