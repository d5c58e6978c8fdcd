"""storm_toolbox.py

Helper functions for NOAA storm event data cleaning

"""

import re
import numpy as np
import pandas as pd

# Multiplier to apply to PROPDMG/CROPDMG given the exponent code.
# Blank means the magnitude is already in dollars; digits are powers of ten.
EXPONENT_MULTIPLIERS = {
    "": 1.0,
    "H": 1e2,
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}
EXPONENT_MULTIPLIERS.update({str(power): 10.0**power for power in range(9)})

# Ordered regex rewrites applied to upper-cased, whitespace-collapsed event types
EVTYPE_REPLACEMENTS = [
    (r"(?:\s+\(?|\()G?\d+(\.\d+)?\)?$", ""),  # trailing gust speeds / hail sizes: "TSTM WIND (G45)", "HAIL 075"
    (r"^TORNADO F\d$", "TORNADO"),
    (r"\bTSTM\b", "THUNDERSTORM"),
    (r"\bTH?UNDE+R?STORMS?W?\b", "THUNDERSTORM"),
    (r"\bWINDS\b", "WIND"),
    (r"\bFLOODS\b|\bFLOODING\b|\bFLD\b", "FLOOD"),
    (r"\bFIRES\b", "FIRE"),
    (r"^WILD/FOREST FIRE$|^WILD FIRE$|^FOREST FIRE$", "WILDFIRE"),
    (r"^HURRICANE\b.*|^TYPHOON$", "HURRICANE (TYPHOON)"),
    (r"^STORM SURGE$", "STORM SURGE/TIDE"),
    (r"^RIP CURRENTS$", "RIP CURRENT"),
    (r"^HEAT WAVE$", "HEAT"),
    (r"^EXTREME HEAT$|^RECORD HEAT$", "EXCESSIVE HEAT"),
    (r"^WINTER STORMS$", "WINTER STORM"),
]

# Keywords searched (in order) to assign a coarse storm category
STORM_CATEGORIES = {
    "Tropical Cyclones/Floods": [
        "HURRICANE",
        "TYPHOON",
        "TROPICAL STORM",
        "TROPICAL DEPRESSION",
        "STORM SURGE",
        "FLOOD",
        "HEAVY RAIN",
        "TSUNAMI",
    ],
    "Winter Weather": [
        "WINTER",
        "SNOW",
        "BLIZZARD",
        "ICE",
        "ICY",
        "FREEZ",
        "FROST",
        "COLD",
        "SLEET",
        "AVALANCHE",
        "WIND CHILL",
        "WINDCHILL",
    ],
    "Severe Local Storms": [
        "TORNADO",
        "FUNNEL",
        "WATERSPOUT",
        "MICROBURST",
        "THUNDERSTORM",
        "LIGHTNING",
        "HAIL",
        "WIND",
    ],
    "Heat/Drought/Wildfire": ["HEAT", "DROUGHT", "FIRE", "DRY", "WARM"],
}
OTHER_CATEGORY = "Other"


def normalize_exponent_code(code):
    """
    Upper-case and strip an exponent code. Missing values become "".

    Parameters
    ----------
    code : str, float or None

    Returns
    -------
    str
    """
    if pd.isna(code):
        return ""
    return str(code).strip().upper()


def exponent_multiplier(code):
    """
    Return the dollar multiplier for an exponent code.

    Codes that cannot be interpreted ("+", "-", "?", ...) get a multiplier of 0
    so they never inflate damage totals.

    Parameters
    ----------
    code : str, float or None

    Returns
    -------
    float
    """
    return EXPONENT_MULTIPLIERS.get(normalize_exponent_code(code), 0.0)


def unrecognized_exponent_codes(codes):
    """
    Count the exponent codes that have no known multiplier.

    Parameters
    ----------
    codes : pd.Series

    Returns
    -------
    pd.Series
        Value counts of the unrecognized (normalized) codes.
    """
    normalized = codes.map(normalize_exponent_code)
    return normalized[~normalized.isin(EXPONENT_MULTIPLIERS.keys())].value_counts()


def apply_damage_exponent(df, value_col, exp_col, output_col):
    """
    Convert a damage magnitude and its exponent code into dollars.

    Parameters
    ----------
    df : pd.DataFrame
    value_col : str
        Column with the damage magnitude (e.g. "PROPDMG").
    exp_col : str
        Column with the exponent code (e.g. "PROPDMGEXP").
    output_col : str
        Name of the new column holding the damage in US$.

    Returns
    -------
    pd.DataFrame
        Copy of df with output_col added.
    """
    df = df.copy()
    magnitude = pd.to_numeric(df[value_col], errors="coerce").fillna(0)
    multiplier = df[exp_col].map(exponent_multiplier).astype(float)
    df[output_col] = magnitude * multiplier
    return df


def clean_event_types(df, column="EVTYPE"):
    """
    Normalize free-text event types so spelling variants group together.

    Event types are upper-cased, stripped and whitespace-collapsed, then
    rewritten with EVTYPE_REPLACEMENTS. Rows left with an empty type, or with
    a "SUMMARY ..." pseudo-type, are dropped.

    Parameters
    ----------
    df : pd.DataFrame
    column : str, optional

    Returns
    -------
    pd.DataFrame
    """
    df = df.copy()
    event_types = (
        df[column]
        .fillna("")
        .astype(str)
        .str.upper()
        .str.strip()
        .str.replace(r"\s+", " ", regex=True)
    )
    for pattern, replacement in EVTYPE_REPLACEMENTS:
        event_types = event_types.str.replace(pattern, replacement, regex=True)
    df[column] = event_types.str.strip()

    keep = (df[column] != "") & ~df[column].str.startswith("SUMMARY")
    return df[keep]


def assign_storm_category(event_type):
    """
    Classify a cleaned event type into one of STORM_CATEGORIES.

    Parameters
    ----------
    event_type : str

    Returns
    -------
    str
        The first category with a matching keyword, or "Other".
    """
    for category, keywords in STORM_CATEGORIES.items():
        if re.search("|".join(keywords), event_type) is not None:
            return category
    return OTHER_CATEGORY


def add_impact_totals(df):
    """
    Add combined health (fatalities + injuries) and economic (property + crop)
    impact columns.
    """
    df = df.copy()
    df["HEALTH_IMPACT"] = df["FATALITIES"] + df["INJURIES"]
    df["ECONOMIC_DAMAGE"] = df["PROPDMG_USD"] + df["CROPDMG_USD"]
    return df


def parse_begin_year(df, column="BGN_DATE"):
    """
    Add a YEAR column parsed from the begin date, e.g. "4/18/1950 0:00:00".

    Unparseable dates give a missing year.
    """
    df = df.copy()
    dates = pd.to_datetime(
        df[column].astype(str).str.split(" ").str[0],
        format="%m/%d/%Y",
        errors="coerce",
    )
    df["YEAR"] = dates.dt.year.astype("Int64")
    return df


def coerce_numeric_columns(df, columns):
    """Convert columns to floats, treating anything non-numeric as 0."""
    df = df.copy()
    for col in columns:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(np.float64)
    return df
