import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from dataset_generation.utils.logger import close_logger, get_logger

RAW_COLUMNS = [
    "BGN_DATE",
    "STATE",
    "EVTYPE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
]

RAW_ROWS = [
    ("4/18/1950 0:00:00", "AL", "TORNADO", 5, 50, 25.0, "K", 0, None),
    ("5/3/1995 0:00:00", "OK", "tornado ", 10, 100, 2.5, "M", 0, ""),
    ("6/1/1996 0:00:00", "TX", "TSTM WIND", 1, 3, 10.0, "k", 5.0, "K"),
    ("7/4/2000 0:00:00", "TX", "THUNDERSTORM WINDS", 0, 2, 1.0, "m", 0, None),
    ("8/29/2005 0:00:00", "LA", "HURRICANE/TYPHOON", 0, 0, 1.5, "B", 100.0, "M"),
    ("1/1/2006 0:00:00", "CA", "FLOOD", 2, 0, 115.0, "B", 32.5, "M"),
    ("7/15/2006 0:00:00", "IL", "EXCESSIVE HEAT", 20, 30, 0, None, 0, None),
    ("3/3/2008 0:00:00", "IA", "DROUGHT", 0, 0, 0, None, 1.0, "B"),
    ("9/9/2009 0:00:00", "MO", "HAIL", 0, 0, 5.0, "+", 2.0, "?"),
    ("10/10/2010 0:00:00", "NY", "Summary of October 10", 0, 0, 0, None, 0, None),
]


@pytest.fixture
def raw_storm_df():
    """Small raw table shaped like the NOAA storm database extract."""
    return pd.DataFrame(RAW_ROWS, columns=RAW_COLUMNS)


@pytest.fixture
def raw_storm_filepath(tmp_path, raw_storm_df):
    """The raw table written as a bz2-compressed CSV, with an extra unused column."""
    filepath = tmp_path / "raw" / "StormData.csv.bz2"
    filepath.parent.mkdir()
    raw_storm_df.assign(REMARKS="text").to_csv(filepath, index=False)
    return str(filepath)


@pytest.fixture(autouse=True)
def reset_shared_logger():
    yield
    close_logger(get_logger())
