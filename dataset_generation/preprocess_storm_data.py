"""
preprocess_storm_data.py

Parse and clean the raw NOAA storm events database.

For every event it:
1. Parses the begin year and optionally keeps only a window of years.
2. Coerces the fatality, injury and damage magnitude columns to numbers.
3. Applies the PROPDMGEXP / CROPDMGEXP exponent codes to get damages in US$.
4. Normalizes the EVTYPE labels and assigns a coarse storm category.
5. Adds combined health and economic impact columns.

Input:
- Raw bz2-compressed CSV from download_storm_data.py

Output:
- CSV file: OUTPUT_FILEPATH with one row per event

Example usage:
python -m dataset_generation.preprocess_storm_data --start-year 1996

"""

import argparse
import inspect
import time

import pandas as pd

from dataset_generation.utils.logger import setup_logger, close_logger, get_logger
from dataset_generation.utils.utils_misc import (
    check_file_exists,
    check_required_columns,
    make_parent_dir,
)
from dataset_generation.utils.storm_toolbox import (
    add_impact_totals,
    apply_damage_exponent,
    assign_storm_category,
    clean_event_types,
    coerce_numeric_columns,
    parse_begin_year,
    unrecognized_exponent_codes,
)

DATA_DIR = "data/"
INPUT_FILEPATH = f"{DATA_DIR}raw/StormData.csv.bz2"
OUTPUT_FILEPATH = f"{DATA_DIR}storm_events_preprocessed.csv"

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
NUMERIC_COLUMNS = ["FATALITIES", "INJURIES", "PROPDMG", "CROPDMG"]
OUTPUT_COLUMNS = [
    "YEAR",
    "STATE",
    "EVTYPE",
    "STORM_CATEGORY",
    "FATALITIES",
    "INJURIES",
    "HEALTH_IMPACT",
    "PROPDMG_USD",
    "CROPDMG_USD",
    "ECONOMIC_DAMAGE",
]

# (magnitude column, exponent column, output column)
DAMAGE_COLUMNS = [
    ("PROPDMG", "PROPDMGEXP", "PROPDMG_USD"),
    ("CROPDMG", "CROPDMGEXP", "CROPDMG_USD"),
]


def parse_args(argv=None):
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
    """
    parser = argparse.ArgumentParser(
        description="Clean the NOAA storm events database and compute damages in US$"
    )
    parser.add_argument("--input", type=str, default=INPUT_FILEPATH, help="Raw CSV")
    parser.add_argument(
        "--output", type=str, default=OUTPUT_FILEPATH, help="Preprocessed CSV"
    )
    parser.add_argument(
        "--start-year", type=int, default=None, help="First year to keep (inclusive)"
    )
    parser.add_argument(
        "--end-year", type=int, default=None, help="Last year to keep (inclusive)"
    )
    return parser.parse_args(argv)


def read_storm_data(filepath):
    """
    Read the columns of the raw storm database used by the analysis.

    Compression is inferred from the file suffix, so the bz2 file from
    download_storm_data.py can be read as-is.

    Parameters
    ----------
    filepath : str

    Returns
    -------
    pd.DataFrame

    Raises
    ------
    FileNotFoundError
        If filepath does not exist.
    ValueError
        If one of RAW_COLUMNS is missing from the file.
    """
    check_file_exists(filepath)

    header = pd.read_csv(filepath, nrows=0)
    check_required_columns(header, RAW_COLUMNS, df_name=filepath)

    return pd.read_csv(
        filepath,
        usecols=RAW_COLUMNS,
        dtype={"EVTYPE": str, "STATE": str, "PROPDMGEXP": str, "CROPDMGEXP": str},
        low_memory=False,
    )


def filter_years(storm_df, start_year=None, end_year=None):
    """
    Keep events whose begin year lies within [start_year, end_year].

    Either bound may be None. Events with no parseable year are dropped only
    when a bound is given.
    """
    if start_year is not None and end_year is not None and start_year > end_year:
        raise ValueError(f"start_year ({start_year}) is after end_year ({end_year})")

    mask = pd.Series(True, index=storm_df.index)
    if start_year is not None:
        mask &= storm_df["YEAR"] >= start_year
    if end_year is not None:
        mask &= storm_df["YEAR"] <= end_year
    return storm_df[mask.fillna(False).astype(bool)]


def preprocess(storm_df, start_year=None, end_year=None, logger=None):
    """
    Clean the raw storm events table.

    Parameters
    ----------
    storm_df : pd.DataFrame
        Raw table with RAW_COLUMNS.
    start_year, end_year : int, optional
        Inclusive window of begin years to keep.
    logger : logging.Logger, optional

    Returns
    -------
    pd.DataFrame
        Table with OUTPUT_COLUMNS.
    """
    logger = logger or get_logger()
    logger.info(f"{inspect.currentframe().f_code.co_name}: Starting...")
    check_required_columns(storm_df, RAW_COLUMNS, df_name="Storm data")
    logger.info(f"Raw events: {len(storm_df)}")

    storm_df = parse_begin_year(storm_df)
    n_missing_year = storm_df["YEAR"].isna().sum()
    if n_missing_year:
        logger.warning(f"{n_missing_year} events have an unparseable BGN_DATE")

    if start_year is not None or end_year is not None:
        before = len(storm_df)
        storm_df = filter_years(storm_df, start_year=start_year, end_year=end_year)
        logger.info(
            f"Dropped {before - len(storm_df)} events outside years "
            f"{start_year or 'start'}-{end_year or 'end'}"
        )

    storm_df = coerce_numeric_columns(storm_df, NUMERIC_COLUMNS)

    for value_col, exp_col, output_col in DAMAGE_COLUMNS:
        bad_codes = unrecognized_exponent_codes(storm_df[exp_col])
        if len(bad_codes) > 0:
            logger.warning(
                f"{bad_codes.sum()} rows have an unrecognized {exp_col} code "
                f"{bad_codes.to_dict()}; their {value_col} is counted as $0"
            )
        storm_df = apply_damage_exponent(storm_df, value_col, exp_col, output_col)

    before = len(storm_df)
    n_types_raw = storm_df["EVTYPE"].nunique()
    storm_df = clean_event_types(storm_df, column="EVTYPE")
    logger.info(
        f"Dropped {before - len(storm_df)} events with empty or summary event types"
    )
    logger.info(
        f"Event types reduced from {n_types_raw} to {storm_df['EVTYPE'].nunique()}"
    )

    storm_df = storm_df.assign(
        STORM_CATEGORY=storm_df["EVTYPE"].map(assign_storm_category)
    )
    storm_df = add_impact_totals(storm_df)

    logger.info(f"Preprocessed events: {len(storm_df)}")
    logger.info(f"{inspect.currentframe().f_code.co_name}: Completed successfully")

    return storm_df[OUTPUT_COLUMNS].reset_index(drop=True)


def main(argv=None):
    start_time = time.time()
    args = parse_args(argv)

    logger, _ = setup_logger(log_filename="preprocess_storm_data")
    logger.info("Starting script preprocess_storm_data.py")
    logger.info(f"Input: {args.input}\nOutput: {args.output}")

    storm_df = read_storm_data(args.input)
    storm_df = preprocess(
        storm_df, start_year=args.start_year, end_year=args.end_year, logger=logger
    )

    make_parent_dir(args.output)
    storm_df.to_csv(args.output, index=False)
    logger.info(f"File exported to: {args.output}")

    elapsed = time.time() - start_time
    logger.info(f"Script complete. Elapsed time: {elapsed:.1f}s")
    close_logger(logger)

    return storm_df


if __name__ == "__main__":
    main()
