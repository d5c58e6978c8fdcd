"""
compute_summary_stats.py

Compute storm impact statistics per event type and export summary CSV files.

- Reads the preprocessed event-level storm data
- Aggregates fatalities, injuries and damages (sum and mean per event)
  by event type, storm category and year
- Ranks the top N event types for every health and economic metric

"""

import argparse
import inspect
import os
import time

import pandas as pd

from dataset_generation.utils.logger import setup_logger, close_logger, get_logger
from dataset_generation.utils.utils_misc import check_file_exists, check_required_columns

DATA_DIR = "data/"
INPUT_FILEPATH = f"{DATA_DIR}storm_events_preprocessed.csv"
OUTPUT_DIR = f"{DATA_DIR}summary_stats/"
TOP_N = 10

STAT_COLUMNS = [
    "FATALITIES",
    "INJURIES",
    "HEALTH_IMPACT",
    "PROPDMG_USD",
    "CROPDMG_USD",
    "ECONOMIC_DAMAGE",
]
HEALTH_METRICS = [
    "sum_FATALITIES",
    "sum_INJURIES",
    "sum_HEALTH_IMPACT",
    "mean_HEALTH_IMPACT",
]
ECONOMIC_METRICS = [
    "sum_PROPDMG_USD",
    "sum_CROPDMG_USD",
    "sum_ECONOMIC_DAMAGE",
    "mean_ECONOMIC_DAMAGE",
]

# Summary table name -> column to group by
SUMMARY_GROUPS = {
    "summary_by_event_type": "EVTYPE",
    "summary_by_storm_category": "STORM_CATEGORY",
    "summary_by_year": "YEAR",
}
RANKINGS_FILENAME = "top_event_types"


def parse_args(argv=None):
    """
    Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
    """
    parser = argparse.ArgumentParser(
        description="Aggregate storm impacts by event type and rank the top event types."
    )
    parser.add_argument(
        "--input", type=str, default=INPUT_FILEPATH, help="Preprocessed storm CSV"
    )
    parser.add_argument(
        "--output-dir", type=str, default=OUTPUT_DIR, help="Directory for summary CSVs"
    )
    parser.add_argument(
        "--top-n", type=int, default=TOP_N, help="Number of event types to rank"
    )
    return parser.parse_args(argv)


def aggregate_events_by_group(df, groupby_column, stat_columns):
    """
    Aggregate event data by a grouping column.

    Parameters
    ----------
    df : pandas.DataFrame
        Input DataFrame containing event data.
    groupby_column : str
        Column name to group by.
    stat_columns : list
        Column names to compute statistics for.

    Returns
    -------
    pandas.DataFrame
        One row per group with event_count, sum_<col> and mean_<col> columns.
    """
    grouped = df[[groupby_column] + stat_columns].groupby(groupby_column)

    # Event counts
    counts = grouped.size().rename("event_count")

    # Compute totals
    sum_df = grouped.sum()
    sum_df.rename(columns={col: f"sum_{col}" for col in stat_columns}, inplace=True)

    # Compute averages per event
    mean_df = grouped.mean()
    mean_df.rename(columns={col: f"mean_{col}" for col in stat_columns}, inplace=True)

    agg_df = pd.concat([counts, sum_df, mean_df], axis=1)
    agg_df.index.name = groupby_column

    return agg_df.reset_index()


def rank_top_n(summary_df, metric, n=TOP_N, group_column=None):
    """
    Select the n groups with the largest value of a metric.

    Ties are broken by group name so the ordering is reproducible.

    Parameters
    ----------
    summary_df : pandas.DataFrame
        Output of aggregate_events_by_group.
    metric : str
        Column to rank by, e.g. "sum_FATALITIES".
    n : int, optional
        Number of groups to keep. If larger than the number of groups, all
        groups are returned.
    group_column : str, optional
        Column holding the group labels. Defaults to the first column.

    Returns
    -------
    pandas.DataFrame
        Top rows sorted by metric (descending), with a 1-based "rank" column.

    Raises
    ------
    ValueError
        If n is smaller than 1.
    KeyError
        If metric is not a column of summary_df.
    """
    if n < 1:
        raise ValueError(f"n must be at least 1, got {n}")
    if metric not in summary_df.columns:
        raise KeyError(f"Unknown metric: {metric}")

    group_column = group_column or summary_df.columns[0]
    top_df = (
        summary_df.sort_values(
            [metric, group_column], ascending=[False, True], na_position="last"
        )
        .head(n)
        .reset_index(drop=True)
    )
    top_df.insert(0, "rank", range(1, len(top_df) + 1))
    return top_df


def build_rankings(summary_df, metrics, n=TOP_N, group_column=None):
    """
    Build a long table of the top-n groups for each metric.

    Returns
    -------
    pandas.DataFrame
        Columns: metric, rank, <group_column>, value
    """
    group_column = group_column or summary_df.columns[0]
    rankings = []
    for metric in metrics:
        top_df = rank_top_n(summary_df, metric, n=n, group_column=group_column)
        rankings.append(
            pd.DataFrame(
                {
                    "metric": metric,
                    "rank": top_df["rank"],
                    group_column: top_df[group_column],
                    "value": top_df[metric],
                }
            )
        )
    return pd.concat(rankings, ignore_index=True)


def compute_summary_tables(storm_df, top_n=TOP_N, logger=None):
    """
    Compute every summary table written by this script.

    Parameters
    ----------
    storm_df : pandas.DataFrame
        Preprocessed event-level storm data.
    top_n : int, optional
    logger : logging.Logger, optional

    Returns
    -------
    dict of str: pandas.DataFrame
        Keys are the output filenames without extension.
    """
    logger = logger or get_logger()
    logger.info(f"{inspect.currentframe().f_code.co_name}: Starting...")
    check_required_columns(
        storm_df, list(SUMMARY_GROUPS.values()) + STAT_COLUMNS, df_name="Storm data"
    )

    tables = {}
    for name, groupby_column in SUMMARY_GROUPS.items():
        tables[name] = aggregate_events_by_group(
            storm_df, groupby_column=groupby_column, stat_columns=STAT_COLUMNS
        )
        logger.info(f"{name}: {len(tables[name])} groups")

    tables[RANKINGS_FILENAME] = build_rankings(
        tables["summary_by_event_type"],
        metrics=HEALTH_METRICS + ECONOMIC_METRICS,
        n=top_n,
        group_column="EVTYPE",
    )

    logger.info(f"{inspect.currentframe().f_code.co_name}: Completed successfully")
    return tables


def export_summary_tables(tables, output_dir, logger=None):
    """Write each summary table to <output_dir>/<name>.csv and return the paths."""
    logger = logger or get_logger()
    os.makedirs(output_dir, exist_ok=True)

    filepaths = {}
    for name, table in tables.items():
        filepath = os.path.join(output_dir, f"{name}.csv")
        table.to_csv(filepath, index=False)
        logger.info(f"Exported {name} to {filepath}")
        filepaths[name] = filepath
    return filepaths


def main(argv=None):
    start_time = time.time()
    args = parse_args(argv)

    logger, _ = setup_logger(log_filename="compute_summary_stats")
    logger.info("Starting script compute_summary_stats.py")

    check_file_exists(args.input)
    storm_df = pd.read_csv(args.input)

    tables = compute_summary_tables(storm_df, top_n=args.top_n, logger=logger)
    export_summary_tables(tables, args.output_dir, logger=logger)

    elapsed = time.time() - start_time
    logger.info(f"Script complete. Elapsed time: {elapsed:.1f}s")
    close_logger(logger)

    return tables


if __name__ == "__main__":
    main()
