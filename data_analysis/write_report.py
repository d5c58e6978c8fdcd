"""
write_report.py

Write the storm impact report answering two questions:
1. Across the United States, which types of events are most harmful with
   respect to population health?
2. Across the United States, which types of events have the greatest
   economic consequences?

The report is printed to console and saved as markdown.

To only print the report:
python -m data_analysis.write_report --no-save

"""

import argparse
import os

import pandas as pd

from dataset_generation.compute_summary_stats import rank_top_n
from dataset_generation.utils.utils_misc import check_file_exists, make_parent_dir
from data_analysis.data_analysis_utils import format_dollars, get_label
from data_analysis.top_event_types_barchart import (
    ECONOMIC_FIG_FILENAME,
    HEALTH_FIG_FILENAME,
)

# Define filepaths
DATA_DIR = "data/"
FIGS_DIR = "figures/"
REPORTS_DIR = "reports/"
SUMMARY_STATS_DIR = f"{DATA_DIR}summary_stats/"
EVENT_TYPE_SUMMARY_FILEPATH = f"{SUMMARY_STATS_DIR}summary_by_event_type.csv"
YEAR_SUMMARY_FILEPATH = f"{SUMMARY_STATS_DIR}summary_by_year.csv"
REPORT_FILEPATH = f"{REPORTS_DIR}storm_impact_report.md"

TOP_N = 10
NUM_RUNNERS_UP = 4
# Per-event means are only ranked for event types with at least this many events
MIN_EVENTS_FOR_MEAN = 10


def parse_args(argv=None):
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
    """
    parser = argparse.ArgumentParser(description="Write the storm impact report")
    parser.add_argument(
        "--summary-filepath", type=str, default=EVENT_TYPE_SUMMARY_FILEPATH
    )
    parser.add_argument("--year-filepath", type=str, default=YEAR_SUMMARY_FILEPATH)
    parser.add_argument("--figs-dir", type=str, default=FIGS_DIR)
    parser.add_argument("--output", type=str, default=REPORT_FILEPATH)
    parser.add_argument("--top-n", type=int, default=TOP_N)
    parser.add_argument(
        "--no-save", action="store_true", help="Print the report without saving it"
    )
    return parser.parse_args(argv)


def _check_not_empty(summary_df):
    if summary_df.empty:
        raise ValueError("Summary table is empty; no events to report on")


def _join_names(names):
    """["A", "B", "C"] -> "A, B and C"."""
    names = list(names)
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"


def _percent_of_total(value, total):
    return (value / total) * 100 if total else 0.0


def answer_health_question(summary_df, num_runners_up=NUM_RUNNERS_UP):
    """
    Prose answer to: which event types are most harmful to population health?

    Harm is measured by total fatalities plus injuries. The leading type by
    fatalities alone, and by mean harm per event, are reported as well.

    Parameters
    ----------
    summary_df : pd.DataFrame
        Summary by event type from compute_summary_stats.py.
    num_runners_up : int, optional

    Returns
    -------
    str
    """
    _check_not_empty(summary_df)

    top_df = rank_top_n(
        summary_df, "sum_HEALTH_IMPACT", n=num_runners_up + 1, group_column="EVTYPE"
    )
    lead = top_df.iloc[0]
    total_fatalities = summary_df["sum_FATALITIES"].sum()
    total_injuries = summary_df["sum_INJURIES"].sum()
    total_harm = summary_df["sum_HEALTH_IMPACT"].sum()

    text = (
        f"**{lead['EVTYPE']}** is the event type most harmful to population health. "
        f"It caused {lead['sum_FATALITIES']:,.0f} fatalities and "
        f"{lead['sum_INJURIES']:,.0f} injuries, "
        f"{_percent_of_total(lead['sum_HEALTH_IMPACT'], total_harm):.1f}% of the "
        f"{total_harm:,.0f} fatalities and injuries recorded "
        f"({total_fatalities:,.0f} fatalities, {total_injuries:,.0f} injuries)."
    )

    runners_up = top_df.iloc[1:]
    runners_up = runners_up[runners_up["sum_HEALTH_IMPACT"] > 0]
    if len(runners_up) > 0:
        text += (
            " It is followed by "
            + _join_names(
                f"{row.EVTYPE} ({row.sum_HEALTH_IMPACT:,.0f})"
                for row in runners_up.itertuples()
            )
            + "."
        )

    deadliest = rank_top_n(summary_df, "sum_FATALITIES", n=1, group_column="EVTYPE")
    deadliest = deadliest.iloc[0]
    if deadliest["EVTYPE"] != lead["EVTYPE"]:
        text += (
            f" Counting fatalities alone, {deadliest['EVTYPE']} is the deadliest "
            f"with {deadliest['sum_FATALITIES']:,.0f} deaths."
        )

    frequent_df = summary_df[summary_df["event_count"] >= MIN_EVENTS_FOR_MEAN]
    if not frequent_df.empty:
        worst = rank_top_n(
            frequent_df, "mean_HEALTH_IMPACT", n=1, group_column="EVTYPE"
        ).iloc[0]
        text += (
            f" Per event, {worst['EVTYPE']} is the most dangerous type with "
            f"{worst['mean_HEALTH_IMPACT']:.2f} fatalities and injuries per event "
            f"over {worst['event_count']:,.0f} events."
        )

    return text


def answer_economic_question(summary_df, num_runners_up=NUM_RUNNERS_UP):
    """
    Prose answer to: which event types have the greatest economic consequences?

    Consequences are measured by total property plus crop damage in US$. The
    leading type for crop damage alone is reported when it differs.

    Parameters
    ----------
    summary_df : pd.DataFrame
        Summary by event type from compute_summary_stats.py.
    num_runners_up : int, optional

    Returns
    -------
    str
    """
    _check_not_empty(summary_df)

    top_df = rank_top_n(
        summary_df, "sum_ECONOMIC_DAMAGE", n=num_runners_up + 1, group_column="EVTYPE"
    )
    lead = top_df.iloc[0]
    total_damage = summary_df["sum_ECONOMIC_DAMAGE"].sum()

    text = (
        f"**{lead['EVTYPE']}** has the greatest economic consequences, with "
        f"{format_dollars(lead['sum_ECONOMIC_DAMAGE'])} in damages "
        f"({format_dollars(lead['sum_PROPDMG_USD'])} property, "
        f"{format_dollars(lead['sum_CROPDMG_USD'])} crops). That is "
        f"{_percent_of_total(lead['sum_ECONOMIC_DAMAGE'], total_damage):.1f}% of "
        f"the {format_dollars(total_damage)} of recorded damage."
    )

    runners_up = top_df.iloc[1:]
    runners_up = runners_up[runners_up["sum_ECONOMIC_DAMAGE"] > 0]
    if len(runners_up) > 0:
        text += (
            " It is followed by "
            + _join_names(
                f"{row.EVTYPE} ({format_dollars(row.sum_ECONOMIC_DAMAGE)})"
                for row in runners_up.itertuples()
            )
            + "."
        )

    crops = rank_top_n(summary_df, "sum_CROPDMG_USD", n=1, group_column="EVTYPE")
    crops = crops.iloc[0]
    if crops["EVTYPE"] != lead["EVTYPE"] and crops["sum_CROPDMG_USD"] > 0:
        text += (
            f" For crops alone, {crops['EVTYPE']} is the most damaging with "
            f"{format_dollars(crops['sum_CROPDMG_USD'])}."
        )

    return text


def ranking_table(summary_df, metric, n=TOP_N, dollars=False):
    """Markdown table of the top n event types for a metric."""
    top_df = rank_top_n(summary_df, metric, n=n, group_column="EVTYPE")
    lines = [
        f"| Rank | Event type | {get_label(metric)} |",
        "|---:|---|---:|",
    ]
    for row in top_df.itertuples():
        value = getattr(row, metric)
        value_str = format_dollars(value) if dollars else f"{value:,.0f}"
        lines.append(f"| {row.rank} | {row.EVTYPE} | {value_str} |")
    return "\n".join(lines)


def build_report(summary_df, year_df=None, figure_paths=None, top_n=TOP_N, report_dir="."):
    """
    Assemble the full markdown report.

    Parameters
    ----------
    summary_df : pd.DataFrame
        Summary by event type.
    year_df : pd.DataFrame, optional
        Summary by year, used to describe the period covered.
    figure_paths : dict, optional
        {"health": path, "economic": path}. Figures are linked relative to
        report_dir.
    top_n : int, optional
    report_dir : str, optional
        Directory the report will be saved in.

    Returns
    -------
    str
    """
    _check_not_empty(summary_df)
    figure_paths = figure_paths or {}

    num_events = int(summary_df["event_count"].sum())
    num_types = len(summary_df)
    if year_df is not None and not year_df.dropna(subset=["YEAR"]).empty:
        years = year_df["YEAR"].dropna()
        period = f"from {int(years.min())} to {int(years.max())}"
    else:
        period = "over the full period of record"

    sections = [
        "# Health and Economic Impact of Severe Weather Events in the United States",
        "## Synopsis",
        (
            "This report explores the U.S. National Oceanic and Atmospheric "
            "Administration (NOAA) storm database, which tracks major storms and "
            "weather events, when and where they occur, and estimates of any "
            f"fatalities, injuries and property damage. It covers {num_events:,} "
            f"events {period}, grouped into {num_types:,} event types."
        ),
        "## Data Processing",
        (
            "The compressed CSV is downloaded from the course mirror and read "
            "directly. Event type labels are upper-cased, whitespace is collapsed "
            "and common abbreviations and spelling variants are merged "
            "(e.g. TSTM WIND and THUNDERSTORM WINDS become THUNDERSTORM WIND). "
            "Property and crop damage are converted to US$ by applying their "
            "exponent codes (H = hundreds, K = thousands, M = millions, "
            "B = billions, digits = powers of ten); rows with an uninterpretable "
            "code are counted as $0. Impacts are then summed and averaged per "
            "event type and the top event types ranked for each metric."
        ),
        "## Results",
        "### Which types of events are most harmful to population health?",
        answer_health_question(summary_df),
        ranking_table(summary_df, "sum_HEALTH_IMPACT", n=top_n),
    ]
    if "health" in figure_paths:
        rel_path = os.path.relpath(figure_paths["health"], report_dir)
        sections.append(f"![Top event types by health impact]({rel_path})")

    sections += [
        "### Which types of events have the greatest economic consequences?",
        answer_economic_question(summary_df),
        ranking_table(summary_df, "sum_ECONOMIC_DAMAGE", n=top_n, dollars=True),
    ]
    if "economic" in figure_paths:
        rel_path = os.path.relpath(figure_paths["economic"], report_dir)
        sections.append(f"![Top event types by economic damage]({rel_path})")

    return "\n\n".join(sections) + "\n"


def save_report(report, filepath):
    make_parent_dir(filepath)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(report)
    print(f"Report saved to {filepath}")


def main(argv=None):
    args = parse_args(argv)

    check_file_exists(args.summary_filepath)
    summary_df = pd.read_csv(args.summary_filepath)
    year_df = (
        pd.read_csv(args.year_filepath) if os.path.isfile(args.year_filepath) else None
    )

    figure_paths = {
        key: os.path.join(args.figs_dir, filename)
        for key, filename in [
            ("health", HEALTH_FIG_FILENAME),
            ("economic", ECONOMIC_FIG_FILENAME),
        ]
        if os.path.isfile(os.path.join(args.figs_dir, filename))
    }

    report = build_report(
        summary_df,
        year_df=year_df,
        figure_paths=figure_paths,
        top_n=args.top_n,
        report_dir=os.path.dirname(args.output) or ".",
    )
    print(report)

    if not args.no_save:
        save_report(report, args.output)

    return report


if __name__ == "__main__":
    main()
