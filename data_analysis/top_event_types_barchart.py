"""
top_event_types_barchart.py

Create horizontal bar charts of the event types with the largest impacts:
- Health: total fatalities, total injuries, mean fatalities + injuries per event
- Economic: total property damage, total crop damage, total economic damage

Example usage:
python -m data_analysis.top_event_types_barchart --top-n 10

"""

import argparse
import os

import matplotlib.pyplot as plt
import pandas as pd

from data_analysis.data_analysis_utils import plot_top_event_types, save_figure

# Filepaths
DATA_DIR = "data/"
FIGS_DIR = "figures/"
SUMMARY_FILEPATH = f"{DATA_DIR}summary_stats/summary_by_event_type.csv"
HEALTH_FIG_FILENAME = "top_event_types_health.png"
ECONOMIC_FIG_FILENAME = "top_event_types_economic.png"
TOP_N = 10

# (column, color, value scale, x label)
HEALTH_PANELS = [
    ("sum_FATALITIES", "#d95f02", 1, "Fatalities"),
    ("sum_INJURIES", "#7570b3", 1, "Injuries"),
    ("mean_HEALTH_IMPACT", "#1b9e77", 1, "Fatalities + Injuries per Event"),
]
ECONOMIC_PANELS = [
    ("sum_PROPDMG_USD", "#1f78b4", 1e9, "Billion US$"),
    ("sum_CROPDMG_USD", "#33a02c", 1e9, "Billion US$"),
    ("sum_ECONOMIC_DAMAGE", "#e31a1c", 1e9, "Billion US$"),
]


def parse_args(argv=None):
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
    """
    parser = argparse.ArgumentParser(
        description="Bar charts of the top event types by health and economic impact"
    )
    parser.add_argument(
        "--summary-filepath",
        type=str,
        default=SUMMARY_FILEPATH,
        help="Summary by event type CSV from compute_summary_stats.py",
    )
    parser.add_argument("--figs-dir", type=str, default=FIGS_DIR)
    parser.add_argument("--top-n", type=int, default=TOP_N)
    return parser.parse_args(argv)


def plot_impact_panels(summary_df, panels, suptitle, num_events=TOP_N, savepath=None):
    """
    Plot one row of top-N bar charts, one panel per metric.

    Parameters
    ----------
    summary_df : pd.DataFrame
        Summary by event type.
    panels : list of tuple
        (column, color, value scale, x label) for each panel.
    suptitle : str
        Title above all panels.
    num_events : int, optional
    savepath : str, optional
        If provided, save the figure here and close it.

    Returns
    -------
    matplotlib.figure.Figure
    """
    fig, axes = plt.subplots(1, len(panels), figsize=(7 * len(panels), 6))

    for letter, ax, (col, color, scale, xlabel) in zip("abcdefgh", axes, panels):
        plot_top_event_types(
            summary_df,
            bar_var=col,
            num_events=num_events,
            color=color,
            value_scale=scale,
            xlabel=xlabel,
            ax=ax,
        )
        ax.set_title(f"{letter}) {ax.get_title()}", fontsize=ax.title.get_fontsize())

    fig.suptitle(suptitle, fontsize=18, fontweight="bold")
    fig.tight_layout()
    plt.subplots_adjust(wspace=0.6)  # room for the event type labels

    if savepath is not None:
        save_figure(fig, savepath)

    return fig


def plot_health_impacts(summary_df, num_events=TOP_N, savepath=None):
    return plot_impact_panels(
        summary_df,
        HEALTH_PANELS,
        suptitle="Event Types Most Harmful to Population Health",
        num_events=num_events,
        savepath=savepath,
    )


def plot_economic_impacts(summary_df, num_events=TOP_N, savepath=None):
    return plot_impact_panels(
        summary_df,
        ECONOMIC_PANELS,
        suptitle="Event Types with the Greatest Economic Consequences",
        num_events=num_events,
        savepath=savepath,
    )


def make_figures(summary_df, figs_dir=FIGS_DIR, num_events=TOP_N):
    """
    Make and save both figures.

    Returns
    -------
    dict
        {"health": path, "economic": path}
    """
    os.makedirs(figs_dir, exist_ok=True)
    figure_paths = {
        "health": os.path.join(figs_dir, HEALTH_FIG_FILENAME),
        "economic": os.path.join(figs_dir, ECONOMIC_FIG_FILENAME),
    }
    plot_health_impacts(summary_df, num_events, savepath=figure_paths["health"])
    plot_economic_impacts(summary_df, num_events, savepath=figure_paths["economic"])
    return figure_paths


def main(argv=None):
    args = parse_args(argv)

    summary_df = pd.read_csv(args.summary_filepath)
    return make_figures(summary_df, figs_dir=args.figs_dir, num_events=args.top_n)


if __name__ == "__main__":
    main()
