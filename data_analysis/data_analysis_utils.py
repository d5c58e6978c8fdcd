import matplotlib.pyplot as plt
import seaborn as sns

from dataset_generation.compute_summary_stats import rank_top_n

# Figure settings
FIG_DPI = 300
TITLE_FONTSIZE = 16
TICK_FONTSIZE = 11
LABEL_FONTSIZE = 13
plt.rcParams["font.family"] = "Georgia"

# Dictionary for nice labels
LABEL_DICT = {
    "event_count": "Number of Events",
    "sum_FATALITIES": "Total Fatalities",
    "sum_INJURIES": "Total Injuries",
    "sum_HEALTH_IMPACT": "Total Fatalities + Injuries",
    "mean_FATALITIES": "Mean Fatalities per Event",
    "mean_INJURIES": "Mean Injuries per Event",
    "mean_HEALTH_IMPACT": "Mean Fatalities + Injuries per Event",
    "sum_PROPDMG_USD": "Total Property Damage",
    "sum_CROPDMG_USD": "Total Crop Damage",
    "sum_ECONOMIC_DAMAGE": "Total Economic Damage",
    "mean_PROPDMG_USD": "Mean Property Damage per Event",
    "mean_CROPDMG_USD": "Mean Crop Damage per Event",
    "mean_ECONOMIC_DAMAGE": "Mean Economic Damage per Event",
}


def get_label(column):
    """Readable label for a summary column, falling back to a title-cased name."""
    return LABEL_DICT.get(column, column.replace("_", " ").title())


def format_dollars(value):
    """Format a US$ amount with a magnitude suffix, e.g. 1.5e9 -> "$1.50 billion"."""
    for threshold, suffix in [(1e9, "billion"), (1e6, "million"), (1e3, "thousand")]:
        if abs(value) >= threshold:
            return f"${value / threshold:,.2f} {suffix}"
    return f"${value:,.0f}"


def plot_top_event_types(
    df,
    bar_var,
    num_events=10,
    group_column="EVTYPE",
    color="darkblue",
    value_scale=1,
    xlabel=None,
    title=None,
    log_scale=False,
    ax=None,
):
    """
    Create a horizontal bar plot of the top event types by any variable.

    Parameters
    ----------
    df : pd.DataFrame
        Summary table with one row per event type.
    bar_var : str
        Column name to use for bar lengths (what you're ranking by)
    num_events : int, optional
        Number of top event types to display
    group_column : str, optional
        Column holding the bar labels
    color : str, optional
        Matplotlib color for the bars
    value_scale : float, optional
        Divide values by this before plotting (e.g. 1e9 for billions)
    xlabel : str, optional
        X-axis label. If None, uses the label for bar_var
    title : str, optional
        Plot title. If None, "Top N Event Types by <label>"
    log_scale : bool, optional
        Use logarithmic scale for x-axis (useful for wide-ranging data)
    ax : matplotlib.axes.Axes, optional
        Axes to draw on. A new figure is created if None.

    Returns
    -------
    matplotlib.axes.Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 6))

    # Largest first, ties by name; seaborn draws the first category at the top
    top_df = rank_top_n(df, bar_var, n=num_events, group_column=group_column)
    top_df["plot_value"] = top_df[bar_var] / value_scale

    sns.barplot(
        data=top_df,
        x="plot_value",
        y=group_column,
        orient="h",
        color=color,
        ax=ax,
    )

    bar_label = get_label(bar_var)
    ax.set_xlabel(xlabel or bar_label, fontsize=LABEL_FONTSIZE)
    ax.set_ylabel("")
    ax.tick_params(labelsize=TICK_FONTSIZE)
    ax.set_title(
        title or f"Top {len(top_df)} Event Types by {bar_label}",
        fontsize=TITLE_FONTSIZE,
    )

    if log_scale:
        ax.set_xscale("log")

    return ax


def save_figure(fig, savepath):
    """Save a figure at FIG_DPI and close it."""
    fig.savefig(savepath, dpi=FIG_DPI, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved figure to {savepath}")
