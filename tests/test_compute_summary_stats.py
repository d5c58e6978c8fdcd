import pandas as pd
import pytest

from dataset_generation import compute_summary_stats
from dataset_generation.compute_summary_stats import (
    aggregate_events_by_group,
    build_rankings,
    compute_summary_tables,
    rank_top_n,
)
from dataset_generation.preprocess_storm_data import preprocess


@pytest.fixture
def storm_df(raw_storm_df):
    return preprocess(raw_storm_df)


@pytest.fixture
def summary_df(storm_df):
    return aggregate_events_by_group(
        storm_df, "EVTYPE", compute_summary_stats.STAT_COLUMNS
    )


def test_aggregate_events_by_group(summary_df):
    tornado = summary_df.set_index("EVTYPE").loc["TORNADO"]

    assert tornado["event_count"] == 2
    assert tornado["sum_FATALITIES"] == 15
    assert tornado["sum_INJURIES"] == 150
    assert tornado["mean_HEALTH_IMPACT"] == 82.5
    assert tornado["sum_PROPDMG_USD"] == 2_525_000
    assert len(summary_df) == 7
    assert summary_df["event_count"].sum() == 9


def test_aggregate_events_by_group_empty():
    df = pd.DataFrame({"EVTYPE": [], "FATALITIES": []})
    out = aggregate_events_by_group(df, "EVTYPE", ["FATALITIES"])

    assert out.empty
    assert list(out.columns) == ["EVTYPE", "event_count", "sum_FATALITIES", "mean_FATALITIES"]


def test_rank_top_n_orders_and_breaks_ties_by_name(summary_df):
    top = rank_top_n(summary_df, "sum_HEALTH_IMPACT", n=6, group_column="EVTYPE")

    assert top["EVTYPE"].tolist() == [
        "TORNADO",
        "EXCESSIVE HEAT",
        "THUNDERSTORM WIND",
        "FLOOD",
        "DROUGHT",
        "HAIL",
    ]
    assert top["rank"].tolist() == [1, 2, 3, 4, 5, 6]


def test_rank_top_n_economic(summary_df):
    top = rank_top_n(summary_df, "sum_ECONOMIC_DAMAGE", n=3, group_column="EVTYPE")

    assert top["EVTYPE"].tolist() == ["FLOOD", "HURRICANE (TYPHOON)", "DROUGHT"]


def test_rank_top_n_more_than_available(summary_df):
    top = rank_top_n(summary_df, "sum_FATALITIES", n=50)

    assert len(top) == len(summary_df)
    assert top.loc[0, "EVTYPE"] == "EXCESSIVE HEAT"


def test_rank_top_n_invalid_arguments(summary_df):
    with pytest.raises(ValueError):
        rank_top_n(summary_df, "sum_FATALITIES", n=0)
    with pytest.raises(KeyError):
        rank_top_n(summary_df, "sum_NOT_A_COLUMN")


def test_build_rankings(summary_df):
    rankings = build_rankings(
        summary_df, ["sum_FATALITIES", "sum_CROPDMG_USD"], n=2, group_column="EVTYPE"
    )

    assert list(rankings.columns) == ["metric", "rank", "EVTYPE", "value"]
    assert len(rankings) == 4
    crops = rankings[rankings["metric"] == "sum_CROPDMG_USD"]
    assert crops["EVTYPE"].tolist() == ["DROUGHT", "HURRICANE (TYPHOON)"]
    assert crops["value"].tolist() == [1e9, 1e8]


def test_compute_summary_tables(storm_df):
    tables = compute_summary_stats.compute_summary_tables(storm_df, top_n=3)

    assert set(tables) == {
        "summary_by_event_type",
        "summary_by_storm_category",
        "summary_by_year",
        "top_event_types",
    }
    categories = tables["summary_by_storm_category"].set_index("STORM_CATEGORY")
    assert categories.loc["Severe Local Storms", "event_count"] == 5
    assert categories.loc["Tropical Cyclones/Floods", "event_count"] == 2

    rankings = tables["top_event_types"]
    metrics = compute_summary_stats.HEALTH_METRICS + compute_summary_stats.ECONOMIC_METRICS
    assert len(rankings) == 3 * len(metrics)


def test_compute_summary_tables_missing_columns():
    with pytest.raises(ValueError):
        compute_summary_tables(pd.DataFrame({"EVTYPE": ["FLOOD"]}))


def test_main_exports_csvs(storm_df, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    input_filepath = tmp_path / "preprocessed.csv"
    storm_df.to_csv(input_filepath, index=False)
    output_dir = tmp_path / "summary_stats"

    compute_summary_stats.main(
        ["--input", str(input_filepath), "--output-dir", str(output_dir), "--top-n", "5"]
    )

    for name in ["summary_by_event_type", "summary_by_storm_category", "summary_by_year"]:
        assert (output_dir / f"{name}.csv").is_file()
    top = pd.read_csv(output_dir / "top_event_types.csv")
    assert top[top["metric"] == "sum_HEALTH_IMPACT"]["EVTYPE"].iloc[0] == "TORNADO"
