import pandas as pd

import run_pipeline
from dataset_generation import download_storm_data


def test_run_pipeline_end_to_end(raw_storm_df, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def fake_download(url, filepath, overwrite=False, logger=None):
        (tmp_path / "data" / "raw").mkdir(parents=True, exist_ok=True)
        raw_storm_df.to_csv(filepath, index=False)
        return filepath

    monkeypatch.setattr(download_storm_data, "download_file", fake_download)

    report = run_pipeline.main(
        [
            "--data-dir",
            str(tmp_path / "data"),
            "--figs-dir",
            str(tmp_path / "figures"),
            "--reports-dir",
            str(tmp_path / "reports"),
            "--start-year",
            "1990",
            "--top-n",
            "5",
        ]
    )

    preprocessed = pd.read_csv(tmp_path / "data" / "storm_events_preprocessed.csv")
    assert len(preprocessed) == 8

    top = pd.read_csv(tmp_path / "data" / "summary_stats" / "top_event_types.csv")
    assert top[top["metric"] == "sum_ECONOMIC_DAMAGE"]["EVTYPE"].iloc[0] == "FLOOD"

    assert (tmp_path / "figures" / "top_event_types_health.png").is_file()
    assert (tmp_path / "figures" / "top_event_types_economic.png").is_file()

    saved = (tmp_path / "reports" / "storm_impact_report.md").read_text(encoding="utf-8")
    assert saved == report
    assert "from 1995 to 2009" in saved
    assert "](../figures/top_event_types_health.png)" in saved
