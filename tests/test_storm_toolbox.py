import numpy as np
import pandas as pd
import pytest

from dataset_generation.utils.storm_toolbox import (
    add_impact_totals,
    apply_damage_exponent,
    assign_storm_category,
    clean_event_types,
    coerce_numeric_columns,
    exponent_multiplier,
    normalize_exponent_code,
    parse_begin_year,
    unrecognized_exponent_codes,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("K", 1e3),
        ("k", 1e3),
        (" M ", 1e6),
        ("m", 1e6),
        ("B", 1e9),
        ("h", 1e2),
        ("", 1.0),
        (None, 1.0),
        (np.nan, 1.0),
        ("0", 1.0),
        ("5", 1e5),
        ("+", 0.0),
        ("-", 0.0),
        ("?", 0.0),
    ],
)
def test_exponent_multiplier(code, expected):
    assert exponent_multiplier(code) == expected


def test_normalize_exponent_code():
    assert normalize_exponent_code(" k") == "K"
    assert normalize_exponent_code(np.nan) == ""


def test_apply_damage_exponent():
    df = pd.DataFrame(
        {"PROPDMG": [25.0, 2.5, 3.0, 4.0, "bad"], "PROPDMGEXP": ["K", "m", None, "?", "B"]}
    )
    out = apply_damage_exponent(df, "PROPDMG", "PROPDMGEXP", "PROPDMG_USD")

    assert out["PROPDMG_USD"].tolist() == [25_000.0, 2_500_000.0, 3.0, 0.0, 0.0]
    assert "PROPDMG_USD" not in df.columns


def test_unrecognized_exponent_codes():
    counts = unrecognized_exponent_codes(pd.Series(["K", "+", "?", "+", None, "b"]))
    assert counts.to_dict() == {"+": 2, "?": 1}


def test_clean_event_types_merges_variants():
    df = pd.DataFrame(
        {
            "EVTYPE": [
                "tstm wind",
                " TSTM WIND (G45)",
                "Thunderstorm Winds",
                "THUNDERSTORM  WIND",
                "HAIL 075",
                "Hurricane Opal",
                "RIP CURRENTS",
                "URBAN/SML STREAM FLD",
                "TORNADO F0",
                "tornado f3",
                "TORNADO",
            ]
        }
    )
    out = clean_event_types(df)

    assert out["EVTYPE"].tolist() == [
        "THUNDERSTORM WIND",
        "THUNDERSTORM WIND",
        "THUNDERSTORM WIND",
        "THUNDERSTORM WIND",
        "HAIL",
        "HURRICANE (TYPHOON)",
        "RIP CURRENT",
        "URBAN/SML STREAM FLOOD",
        "TORNADO",
        "TORNADO",
        "TORNADO",
    ]


def test_clean_event_types_drops_empty_and_summary_rows():
    df = pd.DataFrame({"EVTYPE": ["FLOOD", "  ", None, "Summary of March 14"]})
    out = clean_event_types(df)

    assert out["EVTYPE"].tolist() == ["FLOOD"]


@pytest.mark.parametrize(
    "event_type, category",
    [
        ("HURRICANE (TYPHOON)", "Tropical Cyclones/Floods"),
        ("FLASH FLOOD", "Tropical Cyclones/Floods"),
        ("WINTER STORM", "Winter Weather"),
        ("EXTREME COLD/WIND CHILL", "Winter Weather"),
        ("EXTREME WINDCHILL", "Winter Weather"),
        ("TORNADO", "Severe Local Storms"),
        ("THUNDERSTORM WIND", "Severe Local Storms"),
        ("HAIL", "Severe Local Storms"),
        ("DRY MICROBURST", "Severe Local Storms"),
        ("EXCESSIVE HEAT", "Heat/Drought/Wildfire"),
        ("WILDFIRE", "Heat/Drought/Wildfire"),
        ("RIP CURRENT", "Other"),
    ],
)
def test_assign_storm_category(event_type, category):
    assert assign_storm_category(event_type) == category


def test_add_impact_totals():
    df = pd.DataFrame(
        {
            "FATALITIES": [1.0, 0.0],
            "INJURIES": [2.0, 5.0],
            "PROPDMG_USD": [100.0, 0.0],
            "CROPDMG_USD": [50.0, 10.0],
        }
    )
    out = add_impact_totals(df)

    assert out["HEALTH_IMPACT"].tolist() == [3.0, 5.0]
    assert out["ECONOMIC_DAMAGE"].tolist() == [150.0, 10.0]


def test_parse_begin_year():
    df = pd.DataFrame({"BGN_DATE": ["4/18/1950 0:00:00", "11/30/2011 0:00:00", "garbage"]})
    out = parse_begin_year(df)

    assert out["YEAR"].iloc[0] == 1950
    assert out["YEAR"].iloc[1] == 2011
    assert pd.isna(out["YEAR"].iloc[2])


def test_coerce_numeric_columns():
    df = pd.DataFrame({"FATALITIES": ["1", "x", None], "INJURIES": [2, 3, 4]})
    out = coerce_numeric_columns(df, ["FATALITIES", "INJURIES"])

    assert out["FATALITIES"].tolist() == [1.0, 0.0, 0.0]
    assert out["INJURIES"].dtype == np.float64
