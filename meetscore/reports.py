from typing import List

import pandas as pd

from .records import AthleteStat

LEADERBOARD_COLUMNS = [
    "rank",
    "athlete_id",
    "athlete_name",
    "total_points",
    "event_count",
    "distinct_meet_count",
    "points_per_event",
    "points_per_meet",
]

SCORE_SHEET_COLUMNS = ["event", "place", "place_label", "athlete_id", "athlete_name", "points", "detail"]


def leaderboard_frame(stats: List[AthleteStat]) -> pd.DataFrame:
    """Leaderboard as a DataFrame, keeping the ranking order of ``stats``."""
    rows = [dict(stat.to_dict(), rank=index) for index, stat in enumerate(stats, start=1)]
    df = pd.DataFrame(rows, columns=LEADERBOARD_COLUMNS)
    # averages are displayed with two decimals
    return df.round({"points_per_event": 2, "points_per_meet": 2})


def score_sheet_frame(sheet: List[dict]) -> pd.DataFrame:
    rows = [
        dict(result, event=group["event"])
        for group in sheet
        for result in group["results"]
    ]
    return pd.DataFrame(rows, columns=SCORE_SHEET_COLUMNS)


def leaderboard_csv(stats: List[AthleteStat]) -> str:
    return leaderboard_frame(stats).to_csv(index=False)


def score_sheet_csv(sheet: List[dict]) -> str:
    return score_sheet_frame(sheet).to_csv(index=False)
