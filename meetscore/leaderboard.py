from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

from .records import AthleteStat, EventRecord
from .util.const_util import CONST

_SORT_ATTRIBUTES = {
    CONST.SORT_KEY.TOTAL_POINTS: "total_points",
    CONST.SORT_KEY.POINTS_PER_MEET: "points_per_meet",
    CONST.SORT_KEY.POINTS_PER_EVENT: "points_per_event",
    CONST.SORT_KEY.NUM_MEETS: "distinct_meet_count",
}


def _is_unfiltered(value) -> bool:
    return value is None or value == CONST.ALL_SEASONS


def build_leaderboard(
    events: Iterable[EventRecord],
    season_filter: Optional[Union[int, str]] = None,
    sort_key: str = CONST.SORT_KEY.TOTAL_POINTS,
    meet_filter: Optional[Union[int, str]] = None,
) -> List[AthleteStat]:
    """Aggregate per-athlete point statistics and rank them.

    Events are grouped by athlete id, never by name. Ranking is descending
    on ``sort_key``; athletes that tie keep the order in which they were
    first seen in ``events`` (``sorted`` is stable, also with ``reverse``).
    """
    if sort_key not in _SORT_ATTRIBUTES:
        raise ValueError(f"Unknown sort key {sort_key!r}; expected one of {CONST.SORT_KEY.ALL}")

    totals: Dict = {}
    for event in events:
        if not _is_unfiltered(season_filter) and event.season_id != season_filter:
            continue
        if meet_filter is not None and event.meet_id != meet_filter:
            continue

        entry = totals.get(event.athlete_id)
        if entry is None:
            entry = totals[event.athlete_id] = {
                "name": event.athlete_name or "Athlete",
                "points": 0,
                "events": 0,
                "meets": set(),
            }
        entry["points"] += event.points or 0
        entry["events"] += 1
        if event.meet_id is not None:
            entry["meets"].add(event.meet_id)

    stats = []
    for athlete_id, entry in totals.items():
        num_meets = len(entry["meets"])
        stats.append(
            AthleteStat(
                athlete_id=athlete_id,
                athlete_name=entry["name"],
                total_points=entry["points"],
                event_count=entry["events"],
                distinct_meet_count=num_meets,
                points_per_event=entry["points"] / max(entry["events"], 1),
                points_per_meet=entry["points"] / max(num_meets, 1),
            )
        )

    attribute = _SORT_ATTRIBUTES[sort_key]
    return sorted(stats, key=lambda stat: getattr(stat, attribute), reverse=True)


def ordinal(value: int) -> str:
    if 10 <= value % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(value % 10, "th")
    return f"{value}{suffix}"


def build_score_sheet(events: Iterable[EventRecord]) -> List[dict]:
    """Group a meet's results by event type, best placement first."""
    grouped: Dict[str, List[EventRecord]] = {}
    for event in events:
        grouped.setdefault(event.event_type, []).append(event)

    sheet = []
    for event_name, results in grouped.items():
        # unplaced (0) entries go after every scored placement
        ordered = sorted(results, key=lambda item: (item.placement <= 0, item.placement))
        sheet.append(
            {
                "event": event_name,
                "total_points": sum(item.points or 0 for item in ordered),
                "results": [
                    {
                        "athlete_id": item.athlete_id,
                        "athlete_name": item.athlete_name,
                        "place": item.placement,
                        "place_label": ordinal(item.placement) if item.placement > 0 else "–",
                        "points": item.points or 0,
                        "detail": item.detail,
                    }
                    for item in ordered
                ],
            }
        )
    return sheet
