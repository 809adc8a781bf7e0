from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from numbers import Real
from typing import Optional, Union


@dataclass(frozen=True)
class EventRecord:
    """One athlete's placement in one event at one meet."""
    athlete_id: Union[int, str]
    event_type: str
    placement: int
    athlete_name: Optional[str] = None
    meet_id: Optional[Union[int, str]] = None
    season_id: Optional[Union[int, str]] = None
    points: Optional[Real] = None
    detail: Optional[Union[str, Real]] = None
    timestamp: Optional[datetime] = None

    def to_dict(self):
        data = asdict(self)
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp.isoformat()
        return data


@dataclass(frozen=True)
class AthleteStat:
    athlete_id: Union[int, str]
    athlete_name: str
    total_points: Real
    event_count: int
    distinct_meet_count: int
    points_per_event: float
    points_per_meet: float

    def to_dict(self):
        return asdict(self)
