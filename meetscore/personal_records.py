from __future__ import annotations

from numbers import Real
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .records import EventRecord
from .scoring import EventTypeDefinition, as_definition
from .util.conversion_util import Conversion


def _has_detail(detail) -> bool:
    if detail is None:
        return False
    if isinstance(detail, str):
        return bool(detail.strip())
    return True


def format_personal_record(value: Optional[Real], definition: EventTypeDefinition) -> str:
    if value is None:
        return ""
    if definition.is_timed:
        return Conversion.seconds_to_time(value)
    return Conversion.format_mark(value)


def _best_value(details: List, definition: EventTypeDefinition) -> Optional[Real]:
    values = [Conversion.parse_performance(detail) for detail in details]
    valid = [value for value in values if value is not None]
    if not valid:
        return None
    return min(valid) if definition.is_timed else max(valid)


def compute_personal_records(
    events: Iterable[EventRecord],
    event_types: Optional[Mapping[str, Union[str, EventTypeDefinition]]] = None,
) -> Dict[str, str]:
    """Return the display-formatted PR for every event type an athlete has contested.

    Timed events keep the lowest time, measured events the biggest mark.
    Event types with no usable mark map to ``""``. ``event_types`` supplies
    stored definitions; names missing from it are classified from the name.
    """
    event_types = event_types or {}
    details_by_type: Dict[str, List] = {}
    for event in events:
        bucket = details_by_type.setdefault(event.event_type, [])
        if _has_detail(event.detail):
            bucket.append(event.detail)

    personal_records = {}
    for event_name, details in details_by_type.items():
        definition = as_definition(event_types.get(event_name, event_name))
        personal_records[event_name] = format_personal_record(
            _best_value(details, definition), definition
        )
    return personal_records
