"""Placement scoring: point tables, table selection and placement mapping."""
from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from numbers import Real
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .util.const_util import CONST

logger = logging.getLogger(__name__)

ScoringTable = Tuple[Real, ...]


class ScoringConfigError(ValueError):
    """Raised when a meet's scoring setup cannot produce a point table."""


@dataclass(frozen=True)
class EventTypeDefinition:
    name: str
    event_kind: str = CONST.EVENT_KIND.INDIVIDUAL
    measurement_kind: str = CONST.MEASUREMENT_KIND.MEASURED

    @classmethod
    def from_name(cls, name: str) -> "EventTypeDefinition":
        event_kind, measurement_kind = classify_event(name)
        return cls(name=name, event_kind=event_kind, measurement_kind=measurement_kind)

    @property
    def is_relay(self) -> bool:
        return self.event_kind == CONST.EVENT_KIND.RELAY

    @property
    def is_timed(self) -> bool:
        return self.measurement_kind == CONST.MEASUREMENT_KIND.TIMED


def classify_event(name: str) -> Tuple[str, str]:
    """Derive ``(event_kind, measurement_kind)`` from an event name.

    Names starting with a digit ("100m Dash", "4x400 Relay") are timed,
    everything else is measured. Any name mentioning "relay" is a relay.
    """
    text = (name or "").strip()
    event_kind = CONST.EVENT_KIND.RELAY if "relay" in text.lower() else CONST.EVENT_KIND.INDIVIDUAL
    if text and text[0] in string.digits:
        measurement_kind = CONST.MEASUREMENT_KIND.TIMED
    else:
        measurement_kind = CONST.MEASUREMENT_KIND.MEASURED
    return event_kind, measurement_kind


def as_definition(event: Union[str, EventTypeDefinition]) -> EventTypeDefinition:
    if isinstance(event, EventTypeDefinition):
        return event
    return EventTypeDefinition.from_name(event)


def _freeze_tables(tables: Optional[Mapping], label: str) -> Dict[int, ScoringTable]:
    if not tables:
        raise ScoringConfigError(f"No {label} scoring tables configured")
    return {int(num_teams): tuple(points) for num_teams, points in tables.items()}


@dataclass(frozen=True)
class ScoringConfig:
    """Point tables used to score placements.

    ``individual`` and ``relay`` are keyed by the number of competing teams.
    ``championship`` replaces both once ``championship_min_teams`` teams
    compete.
    """
    individual: Mapping[int, ScoringTable]
    relay: Mapping[int, ScoringTable]
    championship: ScoringTable = (10, 8, 6, 4, 2, 1)
    championship_min_teams: int = 5

    def __post_init__(self):
        object.__setattr__(self, "individual", _freeze_tables(self.individual, "individual"))
        object.__setattr__(self, "relay", _freeze_tables(self.relay, "relay"))
        object.__setattr__(self, "championship", tuple(self.championship))

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "ScoringConfig":
        """Build a config from Flask-style settings (``app.config``).

        An explicit ``RELAY_SCORING`` table wins; otherwise the table named by
        ``RELAY_SCORING_VARIANT`` is taken from ``RELAY_SCORING_VARIANTS``.
        """
        relay = mapping.get("RELAY_SCORING")
        if relay is None:
            variant = mapping.get("RELAY_SCORING_VARIANT")
            relay = (mapping.get("RELAY_SCORING_VARIANTS") or {}).get(variant)
            if relay is None:
                raise ScoringConfigError(f"Unknown relay scoring variant: {variant!r}")

        return cls(
            individual=mapping["INDIVIDUAL_SCORING"],
            relay=relay,
            championship=mapping.get("CHAMPIONSHIP_SCORING", cls.championship),
            championship_min_teams=int(mapping.get("CHAMPIONSHIP_MIN_TEAMS", 5)),
        )


def resolve_table(
    event: Union[str, EventTypeDefinition],
    num_teams: int,
    config: ScoringConfig,
) -> ScoringTable:
    """Select the point table for an event at a meet with ``num_teams`` teams."""
    if isinstance(num_teams, bool) or not isinstance(num_teams, int) or num_teams < 1:
        raise ScoringConfigError(f"Team count must be a positive integer, got {num_teams!r}")

    if num_teams >= config.championship_min_teams:
        return config.championship

    definition = as_definition(event)
    tables = config.relay if definition.is_relay else config.individual
    try:
        return tables[num_teams]
    except KeyError:
        kind = "relay" if definition.is_relay else "individual"
        logger.warning(
            "No %s scoring table for %d teams (event %r)", kind, num_teams, definition.name
        )
        raise ScoringConfigError(
            f"No {kind} scoring table for {num_teams} teams; "
            f"configured team counts: {sorted(tables)}"
        ) from None


def score_placements(table: Sequence[Real], placements: Sequence[int]) -> List[Real]:
    """Map each placement to its points; places outside the table score 0."""
    size = len(table)
    return [table[place - 1] if 1 <= place <= size else 0 for place in placements]


def calculate_scores(
    event: Union[str, EventTypeDefinition],
    num_teams: int,
    placements: Sequence[int],
    config: ScoringConfig,
) -> List[Real]:
    table = resolve_table(event, num_teams, config)
    return score_placements(table, placements)
