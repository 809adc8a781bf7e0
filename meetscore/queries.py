import logging

from flask import current_app
from sqlalchemy.orm import joinedload

from .models import Season, Meet, Athlete, EventType, EventResult
from . import db
from .leaderboard import build_leaderboard, build_score_sheet
from .personal_records import compute_personal_records
from .scoring import ScoringConfig, EventTypeDefinition, resolve_table, score_placements
from .util.const_util import CONST

logger = logging.getLogger(__name__)

MIN_TEAMS = 2

_DELETABLE_MODELS = {
    CONST.TABLE.SEASONS: Season,
    CONST.TABLE.MEETS: Meet,
    CONST.TABLE.ATHLETES: Athlete,
    CONST.TABLE.EVENTS: EventResult,
}


def get_scoring_config():
    return ScoringConfig.from_mapping(current_app.config)


# Seasons

def get_seasons():
    return Season.query.order_by(Season.start, Season.season_id).all()


def add_season(name, start=None, end=None):
    season = Season(name=name, start=start, end=end)
    db.session.add(season)
    db.session.commit()
    return season


# Meets

def get_meets(season_id=None):
    query = Meet.query
    if season_id is not None:
        query = query.filter_by(season_id=season_id)
    return query.order_by(Meet.date, Meet.meet_id).all()


def get_meet_by_id(mid):
    return db.session.get(Meet, mid)


def add_meet(name, season_id, num_teams, date=None, location=None):
    """Create a meet. ``num_teams`` drives which point table scores its events."""
    if isinstance(num_teams, bool) or not isinstance(num_teams, int) or num_teams < MIN_TEAMS:
        raise ValueError(f"num_teams must be an integer >= {MIN_TEAMS}")

    meet = Meet(
        name=name,
        season_id=season_id,
        num_teams=num_teams,
        date=date,
        location=location,
    )
    db.session.add(meet)
    db.session.commit()
    return meet


# Athletes

def get_athletes(season_id=None):
    query = Athlete.query
    if season_id is not None:
        query = query.filter_by(season_id=season_id)
    return query.order_by(Athlete.name, Athlete.athlete_id).all()


def get_athlete_by_id(aid):
    return db.session.get(Athlete, aid)


def add_athlete(name, season_id=None):
    athlete = Athlete(name=name, season_id=season_id)
    db.session.add(athlete)
    db.session.commit()
    return athlete


# Event types

def get_event_types():
    return EventType.query.order_by(EventType.name).all()


def get_or_create_event_type(name, event_kind=None, measurement_kind=None):
    """Look up an event type, classifying and storing it on first use.

    Explicit ``event_kind``/``measurement_kind`` override the name-based
    classification; they only apply when the type is created.
    """
    name = name.strip()
    event_type = db.session.get(EventType, name)
    if event_type:
        return event_type

    definition = EventTypeDefinition.from_name(name)
    event_type = EventType(
        name=name,
        event_kind=event_kind or definition.event_kind,
        measurement_kind=measurement_kind or definition.measurement_kind,
    )
    db.session.add(event_type)
    db.session.flush()
    return event_type


def _event_type_definitions():
    return {event_type.name: event_type.to_definition() for event_type in EventType.query.all()}


# Results

def add_meet_event_results(meet_id, event_name, entries):
    """Score and store one event's placements at a meet.

    ``entries`` is a list of dicts with ``athlete_id``, ``place`` and an
    optional ``details`` mark. Returns the stored rows, or ``None`` when the
    meet does not exist. A ``ScoringConfigError`` is raised before anything
    is written when the meet's team count has no point table.
    """
    meet = get_meet_by_id(meet_id)
    if not meet:
        return None

    unknown = sorted({
        entry["athlete_id"] for entry in entries
        if db.session.get(Athlete, entry["athlete_id"]) is None
    })
    if unknown:
        raise ValueError(f"Unknown athlete id(s): {unknown}")

    event_type = get_or_create_event_type(event_name)
    try:
        table = resolve_table(event_type.to_definition(), meet.num_teams, get_scoring_config())
    except ValueError:
        db.session.rollback()
        raise

    points = score_placements(table, [entry["place"] for entry in entries])

    results = []
    for entry, awarded in zip(entries, points):
        result = EventResult(
            athlete_id=entry["athlete_id"],
            meet_id=meet.meet_id,
            event_type=event_type.name,
            place=entry["place"],
            points=awarded,
            details=entry.get("details"),
        )
        db.session.add(result)
        results.append(result)
    db.session.commit()

    logger.info(
        "Stored %d result(s) for %r at meet %s", len(results), event_type.name, meet.meet_id
    )
    return results


def rescore_meet(meet_id):
    """Recompute stored points for every result of a meet.

    Returns the number of results whose points changed, or ``None`` when
    the meet does not exist.
    """
    meet = get_meet_by_id(meet_id)
    if not meet:
        return None

    config = get_scoring_config()
    definitions = _event_type_definitions()
    by_event = {}
    for result in meet.results:
        by_event.setdefault(result.event_type, []).append(result)

    tables = {}
    try:
        for event_name in by_event:
            definition = definitions.get(event_name) or EventTypeDefinition.from_name(event_name)
            tables[event_name] = resolve_table(definition, meet.num_teams, config)
    except ValueError:
        db.session.rollback()
        raise

    changed = 0
    for event_name, results in by_event.items():
        table = tables[event_name]
        for result, awarded in zip(results, score_placements(table, [r.place for r in results])):
            if result.points != awarded:
                result.points = awarded
                changed += 1
    db.session.commit()

    logger.info("Rescored meet %s: %d result(s) changed", meet.meet_id, changed)
    return changed


def delete_entity(table, entity_id):
    model = _DELETABLE_MODELS.get(table)
    if model is None:
        raise ValueError(f"Unknown table {table!r}")

    entity = db.session.get(model, entity_id)
    if not entity:
        return False

    db.session.delete(entity)
    db.session.commit()
    logger.info("Deleted %s %s", table, entity_id)
    return True


def get_event_records(season_id=None, meet_id=None, athlete_id=None):
    query = (
        EventResult.query
        .options(joinedload(EventResult.athlete), joinedload(EventResult.meet))
        .join(Meet, EventResult.meet_id == Meet.meet_id)
    )
    if season_id is not None:
        query = query.filter(Meet.season_id == season_id)
    if meet_id is not None:
        query = query.filter(EventResult.meet_id == meet_id)
    if athlete_id is not None:
        query = query.filter(EventResult.athlete_id == athlete_id)

    results = query.order_by(EventResult.created_at, EventResult.event_id).all()
    return [result.to_record() for result in results]


def get_leaderboard(season_id=None, sort_key=CONST.SORT_KEY.TOTAL_POINTS):
    return build_leaderboard(get_event_records(), season_filter=season_id, sort_key=sort_key)


def get_athlete_personal_records(athlete_id):
    athlete = get_athlete_by_id(athlete_id)
    if not athlete:
        return None

    records = get_event_records(athlete_id=athlete_id)
    return compute_personal_records(records, event_types=_event_type_definitions())


def get_meet_score_sheet(meet_id):
    meet = get_meet_by_id(meet_id)
    if not meet:
        return None

    records = get_event_records(meet_id=meet_id)
    return {
        "meet_id": meet.meet_id,
        "name": meet.name,
        "num_teams": meet.num_teams,
        "events": build_score_sheet(records),
        "athletes": [stat.to_dict() for stat in build_leaderboard(records)],
    }
