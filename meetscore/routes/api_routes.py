from datetime import datetime

from flask import Response, current_app, jsonify, request
from . import api_bp
from ..queries import (
    get_seasons,
    add_season,
    get_meets,
    add_meet,
    get_athletes,
    add_athlete,
    get_event_types,
    get_or_create_event_type,
    add_meet_event_results,
    rescore_meet,
    delete_entity,
    get_event_records,
    get_leaderboard,
    get_athlete_by_id,
    get_athlete_personal_records,
    get_meet_score_sheet,
    get_scoring_config,
)
from .. import db
from ..reports import leaderboard_csv, score_sheet_csv
from ..scoring import ScoringConfigError, calculate_scores
from ..util.const_util import CONST


def _parse_datetime(data, key):
    value = data.get(key)
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError as exc:
        raise ValueError(f"Invalid datetime '{value}' for {key}") from exc


def _parse_season_filter():
    season = request.args.get('season', '').strip()
    if not season or season == CONST.ALL_SEASONS:
        return None
    try:
        return int(season)
    except ValueError as exc:
        raise ValueError(f"Invalid season '{season}'") from exc


def _parse_places(values):
    places = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Invalid place {value!r}")
        places.append(value)
    return places


def _season_json(s):
    return {
        'id': s.season_id,
        'name': s.name,
        'start': s.start.isoformat() if s.start else None,
        'end': s.end.isoformat() if s.end else None,
    }


def _meet_json(m):
    return {
        'id': m.meet_id,
        'name': m.name,
        'season_id': m.season_id,
        'num_teams': m.num_teams,
        'date': m.date.isoformat() if m.date else None,
        'location': m.location,
    }


def _event_type_json(t):
    return {'name': t.name, 'event_kind': t.event_kind, 'measurement_kind': t.measurement_kind}


@api_bp.route('/score', methods=['POST'])
def api_score():
    """Score placements without storing anything."""
    data = request.get_json() or {}
    event = data.get('event')
    num_teams = data.get('num_teams')
    places = data.get('places')
    if not event or num_teams is None or places is None:
        return jsonify({'error': 'event, num_teams and places are required'}), 400

    try:
        points = calculate_scores(event, num_teams, _parse_places(places), get_scoring_config())
    except ScoringConfigError as exc:
        current_app.logger.warning(f"Unscorable event {event!r}: {exc}")
        return jsonify({'error': str(exc)}), 400
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400

    return jsonify({'event': event, 'num_teams': num_teams, 'places': places, 'points': points})


@api_bp.route('/seasons')
def api_get_seasons():
    return jsonify([_season_json(s) for s in get_seasons()])


@api_bp.route('/seasons', methods=['POST'])
def api_add_season():
    data = request.get_json() or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'name required'}), 400
    try:
        season = add_season(name, start=_parse_datetime(data, 'start'), end=_parse_datetime(data, 'end'))
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify({'id': season.season_id}), 201


@api_bp.route('/meets')
def api_get_meets():
    try:
        season_id = _parse_season_filter()
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify([_meet_json(m) for m in get_meets(season_id)])


@api_bp.route('/meets', methods=['POST'])
def api_add_meet():
    data = request.get_json() or {}
    name = (data.get('name') or '').strip()
    season_id = data.get('season')
    num_teams = data.get('num_teams')
    if not name or season_id is None or num_teams is None:
        return jsonify({'error': 'name, season and num_teams required'}), 400
    try:
        meet = add_meet(
            name,
            season_id,
            num_teams,
            date=_parse_datetime(data, 'date'),
            location=data.get('location'),
        )
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify({'id': meet.meet_id}), 201


@api_bp.route('/athletes')
def api_get_athletes():
    try:
        season_id = _parse_season_filter()
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify([
        {'id': a.athlete_id, 'name': a.name, 'season_id': a.season_id}
        for a in get_athletes(season_id)
    ])


@api_bp.route('/athletes', methods=['POST'])
def api_add_athlete():
    data = request.get_json() or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'name required'}), 400
    a = add_athlete(name, season_id=data.get('season'))
    return jsonify({'id': a.athlete_id}), 201


@api_bp.route('/event-types')
def api_get_event_types():
    return jsonify([_event_type_json(t) for t in get_event_types()])


@api_bp.route('/event-types', methods=['POST'])
def api_add_event_type():
    data = request.get_json() or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'name required'}), 400

    event_kind = data.get('event_kind')
    measurement_kind = data.get('measurement_kind')
    if event_kind is not None and event_kind not in CONST.EVENT_KIND.ALL:
        return jsonify({'error': f'event_kind must be one of {CONST.EVENT_KIND.ALL}'}), 400
    if measurement_kind is not None and measurement_kind not in CONST.MEASUREMENT_KIND.ALL:
        return jsonify({'error': f'measurement_kind must be one of {CONST.MEASUREMENT_KIND.ALL}'}), 400

    event_type = get_or_create_event_type(name, event_kind=event_kind, measurement_kind=measurement_kind)
    db.session.commit()
    return jsonify(_event_type_json(event_type)), 201


@api_bp.route('/meets/<int:mid>/results', methods=['POST'])
def api_add_meet_results(mid):
    data = request.get_json() or {}
    event = (data.get('event') or '').strip()
    athletes = data.get('athletes')
    places = data.get('places')
    details = data.get('details')
    if not event or athletes is None or places is None:
        return jsonify({'error': 'event, athletes and places are required'}), 400
    if not isinstance(athletes, list) or not isinstance(places, list):
        return jsonify({'error': 'athletes and places must be lists'}), 400
    if details is None:
        details = [None] * len(athletes)
    elif not isinstance(details, list):
        return jsonify({'error': 'details must be a list'}), 400
    if any(isinstance(a, bool) or not isinstance(a, int) for a in athletes):
        return jsonify({'error': 'athletes must be athlete ids'}), 400
    if not (len(athletes) == len(places) == len(details)):
        return jsonify({'error': 'athletes, places and details must have the same length'}), 400

    try:
        entries = [
            {'athlete_id': athlete_id, 'place': place, 'details': detail}
            for athlete_id, place, detail in zip(athletes, _parse_places(places), details)
        ]
        results = add_meet_event_results(mid, event, entries)
    except ScoringConfigError as exc:
        current_app.logger.warning(f"Rejected results for meet {mid}: {exc}")
        return jsonify({'error': str(exc)}), 400
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400

    if results is None:
        return jsonify({'error': 'not found'}), 404
    return jsonify([
        {'id': r.event_id, 'athlete_id': r.athlete_id, 'place': r.place, 'points': r.points}
        for r in results
    ]), 201


@api_bp.route('/meets/<int:mid>/rescore', methods=['POST'])
def api_rescore_meet(mid):
    try:
        changed = rescore_meet(mid)
    except ScoringConfigError as exc:
        return jsonify({'error': str(exc)}), 400
    if changed is None:
        return jsonify({'error': 'not found'}), 404
    return jsonify({'meet_id': mid, 'changed': changed})


@api_bp.route('/meets/<int:mid>/score-sheet')
def api_get_meet_score_sheet(mid):
    data = get_meet_score_sheet(mid)
    if not data:
        return jsonify({'error': 'not found'}), 404
    return jsonify(data)


@api_bp.route('/meets/<int:mid>/score-sheet.csv')
def api_get_meet_score_sheet_csv(mid):
    data = get_meet_score_sheet(mid)
    if not data:
        return jsonify({'error': 'not found'}), 404
    return Response(
        score_sheet_csv(data['events']),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename=meet-{mid}-score-sheet.csv'},
    )


@api_bp.route('/athletes/<int:aid>/events')
def api_get_athlete_events(aid):
    if not get_athlete_by_id(aid):
        return jsonify({'error': 'not found'}), 404
    return jsonify([record.to_dict() for record in get_event_records(athlete_id=aid)])


@api_bp.route('/athletes/<int:aid>/personal-records')
def api_get_personal_records(aid):
    data = get_athlete_personal_records(aid)
    if data is None:
        return jsonify({'error': 'not found'}), 404
    return jsonify(data)


def _leaderboard_from_args():
    season_id = _parse_season_filter()
    sort_key = request.args.get('sort', CONST.SORT_KEY.TOTAL_POINTS)
    return get_leaderboard(season_id=season_id, sort_key=sort_key)


@api_bp.route('/leaderboard')
def api_get_leaderboard():
    try:
        stats = _leaderboard_from_args()
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify([stat.to_dict() for stat in stats])


@api_bp.route('/leaderboard.csv')
def api_get_leaderboard_csv():
    try:
        stats = _leaderboard_from_args()
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    return Response(
        leaderboard_csv(stats),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=leaderboard.csv'},
    )


@api_bp.route('/<table>/<int:entity_id>', methods=['DELETE'])
def api_delete_entity(table, entity_id):
    if table not in CONST.TABLE.ALL:
        return jsonify({'error': f'cannot delete from {table}'}), 400
    if not delete_entity(table, entity_id):
        return jsonify({'error': 'not found'}), 404
    return jsonify({'success': True, 'deletedId': entity_id})
