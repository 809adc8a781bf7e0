import pytest

from meetscore.leaderboard import build_leaderboard, build_score_sheet, ordinal
from meetscore.records import EventRecord
from meetscore.util.const_util import CONST


def record(athlete_id, points, meet_id=None, season_id=None, name=None, event_type='100m Dash', placement=1):
    return EventRecord(
        athlete_id=athlete_id,
        athlete_name=name,
        event_type=event_type,
        placement=placement,
        meet_id=meet_id,
        season_id=season_id,
        points=points,
    )


def test_totals_for_one_athlete():
    events = [
        record('a1', 5, meet_id='m1', name='Sam'),
        record('a1', 3, meet_id='m1', name='Sam'),
        record('a1', 0, meet_id='m2', name='Sam'),
    ]
    [stat] = build_leaderboard(events)
    assert stat.athlete_name == 'Sam'
    assert stat.total_points == 8
    assert stat.event_count == 3
    assert stat.distinct_meet_count == 2
    assert stat.points_per_event == pytest.approx(2.67, abs=0.01)
    assert stat.points_per_meet == 4.0


def test_missing_points_and_meets():
    events = [record('a1', None), record('a1', 4)]
    [stat] = build_leaderboard(events)
    assert stat.total_points == 4
    assert stat.event_count == 2
    assert stat.distinct_meet_count == 0
    assert stat.points_per_meet == 4.0
    assert stat.points_per_event == 2.0


def test_groups_by_athlete_id_not_name():
    events = [record(1, 5, name='Alex Kim'), record(2, 3, name='Alex Kim')]
    stats = build_leaderboard(events)
    assert [stat.athlete_id for stat in stats] == [1, 2]


def test_missing_name_defaults():
    [stat] = build_leaderboard([record(1, 5)])
    assert stat.athlete_name == 'Athlete'


def test_season_filter():
    events = [
        record(1, 10, meet_id=1, season_id=2024),
        record(2, 6, meet_id=2, season_id=2025),
        record(1, 1, meet_id=2, season_id=2025),
    ]
    stats = build_leaderboard(events, season_filter=2025)
    assert [(s.athlete_id, s.total_points) for s in stats] == [(2, 6), (1, 1)]

    everything = build_leaderboard(events, season_filter=CONST.ALL_SEASONS)
    assert [(s.athlete_id, s.total_points) for s in everything] == [(1, 11), (2, 6)]


def test_meet_filter():
    events = [record(1, 10, meet_id=1), record(2, 6, meet_id=2), record(1, 1, meet_id=2)]
    stats = build_leaderboard(events, meet_filter=2)
    assert [(s.athlete_id, s.total_points) for s in stats] == [(2, 6), (1, 1)]


def test_sort_keys():
    events = [
        record(1, 6, meet_id=1), record(1, 6, meet_id=2), record(1, 0, meet_id=3),
        record(2, 10, meet_id=1),
    ]
    by_total = build_leaderboard(events, sort_key=CONST.SORT_KEY.TOTAL_POINTS)
    assert [s.athlete_id for s in by_total] == [1, 2]

    by_meet = build_leaderboard(events, sort_key=CONST.SORT_KEY.POINTS_PER_MEET)
    assert [s.athlete_id for s in by_meet] == [2, 1]

    by_event = build_leaderboard(events, sort_key=CONST.SORT_KEY.POINTS_PER_EVENT)
    assert [s.athlete_id for s in by_event] == [2, 1]

    by_meets = build_leaderboard(events, sort_key=CONST.SORT_KEY.NUM_MEETS)
    assert [s.athlete_id for s in by_meets] == [1, 2]


def test_ties_keep_first_seen_order():
    events = [record('c', 5), record('a', 8), record('b', 5), record('d', 5)]
    stats = build_leaderboard(events)
    assert [s.athlete_id for s in stats] == ['a', 'c', 'b', 'd']


def test_repeated_calls_are_identical():
    events = [record(i % 4, i % 3, meet_id=i % 5) for i in range(20)]
    assert build_leaderboard(events, sort_key=CONST.SORT_KEY.POINTS_PER_MEET) == \
        build_leaderboard(events, sort_key=CONST.SORT_KEY.POINTS_PER_MEET)


def test_unknown_sort_key():
    with pytest.raises(ValueError):
        build_leaderboard([], sort_key='fastest')


def test_empty_input():
    assert build_leaderboard([]) == []
    assert build_score_sheet([]) == []


def test_input_is_not_mutated():
    events = [record(1, 5, meet_id=1), record(2, 3, meet_id=1)]
    snapshot = list(events)
    build_leaderboard(events)
    assert events == snapshot


def test_ordinal():
    assert [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 101, 112)] == [
        '1st', '2nd', '3rd', '4th', '11th', '12th', '13th', '21st', '22nd', '101st', '112th',
    ]


def test_score_sheet_groups_and_orders_results():
    events = [
        record(1, 3, meet_id=1, name='B', event_type='100m Dash', placement=2),
        record(2, 10, meet_id=1, name='A', event_type='Long Jump', placement=1),
        record(3, 5, meet_id=1, name='C', event_type='100m Dash', placement=1),
        record(4, 0, meet_id=1, name='D', event_type='100m Dash', placement=0),
    ]
    sheet = build_score_sheet(events)
    assert [group['event'] for group in sheet] == ['100m Dash', 'Long Jump']

    dash = sheet[0]
    assert dash['total_points'] == 8
    assert [r['athlete_name'] for r in dash['results']] == ['C', 'B', 'D']
    assert [r['place_label'] for r in dash['results']] == ['1st', '2nd', '–']
