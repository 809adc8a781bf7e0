import pytest

from config import RELAY_SCORING_VARIANTS
from meetscore.scoring import (
    EventTypeDefinition,
    ScoringConfig,
    ScoringConfigError,
    calculate_scores,
    classify_event,
    resolve_table,
    score_placements,
)
from meetscore.util.const_util import CONST

INDIVIDUAL = {2: [5, 3, 1], 3: [5, 3, 2, 1], 4: [6, 4, 3, 2, 1]}


@pytest.fixture
def config():
    return ScoringConfig(individual=INDIVIDUAL, relay=RELAY_SCORING_VARIANTS['whole'])


def test_classify_event():
    assert classify_event('100m Dash') == (CONST.EVENT_KIND.INDIVIDUAL, CONST.MEASUREMENT_KIND.TIMED)
    assert classify_event('4x400 Relay') == (CONST.EVENT_KIND.RELAY, CONST.MEASUREMENT_KIND.TIMED)
    assert classify_event('Long Jump') == (CONST.EVENT_KIND.INDIVIDUAL, CONST.MEASUREMENT_KIND.MEASURED)
    assert classify_event('Shuttle RELAY') == (CONST.EVENT_KIND.RELAY, CONST.MEASUREMENT_KIND.MEASURED)


def test_resolve_individual_table(config):
    assert resolve_table('100m Dash', 3, config) == (5, 3, 2, 1)


def test_resolve_relay_table(config):
    assert resolve_table('4x100 Relay', 3, config) == (5, 3, 1)


def test_resolve_championship_table_overrides_event_kind(config):
    assert resolve_table('Long Jump', 6, config) == (10, 8, 6, 4, 2, 1)
    assert resolve_table('4x100 Relay', 5, config) == (10, 8, 6, 4, 2, 1)


def test_resolve_uses_stored_definition_over_name(config):
    definition = EventTypeDefinition('Medley', event_kind=CONST.EVENT_KIND.RELAY)
    assert resolve_table(definition, 2, config) == (5, 3)


def test_relay_table_is_configurable():
    fractional = ScoringConfig(individual=INDIVIDUAL, relay=RELAY_SCORING_VARIANTS['fractional'])
    assert resolve_table('4x400 Relay', 4, fractional) == (1.5, 1, 0.5)


@pytest.mark.parametrize('num_teams', [1, 0, -3, 2.5, '3', None, True])
def test_resolve_rejects_unscorable_team_counts(config, num_teams):
    with pytest.raises(ScoringConfigError):
        resolve_table('100m Dash', num_teams, config)


def test_resolve_missing_table_is_config_error():
    config = ScoringConfig(individual={3: [5, 3, 2, 1]}, relay={3: [5, 3, 1]})
    with pytest.raises(ScoringConfigError):
        resolve_table('100m Dash', 2, config)


def test_scoring_config_requires_relay_table():
    with pytest.raises(ScoringConfigError):
        ScoringConfig(individual=INDIVIDUAL, relay={})


def test_from_mapping_unknown_variant():
    mapping = {'INDIVIDUAL_SCORING': INDIVIDUAL, 'RELAY_SCORING': None, 'RELAY_SCORING_VARIANT': 'bogus'}
    with pytest.raises(ScoringConfigError):
        ScoringConfig.from_mapping(mapping)


def test_from_mapping_picks_named_relay_variant():
    mapping = {
        'INDIVIDUAL_SCORING': INDIVIDUAL,
        'RELAY_SCORING': None,
        'RELAY_SCORING_VARIANT': 'fractional',
        'RELAY_SCORING_VARIANTS': RELAY_SCORING_VARIANTS,
    }
    config = ScoringConfig.from_mapping(mapping)
    assert resolve_table('4x400 Relay', 2, config) == (1.25, 0.75)

    # an explicit table wins over the variant name
    mapping['RELAY_SCORING'] = {2: [9, 7]}
    assert resolve_table('4x400 Relay', 2, ScoringConfig.from_mapping(mapping)) == (9, 7)


def test_from_mapping_normalizes_string_keys():
    mapping = {
        'INDIVIDUAL_SCORING': {'2': [5, 3, 1]},
        'RELAY_SCORING': {'2': [5, 3]},
        'CHAMPIONSHIP_SCORING': [10, 8, 6],
        'CHAMPIONSHIP_MIN_TEAMS': 3,
    }
    config = ScoringConfig.from_mapping(mapping)
    assert resolve_table('100m Dash', 2, config) == (5, 3, 1)
    assert resolve_table('100m Dash', 3, config) == (10, 8, 6)


def test_score_placements():
    assert score_placements((5, 3, 2, 1), [1, 2, 3, 4]) == [5, 3, 2, 1]
    assert score_placements((5, 3, 2, 1), [4, 1]) == [1, 5]


def test_score_placements_is_total():
    table = (10, 8, 6, 4, 2, 1)
    placements = [0, -1, -100, 7, 50, 6]
    assert score_placements(table, placements) == [0, 0, 0, 0, 0, 1]


def test_score_placements_is_idempotent():
    table = (6, 4, 3, 2, 1)
    placements = [3, 1, 9, 2]
    assert score_placements(table, placements) == score_placements(table, placements)


def test_score_placements_empty():
    assert score_placements((5, 3), []) == []


def test_calculate_scores(config):
    assert calculate_scores('4x400 Relay', 4, [1, 2, 3, 4], config) == [6, 4, 2, 0]
    assert calculate_scores('Shot Put', 2, [2, 1], config) == [3, 5]
