import pytest

from teamgen.balance import GenerationMode
from teamgen.config import GenerationRules
from teamgen.errors import GenerationFailed, InsufficientPlayers, InvalidTeamCount
from teamgen.generation import (
    RecommendationKind,
    WarningKind,
    assess_pool,
    check_player_integrity,
    estimate_balance,
    preview_distribution,
)
from teamgen.models import Player, PlayerSkills

from tests.factories import make_pool


RULES = GenerationRules()


def _kinds(items):
    return [item.kind for item in items]


def test_team_count_checked_before_pool():
    validation = assess_pool([], 1, GenerationMode.FAIR, RULES)

    assert not validation.is_valid
    assert isinstance(validation.error, InvalidTeamCount)


def test_short_pool_is_invalid():
    validation = assess_pool(make_pool([5, 5]), 3, GenerationMode.FAIR, RULES)

    assert not validation.is_valid
    assert isinstance(validation.error, InsufficientPlayers)


def test_small_teams_recommend_fewer_teams():
    validation = assess_pool(make_pool([5, 5, 5, 6, 6, 6]), 4, GenerationMode.FAIR, RULES)

    assert validation.is_valid
    assert WarningKind.SMALL_TEAM_SIZE in _kinds(validation.warnings)
    adjust = [r for r in validation.recommendations if r.kind is RecommendationKind.ADJUST_TEAM_COUNT]
    assert adjust[0].suggested == 3


def test_large_teams_recommend_more_teams():
    validation = assess_pool(make_pool([5] * 20), 2, GenerationMode.FAIR, RULES)

    assert WarningKind.LARGE_TEAM_SIZE in _kinds(validation.warnings)
    adjust = [r for r in validation.recommendations if r.kind is RecommendationKind.ADJUST_TEAM_COUNT]
    assert adjust[0].suggested == 3


def test_skill_gap_suggests_fair_mode_only_for_random():
    pool = make_pool([1, 9, 5, 5, 5, 5, 5, 5])

    random_validation = assess_pool(pool, 2, GenerationMode.RANDOM, RULES)
    fair_validation = assess_pool(pool, 2, GenerationMode.FAIR, RULES)

    assert WarningKind.SIGNIFICANT_SKILL_GAP in _kinds(random_validation.warnings)
    assert RecommendationKind.USE_FAIR_MODE in _kinds(random_validation.recommendations)
    assert RecommendationKind.USE_FAIR_MODE not in _kinds(fair_validation.recommendations)


def test_add_more_players_recommendation():
    validation = assess_pool(make_pool([5, 5, 5, 5, 5, 5]), 2, GenerationMode.FAIR, RULES)

    add_more = [r for r in validation.recommendations if r.kind is RecommendationKind.ADD_MORE_PLAYERS]
    assert add_more[0].suggested == 2
    assert validation.warnings == []


def test_threshold_comes_from_rules():
    pool = make_pool([4, 6, 5, 5])
    strict = RULES.with_overrides(skill_gap_threshold=1.0)

    assert WarningKind.SIGNIFICANT_SKILL_GAP not in _kinds(assess_pool(pool, 2, GenerationMode.FAIR, RULES).warnings)
    assert WarningKind.SIGNIFICANT_SKILL_GAP in _kinds(assess_pool(pool, 2, GenerationMode.FAIR, strict).warnings)


def test_estimate_balance():
    assert estimate_balance(make_pool([5, 5, 5]), GenerationMode.FAIR) == pytest.approx(1.0)
    assert estimate_balance(make_pool([1, 9]), GenerationMode.RANDOM) == pytest.approx(0.5)
    assert estimate_balance(make_pool([1, 9]), GenerationMode.FAIR) == pytest.approx(0.2)


def test_integrity_check_accepts_valid_pool():
    check_player_integrity(make_pool([1, 10, 5]))


def test_integrity_check_rejects_blank_name():
    blank = Player(name="", skills=PlayerSkills(technical=5, agility=5, endurance=5, teamwork=5))
    with pytest.raises(GenerationFailed):
        check_player_integrity([blank])


def test_preview_distribution_uses_sorted_slices():
    preview = preview_distribution(make_pool([2, 8, 4, 6]), 2)

    assert preview.players_per_team == [2, 2]
    assert preview.skill_distribution == pytest.approx([7.0, 3.0])
    assert preview.estimated_balance == pytest.approx(0.6)


def test_preview_of_even_pool_is_perfect():
    preview = preview_distribution(make_pool([5, 5, 5, 5]), 2)

    assert preview.estimated_balance == 1.0
