import random

import pytest

from teamgen.balance import (
    BalanceEngine,
    GenerationMode,
    score_from_spread,
    score_from_std_dev,
    team_sizes,
    validate_generation,
)
from teamgen.errors import EmptyPlayerList, InsufficientPlayers, InvalidTeamCount
from teamgen.models import Team

from tests.factories import make_pool


@pytest.mark.parametrize("mode", [GenerationMode.FAIR, GenerationMode.RANDOM])
def test_every_player_placed_exactly_once(mode):
    pool = make_pool([3, 7, 5, 9, 2, 6, 4, 8, 1, 10, 5])
    engine = BalanceEngine(rng=random.Random(7))

    teams = engine.generate_teams(pool, 3, mode)

    assert len(teams) == 3
    placed = [player_id for team in teams for player_id in team.player_ids]
    assert sorted(placed) == sorted(player.id for player in pool)
    assert len({team.id for team in teams}) == 3


def test_validate_generation_counts():
    assert validate_generation(5, 5).is_valid
    check = validate_generation(4, 5)
    assert not check.is_valid
    assert isinstance(check.error, InsufficientPlayers)
    assert check.error.required == 5
    assert check.error.available == 4


def test_validate_generation_order_of_checks():
    assert isinstance(validate_generation(0, 1).error, EmptyPlayerList)
    assert isinstance(validate_generation(3, 1).error, InvalidTeamCount)


def test_generate_raises_typed_errors():
    engine = BalanceEngine()
    with pytest.raises(EmptyPlayerList):
        engine.generate_teams([], 2, GenerationMode.FAIR)
    with pytest.raises(InvalidTeamCount):
        engine.generate_teams(make_pool([5, 5]), 1, GenerationMode.FAIR)
    with pytest.raises(InsufficientPlayers):
        engine.generate_teams(make_pool([5]), 2, GenerationMode.FAIR)


def test_fair_mode_balances_totals():
    pool = make_pool([9, 9, 1, 1, 5, 5, 5, 5])

    teams = BalanceEngine().generate_teams(pool, 2, GenerationMode.FAIR)

    assert [team.total_players for team in teams] == [4, 4]
    assert abs(teams[0].average_rank - teams[1].average_rank) < 1.0


def test_fair_mode_gives_remainder_to_first_teams():
    teams = BalanceEngine().generate_teams(make_pool([1, 2, 3, 4, 5, 6, 7]), 3, "fair")

    assert [team.total_players for team in teams] == [3, 2, 2]


def test_team_sizes_helper():
    assert team_sizes(7, 3) == [3, 2, 2]
    assert team_sizes(8, 4) == [2, 2, 2, 2]
    assert team_sizes(10, 4) == [3, 3, 2, 2]


def test_random_mode_is_reproducible_with_seed():
    pool = make_pool([1, 2, 3, 4, 5, 6, 7, 8])

    first = BalanceEngine(rng=random.Random(42)).generate_teams(pool, 2, GenerationMode.RANDOM)
    second = BalanceEngine(rng=random.Random(42)).generate_teams(pool, 2, GenerationMode.RANDOM)

    assert [team.player_ids for team in first] == [team.player_ids for team in second]
    assert [team.total_players for team in first] == [4, 4]


def test_balance_scores_are_idempotent():
    engine = BalanceEngine()
    teams = engine.generate_teams(make_pool([2, 9, 4, 7, 5, 6]), 2, GenerationMode.FAIR)

    first = [team.balance_score for team in engine.calculate_balance_scores(teams)]
    second = [team.balance_score for team in engine.calculate_balance_scores(teams)]

    assert first == second
    for team, score in zip(teams, first):
        assert score == pytest.approx(max(0.0, 1.0 - team.skill_std_dev / 5.0))
        assert 0.0 <= score <= 1.0


def test_score_from_std_dev_bounds():
    assert score_from_std_dev(0.0) == 1.0
    assert score_from_std_dev(2.5) == pytest.approx(0.5)
    assert score_from_std_dev(7.0) == 0.0


def test_measure_balance_reports_spread():
    engine = BalanceEngine()
    teams = engine.generate_teams(make_pool([9, 9, 1, 1, 5, 5, 5, 5]), 2, GenerationMode.FAIR)

    metrics = engine.measure_balance(teams)

    assert metrics.max_skill_difference == pytest.approx(0.0)
    assert metrics.is_well_balanced
    assert metrics.description == "Perfectly balanced"


def test_mode_parse():
    assert GenerationMode.parse("FAIR") is GenerationMode.FAIR
    assert GenerationMode.parse(GenerationMode.RANDOM) is GenerationMode.RANDOM
    with pytest.raises(ValueError):
        GenerationMode.parse("chaos")


def test_measure_balance_scores_gap_between_averages():
    engine = BalanceEngine()
    teams = [Team(make_pool([8, 8])), Team(make_pool([6, 6]))]

    metrics = engine.measure_balance(teams)

    assert metrics.max_skill_difference == pytest.approx(2.0)
    assert metrics.balance_score == pytest.approx(score_from_spread(2.0))
    assert metrics.balance_score == pytest.approx(0.6)
    assert not metrics.is_well_balanced
