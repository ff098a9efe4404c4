import pytest

from holdem.errors import NoEligiblePlayersError
from holdem.models import Stage
from holdem.table import PokerTable

from .helpers import create_table, make_players


def test_next_active_position_never_selects_inactive_seat():
    table = create_table(seats=6, inactive=(1, 4), deal=False)
    for start in range(6):
        chosen = table.next_active_position(start)
        assert table.players[chosen].is_active
        # Nothing eligible was skipped on the way.
        step = (start + 1) % 6
        while step != chosen:
            assert not table.players[step].is_active
            step = (step + 1) % 6


def test_next_active_not_folded_position_skips_folded_and_inactive():
    table = create_table(seats=6, inactive=(2,), deal=False)
    table.players[3].folded = True
    table.players[5].folded = True
    for start in range(6):
        chosen = table.next_active_not_folded_position(start)
        player = table.players[chosen]
        assert player.is_active and not player.folded
    assert table.next_active_not_folded_position(1) == 4
    assert table.next_active_not_folded_position(4) == 0


def test_next_active_position_ignores_folded_status():
    table = create_table(seats=3, deal=False)
    table.players[1].folded = True
    assert table.next_active_position(0) == 1


def test_rotation_returns_start_when_it_is_the_only_candidate():
    table = create_table(seats=3, deal=False)
    table.players[0].folded = True
    table.players[2].folded = True
    assert table.next_active_not_folded_position(1) == 1


def test_rotation_without_candidates_raises():
    table = create_table(seats=3, deal=False)
    for player in table.players:
        player.folded = True
    with pytest.raises(NoEligiblePlayersError):
        table.next_active_not_folded_position(0)


def test_construction_assigns_blinds_from_dealer():
    table = create_table(seats=3, dealer=0, deal=False)
    assert table.small_blind == 1
    assert table.big_blind == 2
    assert table.current_player == 1
    assert table.stage == Stage.DRAW
    assert table.pot == 0
    assert table.community == []


def test_construction_skips_inactive_seats_for_blinds():
    table = create_table(seats=5, dealer=4, inactive=(0, 2), deal=False)
    assert table.small_blind == 1
    assert table.big_blind == 3
    assert table.current_player == 1


def test_construction_wraps_blinds_around_the_table():
    table = create_table(seats=3, dealer=2, deal=False)
    assert (table.small_blind, table.big_blind) == (0, 1)


def test_construction_rejects_bad_dealer_or_empty_table():
    with pytest.raises(ValueError, match="out of range"):
        PokerTable("gc", make_players(3), 3, 5, 10)
    with pytest.raises(NoEligiblePlayersError):
        PokerTable("gc", make_players(3, inactive=(0, 1, 2)), 0, 5, 10)
    with pytest.raises(NoEligiblePlayersError):
        PokerTable("gc", [], 0, 5, 10)


def test_advance_dealer_moves_button_and_blinds():
    table = create_table(seats=4, dealer=0, inactive=(2,), deal=False)
    assert (table.small_blind, table.big_blind) == (1, 3)
    table.advance_dealer()
    assert table.dealer_position == 1
    assert table.small_blind == 3
    assert table.big_blind == 0
    assert table.current_player == 3
