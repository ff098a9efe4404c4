from holdem.models import Stage

from .helpers import call_until, create_table, rig_table

BOARD = ["2h", "7d", "9c", "Js", "4h"]


def test_determine_winners_picks_the_lowest_rank():
    table = create_table(seats=3, deal=False)
    rig_table(table, {0: ["Ah", "Kd"], 1: ["9h", "9d"], 2: ["Jh", "3c"]}, BOARD)
    call_until(table, Stage.RIVER)

    assert table.determine_winners() == [1]
    assert table.ranks[1] < table.ranks[2] < table.ranks[0]


def test_board_is_revealed_in_deck_order():
    table = create_table(seats=3, deal=False)
    rig_table(table, {0: ["Ah", "Kd"], 1: ["9h", "9d"], 2: ["Jh", "3c"]}, BOARD)
    call_until(table, Stage.FLOP)
    assert [card.label for card in table.community] == ["2♥", "7♦", "9♣"]
    call_until(table, Stage.RIVER)
    assert [card.label for card in table.community] == ["2♥", "7♦", "9♣", "J♠", "4♥"]


def test_folded_seat_never_wins():
    table = create_table(seats=3, deal=False)
    rig_table(table, {0: ["Ah", "Kd"], 1: ["9h", "9d"], 2: ["Jh", "3c"]}, BOARD)
    call_until(table, Stage.RIVER)
    table.players[1].folded = True
    assert table.determine_winners() == [2]
    assert 1 not in table.ranks


def test_two_way_tie_returns_both_seats():
    table = create_table(seats=3, deal=False)
    rig_table(
        table,
        {0: ["Kc", "Qd"], 1: ["2c", "8s"], 2: ["Kh", "Qs"]},
        ["3h", "4d", "5c", "6s", "7h"],
    )
    call_until(table, Stage.RIVER)
    table.players[1].folded = True
    assert table.determine_winners() == [0, 2]


def test_distribute_even_pot_between_two_winners():
    table = create_table(seats=3)
    table.pot = 100
    table.winners = [0, 2]
    payouts = table.distribute_pot()
    assert payouts == {0: 50, 2: 50}
    assert table.players[0].chips == 1_050
    assert table.players[2].chips == 1_050
    assert table.pot == 0


def test_odd_chip_goes_to_winner_closest_to_dealers_left():
    table = create_table(seats=3, dealer=0)
    table.pot = 101
    table.winners = [0, 2]
    payouts = table.distribute_pot()
    assert sum(payouts.values()) == 101
    # Seat 2 sits closer to the dealer's left than the dealer itself.
    assert payouts == {2: 51, 0: 50}

    table.pot = 101
    table.winners = [1, 2]
    assert table.distribute_pot() == {1: 51, 2: 50}


def test_three_way_split_hands_out_every_chip():
    table = create_table(seats=4, dealer=2)
    table.pot = 100
    table.winners = [0, 1, 3]
    payouts = table.distribute_pot()
    assert payouts == {3: 34, 0: 33, 1: 33}


def test_showdown_pays_winner_and_reports_hands():
    table = create_table(seats=3, deal=False)
    rig_table(table, {0: ["Ah", "Kd"], 1: ["9h", "9d"], 2: ["Jh", "3c"]}, BOARD)
    table.bet(10)
    events = []
    while not table.concluded:
        events.extend(table.call())

    assert table.stage == Stage.SHOWDOWN
    assert len(table.community) == 5
    assert table.winners == [1]
    assert table.players[1].chips == 1_020
    assert table.pot == 0

    showdown = {event["seat"]: event["rank"] for event in events if event["ev"] == "SHOWDOWN"}
    assert showdown == {0: "high_card", 1: "three_of_a_kind", 2: "pair"}
    assert {"ev": "POT_AWARD", "seat": 1, "amount": 30} in events


def test_split_pot_at_showdown_conserves_chips():
    table = create_table(seats=3, deal=False)
    rig_table(
        table,
        {0: ["Kc", "Qd"], 1: ["Kh", "Qs"], 2: ["Kd", "Qc"]},
        ["3h", "4d", "5c", "6s", "7h"],
    )
    table.bet(10)
    while not table.concluded:
        table.call()
    assert table.winners == [0, 1, 2]
    assert [player.chips for player in table.players] == [1_000, 1_000, 1_000]
