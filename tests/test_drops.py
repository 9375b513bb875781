import logging

from pylineup.models import PlayerTransaction, TransactionPlayer
from pylineup.optimizer.drops import DropSelector, PlayerTransactions, select_drop_candidate

from tests.helpers import make_player, make_roster


def _roster(**extra):
    players = [
        make_player("g1", ["G"], "G", 5.0, ownership=1.0),
        make_player("c1", ["C"], "C", 6.0, ownership=10.0),
        make_player("b1", ["C"], "BN", 2.0, ownership=2.0, is_undroppable=True),
        make_player("b2", ["C"], "BN", 3.0, ownership=3.0, is_editable=False),
        make_player("h", ["C"], "IR", 4.0, ownership=8.0),
    ]
    return make_roster(players, {"C": 1, "G": 1, "BN": 2, "IR": 1}, **extra)


def test_lowest_ownership_droppable_player_is_chosen():
    roster = _roster(same_day_transactions=False)

    candidate = select_drop_candidate(roster, roster.get("h"), PlayerTransactions())

    # g1 is cheaper but is the only goalie; b1 is undroppable
    assert candidate is roster.get("b2")


def test_locked_players_are_protected_for_same_day_leagues():
    roster = _roster(same_day_transactions=True)

    assert select_drop_candidate(roster, roster.get("h"), PlayerTransactions()) is None


def test_players_already_dropped_are_skipped():
    roster = _roster(same_day_transactions=False)
    transactions = PlayerTransactions()
    transactions.add(
        PlayerTransaction(
            team_key=roster.team_key,
            same_day_transactions=False,
            players=[TransactionPlayer(player_key="b2", transaction_type="drop")],
        )
    )

    assert transactions.dropped_player_keys == ["b2"]
    assert select_drop_candidate(roster, roster.get("h"), transactions) is None


def test_ties_keep_first_player():
    roster = make_roster(
        [
            make_player("first", ["C"], "C", 1.0, ownership=3.0),
            make_player("second", ["C"], "BN", 1.0, ownership=3.0),
            make_player("h", ["C"], "IR", 4.0, ownership=5.0),
        ],
        {"C": 1, "BN": 1, "IR": 1},
    )

    assert select_drop_candidate(roster, roster.get("h"), PlayerTransactions()) is roster.get("first")


def test_missing_ownership_score_blocks_the_drop(caplog):
    roster = make_roster(
        [
            make_player("c1", ["C"], "C", 1.0, ownership=0.0),
            make_player("b1", ["C"], "BN", 1.0, ownership=4.0),
            make_player("h", ["C"], "IR", 4.0, ownership=5.0),
        ],
        {"C": 1, "BN": 1, "IR": 1},
    )

    with caplog.at_level(logging.WARNING, logger="pylineup.optimizer"):
        assert select_drop_candidate(roster, roster.get("h"), PlayerTransactions()) is None
    assert "ownership score is missing" in caplog.text


def test_drop_selector_emits_one_transaction_per_evicted_player():
    roster = _roster(same_day_transactions=False)
    transactions = PlayerTransactions()
    selector = DropSelector(roster, transactions)

    transaction = selector.drop_for(roster.get("h"))

    assert transaction is not None
    assert transaction.team_key == roster.team_key
    assert transaction.reason == "Dropping B2 to make room for H coming back from injury."
    assert [(p.player_key, p.transaction_type, p.is_inactive_list) for p in transaction.players] == [
        ("b2", "drop", False)
    ]
    assert selector.drop_for(roster.get("h")) is None
    assert len(transactions) == 1
