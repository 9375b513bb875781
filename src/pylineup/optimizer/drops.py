"""Choose which rostered player to release when an inactive slot cannot be freed."""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from pylineup.models import PlayerTransaction, TransactionPlayer

from .roster import Roster, RosterPlayer


logger = logging.getLogger(__name__)


class PlayerTransactions:
    """Transactions produced during one optimization run."""

    def __init__(self) -> None:
        self._transactions: List[PlayerTransaction] = []

    def add(self, transaction: PlayerTransaction) -> None:
        self._transactions.append(transaction)

    @property
    def transactions(self) -> List[PlayerTransaction]:
        return list(self._transactions)

    @property
    def dropped_player_keys(self) -> List[str]:
        return [
            player.player_key
            for transaction in self._transactions
            for player in transaction.players
            if player.transaction_type == "drop"
        ]

    def __len__(self) -> int:
        return len(self._transactions)


def is_too_late_to_drop(roster: Roster, player: RosterPlayer) -> bool:
    return roster.same_day_transactions and not player.is_editable


def select_drop_candidate(
    roster: Roster,
    evicted: RosterPlayer,
    transactions: PlayerTransactions,
) -> Optional[RosterPlayer]:
    """Lowest-ownership droppable player, or ``None`` when nobody beats ``evicted``.

    Undroppable players, players already being dropped, locked players in a
    same-day league and anyone eligible at a critical position are protected.
    Ties keep the first player encountered.
    """

    critical = roster.critical_positions
    already_dropped: Set[str] = set(transactions.dropped_player_keys)

    choice = evicted
    for player in roster.all_players:
        if player.is_undroppable:
            continue
        if is_too_late_to_drop(roster, player):
            continue
        if player.player_key in already_dropped:
            continue
        if player.is_eligible_for_any_position_in(critical):
            continue
        if player.compare_ownership_score(choice) < 0:
            choice = player

    if choice is evicted:
        return None
    if not choice.ownership_score:
        logger.warning(
            "Refusing to drop %s from team %s: ownership score is missing",
            choice.player_key,
            roster.team_key,
        )
        return None
    return choice


class DropSelector:
    """Emits at most one drop transaction per evicted player."""

    def __init__(self, roster: Roster, transactions: PlayerTransactions):
        self.roster = roster
        self.transactions = transactions
        self._handled: Set[str] = set()

    def drop_for(self, evicted: RosterPlayer) -> Optional[PlayerTransaction]:
        if evicted.player_key in self._handled:
            return None
        self._handled.add(evicted.player_key)

        candidate = select_drop_candidate(self.roster, evicted, self.transactions)
        if candidate is None:
            logger.info(
                "No drop candidate to make room for %s on team %s",
                evicted.player_key,
                self.roster.team_key,
            )
            return None

        transaction = PlayerTransaction(
            team_key=self.roster.team_key,
            same_day_transactions=self.roster.same_day_transactions,
            reason=(
                f"Dropping {candidate.player_name} to make room for "
                f"{evicted.player_name} coming back from injury."
            ),
            players=[
                TransactionPlayer(
                    player_key=candidate.player_key,
                    transaction_type="drop",
                    is_inactive_list=candidate.is_inactive_list(),
                )
            ],
        )
        self.transactions.add(transaction)
        logger.info("Queued drop of %s for team %s", candidate.player_key, self.roster.team_key)
        return transaction
