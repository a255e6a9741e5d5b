"""Per-match state machine: moves in, outcome and payout out."""
import enum
from typing import Optional

from flask import current_app

from arena import db
from arena.models import Account, Match, IDLE, WAITING, ONE_MOVE_SUBMITTED, RESOLVED
from . import clock, events
from .errors import (
    InsufficientBalance,
    NotEnrolled,
    NoOpponent,
    InvalidMove,
    MoveAlreadySubmitted,
)
from .ledger import get_or_create_account, stake, transfer
from .transaction import atomic


class Move(enum.Enum):
    ROCK = 'ROCK'
    PAPER = 'PAPER'
    SCISSORS = 'SCISSORS'

    @classmethod
    def parse(cls, value) -> 'Move':
        """Exact upper-case names only; anything else is rejected."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls.__members__:
            return cls[value]
        raise InvalidMove()

    def beats(self, other: 'Move') -> bool:
        return BEATS[self] is other


BEATS = {
    Move.ROCK: Move.SCISSORS,
    Move.SCISSORS: Move.PAPER,
    Move.PAPER: Move.ROCK,
}


class Outcome(enum.Enum):
    TIE = 'tie'
    PLAYER_A = 'player_a'
    PLAYER_B = 'player_b'


def decide(move_a: Move, move_b: Move) -> Outcome:
    if move_a is move_b:
        return Outcome.TIE
    if move_a.beats(move_b):
        return Outcome.PLAYER_A
    return Outcome.PLAYER_B


def settle(match: Match, outcome: Outcome, forfeit: bool = False) -> Match:
    """Pay out `match` and send both players back to idle.

    Shared by normal resolution and punishment; moves still pending on the
    accounts are copied onto the match row before they are cleared.
    """
    player_a = match.player_a
    player_b = match.player_b

    if outcome is Outcome.PLAYER_A:
        transfer(player_b, player_a, match.stake)
    elif outcome is Outcome.PLAYER_B:
        transfer(player_a, player_b, match.stake)

    match.move_a = player_a.pending_move
    match.move_b = player_b.pending_move
    match.outcome = outcome.value
    match.forfeit = forfeit
    match.status = RESOLVED
    match.resolved_at = clock.now()

    player_a.release()
    player_b.release()
    current_app.logger.info(
        f"[resolve] match={match.id} outcome={match.outcome} forfeit={forfeit} "
        f"moves={match.move_a}/{match.move_b}"
    )
    return match


def submit_move(address: str, move) -> Optional[Match]:
    """Record `move` for `address`; resolve if the opponent already moved.

    Returns the resolved match, or None while waiting on the opponent.
    """
    with atomic() as outbox:
        account = get_or_create_account(address)
        if account.balance < stake():
            raise InsufficientBalance()
        if account.enrollment_state == IDLE:
            raise NotEnrolled()
        if account.enrollment_state == WAITING:
            raise NoOpponent()
        parsed = Move.parse(move)
        if account.pending_move is not None:
            raise MoveAlreadySubmitted()

        account.pending_move = parsed.value
        account.last_move_at = clock.now()
        match = db.session.get(Match, account.match_id)
        opponent = db.session.get(Account, account.opponent_id)
        current_app.logger.info(f"[move] match={match.id} account={address}")

        if opponent.pending_move is None:
            match.status = ONE_MOVE_SUBMITTED
            return None

        outcome = decide(Move(match.player_a.pending_move), Move(match.player_b.pending_move))
        settle(match, outcome)
        outbox.append(events.match_resolved(match))
    return match
