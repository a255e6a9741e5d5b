from typing import Optional

from flask import current_app

from arena import db
from arena.models import Account, Match, MATCHED
from . import clock, events
from .ledger import find_account, grace_period
from .resolver import Outcome, settle
from .transaction import atomic


def punish(address: str) -> Optional[Match]:
    """Force a win against an opponent silent for the whole grace period.

    Unmet preconditions are a no-op, never an error, so callers may poll.
    Returns the resolved match, or None when nothing happened.
    """
    with atomic() as outbox:
        account = find_account(address)
        if account is None or account.enrollment_state != MATCHED:
            return None
        if account.pending_move is None or account.last_move_at is None:
            return None
        opponent = db.session.get(Account, account.opponent_id)
        if opponent is None or opponent.pending_move is not None:
            return None
        elapsed = clock.now() - account.last_move_at
        if elapsed < grace_period():
            current_app.logger.debug(f"[punish-early] account={address} elapsed={elapsed:.0f}s")
            return None

        match = db.session.get(Match, account.match_id)
        outcome = Outcome.PLAYER_A if match.player_a_id == account.id else Outcome.PLAYER_B
        settle(match, outcome, forfeit=True)
        outbox.append(events.match_resolved(match))
        current_app.logger.info(f"[punish] match={match.id} punisher={address} silent={opponent.address}")
    return match
