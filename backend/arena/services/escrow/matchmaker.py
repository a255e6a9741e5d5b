"""Single-capacity matchmaking.

At most one account waits at a time. The next account to enroll is paired
with it and a `Match` is opened for the two of them.
"""
from typing import Optional

from flask import current_app

from arena import db
from arena.models import Account, Match, WaitingSlot, IDLE, WAITING, MATCHED, AWAITING_MOVES
from . import clock, events
from .errors import InsufficientBalance, AlreadyEnrolled, NotCancellable
from .ledger import get_or_create_account, stake
from .transaction import atomic

SLOT_ID = 1


def _slot() -> WaitingSlot:
    slot = db.session.get(WaitingSlot, SLOT_ID)
    if slot is None:
        slot = WaitingSlot(id=SLOT_ID, account_id=None)
        db.session.add(slot)
        db.session.flush()
    return slot


def waiting_account() -> Optional[Account]:
    slot = db.session.get(WaitingSlot, SLOT_ID)
    if slot is None or slot.account_id is None:
        return None
    return db.session.get(Account, slot.account_id)


def _pair(waiting: Account, account: Account) -> Match:
    match = Match(
        player_a=waiting,
        player_b=account,
        status=AWAITING_MOVES,
        stake=stake(),
        created_at=clock.now(),
    )
    db.session.add(match)
    db.session.flush()

    for player, opponent in ((waiting, account), (account, waiting)):
        player.enrollment_state = MATCHED
        player.opponent_id = opponent.id
        player.match_id = match.id
        player.pending_move = None
        player.last_move_at = None
    return match


def enroll(address: str) -> Account:
    with atomic() as outbox:
        account = get_or_create_account(address)
        if account.balance < stake():
            raise InsufficientBalance()
        if account.enrollment_state != IDLE:
            raise AlreadyEnrolled()

        slot = _slot()
        if slot.account_id is None:
            account.enrollment_state = WAITING
            slot.account_id = account.id
            outbox.append(events.player_enrolled(account))
            current_app.logger.info(f"[enroll] account={address} state=waiting")
        else:
            waiting = db.session.get(Account, slot.account_id)
            slot.account_id = None
            match = _pair(waiting, account)
            outbox.append(events.player_matched(match))
            current_app.logger.info(
                f"[match] match={match.id} player_a={waiting.address} player_b={address}"
            )
    return account


def cancel(address: str) -> Account:
    """Leave the waiting slot. Matched players can only exit by resolution."""
    with atomic():
        account = get_or_create_account(address)
        if account.enrollment_state != WAITING:
            raise NotCancellable()
        slot = _slot()
        if slot.account_id == account.id:
            slot.account_id = None
        account.release()
        current_app.logger.info(f"[cancel] account={address} state=idle")
    return account
