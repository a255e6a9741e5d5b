"""Per-account balances.

Value only enters and leaves through `deposit` / `withdraw`; `transfer`
moves it between two accounts and keeps the global sum unchanged.
"""
from typing import List, Optional

from flask import current_app

from arena import db
from arena.models import Account, Match, IDLE
from .errors import InvalidAmount, InsufficientFunds, WithdrawalBlocked
from .transaction import atomic


def _validate_amount(amount) -> int:
    # bool is an int subclass; reject it along with floats and strings
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount()
    return amount


def find_account(address: str) -> Optional[Account]:
    return Account.query.filter_by(address=address).first()


def get_or_create_account(address: str) -> Account:
    account = find_account(address)
    if account is None:
        account = Account(address=address, balance=0, enrollment_state=IDLE)
        db.session.add(account)
        db.session.flush()
        # Not final until the surrounding atomic() commits
        current_app.logger.debug(f"[account-new] account={address}")
    return account


def stake() -> int:
    return int(current_app.config.get('MIN_STAKE', 100))


def grace_period() -> int:
    return int(current_app.config.get('PUNISH_GRACE_PERIOD_SEC', 86400))


def deposit(address: str, amount: int) -> Account:
    amount = _validate_amount(amount)
    with atomic():
        account = get_or_create_account(address)
        account.balance += amount
        current_app.logger.info(f"[deposit] account={address} amount={amount} balance={account.balance}")
    return account


def withdraw(address: str, amount: int) -> Optional[Account]:
    """Pay `amount` out of an idle account.

    The enrollment check comes first: a player in the queue or in a match
    is blocked whatever the amount. Unknown addresses hold 0 and are never
    created here; returns None for them.
    """
    amount = _validate_amount(amount)
    with atomic():
        account = find_account(address)
        if account is None:
            if amount > 0:
                raise InsufficientFunds()
            return None
        if account.enrollment_state != IDLE:
            raise WithdrawalBlocked()
        if amount > account.balance:
            raise InsufficientFunds()
        account.balance -= amount
        # Outbound transport is external; the payout is recorded in the log
        current_app.logger.info(f"[withdraw] account={address} amount={amount} balance={account.balance}")
    return account


def transfer(source: Account, target: Account, amount: int) -> None:
    """Move `amount` between two accounts already loaded in the session.

    Callers have checked the stake at enroll/move time; the guard only
    stops a balance from ever going negative.
    """
    if amount > source.balance:
        raise InsufficientFunds()
    source.balance -= amount
    target.balance += amount
    current_app.logger.info(
        f"[transfer] from={source.address} to={target.address} amount={amount} "
        f"balances={source.balance}/{target.balance}"
    )


def balance_of(address: str) -> int:
    account = find_account(address)
    return account.balance if account else 0


def state_of(address: str) -> dict:
    account = find_account(address)
    if account is None:
        return {
            'address': address,
            'balance': 0,
            'enrollment_state': IDLE,
            'opponent': None,
            'has_pending_move': False,
            'last_move_at': None,
            'match_id': None,
            'punish_available_at': None,
        }
    state = account.to_dict()
    # Lets clients render a countdown to the earliest punish() call
    if account.last_move_at is not None:
        state['punish_available_at'] = account.last_move_at + grace_period()
    else:
        state['punish_available_at'] = None
    return state


def match_history(address: str, limit: int = 20) -> List[Match]:
    account = find_account(address)
    if account is None:
        return []
    return (
        Match.query
        .filter((Match.player_a_id == account.id) | (Match.player_b_id == account.id))
        .order_by(Match.created_at.desc(), Match.id.desc())
        .limit(limit)
        .all()
    )
