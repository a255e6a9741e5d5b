"""Escrow domain services: ledger, matchmaking, resolution and punishment.

This package holds the match state machine and the balances it settles.
HTTP routes and socket handlers import from here, keeping transport
concerns separated from the wagering rules. Every public operation runs
inside `transaction.atomic()` so it either fully applies or leaves no
trace.
"""

from .errors import (
    EscrowError,
    InvalidAmount,
    InsufficientFunds,
    WithdrawalBlocked,
    InsufficientBalance,
    AlreadyEnrolled,
    NotCancellable,
    NotEnrolled,
    NoOpponent,
    InvalidMove,
    MoveAlreadySubmitted,
)
from .ledger import deposit, withdraw, balance_of, state_of, match_history
from .matchmaker import enroll, cancel
from .resolver import Move, Outcome, submit_move
from .punishment import punish
