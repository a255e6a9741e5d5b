"""Rejections raised by the escrow services.

Every error means "nothing happened": the surrounding `atomic()` block
rolls back whatever the operation had touched before raising.
"""


class EscrowError(Exception):
    code = 'escrow_error'
    status_code = 400
    message = 'Operation rejected'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    def to_dict(self):
        return {'error': str(self), 'code': self.code}


class InvalidAmount(EscrowError):
    code = 'invalid_amount'
    message = 'Amount must be a non-negative integer'


class InsufficientFunds(EscrowError):
    code = 'insufficient_funds'
    message = 'Insufficient funds'


class WithdrawalBlocked(EscrowError):
    code = 'withdrawal_blocked'
    status_code = 409
    message = 'Withdrawing funds is not permitted while playing'


class InsufficientBalance(EscrowError):
    code = 'insufficient_balance'
    message = 'Minimum balance is required'


class AlreadyEnrolled(EscrowError):
    code = 'already_enrolled'
    status_code = 409
    message = 'Player is already enrolled'


class NotCancellable(EscrowError):
    code = 'not_cancellable'
    status_code = 409
    message = 'Only started games without opponents can be cancelled'


class NotEnrolled(EscrowError):
    code = 'not_enrolled'
    status_code = 409
    message = 'Player is not enrolled yet'


class NoOpponent(EscrowError):
    code = 'no_opponent'
    status_code = 409
    message = 'No opponent is enrolled yet'


class InvalidMove(EscrowError):
    code = 'invalid_move'
    message = 'Submitted move is invalid'


class MoveAlreadySubmitted(EscrowError):
    code = 'move_already_submitted'
    status_code = 409
    message = 'Move already submitted for this match'
