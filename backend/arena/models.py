from arena import db, bcrypt
from flask_login import UserMixin

# Account enrollment states
IDLE = 'idle'
WAITING = 'waiting'
MATCHED = 'matched'

# Match lifecycle
AWAITING_MOVES = 'awaiting_moves'
ONE_MOVE_SUBMITTED = 'one_move_submitted'
RESOLVED = 'resolved'


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    # The username doubles as the ledger address the user acts as
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Account(db.Model):
    __tablename__ = 'account'
    id = db.Column(db.Integer, primary_key=True)
    address = db.Column(db.String(64), unique=True, nullable=False, index=True)
    balance = db.Column(db.Integer, nullable=False, default=0)
    enrollment_state = db.Column(db.String(16), nullable=False, default=IDLE)
    # Plain ids rather than relationships: A.opponent -> B and B.opponent -> A
    opponent_id = db.Column(db.Integer, db.ForeignKey('account.id', name='fk_account_opponent_id'), nullable=True)
    match_id = db.Column(db.Integer, db.ForeignKey('match.id', name='fk_account_match_id', use_alter=True), nullable=True)
    pending_move = db.Column(db.String(16), nullable=True)
    last_move_at = db.Column(db.Float, nullable=True)

    @property
    def opponent(self):
        if self.opponent_id:
            return db.session.get(Account, self.opponent_id)
        return None

    def release(self):
        """Return the account to idle, dropping every per-match field."""
        self.enrollment_state = IDLE
        self.opponent_id = None
        self.match_id = None
        self.pending_move = None
        self.last_move_at = None

    def to_dict(self):
        opponent = self.opponent
        return {
            'address': self.address,
            'balance': self.balance,
            'enrollment_state': self.enrollment_state,
            'opponent': opponent.address if opponent else None,
            'has_pending_move': self.pending_move is not None,
            'last_move_at': self.last_move_at,
            'match_id': self.match_id,
        }


class Match(db.Model):
    __tablename__ = 'match'
    id = db.Column(db.Integer, primary_key=True)
    # player_a was waiting in the slot; player_b completed the pair
    player_a_id = db.Column(db.Integer, db.ForeignKey('account.id'), nullable=False)
    player_b_id = db.Column(db.Integer, db.ForeignKey('account.id'), nullable=False)
    status = db.Column(db.String(32), nullable=False, default=AWAITING_MOVES)
    move_a = db.Column(db.String(16), nullable=True)
    move_b = db.Column(db.String(16), nullable=True)
    outcome = db.Column(db.String(16), nullable=True)  # tie, player_a, player_b
    forfeit = db.Column(db.Boolean, nullable=False, default=False)
    stake = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.Float, nullable=False)
    resolved_at = db.Column(db.Float, nullable=True)

    player_a = db.relationship('Account', foreign_keys=[player_a_id])
    player_b = db.relationship('Account', foreign_keys=[player_b_id])

    @property
    def winner(self):
        if self.outcome == 'player_a':
            return self.player_a
        if self.outcome == 'player_b':
            return self.player_b
        return None

    def to_dict(self):
        winner = self.winner
        return {
            'id': self.id,
            'player_a': self.player_a.address,
            'player_b': self.player_b.address,
            'status': self.status,
            'move_a': self.move_a,
            'move_b': self.move_b,
            'outcome': self.outcome,
            'winner': winner.address if winner else None,
            'forfeit': self.forfeit,
            'stake': self.stake,
            'created_at': self.created_at,
            'resolved_at': self.resolved_at,
        }


class WaitingSlot(db.Model):
    """Single-row table holding the one account waiting for an opponent."""
    __tablename__ = 'waiting_slot'
    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey('account.id'), nullable=True)
