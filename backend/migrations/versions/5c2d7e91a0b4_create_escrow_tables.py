"""create user, account, match and waiting_slot tables

Revision ID: 5c2d7e91a0b4
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d7e91a0b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'user' not in existing_tables:
        op.create_table(
            'user',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
        )
        op.create_index('ix_user_username', 'user', ['username'], unique=True)

    if 'account' not in existing_tables:
        op.create_table(
            'account',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('address', sa.String(length=64), nullable=False),
            sa.Column('balance', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('enrollment_state', sa.String(length=16), nullable=False, server_default='idle'),
            sa.Column('opponent_id', sa.Integer(), sa.ForeignKey('account.id', name='fk_account_opponent_id'), nullable=True),
            sa.Column('match_id', sa.Integer(), nullable=True),
            sa.Column('pending_move', sa.String(length=16), nullable=True),
            sa.Column('last_move_at', sa.Float(), nullable=True),
        )
        op.create_index('ix_account_address', 'account', ['address'], unique=True)

    if 'match' not in existing_tables:
        op.create_table(
            'match',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('player_a_id', sa.Integer(), sa.ForeignKey('account.id'), nullable=False),
            sa.Column('player_b_id', sa.Integer(), sa.ForeignKey('account.id'), nullable=False),
            sa.Column('status', sa.String(length=32), nullable=False, server_default='awaiting_moves'),
            sa.Column('move_a', sa.String(length=16), nullable=True),
            sa.Column('move_b', sa.String(length=16), nullable=True),
            sa.Column('outcome', sa.String(length=16), nullable=True),
            sa.Column('forfeit', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('stake', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.Float(), nullable=False),
            sa.Column('resolved_at', sa.Float(), nullable=True),
        )
        # account.match_id -> match.id closes the cycle, so it is added afterwards
        with op.batch_alter_table('account') as batch_op:
            batch_op.create_foreign_key('fk_account_match_id', 'match', ['match_id'], ['id'])

    if 'waiting_slot' not in existing_tables:
        op.create_table(
            'waiting_slot',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('account_id', sa.Integer(), sa.ForeignKey('account.id'), nullable=True),
        )


def downgrade():
    op.drop_table('waiting_slot')
    with op.batch_alter_table('account') as batch_op:
        batch_op.drop_constraint('fk_account_match_id', type_='foreignkey')
    op.drop_table('match')
    op.drop_index('ix_account_address', table_name='account')
    op.drop_table('account')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
