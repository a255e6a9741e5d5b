from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from arena.services.escrow import (
    EscrowError,
    deposit,
    withdraw,
    enroll,
    cancel,
    submit_move,
    punish,
    balance_of,
    state_of,
    match_history,
)
from arena.services.escrow.matchmaker import waiting_account


escrow = Blueprint('escrow', __name__)


@escrow.errorhandler(EscrowError)
def handle_escrow_error(error):
    current_app.logger.info(f"[rejected] path={request.path} code={error.code}")
    return jsonify(error.to_dict()), error.status_code


def _caller() -> str:
    return current_user.username


def _amount_from_body():
    data = request.get_json(silent=True) or {}
    return data.get('amount')


@escrow.route('/deposit', methods=['POST'])
@login_required
def deposit_funds():
    deposit(_caller(), _amount_from_body())
    return jsonify(state_of(_caller()))


@escrow.route('/withdraw', methods=['POST'])
@login_required
def withdraw_funds():
    withdraw(_caller(), _amount_from_body())
    return jsonify(state_of(_caller()))


@escrow.route('/enroll', methods=['POST'])
@login_required
def enroll_player():
    enroll(_caller())
    return jsonify(state_of(_caller()))


@escrow.route('/cancel', methods=['POST'])
@login_required
def cancel_enrollment():
    cancel(_caller())
    return jsonify(state_of(_caller()))


@escrow.route('/move', methods=['POST'])
@login_required
def post_move():
    data = request.get_json(silent=True) or {}
    match = submit_move(_caller(), data.get('move'))
    return jsonify({
        'resolved': match is not None,
        'match': match.to_dict() if match else None,
        'account': state_of(_caller()),
    })


@escrow.route('/punish', methods=['POST'])
@login_required
def post_punish():
    match = punish(_caller())
    return jsonify({
        'resolved': match is not None,
        'match': match.to_dict() if match else None,
        'account': state_of(_caller()),
    })


@escrow.route('/accounts/<string:address>', methods=['GET'])
def get_account_state(address):
    return jsonify(state_of(address))


@escrow.route('/accounts/<string:address>/balance', methods=['GET'])
def get_account_balance(address):
    return jsonify({'address': address, 'balance': balance_of(address)})


@escrow.route('/accounts/<string:address>/matches', methods=['GET'])
def get_account_matches(address):
    limit = request.args.get('limit', 20, type=int)
    limit = max(1, min(limit, 100))
    return jsonify([m.to_dict() for m in match_history(address, limit)])


@escrow.route('/lobby', methods=['GET'])
def get_lobby():
    waiting = waiting_account()
    return jsonify({'waiting': waiting.address if waiting else None})


@escrow.route('/config', methods=['GET'])
def get_config():
    cfg = current_app.config
    return jsonify({
        'stake': int(cfg.get('MIN_STAKE', 100)),
        'punish_grace_period_sec': int(cfg.get('PUNISH_GRACE_PERIOD_SEC', 86400)),
    })
