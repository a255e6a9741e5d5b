import threading

from arena.models import Account, Match
from arena.services.escrow import deposit, withdraw, enroll, balance_of, InsufficientFunds
from arena.services.escrow.matchmaker import waiting_account


def _run_concurrently(flask_app, fn, args_list):
    results = []
    barrier = threading.Barrier(len(args_list))

    def worker(*args):
        with flask_app.app_context():
            barrier.wait()
            try:
                fn(*args)
                results.append('ok')
            except InsufficientFunds:
                results.append('rejected')

    threads = [threading.Thread(target=worker, args=args) for args in args_list]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


def test_concurrent_withdrawals_never_overdraw(flask_app):
    deposit('alice', 100)
    results = _run_concurrently(flask_app, withdraw, [('alice', 30)] * 8)
    assert results.count('ok') == 3
    assert results.count('rejected') == 5
    assert balance_of('alice') == 10


def test_concurrent_enrollments_pair_everyone_exactly_once(flask_app):
    names = [f'player{i}' for i in range(10)]
    for name in names:
        deposit(name, 100)

    results = _run_concurrently(flask_app, enroll, [(name,) for name in names])
    assert results == ['ok'] * len(names)

    assert Match.query.count() == 5
    assert waiting_account() is None
    accounts = {a.id: a for a in Account.query.all()}
    for account in accounts.values():
        assert account.enrollment_state == 'matched'
        assert accounts[account.opponent_id].opponent_id == account.id
        assert accounts[account.opponent_id].match_id == account.match_id


def test_events_are_published_before_the_lock_is_released(flask_app, monkeypatch):
    from arena.services.escrow import transaction

    held_during_publish = []

    def recording_publish(events):
        if not events:
            return
        # Another thread must not be able to take the lock while we publish
        got_it = []

        def try_lock():
            acquired = transaction._lock.acquire(blocking=False)
            got_it.append(acquired)
            if acquired:
                transaction._lock.release()

        t = threading.Thread(target=try_lock)
        t.start()
        t.join()
        held_during_publish.append((events[0].name, not got_it[0]))

    monkeypatch.setattr(transaction, 'publish', recording_publish)
    deposit('alice', 100)
    deposit('bob', 100)
    enroll('alice')
    enroll('bob')
    assert ('player_enrolled', True) in held_during_publish
    assert ('player_matched', True) in held_during_publish
