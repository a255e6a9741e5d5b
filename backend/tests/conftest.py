import os
import sys
import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    MIN_STAKE = 100
    PUNISH_GRACE_PERIOD_SEC = 86400
    # Keep password hashing fast in tests
    BCRYPT_LOG_ROUNDS = 4


class FakeClock:
    """Controllable time source installed as the app's CLOCK."""

    def __init__(self, start=1_700_000_000.0):
        self.current = float(start)

    def __call__(self):
        return self.current

    def advance(self, seconds):
        self.current += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def flask_app(clock):
    application = create_app(TestConfig)
    application.config['CLOCK'] = clock
    with application.app_context():
        # Ensure models are imported so tables are created
        import arena.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def web_app(clock):
    """App for HTTP tests; no app context stays pushed while requests run.

    A held context would be reused by every request and Flask-Login would
    keep answering with whichever user logged in last.
    """
    application = create_app(TestConfig)
    application.config['CLOCK'] = clock
    with application.app_context():
        import arena.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(web_app):
    return web_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def login(web_app):
    """Return a factory producing a logged-in test client for an address."""

    def _login(address, password='password'):
        c = web_app.test_client()
        res = c.post('/users/add', json={'username': address, 'password': password})
        assert res.status_code == 201
        res = c.post('/login', json={'username': address, 'password': password})
        assert res.status_code == 200
        return c

    return _login


@pytest.fixture()
def matched_pair(flask_app):
    """alice (102) and bob (103) enrolled in that order, so alice is player A."""
    from arena.services.escrow import deposit, enroll

    deposit('alice', 102)
    deposit('bob', 103)
    enroll('alice')
    enroll('bob')
    return 'alice', 'bob'
