import threading
from contextlib import contextmanager
from typing import Iterator, List

from arena import db
from .events import Event, publish

# One critical section for the ledger, the waiting slot and every match
_lock = threading.RLock()


@contextmanager
def atomic() -> Iterator[List[Event]]:
    """Run an escrow operation as a serialized, all-or-nothing unit.

    Yields an outbox; events appended to it are published once the session
    commits, still inside the lock so watchers see them in commit order.
    Any exception rolls the session back and propagates.
    """
    outbox: List[Event] = []
    with _lock:
        try:
            yield outbox
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        publish(outbox)
