import time

from flask import current_app


def now() -> float:
    """Current time in epoch seconds.

    Reads `CLOCK` from the app config when set so tests can drive time;
    falls back to the wall clock.
    """
    clock = current_app.config.get('CLOCK') or time.time
    return float(clock())
