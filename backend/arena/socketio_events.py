from flask import current_app
from flask_socketio import join_room, leave_room, emit
from arena import socketio
from arena.services.escrow.events import ARENA_ROOM


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    current_app.logger.debug("[ws-disconnect] client left")


def handle_watch(data=None):
    # Every escrow notification is broadcast to the arena room
    join_room(ARENA_ROOM)
    emit('joined', {'room': ARENA_ROOM})


def handle_unwatch(data=None):
    leave_room(ARENA_ROOM)
    emit('left', {'room': ARENA_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    for namespace in ('/ws', '/') if testing else ('/ws',):
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('watch', handle_watch, namespace=namespace)
        socketio.on_event('unwatch', handle_unwatch, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
