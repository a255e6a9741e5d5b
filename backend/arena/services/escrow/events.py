from dataclasses import dataclass, field
from typing import Any, Dict, List

from arena import socketio

ARENA_ROOM = 'arena'
NAMESPACE = '/ws'


@dataclass
class Event:
    """A notification waiting for its transaction to commit."""

    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


def player_enrolled(account) -> Event:
    return Event('player_enrolled', {'account': account.address})


def player_matched(match) -> Event:
    return Event('player_matched', {
        'match_id': match.id,
        'player_a': match.player_a.address,
        'player_b': match.player_b.address,
    })


def match_resolved(match) -> Event:
    winner = match.winner
    return Event('match_resolved', {
        'match_id': match.id,
        'player_a': match.player_a.address,
        'player_b': match.player_b.address,
        'outcome': match.outcome,
        'winner': winner.address if winner else None,
        'forfeit': match.forfeit,
    })


def publish(events: List[Event]) -> None:
    for event in events:
        socketio.emit(event.name, event.payload, to=ARENA_ROOM, namespace=NAMESPACE)
