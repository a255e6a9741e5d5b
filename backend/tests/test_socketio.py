import pytest

from arena.services.escrow import deposit, enroll, submit_move, punish, InsufficientBalance


def _watch(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    sio_client.emit('watch', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' for pkt in received)


def _events(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect_and_ping(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    sio_client.get_received('/ws')

    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_enroll_and_match_notifications(flask_app, sio_client):
    _watch(sio_client)
    deposit('alice', 100)
    deposit('bob', 100)

    enroll('alice')
    assert _events(sio_client, 'player_enrolled') == [{'account': 'alice'}]

    enroll('bob')
    matched = _events(sio_client, 'player_matched')
    assert len(matched) == 1
    assert matched[0]['player_a'] == 'alice'
    assert matched[0]['player_b'] == 'bob'


def test_resolution_notification(flask_app, sio_client, matched_pair):
    alice, bob = matched_pair
    _watch(sio_client)

    submit_move(alice, 'SCISSORS')
    assert _events(sio_client, 'match_resolved') == []

    submit_move(bob, 'PAPER')
    resolved = _events(sio_client, 'match_resolved')
    assert len(resolved) == 1
    assert resolved[0]['outcome'] == 'player_a'
    assert resolved[0]['winner'] == 'alice'
    assert resolved[0]['forfeit'] is False


def test_punish_notification(flask_app, sio_client, matched_pair, clock):
    alice, _ = matched_pair
    _watch(sio_client)
    submit_move(alice, 'ROCK')
    clock.advance(86400)
    punish(alice)
    resolved = _events(sio_client, 'match_resolved')
    assert len(resolved) == 1
    assert resolved[0]['forfeit'] is True


def test_rejected_operations_publish_nothing(flask_app, sio_client):
    _watch(sio_client)
    deposit('alice', 10)
    with pytest.raises(InsufficientBalance):
        enroll('alice')
    assert _events(sio_client, 'player_enrolled') == []


def test_unwatch_stops_notifications(flask_app, sio_client):
    _watch(sio_client)
    sio_client.emit('unwatch', {}, namespace='/ws')
    sio_client.get_received('/ws')
    deposit('alice', 100)
    enroll('alice')
    assert _events(sio_client, 'player_enrolled') == []
