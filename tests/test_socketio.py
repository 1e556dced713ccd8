from treasure_hunt import socketio


def _states(client):
    return [pkt['args'][0] for pkt in client.get_received() if pkt['name'] == 'state']


def _last_state(client):
    states = _states(client)
    assert states, 'expected at least one state broadcast'
    return states[-1]


def test_connect_registers_player_and_broadcasts(sio_client):
    assert sio_client.is_connected()
    state = _last_state(sio_client)
    assert state['phase'] == 'lobby'
    assert len(state['players']) == 1
    assert state['players'][0]['name'] == 'Player'
    assert state['selectedMapId'] == 'map-01'
    assert 'serverNow' in state


def test_join_renames_player(sio_client):
    sio_client.get_received()
    sio_client.emit('join', {'name': '  Captain  ', 'score': 2})
    state = _last_state(sio_client)
    assert state['players'][0]['name'] == 'Captain'
    assert state['players'][0]['score'] == 2

    # Legacy clients send a bare string
    sio_client.emit('join', 'Pirate')
    assert _last_state(sio_client)['players'][0]['name'] == 'Pirate'


def test_start_and_tap_wins_round(sio_client):
    sio_client.emit('start')
    state = _last_state(sio_client)
    assert state['phase'] == 'playing'
    assert state['round'] == 1
    player_id = state['players'][0]['id']

    sio_client.emit('tapTreasure', {'treasureId': state['treasure']['id']})
    state = _last_state(sio_client)
    assert state['phase'] == 'roundOver'
    assert state['winnerId'] == player_id
    assert state['players'][0]['score'] == 1


def test_second_tap_on_same_treasure_does_not_score(flask_app, sio_client):
    other = socketio.test_client(flask_app)
    try:
        sio_client.emit('start')
        treasure_id = _last_state(sio_client)['treasure']['id']
        other.get_received()

        sio_client.emit('tapTreasure', {'treasureId': treasure_id})
        other.emit('tapTreasure', {'treasureId': treasure_id})

        coordinator = flask_app.extensions['treasure_hunt']
        scores = sorted(p.score for p in coordinator.players.values())
        assert scores == [0, 1]
        state = _last_state(other)
        winner = [p for p in state['players'] if p['score'] == 1][0]
        assert state['winnerId'] == winner['id']
    finally:
        other.disconnect()


def test_next_round_is_broadcast_after_delay(sio_client, app_scheduler):
    sio_client.emit('start')
    treasure_id = _last_state(sio_client)['treasure']['id']
    sio_client.emit('tapTreasure', {'treasureId': treasure_id})
    sio_client.get_received()

    app_scheduler.advance(1.5)
    state = _last_state(sio_client)
    assert state['phase'] == 'playing'
    assert state['round'] == 2
    assert state['treasure']['id'] != treasure_id


def test_settings_ignored_while_playing(sio_client):
    sio_client.emit('setMaxRounds', 9)
    assert _last_state(sio_client)['maxRounds'] == 9

    sio_client.emit('start')
    sio_client.emit('setMaxRounds', {'value': 4})
    sio_client.emit('setRoundLength', {'valueSeconds': 45})
    state = _last_state(sio_client)
    assert state['phase'] == 'playing'
    assert state['maxRounds'] == 9
    assert state['roundLengthMs'] == 5000


def test_settings_applied_in_lobby(sio_client):
    sio_client.emit('setRoundLength', '12')
    sio_client.emit('setTreasureType', 'crown')
    sio_client.emit('selectMap', {'mapId': 'map-10'})
    state = _last_state(sio_client)
    assert state['roundLengthMs'] == 12000
    assert state['treasureType'] == 'crown'
    assert state['selectedMapId'] == 'map-10'


def test_malformed_payloads_do_not_break_connection(sio_client):
    sio_client.emit('tapTreasure', ['weird'])
    sio_client.emit('setMaxRounds', {'value': 'many'})
    sio_client.emit('join', {'name': None})
    assert sio_client.is_connected()
    assert _last_state(sio_client)['players'][0]['name'] == 'Player'


def test_last_disconnect_returns_to_lobby(flask_app, sio_client, app_scheduler):
    sio_client.emit('start')
    sio_client.disconnect()
    coordinator = flask_app.extensions['treasure_hunt']
    assert coordinator.players == {}
    assert coordinator.phase == 'lobby'
    assert coordinator.treasure is None

    app_scheduler.advance(60)
    assert coordinator.phase == 'lobby'


def test_ping(sio_client):
    sio_client.get_received()
    sio_client.emit('ping', {'t': 1})
    received = sio_client.get_received()
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'t': 1} for pkt in received)
