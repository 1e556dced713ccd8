from flask import current_app, request
from flask_socketio import emit

from treasure_hunt import socketio
from treasure_hunt.intents import (
    parse_join,
    parse_select_map,
    parse_set_max_rounds,
    parse_set_round_length,
    parse_set_treasure_type,
    parse_tap,
)


def _coordinator():
    return current_app.extensions['treasure_hunt']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _coordinator().connect(_get_sid())


def handle_disconnect(reason=None):
    current_app.logger.debug(f"[socket-disconnect] sid={_get_sid()} reason={reason}")
    _coordinator().disconnect(_get_sid())


def handle_join(data=None):
    intent = parse_join(data)
    _coordinator().join(_get_sid(), intent.name, intent.score_hint)


def handle_start(data=None):
    _coordinator().start()


def handle_reset(data=None):
    _coordinator().reset()


def handle_tap_treasure(data=None):
    intent = parse_tap(data)
    _coordinator().tap_treasure(_get_sid(), intent.treasure_id)


def handle_select_map(data=None):
    _coordinator().select_map(parse_select_map(data).map_id)


def handle_set_max_rounds(data=None):
    _coordinator().set_max_rounds(parse_set_max_rounds(data).value)


def handle_set_round_length(data=None):
    _coordinator().set_round_length(parse_set_round_length(data).value_seconds)


def handle_set_treasure_type(data=None):
    _coordinator().set_treasure_type(parse_set_treasure_type(data).key)


def handle_ping(data=None):
    emit('pong', data or {})


def handle_error(exc):
    # Never let one bad message take the connection down
    current_app.logger.exception(f"[socket-error] sid={_get_sid()} event={request.event!r}")  # type: ignore


EVENT_HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join': handle_join,
    'start': handle_start,
    'reset': handle_reset,
    'tapTreasure': handle_tap_treasure,
    'selectMap': handle_select_map,
    'setMaxRounds': handle_set_max_rounds,
    'setRoundLength': handle_set_round_length,
    'setTreasureType': handle_set_treasure_type,
    'ping': handle_ping,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register every game event on the given namespace."""
    for event, handler in EVENT_HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
    socketio.on_error(namespace)(handle_error)
