from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


def _coordinator():
    return current_app.extensions['treasure_hunt']


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Treasure Hunt game server!'})


@main.route('/health')
def health():
    return jsonify({'status': 'healthy'})


@main.route('/api/state')
def get_state():
    # Same payload as the 'state' socket broadcast
    return jsonify(_coordinator().snapshot())


@main.route('/api/catalog')
def get_catalog():
    return jsonify(_coordinator().catalog.to_dict())
