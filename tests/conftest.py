import os
import random
import sys
import pytest

# Ensure the project root (containing the `treasure_hunt` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from treasure_hunt import create_app, socketio
from treasure_hunt.services.session import ManualScheduler, SessionCoordinator


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    DEFAULT_MAX_ROUNDS = 3
    DEFAULT_ROUND_LENGTH_SEC = 5
    DEFAULT_TREASURE_TYPE = 'gem'
    DEFAULT_MAP_ID = 'map-01'
    ROUND_TIMEOUT_SLACK_MS = 100
    INTER_ROUND_DELAY_MS = 1500
    ASSET_BASE_URL = '/assets/images'
    MAP_COUNT = 18
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def broadcasts():
    return []


@pytest.fixture()
def coordinator(scheduler, broadcasts):
    return SessionCoordinator(
        scheduler,
        broadcast=broadcasts.append,
        max_rounds=3,
        round_length_sec=5,
        map_id='map-01',
        rng=random.Random(1234),
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def app_scheduler(flask_app):
    return flask_app.extensions['treasure_hunt'].scheduler


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()
