import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list; "*" allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Game defaults (clamped by the coordinator)
    DEFAULT_MAX_ROUNDS = int(os.environ.get('DEFAULT_MAX_ROUNDS', '10'))
    DEFAULT_ROUND_LENGTH_SEC = int(os.environ.get('DEFAULT_ROUND_LENGTH_SEC', '30'))
    DEFAULT_TREASURE_TYPE = os.environ.get('DEFAULT_TREASURE_TYPE', 'gem')
    # Empty picks a random map at startup
    DEFAULT_MAP_ID = os.environ.get('DEFAULT_MAP_ID', '')
    # Timers (milliseconds)
    ROUND_TIMEOUT_SLACK_MS = int(os.environ.get('ROUND_TIMEOUT_SLACK_MS', '100'))
    INTER_ROUND_DELAY_MS = int(os.environ.get('INTER_ROUND_DELAY_MS', '1500'))
    # Assets
    ASSET_BASE_URL = os.environ.get('ASSET_BASE_URL', '/assets/images')
    MAP_COUNT = int(os.environ.get('MAP_COUNT', '18'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
