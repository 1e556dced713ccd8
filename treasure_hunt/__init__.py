from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    origins = [o.strip() for o in (raw or '').split(',') if o.strip()]
    if not origins or '*' in origins:
        return '*'
    return origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from treasure_hunt.catalog import Catalog
    from treasure_hunt.services.session import BackgroundScheduler, ManualScheduler, SessionCoordinator

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    # Tests drive time explicitly through the virtual clock
    if flask_app.config.get('TESTING'):
        scheduler = ManualScheduler()
    else:
        scheduler = BackgroundScheduler(socketio, logger=flask_app.logger)

    def broadcast_state(snapshot):
        socketio.emit('state', snapshot, namespace=namespace)

    catalog = Catalog(
        base_url=flask_app.config.get('ASSET_BASE_URL', '/assets/images'),
        map_count=int(flask_app.config.get('MAP_COUNT', 18)),
    )
    flask_app.extensions['treasure_hunt'] = SessionCoordinator(
        scheduler,
        broadcast=broadcast_state,
        catalog=catalog,
        max_rounds=int(flask_app.config.get('DEFAULT_MAX_ROUNDS', 10)),
        round_length_sec=int(flask_app.config.get('DEFAULT_ROUND_LENGTH_SEC', 30)),
        treasure_type=flask_app.config.get('DEFAULT_TREASURE_TYPE', 'gem'),
        map_id=flask_app.config.get('DEFAULT_MAP_ID') or None,
        inter_round_delay_ms=int(flask_app.config.get('INTER_ROUND_DELAY_MS', 1500)),
        timeout_slack_ms=int(flask_app.config.get('ROUND_TIMEOUT_SLACK_MS', 100)),
        logger=flask_app.logger,
    )

    from treasure_hunt.routes import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from treasure_hunt.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('catalog')
    def catalog_command():
        """Lists the playable maps and treasure types."""
        for m in catalog.maps:
            click.echo(f"map      {m['id']:<10} {m['fullUrl']}")
        for t in catalog.treasure_types.values():
            click.echo(f"treasure {t['key']:<12} {t['label']:<14} {t['icon']}")

    flask_app.cli.add_command(catalog_command)

    return flask_app
