import os
import logging
import logging.config
from pathlib import Path

from flask import Flask

from config import (
    DEBUG,
    IGDB_CLIENT_ID,
    IGDB_CLIENT_SECRET,
    IGDB_TIMEOUT_SECONDS,
    LIBRARY_FILE,
    LOG_FILE,
    PORT,
    validate_igdb_credentials,
)
from init import initialize_app
from web.app_factory import create_app

logger = logging.getLogger(__name__)


def _determine_log_level(flask_app: Flask) -> int:
    if flask_app.debug or DEBUG:
        return logging.DEBUG
    return logging.INFO


def _configure_logging(flask_app: Flask) -> None:
    log_level = _determine_log_level(flask_app)
    log_path = Path(LOG_FILE)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass

    for handler in list(flask_app.logger.handlers):
        flask_app.logger.removeHandler(handler)

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {
                    'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s',
                    'datefmt': '%Y-%m-%d %H:%M:%S',
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'standard',
                    'level': log_level,
                    'stream': 'ext://sys.stdout',
                },
                'file': {
                    'class': 'logging.handlers.RotatingFileHandler',
                    'formatter': 'standard',
                    'level': logging.DEBUG,
                    'filename': os.fspath(log_path),
                    'maxBytes': 5 * 1024 * 1024,
                    'backupCount': 5,
                    'encoding': 'utf-8',
                },
            },
            'root': {
                'level': log_level,
                'handlers': ['console', 'file'],
            },
        }
    )

    flask_app.logger = logging.getLogger(flask_app.import_name)
    flask_app.logger.setLevel(log_level)
    logger.setLevel(log_level)


app = Flask(__name__)
_configure_logging(app)

library_store, igdb_api_client = initialize_app(
    library_file=LIBRARY_FILE,
    client_id=IGDB_CLIENT_ID,
    client_secret=IGDB_CLIENT_SECRET,
    timeout=IGDB_TIMEOUT_SECONDS,
    validate_credentials=validate_igdb_credentials,
)

app = create_app(store=library_store, igdb_client=igdb_api_client, flask_app=app)


if __name__ == '__main__':
    logger.info('Server running at http://localhost:%s', PORT)
    app.run(port=PORT, debug=DEBUG)
