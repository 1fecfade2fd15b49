"""Run the task service: ``python -m taskapi``."""

import getpass
import logging
import sys

from taskapi import create_app, database_target
from taskapi.config import Config
from taskapi.errors import StoreConnectionError
from taskapi.telemetry import setup_telemetry, telemetry_enabled


logger = logging.getLogger("taskapi")


def main() -> int:
    logging.basicConfig(level=logging.INFO)

    if telemetry_enabled():
        setup_telemetry()

    config = {key: getattr(Config, key) for key in dir(Config) if key.isupper()}

    password = None
    if not config["DATABASE_URL"] and config["DB_PASSWORD"] is None:
        password = getpass.getpass("Enter the PostgreSQL password: ")

    from taskapi.storage import open_store

    try:
        store = open_store(database_target(config, password), **config["SQLALCHEMY_ENGINE_OPTIONS"])
    except StoreConnectionError as err:
        logger.error(f"Cannot start task service: {err}")
        return 1

    app = create_app(Config, store=store)
    logger.info(f"Task service listening on {Config.HOST}:{Config.PORT}")
    app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG, use_reloader=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
