import atexit
import datetime
import logging

from flask import Flask
from flask.json.provider import DefaultJSONProvider
from pymongo import MongoClient

from movie_reviews.config import Config
from movie_reviews.routes import api
from movie_reviews.store import EntityStore


class JSONProvider(DefaultJSONProvider):
    sort_keys = False

    @staticmethod
    def default(o):
        if isinstance(o, (datetime.datetime, datetime.date)):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def create_app(test_config=None, mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    app.json = JSONProvider(app)

    # One client per process, closed at interpreter exit.
    if mongo_client is None:
        mongo_client = MongoClient(
            app.config["MONGODB_URI"],
            serverSelectionTimeoutMS=app.config["MONGODB_TIMEOUT_MS"],
            tz_aware=True,
        )
        atexit.register(mongo_client.close)
    app.mongo_client = mongo_client
    app.db = mongo_client[app.config["MONGODB_DB"]]
    app.store = EntityStore(app.db)
    app.store.ensure_indexes()

    if app.config["ENABLE_SEED"] is None:
        app.config["ENABLE_SEED"] = app.debug

    app.register_blueprint(api)
    app.logger.info("app_ready db=%s seed=%s", app.config["MONGODB_DB"], app.config["ENABLE_SEED"])
    return app
