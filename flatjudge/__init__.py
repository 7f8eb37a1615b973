from flask import Flask
from .config import Config
from .extensions import db


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)

    # Tests (and one-off scripts) swap the DB URL etc. here
    if overrides:
        app.config.update(overrides)

    db.init_app(app)

    return app
