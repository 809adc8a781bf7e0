import logging
import os

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from config import Config

db = SQLAlchemy()


def create_app(config_class=Config):
    """Create a Flask app with SQLAlchemy database support."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.getLogger(__name__).setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db_uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if db_uri.startswith('sqlite:///') and db_uri != 'sqlite:///:memory:':
        db_path = db_uri.replace('sqlite:///', '', 1)
        db_dir = os.path.dirname(db_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)

    # Initialize database
    db.init_app(app)

    from . import models  # noqa: F401

    # Auto-create tables for fresh SQLite databases so new environments
    # don't crash when queries run before migrations are applied.
    if db_uri.startswith('sqlite:///'):
        with app.app_context():
            db.create_all()

    # register blueprints
    from .routes import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    return app
