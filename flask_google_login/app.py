"""
Application factory for the Google login example.
"""

import logging
import sys

from flask import Flask

from .auth import setup_auth_routes
from .config import Config
from .pages import setup_page_routes


def configure_logging(app):
    """Send app logs to stdout, reusing gunicorn's handlers when served by it."""
    gunicorn_logger = logging.getLogger('gunicorn.error')
    if not app.debug and gunicorn_logger.handlers:
        # Production logging for Cloud Run
        app.logger.handlers = gunicorn_logger.handlers
        app.logger.setLevel(gunicorn_logger.level)
    elif app.debug:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            stream=sys.stdout,
            force=True
        )

    # Cloud Run captures logs from stdout/stderr
    for handler in app.logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setStream(sys.stdout)


def create_app(test_config=None):
    """
    Build the Flask app with login, dashboard, callback and logout routes.

    Args:
        test_config: Mapping applied to ``app.config`` before configuration
            is resolved (optional)

    Returns:
        Flask: The configured application
    """
    app = Flask(__name__)
    if test_config:
        app.config.update(test_config)

    configure_logging(app)
    app.logger.info("Flask app starting up...")

    Config(app)
    setup_page_routes(app)
    setup_auth_routes(app)

    return app
