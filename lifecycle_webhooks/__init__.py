import contextlib
import logging
import os
import sys

from celery import Celery
from flask import Flask
from flask_sslify import SSLify
import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.flask import FlaskIntegration
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

__version__ = "0.1.0"

log_level = os.environ.get("LOGLEVEL", "INFO").upper()
logger = logging.getLogger(__name__)


def _setup_logging():
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    logger.addHandler(handler)
    logger.setLevel(log_level)
    # Every GitHub call would log a connection line.
    logging.getLogger("urllib3").setLevel("WARN")

_setup_logging()

celery = Celery(strict_typing=False)


def expand_config(name=None):
    """Turn a short name like "worker" into the dotted path of its config class."""
    return f"lifecycle_webhooks.config.{(name or 'default').capitalize()}Config"


def create_app(config=None):
    """
    Make the Flask app that receives GitHub webhooks.

    `config` is a short config name, defaulting to $LIFECYCLE_WEBHOOKS_CONFIG.
    """
    config = config or os.environ.get("LIFECYCLE_WEBHOOKS_CONFIG") or "default"
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app)   # type: ignore[method-assign]
    # The config classes adjust the redis urls in __init__, so instantiate.
    app.config.from_object(import_string(expand_config(config))())

    create_celery_app(app)
    if not (app.debug or app.testing):
        SSLify(app)

    from .github_views import github_bp
    from .tasks import tasks as tasks_bp
    app.register_blueprint(github_bp, url_prefix="/github")
    app.register_blueprint(tasks_bp, url_prefix="/tasks")
    return app


def create_celery_app(app=None, config="worker"):
    """
    Configure the Celery app so that tasks run inside a Flask app context.

    A task queued from a webhook view also gets the request context it was
    queued from, rebuilt from the `wsgi_environ` keyword argument, so that
    `url_for` makes the same external URLs there.
    """
    if os.environ.get("SENTRY_DSN"):
        sentry_sdk.init(integrations=[CeleryIntegration(), FlaskIntegration()])

    app = app or create_app(config=config)
    celery.main = app.import_name
    celery.conf.update(app.config)

    class ContextTask(celery.Task):  # type: ignore[name-defined]
        abstract = True

        def __call__(self, *args, wsgi_environ=None, **kwargs):
            # Exceptions are left to Celery, so a failed task is a FAILURE.
            with contextlib.ExitStack() as stack:
                stack.enter_context(app.app_context())
                if wsgi_environ:
                    stack.enter_context(app.request_context(wsgi_environ))
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    return celery
