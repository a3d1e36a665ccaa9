"""
The Celery application for the worker process:

  $ celery -A lifecycle_webhooks.worker worker

Celery can't take a factory function as the application, so this module
makes the instance.
"""

from lifecycle_webhooks import create_celery_app

application = create_celery_app(config="worker")
