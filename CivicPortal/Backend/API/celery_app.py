from celery import Celery
from config import Config

# Celery with broker and backend from Config, so workers start without the Flask app
celery_app = Celery(
    'civic_portal_api',
    broker=Config.broker_url,
    backend=Config.result_backend
)
celery_app.conf.result_expires = Config.result_expires

# modules holding the task definitions
celery_app.conf.imports = ('services.bulk_tasks',)


# called by create_app so tasks queued from a request see the app config
def init_app_for_celery(app):
    celery_app.conf.update(
        task_always_eager=app.config.get('CELERY_TASK_ALWAYS_EAGER', False),
    )
