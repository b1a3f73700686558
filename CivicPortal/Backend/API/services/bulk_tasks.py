from celery_app import celery_app
from log_config import get_app_logger
from services import bulk_jobs

logger = get_app_logger()

_flask_app = None


def _get_flask_app():
    """Flask app for the worker process, created once on first task"""
    global _flask_app
    if _flask_app is None:
        from app import create_app
        _flask_app = create_app()
    return _flask_app


@celery_app.task(name='bulk.geocode_resources')
def geocode_task(job_id):
    with _get_flask_app().app_context():
        try:
            return bulk_jobs.run_geocoding(job_id)
        except Exception as e:
            bulk_jobs.mark_failed(job_id, e)
            raise


@celery_app.task(name='bulk.generate_alt_text')
def alt_text_task(job_id, image_urls):
    with _get_flask_app().app_context():
        try:
            return bulk_jobs.run_alt_text(job_id, image_urls)
        except Exception as e:
            bulk_jobs.mark_failed(job_id, e)
            raise


TASKS = {
    'geocode': geocode_task,
    'alt_text': alt_text_task,
}
