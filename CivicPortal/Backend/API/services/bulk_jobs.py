"""
Bulk Maintenance Jobs

Long running admin jobs (resource geocoding, gallery alt text) run in Celery
workers. Progress and the stop flag live in the shared cache under the job id:
- job:{id}:progress  status snapshot returned to the admin UI
- job:{id}:stop      set by the stop route, read before each batch

A batch that has started always completes; stopping takes effect at the next
batch boundary.
"""

import time
import uuid

from flask import current_app

from extensions import cache, db
from log_config import get_app_logger
from models import CivicGallery, Resources, utcnow
from services.alt_text_service import generate_alt_text
from services.geocoding_service import geocode_address, is_po_box
from utils.errors import BadRequestError, NotFoundError, UpstreamError
from utils.validation_schemas import AltTextJobRequest

logger = get_app_logger()

JOB_TYPES = ('geocode', 'alt_text')
STATUS_QUEUED = 'queued'
STATUS_RUNNING = 'running'
STATUS_STOPPED = 'stopped'
STATUS_COMPLETED = 'completed'
STATUS_FAILED = 'failed'
JOB_TTL_SECONDS = 24 * 3600


def _progress_key(job_id):
    return f"job:{job_id}:progress"


def _stop_key(job_id):
    return f"job:{job_id}:stop"


def get_progress(job_id):
    progress = cache.get(_progress_key(job_id))
    if progress is None:
        raise NotFoundError(f"Job {job_id} not found")
    return progress


def _save_progress(job_id, **changes):
    progress = cache.get(_progress_key(job_id)) or {'job_id': job_id}
    progress.update(changes)
    progress['updated_at'] = utcnow().isoformat()
    cache.set(_progress_key(job_id), progress, timeout=JOB_TTL_SECONDS)
    return progress


def stop_requested(job_id):
    return bool(cache.get(_stop_key(job_id)))


def request_stop(job_id):
    progress = get_progress(job_id)
    if progress.get('status') in (STATUS_COMPLETED, STATUS_FAILED, STATUS_STOPPED):
        return progress
    cache.set(_stop_key(job_id), True, timeout=JOB_TTL_SECONDS)
    logger.info(f"Stop requested for job {job_id}")
    return _save_progress(job_id, stop_requested=True)


def dispatch_task(job_type, job_id, args):
    # imported here: bulk_tasks imports this module
    from services.bulk_tasks import TASKS
    TASKS[job_type].apply_async(args=args, task_id=job_id)


def start_job(job_type, payload=None, started_by=None):
    """Register a job and hand it to a Celery worker; returns the initial progress"""
    if job_type not in JOB_TYPES:
        raise BadRequestError(f"Unknown job type: {job_type}")

    job_id = str(uuid.uuid4())
    if job_type == 'alt_text':
        request_data = AltTextJobRequest.model_validate(payload or {})
        image_urls = list(request_data.image_urls)
        total = len(image_urls)
    else:
        image_urls = None
        total = None

    cache.delete(_stop_key(job_id))
    progress = _save_progress(
        job_id, type=job_type, status=STATUS_QUEUED, total=total, processed=0,
        stop_requested=False, started_by=started_by, result=None, error=None,
    )

    dispatch_task(job_type, job_id, [job_id, image_urls] if job_type == 'alt_text' else [job_id])
    logger.info(f"Queued {job_type} job {job_id} (started by {started_by})")
    return progress


def run_batches(job_id, items, batch_size, delay_seconds, handle_item):
    """Feed items to handle_item batch by batch; returns False when stopped early"""
    total = len(items)
    processed = 0
    for start in range(0, total, batch_size):
        if stop_requested(job_id):
            logger.info(f"Job {job_id} stopped after {processed}/{total} items")
            return False

        for item in items[start:start + batch_size]:
            handle_item(item)
            processed += 1
        _save_progress(job_id, processed=processed)

        if start + batch_size < total and delay_seconds:
            time.sleep(delay_seconds)
    return True


def _finish(job_id, completed, result):
    status = STATUS_COMPLETED if completed else STATUS_STOPPED
    cache.delete(_stop_key(job_id))
    return _save_progress(job_id, status=status, result=result)


def run_geocoding(job_id):
    """Geocode every resource with an address and no coordinates"""
    resources = Resources.query.filter(
        Resources.address.isnot(None),
        Resources.address != '',
        db.or_(Resources.latitude.is_(None), Resources.longitude.is_(None)),
    ).order_by(Resources.id).all()

    if not resources:
        result = {'success': True, 'geocoded': 0, 'failed': 0, 'skipped': 0,
                  'failedResources': [], 'message': 'All resources already geocoded'}
        _save_progress(job_id, total=0, status=STATUS_RUNNING)
        return _finish(job_id, True, result)

    _save_progress(job_id, total=len(resources), status=STATUS_RUNNING)
    counts = {'geocoded': 0, 'failed': 0, 'skipped': 0}
    failed_resources = []

    def handle(resource):
        if is_po_box(resource.address):
            logger.info(f"Skipping P.O. Box: {resource.organization_name} - {resource.address}")
            counts['skipped'] += 1
            return
        coordinates = geocode_address(resource.address)
        if coordinates is None:
            counts['failed'] += 1
            failed_resources.append({'id': resource.id, 'name': resource.organization_name, 'address': resource.address})
            return
        resource.latitude, resource.longitude = coordinates
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        counts['geocoded'] += 1

    completed = run_batches(
        job_id, resources, 1, current_app.config.get('GEOCODE_DELAY_SECONDS', 1.0), handle)

    result = {
        'success': True,
        **counts,
        'failedResources': failed_resources,
        'message': (f"Geocoded {counts['geocoded']} resources. {counts['failed']} failed. "
                    f"{counts['skipped']} skipped (P.O. Boxes).")
    }
    logger.info(f"Geocoding job {job_id}: {result['message']}")
    return _finish(job_id, completed, result)


def run_alt_text(job_id, image_urls):
    """Generate alt text per image URL and store it on matching gallery photos"""
    config = current_app.config
    _save_progress(job_id, total=len(image_urls), status=STATUS_RUNNING)
    results = []

    def handle(url):
        try:
            alt_text = generate_alt_text(url)
        except UpstreamError as e:
            logger.warning(f"Alt text generation failed for {url}: {e.message}")
            results.append({'url': url, 'altText': '', 'error': e.message})
            return
        results.append({'url': url, 'altText': alt_text})
        if not alt_text:
            return
        photos = CivicGallery.query.filter_by(photo_url=url).all()
        if not photos:
            return
        for photo in photos:
            photo.alt_text = alt_text
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    completed = run_batches(
        job_id, image_urls, config.get('ALT_TEXT_BATCH_SIZE', 3),
        config.get('ALT_TEXT_BATCH_DELAY_SECONDS', 2.0), handle)

    logger.info(f"Alt text job {job_id}: {len(results)}/{len(image_urls)} images processed")
    return _finish(job_id, completed, {'success': True, 'results': results})


def mark_failed(job_id, error):
    logger.error(f"Job {job_id} failed: {error}")
    cache.delete(_stop_key(job_id))
    return _save_progress(job_id, status=STATUS_FAILED, error=str(error))
