from extensions import db
from log_config import get_moderation_logger
from models import Jobs, JobReports, Resources, ResourceReports
from services.submission_service import modify_or_stage, require_role
from utils.errors import BadRequestError, NotFoundError
from utils.validation_schemas import ReportSubmission, dump_payload

logger = get_moderation_logger()

# target tag -> (live model, report model, fk column)
REPORT_TARGETS = {
    'job': (Jobs, JobReports, 'job_id'),
    'resource': (Resources, ResourceReports, 'resource_id'),
}


def _target(target_type):
    entry = REPORT_TARGETS.get(target_type)
    if not entry:
        raise BadRequestError(f"Reports are not supported for: {target_type}")
    return entry


def file_report(target_type, target_id, payload):
    """Public report against a job or resource"""
    live_model, report_model, fk = _target(target_type)
    if db.session.get(live_model, target_id) is None:
        raise NotFoundError(f"{target_type} {target_id} not found")

    data = dump_payload(ReportSubmission.model_validate(payload))
    report = report_model(**data)
    setattr(report, fk, target_id)
    try:
        db.session.add(report)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info(f"Report {report.id} filed against {target_type} {target_id}: {report.reason}")
    return report.to_dict()


def list_reports(target_type, actor_id):
    require_role(actor_id)
    _, report_model, _ = _target(target_type)
    reports = report_model.query.order_by(report_model.created_at.desc()).all()
    return [r.to_dict(include_target=True) for r in reports]


def resolve_report(target_type, report_id, resolution, actor_id):
    """
    'remove' deletes the reported item (its reports cascade) through the role gate,
    'dismiss' deletes only this report.
    """
    require_role(actor_id)
    _, report_model, fk = _target(target_type)
    report = db.session.get(report_model, report_id)
    if report is None:
        raise NotFoundError(f"Report {report_id} not found")

    if resolution == 'dismiss':
        try:
            db.session.delete(report)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info(f"Dismissed {target_type} report {report_id} by {actor_id}")
        return {'success': True, 'resolution': 'dismiss'}

    if resolution == 'remove':
        result = modify_or_stage(target_type, getattr(report, fk), 'delete', None, actor_id)
        return {'success': True, 'resolution': 'remove', 'staged': result['staged']}

    raise BadRequestError("resolution must be 'remove' or 'dismiss'")
