import datetime
import logging
import traceback

from extensions import db
from models import Events
from services.civic_session_service import purge_expired_sessions


def archive_expired_events(today=None):
    """Mark events dated before today as archived; returns the number archived"""
    today = today or datetime.date.today()
    cutoff = today.isoformat()
    try:
        archived = Events.query.filter(
            Events.event_date < cutoff,
            Events.archived.is_(False)
        ).update({'archived': True}, synchronize_session=False)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    if archived:
        logging.info(f"Archived {archived} expired events (before {cutoff})")
    return archived


def scheduled_maintenance(app):
    """Interval job: archive expired events and drop expired civic sessions"""
    with app.app_context():
        try:
            archive_expired_events()
            removed = purge_expired_sessions()
            if removed:
                logging.info(f"Removed {removed} expired civic sessions")
        except Exception as e:
            logging.error(f"Scheduled maintenance failed: {str(e)}, {traceback.format_exc()}")
