"""
Approval Service

Reviews the moderation queue:
- Lists pending staging rows and pending modification rows as one feed
- Approves: copies a staging row into its live table, or applies a
  modification to its live row, then marks the queue row approved
- Rejects: marks the queue row rejected without touching live tables

The live write and the status change share one transaction. The status
change is a conditional UPDATE on status='pending', so a row can only leave
the pending state once even when two reviewers race.
"""

from datetime import datetime, timezone

from extensions import db
from log_config import get_moderation_logger
from services.content_registry import (
    STAGING_TYPES, MODIFICATION_TYPES, get_staging_type, get_modification_type, normalize_action
)
from utils.errors import BadRequestError, NotFoundError, ConflictError

logger = get_moderation_logger()

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _as_aware(value):
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _staging_item(type_name, entry, row):
    return {
        'id': row.id,
        'type': type_name,
        'title': getattr(row, entry.title_field),
        'submitted_by': row.submitted_by,
        'submitted_at': row.submitted_at.isoformat() if row.submitted_at else None,
        'status': row.status,
        'data': row.to_dict()
    }


def _modification_item(type_name, entry, row):
    action = normalize_action(row.action)
    return {
        'id': row.id,
        'type': type_name,
        'title': f"{action.upper()}: {row.target_label()}",
        'submitted_by': row.submitted_by,
        'submitted_at': row.submitted_at.isoformat() if row.submitted_at else None,
        'status': row.status,
        'action': action,
        'original_id': getattr(row, entry.fk_column),
        'data': row.to_dict()
    }


def _collect(**filters):
    items = []
    for type_name, entry in STAGING_TYPES.items():
        for row in entry.pending_model.query.filter_by(**filters).all():
            items.append((row.submitted_at, _staging_item(type_name, entry, row)))
    for type_name, entry in MODIFICATION_TYPES.items():
        for row in entry.modification_model.query.filter_by(**filters).all():
            items.append((row.submitted_at, _modification_item(type_name, entry, row)))

    items.sort(key=lambda pair: _as_aware(pair[0]), reverse=True)
    return [item for _, item in items]


def list_pending():
    """Every pending staging and modification row, newest submission first"""
    return _collect(status='pending')


def my_submissions(user_id):
    """Everything the caller submitted for review, any status, newest first"""
    return _collect(submitted_by=user_id)


def _resolve(item_type):
    staging = get_staging_type(item_type)
    if staging:
        return staging, staging.pending_model
    modification = get_modification_type(item_type)
    if modification:
        return modification, modification.modification_model
    raise BadRequestError(f"Unknown item type: {item_type}")


def _load_pending_row(model, item_type, item_id):
    row = db.session.get(model, item_id)
    if row is None:
        raise NotFoundError(f"{item_type} {item_id} not found")
    if row.status != 'pending':
        raise ConflictError(f"{item_type} {item_id} was already {row.status}")
    return row


def _mark_reviewed(model, item_type, item_id, status, reviewer_id, notes):
    review_data = {
        'status': status,
        'reviewed_by': reviewer_id,
        'reviewed_at': datetime.now(timezone.utc),
        'review_notes': notes
    }
    updated = model.query.filter_by(id=item_id, status='pending').update(
        review_data, synchronize_session=False)
    if updated == 0:
        raise ConflictError(f"{item_type} {item_id} is no longer pending")


def apply_modification_data(live_row, modified_data, protected=('id', 'created_at', 'updated_at')):
    """Write modified_data onto a live row, ignoring keys that are not columns"""
    columns = {c.name for c in live_row.__table__.columns}
    for key, value in (modified_data or {}).items():
        if key in columns and key not in protected:
            setattr(live_row, key, value)


def _apply_modification(entry, row):
    action = normalize_action(row.action)
    target_id = getattr(row, entry.fk_column)
    live_row = db.session.get(entry.live_model, target_id) if target_id is not None else None

    if action == 'delete':
        if live_row is not None:
            db.session.delete(live_row)
        else:
            logger.warning(f"{entry.name} {row.id}: target already removed")
        return None

    if live_row is None:
        raise ConflictError(f"Target of {entry.name} {row.id} no longer exists")
    if action not in entry.actions:
        raise BadRequestError(f"Unsupported action '{action}' for {entry.name}")

    apply_modification_data(live_row, row.modified_data)
    return live_row


def approve(item_type, item_id, reviewer_id, notes=None):
    """Approve a queue row and apply it to the live tables in one transaction"""
    entry, model = _resolve(item_type)
    row = _load_pending_row(model, item_type, item_id)

    try:
        if item_type in STAGING_TYPES:
            live_row = entry.live_model(**{f: getattr(row, f) for f in entry.copy_fields})
            db.session.add(live_row)
        else:
            live_row = _apply_modification(entry, row)

        db.session.flush()
        _mark_reviewed(model, item_type, item_id, 'approved', reviewer_id, notes)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception(f"Approve failed for {item_type} {item_id}")
        raise

    logger.info(f"Approved {item_type} {item_id} by {reviewer_id}")
    return {
        'success': True,
        'type': item_type,
        'id': item_id,
        'live_record': live_row.to_dict() if live_row is not None else None
    }


def reject(item_type, item_id, reviewer_id, notes=None):
    """Reject a queue row; live tables are not touched"""
    _, model = _resolve(item_type)
    _load_pending_row(model, item_type, item_id)

    try:
        _mark_reviewed(model, item_type, item_id, 'rejected', reviewer_id, notes)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Rejected {item_type} {item_id} by {reviewer_id}")
    return {'success': True, 'type': item_type, 'id': item_id}
