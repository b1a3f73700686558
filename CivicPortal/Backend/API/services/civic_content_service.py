"""
Civic Content Service

Self-service content for a signed-in civic organization. A registry maps each
content type tag to its model, payload schema, list ordering and allowed
actions; handle_request is the one generic handler behind the gateway route.
Every read and write is scoped to the organization resolved from the session,
never to an id supplied by the client.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Type

from flask import current_app
from sqlalchemy import func

from extensions import db
from log_config import get_civic_logger
from models import (
    CivicOrganizations, CivicAnnouncements, CivicNewsletters, CivicLeadership,
    CivicImportantLinks, CivicGallery
)
from services import storage_service
from utils.errors import BadRequestError, NotFoundError
from utils.validation_schemas import (
    CivicAnnouncementPayload, CivicNewsletterPayload, CivicLeadershipPayload,
    CivicLinkPayload, CivicGalleryPayload, CivicGeneralSettingsPayload
)

logger = get_civic_logger()

ALL_ACTIONS = ('list', 'create', 'update', 'delete')


@dataclass(frozen=True)
class CivicContentType:
    model: Type
    schema: Type
    order_by: Any
    actions: Tuple[str, ...] = ALL_ACTIONS


CONTENT_TYPES = {
    'announcements': CivicContentType(CivicAnnouncements, CivicAnnouncementPayload,
                                      CivicAnnouncements.created_at.desc()),
    'newsletters': CivicContentType(CivicNewsletters, CivicNewsletterPayload,
                                    CivicNewsletters.upload_date.desc(), ('list', 'create', 'delete')),
    'leadership': CivicContentType(CivicLeadership, CivicLeadershipPayload,
                                   CivicLeadership.order_index.asc()),
    'links': CivicContentType(CivicImportantLinks, CivicLinkPayload,
                              CivicImportantLinks.order_index.asc()),
    'gallery': CivicContentType(CivicGallery, CivicGalleryPayload,
                                CivicGallery.order_index.asc()),
}

GENERAL_TYPE = 'general'


def _parse_id(item_id):
    if item_id in (None, ''):
        raise BadRequestError('Invalid action or missing parameters')
    try:
        return int(item_id)
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid id: {item_id}")


def _owned_item(model, org_id, item_id):
    item = model.query.filter_by(id=item_id, civic_org_id=org_id).first()
    if item is None:
        raise NotFoundError('Item not found')
    return item


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def gallery_count(org_id):
    return CivicGallery.query.filter_by(civic_org_id=org_id).count()


def _check_gallery_capacity(org_id, incoming):
    limit = current_app.config.get('GALLERY_PHOTO_LIMIT', 50)
    existing = gallery_count(org_id)
    if existing + incoming > limit:
        raise BadRequestError(
            f"Gallery is limited to {limit} photos. You can add {max(limit - existing, 0)} more.")


def _handle_general(org_id, action, payload):
    org = db.session.get(CivicOrganizations, org_id)
    if org is None:
        raise NotFoundError('Organization not found')

    if action == 'list':
        return org.to_dict()
    if action != 'update':
        raise BadRequestError('Invalid action or missing parameters')

    validated = CivicGeneralSettingsPayload.model_validate(payload or {})
    for key, value in validated.model_dump(mode='json').items():
        setattr(org, key, value)
    _commit()
    logger.info(f"Civic org {org_id} updated its general settings")
    return org.to_dict()


def handle_request(org_id, content_type, action, item_id, payload):
    """Dispatch one gateway call; returns a JSON-serializable result"""
    action = action or 'list'

    if content_type == GENERAL_TYPE:
        return _handle_general(org_id, action, payload)

    entry = CONTENT_TYPES.get(content_type)
    if entry is None:
        raise BadRequestError('Invalid content type')
    if action not in entry.actions:
        raise BadRequestError('Invalid action or missing parameters')

    model = entry.model

    if action == 'list':
        rows = model.query.filter_by(civic_org_id=org_id).order_by(entry.order_by).all()
        return [row.to_dict() for row in rows]

    if action == 'create':
        validated = entry.schema.model_validate(payload or {})
        if content_type == 'gallery':
            _check_gallery_capacity(org_id, 1)
        row = model(**validated.model_dump(mode='json'))
        row.civic_org_id = org_id
        db.session.add(row)
        _commit()
        logger.info(f"Civic org {org_id} created {content_type} {row.id}")
        return row.to_dict()

    item_id = _parse_id(item_id)
    row = _owned_item(model, org_id, item_id)

    if action == 'update':
        validated = entry.schema.model_validate(payload or {})
        for key, value in validated.model_dump(mode='json').items():
            setattr(row, key, value)
        _commit()
        logger.info(f"Civic org {org_id} updated {content_type} {item_id}")
        return row.to_dict()

    db.session.delete(row)
    _commit()
    logger.info(f"Civic org {org_id} deleted {content_type} {item_id}")
    return {'success': True}


def upload_gallery_photos(org_id, files, title=None, description=None):
    """
    Store several gallery images for an organization

    All files are checked (count cap and per-file size) before any object is
    written, so a rejected batch leaves storage and the gallery untouched.
    """
    if not files:
        raise BadRequestError('Please select at least one image')

    max_bytes = current_app.config.get('MAX_GALLERY_PHOTO_BYTES', 5 * 1024 * 1024)
    _check_gallery_capacity(org_id, len(files))

    payloads = []
    for f in files:
        if not (f.mimetype or '').startswith('image/'):
            raise BadRequestError('Please select only image files')
        data = f.read()
        if len(data) > max_bytes:
            raise BadRequestError('Images must be under 5MB each')
        payloads.append((f.filename, f.mimetype, data))

    bucket = current_app.config.get('CIVIC_FILES_BUCKET', 'civic-files')
    client = storage_service.get_storage_client()

    max_order = db.session.query(func.max(CivicGallery.order_index)).filter(
        CivicGallery.civic_org_id == org_id).scalar()
    next_order = -1 if max_order is None else max_order

    rows = []
    for index, (filename, mimetype, data) in enumerate(payloads):
        key = storage_service.generate_object_key(f"gallery/{org_id}", filename)
        url = storage_service.upload_bytes(bucket, key, data, mimetype, client=client)
        row = CivicGallery(
            civic_org_id=org_id,
            photo_url=url,
            title=title or None,
            description=description or None,
            order_index=next_order + index + 1
        )
        db.session.add(row)
        rows.append(row)

    _commit()
    logger.info(f"Civic org {org_id} uploaded {len(rows)} gallery photo(s)")
    return [row.to_dict() for row in rows]
