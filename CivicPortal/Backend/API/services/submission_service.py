"""
Submission Service (role gate)

One entry point per kind of write so the caller's role is resolved once:
- submit_or_stage: new content. Sub-admins write to the pending_* staging
  table, main admins write to the live table.
- modify_or_stage: edits and deletes of live rows. Sub-admins record a
  pending modification carrying a merged snapshot, main admins apply it.
- submit_public: anonymous public forms, always reviewed before going live.
"""

from extensions import db
from log_config import get_moderation_logger
from models import UserRoles, UserProfiles, Jobs, ROLE_MAIN_ADMIN, ROLE_SUB_ADMIN
from services.content_registry import (
    STAGING_TYPES, MODIFIABLE_ENTITIES, DIRECT_ONLY_ENTITIES,
    get_modification_type, normalize_action
)
from services.approval_service import apply_modification_data
from utils.errors import BadRequestError, ForbiddenError, NotFoundError
from utils.password_utils import hash_password
from utils.validation_schemas import (
    PasswordChange, PublicResourceSubmission, EventSubmission, JobSubmission, dump_payload,
    validate_changes
)

logger = get_moderation_logger()

# columns never copied into a modification snapshot
SNAPSHOT_EXCLUDED = ('id', 'created_at', 'updated_at', 'password_hash')

PUBLIC_SCHEMAS = {
    'resource': PublicResourceSubmission,
    'event': EventSubmission,
    'job': JobSubmission,
}


def get_role(user_id):
    if not user_id:
        return None
    role = UserRoles.query.filter_by(user_id=user_id).first()
    return role.role if role else None


def require_role(user_id):
    role = get_role(user_id)
    if role not in (ROLE_MAIN_ADMIN, ROLE_SUB_ADMIN):
        raise ForbiddenError('Admin role required')
    return role


def snapshot(row):
    """Column values of a live row, minus keys and secrets"""
    return {
        c.name: getattr(row, c.name)
        for c in row.__table__.columns
        if c.name not in SNAPSHOT_EXCLUDED
    }


def _commit(row):
    try:
        db.session.add(row)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return row


def submit_or_stage(entity_type, payload, actor_id):
    """Create content as the caller: staged for sub-admins, live for main admins"""
    role = require_role(actor_id)

    entry = STAGING_TYPES.get(entity_type)
    if entry is None:
        raise BadRequestError(f"Unknown entity type: {entity_type}")

    data = dump_payload(entry.schema.model_validate(payload))
    if role == ROLE_SUB_ADMIN:
        record = _commit(entry.pending_model(**data, submitted_by=actor_id, status='pending'))
        logger.info(f"Staged {entity_type} {record.id} from sub-admin {actor_id}")
        return {'staged': True, 'record': record.to_dict()}
    record = _commit(entry.live_model(**data))
    logger.info(f"Created live {entity_type} {record.id} by main admin {actor_id}")
    return {'staged': False, 'record': record.to_dict()}


def _proposed_data(entity, schema, target, action, changes):
    current = snapshot(target)
    if action == 'delete':
        return current
    if action == 'deactivate':
        current['is_active'] = False
        return current
    if action == 'password_change':
        password = PasswordChange.model_validate(changes or {}).password
        return {'password_hash': hash_password(password), 'password_needs_reset': False}

    current.update(validate_changes(schema, changes))
    return current


def _submitter_profile(user_id):
    profile = UserProfiles.query.filter_by(user_id=user_id).first()
    if not profile:
        return None, None
    return profile.full_name, profile.phone_number


def modify_or_stage(entity_type, target_id, action, changes, actor_id):
    """Edit or delete a live row as the caller: queued for sub-admins, applied for main admins"""
    role = require_role(actor_id)
    action = normalize_action(action)

    if entity_type in DIRECT_ONLY_ENTITIES:
        if role != ROLE_MAIN_ADMIN:
            raise ForbiddenError(f"Only main admins can modify {entity_type} records")
        model, schema = DIRECT_ONLY_ENTITIES[entity_type]
        if action not in ('update', 'delete'):
            raise BadRequestError(f"Unsupported action '{action}' for {entity_type}")
        target = db.session.get(model, target_id)
        if target is None:
            raise NotFoundError(f"{entity_type} {target_id} not found")
        return _apply_directly(entity_type, target, action,
                               _proposed_data(entity_type, schema, target, action, changes), actor_id)

    mod_name = MODIFIABLE_ENTITIES.get(entity_type)
    if not mod_name:
        raise BadRequestError(f"Unknown entity type: {entity_type}")
    entry = get_modification_type(mod_name)
    if action not in entry.actions:
        raise BadRequestError(f"Unsupported action '{action}' for {entity_type}")

    target = db.session.get(entry.live_model, target_id)
    if target is None:
        raise NotFoundError(f"{entity_type} {target_id} not found")

    modified_data = _proposed_data(entity_type, entry.schema, target, action, changes)

    if role == ROLE_MAIN_ADMIN:
        return _apply_directly(entity_type, target, action, modified_data, actor_id)

    name, phone = _submitter_profile(actor_id)
    row = entry.modification_model(
        action=action,
        modified_data=modified_data,
        submitted_by=actor_id,
        submitter_name=name,
        submitter_phone=phone,
        status='pending'
    )
    setattr(row, entry.fk_column, target_id)
    _commit(row)
    logger.info(f"Queued {action} of {entity_type} {target_id} from sub-admin {actor_id}")
    return {'staged': True, 'record': row.to_dict()}


def _apply_directly(entity_type, target, action, modified_data, actor_id):
    target_id = target.id
    try:
        if action == 'delete':
            db.session.delete(target)  # reports go with it
            db.session.commit()
            logger.info(f"Deleted {entity_type} {target_id} by main admin {actor_id}")
            return {'staged': False, 'record': None, 'deleted': True}

        apply_modification_data(target, modified_data)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Applied {action} to {entity_type} {target_id} by main admin {actor_id}")
    return {'staged': False, 'record': target.to_dict()}


def submit_public(entity_type, payload):
    """Anonymous submission: resources and events are staged, jobs are stored inactive"""
    schema = PUBLIC_SCHEMAS.get(entity_type)
    if not schema:
        raise BadRequestError(f"Public submissions are not accepted for: {entity_type}")
    data = dump_payload(schema.model_validate(payload))
    data.pop('civic_org_id', None)

    if entity_type == 'job':
        data['is_active'] = False
        record = _commit(Jobs(**data))
    else:
        entry = STAGING_TYPES[entity_type]
        record = _commit(entry.pending_model(**data, submitted_by=None, status='pending'))

    logger.info(f"Public {entity_type} submission {record.id} stored for review")
    return record.to_dict()
