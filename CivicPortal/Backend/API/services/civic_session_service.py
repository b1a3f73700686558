"""
Civic Session Service

Civic organizations sign in with an access code and password instead of an
admin account. A successful login stores an opaque UUID session token in
civic_org_sessions; every self-service request resolves that token to the
owning organization id server-side.
"""

import uuid
from datetime import datetime, timedelta, timezone

from flask import current_app, jsonify

from extensions import db
from log_config import get_civic_logger
from models import CivicOrganizations, CivicOrgSessions
from utils.errors import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError, ConflictError
from utils.password_utils import hash_password, verify_password, needs_reset
from utils.validation_schemas import CivicLoginRequest, CivicOrganizationCreate, dump_payload

logger = get_civic_logger()

PASSWORD_NEEDS_RESET_MESSAGE = (
    'Your password format needs to be updated. '
    'Please contact the platform administrator to reset your password.'
)


class PasswordNeedsReset(UnauthorizedError):
    def to_response(self):
        return jsonify({'error': 'PASSWORD_NEEDS_RESET', 'message': self.message}), self.status_code


def _as_aware(value):
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def login(payload):
    credentials = CivicLoginRequest.model_validate(payload or {})
    org = CivicOrganizations.query.filter_by(access_code=credentials.access_code).first()
    if not org:
        logger.warning(f"Civic login failed: unknown access code {credentials.access_code}")
        raise UnauthorizedError('Invalid credentials')

    if not org.is_active:
        raise ForbiddenError('Organization is not active')

    if needs_reset(org.password_hash):
        logger.info(f"Civic login for org {org.id} blocked: legacy password hash")
        raise PasswordNeedsReset(PASSWORD_NEEDS_RESET_MESSAGE)

    if not verify_password(credentials.password, org.password_hash):
        logger.warning(f"Civic login failed for org {org.id}: bad password")
        raise UnauthorizedError('Invalid credentials')

    hours = current_app.config.get('CIVIC_SESSION_HOURS', 24)
    expires_at = datetime.now(timezone.utc) + timedelta(hours=hours)
    session = CivicOrgSessions(
        civic_org_id=org.id,
        session_token=str(uuid.uuid4()),
        expires_at=expires_at
    )
    try:
        db.session.add(session)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Civic session created for org {org.id}, expires {expires_at.isoformat()}")
    return {
        'session_token': session.session_token,
        'org_id': org.id,
        'org_name': org.name,
        'expires_at': expires_at.isoformat()
    }


def resolve_org_id(session_token):
    """Organization id owning an unexpired session, or None"""
    if not session_token:
        return None
    session = CivicOrgSessions.query.filter_by(session_token=session_token).first()
    if not session:
        return None
    if _as_aware(session.expires_at) <= datetime.now(timezone.utc):
        return None
    return session.civic_org_id


def require_org_id(session_token):
    if not session_token:
        raise UnauthorizedError('Session token required')
    org_id = resolve_org_id(session_token)
    if not org_id:
        raise UnauthorizedError('Invalid or expired session')
    return org_id


def validate(session_token):
    if not session_token:
        raise BadRequestError('Session token is required')
    org_id = resolve_org_id(session_token)
    if not org_id:
        raise UnauthorizedError('Invalid or expired session')

    org = db.session.get(CivicOrganizations, org_id)
    if not org or not org.is_active:
        raise NotFoundError('Organization not found or inactive')
    return {'valid': True, 'org_id': org.id, 'org_name': org.name}


def logout(session_token):
    if not session_token:
        raise BadRequestError('Session token is required')
    try:
        CivicOrgSessions.query.filter_by(session_token=session_token).delete()
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Civic logout failed')
    return {'success': True}


def purge_expired_sessions():
    removed = CivicOrgSessions.query.filter(
        CivicOrgSessions.expires_at < datetime.now(timezone.utc)).delete()
    db.session.commit()
    return removed


def reset_password(org_id, new_password):
    """Main-admin password reset; clears the legacy-hash flag"""
    if not org_id or not new_password:
        raise BadRequestError('org_id and new_password are required')
    if len(new_password) < 8:
        raise BadRequestError('Password must be at least 8 characters long')

    org = db.session.get(CivicOrganizations, org_id)
    if not org:
        raise NotFoundError('Organization not found')

    org.password_hash = hash_password(new_password)
    org.password_needs_reset = False
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info(f"Password reset for civic org {org_id}")
    return {'success': True, 'message': 'Password reset successfully'}


def create_organization(payload):
    """Main-admin creation of a civic organization with its initial password"""
    validated = CivicOrganizationCreate.model_validate(payload or {})
    if CivicOrganizations.query.filter_by(access_code=validated.access_code).first():
        raise ConflictError('Access code already in use')

    data = dump_payload(validated)
    password = data.pop('password')
    data['contact_info'] = data.get('contact_info') or {}
    org = CivicOrganizations(**data, password_hash=hash_password(password), password_needs_reset=False)
    try:
        db.session.add(org)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info(f"Civic organization {org.id} created")
    return org.to_dict(include_private=True)
