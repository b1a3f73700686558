"""
Admin Account Service

Admins sign in with email and password and carry a Flask-JWT-Extended access
token. New admins are invited by a main admin: the account is created with a
random temporary password and the invitee sets a real one through a signed,
24 hour password-setup link.
"""

import datetime
import secrets
import uuid

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from extensions import db
from log_config import get_app_logger
from models import Users, UserRoles, UserProfiles, ROLE_MAIN_ADMIN, ROLE_SUB_ADMIN, utcnow
from services.submission_service import get_role
from utils.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from utils.password_utils import hash_password, verify_password
from utils.validation_schemas import AcceptInviteRequest, AdminLoginRequest, InviteAdminRequest

logger = get_app_logger()

ADMIN_ROLES = (ROLE_MAIN_ADMIN, ROLE_SUB_ADMIN)
INVITE_PURPOSE = 'admin_invite'
ACCESS_TOKEN_DAYS = 1


def issue_access_token(user_id):
    return create_access_token(identity=user_id, expires_delta=datetime.timedelta(days=ACCESS_TOKEN_DAYS))


def login(payload):
    credentials = AdminLoginRequest.model_validate(payload or {})
    user = Users.query.filter_by(email=credentials.email.lower(), is_deleted=False).first()
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Admin login failed for {credentials.email}")
        raise UnauthorizedError('Invalid email or password')

    user.login_time = utcnow()
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Admin login: {user.id}")
    return {
        'user': user.to_dict(),
        'role': get_role(user.id),
        'token': issue_access_token(user.id)
    }


def me(user_id):
    user = Users.query.filter_by(id=user_id, is_deleted=False).first()
    if not user:
        raise NotFoundError('User not found')
    profile = UserProfiles.query.filter_by(user_id=user_id).first()
    return {
        'user': user.to_dict(),
        'role': get_role(user_id),
        'profile': profile.to_dict() if profile else None
    }


def invite_admin(payload, actor_id):
    """Create an admin account with a temporary password and return its password-setup link"""
    if get_role(actor_id) != ROLE_MAIN_ADMIN:
        raise ForbiddenError('Only main admins can invite admins')

    request_data = InviteAdminRequest.model_validate(payload or {})
    if request_data.role not in ADMIN_ROLES:
        raise BadRequestError("Invalid role. Must be 'main_admin' or 'sub_admin'")

    email = request_data.email.lower()
    if Users.query.filter_by(email=email).first():
        raise ConflictError('A user with this email already exists')

    user = Users(
        id=str(uuid.uuid4()),
        email=email,
        # temporary password nobody knows; replaced when the invite is accepted
        password_hash=hash_password(secrets.token_urlsafe(24)),
        is_deleted=False
    )
    try:
        db.session.add(user)
        db.session.flush()
        db.session.add(UserRoles(user_id=user.id, role=request_data.role, created_by=actor_id))
        db.session.add(UserProfiles(
            user_id=user.id,
            full_name=request_data.full_name,
            phone_number=request_data.phone_number
        ))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    hours = current_app.config.get('INVITE_LINK_HOURS', 24)
    token = create_access_token(
        identity=user.id,
        additional_claims={'purpose': INVITE_PURPOSE},
        expires_delta=datetime.timedelta(hours=hours)
    )
    frontend_url = current_app.config.get('FRONTEND_URL', '').rstrip('/')
    logger.info(f"Admin {actor_id} invited {email} as {request_data.role}")
    return {
        'success': True,
        'user_id': user.id,
        'email': email,
        'role': request_data.role,
        'invite_link': f"{frontend_url}/accept-invite?token={token}",
        'expires_in_hours': hours
    }


def accept_invite(payload):
    """Set the invited admin's password from a valid invite token"""
    request_data = AcceptInviteRequest.model_validate(payload or {})
    try:
        claims = decode_token(request_data.token)
    except (JWTExtendedException, PyJWTError) as e:
        logger.warning(f"Invite token rejected: {e}")
        raise UnauthorizedError('Invalid or expired invite link')

    if claims.get('purpose') != INVITE_PURPOSE:
        raise UnauthorizedError('Invalid or expired invite link')

    user = Users.query.filter_by(id=claims.get('sub'), is_deleted=False).first()
    if not user:
        raise NotFoundError('User not found')

    user.password_hash = hash_password(request_data.password)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info(f"Invite accepted by {user.id}")
    return {'success': True, 'token': issue_access_token(user.id), 'role': get_role(user.id)}


def list_admins(actor_id):
    if get_role(actor_id) != ROLE_MAIN_ADMIN:
        raise ForbiddenError('Only main admins can list admins')
    rows = db.session.query(Users, UserRoles, UserProfiles) \
        .join(UserRoles, UserRoles.user_id == Users.id) \
        .outerjoin(UserProfiles, UserProfiles.user_id == Users.id) \
        .filter(Users.is_deleted.is_(False)) \
        .order_by(Users.created_at.desc()).all()
    return [{
        **user.to_dict(),
        'role': role.role,
        'full_name': profile.full_name if profile else None,
        'phone_number': profile.phone_number if profile else None
    } for user, role, profile in rows]
