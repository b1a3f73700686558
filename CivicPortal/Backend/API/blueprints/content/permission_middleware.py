"""
Permission middleware for admin routes

This module provides the role lookups and decorators shared by every admin
blueprint:
- main_admin - publishes directly, reviews the moderation queue, manages
  admins, agencies and civic organizations
- sub_admin - contributes content; writes are staged for review

Decorators run after @jwt_required, so an anonymous caller never reaches them.
"""

from functools import wraps
from flask import jsonify, g
from flask_jwt_extended import get_jwt_identity
from models import Users, UserRoles, ROLE_MAIN_ADMIN, ROLE_SUB_ADMIN
from log_config import get_moderation_logger

# Initialize logger
logger = get_moderation_logger()


def get_current_user():
    """
    Get the current authenticated user from JWT

    Returns:
        User object or None
    """
    user_id = get_jwt_identity()
    if not user_id:
        return None
    return Users.query.filter_by(id=user_id, is_deleted=False).first()


def get_user_role(user_id):
    """
    Get the admin role of a user

    Args:
        user_id: User ID

    Returns:
        'main_admin', 'sub_admin' or None
    """
    role = UserRoles.query.filter_by(user_id=user_id).first()
    return role.role if role else None


# ========== Decorators ==========

def _require_roles(allowed_roles, message):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = get_current_user()
            if not user:
                return jsonify({'error': 'Authentication required'}), 401

            role = get_user_role(user.id)
            if role not in allowed_roles:
                logger.warning(f"User {user.id} with role {role} denied: {message}")
                return jsonify({'error': message}), 403

            g.current_user = user
            g.user_role = role
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_admin():
    """
    Decorator to require any admin role (main_admin or sub_admin)

    Usage:
        @jwt_required(locations=['headers','cookies'])
        @require_admin()
        def submit_content():
            ...
    """
    return _require_roles((ROLE_MAIN_ADMIN, ROLE_SUB_ADMIN), 'Admin role required')


def require_main_admin():
    """
    Decorator to require the main_admin role

    Usage:
        @jwt_required(locations=['headers','cookies'])
        @require_main_admin()
        def approve(item_type, item_id):
            ...
    """
    return _require_roles((ROLE_MAIN_ADMIN,), 'Main admin role required')
