"""
Content routes - Main blueprint module

The content, moderation and report endpoints share one set of services, so
their route modules live together under blueprints/content:
- public_routes: public listings and anonymous submissions (/content)
- admin_routes: admin create / edit / delete through the role gate (/content)
- pending_approve_routes: moderation queue review (/moderation)
- report_routes: job and resource reports (/reports)
"""

from flask import Blueprint
from log_config import get_moderation_logger

api_content_bp = Blueprint('content', __name__)
api_moderation_bp = Blueprint('moderation', __name__)
api_reports_bp = Blueprint('reports', __name__)

logger = get_moderation_logger()


def register_all_routes():
    """Register all route modules to their blueprints"""
    try:
        from .content.public_routes import register_public_routes
        from .content.admin_routes import register_admin_routes
        from .content.pending_approve_routes import register_pending_approve_routes
        from .content.report_routes import register_report_routes

        register_public_routes(api_content_bp)
        register_admin_routes(api_content_bp)
        register_pending_approve_routes(api_moderation_bp)
        register_report_routes(api_reports_bp)

        logger.info("Successfully registered content, moderation and report routes")

    except ImportError as e:
        logger.error(f"Failed to import route modules: {str(e)}")
        raise


# Register all routes when module is imported
register_all_routes()
