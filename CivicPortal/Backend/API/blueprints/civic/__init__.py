import os
from flask import Blueprint

api_civic_bp = Blueprint('civic', __name__)
yaml_folder = os.path.join(os.path.dirname(__file__), '..', '..', 'docs', 'civic')

from . import civic_auth_routes
from . import civic_content_routes
from . import civic_admin_routes

__all__ = ['api_civic_bp']
