"""
Civic content gateway routes

One endpoint serves every self-service content type of a civic organization:
    /civic/content?type=<announcements|newsletters|leadership|links|gallery|general>
                  &action=<list|create|update|delete>&id=<item id>

The x-session-token header is resolved to the organization id on the server;
a civic_org_id in the body is ignored.
"""

from flask import jsonify, request
from services import civic_content_service
from services.civic_session_service import require_org_id
from utils.auth_utils import get_session_token
from utils.swagger_loader import get_swag_from
from log_config import get_civic_logger
from . import api_civic_bp, yaml_folder

logger = get_civic_logger()


@api_civic_bp.route('/content', methods=['GET', 'POST', 'PUT', 'DELETE'])
@get_swag_from(yaml_folder, 'content.yaml')
def civic_content():
    org_id = require_org_id(get_session_token())

    content_type = request.args.get('type')
    action = request.args.get('action', 'list')
    item_id = request.args.get('id')

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    payload.pop('civic_org_id', None)

    result = civic_content_service.handle_request(org_id, content_type, action, item_id, payload)
    status = 201 if action == 'create' else 200
    return jsonify(result), status


# POST /civic/gallery/upload 갤러리 사진 업로드 (multipart, files[] 최대 5MB, 총 50장)
@api_civic_bp.route('/gallery/upload', methods=['POST'])
@get_swag_from(yaml_folder, 'gallery_upload.yaml')
def upload_gallery():
    org_id = require_org_id(get_session_token())

    files = [f for f in request.files.getlist('files') if f and f.filename]
    title = request.form.get('title')
    description = request.form.get('description')

    photos = civic_content_service.upload_gallery_photos(org_id, files, title, description)
    return jsonify({'success': True, 'photos': photos, 'count': len(photos)}), 201
