"""
Admin content routes

Create, edit and delete of live content by admins. Every write goes through
the role gate in submission_service: a sub_admin's write is staged for review
(HTTP 202), a main_admin's write is applied (HTTP 200/201).
"""

import os
from flask import g, jsonify, request
from flask_jwt_extended import jwt_required
from models import ROLE_MAIN_ADMIN
from services import listing_service
from services.submission_service import submit_or_stage, modify_or_stage
from utils.swagger_loader import get_swag_from
from .permission_middleware import require_admin
from log_config import get_moderation_logger

logger = get_moderation_logger()

yaml_folder = os.path.join(os.path.dirname(__file__), '..', '..', 'docs', 'content')


def _status(result, applied_status):
    return 202 if result.get('staged') else applied_status


def register_admin_routes(api_content_bp):
    """Register admin write routes to the blueprint"""

    # GET /content/admin/<entity_type> 관리자용 전체 목록 (비활성/보관 포함)
    @api_content_bp.route('/admin/<entity_type>', methods=['GET'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    def admin_list(entity_type):
        include_private = g.user_role == ROLE_MAIN_ADMIN
        return jsonify(listing_service.admin_list(entity_type, request.args, include_private)), 200

    # POST /content/<entity_type> 콘텐츠 생성 (sub_admin 은 검토 대기)
    @api_content_bp.route('/<entity_type>', methods=['POST'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    @get_swag_from(yaml_folder, 'create_content.yaml')
    def create_content(entity_type):
        data = request.get_json(silent=True) or {}
        result = submit_or_stage(entity_type, data, g.current_user.id)
        return jsonify(result), _status(result, 201)

    # PUT /content/<entity_type>/<id> 콘텐츠 수정
    @api_content_bp.route('/<entity_type>/<int:target_id>', methods=['PUT'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    @get_swag_from(yaml_folder, 'update_content.yaml')
    def update_content(entity_type, target_id):
        data = request.get_json(silent=True) or {}
        result = modify_or_stage(entity_type, target_id, 'update', data, g.current_user.id)
        return jsonify(result), _status(result, 200)

    # DELETE /content/<entity_type>/<id> 콘텐츠 삭제 (신고 내역도 함께 삭제)
    @api_content_bp.route('/<entity_type>/<int:target_id>', methods=['DELETE'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    def delete_content(entity_type, target_id):
        result = modify_or_stage(entity_type, target_id, 'delete', None, g.current_user.id)
        return jsonify(result), _status(result, 200)

    # POST /content/<entity_type>/<id>/<action> 기타 변경 (deactivate, password_change)
    @api_content_bp.route('/<entity_type>/<int:target_id>/<action>', methods=['POST'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    def modify_content(entity_type, target_id, action):
        data = request.get_json(silent=True) or {}
        result = modify_or_stage(entity_type, target_id, action, data, g.current_user.id)
        return jsonify(result), _status(result, 200)
