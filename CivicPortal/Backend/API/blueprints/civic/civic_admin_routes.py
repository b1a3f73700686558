from flask import jsonify, request
from flask_jwt_extended import jwt_required
from services import civic_session_service
from utils.swagger_loader import get_swag_from
from blueprints.content.permission_middleware import require_main_admin
from . import api_civic_bp, yaml_folder


# POST /civic/organizations 시민단체 계정 생성 (main_admin 전용)
@api_civic_bp.route('/organizations', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
@get_swag_from(yaml_folder, 'create_organization.yaml')
def create_organization():
    data = request.get_json(silent=True) or {}
    return jsonify(civic_session_service.create_organization(data)), 201


# POST /civic/organizations/<org_id>/reset-password 시민단체 비밀번호 재설정 (main_admin 전용)
@api_civic_bp.route('/organizations/<int:org_id>/reset-password', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
@get_swag_from(yaml_folder, 'reset_password.yaml')
def reset_password(org_id):
    data = request.get_json(silent=True) or {}
    return jsonify(civic_session_service.reset_password(org_id, data.get('new_password'))), 200
