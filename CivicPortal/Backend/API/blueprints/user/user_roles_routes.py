from flask import g, jsonify, request
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import OperationalError
from services import admin_account_service
from utils.swagger_loader import get_swag_from
from blueprints.content.permission_middleware import require_main_admin
from . import api_user_bp, yaml_folder


# POST /user/invite-admin API 관리자 초대 (main_admin 전용)
@api_user_bp.route('/invite-admin', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
@get_swag_from(yaml_folder, 'invite_admin.yaml')
def invite_admin():
    """
    관리자 초대 API
    Body:
    - email: 초대할 관리자 이메일
    - role: main_admin | sub_admin
    - full_name, phone_number: 선택

    Returns:
    - invite_link: 24시간 유효한 비밀번호 설정 링크
    """
    data = request.get_json(silent=True) or {}
    return jsonify(admin_account_service.invite_admin(data, g.current_user.id)), 201


# GET /user/admins API 관리자 목록 (권한, 프로필 포함)
@api_user_bp.route('/admins', methods=['GET'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def list_admins():
    try:
        admins = admin_account_service.list_admins(g.current_user.id)
        return jsonify({'items': admins, 'total': len(admins)}), 200
    except OperationalError as e:
        return jsonify({'error': str(e)}), 500
