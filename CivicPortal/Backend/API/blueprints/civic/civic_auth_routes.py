from flask import jsonify, request
from services import civic_session_service
from utils.auth_utils import get_session_token
from utils.swagger_loader import get_swag_from
from . import api_civic_bp, yaml_folder


# POST /civic/auth/login 시민단체 로그인 (access_code + password -> 24시간 세션 토큰)
@api_civic_bp.route('/auth/login', methods=['POST'])
@get_swag_from(yaml_folder, 'login.yaml')
def civic_login():
    data = request.get_json(silent=True) or {}
    return jsonify(civic_session_service.login(data)), 200


# GET /civic/auth/validate 세션 토큰 유효 체크 (x-session-token 헤더)
@api_civic_bp.route('/auth/validate', methods=['GET'])
@get_swag_from(yaml_folder, 'validate.yaml')
def civic_validate():
    return jsonify(civic_session_service.validate(get_session_token())), 200


# POST /civic/auth/logout 세션 삭제
@api_civic_bp.route('/auth/logout', methods=['POST'])
def civic_logout():
    return jsonify(civic_session_service.logout(get_session_token())), 200
