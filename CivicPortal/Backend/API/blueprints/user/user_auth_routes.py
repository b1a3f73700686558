import datetime
from flask import jsonify, request, make_response
from flask_jwt_extended import get_jwt_identity, jwt_required
from config import Config
from services import admin_account_service
from services.admin_account_service import issue_access_token, ACCESS_TOKEN_DAYS
from utils.swagger_loader import get_swag_from
from log_config import get_app_logger
from . import api_user_bp, yaml_folder

logger = get_app_logger()


def _set_token_cookie(response, access_token):
    env = Config.ENV == 'production' # 운영 환경인지 확인
    response.set_cookie(
        'access_token_cookie',     # 쿠키 이름
        access_token,       # 쿠키 값
        httponly=True,      # JS에서 쿠키 접근 금지
        secure=env,       # HTTPS에서만 쿠키 전송(False: HTTP에서도 전송)
        samesite='Lax',      # SameSite 설정(Lax: 외부 도메인으로는 쿠키 전송 안 함)
        expires=(datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=ACCESS_TOKEN_DAYS))
    )
    return response


# POST /user/login API 관리자 로그인 (email + password)
@api_user_bp.route('/login', methods=['POST'])
@get_swag_from(yaml_folder, 'login.yaml')
def login():
    data = request.get_json(silent=True) or {}
    result = admin_account_service.login(data)
    response = jsonify(result)
    return _set_token_cookie(response, result['token']), 200


# GET /user/token_check API 토큰(쿠키) 유효 체크, 쿠키 재발급
@api_user_bp.route('/token_check', methods=['GET'])
@jwt_required(locations=['headers','cookies'])  # JWT 검증을 먼저 수행
@get_swag_from(yaml_folder, 'token_check.yaml')
def check():
    current_user = get_jwt_identity()

    if current_user:
        response = jsonify({"success": True, "user": current_user})
        return _set_token_cookie(response, issue_access_token(current_user)), 200
    else:
        return jsonify({"success": False, "error": "Invalid token"}), 401


# GET /user/me API 현재 관리자 정보와 권한
@api_user_bp.route('/me', methods=['GET'])
@jwt_required(locations=['headers','cookies'])
@get_swag_from(yaml_folder, 'me.yaml')
def me():
    return jsonify(admin_account_service.me(get_jwt_identity())), 200


# POST /user/accept-invite API 초대 링크로 비밀번호 설정
@api_user_bp.route('/accept-invite', methods=['POST'])
@get_swag_from(yaml_folder, 'accept_invite.yaml')
def accept_invite():
    data = request.get_json(silent=True) or {}
    result = admin_account_service.accept_invite(data)
    response = jsonify(result)
    return _set_token_cookie(response, result['token']), 200


# GET /user/logout API 로그아웃 (쿠키 삭제)
@api_user_bp.route('/logout', methods=['GET'])
@jwt_required(locations=['headers','cookies'])
def logout():
    user_id = get_jwt_identity()
    logger.info(f"Admin logout: {user_id}")
    response = make_response(jsonify({'message': f'User {user_id} logged out successfully.'}))
    response.set_cookie('access_token_cookie', '', expires=0, httponly=True, secure=False, samesite='Lax') # 쿠키 삭제
    return response, 200
