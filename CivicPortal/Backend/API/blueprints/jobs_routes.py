from flask import Blueprint, g, jsonify, request
from flask_jwt_extended import jwt_required
from services import bulk_jobs
from blueprints.content.permission_middleware import require_main_admin

api_jobs_bp = Blueprint('jobs', __name__)


# POST /jobs/<geocode|alt_text> 일괄 작업 시작 (Celery)
@api_jobs_bp.route('/<job_type>', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def start_job(job_type):
    progress = bulk_jobs.start_job(job_type, request.get_json(silent=True) or {}, g.current_user.id)
    return jsonify(progress), 202


# GET /jobs/<job_id> 진행 상황 조회
@api_jobs_bp.route('/<job_id>', methods=['GET'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def get_progress(job_id):
    return jsonify(bulk_jobs.get_progress(job_id)), 200


# POST /jobs/<job_id>/stop 중지 요청 (현재 배치 완료 후 중지)
@api_jobs_bp.route('/<job_id>/stop', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def stop_job(job_id):
    return jsonify(bulk_jobs.request_stop(job_id)), 200
