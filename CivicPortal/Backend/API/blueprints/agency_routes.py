import os
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import OperationalError
from services import agency_matcher, agency_service, document_ingestion
from utils.swagger_loader import get_swag_from
from utils.validation_schemas import AgencySearchRequest
from blueprints.content.permission_middleware import require_main_admin
from log_config import get_app_logger

api_agency_bp = Blueprint('agency', __name__)
yaml_folder = os.path.join(os.path.dirname(__file__), '..', 'docs', 'agency')

logger = get_app_logger()


# POST /agency/search 민원 내용으로 담당 기관 추천 (LLM)
@api_agency_bp.route('/search', methods=['POST'])
@get_swag_from(yaml_folder, 'search.yaml')
def search_agencies():
    """
    Body: {query, preferredLevel: city|state|federal|unknown}
    Returns: {results, totalFound, message, confidence}
    """
    data = AgencySearchRequest.model_validate(request.get_json(silent=True) or {})
    logger.info(f"Agency search: level={data.preferredLevel} query={data.query[:200]}")
    return jsonify(agency_matcher.search(data.query, data.preferredLevel)), 200


# GET /agency/ 기관 목록
@api_agency_bp.route('/', methods=['GET'])
def list_agencies():
    try:
        agencies = agency_matcher.load_agencies()
        return jsonify({'items': agencies, 'total': len(agencies)}), 200
    except OperationalError as e:
        return jsonify({'error': str(e)}), 500


@api_agency_bp.route('/', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def create_agency():
    return jsonify(agency_service.create_agency(request.get_json(silent=True) or {})), 201


@api_agency_bp.route('/<int:agency_id>', methods=['PUT'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def update_agency(agency_id):
    return jsonify(agency_service.update_agency(agency_id, request.get_json(silent=True) or {})), 200


@api_agency_bp.route('/<int:agency_id>', methods=['DELETE'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def delete_agency(agency_id):
    return jsonify(agency_service.delete_agency(agency_id)), 200


# POST /agency/seed 기본 기관 목록 적재 (data/agencies_seed.yaml)
@api_agency_bp.route('/seed', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
def seed_agencies():
    inserted, updated = agency_service.seed_agencies()
    return jsonify({'success': True, 'inserted': inserted, 'updated': updated}), 200


# POST /agency/documents 참고 문서 적재 (311 민원 유형 링크 추출)
@api_agency_bp.route('/documents', methods=['POST'])
@jwt_required(locations=['headers','cookies'])
@require_main_admin()
@get_swag_from(yaml_folder, 'ingest_document.yaml')
def ingest_document():
    return jsonify(document_ingestion.ingest(request.get_json(silent=True) or {})), 200
