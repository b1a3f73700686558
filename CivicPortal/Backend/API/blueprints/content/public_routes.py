"""
Public content routes

Listings for the public site and the anonymous submission forms. Nothing
here requires a login; submissions are always held for review.
"""

import os
from flask import jsonify, request
from sqlalchemy.exc import OperationalError
from services import ai_search_service, listing_service
from services.submission_service import submit_public
from utils.swagger_loader import get_swag_from
from log_config import get_moderation_logger

logger = get_moderation_logger()

yaml_folder = os.path.join(os.path.dirname(__file__), '..', '..', 'docs', 'content')


def register_public_routes(api_content_bp):
    """Register public listing and submission routes to the blueprint"""

    # GET /content/events 공개 이벤트 목록 (tag, age_group, date_from, date_to, search, page, per_page)
    @api_content_bp.route('/events', methods=['GET'])
    @get_swag_from(yaml_folder, 'list_events.yaml')
    def list_events():
        try:
            return jsonify(listing_service.list_events(request.args)), 200
        except OperationalError as e:
            return jsonify({'error': str(e)}), 500

    @api_content_bp.route('/events/<int:event_id>', methods=['GET'])
    def get_event(event_id):
        return jsonify(listing_service.get_event(event_id)), 200

    # GET /content/jobs 활성 채용 공고 (category, subcategory, search)
    @api_content_bp.route('/jobs', methods=['GET'])
    @get_swag_from(yaml_folder, 'list_jobs.yaml')
    def list_jobs():
        try:
            return jsonify(listing_service.list_jobs(request.args)), 200
        except OperationalError as e:
            return jsonify({'error': str(e)}), 500

    @api_content_bp.route('/jobs/<int:job_id>', methods=['GET'])
    def get_job(job_id):
        return jsonify(listing_service.get_job(job_id)), 200

    @api_content_bp.route('/resources', methods=['GET'])
    @get_swag_from(yaml_folder, 'list_resources.yaml')
    def list_resources():
        try:
            return jsonify(listing_service.list_resources(request.args)), 200
        except OperationalError as e:
            return jsonify({'error': str(e)}), 500

    @api_content_bp.route('/resources/<int:resource_id>', methods=['GET'])
    def get_resource(resource_id):
        return jsonify(listing_service.get_resource(resource_id)), 200

    # POST /content/jobs/ai-search 자연어 채용 검색 (LLM 순위, 실패 시 키워드 검색)
    @api_content_bp.route('/jobs/ai-search', methods=['POST'])
    @get_swag_from(yaml_folder, 'ai_search.yaml')
    def ai_search_jobs():
        return jsonify(ai_search_service.search_jobs(request.get_json(silent=True) or {})), 200

    # POST /content/resources/ai-search 자연어 리소스 검색
    @api_content_bp.route('/resources/ai-search', methods=['POST'])
    @get_swag_from(yaml_folder, 'ai_search.yaml')
    def ai_search_resources():
        return jsonify(ai_search_service.search_resources(request.get_json(silent=True) or {})), 200

    @api_content_bp.route('/community-alerts', methods=['GET'])
    def list_community_alerts():
        return jsonify(listing_service.list_community_alerts(request.args)), 200

    @api_content_bp.route('/civic-organizations', methods=['GET'])
    def list_civic_organizations():
        return jsonify(listing_service.list_civic_organizations(request.args)), 200

    @api_content_bp.route('/civic-organizations/<int:org_id>', methods=['GET'])
    def get_civic_organization(org_id):
        return jsonify(listing_service.get_civic_organization(org_id)), 200

    @api_content_bp.route('/special-events', methods=['GET'])
    def list_special_events():
        return jsonify(listing_service.list_special_events(request.args)), 200

    @api_content_bp.route('/special-events/<int:special_event_id>', methods=['GET'])
    def get_special_event(special_event_id):
        return jsonify(listing_service.get_special_event(special_event_id)), 200

    # POST /content/public/<entity_type> 익명 제출 (resource, event, job) - 검토 후 게시
    @api_content_bp.route('/public/<entity_type>', methods=['POST'])
    @get_swag_from(yaml_folder, 'submit_public.yaml')
    def submit_public_content(entity_type):
        data = request.get_json(silent=True) or {}
        record = submit_public(entity_type, data)
        return jsonify({
            'success': True,
            'message': 'Thank you! Your submission will be reviewed before it is published.',
            'record': record
        }), 201
