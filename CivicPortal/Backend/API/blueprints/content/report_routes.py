import os
from flask import g, jsonify, request
from flask_jwt_extended import jwt_required
from services import report_service
from utils.swagger_loader import get_swag_from
from .permission_middleware import require_admin

yaml_folder = os.path.join(os.path.dirname(__file__), '..', '..', 'docs', 'reports')


def register_report_routes(api_reports_bp):
    """Register job / resource report routes to the blueprint"""

    # POST /reports/<job|resource>/<id> 공개 신고 접수
    @api_reports_bp.route('/<target_type>/<int:target_id>', methods=['POST'])
    @get_swag_from(yaml_folder, 'file_report.yaml')
    def file_report(target_type, target_id):
        data = request.get_json(silent=True) or {}
        report = report_service.file_report(target_type, target_id, data)
        return jsonify({'success': True, 'report': report}), 201

    # GET /reports/<job|resource> 신고 목록 (대상 포함)
    @api_reports_bp.route('/<target_type>', methods=['GET'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    def list_reports(target_type):
        reports = report_service.list_reports(target_type, g.current_user.id)
        return jsonify({'items': reports, 'total': len(reports)}), 200

    # POST /reports/<job|resource>/<report_id>/resolve {resolution: remove|dismiss}
    @api_reports_bp.route('/<target_type>/<int:report_id>/resolve', methods=['POST'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    @get_swag_from(yaml_folder, 'resolve_report.yaml')
    def resolve_report(target_type, report_id):
        data = request.get_json(silent=True) or {}
        result = report_service.resolve_report(target_type, report_id, data.get('resolution'), g.current_user.id)
        return jsonify(result), 200
