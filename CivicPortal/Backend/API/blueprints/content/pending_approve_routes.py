"""
Pending Approve Workflow routes

This module handles:
- Listing the moderation queue (staged submissions and pending modifications)
- Approving a queue row (main_admin only): the live write and the status
  change commit together
- Rejecting a queue row (main_admin only)
- A submitter's own submissions with their review status
"""

import os
from flask import g, jsonify, request
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import OperationalError
from services import approval_service
from utils.swagger_loader import get_swag_from
from utils.validation_schemas import ReviewDecision
from .permission_middleware import require_admin, require_main_admin
from log_config import get_moderation_logger

logger = get_moderation_logger()

yaml_folder = os.path.join(os.path.dirname(__file__), '..', '..', 'docs', 'moderation')


def register_pending_approve_routes(api_moderation_bp):
    """Register moderation queue routes to the blueprint"""

    @api_moderation_bp.route('/pending', methods=['GET'])
    @jwt_required(locations=['headers','cookies'])
    @require_main_admin()
    @get_swag_from(yaml_folder, 'pending.yaml')
    def list_pending():
        """
        All pending rows across staging and modification tables, newest first

        Optional query: type (e.g. event, resource_modification)
        """
        try:
            items = approval_service.list_pending()
            item_type = request.args.get('type')
            if item_type:
                items = [item for item in items if item['type'] == item_type]
            return jsonify({'items': items, 'total': len(items)}), 200
        except OperationalError as e:
            return jsonify({'error': str(e)}), 500

    @api_moderation_bp.route('/my-submissions', methods=['GET'])
    @jwt_required(locations=['headers','cookies'])
    @require_admin()
    def my_submissions():
        items = approval_service.my_submissions(g.current_user.id)
        return jsonify({'items': items, 'total': len(items)}), 200

    @api_moderation_bp.route('/<item_type>/<int:item_id>/approve', methods=['POST'])
    @jwt_required(locations=['headers','cookies'])
    @require_main_admin()
    @get_swag_from(yaml_folder, 'approve.yaml')
    def approve(item_type, item_id):
        """
        Approve a pending row

        Process:
        1. Row must exist (404) and still be pending (409)
        2. Insert / update / delete the live row
        3. Mark the row approved with reviewer and notes
        Any failure rolls back both writes.
        """
        decision = ReviewDecision.model_validate(request.get_json(silent=True) or {})
        result = approval_service.approve(item_type, item_id, g.current_user.id, decision.notes)
        return jsonify(result), 200

    @api_moderation_bp.route('/<item_type>/<int:item_id>/reject', methods=['POST'])
    @jwt_required(locations=['headers','cookies'])
    @require_main_admin()
    @get_swag_from(yaml_folder, 'reject.yaml')
    def reject(item_type, item_id):
        decision = ReviewDecision.model_validate(request.get_json(silent=True) or {})
        result = approval_service.reject(item_type, item_id, g.current_user.id, decision.notes)
        return jsonify(result), 200
