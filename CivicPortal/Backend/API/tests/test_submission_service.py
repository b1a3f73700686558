"""Tests for the role gate: submit_or_stage, modify_or_stage, submit_public."""

import pytest
from pydantic import ValidationError

from conftest import MAIN_ADMIN_ID, SUB_ADMIN_ID, event_payload, job_payload, resource_payload
from extensions import db
from models import (
    CommunityAlerts, Events, Jobs, JobReports, PendingCommunityAlerts, PendingEvents, PendingJobs,
    PendingResources, PendingResourceModifications,
    PendingJobModifications, PendingCivicModifications, Resources, ResourceReports,
)
from services import approval_service, submission_service
from utils.errors import BadRequestError, ForbiddenError, NotFoundError
from utils.password_utils import verify_password

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _live_resource(**overrides):
    data = resource_payload(**overrides)
    resource = Resources(**data)
    db.session.add(resource)
    db.session.commit()
    return resource


def _live_job(**overrides):
    job = Jobs(**job_payload(**overrides))
    db.session.add(job)
    db.session.commit()
    return job


# ─── submit_or_stage ─────────────────────────────────────────────────────────


class TestSubmitOrStage:
    """New content: staged for sub-admins, live for main admins."""

    def test_sub_admin_event_is_staged(self, admins):
        result = submission_service.submit_or_stage('event', event_payload(), SUB_ADMIN_ID)

        assert result['staged'] is True
        pending = db.session.get(PendingEvents, result['record']['id'])
        assert pending.status == 'pending'
        assert pending.submitted_by == SUB_ADMIN_ID
        assert Events.query.count() == 0

    def test_main_admin_event_goes_live(self, admins):
        result = submission_service.submit_or_stage('event', event_payload(), MAIN_ADMIN_ID)

        assert result['staged'] is False
        assert Events.query.count() == 1
        assert PendingEvents.query.count() == 0

    def test_sub_admin_job_is_staged(self, admins):
        result = submission_service.submit_or_stage('job', job_payload(), SUB_ADMIN_ID)

        assert result['staged'] is True
        pending = db.session.get(PendingJobs, result['record']['id'])
        assert pending.submitted_by == SUB_ADMIN_ID
        assert Jobs.query.count() == 0

    def test_sub_admin_resource_lands_only_in_staging(self, admins):
        submission_service.submit_or_stage('resource', resource_payload(), SUB_ADMIN_ID)

        assert PendingResources.query.count() == 1
        assert Resources.query.count() == 0

    def test_main_admin_resource_lands_only_in_live_table(self, admins):
        submission_service.submit_or_stage('resource', resource_payload(), MAIN_ADMIN_ID)

        assert Resources.query.count() == 1
        assert PendingResources.query.count() == 0

    def test_community_alert_routing(self, admins):
        alert = {
            'title': 'Water Main Break',
            'short_description': 'No water on 31st Ave',
            'long_description': 'DEP crews on site; service expected back tonight.',
        }

        staged = submission_service.submit_or_stage('community_alert', alert, SUB_ADMIN_ID)

        pending = db.session.get(PendingCommunityAlerts, staged['record']['id'])
        assert pending.title == 'Water Main Break'
        assert pending.submitted_by == SUB_ADMIN_ID
        assert CommunityAlerts.query.count() == 0

        live = submission_service.submit_or_stage('community_alert', alert, MAIN_ADMIN_ID)

        assert live['staged'] is False
        assert CommunityAlerts.query.one().title == 'Water Main Break'
        assert PendingCommunityAlerts.query.count() == 1

    def test_caller_without_role_is_forbidden(self, admins):
        with pytest.raises(ForbiddenError):
            submission_service.submit_or_stage('event', event_payload(), 'someone-else')

    def test_unknown_entity_type(self, admins):
        with pytest.raises(BadRequestError):
            submission_service.submit_or_stage('podcast', {}, MAIN_ADMIN_ID)

    def test_invalid_payload_raises_validation_error(self, admins):
        with pytest.raises(ValidationError):
            submission_service.submit_or_stage('event', event_payload(title=''), MAIN_ADMIN_ID)
        assert PendingEvents.query.count() == 0


# ─── modify_or_stage ─────────────────────────────────────────────────────────


class TestModifyOrStage:
    """Edits and deletes of live rows."""

    def test_sub_admin_update_records_merged_snapshot(self, admins):
        resource = _live_resource()

        result = submission_service.modify_or_stage(
            'resource', resource.id, 'update', {'description': 'Open Saturdays and Sundays.'}, SUB_ADMIN_ID)

        assert result['staged'] is True
        modification = db.session.get(PendingResourceModifications, result['record']['id'])
        assert modification.action == 'update'
        assert modification.modified_data['description'] == 'Open Saturdays and Sundays.'
        # untouched columns are carried in the snapshot
        assert modification.modified_data['organization_name'] == 'Queens Food Pantry'
        assert modification.submitter_name == 'Sam Sub'
        assert modification.submitter_phone == '718-555-0101'
        # live row unchanged until approval
        assert db.session.get(Resources, resource.id).description == 'Free groceries every Saturday.'

    def test_edit_is_treated_as_update(self, admins):
        job = _live_job()
        result = submission_service.modify_or_stage('job', job.id, 'edit', {'salary': '$55,000'}, SUB_ADMIN_ID)

        modification = db.session.get(PendingJobModifications, result['record']['id'])
        assert modification.action == 'update'

    def test_main_admin_update_applies_directly(self, admins):
        job = _live_job()
        result = submission_service.modify_or_stage('job', job.id, 'update', {'salary': '$60,000'}, MAIN_ADMIN_ID)

        assert result['staged'] is False
        assert db.session.get(Jobs, job.id).salary == '$60,000'

    def test_main_admin_delete_cascades_to_reports(self, admins):
        resource = _live_resource()
        db.session.add(ResourceReports(resource_id=resource.id, reason='Closed permanently'))
        job = _live_job()
        db.session.add(JobReports(job_id=job.id, reason='Position filled'))
        db.session.commit()

        submission_service.modify_or_stage('resource', resource.id, 'delete', None, MAIN_ADMIN_ID)
        submission_service.modify_or_stage('job', job.id, 'delete', None, MAIN_ADMIN_ID)

        assert Resources.query.count() == 0
        assert ResourceReports.query.count() == 0
        assert Jobs.query.count() == 0
        assert JobReports.query.count() == 0

    def test_approved_public_resource_stays_editable(self, admins):
        record = submission_service.submit_public('resource', resource_payload(website='pantry.org'))
        approval_service.approve('resource', record['id'], MAIN_ADMIN_ID)
        live = Resources.query.one()

        staged = submission_service.modify_or_stage('resource', live.id, 'update', {'phone': '718-555-0199'}, SUB_ADMIN_ID)
        applied = submission_service.modify_or_stage('resource', live.id, 'update', {'phone': '718-555-0123'}, MAIN_ADMIN_ID)

        modification = db.session.get(PendingResourceModifications, staged['record']['id'])
        assert modification.modified_data['phone'] == '718-555-0199'
        assert modification.modified_data['website'] == 'pantry.org'
        assert applied['record']['phone'] == '718-555-0123'

    def test_changed_fields_are_still_checked(self, admins):
        resource = _live_resource(website='pantry.org')
        with pytest.raises(ValidationError):
            submission_service.modify_or_stage('resource', resource.id, 'update', {'website': 'pantry.org'}, MAIN_ADMIN_ID)

    def test_org_with_blank_contact_info_stays_editable(self, admins, civic_org):
        civic_org.contact_info = {'email': '', 'phone': '', 'website': ''}
        db.session.commit()

        result = submission_service.modify_or_stage(
            'civic', civic_org.id, 'update', {'meeting_info': 'Tuesdays at 7pm'}, MAIN_ADMIN_ID)

        assert result['record']['meeting_info'] == 'Tuesdays at 7pm'
        assert result['record']['contact_info'] == {'email': '', 'phone': '', 'website': ''}

    def test_invalid_update_is_rejected_before_staging(self, admins):
        resource = _live_resource()
        with pytest.raises(ValidationError):
            submission_service.modify_or_stage('resource', resource.id, 'update', {'categories': []}, SUB_ADMIN_ID)
        assert PendingResourceModifications.query.count() == 0

    def test_missing_target(self, admins):
        with pytest.raises(NotFoundError):
            submission_service.modify_or_stage('resource', 999, 'update', {}, MAIN_ADMIN_ID)

    def test_unsupported_action_for_entity(self, admins):
        job = _live_job()
        with pytest.raises(BadRequestError):
            submission_service.modify_or_stage('job', job.id, 'password_change', {'password': 'x' * 10}, MAIN_ADMIN_ID)

    def test_events_are_main_admin_only(self, admins):
        result = submission_service.submit_or_stage('event', event_payload(), MAIN_ADMIN_ID)
        with pytest.raises(ForbiddenError):
            submission_service.modify_or_stage('event', result['record']['id'], 'update', {}, SUB_ADMIN_ID)

    def test_civic_password_change_is_hashed(self, admins, civic_org):
        result = submission_service.modify_or_stage(
            'civic', civic_org.id, 'password_change', {'password': 'brand-new-pass'}, SUB_ADMIN_ID)

        modification = db.session.get(PendingCivicModifications, result['record']['id'])
        stored = modification.modified_data['password_hash']
        assert verify_password('brand-new-pass', stored)
        assert 'password_hash' not in result['record']['modified_data']

    def test_civic_deactivate_snapshot(self, admins, civic_org):
        result = submission_service.modify_or_stage('civic', civic_org.id, 'deactivate', None, SUB_ADMIN_ID)

        modification = db.session.get(PendingCivicModifications, result['record']['id'])
        assert modification.modified_data['is_active'] is False
        assert modification.modified_data['name'] == 'Astoria Community Board'


# ─── submit_public ───────────────────────────────────────────────────────────


class TestSubmitPublic:
    """Anonymous forms."""

    def test_public_resource_is_staged_anonymously(self, app):
        record = submission_service.submit_public('resource', resource_payload(website='pantry.example.org'))

        pending = db.session.get(PendingResources, record['id'])
        assert pending.submitted_by is None
        assert pending.status == 'pending'

    def test_public_resource_needs_website_or_address(self, app):
        with pytest.raises(ValidationError):
            submission_service.submit_public('resource', resource_payload(website='', address=''))

    def test_public_job_is_inactive(self, app):
        record = submission_service.submit_public('job', job_payload())
        assert record['is_active'] is False

    def test_public_event_ignores_civic_org_id(self, app):
        record = submission_service.submit_public('event', event_payload(civic_org_id=7))
        assert record['civic_org_id'] is None

    def test_public_alerts_are_not_accepted(self, app):
        with pytest.raises(BadRequestError):
            submission_service.submit_public('community_alert', {})

