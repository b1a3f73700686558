"""Tests for admin content writes (/content/<entity_type>)."""

from conftest import event_payload, resource_payload
from extensions import db
from models import CivicOrganizations, Events, PendingCivicModifications, PendingEvents, Resources


class TestAdminWrites:
    def test_sub_admin_create_is_accepted_for_review(self, client, sub_headers):
        response = client.post('/content/event', headers=sub_headers, json=event_payload())

        assert response.status_code == 202
        assert response.get_json()['staged'] is True
        assert PendingEvents.query.count() == 1

    def test_main_admin_create_is_live(self, client, main_headers):
        response = client.post('/content/event', headers=main_headers, json=event_payload())

        assert response.status_code == 201
        assert Events.query.count() == 1

    def test_validation_details(self, client, main_headers):
        response = client.post('/content/resource', headers=main_headers,
                               json=resource_payload(website='not-a-url', categories=[]))

        assert response.status_code == 400
        fields = {detail['field'] for detail in response.get_json()['details']}
        assert 'categories' in fields

    def test_update_and_delete(self, client, main_headers):
        resource = Resources(**resource_payload())
        db.session.add(resource)
        db.session.commit()

        updated = client.put(f'/content/resource/{resource.id}', headers=main_headers,
                             json={'phone': '718-555-0123'})
        deleted = client.delete(f'/content/resource/{resource.id}', headers=main_headers)

        assert updated.status_code == 200
        assert updated.get_json()['record']['phone'] == '718-555-0123'
        assert deleted.status_code == 200
        assert Resources.query.count() == 0

    def test_sub_admin_password_change_is_staged(self, client, sub_headers, civic_org):
        response = client.post(f'/content/civic/{civic_org.id}/password_change', headers=sub_headers,
                               json={'password': 'new-org-password'})

        assert response.status_code == 202
        assert PendingCivicModifications.query.count() == 1
        assert 'password_hash' not in response.get_json()['record']['modified_data']

    def test_admin_list_includes_inactive(self, client, main_headers, civic_org):
        civic_org.is_active = False
        db.session.commit()

        body = client.get('/content/admin/civic', headers=main_headers).get_json()

        assert body['total'] == 1
        assert body['items'][0]['access_code'] == 'ASTORIA-CB1'
        assert db.session.get(CivicOrganizations, civic_org.id).is_active is False

    def test_sub_admin_list_hides_access_codes(self, client, sub_headers, civic_org):
        body = client.get('/content/admin/civic', headers=sub_headers).get_json()

        assert body['total'] == 1
        assert 'access_code' not in body['items'][0]
        assert 'password_needs_reset' not in body['items'][0]

    def test_requires_login(self, client, admins):
        assert client.post('/content/event', json=event_payload()).status_code == 401
