"""Tests for the public listing and submission routes (/content)."""

from conftest import event_payload, job_payload, resource_payload
from extensions import db
from models import (
    CivicAnnouncements, CivicImportantLinks, CommunityAlerts, Events, Jobs, PendingEvents, Resources,
    SpecialEventDays, SpecialEvents,
)

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _add(model, **fields):
    row = model(**fields)
    db.session.add(row)
    db.session.commit()
    return row


def _event(**overrides):
    return _add(Events, **event_payload(**overrides))


def _resource(**overrides):
    return _add(Resources, **resource_payload(**overrides))


# ─── Events ──────────────────────────────────────────────────────────────────


class TestEvents:
    def test_hides_private_and_archived(self, client):
        _event(title='Visible')
        _event(title='Private', is_public=False)
        _event(title='Old', archived=True)

        body = client.get('/content/events').get_json()

        assert [e['title'] for e in body['items']] == ['Visible']
        assert body['total'] == 1

    def test_ordered_by_date_then_time(self, client):
        _event(title='Later', event_date='2030-06-01', event_time='09:00')
        _event(title='Afternoon', event_date='2030-05-01', event_time='15:00')
        _event(title='Morning', event_date='2030-05-01', event_time='09:00')

        titles = [e['title'] for e in client.get('/content/events').get_json()['items']]

        assert titles == ['Morning', 'Afternoon', 'Later']

    def test_tag_age_and_date_filters(self, client):
        _event(title='Kids art', tags=['Arts'], age_group=['children'], event_date='2030-05-02')
        _event(title='Adult art', tags=['arts'], age_group=['adults'], event_date='2030-05-03')
        _event(title='Kids sports', tags=['sports'], age_group=['children'], event_date='2030-07-01')

        by_tag = client.get('/content/events?tag=arts').get_json()['items']
        by_age = client.get('/content/events?age_group=children&date_to=2030-06-01').get_json()['items']
        by_range = client.get('/content/events?date_from=2030-05-03').get_json()['items']

        assert {e['title'] for e in by_tag} == {'Kids art', 'Adult art'}
        assert [e['title'] for e in by_age] == ['Kids art']
        assert [e['title'] for e in by_range] == ['Adult art', 'Kids sports']

    def test_boolean_search(self, client):
        _event(title='Park Cleanup', description='Bring gloves')
        _event(title='Beach Cleanup', description='Bring sunscreen')
        _event(title='Book Club', description='Monthly meeting')

        items = client.get('/content/events?search=cleanup NOT beach').get_json()['items']

        assert [e['title'] for e in items] == ['Park Cleanup']

    def test_pagination(self, client):
        for day in range(1, 6):
            _event(title=f'Event {day}', event_date=f'2030-05-0{day}')

        body = client.get('/content/events?page=2&per_page=2').get_json()

        assert [e['title'] for e in body['items']] == ['Event 3', 'Event 4']
        assert body['total'] == 5
        assert body['total_pages'] == 3
        assert body['page'] == 2

    def test_per_page_is_capped(self, client):
        _event()
        body = client.get('/content/events?per_page=1000').get_json()
        assert body['per_page'] == 100

    def test_bad_page_value(self, client):
        response = client.get('/content/events?page=two')
        assert response.status_code == 400

    def test_detail(self, client):
        event = _event()
        assert client.get(f'/content/events/{event.id}').get_json()['title'] == 'Park Cleanup'
        assert client.get('/content/events/999').status_code == 404


# ─── Jobs, resources, alerts ─────────────────────────────────────────────────


class TestJobsAndResources:
    def test_jobs_only_active(self, client):
        _add(Jobs, **job_payload(title='Open role'))
        inactive = _add(Jobs, **job_payload(title='Closed role', is_active=False))

        items = client.get('/content/jobs').get_json()['items']

        assert [j['title'] for j in items] == ['Open role']
        assert client.get(f'/content/jobs/{inactive.id}').status_code == 404

    def test_jobs_category_filter(self, client):
        _add(Jobs, **job_payload(title='City planner', category='government'))
        _add(Jobs, **job_payload(title='Organizer', category='nonprofit'))

        items = client.get('/content/jobs?category=government').get_json()['items']

        assert [j['title'] for j in items] == ['City planner']

    def test_resources_type_and_category(self, client):
        _resource(organization_name='B Pantry', categories=['food'])
        _resource(organization_name='A Legal Aid', categories=['legal'], type='organization')
        _resource(organization_name='C Clinic', categories=['health', 'Food'])

        food = client.get('/content/resources?category=food').get_json()['items']
        orgs = client.get('/content/resources?type=organization').get_json()['items']

        assert [r['organization_name'] for r in food] == ['B Pantry', 'C Clinic']
        assert [r['organization_name'] for r in orgs] == ['A Legal Aid']

    def test_resource_search_matches_categories(self, client):
        _resource(organization_name='Pantry', categories=['food'])
        _resource(organization_name='Clinic', categories=['health'], description='Walk-in care')

        items = client.get('/content/resources?search=health').get_json()['items']

        assert [r['organization_name'] for r in items] == ['Clinic']

    def test_community_alerts_only_active(self, client):
        _add(CommunityAlerts, title='Water main break', short_description='s', long_description='l')
        _add(CommunityAlerts, title='Resolved', short_description='s', long_description='l', is_active=False)

        items = client.get('/content/community-alerts').get_json()['items']

        assert [a['title'] for a in items] == ['Water main break']


# ─── Civic organizations and special events ──────────────────────────────────


class TestCivicAndSpecialEvents:
    def test_org_listing_hides_credentials(self, client, civic_org):
        items = client.get('/content/civic-organizations').get_json()['items']

        assert [o['name'] for o in items] == ['Astoria Community Board']
        assert 'access_code' not in items[0]
        assert 'password_hash' not in items[0]

    def test_org_page_includes_content(self, client, civic_org):
        _add(CivicAnnouncements, civic_org_id=civic_org.id, title='Meeting', content='Tuesday')
        _add(CivicImportantLinks, civic_org_id=civic_org.id, title='Shown', url='https://a.example.org')
        _add(CivicImportantLinks, civic_org_id=civic_org.id, title='Hidden', url='https://b.example.org',
             is_active=False)

        body = client.get(f'/content/civic-organizations/{civic_org.id}').get_json()

        assert [a['title'] for a in body['announcements']] == ['Meeting']
        assert [link['title'] for link in body['links']] == ['Shown']
        assert body['gallery'] == []

    def test_inactive_org_page_is_hidden(self, client, civic_org):
        civic_org.is_active = False
        db.session.commit()

        assert client.get(f'/content/civic-organizations/{civic_org.id}').status_code == 404

    def test_special_event_with_days(self, client):
        special = _add(SpecialEvents, title='Summer Festival', type='festival', start_date='2030-07-01')
        _add(SpecialEventDays, special_event_id=special.id, date='2030-07-02', title='Day two')
        _add(SpecialEventDays, special_event_id=special.id, date='2030-07-01', title='Day one')

        body = client.get(f'/content/special-events/{special.id}').get_json()

        assert [d['title'] for d in body['days']] == ['Day one', 'Day two']


# ─── Public submissions ──────────────────────────────────────────────────────


class TestPublicSubmission:
    def test_event_is_held_for_review(self, client):
        response = client.post('/content/public/event', json=event_payload())

        assert response.status_code == 201
        body = response.get_json()
        assert body['success'] is True
        assert body['record']['status'] == 'pending'
        assert PendingEvents.query.count() == 1
        assert Events.query.count() == 0

    def test_invalid_submission(self, client):
        response = client.post('/content/public/resource', json=resource_payload(categories=[]))

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Validation failed'

    def test_unsupported_type(self, client):
        response = client.post('/content/public/civic', json={})
        assert response.status_code == 400
