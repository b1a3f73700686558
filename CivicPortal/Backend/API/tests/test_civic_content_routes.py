"""Tests for the civic content gateway (/civic/content) and gallery upload."""

import io
from unittest.mock import MagicMock, patch

from extensions import db
from models import CivicAnnouncements, CivicGallery, CivicOrganizations

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _content(client, headers, method='get', **params):
    body = params.pop('json', None)
    query = '&'.join(f'{key}={value}' for key, value in params.items())
    return getattr(client, method)(f'/civic/content?{query}', headers=headers, json=body)


def _announcement(org, title='Budget hearing'):
    row = CivicAnnouncements(civic_org_id=org.id, title=title, content='Join us at the library.')
    db.session.add(row)
    db.session.commit()
    return row


def _image(name='photo.jpg', size=64, mimetype='image/jpeg'):
    return (io.BytesIO(b'\xff' * size), name, mimetype)


# ─── Gateway ─────────────────────────────────────────────────────────────────


class TestGatewayAuth:
    def test_requires_session(self, client, civic_org):
        response = client.get('/civic/content?type=announcements')
        assert response.status_code == 401

    def test_unknown_session(self, client, civic_org):
        response = client.get('/civic/content?type=announcements', headers={'x-session-token': 'bogus'})
        assert response.status_code == 401


class TestGatewayScoping:
    """Reads and writes are scoped to the session's organization."""

    def test_list_only_own_rows(self, client, civic_headers, civic_org, other_org):
        _announcement(civic_org, 'Ours')
        _announcement(other_org, 'Theirs')

        response = _content(client, civic_headers, type='announcements')

        assert response.status_code == 200
        assert [row['title'] for row in response.get_json()] == ['Ours']

    def test_create_ignores_body_org_id(self, client, civic_headers, civic_org, other_org):
        response = _content(client, civic_headers, 'post', type='announcements', action='create', json={
            'title': 'Street fair', 'content': 'Saturday on 30th Ave', 'civic_org_id': other_org.id,
        })

        assert response.status_code == 201
        assert response.get_json()['civic_org_id'] == civic_org.id

    def test_cannot_update_other_orgs_row(self, client, civic_headers, other_org):
        theirs = _announcement(other_org, 'Theirs')

        response = _content(client, civic_headers, 'put', type='announcements', action='update', id=theirs.id,
                            json={'title': 'Hijacked', 'content': 'x'})

        assert response.status_code == 404
        assert db.session.get(CivicAnnouncements, theirs.id).title == 'Theirs'

    def test_cannot_delete_other_orgs_row(self, client, civic_headers, other_org):
        theirs = _announcement(other_org)

        response = _content(client, civic_headers, 'delete', type='announcements', action='delete', id=theirs.id)

        assert response.status_code == 404
        assert db.session.get(CivicAnnouncements, theirs.id) is not None


class TestGatewayActions:
    def test_update_own_row(self, client, civic_headers, civic_org):
        ours = _announcement(civic_org)

        response = _content(client, civic_headers, 'put', type='announcements', action='update', id=ours.id,
                            json={'title': 'Budget hearing moved', 'content': 'Now on Thursday.'})

        assert response.status_code == 200
        assert response.get_json()['title'] == 'Budget hearing moved'

    def test_delete_own_row(self, client, civic_headers, civic_org):
        ours = _announcement(civic_org)

        response = _content(client, civic_headers, 'delete', type='announcements', action='delete', id=ours.id)

        assert response.status_code == 200
        assert response.get_json() == {'success': True}
        assert CivicAnnouncements.query.count() == 0

    def test_unknown_type(self, client, civic_headers):
        response = _content(client, civic_headers, type='podcasts')
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid content type'

    def test_action_not_allowed_for_type(self, client, civic_headers):
        response = _content(client, civic_headers, 'put', type='newsletters', action='update', id=1,
                            json={'title': 'x', 'file_path': 'y'})
        assert response.status_code == 400

    def test_update_without_id(self, client, civic_headers):
        response = _content(client, civic_headers, 'put', type='links', action='update',
                            json={'title': 'x', 'url': 'https://example.org'})
        assert response.status_code == 400

    def test_schema_failure_lists_fields(self, client, civic_headers):
        response = _content(client, civic_headers, 'post', type='links', action='create',
                            json={'title': '', 'url': 'not a url'})

        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'Validation failed'
        assert {detail['field'] for detail in body['details']} >= {'title', 'url'}

    def test_leadership_sorted_by_order_index(self, client, civic_headers):
        for name, order in (('Second', 2), ('First', 1)):
            _content(client, civic_headers, 'post', type='leadership', action='create',
                     json={'name': name, 'title': 'Member', 'order_index': order})

        response = _content(client, civic_headers, type='leadership')

        assert [row['name'] for row in response.get_json()] == ['First', 'Second']

    def test_gallery_create_respects_cap(self, app, client, civic_headers, civic_org):
        app.config['GALLERY_PHOTO_LIMIT'] = 1
        db.session.add(CivicGallery(civic_org_id=civic_org.id, photo_url='https://storage.test/a.jpg'))
        db.session.commit()

        response = _content(client, civic_headers, 'post', type='gallery', action='create',
                            json={'photo_url': 'https://storage.test/b.jpg'})

        assert response.status_code == 400
        assert 'limited to 1 photos' in response.get_json()['error']


class TestGeneralSettings:
    def test_list_returns_organization(self, client, civic_headers, civic_org):
        response = _content(client, civic_headers, type='general')

        body = response.get_json()
        assert body['id'] == civic_org.id
        assert 'access_code' not in body

    def test_update_writes_organization(self, client, civic_headers, civic_org):
        response = _content(client, civic_headers, 'put', type='general', action='update', json={
            'name': 'Astoria Civic Board',
            'description': 'Updated description',
            'coverage_area': 'Astoria and Ditmars',
            'organization_type': 'civic',
            'contact_info': {'phone': '718-555-0000'},
        })

        assert response.status_code == 200
        org = db.session.get(CivicOrganizations, civic_org.id)
        assert org.name == 'Astoria Civic Board'
        assert org.contact_info == {'phone': '718-555-0000'}


# ─── Gallery upload ──────────────────────────────────────────────────────────


class TestGalleryUpload:
    """POST /civic/gallery/upload"""

    def _upload(self, client, headers, files, **form):
        data = {'files': files}
        data.update(form)
        return client.post('/civic/gallery/upload', headers=headers, data=data,
                           content_type='multipart/form-data')

    def test_upload_stores_photos_in_order(self, client, civic_headers, civic_org):
        storage = MagicMock()
        with patch('services.storage_service.get_storage_client', return_value=storage):
            response = self._upload(client, civic_headers, [_image('a.jpg'), _image('b.png', mimetype='image/png')],
                                    title='Spring cleanup')

        assert response.status_code == 201
        body = response.get_json()
        assert body['count'] == 2
        assert [photo['order_index'] for photo in body['photos']] == [0, 1]
        assert all(photo['photo_url'].startswith('https://storage.test/civic-files/gallery/') for photo in body['photos'])
        assert all(photo['title'] == 'Spring cleanup' for photo in body['photos'])
        assert storage.put_object.call_count == 2

    def test_over_cap_uploads_nothing(self, app, client, civic_headers):
        app.config['GALLERY_PHOTO_LIMIT'] = 1
        storage = MagicMock()
        with patch('services.storage_service.get_storage_client', return_value=storage):
            response = self._upload(client, civic_headers, [_image('a.jpg'), _image('b.jpg')])

        assert response.status_code == 400
        assert 'You can add 1 more' in response.get_json()['error']
        storage.put_object.assert_not_called()
        assert CivicGallery.query.count() == 0

    def test_rejects_non_image(self, client, civic_headers):
        with patch('services.storage_service.get_storage_client') as get_client:
            response = self._upload(client, civic_headers, [_image('notes.txt', mimetype='text/plain')])

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Please select only image files'
        get_client.assert_not_called()

    def test_rejects_large_file(self, app, client, civic_headers):
        app.config['MAX_GALLERY_PHOTO_BYTES'] = 10
        with patch('services.storage_service.get_storage_client') as get_client:
            response = self._upload(client, civic_headers, [_image(size=20)])

        assert response.status_code == 400
        get_client.assert_not_called()

    def test_requires_files(self, client, civic_headers):
        response = self._upload(client, civic_headers, [])
        assert response.status_code == 400

    def test_requires_session(self, client, civic_org):
        response = self._upload(client, {}, [_image()])
        assert response.status_code == 401
