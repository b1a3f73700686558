"""Shared fixtures for API tests.

Each test gets a fresh app on in-memory SQLite (TestConfig) with two admins
(one main_admin, one sub_admin) and one active civic organization. Outbound
HTTP, object storage and Celery dispatch are mocked in the tests that need them.
"""

import sys
from pathlib import Path

import pytest

# Add the API root to path so tests import modules the way the app does
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import create_app  # noqa: E402
from config import TestConfig  # noqa: E402
from extensions import db  # noqa: E402
from models import (  # noqa: E402
    Users, UserRoles, UserProfiles, CivicOrganizations, ROLE_MAIN_ADMIN, ROLE_SUB_ADMIN,
)
from utils.password_utils import hash_password  # noqa: E402

MAIN_ADMIN_ID = 'main-admin-1'
SUB_ADMIN_ID = 'sub-admin-1'
ORG_ACCESS_CODE = 'ASTORIA-CB1'
ORG_PASSWORD = 'community-pass-1'


@pytest.fixture
def app():
    """App with all tables created, torn down after the test."""
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _add_admin(user_id, email, role, full_name, phone):
    db.session.add(Users(id=user_id, email=email, password_hash=hash_password('admin-pass-123')))
    db.session.add(UserRoles(user_id=user_id, role=role, created_by=None))
    db.session.add(UserProfiles(user_id=user_id, full_name=full_name, phone_number=phone))


@pytest.fixture
def admins(app):
    """Seed one main admin and one sub admin."""
    _add_admin(MAIN_ADMIN_ID, 'main@example.org', ROLE_MAIN_ADMIN, 'Maria Main', '718-555-0100')
    _add_admin(SUB_ADMIN_ID, 'sub@example.org', ROLE_SUB_ADMIN, 'Sam Sub', '718-555-0101')
    db.session.commit()
    return {'main': MAIN_ADMIN_ID, 'sub': SUB_ADMIN_ID}


def _auth_headers(user_id):
    from services.admin_account_service import issue_access_token
    return {'Authorization': f'Bearer {issue_access_token(user_id)}'}


@pytest.fixture
def main_headers(admins):
    return _auth_headers(MAIN_ADMIN_ID)


@pytest.fixture
def sub_headers(admins):
    return _auth_headers(SUB_ADMIN_ID)


@pytest.fixture
def civic_org(app):
    """Active civic organization with a PBKDF2 password."""
    org = CivicOrganizations(
        name='Astoria Community Board',
        description='Neighborhood civic association',
        coverage_area='Astoria, Queens',
        organization_type='civic',
        contact_info={'email': 'board@example.org'},
        access_code=ORG_ACCESS_CODE,
        password_hash=hash_password(ORG_PASSWORD),
        is_active=True,
    )
    db.session.add(org)
    db.session.commit()
    return org


@pytest.fixture
def other_org(app):
    org = CivicOrganizations(
        name='Sunnyside Civic Association',
        description='Another association',
        coverage_area='Sunnyside, Queens',
        organization_type='civic',
        access_code='SUNNYSIDE-1',
        password_hash=hash_password('other-pass-123'),
        is_active=True,
    )
    db.session.add(org)
    db.session.commit()
    return org


@pytest.fixture
def civic_headers(client, civic_org):
    """x-session-token header from a real civic login."""
    response = client.post('/civic/auth/login', json={
        'access_code': ORG_ACCESS_CODE, 'password': ORG_PASSWORD,
    })
    assert response.status_code == 200
    return {'x-session-token': response.get_json()['session_token']}


# ─── Payload builders ─────────────────────────────────────────────────────────


def event_payload(**overrides):
    data = {
        'title': 'Park Cleanup',
        'description': 'Bring gloves, we supply bags.',
        'location': 'Astoria Park',
        'event_date': '2030-05-01',
        'event_time': '10:00',
        'tags': ['environment'],
        'age_group': ['adults'],
    }
    data.update(overrides)
    return data


def resource_payload(**overrides):
    data = {
        'organization_name': 'Queens Food Pantry',
        'description': 'Free groceries every Saturday.',
        'website': 'https://pantry.example.org',
        'address': '12-34 31st Ave, Astoria, NY',
        'categories': ['food'],
    }
    data.update(overrides)
    return data


def job_payload(**overrides):
    data = {
        'title': 'Youth Program Coordinator',
        'employer': 'Astoria Youth Center',
        'description': 'Coordinate after-school programs.',
        'location': 'Astoria, NY',
        'salary': '$50,000',
        'apply_info': 'https://jobs.example.org/apply',
        'category': 'nonprofit',
        'is_apply_link': True,
    }
    data.update(overrides)
    return data
