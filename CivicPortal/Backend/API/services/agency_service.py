import os

import yaml

from extensions import db
from log_config import get_app_logger
from models import GovernmentAgencies
from services.agency_matcher import invalidate_agency_cache
from utils.errors import NotFoundError
from utils.validation_schemas import AgencyPayload

logger = get_app_logger()

SEED_FILE = os.path.join(os.path.dirname(__file__), 'data', 'agencies_seed.yaml')


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    invalidate_agency_cache()


def upsert_agencies(entries):
    """Insert or update agencies matched by name; returns (inserted, updated)"""
    inserted = updated = 0
    for raw in entries:
        data = AgencyPayload.model_validate(raw).model_dump(mode='json')
        agency = GovernmentAgencies.query.filter_by(name=data['name']).first()
        if agency:
            for key, value in data.items():
                setattr(agency, key, value)
            updated += 1
        else:
            db.session.add(GovernmentAgencies(**data))
            inserted += 1
    _commit()
    logger.info(f"Agency upsert: {inserted} inserted, {updated} updated")
    return inserted, updated


def seed_agencies(path=SEED_FILE):
    with open(path, encoding='utf-8') as f:
        document = yaml.safe_load(f) or {}
    return upsert_agencies(document.get('agencies', []))


def create_agency(payload):
    agency = GovernmentAgencies(**AgencyPayload.model_validate(payload or {}).model_dump(mode='json'))
    db.session.add(agency)
    _commit()
    return agency.to_dict()


def update_agency(agency_id, payload):
    agency = db.session.get(GovernmentAgencies, agency_id)
    if agency is None:
        raise NotFoundError(f"Agency {agency_id} not found")
    for key, value in AgencyPayload.model_validate(payload or {}).model_dump(mode='json').items():
        setattr(agency, key, value)
    _commit()
    return agency.to_dict()


def delete_agency(agency_id):
    agency = db.session.get(GovernmentAgencies, agency_id)
    if agency is None:
        raise NotFoundError(f"Agency {agency_id} not found")
    db.session.delete(agency)
    _commit()
    return {'success': True}
