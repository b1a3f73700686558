"""
Public listings

Read-only queries behind the public site. Database filters narrow each
listing, list-valued JSON columns (tags, age groups, categories) are filtered
in Python so the same code runs on PostgreSQL JSONB and SQLite JSON, then the
boolean search ranks the rows and the page is cut.
"""

import math

from extensions import db
from models import (
    CivicAnnouncements, CivicGallery, CivicImportantLinks, CivicLeadership,
    CivicNewsletters, CivicOrganizations, CommunityAlerts, Events, Jobs,
    Resources, SpecialEvents,
)
from utils.boolean_search import filter_with_boolean_search
from utils.errors import BadRequestError, NotFoundError

DEFAULT_PER_PAGE = 12
MAX_PER_PAGE = 100


def _int_arg(args, name, default):
    raw = args.get(name)
    if raw in (None, ''):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise BadRequestError(f"{name} must be an integer")


def pagination_args(args):
    page = max(_int_arg(args, 'page', 1), 1)
    per_page = _int_arg(args, 'per_page', DEFAULT_PER_PAGE)
    per_page = min(max(per_page, 1), MAX_PER_PAGE)
    return page, per_page


def paginate(items, args):
    page, per_page = pagination_args(args)
    total = len(items)
    start = (page - 1) * per_page
    return {
        'items': items[start:start + per_page],
        'total': total,
        'page': page,
        'per_page': per_page,
        'total_pages': math.ceil(total / per_page) if total else 0
    }


def _text_fields(*values):
    """Flatten scalar and list columns into the text fields the boolean search scans"""
    parts = []
    for value in values:
        if isinstance(value, (list, tuple)):
            parts.extend(str(v) for v in value if v)
        elif value:
            parts.append(str(value))
    return parts


def _contains(values, wanted):
    return wanted.lower() in [str(v).lower() for v in (values or [])]


def _search_and_page(rows, args, text_extractor):
    query = (args.get('search') or '').strip()
    if query:
        rows = filter_with_boolean_search(rows, query, text_extractor)
    result = paginate(rows, args)
    result['items'] = [row.to_dict() for row in result['items']]
    return result


# ========== Events ==========

def _event_text(event):
    return _text_fields(event.title, event.description, event.location, event.tags,
                        event.age_group, event.elected_officials)


def list_events(args):
    rows = Events.query.filter(Events.is_public.is_(True), Events.archived.is_(False)) \
        .order_by(Events.event_date.asc(), Events.event_time.asc()).all()

    tag = args.get('tag')
    if tag:
        rows = [e for e in rows if _contains(e.tags, tag)]
    age_group = args.get('age_group')
    if age_group:
        rows = [e for e in rows if _contains(e.age_group, age_group)]
    # event_date is stored as YYYY-MM-DD, so string comparison orders by date
    date_from = args.get('date_from')
    if date_from:
        rows = [e for e in rows if e.event_date >= date_from]
    date_to = args.get('date_to')
    if date_to:
        rows = [e for e in rows if e.event_date <= date_to]

    return _search_and_page(rows, args, _event_text)


def get_event(event_id):
    event = Events.query.filter_by(id=event_id, is_public=True).first()
    if event is None:
        raise NotFoundError('Event not found')
    return event.to_dict()


# ========== Jobs ==========

def _job_text(job):
    return _text_fields(job.title, job.employer, job.description, job.location, job.subcategory)


def list_jobs(args):
    query = Jobs.query.filter(Jobs.is_active.is_(True))
    if args.get('category'):
        query = query.filter(Jobs.category == args['category'])
    if args.get('subcategory'):
        query = query.filter(Jobs.subcategory == args['subcategory'])
    rows = query.order_by(Jobs.created_at.desc()).all()
    return _search_and_page(rows, args, _job_text)


def get_job(job_id):
    job = Jobs.query.filter_by(id=job_id, is_active=True).first()
    if job is None:
        raise NotFoundError('Job not found')
    return job.to_dict()


# ========== Resources ==========

def _resource_text(resource):
    return _text_fields(resource.organization_name, resource.description, resource.address, resource.categories)


def list_resources(args):
    query = Resources.query
    if args.get('type'):
        query = query.filter(Resources.type == args['type'])
    rows = query.order_by(Resources.organization_name.asc()).all()

    category = args.get('category')
    if category:
        rows = [r for r in rows if _contains(r.categories, category)]
    return _search_and_page(rows, args, _resource_text)


def get_resource(resource_id):
    resource = db.session.get(Resources, resource_id)
    if resource is None:
        raise NotFoundError('Resource not found')
    return resource.to_dict()


# ========== Community alerts ==========

def _alert_text(alert):
    return _text_fields(alert.title, alert.short_description, alert.long_description)


def list_community_alerts(args):
    rows = CommunityAlerts.query.filter(CommunityAlerts.is_active.is_(True)) \
        .order_by(CommunityAlerts.created_at.desc()).all()
    return _search_and_page(rows, args, _alert_text)


# ========== Civic organizations ==========

def _civic_text(org):
    return _text_fields(org.name, org.description, org.coverage_area, org.organization_type)


def list_civic_organizations(args):
    query = CivicOrganizations.query.filter(CivicOrganizations.is_active.is_(True))
    if args.get('organization_type'):
        query = query.filter(CivicOrganizations.organization_type == args['organization_type'])
    rows = query.order_by(CivicOrganizations.name.asc()).all()
    return _search_and_page(rows, args, _civic_text)


def get_civic_organization(org_id):
    """Public org page: profile plus its announcements, newsletters, leadership, active links and gallery"""
    org = CivicOrganizations.query.filter_by(id=org_id, is_active=True).first()
    if org is None:
        raise NotFoundError('Organization not found')

    data = org.to_dict()
    data['announcements'] = [a.to_dict() for a in CivicAnnouncements.query.filter_by(civic_org_id=org.id)
                             .order_by(CivicAnnouncements.created_at.desc()).all()]
    data['newsletters'] = [n.to_dict() for n in CivicNewsletters.query.filter_by(civic_org_id=org.id)
                           .order_by(CivicNewsletters.upload_date.desc()).all()]
    data['leadership'] = [m.to_dict() for m in CivicLeadership.query.filter_by(civic_org_id=org.id)
                          .order_by(CivicLeadership.order_index.asc()).all()]
    data['links'] = [link.to_dict() for link in CivicImportantLinks.query
                     .filter_by(civic_org_id=org.id, is_active=True)
                     .order_by(CivicImportantLinks.order_index.asc()).all()]
    data['gallery'] = [photo.to_dict() for photo in CivicGallery.query.filter_by(civic_org_id=org.id)
                       .order_by(CivicGallery.order_index.asc()).all()]
    return data


# ========== Special events ==========

def list_special_events(args):
    rows = SpecialEvents.query.filter(SpecialEvents.is_active.is_(True)) \
        .order_by(SpecialEvents.start_date.asc()).all()
    query = (args.get('search') or '').strip()
    if query:
        rows = filter_with_boolean_search(rows, query, lambda s: _text_fields(s.title, s.description, s.type))
    result = paginate(rows, args)
    result['items'] = [row.to_dict(include_days=True) for row in result['items']]
    return result


def get_special_event(special_event_id):
    special_event = SpecialEvents.query.filter_by(id=special_event_id, is_active=True).first()
    if special_event is None:
        raise NotFoundError('Special event not found')
    return special_event.to_dict(include_days=True)


# ========== Admin views ==========

# every live row, including archived events, inactive jobs and inactive orgs
ADMIN_MODELS = {
    'event': (Events, Events.event_date.desc()),
    'job': (Jobs, Jobs.created_at.desc()),
    'resource': (Resources, Resources.organization_name.asc()),
    'community_alert': (CommunityAlerts, CommunityAlerts.created_at.desc()),
    'special_event': (SpecialEvents, SpecialEvents.start_date.desc()),
    'civic': (CivicOrganizations, CivicOrganizations.name.asc()),
}


def admin_list(entity_type, args, include_private=False):
    """Every row of a live table; civic access codes only when include_private"""
    entry = ADMIN_MODELS.get(entity_type)
    if entry is None:
        raise BadRequestError(f"Unknown entity type: {entity_type}")
    model, order_by = entry
    rows = model.query.order_by(order_by).all()
    result = paginate(rows, args)
    if model is CivicOrganizations:
        result['items'] = [row.to_dict(include_private=include_private) for row in result['items']]
    else:
        result['items'] = [row.to_dict() for row in result['items']]
    return result
