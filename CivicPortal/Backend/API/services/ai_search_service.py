"""
AI Search

Plain-language search over job and resource listings. The LLM receives a
compact view of every candidate row and answers with a JSON array of matching
ids, most relevant first. When the reply cannot be read, a case-insensitive
substring search over the same rows is returned instead.
"""

import json
import re

from log_config import get_app_logger
from models import Jobs, Resources
from services.llm_client import chat_completion
from utils.errors import BadRequestError

logger = get_app_logger()

AI_SEARCH_MAX_TOKENS = 1000

RESOURCE_PROMPT = (
    'You are helping a person find community resources. Here are all the available resources. '
    "A person may search for services that don't exactly match the organization name or description. "
    'Please return related and matching resource IDs.\n\n'
    "Return a JSON array of resource IDs that match or are related to the user's query, ordered by relevance, "
    'for example [12, 7, 3].\n\n'
    'Only include resources that are reasonably related to the search query. '
    'If no resources match, return an empty array.'
)

JOB_PROMPT = (
    'You are helping a person find a job. Here are all the job titles available. '
    "A person may type in a job that doesn't exactly match the title. "
    'Please return related job titles and matching ones.\n\n'
    "Return a JSON array of job IDs that match or are related to the user's query, ordered by relevance, "
    'for example [12, 7, 3].\n\n'
    'Only include jobs that are reasonably related to the search query. '
    'If no jobs match, return an empty array.'
)

_CODE_FENCE = re.compile(r'^```(?:json)?\s*|\s*```$')


def parse_id_list(content):
    """Ids from an LLM reply holding a JSON array (optionally fenced); None if unreadable"""
    if not content or not content.strip():
        return None
    cleaned = _CODE_FENCE.sub('', content.strip())
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        return None
    if not isinstance(parsed, list):
        return None
    return [str(item) for item in parsed]


def _rank(rows, ids):
    by_id = {str(row.id): row for row in rows}
    ranked = []
    for row_id in ids:
        row = by_id.pop(row_id, None)
        if row is not None:
            ranked.append(row)
    return ranked


def _ask(system_prompt, query, candidates):
    user_prompt = f'User is looking for: "{query}"\n\nAvailable:\n{json.dumps(candidates, indent=2)}'
    messages = [
        {'role': 'system', 'content': system_prompt},
        {'role': 'user', 'content': user_prompt},
    ]
    return chat_completion(messages, max_tokens=AI_SEARCH_MAX_TOKENS)


def _require_query(payload):
    query = (payload.get('query') or '').strip()
    if not query:
        raise BadRequestError('Please provide a search query')
    return query


def _run(kind, rows, query, prompt, describe, fallback_text):
    if not rows:
        return {'success': True, 'results': [], 'fallback': False}

    content = _ask(prompt, query, [describe(row) for row in rows])
    ids = parse_id_list(content)
    if ids is None:
        logger.warning(f"AI {kind} search reply unreadable, using keyword fallback")
        needle = query.lower()
        matched = [row for row in rows if needle in fallback_text(row).lower()]
        return {'success': True, 'results': [row.to_dict() for row in matched], 'fallback': True}

    matched = _rank(rows, ids)
    logger.info(f"AI {kind} search matched {len(matched)} of {len(rows)}")
    return {'success': True, 'results': [row.to_dict() for row in matched], 'fallback': False}


def search_resources(payload):
    """Body: {query, category?}"""
    query = _require_query(payload)
    rows = Resources.query.order_by(Resources.organization_name.asc()).all()
    category = payload.get('category')
    if category:
        wanted = category.lower()
        rows = [r for r in rows if wanted in [str(c).lower() for c in (r.categories or [])]]

    return _run(
        'resource', rows, query, RESOURCE_PROMPT,
        lambda r: {'id': r.id, 'organization_name': r.organization_name,
                   'description': r.description, 'categories': r.categories or []},
        lambda r: ' '.join([r.organization_name, r.description] + list(r.categories or [])),
    )


def search_jobs(payload):
    """Body: {query, category?, location?, employer?}; active jobs only"""
    query = _require_query(payload)
    jobs = Jobs.query.filter(Jobs.is_active.is_(True))
    if payload.get('category'):
        jobs = jobs.filter(Jobs.category == payload['category'])
    if payload.get('location'):
        jobs = jobs.filter(Jobs.location.ilike(f"%{payload['location']}%"))
    if payload.get('employer'):
        jobs = jobs.filter(Jobs.employer.ilike(f"%{payload['employer']}%"))
    rows = jobs.order_by(Jobs.created_at.desc()).all()

    return _run(
        'job', rows, query, JOB_PROMPT,
        lambda j: {'id': j.id, 'title': j.title, 'employer': j.employer},
        lambda j: f'{j.title} {j.employer}',
    )
