"""
Agency Matcher

Matches a resident's free-text issue to government agencies:
1. Loads every agency (cached) and any ingested reference documents
2. Asks the LLM once to score agencies (0-100), keeping only scores >= 80
3. Trims the ranked list by top confidence and attaches a rephrase hint
4. For city-level questions, swaps the generic NYC 311 website for the
   complaint-type page whose title best overlaps the question
"""

import json
import re

from extensions import cache
from log_config import get_app_logger
from models import GovernmentAgencies, PdfContent
from services.llm_client import chat_completion
from utils.errors import BadRequestError

logger = get_app_logger()

AGENCY_CACHE_KEY = 'agency_matcher:agencies'
MIN_CONFIDENCE = 80
OVERLAP_THRESHOLD = 0.3
DOCUMENT_EXCERPT_CHARS = 4000
MAX_COMPLAINT_TITLES = 150

NO_AGENCIES_MESSAGE = 'No agencies found in database'
NO_MATCH_MESSAGE = ('No agencies found that match your issue with sufficient confidence. '
                    'Please try rephrasing your inquiry with more specific details.')
TOP_TWO_MESSAGE = 'Multiple agencies might be able to help. Consider rephrasing your inquiry to be more specific.'
TOP_THREE_MESSAGE = 'Several agencies might be relevant. Try rephrasing your inquiry with more specific details.'
WEAK_MATCH_MESSAGE = ('Multiple agencies might be able to help. '
                      'Please rephrase your inquiry to be more specific about your issue.')
RETRY_MESSAGE = "We couldn't analyze your request right now. Please try again in a moment."


def load_agencies():
    agencies = cache.get(AGENCY_CACHE_KEY)
    if agencies is None:
        agencies = [a.to_dict() for a in GovernmentAgencies.query.order_by(GovernmentAgencies.name).all()]
        cache.set(AGENCY_CACHE_KEY, agencies)
    return agencies


def invalidate_agency_cache():
    cache.delete(AGENCY_CACHE_KEY)


def load_reference_documents():
    """(excerpts, complaint title -> url map) from ingested documents"""
    excerpts = []
    complaint_links = {}
    for doc in PdfContent.query.order_by(PdfContent.document_type).all():
        if doc.content:
            excerpts.append(f"[{doc.document_type or doc.file_name}]\n{doc.content[:DOCUMENT_EXCERPT_CHARS]}")
        complaint_links.update((doc.hyperlinks or {}).get('complaints') or {})
    return excerpts, complaint_links


def _words(text):
    return {w for w in re.findall(r'[a-z0-9]+', (text or '').lower()) if len(w) > 2}


def best_complaint_url(query, complaint_links):
    """Complaint page whose title words best overlap the query (ratio >= 0.3), or None"""
    query_words = _words(query)
    best_url, best_ratio = None, 0.0
    for title, url in complaint_links.items():
        title_words = _words(title)
        if not title_words:
            continue
        ratio = len(query_words & title_words) / len(title_words)
        if ratio >= OVERLAP_THRESHOLD and ratio > best_ratio:
            best_url, best_ratio = url, ratio
    return best_url


def build_system_prompt(agencies, preferred_level='unknown', excerpts=None, complaint_links=None):
    agency_list = '\n\n'.join(
        f"{i + 1}. {a['name']} ({a['level']}): {a['description']}" for i, a in enumerate(agencies)
    )

    prompt = f"""You are an expert in government services and agencies. Your task is to analyze a user's issue and match it with the most appropriate government agencies.

AGENCIES LIST:
{agency_list}

Instructions:
1. Analyze the user's query and identify which agencies are most relevant
2. Rank agencies by relevance (1-100 confidence score)
3. Only include agencies with confidence score >= {MIN_CONFIDENCE}
4. Return results in JSON format with this structure:
{{
  "results": [
    {{
      "agency_index": number,
      "confidence": number,
      "reasoning": "brief explanation why this agency matches"
    }}
  ]
}}

Be very precise - only return agencies that truly match the user's issue. If no agency has {MIN_CONFIDENCE}%+ confidence, return empty results array."""

    if preferred_level == 'city':
        prompt += ("\n\nThe user is looking for city-level help. Prioritize \"NYC 311\" whenever it can "
                   "handle the issue, and prefer city agencies over state or federal ones.")
    elif preferred_level in ('state', 'federal'):
        prompt += f"\n\nThe user prefers {preferred_level}-level agencies when they are relevant."

    if excerpts:
        prompt += '\n\nREFERENCE DOCUMENTS:\n' + '\n\n'.join(excerpts)
    if complaint_links:
        titles = list(complaint_links)[:MAX_COMPLAINT_TITLES]
        prompt += '\n\nNYC 311 COMPLAINT TYPES:\n' + '\n'.join(f"- {t}" for t in titles)
    return prompt


def parse_matches(content, agencies):
    """Agencies named in the LLM reply with confidence/reasoning, best first; None if unreadable"""
    if not content or not content.strip():
        return None
    try:
        parsed = json.loads(content)
    except ValueError:
        match = re.search(r'\{[\s\S]*\}', content)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            return None

    results = parsed.get('results') if isinstance(parsed, dict) else None
    if not isinstance(results, list):
        return None

    matched = []
    for item in results:
        try:
            index = int(item.get('agency_index')) - 1
            confidence = float(item.get('confidence', 0))
        except (AttributeError, TypeError, ValueError):
            continue
        if not 0 <= index < len(agencies):
            logger.warning(f"LLM returned out-of-range agency_index {index + 1}")
            continue
        agency = dict(agencies[index])
        agency['confidence'] = int(confidence) if confidence.is_integer() else confidence
        agency['reasoning'] = item.get('reasoning', '')
        matched.append(agency)

    matched.sort(key=lambda a: a['confidence'], reverse=True)
    return matched


def select_results(matched):
    """Trim the ranked matches by top confidence: (results, message)"""
    if not matched:
        return [], NO_MATCH_MESSAGE
    top = matched[0]['confidence']
    if top >= 95:
        return matched[:1], ''
    if top >= 90:
        return matched[:2], TOP_TWO_MESSAGE
    if top >= 80:
        return matched[:3], TOP_THREE_MESSAGE
    return matched[:5], WEAK_MATCH_MESSAGE


def _apply_311_links(results, query, complaint_links):
    if not complaint_links:
        return
    for agency in results:
        if '311' not in agency.get('name', ''):
            continue
        url = best_complaint_url(query, complaint_links)
        if url:
            logger.info(f"Using 311 complaint page {url} for query")
            agency['website'] = url


def search(query, preferred_level='unknown'):
    """Run one match; returns {results, totalFound, message, confidence}"""
    if not query or not query.strip():
        raise BadRequestError('Query is required')
    query = query.strip()

    agencies = load_agencies()
    if not agencies:
        return {'results': [], 'totalFound': 0, 'message': NO_AGENCIES_MESSAGE, 'confidence': 0}

    excerpts, complaint_links = load_reference_documents()
    messages = [
        {'role': 'system', 'content': build_system_prompt(agencies, preferred_level, excerpts, complaint_links)},
        {'role': 'user', 'content': f'User\'s issue: "{query}"'},
    ]
    content = chat_completion(messages, json_mode=True)

    matched = parse_matches(content, agencies)
    if matched is None:
        logger.warning('Agency matcher received an empty or unreadable LLM reply')
        return {'results': [], 'totalFound': 0, 'message': RETRY_MESSAGE, 'confidence': 0}

    results, message = select_results(matched)
    if preferred_level == 'city':
        _apply_311_links(results, query, complaint_links)

    top = matched[0]['confidence'] if matched else 0
    logger.info(f"Agency match: {len(results)} of {len(matched)} results, top confidence {top}")
    return {'results': results, 'totalFound': len(matched), 'message': message, 'confidence': top}
