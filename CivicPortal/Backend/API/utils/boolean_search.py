"""Boolean text search for public listings.

Queries combine terms with AND / OR / NOT (case-insensitive operators).
Terms match on word boundaries against text normalized to lowercase
alphanumerics, so "x-ray" matches "x ray". NOT terms exclude an item outright,
every AND term must match, and at least one OR term must match when any are
given. Matching items are ranked by the share of positive terms they hit.
"""

import re

_OPERATOR_SPLIT = re.compile(r'\s+(AND|OR|NOT)\s+', re.IGNORECASE)
_OPERATOR = re.compile(r'^(and|or|not)$', re.IGNORECASE)


def _normalize_spaces(value):
    return re.sub(r'\s+', ' ', value).strip()


def _clean_term(raw):
    term = re.sub(r'[()"]', ' ', raw)
    term = re.sub(r'^[^\w]+|[^\w]+$', ' ', term)
    return _normalize_spaces(term.lower())


def _normalize_for_match(value):
    return _normalize_spaces(re.sub(r'[^a-z0-9]+', ' ', value.lower()))


def parse_boolean_query(query):
    """Split a query into (and_terms, or_terms, not_terms)"""
    and_terms, or_terms, not_terms = [], [], []
    current = 'AND'
    saw_or = False

    for part in _OPERATOR_SPLIT.split(_normalize_spaces(query)):
        if not part:
            continue
        if _OPERATOR.match(part):
            current = part.upper()
            if current == 'OR':
                saw_or = True
            continue

        term = _clean_term(part)
        if not term:
            continue
        if current == 'AND':
            and_terms.append(term)
        elif current == 'OR':
            or_terms.append(term)
        else:
            not_terms.append(term)

    # "a OR b" must not require the head term: fold leading AND terms into OR
    if saw_or and or_terms and and_terms:
        or_terms = and_terms + or_terms
        and_terms = []

    if not and_terms and not or_terms and not not_terms:
        and_terms = [t for t in _clean_term(query).split(' ') if t]

    return and_terms, or_terms, not_terms


def _term_matches(term, normalized_text):
    tokens = [t for t in _normalize_for_match(term).split(' ') if t]
    if not tokens:
        return False
    pattern = r'\b' + r'\s+'.join(re.escape(t) for t in tokens) + r'\b'
    return re.search(pattern, normalized_text, re.IGNORECASE) is not None


def match_boolean_search(text, query):
    """Return (matches, score) where score is 0-100 term coverage"""
    and_terms, or_terms, not_terms = parse_boolean_query(query)
    normalized_text = f" {_normalize_for_match(text)} "

    for term in not_terms:
        if _term_matches(term, normalized_text):
            return False, 0.0

    and_hits = sum(1 for term in and_terms if _term_matches(term, normalized_text))
    if and_terms and and_hits != len(and_terms):
        return False, 0.0

    or_hits = 0
    if or_terms:
        or_hits = sum(1 for term in or_terms if _term_matches(term, normalized_text))
        if or_hits == 0:
            return False, 0.0

    total_terms = len(and_terms) + len(or_terms)
    score = (and_hits + or_hits) / total_terms * 100 if total_terms else 0.0
    return True, score


def filter_with_boolean_search(items, query, text_extractor):
    """Keep matching items, best coverage first; a blank query returns items unchanged"""
    normalized_query = _normalize_spaces(query or '')
    if not normalized_query:
        return list(items)

    scored = []
    for item in items:
        text = ' '.join(t for t in text_extractor(item) if t)
        matches, score = match_boolean_search(text, normalized_query)
        if matches:
            scored.append((score, item))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored]
