"""
Document Ingestion

Best-effort text scraping of uploaded agency reference documents (PDF/DOCX
exports). There is no real PDF or DOCX parser here: the bytes are decoded as
UTF-8 with replacement and mined with regexes for
- plain http(s) URLs
- Word HYPERLINK "..." field codes
- the "• <complaint title> <url> <description>" bullet layout of the 311
  complaint-type list, which yields a complaint title -> URL map

Extraction is lossy. The result reports an extraction_quality grade from the
share of printable characters, and a poor extraction is still stored.
"""

import re

import requests

from extensions import db
from log_config import get_app_logger
from models import PdfContent
from services.agency_matcher import invalidate_agency_cache
from utils.errors import BadRequestError, UpstreamError
from utils.validation_schemas import DocumentIngestRequest

logger = get_app_logger()

URL_PATTERN = re.compile(r'https?://[^\s"<>()\[\]{}]+')
HYPERLINK_PATTERN = re.compile(r'HYPERLINK\s+"([^"]+)"')
BULLET_PATTERN = re.compile(r'•\s*([^•\n]+?)\s+(https?://[^\s"<>]+)(?:[ \t]+([^•\n]*))?')

MAX_LINES = 200
MIN_LINE_CHARS = 10
DOWNLOAD_TIMEOUT_SECONDS = 60
GOOD_RATIO = 0.9
PARTIAL_RATIO = 0.6


def _clean_url(url):
    return url.rstrip('.,;:)\'"')


def decode_best_effort(data):
    return data.decode('utf-8', errors='replace')


def printable_ratio(text):
    if not text:
        return 0.0
    printable = sum(1 for ch in text if ch.isprintable() or ch in '\n\r\t')
    return printable / len(text)


def extraction_quality(text):
    ratio = printable_ratio(text.replace('�', '\x00'))
    if ratio >= GOOD_RATIO:
        return 'good'
    if ratio >= PARTIAL_RATIO:
        return 'partial'
    return 'poor'


def extract_links(text):
    """Plain URLs and HYPERLINK targets (deduplicated, in order) plus the complaint title -> URL map"""
    urls = []
    seen = set()
    for raw in URL_PATTERN.findall(text) + HYPERLINK_PATTERN.findall(text):
        url = _clean_url(raw)
        if url.startswith(('http://', 'https://')) and url not in seen:
            seen.add(url)
            urls.append(url)

    complaints = {}
    for title, url, _description in BULLET_PATTERN.findall(text):
        title = re.sub(r'\s+', ' ', title).strip(' -:')
        if title and title not in complaints:
            complaints[title] = _clean_url(url)

    return {'urls': urls, 'complaints': complaints}


def substantial_lines(text, limit=MAX_LINES):
    """First `limit` lines that carry real text"""
    lines = []
    for line in text.splitlines():
        cleaned = ''.join(ch for ch in line if ch.isprintable()).strip()
        if len(cleaned) < MIN_LINE_CHARS or not re.search(r'[A-Za-z]{3,}', cleaned):
            continue
        lines.append(cleaned)
        if len(lines) >= limit:
            break
    return lines


def download(url):
    try:
        response = requests.get(url, timeout=DOWNLOAD_TIMEOUT_SECONDS)
    except requests.exceptions.RequestException as e:
        logger.error(f"Document download failed for {url}: {e}")
        raise UpstreamError('Failed to download document')
    if response.status_code != 200:
        logger.error(f"Document download returned {response.status_code} for {url}")
        raise UpstreamError('Failed to download document')
    return response.content


def ingest(payload):
    request_data = DocumentIngestRequest.model_validate(payload or {})
    if not request_data.fileUrl:
        raise BadRequestError('File URL is required')

    file_name = request_data.fileName or request_data.fileUrl.rsplit('/', 1)[-1]
    document_type = request_data.documentType or 'agency_directory'

    raw = download(request_data.fileUrl)
    text = decode_best_effort(raw)
    quality = extraction_quality(text)
    hyperlinks = extract_links(text)
    lines = substantial_lines(text)
    content = '\n'.join(lines)

    try:
        PdfContent.query.filter_by(document_type=document_type).delete()
        record = PdfContent(
            file_name=file_name,
            document_type=document_type,
            content=content,
            hyperlinks=hyperlinks
        )
        db.session.add(record)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    invalidate_agency_cache()

    logger.info(
        f"Ingested {file_name} ({len(raw)} bytes) as {document_type}: {len(lines)} lines, "
        f"{len(hyperlinks['urls'])} urls, {len(hyperlinks['complaints'])} complaint links, quality={quality}")
    return {
        'success': True,
        'id': record.id,
        'file_name': file_name,
        'document_type': document_type,
        'lines_stored': len(lines),
        'urls_found': len(hyperlinks['urls']),
        'complaint_links_found': len(hyperlinks['complaints']),
        'extraction_quality': quality
    }
