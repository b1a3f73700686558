
from flask import current_app

from log_config import get_app_logger
from services.llm_client import chat_completion

logger = get_app_logger()

ALT_TEXT_PROMPT = (
    'Generate a concise, descriptive alt text for this image following WCAG guidelines. '
    'Describe what is visible without saying "image of". Keep it under 125 characters. '
    'Be specific and informative.'
)
UNSUPPORTED_EXTENSIONS = ('.avif', '.svg')


def to_full_url(url):
    """Absolute URL for an image; site-relative paths are served by the frontend"""
    if url.startswith(('http://', 'https://')):
        return url
    if url.startswith('/'):
        return f"{current_app.config.get('FRONTEND_URL', '').rstrip('/')}{url}"
    return url


def is_supported(url):
    return not url.lower().split('?', 1)[0].endswith(UNSUPPORTED_EXTENSIONS)


def generate_alt_text(url):
    """Alt text for one image URL; empty string for unsupported formats"""
    full_url = to_full_url(url)
    if not is_supported(full_url):
        logger.info(f"Skipping unsupported format: {full_url}")
        return ''

    messages = [{
        'role': 'user',
        'content': [
            {'type': 'text', 'text': ALT_TEXT_PROMPT},
            {'type': 'image_url', 'image_url': {'url': full_url}},
        ],
    }]
    content = chat_completion(messages, model=current_app.config.get('LLM_VISION_MODEL'), max_tokens=100)
    return (content or '').strip()
