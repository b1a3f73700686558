"""
Chat-completion client for the agency matcher and alt-text jobs

Posts to an OpenAI-compatible /chat/completions endpoint with requests.
Every call carries an explicit timeout and is made once; failures surface as
UpstreamError (LLMTimeoutError for timeouts) for the caller to translate.
"""


import requests
from flask import current_app

from log_config import get_app_logger
from utils.errors import UpstreamError

logger = get_app_logger()


class LLMTimeoutError(UpstreamError):
    """Raised when the completion endpoint does not answer in time."""


def chat_completion(messages, model=None, json_mode=False, max_tokens=1000, timeout=None):
    """
    Send one chat-completion request and return the first choice's content

    Args:
        messages: OpenAI-style message list
        model: model name (default: LLM_MODEL)
        json_mode: request a JSON object response
        max_tokens: completion token cap
        timeout: seconds (default: LLM_TIMEOUT_SECONDS)

    Returns:
        Message content string, or None when the reply carries no content
    """
    config = current_app.config
    api_key = config.get('LLM_API_KEY')
    if not api_key:
        raise UpstreamError('LLM API key not configured')

    body = {
        'model': model or config.get('LLM_MODEL'),
        'messages': messages,
        'max_completion_tokens': max_tokens,
    }
    if json_mode:
        body['response_format'] = {'type': 'json_object'}

    try:
        response = requests.post(
            config.get('LLM_API_URL'),
            headers={
                'Authorization': f'Bearer {api_key}',
                'Content-Type': 'application/json',
            },
            json=body,
            timeout=timeout or config.get('LLM_TIMEOUT_SECONDS', 30),
        )
    except requests.exceptions.Timeout as e:
        logger.error(f"LLM request timed out: {e}")
        raise LLMTimeoutError('The AI service took too long to respond. Please try again.')
    except requests.exceptions.RequestException as e:
        logger.error(f"LLM request failed: {e}")
        raise UpstreamError('AI analysis failed')

    if response.status_code != 200:
        logger.error(f"LLM API error {response.status_code}: {response.text[:500]}")
        raise UpstreamError('AI analysis failed')

    try:
        payload = response.json()
    except ValueError:
        logger.error('LLM API returned a non-JSON body')
        return None

    choices = payload.get('choices') or []
    if not choices:
        return None
    return (choices[0].get('message') or {}).get('content')
