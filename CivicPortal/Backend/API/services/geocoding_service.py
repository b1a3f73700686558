import re

import requests
from flask import current_app

from log_config import get_app_logger

logger = get_app_logger()

PO_BOX_PATTERN = re.compile(r'\b(P\.?\s*O\.?\s*BOX|POST\s+OFFICE\s+BOX)\b', re.IGNORECASE)
GEOCODE_TIMEOUT_SECONDS = 10


def is_po_box(address):
    return bool(address) and PO_BOX_PATTERN.search(address) is not None


def geocode_address(address):
    """(lat, lon) for an address via Nominatim, or None when nothing is found"""
    if is_po_box(address):
        return None

    config = current_app.config
    try:
        response = requests.get(
            config.get('GEOCODER_URL'),
            params={'q': address, 'format': 'json', 'limit': 1},
            headers={'User-Agent': config.get('GEOCODER_USER_AGENT')},
            timeout=GEOCODE_TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Geocoding error for address \"{address}\": {e}")
        return None

    if response.status_code != 200:
        logger.error(f"Nominatim API error: {response.status_code} for address: {address}")
        return None

    try:
        results = response.json()
    except ValueError:
        logger.error(f"Nominatim returned a non-JSON body for address: {address}")
        return None

    if not results:
        logger.warning(f"No results found for address: {address}")
        return None

    first = results[0]
    logger.info(f"Geocoded: {address} -> {first.get('display_name')}")
    return float(first['lat']), float(first['lon'])
