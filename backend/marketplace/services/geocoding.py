from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import hashlib
import logging

import httpx

from tenacity import retry, wait_exponential, stop_after_attempt, retry_if_exception_type

from ..core.config import get_settings
from .caching import cached_get

logger = logging.getLogger(__name__)

settings = get_settings()

PLACEHOLDER_KEYS = {"", "YOUR_GOOGLE_MAPS_API_KEY_HERE"}


@dataclass
class GeocodingResult:
    latitude: float
    longitude: float
    formatted_address: str


@retry(
    wait=wait_exponential(multiplier=1, min=1, max=8),
    stop=stop_after_attempt(3),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
def _fetch_geocode(address: str, api_key: str) -> Dict[str, Any]:
    with httpx.Client(timeout=settings.GEOCODING_TIMEOUT_SECONDS) as client:
        resp = client.get(
            settings.GEOCODING_BASE_URL,
            params={"address": address, "key": api_key},
        )
        resp.raise_for_status()
        return resp.json()


def _cache_key(address: str) -> str:
    digest = hashlib.sha256(address.lower().encode("utf-8")).hexdigest()
    return f"geocode:{digest}"


def geocode_address(address: str | None) -> Optional[GeocodingResult]:
    """
    Resolve a free-text address to coordinates via the Google Geocoding API.

    Returns None when no API key is configured, the address is blank, the
    API has no match, or the request fails. Never raises.
    """
    api_key = (settings.GOOGLE_MAPS_API_KEY or "").strip()
    if api_key in PLACEHOLDER_KEYS:
        logger.debug("Google Maps API key not configured, skipping geocoding")
        return None

    full_address = (address or "").strip()
    if not full_address:
        return None

    key = _cache_key(full_address)
    cached = cached_get(key)
    if cached is not None:
        return GeocodingResult(**cached)

    try:
        data = _fetch_geocode(full_address, api_key)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Geocoding request failed: %s", e, extra={"step": "geocode"})
        return None

    results = data.get("results") or []
    if data.get("status") != "OK" or not results:
        logger.warning(
            "Geocoding returned no result: %s %s",
            data.get("status"),
            data.get("error_message") or "",
            extra={"step": "geocode"},
        )
        return None

    first = results[0]
    location = (first.get("geometry") or {}).get("location") or {}
    try:
        result = GeocodingResult(
            latitude=float(location["lat"]),
            longitude=float(location["lng"]),
            formatted_address=str(first.get("formatted_address") or full_address),
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("Geocoding response missing coordinates", extra={"step": "geocode"})
        return None

    cached_get(key, set_value=asdict(result), ttl=settings.GEOCODING_CACHE_TTL_SECONDS)
    return result
