# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

"""
Reverse geocoding (coordinates -> display address), best-effort.
"""

import time
from typing import Dict, Optional, Tuple

import httpx
import structlog

from annapurna.config import settings

logger = structlog.get_logger(__name__)


class GeocodingService:
    """
    Looks up display addresses with a small in-memory TTL cache, bounded to
    `max_entries` keys; the oldest entries are evicted first.
    Any failure (timeout, HTTP error, bad payload) yields None.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, max_entries: Optional[int] = None):
        self.transport = transport
        self.max_entries = max_entries or settings.geocoding_cache_max_entries
        self._cache: Dict[Tuple[float, float], Tuple[float, Optional[str]]] = {}

    def _cache_key(self, latitude: float, longitude: float) -> Tuple[float, float]:
        return round(latitude, 5), round(longitude, 5)

    def _get_cached(self, key) -> Tuple[bool, Optional[str]]:
        entry = self._cache.get(key)
        if entry is None:
            return False, None
        expires, address = entry
        if time.monotonic() >= expires:
            del self._cache[key]
            return False, None
        return True, address

    def _store(self, key, address: Optional[str]) -> None:
        now = time.monotonic()
        for stale in [k for k, (expires, _) in self._cache.items() if now >= expires]:
            del self._cache[stale]
        self._cache.pop(key, None)
        # dicts keep insertion order, so the first key is the oldest write
        while len(self._cache) >= self.max_entries:
            del self._cache[next(iter(self._cache))]
        self._cache[key] = (now + settings.geocoding_cache_seconds, address)

    async def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        key = self._cache_key(latitude, longitude)
        hit, address = self._get_cached(key)
        if hit:
            return address

        params = {
            "format": "json",
            "lat": latitude,
            "lon": longitude,
            "zoom": 18,
            "addressdetails": 1,
        }
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=settings.geocoding_timeout_seconds,
                headers={"User-Agent": settings.geocoding_user_agent},
            ) as client:
                response = await client.get(settings.geocoding_url, params=params)
                response.raise_for_status()
                address = response.json().get("display_name")
        except httpx.TimeoutException:
            logger.warning("Reverse geocoding timeout", latitude=latitude, longitude=longitude)
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Reverse geocoding failed", latitude=latitude, longitude=longitude, error=str(e))
            return None

        self._store(key, address)
        return address


geocoding_service = GeocodingService()


def get_geocoding_service() -> GeocodingService:
    """
    FastAPI dependency returning the shared geocoding service.
    """
    return geocoding_service
