# app/services/travel_time_service.py
"""
Travel time oracle.

Resolves the minimum idle time (whole hours) a vehicle needs between dropping
at one location and picking up at another. Durations come from the Google
Distance Matrix API, are memoised per ordered location pair and degrade to a
fixed estimate whenever the lookup cannot be completed.
"""
import asyncio
import math
from typing import Awaitable, Callable, MutableMapping, Optional, Tuple

import aiohttp

from app.core.config import (
    GOOGLE_MAPS_API_KEY,
    DISTANCE_MATRIX_URL,
    TRAVEL_REGION,
    TRAVEL_TIME_TIMEOUT_SECONDS,
)
from app.utiles.logger import get_logger

logger = get_logger(__name__)

SAME_LOCALE_BUFFER_HOURS = 1
SAFETY_MARGIN_HOURS = 1
FALLBACK_BUFFER_HOURS = 4

CacheKey = Tuple[str, str]
DurationLookup = Callable[[str, str], Awaitable[Optional[int]]]


class TravelTimeLookupError(Exception):
    """The external service answered, but not with a usable duration."""


def _duration_from_payload(payload: dict) -> int:
    """Extract the driving duration in seconds from a Distance Matrix response."""
    if payload.get("status") != "OK":
        raise TravelTimeLookupError(payload.get("error_message") or payload.get("status") or "Route not found")
    try:
        element = payload["rows"][0]["elements"][0]
    except (KeyError, IndexError, TypeError) as e:
        raise TravelTimeLookupError("Malformed distance matrix response") from e
    if element.get("status") != "OK":
        raise TravelTimeLookupError(f"Route not found ({element.get('status')})")
    return int(element["duration"]["value"])


async def fetch_driving_seconds(
    origin: str,
    destination: str,
    api_key: str,
    timeout: float = TRAVEL_TIME_TIMEOUT_SECONDS,
) -> int:
    """Call the Distance Matrix API once; raises on any failure."""
    params = {
        "origins": origin,
        "destinations": destination,
        "key": api_key,
        "mode": "driving",
        "region": TRAVEL_REGION,
    }
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        async with session.get(DISTANCE_MATRIX_URL, params=params) as resp:
            resp.raise_for_status()
            payload = await resp.json()
    return _duration_from_payload(payload)


def buffer_hours_from_seconds(seconds: int) -> int:
    """Round the drive up to whole hours and add the safety margin."""
    return math.ceil(seconds / 3600) + SAFETY_MARGIN_HOURS


class TravelTimeOracle:
    """
    Buffer-hour resolver with an injectable cache and lookup.

    ``cache`` is any mutable mapping keyed by the ordered (from, to) pair; it is
    never evicted, so pass a bounded mapping if pair cardinality is large.
    ``lookup`` is a coroutine ``(origin, destination) -> seconds`` and defaults
    to the Distance Matrix call when an API key is configured.
    """

    def __init__(
        self,
        cache: Optional[MutableMapping[CacheKey, int]] = None,
        lookup: Optional[DurationLookup] = None,
        api_key: Optional[str] = GOOGLE_MAPS_API_KEY,
        timeout: float = TRAVEL_TIME_TIMEOUT_SECONDS,
    ):
        self.cache = cache if cache is not None else {}
        self.api_key = api_key
        self.timeout = timeout
        self._lookup = lookup

    async def _lookup_seconds(self, origin: str, destination: str) -> Optional[int]:
        if self._lookup is not None:
            return await self._lookup(origin, destination)
        if not self.api_key:
            logger.warning("GOOGLE_MAPS_API_KEY missing. Using fallback estimation.")
            return None
        return await fetch_driving_seconds(origin, destination, self.api_key, self.timeout)

    async def resolve_buffer_hours(self, from_location: Optional[str], to_location: Optional[str]) -> int:
        """Hours required between a drop at ``from_location`` and a pickup at ``to_location``."""
        f = (from_location or "").strip().lower()
        t = (to_location or "").strip().lower()
        if not f or not t:
            return SAME_LOCALE_BUFFER_HOURS

        # Same city/locale
        if f == t or f in t or t in f:
            return SAME_LOCALE_BUFFER_HOURS

        key = (f, t)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Travel time cache hit: %s → %s = %sh", f, t, cached)
            return cached

        try:
            seconds = await asyncio.wait_for(
                self._lookup_seconds(from_location.strip(), to_location.strip()), timeout=self.timeout
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, TravelTimeLookupError, ValueError) as e:
            logger.error("Distance matrix lookup failed for %s → %s: %s", f, t, e)
            return FALLBACK_BUFFER_HOURS

        if seconds is None:
            return FALLBACK_BUFFER_HOURS

        hours = buffer_hours_from_seconds(seconds)
        self.cache[key] = hours
        logger.info("Travel time resolved: %s → %s = %sh buffer", f, t, hours)
        return hours


# Process-wide oracle used by the availability engine unless another is injected
travel_time_oracle = TravelTimeOracle()
