from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Optional

import requests

from ..core.exceptions import LocationUnavailableError
from .model import Location


def coordinates(lat, lng) -> Location:
    """Build a Location from raw values; only finite, in-range pairs pass."""
    try:
        latitude, longitude = float(lat), float(lng)
    except (TypeError, ValueError):
        raise LocationUnavailableError("Coordinates are malformed") from None
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise LocationUnavailableError("Coordinates are not finite")
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise LocationUnavailableError("Coordinates are out of range")
    return Location(latitude=latitude, longitude=longitude)


class LocationProvider(ABC):
    """Source of device coordinates (Strategy Pattern)."""

    @abstractmethod
    def locate(self) -> Location:
        raise NotImplementedError


class UnavailableLocationProvider(LocationProvider):
    """No geolocation support on this device."""

    def __init__(self, reason: str = "Geolocation is not supported"):
        self._reason = reason

    def locate(self) -> Location:
        raise LocationUnavailableError(self._reason)


class StaticLocationProvider(LocationProvider):
    """Fixed site coordinates, e.g. a wall-mounted kiosk."""

    def __init__(self, latitude: Optional[float], longitude: Optional[float]):
        self._latitude = latitude
        self._longitude = longitude

    def locate(self) -> Location:
        if self._latitude is None or self._longitude is None:
            raise LocationUnavailableError("Site coordinates are not configured")
        return coordinates(self._latitude, self._longitude)


class ReportedLocationProvider(LocationProvider):
    """Coordinates reported by the calling browser."""

    def __init__(self, payload: Optional[dict]):
        self._payload = payload

    def locate(self) -> Location:
        if not isinstance(self._payload, dict):
            raise LocationUnavailableError("User denied Geolocation")
        if "lat" not in self._payload or "lng" not in self._payload:
            raise LocationUnavailableError("Reported coordinates are malformed")
        return coordinates(self._payload["lat"], self._payload["lng"])


class IpGeolocationProvider(LocationProvider):
    """Looks up approximate coordinates from an IP geolocation endpoint.

    The endpoint must answer with JSON containing ``lat``/``lon`` (ip-api.com
    style) or ``latitude``/``longitude``.
    """

    def __init__(self, url: str, *, session: Optional[requests.Session] = None, timeout: float = 5.0):
        self._url = url
        self._session = session or requests.Session()
        self._timeout = timeout

    def locate(self) -> Location:
        try:
            resp = self._session.get(self._url, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise LocationUnavailableError(f"Position unavailable: {e}") from e

        if not isinstance(data, dict):
            raise LocationUnavailableError("Position unavailable: unexpected response body")
        lat = data.get("lat", data.get("latitude"))
        lng = data.get("lon", data.get("longitude"))
        if lat is None or lng is None:
            raise LocationUnavailableError("Position unavailable")
        return coordinates(lat, lng)


def build_location_provider(settings) -> LocationProvider:
    kind = str(getattr(settings, "LOCATION_PROVIDER", "none")).lower()
    if kind == "static":
        return StaticLocationProvider(
            getattr(settings, "SITE_LATITUDE", None),
            getattr(settings, "SITE_LONGITUDE", None),
        )
    if kind == "ip":
        return IpGeolocationProvider(
            getattr(settings, "IP_GEOLOCATION_URL"),
            timeout=float(getattr(settings, "LOCATION_TIMEOUT_SECONDS", 5.0)),
        )
    return UnavailableLocationProvider()
