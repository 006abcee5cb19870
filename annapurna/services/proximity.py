# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import math
import re
from typing import Iterable, List, Optional, Tuple

from annapurna.exceptions import ValidationError

EARTH_RADIUS_KM = 6371.0

_COORDINATES = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in kilometres between two points given in decimal degrees.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def parse_coordinates(value: Optional[str]) -> Optional[Tuple[float, float]]:
    """
    Parses a "lat,lng" string. Returns None for anything else, including out-of-range values.
    """
    if not value:
        return None
    match = _COORDINATES.match(value)
    if not match:
        return None
    lat, lng = float(match.group(1)), float(match.group(2))
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return lat, lng


def filter_by_proximity(donations: Iterable, origin: Tuple[float, float], radius_km: float) -> List:
    """
    Keeps donations within radius_km of origin, preserving input order.
    Donations without coordinates have an unknown distance and are always kept.
    """
    if radius_km is None or radius_km < 0:
        raise ValidationError("Search radius must be zero or positive", field="radius_km")
    origin_lat, origin_lng = origin

    nearby = []
    for donation in donations:
        if donation.latitude is None or donation.longitude is None:
            nearby.append(donation)
            continue
        distance = haversine_km(origin_lat, origin_lng, float(donation.latitude), float(donation.longitude))
        if distance <= radius_km:
            nearby.append(donation)
    return nearby


def origin_from_params(lat: Optional[float], lng: Optional[float]) -> Optional[Tuple[float, float]]:
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise ValidationError("Both lat and lng are required for a proximity search", field="lat" if lat is None else "lng")
    return lat, lng
