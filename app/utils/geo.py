"""위치 기반 필터 유틸리티.

Approximate geolocation filter. A center point and a radius in kilometres
become a latitude/longitude bounding box (1 degree of latitude ≈ 111 km).
This is not a great-circle distance: it is fine for city-scale radii and
widens towards the poles, where the longitude range becomes unbounded.
"""

import math
from dataclasses import dataclass

KM_PER_DEGREE: float = 111.0

# cos(위도)가 이 값보다 작으면 경도 범위 제한 없음 (Longitude unbounded below this cosine)
_MIN_COS_LAT: float = 1e-6


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """중심점과 반경(km)으로 경계 상자를 계산합니다.

    Compute the bounding box around ``(lat, lng)`` for ``radius_km``.

    Latitude half-width is ``radius / 111``; longitude half-width is
    ``radius / (111 * cos(lat))``.

    Raises:
        ValueError: 반경이 0 이하일 때 (radius must be positive)
    """
    if radius_km <= 0:
        raise ValueError("radius must be positive")

    lat_delta = radius_km / KM_PER_DEGREE
    cos_lat = math.cos(math.radians(lat))
    if cos_lat < _MIN_COS_LAT:
        min_lng, max_lng = -180.0, 180.0
    else:
        lng_delta = radius_km / (KM_PER_DEGREE * cos_lat)
        min_lng, max_lng = lng - lng_delta, lng + lng_delta

    return BoundingBox(
        min_lat=lat - lat_delta,
        max_lat=lat + lat_delta,
        min_lng=min_lng,
        max_lng=max_lng,
    )
