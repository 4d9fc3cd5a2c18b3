"""
Distancias geográficas.

`haversine_km` es el filtro exacto; `bounding_box` sólo sirve para
pre-filtrar en la base y nunca es más estricto que el haversine.
"""

import math

from identity_matcher.models import GeoPoint

EARTH_RADIUS_KM = 6371.0

# 1 grado de latitud ≈ 111.19 km; usar 111 agranda levemente la caja
KM_PER_DEGREE = 111.0


def haversine_km(point1: GeoPoint, point2: GeoPoint) -> float:
    """Distancia de círculo máximo entre dos puntos, en kilómetros."""
    lat1_rad = math.radians(point1.latitude)
    lat2_rad = math.radians(point2.latitude)
    delta_lat = math.radians(point2.latitude - point1.latitude)
    delta_lng = math.radians(point2.longitude - point1.longitude)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lng / 2) ** 2)
    # El redondeo puede dejar `a` apenas por encima de 1 en antípodas
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def bounding_box(center: GeoPoint, radius_km: float) -> tuple[float, float, float, float]:
    """
    Caja lat/lng que contiene el círculo de `radius_km` alrededor de `center`.

    Returns:
        (min_lat, max_lat, min_lng, max_lng). Si la caja cruza un polo o el
        antimeridiano, la longitud cubre el rango completo.
    """
    lat_range = radius_km / KM_PER_DEGREE
    min_lat = max(-90.0, center.latitude - lat_range)
    max_lat = min(90.0, center.latitude + lat_range)

    # Los meridianos convergen hacia los polos: usar la latitud más extrema
    extreme_lat = max(abs(min_lat), abs(max_lat))
    cos_lat = math.cos(math.radians(extreme_lat))
    if extreme_lat >= 90.0 or cos_lat <= 1e-9:
        return min_lat, max_lat, -180.0, 180.0

    lng_range = radius_km / (KM_PER_DEGREE * cos_lat)
    min_lng = center.longitude - lng_range
    max_lng = center.longitude + lng_range
    if min_lng < -180.0 or max_lng > 180.0:
        return min_lat, max_lat, -180.0, 180.0

    return min_lat, max_lat, min_lng, max_lng
