"""
Utilidades geométricas para rutas y contornos administrativos
"""
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from shapely.geometry import Point, Polygon
from shapely.prepared import PreparedGeometry, prep

from config import EARTH_RADIUS_KM

LngLat = Tuple[float, float]
Ring = List[LngLat]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calcula distancia en km entre dos coordenadas usando fórmula de Haversine

    Args:
        lat1, lon1: Coordenadas del primer punto
        lat2, lon2: Coordenadas del segundo punto

    Returns:
        Distancia en kilómetros
    """
    # Convertir a radianes
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return EARTH_RADIUS_KM * c


def initial_bearing(origin: LngLat, target: LngLat) -> float:
    """Rumbo inicial (grados desde el norte) de origin hacia target."""
    lon1, lat1 = map(math.radians, origin)
    lon2, lat2 = map(math.radians, target)
    dlon = lon2 - lon1
    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    return math.degrees(math.atan2(y, x))


def destination_point(origin: LngLat, distance_km: float, bearing_deg: float) -> LngLat:
    """
    Punto alcanzado al recorrer distance_km desde origin con un rumbo dado

    Args:
        origin: (lng, lat) de partida
        distance_km: Distancia sobre el círculo máximo
        bearing_deg: Rumbo en grados desde el norte

    Returns:
        Tupla (lng, lat)
    """
    lon1, lat1 = map(math.radians, origin)
    bearing = math.radians(bearing_deg)
    delta = distance_km / EARTH_RADIUS_KM

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(bearing)
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    return (math.degrees(lon2), math.degrees(lat2))


def segment_length_km(a: LngLat, b: LngLat) -> float:
    return haversine_distance(a[1], a[0], b[1], b[0])


def polyline_length_km(path: Sequence[LngLat]) -> float:
    """Longitud total de una polilínea (lng, lat) en km."""
    return sum(segment_length_km(path[i - 1], path[i]) for i in range(1, len(path)))


def points_along(path: Sequence[LngLat], distances_km: Iterable[float]) -> List[LngLat]:
    """
    Posiciones sobre la polilínea para distancias crecientes desde el inicio

    Recorre la polilínea una sola vez, así que las distancias deben venir
    ordenadas de menor a mayor. Más allá del final devuelve el último vértice.

    Args:
        path: Polilínea (lng, lat)
        distances_km: Distancias en km, en orden no decreciente

    Returns:
        Lista de puntos (lng, lat), uno por distancia
    """
    out: List[LngLat] = []
    i = 1
    travelled = 0.0
    step = segment_length_km(path[0], path[1]) if len(path) > 1 else 0.0

    for distance_km in distances_km:
        while i < len(path) - 1 and travelled + step < distance_km:
            travelled += step
            i += 1
            step = segment_length_km(path[i - 1], path[i])

        if len(path) < 2 or travelled + step < distance_km:
            out.append(tuple(path[-1]))
            continue

        start, end = path[i - 1], path[i]
        remaining = distance_km - travelled
        if remaining <= 0:
            out.append(tuple(start))
        elif step - remaining <= 1e-12:
            out.append(tuple(end))
        else:
            out.append(destination_point(start, remaining, initial_bearing(start, end)))
    return out


def parse_lnglat(raw: str) -> Optional[LngLat]:
    """Convierte "lng,lat" en tupla; None si alguna parte no es un número completo."""
    parts = str(raw).split(",")
    if len(parts) != 2:
        return None
    try:
        lng, lat = float(parts[0].strip()), float(parts[1].strip())
    except ValueError:
        return None
    if math.isnan(lng) or math.isnan(lat):
        return None
    return (lng, lat)


def parse_polyline(raw: str) -> List[LngLat]:
    """Decodifica polilíneas AMap: "lng,lat;lng,lat;..."."""
    points: List[LngLat] = []
    for chunk in str(raw or "").split(";"):
        point = parse_lnglat(chunk)
        if point is not None:
            points.append(point)
    return points


def parse_rings(raw: str) -> List[Ring]:
    """Decodifica contornos AMap, con anillos separados por "|"."""
    rings = [parse_polyline(part) for part in str(raw or "").split("|")]
    return [ring for ring in rings if ring]


def rings_to_polygons(rings: Sequence[Ring]) -> List[Polygon]:
    # Un anillo necesita al menos tres vértices para cerrar superficie.
    return [Polygon(ring) for ring in rings if len(ring) >= 3]


def prepare_rings(rings: Sequence[Ring]) -> List[PreparedGeometry]:
    """Polígonos preparados de un contorno, para consultas repetidas."""
    return [prep(polygon) for polygon in rings_to_polygons(rings)]


def is_point_in_prepared(point: LngLat, polygons: Sequence[PreparedGeometry]) -> bool:
    """
    Comprueba si un punto cae en alguno de los polígonos (borde incluido)

    Args:
        point: (lng, lat)
        polygons: Resultado de prepare_rings

    Returns:
        True si algún polígono contiene el punto
    """
    target = Point(point)
    return any(polygon.covers(target) for polygon in polygons)
