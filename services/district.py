"""
Contornos provinciales vía AMap y detección de provincias a lo largo de una ruta
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

from api.amap import AmapClient
from config import AMAP_COUNTRY_KEYWORD, PRELOAD_CONCURRENCY, ROUTE_MAX_SAMPLES
from geo_utils import LngLat, Ring, is_point_in_prepared, parse_lnglat, parse_rings, prepare_rings

logger = logging.getLogger(__name__)


@dataclass
class ProvinceInfo:
    name: str
    adcode: str
    center: Optional[LngLat]
    rings: Optional[List[Ring]] = None


def fetch_province_list(amap: AmapClient) -> List[ProvinceInfo]:
    """
    Lista de provincias del país (primer nivel de subdivisión)

    Args:
        amap: Cliente cargado con load_amap

    Returns:
        Provincias con nombre, adcode y centro
    """
    ds = amap.district_search(level="country", subdistrict=1, extensions="base")
    out = ds.search(AMAP_COUNTRY_KEYWORD)

    countries = out.get("districts") or []
    children = countries[0].get("districts") or [] if countries else []

    provinces = [
        ProvinceInfo(
            name=str(p.get("name", "")),
            adcode=str(p.get("adcode", "")),
            center=parse_lnglat(p.get("center", "")),
        )
        for p in children
    ]
    logger.info(f"{len(provinces)} provincias recibidas de AMap")
    return provinces


def fetch_province_boundary(amap: AmapClient, adcode: str) -> List[Ring]:
    """Anillos del contorno de una provincia; lista vacía si AMap no lo trae."""
    ds = amap.district_search(level="province", subdistrict=0, extensions="all")
    out = ds.search(adcode)
    districts = out.get("districts") or []
    if not districts:
        return []
    return parse_rings(districts[0].get("polyline", ""))


def preload_all(
    amap: AmapClient,
    provinces: Sequence[ProvinceInfo],
    limit: int = PRELOAD_CONCURRENCY,
) -> Dict[str, List[Ring]]:
    """
    Descarga todos los contornos con un número limitado de hilos

    Si cualquier descarga falla, la excepción se propaga y no hay resultado
    parcial.
    """
    if not provinces:
        return {}

    workers = max(1, min(int(limit), len(provinces)))
    adcodes = [p.adcode for p in provinces]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        boundaries = list(executor.map(lambda code: fetch_province_boundary(amap, code), adcodes))

    logger.info(f"Contornos precargados: {len(adcodes)} provincias con {workers} hilos")
    return dict(zip(adcodes, boundaries))


def provinces_along_route(
    amap: AmapClient,
    path: Sequence[LngLat],
    all_provinces: Sequence[ProvinceInfo],
    limit: int = PRELOAD_CONCURRENCY,
) -> List[ProvinceInfo]:
    """
    Provincias atravesadas por la ruta, en orden de primera aparición

    Se toman como mucho ROUTE_MAX_SAMPLES puntos de la polilínea.
    """
    step = max(1, len(path) // ROUTE_MAX_SAMPLES)
    samples = [path[i] for i in range(0, len(path), step)]

    rings_map = preload_all(amap, all_provinces, limit)
    shapes = {code: prepare_rings(rings) for code, rings in rings_map.items()}

    hit: Dict[str, ProvinceInfo] = {}
    for pt in samples:
        for prov in all_provinces:
            if prov.adcode in hit:
                continue
            if is_point_in_prepared(pt, shapes.get(prov.adcode, [])):
                hit[prov.adcode] = replace(prov, rings=rings_map[prov.adcode])
    return list(hit.values())


def provinces_to_feature_collection(provinces: Sequence[ProvinceInfo]) -> Dict[str, Any]:
    """Convierte provincias con anillos en una FeatureCollection GeoJSON."""
    features = []
    for prov in provinces:
        if not prov.rings:
            continue
        coordinates = [[[list(p) for p in ring]] for ring in prov.rings if len(ring) >= 3]
        if not coordinates:
            continue
        features.append({
            "type": "Feature",
            "properties": {"name": prov.name, "adcode": prov.adcode},
            "geometry": {"type": "MultiPolygon", "coordinates": coordinates},
        })
    return {"type": "FeatureCollection", "features": features}
