"""
Módulo de servicios
"""
from .choropleth import hex_to_rgb, lerp, make_linear_scale, make_linear_rgb_scale
from .geo import (
    ProvinceSegment,
    load_provinces, sample_polyline, find_province_of_point,
    group_by_province, segment_midpoints,
)
from .district import (
    ProvinceInfo,
    fetch_province_list, fetch_province_boundary,
    preload_all, provinces_along_route, provinces_to_feature_collection,
)
from .weather import WeatherInfo, fetch_weather_by_location, fetch_hourly_24h
from .disaster import DisasterWarning, fetch_disaster_warning

__all__ = [
    # Coropletas
    'hex_to_rgb', 'lerp', 'make_linear_scale', 'make_linear_rgb_scale',
    # Segmentación
    'ProvinceSegment', 'load_provinces', 'sample_polyline',
    'find_province_of_point', 'group_by_province', 'segment_midpoints',
    # Contornos
    'ProvinceInfo', 'fetch_province_list', 'fetch_province_boundary',
    'preload_all', 'provinces_along_route', 'provinces_to_feature_collection',
    # Tiempo y avisos
    'WeatherInfo', 'fetch_weather_by_location', 'fetch_hourly_24h',
    'DisasterWarning', 'fetch_disaster_warning',
]
