"""
Módulo API
"""
from .amap import (
    AmapError,
    AmapClient,
    PlanResult,
    load_amap,
    reset_amap_cache,
    geocode,
    plan_driving,
)

__all__ = [
    'AmapError',
    'AmapClient',
    'PlanResult',
    'load_amap',
    'reset_amap_cache',
    'geocode',
    'plan_driving',
]
