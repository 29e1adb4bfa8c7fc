"""
Módulo de utilidades
"""
from .helpers import (
    is_nan,
    safe_float,
    normalize_text_input,
    duration_string,
    fmt_km,
    fmt_temp,
    fmt_lnglat,
)

__all__ = [
    'is_nan',
    'safe_float',
    'normalize_text_input',
    'duration_string',
    'fmt_km',
    'fmt_temp',
    'fmt_lnglat',
]
