"""
Funciones auxiliares generales
"""


def is_nan(x):
    """Verifica si un valor es NaN"""
    if x is None:
        return True
    return x != x


def safe_float(val, default=float("nan")):
    """Convierte a float; default si no es numérico"""
    if val is None:
        return default
    try:
        return float(val)
    except (ValueError, TypeError):
        return default


def normalize_text_input(value) -> str:
    """Normaliza entrada de texto a string"""
    if value is None:
        return ""
    return str(value).strip()


def duration_string(seconds) -> str:
    """Formatea una duración en segundos como "2h 05m" o "45m" """
    total = int(safe_float(seconds, 0.0))
    if total < 3600:
        return f"{total // 60}m"
    return f"{total // 3600}h {(total % 3600) // 60:02d}m"


def fmt_km(meters, decimals=1):
    """Formatea metros como kilómetros"""
    value = safe_float(meters)
    if is_nan(value):
        return "—"
    return f"{value / 1000.0:.{decimals}f} km"


def fmt_temp(x, decimals=0):
    """Formatea temperatura en °C"""
    value = safe_float(x)
    if is_nan(value):
        return "—"
    return f"{value:.{decimals}f} °C"


def fmt_lnglat(point, decimals=4) -> str:
    """Formatea (lng, lat) como "lng, lat" """
    if not point:
        return "—"
    return f"{point[0]:.{decimals}f}, {point[1]:.{decimals}f}"
