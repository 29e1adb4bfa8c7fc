"""
Configuración global de WeatherRoute
"""
import os

# ============================================================
# AMAP (GAODE) - SERVICIO WEB
# ============================================================
AMAP_KEY = os.getenv("AMAP_KEY", "").strip()
AMAP_SECURITY = os.getenv("AMAP_SECURITY", "").strip()  # Clave privada para firmar peticiones (sig)
AMAP_BASE_URL = os.getenv("AMAP_BASE_URL", "https://restapi.amap.com")
AMAP_TIMEOUT_SECONDS = float(os.getenv("AMAP_TIMEOUT_S", "12"))
AMAP_COUNTRY_KEYWORD = "中国"

# ============================================================
# QWEATHER (HEFENG)
# ============================================================
QWEATHER_KEY = os.getenv("QWEATHER_KEY", "").strip()
QWEATHER_HOST = os.getenv("QWEATHER_HOST", "https://devapi.qweather.com").rstrip("/")
QWEATHER_WARNING_HOST = os.getenv("QWEATHER_WARNING_HOST", "https://devapi.qweather.com").rstrip("/")
QWEATHER_TIMEOUT_SECONDS = float(os.getenv("QWEATHER_TIMEOUT_S", "10"))
QWEATHER_OK = "200"
QWEATHER_FORBIDDEN = "403"

# ============================================================
# GEOMETRÍA DE RUTAS
# ============================================================
PROVINCES_GEOJSON = os.getenv("PROVINCES_GEOJSON", "provinces.geojson")
GEOJSON_TIMEOUT_SECONDS = 15
ROUTE_SAMPLE_STEP_METERS = 50000  # Muestreo por longitud de arco
ROUTE_MAX_SAMPLES = 200  # Muestras máximas al detectar provincias de la ruta
PRELOAD_CONCURRENCY = 6  # Descargas simultáneas de contornos provinciales
EARTH_RADIUS_KM = 6371.0088  # Radio medio terrestre

# ============================================================
# COROPLETAS
# ============================================================
TEMP_SCALE_MIN_C = -10.0
TEMP_SCALE_MAX_C = 35.0
TEMP_SCALE_COLORS = ["#313695", "#74add1", "#ffffbf", "#f46d43", "#a50026"]

# ============================================================
# LOGGING
# ============================================================
LOG_LEVEL = os.getenv("WEATHERROUTE_LOG_LEVEL", "INFO").upper()
