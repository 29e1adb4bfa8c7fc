"""
WeatherRoute - Tiempo y avisos a lo largo de una ruta en coche
Aplicación principal
"""
import streamlit as st
st.set_page_config(
    page_title="WeatherRoute",
    layout="wide",
    initial_sidebar_state="expanded",
)
import inspect
import logging
from typing import Optional

import pandas as pd
import plotly.graph_objects as go
import pydeck as pdk

# Imports locales
import config
from api import AmapError, geocode, load_amap, plan_driving
from components import card, warning_card, weather_subtitle, section_title, render_grid, inject_css, render_sidebar
from services import (
    fetch_disaster_warning,
    fetch_hourly_24h,
    fetch_province_list,
    fetch_weather_by_location,
    group_by_province,
    load_provinces,
    make_linear_rgb_scale,
    make_linear_scale,
    provinces_along_route,
    provinces_to_feature_collection,
)
from utils import duration_string, fmt_km, fmt_lnglat, fmt_temp, safe_float

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


def _pydeck_chart_stretch(deck, key: str, height: int = 620):
    """Renderiza pydeck de forma compatible entre versiones de Streamlit."""
    params = inspect.signature(st.pydeck_chart).parameters
    kwargs = {"height": int(height)}
    if "key" in params:
        kwargs["key"] = key
    if "use_container_width" in params:
        return st.pydeck_chart(deck, use_container_width=True, **kwargs)
    return st.pydeck_chart(deck, **kwargs)


def _plotly_chart_stretch(fig, key: str):
    """Renderiza Plotly con compatibilidad entre APIs antiguas/nuevas de Streamlit."""
    params = inspect.signature(st.plotly_chart).parameters
    if "width" in params:
        st.plotly_chart(fig, width="stretch", key=key)
    else:
        st.plotly_chart(fig, use_container_width=True, key=key)


def _province_collection(path) -> dict:
    """GeoJSON local si existe; si no, contornos de las provincias de la ruta vía AMap."""
    provinces_fc = load_provinces(config.PROVINCES_GEOJSON)
    if provinces_fc.get("features"):
        return provinces_fc

    logger.info("Sin GeoJSON local; usando contornos de AMap")
    amap = load_amap(config.AMAP_KEY)
    crossed = provinces_along_route(amap, path, fetch_province_list(amap), config.PRELOAD_CONCURRENCY)
    return provinces_to_feature_collection(crossed)


def plan_route(origin: str, destination: str, step_km: int) -> Optional[dict]:
    """Calcula ruta, tramos provinciales, tiempo y avisos por tramo."""
    try:
        origin_ll = geocode(origin)
        dest_ll = geocode(destination)
        plan = plan_driving(origin_ll, dest_ll)
        provinces_fc = _province_collection(plan.path)
    except AmapError as e:
        st.error(f"No se pudo planificar la ruta: {e}")
        return None

    segments = group_by_province(provinces_fc, plan.path, step_meters=step_km * 1000)

    rows = []
    for seg in segments:
        weather = fetch_weather_by_location(seg.mid[0], seg.mid[1])
        rows.append({
            "segment": seg,
            "weather": weather,
            "warnings": fetch_disaster_warning(seg.mid[0], seg.mid[1]),
        })

    return {
        "origin": origin_ll,
        "destination": dest_ll,
        "plan": plan,
        "rows": rows,
        "hourly": fetch_hourly_24h(dest_ll[0], dest_ll[1]),
    }


def _segment_temp(row) -> float:
    weather = row.get("weather")
    if weather is None:
        return float("nan")
    return safe_float(weather.now.get("temp"))


def render_map(result: dict):
    rgb_scale = make_linear_rgb_scale(config.TEMP_SCALE_MIN_C, config.TEMP_SCALE_MAX_C, config.TEMP_SCALE_COLORS)

    route_data = [{"path": [list(p) for p in result["plan"].path]}]
    segment_data = []
    for row in result["rows"]:
        seg = row["segment"]
        temp = _segment_temp(row)
        color = list(rgb_scale(temp)) if temp == temp else [128, 128, 128]
        segment_data.append({
            "path": [list(p) for p in seg.path],
            "color": color,
            "province": seg.province,
            "temp": fmt_temp(temp),
        })

    layers = [
        pdk.Layer("PathLayer", data=route_data, get_path="path", get_color=[90, 90, 90],
                  width_min_pixels=2),
        pdk.Layer("PathLayer", data=segment_data, get_path="path", get_color="color",
                  width_min_pixels=6, pickable=True),
    ]
    origin, destination = result["origin"], result["destination"]
    view = pdk.ViewState(
        longitude=(origin[0] + destination[0]) / 2.0,
        latitude=(origin[1] + destination[1]) / 2.0,
        zoom=5,
    )
    deck = pdk.Deck(layers=layers, initial_view_state=view, tooltip={"text": "{province}\n{temp}"})
    _pydeck_chart_stretch(deck, key="route_map")


def render_segments(result: dict):
    css_scale = make_linear_scale(config.TEMP_SCALE_MIN_C, config.TEMP_SCALE_MAX_C, config.TEMP_SCALE_COLORS)

    cards = []
    warnings = []
    for row in result["rows"]:
        seg = row["segment"]
        weather = row["weather"]
        temp = _segment_temp(row)
        if weather is None:
            cards.append(card(seg.province, "—", subtitle_html="Sin datos de tiempo"))
        else:
            cards.append(card(seg.province, fmt_temp(temp), subtitle_html=weather_subtitle(weather.now),
                              swatch=css_scale(temp) if temp == temp else ""))
        warnings.extend(row["warnings"])

    section_title("Tiempo por provincia")
    if cards:
        render_grid(cards, cols=3)
    else:
        st.info("La ruta no atraviesa ninguna provincia conocida.")

    section_title("Avisos")
    if warnings:
        render_grid([warning_card(w) for w in warnings], cols=2)
    else:
        st.caption("Sin avisos vigentes en la ruta.")


def render_hourly(hourly: list):
    if not hourly:
        return
    df = pd.DataFrame(hourly)
    df["fxTime"] = pd.to_datetime(df["fxTime"], errors="coerce")
    df["temp"] = pd.to_numeric(df["temp"], errors="coerce")
    if "precip" not in df.columns:
        df["precip"] = float("nan")
    df["precip"] = pd.to_numeric(df["precip"], errors="coerce")

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=df["fxTime"], y=df["temp"], mode="lines+markers", name="Temperatura (°C)"))
    fig.add_trace(go.Bar(x=df["fxTime"], y=df["precip"], name="Precipitación (mm)", yaxis="y2", opacity=0.5))
    fig.update_layout(
        height=320,
        margin=dict(l=10, r=10, t=30, b=10),
        yaxis=dict(title="°C"),
        yaxis2=dict(title="mm", overlaying="y", side="right", rangemode="tozero"),
        legend=dict(orientation="h"),
    )
    section_title("Próximas 24 h en destino")
    _plotly_chart_stretch(fig, key="hourly_chart")


# ============================================================
# APP
# ============================================================

inject_css()
st.title("WeatherRoute")

origin, destination, step_km, submitted = render_sidebar()

if submitted:
    if not origin or not destination:
        st.warning("Indica origen y destino.")
    else:
        with st.spinner("Calculando ruta y consultando el tiempo..."):
            st.session_state["route_result"] = plan_route(origin, destination, step_km)

result = st.session_state.get("route_result")
if result:
    plan = result["plan"]
    render_grid([
        card("Distancia", fmt_km(plan.distance)),
        card("Duración", duration_string(plan.duration)),
        card("Provincias", str(len(result["rows"]))),
        card("Origen → destino", f"{fmt_lnglat(result['origin'], 2)} → {fmt_lnglat(result['destination'], 2)}"),
    ], cols=4)
    render_map(result)
    render_segments(result)
    render_hourly(result["hourly"])
else:
    st.info("Introduce origen y destino en la barra lateral para planificar la ruta.")
