"""
Componentes de sidebar
"""
import streamlit as st

import config
from utils.helpers import normalize_text_input


def render_sidebar():
    """
    Renderiza la barra lateral con origen, destino y opciones de muestreo

    Returns:
        Tupla (origin, destination, step_km, submitted)
    """
    st.sidebar.markdown("### 🧭 Ruta")

    with st.sidebar.form("route_form"):
        origin = st.text_input(
            "Origen",
            value=st.session_state.get("route_origin", ""),
            placeholder="Dirección o lng,lat",
        )
        destination = st.text_input(
            "Destino",
            value=st.session_state.get("route_destination", ""),
            placeholder="Dirección o lng,lat",
        )
        step_km = st.slider(
            "Intervalo de muestreo (km)",
            min_value=10,
            max_value=200,
            value=int(config.ROUTE_SAMPLE_STEP_METERS / 1000),
            step=10,
            help="Distancia entre puntos al dividir la ruta por provincias",
        )
        submitted = st.form_submit_button("Planificar ruta", type="primary")

    origin = normalize_text_input(origin)
    destination = normalize_text_input(destination)
    if submitted:
        st.session_state["route_origin"] = origin
        st.session_state["route_destination"] = destination

    st.sidebar.markdown("---")
    if not config.AMAP_KEY:
        st.sidebar.warning("AMAP_KEY no configurada")
    if not config.QWEATHER_KEY:
        st.sidebar.warning("QWEATHER_KEY no configurada")

    return origin, destination, step_km, submitted
