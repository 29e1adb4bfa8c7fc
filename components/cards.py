"""
Componentes de tarjetas y grillas para visualizacion de datos
"""

from html import escape

import streamlit as st

from services.disaster import DisasterWarning


CARD_CSS = """
<style>
.grid { display: grid; gap: 0.8rem; margin-bottom: 1rem; }
.grid-2 { grid-template-columns: repeat(2, minmax(0, 1fr)); }
.grid-3 { grid-template-columns: repeat(3, minmax(0, 1fr)); }
.grid-4 { grid-template-columns: repeat(4, minmax(0, 1fr)); }
.card { border-radius: 14px; padding: 0.8rem 1rem; background: rgba(127, 127, 127, 0.08); }
.card-title { font-size: 0.85rem; opacity: 0.75; }
.card-value { font-size: 1.6rem; font-weight: 600; }
.card-value .unit { font-size: 0.9rem; margin-left: 0.2rem; opacity: 0.7; }
.card .subtitle { font-size: 0.8rem; opacity: 0.7; }
.card-swatch { display: inline-block; width: 0.8rem; height: 0.8rem; border-radius: 3px; margin-right: 0.4rem; }
.card-warning { border-left: 4px solid #d73027; }
.section-title { font-size: 1.15rem; font-weight: 600; margin: 1.2rem 0 0.6rem; }
</style>
"""


def inject_css():
    st.markdown(CARD_CSS, unsafe_allow_html=True)


def card(title: str, value: str, unit: str = "", subtitle_html: str = "", swatch: str = "") -> str:
    """
    Genera HTML de una tarjeta de dato.
    """
    unit_html = f"<span class='unit'>{escape(unit)}</span>" if unit else ""
    sub_html = f"<div class='subtitle'>{subtitle_html}</div>" if subtitle_html else ""
    swatch_html = f"<span class='card-swatch' style='background:{swatch}'></span>" if swatch else ""
    return (
        f"<div class='card'>"
        f"<div class='card-title'>{swatch_html}{escape(title)}</div>"
        f"<div class='card-value'>{escape(value)}{unit_html}</div>"
        f"{sub_html}"
        f"</div>"
    )


def weather_subtitle(now: dict) -> str:
    """
    Línea secundaria de una tarjeta de tiempo: ciudad, estado y viento.
    """
    city = escape(str(now.get("city") or ""))
    text = escape(str(now.get("text") or ""))
    wind = escape(f"{now.get('windDir') or ''} {now.get('windScale') or ''}级")
    return f"{city} · {text} · {wind}"


def warning_card(warning: DisasterWarning) -> str:
    return (
        f"<div class='card card-warning'>"
        f"<div class='card-title'>{escape(warning.type)} · {escape(warning.level)}</div>"
        f"<div><b>{escape(warning.title)}</b></div>"
        f"<div class='subtitle'>{escape(warning.detail)}</div>"
        f"</div>"
    )


def section_title(text: str):
    """
    Renderiza un titulo de seccion.
    """
    st.markdown(f"<div class='section-title'>{escape(text)}</div>", unsafe_allow_html=True)


def render_grid(cards: list, cols: int = 3, extra_class: str = ""):
    """
    Renderiza una grilla de tarjetas.
    """
    cards_html = "".join(cards)
    html = f"<div class='grid grid-{cols} {extra_class}'>{cards_html}</div>"
    st.markdown(html, unsafe_allow_html=True)
