"""
Módulo de componentes visuales
"""
from .cards import card, warning_card, weather_subtitle, section_title, render_grid, inject_css
from .sidebar import render_sidebar

__all__ = [
    'card',
    'warning_card',
    'weather_subtitle',
    'section_title',
    'render_grid',
    'inject_css',
    'render_sidebar',
]
