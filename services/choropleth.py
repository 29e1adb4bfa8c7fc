"""
Escalas de color lineales para mapas de coropletas
"""
import math
from typing import Callable, List, Sequence, Tuple

RGB = Tuple[int, int, int]
Scale = Callable[[float], str]


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def hex_to_rgb(hex_color: str) -> RGB:
    """Convierte "#rrggbb", "rrggbb" o "#rgb" en (r, g, b)."""
    value = hex_color.replace("#", "")
    if len(value) == 3:
        value = "".join(ch + ch for ch in value)
    num = int(value, 16)
    return ((num >> 16) & 255, (num >> 8) & 255, num & 255)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def make_linear_rgb_scale(domain_min: float, domain_max: float, colors: Sequence[str]) -> Callable[[float], RGB]:
    """
    Escala lineal por tramos entre colores equiespaciados

    Args:
        domain_min: Valor asignado al primer color
        domain_max: Valor asignado al último color
        colors: Lista de colores hex

    Returns:
        Función valor -> (r, g, b)
    """
    if not colors:
        raise ValueError("Se necesita al menos un color")

    stops: List[RGB] = [hex_to_rgb(c) for c in colors]
    span = max(1e-9, domain_max - domain_min)

    def scale(v: float) -> RGB:
        t = (v - domain_min) / span
        if t != t:  # NaN
            t = 0.0
        t = max(0.0, min(1.0, t))
        p = t * (len(stops) - 1)
        i = int(math.floor(p))
        f = p - i
        c1 = stops[i]
        c2 = stops[min(i + 1, len(stops) - 1)]
        return (
            _round_half_up(lerp(c1[0], c2[0], f)),
            _round_half_up(lerp(c1[1], c2[1], f)),
            _round_half_up(lerp(c1[2], c2[2], f)),
        )

    return scale


def make_linear_scale(domain_min: float, domain_max: float, colors: Sequence[str]) -> Scale:
    """Como make_linear_rgb_scale, pero devuelve cadenas CSS "rgb(r,g,b)"."""
    rgb_scale = make_linear_rgb_scale(domain_min, domain_max, colors)

    def scale(v: float) -> str:
        r, g, b = rgb_scale(v)
        return f"rgb({r},{g},{b})"

    return scale
