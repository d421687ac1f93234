from __future__ import annotations

import re

import numpy as np
from coloraide import Color

Hex = str


def _u8(rgb01) -> tuple[int, int, int]:
    """sRGB in [0, 1] → 0–255 ints with round-to-nearest."""
    u8 = np.round(np.clip(np.nan_to_num(np.asarray(rgb01, dtype=float)), 0.0, 1.0) * 255.0)
    r, g, b = (int(c) for c in u8.astype(np.int64))
    return r, g, b


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """HSL (h in degrees, s and l in [0, 1]) → 8-bit sRGB."""
    return _u8(Color("hsl", [h, s, l]).convert("srgb").coords())


def rgb_to_hex(r: int, g: int, b: int) -> Hex:
    return f"#{r:02x}{g:02x}{b:02x}"


_HEX_RE = re.compile(r"#?([0-9a-f]{3}|[0-9a-f]{6})", re.IGNORECASE)


def canon_hex(value: str) -> Hex:
    """Palette swatch in lower-case '#rrggbb' form; short '#rgb' is expanded."""
    m = _HEX_RE.fullmatch((value or "").strip())
    if m is None:
        raise ValueError(f"not a hex colour: {value!r}")
    digits = m.group(1).lower()
    if len(digits) == 3:
        digits = "".join(d * 2 for d in digits)
    return "#" + digits


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    packed = int(canon_hex(value)[1:], 16)
    return (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """8-bit sRGB → (h, s, l); achromatic colours report hue 0."""
    h, s, l = Color("srgb", [r / 255.0, g / 255.0, b / 255.0]).convert("hsl").coords()
    return float(np.nan_to_num(h)) % 360.0, float(s), float(l)


def _num(v: float) -> str:
    return f"{round(v, 2):g}"


def print_hsl(h: float, s: float, l: float) -> str:
    return f"hsl({_num(h)}, {_num(s * 100)}%, {_num(l * 100)}%)"


def print_rgb(r: int, g: int, b: int) -> str:
    return f"rgb({r}, {g}, {b})"


__all__ = [
    "Hex",
    "hsl_to_rgb",
    "rgb_to_hex",
    "canon_hex",
    "hex_to_rgb",
    "rgb_to_hsl",
    "print_hsl",
    "print_rgb",
]
