"""Background theme: one base color or a two-stop gradient, stored in settings.yaml."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from yrepeat.settings import load_settings, save_settings

logger = logging.getLogger(__name__)

DEFAULT_SINGLE_COLOR = "#0D0D26"
DEFAULT_GRADIENT_START = "#0D0D26"
DEFAULT_GRADIENT_END = "#1A264D"

DARKER = 0.8
LIGHTER = 1.1

RGBA = tuple[float, float, float, float]

_HEX_RE = re.compile(r"[0-9A-Fa-f]{6}(?:[0-9A-Fa-f]{2})?")


@dataclass
class ThemeSettings:
    use_single_color: bool = False
    single_color: str = DEFAULT_SINGLE_COLOR
    gradient_start: str = DEFAULT_GRADIENT_START
    gradient_end: str = DEFAULT_GRADIENT_END

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ThemeSettings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            use_single_color=bool(d.get("useSingleColor", False)),
            single_color=_valid_or(d.get("singleColor"), DEFAULT_SINGLE_COLOR),
            gradient_start=_valid_or(d.get("gradientStart"), DEFAULT_GRADIENT_START),
            gradient_end=_valid_or(d.get("gradientEnd"), DEFAULT_GRADIENT_END),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "useSingleColor": self.use_single_color,
            "singleColor": self.single_color,
            "gradientStart": self.gradient_start,
            "gradientEnd": self.gradient_end,
        }


# ── Hex colors ────────────────────────────────────────────────


def parse_hex(value: str) -> RGBA:
    """Parse #RRGGBB or #RRGGBBAA into 0-1 channel floats."""
    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if not _HEX_RE.fullmatch(digits):
        raise ValueError(f"Invalid hex color: {value!r}")
    raw = int(digits, 16)
    if len(digits) == 6:
        return ((raw >> 16 & 0xFF) / 255, (raw >> 8 & 0xFF) / 255, (raw & 0xFF) / 255, 1.0)
    return ((raw >> 24 & 0xFF) / 255, (raw >> 16 & 0xFF) / 255, (raw >> 8 & 0xFF) / 255, (raw & 0xFF) / 255)


def to_hex(rgba: RGBA) -> str:
    """Uppercase hex; the alpha byte is only written when not opaque."""
    r, g, b, a = (round(c * 255) for c in rgba)
    if a != 255:
        return f"#{r:02X}{g:02X}{b:02X}{a:02X}"
    return f"#{r:02X}{g:02X}{b:02X}"


def _valid_or(value: Any, default: str) -> str:
    if not isinstance(value, str):
        return default
    try:
        parse_hex(value)
    except ValueError:
        logger.warning("Ignoring invalid theme color %r", value)
        return default
    return value


def _scale(rgba: RGBA, factor: float) -> RGBA:
    r, g, b, a = rgba
    return (
        min(1.0, max(0.0, r * factor)),
        min(1.0, max(0.0, g * factor)),
        min(1.0, max(0.0, b * factor)),
        a,
    )


def background_colors(theme: ThemeSettings) -> list[str]:
    """[darker, base, lighter] in single-color mode, [start, end] otherwise."""
    if theme.use_single_color:
        base = parse_hex(theme.single_color)
        return [to_hex(_scale(base, DARKER)), to_hex(base), to_hex(_scale(base, LIGHTER))]
    return [to_hex(parse_hex(theme.gradient_start)), to_hex(parse_hex(theme.gradient_end))]


# ── Persistence ───────────────────────────────────────────────


def load_theme(root: Path | None = None) -> ThemeSettings:
    return ThemeSettings.from_dict(load_settings(root).get("theme") or {})


def save_theme(theme: ThemeSettings, root: Path | None = None) -> None:
    settings = load_settings(root)
    settings["theme"] = theme.to_dict()
    save_settings(settings, root)


def set_single_color(color: str, root: Path | None = None) -> ThemeSettings:
    theme = load_theme(root)
    theme.single_color = to_hex(parse_hex(color))
    save_theme(theme, root)
    return theme


def set_gradient_colors(start: str, end: str, root: Path | None = None) -> ThemeSettings:
    theme = load_theme(root)
    theme.gradient_start = to_hex(parse_hex(start))
    theme.gradient_end = to_hex(parse_hex(end))
    save_theme(theme, root)
    return theme


def set_use_single_color(enabled: bool, root: Path | None = None) -> ThemeSettings:
    theme = load_theme(root)
    theme.use_single_color = bool(enabled)
    save_theme(theme, root)
    return theme
