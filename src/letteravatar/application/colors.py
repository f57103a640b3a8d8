import logging
import string
from collections.abc import Callable

from PIL import ImageColor

from letteravatar.domain.avatars import WHITE, Color

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset(string.hexdigits)

# Палитра фонов по умолчанию (flat UI)
PALETTE_HEX = (
    "#1abc9c",
    "#2ecc71",
    "#3498db",
    "#9b59b6",
    "#34495e",
    "#16a085",
    "#27ae60",
    "#2980b9",
    "#8e44ad",
    "#2c3e50",
    "#f1c40f",
    "#e67e22",
    "#e74c3c",
    "#95a5a6",
    "#f39c12",
    "#d35400",
    "#c0392b",
    "#bdc3c7",
    "#7f8c8d",
)


def _parse(value: str) -> Color | None:
    try:
        channels = ImageColor.getrgb(value)
    except ValueError:
        return None
    return Color(*channels)


def _try_hash_prefixed(value: str) -> Color | None:
    if not value.startswith("#"):
        return None
    return _parse(value)


def _try_bare_hex(value: str) -> Color | None:
    if not all(char in _HEX_DIGITS for char in value):
        return None
    return _parse("#" + value)


def _try_direct(value: str) -> Color | None:
    return _parse(value)


_ATTEMPTS: tuple[Callable[[str], Color | None], ...] = (
    _try_hash_prefixed,
    _try_bare_hex,
    _try_direct,
)


def resolve_color(value: str | None) -> Color | None:
    """Разбирает цвет (#hex, hex без решетки или имя цвета). None, если не удалось."""
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    for attempt in _ATTEMPTS:
        color = attempt(value)
        if color is not None:
            return color
    return None


PALETTE: tuple[Color, ...] = tuple(resolve_color(code) for code in PALETTE_HEX)


def palette_index(text: str) -> int:
    """Индекс цвета палитры: сумма кодов символов по модулю размера палитры."""
    return sum(ord(char) for char in text) % len(PALETTE)


def palette_color(text: str) -> Color:
    return PALETTE[palette_index(text)]


def resolve_foreground(value: str | None) -> Color:
    color = resolve_color(value)
    if color is None:
        if value:
            logger.debug(f"Не удалось разобрать цвет текста '{value}', используется белый")
        return WHITE
    return color


def resolve_background(value: str | None, initials: str) -> Color:
    color = resolve_color(value)
    if color is None:
        if value:
            logger.debug(f"Не удалось разобрать цвет фона '{value}', используется палитра")
        return palette_color(initials)
    return color
