import enum
from dataclasses import dataclass
from typing import NamedTuple


class Color(NamedTuple):
    """RGBA цвет, каждый канал 0..255."""

    r: int
    g: int
    b: int
    a: int = 255

    def to_argb(self) -> int:
        """32-битное ARGB представление (беззнаковое)."""
        return (self.a << 24) | (self.r << 16) | (self.g << 8) | self.b

    @property
    def hex(self) -> str:
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"


WHITE = Color(255, 255, 255)


class BackgroundShape(str, enum.Enum):
    """Форма фона аватара."""
    square = "square"
    circle = "circle"

    @property
    def ordinal(self) -> int:
        return list(BackgroundShape).index(self)

    @classmethod
    def parse(cls, value: str | None) -> "BackgroundShape":
        """Разбирает форму без учета регистра; неизвестные значения дают square."""
        if value is None:
            return cls.square
        normalized = value.strip().lower()
        for shape in cls:
            if normalized in (shape.value, str(shape.ordinal)):
                return shape
        return cls.square


@dataclass(frozen=True)
class _FormatInfo:
    pillow_format: str
    mime_type: str
    supports_alpha: bool


class OutputFormat(str, enum.Enum):
    """Поддерживаемые форматы изображения."""
    png = "png"
    bmp = "bmp"
    gif = "gif"
    jpeg = "jpeg"
    tiff = "tiff"

    @property
    def pillow_format(self) -> str:
        """Идентификатор кодека Pillow, стабильный для ключа кеша."""
        return _FORMATS[self].pillow_format

    @property
    def mime_type(self) -> str:
        return _FORMATS[self].mime_type

    @property
    def supports_alpha(self) -> bool:
        return _FORMATS[self].supports_alpha

    @classmethod
    def parse(cls, value: str | None) -> "OutputFormat":
        """Разбирает формат без учета регистра; неизвестные значения дают png."""
        if value is None:
            return DEFAULT_FORMAT
        normalized = value.strip().lower()
        normalized = _FORMAT_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            return DEFAULT_FORMAT


_FORMATS: dict[OutputFormat, _FormatInfo] = {
    OutputFormat.png: _FormatInfo("PNG", "image/png", True),
    OutputFormat.bmp: _FormatInfo("BMP", "image/bmp", False),
    OutputFormat.gif: _FormatInfo("GIF", "image/gif", True),
    OutputFormat.jpeg: _FormatInfo("JPEG", "image/jpeg", False),
    OutputFormat.tiff: _FormatInfo("TIFF", "image/tiff", True),
}

_FORMAT_ALIASES = {"jpg": "jpeg", "tif": "tiff"}

DEFAULT_FORMAT = OutputFormat.png


@dataclass(frozen=True)
class RenderOptions:
    """Нормализованный набор параметров, однозначно определяющий одно изображение."""

    text: str
    size: int
    foreground: Color
    background: Color
    background_shape: BackgroundShape = BackgroundShape.square
    image_format: OutputFormat = DEFAULT_FORMAT

    def cache_key(self) -> str:
        return ":".join(
            (
                "avatar",
                self.text,
                self.image_format.pillow_format,
                str(self.background_shape.ordinal),
                str(self.size),
                str(self.foreground.to_argb()),
                str(self.background.to_argb()),
            )
        )

    @property
    def mime_type(self) -> str:
        return self.image_format.mime_type

    def __str__(self) -> str:
        return (
            f"Text: {self.text}; BackgroundShape: {self.background_shape.value}; Size: {self.size}; "
            f"ImageFormat: {self.mime_type}; Fg: {self.foreground.hex}; Bg: {self.background.hex}"
        )


@dataclass(frozen=True)
class AvatarImage:
    content: bytes
    media_type: str
    options: RenderOptions
