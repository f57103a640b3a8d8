import io
import logging
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from letteravatar.domain.avatars import BackgroundShape, Color, RenderOptions
from letteravatar.domain.exceptions import RenderError
from letteravatar.domain.repositories import AvatarRenderer

logger = logging.getLogger(__name__)

FONT_SCALE = 0.4
# Максимальная сторона рабочего холста при суперсэмплинге
MAX_WORKING_SIZE = 2048
MATTE = Color(255, 255, 255)

FONT_CANDIDATES = (
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "Arial.ttf",
    "arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
)


@lru_cache(maxsize=64)
def load_font(size: int, font_path: str | None = None) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Загружает шрифт без засечек заданного размера (кешируется по размеру)."""
    if font_path:
        # Явно заданный шрифт обязан загрузиться
        return ImageFont.truetype(font_path, size)
    for candidate in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.warning("Системный шрифт не найден, используется встроенный шрифт Pillow")
    return ImageFont.load_default(size=size)


class PillowAvatarRenderer(AvatarRenderer):
    """Рисует аватар средствами Pillow: фон заданной формы и инициалы по центру."""

    def __init__(self, font_path: str | None = None, supersample: int = 4):
        self.font_path = font_path
        self.supersample = max(1, supersample)

    def _scale_for(self, size: int) -> int:
        return max(1, min(self.supersample, MAX_WORKING_SIZE // size))

    def is_ready(self) -> bool:
        try:
            load_font(16, self.font_path)
        except (OSError, ValueError) as e:
            logger.error(f"Шрифт недоступен: {e}")
            return False
        return True

    def render(self, options: RenderOptions) -> bytes:
        try:
            return self._render(options)
        except (OSError, ValueError) as e:
            logger.error(f"Ошибка рендеринга аватара ({options}): {e}", exc_info=True)
            raise RenderError(f"Не удалось отрисовать аватар: {e}") from e

    def _render(self, options: RenderOptions) -> bytes:
        scale = self._scale_for(options.size)
        working_size = options.size * scale
        font_size = max(1, round(FONT_SCALE * working_size))
        font = load_font(font_size, self.font_path)

        with Image.new("RGBA", (working_size, working_size), (0, 0, 0, 0)) as canvas:
            draw = ImageDraw.Draw(canvas)
            bounds = (0, 0, working_size - 1, working_size - 1)
            if options.background_shape is BackgroundShape.circle:
                draw.ellipse(bounds, fill=options.background)
            else:
                draw.rectangle(bounds, fill=options.background)

            if options.text:
                left, top, right, bottom = draw.textbbox((0, 0), options.text, font=font)
                width, height = right - left, bottom - top
                x = (working_size - width) / 2 - left
                y = (working_size - height) / 2 - top
                # Текст рисуется на отдельном слое и накладывается поверх фона
                with Image.new("RGBA", canvas.size, (0, 0, 0, 0)) as layer:
                    ImageDraw.Draw(layer).text((x, y), options.text, fill=options.foreground, font=font)
                    canvas.alpha_composite(layer)

            if scale == 1:
                return self._encode(canvas, options)
            with canvas.resize((options.size, options.size), Image.Resampling.LANCZOS) as image:
                return self._encode(image, options)

    def _encode(self, image: Image.Image, options: RenderOptions) -> bytes:
        image_format = options.image_format
        with io.BytesIO() as buffer:
            if image_format.supports_alpha:
                image.save(buffer, format=image_format.pillow_format)
            else:
                with Image.new("RGB", image.size, MATTE[:3]) as flat:
                    flat.paste(image, mask=image.getchannel("A"))
                    flat.save(buffer, format=image_format.pillow_format)
            return buffer.getvalue()
