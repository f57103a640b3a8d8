import asyncio
import logging

from letteravatar.application.colors import resolve_background, resolve_foreground
from letteravatar.application.initials import extract_initials
from letteravatar.domain.avatars import AvatarImage, BackgroundShape, OutputFormat, RenderOptions
from letteravatar.domain.repositories import AvatarCache, AvatarRenderer

logger = logging.getLogger(__name__)


def build_options(
    name: str | None,
    size: int,
    background_color: str | None = None,
    foreground_color: str | None = None,
    output_format: str | OutputFormat | None = None,
    background_shape: str | BackgroundShape | None = None,
) -> RenderOptions:
    """Приводит сырые параметры запроса к RenderOptions."""
    text = extract_initials(name)
    if not isinstance(output_format, OutputFormat):
        output_format = OutputFormat.parse(output_format)
    if not isinstance(background_shape, BackgroundShape):
        background_shape = BackgroundShape.parse(background_shape)
    return RenderOptions(
        text=text,
        size=size,
        foreground=resolve_foreground(foreground_color),
        # Цвет палитры считается по инициалам, а не по исходному имени
        background=resolve_background(background_color, text),
        background_shape=background_shape,
        image_format=output_format,
    )


class AvatarService:
    def __init__(self, cache: AvatarCache, renderer: AvatarRenderer):
        self.cache = cache
        self.renderer = renderer

    async def _render(self, options: RenderOptions) -> bytes:
        logger.info(f"Генерация изображения: {options}")
        # Рендеринг нагружает CPU, выполняем вне event loop
        return await asyncio.to_thread(self.renderer.render, options)

    async def get_avatar(self, options: RenderOptions) -> AvatarImage:
        content = await self.cache.get_or_compute(options.cache_key(), lambda: self._render(options))
        return AvatarImage(content=content, media_type=options.mime_type, options=options)

    async def generate(
        self,
        name: str | None,
        size: int,
        background_color: str | None = None,
        foreground_color: str | None = None,
        output_format: str | OutputFormat | None = None,
        background_shape: str | BackgroundShape | None = None,
    ) -> AvatarImage:
        options = build_options(
            name,
            size,
            background_color=background_color,
            foreground_color=foreground_color,
            output_format=output_format,
            background_shape=background_shape,
        )
        return await self.get_avatar(options)
