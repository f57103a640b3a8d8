"""Фабрики для создания тестовых данных."""
from letteravatar.domain.avatars import WHITE, BackgroundShape, Color, OutputFormat, RenderOptions


class OptionsFactory:
    """Фабрика для создания RenderOptions."""

    @staticmethod
    def create_options(
        text="AL",
        size=64,
        foreground=WHITE,
        background=Color(0x1A, 0xBC, 0x9C),
        background_shape=BackgroundShape.square,
        image_format=OutputFormat.png,
    ):
        """Создает RenderOptions со значениями по умолчанию."""
        return RenderOptions(
            text=text,
            size=size,
            foreground=foreground,
            background=background,
            background_shape=background_shape,
            image_format=image_format,
        )
