class AvatarError(Exception):
    """Базовое исключение генератора аватаров."""


class RenderError(AvatarError):
    """Не удалось отрисовать или закодировать изображение."""
