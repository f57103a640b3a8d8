import logging
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="",
    )

    app_name: str = "Letter Avatar API"
    environment: str = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP-сервер (uvicorn)
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)

    # Размеры аватара (в пикселях)
    avatar_min_size: int = Field(16, ge=1)
    avatar_max_size: int = Field(1024, ge=1)
    avatar_default_size: int = 64

    # Рендеринг
    avatar_font_path: str | None = Field(None, description="Путь к TTF/OTF шрифту без засечек")
    avatar_render_supersample: int = Field(4, ge=1, le=8, description="Коэффициент суперсэмплинга для сглаживания")

    # Кеш (in-memory)
    avatar_cache_max_entries: int = Field(1024, ge=0, description="0 - без ограничения")
    avatar_cache_ttl_seconds: int = Field(3600, ge=0, description="0 - без истечения")

    # HTTP
    avatar_http_max_age: int = Field(86400, ge=0)

    # CORS
    cors_origins: list[str] = Field(default_factory=list, description="Список разрешенных origins для CORS")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return level

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        if "*" in v:
            logger.warning(
                "CORS origins содержит '*', что небезопасно. "
                "Используйте конкретные домены вместо '*'."
            )
            # Удаляем "*" из списка
            v = [origin for origin in v if origin != "*"]
        return v

    @model_validator(mode="after")
    def validate_size_bounds(self) -> "Settings":
        if self.avatar_min_size > self.avatar_max_size:
            raise ValueError(
                f"AVATAR_MIN_SIZE ({self.avatar_min_size}) больше AVATAR_MAX_SIZE ({self.avatar_max_size})"
            )
        if not self.avatar_min_size <= self.avatar_default_size <= self.avatar_max_size:
            raise ValueError(
                f"AVATAR_DEFAULT_SIZE ({self.avatar_default_size}) вне диапазона "
                f"{self.avatar_min_size}..{self.avatar_max_size}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    if settings.avatar_cache_max_entries == 0:
        logger.warning("Размер кеша аватаров не ограничен (AVATAR_CACHE_MAX_ENTRIES=0).")
    return settings
