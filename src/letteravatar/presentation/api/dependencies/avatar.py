from functools import lru_cache

from fastapi import Depends

from letteravatar.application.avatars import AvatarService
from letteravatar.config.settings import get_settings
from letteravatar.domain.repositories import AvatarCache, AvatarRenderer
from letteravatar.infrastructure.cache.memory import MemoryAvatarCache
from letteravatar.infrastructure.rendering.pillow import PillowAvatarRenderer


@lru_cache
def get_avatar_cache() -> AvatarCache:
    settings = get_settings()
    return MemoryAvatarCache(
        max_entries=settings.avatar_cache_max_entries,
        ttl_seconds=settings.avatar_cache_ttl_seconds,
    )


@lru_cache
def get_avatar_renderer() -> AvatarRenderer:
    settings = get_settings()
    return PillowAvatarRenderer(
        font_path=settings.avatar_font_path,
        supersample=settings.avatar_render_supersample,
    )


def get_avatar_service(
    cache: AvatarCache = Depends(get_avatar_cache),
    renderer: AvatarRenderer = Depends(get_avatar_renderer),
) -> AvatarService:
    return AvatarService(cache=cache, renderer=renderer)
