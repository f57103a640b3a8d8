from typing import Any

from letteravatar.domain.repositories import AvatarCache, AvatarRenderer


async def check_health(cache: AvatarCache, renderer: AvatarRenderer) -> dict[str, Any]:
    try:
        renderer_ok = renderer.is_ready()
    except Exception:
        renderer_ok = False

    return {
        "status": "ok" if renderer_ok else "degraded",
        "renderer": renderer_ok,
        "cache": cache.stats(),
    }
