from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from letteravatar.domain.avatars import RenderOptions


class AvatarCache(ABC):
    @abstractmethod
    def get(self, key: str) -> bytes | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_or_compute(self, key: str, produce: Callable[[], Awaitable[bytes]]) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError


class AvatarRenderer(ABC):
    @abstractmethod
    def render(self, options: RenderOptions) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def is_ready(self) -> bool:
        raise NotImplementedError
