"""Конфигурация pytest с фикстурами для тестов."""
import sys
from pathlib import Path

import pytest

# Добавляем tests в путь для импорта
tests_dir = Path(__file__).parent
sys.path.insert(0, str(tests_dir))

from helpers.mocks import FakeRenderer  # noqa: E402
from letteravatar.infrastructure.cache.memory import MemoryAvatarCache  # noqa: E402
from letteravatar.infrastructure.rendering.pillow import PillowAvatarRenderer  # noqa: E402


@pytest.fixture
def cache():
    """Пустой неограниченный кеш."""
    return MemoryAvatarCache()


@pytest.fixture
def fake_renderer():
    """Рендерер-заглушка, запоминающий вызовы."""
    return FakeRenderer()


@pytest.fixture
def renderer():
    """Настоящий рендерер Pillow без суперсэмплинга (быстрее в тестах)."""
    return PillowAvatarRenderer(supersample=1)
