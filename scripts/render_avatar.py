#!/usr/bin/env python3
"""Скрипт для генерации аватара в файл."""

import argparse
import asyncio
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from letteravatar.application.avatars import AvatarService
from letteravatar.config.settings import Settings
from letteravatar.domain.avatars import BackgroundShape, OutputFormat
from letteravatar.domain.exceptions import RenderError
from letteravatar.infrastructure.cache.memory import MemoryAvatarCache
from letteravatar.infrastructure.rendering.pillow import PillowAvatarRenderer


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Генерация аватара с инициалами")
    parser.add_argument("name", help="Имя, из которого берутся инициалы")
    parser.add_argument("-s", "--size", type=int, default=None, help="Размер в пикселях")
    parser.add_argument("--bg", dest="background_color", default=None, help="Цвет фона")
    parser.add_argument("--fg", dest="foreground_color", default=None, help="Цвет текста")
    parser.add_argument("-o", "--format", dest="output_format", default=OutputFormat.png.value,
                        help=f"Формат: {', '.join(f.value for f in OutputFormat)}")
    parser.add_argument("-f", "--shape", dest="background_shape", default=BackgroundShape.square.value,
                        help=f"Форма фона: {', '.join(s.value for s in BackgroundShape)}")
    parser.add_argument("--out", type=Path, default=None, help="Путь к файлу (по умолчанию <инициалы>.<формат>)")
    return parser.parse_args(argv)


async def render_to_file(args: argparse.Namespace) -> Path:
    settings = Settings()
    size = args.size if args.size is not None else settings.avatar_default_size
    if not settings.avatar_min_size <= size <= settings.avatar_max_size:
        print(f"Ошибка: размер должен быть в диапазоне {settings.avatar_min_size}..{settings.avatar_max_size}")
        sys.exit(1)

    service = AvatarService(
        cache=MemoryAvatarCache(),
        renderer=PillowAvatarRenderer(
            font_path=settings.avatar_font_path,
            supersample=settings.avatar_render_supersample,
        ),
    )
    image = await service.generate(
        args.name,
        size,
        background_color=args.background_color,
        foreground_color=args.foreground_color,
        output_format=args.output_format,
        background_shape=args.background_shape,
    )
    out = args.out or Path(f"{image.options.text or 'avatar'}.{image.options.image_format.value}")
    out.write_bytes(image.content)
    return out


def main() -> None:
    args = parse_args()
    try:
        out = asyncio.run(render_to_file(args))
    except RenderError as e:
        print(f"\n✗ Ошибка: {e}")
        sys.exit(1)
    print(f"✓ Аватар сохранен: {out}")


if __name__ == "__main__":
    main()
