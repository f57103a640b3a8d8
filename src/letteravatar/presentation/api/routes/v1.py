from fastapi import APIRouter, Depends, Query, Response

from letteravatar.application.avatars import AvatarService
from letteravatar.config.settings import get_settings
from letteravatar.domain.avatars import AvatarImage, BackgroundShape, OutputFormat
from letteravatar.presentation.api.dependencies.avatar import get_avatar_service
from letteravatar.presentation.api.schemas import ErrorResponse

settings = get_settings()

router = APIRouter(prefix="/avatar", tags=["avatar"])

IMAGE_RESPONSES = {
    200: {
        "content": {fmt.mime_type: {} for fmt in OutputFormat},
        "description": "Изображение аватара",
    },
    500: {"model": ErrorResponse, "description": "Ошибка рендеринга"},
}


def _image_response(image: AvatarImage) -> Response:
    return Response(
        content=image.content,
        media_type=image.media_type,
        headers={"Cache-Control": f"public, max-age={settings.avatar_http_max_age}"},
    )


@router.get("", response_class=Response, responses=IMAGE_RESPONSES)
async def get_avatar(
    name: str = Query(..., alias="n", min_length=1, description="Имя, из которого берутся инициалы"),
    size: int = Query(
        settings.avatar_default_size, alias="s", ge=settings.avatar_min_size, le=settings.avatar_max_size
    ),
    background_color: str | None = Query(None, alias="bg", description="Цвет фона (#hex, hex или имя)"),
    foreground_color: str | None = Query(None, alias="fg", description="Цвет текста (#hex, hex или имя)"),
    output_format: str | None = Query(
        None, alias="o", description=f"Формат: {', '.join(f.value for f in OutputFormat)}"
    ),
    background_shape: str | None = Query(
        None, alias="f", description=f"Форма фона: {', '.join(s.value for s in BackgroundShape)}"
    ),
    service: AvatarService = Depends(get_avatar_service),
):
    image = await service.generate(
        name,
        size,
        background_color=background_color,
        foreground_color=foreground_color,
        output_format=output_format,
        background_shape=background_shape,
    )
    return _image_response(image)


@router.get("/{name}.{output_format}", response_class=Response, responses=IMAGE_RESPONSES)
async def get_avatar_by_path(
    name: str,
    output_format: str,
    size: int = Query(
        settings.avatar_default_size, alias="s", ge=settings.avatar_min_size, le=settings.avatar_max_size
    ),
    background_color: str | None = Query(None, alias="bg"),
    foreground_color: str | None = Query(None, alias="fg"),
    background_shape: str | None = Query(None, alias="f"),
    service: AvatarService = Depends(get_avatar_service),
):
    image = await service.generate(
        name,
        size,
        background_color=background_color,
        foreground_color=foreground_color,
        output_format=output_format,
        background_shape=background_shape,
    )
    return _image_response(image)
