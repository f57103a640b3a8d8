import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from letteravatar.application.health import check_health
from letteravatar.config.settings import get_settings
from letteravatar.domain.exceptions import RenderError
from letteravatar.domain.repositories import AvatarCache, AvatarRenderer
from letteravatar.presentation.api.dependencies.avatar import get_avatar_cache, get_avatar_renderer
from letteravatar.presentation.api.routes.v1 import router as avatar_router
from letteravatar.presentation.api.schemas import HealthResponse

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("letteravatar.api")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware для добавления заголовков безопасности."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Удаляем информацию о сервере
        if "server" in response.headers:
            del response.headers["server"]

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware для логирования запросов."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                f"Response: {request.method} {request.url.path} - {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.3f}s",
                },
            )

            # Добавляем время обработки в заголовок
            response.headers["X-Process-Time"] = f"{process_time:.3f}"

            return response
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Error: {request.method} {request.url.path} - {str(e)}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "process_time": f"{process_time:.3f}s",
                },
                exc_info=True,
            )
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Прогревает рендерер при старте и очищает кеш при остановке."""
    if not get_avatar_renderer().is_ready():
        logger.warning("Рендерер аватаров не готов: шрифт недоступен")
    logger.info("Приложение запущено")
    yield
    get_avatar_cache().clear()
    logger.info("Graceful shutdown завершен")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        description="""
        Генерация аватаров с инициалами.

        GET /avatar?n=<имя>&s=<размер>&bg=<фон>&fg=<текст>&o=<формат>&f=<форма>
        GET /avatar/<имя>.<формат>

        Одинаковые запросы отдаются из in-memory кеша без повторного рендеринга.
        """,
        lifespan=lifespan,
    )

    # Никогда не используем "*" для безопасности
    cors_origins = settings.cors_origins if settings.cors_origins else []
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=False,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["X-Process-Time"],
        )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(avatar_router)

    @app.exception_handler(RenderError)
    async def render_exception_handler(request: Request, exc: RenderError):
        logger.error(f"Render failure for {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Avatar rendering failed" if not settings.debug else str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error" if not settings.debug else str(exc),
            },
        )

    @app.get("/health", response_model=HealthResponse)
    async def health(
        cache: AvatarCache = Depends(get_avatar_cache),
        renderer: AvatarRenderer = Depends(get_avatar_renderer),
    ):
        status_data = await check_health(cache, renderer)
        status_code = 200 if status_data["status"] == "ok" else 503
        return JSONResponse(content=status_data, status_code=status_code)

    return app


app = create_app()


def run() -> None:
    """Запуск HTTP-сервера uvicorn с настройками из окружения."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
