import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from livesync.api.router import api_router
from livesync.core.config import Settings
from livesync.core.db import create_engine, create_session_factory, init_models
from livesync.core.errors import InvalidArgument, LiveSyncError
from livesync.db.seed import seed_database
from livesync.domains.realtime.catalog import build_registry
from livesync.domains.realtime.hub import SubscriptionHub

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Настройка корневого логгера"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Создание таблиц и заполнение данными до приема соединений"""
    settings: Settings = app.state.settings
    engine = app.state.engine

    if settings.create_tables and engine is not None:
        await init_models(engine)
    if settings.seed_on_startup:
        # SeedError прерывает запуск: без демо-данных приложение неполноценно
        await seed_database(app.state.session_factory)

    yield

    if engine is not None:
        await engine.dispose()


async def livesync_error_handler(request: Request, exc: LiveSyncError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Ошибка разбора тела запроса в том же формате, что и InvalidArgument"""
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    reason = errors[0]["type"] if errors else "request_body"
    return await livesync_error_handler(request, InvalidArgument(reason, errors))


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None
) -> FastAPI:
    """Создание приложения

    Если передана готовая фабрика сессий, движком управляет вызывающий код.
    """
    settings = settings or Settings()
    setup_logging(settings.log_level)

    engine = None
    if session_factory is None:
        engine = create_engine(settings.database_url, echo=settings.sql_echo)
        session_factory = create_session_factory(engine)

    app = FastAPI(
        title="LiveSync",
        description="Публикации и методы для реактивного клиента",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.registry = build_registry()
    app.state.hub = SubscriptionHub(app.state.registry, session_factory)

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(LiveSyncError, livesync_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.include_router(api_router)

    return app


app = create_app()
