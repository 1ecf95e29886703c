import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from xmlstore import __version__
from xmlstore.api.http.health import router as health_router
from xmlstore.api.http.documents import router as documents_router
from xmlstore.core.config import Settings, get_settings
from xmlstore.core.db import create_engine, create_schema, create_session_factory
from xmlstore.domains.documents.mutation_engine import MutationEngine
from xmlstore.domains.documents.transform_engine import TransformEngine
from xmlstore.domains.documents.xml_model import ParsedTreeCache

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    engine = app.state.engine

    # Проверка соединения с базой данных при старте
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    if settings.create_schema_on_startup:
        await create_schema(engine)

    yield

    await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Сборка приложения из явно переданных настроек"""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="XmlStore",
        description="Хранилище XML документов со структурным поиском, изменением по XPath и XSLT рендерингом",
        version=__version__,
        lifespan=lifespan
    )

    engine = create_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.mutation_engine = MutationEngine(reject_ambiguous=settings.reject_ambiguous_xpath)
    app.state.transform_engine = TransformEngine(
        settings.transform_template_path,
        cache_template=settings.cache_transform_template
    )
    app.state.tree_cache = ParsedTreeCache(max_size=settings.parse_cache_size)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(documents_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт"""
        return {
            "message": "XmlStore API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health"
        }

    return app


def run() -> None:
    import uvicorn

    uvicorn.run("xmlstore.main:create_app", factory=True, host="0.0.0.0", port=8000)
