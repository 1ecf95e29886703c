from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from xmlstore.core.config import Settings
from xmlstore.db.base import Base
from xmlstore.db import models  # noqa: F401  регистрация моделей в metadata


def create_engine(settings: Settings) -> AsyncEngine:
    """Асинхронный движок из явно переданных настроек"""
    return create_async_engine(settings.database_url, future=True, echo=settings.sql_echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Создание таблиц, если их еще нет"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Функция для dependency injection в FastAPI
async def get_db(request: Request):
    async with request.app.state.session_factory() as session:
        yield session
